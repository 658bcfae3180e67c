"""
SMTP delivery adapter.

Implements NoticeDeliveryPort by sending one plain-text e-mail per
notice. The SMTP client factory is injectable so tests never open
a network connection.
"""

import logging
import smtplib
from collections.abc import Sequence
from email.message import EmailMessage
from typing import Callable, Optional

from exception_notifier.domain.notices.entities import Notice
from exception_notifier.domain.notices.errors import ConfigurationError, NoticeDeliveryError
from exception_notifier.domain.notices.ports import NoticeDeliveryPort
from exception_notifier.infrastructure.notices.formatter import format_notice

logger = logging.getLogger(__name__)

SMTPFactory = Callable[[str, int, Optional[float]], smtplib.SMTP]


def _default_factory(host: str, port: int, timeout: Optional[float]) -> smtplib.SMTP:
    return smtplib.SMTP(host=host, port=port, timeout=timeout)


class SmtpNoticeDelivery(NoticeDeliveryPort):
    """Deliver notices as e-mail.

    Args:
        host: SMTP server host.
        sender: From address.
        recipients: To addresses (at least one).
        port: SMTP server port.
        username: Login user; requires password.
        password: Login password; requires username.
        use_starttls: Upgrade the connection with STARTTLS.
        timeout: Socket timeout in seconds.
        email_prefix: Prepended to every subject line.
        smtp_factory: Builds the SMTP client (tests pass a fake).
    """

    def __init__(
        self,
        host: str,
        *,
        sender: str,
        recipients: Sequence[str],
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_starttls: bool = True,
        timeout: Optional[float] = 15.0,
        email_prefix: str = "[ERROR] ",
        smtp_factory: Optional[SMTPFactory] = None,
    ) -> None:
        if not host.strip():
            raise ConfigurationError("SMTP host must not be empty")
        if not sender.strip():
            raise ConfigurationError("SMTP sender must not be empty")
        cleaned = [addr.strip() for addr in recipients if addr and addr.strip()]
        if not cleaned:
            raise ConfigurationError("At least one notice recipient is required")
        if (username is None) != (password is None):
            raise ConfigurationError("SMTP username and password must be provided together")
        self._host = host
        self._port = port
        self._sender = sender
        self._recipients = tuple(cleaned)
        self._username = username
        self._password = password
        self._use_starttls = use_starttls
        self._timeout = timeout
        self._email_prefix = email_prefix
        self._factory = smtp_factory or _default_factory

    @property
    def recipients(self) -> tuple[str, ...]:
        return self._recipients

    def build_message(self, notice: Notice) -> EmailMessage:
        email = EmailMessage()
        email["Subject"] = notice.subject_line(self._email_prefix)
        email["From"] = self._sender
        email["To"] = ", ".join(self._recipients)
        email.set_content(format_notice(notice))
        return email

    def deliver(self, notice: Notice) -> None:
        """Send the notice as one e-mail.

        Raises:
            NoticeDeliveryError: On connection or SMTP protocol failure.
        """
        email = self.build_message(notice)
        try:
            client = self._factory(self._host, self._port, self._timeout)
        except OSError as exc:
            raise NoticeDeliveryError(
                f"Failed to connect to SMTP server {self._host}:{self._port}"
            ) from exc
        try:
            with client:
                client.ehlo()
                if self._use_starttls:
                    client.starttls()
                    client.ehlo()
                if self._username and self._password:
                    client.login(self._username, self._password)
                client.send_message(email)
        except (smtplib.SMTPException, OSError) as exc:
            raise NoticeDeliveryError("SMTP delivery failed") from exc

        logger.info("Notice e-mailed to %d recipient(s)", len(self._recipients))
