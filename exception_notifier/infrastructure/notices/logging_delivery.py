"""
Log-only delivery adapter.

Used when no SMTP server is configured: the formatted notice is
written to the application log at ERROR level.
"""

import logging

from exception_notifier.domain.notices.entities import Notice
from exception_notifier.domain.notices.ports import NoticeDeliveryPort
from exception_notifier.infrastructure.notices.formatter import format_notice

logger = logging.getLogger(__name__)


class LoggingNoticeDelivery(NoticeDeliveryPort):
    """Write notices to a logger instead of sending them."""

    def __init__(self, target: logging.Logger = logger) -> None:
        self._logger = target

    def deliver(self, notice: Notice) -> None:
        self._logger.error("%s\n%s", notice.subject_line(), format_notice(notice))
