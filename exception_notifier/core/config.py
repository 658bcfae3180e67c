"""
Application configuration.

Loads settings from environment variables (prefixed with
EXCEPTION_NOTIFIER_) and the .env file.
All notifier configuration is centralized here.
"""

import os
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from exception_notifier.domain.notices.address_filter import DEFAULT_TRUSTED_ADDRESSES
from exception_notifier.domain.notices.configuration import (
    DEFAULT_FILTERED_PARAMETERS,
    NotifierConfig,
)


class Settings(BaseSettings):
    """Notifier settings loaded from environment.

    Attributes:
        project_name: Display name of the host application.
        version: Current version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        app_root: Root directory stripped from backtrace frames.
        public_dir: Directory holding static 404.html / 500.html pages.
        trusted_addresses: IPs and CIDR ranges treated as local.
        notify_local_requests: Also notify for errors from trusted addresses.
            Off by default, so errors from loopback clients (127.0.0.1, ::1)
            and other trusted_addresses are rendered but never notified.
        filtered_parameters: Key fragments whose values are redacted.

    SMTP settings are optional; without smtp_host notices are only logged.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EXCEPTION_NOTIFIER_",
        extra="ignore",
    )

    project_name: str = "exception-notifier"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    app_root: str = Field(default_factory=os.getcwd)
    public_dir: Optional[str] = None
    trusted_addresses: list[str] = Field(default_factory=lambda: list(DEFAULT_TRUSTED_ADDRESSES))
    notify_local_requests: bool = False
    filtered_parameters: list[str] = Field(
        default_factory=lambda: list(DEFAULT_FILTERED_PARAMETERS)
    )

    # SMTP delivery
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_starttls: bool = True
    smtp_timeout: float = 15.0
    sender_address: str = "exception.notifier@localhost"
    recipients: list[str] = Field(default_factory=list)
    email_prefix: str = "[ERROR] "

    def notifier_config(self) -> NotifierConfig:
        """Build the immutable notifier configuration.

        Raises:
            InvalidTrustedAddressError: If a trusted address is malformed.
        """
        config = NotifierConfig(
            app_root=self.app_root,
            trusted_networks=(),
            filtered_parameters=tuple(p.lower() for p in self.filtered_parameters),
        )
        return config.consider_local(self.trusted_addresses)


settings = Settings()
