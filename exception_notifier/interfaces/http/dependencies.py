"""
Dependency injection for the notices bounded context.

Builds the delivery adapter and the use cases from settings, and
exposes FastAPI dependency functions so endpoints can send manual
notices. This is the composition root for the notices context.
"""

import logging
from typing import Any, Callable, Optional

from fastapi import Request

from exception_notifier.application.notices.notify_of import NotifyOfUseCase
from exception_notifier.application.notices.rescue_action import RescueActionUseCase
from exception_notifier.core.config import Settings
from exception_notifier.domain.notices.configuration import NotifierConfig
from exception_notifier.domain.notices.normalizer import NoticeNormalizer
from exception_notifier.domain.notices.ports import ErrorRendererPort, NoticeDeliveryPort
from exception_notifier.infrastructure.notices.logging_delivery import LoggingNoticeDelivery
from exception_notifier.infrastructure.notices.smtp_delivery import SmtpNoticeDelivery

logger = logging.getLogger(__name__)


def build_delivery(settings: Settings) -> NoticeDeliveryPort:
    """Build the SMTP adapter, or the logging adapter when SMTP is unset."""
    if not settings.smtp_host:
        logger.info("No SMTP host configured; notices will only be logged")
        return LoggingNoticeDelivery()
    return SmtpNoticeDelivery(
        settings.smtp_host,
        sender=settings.sender_address,
        recipients=settings.recipients,
        port=settings.smtp_port,
        username=settings.smtp_username,
        password=settings.smtp_password,
        use_starttls=settings.smtp_starttls,
        timeout=settings.smtp_timeout,
        email_prefix=settings.email_prefix,
    )


def build_notify_of_use_case(
    config: NotifierConfig,
    delivery: NoticeDeliveryPort,
    environ: Optional[Callable[[], Any]] = None,
) -> NotifyOfUseCase:
    """Build NotifyOfUseCase with its normalizer and delivery port."""
    return NotifyOfUseCase(
        normalizer=NoticeNormalizer(config, environ=environ),
        delivery=delivery,
    )


def build_rescue_use_case(
    config: NotifierConfig,
    renderer: ErrorRendererPort,
    notify_of: NotifyOfUseCase,
    notify_local_requests: bool = False,
) -> RescueActionUseCase:
    """Build RescueActionUseCase from the notifier configuration."""
    return RescueActionUseCase(
        classifier=config.classifier(),
        renderer=renderer,
        notify_of=notify_of,
        address_filter=config.address_filter(),
        notify_local_requests=notify_local_requests,
    )


def get_notify_of_use_case(request: Request) -> NotifyOfUseCase:
    """FastAPI dependency returning the application's NotifyOfUseCase.

    Endpoints send manual notices with::

        notify_of.execute({"message": "..."}, StarletteRequestContext(request))
    """
    return request.app.state.notify_of

