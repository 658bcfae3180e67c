"""
Application entry point.

Creates a FastAPI application with the exception notifier installed:
- Notifier configuration (trusted addresses, expected errors, extra data)
- Delivery adapter (SMTP, or logging when SMTP is not configured)
- Exception handlers (404 / 500 rendering and notification)
- Logging configuration
- Health router

Host applications call install_exception_notifier() on their own app;
create_app() is the reference composition root.
"""

from typing import Any, Callable, Optional

from fastapi import FastAPI

from exception_notifier.core.config import Settings, settings as default_settings
from exception_notifier.domain.notices.configuration import NotifierConfig
from exception_notifier.domain.notices.ports import ErrorRendererPort, NoticeDeliveryPort
from exception_notifier.interfaces.http.context import StarletteRequestContext
from exception_notifier.interfaces.http.dependencies import (
    build_delivery,
    build_notify_of_use_case,
    build_rescue_use_case,
)
from exception_notifier.interfaces.http.handlers import register_exception_notifier
from exception_notifier.interfaces.http.health import router as health_router
from exception_notifier.interfaces.http.renderer import StarletteRenderer
from exception_notifier.shared.logging import configure_logging


def install_exception_notifier(
    app: FastAPI,
    settings: Settings = default_settings,
    config: Optional[NotifierConfig] = None,
    delivery: Optional[NoticeDeliveryPort] = None,
    renderer: Optional[ErrorRendererPort] = None,
    context_class: type[StarletteRequestContext] = StarletteRequestContext,
    environ: Optional[Callable[[], Any]] = None,
) -> FastAPI:
    """Wire the notifier into an existing FastAPI application.

    Args:
        app: Host application.
        settings: Source of defaults for everything not passed explicitly.
        config: Notifier configuration; built from settings when omitted.
        delivery: Delivery adapter; built from settings when omitted.
        renderer: Fallback response renderer.
        context_class: Execution context type built for each request.
        environ: Process environment provider (tests pass a fixed mapping).

    Returns:
        The same application, for chaining.
    """
    config = config or settings.notifier_config()
    delivery = delivery or build_delivery(settings)
    renderer = renderer or StarletteRenderer(settings.public_dir)

    notify_of = build_notify_of_use_case(config, delivery, environ=environ)
    rescue = build_rescue_use_case(
        config,
        renderer,
        notify_of,
        notify_local_requests=settings.notify_local_requests,
    )

    app.state.notifier_config = config
    app.state.notice_delivery = delivery
    app.state.notify_of = notify_of

    register_exception_notifier(app, rescue, renderer, context_class=context_class)
    return app


def create_app(
    settings: Settings = default_settings,
    config: Optional[NotifierConfig] = None,
    delivery: Optional[NoticeDeliveryPort] = None,
    **notifier_options: Any,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        A FastAPI application with the notifier and health router installed.
    """
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    install_exception_notifier(
        app, settings=settings, config=config, delivery=delivery, **notifier_options
    )

    app.include_router(health_router, prefix="/api/v1")

    return app


app = create_app()
