"""
Exception handlers for FastAPI / Starlette.

Routes every unhandled error through the rescue use case:
expected error kinds render 404, everything else renders 500 and
sends a notice. Unknown routes (a 404 HTTPException raised before any
endpoint matched) use the same 404 rendering; HTTP exceptions raised by
endpoints keep FastAPI's default handler and their own detail.
No stack traces or internal details are exposed to clients.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from exception_notifier.application.notices.rescue_action import RescueActionUseCase
from exception_notifier.domain.notices.ports import ErrorRendererPort
from exception_notifier.interfaces.http.context import StarletteRequestContext

logger = logging.getLogger(__name__)

HTTP_404 = 404


def register_exception_notifier(
    app: FastAPI,
    rescue: RescueActionUseCase,
    renderer: ErrorRendererPort,
    context_class: type[StarletteRequestContext] = StarletteRequestContext,
) -> None:
    """Register the notifier's exception handlers on the application.

    Handlers are plain functions, so Starlette runs them (and the
    synchronous delivery they trigger) in its threadpool.

    Args:
        app: The FastAPI application instance.
        rescue: Use case that classifies, renders and notifies.
        renderer: Renderer used for unknown routes.
        context_class: Execution context type built for each request.
    """

    def handle_rescued(request: Request, exc: Exception) -> Response:
        """Classify, render and (for unexpected errors) notify."""
        return rescue.execute(exc, context_class(request)).response

    for kind in rescue.expected_errors:
        app.add_exception_handler(kind, handle_rescued)
    app.add_exception_handler(Exception, handle_rescued)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        request: Request, exc: StarletteHTTPException
    ) -> Response:
        """Render unknown routes as 404; defer endpoint-raised errors to FastAPI."""
        if exc.status_code == HTTP_404 and request.scope.get("endpoint") is None:
            logger.warning("Not found: %s %s", request.method, request.url.path)
            return await run_in_threadpool(renderer.render_not_found, context_class(request))
        return await http_exception_handler(request, exc)
