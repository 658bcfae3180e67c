"""
Fallback response renderer.

HTML clients get the static ``404.html`` / ``500.html`` page from the
public directory (or a minimal built-in page); every other client gets
the JSON error body. No tracebacks or internal details are exposed.
"""

import logging
from pathlib import Path
from typing import Optional

from starlette.responses import HTMLResponse, JSONResponse, Response

from exception_notifier.domain.notices.entities import ExecutionContext
from exception_notifier.domain.notices.ports import ErrorRendererPort
from exception_notifier.interfaces.http.schemas import ErrorResponse

logger = logging.getLogger(__name__)

HTTP_404 = 404
HTTP_500 = 500

_BUILTIN_PAGES = {
    HTTP_404: (
        "<!DOCTYPE html>\n<html><head><title>Not Found</title></head>"
        "<body><h1>The page you were looking for doesn't exist.</h1></body></html>\n"
    ),
    HTTP_500: (
        "<!DOCTYPE html>\n<html><head><title>Server Error</title></head>"
        "<body><h1>We're sorry, but something went wrong.</h1></body></html>\n"
    ),
}


def _error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    body = ErrorResponse(error=error, detail=detail)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _wants_html(context: ExecutionContext) -> bool:
    request = context.try_request()
    if request is None:
        return False
    return "text/html" in request.env.get("HTTP_ACCEPT", "")


class StarletteRenderer(ErrorRendererPort):
    """Renders 404 and 500 responses according to the Accept header.

    Args:
        public_dir: Directory with ``404.html`` and ``500.html``; optional.
    """

    def __init__(self, public_dir: Optional[str] = None) -> None:
        self._public_dir = Path(public_dir) if public_dir else None

    def render_not_found(self, context: ExecutionContext) -> Response:
        if _wants_html(context):
            return HTMLResponse(self._page(HTTP_404), status_code=HTTP_404)
        return _error_response(HTTP_404, "Not found")

    def render_server_error(self, context: ExecutionContext) -> Response:
        if _wants_html(context):
            return HTMLResponse(self._page(HTTP_500), status_code=HTTP_500)
        return _error_response(HTTP_500, "Internal server error")

    def _page(self, status_code: int) -> str:
        if self._public_dir is not None:
            path = self._public_dir / f"{status_code}.html"
            try:
                return path.read_text(encoding="utf-8")
            except OSError:
                logger.warning("Static error page unavailable: %s", path)
        return _BUILTIN_PAGES[status_code]
