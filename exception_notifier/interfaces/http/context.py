"""
Execution context backed by a Starlette request.

Exposes the controller, request and session facets the normalizer
reads. Host applications subclass StarletteRequestContext to provide
named extra data accessors, e.g.::

    class AppContext(StarletteRequestContext):
        def exception_data(self):
            return {"user_id": self.request.state.user_id}
"""

from typing import Any, Optional

from starlette.requests import Request

from exception_notifier.domain.notices.entities import ControllerInfo, RequestInfo, SessionInfo

# CGI passes these two headers without the HTTP_ prefix.
_UNPREFIXED_HEADERS = {"content-type", "content-length"}


def cgi_environ(request: Request) -> dict[str, str]:
    """Build a CGI-style environment for a request."""
    url = request.url
    env = {
        "REQUEST_METHOD": request.method,
        "SCRIPT_NAME": request.scope.get("root_path", ""),
        "PATH_INFO": url.path,
        "QUERY_STRING": url.query,
        "SERVER_NAME": url.hostname or "",
        "SERVER_PORT": str(url.port or ""),
        "SERVER_PROTOCOL": f"HTTP/{request.scope.get('http_version', '1.1')}",
        "REMOTE_ADDR": request.client.host if request.client else "",
    }
    for name, value in request.headers.items():
        if name in _UNPREFIXED_HEADERS:
            key = name.upper().replace("-", "_")
        else:
            key = "HTTP_" + name.upper().replace("-", "_")
        env[key] = f"{env[key]}, {value}" if key in env else value
    return env


def request_parameters(request: Request) -> dict[str, Any]:
    """Merge query and path parameters; repeated query keys become lists."""
    params: dict[str, Any] = {}
    for key in request.query_params.keys():
        values = request.query_params.getlist(key)
        params[key] = values[0] if len(values) == 1 else values
    params.update(request.path_params)
    return params


class StarletteRequestContext:
    """ExecutionContext for a request served by Starlette or FastAPI."""

    def __init__(self, request: Request) -> None:
        self.request = request

    def try_controller_info(self) -> Optional[ControllerInfo]:
        endpoint = self.request.scope.get("endpoint")
        if endpoint is None:
            return None
        module = getattr(endpoint, "__module__", None) or "app"
        return ControllerInfo(
            controller_name=module.rsplit(".", 1)[-1],
            action_name=getattr(endpoint, "__name__", type(endpoint).__name__),
            controller=endpoint,
        )

    def try_request(self) -> Optional[RequestInfo]:
        request = self.request
        url = request.url
        request_uri = f"{url.path}?{url.query}" if url.query else url.path
        return RequestInfo(
            env=cgi_environ(request),
            parameters=request_parameters(request),
            protocol=f"{url.scheme}://",
            host=url.netloc,
            request_uri=request_uri,
            remote_ip=request.client.host if request.client else None,
            raw=request,
        )

    def try_session(self) -> Optional[SessionInfo]:
        # request.session asserts when SessionMiddleware is not installed
        if "session" not in self.request.scope:
            return None
        return SessionInfo(session=self.request.session)
