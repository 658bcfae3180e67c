"""
Domain entities for the notices bounded context.

Notice is the normalized record handed to a delivery adapter.
The remaining types describe what can be normalized (NoticeInput),
where extra data comes from (ExtraDataSource) and the facets an
execution context may expose.
No framework imports and no IO operations.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Protocol, Union

from exception_notifier.domain.notices.errors import ConfigurationError, MalformedNoticeError

FILTERED = "[FILTERED]"


class Classification(Enum):
    """Outcome of classifying a raised error."""

    NOT_FOUND = "not_found"
    UNEXPECTED = "unexpected"


class Notice(dict):
    """A normalized notice: a mapping from field name to value.

    Fields present depend on the facets the execution context exposed,
    so consumers must treat every key as optional.
    """

    @property
    def error_class(self) -> Optional[str]:
        return self.get("error_class")

    @property
    def message(self) -> Optional[str]:
        return self.get("message")

    @property
    def backtrace(self) -> list[str]:
        return list(self.get("backtrace") or [])

    @property
    def location(self) -> Optional[str]:
        return self.get("location")

    def subject_line(self, prefix: str = "") -> str:
        """Build a one-line summary: ``<prefix><location> (<class>) "<message>"``."""
        location = self.location or "unknown location"
        # Header values must stay on one line.
        message = " ".join(str(self.message).split())
        return f'{prefix}{location} ({self.error_class}) "{message}"'


# ── Notice input ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class ManualNotice:
    """A caller-supplied notice; must contain at least a ``message`` key."""

    data: Mapping[str, Any]


@dataclass(frozen=True)
class CaughtError:
    """An exception caught by the hosting framework."""

    error: BaseException


NoticeInput = Union[ManualNotice, CaughtError]


def notice_input(value: Any) -> NoticeInput:
    """Wrap a raw mapping or exception into a NoticeInput.

    Raises:
        MalformedNoticeError: If value is neither shape, or a mapping
            lacks the ``message`` key.
    """
    if isinstance(value, (ManualNotice, CaughtError)):
        return value
    if isinstance(value, BaseException):
        return CaughtError(value)
    if isinstance(value, Mapping):
        if "message" not in value:
            raise MalformedNoticeError("manual notice requires a 'message' key")
        return ManualNotice(dict(value))
    raise MalformedNoticeError(
        f"expected a mapping or an exception, got {type(value).__name__}"
    )


# ── Extra data sources ───────────────────────────────────────────────


@dataclass(frozen=True)
class NamedAccessor:
    """Extra data obtained by calling a named method on the context."""

    name: str


@dataclass(frozen=True)
class CallableSource:
    """Extra data obtained by calling ``fn(context)``."""

    fn: Callable[[Any], Mapping[str, Any]]


ExtraDataSource = Optional[Union[NamedAccessor, CallableSource]]


def extra_data_source(value: Any) -> ExtraDataSource:
    """Coerce None, a method name or a callable into an ExtraDataSource."""
    if value is None or isinstance(value, (NamedAccessor, CallableSource)):
        return value
    if isinstance(value, str):
        return NamedAccessor(value)
    if callable(value):
        return CallableSource(value)
    raise ConfigurationError(
        f"Extra data source must be a method name or a callable, got {type(value).__name__}"
    )


# ── Execution context facets ─────────────────────────────────────────


@dataclass(frozen=True)
class ControllerInfo:
    """The controller-like facet: which handler was running."""

    controller_name: str
    action_name: str
    controller: Any = None


@dataclass(frozen=True)
class RequestInfo:
    """The request-like facet of an execution context.

    Attributes:
        env: CGI-style environment (header names as ``HTTP_*`` keys).
        parameters: Request parameters as a plain mapping.
        protocol: Scheme with separator, e.g. ``"https://"``.
        host: Host (and port if non-default) the request was sent to.
        request_uri: Path plus query string.
        remote_ip: Client address as reported by the server.
        raw: The framework's own request object.
    """

    env: Mapping[str, str] = field(default_factory=dict)
    parameters: Mapping[str, Any] = field(default_factory=dict)
    protocol: str = "http://"
    host: str = ""
    request_uri: str = "/"
    remote_ip: Optional[str] = None
    raw: Any = None


@dataclass(frozen=True)
class SessionInfo:
    """The session-like facet of an execution context."""

    session: Any
    session_id: Optional[str] = None


class ExecutionContext(Protocol):
    """The ambient object a notice is normalized from.

    Each facet is optional; returning None means the context
    does not expose it.
    """

    def try_controller_info(self) -> Optional[ControllerInfo]: ...

    def try_request(self) -> Optional[RequestInfo]: ...

    def try_session(self) -> Optional[SessionInfo]: ...


class NullContext:
    """Execution context with no facets, for notices sent outside a request."""

    def try_controller_info(self) -> Optional[ControllerInfo]:
        return None

    def try_request(self) -> Optional[RequestInfo]:
        return None

    def try_session(self) -> Optional[SessionInfo]:
        return None
