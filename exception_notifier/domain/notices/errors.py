"""
Domain-specific errors for the notices bounded context.

Two families live here:
- NotifierError and its subclasses: raised by the notifier itself
  (bad configuration, malformed notices, failed deliveries).
- NotFoundError and its subclasses: framework-neutral error kinds that
  host applications raise and that are rendered as 404 by default.

No framework imports allowed.
"""


class NotifierError(Exception):
    """Base error for all notifier errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class ConfigurationError(NotifierError):
    """Raised when the notifier configuration is invalid at boot."""


class InvalidTrustedAddressError(ConfigurationError):
    """Raised when a trusted address or CIDR entry cannot be parsed."""

    def __init__(self, address: str) -> None:
        super().__init__(f"Invalid trusted address: {address!r}")
        self.address = address


class MalformedNoticeError(NotifierError):
    """Raised when a notice input is neither a mapping nor an exception."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Malformed notice: {reason}")
        self.reason = reason


class ExtraDataError(NotifierError):
    """Raised when the extra data source cannot be resolved."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Extra data source failed: {reason}")
        self.reason = reason


class NoticeDeliveryError(NotifierError):
    """Raised by delivery adapters when a notice could not be sent."""


# ── Error kinds rendered as 404 ──────────────────────────────────────


class NotFoundError(Exception):
    """Base class for errors treated as "not found" by default."""


class RecordNotFoundError(NotFoundError):
    """Raised by host applications when a requested record does not exist."""


class UnknownControllerError(NotFoundError):
    """Raised when no controller (router) handles the request."""


class UnknownActionError(NotFoundError):
    """Raised when the controller has no action for the request."""


class RoutingError(NotFoundError):
    """Raised when no route matches the request."""
