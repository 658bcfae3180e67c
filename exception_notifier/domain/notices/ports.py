"""
Port interfaces (ABCs) for the notices bounded context.

Ports define the contracts the notifier requires from the outside world:
a way to deliver a notice and a way to render the fallback responses.
Infrastructure and interface adapters implement these interfaces.
"""

from abc import ABC, abstractmethod
from typing import Any

from exception_notifier.domain.notices.entities import ExecutionContext, Notice


class NoticeDeliveryPort(ABC):
    """Port for sending a fully assembled notice."""

    @abstractmethod
    def deliver(self, notice: Notice) -> None:
        """Send the notice.

        Raises:
            NoticeDeliveryError: If the notice could not be sent.
        """
        raise NotImplementedError


class ErrorRendererPort(ABC):
    """Port for producing the response shown to the end user."""

    @abstractmethod
    def render_not_found(self, context: ExecutionContext) -> Any:
        """Return the 404 response for the request in context."""
        raise NotImplementedError

    @abstractmethod
    def render_server_error(self, context: ExecutionContext) -> Any:
        """Return the 500 response for the request in context."""
        raise NotImplementedError
