"""
Use case: Rescue an unhandled error raised while serving a request.

Input: the raised error and the request's execution context.
Output: the rendered fallback response (404 or 500).
Side effects: For unexpected errors from untrusted addresses, one
    notice is delivered.
Failure cases: Rendering failures propagate to the hosting framework.
    Failures while building or sending the notice are logged, never raised.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from exception_notifier.application.notices.notify_of import NotifyOfUseCase
from exception_notifier.domain.notices.address_filter import TrustedAddressFilter
from exception_notifier.domain.notices.classifier import ErrorClassifier
from exception_notifier.domain.notices.entities import Classification, ExecutionContext, Notice
from exception_notifier.domain.notices.ports import ErrorRendererPort

logger = logging.getLogger(__name__)


@dataclass
class RescueResult:
    """What the rescue did for a single error."""

    classification: Classification
    response: Any
    notice: Optional[Notice] = None


class RescueActionUseCase:
    """Classifies an error, renders the fallback response and notifies.

    Requests from trusted addresses are not notified unless
    notify_local_requests is set.
    """

    def __init__(
        self,
        classifier: ErrorClassifier,
        renderer: ErrorRendererPort,
        notify_of: NotifyOfUseCase,
        address_filter: Optional[TrustedAddressFilter] = None,
        notify_local_requests: bool = False,
    ) -> None:
        self._classifier = classifier
        self._renderer = renderer
        self._notify_of = notify_of
        self._address_filter = address_filter
        self._notify_local_requests = notify_local_requests

    @property
    def expected_errors(self) -> tuple[type[BaseException], ...]:
        return self._classifier.expected_errors

    def execute(self, error: BaseException, context: ExecutionContext) -> RescueResult:
        """Run the rescue use case.

        Args:
            error: The unhandled error.
            context: Execution context of the failing request.

        Returns:
            A RescueResult holding the rendered response.
        """
        classification = self._classifier.classify(error)

        if classification is Classification.NOT_FOUND:
            logger.warning("Expected error rendered as 404: %s", type(error).__name__)
            return RescueResult(classification, self._renderer.render_not_found(context))

        logger.error("Unexpected error: %s", type(error).__name__, exc_info=error)
        response = self._renderer.render_server_error(context)

        if self._is_local(context):
            logger.info("Skipping notice for local request: %s", type(error).__name__)
            return RescueResult(classification, response)

        # The rendered 500 must reach the client even if normalization fails.
        try:
            notice = self._notify_of.execute(error, context)
        except Exception:
            logger.exception("Notice for %s could not be built", type(error).__name__)
            return RescueResult(classification, response)
        return RescueResult(classification, response, notice)

    def _is_local(self, context: ExecutionContext) -> bool:
        if self._notify_local_requests or self._address_filter is None:
            return False
        request = context.try_request()
        if request is None:
            return False
        return self._address_filter.is_trusted(request.remote_ip)
