"""
Use case: Send a notice for an error or a manual message.

Input: a mapping with at least ``message``, or an exception; an optional
    execution context (None outside of a request).
Output: the delivered Notice.
Side effects: One call to the delivery port.
Failure cases: Malformed input or a broken extra data source raises.
    Delivery failures are logged and never raised.
"""

import logging
from typing import Any, Optional

from exception_notifier.domain.notices.entities import ExecutionContext, Notice
from exception_notifier.domain.notices.normalizer import NoticeNormalizer
from exception_notifier.domain.notices.ports import NoticeDeliveryPort

logger = logging.getLogger(__name__)


class NotifyOfUseCase:
    """Normalizes an error or manual notice and hands it to delivery."""

    def __init__(
        self,
        normalizer: NoticeNormalizer,
        delivery: NoticeDeliveryPort,
    ) -> None:
        """Initialize the use case.

        Args:
            normalizer: Builds notices from errors and manual data.
            delivery: Port that sends the assembled notice.
        """
        self._normalizer = normalizer
        self._delivery = delivery

    def execute(
        self,
        data_or_error: Any,
        context: Optional[ExecutionContext] = None,
    ) -> Notice:
        """Run the notify-of use case.

        Args:
            data_or_error: Manual notice mapping or caught exception.
            context: Execution context the notice is built from.

        Returns:
            The Notice handed to the delivery port.
        """
        notice = self._normalizer.normalize(data_or_error, context)

        try:
            self._delivery.deliver(notice)
        except Exception:
            logger.exception(
                "Notice delivery failed: %s at %s",
                notice.error_class,
                notice.location,
            )
        else:
            logger.info("Notice delivered: %s at %s", notice.error_class, notice.location)

        return notice
