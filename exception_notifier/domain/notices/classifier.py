"""
Error classifier.

Decides whether a raised error is "expected" (render 404, stop)
or "unexpected" (render 500 and notify).
"""

from exception_notifier.domain.notices.entities import Classification
from exception_notifier.domain.notices.errors import (
    RecordNotFoundError,
    RoutingError,
    UnknownActionError,
    UnknownControllerError,
)

DEFAULT_EXPECTED_ERRORS: tuple[type[BaseException], ...] = (
    RecordNotFoundError,
    UnknownControllerError,
    UnknownActionError,
    RoutingError,
)


class ErrorClassifier:
    """Membership test of an error against a set of expected error kinds.

    Subclasses of an expected kind are expected too.
    """

    def __init__(
        self, expected_errors: tuple[type[BaseException], ...] = DEFAULT_EXPECTED_ERRORS
    ) -> None:
        self._expected_errors = tuple(expected_errors)

    @property
    def expected_errors(self) -> tuple[type[BaseException], ...]:
        return self._expected_errors

    def classify(self, error: BaseException) -> Classification:
        if self._expected_errors and isinstance(error, self._expected_errors):
            return Classification.NOT_FOUND
        return Classification.UNEXPECTED
