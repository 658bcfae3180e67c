"""
Notifier configuration.

A single immutable value built once at boot and shared read-only by
every request. Builder methods return modified copies.
"""

import os
from dataclasses import dataclass, field, replace
from typing import Any

from exception_notifier.domain.notices.address_filter import (
    DEFAULT_TRUSTED_ADDRESSES,
    IPNetwork,
    TrustedAddressFilter,
    parse_networks,
)
from exception_notifier.domain.notices.classifier import DEFAULT_EXPECTED_ERRORS, ErrorClassifier
from exception_notifier.domain.notices.entities import ExtraDataSource, extra_data_source
from exception_notifier.domain.notices.errors import ConfigurationError

DEFAULT_FILTERED_PARAMETERS = ("password", "secret", "token")


@dataclass(frozen=True)
class NotifierConfig:
    """Process-wide notifier configuration.

    Attributes:
        app_root: Application root, stripped from backtrace frames.
        expected_errors: Error kinds rendered as 404 without notification.
        trusted_networks: Networks whose requests count as local.
        extra_data: Where additional notice data comes from, if anywhere.
        filtered_parameters: Key fragments whose values are redacted.
    """

    app_root: str = field(default_factory=os.getcwd)
    expected_errors: tuple[type[BaseException], ...] = DEFAULT_EXPECTED_ERRORS
    trusted_networks: tuple[IPNetwork, ...] = field(
        default_factory=lambda: parse_networks(DEFAULT_TRUSTED_ADDRESSES)
    )
    extra_data: ExtraDataSource = None
    filtered_parameters: tuple[str, ...] = DEFAULT_FILTERED_PARAMETERS

    def consider_local(self, *addresses: Any) -> "NotifierConfig":
        """Add trusted IPs or CIDR ranges. Accepts strings or lists of strings.

        Raises:
            InvalidTrustedAddressError: If an entry cannot be parsed.
        """
        flat: list[Any] = []
        for entry in addresses:
            if isinstance(entry, (list, tuple, set)):
                flat.extend(entry)
            else:
                flat.append(entry)
        return replace(self, trusted_networks=self.trusted_networks + parse_networks(flat))

    def treat_as_not_found(self, *kinds: type[BaseException]) -> "NotifierConfig":
        """Add error kinds rendered as 404."""
        for kind in kinds:
            if not (isinstance(kind, type) and issubclass(kind, BaseException)):
                raise ConfigurationError(f"Not an exception class: {kind!r}")
        added = tuple(k for k in kinds if k not in self.expected_errors)
        return replace(self, expected_errors=self.expected_errors + added)

    def with_exception_data(self, source: Any) -> "NotifierConfig":
        """Set the extra data source: a method name, a callable, or None."""
        return replace(self, extra_data=extra_data_source(source))

    def filter_parameters(self, *names: str) -> "NotifierConfig":
        """Add key fragments whose values are redacted from notices."""
        added = tuple(n.lower() for n in names if n.lower() not in self.filtered_parameters)
        return replace(self, filtered_parameters=self.filtered_parameters + added)

    def classifier(self) -> ErrorClassifier:
        return ErrorClassifier(self.expected_errors)

    def address_filter(self) -> TrustedAddressFilter:
        return TrustedAddressFilter(self.trusted_networks)
