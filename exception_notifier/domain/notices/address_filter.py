"""
Trusted address filter.

Decides whether a request originated from a trusted ("local") network.
Configured entries are parsed eagerly so that a malformed entry fails
at boot; remote addresses that cannot be parsed are never trusted.
"""

import ipaddress
import logging
from collections.abc import Iterable
from typing import Optional, Union

from exception_notifier.domain.notices.errors import InvalidTrustedAddressError

logger = logging.getLogger(__name__)

IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]

DEFAULT_TRUSTED_ADDRESSES = ("127.0.0.1", "::1")


def parse_networks(addresses: Iterable[Union[str, IPNetwork]]) -> tuple[IPNetwork, ...]:
    """Parse IP and CIDR strings into networks.

    A bare address becomes a single-host network. Host bits set in a
    CIDR entry are masked off (``10.1.2.3/8`` means ``10.0.0.0/8``).

    Raises:
        InvalidTrustedAddressError: On the first entry that cannot be parsed.
    """
    networks = []
    for entry in addresses:
        if isinstance(entry, (ipaddress.IPv4Network, ipaddress.IPv6Network)):
            networks.append(entry)
            continue
        try:
            networks.append(ipaddress.ip_network(str(entry).strip(), strict=False))
        except ValueError as exc:
            raise InvalidTrustedAddressError(str(entry)) from exc
    return tuple(networks)


class TrustedAddressFilter:
    """Answers whether a remote address belongs to a trusted network."""

    def __init__(self, networks: Iterable[IPNetwork]) -> None:
        self._networks = tuple(networks)

    @property
    def networks(self) -> tuple[IPNetwork, ...]:
        return self._networks

    def is_trusted(self, remote_address: Optional[str]) -> bool:
        """Return True if remote_address falls inside a trusted network.

        Unparseable or missing addresses return False.
        """
        if not remote_address:
            return False
        try:
            address = ipaddress.ip_address(remote_address.strip())
        except ValueError:
            logger.debug("Unparseable remote address treated as untrusted: %r", remote_address)
            return False
        return any(address in network for network in self._networks)
