"""Trusted proxy networks and client address extraction from forwarding headers."""

from __future__ import annotations

import ipaddress
from collections.abc import Iterable

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address
IPNetwork = ipaddress.IPv4Network | ipaddress.IPv6Network

DEFAULT_TRUSTED_PROXIES = ("0.0.0.0/0", "::/0")


def _parse_address(text: str) -> IPAddress | None:
    if "%" in text:
        return None
    try:
        return ipaddress.ip_address(text)
    except ValueError:
        return None


def parse_ip(ip: str) -> IPAddress | None:
    """Parse an IP address, giving IPv4-mapped IPv6 addresses in IPv4 form."""
    address = _parse_address(ip)
    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped is not None:
        return address.ipv4_mapped
    return address


def _parse_network(text: str) -> IPNetwork:
    if "%" in text:
        raise ValueError(f"invalid CIDR address: {text}")
    try:
        return ipaddress.ip_network(text, strict=False)
    except ValueError:
        raise ValueError(f"invalid CIDR address: {text}") from None


class TrustedProxies:
    """The network origins whose forwarding headers are believed.

    By default every address is trusted. Setting ``None`` trusts nothing.
    """

    def __init__(self, proxies: Iterable[str] | None = DEFAULT_TRUSTED_PROXIES):
        self.proxies: list[str] | None = None
        self.cidrs: list[IPNetwork] | None = None
        self.set(proxies)

    def set(self, proxies: Iterable[str] | None) -> None:
        """Replace the trusted origins with addresses or CIDR blocks.

        Raises ValueError for an entry that is not an address or CIDR block;
        the entries before it stay trusted.
        """
        if proxies is None:
            self.proxies = None
            self.cidrs = None
            return
        self.proxies = list(proxies)
        self.cidrs = []
        for proxy in self.proxies:
            if "/" not in proxy:
                address = parse_ip(proxy)
                if address is None:
                    raise ValueError(f"invalid IP address: {proxy}")
                proxy += "/32" if address.version == 4 else "/128"
            self.cidrs.append(_parse_network(proxy))

    def is_trusted(self, ip: str | IPAddress) -> bool:
        """Tell whether ``ip`` lies in one of the trusted networks."""
        if self.cidrs is None:
            return False
        address = parse_ip(str(ip))
        if address is None:
            return False
        return any(
            network.version == address.version and address in network
            for network in self.cidrs
        )

    def is_unsafe(self) -> bool:
        """Tell whether the trusted networks cover every address."""
        return self.is_trusted("0.0.0.0") or self.is_trusted("::")

    def validate_header(self, header: str) -> str | None:
        """Return the client address from an X-Forwarded-For style header.

        Entries are read from the right; the first one that is not a trusted
        proxy, or the leftmost one, is the client. An unparsable entry ends
        the search with no result.
        """
        if not header:
            return None
        items = header.split(",")
        for index in range(len(items) - 1, -1, -1):
            text = items[index].strip()
            address = _parse_address(text)
            if address is None:
                break
            if index == 0 or not self.is_trusted(address):
                return text
        return None