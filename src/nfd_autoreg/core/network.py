"""IP network ranges used by the whitelist and blacklist."""

from __future__ import annotations

from dataclasses import dataclass
from ipaddress import IPv4Address, IPv4Network, IPv6Address, IPv6Network, ip_address, ip_network

IPAddress = IPv4Address | IPv6Address


@dataclass(frozen=True)
class NetworkRange:
    """An address block such as 192.168.2.0/24 or ::1/128."""

    network: IPv4Network | IPv6Network

    @classmethod
    def parse(cls, text: str) -> NetworkRange:
        """Parse a CIDR block or a bare address. Host bits are masked off.

        Raises ValueError when text is not a network.
        """
        return cls(ip_network(text.strip(), strict=False))

    @classmethod
    def max_range_v4(cls) -> NetworkRange:
        return cls(IPv4Network("0.0.0.0/0"))

    @classmethod
    def max_range_v6(cls) -> NetworkRange:
        return cls(IPv6Network("::/0"))

    @property
    def family(self) -> int:
        return self.network.version

    def contains(self, address: IPAddress | str) -> bool:
        if isinstance(address, str):
            try:
                address = ip_address(address)
            except ValueError:
                return False
        if address.version != self.network.version:
            return False
        return address in self.network

    def __str__(self) -> str:
        return str(self.network)
