"""Minimal FaceUri parsing: scheme://host[:port][/path]."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit

# Point-to-point IP transports eligible for auto-registration
ALLOWED_SCHEMES = frozenset({"udp4", "tcp4", "udp6", "tcp6"})


@dataclass(frozen=True)
class FaceUri:
    scheme: str
    host: str
    port: int | None = None
    path: str = ""

    @classmethod
    def parse(cls, uri: str) -> FaceUri | None:
        """Parse uri, returning None when it is not a FaceUri."""
        if "://" not in uri:
            return None
        try:
            parts = urlsplit(uri)
            port = parts.port
        except ValueError:
            return None
        if not parts.scheme:
            return None
        return cls(
            scheme=parts.scheme.lower(),
            host=parts.hostname or "",
            port=port,
            path=parts.path,
        )

    @property
    def has_allowed_scheme(self) -> bool:
        return self.scheme in ALLOWED_SCHEMES

    def __str__(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        port = f":{self.port}" if self.port is not None else ""
        return f"{self.scheme}://{host}{port}{self.path}"
