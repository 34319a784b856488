"""Autoreg configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from nfd_mgmt.client import DEFAULT_REQUEST_TIMEOUT

from .core.network import IPAddress, NetworkRange

DEFAULT_COST = 255


class ConfigurationError(Exception):
    """Startup configuration is missing or invalid."""


class Settings(BaseSettings):
    nats_url: str = "nats://localhost:4222"

    # Prefixes registered on qualifying on-demand faces, subject to the network filters
    prefixes: list[str] = []
    # Prefixes registered on every non-local TCP/UDP unicast face
    all_faces_prefixes: list[str] = []
    cost: int = Field(default=DEFAULT_COST, ge=0)

    whitelist: list[str] = []
    blacklist: list[str] = []

    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="AUTOREG_")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {v}")
        return level


def normalize_prefix(prefix: str) -> str:
    """Canonical URI form of an NDN name: "ndn:/a//b/" -> "/a/b"."""
    value = prefix.strip()
    if value.startswith("ndn:"):
        value = value[len("ndn:"):]
    components = [c for c in value.split("/") if c]
    return "/" + "/".join(components)


def _ordered_unique(items: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(items))


@dataclass(frozen=True)
class FilterConfig:
    """Immutable registration policy, built once at startup.

    An empty whitelist allows every IPv4 and IPv6 address.
    """

    autoreg_prefixes: tuple[str, ...] = ()
    all_faces_prefixes: tuple[str, ...] = ()
    cost: int = DEFAULT_COST
    whitelist: tuple[NetworkRange, ...] = field(default=())
    blacklist: tuple[NetworkRange, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "autoreg_prefixes", _ordered_unique(self.autoreg_prefixes))
        object.__setattr__(self, "all_faces_prefixes", _ordered_unique(self.all_faces_prefixes))
        object.__setattr__(self, "blacklist", tuple(self.blacklist))
        whitelist = tuple(self.whitelist)
        if not whitelist:
            whitelist = (NetworkRange.max_range_v4(), NetworkRange.max_range_v6())
        object.__setattr__(self, "whitelist", whitelist)

    def is_blacklisted(self, address: IPAddress) -> bool:
        return any(net.contains(address) for net in self.blacklist)

    def is_whitelisted(self, address: IPAddress) -> bool:
        return any(net.contains(address) for net in self.whitelist)


def _parse_ranges(values: list[str], option: str) -> tuple[NetworkRange, ...]:
    ranges = []
    for value in values:
        try:
            ranges.append(NetworkRange.parse(value))
        except ValueError as e:
            raise ConfigurationError(f"invalid {option} network '{value}': {e}") from e
    return tuple(ranges)


def load_filter_config(settings: Settings) -> FilterConfig:
    """Validate settings and build the registration policy."""
    if not settings.prefixes and not settings.all_faces_prefixes:
        raise ConfigurationError("at least one --prefix or --all-faces-prefix must be specified")

    return FilterConfig(
        autoreg_prefixes=tuple(normalize_prefix(p) for p in settings.prefixes),
        all_faces_prefixes=tuple(normalize_prefix(p) for p in settings.all_faces_prefixes),
        cost=settings.cost,
        whitelist=_parse_ranges(settings.whitelist, "whitelist"),
        blacklist=_parse_ranges(settings.blacklist, "blacklist"),
    )
