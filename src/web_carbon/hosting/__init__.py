"""Green hosting oracle implementations and abstractions."""

from __future__ import annotations

from web_carbon.hosting.base import (
    CacheStats,
    HostingOracle,
    HostingResult,
    normalise_domain,
)
from web_carbon.hosting.greenweb import GreenWebOracle
from web_carbon.hosting.known_hosts import (
    KNOWN_GREEN_HOSTS,
    KnownHostsOracle,
    known_green_host,
)
from web_carbon.settings import WebCarbonSettings, get_settings

__all__ = [
    "CacheStats",
    "GreenWebOracle",
    "HostingOracle",
    "HostingResult",
    "KNOWN_GREEN_HOSTS",
    "KnownHostsOracle",
    "build_hosting_oracle",
    "known_green_host",
    "normalise_domain",
]


def build_hosting_oracle(settings: WebCarbonSettings | None = None) -> HostingOracle:
    """Return the configured hosting oracle chain."""

    settings = settings or get_settings()
    fallback = (
        KnownHostsOracle(ttl_seconds=settings.greencheck_ttl_seconds)
        if settings.known_hosts_fallback
        else None
    )
    return GreenWebOracle.from_settings(settings, fallback=fallback)
