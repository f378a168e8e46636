"""Offline list of hosting providers known to run on renewable energy."""

from __future__ import annotations

from typing import Final

from web_carbon.hosting.base import HostingOracle, HostingResult, normalise_domain

KNOWN_GREEN_HOSTS: Final[tuple[str, ...]] = (
    "greengeeks.com",
    "kualo.com",
    "dreamhost.com",
    "a2hosting.com",
    "siteground.com",
    "greenhost.net",
    "infomaniak.com",
    "hetzner.com",
    "ovh.com",
)


def known_green_host(domain: str) -> str | None:
    """Return the matching known green host for ``domain``, if any."""

    host = normalise_domain(domain)
    for candidate in KNOWN_GREEN_HOSTS:
        if host == candidate or host.endswith("." + candidate):
            return candidate
    return None


class KnownHostsOracle(HostingOracle):
    """Answer from :data:`KNOWN_GREEN_HOSTS` without network access."""

    async def _lookup_uncached(self, domain: str) -> HostingResult:
        match = known_green_host(domain)
        if match is None:
            return HostingResult(green=False)
        return HostingResult(green=True, hosted_by=match, url=domain)
