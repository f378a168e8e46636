"""Base types and caching logic for green hosting lookups."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

LOGGER = logging.getLogger(__name__)


def normalise_domain(domain: str) -> str:
    """Strip scheme, path, port and credentials from ``domain``; lowercase it."""

    text = domain.strip().lower()
    for prefix in ("https://", "http://"):
        if text.startswith(prefix):
            text = text[len(prefix) :]
            break
    host = text.split("/", 1)[0].split("?", 1)[0].split("#", 1)[0]
    host = host.rsplit("@", 1)[-1]
    if host.startswith("["):
        return host.split("]", 1)[0] + "]"
    return host.split(":", 1)[0]


@dataclass(frozen=True, slots=True)
class HostingResult:
    """Green hosting verdict for a domain.

    Attributes:
        green: Whether the domain is served from green hosting.
        hosted_by: Hosting provider name, when known.
        url: Canonical domain reported by the oracle, when known.
        degraded: ``True`` when the verdict is a fallback after a failed
            lookup rather than an oracle answer.
    """

    green: bool
    hosted_by: str | None = None
    url: str | None = None
    degraded: bool = False


@dataclass(frozen=True, slots=True, eq=False)
class CacheStats:
    """Expose cache hit/miss counters for hosting oracles."""

    hits: int
    misses: int

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CacheStats):
            return (self.hits, self.misses) == (other.hits, other.misses)
        if isinstance(other, Mapping):
            return other.get("hits") == self.hits and other.get("misses") == self.misses
        return NotImplemented


class HostingOracle(ABC):
    """Abstract green hosting lookup with a short-lived per-domain cache.

    Only oracle answers are cached; degraded verdicts are retried on the next
    call.
    """

    def __init__(self, ttl_seconds: int = 300) -> None:
        self._ttl_seconds: Final[int] = ttl_seconds
        self._cache: dict[str, tuple[float, HostingResult]] = {}
        self._cache_hits = 0
        self._cache_misses = 0

    @abstractmethod
    async def _lookup_uncached(self, domain: str) -> HostingResult:
        """Query the oracle without consulting the cache.

        Implementations must not raise for transport or payload errors; they
        return a degraded, non-green :class:`HostingResult` instead.
        """

    async def check(self, domain: str) -> HostingResult:
        """Return the green hosting verdict for ``domain``.

        Args:
            domain: Bare domain or URL.

        Returns:
            :class:`HostingResult`; non-green and ``degraded`` when the lookup
            failed.
        """

        key = normalise_domain(domain)
        if not key:
            return HostingResult(green=False, degraded=True)

        now = time.monotonic()
        cached = self._cache.get(key)
        if cached is not None:
            cached_at, result = cached
            if now - cached_at <= self._ttl_seconds:
                self._cache_hits += 1
                LOGGER.debug(
                    "Hosting cache hit",
                    extra={"oracle": type(self).__name__, "domain": key},
                )
                return result
            self._cache.pop(key, None)

        self._cache_misses += 1
        result = await self._lookup_uncached(key)
        if not result.degraded and self._ttl_seconds > 0:
            self._cache[key] = (now, result)
        return result

    def get_cache_stats(self) -> CacheStats:
        """Return cache hit/miss counters."""

        return CacheStats(hits=self._cache_hits, misses=self._cache_misses)

    def clear_cache(self) -> None:
        """Drop every cached verdict."""

        self._cache.clear()
