"""Green Web Foundation greencheck API oracle."""

from __future__ import annotations

import logging
from dataclasses import replace

import httpx

from web_carbon.hosting.base import HostingOracle, HostingResult
from web_carbon.settings import DEFAULT_GREENCHECK_URL, WebCarbonSettings

LOGGER = logging.getLogger(__name__)


def _parse_green_flag(value: object) -> bool:
    if value is True:
        return True
    if isinstance(value, str):
        return value.strip().lower() == "yes"
    return False


class GreenWebOracle(HostingOracle):
    """Check green hosting status with the Green Web Foundation API.

    Any transport error, non-2xx status or malformed payload is logged and
    degrades to a non-green verdict; the lookup never raises.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_GREENCHECK_URL,
        ttl_seconds: int = 300,
        *,
        timeout_seconds: float = 8.0,
        user_agent: str | None = None,
        fallback: HostingOracle | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialise the oracle.

        Args:
            base_url: Greencheck endpoint; the domain is appended as a path
                segment.
            ttl_seconds: Lifetime of cached verdicts.
            timeout_seconds: Timeout for a single HTTP request.
            user_agent: ``User-Agent`` header value.
            fallback: Oracle consulted when the API lookup is degraded.
            transport: Optional httpx transport, mainly for tests.
        """

        super().__init__(ttl_seconds=ttl_seconds)
        self._base = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._headers = {"User-Agent": user_agent} if user_agent else {}
        self._fallback = fallback
        self._transport = transport

    @classmethod
    def from_settings(
        cls, settings: WebCarbonSettings, *, fallback: HostingOracle | None = None
    ) -> GreenWebOracle:
        """Build an oracle from :class:`WebCarbonSettings`."""

        return cls(
            settings.greencheck_url,
            settings.greencheck_ttl_seconds,
            timeout_seconds=settings.greencheck_timeout_seconds,
            user_agent=settings.user_agent,
            fallback=fallback,
        )

    async def _lookup_uncached(self, domain: str) -> HostingResult:
        result = await self._query(domain)
        if result.degraded and self._fallback is not None:
            fallback_result = await self._fallback.check(domain)
            return replace(fallback_result, degraded=True)
        return result

    async def _query(self, domain: str) -> HostingResult:
        url = f"{self._base}/{domain}"
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, headers=self._headers, transport=self._transport
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            LOGGER.warning(
                "Green hosting lookup degraded: HTTP error",
                extra={
                    "domain": domain,
                    "status_code": exc.response.status_code,
                    "url": url,
                },
            )
            return HostingResult(green=False, degraded=True)
        except httpx.HTTPError as exc:
            LOGGER.warning(
                "Green hosting lookup degraded: transport error",
                extra={"domain": domain, "url": url},
                exc_info=exc,
            )
            return HostingResult(green=False, degraded=True)
        except ValueError as exc:
            LOGGER.warning(
                "Green hosting lookup degraded: unreadable payload",
                extra={"domain": domain, "url": url},
                exc_info=exc,
            )
            return HostingResult(green=False, degraded=True)

        if not isinstance(payload, dict):
            LOGGER.warning(
                "Green hosting lookup degraded: unexpected payload type",
                extra={
                    "domain": domain,
                    "url": url,
                    "payload_type": type(payload).__name__,
                },
            )
            return HostingResult(green=False, degraded=True)

        hosted_by = payload.get("hostedby")
        reported_url = payload.get("url")
        result = HostingResult(
            green=_parse_green_flag(payload.get("green")),
            hosted_by=str(hosted_by) if hosted_by else None,
            url=str(reported_url) if reported_url else None,
        )
        LOGGER.debug(
            "Green hosting lookup",
            extra={"domain": domain, "green": result.green, "hosted_by": result.hosted_by},
        )
        return result
