"""End-to-end page analysis orchestration."""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Protocol

import httpx

from web_carbon.errors import (
    AnalysisError,
    InternalAnalysisError,
    InvalidInputError,
    PageLoadTimeoutError,
)
from web_carbon.estimation.estimator import PageCarbonEstimate, PageCarbonEstimator
from web_carbon.history import AnalysisHistory, AnalysisSink
from web_carbon.hosting import HostingOracle, HostingResult, build_hosting_oracle
from web_carbon.page_models import TraceResult
from web_carbon.schemas import (
    AnalysisRecord,
    AnalysisReport,
    AverageWebsite,
    Comparisons,
    GreenHostingInfo,
    RegionalImpactRow,
    ResourceGrams,
    ResourceKilobytes,
    StageBreakdown,
)
from web_carbon.settings import WebCarbonSettings, get_settings
from web_carbon.tracing import PageTracer

__all__ = [
    "WebCarbonAnalyzer",
    "analyze",
    "build_report",
    "normalise_url",
    "run_analysis",
]

_LOGGER = logging.getLogger("web_carbon.analyzer")

_DIGITS = 2


class Tracer(Protocol):
    async def trace(self, url: str) -> TraceResult: ...


def normalise_url(url: str | None) -> httpx.URL:
    """Validate ``url`` and default its scheme to https.

    Raises:
        InvalidInputError: If the URL is missing, malformed, not http(s) or
            has no host.
    """

    if url is None or not str(url).strip():
        raise InvalidInputError("URL is required")
    candidate = str(url).strip()
    if not candidate.lower().startswith(("http://", "https://")):
        if "://" in candidate:
            raise InvalidInputError(f"Invalid URL format: unsupported scheme in {url!r}")
        candidate = f"https://{candidate}"
    try:
        parsed = httpx.URL(candidate)
    except (httpx.InvalidURL, ValueError) as exc:
        raise InvalidInputError(f"Invalid URL format: {url!r}") from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise InvalidInputError(f"Invalid URL format: {url!r}")
    return parsed


def _validate_visits(monthly_visits: int) -> int:
    if isinstance(monthly_visits, bool) or not isinstance(monthly_visits, int):
        raise InvalidInputError("monthly_visits must be an integer")
    if monthly_visits < 0:
        raise InvalidInputError("monthly_visits must be non-negative")
    return monthly_visits


def build_report(
    *,
    url: str,
    domain: str,
    trace: TraceResult,
    hosting: HostingResult,
    estimate: PageCarbonEstimate,
) -> AnalysisReport:
    """Round the estimate for presentation and build the public record."""

    emissions = estimate.emissions
    co2 = round(estimate.co2_per_visit, _DIGITS)
    stages = emissions.breakdown
    kilobytes = trace.breakdown.to_kilobytes()
    return AnalysisReport(
        url=url,
        domain=domain,
        region=estimate.region,
        monthly_visits=estimate.monthly_visits,
        page_size_mb=round(trace.breakdown.total_megabytes, _DIGITS),
        total_requests=trace.transfer_count,
        green_hosting=hosting.green,
        green_hosting_info=GreenHostingInfo(
            green=hosting.green, hosted_by=hosting.hosted_by
        ),
        resource_breakdown=ResourceKilobytes(**kilobytes),
        co2_per_visit=co2,
        yearly_co2=round(estimate.yearly_co2, _DIGITS),
        breakdown=StageBreakdown(
            data_center=round(stages.data_center, _DIGITS),
            network=round(stages.network, _DIGITS),
            client=round(stages.client, _DIGITS),
            total=co2,
        ),
        co2_by_resource=ResourceGrams(
            **{
                name: round(value, _DIGITS)
                for name, value in estimate.co2_by_resource.items()
            }
        ),
        green_score=estimate.green_score,
        comparisons=Comparisons(
            car_km=estimate.comparisons.car_km,
            trees=estimate.comparisons.trees,
            charges=estimate.comparisons.charges,
            short_flights=estimate.comparisons.short_flights,
            kettle_boils=estimate.comparisons.kettle_boils,
            streaming_hours=estimate.comparisons.streaming_hours,
            beef_burgers=estimate.comparisons.beef_burgers,
        ),
        average_website=AverageWebsite(
            co2_per_visit=estimate.average_website.co2_per_visit,
            yearly_co2=round(estimate.average_website.yearly_co2, _DIGITS),
            cleaner_than_average=estimate.average_website.cleaner_than_average,
        ),
        regional_impact=[
            RegionalImpactRow(
                region=row.region,
                co2_per_visit=round(row.co2_per_visit, _DIGITS),
                yearly_co2=round(row.yearly_co2, _DIGITS),
            )
            for row in estimate.regional_impact
        ],
    )


def _record_from(report: AnalysisReport, trace: TraceResult) -> AnalysisRecord:
    breakdown = trace.breakdown
    return AnalysisRecord(
        url=report.url,
        domain=report.domain,
        region=report.region,
        monthly_visits=report.monthly_visits,
        page_size_mb=breakdown.total_megabytes,
        total_requests=report.total_requests,
        green_hosting=report.green_hosting,
        images_size=breakdown.images,
        js_size=breakdown.js,
        css_size=breakdown.css,
        fonts_size=breakdown.fonts,
        other_size=breakdown.other,
        co2_per_visit=report.co2_per_visit,
        yearly_co2=report.yearly_co2,
        car_km=report.comparisons.car_km,
        trees=report.comparisons.trees,
        charges=report.comparisons.charges,
    )


class WebCarbonAnalyzer:
    """Analyse the carbon footprint of a web page.

    One analyzer may serve many requests; every request builds its own
    emission configuration, accumulator and browser session.
    """

    def __init__(
        self,
        *,
        tracer: Tracer | None = None,
        hosting_oracle: HostingOracle | None = None,
        estimator: PageCarbonEstimator | None = None,
        sink: AnalysisSink | None = None,
        settings: WebCarbonSettings | None = None,
    ) -> None:
        """Initialise the analyzer.

        Args:
            tracer: Page tracer; defaults to a Playwright-backed
                :class:`PageTracer`.
            hosting_oracle: Green hosting oracle; defaults to the Green Web
                Foundation API.
            estimator: Emission estimator.
            sink: Optional destination for completed analyses. When omitted
                and ``WEB_CARBON_HISTORY_PATH`` is set, an
                :class:`AnalysisHistory` is used.
            settings: Optional pre-built settings.
        """

        self.settings = settings or get_settings()
        self.tracer: Tracer = tracer or PageTracer(settings=self.settings)
        self.hosting_oracle = hosting_oracle or build_hosting_oracle(self.settings)
        self.estimator = estimator or PageCarbonEstimator(settings=self.settings)
        if sink is None and self.settings.history_path:
            sink = AnalysisHistory(self.settings.history_path)
        self.sink = sink

    async def _check_hosting(self, domain: str) -> HostingResult:
        try:
            return await self.hosting_oracle.check(domain)
        except Exception as exc:
            _LOGGER.warning(
                "Green hosting lookup degraded",
                extra={"domain": domain, "error_type": type(exc).__name__},
                exc_info=exc,
            )
            return HostingResult(green=False, degraded=True)

    async def _persist(self, report: AnalysisReport, trace: TraceResult) -> None:
        if self.sink is None:
            return
        try:
            await asyncio.to_thread(self.sink.save, _record_from(report, trace))
        except Exception as exc:
            _LOGGER.error(
                "Failed to save analysis",
                extra={"url": report.url, "error_type": type(exc).__name__},
                exc_info=exc,
            )

    async def analyze(
        self,
        url: str,
        monthly_visits: int | None = None,
        region: str | None = None,
    ) -> AnalysisReport:
        """Trace ``url`` and estimate its emissions.

        Args:
            url: Page URL; ``https://`` is assumed when the scheme is missing.
            monthly_visits: Traffic volume; defaults to settings (10000).
            region: Grid region; defaults to settings (``global``).

        Returns:
            The complete :class:`AnalysisReport`. A degraded hosting lookup
            or a failed history write still yields a complete report.

        Raises:
            InvalidInputError: For a bad URL or traffic volume, before any
                browser is opened.
            PageLoadTimeoutError: When navigation timed out.
            PageLoadFailureError: When navigation failed.
            InternalAnalysisError: For any other failure.
        """

        parsed = normalise_url(url)
        visits = _validate_visits(
            self.settings.monthly_visits if monthly_visits is None else monthly_visits
        )
        region_code = (region or self.settings.default_region).strip().lower()
        target = str(parsed)
        domain = parsed.host.lower()

        hosting_task = asyncio.ensure_future(self._check_hosting(domain))
        try:
            trace = await self.tracer.trace(target)
            hosting = await hosting_task
            estimate = self.estimator.estimate_page(
                trace.breakdown,
                green_hosting=hosting.green,
                region=region_code,
                monthly_visits=visits,
            )
            report = build_report(
                url=target,
                domain=domain,
                trace=trace,
                hosting=hosting,
                estimate=estimate,
            )
        except AnalysisError:
            raise
        except Exception as exc:
            _LOGGER.exception("Analysis failed", extra={"url": target})
            raise InternalAnalysisError(f"Internal error: {exc}") from exc
        finally:
            if not hosting_task.done():
                hosting_task.cancel()

        await self._persist(report, trace)
        _LOGGER.info(
            "Analysis complete",
            extra={
                "url": target,
                "region": report.region,
                "co2_per_visit": report.co2_per_visit,
                "green_score": report.green_score,
                "green_hosting": report.green_hosting,
            },
        )
        return report


async def analyze(
    url: str,
    monthly_visits: int = 10_000,
    region: str = "global",
    *,
    settings: WebCarbonSettings | None = None,
) -> AnalysisReport:
    """Analyse ``url`` with default collaborators."""

    analyzer = WebCarbonAnalyzer(settings=settings)
    return await analyzer.analyze(url, monthly_visits, region)


def run_analysis(
    url: str,
    monthly_visits: int | None = None,
    region: str | None = None,
    *,
    analyzer: WebCarbonAnalyzer | None = None,
    timeout_seconds: float | None = None,
) -> AnalysisReport:
    """Run an analysis synchronously under the outer wall-clock ceiling.

    Args:
        url: Page URL.
        monthly_visits: Traffic volume.
        region: Grid region.
        analyzer: Pre-built analyzer; a default one is created when omitted.
        timeout_seconds: Overall ceiling; defaults to settings (60 s).

    Raises:
        PageLoadTimeoutError: When the ceiling expires.
    """

    active = analyzer or WebCarbonAnalyzer()
    ceiling = (
        timeout_seconds
        if timeout_seconds is not None
        else active.settings.analysis_timeout_seconds
    )
    if not math.isfinite(ceiling) or ceiling <= 0:
        raise InvalidInputError("timeout_seconds must be a positive number")

    async def _bounded() -> AnalysisReport:
        try:
            return await asyncio.wait_for(
                active.analyze(url, monthly_visits, region), timeout=ceiling
            )
        except asyncio.TimeoutError as exc:
            _LOGGER.warning(
                "Analysis exceeded wall-clock ceiling",
                extra={"url": url, "timeout_seconds": ceiling},
            )
            raise PageLoadTimeoutError(url, ceiling * 1000.0) from exc

    return asyncio.run(_bounded())
