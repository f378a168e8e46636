"""Pydantic models describing the public web-carbon records.

:class:`AnalysisReport` is the only contract presentation and storage layers
may rely on. Units are fixed: grams for CO2e, KB for the resource breakdown
and MB for page size.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

SchemaVersionLiteral = Literal["0.1.0"]
CURRENT_REPORT_SCHEMA_VERSION: SchemaVersionLiteral = "0.1.0"

_FROZEN = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)


class GreenHostingInfo(BaseModel):
    """Hosting oracle verdict."""

    model_config = _FROZEN

    green: bool
    hosted_by: str | None = Field(default=None, alias="hostedBy")


class ResourceKilobytes(BaseModel):
    """Per-category transfer size in whole KB."""

    model_config = _FROZEN

    images: int = Field(..., ge=0)
    js: int = Field(..., ge=0)
    css: int = Field(..., ge=0)
    fonts: int = Field(..., ge=0)
    other: int = Field(..., ge=0)


class ResourceGrams(BaseModel):
    """Per-category CO2e allocation in grams."""

    model_config = _FROZEN

    images: float = Field(..., ge=0.0)
    js: float = Field(..., ge=0.0)
    css: float = Field(..., ge=0.0)
    fonts: float = Field(..., ge=0.0)
    other: float = Field(..., ge=0.0)


class StageBreakdown(BaseModel):
    """Per-stage CO2e in grams."""

    model_config = _FROZEN

    data_center: float = Field(..., ge=0.0, alias="dataCenter")
    network: float = Field(..., ge=0.0)
    client: float = Field(..., ge=0.0)
    total: float = Field(..., ge=0.0)


class Comparisons(BaseModel):
    """Yearly CO2e expressed as everyday equivalences."""

    model_config = _FROZEN

    car_km: float = Field(..., ge=0.0, alias="carKm")
    trees: float = Field(..., ge=0.0)
    charges: float = Field(..., ge=0.0)
    short_flights: float = Field(..., ge=0.0, alias="shortFlights")
    kettle_boils: float = Field(..., ge=0.0, alias="kettleBoils")
    streaming_hours: float = Field(..., ge=0.0, alias="streamingHours")
    beef_burgers: float = Field(..., ge=0.0, alias="beefBurgers")


class AverageWebsite(BaseModel):
    """Benchmark against the reference average page."""

    model_config = _FROZEN

    co2_per_visit: float = Field(..., ge=0.0, alias="co2PerVisit")
    yearly_co2: float = Field(..., ge=0.0, alias="yearlyCO2")
    cleaner_than_average: int = Field(
        ...,
        ge=-100,
        le=100,
        alias="cleanerThanAverage",
        description="Positive when cleaner than average, negative when dirtier.",
    )


class RegionalImpactRow(BaseModel):
    """Same page evaluated on another region's grid."""

    model_config = _FROZEN

    region: str
    co2_per_visit: float = Field(..., ge=0.0, alias="co2PerVisit")
    yearly_co2: float = Field(..., ge=0.0, alias="yearlyCO2")


class AnalysisReport(BaseModel):
    """Complete result of analysing one page."""

    model_config = _FROZEN

    schema_version: SchemaVersionLiteral = Field(
        default=CURRENT_REPORT_SCHEMA_VERSION, alias="schemaVersion"
    )
    url: str
    domain: str
    region: str
    monthly_visits: int = Field(..., ge=0, alias="monthlyVisits")
    page_size_mb: float = Field(..., ge=0.0, alias="pageSizeMB")
    total_requests: int = Field(..., ge=0, alias="totalRequests")
    green_hosting: bool = Field(..., alias="greenHosting")
    green_hosting_info: GreenHostingInfo = Field(..., alias="greenHostingInfo")
    resource_breakdown: ResourceKilobytes = Field(..., alias="resourceBreakdown")
    co2_per_visit: float = Field(..., ge=0.0, alias="co2PerVisit")
    yearly_co2: float = Field(..., ge=0.0, alias="yearlyCO2")
    breakdown: StageBreakdown
    co2_by_resource: ResourceGrams = Field(..., alias="co2ByResource")
    green_score: int = Field(..., ge=0, le=100, alias="greenScore")
    comparisons: Comparisons
    average_website: AverageWebsite = Field(..., alias="averageWebsite")
    regional_impact: list[RegionalImpactRow] = Field(
        default_factory=list, alias="regionalImpact"
    )

    def to_public_dict(self) -> dict[str, object]:
        """Return the camelCase JSON payload with ``None`` values removed."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AnalysisRecord(BaseModel):
    """Persisted snapshot of an analysis for the history store."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    url: str = Field(..., min_length=1)
    domain: str
    region: str
    monthly_visits: int = Field(..., ge=0)
    page_size_mb: float = Field(..., ge=0.0)
    total_requests: int = Field(..., ge=0)
    green_hosting: bool
    images_size: int = Field(..., ge=0, description="Image bytes.")
    js_size: int = Field(..., ge=0, description="Script bytes.")
    css_size: int = Field(..., ge=0, description="Stylesheet bytes.")
    fonts_size: int = Field(..., ge=0, description="Font bytes.")
    other_size: int = Field(..., ge=0, description="Bytes of any other type.")
    co2_per_visit: float = Field(..., ge=0.0)
    yearly_co2: float = Field(..., ge=0.0)
    car_km: float = Field(..., ge=0.0)
    trees: float = Field(..., ge=0.0)
    charges: float = Field(..., ge=0.0)

    def model_dump_json_ready(self) -> dict[str, object]:
        """Return a JSON-serialisable payload."""

        return self.model_dump(mode="json")


class HistoryPage(BaseModel):
    """One page of stored analyses, newest first."""

    model_config = ConfigDict(frozen=True)

    analyses: list[AnalysisRecord]
    total: int = Field(..., ge=0)
    limit: int = Field(..., ge=0)
    offset: int = Field(..., ge=0)
