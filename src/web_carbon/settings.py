"""Environment-backed settings primitives for :mod:`web_carbon`."""

from __future__ import annotations

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["WebCarbonSettings", "get_settings"]

DEFAULT_GREENCHECK_URL = "https://api.thegreenwebfoundation.org/greencheck"
DEFAULT_USER_AGENT = "web-carbon/0.1 (+https://pypi.org/project/web-carbon/)"


class WebCarbonSettings(BaseSettings):
    """Expose environment-derived configuration knobs for page analysis.

    Every environment lookup made by the package goes through this class.
    Numeric fields tolerate malformed input by falling back to their
    defaults instead of failing the whole settings parse.

    Attributes:
        default_region: Grid region used when the caller does not pass one.
        monthly_visits: Traffic volume used when the caller does not pass one.
        navigation_timeout_ms: Hard bound on page navigation.
        settle_delay_ms: Grace period after navigation for lazy transfers.
        capture_drain_ms: Upper bound for in-flight body captures once the
            settle delay has elapsed.
        analysis_timeout_seconds: Outer wall-clock ceiling applied by
            :func:`web_carbon.analyzer.run_analysis`.
        headless: Launch the browser without a visible window.
        user_agent: User agent sent to the hosting oracle.
        browser_user_agent: Optional user agent override for the browser;
            Chromium's own is used when unset.
        greencheck_url: Base URL of the Green Web Foundation greencheck API.
        greencheck_timeout_seconds: Timeout for a single hosting lookup.
        greencheck_ttl_seconds: Lifetime of cached hosting lookups.
        known_hosts_fallback: Consult the built-in list of green hosts when
            the hosting lookup is degraded.
        history_path: NDJSON file used by the history store.
        carbon_intensity_file: Optional JSON file replacing the regional grid
            intensity table.
    """

    default_region: str = Field(default="global", alias="WEB_CARBON_DEFAULT_REGION")
    monthly_visits: int = Field(default=10_000, alias="WEB_CARBON_MONTHLY_VISITS")
    navigation_timeout_ms: int = Field(
        default=30_000, alias="WEB_CARBON_NAVIGATION_TIMEOUT_MS"
    )
    settle_delay_ms: int = Field(default=2_000, alias="WEB_CARBON_SETTLE_DELAY_MS")
    capture_drain_ms: int = Field(default=5_000, alias="WEB_CARBON_CAPTURE_DRAIN_MS")
    analysis_timeout_seconds: float = Field(
        default=60.0, alias="WEB_CARBON_ANALYSIS_TIMEOUT"
    )
    headless: bool = Field(default=True, alias="WEB_CARBON_HEADLESS")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, alias="WEB_CARBON_USER_AGENT")
    browser_user_agent: str | None = Field(
        default=None, alias="WEB_CARBON_BROWSER_USER_AGENT"
    )
    greencheck_url: str = Field(
        default=DEFAULT_GREENCHECK_URL, alias="WEB_CARBON_GREENCHECK_URL"
    )
    greencheck_timeout_seconds: float = Field(
        default=8.0, alias="WEB_CARBON_GREENCHECK_TIMEOUT"
    )
    greencheck_ttl_seconds: int = Field(default=300, alias="WEB_CARBON_GREENCHECK_TTL")
    known_hosts_fallback: bool = Field(
        default=False, alias="WEB_CARBON_KNOWN_HOSTS_FALLBACK"
    )
    history_path: str | None = Field(default=None, alias="WEB_CARBON_HISTORY_PATH")
    carbon_intensity_file: str | None = Field(
        default=None, alias="WEB_CARBON_INTENSITY_FILE"
    )

    model_config = SettingsConfigDict(
        env_file=None, extra="ignore", populate_by_name=True
    )

    @field_validator(
        "analysis_timeout_seconds",
        "greencheck_timeout_seconds",
        mode="before",
    )
    @classmethod
    def _parse_float(cls, value: object, info: ValidationInfo) -> float:
        """Parse float fields while tolerating malformed input.

        Args:
            value: Raw environment value.
            info: Validation context carrying the field name.

        Returns:
            Parsed float when conversion succeeds, otherwise the field default.
        """

        field_name = info.field_name or ""
        default = float(cls.model_fields[field_name].default)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value) if value > 0 else default
        if isinstance(value, str):
            try:
                parsed = float(value.strip())
            except ValueError:
                return default
            return parsed if parsed > 0 else default
        return default

    @field_validator(
        "monthly_visits",
        "navigation_timeout_ms",
        "settle_delay_ms",
        "capture_drain_ms",
        "greencheck_ttl_seconds",
        mode="before",
    )
    @classmethod
    def _parse_non_negative_int(cls, value: object, info: ValidationInfo) -> int:
        """Parse integer fields while tolerating malformed input.

        Args:
            value: Raw environment value.
            info: Validation context carrying the field name.

        Returns:
            Parsed non-negative integer, otherwise the field default.
        """

        field_name = info.field_name or ""
        default = int(cls.model_fields[field_name].default)
        parsed: int | None = None
        if isinstance(value, bool):
            parsed = None
        elif isinstance(value, int):
            parsed = value
        elif isinstance(value, float) and value.is_integer():
            parsed = int(value)
        elif isinstance(value, str):
            try:
                parsed = int(value.strip())
            except ValueError:
                parsed = None
        if parsed is None or parsed < 0:
            return default
        return parsed

    @field_validator("default_region", mode="before")
    @classmethod
    def _normalise_region(cls, value: object) -> str:
        """Lowercase the region code; blank values become ``global``."""

        if value is None:
            return "global"
        text = str(value).strip().lower()
        return text or "global"


def get_settings() -> WebCarbonSettings:
    """Return a :class:`WebCarbonSettings` instance.

    Returns:
        Settings parsed from environment variables.
    """

    return WebCarbonSettings()
