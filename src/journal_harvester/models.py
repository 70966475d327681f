# SPDX-License-Identifier: MIT
"""Core data models for the journal harvester."""

from typing import Any

from pydantic import BaseModel, Field, field_validator


# Numeric day counts may come back as 12.0 from the page; keep them integral.
DayCount = int | float | None


def _coerce_day_count(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


class InsightsData(BaseModel):
    """Fields extracted from a journal's insights page.

    Every field is independent: a missing element leaves its field at the
    default instead of failing the page.
    """

    issn: str | None = Field(None, description="ISSN as printed on the page")
    subject_areas: str | None = Field(
        "N/A", description="Subject areas, 'N/A' when the section is absent"
    )
    cite_score: float | None = Field(None, description="CiteScore")
    impact_factor: float | None = Field(None, description="Journal Impact Factor")
    apc: float | None = Field(
        None, description="Article processing charge without waiver, in USD"
    )
    time_to_first_decision: DayCount = Field(None, description="Days")
    review_time: DayCount = Field(None, description="Days")
    submission_to_acceptance: DayCount = Field(None, description="Days")
    acceptance_to_publication: DayCount = Field(None, description="Days")
    acceptance_rate: float | None = Field(None, description="Percent accepted")
    abstracting_indexing: str = Field(
        "", description="Comma-joined abstracting and indexing services"
    )

    @field_validator(
        "time_to_first_decision",
        "review_time",
        "submission_to_acceptance",
        "acceptance_to_publication",
        mode="before",
    )
    @classmethod
    def normalize_day_count(cls, v: Any) -> Any:
        """Store integral day counts as int."""
        return _coerce_day_count(v)


class JournalRecord(InsightsData):
    """One assembled journal, keyed by its URL title segment."""

    journal_title: str = Field(..., min_length=1, description="URL title segment")
    aims_and_scope: str | None = Field(None, description="Aims and scope text")
    shop_url: str = Field(..., description="Publisher catalog product page")
    sciencedirect_url: str = Field(..., description="Insights page URL")

    def to_row(self) -> dict[str, Any]:
        """Return the column/value mapping used for insertion."""
        return self.model_dump()


class FetchResult(BaseModel):
    """Outcome of a proxied fetch.

    A failed fetch is reported as ``ok=False`` with an empty body instead of
    an exception; callers treat it as "skip this page".
    """

    url: str = Field(..., description="Target URL (not the proxy URL)")
    ok: bool = Field(..., description="Whether a 2xx response was received")
    status: int | None = Field(None, description="Last HTTP status, if any")
    text: str = Field("", description="Response body")
    attempts: int = Field(0, ge=0, description="Attempts made")
    elapsed_ms: float = Field(0.0, ge=0.0, description="Total time spent")
    error: str | None = Field(None, description="Why the fetch failed")

    @classmethod
    def failed(
        cls,
        url: str,
        status: int | None = None,
        attempts: int = 0,
        elapsed_ms: float = 0.0,
        error: str | None = None,
    ) -> "FetchResult":
        """Build the empty failed sentinel."""
        return cls(
            url=url,
            ok=False,
            status=status,
            text="",
            attempts=attempts,
            elapsed_ms=elapsed_ms,
            error=error,
        )


class CatalogItem(BaseModel):
    """A single journal listed on a catalog search page."""

    shop_url: str | None = Field(None, description="productDetailPageURL")
    title: str | None = Field(None, description="Primary display title")

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "CatalogItem":
        """Build from one entry of ``searchResponse.items``."""
        links = item.get("journalLinks")
        titles = item.get("titles")
        if not isinstance(links, dict):
            links = {}
        if not isinstance(titles, dict):
            titles = {}
        shop_url = links.get("productDetailPageURL")
        title = titles.get("primary")
        return cls(
            shop_url=shop_url if isinstance(shop_url, str) and shop_url else None,
            title=title if isinstance(title, str) and title else None,
        )


class CatalogFilters(BaseModel):
    """Range and category filters of the catalog search; all open by default."""

    acceptanceRateLte: float | None = None
    acceptanceRateGte: float | None = None
    citeScoreLte: float | None = None
    citeScoreGte: float | None = None
    impactFactorLte: float | None = None
    impactFactorGte: float | None = None
    timeToFirstDecisionLte: float | None = None
    timeToFirstDecisionGte: float | None = None
    accessType: str | None = None
    subjectAreas: str | None = None


class CatalogSearchRequest(BaseModel):
    """JSON body posted to the catalog search endpoint."""

    query: str = ""
    page: int = Field(..., ge=1)
    filters: CatalogFilters = Field(default_factory=CatalogFilters)
    sort: str = "alphabeticalAsc"


class HarvestSummary(BaseModel):
    """Counters reported at the end of a crawl."""

    pages_processed: int = 0
    pages_failed: int = 0
    journals_inserted: int = 0
    journals_skipped: int = 0
    journals_failed: int = 0
    stopped_early: bool = Field(
        False, description="Crawl ended because every API key was rejected"
    )
    inserted_ids: list[int] = Field(default_factory=list)
