from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime
from enum import Enum


class FactorStatus(str, Enum):
    GOOD = "good"
    WARNING = "warning"
    ERROR = "error"


class ActionPriority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class _CamelModel(BaseModel):
    """Snake-case attributes, camelCase JSON (the dashboard's wire format)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ─── Fetcher output ────────────────────────────────────────────────────────────

class RawPage(BaseModel):
    html: str
    source_url: str
    fetch_duration_ms: int = Field(0, ge=0)
    # None → the fetch path did not probe
    has_robots_txt: Optional[bool] = None
    has_xml_sitemap: Optional[bool] = None


# ─── On-page factors ───────────────────────────────────────────────────────────

class TextFactor(_CamelModel):
    content: str
    length: int = Field(..., ge=0)
    status: FactorStatus

    @model_validator(mode="after")
    def _length_matches_content(self):
        if self.length != len(self.content):
            raise ValueError(
                f"length {self.length} does not match content length {len(self.content)}"
            )
        return self


class HeadingsFactor(_CamelModel):
    h1: int = Field(0, ge=0)
    h2: int = Field(0, ge=0)
    h3: int = Field(0, ge=0)
    status: FactorStatus


class ImagesFactor(_CamelModel):
    total: int = Field(0, ge=0)
    missing_alt: int = Field(0, ge=0)
    status: FactorStatus

    @model_validator(mode="after")
    def _missing_within_total(self):
        if self.missing_alt > self.total:
            raise ValueError("missing_alt cannot exceed total images")
        return self


class LinksFactor(_CamelModel):
    internal: int = Field(0, ge=0)
    external: int = Field(0, ge=0)
    status: FactorStatus

    @property
    def total(self) -> int:
        return self.internal + self.external


class OnPageMetrics(_CamelModel):
    title: TextFactor
    meta_description: TextFactor
    headings: HeadingsFactor
    images: ImagesFactor
    links: LinksFactor


# ─── Content & technical ───────────────────────────────────────────────────────

class KeywordDensity(_CamelModel):
    keyword: str
    density: float = Field(..., ge=0)


class ContentMetrics(_CamelModel):
    word_count: int = Field(0, ge=0)
    readability_score: float = Field(..., ge=0, le=100)
    keywords: List[KeywordDensity] = Field(default_factory=list, max_length=5)


class TechnicalMetrics(_CamelModel):
    has_robots_txt: bool
    has_xml_sitemap: bool
    load_time: int = Field(..., ge=0)


# ─── Scorer output ─────────────────────────────────────────────────────────────

class SEOMetrics(_CamelModel):
    score: int = Field(..., ge=0, le=100)
    url: str
    on_page: OnPageMetrics
    content: ContentMetrics
    technical: TechnicalMetrics
    # Fallback records are synthetic and must be identifiable as such
    is_demo: bool = False
    fallback_reason: Optional[str] = None


class ActionItem(_CamelModel):
    title: str
    priority: ActionPriority
    completed: bool


class AnalysisRecord(_CamelModel):
    id: str
    analyzed_at: datetime
    metrics: SEOMetrics
    summary: str
    action_plan: List[ActionItem] = Field(default_factory=list)


class HistoryEntry(_CamelModel):
    id: str
    url: str
    score: int
    date: datetime
    is_demo: bool = False


class HistoryStats(_CamelModel):
    total: int = 0
    latest_score: Optional[int] = None
    average_score: Optional[float] = None
    trend: int = 0


# ─── Request Models ────────────────────────────────────────────────────────────

class AnalyzeRequest(BaseModel):
    url: str = Field(..., description="Website URL; https:// is assumed when the scheme is missing")

    model_config = {
        "json_schema_extra": {
            "example": {
                "url": "example.com"
            }
        }
    }
