"""Grant models - candidate observations and their persisted form."""

import logging
from datetime import datetime, timezone
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

CATEGORIES = frozenset({
    "Cloud Compute",
    "Health AI",
    "Finance AI",
    "LLM Tokens",
    "Technology",
})

LOCATIONS = frozenset({"Kenya", "Africa", "Global"})

FEED_TAG = "RSS Feed"
SAMPLE_TAG = "Sample Data"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC so comparisons never mix the two kinds."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _unique(values: List[str]) -> List[str]:
    seen = set()
    out = []
    for value in values:
        value = value.strip()
        if value and value not in seen:
            seen.add(value)
            out.append(value)
    return out


class CandidateRecord(BaseModel):
    """One normalized grant observation produced by a single extraction pass.

    Not persisted by itself; the ingestion engine turns it into a
    PersistedGrant keyed by ``url``.
    """

    title: str = Field(..., description="Opportunity title")
    description: str = Field(..., description="Opportunity summary")
    organization: str = Field(..., description="Funding organization")
    categories: List[str] = Field(..., description="Categories from the fixed taxonomy")
    amount: Optional[str] = Field(None, description="Free-text award amount")
    deadline: Optional[datetime] = Field(None, description="None means no stated deadline")
    url: str = Field(..., description="Natural key for deduplication")
    requirements: Optional[str] = None
    eligibility: Optional[str] = None
    source: str = Field(..., description="Source registry id that produced the record")
    location: Optional[str] = Field(None, description="Kenya, Africa, Global")
    tags: List[str] = Field(default_factory=list, description="Informational tags")

    @field_validator("title", "description", "organization", "source")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("categories")
    @classmethod
    def _known_categories(cls, value: List[str]) -> List[str]:
        value = _unique(value)
        if not value:
            raise ValueError("at least one category is required")
        unknown = [c for c in value if c not in CATEGORIES]
        if unknown:
            raise ValueError(f"unknown categories: {unknown}")
        return value

    @field_validator("url")
    @classmethod
    def _valid_url(cls, value: str) -> str:
        value = value.strip()
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"invalid url: {value!r}")
        return value

    @field_validator("location")
    @classmethod
    def _known_location(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in LOCATIONS:
            raise ValueError(f"unknown location: {value}")
        return value

    @field_validator("deadline")
    @classmethod
    def _deadline_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, value: List[str]) -> List[str]:
        return _unique(value)


class PersistedGrant(CandidateRecord):
    """Durable grant row. At most one per ``url``."""

    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    scraped_at: datetime = Field(default_factory=utc_now)

    @classmethod
    def from_candidate(
        cls,
        candidate: CandidateRecord,
        now: datetime,
        created_at: Optional[datetime] = None,
    ) -> "PersistedGrant":
        """Full-field overwrite of a candidate onto a (new or existing) row."""
        return cls(
            **candidate.model_dump(),
            is_active=True,
            created_at=created_at or now,
            updated_at=now,
            scraped_at=now,
        )


def build_candidate(**fields) -> Optional[CandidateRecord]:
    """Validate extraction output; invalid candidates are dropped, not raised.

    Returns:
        CandidateRecord, or None when a required field is missing or the
        URL is not an absolute http(s) URL.
    """
    try:
        return CandidateRecord(**fields)
    except ValidationError as e:
        logger.debug(
            "Dropping candidate from %s (%s): %s",
            fields.get("source"),
            fields.get("url"),
            e.errors()[0].get("msg") if e.errors() else e,
        )
        return None
