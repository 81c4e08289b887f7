"""Shared Pydantic models for the ingestion service."""

from .grant import (
    CATEGORIES,
    FEED_TAG,
    LOCATIONS,
    SAMPLE_TAG,
    CandidateRecord,
    PersistedGrant,
    as_utc,
    build_candidate,
    utc_now,
)
from .job import JobRecord, JobStatus, SourceRunResult

__all__ = [
    "CATEGORIES",
    "FEED_TAG",
    "LOCATIONS",
    "SAMPLE_TAG",
    "CandidateRecord",
    "PersistedGrant",
    "JobRecord",
    "JobStatus",
    "SourceRunResult",
    "as_utc",
    "build_candidate",
    "utc_now",
]
