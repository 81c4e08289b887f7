"""JobRecord and run outcome models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class JobStatus(str, Enum):
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


class JobRecord(BaseModel):
    """One timestamped ingestion attempt for a single source.

    Created as ``running``; moves exactly once to ``success`` or ``failed``.
    """

    id: str = Field(..., description="Job identifier")
    source: str = Field(..., description="Source registry id")
    status: JobStatus = JobStatus.RUNNING
    grants_found: int = Field(0, description="Newly created grants (updates are not counted)")
    error: Optional[str] = Field(None, description="Set iff status is failed")
    started_at: datetime
    completed_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _check_state(self) -> "JobRecord":
        if self.status == JobStatus.FAILED and not self.error:
            raise ValueError("failed jobs must carry an error message")
        if self.status != JobStatus.FAILED and self.error:
            raise ValueError("only failed jobs carry an error message")
        if self.status == JobStatus.RUNNING and self.completed_at is not None:
            raise ValueError("running jobs have no completion time")
        return self

    @property
    def is_terminal(self) -> bool:
        return self.status != JobStatus.RUNNING


class SourceRunResult(BaseModel):
    """Outcome of one source run, also used as a batch entry."""

    source: str
    success: bool = True
    saved: int = 0
    updated: int = 0
    total: int = 0
    error: Optional[str] = None
