"""Exception types raised by the ingestion core."""


class IngestionError(Exception):
    """Base class for ingestion errors."""
    pass


class SourceNotFound(IngestionError):
    """Raised when a trigger names a source that is not in the registry."""

    def __init__(self, source_id: str):
        self.source_id = source_id
        super().__init__(f"Scraper not found for source: {source_id}")


class JobAlreadyCompleted(IngestionError):
    """Raised when a terminal job record would be mutated a second time."""

    def __init__(self, job_id: str, status: str):
        self.job_id = job_id
        self.status = status
        super().__init__(f"Job {job_id} already completed with status '{status}'")


class Unauthorized(IngestionError):
    """Raised when a trigger call does not carry the shared secret."""
    pass
