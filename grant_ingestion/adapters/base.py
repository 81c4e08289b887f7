"""Shared HTTP plumbing and the extractor interface for grant sources."""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

from ..config.config import DEFAULT_USER_AGENT
from ..models import CandidateRecord

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class FetchSettings:
    """Per-call network settings shared by feed and page fetches."""

    timeout: float = DEFAULT_TIMEOUT_SECONDS
    user_agent: str = DEFAULT_USER_AGENT
    attempts: int = 1

    @classmethod
    def from_config(cls, config) -> "FetchSettings":
        return cls(
            timeout=config.request_timeout_seconds,
            user_agent=config.user_agent,
            attempts=config.fetch_attempts,
        )

    @property
    def httpx_timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.timeout)


def fetch_retry(attempts: int):
    """Retry decorator for fetches. One attempt means no retry at all."""
    return retry(
        stop=stop_after_attempt(max(1, attempts)),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(httpx.HTTPError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


async def fetch(url: str, settings: Optional[FetchSettings] = None, source: str = "-") -> httpx.Response:
    """GET a URL with a bounded timeout and a browser-like User-Agent.

    Raises:
        httpx.HTTPError: on timeout, connection failure or non-2xx status
            (after the configured number of attempts).
    """
    settings = settings or FetchSettings()

    @fetch_retry(settings.attempts)
    async def _get() -> httpx.Response:
        start = time.monotonic()
        status_code = None
        try:
            async with httpx.AsyncClient(
                timeout=settings.httpx_timeout,
                headers={"User-Agent": settings.user_agent},
                follow_redirects=True,
            ) as client:
                response = await client.get(url)
                status_code = response.status_code
                response.raise_for_status()
        except httpx.TimeoutException as e:
            duration = time.monotonic() - start
            logger.warning(
                f"[{source}] url={url} status=timeout "
                f"duration={duration:.2f}s result=failure error='{e}'"
            )
            raise
        except httpx.HTTPError as e:
            duration = time.monotonic() - start
            logger.warning(
                f"[{source}] url={url} status={status_code} "
                f"duration={duration:.2f}s result=failure error='{e}'"
            )
            raise

        duration = time.monotonic() - start
        logger.info(
            f"[{source}] url={url} status={status_code} "
            f"duration={duration:.2f}s result=success"
        )
        return response

    return await _get()


def infer_location(text: str, default: Optional[str] = "Global") -> Optional[str]:
    """Kenya beats Africa beats the supplied default."""
    lowered = (text or "").lower()
    if "kenya" in lowered:
        return "Kenya"
    if "africa" in lowered:
        return "Africa"
    return default


def clean_text(value: Optional[str]) -> str:
    """Collapse runs of whitespace left behind by markup."""
    return " ".join((value or "").split())


class BaseExtractor(ABC):
    """Extraction capability bound to one source."""

    @property
    @abstractmethod
    def source_id(self) -> str:
        """Registry id of the source this extractor serves."""
        pass

    @abstractmethod
    async def extract(self) -> List[CandidateRecord]:
        """Pull candidate records from the source.

        Returns:
            List of CandidateRecord. Implementations return an empty list
            on network or parse failure.
        """
        pass

    async def safe_extract(self) -> List[CandidateRecord]:
        """Extract with full error handling; returns [] on any failure.

        This is the entry point callers should use for partial-failure isolation.
        """
        start = time.monotonic()
        try:
            results = await self.extract()
            duration_ms = (time.monotonic() - start) * 1000
            logger.info(
                "extract_complete source=%s result=success count=%d duration_ms=%.0f",
                self.source_id,
                len(results),
                duration_ms,
            )
            return results
        except Exception as exc:
            duration_ms = (time.monotonic() - start) * 1000
            logger.error(
                "extract_complete source=%s result=failure error=%s duration_ms=%.0f",
                self.source_id,
                exc,
                duration_ms,
            )
            return []
