"""Trigger endpoints: run all sources, run one source, list recent jobs."""

import hmac
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..errors import SourceNotFound, Unauthorized
from ..ingestion.runtime import Runtime

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/scrape", tags=["scrape"])


class ScrapeRequest(BaseModel):
    source: Optional[str] = None


def get_runtime(request: Request) -> Runtime:
    return request.app.state.runtime


def _matches(provided: Optional[str], secret: str) -> bool:
    return provided is not None and hmac.compare_digest(provided, secret)


def check_cron_request(request: Request, runtime: Runtime, secret_param: Optional[str]) -> None:
    """Scheduled calls: secret as query param, bearer token, or platform signature header."""
    secret = runtime.config.cron_secret
    if not secret:
        return
    auth_header = request.headers.get("authorization")
    if (
        _matches(secret_param, secret)
        or _matches(auth_header, f"Bearer {secret}")
        or request.headers.get(runtime.config.scheduler_signature_header) is not None
    ):
        return
    raise Unauthorized("Unauthorized")


def check_manual_request(request: Request, runtime: Runtime) -> None:
    """Manual calls need the x-cron-secret header outside development."""
    config = runtime.config
    if config.environment == "development" or not config.cron_secret:
        return
    if not _matches(request.headers.get("x-cron-secret"), config.cron_secret):
        raise Unauthorized("Unauthorized")


def _failure(e: Exception) -> JSONResponse:
    logger.error(f"Error running scraping job: {e}")
    return JSONResponse(
        status_code=500,
        content={"error": "Failed to run scraping job", "message": str(e) or "Unknown error"},
    )


@router.get("")
async def run_scheduled(
    request: Request,
    secret: Optional[str] = Query(None),
    runtime: Runtime = Depends(get_runtime),
):
    check_cron_request(request, runtime, secret)
    try:
        results = await runtime.scheduler.run_all()
    except Exception as e:
        return _failure(e)
    return {"success": True, "results": [r.model_dump() for r in results]}


@router.post("")
async def run_manual(
    request: Request,
    payload: Optional[ScrapeRequest] = Body(None),
    runtime: Runtime = Depends(get_runtime),
):
    check_manual_request(request, runtime)
    source = payload.source if payload else None
    try:
        if source:
            result = await runtime.scheduler.run_source(source)
            return {"success": True, **result.model_dump(exclude={"source", "success", "error"})}
        results = await runtime.scheduler.run_all()
    except SourceNotFound:
        raise
    except Exception as e:
        return _failure(e)
    return {"results": [r.model_dump() for r in results]}


@router.get("/status")
def scrape_status(
    limit: int = Query(10, ge=1, le=100),
    runtime: Runtime = Depends(get_runtime),
):
    try:
        jobs = runtime.store.list_jobs(limit)
    except Exception as e:
        logger.error(f"Error fetching scraping status: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to fetch scraping status"})
    return {"jobs": [job.model_dump(mode="json") for job in jobs]}
