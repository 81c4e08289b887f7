from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..errors import SourceNotFound, Unauthorized
from ..ingestion.runtime import Runtime, build_runtime
from .routes import router as scrape_router


def create_app(runtime: Optional[Runtime] = None) -> FastAPI:
    runtime = runtime or build_runtime()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Start the recurring trigger once and stop it on shutdown."""
        if runtime.config.scheduler_enabled:
            runtime.scheduler.start()
        try:
            yield
        finally:
            runtime.scheduler.shutdown()

    app = FastAPI(title="Grant Ingestion Service", version="0.1", lifespan=lifespan)
    app.state.runtime = runtime

    @app.exception_handler(Unauthorized)
    async def _unauthorized(request: Request, exc: Unauthorized):
        return JSONResponse(status_code=401, content={"error": "Unauthorized"})

    @app.exception_handler(SourceNotFound)
    async def _source_not_found(request: Request, exc: SourceNotFound):
        return JSONResponse(
            status_code=404,
            content={"error": "Failed to run scraping job", "message": str(exc)},
        )

    app.include_router(scrape_router)
    return app
