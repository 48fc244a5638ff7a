"""FastAPI application exposing the README update pipeline."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import ConfigError, Settings
from ..lastfm import LastFMError
from ..orchestrator import Orchestrator, UpdateOutcome
from ..sections import SectionError
from ..stores import StoreError, WriteConflictError


class UpdateRequest(BaseModel):
    dry_run: bool = False


class UpdateResponse(BaseModel):
    status: str
    locator: Optional[str] = None
    diff: Optional[str] = None
    sections_processed: int = 0
    sections_updated: int = 0


class HealthResponse(BaseModel):
    status: str


def create_app(orchestrator_factory: Callable[[], Orchestrator]) -> FastAPI:
    """Create the FastAPI application exposing README updates."""

    app = FastAPI(title="lastfm-readme", version="0.1.0")

    async def get_orchestrator() -> Orchestrator:
        # A fresh orchestrator per request keeps each run independent.
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/update", response_model=UpdateResponse)
    async def update_readme(
        payload: UpdateRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> UpdateResponse:
        def _run_update() -> UpdateOutcome | None:
            return orchestrator.run_update(dry_run=payload.dry_run)

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, _run_update)

        if result is None:
            return UpdateResponse(status="unchanged")
        return UpdateResponse(
            status="dry_run" if result.dry_run else "updated",
            locator=result.locator,
            diff=result.diff,
            sections_processed=result.sections_processed,
            sections_updated=result.sections_updated,
        )

    @app.exception_handler(SectionError)
    async def section_error_handler(_: Any, exc: SectionError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(WriteConflictError)
    async def conflict_handler(_: Any, exc: WriteConflictError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(LastFMError)
    async def lastfm_error_handler(_: Any, exc: LastFMError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    @app.exception_handler(StoreError)
    async def store_error_handler(_: Any, exc: StoreError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(_: Any, exc: RuntimeError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    settings: Settings, host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(lambda: Orchestrator(settings))
    uvicorn.run(app, host=host, port=port)
