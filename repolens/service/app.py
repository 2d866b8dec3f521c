"""FastAPI application exposing repository analysis and the shared cache."""

from __future__ import annotations

import asyncio
import threading
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Tuple

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..analysis import analysis_cache_key, analyze_repo
from ..errors import AnalysisInputError
from ..logging import get_logger
from ..models import AnalysisResult, FileDescriptor, RepoMetadata
from ..stores import CacheManager

logger = get_logger("service")

MAX_TTL_HOURS = 10 * 365 * 24


class AnalyzeRequest(BaseModel):
    metadata: Dict[str, Any]
    files: List[Dict[str, Any]]
    use_cache: bool = True


class AnalyzeResponse(BaseModel):
    cache_key: str
    cached: bool
    analysis: Dict[str, Any]


class AnalysisResponse(BaseModel):
    cache_key: str
    analysis: Dict[str, Any]


class DescriptionRequest(BaseModel):
    description: str = Field(min_length=1)
    ttl_hours: Optional[float] = Field(default=None, ge=0, le=MAX_TTL_HOURS)


class DescriptionResponse(BaseModel):
    key: str
    description: str


class StatsResponse(BaseModel):
    repositories: int
    analyses: int
    descriptions: int
    total_entries: int
    current_bytes: int
    max_bytes: int
    utilization_percent: int
    last_cleanup: Optional[str] = None


class HealthResponse(BaseModel):
    status: str


def _default_manager() -> CacheManager:
    return CacheManager()


def create_app(
    manager_factory: Callable[[], CacheManager] = _default_manager,
) -> FastAPI:
    """Create the FastAPI application.

    One :class:`CacheManager` is built per app and hydrated immediately; it is
    persisted when the app shuts down. Every cache call goes through a lock
    so a put and its follow-up cleanup are never interleaved; handlers that
    take the lock are plain functions and run in the threadpool.
    """
    manager = manager_factory()
    manager.init()
    lock = threading.Lock()

    def _dispose() -> None:
        with lock:
            manager.dispose()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        await asyncio.get_running_loop().run_in_executor(None, _dispose)

    app = FastAPI(title="RepoLens Service", version="1.0.0", lifespan=lifespan)
    app.state.cache = manager

    def _analyze(payload: AnalyzeRequest) -> Tuple[str, AnalysisResult, bool]:
        metadata = RepoMetadata.from_dict(payload.metadata)
        files = [FileDescriptor.from_dict(entry) for entry in payload.files]
        key = analysis_cache_key(metadata.full_name, files)
        if payload.use_cache:
            with lock:
                cached = manager.get_analysis(key)
            if cached is not None:
                return key, cached, True

        result = analyze_repo(metadata, files)
        with lock:
            manager.put_repository(metadata.full_name, metadata)
            manager.put_analysis(key, result)
        return key, result, False

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/analyze", response_model=AnalyzeResponse)
    async def analyze(payload: AnalyzeRequest) -> AnalyzeResponse:
        loop = asyncio.get_running_loop()
        key, result, cached = await loop.run_in_executor(None, _analyze, payload)
        logger.info("Analyzed %s as %s (cached=%s)", result.metadata.full_name, result.framework, cached)
        return AnalyzeResponse(cache_key=key, cached=cached, analysis=result.to_dict())

    @app.get("/analyses/{key:path}", response_model=AnalysisResponse)
    def get_analysis(key: str) -> AnalysisResponse:
        with lock:
            result = manager.get_analysis(key)
        if result is None:
            raise HTTPException(status_code=404, detail=f"No cached analysis for {key}")
        return AnalysisResponse(cache_key=key, analysis=result.to_dict())

    @app.post("/analyses/{key:path}/architecture", response_model=AnalysisResponse)
    def attach_architecture(key: str, payload: DescriptionRequest) -> AnalysisResponse:
        with lock:
            result = manager.get_analysis(key)
            if result is None:
                raise HTTPException(status_code=404, detail=f"No cached analysis for {key}")
            updated = result.with_architecture_description(payload.description)
            manager.put_analysis(key, updated, ttl_hours=payload.ttl_hours)
        return AnalysisResponse(cache_key=key, analysis=updated.to_dict())

    @app.put("/descriptions/{key:path}", response_model=DescriptionResponse)
    def put_description(key: str, payload: DescriptionRequest) -> DescriptionResponse:
        with lock:
            manager.put_description(key, payload.description, ttl_hours=payload.ttl_hours)
        return DescriptionResponse(key=key, description=payload.description)

    @app.get("/descriptions/{key:path}", response_model=DescriptionResponse)
    def get_description(key: str) -> DescriptionResponse:
        with lock:
            description = manager.get_description(key)
        if description is None:
            raise HTTPException(status_code=404, detail=f"No cached description for {key}")
        return DescriptionResponse(key=key, description=description)

    @app.get("/cache/stats", response_model=StatsResponse)
    def cache_stats() -> StatsResponse:
        with lock:
            stats = manager.stats()
        return StatsResponse(**stats.to_dict())

    @app.delete("/cache", response_model=StatsResponse)
    def clear_cache() -> StatsResponse:
        with lock:
            manager.clear()
            stats = manager.stats()
        return StatsResponse(**stats.to_dict())

    @app.exception_handler(AnalysisInputError)
    async def analysis_input_handler(_: Any, exc: AnalysisInputError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    return app


def run_service(host: str = "0.0.0.0", port: int = 8000) -> None:  # pragma: no cover - integration path
    uvicorn.run(create_app(), host=host, port=port)


__all__ = ["create_app", "run_service"]
