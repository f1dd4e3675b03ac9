"""FastAPI application entrypoint for new-dockerfile service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..dockerfile import Dockerfile, RuntimeNotDetectedError, UnknownRuntimeError


class DetectRequest(BaseModel):
    path: str


class DetectResponse(BaseModel):
    runtime: str


class GenerateRequest(BaseModel):
    path: str
    runtime: Optional[str] = None
    overrides: Dict[str, str] = Field(default_factory=dict)


class GenerateResponse(BaseModel):
    runtime: str
    dockerfile: str


class RuntimesResponse(BaseModel):
    runtimes: List[str]


class HealthResponse(BaseModel):
    status: str


def _default_dockerfile() -> Dockerfile:
    return Dockerfile()


def _project_dir(raw: str) -> Path:
    project = Path(raw)
    if not project.is_dir():
        raise FileNotFoundError(f"Project path not found: {raw}")
    return project


def create_app(
    dockerfile_factory: Callable[[], Dockerfile] = _default_dockerfile,
) -> FastAPI:
    """Create the FastAPI application exposing detection and generation."""

    app = FastAPI(title="new-dockerfile", version="0.1.0")

    async def get_dockerfile() -> Dockerfile:
        return dockerfile_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/runtimes", response_model=RuntimesResponse)
    async def runtimes(
        dockerfile: Dockerfile = Depends(get_dockerfile),
    ) -> RuntimesResponse:
        return RuntimesResponse(runtimes=dockerfile.runtime_names())

    @app.post("/detect", response_model=DetectResponse)
    async def detect(
        payload: DetectRequest,
        dockerfile: Dockerfile = Depends(get_dockerfile),
    ) -> DetectResponse:
        project = _project_dir(payload.path)
        loop = asyncio.get_running_loop()
        runtime = await loop.run_in_executor(None, dockerfile.match_runtime, project)
        return DetectResponse(runtime=runtime.name.value)

    @app.post("/generate", response_model=GenerateResponse)
    async def generate(
        payload: GenerateRequest,
        dockerfile: Dockerfile = Depends(get_dockerfile),
    ) -> GenerateResponse:
        project = _project_dir(payload.path)

        def _run_generate() -> GenerateResponse:
            runtime = dockerfile.select_runtime(project, payload.runtime)
            contents = runtime.generate_dockerfile(project, payload.overrides)
            return GenerateResponse(
                runtime=runtime.name.value, dockerfile=contents.decode("utf-8")
            )

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, _run_generate)

    @app.exception_handler(UnknownRuntimeError)
    async def unknown_runtime_handler(_: Any, exc: UnknownRuntimeError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"detail": str(exc), "supported": exc.supported},
        )

    @app.exception_handler(RuntimeNotDetectedError)
    async def not_detected_handler(_: Any, exc: RuntimeNotDetectedError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "supported": exc.supported},
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def parse_error_handler(_: Any, exc: ValueError) -> JSONResponse:
        # JSON and TOML decode errors from project convention files.
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    app = create_app()
    uvicorn.run(app, host=host, port=port)
