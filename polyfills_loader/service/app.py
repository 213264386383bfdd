"""FastAPI application entrypoint for polyfills-loader service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import load_config, with_build_manifest
from ..errors import ConfigError, PolyfillFileError
from ..models import PolyfillFile, PolyfillsData, PolyfillsLoaderConfig
from ..resolver import resolve_polyfills

Resolver = Callable[[PolyfillsLoaderConfig], PolyfillsData]


class PolyfillsRequest(BaseModel):
    path: str
    manifest: Optional[Dict[str, Any]] = None
    include_content: bool = False


class PolyfillFileModel(BaseModel):
    type: str
    path: str
    test: Optional[str] = None
    initializer: Optional[str] = None
    content: Optional[str] = None


class PolyfillsResponse(BaseModel):
    core_js: Optional[PolyfillFileModel] = None
    polyfill_files: List[PolyfillFileModel]


class HealthResponse(BaseModel):
    status: str


def _file_model(polyfill: PolyfillFile, include_content: bool) -> PolyfillFileModel:
    return PolyfillFileModel(
        type=polyfill.type,
        path=polyfill.path,
        test=polyfill.test,
        initializer=polyfill.initializer,
        content=polyfill.content if include_content else None,
    )


def create_app(resolver_factory: Callable[[], Resolver] = lambda: resolve_polyfills) -> FastAPI:
    """Create the FastAPI application exposing polyfill resolution."""

    app = FastAPI(title="Polyfills Loader Service", version="1.0.0")

    async def get_resolver() -> Resolver:
        return resolver_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/polyfills", response_model=PolyfillsResponse)
    async def polyfills(
        payload: PolyfillsRequest,
        resolver: Resolver = Depends(get_resolver),
    ) -> PolyfillsResponse:
        def _run() -> PolyfillsData:
            cfg = load_config(Path(payload.path))
            if payload.manifest is not None:
                cfg = with_build_manifest(cfg, payload.manifest)
            return resolver(cfg)

        loop = asyncio.get_running_loop()
        data = await loop.run_in_executor(None, _run)
        return PolyfillsResponse(
            core_js=_file_model(data.core_js, payload.include_content) if data.core_js else None,
            polyfill_files=[
                _file_model(f, payload.include_content) for f in data.polyfill_files
            ],
        )

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(PolyfillFileError)
    async def file_error_handler(_: Any, exc: PolyfillFileError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    try:
        import uvicorn
    except ModuleNotFoundError as exc:
        raise RuntimeError(
            "uvicorn is required to run the service. Install it with `pip install polyfills-loader[service]`."
        ) from exc

    uvicorn.run(create_app(), host=host, port=port)
