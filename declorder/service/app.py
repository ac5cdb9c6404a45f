"""FastAPI application entrypoint for declorder service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, List, Optional

try:  # pragma: no cover - optional dependency
    from fastapi import Depends, FastAPI
    from fastapi.responses import JSONResponse
    from pydantic import BaseModel

    _FASTAPI_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - service mode optional
    FastAPI = None  # type: ignore[assignment]
    Depends = None  # type: ignore[assignment]
    JSONResponse = None  # type: ignore[assignment]
    BaseModel = object  # type: ignore[assignment]
    _FASTAPI_AVAILABLE = False

from ..config import AnalysisSettings, ConfigError, load_config
from ..orchestrator import DirectoryReport, Orchestrator, UnitReport


class AnalyzeRequest(BaseModel):
    path: str
    kinds: Optional[List[str]] = None
    sort: Optional[str] = None
    generate_noop: bool = False


class StubPayload(BaseModel):
    name: str
    interface: str
    level: int
    source: str


class DeclarationPayload(BaseModel):
    name: str
    level: int
    position: str
    text: str
    stub: Optional[StubPayload] = None


class KindPayload(BaseModel):
    kind: str
    declarations: List[DeclarationPayload]


class UnitPayload(BaseModel):
    path: str
    package: str
    error: Optional[str] = None
    kinds: List[KindPayload] = []


class AnalyzeResponse(BaseModel):
    sort: str
    units: List[UnitPayload]


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def _unit_payload(unit: UnitReport) -> UnitPayload:
    kinds: List[KindPayload] = []
    for kind_report in unit.kinds:
        declarations = []
        for entry in kind_report.items:
            stub = None
            if entry.stub is not None:
                stub = StubPayload(
                    name=entry.stub.name,
                    interface=entry.stub.interface,
                    level=entry.stub.level,
                    source=entry.stub.source,
                )
            declarations.append(
                DeclarationPayload(
                    name=entry.name,
                    level=entry.level,
                    position=getattr(entry.item, "position", ""),
                    text=entry.text,
                    stub=stub,
                )
            )
        kinds.append(KindPayload(kind=kind_report.kind, declarations=declarations))
    return UnitPayload(path=unit.path, package=unit.package, error=unit.error, kinds=kinds)


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing declorder analysis."""

    if not _FASTAPI_AVAILABLE:  # pragma: no cover - validated via unit tests
        raise RuntimeError(
            "FastAPI is required for service mode. Install it with `pip install fastapi uvicorn`."
        )

    app = FastAPI(title="declorder Service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        # Fresh engines per request; nothing is shared between runs.
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/analyze", response_model=AnalyzeResponse)
    async def analyze(
        payload: AnalyzeRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> AnalyzeResponse:
        root = Path(payload.path).expanduser()
        if not root.exists():
            raise FileNotFoundError(f"Source path not found: {payload.path}")
        config = load_config(root if root.is_dir() else root.parent)
        settings = AnalysisSettings.from_config(
            config,
            kinds=payload.kinds,
            sort=payload.sort,
            noop_enabled=payload.generate_noop,
        )

        def _run() -> List[UnitReport]:
            if root.is_dir():
                reports: List[DirectoryReport] = orchestrator.run(
                    [str(root)], settings, write=False
                )
                return [unit for report in reports for unit in report.units]
            return [orchestrator.analyze_file(root, settings, write=False)]

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:  # pragma: no cover
            units = _run()
        else:
            units = await loop.run_in_executor(None, _run)

        return AnalyzeResponse(
            sort=settings.sort_label.lower(),
            units=[_unit_payload(unit) for unit in units],
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(
        _: Any, exc: FileNotFoundError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(
        _: Any, exc: ConfigError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    if not _FASTAPI_AVAILABLE:
        raise RuntimeError(
            "FastAPI is required for service mode. Install it with `pip install fastapi uvicorn`."
        )

    try:
        import uvicorn
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError(
            "uvicorn is required to run the service. Install it with `pip install uvicorn`."
        ) from exc

    app = create_app()
    uvicorn.run(app, host=host, port=port)
