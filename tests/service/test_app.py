"""Tests for the FastAPI service mode."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import pytest

try:
    from fastapi.testclient import TestClient
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    pytest.skip("fastapi not installed", allow_module_level=True)

from declorder.analysis import RenderedItem
from declorder.models import GeneratedStub, InterfaceDecl
from declorder.orchestrator import DirectoryReport, KindReport, UnitReport
from declorder.service import create_app


def _unit(path: str) -> UnitReport:
    stub = GeneratedStub(
        name="NoOpReader", interface="Reader", level=0, source="type NoOpReader struct {}\n"
    )
    item = InterfaceDecl(name="Reader", package="io", position=f"{path}:3:6")
    return UnitReport(
        path=path,
        package="io",
        kinds=[
            KindReport(
                kind="interfaces",
                title="Interfaces",
                items=[
                    RenderedItem(
                        level=0,
                        item=item,
                        text="Interface: Reader (Package: io)",
                        stub=stub,
                        name="Reader",
                    )
                ],
                stubs=[stub],
            )
        ],
    )


class _StubOrchestrator:
    def __init__(self) -> None:
        self.run_calls: List[Dict[str, Any]] = []
        self.file_calls: List[Dict[str, Any]] = []

    def run(self, directories: List[str], settings: Any, *, write: bool = True) -> List[DirectoryReport]:
        self.run_calls.append({"directories": directories, "settings": settings, "write": write})
        return [DirectoryReport(directory=directories[0], units=[_unit("io.go")])]

    def analyze_file(self, path: Path, settings: Any, *, write: bool = True) -> UnitReport:
        self.file_calls.append({"path": path, "settings": settings, "write": write})
        return _unit(str(path))


@pytest.fixture
def orchestrator() -> _StubOrchestrator:
    return _StubOrchestrator()


@pytest.fixture
def client(orchestrator: _StubOrchestrator) -> TestClient:
    return TestClient(create_app(lambda: orchestrator))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_analyze_directory_endpoint(
    client: TestClient, orchestrator: _StubOrchestrator, tmp_path: Path
) -> None:
    response = client.post(
        "/analyze",
        json={"path": str(tmp_path), "kinds": ["interfaces"], "sort": "alphabetical", "generate_noop": True},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["sort"] == "alphabetical"
    declaration = data["units"][0]["kinds"][0]["declarations"][0]
    assert declaration["name"] == "Reader"
    assert declaration["position"] == "io.go:3:6"
    assert declaration["stub"]["name"] == "NoOpReader"

    call = orchestrator.run_calls[0]
    assert call["write"] is False
    assert call["settings"].kinds == ("interfaces",)
    assert call["settings"].noop_enabled is True


def test_analyze_single_file_endpoint(
    client: TestClient, orchestrator: _StubOrchestrator, tmp_path: Path
) -> None:
    source = tmp_path / "io.go"
    source.write_text("package io\n", encoding="utf-8")

    response = client.post("/analyze", json={"path": str(source)})

    assert response.status_code == 200
    assert response.json()["sort"] == "topological"
    assert orchestrator.run_calls == []
    assert orchestrator.file_calls[0]["path"] == source


def test_analyze_missing_path_returns_404(client: TestClient, tmp_path: Path) -> None:
    response = client.post("/analyze", json={"path": str(tmp_path / "missing")})

    assert response.status_code == 404
    assert "missing" in response.json()["detail"]


def test_analyze_unknown_kind_returns_400(client: TestClient, tmp_path: Path) -> None:
    response = client.post("/analyze", json={"path": str(tmp_path), "kinds": ["macros"]})

    assert response.status_code == 400
    assert "macros" in response.json()["detail"]
