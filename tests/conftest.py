"""Pytest configuration and fixtures for nggraph tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from nggraph_cli.identity import AnalysisContext
from nggraph_cli.models import Edge, Graph, NodeRecord


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch):
    """Point the config file at a temporary location so tests never read ~/.nggraph."""
    base_dir = tmp_path / "nggraph_home"
    monkeypatch.setattr("nggraph_cli.config.BASE_DIR", base_dir)
    monkeypatch.setattr("nggraph_cli.config.CONFIG_FILE", base_dir / "config.toml")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def sample_project_path() -> Path:
    """Get path to the sample Angular project."""
    return Path(__file__).parent / "fixtures" / "sample_app"


@pytest.fixture
def context() -> AnalysisContext:
    return AnalysisContext()


@pytest.fixture
def sample_graph() -> Graph:
    """Five-node graph: one file, two services, a component, and a function."""
    nodes = [
        NodeRecord("0: app - app.ts", "app.ts", "Source File", "/src/app.ts", {"File Path": "/src/app.ts"}),
        NodeRecord("0: app - HeroService (Service)", "HeroService (Service)", "Angular Service", "/src/app.ts"),
        NodeRecord(
            "0: app - LegacyService (Service)",
            "LegacyService (Service)",
            "Angular Service",
            "/src/app.ts",
            {"Service DI Warning": "not provided in root"},
        ),
        NodeRecord("0: app - AppComponent (Component)", "AppComponent (Component)", "Angular Component", "/src/app.ts"),
        NodeRecord("0: app - helper (Function)", "helper (Function)", "Function", "/src/app.ts"),
    ]
    ids = [n.node_id for n in nodes]
    links = [
        Edge(ids[0], ids[1], 1, "contains"),
        Edge(ids[0], ids[2], 1, "contains"),
        Edge(ids[0], ids[3], 1, "contains"),
        Edge(ids[0], ids[4], 1, "contains"),
        Edge(ids[3], ids[1], 2),
        Edge(ids[3], ids[4], 1),
        Edge(ids[2], ids[4], 3),
    ]
    return Graph(nodes=nodes, links=links)


@pytest.fixture
def sample_ts_code() -> str:
    """Sample TypeScript code for testing the parser."""
    return '''import { Injectable, Component } from '@angular/core';
import { Helper as H } from './helper';

@Injectable({ providedIn: "root" })
export class UserService {
  load() {
    return H.run();
  }
}

@Component({ selector: 'app-user' })
export class UserComponent {
  constructor(private users: UserService) {}
}

export const greet = () => {};
let x = 5;
var y;
const a = 1, b = a;

function helper() {
  return greet();
}

export enum Color { Red, Green }
'''
