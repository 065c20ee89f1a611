"""Tests for graph serialization and export formats."""

import json
from pathlib import Path

import pytest

from nggraph_cli.graph_export import (
    GraphFormatError,
    export_dot,
    export_graph,
    export_html,
    export_json,
    load_graph,
)
from nggraph_cli.models import Graph


def test_json_shape(sample_graph: Graph, temp_dir: Path):
    """Test the JSON node and link shape."""
    output = temp_dir / "graph.json"
    export_json(sample_graph, output)
    data = json.loads(output.read_text())

    assert set(data) == {"nodes", "links"}
    node = data["nodes"][2]
    assert node == {
        "id": "0: app - LegacyService (Service)",
        "name": "LegacyService (Service)",
        "type": "Angular Service",
        "filePath": "/src/app.ts",
        "attributes": {"Service DI Warning": "not provided in root"},
    }
    assert data["links"][-1] == {
        "source": "0: app - LegacyService (Service)",
        "target": "0: app - helper (Function)",
        "weight": 3,
        "relation": "references",
    }


def test_load_graph_reads_exported_json(sample_graph: Graph, temp_dir: Path):
    """Test loading a graph exported as JSON."""
    output = temp_dir / "graph.json"
    export_json(sample_graph, output)
    assert load_graph(output) == sample_graph


@pytest.mark.parametrize(
    "content",
    ["not json", "[1, 2]", '{"nodes": [{"id": "x"}]}'],
    ids=["invalid-json", "not-an-object", "missing-fields"],
)
def test_load_graph_rejects_malformed_input(temp_dir: Path, content: str):
    """Test that malformed graph files raise GraphFormatError."""
    bad = temp_dir / "bad.json"
    bad.write_text(content)
    with pytest.raises(GraphFormatError):
        load_graph(bad)


def test_dot_export(sample_graph: Graph, temp_dir: Path):
    """Test DOT export."""
    output = temp_dir / "graph.dot"
    export_dot(sample_graph, output)
    text = output.read_text()
    assert text.startswith("digraph NgGraph {")
    assert '"0: app - HeroService (Service)" [label="Angular Service\\nHeroService (Service)"];' in text
    assert text.count("->") == len(sample_graph.links)


def test_html_export_embeds_graph(sample_graph: Graph, temp_dir: Path):
    """Test HTML export embeds the graph data."""
    output = temp_dir / "graph.html"
    export_html(sample_graph, output, title="demo")
    text = output.read_text()
    assert "<title>demo</title>" in text
    assert "vis-network" in text
    assert "AppComponent (Component)" in text


def test_export_graph_rejects_unknown_format(sample_graph: Graph, temp_dir: Path):
    """Test export_graph with an unknown format."""
    with pytest.raises(ValueError):
        export_graph(sample_graph, temp_dir / "graph.svg", "svg")
