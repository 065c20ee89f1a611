"""Graph export helpers for JSON, DOT, and standalone HTML outputs."""

from __future__ import annotations

import html
import json
from pathlib import Path
from typing import Any, Dict

from .models import Graph

EXPORT_FORMATS = ("json", "html", "dot")


class GraphFormatError(ValueError):
    """Raised when a graph file cannot be read back."""


def graph_to_json(graph: Graph) -> str:
    return json.dumps(graph.to_dict(), indent=2)


def export_json(graph: Graph, output_file: Path) -> None:
    output_file.write_text(graph_to_json(graph), encoding="utf-8")


def load_graph(input_file: Path) -> Graph:
    try:
        data = json.loads(input_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise GraphFormatError(f"Cannot read graph from {input_file}: {exc}") from exc
    if not isinstance(data, dict):
        raise GraphFormatError(f"{input_file} does not contain a graph object")
    try:
        return Graph.from_dict(data)
    except (KeyError, TypeError, AttributeError) as exc:
        raise GraphFormatError(f"Malformed graph in {input_file}: {exc}") from exc


def export_dot(graph: Graph, output_file: Path) -> None:
    node_ids = set(graph.node_ids())

    lines = ["digraph NgGraph {"]
    lines.append("  rankdir=LR;")

    for node in graph.nodes:
        label = f"{_esc(node.node_type)}\\n{_esc(node.name)}"
        lines.append(f'  "{_esc(node.node_id)}" [label="{label}"];')

    for edge in graph.links:
        if edge.source not in node_ids or edge.target not in node_ids:
            continue
        label = f"{edge.relation} ({edge.weight})"
        lines.append(
            f'  "{_esc(edge.source)}" -> "{_esc(edge.target)}" [label="{_esc(label)}"];'
        )

    lines.append("}")
    output_file.write_text("\n".join(lines), encoding="utf-8")


def export_html(graph: Graph, output_file: Path, title: str = "nggraph") -> None:
    """Export graph to an interactive HTML page using vis-network."""
    output_file.write_text(_html_document(_vis_payload(graph), title), encoding="utf-8")


def export_graph(graph: Graph, output_file: Path, fmt: str) -> None:
    fmt = fmt.lower()
    if fmt == "json":
        export_json(graph, output_file)
    elif fmt == "html":
        export_html(graph, output_file)
    elif fmt == "dot":
        export_dot(graph, output_file)
    else:
        raise ValueError(f"Unknown export format '{fmt}', expected one of: {', '.join(EXPORT_FORMATS)}")


def _vis_payload(graph: Graph) -> Dict[str, Any]:
    node_ids = set(graph.node_ids())
    return {
        "nodes": [
            {
                "id": node.node_id,
                "label": node.name,
                "group": node.node_type,
                "title": "\n".join(f"{k}: {v}" for k, v in node.facets().items()),
            }
            for node in graph.nodes
        ],
        "edges": [
            {
                "from": edge.source,
                "to": edge.target,
                "value": edge.weight,
                "title": edge.relation,
                "dashes": edge.relation == "contains",
            }
            for edge in graph.links
            if edge.source in node_ids and edge.target in node_ids
        ],
    }


def _html_document(payload: Dict[str, Any], title: str) -> str:
    # "</" would end the inline script early
    data = json.dumps(payload).replace("</", "<\\/")
    return f"""<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <title>{html.escape(title)}</title>
  <script src="https://unpkg.com/vis-network/standalone/umd/vis-network.min.js"></script>
  <style>
    body {{ font-family: ui-monospace, SFMono-Regular, Menlo, monospace; margin: 0; }}
    header {{ padding: 10px 20px; border-bottom: 1px solid #ddd; }}
    #graph {{ width: 100vw; height: calc(100vh - 60px); }}
  </style>
</head>
<body>
  <header><strong>{html.escape(title)}</strong> <span id="summary"></span></header>
  <div id="graph"></div>
  <script>
    const graph = {data};
    document.getElementById('summary').textContent =
      `${{graph.nodes.length}} nodes, ${{graph.edges.length}} edges`;
    new vis.Network(
      document.getElementById('graph'),
      {{ nodes: new vis.DataSet(graph.nodes), edges: new vis.DataSet(graph.edges) }},
      {{
        edges: {{ arrows: 'to', scaling: {{ min: 1, max: 6 }} }},
        physics: {{ solver: 'forceAtlas2Based', stabilization: {{ iterations: 150 }} }},
      }}
    );
  </script>
</body>
</html>
"""


def _esc(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')
