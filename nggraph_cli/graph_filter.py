"""Attribute-based filtering of a node graph.

Rules map an attribute key to the observed values a user toggled::

    {"Type": {"Angular Service": False}, "Service DI Warning": {"...": True}}

For every key, each node is checked against every ``(value, enabled)``
pair.  A disabled value removes nodes whose attribute equals it; an
enabled value removes nodes that lack the attribute altogether, whatever
the value listed.  Edges survive only when both endpoints do.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Tuple

from .models import Edge, Graph, NodeRecord

FilterRules = Mapping[str, Mapping[str, bool]]


def filter_graph(graph: Graph, rules: FilterRules) -> Graph:
    """Return the subgraph of *graph* selected by *rules*; *graph* is untouched."""
    facets_by_id: Dict[str, Dict[str, str]] = {
        node.node_id: node.facets() for node in graph.nodes
    }
    surviving: Dict[str, None] = dict.fromkeys(facets_by_id)

    for key, values in rules.items():
        for node_id in list(surviving):
            facets = facets_by_id[node_id]
            for value, enabled in values.items():
                if not enabled and facets.get(key) == value:
                    del surviving[node_id]
                    break
                if enabled and key not in facets:
                    del surviving[node_id]
                    break

    nodes: List[NodeRecord] = [n for n in graph.nodes if n.node_id in surviving]
    links: List[Edge] = [
        e for e in graph.links if e.source in surviving and e.target in surviving
    ]
    return Graph(nodes=nodes, links=links)


def observed_facets(graph: Graph) -> Dict[str, Dict[str, int]]:
    """Count every observed value per attribute key, in first-seen order."""
    observed: Dict[str, Dict[str, int]] = {}
    for node in graph.nodes:
        for key, value in node.facets().items():
            counts = observed.setdefault(key, {})
            counts[value] = counts.get(value, 0) + 1
    return observed


def _split_pair(pair: str) -> Tuple[str, str]:
    key, sep, value = pair.partition("=")
    key = key.strip()
    if not sep or not key:
        raise ValueError(f"Expected KEY=VALUE, got {pair!r}")
    return key, value.strip()


def parse_rule_options(hide: Iterable[str] = (), show: Iterable[str] = ()) -> Dict[str, Dict[str, bool]]:
    """Build a rule set from ``KEY=VALUE`` strings.

    ``hide`` pairs disable a value, ``show`` pairs enable one.
    """
    rules: Dict[str, Dict[str, bool]] = {}
    for pair in hide:
        key, value = _split_pair(pair)
        rules.setdefault(key, {})[value] = False
    for pair in show:
        key, value = _split_pair(pair)
        rules.setdefault(key, {})[value] = True
    return rules
