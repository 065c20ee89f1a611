"""Core data models shared by the builder, filter, and export layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

# Display keys under which the fixed record fields are exposed to filters.
NAME_KEY = "Name"
TYPE_KEY = "Type"
FILE_PATH_KEY = "File Path"


@dataclass
class NodeRecord:
    node_id: str
    name: str
    node_type: str
    file_path: str
    attributes: Dict[str, str] = field(default_factory=dict)

    def facets(self) -> Dict[str, str]:
        """Return the fixed fields and extra attributes as one key/value view."""
        return {
            NAME_KEY: self.name,
            TYPE_KEY: self.node_type,
            FILE_PATH_KEY: self.file_path,
            **self.attributes,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.node_id,
            "name": self.name,
            "type": self.node_type,
            "filePath": self.file_path,
            "attributes": dict(self.attributes),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NodeRecord":
        return cls(
            node_id=str(data["id"]),
            name=str(data["name"]),
            node_type=str(data["type"]),
            file_path=str(data["filePath"]),
            attributes={str(k): str(v) for k, v in (data.get("attributes") or {}).items()},
        )


@dataclass
class Edge:
    source: str
    target: str
    weight: float = 1
    relation: str = "references"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "weight": self.weight,
            "relation": self.relation,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Edge":
        return cls(
            source=str(data["source"]),
            target=str(data["target"]),
            weight=data.get("weight", 1),
            relation=str(data.get("relation", "references")),
        )


@dataclass
class Graph:
    nodes: List[NodeRecord] = field(default_factory=list)
    links: List[Edge] = field(default_factory=list)

    def node_ids(self) -> List[str]:
        return [node.node_id for node in self.nodes]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "links": [edge.to_dict() for edge in self.links],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Graph":
        return cls(
            nodes=[NodeRecord.from_dict(n) for n in data.get("nodes", [])],
            links=[Edge.from_dict(e) for e in data.get("links", [])],
        )


@dataclass
class Classification:
    label: str
    node_type: str
    attributes: Dict[str, str] = field(default_factory=dict)


@dataclass
class Diagnostic:
    kind: str
    file_path: str
    message: str
