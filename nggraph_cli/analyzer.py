"""Project analyzer: parse a project and assemble the dependency graph."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .builder import build_node_record
from .config_manager import AnalysisSettings
from .identity import AnalysisContext
from .models import Edge, Graph
from .parser import LANGUAGE_MAP, ParsedFile, TypeScriptParser

logger = logging.getLogger(__name__)

_INDEX_NAMES = tuple(f"index{ext}" for ext in LANGUAGE_MAP)


class ProjectAnalyzer:
    """Drive one analysis run over *project_root*.

    Every call to :meth:`analyze` starts a new run: the context's file
    index and diagnostics are reset first, so repeated runs over the same
    tree produce identical ids.
    """

    def __init__(
        self,
        project_root: Path,
        settings: Optional[AnalysisSettings] = None,
        context: Optional[AnalysisContext] = None,
    ) -> None:
        self.project_root = project_root.resolve()
        self.settings = settings or AnalysisSettings()
        self.context = context or AnalysisContext()
        self.parser = TypeScriptParser(self.project_root, self.settings)

    def analyze(self) -> Graph:
        self.context.reset()
        parsed_files = self.parser.parse_project()
        return self.build_graph(parsed_files)

    def build_graph(self, parsed_files: List[ParsedFile]) -> Graph:
        graph = Graph()
        file_ids: Dict[Path, str] = {}
        # per file: declared name -> node id
        declared: Dict[Path, Dict[str, str]] = {}
        # per file: (node id, reference counts) for declarations that got a record
        built: Dict[Path, List[Tuple[str, Dict[str, int]]]] = {}

        for parsed in parsed_files:
            file_record = build_node_record(parsed.source_file, self.context)
            if file_record is None:
                continue
            graph.nodes.append(file_record)
            file_ids[parsed.path] = file_record.node_id
            names = declared.setdefault(parsed.path, {})
            entries = built.setdefault(parsed.path, [])

            for declaration in parsed.declarations:
                record = build_node_record(declaration.node, self.context)
                if record is None:
                    continue
                graph.nodes.append(record)
                graph.links.append(Edge(
                    source=file_record.node_id,
                    target=record.node_id,
                    weight=1,
                    relation="contains",
                ))
                names.setdefault(declaration.name, record.node_id)
                entries.append((record.node_id, dict(declaration.references)))

        for parsed in parsed_files:
            if parsed.path not in file_ids:
                continue
            graph.links.extend(self._import_edges(parsed, file_ids))
            graph.links.extend(self._reference_edges(parsed, built[parsed.path], declared))

        logger.info(
            "Built graph with %d node(s) and %d edge(s); %d declaration(s) skipped",
            len(graph.nodes), len(graph.links), len(self.context.diagnostics),
        )
        return graph

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def _import_edges(self, parsed: ParsedFile, file_ids: Dict[Path, str]) -> List[Edge]:
        weights: Dict[Path, int] = {}
        # bindings are counted per specifier, so visit each specifier once
        for specifier in dict.fromkeys(parsed.import_specifiers):
            target = self.resolve_specifier(parsed.path, specifier)
            if target is None or target not in file_ids or target == parsed.path:
                continue
            bound = sum(1 for b in parsed.imports.values() if b.specifier == specifier)
            weights[target] = weights.get(target, 0) + max(bound, 1)
        return [
            Edge(source=file_ids[parsed.path], target=file_ids[target], weight=weight, relation="imports")
            for target, weight in weights.items()
        ]

    def _reference_edges(
        self,
        parsed: ParsedFile,
        entries: List[Tuple[str, Dict[str, int]]],
        declared: Dict[Path, Dict[str, str]],
    ) -> List[Edge]:
        edges: List[Edge] = []
        for source_id, references in entries:
            for name, count in references.items():
                target_id = self._resolve_name(parsed, name, declared)
                if target_id is None or target_id == source_id:
                    continue
                edges.append(Edge(source=source_id, target=target_id, weight=count))
        return edges

    def _resolve_name(
        self,
        parsed: ParsedFile,
        name: str,
        declared: Dict[Path, Dict[str, str]],
    ) -> Optional[str]:
        local = declared.get(parsed.path, {})
        if name in local:
            return local[name]

        binding = parsed.imports.get(name)
        if binding is None:
            return None
        imported_name = name if binding.imported_name in ("default", "*") else binding.imported_name

        target = self.resolve_specifier(parsed.path, binding.specifier)
        if target is not None and target in declared:
            return declared[target].get(imported_name)

        # Unresolvable specifier (path alias, barrel outside the project):
        # fall back to the first file declaring the name.
        if binding.specifier.startswith("."):
            return None
        for path, names in declared.items():
            if path != parsed.path and imported_name in names:
                return names[imported_name]
        return None

    def resolve_specifier(self, importer: Path, specifier: str) -> Optional[Path]:
        """Map an import specifier to a project file, if it names one."""
        if specifier.startswith("."):
            base = (importer.parent / specifier).resolve()
        else:
            base = (self.project_root / specifier).resolve()

        candidates = [base] if base.suffix in LANGUAGE_MAP else []
        candidates += [base.with_name(base.name + ext) for ext in LANGUAGE_MAP]
        candidates += [base / index_name for index_name in _INDEX_NAMES]
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        return None
