"""Per-run analysis state: file index, node ids, and diagnostics."""

from __future__ import annotations

import logging
from pathlib import PurePath
from types import MappingProxyType
from typing import Dict, List, Mapping

from .models import Diagnostic

logger = logging.getLogger(__name__)

UNSUPPORTED_KIND = "UnsupportedKind"


class AnalysisContext:
    """State owned by one analysis run.

    Files receive an integer index the first time they are seen; indices
    start at 0, follow first-seen order, and are never reassigned until
    :meth:`reset` starts a new run.
    """

    def __init__(self) -> None:
        self._file_index: Dict[str, int] = {}
        self._issued: Dict[str, int] = {}
        self.diagnostics: List[Diagnostic] = []

    def reset(self) -> None:
        self._file_index.clear()
        self._issued.clear()
        self.diagnostics.clear()

    # ------------------------------------------------------------------
    # File index
    # ------------------------------------------------------------------

    @property
    def file_index(self) -> Mapping[str, int]:
        return MappingProxyType(self._file_index)

    @property
    def file_count(self) -> int:
        return len(self._file_index)

    def allocate(self, file_path: str) -> int:
        index = self._file_index.get(file_path)
        if index is None:
            index = len(self._file_index)
            self._file_index[file_path] = index
            logger.debug("Assigned file index %d to %s", index, file_path)
        return index

    # ------------------------------------------------------------------
    # Identifiers
    # ------------------------------------------------------------------

    def compose_id(self, file_path: str, label: str) -> str:
        index = self.allocate(file_path)
        return f"{index}: {PurePath(file_path).stem} - {label}"

    def issue_id(self, file_path: str, label: str) -> str:
        """Compose an id and make it unique within the run.

        A repeated id gets a ``" #<n>"`` suffix, ``n`` counting from 2.
        """
        node_id = self.compose_id(file_path, label)
        seen = self._issued.get(node_id, 0) + 1
        self._issued[node_id] = seen
        if seen == 1:
            return node_id
        unique_id = f"{node_id} #{seen}"
        # A label may itself end in " #<n>"; keep counting until free.
        while unique_id in self._issued:
            seen += 1
            unique_id = f"{node_id} #{seen}"
        self._issued[node_id] = seen
        self._issued[unique_id] = 1
        return unique_id

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def report_unsupported(self, kind: str, file_path: str) -> Diagnostic:
        message = f"No mapping to obtain node information for node type {kind}"
        diagnostic = Diagnostic(kind=UNSUPPORTED_KIND, file_path=file_path, message=message)
        self.diagnostics.append(diagnostic)
        logger.info("%s (%s)", message, file_path)
        return diagnostic
