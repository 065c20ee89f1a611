"""Turn classified source nodes into graph node records."""

from __future__ import annotations

from typing import Optional

from .classifier import classify
from .identity import AnalysisContext
from .models import NodeRecord
from .syntax import SourceNode


def build_node_record(node: SourceNode, context: AnalysisContext) -> Optional[NodeRecord]:
    """Build the record for *node*.

    Returns None for unsupported kinds; the diagnostic is already recorded
    on *context* by the classifier.
    """
    classification = classify(node, context)
    if classification is None:
        return None
    return NodeRecord(
        node_id=context.issue_id(node.file_path, classification.label),
        name=classification.label,
        node_type=classification.node_type,
        file_path=node.file_path,
        attributes=dict(classification.attributes),
    )
