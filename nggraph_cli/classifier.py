"""Semantic classification of source-node variants.

Each supported variant maps to a label, a semantic type from a fixed
vocabulary, and optional advisory attributes.  Classes are further split
into Angular components, services, and modules by their decorators.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional

from .identity import AnalysisContext
from .models import Classification
from .syntax import (
    ClassDeclarationNode,
    Decorator,
    FunctionDeclarationNode,
    SourceFileNode,
    SourceNode,
    VariableDeclarationNode,
)

SERVICE_DI_WARNING = "Service DI Warning"
PROVIDERS_GUIDE = "https://angular.io/guide/architecture-services#providing-services"
MISSING_ROOT_MESSAGE = (
    "Angular Service Injector is not provided in root: "
    f"dependency-injection scope not declared at root ({PROVIDERS_GUIDE})"
)
REVIEW_INJECTOR_MESSAGE = "Angular Service Injector may not be provided in root, review injector configuration: "

# decorator name -> (sub-kind, semantic type); checked in this order
ANGULAR_DECORATORS = (
    ("Component", "Component", "Angular Component"),
    ("Injectable", "Service", "Angular Service"),
    ("NgModule", "Module", "Angular Module"),
)

BINDING_KIND_TYPES: Dict[str, str] = {
    "const": "Const",
    "let": "Let variable",
    "var": "Var variable",
}


def _classify_source_file(node: SourceFileNode) -> Classification:
    return Classification(
        label=node.base_name,
        node_type="Source File",
        attributes={"File Path": node.file_path},
    )


def _classify_function(node: FunctionDeclarationNode) -> Classification:
    return Classification(label=f"{node.name} (Function)", node_type="Function")


def _classify_class(node: ClassDeclarationNode) -> Classification:
    sub_kind: Optional[str] = None
    node_type = "Class"
    attributes: Dict[str, str] = {}

    for decorator_name, kind, semantic_type in ANGULAR_DECORATORS:
        decorator = node.find_decorator(decorator_name)
        if decorator is None:
            continue
        sub_kind = kind
        node_type = semantic_type
        if decorator_name == "Injectable":
            warning = _service_injector_warning(decorator)
            if warning:
                attributes[SERVICE_DI_WARNING] = warning

    return Classification(
        label=f"{node.name} ({sub_kind or 'Class'})",
        node_type=node_type,
        attributes=attributes,
    )


def _service_injector_warning(decorator: Decorator) -> Optional[str]:
    """Return an advisory when an ``@Injectable`` is not provided in root."""
    if not decorator.arguments:
        return MISSING_ROOT_MESSAGE
    properties = decorator.arguments[0].properties
    first = properties[0] if properties else None
    if first is None or first.name != "providedIn" or first.value != "root":
        return REVIEW_INJECTOR_MESSAGE + decorator.text
    return None


def _classify_variable(node: VariableDeclarationNode) -> Classification:
    if node.is_arrow_function:
        return Classification(
            label=f"{node.name} (Arrow Function - {node.binding_kind})",
            node_type="Arrow Function",
        )
    return Classification(
        label=f"{node.name} ({node.binding_kind})",
        node_type=BINDING_KIND_TYPES.get(node.binding_kind, "Variable"),
    )


_HANDLERS: Dict[type, Callable[..., Classification]] = {
    SourceFileNode: _classify_source_file,
    FunctionDeclarationNode: _classify_function,
    ClassDeclarationNode: _classify_class,
    VariableDeclarationNode: _classify_variable,
}


def supports(node: SourceNode) -> bool:
    return type(node) in _HANDLERS


def classify(node: SourceNode, context: AnalysisContext) -> Optional[Classification]:
    """Classify *node*, or record an unsupported-kind diagnostic and return None."""
    handler = _HANDLERS.get(type(node))
    if handler is None:
        context.report_unsupported(node.kind, node.file_path)
        return None
    return handler(node)
