"""TypeScript syntax adapter built on Tree-sitter.

Parses ``.ts`` / ``.tsx`` files with the ``tree-sitter-typescript``
grammars and converts every module-scope declaration into one of the
source-node variants from :mod:`nggraph_cli.syntax`.  Alongside the
variants it collects what the analyzer needs to draw edges:

- identifier occurrences inside each declaration (reference counts)
- the file's import bindings (local name -> module specifier)

Tree-sitter is error-tolerant, so files with minor syntax errors still
yield whatever declarations parse cleanly.
"""

from __future__ import annotations

import fnmatch
import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import tree_sitter_typescript
from tree_sitter import Language, Parser as TSParser

from .config_manager import AnalysisSettings
from .syntax import (
    ClassDeclarationNode,
    Decorator,
    DecoratorArgument,
    FunctionDeclarationNode,
    ObjectProperty,
    SourceFileNode,
    SourceNode,
    UnsupportedNode,
    VariableDeclarationNode,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Language <-> file-extension mapping
# ---------------------------------------------------------------------------
LANGUAGE_MAP: Dict[str, str] = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}

# language name -> function of tree_sitter_typescript returning the grammar
_GRAMMAR_FUNCTIONS: Dict[str, str] = {
    "typescript": "language_typescript",
    "tsx": "language_tsx",
}

_FUNCTION_TYPES = {"function_declaration", "generator_function_declaration"}
_CLASS_TYPES = {"class_declaration", "abstract_class_declaration"}
# anonymous forms found under the ``value`` field of ``export default``
_DEFAULT_FUNCTION_TYPES = {"function_expression", "function", "generator_function"}
_DEFAULT_CLASS_TYPES = {"class"}
_VARIABLE_STATEMENT_TYPES = {"lexical_declaration", "variable_declaration"}

# declaration statements without a classification rule
_UNSUPPORTED_KINDS: Dict[str, str] = {
    "interface_declaration": "InterfaceDeclaration",
    "type_alias_declaration": "TypeAliasDeclaration",
    "enum_declaration": "EnumDeclaration",
    "internal_module": "ModuleDeclaration",
    "module": "ModuleDeclaration",
}

_REFERENCE_TYPES = {"identifier", "type_identifier", "shorthand_property_identifier"}
_STRING_TYPES = {"string", "template_string"}


@dataclass
class ImportBinding:
    specifier: str
    imported_name: str


@dataclass
class Declaration:
    node: SourceNode
    references: Counter = field(default_factory=Counter)

    @property
    def name(self) -> str:
        return getattr(self.node, "name", "")


@dataclass
class ParsedFile:
    path: Path
    source_file: SourceFileNode
    declarations: List[Declaration] = field(default_factory=list)
    imports: Dict[str, ImportBinding] = field(default_factory=dict)
    import_specifiers: List[str] = field(default_factory=list)


class TypeScriptParser:
    """Parse a TypeScript project into source-node variants."""

    def __init__(
        self,
        project_root: Path,
        settings: Optional[AnalysisSettings] = None,
    ) -> None:
        self.project_root = project_root
        self.settings = settings or AnalysisSettings()
        self._parsers: Dict[str, Any] = {}
        self._init_parsers()

    def _init_parsers(self) -> None:
        for lang, func_name in _GRAMMAR_FUNCTIONS.items():
            try:
                ts_lang = Language(getattr(tree_sitter_typescript, func_name)())
                self._parsers[lang] = TSParser(ts_lang)
                logger.debug("Loaded tree-sitter parser for %s", lang)
            except (AttributeError, TypeError, ValueError) as exc:
                logger.warning("Could not load tree-sitter grammar for %s: %s", lang, exc)

    def supports_language(self, language: str) -> bool:
        return language in self._parsers

    # ------------------------------------------------------------------
    # Project-level parsing
    # ------------------------------------------------------------------

    def iter_source_files(self) -> List[Path]:
        extensions = set(self.settings.extensions)
        skip_dirs = set(self.settings.skip_dirs)
        files: List[Path] = []
        for file_path in sorted(self.project_root.rglob("*")):
            if file_path.suffix not in extensions or not file_path.is_file():
                continue
            rel_parts = file_path.relative_to(self.project_root).parts
            if any(part in skip_dirs for part in rel_parts[:-1]):
                continue
            if any(fnmatch.fnmatch(file_path.name, pat) for pat in self.settings.exclude):
                continue
            files.append(file_path)
        return files

    def parse_project(self) -> List[ParsedFile]:
        parsed: List[ParsedFile] = []
        for file_path in self.iter_source_files():
            try:
                result = self.parse_file(file_path)
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Failed to parse %s: %s", file_path, exc)
                continue
            if result is not None:
                parsed.append(result)
        logger.info("Parsed %d file(s) under %s", len(parsed), self.project_root)
        return parsed

    # ------------------------------------------------------------------
    # File-level parsing
    # ------------------------------------------------------------------

    def parse_file(self, file_path: Path, source: Optional[str] = None) -> Optional[ParsedFile]:
        lang = LANGUAGE_MAP.get(file_path.suffix)
        if not lang or lang not in self._parsers:
            logger.debug("No parser for %s", file_path)
            return None
        if source is None:
            source = file_path.read_text(encoding="utf-8", errors="ignore")

        tree = self._parsers[lang].parse(source.encode("utf-8"))
        resolved = file_path.resolve()
        canonical = str(resolved)

        parsed = ParsedFile(path=resolved, source_file=SourceFileNode(file_path=canonical))
        self._walk_program(tree.root_node, canonical, parsed.declarations)
        self._collect_imports(tree.root_node, parsed)
        return parsed

    def _walk_program(self, root: Any, file_path: str, declarations: List[Declaration]) -> None:
        """Collect module-scope declarations from *root*, in source order."""
        for child in root.named_children:
            target = child
            outer_decorators: List[Any] = []

            if child.type == "export_statement":
                # Decorators written before ``export`` attach to the statement.
                outer_decorators = [c for c in child.children if c.type == "decorator"]
                target = child.child_by_field_name("declaration")
                if target is None:
                    target = child.child_by_field_name("value")
                    if target is None or target.type not in _DEFAULT_FUNCTION_TYPES | _DEFAULT_CLASS_TYPES:
                        continue
            elif child.type == "expression_statement" and child.named_children:
                if child.named_children[0].type in _UNSUPPORTED_KINDS:
                    target = child.named_children[0]

            if target.type in _FUNCTION_TYPES | _DEFAULT_FUNCTION_TYPES:
                declarations.append(self._function_declaration(target, file_path))
            elif target.type in _CLASS_TYPES | _DEFAULT_CLASS_TYPES:
                declarations.append(self._class_declaration(target, outer_decorators, file_path))
            elif target.type in _VARIABLE_STATEMENT_TYPES:
                declarations.extend(self._variable_declarations(target, file_path))
            elif target.type in _UNSUPPORTED_KINDS:
                name_node = target.child_by_field_name("name")
                declarations.append(Declaration(
                    node=UnsupportedNode(
                        file_path=file_path,
                        kind_name=_UNSUPPORTED_KINDS[target.type],
                        name=_text(name_node) if name_node is not None else "",
                    ),
                ))

    def _function_declaration(self, func_node: Any, file_path: str) -> Declaration:
        name_node = func_node.child_by_field_name("name")
        return Declaration(
            node=FunctionDeclarationNode(
                file_path=file_path,
                name=_text(name_node) if name_node is not None else "default",
            ),
            references=_count_references([func_node], exclude=name_node),
        )

    def _class_declaration(
        self,
        class_node: Any,
        outer_decorators: List[Any],
        file_path: str,
    ) -> Declaration:
        name_node = class_node.child_by_field_name("name")
        decorator_nodes = outer_decorators + [
            c for c in class_node.children if c.type == "decorator"
        ]
        return Declaration(
            node=ClassDeclarationNode(
                file_path=file_path,
                name=_text(name_node) if name_node is not None else "default",
                decorators=[_parse_decorator(d) for d in decorator_nodes],
            ),
            references=_count_references([class_node] + outer_decorators, exclude=name_node),
        )

    def _variable_declarations(self, statement: Any, file_path: str) -> List[Declaration]:
        binding_kind = _binding_kind(statement)
        result: List[Declaration] = []
        for declarator in statement.named_children:
            if declarator.type != "variable_declarator":
                continue
            name_node = declarator.child_by_field_name("name")
            if name_node is None:
                continue
            value = declarator.child_by_field_name("value")
            result.append(Declaration(
                node=VariableDeclarationNode(
                    file_path=file_path,
                    name=_text(name_node),
                    binding_kind=binding_kind,
                    initializer_kind=value.type if value is not None else None,
                ),
                references=_count_references([declarator], exclude=name_node),
            ))
        return result

    # ------------------------------------------------------------------
    # Imports
    # ------------------------------------------------------------------

    @staticmethod
    def _collect_imports(root: Any, parsed: ParsedFile) -> None:
        for child in root.named_children:
            if child.type != "import_statement":
                continue
            source_node = child.child_by_field_name("source")
            if source_node is None:
                continue
            specifier = _literal_value(source_node)
            parsed.import_specifiers.append(specifier)

            for clause in child.named_children:
                if clause.type != "import_clause":
                    continue
                for part in clause.named_children:
                    if part.type == "identifier":
                        parsed.imports[_text(part)] = ImportBinding(specifier, "default")
                    elif part.type == "namespace_import":
                        for ident in part.named_children:
                            if ident.type == "identifier":
                                parsed.imports[_text(ident)] = ImportBinding(specifier, "*")
                    elif part.type == "named_imports":
                        for spec in part.named_children:
                            if spec.type != "import_specifier":
                                continue
                            name = spec.child_by_field_name("name")
                            if name is None:
                                continue
                            alias = spec.child_by_field_name("alias")
                            local = alias if alias is not None else name
                            parsed.imports[_text(local)] = ImportBinding(specifier, _text(name))


# ===================================================================
# Shared Helpers
# ===================================================================

def _text(node: Any) -> str:
    return node.text.decode("utf-8")


def _binding_kind(statement: Any) -> str:
    if statement.type == "variable_declaration":
        return "var"
    kind = statement.child_by_field_name("kind")
    if kind is not None:
        return kind.type
    return statement.children[0].type if statement.children else "const"


def _parse_decorator(node: Any) -> Decorator:
    expr = next((c for c in node.named_children if c.type != "comment"), None)
    args_node = None
    if expr is not None and expr.type == "call_expression":
        args_node = expr.child_by_field_name("arguments")
        expr = expr.child_by_field_name("function")

    arguments: List[DecoratorArgument] = []
    if args_node is not None:
        for arg in args_node.named_children:
            if arg.type == "comment":
                continue
            arguments.append(DecoratorArgument(text=_text(arg), properties=_object_properties(arg)))

    return Decorator(name=_decorator_name(expr), arguments=arguments, text=_text(node))


def _decorator_name(expr: Any) -> str:
    """Return the final identifier of a decorator expression (``a.b.Name`` -> ``Name``)."""
    if expr is None:
        return ""
    if expr.type == "member_expression":
        prop = expr.child_by_field_name("property")
        return _text(prop) if prop is not None else _text(expr)
    if expr.type == "parenthesized_expression" and expr.named_children:
        return _decorator_name(expr.named_children[0])
    return _text(expr)


def _object_properties(arg: Any) -> List[ObjectProperty]:
    if arg.type != "object":
        return []
    properties: List[ObjectProperty] = []
    for child in arg.named_children:
        if child.type == "pair":
            key = child.child_by_field_name("key")
            value = child.child_by_field_name("value")
            properties.append(ObjectProperty(
                name=_property_name(key) if key is not None else "",
                value=_literal_value(value) if value is not None else "",
                text=_text(child),
            ))
        elif child.type == "shorthand_property_identifier":
            properties.append(ObjectProperty(name=_text(child), value=_text(child), text=_text(child)))
        elif child.type == "method_definition":
            name = child.child_by_field_name("name")
            properties.append(ObjectProperty(
                name=_property_name(name) if name is not None else "",
                value="",
                text=_text(child),
            ))
        elif child.type == "spread_element":
            properties.append(ObjectProperty(name="", value="", text=_text(child)))
    return properties


def _property_name(key: Any) -> str:
    if key.type in _STRING_TYPES:
        return _literal_value(key)
    return _text(key)


def _literal_value(node: Any) -> str:
    """Normalized value of a literal: string contents without delimiters, else source text."""
    raw = _text(node)
    if node.type in _STRING_TYPES and len(raw) >= 2:
        return raw[1:-1]
    return raw


def _same_node(a: Any, b: Any) -> bool:
    return (
        b is not None
        and a.type == b.type
        and a.start_byte == b.start_byte
        and a.end_byte == b.end_byte
    )


def _count_references(roots: Iterable[Any], exclude: Any = None) -> Counter:
    """Count identifier tokens under *roots*, skipping the *exclude* node."""
    counts: Counter = Counter()
    stack = list(roots)
    while stack:
        node = stack.pop()
        if node.type in _REFERENCE_TYPES and not _same_node(node, exclude):
            counts[_text(node)] += 1
        stack.extend(node.children)
    return counts
