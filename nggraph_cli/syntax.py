"""Source-node variants consumed by the classifier.

The syntax adapter converts parser output into exactly one of these
dataclasses per declaration of interest.  Each variant carries only the
facts its classification rule needs, so the classifier never touches the
parse tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePath
from typing import ClassVar, List, Optional

ARROW_FUNCTION = "arrow_function"


@dataclass
class ObjectProperty:
    """One ``name: value`` entry of an object-literal argument."""

    name: str
    value: str
    text: str = ""


@dataclass
class DecoratorArgument:
    text: str
    properties: List[ObjectProperty] = field(default_factory=list)


@dataclass
class Decorator:
    name: str
    arguments: List[DecoratorArgument] = field(default_factory=list)
    text: str = ""


@dataclass
class SourceNode:
    file_path: str

    KIND: ClassVar[str] = "Unknown"

    @property
    def kind(self) -> str:
        return self.KIND

    @property
    def base_name(self) -> str:
        return PurePath(self.file_path).name

    @property
    def base_name_without_extension(self) -> str:
        return PurePath(self.file_path).stem


@dataclass
class SourceFileNode(SourceNode):
    KIND: ClassVar[str] = "SourceFile"


@dataclass
class FunctionDeclarationNode(SourceNode):
    name: str = ""

    KIND: ClassVar[str] = "FunctionDeclaration"


@dataclass
class ClassDeclarationNode(SourceNode):
    name: str = ""
    decorators: List[Decorator] = field(default_factory=list)

    KIND: ClassVar[str] = "ClassDeclaration"

    def find_decorator(self, name: str) -> Optional[Decorator]:
        for decorator in self.decorators:
            if decorator.name == name:
                return decorator
        return None

    def has_decorator(self, name: str) -> bool:
        return self.find_decorator(name) is not None


@dataclass
class VariableDeclarationNode(SourceNode):
    name: str = ""
    binding_kind: str = "const"
    initializer_kind: Optional[str] = None

    KIND: ClassVar[str] = "VariableDeclaration"

    @property
    def is_arrow_function(self) -> bool:
        return self.initializer_kind == ARROW_FUNCTION


@dataclass
class UnsupportedNode(SourceNode):
    """A declaration the classifier has no rule for (interfaces, enums, ...)."""

    kind_name: str = "Unknown"
    name: str = ""

    @property
    def kind(self) -> str:
        return self.kind_name
