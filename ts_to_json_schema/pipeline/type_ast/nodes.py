"""
AST node definitions for TypeScript type declarations.

These nodes represent the parsed structure of type aliases before any
schema derivation. They are produced by the parser and only read
afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field

PRIMITIVE_NAMES = ("string", "number", "boolean", "null", "undefined")


@dataclass
class TypeNode:
    """Base class for all type expression nodes."""

    # Source location of the node ("line:column"), for error messages
    source_path: str = ""

    # Doc-comment tags of the syntactic parent (property or alias)
    tags: dict[str, str | None] = field(default_factory=dict)

    def describe(self) -> str:
        return type(self).__name__


@dataclass
class PrimitiveType(TypeNode):
    """string, number, boolean, null or undefined."""

    name: str = "string"

    def describe(self) -> str:
        return self.name


@dataclass
class PropertySignature:
    """A member of an object literal type."""

    name: str = ""
    type_node: TypeNode | None = None
    optional: bool = False


@dataclass
class ObjectType(TypeNode):
    """An object literal type: { a: string; b?: number }."""

    members: list[PropertySignature] = field(default_factory=list)

    def describe(self) -> str:
        inner = "; ".join(f"{m.name}{'?' if m.optional else ''}: {m.type_node.describe()}" for m in self.members)
        return "{ " + inner + " }" if inner else "{}"


@dataclass
class ArrayType(TypeNode):
    """T[]."""

    element: TypeNode | None = None

    def describe(self) -> str:
        return f"{self.element.describe()}[]"


@dataclass
class TypeReference(TypeNode):
    """A reference to a declaration or a type operator, with optional type arguments."""

    name: str = ""
    type_args: list[TypeNode] = field(default_factory=list)

    def describe(self) -> str:
        if not self.type_args:
            return self.name
        return f"{self.name}<{', '.join(a.describe() for a in self.type_args)}>"


@dataclass
class LiteralType(TypeNode):
    """A string or numeric literal type."""

    value: str | int | float = ""

    def describe(self) -> str:
        if isinstance(self.value, str):
            return f'"{self.value}"'
        return str(self.value)


@dataclass
class UnionType(TypeNode):
    """A | B | ..."""

    types: list[TypeNode] = field(default_factory=list)

    def describe(self) -> str:
        return " | ".join(t.describe() for t in self.types)


@dataclass
class IntersectionType(TypeNode):
    """A & B & ..."""

    types: list[TypeNode] = field(default_factory=list)

    def describe(self) -> str:
        return " & ".join(t.describe() for t in self.types)


@dataclass
class KeyOfType(TypeNode):
    """keyof T."""

    target: TypeNode | None = None

    def describe(self) -> str:
        return f"keyof {self.target.describe()}"


@dataclass
class ConditionalType(TypeNode):
    """C extends E ? T : F."""

    check_type: TypeNode | None = None
    extends_type: TypeNode | None = None
    true_type: TypeNode | None = None
    false_type: TypeNode | None = None

    def describe(self) -> str:
        return (
            f"{self.check_type.describe()} extends {self.extends_type.describe()} "
            f"? {self.true_type.describe()} : {self.false_type.describe()}"
        )


@dataclass
class OtherType(TypeNode):
    """A recognized construct with no schema rule (any, never, tuples, ...)."""

    kind: str = ""
    text: str = ""

    def describe(self) -> str:
        return f"{self.kind} ({self.text})" if self.text and self.text != self.kind else self.kind


@dataclass
class Declaration:
    """A type alias declaration."""

    name: str = ""
    body: TypeNode | None = None
    type_parameters: list[str] = field(default_factory=list)
    source_path: str = ""

    @property
    def is_parameterized(self) -> bool:
        return bool(self.type_parameters)
