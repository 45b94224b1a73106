"""
Type-equivalence oracle.

Answers "which type does this expression denote?" for the resolver's
conditional-type rule. A semantic type is summarised by its category
flags and its canonical printed form; two semantic types are equal when
both match exactly.

StructuralOracle evaluates expressions against the declaration table
with TypeScript's assignability rules (strict null checks) and prints
types the way the TypeScript checker does: structured aliases keep their
name, aliases of intrinsic types print as the type itself.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import IntFlag

from loguru import logger

from ..type_ast.nodes import (
    ArrayType,
    ConditionalType,
    IntersectionType,
    KeyOfType,
    LiteralType,
    ObjectType,
    OtherType,
    PrimitiveType,
    TypeNode,
    TypeReference,
    UnionType,
)
from .declarations import DeclarationTable


class TypeFlags(IntFlag):
    """Category flags of a semantic type."""

    ANY = 1
    UNKNOWN = 2
    STRING = 4
    NUMBER = 8
    BOOLEAN = 16
    STRING_LITERAL = 32
    NUMBER_LITERAL = 64
    BOOLEAN_LITERAL = 128
    NULL = 256
    UNDEFINED = 512
    VOID = 1024
    NEVER = 2048
    BIGINT = 4096
    SYMBOL = 8192
    NON_PRIMITIVE = 16384
    OBJECT = 32768
    UNION = 65536
    INTERSECTION = 131072


@dataclass(frozen=True)
class SemanticType:
    """The type denoted by a type expression."""

    flags: TypeFlags
    text: str

    def __str__(self) -> str:
        return self.text


class TypeOracle(ABC):
    """Semantic type queries used to decide conditional types."""

    @abstractmethod
    def type_of(self, node: TypeNode) -> SemanticType:
        """Return the semantic type denoted by a type expression."""
        pass

    def equal(self, a: SemanticType, b: SemanticType) -> bool:
        """Two semantic types are equal iff their flags and printed forms match."""
        return a.flags == b.flags and a.text == b.text


# Semantic forms ------------------------------------------------------


@dataclass
class Sem:
    """Base class of evaluated types."""

    # Name printed instead of the structure (alias or operator instantiation)
    alias: str | None = field(default=None, kw_only=True)


@dataclass
class SemPrimitive(Sem):
    name: str = "any"


@dataclass
class SemLiteral(Sem):
    value: str | int | float | bool = ""


@dataclass
class SemProperty:
    name: str
    type: Sem
    optional: bool = False


@dataclass
class SemObject(Sem):
    properties: list[SemProperty] = field(default_factory=list)

    def get(self, name: str) -> SemProperty | None:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None


@dataclass
class SemArray(Sem):
    element: Sem | None = None


@dataclass
class SemUnion(Sem):
    members: list[Sem] = field(default_factory=list)


@dataclass
class SemIntersection(Sem):
    members: list[Sem] = field(default_factory=list)


@dataclass
class SemRef(Sem):
    """A lazily expanded reference to a declaration."""

    name: str = ""


@dataclass
class SemOpaque(Sem):
    """A type only equal to itself (Date, RegExp, unsupported generics, ...)."""

    text: str = ""


_PRIMITIVE_FLAGS = {
    "any": TypeFlags.ANY,
    "unknown": TypeFlags.UNKNOWN,
    "string": TypeFlags.STRING,
    "number": TypeFlags.NUMBER,
    "boolean": TypeFlags.BOOLEAN | TypeFlags.UNION,
    "null": TypeFlags.NULL,
    "undefined": TypeFlags.UNDEFINED,
    "void": TypeFlags.VOID,
    "never": TypeFlags.NEVER,
    "bigint": TypeFlags.BIGINT,
    "symbol": TypeFlags.SYMBOL,
    "object": TypeFlags.NON_PRIMITIVE,
}

_OPAQUE_BUILTINS = ("Date", "RegExp")


class StructuralOracle(TypeOracle):
    """Evaluates type expressions structurally against a declaration table."""

    def __init__(self, declarations: DeclarationTable):
        self.declarations = declarations
        self._expanded: dict[str, Sem] = {}
        # Aliases being printed, for recursive array aliases such as `type L = L[]`
        self._printing: set[str] = set()

    def type_of(self, node: TypeNode) -> SemanticType:
        sem = self.evaluate(node)
        semantic = SemanticType(flags=self.flags(sem), text=self.print(sem))
        logger.debug(f"type_of({node.describe()}) = {semantic.text}")
        return semantic

    # -- evaluation ----------------------------------------------------

    def evaluate(self, node: TypeNode) -> Sem:
        """Evaluate a type expression into its semantic form."""
        if isinstance(node, PrimitiveType):
            return SemPrimitive(name=node.name)
        if isinstance(node, LiteralType):
            return SemLiteral(value=node.value)
        if isinstance(node, ObjectType):
            return SemObject(
                properties=[SemProperty(m.name, self.evaluate(m.type_node), m.optional) for m in node.members]
            )
        if isinstance(node, ArrayType):
            return SemArray(element=self.evaluate(node.element))
        if isinstance(node, UnionType):
            return self._union([self.evaluate(t) for t in node.types])
        if isinstance(node, IntersectionType):
            return SemIntersection(members=[self.evaluate(t) for t in node.types])
        if isinstance(node, KeyOfType):
            return self._keyof(self.evaluate(node.target), node)
        if isinstance(node, ConditionalType):
            return self._conditional(node)
        if isinstance(node, TypeReference):
            return self._reference(node)
        if isinstance(node, OtherType):
            return self._other(node)
        return SemOpaque(text=node.describe())

    def _conditional(self, node: ConditionalType) -> Sem:
        check = self.evaluate(node.check_type)
        if isinstance(self.expand(check), SemPrimitive) and self.expand(check).name == "any":
            return self._union([self.evaluate(node.true_type), self.evaluate(node.false_type)])
        if self.is_assignable(check, self.evaluate(node.extends_type)):
            return self.evaluate(node.true_type)
        return self.evaluate(node.false_type)

    def _other(self, node: OtherType) -> Sem:
        if node.kind in _PRIMITIVE_FLAGS:
            return SemPrimitive(name=node.kind)
        if node.kind in ("true", "false"):
            return SemLiteral(value=node.kind == "true")
        return SemOpaque(text=node.text or node.kind)

    def _reference(self, node: TypeReference) -> Sem:
        name, args = node.name, node.type_args
        if name in _OPAQUE_BUILTINS:
            return SemOpaque(text=name)
        if not args:
            if name in self.declarations:
                return SemRef(name=name)
            return SemOpaque(text=name)

        evaluated = [self.evaluate(a) for a in args]
        alias = node.describe()
        if name == "Array" and len(evaluated) == 1:
            return SemArray(element=evaluated[0])
        if name == "Exclude" and len(evaluated) == 2:
            return self._union([m for m in self._members(evaluated[0]) if not self.is_assignable(m, evaluated[1])])
        if name == "Extract" and len(evaluated) == 2:
            return self._union([m for m in self._members(evaluated[0]) if self.is_assignable(m, evaluated[1])])
        if name == "Record" and len(evaluated) == 2:
            keys = self._string_keys(evaluated[0])
            if keys is not None:
                return SemObject(properties=[SemProperty(k, evaluated[1]) for k in keys], alias=alias)

        properties = self._object_properties(evaluated[0])
        if properties is not None:
            if name == "Readonly" and len(evaluated) == 1:
                return SemObject(properties=properties, alias=alias)
            if name == "Partial" and len(evaluated) == 1:
                return SemObject(properties=[SemProperty(p.name, p.type, True) for p in properties], alias=alias)
            if name == "Required" and len(evaluated) == 1:
                return SemObject(properties=[SemProperty(p.name, p.type, False) for p in properties], alias=alias)
            keys = self._string_keys(evaluated[1]) if len(evaluated) == 2 else None
            if name == "Pick" and keys is not None:
                by_name = {p.name: p for p in properties}
                return SemObject(properties=[by_name[k] for k in keys if k in by_name], alias=alias)
            if name == "Omit" and keys is not None:
                return SemObject(properties=[p for p in properties if p.name not in keys], alias=alias)

        return SemOpaque(text=alias)

    def _keyof(self, target: Sem, node: KeyOfType) -> Sem:
        properties = self._object_properties(target)
        if properties is None:
            return SemOpaque(text=node.describe())
        return self._union([SemLiteral(value=p.name) for p in properties])

    def _union(self, members: list[Sem]) -> Sem:
        flat: list[Sem] = []
        seen: set[str] = set()
        for member in members:
            for item in member.members if isinstance(member, SemUnion) and not member.alias else [member]:
                if isinstance(item, SemPrimitive) and item.name == "never":
                    continue
                text = self.print(item)
                if text not in seen:
                    seen.add(text)
                    flat.append(item)

        primitives = {m.name for m in flat if isinstance(m, SemPrimitive)}
        if "any" in primitives:
            return SemPrimitive(name="any")
        flat = [m for m in flat if not (isinstance(m, SemLiteral) and _literal_primitive(m.value) in primitives)]

        if not flat:
            return SemPrimitive(name="never")
        if len(flat) == 1:
            return flat[0]
        return SemUnion(members=flat)

    def _members(self, sem: Sem) -> list[Sem]:
        expanded = self.expand(sem)
        if isinstance(expanded, SemUnion):
            return list(expanded.members)
        return [sem]

    def _string_keys(self, sem: Sem) -> list[str] | None:
        keys = []
        for member in self._members(sem):
            member = self.expand(member)
            if not (isinstance(member, SemLiteral) and isinstance(member.value, str)):
                return None
            keys.append(member.value)
        return keys

    def _object_properties(self, sem: Sem) -> list[SemProperty] | None:
        expanded = self.expand(sem)
        if isinstance(expanded, SemObject):
            return list(expanded.properties)
        if isinstance(expanded, SemIntersection):
            merged: dict[str, SemProperty] = {}
            for member in expanded.members:
                properties = self._object_properties(member)
                if properties is None:
                    return None
                for prop in properties:
                    merged.setdefault(prop.name, prop)
            return list(merged.values())
        return None

    def expand(self, sem: Sem) -> Sem:
        """Follow declaration references until a structural form is reached."""
        visited: set[str] = set()
        while isinstance(sem, SemRef):
            if sem.name in visited:
                return SemPrimitive(name="any")
            visited.add(sem.name)
            sem = self._body(sem.name)
        return sem

    def _body(self, name: str) -> Sem:
        if name not in self._expanded:
            body = self.declarations.get(name)
            self._expanded[name] = self.evaluate(body) if body is not None else SemOpaque(text=name)
        return self._expanded[name]

    # -- assignability -------------------------------------------------

    def is_assignable(self, source: Sem, target: Sem, assumed: set[tuple[str, str]] | None = None) -> bool:
        """Whether a value of the source type is assignable to the target type."""
        assumed = set() if assumed is None else assumed
        if isinstance(source, SemRef) or isinstance(target, SemRef):
            key = (self.print(source), self.print(target))
            if key in assumed:
                return True
            assumed.add(key)
        source = self.expand(source)
        target = self.expand(target)

        if isinstance(target, SemPrimitive) and target.name in ("any", "unknown"):
            return True
        if isinstance(source, SemPrimitive) and source.name in ("any", "never"):
            return True
        if isinstance(source, SemUnion):
            return all(self.is_assignable(m, target, assumed) for m in source.members)
        if isinstance(source, SemPrimitive) and source.name == "boolean":
            return self.is_assignable(SemLiteral(value=True), target, assumed) and self.is_assignable(
                SemLiteral(value=False), target, assumed
            )
        if isinstance(target, SemUnion):
            return any(self.is_assignable(source, m, assumed) for m in target.members)
        if isinstance(target, SemIntersection):
            return all(self.is_assignable(source, m, assumed) for m in target.members)
        if isinstance(source, SemIntersection):
            if isinstance(target, SemObject):
                properties = self._object_properties(source)
                if properties is not None:
                    return self.is_assignable(SemObject(properties=properties), target, assumed)
            return any(self.is_assignable(m, target, assumed) for m in source.members)

        if isinstance(target, SemPrimitive):
            return self._assignable_to_primitive(source, target.name)
        if isinstance(target, SemLiteral):
            return (
                isinstance(source, SemLiteral)
                and type(source.value) is type(target.value)
                and source.value == target.value
            )
        if isinstance(target, SemArray):
            return isinstance(source, SemArray) and self.is_assignable(source.element, target.element, assumed)
        if isinstance(target, SemObject):
            return self._assignable_to_object(source, target, assumed)
        if isinstance(target, SemOpaque):
            return isinstance(source, SemOpaque) and source.text == target.text
        return False

    def _assignable_to_primitive(self, source: Sem, name: str) -> bool:
        if isinstance(source, SemPrimitive):
            return source.name == name or (name == "void" and source.name == "undefined")
        if isinstance(source, SemLiteral):
            return _literal_primitive(source.value) == name
        return name == "object" and isinstance(source, (SemObject, SemArray, SemOpaque))

    def _assignable_to_object(self, source: Sem, target: SemObject, assumed: set[tuple[str, str]]) -> bool:
        required = [p for p in target.properties if not p.optional]
        if not isinstance(source, SemObject):
            if isinstance(source, SemPrimitive) and source.name in ("null", "undefined", "void", "unknown"):
                return False
            return not required
        for prop in target.properties:
            own = source.get(prop.name)
            if own is None:
                if not prop.optional:
                    return False
                continue
            if own.optional and not prop.optional:
                return False
            if not self.is_assignable(own.type, prop.type, assumed):
                return False
        return True

    # -- printing ------------------------------------------------------

    def print(self, sem: Sem) -> str:
        """Canonical printed form, mimicking the TypeScript checker."""
        if sem.alias:
            return sem.alias
        if isinstance(sem, SemPrimitive):
            return sem.name
        if isinstance(sem, SemLiteral):
            return _print_literal(sem.value)
        if isinstance(sem, SemRef):
            return self._print_reference(sem)
        if isinstance(sem, SemOpaque):
            return sem.text
        if isinstance(sem, SemArray):
            element = self.print(sem.element)
            if isinstance(sem.element, (SemUnion, SemIntersection)) and not sem.element.alias:
                element = f"({element})"
            return f"{element}[]"
        if isinstance(sem, SemUnion):
            return " | ".join(self.print(m) for m in sem.members)
        if isinstance(sem, SemIntersection):
            parts = []
            for member in sem.members:
                text = self.print(member)
                parts.append(f"({text})" if isinstance(member, SemUnion) and not member.alias else text)
            return " & ".join(parts)
        if isinstance(sem, SemObject):
            if not sem.properties:
                return "{}"
            members = " ".join(
                f"{_print_key(p.name)}{'?' if p.optional else ''}: {self.print(p.type)};" for p in sem.properties
            )
            return "{ " + members + " }"
        return type(sem).__name__

    def _print_reference(self, sem: SemRef) -> str:
        """
        Print a declaration reference.

        Aliases of primitives, literals, arrays and opaque types print as
        the type they stand for (`type S = string` prints as "string").
        Other aliases print as the innermost alias name, so `type B = A`
        prints as "A" when A names an object type.
        """
        visited: set[str] = set()
        name = sem.name
        while isinstance(sem, SemRef):
            if sem.name in visited:
                return "any"
            visited.add(sem.name)
            name = sem.name
            sem = self._body(sem.name)

        if sem.alias:
            return sem.alias
        if not isinstance(sem, (SemPrimitive, SemLiteral, SemArray, SemOpaque)) or name in self._printing:
            return name
        self._printing.add(name)
        try:
            return self.print(sem)
        finally:
            self._printing.discard(name)

    def flags(self, sem: Sem) -> TypeFlags:
        """Category flags of a semantic type."""
        sem = self.expand(sem)
        if isinstance(sem, SemPrimitive):
            return _PRIMITIVE_FLAGS.get(sem.name, TypeFlags.ANY)
        if isinstance(sem, SemLiteral):
            if isinstance(sem.value, bool):
                return TypeFlags.BOOLEAN_LITERAL
            if isinstance(sem.value, str):
                return TypeFlags.STRING_LITERAL
            return TypeFlags.NUMBER_LITERAL
        if isinstance(sem, SemUnion):
            return TypeFlags.UNION
        if isinstance(sem, SemIntersection):
            return TypeFlags.INTERSECTION
        return TypeFlags.OBJECT


def _literal_primitive(value: str | int | float | bool) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, str):
        return "string"
    return "number"


def _print_literal(value: str | int | float | bool) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _print_key(name: str) -> str:
    if name.isidentifier():
        return name
    return json.dumps(name, ensure_ascii=False)
