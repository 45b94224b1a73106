"""
Type alias scanner.

Phase 1 of the pipeline: parse a TypeScript source with tree-sitter,
find every `type Name = ...` declaration and map its right-hand side onto
TypeNode trees, without resolving references or deriving schemas.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import tree_sitter_typescript as ts_typescript
from loguru import logger
from tree_sitter import Language, Parser

from ..errors import TypeSyntaxError
from .doc_comments import is_doc_comment, parse_doc_tags
from .nodes import (
    PRIMITIVE_NAMES,
    ArrayType,
    ConditionalType,
    Declaration,
    IntersectionType,
    KeyOfType,
    LiteralType,
    ObjectType,
    OtherType,
    PrimitiveType,
    PropertySignature,
    TypeNode,
    TypeReference,
    UnionType,
)

TS_LANGUAGE = Language(ts_typescript.language_typescript())

# Type names that denote types without a schema rule
OTHER_TYPE_KEYWORDS = {"any", "unknown", "never", "object", "void", "bigint", "symbol", "unique symbol"}

# Statements wrapping a declaration; doc comments precede the outermost one
DECLARATION_WRAPPERS = {"export_statement", "ambient_declaration"}

# tree-sitter node types with no schema rule -> OtherType kind
UNSUPPORTED_NODES = {
    "tuple_type": "tuple",
    "function_type": "function",
    "constructor_type": "function",
    "lookup_type": "indexed access",
    "type_query": "typeof",
    "template_literal_type": "template literal",
    "this_type": "this",
    "infer_type": "infer",
}

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}


@dataclass
class ParsedSource:
    """Result of scanning a source file."""

    # Declarations without type parameters, in source order
    declarations: list[Declaration] = field(default_factory=list)

    # Declarations with type parameters (recorded, never resolved)
    parameterized: list[Declaration] = field(default_factory=list)


class TypeParser:
    """Maps the type aliases of a TypeScript source onto TypeNode trees."""

    def __init__(self, source: str):
        self.source = source.removeprefix("\ufeff").encode("utf8")
        self._parser = Parser(TS_LANGUAGE)

    def parse(self) -> ParsedSource:
        """
        Parse the source and collect its type alias declarations.

        Returns:
            ParsedSource with plain and parameterized declarations

        Raises:
            TypeSyntaxError: If the source does not parse
        """
        tree = self._parser.parse(self.source)
        root = tree.root_node
        if root.has_error:
            error = self._find_errors(root)[0]
            line, column = error.start_point[0] + 1, error.start_point[1] + 1
            found = "end of input" if error.start_byte >= len(self.source) else self._text(error)[:50]
            reason = f"missing {error.type}" if error.is_missing else "syntax error"
            raise TypeSyntaxError(f"{reason} near '{found}'", line, column)

        result = ParsedSource()
        for node in self._find_nodes(root, "type_alias_declaration"):
            declaration = self._parse_type_alias(node)
            if declaration.is_parameterized:
                logger.debug(f"Recording parameterized declaration {declaration.name}")
                result.parameterized.append(declaration)
            else:
                result.declarations.append(declaration)
        return result

    # -- tree helpers --------------------------------------------------

    def _find_errors(self, node: Any) -> list[Any]:
        """Find all ERROR and missing nodes in the tree."""
        errors = []
        if node.type == "ERROR" or node.is_missing:
            errors.append(node)
        for child in node.children:
            errors.extend(self._find_errors(child))
        return errors

    def _find_nodes(self, node: Any, node_type: str) -> list[Any]:
        """Find all nodes of a given type in the tree, in source order."""
        results = []
        if node.type == node_type:
            results.append(node)
        for child in node.children:
            results.extend(self._find_nodes(child, node_type))
        return results

    def _text(self, node: Any) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf8")

    @staticmethod
    def _location(node: Any) -> str:
        return f"{node.start_point[0] + 1}:{node.start_point[1] + 1}"

    @staticmethod
    def _type_children(node: Any) -> list[Any]:
        return [child for child in node.named_children if child.type != "comment"]

    def _doc_tags(self, node: Any) -> dict[str, str | None]:
        """Tags of the nearest doc comment directly before a node."""
        sibling = node.prev_sibling
        while sibling is not None and (sibling.type == "comment" or sibling.start_byte == sibling.end_byte):
            if sibling.type == "comment":
                text = self._text(sibling)
                if is_doc_comment(text):
                    return parse_doc_tags(text[3:-2])
            sibling = sibling.prev_sibling
        return {}

    # -- declarations --------------------------------------------------

    def _parse_type_alias(self, node: Any) -> Declaration:
        name = self._text(node.child_by_field_name("name"))
        parameters = node.child_by_field_name("type_parameters")
        type_parameters = []
        if parameters is not None:
            for parameter in parameters.named_children:
                if parameter.type == "type_parameter":
                    type_parameters.append(self._text(parameter.child_by_field_name("name")))

        statement = node
        while statement.parent is not None and statement.parent.type in DECLARATION_WRAPPERS:
            statement = statement.parent

        body = self.parse_type(node.child_by_field_name("value"))
        tags = self._doc_tags(statement)
        if tags:
            body.tags = {**body.tags, **tags}

        return Declaration(
            name=name,
            body=body,
            type_parameters=type_parameters,
            source_path=self._location(node),
        )

    # -- types ---------------------------------------------------------

    def parse_type(self, node: Any) -> TypeNode:
        """Map a tree-sitter type node onto a TypeNode."""
        kind = node.type
        location = self._location(node)

        if kind == "predefined_type":
            return self._parse_keyword(self._text(node), location)
        if kind == "type_identifier":
            text = self._text(node)
            if text == "undefined" or text in OTHER_TYPE_KEYWORDS:
                return self._parse_keyword(text, location)
            return TypeReference(name=text, source_path=location)
        if kind == "nested_type_identifier":
            return TypeReference(name="".join(self._text(node).split()), source_path=location)
        if kind == "generic_type":
            return self._parse_generic(node)
        if kind == "literal_type":
            return self._parse_literal(self._type_children(node)[0], location)
        if kind == "object_type":
            return self._parse_object_type(node)
        if kind == "array_type":
            return ArrayType(element=self.parse_type(self._type_children(node)[0]), source_path=location)
        if kind in ("parenthesized_type", "readonly_type"):
            return self.parse_type(self._type_children(node)[0])
        if kind == "union_type":
            return UnionType(types=self._flatten(node, kind), source_path=location)
        if kind == "intersection_type":
            return IntersectionType(types=self._flatten(node, kind), source_path=location)
        if kind == "index_type_query":
            return KeyOfType(target=self.parse_type(self._type_children(node)[0]), source_path=location)
        if kind == "conditional_type":
            return ConditionalType(
                check_type=self.parse_type(node.child_by_field_name("left")),
                extends_type=self.parse_type(node.child_by_field_name("right")),
                true_type=self.parse_type(node.child_by_field_name("consequence")),
                false_type=self.parse_type(node.child_by_field_name("alternative")),
                source_path=location,
            )

        text = " ".join(self._text(node).split())
        return OtherType(kind=UNSUPPORTED_NODES.get(kind, kind), text=text, source_path=location)

    def _parse_keyword(self, text: str, location: str) -> TypeNode:
        if text in PRIMITIVE_NAMES:
            return PrimitiveType(name=text, source_path=location)
        return OtherType(kind=text, text=text, source_path=location)

    def _parse_literal(self, node: Any, location: str) -> TypeNode:
        kind = node.type
        if kind == "string":
            return LiteralType(value=self._string_value(node), source_path=location)
        if kind in ("number", "unary_expression"):
            return LiteralType(value=_parse_number(self._text(node)), source_path=location)
        if kind in ("null", "undefined"):
            return PrimitiveType(name=kind, source_path=location)
        # true / false
        return OtherType(kind=kind, text=kind, source_path=location)

    def _parse_generic(self, node: Any) -> TypeReference:
        name = "".join(self._text(node.child_by_field_name("name")).split())
        arguments = node.child_by_field_name("type_arguments")
        return TypeReference(
            name=name,
            type_args=[self.parse_type(child) for child in self._type_children(arguments)],
            source_path=self._location(node),
        )

    def _flatten(self, node: Any, kind: str) -> list[TypeNode]:
        """Members of a left-nested union or intersection, in source order."""
        types = []
        for child in self._type_children(node):
            if child.type == kind:
                types.extend(self._flatten(child, kind))
            else:
                types.append(self.parse_type(child))
        return types

    def _parse_object_type(self, node: Any) -> TypeNode:
        location = self._location(node)
        members: list[PropertySignature] = []
        for child in node.named_children:
            if child.type == "index_signature" and any(c.type == "mapped_type_clause" for c in child.named_children):
                return OtherType(kind="mapped type", text="mapped type", source_path=location)
            # index, call, construct and method signatures carry no property
            if child.type != "property_signature":
                continue

            member = self._parse_property(child)
            tags = self._doc_tags(child)
            if tags:
                member.type_node.tags = {**member.type_node.tags, **tags}
            members.append(member)
        return ObjectType(members=members, source_path=location)

    def _parse_property(self, node: Any) -> PropertySignature:
        name_node = node.child_by_field_name("name")
        if name_node.type == "string":
            name = self._string_value(name_node)
        elif name_node.type == "number":
            name = str(_parse_number(self._text(name_node)))
        else:
            name = self._text(name_node)

        annotation = node.child_by_field_name("type")
        if annotation is not None:
            type_node = self.parse_type(self._type_children(annotation)[0])
        else:
            type_node = OtherType(kind="any", text="implicit any", source_path=self._location(node))

        return PropertySignature(
            name=name,
            type_node=type_node,
            optional=any(child.type == "?" for child in node.children),
        )

    def _string_value(self, node: Any) -> str:
        parts = []
        for child in node.named_children:
            text = self._text(child)
            if child.type == "escape_sequence":
                parts.append(_unescape(text))
            elif child.type != "comment":
                parts.append(text)
        return "".join(parts)


def _unescape(sequence: str) -> str:
    body = sequence[1:]
    if body.startswith("u{"):
        return chr(int(body[2:-1], 16))
    if body.startswith(("u", "x")) and len(body) > 1:
        return chr(int(body[1:], 16))
    if body.startswith(("\r", "\n", "\u2028", "\u2029")):
        return ""
    return _ESCAPES.get(body, body)


def _parse_number(text: str) -> int | float:
    text = "".join(text.split()).replace("_", "")
    sign = -1 if text.startswith("-") else 1
    text = text.lstrip("+-")
    lowered = text.lower()
    if lowered.startswith("0x"):
        return sign * int(text, 16)
    if lowered.startswith("0b"):
        return sign * int(text, 2)
    if lowered.startswith("0o"):
        return sign * int(text, 8)
    value = float(text)
    return sign * (int(value) if value.is_integer() else value)


def parse_source(source: str) -> ParsedSource:
    """Parse the type aliases of a TypeScript source text."""
    return TypeParser(source).parse()
