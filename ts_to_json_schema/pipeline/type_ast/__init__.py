"""
Type AST module.

Contains the type expression node definitions and the declaration parser
for TypeScript sources.
"""

from __future__ import annotations

from .nodes import (
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
from .doc_comments import parse_doc_tags
from .parser import ParsedSource, TypeParser, parse_source

__all__ = [
    "TypeNode",
    "PrimitiveType",
    "ObjectType",
    "PropertySignature",
    "ArrayType",
    "TypeReference",
    "LiteralType",
    "UnionType",
    "IntersectionType",
    "KeyOfType",
    "ConditionalType",
    "OtherType",
    "Declaration",
    "ParsedSource",
    "TypeParser",
    "parse_source",
    "parse_doc_tags",
]
