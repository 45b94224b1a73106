"""
Pipeline - TypeScript type aliases to JSON Schema.

This module provides a multi-phase architecture for deriving JSON
Schemas from TypeScript type declarations:

1. Phase 1 (Parser): Scan the source for type aliases into a Type AST
2. Phase 2 (Resolver): Derive a schema per declaration, memoized per run,
   consulting the type oracle for conditional types
3. Phase 3 (Renderer): Serialize the schemas as one JSON document or a listing
"""

from __future__ import annotations

from .analyzer import DeclarationTable, SemanticType, StructuralOracle, TypeOracle
from .config import ConverterConfig, OutputFormat
from .errors import SchemaConversionError
from .generator import GenerationResult, SchemaGenerator
from .resolver import SchemaResolver

__all__ = [
    "SchemaGenerator",
    "GenerationResult",
    "SchemaResolver",
    "DeclarationTable",
    "SemanticType",
    "StructuralOracle",
    "TypeOracle",
    "ConverterConfig",
    "OutputFormat",
    "SchemaConversionError",
]
