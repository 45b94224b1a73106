"""TypeScript to JSON Schema

A Python package for deriving JSON Schema documents from TypeScript
type alias declarations. Supports primitive, object, array, literal,
union, intersection, keyof and conditional types, plus the common
utility operators (Partial, Pick, Omit, Record, ...).
"""

__version__ = "0.1.0"

from . import logging_config  # noqa: F401
from .pipeline import (
    ConverterConfig,
    DeclarationTable,
    GenerationResult,
    OutputFormat,
    SchemaConversionError,
    SchemaGenerator,
    SchemaResolver,
    StructuralOracle,
    TypeOracle,
)

__all__ = [
    "SchemaGenerator",
    "GenerationResult",
    "SchemaResolver",
    "DeclarationTable",
    "StructuralOracle",
    "TypeOracle",
    "ConverterConfig",
    "OutputFormat",
    "SchemaConversionError",
]
