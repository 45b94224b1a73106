"""
Analyzer module.

Contains the declaration table and the type-equivalence oracle used to
decide conditional types.
"""

from __future__ import annotations

from .declarations import DeclarationTable
from .oracle import SemanticType, StructuralOracle, TypeFlags, TypeOracle

__all__ = [
    "DeclarationTable",
    "SemanticType",
    "StructuralOracle",
    "TypeFlags",
    "TypeOracle",
]
