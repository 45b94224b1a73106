"""
Resolver module.

Contains the schema resolution engine and the named type operators.
"""

from __future__ import annotations

from .engine import SchemaResolver
from .operators import OPERATORS

__all__ = [
    "SchemaResolver",
    "OPERATORS",
]
