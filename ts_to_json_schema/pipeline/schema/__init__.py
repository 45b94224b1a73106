"""
Schema module.

Contains the JSON Schema node definitions and the Pick/Omit projections.
"""

from __future__ import annotations

from .nodes import (
    ArraySchema,
    CombinatorSchema,
    EnumSchema,
    ObjectSchema,
    Schema,
    TypeSchema,
)
from .projection import project_omit, project_pick

__all__ = [
    "Schema",
    "TypeSchema",
    "ObjectSchema",
    "ArraySchema",
    "EnumSchema",
    "CombinatorSchema",
    "project_pick",
    "project_omit",
]
