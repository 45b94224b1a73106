"""
Pick/Omit projections over already-derived schemas.

Both operators work on the schema produced for their first argument, so
they must see through combinators: an intersection or union of objects
is projected member by member.
"""

from __future__ import annotations

from collections.abc import Callable

from ..errors import UnprojectableSchemaError
from .nodes import CombinatorSchema, ObjectSchema, Schema


def project_pick(schema: Schema, keys: list[str], preserve_combinator_kind: bool = False) -> Schema:
    """
    Keep only `keys` in an object schema, distributing over combinators.

    Args:
        schema: Derived schema of the picked type
        keys: Property names to keep, in output order
        preserve_combinator_kind: Keep oneOf/anyOf as-is instead of
            relabelling projected combinators as allOf

    Returns:
        The projected schema
    """

    def pick_object(obj: ObjectSchema) -> ObjectSchema:
        properties = {k: obj.properties[k] for k in keys if k in obj.properties}
        required = None if obj.required is None else [r for r in obj.required if r in keys]
        return ObjectSchema(properties=properties, required=required, tags=dict(obj.tags))

    return _project(schema, pick_object, "Pick", preserve_combinator_kind)


def project_omit(schema: Schema, keys: list[str], preserve_combinator_kind: bool = False) -> Schema:
    """
    Drop `keys` from an object schema, distributing over combinators.

    Args:
        schema: Derived schema of the source type
        keys: Property names to remove
        preserve_combinator_kind: Keep oneOf/anyOf as-is instead of
            relabelling projected combinators as allOf

    Returns:
        The projected schema
    """

    def omit_object(obj: ObjectSchema) -> ObjectSchema:
        properties = {k: v for k, v in obj.properties.items() if k not in keys}
        required = None if obj.required is None else [r for r in obj.required if r not in keys]
        return ObjectSchema(properties=properties, required=required, tags=dict(obj.tags))

    return _project(schema, omit_object, "Omit", preserve_combinator_kind)


def _project(
    schema: Schema,
    project_object: Callable[[ObjectSchema], ObjectSchema],
    operation: str,
    preserve_combinator_kind: bool,
) -> Schema:
    if isinstance(schema, ObjectSchema):
        return project_object(schema)

    if isinstance(schema, CombinatorSchema):
        members = [_project(m, project_object, operation, preserve_combinator_kind) for m in schema.members]
        # Projected combinators are always emitted as allOf unless asked otherwise
        keyword = schema.keyword if preserve_combinator_kind else "allOf"
        return CombinatorSchema(keyword=keyword, members=members, tags=dict(schema.tags))

    raise UnprojectableSchemaError(operation, schema.kind)
