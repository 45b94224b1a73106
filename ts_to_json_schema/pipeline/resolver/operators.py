"""
Type operators recognized by name.

Each operator derives its type arguments first and then transforms the
resulting schemas. Exclude and Extract are not set
operations: Exclude<T, U> is T and Extract<T, U> is U.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from typing import TYPE_CHECKING

from ..errors import InvalidKeySetError, OperatorArityError, UnprojectableSchemaError
from ..schema.nodes import ArraySchema, EnumSchema, ObjectSchema, Schema, TypeSchema
from ..schema.projection import project_omit, project_pick
from ..type_ast.nodes import TypeNode, TypeReference

if TYPE_CHECKING:
    from .engine import SchemaResolver

Operator = Callable[["SchemaResolver", TypeReference], Schema]


def _args(node: TypeReference, count: int) -> list[TypeNode]:
    if len(node.type_args) != count:
        raise OperatorArityError(node.name, count, len(node.type_args))
    return node.type_args


def _string_keys(resolver: SchemaResolver, operator: str, node: TypeNode) -> list[str]:
    keys = resolver.derive(node)
    values = keys.string_values() if isinstance(keys, EnumSchema) else None
    if values is None:
        raise InvalidKeySetError(operator, keys.kind)
    return values


def array_operator(resolver: SchemaResolver, node: TypeReference) -> Schema:
    (element,) = _args(node, 1)
    return ArraySchema(items=resolver.derive(element))


def partial_operator(resolver: SchemaResolver, node: TypeReference) -> Schema:
    (target,) = _args(node, 1)
    schema = resolver.derive(target)
    if isinstance(schema, ObjectSchema):
        return replace(schema, required=None)
    return schema


def required_operator(resolver: SchemaResolver, node: TypeReference) -> Schema:
    (target,) = _args(node, 1)
    schema = resolver.derive(target)
    if not isinstance(schema, ObjectSchema):
        raise UnprojectableSchemaError("Required", schema.kind)
    return replace(schema, required=list(schema.properties))


def readonly_operator(resolver: SchemaResolver, node: TypeReference) -> Schema:
    (target,) = _args(node, 1)
    return resolver.derive(target)


def pick_operator(resolver: SchemaResolver, node: TypeReference) -> Schema:
    target, keys = _args(node, 2)
    schema = resolver.derive(target)
    return project_pick(
        schema,
        _string_keys(resolver, "Pick", keys),
        preserve_combinator_kind=resolver.config.preserve_combinator_kind,
    )


def omit_operator(resolver: SchemaResolver, node: TypeReference) -> Schema:
    target, keys = _args(node, 2)
    schema = resolver.derive(target)
    return project_omit(
        schema,
        _string_keys(resolver, "Omit", keys),
        preserve_combinator_kind=resolver.config.preserve_combinator_kind,
    )


def exclude_operator(resolver: SchemaResolver, node: TypeReference) -> Schema:
    source, _excluded = _args(node, 2)
    return resolver.derive(source)


def extract_operator(resolver: SchemaResolver, node: TypeReference) -> Schema:
    _source, extracted = _args(node, 2)
    return resolver.derive(extracted)


def record_operator(resolver: SchemaResolver, node: TypeReference) -> Schema:
    keys, value = _args(node, 2)
    # Repeated keys ("a" | "a") collapse to one property, at its first position
    record_keys = list(dict.fromkeys(_string_keys(resolver, "Record", keys)))
    value_schema = resolver.derive(value)
    return ObjectSchema(
        properties={key: replace(value_schema) for key in record_keys},
        required=record_keys,
    )


def date_operator(resolver: SchemaResolver, node: TypeReference) -> Schema:
    return TypeSchema(type="string", format=resolver.config.date_format)


def regexp_operator(resolver: SchemaResolver, node: TypeReference) -> Schema:
    return TypeSchema(type="string", format="regex")


OPERATORS: dict[str, Operator] = {
    "Array": array_operator,
    "Partial": partial_operator,
    "Required": required_operator,
    "Readonly": readonly_operator,
    "Pick": pick_operator,
    "Record": record_operator,
    "Exclude": exclude_operator,
    "Extract": extract_operator,
    "Omit": omit_operator,
    "Date": date_operator,
    "RegExp": regexp_operator,
}
