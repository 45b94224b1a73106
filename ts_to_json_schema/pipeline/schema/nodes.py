"""
JSON Schema node definitions.

The derived schema is a tree of these shapes. Doc-comment tags live in a
side-table on every node and are merged over the structural fields when
the schema is rendered, so a tag wins even against a structural key of
the same name. A tag without text is a "no value" marker and removes the
key altogether.

Nodes are treated as immutable: every transform builds a new node.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass
class Schema:
    """Base class for all schema nodes."""

    # Doc-comment tags merged over the structural fields
    tags: dict[str, str | None] = field(default_factory=dict, kw_only=True)

    @property
    def kind(self) -> str:
        return "schema"

    def with_tags(self, tags: dict[str, str | None]) -> Schema:
        """Return a copy with `tags` merged over the existing ones (last writer wins)."""
        if not tags:
            return self
        return replace(self, tags={**self.tags, **tags})

    def structure(self) -> dict[str, Any]:
        """Structural JSON Schema fields, without tags."""
        return {}

    def to_dict(self) -> dict[str, Any]:
        """Render as a JSON-serializable JSON Schema dictionary."""
        rendered = self.structure()
        for key, value in self.tags.items():
            # A tag without text removes the key
            if value is None:
                rendered.pop(key, None)
            else:
                rendered[key] = value
        return rendered


@dataclass
class TypeSchema(Schema):
    """{type: string|number|boolean|null} with an optional format."""

    type: str = "string"
    format: str | None = None

    @property
    def kind(self) -> str:
        return self.type

    def structure(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {"type": self.type}
        if self.format is not None:
            rendered["format"] = self.format
        return rendered


@dataclass
class ObjectSchema(Schema):
    """{type: object, properties, required}.

    `required` lists property names in declaration order; None means the
    field is omitted altogether (every property optional).
    """

    properties: dict[str, Schema] = field(default_factory=dict)
    required: list[str] | None = field(default_factory=list)

    @property
    def kind(self) -> str:
        return "object"

    def structure(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {
            "type": "object",
            "properties": {name: prop.to_dict() for name, prop in self.properties.items()},
        }
        if self.required is not None:
            rendered["required"] = list(self.required)
        return rendered


@dataclass
class ArraySchema(Schema):
    """{type: array, items}."""

    items: Schema | None = None

    @property
    def kind(self) -> str:
        return "array"

    def structure(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {"type": "array"}
        if self.items is not None:
            rendered["items"] = self.items.to_dict()
        return rendered


@dataclass
class EnumSchema(Schema):
    """{enum: [...]}; never carries a type."""

    values: list[str | int | float] = field(default_factory=list)

    @property
    def kind(self) -> str:
        return "enum"

    def string_values(self) -> list[str] | None:
        """The enum values if they are all strings, else None."""
        if all(isinstance(v, str) for v in self.values):
            return list(self.values)
        return None

    def structure(self) -> dict[str, Any]:
        return {"enum": list(self.values)}


@dataclass
class CombinatorSchema(Schema):
    """{oneOf|allOf|anyOf: [...]}; never carries a type."""

    keyword: str = "oneOf"
    members: list[Schema] = field(default_factory=list)

    @property
    def kind(self) -> str:
        return self.keyword

    def structure(self) -> dict[str, Any]:
        return {self.keyword: [member.to_dict() for member in self.members]}
