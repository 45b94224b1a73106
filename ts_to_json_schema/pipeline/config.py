"""
Configuration for the schema generator pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

DEFAULT_SCHEMA_URI = "http://json-schema.org/draft-07/schema#"


class OutputFormat(str, Enum):
    """How the generated schemas are rendered."""

    DOCUMENT = "document"  # One JSON document with all schemas under "definitions"
    LISTING = "listing"  # Each declaration name followed by its schema


@dataclass
class ConverterConfig:
    """Configuration options for schema generation."""

    # Declarations to skip
    ignore_declarations: list[str] = field(default_factory=list)

    # Order in which to resolve declarations (empty = declaration order)
    order_declarations: list[str] = field(default_factory=list)

    # Fail fast with CyclicDeclarationError instead of recursing without bound
    detect_cycles: bool = True

    # Keep oneOf/anyOf when projecting Pick/Omit through a union
    # (False relabels every projected combinator as allOf)
    preserve_combinator_kind: bool = False

    # Abort on the first failing declaration instead of reporting it and continuing
    fail_fast: bool = False

    # Format used for Date
    date_format: str = "time"

    # Add a $comment with the generating command line
    add_generation_comment: bool = True

    # $schema URI of the generated document ("" to omit)
    schema_uri: str = DEFAULT_SCHEMA_URI

    # JSON indentation
    indent: int = 2

    # Rendering of the result
    output_format: OutputFormat = OutputFormat.DOCUMENT

    @staticmethod
    def from_dict(d: dict) -> ConverterConfig:
        """Create a config from a dictionary."""
        config = ConverterConfig()
        for k, v in d.items():
            if k == "output_format" and isinstance(v, str):
                config.output_format = OutputFormat(v)
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "ignore_declarations": self.ignore_declarations,
            "order_declarations": self.order_declarations,
            "detect_cycles": self.detect_cycles,
            "preserve_combinator_kind": self.preserve_combinator_kind,
            "fail_fast": self.fail_fast,
            "date_format": self.date_format,
            "add_generation_comment": self.add_generation_comment,
            "schema_uri": self.schema_uri,
            "indent": self.indent,
            "output_format": self.output_format.value,
        }
