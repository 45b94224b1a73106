"""
Pipeline generator.

Runs the phases end to end: parse the source, build the declaration
table, resolve every declaration, render the result.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from loguru import logger

from .analyzer.declarations import DeclarationTable
from .analyzer.oracle import StructuralOracle, TypeOracle
from .config import ConverterConfig, OutputFormat
from .errors import SchemaConversionError
from .resolver.engine import SchemaResolver
from .schema.nodes import Schema
from .type_ast.parser import parse_source

DEFAULT_GENERATION_COMMENT = "Generated by ts_to_json_schema"


@dataclass
class GenerationResult:
    """Schemas and failures of one generation run."""

    schemas: dict[str, Schema] = field(default_factory=dict)
    errors: dict[str, Exception] = field(default_factory=dict)

    # Declarations skipped because they take type parameters
    parameterized: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class SchemaGenerator:
    """Generates JSON Schemas for the type aliases of a TypeScript source."""

    def __init__(
        self,
        source: str,
        config: ConverterConfig | None = None,
        names: list[str] | None = None,
        oracle: TypeOracle | None = None,
        generation_comment: str = DEFAULT_GENERATION_COMMENT,
    ):
        """
        Initialize the generator.

        Args:
            source: TypeScript source text
            config: Converter configuration
            names: Restrict generation to these declarations (None = all)
            oracle: Type oracle; defaults to a StructuralOracle over the
                parsed declarations
            generation_comment: Text of the $comment added to documents
        """
        self.source = source
        self.config = config or ConverterConfig()
        self.names = names
        self.generation_comment = generation_comment

        self.declarations = DeclarationTable.from_parsed(parse_source(source))
        self.oracle = oracle if oracle is not None else StructuralOracle(self.declarations)
        self.resolver = SchemaResolver(self.declarations, self.oracle, self.config)

    def declaration_order(self) -> list[str]:
        """Names to resolve, honoring order_declarations and ignore_declarations."""
        if self.names is not None:
            candidates = list(self.names)
        else:
            ordered = [n for n in self.config.order_declarations if n in self.declarations]
            candidates = ordered + [n for n in self.declarations if n not in ordered]
        return [n for n in candidates if n not in self.config.ignore_declarations]

    def generate(self) -> GenerationResult:
        """
        Resolve every selected declaration.

        A failing declaration is recorded in the result and the remaining
        ones are still resolved, unless fail_fast is set.

        Returns:
            GenerationResult with schemas and per-declaration errors
        """
        result = GenerationResult(parameterized=list(self.declarations.parameterized))
        for name in result.parameterized:
            logger.info(f"Skipping parameterized declaration {name}")

        for name in self.declaration_order():
            try:
                result.schemas[name] = self.resolver.resolve(name)
            except (SchemaConversionError, RecursionError) as e:
                if self.config.fail_fast:
                    raise
                logger.error(f"Failed to resolve {name}: {e}")
                result.errors[name] = e

        return result

    def render(self, result: GenerationResult) -> str:
        """Serialize a generation result according to the output format."""
        indent = self.config.indent
        if self.config.output_format == OutputFormat.LISTING:
            blocks = [f"{name}\n{json.dumps(schema.to_dict(), indent=indent)}" for name, schema in result.schemas.items()]
            return "\n".join(blocks) + "\n" if blocks else ""

        document: dict = {}
        if self.config.schema_uri:
            document["$schema"] = self.config.schema_uri
        if self.config.add_generation_comment and self.generation_comment:
            document["$comment"] = self.generation_comment
        document["definitions"] = {name: schema.to_dict() for name, schema in result.schemas.items()}
        return json.dumps(document, indent=indent) + "\n"

    def generate_text(self) -> str:
        """Generate and render in one step."""
        return self.render(self.generate())
