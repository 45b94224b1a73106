"""
Schema resolver.

Phase 2 of the pipeline: derive a JSON Schema for every declaration.
`resolve` memoizes named declarations in a per-run cache; `derive` maps
a single type expression to a schema, recursing into its children.
"""

from __future__ import annotations

from loguru import logger

from ..analyzer.declarations import DeclarationTable
from ..analyzer.oracle import StructuralOracle, TypeOracle
from ..config import ConverterConfig
from ..errors import (
    AmbiguousConditionalError,
    CyclicDeclarationError,
    KeyOfNonObjectError,
    UnknownDeclarationError,
    UnsupportedGenericReferenceError,
    UnsupportedTypeNodeError,
)
from ..schema.nodes import ArraySchema, CombinatorSchema, EnumSchema, ObjectSchema, Schema, TypeSchema
from ..type_ast.nodes import (
    ArrayType,
    ConditionalType,
    IntersectionType,
    KeyOfType,
    LiteralType,
    ObjectType,
    PrimitiveType,
    TypeNode,
    TypeReference,
    UnionType,
)
from .operators import OPERATORS


class SchemaResolver:
    """Derives JSON Schemas from type expressions."""

    def __init__(
        self,
        declarations: DeclarationTable,
        oracle: TypeOracle | None = None,
        config: ConverterConfig | None = None,
    ):
        """
        Initialize the resolver.

        Args:
            declarations: Declaration table of the run (read-only)
            oracle: Semantic type oracle for conditional types; defaults
                to a StructuralOracle over the same declarations
            config: Converter configuration
        """
        self.declarations = declarations
        self.oracle = oracle if oracle is not None else StructuralOracle(declarations)
        self.config = config or ConverterConfig()

        # Resolved schemas by declaration name, written once per name
        self._cache: dict[str, Schema] = {}

        # Declarations currently being derived (for cycle detection)
        self._in_progress: list[str] = []

        # Number of derive() calls, for diagnostics
        self.derivations = 0

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def cached(self, name: str) -> Schema | None:
        """Return the cached schema of a declaration without resolving it."""
        return self._cache.get(name)

    def resolve(self, name: str) -> Schema:
        """
        Resolve a declaration to its schema.

        Args:
            name: Declaration name

        Returns:
            The cached schema if the name was resolved before, else the
            freshly derived one (which is then cached)
        """
        if name in self._cache:
            return self._cache[name]

        body = self.declarations.get(name)
        if body is None:
            raise UnknownDeclarationError(name)

        if self.config.detect_cycles:
            if name in self._in_progress:
                start = self._in_progress.index(name)
                raise CyclicDeclarationError(self._in_progress[start:] + [name])
            self._in_progress.append(name)
            try:
                schema = self.derive(body)
            finally:
                self._in_progress.pop()
        else:
            schema = self.derive(body)

        logger.debug(f"Resolved {name} -> {schema.kind}")
        self._cache[name] = schema
        return schema

    def derive(self, node: TypeNode) -> Schema:
        """
        Derive the schema of a type expression.

        The node's doc-comment tags are merged last, so they override any
        structural field of the same name.
        """
        self.derivations += 1

        if isinstance(node, PrimitiveType):
            schema: Schema = TypeSchema(type="null" if node.name in ("null", "undefined") else node.name)
        elif isinstance(node, ObjectType):
            schema = self._derive_object(node)
        elif isinstance(node, ArrayType):
            schema = ArraySchema(items=self.derive(node.element))
        elif isinstance(node, LiteralType):
            schema = EnumSchema(values=[node.value])
        elif isinstance(node, UnionType):
            schema = self._derive_union(node)
        elif isinstance(node, IntersectionType):
            schema = CombinatorSchema(keyword="allOf", members=[self.derive(t) for t in node.types])
        elif isinstance(node, KeyOfType):
            schema = self._derive_keyof(node)
        elif isinstance(node, ConditionalType):
            schema = self._derive_conditional(node)
        elif isinstance(node, TypeReference):
            schema = self._derive_reference(node)
        else:
            raise UnsupportedTypeNodeError(node.describe())

        return schema.with_tags(node.tags)

    def _derive_object(self, node: ObjectType) -> ObjectSchema:
        properties: dict[str, Schema] = {}
        optional: dict[str, bool] = {}
        for member in node.members:
            properties[member.name] = self.derive(member.type_node)
            optional[member.name] = member.optional
        required = [name for name in properties if not optional[name]]
        return ObjectSchema(properties=properties, required=required)

    def _derive_union(self, node: UnionType) -> Schema:
        if all(isinstance(t, LiteralType) for t in node.types):
            values = [t.value for t in node.types]
            if all(isinstance(v, str) for v in values):
                return EnumSchema(values=values)
            if all(isinstance(v, (int, float)) for v in values):
                return EnumSchema(values=values)
        return CombinatorSchema(keyword="oneOf", members=[self.derive(t) for t in node.types])

    def _derive_keyof(self, node: KeyOfType) -> EnumSchema:
        target = self.derive(node.target)
        if not isinstance(target, ObjectSchema):
            raise KeyOfNonObjectError(node.target.describe())
        return EnumSchema(values=list(target.properties))

    def _derive_conditional(self, node: ConditionalType) -> Schema:
        resolved_type = self.oracle.type_of(node)
        true_type = self.oracle.type_of(node.true_type)
        false_type = self.oracle.type_of(node.false_type)
        if self.oracle.equal(true_type, false_type):
            raise AmbiguousConditionalError(node.describe())

        if self.oracle.equal(resolved_type, true_type):
            logger.debug(f"Conditional {node.describe()} selects the true branch ({true_type})")
            return self.derive(node.true_type)
        logger.debug(f"Conditional {node.describe()} selects the false branch ({false_type})")
        return self.derive(node.false_type)

    def _derive_reference(self, node: TypeReference) -> Schema:
        operator = OPERATORS.get(node.name)
        if operator is not None:
            return operator(self, node)
        if node.type_args:
            raise UnsupportedGenericReferenceError(node.name)
        return self.resolve(node.name)
