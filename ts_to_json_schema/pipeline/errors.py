"""
Error types raised while scanning declarations and deriving schemas.

Every failure is terminal for the declaration being resolved: the
resolver performs no recovery, the generator decides whether to continue
with the remaining declarations.
"""

from __future__ import annotations


class SchemaConversionError(Exception):
    """Base class for all conversion failures."""

    pass


class TypeSyntaxError(SchemaConversionError):
    """Raised when the declaration source cannot be parsed."""

    def __init__(self, message: str, line: int = 0, column: int = 0):
        self.line = line
        self.column = column
        super().__init__(f"{message} (line {line}, column {column})")


class UnknownDeclarationError(SchemaConversionError):
    """A named reference points to no declaration."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'"{name}" not found')


class UnsupportedTypeNodeError(SchemaConversionError):
    """A type expression has no derivation rule."""

    def __init__(self, description: str):
        self.description = description
        super().__init__(f"unsupported node: {description}")


class UnsupportedGenericReferenceError(SchemaConversionError):
    """A reference carries type arguments but names no known operator."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'generic reference "{name}" is not a supported operator')


class KeyOfNonObjectError(SchemaConversionError):
    """The operand of keyof does not derive to an object schema."""

    def __init__(self, description: str = ""):
        self.description = description
        super().__init__(f"keyof operand is not an object type: {description}")


class AmbiguousConditionalError(SchemaConversionError):
    """Both branches of a conditional type denote the same type."""

    def __init__(self, description: str = ""):
        self.description = description
        super().__init__(f"bad conditional type, trueType equals falseType: {description}")


class UnprojectableSchemaError(SchemaConversionError):
    """Pick/Omit/Required applied to a schema that is neither object nor combinator."""

    def __init__(self, operation: str, schema_kind: str):
        self.operation = operation
        self.schema_kind = schema_kind
        super().__init__(f"cannot apply {operation} to a {schema_kind} schema")


class CyclicDeclarationError(SchemaConversionError):
    """A declaration refers back to itself before producing a schema."""

    def __init__(self, chain: list[str]):
        self.chain = list(chain)
        super().__init__("cyclic declaration: " + " -> ".join(self.chain))


class InvalidKeySetError(SchemaConversionError):
    """A key argument of Pick/Omit/Record is not a union of string literals."""

    def __init__(self, operator: str, schema_kind: str):
        self.operator = operator
        self.schema_kind = schema_kind
        super().__init__(f"{operator} keys must be string literals, got a {schema_kind} schema")


class OperatorArityError(SchemaConversionError):
    """A type operator received the wrong number of type arguments."""

    def __init__(self, operator: str, expected: int, actual: int):
        self.operator = operator
        self.expected = expected
        self.actual = actual
        super().__init__(f"{operator} expects {expected} type argument(s), got {actual}")
