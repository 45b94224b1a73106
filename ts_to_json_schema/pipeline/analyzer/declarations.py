"""
Declaration table.

Maps declaration names to their right-hand type expressions. Built once
from the parsed source and only read during resolution.
"""

from __future__ import annotations

from collections.abc import Iterator

from ..type_ast.nodes import Declaration, TypeNode
from ..type_ast.parser import ParsedSource


class DeclarationTable:
    """Name -> type expression lookup for non-parameterized declarations."""

    def __init__(self, declarations: list[Declaration] | None = None, parameterized: list[Declaration] | None = None):
        """
        Initialize the table.

        Args:
            declarations: Declarations without type parameters; a later
                declaration of the same name replaces an earlier one
            parameterized: Declarations with type parameters, kept for
                reporting only
        """
        self._declarations: dict[str, Declaration] = {}
        self.parameterized: dict[str, Declaration] = {}
        for declaration in declarations or []:
            self._declarations[declaration.name] = declaration
        for declaration in parameterized or []:
            self.parameterized[declaration.name] = declaration

    @classmethod
    def from_parsed(cls, parsed: ParsedSource) -> DeclarationTable:
        return cls(parsed.declarations, parsed.parameterized)

    @classmethod
    def from_types(cls, types: dict[str, TypeNode]) -> DeclarationTable:
        """Build a table directly from name -> type expression pairs."""
        return cls([Declaration(name=name, body=body) for name, body in types.items()])

    def get(self, name: str) -> TypeNode | None:
        declaration = self._declarations.get(name)
        return declaration.body if declaration else None

    def declaration(self, name: str) -> Declaration | None:
        return self._declarations.get(name)

    def names(self) -> list[str]:
        return list(self._declarations)

    def __contains__(self, name: object) -> bool:
        return name in self._declarations

    def __iter__(self) -> Iterator[str]:
        return iter(self._declarations)

    def __len__(self) -> int:
        return len(self._declarations)
