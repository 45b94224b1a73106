"""
Tests for the schema resolver: dispatch over type expressions, caching
and failure modes.
"""

from __future__ import annotations

import pytest

from ts_to_json_schema.pipeline.analyzer.declarations import DeclarationTable
from ts_to_json_schema.pipeline.config import ConverterConfig
from ts_to_json_schema.pipeline.errors import (
    CyclicDeclarationError,
    KeyOfNonObjectError,
    UnknownDeclarationError,
    UnsupportedGenericReferenceError,
    UnsupportedTypeNodeError,
)
from ts_to_json_schema.pipeline.resolver.engine import SchemaResolver
from ts_to_json_schema.pipeline.type_ast.nodes import (
    ArrayType,
    LiteralType,
    ObjectType,
    OtherType,
    PrimitiveType,
    PropertySignature,
    TypeReference,
    UnionType,
)
from ts_to_json_schema.pipeline.type_ast.parser import parse_source


def resolver_for(source: str, **config) -> SchemaResolver:
    table = DeclarationTable.from_parsed(parse_source(source))
    return SchemaResolver(table, config=ConverterConfig.from_dict(config))


def resolve(source: str, name: str, **config) -> dict:
    return resolver_for(source, **config).resolve(name).to_dict()


class TestPrimitives:
    @pytest.mark.parametrize("name", ["string", "number", "boolean"])
    def test_keyword(self, name):
        assert resolve(f"type A = {name};", "A") == {"type": name}

    @pytest.mark.parametrize("name", ["null", "undefined"])
    def test_null_and_undefined(self, name):
        assert resolve(f"type A = {name};", "A") == {"type": "null"}


class TestObjects:
    def test_required_and_optional_members(self):
        schema = resolve("type A = { a: string, b?: number };", "A")
        assert schema == {
            "type": "object",
            "properties": {"a": {"type": "string"}, "b": {"type": "number"}},
            "required": ["a"],
        }

    def test_required_keeps_declaration_order(self):
        schema = resolve("type A = { z: string; m?: string; a: number; };", "A")
        assert list(schema["properties"]) == ["z", "m", "a"]
        assert schema["required"] == ["z", "a"]

    def test_empty_object(self):
        assert resolve("type A = {};", "A") == {"type": "object", "properties": {}, "required": []}

    def test_duplicate_member_is_listed_once(self):
        schema = resolve("type A = { a: string; a: number };", "A")
        assert schema["properties"] == {"a": {"type": "number"}}
        assert schema["required"] == ["a"]

    def test_nested_object(self):
        schema = resolve("type A = { inner: { x: boolean } };", "A")
        assert schema["properties"]["inner"] == {
            "type": "object",
            "properties": {"x": {"type": "boolean"}},
            "required": ["x"],
        }


class TestArrays:
    def test_array_syntax(self):
        assert resolve("type A = string[];", "A") == {"type": "array", "items": {"type": "string"}}

    def test_nested_array(self):
        assert resolve("type A = number[][];", "A") == {
            "type": "array",
            "items": {"type": "array", "items": {"type": "number"}},
        }

    def test_array_of_union(self):
        assert resolve("type A = (string | number)[];", "A") == {
            "type": "array",
            "items": {"oneOf": [{"type": "string"}, {"type": "number"}]},
        }


class TestLiteralsAndUnions:
    def test_string_literal(self):
        assert resolve('type A = "x";', "A") == {"enum": ["x"]}

    def test_number_literal(self):
        assert resolve("type A = 42;", "A") == {"enum": [42]}

    def test_string_literal_union(self):
        assert resolve('type A = "a" | "b";', "A") == {"enum": ["a", "b"]}

    def test_number_literal_union(self):
        assert resolve("type A = 1 | 2 | 3.5;", "A") == {"enum": [1, 2, 3.5]}

    def test_mixed_literal_union_is_one_of(self):
        assert resolve('type A = "a" | 1;', "A") == {"oneOf": [{"enum": ["a"]}, {"enum": [1]}]}

    def test_union_with_non_literal_is_one_of(self):
        assert resolve('type A = "a" | number;', "A") == {"oneOf": [{"enum": ["a"]}, {"type": "number"}]}

    def test_nullable(self):
        assert resolve("type A = string | null;", "A") == {"oneOf": [{"type": "string"}, {"type": "null"}]}

    def test_enum_never_carries_type(self):
        assert "type" not in resolve('type A = "a" | "b";', "A")


class TestIntersections:
    def test_all_of(self):
        schema = resolve("type A = { a: string } & { b: number };", "A")
        assert schema == {
            "allOf": [
                {"type": "object", "properties": {"a": {"type": "string"}}, "required": ["a"]},
                {"type": "object", "properties": {"b": {"type": "number"}}, "required": ["b"]},
            ]
        }


class TestKeyOf:
    def test_keys_of_object(self):
        source = "type T = { a: string; b?: number }; type K = keyof T;"
        assert resolve(source, "K") == {"enum": ["a", "b"]}

    def test_keys_of_non_object(self):
        with pytest.raises(KeyOfNonObjectError):
            resolve("type T = string; type K = keyof T;", "K")


class TestReferences:
    def test_reference_resolves_declaration(self):
        source = "type Name = string; type Person = { name: Name };"
        assert resolve(source, "Person")["properties"]["name"] == {"type": "string"}

    def test_forward_reference(self):
        source = "type Person = { name: Name }; type Name = string;"
        assert resolve(source, "Person")["properties"]["name"] == {"type": "string"}

    def test_unknown_declaration(self):
        with pytest.raises(UnknownDeclarationError) as excinfo:
            resolver_for("type A = string;").resolve("Missing")
        assert excinfo.value.name == "Missing"

    def test_reference_to_unknown_declaration(self):
        with pytest.raises(UnknownDeclarationError):
            resolve("type A = { b: B };", "A")

    def test_unknown_generic_reference(self):
        with pytest.raises(UnsupportedGenericReferenceError) as excinfo:
            resolve("type A = Promise<string>;", "A")
        assert excinfo.value.name == "Promise"

    def test_parameterized_declarations_are_not_resolvable(self):
        with pytest.raises(UnknownDeclarationError):
            resolve("type Box<T> = { value: T }; type A = Box;", "A")

    @pytest.mark.parametrize("keyword", ["any", "unknown", "never", "true"])
    def test_unsupported_keyword(self, keyword):
        with pytest.raises(UnsupportedTypeNodeError):
            resolve(f"type A = {keyword};", "A")

    def test_unsupported_tuple(self):
        with pytest.raises(UnsupportedTypeNodeError) as excinfo:
            resolve("type A = [string, number];", "A")
        assert "tuple" in excinfo.value.description


class TestCache:
    def test_resolve_is_idempotent_and_cached(self):
        resolver = resolver_for("type Name = string; type A = { a: Name; b: Name[] };")
        first = resolver.resolve("A")
        derivations = resolver.derivations

        second = resolver.resolve("A")

        assert second is first
        assert second.to_dict() == first.to_dict()
        assert resolver.derivations == derivations

    def test_repeated_reference_derives_once(self):
        resolver = resolver_for("type Name = string; type A = { a: Name; b: Name; c: Name };")
        resolver.resolve("A")
        # A's object + three references + one derivation of Name's body
        assert resolver.derivations == 5
        assert resolver.cache_size == 2
        assert resolver.cached("Name").to_dict() == {"type": "string"}

    def test_cache_entry_written_after_resolution(self):
        resolver = resolver_for("type A = string;")
        assert resolver.cached("A") is None
        resolver.resolve("A")
        assert resolver.cached("A") is not None

    def test_failed_resolution_is_not_cached(self):
        resolver = resolver_for("type A = { b: Missing };")
        with pytest.raises(UnknownDeclarationError):
            resolver.resolve("A")
        assert resolver.cached("A") is None
        assert resolver.cache_size == 0


class TestCycles:
    def test_direct_self_reference(self):
        with pytest.raises(CyclicDeclarationError) as excinfo:
            resolve("type A = A;", "A")
        assert excinfo.value.chain == ["A", "A"]

    def test_self_reference_through_structure(self):
        with pytest.raises(CyclicDeclarationError) as excinfo:
            resolve("type Tree = { children: Tree[] };", "Tree")
        assert excinfo.value.chain == ["Tree", "Tree"]

    def test_mutual_reference(self):
        with pytest.raises(CyclicDeclarationError) as excinfo:
            resolve("type A = { b: B }; type B = { a: A };", "A")
        assert excinfo.value.chain == ["A", "B", "A"]

    def test_cycle_detection_disabled_recurses(self):
        with pytest.raises(RecursionError):
            resolve("type A = { a: A };", "A", detect_cycles=False)

    def test_resolver_usable_after_cycle(self):
        resolver = resolver_for("type A = A; type B = string;")
        with pytest.raises(CyclicDeclarationError):
            resolver.resolve("A")
        assert resolver.resolve("B").to_dict() == {"type": "string"}


class TestTags:
    def test_property_tags_are_merged(self):
        source = """
        type A = {
          /** @minimum 0 @maximum 10 */
          n: number;
        };
        """
        assert resolve(source, "A")["properties"]["n"] == {"type": "number", "minimum": "0", "maximum": "10"}

    def test_multiline_tags(self):
        source = """
        type A = {
          /**
           * A count.
           * @minimum 0
           * @maximum 10
           */
          n: number;
        };
        """
        assert resolve(source, "A")["properties"]["n"] == {"type": "number", "minimum": "0", "maximum": "10"}

    def test_alias_tags(self):
        source = """
        /** @description A user name */
        type Name = string;
        """
        assert resolve(source, "Name") == {"type": "string", "description": "A user name"}

    def test_tags_on_reference_do_not_change_cache(self):
        source = """
        type Name = string;
        type A = {
          /** @format email */
          email: Name;
          plain: Name;
        };
        """
        resolver = resolver_for(source)
        schema = resolver.resolve("A").to_dict()
        assert schema["properties"]["email"] == {"type": "string", "format": "email"}
        assert schema["properties"]["plain"] == {"type": "string"}
        assert resolver.cached("Name").to_dict() == {"type": "string"}

    def test_tag_overrides_structural_field(self):
        source = """
        type A = {
          /** @type integer */
          n: number;
        };
        """
        assert resolve(source, "A")["properties"]["n"] == {"type": "integer"}

    def test_tag_without_text(self):
        source = """
        type A = {
          /** @deprecated */
          old: string;
        };
        """
        assert resolve(source, "A")["properties"]["old"] == {"type": "string"}

    def test_bare_tag_removes_structural_key(self):
        assert resolve("/** @type */\ntype A = string;", "A") == {}

    def test_bare_tag_overrides_earlier_text(self):
        source = """
        /** @title Name */
        type Name = string;
        type A = {
          /** @title */
          name: Name;
        };
        """
        assert resolve(source, "A")["properties"]["name"] == {"type": "string"}

    def test_text_tag_overrides_bare_tag(self):
        source = """
        /** @title */
        type Name = string;
        type A = {
          /** @title Given name */
          name: Name;
        };
        """
        assert resolve(source, "A")["properties"]["name"] == {"type": "string", "title": "Given name"}


class TestDeriveDirectly:
    """derive() on hand-built type expressions."""

    def test_object_literal(self):
        resolver = SchemaResolver(DeclarationTable())
        node = ObjectType(
            members=[
                PropertySignature(name="a", type_node=PrimitiveType(name="string")),
                PropertySignature(name="b", type_node=PrimitiveType(name="number"), optional=True),
            ]
        )
        assert resolver.derive(node).to_dict() == {
            "type": "object",
            "properties": {"a": {"type": "string"}, "b": {"type": "number"}},
            "required": ["a"],
        }

    def test_node_tags(self):
        resolver = SchemaResolver(DeclarationTable())
        node = ArrayType(element=LiteralType(value="x"), tags={"title": "Xs"})
        assert resolver.derive(node).to_dict() == {"type": "array", "items": {"enum": ["x"]}, "title": "Xs"}

    def test_from_types_table(self):
        table = DeclarationTable.from_types(
            {
                "Color": UnionType(types=[LiteralType(value="red"), LiteralType(value="blue")]),
                "Palette": ArrayType(element=TypeReference(name="Color")),
            }
        )
        resolver = SchemaResolver(table)
        assert resolver.resolve("Palette").to_dict() == {"type": "array", "items": {"enum": ["red", "blue"]}}

    def test_other_type(self):
        resolver = SchemaResolver(DeclarationTable())
        with pytest.raises(UnsupportedTypeNodeError):
            resolver.derive(OtherType(kind="never", text="never"))
