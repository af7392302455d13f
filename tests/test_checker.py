"""
Tests for type descriptors and the attribute type checker.
"""

import pytest

from docannot import Enum, TagList
from docannot.checker import check_type
from docannot.errors import AnnotationError
from docannot.types import (
    Boolean,
    ClassRef,
    EnumOf,
    Float,
    Integer,
    ListOf,
    Mixed,
    Number,
    String,
    TupleOf,
    descriptor_from_declaration,
)
from sample_annotations import Foo, Point


def load(type_id):
    return {"sample_annotations.Foo": Foo, "sample_annotations.Point": Point}[type_id]


class TestCheckType:

    @pytest.mark.parametrize("value", [None, 1, "x", [1], object()])
    def test_mixed_accepts_anything(self, value):
        """Test Mixed"""
        check_type("a", value, Mixed())

    @pytest.mark.parametrize("tp, good, bad, message", [
        (String(), "x", 1, "must be a string"),
        (Integer(), 3, "3", "must be an integer"),
        (Integer(), -1, True, "must be an integer"),
        (Float(), 1.5, 1, "must be a floating point number"),
        (Boolean(), False, 0, "must be a boolean"),
        (Number(), 2.5, "abc", "must be a number or numeric string"),
    ])
    def test_scalars(self, tp, good, bad, message):
        """Test scalar kinds accept their own values only"""
        check_type("a", good, tp)
        with pytest.raises(AnnotationError, match=f"Attribute a {message}"):
            check_type("a", bad, tp)

    @pytest.mark.parametrize("value", [1, 2.0, "3", " 4.5 ", "1e3"])
    def test_number_accepts_numeric_values(self, value):
        """Test that number accepts ints, floats and numeric strings"""
        check_type("n", value, Number())

    @pytest.mark.parametrize("value", [True, "", "1,5", None, "nan", "inf", "-Infinity", "1_000"])
    def test_number_rejects_non_numeric(self, value):
        """Test that booleans and non-numeric strings are not numbers"""
        with pytest.raises(AnnotationError):
            check_type("n", value, Number())

    def test_enum_lists_allowed_values(self):
        """Test enum membership error message"""
        check_type("mode", "a", EnumOf(("a", "b")))
        with pytest.raises(AnnotationError) as exc:
            check_type("mode", "c", EnumOf(("a", "b")))
        assert str(exc.value) == "Attribute mode must be one of the following: a, b"

    @pytest.mark.parametrize("value", [True, 1.0, "1"])
    def test_enum_compares_types(self, value):
        """Test that equal values of another type are not members"""
        check_type("level", 1, EnumOf((1, 2)))
        with pytest.raises(AnnotationError, match="Attribute level must be one of the following: 1, 2"):
            check_type("level", value, EnumOf((1, 2)))

    def test_tuple_checks_each_position(self):
        """Test Tuple([String, Integer])"""
        tp = TupleOf((String(), Integer()))
        check_type("pair", ["ok", 2], tp)
        check_type("pair", TagList.of("ok", 2), tp)
        with pytest.raises(AnnotationError, match=r"Attribute pair\[1\] must be an integer"):
            check_type("pair", ["ok", "no"], tp)

    def test_tuple_length(self):
        """Test tuple arity"""
        with pytest.raises(AnnotationError, match="must be an array with 2 elements"):
            check_type("pair", ["ok"], TupleOf((String(), Integer())))

    def test_empty_tuple_is_unchecked_array(self):
        """Test that an empty tuple descriptor accepts any array"""
        check_type("any", [1, "x", None], TupleOf())
        with pytest.raises(AnnotationError, match="must be an array"):
            check_type("any", "not an array", TupleOf())

    def test_homogeneous_list(self):
        """Test ListOf names the failing element"""
        check_type("tags", ["a", "b"], ListOf(String()))
        check_type("tags", [], ListOf(String()))
        with pytest.raises(AnnotationError, match=r"Attribute tags\[2\] must be a string"):
            check_type("tags", ["a", "b", 3], ListOf(String()))
        with pytest.raises(AnnotationError, match="Attribute tags must be an array"):
            check_type("tags", "a", ListOf(String()))

    def test_nested_arrays(self):
        """Test element names of nested arrays"""
        tp = ListOf(TupleOf((String(), Integer())))
        with pytest.raises(AnnotationError, match=r"Attribute rows\[1\]\[0\] must be a string"):
            check_type("rows", [["a", 1], [2, 3]], tp)

    def test_class_reference(self):
        """Test ClassRef instance check"""
        check_type("owner", Foo(), ClassRef("sample_annotations.Foo"), load)
        with pytest.raises(AnnotationError, match="must be an instance of sample_annotations.Point"):
            check_type("owner", Foo(), ClassRef("sample_annotations.Point"), load)


class TestDescriptorFromDeclaration:

    @pytest.mark.parametrize("decl, expected", [
        (None, Mixed()),
        ("mixed", Mixed()),
        ("string", String()),
        ("str", String()),
        ("number", Number()),
        ("int", Integer()),
        ("integer", Integer()),
        ("float", Float()),
        ("bool", Boolean()),
        ("Boolean", Boolean()),
        (str, String()),
        (int, Integer()),
        ([], TupleOf()),
        (["string"], ListOf(String())),
        (["string", "int"], TupleOf((String(), Integer()))),
        ([["int"]], ListOf(ListOf(Integer()))),
    ])
    def test_declarations(self, decl, expected):
        """Test the supported declaration forms"""
        assert descriptor_from_declaration(decl) == expected

    def test_tag_list_declaration(self):
        """Test declarations written as tag lists"""
        assert descriptor_from_declaration(TagList.of("string", "int")) == TupleOf((String(), Integer()))

    def test_enum_instance(self):
        """Test @Enum({...}) declarations"""
        enum = Enum()
        enum.values = ["a", "b"]
        assert descriptor_from_declaration(enum) == EnumOf(("a", "b"))

    def test_class_declarations(self):
        """Test class objects and class names"""
        assert descriptor_from_declaration(Foo) == ClassRef("sample_annotations.Foo")
        resolved = descriptor_from_declaration("Foo", lambda name: f"sample_annotations.{name}")
        assert resolved == ClassRef("sample_annotations.Foo")

    def test_descriptor_passes_through(self):
        """Test that descriptors are returned unchanged"""
        tp = ListOf(String())
        assert descriptor_from_declaration(tp) is tp

    def test_unsupported_declaration(self):
        """Test that other values are rejected"""
        with pytest.raises(AnnotationError, match="Unsupported attribute type declaration"):
            descriptor_from_declaration(42)

    def test_str(self):
        """Test readable descriptor names"""
        assert str(TupleOf((String(), ListOf(Integer())))) == "{string, {integer}}"
        assert str(EnumOf(("a", "b"))) == "enum(a, b)"
