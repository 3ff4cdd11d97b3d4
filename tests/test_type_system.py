import pytest

from SemanticComponents.Operators import Operator, parse_operator, printable_operator
from SemanticComponents.TypeSystem import (
    ArrayType,
    PointerType,
    ReferenceType,
    Type,
    can_coerce,
    is_assignable,
    is_error,
    parse_type_name,
    printable_type,
    type_to_string,
)


def test_render_names():
    assert [type_to_string(t) for t in (Type.INT, Type.FLOAT, Type.BOOL, Type.VOID)] == [
        "int",
        "float",
        "bool",
        "void",
    ]
    assert type_to_string(ArrayType(Type.FLOAT, "10")) == "float[10]"
    assert type_to_string(PointerType(Type.INT)) == "int*"
    assert type_to_string(ReferenceType(Type.INT)) == "int&"


def test_printable_names():
    assert printable_type(Type.INT) == "integer"
    assert printable_type(Type.BOOL) == "boolean"
    assert printable_type(Type.ANY) == "value"
    assert printable_type(PointerType(Type.FLOAT)) == "pointer to float"


def test_shaped_types_compare_by_value():
    assert ArrayType(Type.INT, "3") == ArrayType(Type.INT, "3")
    assert ArrayType(Type.INT, "3") != ArrayType(Type.FLOAT, "3")
    assert PointerType(Type.INT) != ReferenceType(Type.INT)


def test_only_int_widens_to_float():
    assert can_coerce(Type.FLOAT, Type.INT)
    assert not can_coerce(Type.INT, Type.FLOAT)
    assert not can_coerce(Type.FLOAT, Type.BOOL)
    assert not can_coerce(Type.BOOL, Type.INT)
    assert is_assignable(Type.INT, Type.INT)
    assert is_assignable(Type.FLOAT, Type.INT)
    assert not is_assignable(Type.INT, Type.BOOL)


def test_any_is_the_error_type():
    assert is_error(Type.ANY)
    assert not is_error(Type.VOID)


def test_parse_type_name():
    assert parse_type_name(" Float ") is Type.FLOAT
    with pytest.raises(ValueError):
        parse_type_name("string")


def test_parse_operator_by_name_or_symbol():
    assert parse_operator("PLUS") is Operator.PLUS
    assert parse_operator("==") is Operator.EQUAL
    assert parse_operator("-") is Operator.MINUS
    assert parse_operator("unary_minus") is Operator.UNARY_MINUS
    with pytest.raises(ValueError):
        parse_operator("%")


def test_printable_operators():
    assert printable_operator(Operator.NOT_EQUAL) == "different"
    assert printable_operator(Operator.GREATER_EQUAL_THAN) == "greater or equal than"
    assert printable_operator(Operator.ASSIGN) == "attribution"
