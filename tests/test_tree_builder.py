import json

import pytest

from SemanticComponents.AST import BoolOperation, Comparison, Operation, UnaryMinus
from SemanticComponents.Diagnostics import ErrorKind
from SemanticComponents.TreeBuilder import BuildError, TreeBuilder, load_program
from SemanticComponents.TypeSystem import Type


def const(value, type_name="int"):
    return {"node": "const", "type": type_name, "value": value}


def var(name):
    return {"node": "var", "name": name}


@pytest.fixture
def builder(ctx):
    return TreeBuilder(ctx)


def test_declaration_with_literal_and_expression(builder, ctx):
    node = builder.build(
        {
            "node": "declaration",
            "type": "int",
            "bindings": [
                {"name": "x"},
                {"name": "y", "literal": {"type": "int", "value": "5"}},
                {"name": "z", "init": {"node": "op", "op": "+", "operands": [var("y"), const("1")]}},
            ],
        }
    )
    assert node.to_string() == "int x;\nint y = 5;\nint z = (y + 1);"
    assert ctx.reporter.diagnostics == []


@pytest.mark.parametrize(
    "op, operands, expected",
    [
        ("<", [const("1"), const("2")], Comparison),
        ("&", [const("true", "bool"), const("false", "bool")], BoolOperation),
        ("!", [const("true", "bool")], BoolOperation),
        ("-", [const("1")], UnaryMinus),
        ("*", [const("1"), const("2")], Operation),
    ],
)
def test_operator_category_selects_node(builder, op, operands, expected):
    node = builder.build({"node": "op", "op": op, "operands": operands})
    assert type(node) is expected


def test_block_scope_is_closed(builder, ctx):
    builder.build(
        {
            "node": "block",
            "lines": [{"node": "declaration", "type": "int", "bindings": [{"name": "inner"}]}],
        }
    )
    builder.build(var("inner"))
    assert ctx.reporter.kinds() == [ErrorKind.UNDECLARED_VARIABLE]
    assert ctx.symbols.depth == 0


def test_line_key_advances_counter(builder, ctx):
    builder.build({"node": "var", "name": "a", "line": 12})
    assert str(ctx.reporter.diagnostics[0]) == "[Line 12] semantic error: undeclared variable a"


def test_function_body_sees_params_and_itself(builder, ctx):
    fun = builder.build(
        {
            "node": "function",
            "returns": "int",
            "name": "fact",
            "params": [["int", "n"]],
            "body": [
                {
                    "node": "return",
                    "operand": {
                        "node": "call",
                        "name": "fact",
                        "args": [{"node": "op", "op": "-", "operands": [var("n"), const("1")]}],
                    },
                }
            ],
        }
    )
    assert ctx.reporter.diagnostics == []
    assert fun.to_string() == "int fact(int n) {\n    return fact((n - 1));\n}"
    assert ctx.symbols.lookup("n") is None


def test_duplicate_parameters(builder, ctx):
    builder.build(
        {"node": "function", "returns": "void", "name": "f", "params": [["int", "a"], ["int", "a"]], "body": []}
    )
    assert [d.message for d in ctx.reporter.diagnostics] == ["re-declaration of variable a"]


def test_loop_init_is_scoped_to_the_loop(builder, ctx):
    loop = builder.build(
        {
            "node": "for",
            "init": {"node": "declaration", "type": "int", "bindings": [{"name": "i", "init": const("0")}]},
            "test": {"node": "op", "op": "<", "operands": [var("i"), const("3")]},
            "body": [],
        }
    )
    assert loop.to_string() == "for (int i = 0; (i < 3); ) {\n}"
    assert ctx.symbols.lookup("i") is None


def test_loop_init_with_several_bindings_stays_on_the_header(builder):
    loop = builder.build(
        {
            "node": "for",
            "init": {
                "node": "declaration",
                "type": "int",
                "bindings": [{"name": "i", "init": const("0")}, {"name": "j", "init": const("1")}],
            },
            "test": {"node": "op", "op": "<", "operands": [var("i"), var("j")]},
            "body": [],
        }
    )
    assert loop.to_string() == "for (int i = 0, j = 1; (i < j); ) {\n}"


def test_array_declaration_and_index(builder, ctx):
    builder.build({"node": "array_decl", "type": "float", "name": "a", "size": 4})
    node = builder.build({"node": "index", "name": "a", "index": const("1")})
    assert node.type is Type.FLOAT
    assert ctx.symbols.lookup("a").size == "4"


@pytest.mark.parametrize(
    "action",
    [
        {"node": "loop"},
        {"node": "var"},
        {"node": "const", "type": "string", "value": "s"},
        {"node": "op", "op": "%", "operands": [const("1")]},
        {"node": "op", "op": "+", "operands": []},
        {"node": "function", "returns": "int", "name": "f", "params": [["int"]]},
        {"node": "op", "op": "TEST", "operands": [const("true", "bool"), const("false", "bool")]},
        {"node": "op", "op": "=", "operands": [var("x"), const("1")]},
        {"node": "op", "op": "CAST", "operands": [const("1")]},
        {"node": "op", "op": "PAR", "operands": [const("1")]},
        {"node": "var", "name": "x", "line": "abc"},
        {"node": "declaration", "type": "int", "bindings": ["x"]},
        "not an action",
    ],
)
def test_malformed_actions(builder, action):
    with pytest.raises(BuildError):
        builder.build(action)


def test_load_program_forms(tmp_path):
    bare = tmp_path / "bare.json"
    bare.write_text(json.dumps([{"node": "nop"}]), encoding="utf-8")
    named = tmp_path / "named.json"
    named.write_text(json.dumps({"name": "demo", "program": []}), encoding="utf-8")
    broken = tmp_path / "broken.json"
    broken.write_text("{", encoding="utf-8")

    assert load_program(bare) == ("bare", [{"node": "nop"}])
    assert load_program(named) == ("demo", [])
    with pytest.raises(BuildError):
        load_program(broken)
