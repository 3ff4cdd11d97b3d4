from SemanticComponents.AST import (
    ArrayDecl,
    Assignment,
    Block,
    Comparison,
    Conditional,
    Constant,
    Declaration,
    Loop,
    Nop,
    Operation,
    VarDecl,
    Variable,
)
from SemanticComponents.Diagnostics import ErrorKind
from SemanticComponents.Operators import Operator
from SemanticComponents.Types import Literal
from SemanticComponents.TypeSystem import ArrayType, Type


def integer(value="1"):
    return Constant(Type.INT, value)


def messages(ctx):
    return [d.message for d in ctx.reporter.diagnostics]


def assign(ctx, name, value):
    return Assignment(ctx, Variable(ctx, name), value)


def test_declaration_round_trip(ctx):
    declaration = Declaration(ctx, Type.INT)
    declaration.add("x")
    declaration.add("y", Literal("5", Type.INT))
    assert declaration.to_string() == "int x;\nint y = 5;"
    assert ctx.symbols.lookup("x") is Type.INT
    assert ctx.symbols.lookup("y") is Type.INT
    assert not declaration.error
    assert ctx.reporter.diagnostics == []


def test_redeclaration_keeps_first_symbol(ctx):
    declaration = Declaration(ctx, Type.INT)
    declaration.add("x")
    Declaration(ctx, Type.FLOAT).add("x")
    assert messages(ctx) == ["re-declaration of variable x"]
    assert ctx.symbols.lookup("x") is Type.INT
    assert not declaration.error


def test_initializer_must_match_exactly(ctx):
    decl = VarDecl(ctx, Type.FLOAT, "f", integer("1"))
    assert decl.error
    assert messages(ctx) == ["attribution operation expected float but received integer"]
    assert decl.to_string() == "float f = 1;"


def test_failed_initializer_is_not_reported_again(ctx):
    decl = VarDecl(ctx, Type.INT, "z", Variable(ctx, "missing"))
    assert decl.error
    assert ctx.reporter.kinds() == [ErrorKind.UNDECLARED_VARIABLE]
    assert ctx.symbols.lookup("z") is Type.INT


def test_empty_declaration_renders_nothing(ctx):
    assert Declaration(ctx, Type.BOOL).to_string() == ""


def test_array_declaration(ctx):
    decl = ArrayDecl(ctx, Type.INT, "arr", "10")
    assert decl.to_string() == "int arr[10];"
    assert ctx.symbols.lookup("arr") == ArrayType(Type.INT, "10")
    ArrayDecl(ctx, Type.INT, "arr", "3")
    assert messages(ctx) == ["re-declaration of variable arr"]


def test_assignment(ctx):
    ctx.symbols.declare("x", Type.INT)
    node = assign(ctx, "x", integer("5"))
    assert node.type is Type.VOID
    assert node.to_string() == "x = 5;"
    assert not node.error


def test_assignment_widens_int_to_float(ctx):
    ctx.symbols.declare("f", Type.FLOAT)
    node = assign(ctx, "f", integer("1"))
    assert not node.error
    assert node.to_string() == "f = [float] 1;"


def test_incompatible_assignment(ctx):
    ctx.symbols.declare("x", Type.INT)
    node = assign(ctx, "x", Constant(Type.FLOAT, "2.5"))
    assert node.error
    assert messages(ctx) == ["attribution operation expected integer but received float"]


def test_assignment_with_failed_child_is_silent(ctx):
    ctx.symbols.declare("x", Type.INT)
    node = assign(ctx, "x", Variable(ctx, "missing"))
    assert node.error
    assert ctx.reporter.kinds() == [ErrorKind.UNDECLARED_VARIABLE]


def test_block_indents_every_line(ctx):
    ctx.symbols.declare("x", Type.INT)
    block = Block()
    block.add(assign(ctx, "x", integer("1")))
    block.add(Nop())
    block.add(assign(ctx, "x", integer("2")))
    assert len(block) == 3
    assert block.to_string(1) == "    x = 1;\n    x = 2;"
    assert not block.error
    block.add(assign(ctx, "y", integer("3")))
    assert block.error


def test_conditional_rendering(ctx):
    ctx.symbols.declare("x", Type.INT)
    condition = Comparison(ctx, Operator.GREATER_THAN, Variable(ctx, "x"), integer("0"))
    node = Conditional(
        ctx,
        condition,
        Block([assign(ctx, "x", integer("1"))]),
        Block([assign(ctx, "x", integer("2"))]),
    )
    assert node.to_string() == "if (x > 0) {\n    x = 1;\n} else {\n    x = 2;\n}"
    assert not node.error


def test_conditional_wraps_plain_condition_and_nests(ctx):
    ctx.symbols.declare("b", Type.BOOL)
    ctx.symbols.declare("x", Type.INT)
    node = Conditional(ctx, Variable(ctx, "b"), Block([assign(ctx, "x", integer("1"))]))
    assert node.to_string(1) == "    if (b) {\n        x = 1;\n    }"
    assert Conditional(ctx, Variable(ctx, "b"), Block()).to_string() == "if (b) {\n}"


def test_conditional_requires_bool(ctx):
    ctx.symbols.declare("x", Type.INT)
    node = Conditional(ctx, Variable(ctx, "x"), Block())
    assert node.error
    assert messages(ctx) == ["test operation expected boolean but received integer"]


def test_conditional_error_includes_branches(ctx):
    ctx.symbols.declare("b", Type.BOOL)
    node = Conditional(ctx, Variable(ctx, "b"), Block(), Block([Variable(ctx, "missing")]))
    assert node.error


def test_loop_rendering(ctx):
    ctx.symbols.declare("i", Type.INT)
    ctx.symbols.declare("x", Type.INT)
    node = Loop(
        ctx,
        assign(ctx, "i", integer("0")),
        Comparison(ctx, Operator.LESS_THAN, Variable(ctx, "i"), integer("10")),
        assign(ctx, "i", Operation(ctx, Operator.PLUS, Variable(ctx, "i"), integer("1"))),
        Block([assign(ctx, "x", Variable(ctx, "i"))]),
    )
    assert node.to_string() == "for (i = 0; (i < 10); i = (i + 1)) {\n    x = i;\n}"
    assert not node.error
    assert node.to_string() == node.to_string()


def test_loop_without_init_and_update(ctx):
    ctx.symbols.declare("b", Type.BOOL)
    node = Loop(ctx, None, Variable(ctx, "b"), None, Block())
    assert node.to_string() == "for (; b; ) {\n}"


def test_loop_requires_bool_test(ctx):
    node = Loop(ctx, None, integer("1"), None, Block())
    assert node.error
    assert messages(ctx) == ["test operation expected boolean but received integer"]
