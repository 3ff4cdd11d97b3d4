import io

import pytest
from rich.console import Console

from SemanticComponents.Diagnostics import (
    DiagnosticReporter,
    ErrorKind,
    LineCounter,
    format_message,
)
from SemanticComponents.Operators import Operator
from SemanticComponents.TypeSystem import Type


@pytest.mark.parametrize(
    "kind, args, expected",
    [
        (ErrorKind.MULTIPLE_DEFINITION, ("x",), "re-declaration of variable x"),
        (ErrorKind.MULTIPLE_DEFINITION_FN, ("f",), "re-declaration of function f"),
        (ErrorKind.UNDECLARED_VARIABLE, ("x",), "undeclared variable x"),
        (
            ErrorKind.INCOMPATIBLE_OPERANDS,
            (Operator.PLUS, Type.INT, Type.BOOL),
            "addition operation expected integer but received boolean",
        ),
        (
            ErrorKind.INCOMPATIBLE_ASSIGNMENT,
            (Type.INT, Type.FLOAT),
            "attribution operation expected integer but received float",
        ),
        (
            ErrorKind.INCOMPATIBLE_TEST,
            (Type.INT,),
            "test operation expected boolean but received integer",
        ),
        (
            ErrorKind.DECLARED_BUT_NEVER_DEFINED,
            ("f",),
            "function f is declared but never defined",
        ),
        (
            ErrorKind.WRONG_PARAM_COUNT,
            ("f", 2, 1),
            "function f expects 2 parameters but received 1",
        ),
        (
            ErrorKind.INCOMPATIBLE_PARAM,
            ("f", Type.INT, Type.BOOL),
            "parameter f expected integer but received boolean",
        ),
        (
            ErrorKind.INCOMPATIBLE_INDEX,
            (Type.INT, Type.BOOL),
            "index operator expects integer but received boolean",
        ),
        (ErrorKind.NON_ARRAY_INDEX, (), "index operator expects an array"),
    ],
)
def test_message_templates(kind, args, expected):
    assert format_message(kind, *args) == expected


def test_reporter_prefixes_current_line():
    counter = LineCounter()
    reporter = DiagnosticReporter(counter)
    reporter.report(ErrorKind.UNDECLARED_VARIABLE, "a")
    counter.advance_to(5)
    reporter.report(ErrorKind.UNDECLARED_VARIABLE, "b")

    assert [d.line for d in reporter.diagnostics] == [1, 5]
    assert reporter.pretty() == (
        "[Line 1] semantic error: undeclared variable a\n"
        "[Line 5] semantic error: undeclared variable b"
    )
    assert reporter.count() == 2
    assert reporter.count(ErrorKind.NON_ARRAY_INDEX) == 0
    assert reporter.kinds() == [ErrorKind.UNDECLARED_VARIABLE] * 2


def test_reporter_echoes_to_console_verbatim():
    buffer = io.StringIO()
    reporter = DiagnosticReporter(console=Console(file=buffer, width=200))
    reporter.report(ErrorKind.MULTIPLE_DEFINITION, "x")
    assert buffer.getvalue() == "[Line 1] semantic error: re-declaration of variable x\n"


def test_console_echo_keeps_long_messages_on_one_line():
    buffer = io.StringIO()
    reporter = DiagnosticReporter(console=Console(file=buffer, width=40))
    reporter.report(ErrorKind.INCOMPATIBLE_OPERANDS, Operator.GREATER_EQUAL_THAN, Type.INT, Type.BOOL)
    assert buffer.getvalue() == (
        "[Line 1] semantic error: greater or equal than operation expected integer but received boolean\n"
    )


def test_line_counter_only_moves_forward():
    counter = LineCounter()
    assert counter.value == 1
    assert counter.advance() == 2
    assert counter.advance_to(1) == 2
    assert counter.advance_to(7) == 7
    with pytest.raises(ValueError):
        counter.advance(-1)
