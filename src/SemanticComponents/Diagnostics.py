"""Semantic diagnostics: error kinds, message templates and the reporter.

Every semantic problem found while nodes are constructed is recorded here as
data. Nothing in this module raises for a semantic error; the build keeps
going so a single run surfaces every independent problem.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Callable

from SemanticComponents.Operators import Operator, printable_operator
from SemanticComponents.TypeSystem import Type, printable_type

if TYPE_CHECKING:
    from rich.console import Console


class ErrorKind(Enum):
    MULTIPLE_DEFINITION = auto()
    MULTIPLE_DEFINITION_FN = auto()
    UNDECLARED_VARIABLE = auto()
    INCOMPATIBLE_OPERANDS = auto()
    INCOMPATIBLE_ASSIGNMENT = auto()
    INCOMPATIBLE_TEST = auto()
    DECLARED_BUT_NEVER_DEFINED = auto()
    WRONG_PARAM_COUNT = auto()
    INCOMPATIBLE_PARAM = auto()
    INCOMPATIBLE_INDEX = auto()
    NON_ARRAY_INDEX = auto()


class LineCounter:
    """Current source line, advanced by whoever feeds the build.

    Starts at 1 and only moves forward during a compilation run.
    """

    def __init__(self, start: int = 1):
        self._value = start

    @property
    def value(self) -> int:
        return self._value

    def advance(self, lines: int = 1) -> int:
        if lines < 0:
            raise ValueError("The line counter cannot move backwards.")
        self._value += lines
        return self._value

    def advance_to(self, line: int) -> int:
        """Move forward to `line`; earlier lines leave the counter untouched."""
        if line > self._value:
            self._value = line
        return self._value


def _operands_message(op: Operator, expected, actual) -> str:
    return (
        f"{printable_operator(op)} operation expected "
        f"{printable_type(expected)} but received {printable_type(actual)}"
    )


_MESSAGE_TEMPLATES: dict[ErrorKind, Callable[..., str]] = {
    ErrorKind.MULTIPLE_DEFINITION: lambda name: f"re-declaration of variable {name}",
    ErrorKind.MULTIPLE_DEFINITION_FN: lambda name: f"re-declaration of function {name}",
    ErrorKind.UNDECLARED_VARIABLE: lambda name: f"undeclared variable {name}",
    ErrorKind.INCOMPATIBLE_OPERANDS: _operands_message,
    ErrorKind.INCOMPATIBLE_ASSIGNMENT: lambda expected, actual: _operands_message(
        Operator.ASSIGN, expected, actual
    ),
    ErrorKind.INCOMPATIBLE_TEST: lambda actual: _operands_message(
        Operator.TEST, Type.BOOL, actual
    ),
    ErrorKind.DECLARED_BUT_NEVER_DEFINED: lambda name: (
        f"function {name} is declared but never defined"
    ),
    ErrorKind.WRONG_PARAM_COUNT: lambda name, expected, actual: (
        f"function {name} expects {expected} parameters but received {actual}"
    ),
    ErrorKind.INCOMPATIBLE_PARAM: lambda name, expected, actual: (
        f"parameter {name} expected {printable_type(expected)} "
        f"but received {printable_type(actual)}"
    ),
    ErrorKind.INCOMPATIBLE_INDEX: lambda expected, actual: (
        f"index operator expects {printable_type(expected)} "
        f"but received {printable_type(actual)}"
    ),
    ErrorKind.NON_ARRAY_INDEX: lambda: "index operator expects an array",
}


def format_message(kind: ErrorKind, *args) -> str:
    return _MESSAGE_TEMPLATES[kind](*args)


def error_prefix(line: int, category: str = "semantic") -> str:
    return f"[Line {line}] {category} error: "


@dataclass
class Diagnostic:
    line: int
    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return error_prefix(self.line) + self.message


class DiagnosticReporter:
    """Collects one `Diagnostic` per detected semantic error.

    Attributes:
        counter (LineCounter): Source of the `[Line n]` prefix.
        console (rich.console.Console | None): When set, each diagnostic is
            echoed as soon as it is reported (the CLI passes a stderr console).
        diagnostics (list[Diagnostic]): Everything reported so far, in order.
    """

    def __init__(self, counter: LineCounter | None = None, console: "Console | None" = None):
        self.counter = counter if counter is not None else LineCounter()
        self.console = console
        self.diagnostics: list[Diagnostic] = []

    def report(self, kind: ErrorKind, *args) -> Diagnostic:
        diagnostic = Diagnostic(self.counter.value, kind, format_message(kind, *args))
        self.diagnostics.append(diagnostic)
        if self.console is not None:
            self.console.print(str(diagnostic), markup=False, highlight=False, soft_wrap=True)
        return diagnostic

    def has_errors(self) -> bool:
        return len(self.diagnostics) > 0

    def count(self, kind: ErrorKind | None = None) -> int:
        if kind is None:
            return len(self.diagnostics)
        return sum(1 for d in self.diagnostics if d.kind == kind)

    def kinds(self) -> list[ErrorKind]:
        return [d.kind for d in self.diagnostics]

    def pretty(self) -> str:
        return "\n".join(str(d) for d in self.diagnostics)
