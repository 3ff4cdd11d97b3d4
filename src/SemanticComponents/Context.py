"""Validation context threaded through every validating node constructor."""

from __future__ import annotations

from dataclasses import dataclass, field

from SemanticComponents.Diagnostics import DiagnosticReporter, ErrorKind, LineCounter
from SemanticComponents.Symbols import SymbolTable


@dataclass
class SemanticOptions:
    """Tunables for semantic validation.

    Attributes:
        report_all_param_mismatches (bool): When True, a call reports one
            INCOMPATIBLE_PARAM per mismatched argument position; when False it
            stops at the first mismatched position.
        echo_diagnostics (bool): Whether front ends should print diagnostics as
            they are emitted.
    """

    report_all_param_mismatches: bool = True
    echo_diagnostics: bool = False


@dataclass
class SemanticContext:
    symbols: SymbolTable = field(default_factory=SymbolTable)
    reporter: DiagnosticReporter = field(default_factory=DiagnosticReporter)
    options: SemanticOptions = field(default_factory=SemanticOptions)

    @property
    def line(self) -> int:
        return self.reporter.counter.value

    @property
    def counter(self) -> LineCounter:
        return self.reporter.counter

    def report(self, kind: ErrorKind, *args) -> None:
        self.reporter.report(kind, *args)
