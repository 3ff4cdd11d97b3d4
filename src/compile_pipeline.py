from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional

from SemanticComponents.AST import Block
from SemanticComponents.CodeGenerator import get_code_generation_reporter
from SemanticComponents.Context import SemanticContext, SemanticOptions
from SemanticComponents.Diagnostics import DiagnosticReporter, ErrorKind, LineCounter
from SemanticComponents.ProgressReport import (
    BuildReport,
    CodeGenerationReport,
    FinishReport,
)
from SemanticComponents.Symbols import SymbolTable
from SemanticComponents.TreeBuilder import (
    Action,
    BuildError,
    TreeBuilder,
    get_build_reporter,
    load_program,
)

if TYPE_CHECKING:
    from rich.console import Console


class BuildSession:
    """Shared build/render state.

    This is a UI-agnostic orchestrator that both the Textual inspector and the
    CLI drive. It owns the symbol table, the diagnostic reporter and the
    program root, so stage sequencing and data flow can't drift between
    entrypoints.
    """

    def __init__(
        self,
        options: SemanticOptions | None = None,
        console: "Console | None" = None,
    ) -> None:
        self.options = options if options is not None else SemanticOptions()
        self.console = console
        self.reset_all()

    def reset_all(self) -> None:
        self.program_name: str = ""
        self.actions: list[Action] = []

        self.symbols = SymbolTable()
        self.reporter = DiagnosticReporter(
            LineCounter(),
            console=self.console if self.options.echo_diagnostics else None,
        )
        self.context = SemanticContext(self.symbols, self.reporter, self.options)
        self.builder = TreeBuilder(self.context)

        self.ast_root = Block(title="Program")
        self.output_code: str = ""
        self.finished = False

        self._build_generator = None
        self._code_generator = None

    @property
    def diagnostics(self):
        return self.reporter.diagnostics

    # ----- Building -----

    def begin_building(self, actions: list[Action], program_name: str = "") -> None:
        self.reset_all()
        self.program_name = program_name
        self.actions = list(actions)
        self._build_generator = get_build_reporter(self.actions, self.builder, self.ast_root)

    def tick_building(self) -> tuple[bool, BuildReport | None]:
        if self._build_generator is None:
            raise RuntimeError("Build generator not initialized.")
        try:
            report: BuildReport = next(self._build_generator)
            return False, report
        except StopIteration:
            return True, None

    def finish_building(self) -> None:
        """Consume remaining build reports until completion."""
        if self._build_generator is None:
            return
        for _report in self._build_generator:
            pass

    # ----- End-of-build checks -----

    def finish(self) -> FinishReport:
        """Report every function that was declared but never given a body.

        Idempotent: a second call reports nothing new.
        """
        report = FinishReport()
        if self.finished:
            report.action_bar_message = "Build already finished."
            return report
        before = len(self.reporter.diagnostics)
        for symbol in self.symbols.undefined_functions():
            self.reporter.report(ErrorKind.DECLARED_BUT_NEVER_DEFINED, symbol.identifier)
        self.finished = True
        report.new_diagnostics = self.reporter.diagnostics[before:]
        report.action_bar_message = (
            f"Build finished with {self.reporter.count()} diagnostic(s)."
        )
        return report

    # ----- Code generation -----

    def begin_code_generation(self) -> None:
        self.output_code = ""
        self._code_generator = get_code_generation_reporter(self.ast_root)

    def tick_code_generation(self) -> tuple[bool, CodeGenerationReport | None]:
        if self._code_generator is None:
            raise RuntimeError("Code generator not initialized.")
        try:
            report: CodeGenerationReport = next(self._code_generator)
            if report.new_code:
                self.output_code += report.new_code
            return False, report
        except StopIteration:
            return True, None

    def run_all(self, actions: list[Action], program_name: str = "") -> str:
        """Build, finish and render in one go; returns the rendered text."""
        self.begin_building(actions, program_name)
        self.finish_building()
        self.finish()
        self.begin_code_generation()
        while True:
            done, _ = self.tick_code_generation()
            if done:
                break
        return self.output_code


def compile_file_to_outputs(
    input_json_path: str | Path,
    program_name: str | None = None,
    output_root: str | Path = "outputs",
    options: SemanticOptions | None = None,
    console: "Console | None" = None,
) -> tuple[bool, Optional[Path], str]:
    """Build and render a program file end-to-end using the same session as the UI.

    The rendered text is written even when diagnostics were emitted; `ok` is
    False in that case.

    Returns: (ok, output_txt_path, message)
    """

    input_json_path = Path(input_json_path)
    try:
        name, actions = load_program(input_json_path)
    except (OSError, BuildError) as e:
        return False, None, str(e)

    if program_name is None:
        program_name = name

    session = BuildSession(options=options, console=console)
    try:
        session.run_all(actions, program_name)
    except BuildError as e:
        return False, None, f"Malformed program: {e}"

    output_dir = Path(output_root)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / f"{program_name}.txt"
    output_path.write_text(session.output_code, encoding="utf-8")

    count = session.reporter.count()
    if count:
        return (
            False,
            output_path,
            f"Semantic analysis found {count} error(s). Output written to {output_path}.",
        )
    return (
        True,
        output_path,
        f"Code generation completed. Output written to {output_path}.",
    )
