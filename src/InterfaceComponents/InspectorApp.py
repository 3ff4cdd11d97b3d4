from __future__ import annotations

from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.reactive import reactive
from textual.widgets import Footer, Header, Label, Static

from compile_pipeline import BuildSession
from InterfaceComponents.ASTTree import ASTTree
from InterfaceComponents.DiagnosticTable import DiagnosticTable
from InterfaceComponents.ProductCodeDisplay import ProductCodeEditor
from InterfaceComponents.SymbolTable import SymbolTableWidget
from SemanticComponents.Context import SemanticOptions
from SemanticComponents.TreeBuilder import BuildError, load_program

BUILDING = "Building"
CODE_GENERATION = "Code Generation"
DONE = "Done"


class SemanticInspector(App):
    """Step-through viewer for the build and render of one program.

    The build phase constructs one top-level node per tick and streams its
    diagnostics into the table. The code generation phase then streams the
    rendered text fragment by fragment while the tree cursor follows the node
    being rendered.
    """

    CSS = """
    #title-bar { height: 1; padding: 0 1; background: $primary; }
    #top-row { height: 2fr; }
    #bottom-row { height: 1fr; }
    #ast-tree, #product-code, #diagnostics, #symbols { width: 1fr; border: round $secondary; }
    #action-bar { height: 1; padding: 0 1; }
    #action-bar.error { background: $error; }
    #action-bar.success { background: $success; }
    """

    BINDINGS = [
        Binding("ctrl+r", "toggle_auto_progress", "Pause/Unpause"),
        Binding("+", "increase_speed", "Increase Speed"),
        Binding("-", "decrease_speed", "Decrease Speed"),
        Binding("ctrl+n", "complete_step", "Complete Step"),
        Binding("t", "manual_tick", "Progress 1 Tick"),
    ]

    running = reactive(False)

    def watch_running(self, is_running: bool):
        if getattr(self, "ticker", None) is None:
            return
        self.ticker.pause() if not is_running else self.ticker.resume()

    tick_interval = reactive(0.5)

    def watch_tick_interval(self, new_interval: float):
        if getattr(self, "ticker", None) is None:
            return
        self.ticker.stop()
        self.ticker = self.set_interval(new_interval, self.progress_tick, pause=not self.running)

    def __init__(self, program_path: str | Path | None = None, options: SemanticOptions | None = None):
        super().__init__()
        self.program_path = Path(program_path) if program_path is not None else None
        self.pipeline = BuildSession(options=options)
        self.current_phase = ""
        self.ticker = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield Footer()
        with Container():
            yield Label("Initializing...", id="title-bar")
            with Horizontal(id="top-row"):
                yield ASTTree("global", id="ast-tree")
                yield ProductCodeEditor(id="product-code")
            with Horizontal(id="bottom-row"):
                yield DiagnosticTable(id="diagnostics")
                yield SymbolTableWidget(id="symbols")
            yield Static("Loading program...", id="action-bar")

    def on_mount(self):
        self.ticker = self.set_interval(self.tick_interval, self.progress_tick, pause=True)
        if self.program_path is None:
            self.post_to_action_bar("No program given.", "error")
            return
        try:
            name, actions = load_program(self.program_path)
        except (OSError, BuildError) as e:
            self.post_to_action_bar(f"Error loading program: {e}", "error")
            return
        self.pipeline.begin_building(actions, program_name=name)
        self.set_phase(BUILDING)

    def set_phase(self, phase: str) -> None:
        self.current_phase = phase
        program_label = self.pipeline.program_name or "(none)"
        self.query_one("#title-bar", Label).update(f"{phase} | Program: {program_label}")
        self.running = False
        self.refresh_bindings()

    def post_to_action_bar(self, message: str, style_class: str = "info"):
        """Post a message to the action bar with a specific style."""
        action_bar = self.query_one("#action-bar", Static)
        action_bar.update(message)
        action_bar.remove_class("info", "error", "success")
        action_bar.add_class(style_class)

    def progress_tick(self):
        """Progress one tick in the current phase."""
        if self.current_phase == BUILDING:
            self.compute_building_tick()
        elif self.current_phase == CODE_GENERATION:
            self.compute_code_generation_tick()

    def compute_building_tick(self) -> bool:
        diagnostics = self.query_one(DiagnosticTable)
        try:
            done, report = self.pipeline.tick_building()
        except BuildError as e:
            self.post_to_action_bar(f"Malformed program: {e}", "error")
            self.set_phase(DONE)
            return True
        if not done:
            if report is not None:
                diagnostics.apply_progress_report(build_report=report)
                self.post_to_action_bar(report.action_bar_message, "error" if report.node_failed else "info")
            return False

        finish_report = self.pipeline.finish()
        diagnostics.apply_progress_report(finish_report=finish_report)
        self.query_one(ASTTree).build_from_ast_root(
            self.pipeline.ast_root, root_label=self.pipeline.program_name or "global"
        )
        self.query_one(SymbolTableWidget).show_symbols(self.pipeline.symbols)
        self.query_one(ProductCodeEditor).reset_code()
        self.pipeline.begin_code_generation()
        self.set_phase(CODE_GENERATION)
        self.post_to_action_bar(finish_report.action_bar_message, "info")
        return True

    def compute_code_generation_tick(self) -> bool:
        done, report = self.pipeline.tick_code_generation()
        if done:
            count = self.pipeline.reporter.count()
            self.set_phase(DONE)
            if count:
                self.post_to_action_bar(f"Rendered with {count} semantic error(s).", "error")
            else:
                self.post_to_action_bar("Rendered without semantic errors.", "success")
            return True
        if report is not None:
            self.query_one(ProductCodeEditor).apply_progress_report(report)
            self.query_one(ASTTree).apply_progress_report(code_generation_report=report)
            self.post_to_action_bar(report.action_bar_message, "info")
        return False

    def action_toggle_auto_progress(self):
        self.running = not self.running
        self.refresh_bindings()

    def action_increase_speed(self):
        self.tick_interval = max(0.1, self.tick_interval - 0.1)

    def action_decrease_speed(self):
        self.tick_interval = self.tick_interval + 0.1

    def action_manual_tick(self):
        if not self.running:
            self.progress_tick()

    def action_complete_step(self):
        """Run the current phase to completion."""
        self.running = False
        phase = self.current_phase
        while self.current_phase == phase and phase in (BUILDING, CODE_GENERATION):
            self.progress_tick()

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Check if an action may run."""
        active = self.current_phase in (BUILDING, CODE_GENERATION)
        if action in ("toggle_auto_progress", "complete_step"):
            return active
        if action in ("increase_speed", "decrease_speed"):
            return active and self.running
        if action == "manual_tick":
            return active and not self.running
        return True
