from textual.widgets import DataTable

from SemanticComponents.Diagnostics import Diagnostic
from SemanticComponents.ProgressReport import BuildReport, FinishReport


class DiagnosticTable(DataTable):
    """Custom widget for displaying semantic diagnostics in emission order."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.cursor_type = "row"
        self.zebra_stripes = True
        self.add_columns("line #", "Kind", "Message")

    def add_diagnostic(self, diagnostic: Diagnostic):
        """Adds a diagnostic to the table.

        Args:
            diagnostic (Diagnostic): The diagnostic to add.
        """
        self.add_row(
            str(diagnostic.line),
            diagnostic.kind.name,
            diagnostic.message,
        )

    def fill_table(self, diagnostics: list[Diagnostic]):
        self.clear()
        for diagnostic in diagnostics:
            self.add_diagnostic(diagnostic)

    def apply_progress_report(
        self,
        build_report: BuildReport | None = None,
        finish_report: FinishReport | None = None,
    ):
        """Appends the diagnostics carried by a build or finish report.

        Args:
            build_report (BuildReport): Report for one freshly built top-level node.
            finish_report (FinishReport): Report for the end-of-build checks.
        """
        report = build_report or finish_report
        if report is None:
            return
        for diagnostic in report.new_diagnostics:
            self.add_diagnostic(diagnostic)
        if report.new_diagnostics:
            self.move_cursor(row=self.row_count - 1, scroll=True)
