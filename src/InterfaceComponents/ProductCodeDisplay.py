from typing import Any

from textual.widgets import TextArea
from SemanticComponents.ProgressReport import CodeGenerationReport
from textual.widgets.text_area import Selection

class ProductCodeEditor(TextArea):
    """Read-only panel showing the rendered target code as it streams in.
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.read_only = True
        self.show_line_numbers = True

    def reset_code(self) -> None:
        self.text = ""

    def apply_progress_report(self, code_generation_report: CodeGenerationReport | None = None):
        """Appends a report's code fragment and selects it.

        Args:
            code_generation_report (CodeGenerationReport): The code generation report containing the new fragment.
        """
        if code_generation_report and code_generation_report.new_code:
            start_index = len(self.text)
            new_code = code_generation_report.new_code
            self.text += new_code

            end_index = start_index + len(new_code)
            document: Any = self.document
            start_location = document.get_location_from_index(start_index)
            end_location = document.get_location_from_index(end_index)
            self.selection = Selection(start=start_location, end=end_location)
            self.scroll_cursor_visible(center=True)
