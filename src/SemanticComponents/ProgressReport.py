from SemanticComponents.Diagnostics import Diagnostic
from SemanticComponents.Types import ASTNodeId


class ProgressReport:
    def __init__(self):
        self.current_phase_number = ""
        self.action_bar_message = ""


class BuildReport(ProgressReport):
    """Progress report for the tree building phase.

    Attributes:
        current_phase_number (str): The current phase number, automatically set to "1".
        node_label (str | None): One-line label of the node that was just constructed.
        node_failed (bool): Whether that node carries an unrecovered semantic error.
        new_diagnostics (list[Diagnostic]): Diagnostics emitted while constructing it.
        top_level (bool): True when the node was appended to the program root.
    """

    def __init__(self):
        super().__init__()
        self.current_phase_number = "1"
        self.node_label: str | None = None
        self.node_failed: bool = False
        self.new_diagnostics: list[Diagnostic] = []
        self.top_level: bool = False


class FinishReport(ProgressReport):
    """
    Progress report for the end-of-build checks (functions never defined).
    """

    def __init__(self):
        super().__init__()
        self.current_phase_number = "2"
        self.new_diagnostics: list[Diagnostic] = []


class CodeGenerationReport(ProgressReport):
    """
    Progress report for the code generation phase.
    """

    def __init__(self):
        super().__init__()
        self.current_phase_number = "3"
        self.looked_at_tree_node_id: ASTNodeId | None = None
        self.new_code: str | None = None
