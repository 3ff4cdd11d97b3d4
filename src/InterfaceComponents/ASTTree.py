from __future__ import annotations

from rich.text import Text
from textual.widgets import Tree
from textual.widgets.tree import TreeNode

from SemanticComponents.ProgressReport import CodeGenerationReport
from SemanticComponents.AST import ASTNode


class ASTTree(Tree):
    """Tree widget for a validated AST.

    Nodes that carry a semantic error are labelled red; everything else is
    white. During code generation the cursor follows the node whose code is
    being emitted.
    """

    def __init__(self, label: str = "Root", **kwargs):
        super().__init__(label, **kwargs)

    def reset_tree(self, root_label: str = "global") -> None:
        self.clear()
        self.root.label = root_label
        self.root.expand()

    def _scroll_to_top(self) -> None:
        """Scroll the tree viewport to the top."""
        self.action_scroll_home()

    def apply_progress_report(
        self,
        code_generation_report: CodeGenerationReport | None = None,
    ) -> None:
        if code_generation_report:
            self.apply_code_generation_report(code_generation_report)

    def apply_code_generation_report(
        self, code_generation_report: CodeGenerationReport
    ) -> None:
        if code_generation_report.looked_at_tree_node_id is not None:
            node = self.get_node_by_id(code_generation_report.looked_at_tree_node_id)
            if node:
                self.move_cursor(node)
                self.scroll_to_node(node)

    def build_from_ast_root(self, ast_root: ASTNode, root_label: str = "global") -> None:
        """Builds the entire tree from a given AST root node.

        Args:
            ast_root: The root node of the AST.
            root_label: Label shown on the tree root.
        """

        self.reset_tree(root_label=root_label)
        ast_root.unique_id = self.root.id
        self._build_subtree(ast_root, self.root)
        self.root.expand()
        self._scroll_to_top()

    def _build_subtree(self, ast_node: ASTNode, tree_node: TreeNode) -> None:
        for child in ast_node.edges:
            style = "red" if child.error else "white"
            child_tree_node = tree_node.add(Text(child.unindented_representation(), style=style))
            child.unique_id = child_tree_node.id
            child_tree_node.expand()
            self._build_subtree(child, child_tree_node)
