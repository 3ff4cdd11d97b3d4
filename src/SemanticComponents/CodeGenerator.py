from collections.abc import Generator
from pathlib import Path

from SemanticComponents.AST import ASTNode
from SemanticComponents.ProgressReport import CodeGenerationReport


### Renders a validated AST into target text. ###


def generate_code(ast_node, filename="temp"):
    """Render an AST node into `<name>.txt` next to `filename`.

    Convenience wrapper over `get_code_generation_reporter()`; failed nodes are
    rendered like any other, so the caller decides what diagnostics mean.
    """

    if ast_node is None:
        return False

    filename_path = Path(str(filename))
    output_dir = filename_path.parent
    output_dir.mkdir(parents=True, exist_ok=True)

    output_path = output_dir / f"{filename_path.name}.txt"

    code_parts: list[str] = []
    for report in get_code_generation_reporter(ast_node):
        if report.new_code:
            code_parts.append(report.new_code)

    output_path.write_text("".join(code_parts), encoding="utf-8")

    return True


def get_code_generation_reporter(
    ast_node: ASTNode,
    depth: int = 0,
) -> Generator[CodeGenerationReport, None, None]:
    """Generator function that yields CodeGenerationReport objects during code generation.

    Args:
        ast_node: The root AST node to generate code from.
        depth: Indentation depth of the root node.

    Yields:
        CodeGenerationReport objects indicating progress.
    """
    if ast_node is None:
        raise ValueError("No AST node provided for code generation.")

    report = CodeGenerationReport()
    report.action_bar_message = "Starting code generation."
    report.looked_at_tree_node_id = ast_node.unique_id
    report.new_code = ""
    yield report

    yield from ast_node.generate_code(depth)
