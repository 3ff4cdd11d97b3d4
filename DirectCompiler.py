from pathlib import Path
import argparse
import sys

_SRC_DIR = Path(__file__).resolve().parent / "src"
if _SRC_DIR.exists():
    src_str = str(_SRC_DIR)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)

from rich.console import Console

from compile_pipeline import compile_file_to_outputs
from SemanticComponents.Context import SemanticOptions

TEST_FILENAME = "./examples/programs/example.json"


def compile_program(
    filename: str | Path = TEST_FILENAME,
    output_root: str | Path = "outputs",
    options: SemanticOptions | None = None,
) -> int:
    console = Console()
    error_console = Console(stderr=True)

    ok, out_path, message = compile_file_to_outputs(
        input_json_path=filename,
        output_root=output_root,
        options=options,
        console=error_console,
    )
    if out_path is None:
        error_console.print(f"Compilation failed. {message}", style="bold red", markup=False)
        return 2
    if not ok:
        error_console.print(message, style="red", markup=False)
        return 1
    console.print(message, style="green", markup=False)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Validate a program's AST actions and render it as target code."
    )
    parser.add_argument("program", nargs="?", default=TEST_FILENAME, help="Program action list (.json).")
    parser.add_argument("-o", "--output", default="outputs", help="Directory for the rendered <name>.txt.")
    parser.add_argument(
        "--first-param-mismatch-only",
        action="store_true",
        help="Report only the first mismatched argument of each call.",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Do not echo diagnostics as they are found.")
    args = parser.parse_args(argv)

    options = SemanticOptions(
        report_all_param_mismatches=not args.first_param_mismatch_only,
        echo_diagnostics=not args.quiet,
    )
    return compile_program(args.program, args.output, options)


if __name__ == "__main__":
    sys.exit(main())
