from pathlib import Path
import argparse
import sys

_SRC_DIR = Path(__file__).resolve().parent / "src"
if _SRC_DIR.exists():
    src_str = str(_SRC_DIR)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)

from InterfaceComponents.InspectorApp import SemanticInspector
from SemanticComponents.Context import SemanticOptions


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Step through the build and render of a program.")
    parser.add_argument("program", type=Path, help="Program action list (.json).")
    parser.add_argument(
        "--first-param-mismatch-only",
        action="store_true",
        help="Report only the first mismatched argument of each call.",
    )
    args = parser.parse_args(argv)

    options = SemanticOptions(report_all_param_mismatches=not args.first_param_mismatch_only)
    SemanticInspector(args.program, options=options).run()


if __name__ == "__main__":
    main()
