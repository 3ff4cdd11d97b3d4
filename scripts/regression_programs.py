from __future__ import annotations

import json
import sys
from pathlib import Path

# Make `src/` importable (matches DirectCompiler / inspector entrypoints).
_REPO_ROOT = Path(__file__).resolve().parents[1]
_SRC_DIR = _REPO_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from compile_pipeline import BuildSession  # noqa: E402
from SemanticComponents.TreeBuilder import BuildError, load_program  # noqa: E402


def _collect_programs() -> list[Path]:
    return sorted((_REPO_ROOT / "examples" / "programs").glob("*.json"))


def _expected_diagnostics_path() -> Path:
    return _REPO_ROOT / "examples" / "expected_diagnostics.json"


def _load_expected_cases(*, expected_file: Path) -> dict[str, list[str]]:
    data = json.loads(expected_file.read_text(encoding="utf-8"))
    cases = data.get("cases")
    if not isinstance(cases, dict):
        raise ValueError(
            f"Invalid expected diagnostics file format (missing/invalid 'cases'): {expected_file}"
        )
    return cases


def main(argv: list[str]) -> int:
    expected_file = _expected_diagnostics_path()
    if not expected_file.exists():
        print(f"Missing expected diagnostics file: {expected_file.relative_to(_REPO_ROOT)}")
        return 2

    expected_cases = _load_expected_cases(expected_file=expected_file)

    files = _collect_programs()
    if not files:
        print("No files found under examples/programs/*.json")
        return 2

    mismatches: list[Path] = []
    missing_expected: list[Path] = []
    observed_keys: set[str] = set()

    for path in files:
        rel = path.relative_to(_REPO_ROOT)
        key = rel.as_posix()
        observed_keys.add(key)

        try:
            name, actions = load_program(path)
            session = BuildSession()
            session.run_all(actions, name)
        except BuildError as e:
            print(f"MALFORMED      {rel}: {e}")
            mismatches.append(path)
            continue

        actual = [str(d) for d in session.diagnostics]
        expected = expected_cases.get(key)
        if expected is None:
            print(f"MISSING EXPECTED {rel}")
            missing_expected.append(path)
        elif actual == expected:
            print(f"OK             {rel}: {len(actual)} diagnostic(s)")
        else:
            print(f"BAD DIAGNOSTICS {rel}")
            for line in expected:
                print(f"  expected: {line}")
            for line in actual:
                print(f"  actual:   {line}")
            mismatches.append(path)

    stale_expected = sorted(set(expected_cases.keys()) - observed_keys)
    for key in stale_expected:
        print(f"STALE EXPECTED {key}")

    print(
        f"\nTOTAL {len(files)}  MISMATCHES {len(mismatches)}"
        f"  MISSING_EXPECTED {len(missing_expected)}  STALE_EXPECTED {len(stale_expected)}"
    )

    return 1 if (mismatches or missing_expected or stale_expected) else 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
