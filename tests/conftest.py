"""Pytest configuration: make `src/` and the entry scripts importable."""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
for path in (ROOT / "src", ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from SemanticComponents.Context import SemanticContext, SemanticOptions  # noqa: E402

PROGRAMS_DIR = ROOT / "examples" / "programs"


@pytest.fixture
def ctx() -> SemanticContext:
    return SemanticContext()


@pytest.fixture
def first_mismatch_ctx() -> SemanticContext:
    return SemanticContext(options=SemanticOptions(report_all_param_mismatches=False))


@pytest.fixture
def programs_dir() -> Path:
    return PROGRAMS_DIR
