import io
import json

import pytest
from rich.console import Console

from compile_pipeline import BuildSession, compile_file_to_outputs
from SemanticComponents.Context import SemanticOptions
from SemanticComponents.Diagnostics import ErrorKind
from SemanticComponents.TreeBuilder import load_program

EXPECTED_EXAMPLE = """float scale(float x, int k);
int count = 0;
float samples[8];
bool done = false;
float scale(float x, int k) {
    return (x * [float] k);
}
for (count = 0; (count < 8); count = (count + 1)) {
    samples[count] = scale(0.5, count);
}
if (count == 8) {
    done = true;
} else {
    done = (!done);
}"""

EXPECTED_ERRORS = [
    "[Line 2] semantic error: re-declaration of variable x",
    "[Line 4] semantic error: addition operation expected integer but received boolean",
    "[Line 5] semantic error: undeclared variable y",
    "[Line 5] semantic error: undeclared variable y",
    "[Line 6] semantic error: test operation expected boolean but received integer",
    "[Line 8] semantic error: function f expects 1 parameters but received 0",
    "[Line 9] semantic error: index operator expects an array",
    "[Line 9] semantic error: function f is declared but never defined",
]


def test_example_program_compiles_cleanly(programs_dir, tmp_path):
    ok, path, message = compile_file_to_outputs(programs_dir / "example.json", output_root=tmp_path)
    assert ok, message
    assert path == tmp_path / "example.txt"
    assert path.read_text(encoding="utf-8") == EXPECTED_EXAMPLE


def test_error_program_reports_every_problem(programs_dir):
    name, actions = load_program(programs_dir / "errors.json")
    session = BuildSession()
    session.run_all(actions, name)
    assert [str(d) for d in session.diagnostics] == EXPECTED_ERRORS


def test_error_program_still_writes_output(programs_dir, tmp_path):
    ok, path, message = compile_file_to_outputs(programs_dir / "errors.json", output_root=tmp_path)
    assert not ok
    assert path is not None and path.exists()
    assert message.startswith("Semantic analysis found 8 error(s).")


def test_build_reports_carry_new_diagnostics(programs_dir):
    _, actions = load_program(programs_dir / "errors.json")
    session = BuildSession()
    session.begin_building(actions, "errors")
    reports = []
    while True:
        done, report = session.tick_building()
        if done:
            break
        reports.append(report)

    assert len(reports) == len(actions)
    assert all(report.top_level for report in reports)
    assert [len(report.new_diagnostics) for report in reports] == [0, 1, 0, 1, 2, 1, 0, 1, 1]
    assert reports[0].node_failed is False
    assert reports[1].node_failed is True


def test_finish_is_idempotent():
    session = BuildSession()
    session.begin_building(
        [{"node": "function", "returns": "int", "name": "f", "params": []}], "forward"
    )
    session.finish_building()
    first = session.finish()
    second = session.finish()
    assert [d.kind for d in first.new_diagnostics] == [ErrorKind.DECLARED_BUT_NEVER_DEFINED]
    assert second.new_diagnostics == []
    assert session.reporter.count() == 1


def test_streamed_code_matches_to_string(programs_dir):
    _, actions = load_program(programs_dir / "example.json")
    session = BuildSession()
    output = session.run_all(actions, "example")
    assert output == session.ast_root.to_string()
    assert output == session.ast_root.to_string()


def test_session_must_be_started():
    session = BuildSession()
    with pytest.raises(RuntimeError):
        session.tick_building()
    with pytest.raises(RuntimeError):
        session.tick_code_generation()


def test_first_param_mismatch_option_flows_through_session():
    actions = [
        {"node": "function", "returns": "void", "name": "g", "params": [["int", "a"], ["int", "b"]], "body": []},
        {
            "node": "call",
            "name": "g",
            "args": [{"node": "const", "type": "bool", "value": "true"}, {"node": "const", "type": "bool", "value": "false"}],
        },
    ]
    every = BuildSession()
    every.run_all(actions)
    first = BuildSession(options=SemanticOptions(report_all_param_mismatches=False))
    first.run_all(actions)
    assert every.reporter.count(ErrorKind.INCOMPATIBLE_PARAM) == 2
    assert first.reporter.count(ErrorKind.INCOMPATIBLE_PARAM) == 1


def test_diagnostics_echo_to_console():
    buffer = io.StringIO()
    session = BuildSession(
        options=SemanticOptions(echo_diagnostics=True),
        console=Console(file=buffer, width=200),
    )
    session.run_all([{"node": "var", "name": "ghost", "line": 3}])
    assert buffer.getvalue() == "[Line 3] semantic error: undeclared variable ghost\n"


def test_malformed_program(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps([{"node": "spaceship"}]), encoding="utf-8")
    ok, out_path, message = compile_file_to_outputs(path, output_root=tmp_path)
    assert not ok
    assert out_path is None
    assert message.startswith("Malformed program:")


def test_missing_program_file(tmp_path):
    ok, out_path, _message = compile_file_to_outputs(tmp_path / "nope.json", output_root=tmp_path)
    assert not ok
    assert out_path is None
