"""Test the command-line entrypoint."""
import json
from pathlib import Path

import pytest

from rpn_calculator.common.operations import OperationStep, PushStep
from rpn_calculator.main import build_output_path, format_number, main, render_step


@pytest.mark.parametrize("value,text", [
    (7.0, "7"),
    (-2.0, "-2"),
    (3.3333333333333335, "3.3333333333333335"),
    (0.25, "0.25"),
    (float("inf"), "inf"),
])
def test_format_number(value, text) -> None:
    """Integral values drop their fractional part."""
    assert format_number(value) == text


def test_render_step() -> None:
    """Steps render as push and operation lines."""
    push = PushStep(token="4", value=4.0, stack_snapshot=(3.0, 4.0))
    operation = OperationStep(operator="+", operands=(3.0, 4.0), result=7.0, stack_snapshot=(7.0,))
    assert render_step(push) == "Push 4 -> Stack: [3, 4]"
    assert render_step(operation) == "3 + 4 = 7 -> Stack: [7]"


@pytest.mark.parametrize("name,expected", [
    ("operations_short.7z", "operations_short_7z_results.txt"),
    ("ops.tar.xz", "ops_tar_xz_results.txt"),
    ("ops.txt", "ops_txt_results.txt"),
])
def test_build_output_path(tmp_path: Path, name, expected) -> None:
    """Output files sit next to the input with a flattened suffix."""
    assert build_output_path(tmp_path / name) == tmp_path / expected


def test_eval_prints_result(capsys) -> None:
    """eval prints the trimmed expression and result."""
    assert main(["eval", "5 1 2 + 4 * + 3 -"]) == 0
    out = capsys.readouterr().out
    assert "Expression: 5 1 2 + 4 * + 3 -" in out
    assert "Result: 14" in out


def test_eval_verbose_prints_steps(capsys) -> None:
    """eval --verbose prints every step before the result."""
    assert main(["eval", "--verbose", "3 4 +"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[:3] == [
        "Push 3 -> Stack: [3]",
        "Push 4 -> Stack: [3, 4]",
        "3 + 4 = 7 -> Stack: [7]",
    ]
    assert lines[-1] == "Result: 7"


def test_eval_error(capsys) -> None:
    """Calculation errors exit with 1 and an Error: prefix on stderr."""
    assert main(["eval", "5 0 /"]) == 1
    assert capsys.readouterr().err.strip() == "Error: Division by zero"


def test_eval_json(capsys) -> None:
    """eval --json prints a machine-readable payload."""
    assert main(["eval", "--json", "2 3 ^"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["success"] is True
    assert data["data"]["result"] == 8.0
    assert data["data"]["steps"] is None


def reject_constant(name):
    raise ValueError(f"non-standard JSON constant {name}")


@pytest.mark.parametrize("expr", ["1e308 10 *", "-8 0.5 ^", "10 400 ^"])
def test_eval_json_non_finite_result(capsys, expr) -> None:
    """Infinite and NaN results are written as null, keeping the output valid JSON."""
    assert main(["eval", "--json", "--verbose", expr]) == 0
    data = json.loads(capsys.readouterr().out, parse_constant=reject_constant)
    assert data["success"] is True
    assert data["data"]["result"] is None
    assert data["data"]["steps"][-1]["result"] is None


def test_eval_json_error(capsys) -> None:
    """Errors in JSON mode keep their kind."""
    assert main(["eval", "--json", "3 4 invalid"]) == 1
    data = json.loads(capsys.readouterr().out)
    assert data == {
        "success": False,
        "error": {"kind": "invalid_token", "message": "Invalid token: invalid"},
    }


def test_examples(capsys) -> None:
    """examples lists infix and RPN forms."""
    assert main(["examples"]) == 0
    out = capsys.readouterr().out
    assert "RPN:   3 4 + 5 *" in out
    assert "Result: 35" in out


def test_info(capsys) -> None:
    """info prints the calculator description as JSON."""
    assert main(["info"]) == 0
    info = json.loads(capsys.readouterr().out)
    assert info["supported_operators"] == ["+", "-", "*", "/", "^"]


def test_batch_writes_results(tmp_path: Path) -> None:
    """batch evaluates a file and writes the results next to it."""
    input_file = tmp_path / "ops.txt"
    input_file.write_text("3 4 +\n2 3 ^\n")

    assert main(["batch", str(input_file), "--workers", "2"]) == 0

    content = (tmp_path / "ops_txt_results.txt").read_text().splitlines()
    assert sorted(content) == ["2 3 ^ = 8.0", "3 4 + = 7.0"]


def test_batch_reports_failures(tmp_path: Path) -> None:
    """batch exits with 1 when an expression fails."""
    input_file = tmp_path / "ops.txt"
    input_file.write_text("3 4 +\n5 0 /\n")

    assert main(["batch", str(input_file)]) == 1
    assert "5 0 / -> ERROR: Division by zero" in (tmp_path / "ops_txt_results.txt").read_text()


def test_batch_missing_file(tmp_path: Path) -> None:
    """A missing input file is a usage error."""
    with pytest.raises(SystemExit) as exc_info:
        main(["batch", str(tmp_path / "missing.txt")])
    assert exc_info.value.code == 2
