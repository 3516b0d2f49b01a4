import json

import pytest
from typer.testing import CliRunner

from alleq.cli import app

runner = CliRunner()


def test_check_success():
    result = runner.invoke(app, ["check", "3, 2 + 1, 1 + 1 + 1"])
    assert result.exit_code == 0
    assert "ok: 3 values are equal" in result.output


def test_check_mismatch_prints_diagnostic():
    result = runner.invoke(app, ["check", "1, 1, 2, 1"])
    assert result.exit_code == 1
    assert result.output.count("equality assertion failed") == 1
    assert "equality assertion failed at position 0 and 2" in result.output
    assert " 2: `2`" in result.output


def test_check_mismatch_with_message():
    result = runner.invoke(app, ["check", "'a', 'b'; 'letters {}', 2"])
    assert result.exit_code == 1
    assert " 1: `'b'`: letters 2" in result.output


def test_check_syntax_error():
    result = runner.invoke(app, ["check", "3"])
    assert result.exit_code == 2
    assert "at least 2 expressions" in result.output


def test_check_with_defines():
    result = runner.invoke(app, ["check", "-D", "x=3", "-D", "y=x * 1", "x, y, 3"])
    assert result.exit_code == 0


def test_check_bad_define():
    result = runner.invoke(app, ["check", "--define", "nope", "1, 1"])
    assert result.exit_code == 2
    assert "NAME=EXPR" in result.output


def test_check_debug_only_skipped_when_disabled(monkeypatch):
    monkeypatch.setenv("ALLEQ_DEBUG_ASSERTIONS", "false")
    result = runner.invoke(app, ["check", "--debug-only", "1, 2"])
    assert result.exit_code == 0
    assert "skipped" in result.output


def test_check_debug_only_runs_when_enabled(monkeypatch):
    monkeypatch.setenv("ALLEQ_DEBUG_ASSERTIONS", "true")
    result = runner.invoke(app, ["check", "--debug-only", "1, 2"])
    assert result.exit_code == 1


def test_check_debug_only_with_config_file(tmp_path, monkeypatch):
    monkeypatch.delenv("ALLEQ_DEBUG_ASSERTIONS", raising=False)
    config = tmp_path / "alleq.yaml"
    config.write_text("debug_assertions: false\n")
    result = runner.invoke(
        app, ["check", "--debug-only", "--config", str(config), "1, 2"]
    )
    assert result.exit_code == 0
    assert "skipped" in result.output


def test_check_missing_config():
    result = runner.invoke(app, ["check", "--config", "nonexistent.yaml", "1, 1"])
    assert result.exit_code == 2
    assert "config file not found: nonexistent.yaml" in result.output


@pytest.mark.parametrize(
    "content",
    ["debug_assertions: sometimes\n", "unknown_key: 1\n", "debug_assertions: [unclosed\n"],
)
def test_check_invalid_config(tmp_path, content):
    config = tmp_path / "alleq.yaml"
    config.write_text(content)
    result = runner.invoke(app, ["check", "--config", str(config), "1, 1"])
    assert result.exit_code == 3
    assert "invalid config file" in result.output


def test_check_expression_error_is_not_a_mismatch():
    result = runner.invoke(app, ["check", "x, 1, 1"])
    assert result.exit_code == 3
    assert "NameError" in result.output
    assert "equality assertion failed" not in result.output


def test_check_define_error():
    result = runner.invoke(app, ["check", "-D", "x=1 / 0", "x, x"])
    assert result.exit_code == 3
    assert "--define x failed" in result.output
    assert "ZeroDivisionError" in result.output


def test_check_debug_only_skips_defines_when_disabled(monkeypatch):
    monkeypatch.setenv("ALLEQ_DEBUG_ASSERTIONS", "false")
    result = runner.invoke(app, ["check", "--debug-only", "-D", "x=1 / 0", "x, 2"])
    assert result.exit_code == 0
    assert "skipped" in result.output


def test_check_log_file(tmp_path):
    log_file = tmp_path / "logs" / "alleq.log"
    result = runner.invoke(app, ["check", "--log-file", str(log_file), "1, 1, 2"])
    assert result.exit_code == 1
    content = log_file.read_text()
    assert "Running n-ary invocation: 1, 1, 2" in content
    assert "position 0 and 2" in content


def test_parse_command():
    result = runner.invoke(app, ["parse", "3,3,;"])
    assert result.exit_code == 0
    assert "canonical: 3, 3" in result.output
    assert "arity: 2" in result.output
    assert "dispatch: two-value" in result.output
    assert "message: no" in result.output


def test_parse_command_with_message():
    result = runner.invoke(app, ["parse", "a, b, c; 'm {}', a"])
    assert result.exit_code == 0
    assert "dispatch: n-ary" in result.output
    assert "message: yes" in result.output


def test_parse_command_rejects():
    result = runner.invoke(app, ["parse", "1, 2;;"])
    assert result.exit_code == 2


def test_config_command(tmp_path, monkeypatch):
    monkeypatch.delenv("ALLEQ_DEBUG_ASSERTIONS", raising=False)
    config = tmp_path / "alleq.yaml"
    config.write_text("debug_assertions: false\n")
    result = runner.invoke(app, ["config", "--config", str(config)])
    assert result.exit_code == 0
    assert json.loads(result.output) == {"debug_assertions": False}
