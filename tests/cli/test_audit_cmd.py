"""
Tests for the 'audit' CLI command.
"""

import json
from unittest.mock import patch

from staticize.cli.__main__ import main

SOURCE = """\
class A:
    def __init__(self):
        self.x = 0

    def __helper(self):
        return 1

    def __uses(self):
        return self.x
"""


def test_audit_json(tmp_path, capsys, captured_console):
  f = tmp_path / "mod.py"
  f.write_text(SOURCE, encoding="utf-8")

  assert main(["audit", str(f), "--json"]) == 0

  data = json.loads(capsys.readouterr().out)
  by_name = {row["method_name"]: row for row in data}
  assert set(by_name) == {"__init__", "__helper", "__uses"}
  assert by_name["__helper"]["eligible"] is True
  assert by_name["__helper"]["file"] == str(f)
  assert by_name["__uses"]["instance_dependent"] is True
  assert by_name["__init__"]["verdict"] == "overridable"


def test_audit_table(tmp_path, captured_console):
  f = tmp_path / "mod.py"
  f.write_text(SOURCE, encoding="utf-8")

  assert main(["audit", str(f)]) == 0

  output = captured_console.getvalue()
  assert "A.__helper" in output
  assert "made static" in output
  assert "Eligible: 1 of 3 methods" in output


def test_audit_rule_flags(tmp_path, capsys, captured_console):
  f = tmp_path / "mod.py"
  f.write_text("class A:\n    def _h(self):\n        return 1\n", encoding="utf-8")

  assert main(["audit", str(f), "--json", "--single-underscore-private"]) == 0

  (row,) = json.loads(capsys.readouterr().out)
  assert row["modifiers"] == ["private"]
  assert row["eligible"] is True


def test_audit_parse_failure(tmp_path, capsys, captured_console):
  (tmp_path / "bad.py").write_text("class A(:\n", encoding="utf-8")

  assert main(["audit", str(tmp_path), "--json"]) == 1
  assert json.loads(capsys.readouterr().out) == []


def test_audit_missing_path(tmp_path, captured_console):
  assert main(["audit", str(tmp_path / "missing")]) == 1


def test_audit_json_is_quiet(tmp_path, capsys):
  f = tmp_path / "mod.py"
  f.write_text(SOURCE, encoding="utf-8")

  with patch("staticize.cli.handlers.audit.log_info") as mock_log:
    assert main(["audit", str(f), "--json"]) == 0
    mock_log.assert_not_called()
  json.loads(capsys.readouterr().out)


def test_audit_json_stdout_stays_parseable_on_failure(tmp_path, capsys):
  (tmp_path / "bad.py").write_text("class A(:\n", encoding="utf-8")
  (tmp_path / "mod.py").write_text(SOURCE, encoding="utf-8")

  assert main(["audit", str(tmp_path), "--json"]) == 1

  captured = capsys.readouterr()
  data = json.loads(captured.out)
  assert {row["method_name"] for row in data} == {"__init__", "__helper", "__uses"}
  assert "Failed to parse bad.py" in captured.err
