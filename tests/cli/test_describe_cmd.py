"""
Tests for the 'describe' CLI command.
"""

import json

import pytest

from staticize import __version__
from staticize.cli.__main__ import main


def test_describe_json(capsys, captured_console):
  assert main(["describe", "--json"]) == 0

  data = json.loads(capsys.readouterr().out)
  assert data == [
    {
      "name": "NonOverridableToStatic",
      "description": "Convert Non-Overridable Methods without instance access to static methods.",
    }
  ]


def test_describe_table(captured_console):
  assert main(["describe"]) == 0
  assert "NonOverridableToStatic" in captured_console.getvalue()


def test_version(capsys):
  with pytest.raises(SystemExit) as exc:
    main(["--version"])
  assert exc.value.code == 0
  assert __version__ in capsys.readouterr().out


def test_command_is_required(capsys):
  with pytest.raises(SystemExit) as exc:
    main([])
  assert exc.value.code == 2
