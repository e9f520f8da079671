"""
Tests for Configuration Loading Logic.

Verifies:
1.  Defaults when no pyproject.toml is present.
2.  Values from `[tool.staticize]` in the nearest pyproject.toml.
3.  CLI overrides take priority; CLI excludes extend the TOML ones.
4.  Decorator name validation.
5.  Exclude pattern matching.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from staticize.config import DEFAULT_FINAL_DECORATORS, RuntimeConfig, _load_toml_settings


def _write_toml(root: Path, body: str) -> None:
  (root / "pyproject.toml").write_text(body, encoding="utf-8")


def test_defaults(tmp_path):
  config = RuntimeConfig.load(search_path=tmp_path)
  assert config.single_underscore_private is False
  assert config.final_decorators == DEFAULT_FINAL_DECORATORS
  assert config.exclude == []


def test_values_from_toml(tmp_path):
  _write_toml(
    tmp_path,
    '[tool.staticize]\nsingle_underscore_private = true\nfinal_decorators = ["sealed"]\nexclude = ["gen/*"]\n',
  )
  config = RuntimeConfig.load(search_path=tmp_path)

  assert config.single_underscore_private is True
  assert config.final_decorators == ["sealed"]
  assert config.exclude == ["gen/*"]


def test_toml_found_in_parent(tmp_path):
  _write_toml(tmp_path, "[tool.staticize]\nsingle_underscore_private = true\n")
  nested = tmp_path / "a" / "b"
  nested.mkdir(parents=True)

  settings, found_in = _load_toml_settings(nested)
  assert settings == {"single_underscore_private": True}
  assert found_in == tmp_path.resolve()


def test_cli_overrides(tmp_path):
  _write_toml(
    tmp_path,
    '[tool.staticize]\nsingle_underscore_private = true\nfinal_decorators = ["sealed"]\nexclude = ["gen/*"]\n',
  )
  config = RuntimeConfig.load(
    single_underscore_private=False,
    final_decorators=["@my.final"],
    exclude=["*_pb2.py"],
    search_path=tmp_path,
  )

  assert config.single_underscore_private is False
  assert config.final_decorators == ["my.final"]
  assert config.exclude == ["gen/*", "*_pb2.py"]


def test_pyproject_without_table(tmp_path):
  _write_toml(tmp_path, '[project]\nname = "x"\n')
  assert RuntimeConfig.load(search_path=tmp_path).exclude == []


def test_invalid_toml_is_ignored(tmp_path, captured_console):
  _write_toml(tmp_path, "[tool.staticize\n")
  config = RuntimeConfig.load(search_path=tmp_path)

  assert config.single_underscore_private is False
  assert "Ignoring unreadable" in captured_console.getvalue()


def test_empty_decorator_name_rejected():
  with pytest.raises(ValidationError):
    RuntimeConfig(final_decorators=["final", " @ "])


def test_is_excluded(tmp_path):
  config = RuntimeConfig(exclude=["tests/*", "*_pb2.py"])

  assert config.is_excluded(tmp_path / "tests" / "test_a.py", tmp_path)
  assert config.is_excluded(tmp_path / "pkg" / "api_pb2.py", tmp_path)
  assert not config.is_excluded(tmp_path / "pkg" / "api.py", tmp_path)
