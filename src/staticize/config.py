"""
Runtime Configuration Store.

Settings are read from the ``[tool.staticize]`` table of the nearest
``pyproject.toml`` and overridden by explicit (CLI) arguments.

.. code-block:: toml

    [tool.staticize]
    single_underscore_private = true
    final_decorators = ["final", "typing.final", "my_lib.sealed"]
    exclude = ["tests/*", "*_pb2.py"]
"""

import fnmatch
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

DEFAULT_FINAL_DECORATORS = ["final", "typing.final", "typing_extensions.final"]


class RuntimeConfig(BaseModel):
  """
  Global configuration container for the rewrite engine.
  """

  single_underscore_private: bool = Field(
    False,
    description="Treat '_name' methods as private. By default only name-mangled '__name' methods are.",
  )
  final_decorators: List[str] = Field(
    default_factory=lambda: list(DEFAULT_FINAL_DECORATORS),
    description="Dotted decorator names that mark a method as final.",
  )
  exclude: List[str] = Field(default_factory=list, description="Glob patterns of files skipped in directory runs.")

  @field_validator("final_decorators")
  @classmethod
  def validate_decorators(cls, v: List[str]) -> List[str]:
    """
    Normalizes decorator names (strips whitespace and a leading '@').

    Args:
        v (List[str]): Raw decorator names.

    Returns:
        List[str]: Cleaned names.

    Raises:
        ValueError: If a name is empty after cleaning.
    """
    cleaned = []
    for name in v:
      name_clean = name.strip().lstrip("@")
      if not name_clean:
        raise ValueError("Decorator names must not be empty.")
      cleaned.append(name_clean)
    return cleaned

  def is_excluded(self, path: Path, root: Optional[Path] = None) -> bool:
    """
    Checks a file against the ``exclude`` patterns.

    Args:
        path (Path): The file being considered.
        root (Optional[Path]): Directory the patterns are relative to.

    Returns:
        bool: True if any pattern matches.
    """
    rel = path.relative_to(root) if root and path.is_relative_to(root) else path
    candidate = rel.as_posix()
    return any(fnmatch.fnmatch(candidate, pattern) for pattern in self.exclude)

  @classmethod
  def load(
    cls,
    single_underscore_private: Optional[bool] = None,
    final_decorators: Optional[List[str]] = None,
    exclude: Optional[List[str]] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with CLI arguments.

    Args:
        single_underscore_private (Optional[bool]): Override for the private naming rule.
        final_decorators (Optional[List[str]]): Override for final decorator names.
        exclude (Optional[List[str]]): Extra exclude patterns, appended to the TOML ones.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config, _ = _load_toml_settings(start_dir)

    if single_underscore_private is not None:
      final_private = single_underscore_private
    else:
      final_private = toml_config.get("single_underscore_private", False)

    final_decos = final_decorators or toml_config.get("final_decorators", list(DEFAULT_FINAL_DECORATORS))
    final_exclude = [*toml_config.get("exclude", []), *(exclude or [])]

    return cls(
      single_underscore_private=final_private,
      final_decorators=final_decos,
      exclude=final_exclude,
    )


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches parents for 'pyproject.toml' and extracts the ``[tool.staticize]`` table.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError) as e:
        logging.warning(f"Ignoring unreadable {toml_path}: {e}")
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get("staticize", {}), parent

  return {}, None
