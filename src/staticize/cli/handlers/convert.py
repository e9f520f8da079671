"""
Convert Command Handler.

This module implements the logic for the ``staticize convert`` command.
It orchestrates:
1. Configuration loading (pyproject.toml + CLI overrides).
2. File discovery (single file or recursive directory, minus excludes).
3. Rewriting via the Engine.
4. Output: stdout, ``--out`` destination, in-place, unified diff or check-only.
"""

import difflib
from pathlib import Path
from typing import Dict, List, Optional

from rich.table import Table

from staticize.config import RuntimeConfig
from staticize.core.engine import ConversionResult, StaticizeEngine
from staticize.utils.console import console, log_error, log_info, log_success, log_warning


def handle_convert(
  input_path: Path,
  output_path: Optional[Path],
  in_place: bool = False,
  check: bool = False,
  show_diff: bool = False,
  single_underscore_private: Optional[bool] = None,
  final_decorators: Optional[List[str]] = None,
  exclude: Optional[List[str]] = None,
) -> int:
  """
  Handles the 'convert' command execution.

  Args:
      input_path: Path to the source file or directory.
      output_path: Destination file (for a file input) or directory.
      in_place: Overwrite the input files.
      check: Write nothing; fail if any file would change.
      show_diff: Print a unified diff instead of the full code.
      single_underscore_private: Override for the private naming rule.
      final_decorators: Override for the final decorator names.
      exclude: Additional exclude glob patterns.

  Returns:
      int: Exit code (0 for success, 1 for failure or pending changes under ``check``).
  """
  if not input_path.exists():
    log_error(f"Input not found: {input_path}")
    return 1

  config = RuntimeConfig.load(
    single_underscore_private=single_underscore_private,
    final_decorators=final_decorators,
    exclude=exclude,
    search_path=input_path if input_path.is_dir() else input_path.parent,
  )
  engine = StaticizeEngine(config)
  writes = not check and not show_diff

  if input_path.is_file():
    if writes and not in_place and output_path is None:
      result = _convert_single_file(engine, input_path, None, check, show_diff)
      if result.success:
        print(result.code, end="")
      return 0 if result.success else 1
    dest = input_path if in_place else output_path
    result = _convert_single_file(engine, input_path, dest, check, show_diff)
    results = {input_path.name: result}
  else:
    if writes and not in_place and output_path is None:
      log_error("Directory conversion requires --out destination directory or --in-place.")
      return 1

    py_files = [f for f in sorted(input_path.rglob("*.py")) if not config.is_excluded(f, input_path)]
    if not py_files:
      log_warning(f"No .py files found in {input_path}")
      return 0

    log_info(f"Processing {len(py_files)} files from {input_path}...")
    results: Dict[str, ConversionResult] = {}
    for src_file in py_files:
      rel_path = src_file.relative_to(input_path)
      dest = src_file if in_place else (output_path / rel_path if output_path else None)
      results[str(rel_path)] = _convert_single_file(engine, src_file, dest, check, show_diff)

  _print_batch_summary(results, check)

  if any(not r.success for r in results.values()):
    return 1
  if check and any(r.changed for r in results.values()):
    return 1
  return 0


def _convert_single_file(
  engine: StaticizeEngine,
  input_path: Path,
  output_path: Optional[Path],
  check: bool,
  show_diff: bool,
) -> ConversionResult:
  """
  Helper to execute the rewrite on a single file.

  Args:
      engine: The configured engine.
      input_path: Source file path.
      output_path: Destination file path; None writes nothing.
      check: Suppress writes.
      show_diff: Print a unified diff of the change.

  Returns:
      ConversionResult: Result object containing status and code.
  """
  try:
    code = input_path.read_text(encoding="utf-8")
  except (OSError, UnicodeDecodeError) as e:
    log_error(f"Failed to read {input_path}: {e}")
    return ConversionResult(success=False, errors=[str(e)])

  result = engine.run(code, source_path=str(input_path))
  if not result.success:
    log_error(f"Failed to convert {input_path}: {'; '.join(result.errors)}")
    return result

  for name in result.changes:
    log_info(f"[path]{input_path}[/path]: [code]{name}[/code] -> static")

  if show_diff and result.changed:
    diff = difflib.unified_diff(
      code.splitlines(keepends=True),
      result.code.splitlines(keepends=True),
      fromfile=str(input_path),
      tofile=str(input_path),
    )
    console.print("".join(diff), markup=False, highlight=False, end="")

  if check or show_diff or output_path is None:
    return result

  if output_path != input_path or result.changed:
    try:
      output_path.parent.mkdir(parents=True, exist_ok=True)
      output_path.write_text(result.code, encoding="utf-8")
    except OSError as e:
      log_error(f"Failed to write {output_path}: {e}")
      return ConversionResult(code=result.code, changes=result.changes, success=False, errors=[str(e)])
  return result


def _print_batch_summary(results: Dict[str, ConversionResult], check: bool = False) -> None:
  """
  Renders a summary table of conversion results to the console.

  Args:
      results: Dictionary mapping filenames to conversion results.
      check: True when running in check mode (changes are pending, not applied).
  """
  failures = {name: r for name, r in results.items() if not r.success}
  changed = {name: r for name, r in results.items() if r.success and r.changed}
  method_count = sum(len(r.changes) for r in changed.values())
  verb = "would be made static" if check else "made static"

  if not failures:
    log_success(f"{method_count} methods {verb} in {len(changed)}/{len(results)} files.")
    return

  table = Table(title="Conversion Report")
  table.add_column("File", style="cyan")
  table.add_column("Status", justify="center")
  table.add_column("Issues", style="red")

  for filename, res in failures.items():
    table.add_row(filename, "❌ Failed", "; ".join(res.errors) or "Unknown Error")

  console.print(table)
  console.print(f"\n[bold]Summary:[/bold] {method_count} methods {verb}, {len(failures)} files failed.")
