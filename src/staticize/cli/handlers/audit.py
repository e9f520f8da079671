"""
Audit Command Handler.

Reports, for every method of every class, the modifier verdict, the scan
result and whether the rewrite would apply. Nothing is written.
"""

import json
from pathlib import Path
from typing import List, Optional, Tuple

import libcst as cst
from rich.table import Table

from staticize.config import RuntimeConfig
from staticize.core.engine import MethodReport, StaticizeEngine
from staticize.utils.console import console, log_error, log_info


def handle_audit(
  path: Path,
  json_mode: bool = False,
  single_underscore_private: Optional[bool] = None,
  final_decorators: Optional[List[str]] = None,
) -> int:
  """
  Scans a file or directory and reports per-method eligibility.

  Args:
      path: Input source file or directory.
      json_mode: If True, output JSON to stdout and suppress Rich logs.
      single_underscore_private: Override for the private naming rule.
      final_decorators: Override for the final decorator names.

  Returns:
      int: Exit code (0 on success, 1 if the path is missing or a file failed to parse).
  """
  if not path.exists():
    log_error(f"Path not found: {path}")
    return 1

  config = RuntimeConfig.load(
    single_underscore_private=single_underscore_private,
    final_decorators=final_decorators,
    search_path=path if path.is_dir() else path.parent,
  )
  engine = StaticizeEngine(config)
  files = [path] if path.is_file() else [f for f in sorted(path.rglob("*.py")) if not config.is_excluded(f, path)]

  if not json_mode:
    log_info(f"Auditing {len(files)} files...")

  failed = False
  rows = []
  for f in files:
    try:
      reports = engine.audit(f.read_text(encoding="utf-8"), source_path=str(f))
    except (OSError, UnicodeDecodeError, cst.ParserSyntaxError) as e:
      log_error(f"Failed to parse {f.name}: {e}")
      failed = True
      continue
    rows.extend((f, r) for r in reports)

  if json_mode:
    output = [{"file": str(f), **r.model_dump()} for f, r in rows]
    print(json.dumps(output, indent=2))
    return 1 if failed else 0

  _render_table(path, rows)
  return 1 if failed else 0


def _render_table(path: Path, rows: List[Tuple[Path, MethodReport]]) -> None:
  table = Table(title=f"Static Eligibility: {path.name}")
  table.add_column("File", style="dim")
  table.add_column("Method", style="cyan")
  table.add_column("Modifiers")
  table.add_column("Verdict")
  table.add_column("Result")

  for f, report in rows:
    style = "green" if report.eligible else "yellow"
    table.add_row(
      f.name,
      f"{report.class_name}.{report.method_name}",
      " ".join(report.modifiers),
      report.verdict or "-",
      f"[{style}]{report.reason}[/{style}]",
    )

  console.print(table)
  eligible = sum(1 for _, r in rows if r.eligible)
  console.print(f"[bold]Eligible:[/bold] [green]{eligible}[/green] of {len(rows)} methods")
