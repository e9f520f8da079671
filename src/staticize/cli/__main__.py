"""
Main Entry Point for staticize CLI.

This module handles argument parsing and dispatches to the command handlers
defined in ``staticize.cli.handlers``.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from staticize import __version__
from staticize.cli import handlers
from staticize.utils.console import set_verbosity


def _add_rule_flags(cmd: argparse.ArgumentParser) -> None:
  cmd.add_argument(
    "--single-underscore-private",
    action="store_true",
    default=None,
    help="Treat '_name' methods as private (Overrides config)",
  )
  cmd.add_argument(
    "--final-decorator",
    dest="final_decorators",
    action="append",
    default=None,
    help="Decorator name marking a method final; repeatable (Overrides config)",
  )


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="staticize: make non-overridable methods without instance access static")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument("-v", "--verbose", action="store_true", help="Log why each method was kept")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: CONVERT ---
  cmd_conv = subparsers.add_parser("convert", help="Rewrite a Python file or directory")
  cmd_conv.add_argument("path", type=Path, help="Input source file or directory")
  cmd_conv.add_argument("--out", type=Path, help="Output destination (file or dir)")
  cmd_conv.add_argument("--in-place", action="store_true", help="Overwrite input files")
  cmd_conv.add_argument("--check", action="store_true", help="Write nothing; exit 1 if any method would change")
  cmd_conv.add_argument("--diff", action="store_true", help="Print a unified diff instead of writing")
  cmd_conv.add_argument("--exclude", nargs="*", default=None, help="Glob patterns to skip in directories")
  _add_rule_flags(cmd_conv)

  # --- Command: AUDIT ---
  cmd_audit = subparsers.add_parser("audit", help="Report per-method eligibility without rewriting")
  cmd_audit.add_argument("path", type=Path, help="Input source file or directory")
  cmd_audit.add_argument("--json", action="store_true", help="Print JSON to stdout")
  _add_rule_flags(cmd_audit)

  # --- Command: DESCRIBE ---
  cmd_desc = subparsers.add_parser("describe", help="List available recipes")
  cmd_desc.add_argument("--json", action="store_true", help="Print JSON to stdout")

  args = parser.parse_args(argv)
  set_verbosity(args.verbose)

  if args.command == "convert":
    return handlers.handle_convert(
      args.path,
      args.out,
      in_place=args.in_place,
      check=args.check,
      show_diff=args.diff,
      single_underscore_private=args.single_underscore_private,
      final_decorators=args.final_decorators,
      exclude=args.exclude,
    )

  elif args.command == "audit":
    return handlers.handle_audit(
      args.path,
      json_mode=args.json,
      single_underscore_private=args.single_underscore_private,
      final_decorators=args.final_decorators,
    )

  elif args.command == "describe":
    return handlers.handle_describe(json_mode=args.json)

  return 1


if __name__ == "__main__":
  sys.exit(main())
