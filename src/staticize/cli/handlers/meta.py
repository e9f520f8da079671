"""
Meta Command Handlers.

Introspection of the recipe catalog: display names and descriptions of the
available recipes.
"""

import json

from rich.table import Table

from staticize.core.recipe import NonOverridableToStatic, Recipe
from staticize.utils.console import console

RECIPES = [NonOverridableToStatic]


def handle_describe(json_mode: bool = False) -> int:
  """
  Prints the display metadata of every registered recipe.

  Args:
      json_mode: Print a JSON list instead of a table.

  Returns:
      int: Exit code (0 for success).
  """
  recipes: list[Recipe] = [cls() for cls in RECIPES]
  if json_mode:
    print(json.dumps([{"name": r.display_name, "description": r.description} for r in recipes], indent=2))
    return 0

  table = Table(title="Recipes")
  table.add_column("Name", style="cyan")
  table.add_column("Description")
  for recipe in recipes:
    table.add_row(recipe.display_name, recipe.description)
  console.print(table)
  return 0
