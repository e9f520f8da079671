"""
Orchestration logic for applying recipes to a compilation unit.

This module provides the ``RecipePipeline``, which runs a sequence of
``Recipe`` instances over every method of every class (including nested
classes) in a ``CompilationUnit``. Classes whose members are untouched are
returned as the same objects, so callers can detect changes by identity.
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from staticize.core.recipe import Recipe
from staticize.core.tree import ClassDeclaration, CompilationUnit, MethodDeclaration


@dataclass(frozen=True)
class MethodChange:
  """
  Record of one method rewritten by one recipe.
  """

  class_name: str
  method_name: str
  recipe: str
  before: MethodDeclaration
  after: MethodDeclaration


class RecipePipeline:
  """
  Manages a sequence of recipes and executes them in order.
  """

  def __init__(self, recipes: List[Recipe]) -> None:
    """
    Initializes the pipeline with a list of recipes.

    Args:
        recipes: Sequenced list of recipes to execute.
    """
    self.recipes = recipes

  def run(self, unit: CompilationUnit) -> Tuple[CompilationUnit, List[MethodChange]]:
    """
    Applies all recipes to the unit.

    Args:
        unit: The tree to transform.

    Returns:
        Tuple: The resulting unit (the input object if nothing changed) and the
        list of changes in application order.
    """
    changes: List[MethodChange] = []
    current = unit
    for recipe in self.recipes:
      classes = tuple(self._run_class(recipe, cls, changes) for cls in current.classes)
      if any(new is not old for new, old in zip(classes, current.classes)):
        current = replace(current, classes=classes)
    return current, changes

  def _run_class(self, recipe: Recipe, cls: ClassDeclaration, changes: List[MethodChange]) -> ClassDeclaration:
    members = []
    dirty = False
    for member in cls.members:
      updated = member
      if isinstance(member, MethodDeclaration):
        updated = recipe.visit_method(member)
        if updated is not member:
          changes.append(
            MethodChange(
              class_name=cls.name,
              method_name=member.name,
              recipe=recipe.display_name,
              before=member,
              after=updated,
            )
          )
      elif isinstance(member, ClassDeclaration):
        updated = self._run_class(recipe, member, changes)

      dirty = dirty or updated is not member
      members.append(updated)

    if not dirty:
      return cls
    return replace(cls, members=tuple(members))


def find_method(unit: CompilationUnit, class_name: str, method_name: str) -> Optional[MethodDeclaration]:
  """
  Looks up a method by owning class and name, searching nested classes.

  Args:
      unit: The compilation unit.
      class_name: The simple name of the declaring class.
      method_name: The method name.

  Returns:
      Optional[MethodDeclaration]: The first match, or None.
  """
  pending = list(unit.classes)
  while pending:
    cls = pending.pop(0)
    if cls.name == class_name:
      found = cls.method(method_name)
      if found is not None:
        return found
    pending.extend(m for m in cls.members if isinstance(m, ClassDeclaration))
  return None
