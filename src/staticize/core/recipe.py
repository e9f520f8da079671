"""
Rewrite Recipes.

A recipe is a named, self-describing rewrite applied to one method declaration
at a time. This module defines the ``Recipe`` contract and the
``NonOverridableToStatic`` recipe, which composes the modifier classifier and
the instance-reference scanner into a decision and a minimal modifier edit.

Decision table:

* ``ALREADY_STATIC`` -> unchanged (the body is never scanned).
* ``OVERRIDABLE`` -> unchanged.
* ``ELIGIBLE_CANDIDATE`` with an instance reference in the body -> unchanged.
* ``ELIGIBLE_CANDIDATE`` without one -> ``STATIC`` inserted right after the
  leading access modifier; every other modifier keeps its relative order.

A method whose enclosing type is unknown cannot be proven safe and is left
unchanged.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple

from staticize.analysis.instance_refs import InstanceReferenceScanner
from staticize.analysis.modifiers import classify_modifiers
from staticize.core.tree import MethodDeclaration
from staticize.enums import Modifier, Verdict

logger = logging.getLogger(__name__)


class Recipe(ABC):
  """
  Abstract contract for a method-level rewrite.

  Attributes:
      display_name (str): Short name shown in recipe catalogs.
      description (str): One-line human readable description.
  """

  display_name: str = ""
  description: str = ""

  @abstractmethod
  def visit_method(self, method: MethodDeclaration) -> MethodDeclaration:
    """
    Returns ``method`` itself when unchanged, or a new declaration.

    Args:
        method: The declaration to rewrite.

    Returns:
        MethodDeclaration: The original or rewritten declaration.
    """
    pass


@dataclass(frozen=True)
class Decision:
  """
  Outcome of analysing a single method.

  Attributes:
      method (MethodDeclaration): The resulting declaration.
      verdict (Verdict): The modifier classifier's verdict.
      instance_dependent (Optional[bool]): Scan result; None when the body was not scanned.
      evidence (Optional[str]): The reference that made the body instance-dependent.
      changed (bool): True if ``method`` differs from the input.
  """

  method: MethodDeclaration
  verdict: Verdict
  instance_dependent: Optional[bool] = None
  evidence: Optional[str] = None
  changed: bool = False

  @property
  def reason(self) -> str:
    """Human readable explanation used by the audit report."""
    if self.changed:
      return "made static"
    if self.verdict == Verdict.ALREADY_STATIC:
      return "already static"
    if self.verdict == Verdict.OVERRIDABLE:
      return "overridable"
    if self.instance_dependent:
      return f"uses instance state ({self.evidence})"
    return "enclosing type unknown"


def insert_static(modifiers: Tuple[Modifier, ...]) -> Tuple[Modifier, ...]:
  """
  Inserts ``STATIC`` immediately after the first modifier.

  Args:
      modifiers: The original modifier list.

  Returns:
      Tuple[Modifier, ...]: A new list; the input is untouched.
  """
  return (*modifiers[:1], Modifier.STATIC, *modifiers[1:])


class NonOverridableToStatic(Recipe):
  """
  Adds the static modifier to private or final methods that never touch
  instance state.
  """

  display_name = "NonOverridableToStatic"
  description = "Convert Non-Overridable Methods without instance access to static methods."

  def decide(self, method: MethodDeclaration) -> Decision:
    """
    Runs the full decision procedure on one method.

    Args:
        method: The declaration under analysis.

    Returns:
        Decision: The verdict, scan result and resulting declaration.
    """
    verdict = classify_modifiers(method.modifiers)
    if verdict != Verdict.ELIGIBLE_CANDIDATE:
      return Decision(method=method, verdict=verdict)

    if method.enclosing_type is None:
      logger.debug(f"Skipping '{method.name}': enclosing type unknown")
      return Decision(method=method, verdict=verdict)

    scan = InstanceReferenceScanner.find(method.body)
    if scan.found:
      logger.debug(f"Keeping '{method.enclosing_type}.{method.name}': references '{scan.evidence}'")
      return Decision(method=method, verdict=verdict, instance_dependent=True, evidence=scan.evidence)

    rewritten = method.with_modifiers(insert_static(method.modifiers))
    return Decision(method=rewritten, verdict=verdict, instance_dependent=False, changed=True)

  def visit_method(self, method: MethodDeclaration) -> MethodDeclaration:
    return self.decide(method).method
