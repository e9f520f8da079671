"""
Modifier Classification.

Decides, from a method's declared modifiers alone, whether the method is a
candidate for the static rewrite. The body is never consulted here.
"""

from typing import Iterable

from staticize.enums import Modifier, Verdict

_RESTRICTING = frozenset({Modifier.PRIVATE, Modifier.FINAL})


def classify_modifiers(modifiers: Iterable[Modifier]) -> Verdict:
  """
  Classifies a modifier list in a single pass.

  ``STATIC`` anywhere in the list short-circuits to ``ALREADY_STATIC``.
  Otherwise the list is ``ELIGIBLE_CANDIDATE`` when it holds ``PRIVATE`` or
  ``FINAL`` (a subclass cannot override such a method), else ``OVERRIDABLE``.
  Only these two direct modifiers are considered; finality of the enclosing
  type is not.

  Args:
      modifiers: The declared modifiers, in any order.

  Returns:
      Verdict: The eligibility verdict.
  """
  restricted = False
  for modifier in modifiers:
    if modifier == Modifier.STATIC:
      return Verdict.ALREADY_STATIC
    if modifier in _RESTRICTING:
      restricted = True

  return Verdict.ELIGIBLE_CANDIDATE if restricted else Verdict.OVERRIDABLE
