"""
Tests for Modifier Classification.

Verifies:
1.  STATIC anywhere short-circuits to ALREADY_STATIC.
2.  PRIVATE or FINAL (or both) yields ELIGIBLE_CANDIDATE.
3.  Everything else is OVERRIDABLE.
"""

import pytest

from staticize.analysis.modifiers import classify_modifiers
from staticize.enums import Modifier, Verdict


@pytest.mark.parametrize(
  "modifiers",
  [
    (Modifier.STATIC,),
    (Modifier.PUBLIC, Modifier.STATIC),
    (Modifier.PRIVATE, Modifier.STATIC),
    (Modifier.STATIC, Modifier.PRIVATE, Modifier.FINAL),
    (Modifier.PUBLIC, Modifier.FINAL, Modifier.STATIC),
  ],
)
def test_static_short_circuits(modifiers):
  assert classify_modifiers(modifiers) == Verdict.ALREADY_STATIC


@pytest.mark.parametrize(
  "modifiers",
  [
    (Modifier.PRIVATE,),
    (Modifier.PUBLIC, Modifier.FINAL),
    (Modifier.PRIVATE, Modifier.FINAL),
    (Modifier.FINAL, Modifier.SYNCHRONIZED),
  ],
)
def test_restricted_methods_are_candidates(modifiers):
  assert classify_modifiers(modifiers) == Verdict.ELIGIBLE_CANDIDATE


@pytest.mark.parametrize(
  "modifiers",
  [
    (),
    (Modifier.PUBLIC,),
    (Modifier.PROTECTED,),
    (Modifier.PUBLIC, Modifier.ABSTRACT),
    (Modifier.PACKAGE, Modifier.SYNCHRONIZED),
  ],
)
def test_unrestricted_methods_are_overridable(modifiers):
  assert classify_modifiers(modifiers) == Verdict.OVERRIDABLE


def test_accepts_any_iterable():
  """
  The classifier makes a single pass, so a generator is enough.
  """
  mods = (m for m in [Modifier.PUBLIC, Modifier.FINAL])
  assert classify_modifiers(mods) == Verdict.ELIGIBLE_CANDIDATE
