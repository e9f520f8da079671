"""
Enumerations for staticize.

This module defines the closed vocabularies shared by the tree model, the
analysis passes and the drivers: declaration modifiers, binding kinds of
resolved identifiers, and the eligibility verdicts of the modifier classifier.
"""

from enum import Enum


class Modifier(str, Enum):
  """
  Declaration modifiers attached to a method or type.

  Order inside a modifier list is significant for rendering only.
  """

  PUBLIC = "public"
  PROTECTED = "protected"
  PRIVATE = "private"
  PACKAGE = "package"  # Explicit package-private / module-level visibility
  FINAL = "final"
  STATIC = "static"
  ABSTRACT = "abstract"
  SYNCHRONIZED = "synchronized"
  NATIVE = "native"
  DEFAULT = "default"
  SEALED = "sealed"


class BindingKind(str, Enum):
  """
  What an identifier inside a method body resolves to.

  Supplied by whoever builds the tree; the analysis never computes it.
  """

  UNRESOLVED = "unresolved"
  LOCAL = "local"
  PARAMETER = "parameter"
  FIELD = "field"
  METHOD = "method"
  TYPE = "type"


class Verdict(str, Enum):
  """
  Eligibility verdict of the modifier classifier.
  """

  ALREADY_STATIC = "already_static"
  OVERRIDABLE = "overridable"
  ELIGIBLE_CANDIDATE = "eligible_candidate"
