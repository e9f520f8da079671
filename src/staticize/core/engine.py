"""
Orchestration Engine for Source Rewrites.

This module provides the ``StaticizeEngine``, the driver that connects Python
source text to the language-independent recipes.

The pipeline for one module:

1.  **Parse**: LibCST parses the source; syntax errors end the run with
    ``success=False`` and the code untouched.
2.  **Lower**: ``ModuleLowering`` builds a ``CompilationUnit`` from the module,
    resolving names through ``ScopeProvider`` metadata.
3.  **Decide**: ``RecipePipeline`` runs ``NonOverridableToStatic`` over every
    method of every class.
4.  **Splice**: ``StaticMethodTransformer`` applies each change to the
    original LibCST nodes and the module is rendered back to text.

The engine also exposes ``audit``, which reports every method's decision
without rewriting anything.
"""

import logging
from typing import List, Optional

import libcst as cst
from libcst.metadata import MetadataWrapper
from pydantic import BaseModel, Field

from staticize.config import RuntimeConfig
from staticize.core.pipeline import RecipePipeline
from staticize.core.recipe import NonOverridableToStatic
from staticize.core.tree import ClassDeclaration, MethodDeclaration
from staticize.frontends.python import StaticMethodTransformer, lower_module

logger = logging.getLogger(__name__)


class MethodReport(BaseModel):
  """
  Audit line for one method.
  """

  class_name: str
  method_name: str
  modifiers: List[str] = Field(default_factory=list, description="Declared modifiers, in order.")
  verdict: Optional[str] = Field(None, description="Modifier classifier verdict; None when the method was skipped.")
  instance_dependent: Optional[bool] = Field(None, description="Scan result; None when the body was not scanned.")
  eligible: bool = False
  reason: str = ""


class ConversionResult(BaseModel):
  """
  Container for the results of rewriting one module.
  """

  code: str = Field(default="", description="The generated source code.")
  source_path: Optional[str] = Field(default=None, description="File the code was read from, if any.")
  changes: List[str] = Field(default_factory=list, description="'Class.method' of every method made static.")
  errors: List[str] = Field(default_factory=list, description="List of error messages encountered.")
  success: bool = Field(default=True, description="True if the module was parsed and processed.")

  @property
  def changed(self) -> bool:
    """
    Check if any method was rewritten.

    Returns:
        True if one or more changes were applied.
    """
    return len(self.changes) > 0

  @property
  def has_errors(self) -> bool:
    return len(self.errors) > 0


class StaticizeEngine:
  """
  The main rewrite unit.

  Stateless across calls: every ``run`` parses, lowers and decides from scratch.
  """

  def __init__(self, config: Optional[RuntimeConfig] = None) -> None:
    """
    Initializes the Engine.

    Args:
        config (RuntimeConfig, optional): Runtime settings. Defaults are used if None.
    """
    self.config = config or RuntimeConfig()
    self.recipe = NonOverridableToStatic()

  def run(self, code: str, source_path: Optional[str] = None) -> ConversionResult:
    """
    Rewrites eligible methods of a Python module.

    Args:
        code: Python source text.
        source_path: File the code was read from; carried on the tree and the result.

    Returns:
        ConversionResult: The rewritten code and the list of changed methods.
    """
    try:
      module = cst.parse_module(code)
    except cst.ParserSyntaxError as e:
      return ConversionResult(code=code, source_path=source_path, errors=[f"Syntax error: {e}"], success=False)

    wrapper = MetadataWrapper(module)
    lowered = lower_module(wrapper, self.config, source_path)
    unit = lowered.unit
    _, changes = RecipePipeline([self.recipe]).run(unit)
    logger.debug(f"{unit.source_path or '<string>'}: {len(changes)} methods to make static")
    if not changes:
      return ConversionResult(code=code, source_path=unit.source_path)

    targets = set()
    for change in changes:
      targets.update(lowered.origins.get(change.before, []))

    new_module = wrapper.module.visit(StaticMethodTransformer(targets))
    return ConversionResult(
      code=new_module.code,
      source_path=unit.source_path,
      changes=[f"{c.class_name}.{c.method_name}" for c in changes],
    )

  def audit(self, code: str, source_path: Optional[str] = None) -> List[MethodReport]:
    """
    Reports the decision for every method without rewriting.

    Args:
        code: Python source text.
        source_path: File the code was read from.

    Returns:
        List[MethodReport]: One entry per method, lowered or skipped.

    Raises:
        cst.ParserSyntaxError: If the code cannot be parsed.
    """
    wrapper = MetadataWrapper(cst.parse_module(code))
    lowered = lower_module(wrapper, self.config, source_path)
    logger.debug(f"Auditing {lowered.unit.source_path or '<string>'}")

    reports: List[MethodReport] = []
    pending: List[ClassDeclaration] = list(lowered.unit.classes)
    while pending:
      cls = pending.pop(0)
      for member in cls.members:
        if isinstance(member, ClassDeclaration):
          pending.append(member)
        elif isinstance(member, MethodDeclaration):
          reports.append(self._report(cls.name, member))

    for skipped in lowered.skipped:
      reports.append(MethodReport(class_name=skipped.class_name, method_name=skipped.method_name, reason=skipped.reason))
    return reports

  def _report(self, class_name: str, method: MethodDeclaration) -> MethodReport:
    decision = self.recipe.decide(method)
    return MethodReport(
      class_name=class_name,
      method_name=method.name,
      modifiers=[m.value for m in method.modifiers],
      verdict=decision.verdict.value,
      instance_dependent=decision.instance_dependent,
      eligible=decision.changed,
      reason=decision.reason,
    )
