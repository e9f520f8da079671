"""
Instance-Reference Scanning.

This module provides the ``InstanceReferenceScanner``, a read-only visitor that
decides whether a method body depends on the object it is invoked on.

A body is instance-dependent when it contains:

1.  **Instance Fields**: any identifier whose resolved binding is a field not
    itself declared static. Whether the identifier is bare (``x``) or behind a
    qualifier (``other.x``) is irrelevant; only the resolved field decides.
    ``B.a`` with a static ``a`` is therefore not a dependency.
2.  **Receiver References**: an explicit receiver (``this``/``self``/``super``)
    used as a value or as the qualifier of any member access, field or method.
    ``this.helper()`` blocks the caller even though ``helper`` is a method.

Local variables, parameters, method names and type names contribute nothing.
Nested lambdas, blocks and anonymous class bodies are scanned transparently,
receiver references included.
"""

from typing import Optional

from staticize.core.tree import Identifier, NamedVariable, Node, This
from staticize.core.visitor import TreeVisitor


class InstanceReferenceScanner(TreeVisitor):
  """
  Accumulates a monotone "found" flag over one scan.

  Attributes:
      found (bool): True once any instance reference has been seen. Never reset.
      evidence (Optional[str]): Name of the first reference that set ``found``.
  """

  def __init__(self) -> None:
    self.found = False
    self.evidence: Optional[str] = None

  @classmethod
  def find(cls, body: Optional[Node]) -> "InstanceReferenceScanner":
    """
    Scans ``body`` with a fresh scanner.

    Args:
        body: The method body. ``None`` (no body) scans as clean.

    Returns:
        InstanceReferenceScanner: The finished scanner holding the result.
    """
    scanner = cls()
    scanner.visit(body)
    return scanner

  def should_stop(self) -> bool:
    return self.found

  def _record(self, evidence: str) -> None:
    if not self.found:
      self.found = True
      self.evidence = evidence

  def visit_Identifier(self, node: Identifier) -> None:
    if node.binding.is_instance_field:
      self._record(node.name)

  def visit_This(self, node: This) -> None:
    self._record(node.keyword)

  def visit_NamedVariable(self, node: NamedVariable) -> bool:
    """Declared names are definitions; only the initializer is scanned."""
    self.visit(node.initializer)
    return False


def has_instance_reference(body: Optional[Node]) -> bool:
  """
  Returns True if ``body`` reads or writes instance state.

  Args:
      body: The method body, or None for a method without one.

  Returns:
      bool: The scan result. An absent or empty body yields False.
  """
  return InstanceReferenceScanner.find(body).found
