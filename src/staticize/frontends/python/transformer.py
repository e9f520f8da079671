"""
Splicing of static decisions back into LibCST.

``StaticMethodTransformer`` rewrites exactly the ``FunctionDef`` nodes it is
given: it prepends ``@staticmethod`` as the outermost decorator (the position
right after the implicit access modifier) and drops the receiver parameter.
Every other node, including untouched methods, is returned as-is.

Call sites are left alone. Calls through an instance or the class
(``self.__helper(x)``, ``A.__helper(x)``) keep working. A call that passes the
instance explicitly through the class (``A.__helper(self, x)``) is not
adjusted and ends up with one argument too many.
"""

from typing import Set

import libcst as cst


def drop_receiver(params: cst.Parameters) -> cst.Parameters:
  """
  Removes the first positional parameter.

  Args:
      params: The method's parameters. Must contain a positional parameter.

  Returns:
      cst.Parameters: The parameters without the receiver.
  """
  if params.posonly_params:
    remaining = params.posonly_params[1:]
    if remaining:
      return params.with_changes(posonly_params=remaining)
    # A bare '/' with no positional-only parameters left is invalid syntax.
    return params.with_changes(posonly_params=(), posonly_ind=cst.MaybeSentinel.DEFAULT)
  return params.with_changes(params=params.params[1:])


class StaticMethodTransformer(cst.CSTTransformer):
  """
  Marks selected methods as static.

  Attributes:
      targets (Set[cst.FunctionDef]): Original nodes to rewrite (by identity).
  """

  def __init__(self, targets: Set[cst.FunctionDef]) -> None:
    self.targets = targets

  def leave_FunctionDef(
    self,
    original_node: cst.FunctionDef,
    updated_node: cst.FunctionDef,
  ) -> cst.FunctionDef:
    """
    Rewrites a targeted method.

    Args:
        original_node: The node before transformation (used for lookup).
        updated_node: The node after child transformations.

    Returns:
        The method with ``@staticmethod`` and without its receiver, or ``updated_node``.
    """
    if original_node not in self.targets:
      return updated_node

    decorators = [cst.Decorator(decorator=cst.Name("staticmethod")), *updated_node.decorators]
    return updated_node.with_changes(decorators=decorators, params=drop_receiver(updated_node.params))
