"""
Tree Visitor.

Provides ``TreeVisitor``, a read-only depth-first walker over the closed node
set of ``staticize.core.tree``. Dispatch follows the LibCST naming convention:
a subclass handles a node kind by defining ``visit_<ClassName>``. If the
handler returns ``False`` the node's children are skipped; any other return
value (including ``None``) continues into the children.

Nodes outside ``NODE_TYPES`` raise ``TypeError``: the traversal is total over
the closed set, and extending the set is an explicit decision.
"""

from typing import Optional

from staticize.core.tree import NODE_TYPES, Node

_KNOWN = frozenset(NODE_TYPES)


class TreeVisitor:
  """
  Base class for read-only analyses over the tree model.

  Subclasses may override ``should_stop`` to end the traversal early once
  their result can no longer change.
  """

  def should_stop(self) -> bool:
    """Returns True to abandon the remaining traversal."""
    return False

  def visit(self, node: Optional[Node]) -> None:
    """
    Visits ``node`` and, unless its handler declines, its descendants.

    Args:
        node: The subtree root. ``None`` is accepted and ignored.

    Raises:
        TypeError: If ``node`` is not one of the known node kinds.
    """
    if node is None or self.should_stop():
      return

    node_type = type(node)
    if node_type not in _KNOWN:
      raise TypeError(f"Unsupported node kind: {node_type.__name__}")

    handler = getattr(self, f"visit_{node_type.__name__}", None)
    if handler is not None and handler(node) is False:
      return

    for child in node.children():
      if self.should_stop():
        return
      self.visit(child)
