"""
Immutable Tree Model.

This module defines the closed set of node kinds the analysis operates on.
The tree is owned by a driver (e.g. the libcst frontend in
``staticize.frontends.python``), which is responsible for building it and for
attaching the resolved binding of every identifier. The analysis never
computes name resolution itself: it only reads ``Identifier.binding``.

All nodes are frozen dataclasses. Rewrites never mutate a node in place; they
return a new value via ``dataclasses.replace`` so the driver decides how to
splice the replacement back into its own tree.

Node families:

1.  **Declarations**: ``CompilationUnit``, ``ClassDeclaration``,
    ``MethodDeclaration``, ``FieldDeclaration``.
2.  **Statements**: ``Block``, ``ExpressionStatement``, ``Return``, ``If``,
    ``Loop``, ``VariableDeclarations``, ``NamedVariable``.
3.  **Expressions**: ``Identifier``, ``This``, ``FieldAccess``,
    ``MethodInvocation``, ``Assignment``, ``Literal``, ``Lambda``,
    ``NewInstance``, ``Compound``.
"""

from dataclasses import dataclass, field, replace
from typing import Iterator, Optional, Tuple, Union

from staticize.enums import BindingKind, Modifier


@dataclass(frozen=True)
class FieldType:
  """
  Resolved declaration of a field.
  """

  name: str
  owner: Optional[str] = None
  """Name of the declaring type, if known."""
  is_static: bool = False
  """True if the field's own declaration carries the static modifier."""


@dataclass(frozen=True)
class Binding:
  """
  Resolved meaning of an identifier.

  Attributes:
      kind (BindingKind): What the identifier refers to.
      field_type (Optional[FieldType]): Declaration details when ``kind`` is FIELD.
  """

  kind: BindingKind = BindingKind.UNRESOLVED
  field_type: Optional[FieldType] = None

  @classmethod
  def of_field(cls, name: str, owner: Optional[str] = None, is_static: bool = False) -> "Binding":
    """
    Builds a FIELD binding.

    Args:
        name: The field name.
        owner: The declaring type name.
        is_static: Whether the field is declared static.

    Returns:
        Binding: The field binding.
    """
    return cls(BindingKind.FIELD, FieldType(name=name, owner=owner, is_static=is_static))

  @property
  def is_instance_field(self) -> bool:
    """True if this binding resolves to a field that is not static."""
    return self.kind == BindingKind.FIELD and self.field_type is not None and not self.field_type.is_static


UNRESOLVED = Binding()
LOCAL = Binding(BindingKind.LOCAL)
PARAMETER = Binding(BindingKind.PARAMETER)
METHOD = Binding(BindingKind.METHOD)
TYPE = Binding(BindingKind.TYPE)


class Node:
  """
  Base class of every tree node.

  Subclasses list their child nodes, in source order, through ``children``.
  """

  def children(self) -> Iterator["Node"]:
    return iter(())


def _present(*nodes: Optional[Node]) -> Iterator[Node]:
  for n in nodes:
    if n is not None:
      yield n


# --- Expressions ---


@dataclass(frozen=True)
class Identifier(Node):
  """A name reference carrying its resolved binding."""

  name: str
  binding: Binding = UNRESOLVED


@dataclass(frozen=True)
class This(Node):
  """
  Explicit or implicit reference to the receiver object (``this``, ``self``, ``super``).
  """

  keyword: str = "this"


@dataclass(frozen=True)
class Literal(Node):
  value: str


@dataclass(frozen=True)
class FieldAccess(Node):
  """
  Qualified member access, ``target.name``.

  The binding that matters lives on ``name``; ``target`` is scanned like any
  other expression.
  """

  target: Node
  name: Identifier

  def children(self) -> Iterator[Node]:
    yield self.target
    yield self.name


@dataclass(frozen=True)
class MethodInvocation(Node):
  """Call of ``name`` with an optional receiver ``select``."""

  name: Identifier
  select: Optional[Node] = None
  arguments: Tuple[Node, ...] = ()

  def children(self) -> Iterator[Node]:
    yield from _present(self.select)
    yield self.name
    yield from self.arguments


@dataclass(frozen=True)
class Assignment(Node):
  target: Node
  value: Node
  operator: str = "="

  def children(self) -> Iterator[Node]:
    yield self.target
    yield self.value


@dataclass(frozen=True)
class Lambda(Node):
  """Anonymous function. Parameters are bindings local to the lambda."""

  parameters: Tuple[Identifier, ...]
  body: Node

  def children(self) -> Iterator[Node]:
    yield from self.parameters
    yield self.body


@dataclass(frozen=True)
class NewInstance(Node):
  """
  Object creation, optionally with an anonymous class body.
  """

  type_name: Identifier
  arguments: Tuple[Node, ...] = ()
  members: Tuple["Member", ...] = ()

  def children(self) -> Iterator[Node]:
    yield self.type_name
    yield from self.arguments
    yield from self.members


@dataclass(frozen=True)
class Compound(Node):
  """
  Any other expression shape (operators, subscripts, literals of containers,
  comprehensions). Only its operands are relevant to the analysis.
  """

  label: str
  operands: Tuple[Node, ...] = ()

  def children(self) -> Iterator[Node]:
    yield from self.operands


# --- Statements ---


@dataclass(frozen=True)
class NamedVariable(Node):
  """
  One declared variable. The declared name is a definition, not a reference.
  """

  name: Identifier
  initializer: Optional[Node] = None

  def children(self) -> Iterator[Node]:
    yield self.name
    yield from _present(self.initializer)


@dataclass(frozen=True)
class VariableDeclarations(Node):
  variables: Tuple[NamedVariable, ...]
  type_name: Optional[str] = None

  def children(self) -> Iterator[Node]:
    yield from self.variables


@dataclass(frozen=True)
class ExpressionStatement(Node):
  expression: Node

  def children(self) -> Iterator[Node]:
    yield self.expression


@dataclass(frozen=True)
class Return(Node):
  expression: Optional[Node] = None

  def children(self) -> Iterator[Node]:
    yield from _present(self.expression)


@dataclass(frozen=True)
class Block(Node):
  statements: Tuple[Node, ...] = ()

  def children(self) -> Iterator[Node]:
    yield from self.statements


@dataclass(frozen=True)
class If(Node):
  condition: Node
  then: Node
  otherwise: Optional[Node] = None

  def children(self) -> Iterator[Node]:
    yield self.condition
    yield self.then
    yield from _present(self.otherwise)


@dataclass(frozen=True)
class Loop(Node):
  """
  ``for``/``while`` style loop. ``header`` holds conditions, targets and iterables.
  """

  header: Tuple[Node, ...]
  body: Node
  kind: str = "while"

  def children(self) -> Iterator[Node]:
    yield from self.header
    yield self.body


# --- Declarations ---


@dataclass(frozen=True)
class MethodDeclaration(Node):
  """
  The unit under analysis.

  Attributes:
      name (str): Method name.
      modifiers (Tuple[Modifier, ...]): Declared modifiers, in source order.
      body (Optional[Block]): None for abstract/interface declarations.
      enclosing_type (Optional[str]): Owning type, None if unknown.
      parameters (Tuple[Identifier, ...]): Declared parameters.
  """

  name: str
  modifiers: Tuple[Modifier, ...] = ()
  body: Optional[Block] = None
  enclosing_type: Optional[str] = None
  parameters: Tuple[Identifier, ...] = ()

  def children(self) -> Iterator[Node]:
    yield from self.parameters
    yield from _present(self.body)

  def has_modifier(self, modifier: Modifier) -> bool:
    return modifier in self.modifiers

  def with_modifiers(self, modifiers: Tuple[Modifier, ...]) -> "MethodDeclaration":
    """Returns a copy carrying ``modifiers``."""
    return replace(self, modifiers=tuple(modifiers))


@dataclass(frozen=True)
class FieldDeclaration(Node):
  modifiers: Tuple[Modifier, ...]
  variables: VariableDeclarations

  def children(self) -> Iterator[Node]:
    yield self.variables

  @property
  def is_static(self) -> bool:
    return Modifier.STATIC in self.modifiers


@dataclass(frozen=True)
class ClassDeclaration(Node):
  name: str
  members: Tuple["Member", ...] = ()
  modifiers: Tuple[Modifier, ...] = ()

  def children(self) -> Iterator[Node]:
    yield from self.members

  def methods(self) -> Iterator[MethodDeclaration]:
    """Yields the methods declared directly in this class."""
    for m in self.members:
      if isinstance(m, MethodDeclaration):
        yield m

  def method(self, name: str) -> Optional[MethodDeclaration]:
    """Looks up the first directly declared method called ``name``."""
    return next((m for m in self.methods() if m.name == name), None)


@dataclass(frozen=True)
class CompilationUnit(Node):
  classes: Tuple[ClassDeclaration, ...] = ()
  source_path: Optional[str] = field(default=None, compare=False)

  def children(self) -> Iterator[Node]:
    yield from self.classes

  def find_class(self, name: str) -> Optional[ClassDeclaration]:
    return next((c for c in self.classes if c.name == name), None)


Member = Union[MethodDeclaration, FieldDeclaration, ClassDeclaration]

NODE_TYPES: Tuple[type, ...] = (
  Identifier,
  This,
  Literal,
  FieldAccess,
  MethodInvocation,
  Assignment,
  Lambda,
  NewInstance,
  Compound,
  NamedVariable,
  VariableDeclarations,
  ExpressionStatement,
  Return,
  Block,
  If,
  Loop,
  MethodDeclaration,
  FieldDeclaration,
  ClassDeclaration,
  CompilationUnit,
)
"""The closed set of node kinds understood by ``TreeVisitor``."""
