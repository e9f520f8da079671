"""
Python Source Lowering.

Builds the analysis tree (``staticize.core.tree``) from a LibCST module. Name
resolution comes from LibCST's ``ScopeProvider`` metadata, so the analysis only
ever reads pre-resolved bindings.

Mapping of Python onto declaration modifiers:

1.  **Access**: ``__name`` (name-mangled, not a dunder) is PRIVATE; ``_name``
    is PROTECTED, or PRIVATE when ``single_underscore_private`` is set; all
    other names are PUBLIC. The access modifier always leads the list.
2.  **Decorators**: configured final decorators map to FINAL,
    ``staticmethod``/``classmethod`` to STATIC and ``abstractmethod`` to
    ABSTRACT. Any other decorator makes the method unsupported: it is reported
    as skipped and never lowered.

Mapping of Python onto bindings:

1.  The receiver parameter (first positional parameter) and zero-argument
    ``super`` become ``This``.
2.  ``Cls.attr`` with ``Cls`` resolving to a class of the module binds
    ``attr`` to that class: plain class-body assignments and ``ClassVar``
    annotations are static fields, bare annotations and ``self.attr = ...``
    stores are instance fields.
3.  Parameters, locals, classes, imports and functions become the matching
    non-field binding kinds. Module globals are static fields of the module.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple

import libcst as cst
from libcst.metadata import Assignment as ScopeAssignment
from libcst.metadata import BuiltinAssignment, GlobalScope, MetadataWrapper, Scope, ScopeProvider

from staticize.config import RuntimeConfig
from staticize.core.tree import (
  LOCAL,
  METHOD,
  PARAMETER,
  TYPE,
  UNRESOLVED,
  Assignment,
  Binding,
  Block,
  ClassDeclaration,
  CompilationUnit,
  Compound,
  ExpressionStatement,
  FieldAccess,
  FieldDeclaration,
  Identifier,
  If,
  Lambda,
  Literal,
  Loop,
  MethodDeclaration,
  MethodInvocation,
  NamedVariable,
  Node,
  Return,
  This,
  VariableDeclarations,
)
from staticize.enums import Modifier

logger = logging.getLogger(__name__)

MODULE_OWNER = "<module>"

_STATIC_DECORATORS = frozenset({"staticmethod", "classmethod"})
_ABSTRACT_DECORATORS = frozenset({"abstractmethod", "abc.abstractmethod"})
_CLASSVAR_NAMES = frozenset({"ClassVar", "typing.ClassVar", "typing_extensions.ClassVar"})


def get_full_name(node: cst.CSTNode) -> str:
  """
  Resolves a CST Name or Attribute chain to a dot-separated string.

  Args:
      node: Typically a ``cst.Name`` (``final``) or ``cst.Attribute`` (``typing.final``).

  Returns:
      str: The dotted name, or an empty string for any other expression.
  """
  if isinstance(node, cst.Name):
    return node.value
  if isinstance(node, cst.Attribute):
    prefix = get_full_name(node.value)
    return f"{prefix}.{node.attr.value}" if prefix else ""
  return ""


@dataclass
class ClassInfo:
  """
  Member summary of one class body.
  """

  name: str
  node: cst.ClassDef
  static_fields: Set[str] = field(default_factory=set)
  instance_fields: Set[str] = field(default_factory=set)
  methods: Set[str] = field(default_factory=set)


@dataclass(frozen=True)
class SkippedMethod:
  """A method the lowering refused to model, with the reason."""

  class_name: str
  method_name: str
  reason: str


@dataclass
class LoweredModule:
  """
  Result of lowering one module.

  Attributes:
      unit (CompilationUnit): The analysis tree.
      origins (Dict[MethodDeclaration, List[cst.FunctionDef]]): Source nodes of
          each lowered method, in the wrapper's module.
      skipped (List[SkippedMethod]): Methods left out of the tree.
  """

  unit: CompilationUnit
  origins: Dict[MethodDeclaration, List[cst.FunctionDef]] = field(default_factory=dict)
  skipped: List[SkippedMethod] = field(default_factory=list)


def _is_classvar(annotation: cst.Annotation) -> bool:
  expr = annotation.annotation
  if isinstance(expr, cst.Subscript):
    expr = expr.value
  return get_full_name(expr) in _CLASSVAR_NAMES


def _target_names(target: cst.BaseExpression) -> List[str]:
  if isinstance(target, cst.Name):
    return [target.value]
  if isinstance(target, (cst.Tuple, cst.List)):
    names = []
    for element in target.elements:
      names.extend(_target_names(element.value))
    return names
  return []


def receiver_param(fn: cst.FunctionDef) -> Optional[cst.Param]:
  """
  Returns the first positional parameter of ``fn``, if any.
  """
  params = fn.params
  if params.posonly_params:
    return params.posonly_params[0]
  if params.params:
    return params.params[0]
  return None


class _ClassCollector(cst.CSTVisitor):
  """
  Collects ``ClassInfo`` for classes at module level and nested in classes.

  Classes defined inside functions are not collected.
  """

  def __init__(self) -> None:
    self.classes: Dict[cst.ClassDef, ClassInfo] = {}
    self._stack: List[ClassInfo] = []
    self._func_depth = 0
    self._receiver: Optional[str] = None

  def visit_ClassDef(self, node: cst.ClassDef) -> Optional[bool]:
    if self._func_depth:
      return False

    prefix = f"{self._stack[-1].name}." if self._stack else ""
    info = ClassInfo(name=f"{prefix}{node.name.value}", node=node)
    for stmt in node.body.body:
      self._collect_class_statement(stmt, info)

    self.classes[node] = info
    self._stack.append(info)
    return True

  def leave_ClassDef(self, original_node: cst.ClassDef) -> None:
    if self._stack and self._stack[-1].node is original_node:
      self._stack.pop()

  def visit_FunctionDef(self, node: cst.FunctionDef) -> None:
    if self._func_depth == 0 and self._stack:
      # The first parameter of a static or class method is not the instance.
      static = any(get_full_name(d.decorator) in _STATIC_DECORATORS for d in node.decorators)
      param = None if static else receiver_param(node)
      self._receiver = param.name.value if param else None
    self._func_depth += 1

  def leave_FunctionDef(self, original_node: cst.FunctionDef) -> None:
    self._func_depth -= 1
    if self._func_depth == 0:
      self._receiver = None

  def visit_Assign(self, node: cst.Assign) -> None:
    for target in node.targets:
      self._record_store(target.target)

  def visit_AugAssign(self, node: cst.AugAssign) -> None:
    self._record_store(node.target)

  def visit_AnnAssign(self, node: cst.AnnAssign) -> None:
    self._record_store(node.target)

  def _record_store(self, target: cst.BaseExpression) -> None:
    if not self._receiver or not self._stack or not self._func_depth:
      return
    if isinstance(target, (cst.Tuple, cst.List)):
      for element in target.elements:
        self._record_store(element.value)
    elif isinstance(target, cst.Attribute) and isinstance(target.value, cst.Name):
      if target.value.value == self._receiver:
        self._stack[-1].instance_fields.add(target.attr.value)

  @staticmethod
  def _collect_class_statement(stmt: cst.CSTNode, info: ClassInfo) -> None:
    if isinstance(stmt, cst.FunctionDef):
      info.methods.add(stmt.name.value)
      return
    if not isinstance(stmt, cst.SimpleStatementLine):
      return

    for small in stmt.body:
      if isinstance(small, cst.Assign):
        for target in small.targets:
          info.static_fields.update(_target_names(target.target))
      elif isinstance(small, cst.AugAssign):
        info.static_fields.update(_target_names(small.target))
      elif isinstance(small, cst.AnnAssign) and isinstance(small.target, cst.Name):
        if _is_classvar(small.annotation):
          info.static_fields.add(small.target.value)
        else:
          info.instance_fields.add(small.target.value)


class ModuleLowering:
  """
  Lowers a wrapped LibCST module into a ``CompilationUnit``.
  """

  def __init__(
    self,
    wrapper: MetadataWrapper,
    config: Optional[RuntimeConfig] = None,
    source_path: Optional[str] = None,
  ) -> None:
    """
    Initializes the lowering.

    Args:
        wrapper: The metadata wrapper around the module. Nodes referenced in the
            result belong to ``wrapper.module``.
        config: Runtime settings for access and finality rules.
        source_path: File the module was read from, if any.
    """
    self.wrapper = wrapper
    self.source_path = source_path
    self.config = config or RuntimeConfig()
    self.scopes: Mapping[cst.CSTNode, Optional[Scope]] = wrapper.resolve(ScopeProvider)

    collector = _ClassCollector()
    wrapper.module.visit(collector)
    self.classes = collector.classes

    self._result: Optional[LoweredModule] = None
    self._current: Optional[ClassInfo] = None
    self._receiver: Optional[cst.Param] = None

  def lower(self) -> LoweredModule:
    """
    Builds the compilation unit.

    Returns:
        LoweredModule: The tree plus source mappings and skipped methods.
    """
    self._result = LoweredModule(unit=CompilationUnit())
    classes = tuple(self._lower_class(stmt) for stmt in self.wrapper.module.body if isinstance(stmt, cst.ClassDef))
    self._result.unit = CompilationUnit(classes=classes, source_path=self.source_path)
    return self._result

  # --- Declarations ---

  def _lower_class(self, node: cst.ClassDef) -> ClassDeclaration:
    info = self.classes[node]
    outer = self._current
    self._current = info

    members = []
    for stmt in node.body.body:
      if isinstance(stmt, cst.FunctionDef):
        method = self._lower_method(stmt, info)
        if method is not None:
          members.append(method)
      elif isinstance(stmt, cst.ClassDef):
        members.append(self._lower_class(stmt))
      elif isinstance(stmt, cst.SimpleStatementLine):
        members.extend(self._lower_fields(stmt, info))

    self._current = outer
    modifiers = (Modifier.FINAL,) if self._has_final_decorator(node.decorators) else ()
    return ClassDeclaration(name=info.name, members=tuple(members), modifiers=modifiers)

  def _lower_fields(self, stmt: cst.SimpleStatementLine, info: ClassInfo) -> List[FieldDeclaration]:
    fields = []
    for small in stmt.body:
      names: Sequence[str] = ()
      value: Optional[cst.BaseExpression] = None
      if isinstance(small, cst.Assign):
        names = [n for t in small.targets for n in _target_names(t.target)]
        value = small.value
      elif isinstance(small, cst.AnnAssign):
        names = _target_names(small.target)
        value = small.value

      for name in names:
        modifiers = (Modifier.STATIC,) if name in info.static_fields else ()
        initializer = self._expr(value) if value is not None else None
        variable = NamedVariable(name=Identifier(name, LOCAL), initializer=initializer)
        fields.append(FieldDeclaration(modifiers=modifiers, variables=VariableDeclarations((variable,))))
    return fields

  def _lower_method(self, fn: cst.FunctionDef, info: ClassInfo) -> Optional[MethodDeclaration]:
    name = fn.name.value
    modifiers, reason = self._modifiers(fn)
    receiver = None
    if modifiers is not None and Modifier.STATIC not in modifiers:
      receiver = receiver_param(fn)
      if receiver is None:
        reason = "no receiver parameter"

    if reason is not None:
      logger.debug(f"Not analysing '{info.name}.{name}': {reason}")
      self._result.skipped.append(SkippedMethod(info.name, name, reason))
      return None

    self._receiver = receiver
    try:
      body = self._block(fn.body)
    finally:
      self._receiver = None

    method = MethodDeclaration(
      name=name,
      modifiers=modifiers,
      body=body,
      enclosing_type=info.name,
      parameters=self._parameters(fn.params),
    )
    self._result.origins.setdefault(method, []).append(fn)
    return method

  def _modifiers(self, fn: cst.FunctionDef) -> Tuple[Optional[Tuple[Modifier, ...]], Optional[str]]:
    modifiers = [self._access(fn.name.value)]
    for decorator in fn.decorators:
      deco_name = get_full_name(decorator.decorator)
      if deco_name in self.config.final_decorators:
        modifiers.append(Modifier.FINAL)
      elif deco_name in _STATIC_DECORATORS:
        modifiers.append(Modifier.STATIC)
      elif deco_name in _ABSTRACT_DECORATORS:
        modifiers.append(Modifier.ABSTRACT)
      else:
        label = deco_name or self.wrapper.module.code_for_node(decorator.decorator)
        return None, f"unsupported decorator @{label}"
    return tuple(modifiers), None

  def _access(self, name: str) -> Modifier:
    if name.startswith("__") and name.endswith("__"):
      return Modifier.PUBLIC
    if name.startswith("__"):
      return Modifier.PRIVATE
    if name.startswith("_"):
      return Modifier.PRIVATE if self.config.single_underscore_private else Modifier.PROTECTED
    return Modifier.PUBLIC

  def _has_final_decorator(self, decorators: Sequence[cst.Decorator]) -> bool:
    return any(get_full_name(d.decorator) in self.config.final_decorators for d in decorators)

  @staticmethod
  def _parameters(params: cst.Parameters) -> Tuple[Identifier, ...]:
    found = [*params.posonly_params, *params.params, *params.kwonly_params]
    for star in (params.star_arg, params.star_kwarg):
      if isinstance(star, cst.Param):
        found.append(star)
    return tuple(Identifier(p.name.value, PARAMETER) for p in found)

  # --- Statements ---

  def _block(self, body: cst.CSTNode) -> Block:
    statements = []
    for stmt in getattr(body, "body", ()):
      lowered = self._lower(stmt)
      if lowered is not None:
        statements.append(lowered)
    return Block(tuple(statements))

  def _lower(self, node: cst.CSTNode) -> Optional[Node]:
    if isinstance(node, cst.BaseExpression):
      return self._expr(node)
    if isinstance(node, (cst.SimpleStatementLine, cst.SimpleStatementSuite, cst.IndentedBlock)):
      return self._block(node)
    if isinstance(node, cst.Expr):
      return ExpressionStatement(self._expr(node.value))
    if isinstance(node, cst.Return):
      return Return(self._expr(node.value) if node.value is not None else None)
    if isinstance(node, cst.Assign):
      return self._assign(node)
    if isinstance(node, cst.AnnAssign):
      return self._ann_assign(node)
    if isinstance(node, cst.AugAssign):
      return Assignment(self._expr(node.target), self._expr(node.value), operator=type(node.operator).__name__)
    if isinstance(node, cst.If):
      otherwise = self._lower(node.orelse) if node.orelse is not None else None
      return If(self._expr(node.test), self._block(node.body), otherwise)
    if isinstance(node, cst.Else):
      return self._block(node.body)
    if isinstance(node, cst.For):
      body = self._with_orelse(node.body, node.orelse)
      return Loop((self._expr(node.target), self._expr(node.iter)), body, kind="for")
    if isinstance(node, cst.While):
      return Loop((self._expr(node.test),), self._with_orelse(node.body, node.orelse), kind="while")
    if isinstance(node, cst.FunctionDef):
      return self._nested_function(node)
    return self._generic(node)

  def _with_orelse(self, body: cst.BaseSuite, orelse: Optional[cst.Else]) -> Block:
    block = self._block(body)
    if orelse is None:
      return block
    return Block((*block.statements, self._block(orelse.body)))

  def _assign(self, node: cst.Assign) -> Node:
    value = self._expr(node.value)
    if len(node.targets) == 1 and isinstance(node.targets[0].target, cst.Name):
      name = node.targets[0].target.value
      return VariableDeclarations((NamedVariable(Identifier(name, LOCAL), value),))

    targets = tuple(self._expr(t.target) for t in node.targets)
    target = targets[0] if len(targets) == 1 else Compound("Targets", targets)
    return Assignment(target, value)

  def _ann_assign(self, node: cst.AnnAssign) -> Node:
    value = self._expr(node.value) if node.value is not None else None
    annotation = self._expr(node.annotation.annotation)
    if isinstance(node.target, cst.Name):
      variable = NamedVariable(Identifier(node.target.value, LOCAL), value)
      return Block((ExpressionStatement(annotation), VariableDeclarations((variable,))))

    target = self._expr(node.target)
    if value is None:
      return Compound("AnnAssign", (target, annotation))
    return Block((ExpressionStatement(annotation), Assignment(target, value)))

  def _nested_function(self, node: cst.FunctionDef) -> Lambda:
    params = self._parameters(node.params)
    header = [self._expr(d.decorator) for d in node.decorators]
    header.extend(self._generic_operands(node.params))
    if node.returns is not None:
      header.append(self._expr(node.returns.annotation))
    return Lambda(params, Compound("FunctionDef", (*header, self._block(node.body))))

  # --- Expressions ---

  def _expr(self, node: cst.BaseExpression) -> Node:
    if isinstance(node, cst.Name):
      return self._name(node)
    if isinstance(node, cst.Attribute):
      target = self._expr(node.value)
      attr = node.attr.value
      return FieldAccess(target, Identifier(attr, self._member_binding(node.value, target, attr)))
    if isinstance(node, cst.Call):
      return self._call(node)
    if isinstance(node, (cst.Integer, cst.Float, cst.Imaginary, cst.SimpleString)):
      return Literal(node.value)
    if isinstance(node, cst.Lambda):
      params = self._parameters(node.params)
      return Lambda(params, Compound("Lambda", (*self._generic_operands(node.params), self._expr(node.body))))
    return self._generic(node)

  def _call(self, node: cst.Call) -> Node:
    args = tuple(self._expr(arg.value) for arg in node.args)
    func = node.func
    if isinstance(func, cst.Attribute):
      select = self._expr(func.value)
      attr = func.attr.value
      name = Identifier(attr, self._member_binding(func.value, select, attr))
      return MethodInvocation(name=name, select=select, arguments=args)

    callee = self._expr(func)
    if isinstance(callee, Identifier):
      return MethodInvocation(name=callee, arguments=args)
    return Compound("Call", (callee, *args))

  def _name(self, node: cst.Name) -> Node:
    referents = self._referents(node)
    if self._receiver is not None:
      for ref in referents:
        if isinstance(ref, ScopeAssignment) and ref.node is self._receiver:
          return This(node.value)
        if isinstance(ref, BuiltinAssignment) and node.value == "super":
          return This("super")
    return Identifier(node.value, self._binding(node.value, referents))

  def _referents(self, node: cst.Name) -> Tuple[object, ...]:
    scope = self.scopes.get(node)
    if scope is None:
      return ()
    for access in scope.accesses[node.value]:
      if access.node is node:
        return tuple(access.referents)
    return ()

  @staticmethod
  def _binding(name: str, referents: Sequence[object]) -> Binding:
    for ref in referents:
      if not isinstance(ref, ScopeAssignment):
        continue
      definition = ref.node
      if isinstance(definition, cst.Param):
        return PARAMETER
      if isinstance(definition, (cst.ClassDef, cst.Import, cst.ImportFrom)):
        return TYPE
      if isinstance(definition, cst.FunctionDef):
        return METHOD
      if isinstance(ref.scope, GlobalScope):
        return Binding.of_field(name, owner=MODULE_OWNER, is_static=True)
      return LOCAL
    return UNRESOLVED

  def _member_binding(self, base: cst.BaseExpression, target: Node, attr: str) -> Binding:
    info = None
    if isinstance(target, This):
      info = self._current
    elif isinstance(base, cst.Name):
      for ref in self._referents(base):
        if isinstance(ref, ScopeAssignment) and isinstance(ref.node, cst.ClassDef):
          info = self.classes.get(ref.node)
          break

    if info is None:
      return UNRESOLVED
    if attr in info.static_fields:
      return Binding.of_field(attr, info.name, is_static=True)
    if attr in info.instance_fields:
      return Binding.of_field(attr, info.name, is_static=False)
    if attr in info.methods:
      return METHOD
    return UNRESOLVED

  def _generic(self, node: cst.CSTNode) -> Optional[Node]:
    operands = self._generic_operands(node)
    if operands or isinstance(node, cst.BaseExpression):
      return Compound(type(node).__name__, tuple(operands))
    return None

  def _generic_operands(self, node: cst.CSTNode) -> List[Node]:
    operands = []
    for child in node.children:
      lowered = self._lower(child)
      if lowered is not None:
        operands.append(lowered)
    return operands


def lower_module(
  wrapper: MetadataWrapper,
  config: Optional[RuntimeConfig] = None,
  source_path: Optional[str] = None,
) -> LoweredModule:
  """
  Lowers ``wrapper.module`` into the analysis tree.

  Args:
      wrapper: Metadata wrapper around the parsed module.
      config: Runtime settings.
      source_path: File the module was read from, recorded on the unit.

  Returns:
      LoweredModule: The compilation unit and its mapping back to LibCST nodes.
  """
  return ModuleLowering(wrapper, config, source_path).lower()
