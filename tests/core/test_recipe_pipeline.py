"""
Tests for RecipePipeline.

Verifies:
1.  Every method of every class (nested included) is offered to each recipe.
2.  Untouched classes and units are returned by identity.
3.  Changes are reported with owning class, recipe name and before/after values.
"""

from staticize.core.pipeline import RecipePipeline, find_method
from staticize.core.recipe import NonOverridableToStatic, Recipe
from staticize.core.tree import (
  Binding,
  Block,
  ClassDeclaration,
  CompilationUnit,
  ExpressionStatement,
  FieldDeclaration,
  Identifier,
  LOCAL,
  MethodDeclaration,
  NamedVariable,
  VariableDeclarations,
)
from staticize.enums import Modifier


def _method(name, *modifiers, uses_field=False, owner="A"):
  statements = ()
  if uses_field:
    statements = (ExpressionStatement(Identifier("x", Binding.of_field("x", owner))),)
  return MethodDeclaration(name=name, modifiers=tuple(modifiers), body=Block(statements), enclosing_type=owner)


def _field(name):
  variables = VariableDeclarations((NamedVariable(Identifier(name, LOCAL)),))
  return FieldDeclaration(modifiers=(), variables=variables)


class RenameRecipe(Recipe):
  display_name = "Rename"
  description = "Appends an underscore to every method name."

  def visit_method(self, method):
    return MethodDeclaration(
      name=method.name + "_",
      modifiers=method.modifiers,
      body=method.body,
      enclosing_type=method.enclosing_type,
    )


def test_unchanged_unit_is_returned_by_identity():
  cls = ClassDeclaration("A", members=(_field("x"), _method("pub", Modifier.PUBLIC)))
  unit = CompilationUnit(classes=(cls,))

  result, changes = RecipePipeline([NonOverridableToStatic()]).run(unit)

  assert result is unit
  assert changes == []


def test_changes_are_recorded():
  helper = _method("helper", Modifier.PRIVATE)
  user = _method("user", Modifier.PRIVATE, uses_field=True)
  cls = ClassDeclaration("A", members=(_field("x"), helper, user))
  unit = CompilationUnit(classes=(cls,))

  result, changes = RecipePipeline([NonOverridableToStatic()]).run(unit)

  assert len(changes) == 1
  change = changes[0]
  assert (change.class_name, change.method_name, change.recipe) == ("A", "helper", "NonOverridableToStatic")
  assert change.before is helper
  assert change.after.modifiers == (Modifier.PRIVATE, Modifier.STATIC)

  new_cls = result.classes[0]
  assert new_cls.members[0] is cls.members[0]
  assert new_cls.method("helper") == change.after
  assert new_cls.method("user") is user


def test_nested_classes_are_visited():
  inner_method = _method("inner", Modifier.PRIVATE, owner="A.B")
  inner = ClassDeclaration("A.B", members=(inner_method,))
  untouched = ClassDeclaration("C", members=(_method("pub", Modifier.PUBLIC, owner="C"),))
  outer = ClassDeclaration("A", members=(inner,))
  unit = CompilationUnit(classes=(outer, untouched))

  result, changes = RecipePipeline([NonOverridableToStatic()]).run(unit)

  assert [c.class_name for c in changes] == ["A.B"]
  assert result.classes[1] is untouched
  assert find_method(result, "A.B", "inner").modifiers == (Modifier.PRIVATE, Modifier.STATIC)


def test_recipes_apply_in_sequence():
  unit = CompilationUnit(classes=(ClassDeclaration("A", members=(_method("m", Modifier.PRIVATE),)),))

  result, changes = RecipePipeline([NonOverridableToStatic(), RenameRecipe()]).run(unit)

  assert [c.recipe for c in changes] == ["NonOverridableToStatic", "Rename"]
  final = result.classes[0].method("m_")
  assert final.modifiers == (Modifier.PRIVATE, Modifier.STATIC)


def test_find_method_missing():
  unit = CompilationUnit(classes=(ClassDeclaration("A"),))
  assert find_method(unit, "A", "nope") is None
  assert find_method(unit, "Z", "nope") is None
