"""
Tests for splicing static decisions back into LibCST.
"""

import libcst as cst
import pytest

from staticize.frontends.python import StaticMethodTransformer, drop_receiver


def _drop(code: str) -> str:
  module = cst.parse_module(code)
  fn = module.body[0]
  return module.with_changes(body=[fn.with_changes(params=drop_receiver(fn.params))]).code


@pytest.mark.parametrize(
  "before, after",
  [
    ("def f(self, x):\n    pass\n", "def f(x):\n    pass\n"),
    ("def f(self):\n    pass\n", "def f():\n    pass\n"),
    ("def f(self, /, x):\n    pass\n", "def f(x):\n    pass\n"),
    ("def f(self, y, /):\n    pass\n", "def f(y, /):\n    pass\n"),
    ("def f(self, *args, k=1):\n    pass\n", "def f(*args, k=1):\n    pass\n"),
  ],
)
def test_drop_receiver(before, after):
  assert _drop(before) == after


def test_only_targets_are_rewritten():
  code = "class A:\n    def __a(self):\n        pass\n\n    def __b(self):\n        pass\n"
  module = cst.parse_module(code)
  target = module.body[0].body.body[0]

  result = module.visit(StaticMethodTransformer({target}))

  assert result.code == (
    "class A:\n    @staticmethod\n    def __a():\n        pass\n\n    def __b(self):\n        pass\n"
  )


def test_decorator_goes_outermost():
  code = "class A:\n    @final\n    def run(self, x):\n        return x\n"
  module = cst.parse_module(code)
  target = module.body[0].body.body[0]

  result = module.visit(StaticMethodTransformer({target}))

  assert result.code == "class A:\n    @staticmethod\n    @final\n    def run(x):\n        return x\n"


def test_no_targets_returns_equal_code():
  code = "class A:\n    def __a(self):\n        pass\n"
  module = cst.parse_module(code)
  assert module.visit(StaticMethodTransformer(set())).code == code
