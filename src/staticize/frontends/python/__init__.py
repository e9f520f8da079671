"""
LibCST frontend for Python source.
"""

from staticize.frontends.python.lowering import LoweredModule, ModuleLowering, SkippedMethod, lower_module
from staticize.frontends.python.transformer import StaticMethodTransformer, drop_receiver

__all__ = [
  "LoweredModule",
  "ModuleLowering",
  "SkippedMethod",
  "StaticMethodTransformer",
  "drop_receiver",
  "lower_module",
]
