"""
staticize Package.

Finds methods that cannot be overridden (private or final) and never touch
instance state, and marks them static.

Usage
-----

Simple String Conversion
^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import staticize
    code = '''
    class A:
        def __helper(self, x):
            return x + 1
    '''
    print(staticize.convert(code))
    # class A:
    #     @staticmethod
    #     def __helper(x):
    #         return x + 1

Tree Model Usage
^^^^^^^^^^^^^^^^

.. code-block:: python

    from staticize import NonOverridableToStatic
    from staticize.core.tree import Block, MethodDeclaration
    from staticize.enums import Modifier

    method = MethodDeclaration(
        name="hello", modifiers=(Modifier.PRIVATE,), body=Block(), enclosing_type="A"
    )
    NonOverridableToStatic().visit_method(method).modifiers
    # (Modifier.PRIVATE, Modifier.STATIC)
"""

from typing import Optional

from staticize.config import RuntimeConfig
from staticize.core.engine import ConversionResult, StaticizeEngine
from staticize.core.recipe import NonOverridableToStatic

__version__ = "0.1.0"


def convert(code: str, single_underscore_private: bool = False, config: Optional[RuntimeConfig] = None) -> str:
  """
  Rewrites eligible methods in a string of Python code.

  Args:
      code (str): The source code to convert.
      single_underscore_private (bool): Treat '_name' methods as private.
          Ignored when ``config`` is given.
      config (RuntimeConfig, optional): Full runtime configuration.

  Returns:
      str: The rewritten source code.

  Raises:
      ValueError: If the code cannot be parsed.
  """
  config = config or RuntimeConfig(single_underscore_private=single_underscore_private)
  result = StaticizeEngine(config).run(code)

  if not result.success:
    error_msg = "\n".join(result.errors)
    raise ValueError(f"Conversion failed:\n{error_msg}")

  return result.code


__all__ = [
  "ConversionResult",
  "NonOverridableToStatic",
  "RuntimeConfig",
  "StaticizeEngine",
  "convert",
  "__version__",
]
