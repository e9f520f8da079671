"""
Entry point for module execution (``python -m staticize``).

This module delegates execution to the CLI handler in ``staticize.cli.__main__``.
"""

import sys
from staticize.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
