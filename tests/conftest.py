"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Console capture fixture routing rich output and logging to a buffer.
"""

import io
import sys
from pathlib import Path

import pytest

# Add src to path so we can import 'staticize' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from rich.console import Console  # noqa: E402

from staticize.utils.console import reset_console, set_console  # noqa: E402


@pytest.fixture
def captured_console():
  """
  Redirects the shared console (and the logging handler bound to it) into a
  string buffer for the duration of a test.

  Yields:
      io.StringIO: The buffer receiving all console output.
  """
  buffer = io.StringIO()
  set_console(Console(file=buffer, width=200, color_system=None))
  yield buffer
  reset_console()
