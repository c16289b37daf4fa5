"""cit - browse a git repository's commit history and check out any commit."""

import logging

__version__ = "0.1.0"

# The TUI owns the terminal; log records only go where cit.cli sends them.
logging.getLogger(__name__).addHandler(logging.NullHandler())
