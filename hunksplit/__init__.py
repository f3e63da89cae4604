"""Split a unified diff into hunks and re-apply chosen subsets safely."""

import logging
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("hunksplit")
except PackageNotFoundError:
    # Fallback for development mode
    __version__ = "0.0.0-dev"

logging.getLogger("hunksplit").addHandler(logging.NullHandler())
