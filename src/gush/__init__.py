"""gush: pull-request, issue and release workflows from a git working copy."""

__version__ = "0.1.0"

from .config import Config
from .errors import GushError

__all__ = ["Config", "GushError", "__version__"]
