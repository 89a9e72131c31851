"""Configuration package.

Read settings through ``settings.cfg`` at call time; tests replace the
singleton via :func:`~gitmcp.util.reset_all_singletons`.
"""

from . import settings
from .settings import Settings

__all__ = ["Settings", "settings"]
