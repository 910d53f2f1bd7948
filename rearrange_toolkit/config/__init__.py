"""Configuration files (YAML) and helpers.

The packaged ``*.yml`` files in this folder are the defaults; users override
them from their own configuration directory (see :mod:`.manager`).
"""

from .manager import ConfigManager

__all__ = [
    "ConfigManager",
]
