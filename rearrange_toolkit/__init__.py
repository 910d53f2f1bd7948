"""Top-level package for the business-logic portion of Rearrange Toolkit.

This package hosts the GUI-agnostic implementation. Front-ends (e.g. Tk GUI,
CLI) should only depend on the public API exposed here rather than importing
internal modules directly.
"""

from .core.document import TextDocument  # re-export for convenience
from .core.path_config import PathConfigStore
from .core.services import RearrangeService

__all__: list[str] = [
    "TextDocument",
    "PathConfigStore",
    "RearrangeService",
]
