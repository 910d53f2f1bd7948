from __future__ import annotations

"""High-level services driving the rearrange workflow.

The engine raises on error; the editor-facing service wraps it and reports
through OperationResult values.
"""

from .cut_history import CutHistory  # noqa: F401
from .rearrange_engine import RearrangeEngine  # noqa: F401
from .rearrange_service import OperationResult, RearrangeService  # noqa: F401

__all__: list[str] = [
    "CutHistory",
    "RearrangeEngine",
    "OperationResult",
    "RearrangeService",
]
