from __future__ import annotations

"""Last-cut stack for the rearrange workflow.

This service is UI-agnostic and performs pure in-memory tracking of the
batches of nodes removed by successive cut operations. A paste always
consumes the most recent batch.

Design principles
-----------------
- No UI imports and no I/O (filesystem/console).
- Batches are immutable tuples once stored.
- One history per editing session; there is no global instance.
- Unbounded: a stored batch holds text already removed from the document,
  so it is only ever released by a paste or an explicit clear.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from rearrange_toolkit.core.exceptions import EmptyHistory
from rearrange_toolkit.core.models import NodeRecord

__all__ = ["CutBatch", "CutHistory"]

logger = logging.getLogger(__name__)

CutBatch = Tuple[NodeRecord, ...]


class CutHistory:
    """Stack of cut batches, most recent last.

    Examples
    --------
    >>> history = CutHistory()
    >>> history.push([record_a, record_b])
    >>> history.pop()
    (record_a, record_b)
    """

    def __init__(self) -> None:
        self._stack: List[CutBatch] = []

    # --------------------------------------------------------------------- API

    def push(self, batch: Sequence[NodeRecord]) -> None:
        """Store ``batch`` as the most recent cut. Empty batches are ignored."""
        frozen = tuple(batch)
        if not frozen:
            logger.debug("Ignoring empty cut batch")
            return
        self._stack.append(frozen)
        logger.debug("Cut history: %d pending batch(es)", len(self._stack))

    def pop(self) -> CutBatch:
        """Remove and return the most recent batch.

        Raises
        ------
        EmptyHistory
            If no batch is pending.
        """
        if not self._stack:
            raise EmptyHistory()
        return self._stack.pop()

    def peek(self) -> Optional[CutBatch]:
        """Return the most recent batch without removing it."""
        return self._stack[-1] if self._stack else None

    def can_pop(self) -> bool:
        return bool(self._stack)

    def clear(self) -> None:
        self._stack.clear()

    def __len__(self) -> int:
        return len(self._stack)
