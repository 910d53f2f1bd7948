from __future__ import annotations

"""Collaborator interfaces consumed by the rearrange engine.

The engine never parses markup or talks to the user itself. It relies on a
tree model to find nodes and their spans, on a text buffer that can hand out
live position references, and on two prompt callbacks supplied by the front
end. :mod:`rearrange_toolkit.core.document` provides the default tree model
and buffer; tests supply fakes.
"""

from typing import Any, Callable, Optional, Protocol, Sequence, Tuple, runtime_checkable

from rearrange_toolkit.core.models import PositionRef

# Prompt for the attribute that names an element; None or "" means cancelled
AttributeChooser = Callable[[Any], Optional[str]]

# Receive candidate names, return the names to keep in the desired order
NameArranger = Callable[[Sequence[str]], Sequence[str]]


@runtime_checkable
class TreeModel(Protocol):
    """Read access to the element structure of a document snapshot."""

    def find_enclosing_node(self, pos: int) -> Any:
        """Return the innermost node whose span contains ``pos``."""
        ...

    def element_type(self, node: Any) -> str:
        """Return the element type name of ``node``."""
        ...

    def children(self, node: Any) -> Sequence[Any]:
        """Return the child nodes of ``node`` in document order."""
        ...

    def attribute(self, node: Any, name: str) -> Optional[str]:
        """Return the value of attribute ``name`` on ``node``, if present."""
        ...

    def text_span(self, node: Any) -> Tuple[int, int]:
        """Return the ``(start, end)`` character offsets of ``node``."""
        ...


@runtime_checkable
class TextBuffer(Protocol):
    """Raw text edits plus live position references."""

    def substring(self, start: int, end: int) -> str:
        ...

    def insert(self, pos: int, text: str) -> int:
        """Insert ``text`` at ``pos``; return the offset just past it."""
        ...

    def delete(self, start: int, end: int) -> str:
        ...

    def create_position_ref(self, start: int, end: int) -> PositionRef:
        ...
