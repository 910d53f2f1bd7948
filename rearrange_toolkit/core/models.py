from __future__ import annotations

"""Shared data structures used across the rearrange core.

This module is intentionally free of UI / I/O code so that the contained
objects can be reused in any context (unit-tests, CLI, GUI, etc.).
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

if TYPE_CHECKING:
    from rearrange_toolkit.core.document import Marker

__all__ = ["XmlNode", "PositionRef", "NodeRecord"]


@dataclass(eq=False)
class XmlNode:
    """An element of the parsed document with its character span.

    Attributes
    ----------
    tag
        Element type name as written in the markup.
    attrib
        Attribute values keyed by attribute name.
    start
        Offset of the ``<`` opening the start tag.
    end
        Offset just past the ``>`` closing the end tag (or the empty tag).
    children
        Child elements in document order.
    parent
        Enclosing element, None for the root.
    """

    tag: str
    attrib: Dict[str, str] = field(default_factory=dict)
    start: int = 0
    end: int = 0
    children: List["XmlNode"] = field(default_factory=list)
    parent: Optional["XmlNode"] = field(default=None, repr=False)

    def contains(self, pos: int) -> bool:
        """Return True if ``pos`` lies strictly inside the element's span."""
        return self.start < pos < self.end


@dataclass(eq=False)
class PositionRef:
    """A pair of live markers delimiting a region of the document."""

    start: "Marker"
    end: "Marker"

    def resolve(self) -> Tuple[int, int]:
        return self.start.resolve(), self.end.resolve()

    def release(self) -> None:
        self.start.release()
        self.end.release()

    @property
    def released(self) -> bool:
        return self.start.released and self.end.released


@dataclass(eq=False)
class NodeRecord:
    """One candidate node being rearranged.

    ``position`` tracks the node while it is still in the document; ``text``
    is filled in when the node is cut and is what gets pasted later.
    """

    name: str
    position: Optional[PositionRef] = None
    text: Optional[str] = None

    @property
    def is_cut(self) -> bool:
        return self.text is not None
