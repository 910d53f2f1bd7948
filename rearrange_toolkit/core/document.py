from __future__ import annotations

"""Host document model: a text buffer with live markers and a node tree.

:class:`TextDocument` owns the raw text and every :class:`Marker` created
over it. Markers are position references that follow edits: text inserted
before a marker pushes it right, text deleted around it pulls it left or
collapses it onto the start of the deleted range.

:class:`XmlTree` is a read-only view of the element structure of the text at
the time it was built. It records the character span of every element, which
is what the rearrange engine needs to cut nodes out as exact source text.
lxml does not expose source offsets, so spans come from the expat scanner;
document-type identification goes through lxml's ``docinfo``.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Tuple, Union
from xml.parsers import expat

from lxml import etree as ET

from rearrange_toolkit.core.exceptions import DocumentParseError, MarkerReleasedError
from rearrange_toolkit.core.models import PositionRef, XmlNode

__all__ = ["Marker", "TextDocument", "XmlTree", "document_type_name"]

logger = logging.getLogger(__name__)

# A complete tag starting at '<', with '>' allowed inside quoted attribute values
_TAG_RE = re.compile(r"""<(?:[^>"']|"[^"]*"|'[^']*')*>""")


class Marker:
    """Live position reference into a :class:`TextDocument`.

    Parameters
    ----------
    document
        Owning document. The marker registers itself on creation.
    position
        Initial character offset.
    insertion_type
        When True, text inserted exactly at the marker lands before it (the
        marker advances). When False the marker stays put.
    """

    __slots__ = ("_document", "_position", "insertion_type")

    def __init__(self, document: "TextDocument", position: int, insertion_type: bool = False) -> None:
        self._document: Optional[TextDocument] = document
        self._position = position
        self.insertion_type = insertion_type

    def resolve(self) -> int:
        if self._document is None:
            raise MarkerReleasedError("Marker has been released")
        return self._position

    def release(self) -> None:
        """Stop tracking edits. Releasing twice is harmless."""
        if self._document is None:
            logger.debug("Marker already released")
            return
        self._document._forget(self)
        self._document = None

    @property
    def released(self) -> bool:
        return self._document is None

    def __repr__(self) -> str:
        state = "released" if self._document is None else str(self._position)
        return f"Marker({state})"


class TextDocument:
    """Mutable text buffer that keeps its markers adjusted across edits."""

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._markers: List[Marker] = []

    # ------------------------------------------------------------------
    # Construction / persistence
    # ------------------------------------------------------------------
    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "TextDocument":
        text = Path(path).read_text(encoding="utf-8")
        logger.info("Loaded document %s (%d chars)", path, len(text))
        return cls(text)

    def save(self, path: Union[str, Path]) -> None:
        Path(path).write_text(self._text, encoding="utf-8")
        logger.info("Saved document %s (%d chars)", path, len(self._text))

    # ------------------------------------------------------------------
    # Text access and edits
    # ------------------------------------------------------------------
    @property
    def text(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    def substring(self, start: int, end: int) -> str:
        start, end = self._check_range(start, end)
        return self._text[start:end]

    def insert(self, pos: int, text: str) -> int:
        """Insert ``text`` at ``pos`` and return the offset just past it."""
        pos, _ = self._check_range(pos, pos)
        if not text:
            return pos
        self._text = self._text[:pos] + text + self._text[pos:]
        length = len(text)
        for marker in self._markers:
            if marker._position > pos or (marker._position == pos and marker.insertion_type):
                marker._position += length
        return pos + length

    def delete(self, start: int, end: int) -> str:
        """Delete ``[start, end)`` and return the removed text."""
        start, end = self._check_range(start, end)
        removed = self._text[start:end]
        if not removed:
            return removed
        self._text = self._text[:start] + self._text[end:]
        length = end - start
        for marker in self._markers:
            if marker._position >= end:
                marker._position -= length
            elif marker._position > start:
                marker._position = start
        return removed

    def _check_range(self, start: int, end: int) -> Tuple[int, int]:
        if start < 0 or end > len(self._text) or start > end:
            raise IndexError(f"Invalid range [{start}, {end}) for document of length {len(self._text)}")
        return start, end

    # ------------------------------------------------------------------
    # Markers
    # ------------------------------------------------------------------
    def create_marker(self, pos: int, insertion_type: bool = False) -> Marker:
        pos, _ = self._check_range(pos, pos)
        marker = Marker(self, pos, insertion_type)
        self._markers.append(marker)
        return marker

    def create_position_ref(self, start: int, end: int) -> PositionRef:
        """Create a marker pair over ``[start, end)``.

        Text inserted at either boundary stays outside the region.
        """
        start, end = self._check_range(start, end)
        return PositionRef(
            start=self.create_marker(start, insertion_type=True),
            end=self.create_marker(end, insertion_type=False),
        )

    @property
    def live_marker_count(self) -> int:
        return len(self._markers)

    def _forget(self, marker: Marker) -> None:
        for index, candidate in enumerate(self._markers):
            if candidate is marker:
                del self._markers[index]
                return

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------
    def parse_tree(self) -> "XmlTree":
        return XmlTree.parse(self._text)

    def document_type_name(self) -> str:
        return document_type_name(self._text)


class XmlTree:
    """Element tree of a document snapshot with character spans."""

    def __init__(self, root: XmlNode) -> None:
        self.root = root

    @classmethod
    def parse(cls, text: str) -> "XmlTree":
        """Scan ``text`` and return its element tree.

        Raises
        ------
        DocumentParseError
            If the markup is not well-formed.
        """
        return _SpanScanner(text).run()

    def find_enclosing_node(self, pos: int) -> XmlNode:
        """Return the innermost element whose span strictly contains ``pos``.

        Falls back to the root element when ``pos`` lies outside it.
        """
        node = self.root
        descended = True
        while descended:
            descended = False
            for child in node.children:
                if child.contains(pos):
                    node = child
                    descended = True
                    break
        return node

    @staticmethod
    def element_type(node: XmlNode) -> str:
        return node.tag

    @staticmethod
    def children(node: XmlNode) -> List[XmlNode]:
        return list(node.children)

    @staticmethod
    def attribute(node: XmlNode, name: str) -> Optional[str]:
        return node.attrib.get(name)

    @staticmethod
    def text_span(node: XmlNode) -> Tuple[int, int]:
        return node.start, node.end

    def iter(self):
        """Yield every element in document order."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


class _SpanScanner:
    """Drive expat over the UTF-8 encoding of the text, recording spans.

    Expat reports byte offsets; events arrive in document order, so byte
    offsets are converted to character offsets incrementally.
    Internal entity references are left unexpanded so that every reported
    element starts at its own tag in the text.
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self._data = text.encode("utf-8")
        self._byte_pos = 0
        self._char_pos = 0
        self._stack: List[XmlNode] = []
        self._root: Optional[XmlNode] = None
        self._empty: set = set()
        self._parser = expat.ParserCreate(encoding="utf-8")
        self._parser.StartElementHandler = self._on_start
        self._parser.EndElementHandler = self._on_end
        # A plain DefaultHandler inhibits internal entity expansion
        self._parser.DefaultHandler = self._on_default

    def run(self) -> XmlTree:
        try:
            self._parser.Parse(self._data, True)
        except expat.ExpatError as exc:
            raise DocumentParseError(
                f"Malformed markup: {expat.ErrorString(exc.code)}",
                line=exc.lineno,
                column=exc.offset + 1,
                cause=exc,
            ) from exc
        if self._root is None:
            raise DocumentParseError("Document has no root element")
        return XmlTree(self._root)

    def _char_offset(self, byte_index: int) -> int:
        if byte_index < self._byte_pos:
            return len(self._data[:byte_index].decode("utf-8"))
        self._char_pos += len(self._data[self._byte_pos:byte_index].decode("utf-8"))
        self._byte_pos = byte_index
        return self._char_pos

    def _on_default(self, data: str) -> None:
        """Receive markup with no dedicated handler, entity references included."""

    def _on_start(self, tag: str, attrs: dict) -> None:
        start = self._char_offset(self._parser.CurrentByteIndex)
        node = XmlNode(tag=tag, attrib=dict(attrs), start=start, end=start)
        match = _TAG_RE.match(self._text, start)
        if match and match.group().endswith("/>"):
            # Empty element: the span ends with its only tag
            node.end = match.end()
            self._empty.add(id(node))
        if self._stack:
            node.parent = self._stack[-1]
            self._stack[-1].children.append(node)
        else:
            self._root = node
        self._stack.append(node)

    def _on_end(self, tag: str) -> None:
        node = self._stack.pop()
        if id(node) in self._empty:
            return
        tag_start = self._char_offset(self._parser.CurrentByteIndex)
        match = _TAG_RE.match(self._text, tag_start)
        if match is None:
            logger.warning("Could not locate end of <%s> at offset %d", tag, tag_start)
            node.end = tag_start
        else:
            node.end = match.end()


def document_type_name(text: str) -> str:
    """Return the DOCTYPE name of ``text``, or its root tag when undeclared.

    Raises
    ------
    DocumentParseError
        If the markup is not well-formed.
    """
    parser = ET.XMLParser(
        encoding="utf-8",
        resolve_entities=False,
        load_dtd=False,
        no_network=True,
    )
    try:
        root = ET.fromstring(text.encode("utf-8"), parser=parser)
    except ET.XMLSyntaxError as exc:
        line, column = (exc.position if exc.position else (None, None))
        raise DocumentParseError(f"Malformed markup: {exc.msg}", line=line, column=column, cause=exc) from exc
    name = root.getroottree().docinfo.root_name
    if name:
        return name
    return ET.QName(root).localname if isinstance(root.tag, str) else ""
