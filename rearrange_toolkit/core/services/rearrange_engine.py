from __future__ import annotations

"""Extraction, cut and paste of named sibling nodes.

The engine moves a chosen subset of an element's children, identified by a
configured "name" attribute, from one place in a document to another:

1. :meth:`RearrangeEngine.extract_candidates` resolves the display name of
   each child and puts live markers around its text.
2. :meth:`RearrangeEngine.arrange` lets the user pick and order names.
3. :meth:`RearrangeEngine.cut` captures the exact text of the kept nodes and
   deletes it; the batch goes onto the :class:`CutHistory`.
4. :meth:`RearrangeEngine.paste` pops the latest batch and writes the text
   back, one node per line, at a new position.

:meth:`RearrangeEngine.cut_children` runs steps 1 to 3 and guarantees that
every marker created in step 1 is released before it returns, whether the
node was kept, skipped, or the arrange step failed.

Unlike :class:`~rearrange_toolkit.core.services.rearrange_service.RearrangeService`
this class raises on error (``EmptyHistory`` on an empty paste).
"""

import logging
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from rearrange_toolkit.core.interfaces import AttributeChooser, NameArranger, TextBuffer, TreeModel
from rearrange_toolkit.core.models import NodeRecord
from rearrange_toolkit.core.path_config import PathConfigStore
from rearrange_toolkit.core.services.cut_history import CutBatch, CutHistory

__all__ = ["RearrangeEngine"]

logger = logging.getLogger(__name__)


def _keep_all(names: Sequence[str]) -> Sequence[str]:
    return list(names)


class RearrangeEngine:
    """Node extraction and cut/paste lifecycle over a text buffer.

    Parameters
    ----------
    buffer
        Document text with live position references.
    name_properties
        Initial name configuration, keyed ``[document_type, element_type]``.
    history
        Last-cut stack. A fresh one is created when omitted.
    arrange_names
        Callback choosing which names to keep and in which order. Defaults to
        keeping every name in document order.
    choose_attribute_name
        Callback prompting for the naming attribute of a node.
    separator
        Text written after each pasted node.
    """

    def __init__(
        self,
        buffer: TextBuffer,
        name_properties: Optional[PathConfigStore] = None,
        history: Optional[CutHistory] = None,
        arrange_names: Optional[NameArranger] = None,
        choose_attribute_name: Optional[AttributeChooser] = None,
        separator: str = "\n",
    ) -> None:
        self._buffer = buffer
        self._name_properties = name_properties if name_properties is not None else PathConfigStore()
        self._history = history if history is not None else CutHistory()
        self._arrange_names: NameArranger = arrange_names or _keep_all
        self._choose_attribute_name = choose_attribute_name
        self._separator = separator

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    @property
    def name_properties(self) -> PathConfigStore:
        return self._name_properties

    @name_properties.setter
    def name_properties(self, store: PathConfigStore) -> None:
        self._name_properties = store

    @property
    def history(self) -> CutHistory:
        return self._history

    @property
    def separator(self) -> str:
        return self._separator

    def naming_config(self, document_type: str) -> Mapping:
        """Return the element-type -> attribute mapping for ``document_type``."""
        level = self._name_properties.get_path([document_type])
        if isinstance(level, PathConfigStore):
            return level
        return PathConfigStore()

    def set_name_property(self, document_type: str, element_type: str, node: Any) -> Optional[str]:
        """Prompt for the naming attribute of ``node`` and store it.

        Returns the chosen attribute name, or None when the prompt was
        cancelled (nothing is stored).
        """
        if self._choose_attribute_name is None:
            raise ValueError("No attribute chooser configured")
        attribute = self._choose_attribute_name(node)
        if not attribute:
            return None
        self._name_properties = self._name_properties.set_path([document_type, element_type], attribute)
        logger.debug("Name property %s/%s -> %s", document_type, element_type, attribute)
        return attribute

    # -------------------------------------------------------------------------
    # Extraction / arrangement
    # -------------------------------------------------------------------------

    def extract_candidates(self, tree: TreeModel, nodes: Iterable[Any], naming_config: Mapping) -> List[NodeRecord]:
        """Return a record for every node with a resolvable display name.

        Nodes whose element type has no configured attribute, or on which the
        configured attribute is absent or empty, are skipped. If resolving a node fails, the markers already created are released
        before the error propagates.
        """
        records: List[NodeRecord] = []
        try:
            for node in nodes:
                element_type = tree.element_type(node)
                attribute = naming_config.get(element_type)
                if not isinstance(attribute, str) or not attribute:
                    continue
                name = tree.attribute(node, attribute)
                if not name:
                    continue
                start, end = tree.text_span(node)
                records.append(NodeRecord(name=name, position=self._buffer.create_position_ref(start, end)))
        except Exception:
            self._release(records)
            raise
        return records

    def arrange(self, records: Sequence[NodeRecord]) -> Tuple[List[NodeRecord], List[NodeRecord]]:
        """Split ``records`` into kept and skipped according to the arranger.

        Every returned name pulls in all records carrying it, in the order the
        names were returned; a name returned twice pulls its records in twice.
        Names that match no record are ignored. Records whose name was not
        returned are skipped, in their original order.
        """
        chosen = list(self._arrange_names([record.name for record in records]) or [])
        kept: List[NodeRecord] = []
        for name in chosen:
            kept.extend(record for record in records if record.name == name)
        selected = set(chosen)
        skipped = [record for record in records if record.name not in selected]
        return kept, skipped

    # -------------------------------------------------------------------------
    # Cut / paste
    # -------------------------------------------------------------------------

    def cut(self, kept: Sequence[NodeRecord]) -> List[NodeRecord]:
        """Capture the text of each record and delete it from the buffer.

        A record listed more than once is only deleted the first time; later
        occurrences reuse the captured text.
        """
        for record in kept:
            if record.is_cut:
                continue
            start, end = record.position.resolve()
            record.text = self._buffer.substring(start, end)
            self._buffer.delete(start, end)
        return list(kept)

    def cut_children(self, tree: TreeModel, parent: Any, document_type: str) -> CutBatch:
        """Extract, arrange and cut the named children of ``parent``.

        The cut records are pushed onto the history as one batch and returned.
        Nothing is cut or pushed when no child is kept.
        """
        records = self.extract_candidates(tree, tree.children(parent), self.naming_config(document_type))
        batch: CutBatch = ()
        try:
            if records:
                kept, skipped = self.arrange(records)
                logger.debug("Arranged %d candidate(s): kept=%d skipped=%d", len(records), len(kept), len(skipped))
                if kept:
                    batch = tuple(self.cut(kept))
                    self._history.push(batch)
        finally:
            self._release(records)
        return batch

    def paste(self, pos: int) -> CutBatch:
        """Insert the most recent batch at ``pos``, one separator after each node.

        Raises
        ------
        EmptyHistory
            If there is nothing to paste. The buffer is left untouched.
        """
        batch = self._history.pop()
        try:
            for record in batch:
                pos = self._buffer.insert(pos, (record.text or "") + self._separator)
        except IndexError:
            # Only the first insert can fail; the batch is still intact
            self._history.push(batch)
            raise
        return batch

    def can_paste(self) -> bool:
        return self._history.can_pop()

    @staticmethod
    def _release(records: Iterable[NodeRecord]) -> None:
        for record in records:
            if record.position is not None:
                record.position.release()
                record.position = None
