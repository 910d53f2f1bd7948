from __future__ import annotations

"""Editor-facing entry points for rearranging named nodes.

This module provides a UI-agnostic, testable service that a host editor
calls from its commands. It re-parses the document for every command,
resolves the document type and the node under the cursor, and delegates the
actual work to :class:`RearrangeEngine`.

Scope and guarantees:
- Operates purely in-memory on a TextDocument, no file I/O nor UI imports.
- Expected failures (empty cut history, malformed markup, nothing named,
  a paste cursor outside the document) return
  OperationResult(success=False, ...) with clear messaging, never raise.
- The document is left untouched by every failed operation.

Examples
--------
Basic usage:

    service = RearrangeService(document, arrange_names=pick_names)
    result = service.cut_at_cursor(cursor)
    if not result.success:
        print(result.message)

"""

from dataclasses import dataclass
import logging
from typing import Any, Callable, Dict, Optional

from rearrange_toolkit.core.document import TextDocument, XmlTree
from rearrange_toolkit.core.exceptions import DocumentParseError, EmptyHistory
from rearrange_toolkit.core.interfaces import AttributeChooser, NameArranger
from rearrange_toolkit.core.path_config import PathConfigStore
from rearrange_toolkit.core.services.cut_history import CutHistory
from rearrange_toolkit.core.services.rearrange_engine import RearrangeEngine

__all__ = ["OperationResult", "RearrangeService"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationResult:
    """Result of an editor command.

    Attributes
    ----------
    success
        Whether the operation completed successfully.
    message
        Human-readable summary suitable for logs or UI display.
    details
        Optional structured details for diagnostics or caller logic.
    """
    success: bool
    message: str
    details: Optional[Dict[str, Any]] = None


class RearrangeService:
    """Set-name, cut and paste commands over a :class:`TextDocument`.

    Parameters
    ----------
    document
        The live document. Edited in place by cut and paste.
    engine
        Engine to delegate to. Built from the remaining arguments when omitted.
    name_properties
        Initial name configuration, ignored when ``engine`` is given.
    choose_attribute_name, arrange_names
        Prompt callbacks, ignored when ``engine`` is given.
    on_config_changed
        Called with the new store after every successful set-name command,
        e.g. to persist it.
    """

    def __init__(
        self,
        document: TextDocument,
        engine: Optional[RearrangeEngine] = None,
        name_properties: Optional[PathConfigStore] = None,
        choose_attribute_name: Optional[AttributeChooser] = None,
        arrange_names: Optional[NameArranger] = None,
        on_config_changed: Optional[Callable[[PathConfigStore], None]] = None,
    ) -> None:
        self._document = document
        self._engine = engine or RearrangeEngine(
            document,
            name_properties=name_properties,
            history=CutHistory(),
            arrange_names=arrange_names,
            choose_attribute_name=choose_attribute_name,
        )
        self._on_config_changed = on_config_changed

    @property
    def document(self) -> TextDocument:
        return self._document

    @property
    def engine(self) -> RearrangeEngine:
        return self._engine

    @property
    def name_properties(self) -> PathConfigStore:
        return self._engine.name_properties

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def set_name_property(self, cursor: int) -> OperationResult:
        """Ask which attribute names the element at ``cursor`` and remember it."""
        logger.info("Edit: set_name_property cursor=%d", cursor)
        try:
            document_type = self._document.document_type_name()
            tree = self._document.parse_tree()
        except DocumentParseError as exc:
            logger.warning("Edit FAIL: set_name_property parse_error %s", exc)
            return OperationResult(False, f"Cannot parse document: {exc}", {"cursor": cursor, "reason": "parse_error"})

        node = tree.find_enclosing_node(cursor)
        element_type = tree.element_type(node)
        attribute = self._engine.set_name_property(document_type, element_type, node)
        details = {"document_type": document_type, "element_type": element_type, "attribute": attribute}
        if attribute is None:
            logger.info("Edit noop: set_name_property cancelled element=%s", element_type)
            return OperationResult(False, "No attribute chosen.", {**details, "reason": "cancelled"})

        if self._on_config_changed is not None:
            self._on_config_changed(self._engine.name_properties)
        logger.info("Edit OK: set_name_property %s/%s -> %s", document_type, element_type, attribute)
        return OperationResult(True, f"<{element_type}> elements are now named by '{attribute}'.", details)

    def cut_at_cursor(self, cursor: int) -> OperationResult:
        """Cut the chosen named children of the element enclosing ``cursor``."""
        logger.info("Edit: cut_at_cursor cursor=%d", cursor)
        try:
            document_type = self._document.document_type_name()
            tree: XmlTree = self._document.parse_tree()
        except DocumentParseError as exc:
            logger.warning("Edit FAIL: cut_at_cursor parse_error %s", exc)
            return OperationResult(False, f"Cannot parse document: {exc}", {"cursor": cursor, "reason": "parse_error"})

        parent = tree.find_enclosing_node(cursor)
        batch = self._engine.cut_children(tree, parent, document_type)
        details = {
            "parent": tree.element_type(parent),
            "names": [record.name for record in batch],
            "count": len(batch),
            "pending": len(self._engine.history),
        }
        if not batch:
            logger.info("Edit noop: cut_at_cursor nothing_kept parent=%s", details["parent"])
            return OperationResult(False, "No named nodes were cut.", {**details, "reason": "nothing_kept"})

        logger.info("Edit OK: cut_at_cursor count=%d names=%s", len(batch), details["names"])
        return OperationResult(True, f"Cut {len(batch)} node(s).", details)

    def paste_at_cursor(self, cursor: int) -> OperationResult:
        """Insert the most recently cut batch at ``cursor``."""
        logger.info("Edit: paste_at_cursor cursor=%d", cursor)
        try:
            batch = self._engine.paste(cursor)
        except EmptyHistory as exc:
            logger.warning("Edit FAIL: paste_at_cursor empty_history")
            return OperationResult(False, str(exc), {"cursor": cursor, "reason": "empty_history"})
        except IndexError as exc:
            logger.warning("Edit FAIL: paste_at_cursor invalid_position %s", exc)
            return OperationResult(False, f"Cannot paste here: {exc}", {"cursor": cursor, "reason": "invalid_position"})

        separator = self._engine.separator
        end = cursor + sum(len(record.text or "") + len(separator) for record in batch)
        logger.info("Edit OK: paste_at_cursor count=%d", len(batch))
        return OperationResult(
            True,
            f"Pasted {len(batch)} node(s).",
            {"names": [record.name for record in batch], "count": len(batch), "start": cursor, "end": end},
        )

    def can_paste(self) -> bool:
        return self._engine.can_paste()
