# -*- coding: utf-8 -*-
"""Tk-based editor front-end for Rearrange Toolkit.

A plain text editor for XML documents with three extra commands: set the
name property of the element under the cursor, cut the named children of
the element under the cursor, and paste the last cut batch at the cursor.
Exposes the :class:`RearrangeEditor` widget, which is instantiated by ``run.py``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

import tkinter as tk
from tkinter import ttk, filedialog, messagebox

from rearrange_toolkit.config import ConfigManager
from rearrange_toolkit.core.document import TextDocument
from rearrange_toolkit.core.models import XmlNode
from rearrange_toolkit.core.path_config import PathConfigStore
from rearrange_toolkit.core.services import OperationResult, RearrangeService
from rearrange_toolkit.ui.dialogs import ArrangeDialog, AttributeNameDialog

logger = logging.getLogger(__name__)

__all__ = ["RearrangeEditor"]

def tk_char_count(text: str, tk_version: float = tk.TkVersion) -> int:
    """Return how many Tk text indices ``text`` spans.

    Tk 8.x stores characters outside the Basic Multilingual Plane as
    surrogate pairs and counts each as two; Tk 9 counts them once.
    """
    if tk_version >= 9.0:
        return len(text)
    return len(text) + sum(1 for ch in text if ord(ch) > 0xFFFF)


_FILE_TYPES = [("XML documents", "*.xml *.sgml *.dita *.ditamap"), ("All files", "*.*")]


class RearrangeEditor:
    """Main editor widget wrapping the Text area, menus and status bar."""

    def __init__(self, root: tk.Tk, path: Optional[Path] = None) -> None:
        self.root = root
        self.path: Optional[Path] = None
        self.config_manager = ConfigManager()

        self.document = TextDocument()
        self.service = RearrangeService(
            self.document,
            name_properties=self.config_manager.get_name_properties(),
            choose_attribute_name=self._choose_attribute_name,
            arrange_names=self._arrange_names,
            on_config_changed=self._on_config_changed,
        )

        self.text: Optional[tk.Text] = None
        self.status_label: Optional[ttk.Label] = None

        self._create_widgets()
        self._create_menus()
        self.root.protocol("WM_DELETE_WINDOW", self.on_close)

        if path is not None:
            self.open_file(path)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    def _create_widgets(self) -> None:
        frame = ttk.Frame(self.root)
        frame.pack(fill="both", expand=True)
        frame.columnconfigure(0, weight=1)
        frame.rowconfigure(0, weight=1)

        self.text = tk.Text(frame, wrap="none", undo=True, font=("Courier", 11))
        self.text.grid(row=0, column=0, sticky="nsew")
        vsb = ttk.Scrollbar(frame, orient="vertical", command=self.text.yview)
        hsb = ttk.Scrollbar(frame, orient="horizontal", command=self.text.xview)
        self.text.configure(yscrollcommand=vsb.set, xscrollcommand=hsb.set)
        vsb.grid(row=0, column=1, sticky="ns")
        hsb.grid(row=1, column=0, sticky="ew")

        self.status_label = ttk.Label(self.root, anchor="w", padding=(6, 2))
        self.status_label.pack(fill="x", side="bottom")

    def _create_menus(self) -> None:
        menubar = tk.Menu(self.root)

        file_menu = tk.Menu(menubar, tearoff=False)
        file_menu.add_command(label="Open...", accelerator="Ctrl+O", command=self.on_open)
        file_menu.add_command(label="Save", accelerator="Ctrl+S", command=self.on_save)
        file_menu.add_command(label="Save As...", command=self.on_save_as)
        file_menu.add_separator()
        file_menu.add_command(label="Quit", command=self.on_close)
        menubar.add_cascade(label="File", menu=file_menu)

        edit_menu = tk.Menu(menubar, tearoff=False)
        edit_menu.add_command(label="Set Name Property", accelerator="F5", command=self.on_set_name_property)
        edit_menu.add_command(label="Cut Nodes", accelerator="F6", command=self.on_cut_nodes)
        edit_menu.add_command(label="Paste Nodes", accelerator="F7", command=self.on_paste_nodes)
        menubar.add_cascade(label="Rearrange", menu=edit_menu)

        self.root.configure(menu=menubar)
        self.root.bind("<Control-o>", lambda _e: self.on_open())
        self.root.bind("<Control-s>", lambda _e: self.on_save())
        self.root.bind("<F5>", lambda _e: self.on_set_name_property())
        self.root.bind("<F6>", lambda _e: self.on_cut_nodes())
        self.root.bind("<F7>", lambda _e: self.on_paste_nodes())

    # ------------------------------------------------------------------
    # File commands
    # ------------------------------------------------------------------
    def open_file(self, path: Path) -> None:
        try:
            loaded = TextDocument.from_file(path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Could not open %s: %s", path, exc)
            messagebox.showerror("Open failed", f"Could not open {path}:\n{exc}")
            return
        self.path = Path(path)
        self._replace_document_text(loaded.text)
        self._refresh_text(0)
        self.root.title(f"Rearrange Toolkit - {self.path.name}")
        self._set_status(f"Opened {self.path}")

    def on_open(self) -> None:
        filename = filedialog.askopenfilename(filetypes=_FILE_TYPES)
        if filename:
            self.open_file(Path(filename))

    def on_save(self) -> None:
        if self.path is None:
            self.on_save_as()
            return
        self._sync_from_widget()
        try:
            self.document.save(self.path)
        except OSError as exc:
            logger.error("Could not save %s: %s", self.path, exc)
            messagebox.showerror("Save failed", f"Could not save {self.path}:\n{exc}")
            return
        self._set_status(f"Saved {self.path}")

    def on_save_as(self) -> None:
        filename = filedialog.asksaveasfilename(filetypes=_FILE_TYPES, defaultextension=".xml")
        if filename:
            self.path = Path(filename)
            self.on_save()

    def on_close(self) -> None:
        if self.service.can_paste():
            if not messagebox.askyesno("Quit", "Some cut nodes have not been pasted. Quit anyway?"):
                return
        self.root.destroy()

    # ------------------------------------------------------------------
    # Rearrange commands
    # ------------------------------------------------------------------
    def on_set_name_property(self) -> None:
        self._sync_from_widget()
        self._report(self.service.set_name_property(self._cursor_offset()))

    def on_cut_nodes(self) -> None:
        self._sync_from_widget()
        cursor = self._cursor_offset()
        result = self.service.cut_at_cursor(cursor)
        if result.success:
            self._refresh_text(min(cursor, len(self.document)))
        self._report(result)

    def on_paste_nodes(self) -> None:
        self._sync_from_widget()
        result = self.service.paste_at_cursor(self._cursor_offset())
        if result.success:
            self._refresh_text(result.details["end"])
        self._report(result)

    # ------------------------------------------------------------------
    # Prompt callbacks
    # ------------------------------------------------------------------
    def _choose_attribute_name(self, node: XmlNode) -> Optional[str]:
        return AttributeNameDialog.ask(self.root, node.tag, node.attrib)

    def _arrange_names(self, names: Sequence[str]) -> Sequence[str]:
        return ArrangeDialog(self.root, names).show()

    def _on_config_changed(self, store: PathConfigStore) -> None:
        try:
            self.config_manager.save_name_properties(store)
        except OSError as exc:
            logger.error("Could not persist name properties: %s", exc)

    # ------------------------------------------------------------------
    # Widget <-> document
    # ------------------------------------------------------------------
    def _cursor_offset(self) -> int:
        # Python offset; Tk index counts differ for non-BMP characters
        return len(self.text.get("1.0", tk.INSERT))

    def _sync_from_widget(self) -> None:
        """Pick up edits typed in the Text widget since the last command."""
        widget_text = self.text.get("1.0", "end-1c")
        if widget_text != self.document.text:
            self._replace_document_text(widget_text)

    def _replace_document_text(self, text: str) -> None:
        self.document.delete(0, len(self.document))
        self.document.insert(0, text)

    def _refresh_text(self, cursor: int) -> None:
        yview = self.text.yview()
        self.text.delete("1.0", tk.END)
        self.text.insert("1.0", self.document.text)
        tk_cursor = tk_char_count(self.document.text[:cursor])
        self.text.mark_set(tk.INSERT, f"1.0 + {tk_cursor} chars")
        self.text.yview_moveto(yview[0])
        self.text.see(tk.INSERT)
        self.text.edit_separator()

    def _set_status(self, message: str) -> None:
        self.status_label.configure(text=message)

    def _report(self, result: OperationResult) -> None:
        self._set_status(result.message)
        reason = (result.details or {}).get("reason")
        if not result.success and reason in ("parse_error", "empty_history", "invalid_position"):
            messagebox.showwarning("Rearrange", result.message)
