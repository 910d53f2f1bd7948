from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import List, Sequence


class ArrangeDialog(tk.Toplevel):
    """Pick and order the names of the nodes to cut.

    The list starts with every candidate name in document order. Entries can
    be moved up/down or removed; the remaining entries, top to bottom, are the
    nodes to cut and the order they will be pasted in.

    show() returns the kept names, or an empty list if cancelled.
    """

    def __init__(self, master: tk.Widget, names: Sequence[str]) -> None:
        super().__init__(master)
        self.title("Arrange nodes")
        self.resizable(True, True)
        self.transient(master)
        self.grab_set()

        self._names: List[str] = list(names)
        self._result: List[str] = []

        self.columnconfigure(0, weight=1)
        self.rowconfigure(0, weight=1)

        list_frame = ttk.Frame(self)
        list_frame.grid(row=0, column=0, sticky="nsew", padx=8, pady=(8, 4))
        list_frame.columnconfigure(0, weight=1)
        list_frame.rowconfigure(0, weight=1)
        self._list = tk.Listbox(list_frame, exportselection=False, selectmode=tk.EXTENDED, height=12)
        self._list.grid(row=0, column=0, sticky="nsew")
        vsb = ttk.Scrollbar(list_frame, orient="vertical", command=self._list.yview)
        self._list.configure(yscrollcommand=vsb.set)
        vsb.grid(row=0, column=1, sticky="ns")

        side = ttk.Frame(list_frame)
        side.grid(row=0, column=2, sticky="n", padx=(6, 0))
        ttk.Button(side, text="Up", command=lambda: self._move(-1)).grid(row=0, column=0, sticky="ew")
        ttk.Button(side, text="Down", command=lambda: self._move(1)).grid(row=1, column=0, sticky="ew", pady=(4, 0))
        ttk.Button(side, text="Remove", command=self._remove).grid(row=2, column=0, sticky="ew", pady=(12, 0))
        ttk.Button(side, text="Reset", command=self._reset).grid(row=3, column=0, sticky="ew", pady=(4, 0))

        btns = ttk.Frame(self)
        btns.grid(row=1, column=0, sticky="e", padx=8, pady=(0, 8))
        ttk.Button(btns, text="Cancel", command=self._on_cancel).grid(row=0, column=0, padx=(0, 6))
        ttk.Button(btns, text="Cut", command=self._on_accept).grid(row=0, column=1)

        self._list.bind("<Delete>", lambda _e: self._remove())
        self._list.bind("<Alt-Up>", lambda _e: self._move(-1))
        self._list.bind("<Alt-Down>", lambda _e: self._move(1))
        self.bind("<Escape>", lambda _e: self._on_cancel())

        self._original = list(self._names)
        self._populate()
        self._list.focus_set()

    def _populate(self, selected: Sequence[int] = ()) -> None:
        self._list.delete(0, tk.END)
        for name in self._names:
            self._list.insert(tk.END, name)
        for idx in selected:
            self._list.selection_set(idx)
        if selected:
            self._list.see(selected[0])

    def _move(self, step: int) -> None:
        selection = list(self._list.curselection())
        if not selection:
            return
        if step < 0 and selection[0] == 0:
            return
        if step > 0 and selection[-1] == len(self._names) - 1:
            return
        order = selection if step < 0 else reversed(selection)
        for idx in order:
            self._names[idx], self._names[idx + step] = self._names[idx + step], self._names[idx]
        self._populate([idx + step for idx in selection])

    def _remove(self) -> None:
        for idx in reversed(self._list.curselection()):
            del self._names[idx]
        self._populate()

    def _reset(self) -> None:
        self._names = list(self._original)
        self._populate()

    def _on_accept(self) -> None:
        self._result = list(self._names)
        self.destroy()

    def _on_cancel(self) -> None:
        self._result = []
        self.destroy()

    def show(self) -> List[str]:
        """Run the dialog and return the kept names in order."""
        self.wait_window(self)
        return self._result
