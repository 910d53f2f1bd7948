from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Dict, Optional


class AttributeNameDialog:
    """Ask which attribute carries an element's display name.

    Use: name = AttributeNameDialog.ask(parent, "sect1", {"id": "intro"})
    The combobox offers the attributes present on the element but any name
    can be typed. Returns the entered name or None if cancelled.
    """

    @staticmethod
    def ask(parent: tk.Widget, element_tag: str, attributes: Dict[str, str],
            initialvalue: str = "") -> Optional[str]:
        top = tk.Toplevel(parent)
        top.title("Set name property")
        try:
            top.transient(parent.winfo_toplevel())
            top.grab_set()
        except tk.TclError:
            pass
        top.resizable(True, False)

        container = ttk.Frame(top, padding=(12, 10))
        container.grid(row=0, column=0, sticky="nsew")
        top.columnconfigure(0, weight=1)
        container.columnconfigure(0, weight=1)

        prompt = f"Attribute naming <{element_tag}> elements:"
        ttk.Label(container, text=prompt).grid(row=0, column=0, sticky="w", pady=(0, 6))

        choices = list(attributes)
        var = tk.StringVar(value=initialvalue or (choices[0] if choices else ""))
        combo = ttk.Combobox(container, textvariable=var, values=choices, width=40)
        combo.grid(row=1, column=0, sticky="ew")

        preview = ttk.Label(container, foreground="gray")
        preview.grid(row=2, column=0, sticky="w", pady=(4, 0))

        def _update_preview(*_args) -> None:
            value = attributes.get(var.get().strip())
            preview.configure(text=f"e.g. \"{value}\"" if value else "")

        var.trace_add("write", _update_preview)
        _update_preview()

        btns = ttk.Frame(container)
        btns.grid(row=3, column=0, sticky="e", pady=(10, 0))

        result: list[Optional[str]] = [None]

        def _ok() -> None:
            result[0] = var.get().strip() or None
            top.destroy()

        def _cancel() -> None:
            result[0] = None
            top.destroy()

        ttk.Button(btns, text="Cancel", command=_cancel).grid(row=0, column=0, padx=(0, 6))
        ttk.Button(btns, text="OK", command=_ok).grid(row=0, column=1)

        combo.bind("<Return>", lambda _e: _ok())
        combo.bind("<Escape>", lambda _e: _cancel())
        combo.focus_set()

        top.wait_window(top)
        return result[0]
