# -*- coding: utf-8 -*-

"""
Main entry point for launching the Rearrange Toolkit editor.
"""

import sys
import tkinter as tk
import logging
from pathlib import Path

import sv_ttk

from rearrange_toolkit.logging_config import setup_logging
from rearrange_toolkit.app import RearrangeEditor

def main():
    """
    Configure logging, main window, and launch application.

    An optional first argument names the document to open.
    """
    setup_logging()

    root = tk.Tk()
    root.title("Rearrange Toolkit")
    window_width, window_height = 900, 640
    screen_width = root.winfo_screenwidth()
    screen_height = root.winfo_screenheight()
    pos_x = (screen_width // 2) - (window_width // 2)
    pos_y = (screen_height // 2) - (window_height // 2)
    root.geometry(f"{window_width}x{window_height}+{pos_x}+{pos_y}")

    sv_ttk.set_theme("light")

    path = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    RearrangeEditor(root, path)

    root.mainloop()

if __name__ == '__main__':
    main()

    logging.info("===== Application terminated =====")
