"""
Main entry point for the action queue step panel.

Usage:
    python main.py [script.json]
"""

import sys
import tkinter as tk

from step_panel import StepPanel


def _enable_high_dpi_awareness() -> None:
    if not sys.platform.startswith("win"):
        return

    try:
        import ctypes

        try:
            ctypes.windll.shcore.SetProcessDpiAwareness(2)
            return
        except AttributeError:
            pass

        try:
            ctypes.windll.user32.SetProcessDPIAware()
        except AttributeError:
            pass
    except Exception:
        # Ignore DPI awareness errors; Tk will fallback to default behaviour.
        pass


def main() -> None:
    _enable_high_dpi_awareness()
    root = tk.Tk()
    panel = StepPanel(root)
    if len(sys.argv) > 1:
        panel.load_script(sys.argv[1])
    root.mainloop()


if __name__ == "__main__":
    main()
