"""
Tkinter step panel for action queue scripts.

Key capabilities
----------------
- Load a JSON queue script and show its tree
- Start / Next / Skip / Reset buttons wired straight to the queue callbacks
- Global hotkeys for the same commands (marshalled onto the Tk thread)
- Step log with export, persisted hotkeys and last script
"""

from __future__ import annotations

import tkinter as tk
from tkinter import ttk, filedialog, messagebox, scrolledtext
from pathlib import Path
from typing import Callable, Optional

from action_queue import ActionError, ActionQueue, Branch, QueueError, QueueScript, RunContext
from hotkey_manager import HotkeyManager
from logger import StatusLogger
from models import DriverSettings
from settings_manager import SettingsManager


class StepPanel:
    """Small Tk window that drives one ActionQueue one step at a time."""

    WINDOW_SIZE = (720, 560)

    def __init__(self, root: tk.Tk, settings_manager: Optional[SettingsManager] = None):
        self.root = root
        self.root.title("Action Queue")
        self.root.geometry(f"{self.WINDOW_SIZE[0]}x{self.WINDOW_SIZE[1]}")

        self.settings_manager = settings_manager or SettingsManager()
        self.settings: DriverSettings = self.settings_manager.load()

        self.logger = StatusLogger(max_entries=self.settings.log_max_entries)
        self.hotkey_manager = HotkeyManager()
        self.queue: Optional[ActionQueue] = None
        self.script: Optional[QueueScript] = None
        self.run_context = RunContext(logger=lambda m: self._log_message(f"  {m}"))

        self.script_var = tk.StringVar(value="No script loaded")
        self.cursor_var = tk.StringVar(value="Cursor: -")
        self.status_var = tk.StringVar(value="Status: Ready")

        self._build_ui()
        self._setup_hotkeys()
        self.root.protocol("WM_DELETE_WINDOW", self._on_closing)

        if self.settings.last_script and Path(self.settings.last_script).exists():
            self.load_script(self.settings.last_script)

    # ------------------------------------------------------------------
    # UI
    # ------------------------------------------------------------------
    def _build_ui(self) -> None:
        self.root.columnconfigure(0, weight=1)
        self.root.rowconfigure(0, weight=1)

        container = ttk.Frame(self.root, padding=12)
        container.grid(row=0, column=0, sticky="nsew")
        container.columnconfigure(0, weight=1)
        container.columnconfigure(1, weight=2)
        container.rowconfigure(1, weight=1)

        header = ttk.Frame(container)
        header.grid(row=0, column=0, columnspan=2, sticky="ew", pady=(0, 10))
        ttk.Label(header, textvariable=self.script_var, font=("Arial", 12, "bold")).pack(side=tk.LEFT)
        ttk.Button(header, text="Open script…", command=self._open_script_file).pack(side=tk.RIGHT)

        tree_frame = ttk.LabelFrame(container, text="Steps", padding=8)
        tree_frame.grid(row=1, column=0, sticky="nsew", padx=(0, 10))
        tree_frame.columnconfigure(0, weight=1)
        tree_frame.rowconfigure(0, weight=1)
        self.tree = ttk.Treeview(tree_frame, show="tree", selectmode="browse")
        self.tree.grid(row=0, column=0, sticky="nsew")

        right = ttk.Frame(container)
        right.grid(row=1, column=1, sticky="nsew")
        right.columnconfigure(0, weight=1)
        right.rowconfigure(2, weight=1)

        controls = ttk.Frame(right)
        controls.grid(row=0, column=0, sticky="ew")
        self._add_control(controls, 0, "Start", self._handle_start, self.settings.start_hotkey)
        self._add_control(controls, 1, "Next", self._handle_next, self.settings.next_hotkey)
        self._add_control(controls, 2, "Skip", self._handle_skip, self.settings.skip_hotkey)
        self._add_control(controls, 3, "Reset", self._handle_reset, self.settings.reset_hotkey)

        ttk.Label(right, textvariable=self.cursor_var).grid(row=1, column=0, sticky="w", pady=(8, 4))

        self.log_text = scrolledtext.ScrolledText(right, height=12, state=tk.DISABLED, wrap=tk.WORD)
        self.log_text.grid(row=2, column=0, sticky="nsew")

        footer = ttk.Frame(right)
        footer.grid(row=3, column=0, sticky="ew", pady=(8, 0))
        ttk.Label(footer, textvariable=self.status_var).pack(side=tk.LEFT)
        ttk.Button(footer, text="Export log", command=self._export_logs).pack(side=tk.RIGHT)

    @staticmethod
    def _add_control(parent: ttk.Frame, column: int, text: str, command: Callable[[], None], hotkey: str) -> None:
        ttk.Button(parent, text=f"{text} ({hotkey})", command=command).grid(row=0, column=column, padx=(0, 6))

    def _refresh_tree(self) -> None:
        self.tree.delete(*self.tree.get_children())
        if self.queue is None:
            return

        def add(parent: str, branch: Branch, prefix: str) -> None:
            for index, slot in enumerate(branch):
                item_id = f"{prefix}{index}"
                if isinstance(slot, Branch):
                    self.tree.insert(parent, tk.END, iid=item_id, text=f"{index}: {slot.name or 'group'}", open=True)
                    add(item_id, slot, f"{item_id}/")
                else:
                    self.tree.insert(parent, tk.END, iid=item_id, text=f"{index}: {slot.label}")

        add("", self.queue.root, "")

    def _refresh_cursor(self) -> None:
        if self.queue is None:
            self.cursor_var.set("Cursor: -")
            return
        path = self.queue.path
        self.cursor_var.set(f"Cursor: {path}")
        item_id = "/".join(str(i) for i in path)
        if item_id and self.tree.exists(item_id):
            self.tree.selection_set(item_id)
            self.tree.see(item_id)

    # ------------------------------------------------------------------
    # Queue commands
    # ------------------------------------------------------------------
    def load_script(self, path: str) -> bool:
        try:
            script = QueueScript.from_file(path)
        except (OSError, ActionError, QueueError) as exc:
            self._log_message(f"Script could not be loaded: {exc}", level="ERROR")
            return False
        self.script = script
        self.queue = script.build_queue()
        self.queue.on_log(self.logger.log_info)
        self.settings.last_script = str(path)
        self.script_var.set(f"Script: {script.name}")
        self._refresh_tree()
        self._refresh_cursor()
        self._log_message(f"Loaded '{script.name}' from {path}")
        return True

    def _run_command(self, command: Callable[[ActionQueue], None], describe: bool = True) -> None:
        if self.queue is None:
            self._log_message("Load a script first.", level="WARNING")
            return
        try:
            command(self.queue)
        except (QueueError, ActionError) as exc:
            self._log_message(str(exc), level="ERROR")
            describe = False
        if describe:
            leaf = self.queue.peek()
            entry = self.logger.log_step(self.queue.path, leaf.label if leaf is not None else "?")
            self._append_log_text(entry.message)
        self._refresh_cursor()

    def _handle_start(self) -> None:
        self._run_command(lambda q: q.start(self.run_context))

    def _handle_next(self) -> None:
        self._run_command(lambda q: q.next(self.run_context))

    def _handle_skip(self) -> None:
        self._run_command(lambda q: q.skip(), describe=False)

    def _handle_reset(self) -> None:
        self._run_command(lambda q: q.reset(), describe=False)

    # ------------------------------------------------------------------
    # Hotkeys & logging
    # ------------------------------------------------------------------
    def _setup_hotkeys(self) -> None:
        handlers = {
            "start": self._handle_start,
            "next": self._handle_next,
            "skip": self._handle_skip,
            "reset": self._handle_reset,
            "quit": self._on_closing,
        }
        for name, hotkey in self.settings.hotkeys().items():
            handler = handlers[name]
            # pynput calls from its listener thread; Tk must be touched on the main loop.
            self.hotkey_manager.register(name, hotkey, lambda h=handler: self.root.after(0, h))
        if not self.hotkey_manager.enable_hotkeys():
            self._log_message("Global hotkeys could not be registered. Check system permissions.", level="WARNING")

    def _append_log_text(self, message: str) -> None:
        self.log_text.configure(state=tk.NORMAL)
        self.log_text.insert(tk.END, message + "\n")
        self.log_text.see(tk.END)
        self.log_text.configure(state=tk.DISABLED)

    def _log_message(self, message: str, level: str = "INFO") -> None:
        self._append_log_text(message)

        if level == "INFO":
            self.logger.log_info(message)
        elif level == "WARNING":
            self.logger.log_warning(message)
        else:
            self.logger.log_error(message)

        self.status_var.set(f"Status: {message.strip()}")

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------
    def _open_script_file(self) -> None:
        path = filedialog.askopenfilename(filetypes=[("JSON", "*.json"), ("All files", "*.*")])
        if path:
            self.load_script(path)

    def _export_logs(self) -> None:
        path = filedialog.asksaveasfilename(
            defaultextension=".txt",
            filetypes=[("Text files", "*.txt"), ("All files", "*.*")],
        )
        if not path:
            return
        if self.logger.export_logs_to_file(path):
            messagebox.showinfo("Export", "Log exported.")
        else:
            messagebox.showerror("Export", "Log could not be exported.")

    def _on_closing(self) -> None:
        self.hotkey_manager.disable_hotkeys()
        try:
            self.settings_manager.save(self.settings)
        except OSError as exc:
            print(f"Failed to save settings: {exc}")
        self.root.destroy()
