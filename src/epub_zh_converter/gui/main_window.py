# epub_zh_converter/src/epub_zh_converter/gui/main_window.py
"""
Interface utilisateur principale avec Tkinter (Vue-Contrôleur)
"""

import logging
import os
import tkinter as tk
from tkinter import filedialog, messagebox, ttk

from ..config import EPUB_MIMETYPE, GUI_GEOMETRY, GUI_POLL_MS, GUI_TITLE
from ..core.errors import ConversionCancelled
from ..core.models import ConversionDirection
from .app_controller import AppController

logger = logging.getLogger(__name__)


class ConverterGUI(tk.Tk):
    """Fenêtre de conversion: choix du fichier, sens, progression, enregistrement."""

    def __init__(self):
        super().__init__()
        self.title(GUI_TITLE)
        self.geometry(GUI_GEOMETRY)

        # Le contrôleur gère l'état (fichier, résultat)
        self.controller = AppController()

        self.file_var = tk.StringVar()
        self.direction_var = tk.StringVar(value=self.controller.direction.value)
        self.status_var = tk.StringVar(value="Choisissez un fichier EPUB")
        self.progress_var = tk.DoubleVar(value=0.0)

        self.create_widgets()
        self._refresh_buttons()

    def create_widgets(self):
        # --- Fichier ---
        frm_file = ttk.Frame(self)
        frm_file.pack(fill=tk.X, padx=8, pady=8)
        ttk.Entry(frm_file, textvariable=self.file_var, width=60, state="readonly").pack(
            side=tk.LEFT, padx=4, fill=tk.X, expand=True
        )
        self.btn_open = ttk.Button(frm_file, text="Select EPUB", command=self.select_file)
        self.btn_open.pack(side=tk.LEFT, padx=4)

        # --- Sens de conversion ---
        frm_dir = ttk.Frame(self)
        frm_dir.pack(fill=tk.X, padx=8)
        for direction in ConversionDirection:
            ttk.Radiobutton(
                frm_dir,
                text=direction.label,
                value=direction.value,
                variable=self.direction_var,
                command=self.on_direction_changed,
            ).pack(side=tk.LEFT, padx=4)

        # --- Progression ---
        ttk.Progressbar(self, variable=self.progress_var, maximum=100).pack(
            fill=tk.X, padx=12, pady=(12, 4)
        )
        ttk.Label(self, textvariable=self.status_var).pack(fill=tk.X, padx=12)

        # --- Actions ---
        frm_actions = ttk.Frame(self)
        frm_actions.pack(fill=tk.X, padx=8, pady=8)
        self.btn_convert = ttk.Button(frm_actions, text="Convert", command=self.start_conversion)
        self.btn_convert.pack(side=tk.LEFT, padx=4)
        self.btn_cancel = ttk.Button(frm_actions, text="Cancel", command=self.controller.cancel)
        self.btn_cancel.pack(side=tk.LEFT, padx=4)
        self.btn_save = ttk.Button(frm_actions, text="Save", command=self.save_result)
        self.btn_save.pack(side=tk.LEFT, padx=4)
        self.btn_reset = ttk.Button(frm_actions, text="Reset", command=self.reset)
        self.btn_reset.pack(side=tk.LEFT, padx=4)

    # --- Actions ---
    def select_file(self):
        path = filedialog.askopenfilename(filetypes=[("EPUB", "*.epub")])
        if not path:
            return
        try:
            self.controller.load_file(path)
        except (ValueError, OSError, RuntimeError) as e:
            messagebox.showerror("Error", str(e))
            return
        self.file_var.set(path)
        self.progress_var.set(0.0)
        self.status_var.set(f"Prêt : {self.controller.source_name}")
        self._refresh_buttons()

    def on_direction_changed(self):
        try:
            self.controller.set_direction(ConversionDirection.from_value(self.direction_var.get()))
        except RuntimeError:
            self.direction_var.set(self.controller.direction.value)

    def start_conversion(self):
        try:
            self.controller.start_conversion()
        except (ValueError, RuntimeError) as e:
            messagebox.showerror("Error", str(e))
            return
        self.progress_var.set(0.0)
        self.status_var.set("Conversion...")
        self._refresh_buttons()
        self.after(GUI_POLL_MS, self._poll_progress)

    def _apply_progress(self):
        event = self.controller.latest_progress()
        if event is not None:
            self.progress_var.set(event.percent)
            self.status_var.set(event.message)

    def _poll_progress(self):
        """Relit la file de progression depuis la boucle Tk."""
        self._apply_progress()

        if self.controller.running:
            self.after(GUI_POLL_MS, self._poll_progress)
            return
        self._on_finished()

    def _on_finished(self):
        # Le thread a pu publier 95 et 100 juste avant de se terminer
        self._apply_progress()
        error = self.controller.error
        result = self.controller.result
        if error is not None:
            self.progress_var.set(0.0)
            self.status_var.set(error.message)
            if not isinstance(error, ConversionCancelled):
                messagebox.showerror("Conversion failed", error.message)
        elif result is not None:
            note = f"Terminé : {result.derived_file_name}"
            if result.degraded_entries:
                note += f" ({len(result.degraded_entries)} fichier(s) conservé(s) tel quel)"
            self.status_var.set(note)
        self._refresh_buttons()

    def save_result(self):
        result = self.controller.result
        if result is None:
            return
        initial_dir = os.path.dirname(self.controller.source_path or "") or None
        path = filedialog.asksaveasfilename(
            initialdir=initial_dir,
            initialfile=result.derived_file_name,
            defaultextension=".epub",
            filetypes=[(EPUB_MIMETYPE, "*.epub")],
        )
        if not path:
            return
        try:
            self.controller.save_result(path)
        except OSError as e:
            messagebox.showerror("Error", str(e))
            return
        self.status_var.set(f"Enregistré : {path}")

    def reset(self):
        self.controller.reset()
        self.file_var.set("")
        self.progress_var.set(0.0)
        self.status_var.set("Choisissez un fichier EPUB")
        self._refresh_buttons()

    def _refresh_buttons(self):
        running = self.controller.running
        loaded = self.controller.source_bytes is not None
        self.btn_open.state(["disabled"] if running else ["!disabled"])
        self.btn_convert.state(["!disabled"] if loaded and not running else ["disabled"])
        self.btn_cancel.state(["!disabled"] if running else ["disabled"])
        has_result = self.controller.result is not None and not running
        self.btn_save.state(["!disabled"] if has_result else ["disabled"])
