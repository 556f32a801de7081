"""Main launcher window: version label, status line and the launch button."""

from __future__ import annotations

import logging
import threading
import tkinter as tk
from tkinter import messagebox
from typing import Callable

import ttkbootstrap as ttk

from services.launcher.models import LaunchError
from viewmodels.launcher_state import LauncherStatus
from viewmodels.launcher_viewmodel import LauncherViewModel, label_for_status


logger = logging.getLogger(__name__)

_BUTTON_STYLES = {
    LauncherStatus.READY: "success",
    LauncherStatus.FAILED: "danger",
}


class LauncherWindow(ttk.Window):
    """Thin Tk shell around :class:`LauncherViewModel`."""

    def __init__(self, viewmodel: LauncherViewModel, *, themename: str = "darkly") -> None:
        super().__init__(title="Game Launcher", themename=themename, resizable=(False, False))
        self._viewmodel = viewmodel
        self._view_ready_sent = False

        self._version_var = tk.StringVar(master=self, value=viewmodel.state.displayed_version)
        self._detail_var = tk.StringVar(master=self, value="")

        frame = ttk.Frame(self, padding=20)
        frame.pack(fill="both", expand=True)

        ttk.Label(frame, text="Installed version:").grid(row=0, column=0, sticky="w")
        ttk.Label(frame, textvariable=self._version_var).grid(row=0, column=1, sticky="w", padx=(8, 0))
        ttk.Label(frame, textvariable=self._detail_var, wraplength=320).grid(
            row=1, column=0, columnspan=2, sticky="we", pady=(12, 12)
        )
        self._launch_button = ttk.Button(
            frame,
            text=viewmodel.launch_label,
            command=self._on_launch_clicked,
            width=24,
        )
        self._launch_button.grid(row=2, column=0, columnspan=2)

        state = viewmodel.state
        state.add_status_observer(
            lambda status: self._invoke_on_ui_thread(lambda: self._apply_status(status))
        )
        state.add_version_observer(
            lambda text: self._invoke_on_ui_thread(lambda: self._version_var.set(text))
        )
        self._apply_status(state.status)
        self.bind("<Map>", self._on_content_rendered, add="+")

    def _on_content_rendered(self, _event: tk.Event | None = None) -> None:
        if self._view_ready_sent:
            return
        self._view_ready_sent = True
        # Let the first frame paint before the blocking descriptor fetch.
        self.after(50, self._viewmodel.on_view_ready)

    def _on_launch_clicked(self) -> None:
        try:
            started = self._viewmodel.on_launch_requested()
        except LaunchError as exc:
            logger.error("Unable to start the game: %s", exc)
            messagebox.showerror("Game Launcher", str(exc), parent=self)
            return
        if started and self._viewmodel.close_on_launch:
            self.destroy()

    def _apply_status(self, status: LauncherStatus | None) -> None:
        state = self._viewmodel.state
        self._launch_button.configure(
            text=label_for_status(status),
            bootstyle=_BUTTON_STYLES.get(status, "secondary"),
        )
        enabled = state.can_launch() or state.can_retry()
        self._launch_button.configure(state="normal" if enabled else "disabled")
        if status is LauncherStatus.FAILED:
            self._detail_var.set(state.last_error or "")
        elif status is LauncherStatus.READY and not state.can_launch():
            self._detail_var.set(f"{self._viewmodel.paths.entry_point.name} is missing.")
        else:
            self._detail_var.set("")

    def _invoke_on_ui_thread(self, callback: Callable[[], None]) -> None:
        if threading.current_thread() is threading.main_thread():
            callback()
            return

        try:
            self.after(0, callback)
        except (RuntimeError, tk.TclError):
            logger.debug("Launcher window closed before UI update", exc_info=True)


__all__ = ["LauncherWindow"]
