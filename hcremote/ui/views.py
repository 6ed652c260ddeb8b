"""Reusable Tkinter view components."""
from __future__ import annotations

import tkinter as tk
from typing import Callable, Sequence

from ..commands import QUICK_COMMANDS, Action, Direction

SPEED_PRESETS = (25, 50, 75, 100)


class DeviceListView:
    """Paired device list with scan and connect controls."""

    def __init__(
        self,
        master: tk.Misc,
        *,
        status_var: tk.StringVar,
        on_scan: Callable[[], None],
        on_connect: Callable[[int], None],
        on_disconnect: Callable[[], None],
    ) -> None:
        self.frame = tk.LabelFrame(master, text="1. Paired Devices", padx=10, pady=10)
        self.frame.pack(padx=10, pady=10, fill="x")

        self.listbox = tk.Listbox(self.frame, height=4, exportselection=False)
        self.listbox.grid(row=0, column=0, rowspan=3, sticky="nsew")

        self.scan_button = tk.Button(
            self.frame, text="Scan Paired Devices", command=on_scan
        )
        self.scan_button.grid(row=0, column=1, sticky="ew", padx=(10, 0))

        self.connect_button = tk.Button(
            self.frame, text="Connect", command=self._connect_selected
        )
        self.connect_button.grid(row=1, column=1, sticky="ew", padx=(10, 0), pady=(5, 0))

        self.disconnect_button = tk.Button(
            self.frame, text="Disconnect", command=on_disconnect, bg="#f44336", fg="white"
        )
        self.disconnect_button.grid(row=2, column=1, sticky="ew", padx=(10, 0), pady=(5, 0))

        self.status_label = tk.Label(self.frame, textvariable=status_var, anchor="w")
        self.status_label.grid(row=3, column=0, columnspan=2, sticky="ew", pady=(8, 0))

        self.frame.grid_columnconfigure(0, weight=1)
        self._on_connect = on_connect

    def set_devices(self, labels: Sequence[str]) -> None:
        self.listbox.delete(0, tk.END)
        if not labels:
            self.listbox.insert(tk.END, "No paired devices found. Tap scan above.")
            return
        for label in labels:
            self.listbox.insert(tk.END, label)

    def _connect_selected(self) -> None:
        selection = self.listbox.curselection()
        if selection:
            self._on_connect(selection[0])


class DriveView:
    """Direction pad, speed control and vehicle actions."""

    def __init__(
        self,
        master: tk.Misc,
        *,
        speed_var: tk.StringVar,
        on_press: Callable[[Direction], None],
        on_release: Callable[[], None],
        on_stop: Callable[[], None],
        on_speed: Callable[[int], None],
        on_speed_step: Callable[[int], None],
        on_action: Callable[[Action], None],
    ) -> None:
        self.frame = tk.LabelFrame(master, text="2. Drive", padx=10, pady=10)
        self.frame.pack(padx=10, pady=10, fill="x")

        speed_row = tk.Frame(self.frame)
        speed_row.pack(fill="x")
        tk.Label(speed_row, textvariable=speed_var, width=12, anchor="w").pack(side=tk.LEFT)
        tk.Button(speed_row, text="-", width=3, command=lambda: on_speed_step(-1)).pack(
            side=tk.LEFT
        )
        for value in SPEED_PRESETS:
            tk.Button(
                speed_row, text=str(value), width=4, command=lambda v=value: on_speed(v)
            ).pack(side=tk.LEFT, padx=(5, 0))
        tk.Button(speed_row, text="+", width=3, command=lambda: on_speed_step(1)).pack(
            side=tk.LEFT, padx=(5, 0)
        )

        pad = tk.Frame(self.frame)
        pad.pack(pady=(10, 0))
        layout = {
            Direction.FORWARD: (0, 1),
            Direction.LEFT: (1, 0),
            Direction.RIGHT: (1, 2),
            Direction.BACKWARD: (2, 1),
        }
        self.direction_buttons: dict[Direction, tk.Button] = {}
        for direction, (row, column) in layout.items():
            button = tk.Button(pad, text=direction.value, width=10)
            button.grid(row=row, column=column, padx=3, pady=3)
            button.bind("<ButtonPress-1>", lambda _e, d=direction: on_press(d))
            button.bind("<ButtonRelease-1>", lambda _e: on_release())
            self.direction_buttons[direction] = button
        self.stop_button = tk.Button(
            pad, text="STOP", width=10, bg="#f44336", fg="white", command=on_stop
        )
        self.stop_button.grid(row=1, column=1, padx=3, pady=3)

        actions = tk.Frame(self.frame)
        actions.pack(fill="x", pady=(10, 0))
        for action in Action:
            tk.Button(
                actions, text=action.value, command=lambda a=action: on_action(a)
            ).pack(side=tk.LEFT, fill="x", expand=True, padx=2)


class CommandView:
    """Free-text command entry plus the quick command buttons."""

    def __init__(
        self,
        master: tk.Misc,
        *,
        text_var: tk.StringVar,
        on_send: Callable[[], None],
        on_quick: Callable[[str], None],
    ) -> None:
        self.frame = tk.LabelFrame(master, text="3. Custom Command", padx=10, pady=10)
        self.frame.pack(padx=10, pady=10, fill="x")

        quick = tk.Frame(self.frame)
        quick.pack(fill="x")
        for name, payload in QUICK_COMMANDS.items():
            tk.Button(quick, text=payload, command=lambda n=name: on_quick(n)).pack(
                side=tk.LEFT, fill="x", expand=True, padx=2
            )

        row = tk.Frame(self.frame)
        row.pack(fill="x", pady=(8, 0))
        self.entry = tk.Entry(row, textvariable=text_var)
        self.entry.pack(side=tk.LEFT, fill="x", expand=True)
        self.entry.bind("<Return>", lambda _e: on_send())
        self.send_button = tk.Button(row, text="Send", command=on_send)
        self.send_button.pack(side=tk.LEFT, padx=(10, 0))


class ReceivedView:
    """Scrollable log of lines received from the device."""

    def __init__(self, master: tk.Misc) -> None:
        from tkinter.scrolledtext import ScrolledText

        self.frame = tk.LabelFrame(master, text="4. Received Data", padx=10, pady=10)
        self.frame.pack(padx=10, pady=10, fill="both", expand=True)
        self.log = ScrolledText(self.frame, height=6, wrap="word", state=tk.DISABLED)
        self.log.pack(fill="both", expand=True)

    def append(self, line: str) -> None:
        self.log.configure(state=tk.NORMAL)
        self.log.insert(tk.END, f"{line}\n")
        self.log.see(tk.END)
        self.log.configure(state=tk.DISABLED)

    def clear(self) -> None:
        self.log.configure(state=tk.NORMAL)
        self.log.delete("1.0", tk.END)
        self.log.configure(state=tk.DISABLED)


__all__ = ["CommandView", "DeviceListView", "DriveView", "ReceivedView"]
