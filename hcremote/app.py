import argparse
import logging
import threading
import tkinter as tk
from tkinter import messagebox

from .commands import Action, Direction
from .config import AppConfig
from .config import load_config as load_app_config
from .config import save_config as save_app_config
from .context import AppContext, build_context
from .controller import Notification, RemoteController
from .models import ConnectionState
from .settings import configure_logging
from .transport import LoopbackTransport
from .ui import CommandView, DeviceListView, DriveView, ReceivedView

STATUS_TEXT = {
    ConnectionState.DISCONNECTED: "Status: Not connected",
    ConnectionState.CONNECTING: "Status: Connecting...",
    ConnectionState.CONNECTED: "Status: Connected to {device}",
    ConnectionState.DISCONNECTING: "Status: Disconnecting...",
}


class RemoteApp:
    """Main window of the HC-06 remote controller."""

    def __init__(
        self,
        root,
        *,
        context: AppContext | None = None,
        config: AppConfig | None = None,
    ):
        self.root = root
        self.root.title("HC-06 Bluetooth Controller")
        self.root.geometry("460x640")

        self.config = config or load_app_config()
        self.context = context or build_context(self.config)
        self.controller = RemoteController(
            self.context,
            notify=self._schedule_notification,
            speed_step=self.config.speed_step,
        )
        self.sessions = self.context.sessions

        self.status_var = tk.StringVar(value=STATUS_TEXT[ConnectionState.DISCONNECTED])
        self.speed_var = tk.StringVar(value=f"Speed: {self.controller.current_speed}%")
        self.text_var = tk.StringVar()

        self.device_view = DeviceListView(
            self.root,
            status_var=self.status_var,
            on_scan=self.scan_devices,
            on_connect=self.connect_index,
            on_disconnect=self.disconnect,
        )
        self.drive_view = DriveView(
            self.root,
            speed_var=self.speed_var,
            on_press=self.press,
            on_release=self.release,
            on_stop=self.controller.stop,
            on_speed=self.set_speed,
            on_speed_step=self.step_speed,
            on_action=self.action,
        )
        self.command_view = CommandView(
            self.root,
            text_var=self.text_var,
            on_send=self.send_text,
            on_quick=self.controller.send_quick,
        )
        self.received_view = ReceivedView(self.root)

        self.sessions.add_state_listener(self._on_state_change)
        self.sessions.add_line_listener(self._on_line)
        self.root.protocol("WM_DELETE_WINDOW", self.on_close)
        self._apply_topmost()

        if not self.controller.request_permissions():
            self.status_var.set("Status: Bluetooth serial access denied")
        self.device_view.set_devices([])

    def scan_devices(self) -> None:
        devices = self.controller.list_paired()
        self.device_view.set_devices(
            [f"{device.label}  ({device.address})" for device in devices]
        )

    def connect_index(self, index: int) -> None:
        devices = self.controller.devices
        if index >= len(devices):
            return
        device = devices[index]

        def worker() -> None:
            self.controller.connect(device)

        threading.Thread(target=worker, name="SessionConnect", daemon=True).start()

    def disconnect(self) -> None:
        self.controller.disconnect()

    def press(self, direction: Direction) -> None:
        self.controller.press(direction)

    def release(self) -> None:
        self.controller.release()

    def action(self, kind: Action) -> None:
        self.controller.action(kind)

    def set_speed(self, level: int) -> None:
        self.controller.change_speed(level)
        self._refresh_speed()

    def step_speed(self, steps: int) -> None:
        self.controller.step_speed(steps)
        self._refresh_speed()

    def send_text(self) -> None:
        if self.controller.send_text(self.text_var.get()):
            self.text_var.set("")

    def on_close(self) -> None:
        """Close the session before the window goes away."""
        self.sessions.remove_state_listener(self._on_state_change)
        self.sessions.remove_line_listener(self._on_line)
        self.controller.shutdown()
        save_app_config(self.config)
        self.root.destroy()

    def _apply_topmost(self) -> None:
        try:
            self.root.attributes("-topmost", self.config.always_on_top)
        except tk.TclError:
            logging.debug("Window manager rejected -topmost", exc_info=True)

    def _refresh_speed(self) -> None:
        self.speed_var.set(f"Speed: {self.controller.current_speed}%")

    def _on_state_change(self, state: ConnectionState) -> None:
        self.root.after(0, lambda s=state: self._apply_state(s))

    def _apply_state(self, state: ConnectionState) -> None:
        device = self.controller.connected_device
        label = device.label if device is not None else ""
        self.status_var.set(STATUS_TEXT[state].format(device=label))
        if state is ConnectionState.CONNECTED:
            self.received_view.clear()
        self._refresh_speed()

    def _on_line(self, line: str) -> None:
        self.root.after(0, lambda text=line: self.received_view.append(text))

    def _schedule_notification(self, note: Notification) -> None:
        self.root.after(0, lambda: messagebox.showerror(note.title, note.message))


def create_application(
    *,
    root: tk.Tk | None = None,
    config: AppConfig | None = None,
    context: AppContext | None = None,
) -> RemoteApp:
    """Construct the HC Remote window without entering the Tk main loop."""

    root = root or tk.Tk()
    cfg = config or load_app_config()
    return RemoteApp(root, context=context, config=cfg)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="HC-06 Bluetooth remote controller")
    parser.add_argument(
        "--demo",
        action="store_true",
        help="use an in-memory loopback device instead of real serial ports",
    )
    parser.add_argument(
        "--all-ports",
        action="store_true",
        help="list every serial port, not only Bluetooth ones",
    )
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="logging level name (ignored when --debug is given)",
    )
    parser.add_argument("--log-file", help="also write log records to this file")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    """Launch the HC Remote GUI application."""

    args = parse_args(argv)
    configure_logging(
        level=logging.DEBUG if args.debug else args.log_level,
        log_file=args.log_file,
    )
    cfg = load_app_config()
    if args.all_ports:
        cfg.include_all_ports = True
    context = build_context(cfg, transport=LoopbackTransport() if args.demo else None)
    app = create_application(config=cfg, context=context)
    app.root.mainloop()


if __name__ == "__main__":
    main()
