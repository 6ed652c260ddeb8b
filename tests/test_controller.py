import unittest
from unittest import mock

from hcremote.config import AppConfig
from hcremote.context import build_context
from hcremote.controller import Notification, RemoteController
from hcremote.models import ConnectionState, Device
from hcremote.permissions import PermissionGate
from hcremote.transport import LoopbackTransport

HC06 = Device(address="AA:BB", name="HC-06")


class RemoteControllerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.transport = LoopbackTransport([HC06], echo=False)
        self.notes = []
        context = build_context(
            AppConfig(),
            transport=self.transport,
            permissions=PermissionGate(lambda: True),
        )
        self.controller = RemoteController(context, notify=self.notes.append)

    def written(self) -> list[str]:
        return self.transport.handles[-1].written

    def test_exposes_presentation_state(self) -> None:
        self.assertIs(self.controller.connection_state, ConnectionState.DISCONNECTED)
        self.assertEqual(self.controller.devices, [])
        self.assertEqual(self.controller.current_speed, 50)
        self.assertEqual(self.controller.received_lines, ())
        self.assertEqual(self.controller.list_paired(), [HC06])
        self.assertEqual(self.controller.devices, [HC06])

    def test_press_release_sends_direction_then_stop(self) -> None:
        self.assertTrue(self.controller.connect(HC06))
        self.assertIs(self.controller.connected_device, HC06)
        self.controller.press("FORWARD")
        self.controller.release()
        self.controller.release()
        self.assertEqual(self.written(), ["FORWARD\n", "STOP\n", "STOP\n"])

    def test_speed_steps_are_clamped(self) -> None:
        self.controller.connect(HC06)
        self.controller.step_speed(1)
        self.assertEqual(self.controller.current_speed, 60)
        self.controller.change_speed(500)
        self.controller.step_speed(1)
        self.assertEqual(self.controller.current_speed, 100)
        self.assertEqual(self.written(), ["SPEED:60\n", "SPEED:100\n", "SPEED:100\n"])

    def test_blank_free_text_is_not_sent(self) -> None:
        self.controller.connect(HC06)
        self.assertFalse(self.controller.send_text("   "))
        self.assertTrue(self.controller.send_text("  hello "))
        self.assertEqual(self.written(), ["hello\n"])
        self.assertEqual(self.notes, [])

    def test_actions_and_quick_commands(self) -> None:
        self.controller.connect(HC06)
        self.controller.action("horn")
        self.controller.send_quick("led")
        self.assertEqual(self.written(), ["HORN\n", "led\n"])

    def test_send_while_disconnected_notifies_once(self) -> None:
        self.assertFalse(self.controller.press("LEFT"))
        self.assertEqual(
            self.notes,
            [Notification("Not connected", "Please connect to a device first.")],
        )

    def test_connect_failure_notifies(self) -> None:
        self.assertFalse(self.controller.connect(Device(address="11:22")))
        self.assertEqual(len(self.notes), 1)
        self.assertEqual(self.notes[0].title, "Connection failed")
        self.assertIs(self.controller.connection_state, ConnectionState.DISCONNECTED)

    def test_enumeration_failure_returns_empty_list(self) -> None:
        with mock.patch.object(
            self.transport, "list_bonded", side_effect=OSError("adapter off")
        ):
            self.assertEqual(self.controller.list_paired(), [])
        self.assertEqual(self.notes[0].title, "Can't find paired devices")

    def test_broken_notify_callback_is_contained(self) -> None:
        self.controller.notify = mock.Mock(side_effect=RuntimeError("no window"))
        self.assertFalse(self.controller.stop())

    def test_shutdown_disconnects(self) -> None:
        self.controller.connect(HC06)
        self.controller.shutdown()
        self.assertIs(self.controller.connection_state, ConnectionState.DISCONNECTED)
        self.assertTrue(self.transport.handles[-1].closed)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
