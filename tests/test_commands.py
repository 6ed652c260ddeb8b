import unittest

from hcremote import commands
from hcremote.commands import Action, Direction
from hcremote.models import Command


class CommandEncoderTests(unittest.TestCase):
    def test_direction_tokens_are_bit_exact(self) -> None:
        for direction in ("FORWARD", "BACKWARD", "LEFT", "RIGHT", "STOP"):
            self.assertEqual(commands.encode_direction(direction), Command(direction))

    def test_direction_accepts_enum_and_lowercase(self) -> None:
        self.assertEqual(
            commands.encode_direction(Direction.LEFT), commands.encode_direction("left")
        )

    def test_unknown_direction_raises(self) -> None:
        with self.assertRaises(ValueError):
            commands.encode_direction("UP")

    def test_speed_is_clamped(self) -> None:
        self.assertEqual(commands.encode_speed(-5), commands.encode_speed(0))
        self.assertEqual(commands.encode_speed(150), commands.encode_speed(100))
        self.assertEqual(commands.encode_speed(150).payload, "SPEED:100")
        self.assertEqual(commands.encode_speed(42).payload, "SPEED:42")

    def test_non_finite_speed_raises(self) -> None:
        for level in (float("nan"), float("inf"), float("-inf")):
            with self.assertRaises(ValueError):
                commands.encode_speed(level)

    def test_actions(self) -> None:
        self.assertEqual(commands.encode_action(Action.HORN).payload, "HORN")
        self.assertEqual(commands.encode_action("light").payload, "LIGHT")
        self.assertEqual(commands.encode_action("TURBO").payload, "TURBO")

    def test_free_text_is_trimmed(self) -> None:
        self.assertEqual(commands.encode_free_text("  hello car \n"), Command("hello car"))

    def test_blank_free_text_yields_nothing(self) -> None:
        self.assertIsNone(commands.encode_free_text(""))
        self.assertIsNone(commands.encode_free_text("   \t"))
        self.assertIsNone(commands.encode_free_text(None))

    def test_press_and_release_are_independent_commands(self) -> None:
        self.assertEqual(commands.press("FORWARD").payload, "FORWARD")
        self.assertEqual(commands.release(), commands.encode_direction(Direction.STOP))
        # release without a prior press is still a normal STOP
        self.assertEqual(commands.release(), commands.release())

    def test_quick_commands(self) -> None:
        self.assertEqual(commands.encode_quick("bip").payload, "bip bip")
        with self.assertRaises(ValueError):
            commands.encode_quick("dance")

    def test_wire_appends_delimiter_once(self) -> None:
        self.assertEqual(Command("STOP").wire(), "STOP\n")
        self.assertEqual(Command("STOP\n").wire(), "STOP\n")
        self.assertEqual(Command("STOP").wire("\r\n"), "STOP\r\n")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
