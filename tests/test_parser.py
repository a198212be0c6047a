import unittest

from diceroll.parser import *
from diceroll.roll import Keep, Roll


class TestParser(unittest.TestCase):
    def test_parse_die(self) -> None:
        roll = parse("d20")
        self.assertEqual(roll, Roll(20))
        self.assertEqual(roll.num, 1)
        self.assertIsNone(roll.reroll)
        self.assertIsNone(roll.keep)
        self.assertIsNone(roll.modifier)

    def test_parse_modifier(self) -> None:
        self.assertEqual(parse("3d6+2"), Roll(6, 3, modifier=2))
        self.assertEqual(parse("3d6-2"), Roll(6, 3, modifier=-2))

    def test_parse_keep(self) -> None:
        self.assertEqual(parse("2d20h1"), Roll(20, 2, keep=Keep.high(1)))
        self.assertEqual(parse("4d6l3"), Roll(6, 4, keep=Keep.low(3)))

    def test_parse_reroll(self) -> None:
        self.assertEqual(parse("d6r2").reroll, 2)

    def test_parse_everything(self) -> None:
        self.assertEqual(
            parse("4d6r1h3+2"),
            Roll(6, 4, reroll=1, keep=Keep.high(3), modifier=2),
        )

    def test_parse_uppercase(self) -> None:
        self.assertEqual(parse("2D20H1"), Roll(20, 2, keep=Keep.high(1)))

    def test_missing_die(self) -> None:
        self.assertRaises(MissingDieError, parse, "d")
        self.assertRaises(MissingDieError, parse, "3d")
        self.assertRaises(MissingDieError, parse, "dh1")

    def test_malformed(self) -> None:
        # Tokens have to match in full, garbage either side is rejected.
        self.assertRaises(MalformedTokenError, parse, "xd6")
        self.assertRaises(MalformedTokenError, parse, "2d20h1junk")
        self.assertRaises(MalformedTokenError, parse, "roll2d20")
        self.assertRaises(MalformedTokenError, parse, "d6r")
        self.assertRaises(MalformedTokenError, parse, "d6k3")
        self.assertRaises(MalformedTokenError, parse, "")

    def test_invalid_number(self) -> None:
        with self.assertRaises(InvalidNumberError) as cm:
            parse("d0")
        self.assertEqual(cm.exception.component, "die size")

        with self.assertRaises(InvalidNumberError) as cm:
            parse(f"d{MAX_UNSIGNED + 1}")
        self.assertEqual(cm.exception.component, "die size")

        with self.assertRaises(InvalidNumberError) as cm:
            parse(f"d6+{MAX_SIGNED + 1}")
        self.assertEqual(cm.exception.component, "modifier")

        with self.assertRaises(InvalidNumberError) as cm:
            parse(f"d6r{MAX_UNSIGNED + 1}")
        self.assertEqual(cm.exception.component, "reroll")

        with self.assertRaises(InvalidNumberError) as cm:
            parse(f"2d6h{MAX_UNSIGNED + 1}")
        self.assertEqual(cm.exception.component, "number of dice to keep")

    def test_signed_limits(self) -> None:
        self.assertEqual(parse(f"d6-{MAX_SIGNED + 1}").modifier, -MAX_SIGNED - 1)
        self.assertEqual(parse(f"d6+{MAX_SIGNED}").modifier, MAX_SIGNED)

    def test_max_roll_qty(self) -> None:
        self.assertEqual(parse(f"{Roll.MAX_QTY}d20").num, Roll.MAX_QTY)
        with self.assertRaises(InvalidNumberError) as cm:
            parse(f"{Roll.MAX_QTY + 1}d20")
        self.assertEqual(cm.exception.component, "number of dice")

    def test_zero_dice(self) -> None:
        self.assertEqual(parse("0d6").num, 0)

    def test_errors_are_value_errors(self) -> None:
        for token in ["d", "xd6", "d0"]:
            self.assertRaises(ValueError, parse, token)
            self.assertRaises(ParseError, parse, token)

    def test_unknown_keep_direction(self) -> None:
        self.assertRaises(UnknownKeepDirectionError, parse_keep, "k", "3")
        self.assertEqual(parse_keep("h", "3"), Keep.high(3))

    def test_round_trip(self) -> None:
        for token in ["d20", "3d6+2", "2d20h1", "4d6l3", "d6r2", "0d4", "d8-1"]:
            self.assertEqual(str(parse(token)), token)
            self.assertEqual(parse(str(parse(token))), parse(token))

    def test_round_trip_normalises(self) -> None:
        # An explicit count of one is the default and is dropped.
        self.assertEqual(str(parse("1d6")), "d6")
        self.assertEqual(parse("1d6"), parse("d6"))
        self.assertEqual(str(parse("d6-0")), "d6+0")


if __name__ == "__main__":
    unittest.main()
