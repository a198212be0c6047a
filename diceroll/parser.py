import re
import typing

from .log import get_logger
from .roll import Keep, Roll

logger = get_logger(__name__)

# Explanation of groups in the below regex:
#
# num: the number of dice to roll, defaults to 1. e.g. <4>d6
# die: the size of dice to roll. matched as optional so that a missing size
#   can be reported instead of a generic failure. e.g. 4d<6>
# reroll: faces at or below this value are rolled again, once. e.g. d6r<2>
# direction, keep: keep the highest or lowest n dice. e.g. 2d20<h><1>
# modifier: signed constant added to the kept total. e.g. d20<+5>
REGEX = re.compile(
    r"(?P<num>[0-9]*)d(?P<die>[0-9]*)"
    r"(?:r(?P<reroll>[0-9]+))?"
    r"(?:(?P<direction>[hl])(?P<keep>[0-9]+))?"
    r"(?P<modifier>[+-][0-9]+)?"
)

# Largest values for the unsigned (dice count, size, reroll, keep) and signed
# (modifier) components of a roll.
MAX_UNSIGNED = 2 ** 32 - 1
MAX_SIGNED = 2 ** 31 - 1


class ParseError(ValueError):
    pass


class MissingDieError(ParseError):
    def __init__(self, token: str):
        super().__init__(f"No die specified in {token!r}.")
        self.token = token


class InvalidNumberError(ParseError):
    def __init__(self, component: str, text: str, reason: str = ""):
        message = f"Failed to parse {component}: {text!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message + ".")
        self.component = component
        self.text = text


class MalformedTokenError(ParseError):
    def __init__(self, token: str):
        super().__init__(f"Could not parse {token!r}.")
        self.token = token


class UnknownKeepDirectionError(ParseError):
    def __init__(self, direction: str):
        super().__init__(f"Unknown keep direction: {direction!r}.")
        self.direction = direction


def parse_unsigned(component: str, text: str) -> int:
    """Parse a run of digits, rejecting anything above MAX_UNSIGNED."""

    try:
        value = int(text)
    except ValueError:
        raise InvalidNumberError(component, text) from None

    if value < 0 or value > MAX_UNSIGNED:
        raise InvalidNumberError(component, text, "out of range")
    return value


def parse_signed(component: str, text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise InvalidNumberError(component, text) from None

    if not -MAX_SIGNED - 1 <= value <= MAX_SIGNED:
        raise InvalidNumberError(component, text, "out of range")
    return value


def parse_keep(direction: str, text: str) -> Keep:
    n = parse_unsigned("number of dice to keep", text)

    if direction == Keep.HIGH:
        return Keep.high(n)
    elif direction == Keep.LOW:
        return Keep.low(n)
    else:
        raise UnknownKeepDirectionError(direction)


def parse(token: str) -> Roll:
    """Parse a single dice notation token such as 4d6r1h3+2 into a Roll."""

    match = REGEX.fullmatch(token.lower())
    if match is None:
        raise MalformedTokenError(token)

    empty_group = lambda g: g in [None, ""]

    if empty_group(match.group("die")):
        raise MissingDieError(token)

    num = match.group("num")
    die = parse_unsigned("die size", match.group("die"))
    if die == 0:
        raise InvalidNumberError("die size", match.group("die"), "zero sides")

    kwargs: typing.Dict[str, typing.Any] = {
        "num": 1 if empty_group(num) else parse_unsigned("number of dice", num)
    }

    if not empty_group(match.group("reroll")):
        kwargs["reroll"] = parse_unsigned("reroll", match.group("reroll"))
    if not empty_group(match.group("direction")):
        kwargs["keep"] = parse_keep(
            match.group("direction"), match.group("keep")
        )
    if not empty_group(match.group("modifier")):
        kwargs["modifier"] = parse_signed(
            "modifier", match.group("modifier")
        )

    if kwargs["num"] > Roll.MAX_QTY:
        raise InvalidNumberError(
            "number of dice", num, f"at most {Roll.MAX_QTY} dice"
        )

    roll = Roll(die=die, **kwargs)
    logger.debug("Parsed %r as %r", token, roll)
    return roll
