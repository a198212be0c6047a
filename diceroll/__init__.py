from .macros import MacroDefinitionError, MacroTable, default_table
from .parser import (
    InvalidNumberError,
    MalformedTokenError,
    MissingDieError,
    ParseError,
    UnknownKeepDirectionError,
    parse,
)
from .roll import (
    DieRoll,
    Keep,
    Kept,
    Outcome,
    Rerolled,
    Roll,
    calculate_total,
    expected_roll,
    rolls_string,
)

__all__ = [
    "DieRoll",
    "InvalidNumberError",
    "Keep",
    "Kept",
    "MacroDefinitionError",
    "MacroTable",
    "MalformedTokenError",
    "MissingDieError",
    "Outcome",
    "ParseError",
    "Rerolled",
    "Roll",
    "UnknownKeepDirectionError",
    "calculate_total",
    "default_table",
    "expected_roll",
    "parse",
    "rolls_string",
]
