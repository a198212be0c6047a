import argparse
import random
import sys
import typing

from rich.console import Console

from .log import get_logger, setup_logging
from .macros import MacroDefinitionError, MacroTable, default_table
from .roll import RandomSource, rolls_string

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="roll",
        description="Roll dice written in notation like 2d20h1+3 or 4d6r1l3.",
    )
    p.add_argument(
        "tokens",
        nargs="*",
        metavar="TOKEN",
        help="dice notation or the name of a macro, e.g. adv or stats",
    )
    p.add_argument(
        "-m", "--macros", metavar="FILE", help="load extra macro definitions"
    )
    p.add_argument(
        "--list-macros",
        action="store_true",
        help="print the known macros and exit",
    )
    p.add_argument(
        "-v", "--verbose", action="store_true", help="log debug output"
    )
    return p


def load_macros(path: typing.Optional[str]) -> MacroTable:
    table = default_table()
    if path:
        # The default table is shared, so extend a copy of it.
        table = table.copy()
        table.load_file(path)
    return table


def echo(console: Console, text: str) -> None:
    # Dice text is printed verbatim on one line, never as rich markup.
    console.print(
        text, markup=False, highlight=False, emoji=False, soft_wrap=True
    )


def list_macros(table: MacroTable, console: Console) -> None:
    for name in table.names():
        rolls = " ".join(str(roll) for roll in table[name])
        echo(console, f"{name}  {rolls}")


def main(
    argv: typing.Optional[typing.List[str]] = None,
    console: typing.Optional[Console] = None,
    rng: typing.Optional[RandomSource] = None,
) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    console = console or Console()

    p = build_parser()
    args = p.parse_args(argv)
    setup_logging(args.verbose)

    try:
        table = load_macros(args.macros)
    except (MacroDefinitionError, OSError) as e:
        logger.debug("Failed to load macros", exc_info=True)
        echo(console, f"Error: {e}")
        return 2

    if args.list_macros:
        list_macros(table, console)
        return 0

    if not args.tokens:
        p.print_usage(sys.stderr)
        return 2

    try:
        rolls = table.resolve(args.tokens)
    except ValueError as e:
        logger.debug("Failed to resolve %s", args.tokens, exc_info=True)
        echo(console, f"Error: {e}")
        return 1

    if rng is None:
        rng = random.Random()
    outcomes = [roll.roll(rng) for roll in rolls]
    echo(console, rolls_string(rolls, outcomes))
    return 0
