import functools
import os
import typing

from .log import get_logger
from .parser import parse
from .roll import Keep, Roll

logger = get_logger(__name__)

# Definitions shipped alongside the package, one macro per line.
MACROS_FILE = os.path.join(os.path.dirname(__file__), "macros.txt")

COMMENT = "#"


class MacroDefinitionError(ValueError):
    def __init__(self, message: str, line_no: int, source: str = "<macros>"):
        super().__init__(f"{source}, line {line_no}: {message}")
        self.line_no = line_no
        self.source = source


def builtin_macros() -> typing.Dict[str, typing.Tuple[Roll, ...]]:
    return {
        "adv": (Roll(20, 2, keep=Keep.high(1)),),
        "dis": (Roll(20, 2, keep=Keep.low(1)),),
        "stats": tuple(Roll(6, 4, keep=Keep.high(3)) for _ in range(6)),
    }


class MacroTable:
    """Named shortcuts which expand into one or more rolls."""

    def __init__(
        self,
        macros: typing.Optional[typing.Dict[str, typing.Iterable[Roll]]] = None,
    ):
        self._macros: typing.Dict[str, typing.Tuple[Roll, ...]] = {}
        self.frozen = False
        for name, rolls in (macros or {}).items():
            self._macros[name] = tuple(rolls)

    def __contains__(self, name: object) -> bool:
        return name in self._macros

    def __getitem__(self, name: str) -> typing.Tuple[Roll, ...]:
        return self._macros[name]

    def __len__(self) -> int:
        return len(self._macros)

    def names(self) -> typing.List[str]:
        return sorted(self._macros)

    def copy(self) -> "MacroTable":
        return MacroTable(self._macros)

    def expand(self, token: str) -> typing.List[Roll]:
        """Expand a single token, which is either a macro name or a roll."""

        if token in self._macros:
            logger.debug("Expanding macro %r", token)
            return [roll.clone() for roll in self._macros[token]]
        return [parse(token)]

    def resolve(self, tokens: typing.Iterable[str]) -> typing.List[Roll]:
        """Expand every token, raising on the first one which is invalid."""

        return [roll for token in tokens for roll in self.expand(token)]

    def load(
        self, lines: typing.Iterable[str], source: str = "<macros>"
    ) -> None:
        """Add definitions of the form <name> <token> <token> ...

        Either every line is added or, if any line is invalid, none are.
        """

        if self.frozen:
            raise TypeError("Can't load macros into a read-only table.")

        # Later lines may use earlier ones, so resolve against a staging copy.
        staged = self.copy()
        for line_no, line in enumerate(lines, start=1):
            line = line.strip()
            if not line or line.startswith(COMMENT):
                continue

            name, *tokens = line.split()
            if not tokens:
                raise MacroDefinitionError(
                    f"Macro {name!r} has no rolls.", line_no, source
                )

            try:
                rolls = staged.resolve(tokens)
            except ValueError as e:
                raise MacroDefinitionError(str(e), line_no, source) from e

            if name in staged:
                logger.warning("%s redefines macro %r", source, name)
            staged._macros[name] = tuple(rolls)

        self._macros = staged._macros

    def load_file(self, path: str) -> None:
        logger.debug("Loading macros from %s", path)
        with open(path, encoding="utf-8") as f:
            self.load(f, source=path)


@functools.lru_cache(maxsize=None)
def default_table() -> MacroTable:
    """The built in macros plus those shipped in macros.txt.

    The table is shared, so it is frozen; copy() it to add definitions.
    """

    table = MacroTable(builtin_macros())
    table.load_file(MACROS_FILE)
    table.frozen = True
    return table
