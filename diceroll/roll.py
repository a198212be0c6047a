import heapq
import random
import typing

# Generic numeric base type
Number = typing.Union[int, float]


class RandomSource(typing.Protocol):
    """Anything that can produce uniform integers like random.Random."""

    def randint(self, a: int, b: int) -> int:
        ...


class Keep:
    """Which dice of a pool count towards its total."""

    HIGH = "h"
    LOW = "l"

    def __init__(self, direction: str, n: int):
        assert direction in (Keep.HIGH, Keep.LOW)
        assert n >= 0

        self.direction = direction
        self.n = n

    def __eq__(self, o: object) -> bool:
        return (
            isinstance(o, Keep)
            and o.direction == self.direction
            and o.n == self.n
        )

    def __hash__(self) -> int:
        return hash((self.direction, self.n))

    def __repr__(self) -> str:
        name = "High" if self.direction == Keep.HIGH else "Low"
        return f"{name}({self.n})"

    def __str__(self) -> str:
        return f"{self.direction}{self.n}"

    def select(self, rolls: typing.List["DieRoll"]) -> typing.List["DieRoll"]:
        # nlargest and nsmallest return the whole pool when n exceeds it.
        if self.direction == Keep.HIGH:
            return heapq.nlargest(self.n, rolls, key=DieRoll.effective)
        return heapq.nsmallest(self.n, rolls, key=DieRoll.effective)

    @staticmethod
    def high(n: int) -> "Keep":
        return Keep(Keep.HIGH, n)

    @staticmethod
    def low(n: int) -> "Keep":
        return Keep(Keep.LOW, n)


class DieRoll:
    def __eq__(self, o: object) -> bool:
        return type(o) == type(self) and vars(o) == vars(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}<{str(self)}>"

    @property
    def value(self) -> int:
        raise NotImplementedError()

    @staticmethod
    def effective(die_roll: "DieRoll") -> int:
        return die_roll.value


class Kept(DieRoll):
    def __init__(self, value: int):
        self._value = value

    def __str__(self) -> str:
        return str(self._value)

    @property
    def value(self) -> int:
        return self._value


class Rerolled(DieRoll):
    def __init__(self, original: int, final: int):
        self.original = original
        self.final = final

    def __str__(self) -> str:
        return f"{self.original}=>{self.final}"

    @property
    def value(self) -> int:
        return self.final


class Outcome:
    """The dice actually rolled for a Roll, sorted by their value."""

    def __init__(
        self,
        rolls: typing.List[DieRoll],
        keep: typing.Optional[Keep] = None,
        modifier: int = 0,
    ):
        self.rolls = sorted(rolls, key=DieRoll.effective)
        self.keep = keep
        self.modifier = modifier

    def __repr__(self) -> str:
        return f"{type(self).__name__}<{str(self)}>"

    def __str__(self) -> str:
        string = f"{self.total} ({', '.join(map(str, self.rolls))})"
        if self.modifier > 0:
            string += f" + {self.modifier}"
        elif self.modifier < 0:
            string += f" - {-self.modifier}"
        return string

    @property
    def kept(self) -> typing.List[DieRoll]:
        if self.keep is None:
            return self.rolls
        return self.keep.select(self.rolls)

    @property
    def total(self) -> int:
        return sum(roll.value for roll in self.kept) + self.modifier


def expected_roll(die: int, reroll: typing.Optional[int] = None) -> float:
    """Mean of a single die which is rolled again on reroll or lower."""

    # Without a threshold no face is rerolled.
    threshold = 0 if reroll is None else reroll
    average = (die + 1) / 2
    total = sum(
        average if face <= threshold else face for face in range(1, die + 1)
    )
    return total / die


class Roll:
    """A parsed dice expression, e.g. 4d6r1h3+2."""

    # Things can get quite slow for large numbers of rolls, and there's little
    # practical reason to roll more dice anyway.
    MAX_QTY = 1000

    __slots__ = ("_num", "_die", "_reroll", "_keep", "_modifier")

    def __init__(
        self,
        die: int,
        num: int = 1,
        reroll: typing.Optional[int] = None,
        keep: typing.Optional[Keep] = None,
        modifier: typing.Optional[int] = None,
    ):
        if die < 1:
            raise ValueError("I can't roll a zero sided die.")
        if num < 0:
            raise ValueError("Can't roll a negative number of dice.")

        self._num = num
        self._die = die
        self._reroll = reroll
        self._keep = keep
        self._modifier = modifier

    num = property(lambda self: self._num)
    die = property(lambda self: self._die)
    reroll = property(lambda self: self._reroll)
    keep = property(lambda self: self._keep)
    modifier = property(lambda self: self._modifier)

    def _key(self) -> tuple:
        return (self.num, self.die, self.reroll, self.keep, self.modifier)

    def __eq__(self, o: object) -> bool:
        return isinstance(o, Roll) and o._key() == self._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return f"{type(self).__name__}<{str(self)}>"

    def __str__(self) -> str:
        string = f"{self.num if self.num != 1 else ''}d{self.die}"
        if self.reroll is not None:
            string += f"r{self.reroll}"
        if self.keep is not None:
            string += str(self.keep)
        if self.modifier is not None:
            string += f"{self.modifier:+d}"
        return string

    def clone(self) -> "Roll":
        return Roll(self.die, self.num, self.reroll, self.keep, self.modifier)

    def roll_die(self, rng: RandomSource) -> DieRoll:
        original = rng.randint(1, self.die)
        if self.reroll is not None and original <= self.reroll:
            return Rerolled(original, rng.randint(1, self.die))
        return Kept(original)

    def roll(self, rng: typing.Optional[RandomSource] = None) -> Outcome:
        """Roll the dice, rerolling each die at most once."""

        if rng is None:
            rng = random.Random()

        return Outcome(
            [self.roll_die(rng) for _ in range(self.num)],
            self.keep,
            self.modifier or 0,
        )

    def expected_total(self) -> float:
        # The keep count is treated as that many independent dice, which
        # ignores the bias of keeping the highest or lowest.
        if self.keep is None:
            dice = self.num
        else:
            dice = min(self.keep.n, self.num)

        return expected_roll(self.die, self.reroll) * dice + (
            self.modifier or 0
        )


def clean_number(num: Number) -> Number:
    if num // 1 == num:
        return int(num)
    return round(num, 2)


def roll_line(roll: Roll, outcome: Outcome) -> str:
    expected = clean_number(roll.expected_total())
    return f"{roll}: {outcome} (Expected: {expected})"


def calculate_total(outcomes: typing.Iterable[Outcome]) -> int:
    """Calculate the total result of a list of outcomes."""

    return sum(outcome.total for outcome in outcomes)


def rolls_string(
    rolls: typing.List[Roll], outcomes: typing.List[Outcome]
) -> str:
    """Return a descriptive string for rolls and their outcomes."""

    lines = [roll_line(roll, outcome) for roll, outcome in zip(rolls, outcomes)]
    if len(outcomes) > 1:
        lines.append(f"Total: {calculate_total(outcomes)}")
    return "\n".join(lines)
