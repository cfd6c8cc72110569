"""
Composable value generators for fuzz tests.

A Fuzzer wraps a zero-argument function producing a value of some type.
Primitive fuzzers draw from a single uniform source in [0, 1); every
other fuzzer is built from primitives with `map`, `map_n` and
`and_then`, which never draw from the source themselves.
"""

import math
import random
from dataclasses import dataclass
from typing import Any, Callable, Generic, List, TypeVar

from .errors import InvalidRangeError, NotAFuzzerError

T = TypeVar("T")
R = TypeVar("R")

# Largest integers a double holds exactly
MAX_SAFE_INTEGER = 2 ** 53 - 1
MIN_SAFE_INTEGER = -MAX_SAFE_INTEGER

# Raw samples carry 53 bits of randomness
_SAMPLE_BITS = 53
_SAMPLE_SCALE = 2 ** _SAMPLE_BITS

# p ** 30 pushes nearly all of the mass towards zero
WEIGHT_EXPONENT = 30

# Upper bound (exclusive) for generated string and array lengths
MAX_LENGTH = 100

# Printable ASCII, inclusive
PRINTABLE_MIN = 32
PRINTABLE_MAX = 126

# Raw source. Only primitives read from it, once per generation.
_rng = random.Random()


@dataclass(frozen=True, eq=False, repr=False)
class Fuzzer(Generic[T]):
    """A description of how to generate values of type T.

    Fuzzers are immutable. Combinators return new fuzzers that hold
    references to the ones they were built from.

    Example:
        point = Fuzzer.map2(lambda x, y: (x, y), Fuzzer.int, Fuzzer.int)
        sized = Fuzzer.int_range(0, 10).and_then(
            lambda n: Fuzzer.map_n(lambda *xs: list(xs), *[Fuzzer.float] * n)
        )
    """

    _thunk: Callable[[], T]

    # CONSTRUCTORS

    @staticmethod
    def int_range(min_value: int, max_value: int) -> "Fuzzer[int]":
        """Generate an integer between two values, inclusive.

        Raises:
            InvalidRangeError: If min_value is greater than max_value.
        """
        if min_value > max_value:
            raise InvalidRangeError(min_value, max_value)

        span = max_value + 1 - min_value

        def draw(p: float) -> int:
            if span > MAX_SAFE_INTEGER:
                # Scale in integers: floats lose precision and overflow here
                return min_value + (int(p * _SAMPLE_SCALE) * span >> _SAMPLE_BITS)
            return math.floor(p * span) + min_value

        return _primitive(draw)

    @staticmethod
    def constant(value: T) -> "Fuzzer[T]":
        """"Generate" a constant value.

        The same object is returned every time, not a copy. Useful for
        hardcoded parts of larger fuzzers.
        """
        return Fuzzer(lambda: value)

    @staticmethod
    def array(fuzzer: "Fuzzer[T]") -> "Fuzzer[List[T]]":
        """Generate a list of values from another fuzzer.

        Lengths range over [0, MAX_LENGTH) with short lists, including
        empty ones, far more common than long ones. Every element is a
        separate draw from `fuzzer`.
        """
        _require_fuzzer(fuzzer, "Fuzzer.array")

        def draw(p: float) -> List[T]:
            length = math.floor(MAX_LENGTH * p ** WEIGHT_EXPONENT)
            return [_generate(fuzzer) for _ in range(length)]

        return _primitive(draw)

    # COMBINATORS

    @staticmethod
    def map_n(func: Callable[..., R], *fuzzers: "Fuzzer[Any]") -> "Fuzzer[R]":
        """Transform the results of any number of fuzzers.

        Fuzzers are generated left to right, then `func` is called with
        their values in the same order.
        """
        if not fuzzers:
            raise TypeError("Fuzzer.map_n needs at least one fuzzer")
        for fuzzer in fuzzers:
            _require_fuzzer(fuzzer, "Fuzzer.map_n")

        return Fuzzer(lambda: func(*[_generate(fuzzer) for fuzzer in fuzzers]))

    @staticmethod
    def map2(func: Callable[..., R], fuzzer_a: "Fuzzer[Any]", fuzzer_b: "Fuzzer[Any]") -> "Fuzzer[R]":
        """Transform the results of two fuzzers."""
        return Fuzzer.map_n(func, fuzzer_a, fuzzer_b)

    @staticmethod
    def map3(
        func: Callable[..., R],
        fuzzer_a: "Fuzzer[Any]",
        fuzzer_b: "Fuzzer[Any]",
        fuzzer_c: "Fuzzer[Any]",
    ) -> "Fuzzer[R]":
        """Transform the results of three fuzzers."""
        return Fuzzer.map_n(func, fuzzer_a, fuzzer_b, fuzzer_c)

    @staticmethod
    def map4(
        func: Callable[..., R],
        fuzzer_a: "Fuzzer[Any]",
        fuzzer_b: "Fuzzer[Any]",
        fuzzer_c: "Fuzzer[Any]",
        fuzzer_d: "Fuzzer[Any]",
    ) -> "Fuzzer[R]":
        """Transform the results of four fuzzers."""
        return Fuzzer.map_n(func, fuzzer_a, fuzzer_b, fuzzer_c, fuzzer_d)

    @staticmethod
    def map5(
        func: Callable[..., R],
        fuzzer_a: "Fuzzer[Any]",
        fuzzer_b: "Fuzzer[Any]",
        fuzzer_c: "Fuzzer[Any]",
        fuzzer_d: "Fuzzer[Any]",
        fuzzer_e: "Fuzzer[Any]",
    ) -> "Fuzzer[R]":
        """Transform the results of five fuzzers."""
        return Fuzzer.map_n(func, fuzzer_a, fuzzer_b, fuzzer_c, fuzzer_d, fuzzer_e)

    @staticmethod
    def map6(
        func: Callable[..., R],
        fuzzer_a: "Fuzzer[Any]",
        fuzzer_b: "Fuzzer[Any]",
        fuzzer_c: "Fuzzer[Any]",
        fuzzer_d: "Fuzzer[Any]",
        fuzzer_e: "Fuzzer[Any]",
        fuzzer_f: "Fuzzer[Any]",
    ) -> "Fuzzer[R]":
        """Transform the results of six fuzzers."""
        return Fuzzer.map_n(func, fuzzer_a, fuzzer_b, fuzzer_c, fuzzer_d, fuzzer_e, fuzzer_f)

    @staticmethod
    def map7(
        func: Callable[..., R],
        fuzzer_a: "Fuzzer[Any]",
        fuzzer_b: "Fuzzer[Any]",
        fuzzer_c: "Fuzzer[Any]",
        fuzzer_d: "Fuzzer[Any]",
        fuzzer_e: "Fuzzer[Any]",
        fuzzer_f: "Fuzzer[Any]",
        fuzzer_g: "Fuzzer[Any]",
    ) -> "Fuzzer[R]":
        """Transform the results of seven fuzzers."""
        return Fuzzer.map_n(
            func, fuzzer_a, fuzzer_b, fuzzer_c, fuzzer_d, fuzzer_e, fuzzer_f, fuzzer_g
        )

    @staticmethod
    def map8(
        func: Callable[..., R],
        fuzzer_a: "Fuzzer[Any]",
        fuzzer_b: "Fuzzer[Any]",
        fuzzer_c: "Fuzzer[Any]",
        fuzzer_d: "Fuzzer[Any]",
        fuzzer_e: "Fuzzer[Any]",
        fuzzer_f: "Fuzzer[Any]",
        fuzzer_g: "Fuzzer[Any]",
        fuzzer_h: "Fuzzer[Any]",
    ) -> "Fuzzer[R]":
        """Transform the results of eight fuzzers."""
        return Fuzzer.map_n(
            func, fuzzer_a, fuzzer_b, fuzzer_c, fuzzer_d, fuzzer_e, fuzzer_f, fuzzer_g, fuzzer_h
        )

    def map(self, func: Callable[[T], R]) -> "Fuzzer[R]":
        """Transform the result of this fuzzer.

        Also usable unbound as ``Fuzzer.map(fuzzer, func)``.
        """
        return Fuzzer.map_n(func, self)

    def and_then(self, callback: Callable[[T], "Fuzzer[R]"]) -> "Fuzzer[R]":
        """Create a new fuzzer based on the results of this fuzzer.

        On every generation, this fuzzer's value is passed to `callback`
        and the fuzzer it returns is generated from. This lets the shape
        of the second value depend on the first, e.g. a length followed
        by a list of exactly that length.

        Also usable unbound as ``Fuzzer.and_then(fuzzer, callback)``.
        """
        _require_fuzzer(self, "Fuzzer.and_then")

        def thunk() -> R:
            chosen = callback(_generate(self))
            _require_fuzzer(chosen, "Fuzzer.and_then callback")
            return _generate(chosen)

        return Fuzzer(thunk)


def _generate(fuzzer: Fuzzer[T]) -> T:
    """Generate one value. Internal to the package."""
    return fuzzer._thunk()


def _primitive(draw: Callable[[float], T]) -> Fuzzer[T]:
    """Build a fuzzer that takes one fresh sample from the raw source per value."""
    return Fuzzer(lambda: draw(_rng.random()))


def _require_fuzzer(value: Any, where: str) -> None:
    if not isinstance(value, Fuzzer):
        raise NotAFuzzerError(value, where)


def _weighted_int(p: float) -> int:
    weighted = p ** WEIGHT_EXPONENT
    if p < 0.5:
        return math.ceil(weighted * MIN_SAFE_INTEGER)
    return math.floor(weighted * MAX_SAFE_INTEGER)


def _string(p: float) -> str:
    length = math.floor(MAX_LENGTH * p)
    return "".join(chr(_generate(_PRINTABLE)) for _ in range(length))


# Primitive fuzzers need the class to exist before they can be built.

# Integers in [MIN_SAFE_INTEGER, MAX_SAFE_INTEGER]. Values near zero are
# far more likely than values near either bound.
Fuzzer.int = _primitive(_weighted_int)

# Floats, never NaN or infinite: an integer from Fuzzer.int plus a
# separately drawn fraction in [0, 1).
Fuzzer.float = _primitive(lambda p: _generate(Fuzzer.int) + p)

_PRINTABLE = Fuzzer.int_range(PRINTABLE_MIN, PRINTABLE_MAX)

# Printable ASCII strings with length in [0, MAX_LENGTH).
Fuzzer.string = _primitive(_string)
