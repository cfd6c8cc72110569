"""
Fuzz test registration.

Turns fuzzers and a check function into test units. The only thing this
module needs from the host test framework is a `register(name, body)`
callable; by default the units become pytest items in the calling test
module (see ModuleRegistrar).

Two families of entry points:
    - fuzz, fuzz2, fuzz3: one test unit running TEST_PASSES repetitions.
    - fuzz_explained, fuzz2_explained, fuzz3_explained: TEST_PASSES test
      units, one per repetition, each named after its generated values.

Check functions signal failure by raising. Their return value is ignored.
"""

import functools
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

import pytest

from .errors import FuzzgenError
from .fuzzer import Fuzzer, _generate, _require_fuzzer

logger = logging.getLogger(__name__)

# Repetitions per fuzz test
TEST_PASSES = 100

Register = Callable[[str, Callable[[], None]], None]

_REGISTRAR_KEY = "__fuzzgen_registrar__"


@dataclass(frozen=True)
class FuzzCase:
    """One registered test unit.

    Attributes:
        name: Display name of the unit
        body: Zero-argument callable that raises on failure
    """
    name: str
    body: Callable[[], None]


class ModuleRegistrar:
    """Registers fuzz test units as pytest items of a test module.

    Every registered case becomes one parameter of a module-level
    `test_fuzz` function, with the case name as its pytest id. The
    function is rebuilt on each registration so pytest sees all cases
    once the module has finished importing.
    """

    TEST_NAME = "test_fuzz"

    def __init__(self, namespace: Dict[str, Any]):
        self.namespace = namespace
        self.cases: List[FuzzCase] = []
        self._test: Optional[Callable[[FuzzCase], None]] = None

    @classmethod
    def for_namespace(cls, namespace: Dict[str, Any]) -> "ModuleRegistrar":
        """Return the registrar attached to a module namespace, creating it if needed."""
        registrar = namespace.get(_REGISTRAR_KEY)
        if registrar is None:
            registrar = cls(namespace)
            namespace[_REGISTRAR_KEY] = registrar
        return registrar

    def __call__(self, name: str, body: Callable[[], None]) -> None:
        bound = self.namespace.get(self.TEST_NAME)
        if bound is not None and bound is not self._test:
            raise FuzzgenError(
                f"{self.TEST_NAME!r} is already defined in this module; fuzz tests would replace it"
            )
        self.cases.append(FuzzCase(name, body))
        self._test = self._build_test()
        self.namespace[self.TEST_NAME] = self._test

    def _build_test(self) -> Callable[[FuzzCase], None]:
        cases = tuple(self.cases)

        @pytest.mark.parametrize("case", cases, ids=[case.name for case in cases])
        def test_fuzz(case: FuzzCase) -> None:
            case.body()

        return test_fuzz


def _caller_registrar() -> ModuleRegistrar:
    """Registrar for the module that called the public entry point.

    Must be called directly from that entry point.
    """
    frame = inspect.currentframe()
    try:
        namespace = frame.f_back.f_back.f_globals
    finally:
        del frame
    return ModuleRegistrar.for_namespace(namespace)


def _check_fuzzers(fuzzers: Sequence[Fuzzer], where: str) -> None:
    for fuzzer in fuzzers:
        _require_fuzzer(fuzzer, where)


def _register_batched(
    fuzzers: Sequence[Fuzzer],
    desc: str,
    func: Callable[..., Any],
    register: Register,
) -> None:
    def body() -> None:
        for _ in range(TEST_PASSES):
            func(*[_generate(fuzzer) for fuzzer in fuzzers])

    register(desc, body)
    logger.debug(f"Registered fuzz test {desc!r} ({TEST_PASSES} passes)")


def _register_explained(
    fuzzers: Sequence[Fuzzer],
    desc: str,
    func: Callable[..., Any],
    register: Register,
) -> None:
    # Names embed the values, so everything is generated before registering
    cases = []
    for _ in range(TEST_PASSES):
        values = [_generate(fuzzer) for fuzzer in fuzzers]
        cases.append(FuzzCase(explain(desc, values), functools.partial(func, *values)))

    for case in cases:
        register(case.name, case.body)
    logger.debug(f"Registered {len(cases)} explained fuzz tests for {desc!r}")


def explain(desc: str, values: Sequence[Any]) -> str:
    """Build the name of an explained test unit.

    Example:
        >>> explain("adds up", [1, "a"])
        'adds up\\nValue #1: 1\\nValue #2: a'
    """
    lines = [desc]
    for index, value in enumerate(values, start=1):
        lines.append(f"Value #{index}: {value}")
    return "\n".join(lines)


def fuzz(
    fuzzer: Fuzzer,
    desc: str,
    func: Callable[[Any], Any],
    *,
    register: Optional[Register] = None,
) -> None:
    """Use a fuzzer to generate a value for use in a test."""
    register = register if register is not None else _caller_registrar()
    _check_fuzzers([fuzzer], "fuzz")
    _register_batched([fuzzer], desc, func, register)


def fuzz2(
    fuzzer_a: Fuzzer,
    fuzzer_b: Fuzzer,
    desc: str,
    func: Callable[[Any, Any], Any],
    *,
    register: Optional[Register] = None,
) -> None:
    """Use two fuzzers to generate two values for use in a test."""
    register = register if register is not None else _caller_registrar()
    _check_fuzzers([fuzzer_a, fuzzer_b], "fuzz2")
    _register_batched([fuzzer_a, fuzzer_b], desc, func, register)


def fuzz3(
    fuzzer_a: Fuzzer,
    fuzzer_b: Fuzzer,
    fuzzer_c: Fuzzer,
    desc: str,
    func: Callable[[Any, Any, Any], Any],
    *,
    register: Optional[Register] = None,
) -> None:
    """Use three fuzzers to generate three values for use in a test."""
    register = register if register is not None else _caller_registrar()
    _check_fuzzers([fuzzer_a, fuzzer_b, fuzzer_c], "fuzz3")
    _register_batched([fuzzer_a, fuzzer_b, fuzzer_c], desc, func, register)


def fuzz_explained(
    fuzzer: Fuzzer,
    desc: str,
    func: Callable[[Any], Any],
    *,
    register: Optional[Register] = None,
) -> None:
    """Use a fuzzer to generate a value for use in a verbose test.

    This is like `fuzz()`, except each value gets its own test, named
    after the value.
    """
    register = register if register is not None else _caller_registrar()
    _check_fuzzers([fuzzer], "fuzz_explained")
    _register_explained([fuzzer], desc, func, register)


def fuzz2_explained(
    fuzzer_a: Fuzzer,
    fuzzer_b: Fuzzer,
    desc: str,
    func: Callable[[Any, Any], Any],
    *,
    register: Optional[Register] = None,
) -> None:
    """Use two fuzzers to generate two values for use in a verbose test.

    This is like `fuzz2()`, except the generated values are displayed, too.
    """
    register = register if register is not None else _caller_registrar()
    _check_fuzzers([fuzzer_a, fuzzer_b], "fuzz2_explained")
    _register_explained([fuzzer_a, fuzzer_b], desc, func, register)


def fuzz3_explained(
    fuzzer_a: Fuzzer,
    fuzzer_b: Fuzzer,
    fuzzer_c: Fuzzer,
    desc: str,
    func: Callable[[Any, Any, Any], Any],
    *,
    register: Optional[Register] = None,
) -> None:
    """Use three fuzzers to generate three values for use in a verbose test.

    This is like `fuzz3()`, except the generated values are displayed, too.
    """
    register = register if register is not None else _caller_registrar()
    _check_fuzzers([fuzzer_a, fuzzer_b, fuzzer_c], "fuzz3_explained")
    _register_explained([fuzzer_a, fuzzer_b, fuzzer_c], desc, func, register)
