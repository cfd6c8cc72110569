"""
Property-based value generation for pytest.

This is the main entry point for the fuzzgen framework.
External users should import from this module.

Example:
    from fuzzgen import Fuzzer, fuzz, fuzz2_explained

    user = Fuzzer.map2(
        lambda name, age: {"name": name, "age": age},
        Fuzzer.string,
        Fuzzer.int_range(0, 120),
    )

    def check_user(u):
        assert 0 <= u["age"] <= 120

    # Registers one pytest item running check_user 100 times
    fuzz(user, "users have a sane age", check_user)

    def check_commutes(a, b):
        assert a + b == b + a

    # Registers 100 pytest items, each named after its inputs
    fuzz2_explained(Fuzzer.int, Fuzzer.int, "addition commutes", check_commutes)
"""

from .core import (
    Fuzzer,
    TEST_PASSES,
    FuzzCase,
    ModuleRegistrar,
    fuzz,
    fuzz2,
    fuzz3,
    fuzz_explained,
    fuzz2_explained,
    fuzz3_explained,
    FuzzgenError,
    InvalidRangeError,
    NotAFuzzerError,
)

__all__ = [
    # Generators
    "Fuzzer",
    # Harness
    "TEST_PASSES",
    "FuzzCase",
    "ModuleRegistrar",
    "fuzz",
    "fuzz2",
    "fuzz3",
    "fuzz_explained",
    "fuzz2_explained",
    "fuzz3_explained",
    # Errors
    "FuzzgenError",
    "InvalidRangeError",
    "NotAFuzzerError",
]

__version__ = "0.1.0"
