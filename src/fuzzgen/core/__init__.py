"""
Core modules of the fuzzer framework.
"""

from .errors import FuzzgenError, InvalidRangeError, NotAFuzzerError
from .fuzzer import Fuzzer
from .harness import (
    TEST_PASSES,
    FuzzCase,
    ModuleRegistrar,
    fuzz,
    fuzz2,
    fuzz3,
    fuzz_explained,
    fuzz2_explained,
    fuzz3_explained,
)

__all__ = [
    "Fuzzer",
    "TEST_PASSES",
    "FuzzCase",
    "ModuleRegistrar",
    "fuzz",
    "fuzz2",
    "fuzz3",
    "fuzz_explained",
    "fuzz2_explained",
    "fuzz3_explained",
    "FuzzgenError",
    "InvalidRangeError",
    "NotAFuzzerError",
]
