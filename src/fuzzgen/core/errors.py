"""
Errors raised by the fuzzer framework itself.

Only misuse is reported here. Exceptions raised by user transforms or
check functions pass through untouched.
"""


class FuzzgenError(Exception):
    """Base class for errors raised by fuzzgen."""


class InvalidRangeError(FuzzgenError, ValueError):
    """An integer range was requested with its bounds reversed."""

    def __init__(self, min_value: int, max_value: int):
        super().__init__(f"Invalid range: min {min_value} is greater than max {max_value}")
        self.min_value = min_value
        self.max_value = max_value


class NotAFuzzerError(FuzzgenError, TypeError):
    """A Fuzzer was expected but something else was given."""

    def __init__(self, value, where: str):
        super().__init__(f"{where} expected a Fuzzer, got {type(value).__name__}")
        self.value = value
