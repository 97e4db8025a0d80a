"""
config.py

Configuration values for one password request.

Aim:
1) One frozen value (`GenerationConfig`) describes a request end to end.
2) `Mode` names the three generation styles; short UI names are accepted.
3) Collaborators (CLI, UIs) clamp lengths with `clamp_length`; the engine
   itself only insists on a positive length.

Quick start

>>> from qpass.config import GenerationConfig, Mode
>>> cfg = GenerationConfig(length=16, mode=Mode.UNRESTRICTED)
>>> cfg.replace(allow_symbols=False).allow_symbols
False
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


# Range offered by interactive collaborators. The engine accepts any length >= 1.
LENGTH_MIN = 6
LENGTH_MAX = 64


class InvalidArgument(ValueError):
    """Raised when a request cannot be honoured (e.g. length <= 0)."""


class Mode(str, Enum):
    PRONOUNCEABLE = "say"
    UNAMBIGUOUS = "read"
    UNRESTRICTED = "all"

    @classmethod
    def parse(cls, value: "Mode | str") -> "Mode":
        """
        Accept a Mode, its short value ("say", "read", "all") or its name
        in any case ("pronounceable", "UNAMBIGUOUS", ...).
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for mode in cls:
            if text == mode.value or text.upper() == mode.name:
                return mode
        raise InvalidArgument(f"unknown mode: {value!r}")


@dataclass(frozen=True)
class GenerationConfig:
    # Number of characters to produce. Must be >= 1 when generating.
    length: int = 12

    allow_upper: bool = True
    allow_lower: bool = True
    allow_numbers: bool = True
    allow_symbols: bool = True

    mode: Mode = Mode.UNAMBIGUOUS

    @property
    def enabled_class_count(self) -> int:
        """How many of the four class flags are set."""
        return sum(
            (self.allow_upper, self.allow_lower, self.allow_numbers, self.allow_symbols)
        )

    def replace(self, **changes) -> "GenerationConfig":
        return replace(self, **changes)


def clamp_length(length: int, lo: int = LENGTH_MIN, hi: int = LENGTH_MAX) -> int:
    """Clamp a user-entered length into [lo, hi]."""
    return max(lo, min(hi, int(length)))


def check_length(length: int) -> int:
    """
    Validate a length for generation and return it.

    Booleans are rejected even though they are ints.
    """
    if isinstance(length, bool) or not isinstance(length, int):
        raise InvalidArgument(f"length must be an integer, got {length!r}")
    if length <= 0:
        raise InvalidArgument(f"length must be positive, got {length}")
    return length


# Default configuration instance you can import elsewhere
DEFAULT_CONFIG = GenerationConfig()


__all__ = [
    "LENGTH_MIN",
    "LENGTH_MAX",
    "InvalidArgument",
    "Mode",
    "GenerationConfig",
    "DEFAULT_CONFIG",
    "clamp_length",
    "check_length",
]
