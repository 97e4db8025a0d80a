"""
charsets.py

Character classes and the alphabet builder.

Aim:
1) Fixed, immutable character classes (upper, lower, digits, symbols,
   vowels, consonants) and the set of visually ambiguous glyphs.
2) `build_alphabets` turns a GenerationConfig into the enabled classes and
   the combined draw pool used by the synthesizer.

Rules

- Unrestricted: requested classes verbatim.
- Unambiguous: requested classes minus AMBIGUOUS. Symbols contain no
  ambiguous glyphs, so they pass through unchanged.
- Pronounceable: the fixed consonant / vowel classes; flags only decide casing.
- No class requested: fall back to lowercase (filtered in Unambiguous mode),
  so the pool is never empty.

Quick start

>>> from qpass.charsets import build_alphabets
>>> from qpass.config import GenerationConfig, Mode
>>> a = build_alphabets(GenerationConfig(allow_upper=False, allow_numbers=False,
...                                      allow_symbols=False, mode=Mode.UNAMBIGUOUS))
>>> "l" in a.pool, "o" in a.pool
(False, False)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Tuple

from .config import GenerationConfig, Mode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CharacterClass:
    name: str
    chars: str

    def __len__(self) -> int:
        return len(self.chars)

    def __contains__(self, ch: object) -> bool:
        return isinstance(ch, str) and len(ch) == 1 and ch in self.chars

    def without(self, excluded: Iterable[str], name: str | None = None) -> "CharacterClass":
        """Copy of this class with every character in `excluded` removed."""
        drop = set(excluded)
        return CharacterClass(name or self.name, "".join(c for c in self.chars if c not in drop))


#Classes
LOWERCASE = CharacterClass("lowercase", "abcdefghijklmnopqrstuvwxyz")
UPPERCASE = CharacterClass("uppercase", LOWERCASE.chars.upper())
DIGITS = CharacterClass("digits", "0123456789")
SYMBOLS = CharacterClass("symbols", "!@#$%^&*()-_=+[]{};:,.?")

VOWELS = CharacterClass("vowels", "aeiou")
CONSONANTS = LOWERCASE.without(VOWELS.chars, name="consonants")

# Digit/letter look-alikes. Letters and digits only.
AMBIGUOUS = frozenset("lI1O0oS5B8G6Z2")


@dataclass(frozen=True)
class Alphabets:
    """
    Resolved draw sets for one config.

    classes : enabled classes, in the order upper, lower, numbers, symbols
              (consonants, vowels for pronounceable mode)
    pool    : concatenation of `classes`
    """

    classes: Tuple[CharacterClass, ...]
    pool: str

    @property
    def pool_size(self) -> int:
        return len(self.pool)


def strip_ambiguous(chars: str) -> str:
    """Drop every character that belongs to AMBIGUOUS."""
    return "".join(c for c in chars if c not in AMBIGUOUS)


def _requested(config: GenerationConfig) -> list[CharacterClass]:
    flagged = [
        (config.allow_upper, UPPERCASE),
        (config.allow_lower, LOWERCASE),
        (config.allow_numbers, DIGITS),
        (config.allow_symbols, SYMBOLS),
    ]
    return [cls for on, cls in flagged if on]


def build_alphabets(config: GenerationConfig) -> Alphabets:
    """
    Resolve the enabled character classes and the combined pool for `config`.

    Never fails and never returns an empty pool.
    """
    mode = Mode.parse(config.mode)

    if mode is Mode.PRONOUNCEABLE:
        classes: Tuple[CharacterClass, ...] = (CONSONANTS, VOWELS)
        return Alphabets(classes=classes, pool=CONSONANTS.chars + VOWELS.chars)

    requested = _requested(config)
    if not requested:
        logger.debug("no character class enabled, falling back to lowercase")
        requested = [LOWERCASE]

    if mode is Mode.UNAMBIGUOUS:
        requested = [cls.without(AMBIGUOUS) for cls in requested]

    classes = tuple(cls for cls in requested if cls.chars)
    pool = "".join(cls.chars for cls in classes)
    logger.debug(
        "alphabets for mode=%s: %s (%d chars)",
        mode.value,
        ",".join(cls.name for cls in classes),
        len(pool),
    )
    return Alphabets(classes=classes, pool=pool)


__all__ = [
    "CharacterClass",
    "Alphabets",
    "LOWERCASE",
    "UPPERCASE",
    "DIGITS",
    "SYMBOLS",
    "VOWELS",
    "CONSONANTS",
    "AMBIGUOUS",
    "strip_ambiguous",
    "build_alphabets",
]
