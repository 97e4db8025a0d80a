"""
passwords.py

Aim:
1) Turn a GenerationConfig into a password string of exactly `length` chars.
2) Draw every random choice from a RandomSource (`uniform_int`), so output is
   reproducible under a seeded or scripted source.
3) Expose a one-shot `generate` plus a reusable `PasswordGenerator`.

Modes

- Pronounceable: consonant at even indices, vowel at odd ones. With both
  cases allowed each letter is uppercased on a fair coin; upper only forces
  uppercase; otherwise lowercase. Digits and symbols are never used.
- Unambiguous / Unrestricted: `length` uniform draws from the pool, then a
  coverage pass. For each enabled class (upper, lower, numbers, symbols, in
  that order) one uniformly chosen position is overwritten with a uniformly
  chosen character of that class.

Note:
- Coverage positions are independent and may collide. A later class can
  overwrite the character an earlier class just placed, so with fewer
  positions than enabled classes some class may end up missing.

Quick start
>>> from qpass.passwords import generate
>>> from qpass.config import GenerationConfig, Mode
>>> generate(GenerationConfig(length=16, mode=Mode.UNRESTRICTED))
# 16 chars, at least one of each class
>>> generate(GenerationConfig(length=8, mode=Mode.PRONOUNCEABLE))
'DaQeNoRi'

Reusable generator:
>>> from qpass.qrng import NumpySource
>>> gen = PasswordGenerator(source=NumpySource(seed=1))
>>> gen.passwords(count=5)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from . import qrng
from .charsets import CONSONANTS, VOWELS, build_alphabets
from .config import DEFAULT_CONFIG, GenerationConfig, InvalidArgument, Mode, check_length
from .strength import StrengthResult, entropy_bits, estimate

logger = logging.getLogger(__name__)


#Drawing helpers
def _pick(chars: str, source: qrng.RandomSource) -> str:
    return chars[source.uniform_int(len(chars))]


def _coin(source: qrng.RandomSource) -> bool:
    return source.uniform_int(2) == 1


#Mode implementations
def _pronounceable(config: GenerationConfig, source: qrng.RandomSource) -> str:
    mixed = config.allow_upper and config.allow_lower
    upper_only = config.allow_upper and not config.allow_lower

    out: List[str] = []
    for i in range(config.length):
        ch = _pick(VOWELS.chars if i % 2 == 1 else CONSONANTS.chars, source)
        if mixed:
            if _coin(source):
                ch = ch.upper()
        elif upper_only:
            ch = ch.upper()
        out.append(ch)
    return "".join(out)


def _drawn(config: GenerationConfig, source: qrng.RandomSource) -> str:
    alphabets = build_alphabets(config)
    out = [_pick(alphabets.pool, source) for _ in range(config.length)]

    # Coverage pass, one overwrite per enabled class.
    for cls in alphabets.classes:
        pos = source.uniform_int(len(out))
        out[pos] = _pick(cls.chars, source)
    return "".join(out)


def generate(
    config: GenerationConfig = DEFAULT_CONFIG,
    source: Optional[qrng.RandomSource] = None,
) -> str:
    """
    Create one password for `config`.

    Parameters

    config : GenerationConfig
        Length, class flags and mode.
    source : RandomSource, optional
        Where random integers come from. Defaults to this thread's
        `qrng.default_source()`.

    Raises

    InvalidArgument
        If `config.length` is not a positive integer.
    """
    check_length(config.length)
    if source is None:
        source = qrng.default_source()

    mode = Mode.parse(config.mode)
    if mode is Mode.PRONOUNCEABLE:
        return _pronounceable(config, source)
    return _drawn(config, source)


#Password generator
@dataclass
class PasswordGenerator:
    """
    Generate passwords for a fixed config from a fixed source.

    Parameters

    config : GenerationConfig, default=DEFAULT_CONFIG
    source : RandomSource, optional
        Defaults to the default source of the thread that created the generator.

    Examples

    >>> gen = PasswordGenerator(GenerationConfig(length=20))
    >>> gen.password()
    'r7K#pQ...'
    >>> gen.strength().label
    <Strength.VERY_STRONG: 'Very strong'>
    """

    config: GenerationConfig = DEFAULT_CONFIG
    source: Optional[qrng.RandomSource] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        check_length(self.config.length)
        if self.source is None:
            self.source = qrng.default_source()

    def password(self) -> str:
        return generate(self.config, self.source)

    def passwords(self, count: int) -> List[str]:
        """Create `count` passwords, each an independent draw."""
        if count < 0:
            raise InvalidArgument("count must be non-negative")
        return [self.password() for _ in range(count)]

    def strength(self) -> StrengthResult:
        return estimate(self.config)

    def entropy_bits(self) -> float:
        return entropy_bits(self.config)


def make_passwords(
    config: GenerationConfig,
    count: int,
    source: Optional[qrng.RandomSource] = None,
) -> List[str]:
    """
    One-shot helper to generate several passwords without creating a class instance.
    """
    gen = PasswordGenerator(config=config, source=source)
    passwords = gen.passwords(count)
    logger.debug("generated %d password(s) in mode=%s", count, Mode.parse(config.mode).value)
    return passwords


__all__ = [
    "generate",
    "PasswordGenerator",
    "make_passwords",
]
