"""
strength.py

Coarse strength rating for a GenerationConfig.

The rating looks only at the configuration (length, class flags, mode),
never at a produced password:

    classes = number of class flags set
              (pronounceable: at most 1, and only if a letter case is allowed)
    points  = length * (classes + 1)

    points < 30 -> Weak         (score 25)
    points < 60 -> Fair         (score 50)
    points < 90 -> Strong       (score 75)
    otherwise   -> Very strong  (score 100)

This is a heuristic scale shared with existing front ends; keep the formula
and thresholds exactly as they are.

`entropy_bits` is the theoretical entropy of the generator for a config,
for display next to the rating. It does not affect the rating.

Quick start
>>> from qpass.strength import estimate
>>> from qpass.config import GenerationConfig, Mode
>>> r = estimate(GenerationConfig(length=12, mode=Mode.UNRESTRICTED))
>>> r.label.value, r.score, r.points
('Strong', 75, 60)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from .charsets import CONSONANTS, VOWELS, build_alphabets
from .config import GenerationConfig, Mode


class Strength(str, Enum):
    WEAK = "Weak"
    FAIR = "Fair"
    STRONG = "Strong"
    VERY_STRONG = "Very strong"


# (exclusive upper bound on points, label, score); last band is open-ended
BANDS = (
    (30, Strength.WEAK, 25),
    (60, Strength.FAIR, 50),
    (90, Strength.STRONG, 75),
)


@dataclass(frozen=True)
class StrengthResult:
    label: Strength
    # Normalised magnitude 0-100, what a meter bar would show.
    score: int
    # Raw length * (classes + 1).
    points: int


def credited_classes(config: GenerationConfig) -> int:
    classes = config.enabled_class_count
    if Mode.parse(config.mode) is Mode.PRONOUNCEABLE:
        has_letters = config.allow_upper or config.allow_lower
        classes = min(classes, 1 if has_letters else 0)
    return classes


def estimate(config: GenerationConfig) -> StrengthResult:
    """Rate `config`. Pure and total; no randomness, no password inspected."""
    points = config.length * (credited_classes(config) + 1)
    for bound, label, score in BANDS:
        if points < bound:
            return StrengthResult(label=label, score=score, points=points)
    return StrengthResult(label=Strength.VERY_STRONG, score=100, points=points)


def entropy_bits(config: GenerationConfig) -> float:
    """
    Estimate generator entropy in bits for `config`.

    - Pronounceable: log2(|consonants|) per even position, log2(|vowels|)
      per odd one, plus 1 bit per character when case is a coin flip.
    - Other modes: length * log2(|pool|). The coverage pass is ignored.
    """
    if config.length <= 0:
        raise ValueError("length must be positive")

    if Mode.parse(config.mode) is Mode.PRONOUNCEABLE:
        consonant_slots = (config.length + 1) // 2
        vowel_slots = config.length // 2
        bits = consonant_slots * math.log2(len(CONSONANTS)) + vowel_slots * math.log2(len(VOWELS))
        if config.allow_upper and config.allow_lower:
            bits += config.length
        return bits

    return config.length * math.log2(build_alphabets(config).pool_size)


__all__ = [
    "Strength",
    "BANDS",
    "StrengthResult",
    "credited_classes",
    "estimate",
    "entropy_bits",
]
