"""
metrics.py

Statistical checks for randomness sources and generated passwords.

What this module does

- Builds histograms over integer outcomes and over password characters.
- Runs a Chi-square test against the uniform distribution.
- Computes KL divergence (with safe smoothing).
- `audit_config`: samples passwords for a config and measures how evenly
  the pool characters show up.

Design choices

- "Uniform" means: over all outcomes in the sample space you specify.
- KL divergence uses additive epsilon smoothing to avoid log(0).
- The coverage pass in the generator deliberately adds one character per
  enabled class, so small classes (digits, symbols) are over-represented in
  drawn modes. An audit of those modes shows a low p-value by construction;
  compare configs with each other, not against a fixed threshold.

Quick start

>>> from qpass.metrics import chi_square_uniform
>>> counts = {0: 102, 1: 98}
>>> chi_square_uniform(counts, support_size=2)
ChiSquareResult(stat=0.08, df=1, pvalue=0.77..., expected=[100.0, 100.0])
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import numpy as np
from scipy.stats import chisquare

from . import qrng
from .charsets import build_alphabets
from .config import GenerationConfig, InvalidArgument, Mode
from .passwords import make_passwords


#Helpers: counts / probabilities

def counts_to_vector(
    counts: Mapping[int, int],
    support_size: int,
) -> np.ndarray:
    """
    Convert integer-keyed counts {k: c} into a length-`support_size` vector
    ordered by index (0..support_size-1). Missing entries are treated as 0.
    """
    v = np.zeros(support_size, dtype=float)
    for k, c in counts.items():
        if 0 <= k < support_size:
            v[k] = float(c)
    return v


def outcome_histogram(
    outcomes: Iterable[int],
    support_size: int,
) -> Dict[int, int]:
    """
    Make a histogram over integer outcomes in [0, support_size).

    Any outcome outside this range is ignored.
    """
    hist: Dict[int, int] = {}
    for x in outcomes:
        if 0 <= x < support_size:
            hist[x] = hist.get(x, 0) + 1
    return hist


def char_histogram(
    passwords: Iterable[str],
    alphabet: str,
    positions: Optional[slice] = None,
) -> Dict[int, int]:
    """
    Count characters of `passwords` by their index in `alphabet`.

    `positions` restricts counting to a slice of each password
    (e.g. slice(1, None, 2) for the odd positions). Characters outside
    the alphabet are ignored.
    """
    index = {ch: i for i, ch in enumerate(alphabet)}
    hist: Dict[int, int] = {}
    for pw in passwords:
        chars = pw[positions] if positions is not None else pw
        for ch in chars:
            i = index.get(ch)
            if i is not None:
                hist[i] = hist.get(i, 0) + 1
    return hist


#Chi-square uniformity test

@dataclass
class ChiSquareResult:
    stat: float
    df: int
    pvalue: float
    expected: List[float]


def chi_square_uniform(
    counts: Mapping[int, int],
    support_size: Optional[int] = None,
) -> ChiSquareResult:
    """
    Chi-square goodness-of-fit against a uniform distribution.

    Parameters
    ----------
    counts : Mapping
        Outcome index -> frequency (int).
    support_size : int, optional
        Total number of categories to test against.
        If omitted, max(counts)+1 is used.

    Returns

    ChiSquareResult(stat, df, pvalue, expected), df = support_size - 1
    """
    if not counts:
        raise ValueError("Empty counts supplied.")
    if support_size is None:
        support_size = max(int(k) for k in counts.keys()) + 1
    if support_size < 2:
        raise ValueError("support_size must be >= 2")

    observed = counts_to_vector(counts, support_size)
    total = observed.sum()
    if total <= 0:
        raise ValueError("Empty counts supplied.")

    expected = np.ones(support_size, dtype=float) * (total / support_size)
    res = chisquare(f_obs=observed, f_exp=expected)

    return ChiSquareResult(
        stat=float(res.statistic),
        df=support_size - 1,
        pvalue=float(res.pvalue),
        expected=expected.tolist(),
    )


#KL divergence

def kl_divergence(
    p: Sequence[float],
    q: Sequence[float],
    eps: float = 1e-12,
) -> float:
    """
    Compute D_KL(p || q) in bits with additive smoothing.

    We apply: p' = normalize(p) + eps, q' = normalize(q) + eps,
    then renormalize again so they sum to 1, and compute sum p' * log2(p'/q').
    """
    p = np.asarray(p, dtype=float)
    q = np.asarray(q, dtype=float)
    if p.shape != q.shape:
        raise ValueError("p and q must have the same shape.")

    def _norm(x: np.ndarray) -> np.ndarray:
        s = x.sum()
        if s <= 0:
            raise ValueError("Distribution has zero or negative sum.")
        return x / s

    p = _norm(p) + eps
    q = _norm(q) + eps
    p = p / p.sum()
    q = q / q.sum()
    return float(np.sum(p * np.log2(p / q)))


#Generator audit

@dataclass
class AuditResult:
    samples: int
    alphabet: str
    counts: Dict[int, int]
    chi_square: ChiSquareResult
    # Divergence of observed character frequencies from uniform, in bits.
    kl_bits: float


def audit_config(
    config: GenerationConfig,
    samples: int,
    source: Optional[qrng.RandomSource] = None,
) -> AuditResult:
    """
    Generate `samples` passwords for `config` and test how uniformly the
    pool characters occur across them.
    """
    if samples <= 0:
        raise InvalidArgument("samples must be positive")

    alphabet = build_alphabets(config).pool
    passwords = make_passwords(config, samples, source=source)
    if Mode.parse(config.mode) is Mode.PRONOUNCEABLE:
        # Pool is lowercase; casing is a separate coin flip.
        passwords = [pw.lower() for pw in passwords]
    counts = char_histogram(passwords, alphabet)
    observed = counts_to_vector(counts, len(alphabet))

    return AuditResult(
        samples=samples,
        alphabet=alphabet,
        counts=counts,
        chi_square=chi_square_uniform(counts, support_size=len(alphabet)),
        kl_bits=kl_divergence(observed, np.ones(len(alphabet))),
    )


__all__ = [
    "ChiSquareResult",
    "AuditResult",
    "chi_square_uniform",
    "kl_divergence",
    "counts_to_vector",
    "outcome_histogram",
    "char_histogram",
    "audit_config",
]
