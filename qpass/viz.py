"""
viz.py: Matplotlib helpers for password configs and generator audits

Aim:
- Small, dependency-light (matplotlib only).
- Return (fig, ax) so callers can further customize or save.
- Accept plain values from `strength.py` and `metrics.py`.


Quick start

>>> from qpass.viz import plot_strength_curve
>>> from qpass.config import GenerationConfig, Mode
>>> fig, ax = plot_strength_curve(range(6, 65), GenerationConfig(mode=Mode.UNRESTRICTED))

>>> from qpass.metrics import audit_config
>>> fig, ax = plot_char_histogram(audit_config(GenerationConfig(), samples=500))
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np
import matplotlib.pyplot as plt

from .config import GenerationConfig, Mode
from .metrics import AuditResult, counts_to_vector
from .strength import BANDS, estimate


#Basic helpers

def _autox_labels(ax, labels: Sequence[str]) -> None:
    ax.set_xticks(range(len(labels)))
    ax.set_xticklabels(labels, rotation=0)


#Plots

def plot_strength_curve(
    lengths: Sequence[int],
    config: GenerationConfig,
    *,
    title: Optional[str] = None,
) -> Tuple[plt.Figure, plt.Axes]:
    """
    Plot strength points over a set of lengths for `config`'s flags and mode,
    with the Weak/Fair/Strong/Very strong band edges as dashed lines.
    """
    lengths = list(lengths)
    if not lengths:
        raise ValueError("No lengths given.")
    if any(L <= 0 for L in lengths):
        raise ValueError("All lengths must be positive.")

    points = [estimate(config.replace(length=L)).points for L in lengths]

    fig, ax = plt.subplots()
    ax.plot(lengths, points, marker="o")
    for bound, label, _score in BANDS:
        ax.axhline(bound, linestyle="--")
        ax.annotate(f"{label.value} below", (lengths[0], bound), va="bottom")
    ax.set_xlabel("Password length")
    ax.set_ylabel("Strength points")
    ax.set_title(title or f"Strength by length ({Mode.parse(config.mode).value})")
    fig.tight_layout()
    return fig, ax


def plot_char_histogram(
    audit: AuditResult,
    *,
    title: Optional[str] = "Character frequency",
) -> Tuple[plt.Figure, plt.Axes]:
    """
    Bar chart of how often each pool character occurred in an audit,
    with the uniform expectation as a horizontal line.
    """
    alphabet = audit.alphabet
    vals = counts_to_vector(audit.counts, len(alphabet))

    fig, ax = plt.subplots(figsize=(max(6.0, len(alphabet) * 0.15), 4.0))
    ax.bar(range(len(vals)), vals)
    _autox_labels(ax, list(alphabet))
    ax.axhline(audit.chi_square.expected[0])
    ax.set_ylabel("Counts")
    if title:
        ax.set_title(f"{title}  (p = {audit.chi_square.pvalue:.3g})")
    fig.tight_layout()
    return fig, ax


def plot_uniformity_residuals(
    audit: AuditResult,
    *,
    title: Optional[str] = "Residuals against a uniform pool",
) -> Tuple[plt.Figure, plt.Axes]:
    """
    Per-character distance from the uniform expectation in an audit,
    as a fraction of the expected count. Bars are labelled with the
    pool characters, so over-drawn classes stand out as a block.
    """
    alphabet = audit.alphabet
    observed = counts_to_vector(audit.counts, len(alphabet))
    expected = np.asarray(audit.chi_square.expected, dtype=float)
    if observed.shape != expected.shape:
        raise ValueError("audit counts and expectation disagree in size.")

    resid = (observed - expected) / expected

    fig, ax = plt.subplots(figsize=(max(6.0, len(alphabet) * 0.15), 4.0))
    ax.bar(range(len(resid)), resid)
    _autox_labels(ax, list(alphabet))
    ax.axhline(0.0)
    ax.set_ylabel("(observed - expected) / expected")
    if title:
        ax.set_title(f"{title}  (KL = {audit.kl_bits:.4f} bits)")
    fig.tight_layout()
    return fig, ax


__all__ = [
    "plot_strength_curve",
    "plot_char_histogram",
    "plot_uniformity_residuals",
]
