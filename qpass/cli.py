"""
Command-line front end.

Builds a GenerationConfig from flags, prints passwords and the strength
rating for the config. Length is clamped to the interactive range before
the engine sees it.

    qpass --length 16 --mode all --count 3
    qpass --mode say --no-numbers --no-symbols
    qpass --audit 2000 --audit-plot residuals.png --plot strength.png
    qpass --quantum --seed 7
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from . import qrng
from .config import (
    DEFAULT_CONFIG,
    LENGTH_MAX,
    LENGTH_MIN,
    GenerationConfig,
    InvalidArgument,
    Mode,
    clamp_length,
)
from .metrics import audit_config
from .passwords import make_passwords
from .strength import StrengthResult, entropy_bits, estimate
from .viz import plot_strength_curve, plot_uniformity_residuals

logger = logging.getLogger(__name__)

BAR_WIDTH = 20


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="qpass",
        description="Generate pronounceable, easy-to-read or unrestricted passwords.",
    )
    p.add_argument(
        "-l", "--length", type=int, default=DEFAULT_CONFIG.length,
        help=f"password length, clamped to {LENGTH_MIN}-{LENGTH_MAX} (default: %(default)s)",
    )
    p.add_argument(
        "-m", "--mode", choices=[m.value for m in Mode], default=DEFAULT_CONFIG.mode.value,
        help="say = pronounceable, read = no ambiguous characters, all = everything (default: %(default)s)",
    )
    p.add_argument("--no-upper", action="store_true", help="exclude uppercase letters")
    p.add_argument("--no-lower", action="store_true", help="exclude lowercase letters")
    p.add_argument("--no-numbers", action="store_true", help="exclude digits")
    p.add_argument("--no-symbols", action="store_true", help="exclude symbols")
    p.add_argument("-n", "--count", type=int, default=1, help="how many passwords (default: %(default)s)")

    p.add_argument(
        "--seed", type=int,
        help="seed the random source for reproducible output (with --quantum: the simulator seed)",
    )
    p.add_argument("--quantum", action="store_true", help="draw randomness from the Aer H^n circuit")

    p.add_argument("--audit", type=int, metavar="N", help="sample N passwords and report character uniformity")
    p.add_argument("--plot", metavar="PATH", help="save the strength-by-length curve to PATH")
    p.add_argument("--audit-plot", metavar="PATH", help="with --audit, save per-character residuals to PATH")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return p


def config_from_args(args: argparse.Namespace) -> GenerationConfig:
    return GenerationConfig(
        length=clamp_length(args.length),
        allow_upper=not args.no_upper,
        allow_lower=not args.no_lower,
        allow_numbers=not args.no_numbers,
        allow_symbols=not args.no_symbols,
        mode=Mode.parse(args.mode),
    )


def source_from_args(args: argparse.Namespace) -> Optional[qrng.RandomSource]:
    if args.quantum:
        if args.seed is None:
            return qrng.default_pool()
        return qrng.BitPool(seed_simulator=args.seed)
    if args.seed is not None:
        return qrng.NumpySource(seed=args.seed)
    return None


def format_strength(result: StrengthResult, bits: float) -> str:
    filled = round(BAR_WIDTH * result.score / 100)
    bar = "#" * filled + "-" * (BAR_WIDTH - filled)
    return f"Strength: {result.label.value} [{bar}] {result.score}%  (~{bits:.1f} bits)"


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = config_from_args(args)
    if config.length != args.length:
        logger.info("length %d clamped to %d", args.length, config.length)
    source = source_from_args(args)

    try:
        passwords = make_passwords(config, args.count, source=source)
        audit = audit_config(config, args.audit, source=source) if args.audit is not None else None
    except InvalidArgument as exc:
        parser.error(str(exc))

    for pw in passwords:
        print(pw)
    print(format_strength(estimate(config), entropy_bits(config)))

    if audit is not None:
        chi = audit.chi_square
        print(
            f"Audit: {audit.samples} samples over {len(audit.alphabet)} chars, "
            f"chi2={chi.stat:.2f} df={chi.df} p={chi.pvalue:.4f}, KL={audit.kl_bits:.5f} bits"
        )
        if args.audit_plot:
            fig, _ax = plot_uniformity_residuals(audit)
            fig.savefig(args.audit_plot)
            logger.debug("audit residuals saved to %s", args.audit_plot)

    if args.plot:
        fig, _ax = plot_strength_curve(range(LENGTH_MIN, LENGTH_MAX + 1), config)
        fig.savefig(args.plot)
        logger.debug("strength curve saved to %s", args.plot)

    return 0


if __name__ == "__main__":
    sys.exit(main())
