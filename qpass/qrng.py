"""
qrng.py

Randomness sources for the password engine.

Purpose/Aim:
1) Define the one operation the engine needs from randomness:
   `uniform_int(n)`, an integer drawn uniformly from [0, n).
2) Provide a fast, seedable default (`NumpySource`, numpy's PCG64), one per
   thread so concurrent callers never share generator state.
3) Provide a quantum-circuit backed alternative (`BitPool`): H on n qubits,
   measure, cache the bits, and turn them into unbiased integers with
   rejection sampling. Runs on Aer by default; can accept a real device backend.

Why this shape?

- The synthesizer only calls `uniform_int`, so tests can hand it a scripted
  stub and get byte-exact output.
- The n-qubit H^n circuit gives a uniform distribution over all bitstrings.
- A small "bit pool" avoids rebuilding and running circuits for every single bit.
- Rejection sampling ensures no modulo bias when mapping bits to [0, n).

Quick start

>>> from qpass.qrng import NumpySource, default_source
>>> NumpySource(seed=7).uniform_int(10)     # reproducible
>>> default_source().uniform_int(10)        # this thread's generator

Quantum-backed:
>>> from qpass.qrng import BitPool
>>> pool = BitPool(n_qubits=16, refill_shots=4096)
>>> pool.uniform_ints(10, size=1000)         # 1,000 numbers in [0,10)
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from typing import List, Optional, Protocol, runtime_checkable

import numpy as np
from qiskit import QuantumCircuit
from qiskit_aer import AerSimulator

logger = logging.getLogger(__name__)


#Source interface
@runtime_checkable
class RandomSource(Protocol):
    def uniform_int(self, n: int) -> int:
        """Integer drawn uniformly from [0, n)."""
        ...


def _check_bound(n: int) -> None:
    if n <= 0:
        raise ValueError(f"n must be positive, got {n}")


#Pseudo-random source
@dataclass
class NumpySource:
    """
    General-purpose PRNG source backed by `numpy.random.Generator`.

    Parameters

    seed : int, optional
        Seed for reproducible sequences. None draws fresh OS entropy.
    """

    seed: Optional[int] = None

    def __post_init__(self) -> None:
        self._rng = np.random.default_rng(self.seed)

    def uniform_int(self, n: int) -> int:
        _check_bound(n)
        return int(self._rng.integers(n))

    def uniform_ints(self, n: int, size: int) -> List[int]:
        if size < 0:
            raise ValueError("size must be non-negative")
        _check_bound(n)
        return [int(x) for x in self._rng.integers(n, size=size)]


_local = threading.local()


def default_source() -> NumpySource:
    """
    The calling thread's default source, created on first use.
    Each thread gets its own generator.
    """
    src = getattr(_local, "source", None)
    if src is None:
        src = NumpySource()
        _local.source = src
        logger.debug("created default source for thread %s", threading.get_ident())
    return src


#Circuit construction
def _h_superposition_circuit(n_qubits: int) -> QuantumCircuit:
    """
    Build a minimal H^n circuit and measure in the computational basis.
    """
    if n_qubits <= 0:
        raise ValueError("n_qubits must be positive")

    qc = QuantumCircuit(n_qubits, n_qubits)
    qc.h(range(n_qubits))
    qc.measure(range(n_qubits), range(n_qubits))
    return qc


#Raw bitstring generation
def generate_bitstrings(
    n_qubits: int,
    shots: int,
    backend=None,
    seed_simulator: Optional[int] = None,
) -> List[str]:
    """
    Run the H^n circuit for a given number of shots and return raw bitstrings.

    Notes

    - Outputs are MSB..LSB bitstrings (e.g. "0101") of width `n_qubits`.
    - The order of outcomes is shuffled (deterministically if `seed_simulator` is set).
    """
    if shots <= 0:
        raise ValueError("shots must be positive")

    if backend is None:
        backend = AerSimulator()

    qc = _h_superposition_circuit(n_qubits)
    run_options = {"shots": shots}
    if seed_simulator is not None:
        run_options["seed_simulator"] = seed_simulator
    job = backend.run(qc, **run_options)
    counts = job.result().get_counts()  # dict: bitstring -> frequency

    # Expand counts into a flat list of strings, normalized to width n_qubits.
    out: List[str] = []
    for bitstr, c in counts.items():
        s = bitstr.replace(" ", "").zfill(n_qubits)
        out.extend([s] * c)

    # Counts come back grouped by outcome; shuffle so order carries no signal.
    rng = np.random.default_rng(seed_simulator)
    rng.shuffle(out)
    return out


#Bit cache & unbiased integers
@dataclass
class BitPool:
    """
    A small, refillable cache of unbiased bits backed by the H^n circuit.
    Satisfies RandomSource, so it can be handed straight to the generator.

    Parameters

    n_qubits : int, default=16
        Number of qubits per circuit shot (i.e., bits per shot).
    refill_shots : int, default=4096
        How many shots to run each time the buffer needs topping up.
    backend : qiskit backend, optional
        Where to run the circuit. Default is AerSimulator.
    seed_simulator : int, optional
        Seed for deterministic behavior in tests/demos on simulators.
        Successive refills use seed, seed+1, ... so batches differ.
    """

    n_qubits: int = 16
    refill_shots: int = 4096
    backend: Optional[object] = None
    seed_simulator: Optional[int] = None

    def __post_init__(self) -> None:
        if self.backend is None:
            self.backend = AerSimulator()
        self._buf: List[int] = []  # internal bit buffer as ints 0/1
        self._refills = 0

    #internal
    def _refill(self) -> None:
        seed = None
        if self.seed_simulator is not None:
            seed = self.seed_simulator + self._refills
        bitstrings = generate_bitstrings(
            self.n_qubits,
            self.refill_shots,
            backend=self.backend,
            seed_simulator=seed,
        )
        self._buf.extend(int(b) for s in bitstrings for b in s)
        self._refills += 1
        logger.debug("bit pool refilled (%d bits buffered)", len(self._buf))

    #public API
    def get_bits(self, n_bits: int) -> List[int]:
        """
        Return `n_bits` unbiased bits (as ints 0/1). Refills on demand.
        """
        if n_bits <= 0:
            raise ValueError("n_bits must be positive")
        while len(self._buf) < n_bits:
            self._refill()
        out = self._buf[:n_bits]
        del self._buf[:n_bits]
        return out

    def get_uint(self, k_bits: int) -> int:
        """
        Interpret `k_bits` fresh bits as a big-endian, non-negative integer.
        """
        if k_bits <= 0:
            raise ValueError("k_bits must be positive")
        val = 0
        for b in self.get_bits(k_bits):
            val = (val << 1) | b
        return val

    def uniform_int(self, n: int) -> int:
        """
        Unbiased integer in [0, n) via rejection sampling.

        - Choose k = ceil(log2(n)), so values live in [0, 2^k).
        - Accept only when the k-bit value falls in the largest multiple of n.
        - On accept, return value % n; otherwise, try again (rare).
        """
        _check_bound(n)
        if n == 1:
            return 0

        k = math.ceil(math.log2(n))
        M = 1 << k
        limit = (M // n) * n

        while True:
            x = self.get_uint(k)
            if x < limit:
                return x % n

    def uniform_ints(self, n: int, size: int) -> List[int]:
        """`size` many unbiased integers in [0, n)."""
        if size < 0:
            raise ValueError("size must be non-negative")
        return [self.uniform_int(n) for _ in range(size)]


#Module-level convenience singleton
_default_pool: Optional[BitPool] = None
_default_pool_lock = threading.Lock()


def default_pool() -> BitPool:
    """
    Lazily create (and reuse) a process-wide quantum BitPool.
    Its buffer is shared; wrap calls in your own lock when using it from
    several threads.
    """
    global _default_pool
    with _default_pool_lock:
        if _default_pool is None:
            _default_pool = BitPool()
        return _default_pool


__all__ = [
    "RandomSource",
    "NumpySource",
    "BitPool",
    "default_source",
    "default_pool",
    "generate_bitstrings",
]
