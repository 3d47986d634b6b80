"""Thread-safe random number generation.

Every :class:`RandomSource` hands each thread its own Mersenne-Twister
generator, created lazily on first use.  Unseeded sources seed each thread
from the wall clock combined with a hash of the thread identity, so two
threads practically never replay the same stream.  Passing an explicit
``seed`` makes the sequence reproducible: the k-th thread that draws from a
seeded source derives its stream from ``(seed, k)``.

The module level helpers (:func:`uniform_int`, :func:`uniform_real`, ...)
draw from a process-wide default source which can be replaced with
:func:`seed`.
"""

from __future__ import annotations

import threading
import time

import numpy as np

from .types import Array


class RandomSource:
    """Per-thread random generators sharing one seed policy."""

    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed
        self._local = threading.local()
        self._lock = threading.Lock()
        self._threads = 0

    def generator(self) -> np.random.Generator:
        """Return the calling thread's generator, creating it if needed."""

        rng = getattr(self._local, "rng", None)
        if rng is None:
            rng = np.random.Generator(np.random.MT19937(self._seed_sequence()))
            self._local.rng = rng
        return rng

    def _seed_sequence(self) -> np.random.SeedSequence:
        if self.seed is None:
            entropy = time.perf_counter_ns() + hash(threading.get_ident())
            return np.random.SeedSequence(abs(entropy))
        with self._lock:
            ordinal = self._threads
            self._threads += 1
        return np.random.SeedSequence(self.seed, spawn_key=(ordinal,))

    def uniform_int(self, low: int, high: int) -> int:
        """Integer drawn uniformly from the closed interval ``[low, high]``."""

        return int(self.generator().integers(low, high, endpoint=True))

    def uniform_real(self, low: float = 0.0, high: float = 1.0) -> float:
        """Real drawn uniformly from the half-open interval ``[low, high)``."""

        return float(self.generator().uniform(low, high))

    def normal_real(self, mu: float = 0.0, sigma: float = 1.0) -> float:
        """Real drawn from a normal distribution with mean ``mu``."""

        return float(self.generator().normal(mu, sigma))

    def uniform_grid(
        self, width: int, height: int, low: float = 0.0, high: float = 1.0
    ) -> Array:
        """``height x width`` array of uniform draws in ``[low, high)``."""

        return self.generator().uniform(low, high, size=(height, width))

    def normal_grid(
        self, width: int, height: int, mu: float = 0.0, sigma: float = 1.0
    ) -> Array:
        """``height x width`` array of normal draws."""

        return self.generator().normal(mu, sigma, size=(height, width))


_DEFAULT = RandomSource()


def default_source() -> RandomSource:
    return _DEFAULT


def seed(value: int | None) -> RandomSource:
    """Replace the default source; ``None`` restores clock seeding."""

    global _DEFAULT
    _DEFAULT = RandomSource(value)
    return _DEFAULT


def uniform_int(low: int, high: int) -> int:
    return _DEFAULT.uniform_int(low, high)


def uniform_real(low: float = 0.0, high: float = 1.0) -> float:
    return _DEFAULT.uniform_real(low, high)


def normal_real(mu: float = 0.0, sigma: float = 1.0) -> float:
    return _DEFAULT.normal_real(mu, sigma)


def uniform_grid(width: int, height: int, low: float = 0.0, high: float = 1.0) -> Array:
    return _DEFAULT.uniform_grid(width, height, low, high)


def normal_grid(width: int, height: int, mu: float = 0.0, sigma: float = 1.0) -> Array:
    return _DEFAULT.normal_grid(width, height, mu, sigma)


__all__ = [
    "RandomSource",
    "default_source",
    "normal_grid",
    "normal_real",
    "seed",
    "uniform_grid",
    "uniform_int",
    "uniform_real",
]
