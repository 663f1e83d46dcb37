"""
Seeded Alea pseudo-random generator.

Johannes Baagøe's Alea algorithm, the same generator shipped with the
seedrandom family of JavaScript libraries. Identical seeds always produce
identical sequences, which is what makes map generation reproducible.
"""

from typing import Iterable, Union

Seed = Union[str, int, float, Iterable]

_TWO_POW_32 = 0x100000000  # 2^32
_TWO_POW_NEG_32 = 2.3283064365386963e-10  # 2^-32


def _uint32(n):
    """Truncate to an unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


class _Mash:
    """String hash used to spread seed material over the generator state."""

    def __init__(self):
        self.n = 0xEFC8249D

    def __call__(self, data) -> float:
        for char in str(data):
            self.n += ord(char)
            h = 0.02519603282416938 * self.n
            self.n = _uint32(h)
            h -= self.n
            h *= self.n
            self.n = _uint32(h)
            h -= self.n
            self.n += h * _TWO_POW_32
        return _uint32(self.n) * _TWO_POW_NEG_32


class AleaPRNG:
    """Alea generator with three lagged state words and a carry."""

    def __init__(self, seed: Seed):
        if hasattr(seed, "__iter__") and not isinstance(seed, str):
            args = list(seed)
        else:
            args = [seed]

        mash = _Mash()
        self.s0 = mash(" ")
        self.s1 = mash(" ")
        self.s2 = mash(" ")
        self.c = 1
        self.draws = 0

        for arg in args:
            self.s0 = self._fold(self.s0 - mash(arg))
            self.s1 = self._fold(self.s1 - mash(arg))
            self.s2 = self._fold(self.s2 - mash(arg))

    @staticmethod
    def _fold(value: float) -> float:
        return value + 1 if value < 0 else value

    def random(self) -> float:
        """Next number in [0, 1)."""
        self.draws += 1
        t = 2091639 * self.s0 + self.c * _TWO_POW_NEG_32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def uniform(self, low: float, high: float) -> float:
        """Next number in [low, high)."""
        return self.random() * (high - low) + low
