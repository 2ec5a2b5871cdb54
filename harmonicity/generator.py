"""Deterministic random source for oscillator start phases."""

from __future__ import annotations

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF
_MULTIPLIER = 6364136223846793005

SEED_STATE = 420
SEED_STREAM = 1337


class Pcg32:
    """PCG XSH-RR generator with 64-bit state and 32-bit output."""

    def __init__(self, state: int, stream: int) -> None:
        self._increment = ((stream << 1) | 1) & _MASK64
        self._state = (state + self._increment) & _MASK64
        self._step()

    def _step(self) -> None:
        self._state = (self._state * _MULTIPLIER + self._increment) & _MASK64

    def next_u32(self) -> int:
        """Next 32-bit unsigned output."""
        state = self._state
        self._step()
        rotation = state >> 59
        shifted = (((state >> 18) ^ state) >> 27) & _MASK32
        return ((shifted >> rotation) | (shifted << ((-rotation) & 31))) & _MASK32

    def next_f32(self) -> float:
        """Uniform float in ``[0, 1)`` with 24 bits of precision."""
        return (self.next_u32() >> 8) * (1.0 / (1 << 24))


class Generator:
    """Seeded uniform random numbers that can be rewound to the start."""

    def __init__(self) -> None:
        self._pcg = Pcg32(SEED_STATE, SEED_STREAM)

    def reset(self) -> None:
        """Restart the sequence from the fixed seed."""
        self._pcg = Pcg32(SEED_STATE, SEED_STREAM)

    def random(self) -> float:
        """Next uniform float in ``[0, 1)``."""
        return self._pcg.next_f32()