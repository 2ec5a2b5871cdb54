"""Periodic waveforms evaluated over one normalised cycle."""

from __future__ import annotations

import math
from enum import Enum


def sine(x: float) -> float:
    """Sine wave over the cycle position ``x`` in ``[0, 1)``."""
    return math.sin(math.tau * x)


def square(x: float) -> float:
    """Square wave: high for the first half of the cycle, low for the second."""
    return 1.0 if x < 0.5 else -1.0


def triangle(x: float) -> float:
    """Triangle wave peaking at both cycle ends and bottoming out at the middle."""
    return 2.0 * abs(2.0 * x - 1.0) - 1.0


def sawtooth(x: float) -> float:
    """Rising ramp from -1 to 1 over the cycle."""
    return 2.0 * x - 1.0


class Waveform(Enum):
    """Oscillator wave shapes."""

    SINE = "Sine"
    SQUARE = "Square"
    TRIANGLE = "Triangle"
    SAWTOOTH = "Sawtooth"

    def evaluate(self, x: float) -> float:
        """Value of the waveform at cycle position ``x``."""
        return _SHAPES[self](x)

    def to_index(self) -> int:
        """Stable parameter index of this waveform."""
        return _INDICES[self]

    @classmethod
    def from_index(cls, index: int) -> Waveform:
        """Waveform stored under a parameter index."""
        for waveform, waveform_index in _INDICES.items():
            if waveform_index == index:
                return waveform
        raise ValueError(f"unexpected waveform index: {index}")


_SHAPES = {
    Waveform.SINE: sine,
    Waveform.SQUARE: square,
    Waveform.TRIANGLE: triangle,
    Waveform.SAWTOOTH: sawtooth,
}

_INDICES = {
    Waveform.SINE: 0,
    Waveform.SAWTOOTH: 1,
    Waveform.SQUARE: 2,
    Waveform.TRIANGLE: 3,
}


def variants() -> tuple[str, ...]:
    """Display names of the waveform choices, in menu order."""
    return ("Sine", "Square", "Triangle", "Sawtooth")