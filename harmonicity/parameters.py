"""User-facing synthesizer parameters."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from harmonicity.voice import OSCILLATORS_COUNT
from harmonicity.waveform import Waveform


def _round_half_away(x: float) -> float:
    return math.copysign(math.floor(abs(x) + 0.5), x)


def skew_factor(exponent: float) -> float:
    """Skew factor for a skewed range: two raised to ``exponent``."""
    return 2.0 ** exponent


@dataclass
class FloatParam:
    """Continuous parameter with a bounded, optionally skewed range."""

    name: str
    default: float
    minimum: float
    maximum: float
    factor: float = 1.0
    step_size: float | None = None
    unit: str = ""
    value: float = field(init=False)

    def __post_init__(self) -> None:
        if self.minimum > self.maximum:
            raise ValueError(f"{self.name}: minimum exceeds maximum")
        self.value = self.default

    def set_value(self, value: float) -> None:
        """Set the plain value, snapped to the step size and clamped to range."""
        if self.step_size:
            value = _round_half_away(value / self.step_size) * self.step_size
        self.value = min(max(value, self.minimum), self.maximum)


def time_parameter(name: str, default: float, minimum: float, maximum: float) -> FloatParam:
    """Millisecond time parameter with a skewed range."""
    return FloatParam(
        name,
        default,
        minimum,
        maximum,
        factor=skew_factor(-1.0),
        step_size=0.1,
        unit=" ms",
    )


def sustain_parameter(name: str, default: float) -> FloatParam:
    """Linear level parameter between 0 and 1."""
    return FloatParam(name, default, 0.0, 1.0, step_size=0.05, unit=" %")


@dataclass
class EnvelopeParams:
    """ADSR envelope settings."""

    attack_time: FloatParam = field(
        default_factory=lambda: time_parameter("Attack", 25.0, 0.0, 2000.0)
    )
    decay_time: FloatParam = field(
        default_factory=lambda: time_parameter("Decay", 15.0, 0.0, 2000.0)
    )
    sustain_level: FloatParam = field(
        default_factory=lambda: sustain_parameter("Sustain", 0.85)
    )
    release_time: FloatParam = field(
        default_factory=lambda: time_parameter("Release", 10.0, 0.0, 2000.0)
    )


@dataclass
class OscillatorParams:
    """Settings for one oscillator."""

    waveform: Waveform = Waveform.SINE


@dataclass
class SynthParameters:
    """All synthesizer parameters."""

    envelope: EnvelopeParams = field(default_factory=EnvelopeParams)
    oscillator: tuple[OscillatorParams, ...] = field(
        default_factory=lambda: tuple(OscillatorParams() for _ in range(OSCILLATORS_COUNT))
    )