"""Phase-accumulating oscillator."""

from __future__ import annotations

from dataclasses import dataclass

from harmonicity.waveform import Waveform


@dataclass
class Oscillator:
    """Produces a waveform at a fixed per-sample phase increment."""

    waveform: Waveform = Waveform.SINE
    gain: float = 0.0
    phase: float = 0.0
    phase_delta: float = 0.0

    def next_sample(self) -> float:
        """Current sample scaled by gain; advances the phase by one step."""
        sample = self.waveform.evaluate(self.phase)
        self.phase += self.phase_delta
        if self.phase >= 1.0:
            self.phase -= 1.0
        return sample * self.gain