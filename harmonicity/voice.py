"""A single sounding note: oscillators shaped by an ADSR envelope."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import Sequence

from harmonicity.oscillator import Oscillator

logger = logging.getLogger(__name__)

TOL = 1e-10
ENVELOPE_ATTACK_LEVEL = 1.0
OSCILLATORS_COUNT = 3


def midi_note_to_freq(note: int) -> float:
    """Equal-tempered frequency in Hz of a MIDI note, A4 (69) at 440 Hz."""
    return 2.0 ** ((note - 69.0) / 12.0) * 440.0


class VoiceState(Enum):
    """Envelope stage of a voice."""

    ATTACK = auto()
    DECAY = auto()
    SUSTAIN = auto()
    RELEASE = auto()
    DEAF = auto()


@dataclass
class Envelope:
    """ADSR envelope settings; times in milliseconds."""

    start_level: float
    attack_time: float
    decay_time: float
    sustain_level: float
    release_time: float


@dataclass
class MidiNote:
    """A note number on a channel with its velocity."""

    channel: int
    number: int
    velocity: float

    def source_id(self) -> int:
        """Voice id derived from note and channel."""
        return self.number | (self.channel << 16)

    def is_matches(self, channel: int, note: int) -> bool:
        """Whether this is the given note on the given channel."""
        return self.channel == channel and self.number == note

    def frequency(self) -> float:
        """Frequency of the note in Hz."""
        return midi_note_to_freq(self.number)


class Smoother:
    """Exponential glide toward a target value over a set time."""

    def __init__(self) -> None:
        self.current = 0.0
        self.target = 0.0
        self.time_ms = 0.0
        self._steps_left = 0
        self._step_size = 0.0

    @property
    def steps_left(self) -> int:
        return self._steps_left

    def reset(self, value: float) -> None:
        """Jump straight to ``value`` with no glide pending."""
        self.current = value
        self.target = value
        self._steps_left = 0

    def set_target(self, sample_rate: float, target: float, time_ms: float) -> None:
        """Start gliding to ``target``, arriving after ``time_ms`` milliseconds."""
        self.time_ms = time_ms
        self.target = target
        steps = max(0, int(math.floor(sample_rate * time_ms / 1000.0 + 0.5)))
        self._steps_left = steps
        # Reaches 99.99% of the target after the given number of steps.
        self._step_size = 0.0001 ** (1.0 / steps) if steps > 0 else 0.0

    def next(self) -> float:
        """Advance one sample and return the new value."""
        if self._steps_left > 0:
            self._steps_left -= 1
            if self._steps_left == 0:
                self.current = self.target
            else:
                self.current = (
                    self.current * self._step_size + self.target * (1.0 - self._step_size)
                )
            return self.current
        self.current = self.target
        return self.target


class Voice:
    """Sum of oscillators for one note, shaped by its amplitude envelope."""

    def __init__(
        self,
        sample_rate: float,
        voice_id: int,
        age: int,
        note: MidiNote,
        oscillators: Sequence[Oscillator],
        envelope: Envelope,
    ) -> None:
        self.sample_rate = sample_rate
        self.voice_id = voice_id
        self.age = age
        self.note = note
        self.oscillators = list(oscillators)
        self.envelope = envelope
        self.state = VoiceState.ATTACK
        self.amp_envelope = Smoother()
        self.amp_envelope.reset(envelope.start_level)
        self._glide(envelope.attack_time, ENVELOPE_ATTACK_LEVEL)

    @property
    def is_deaf(self) -> bool:
        return self.state is VoiceState.DEAF

    def next_sample(self) -> float:
        """Next output sample; silence once the voice has finished."""
        if self.is_deaf:
            return 0.0
        sample = sum(osc.next_sample() for osc in self.oscillators)
        return sample * self.amp_envelope.next() * self.note.velocity

    def choke(self, voice_id: int | None, channel: int, note: int) -> bool:
        """Silence the voice at once if it matches; report whether it did."""
        if not self._is_relevant(voice_id, channel, note):
            return False
        logger.debug("choke %s %s", channel, note)
        self.state = VoiceState.DEAF
        return True

    def release_note(self, voice_id: int | None, channel: int, note: int) -> None:
        """Enter the release stage if the voice matches."""
        if not self._is_relevant(voice_id, channel, note):
            return
        logger.debug("%s %s releasing", channel, note)
        self.state = VoiceState.RELEASE
        self._glide(self.envelope.release_time, 0.0)

    def update_envelope(self) -> None:
        """Move to the next envelope stage once the current one has finished."""
        amp = self.amp_envelope.current
        if self.state is VoiceState.ATTACK and abs(amp - ENVELOPE_ATTACK_LEVEL) < TOL:
            logger.debug("attack -> decay")
            self.state = VoiceState.DECAY
            self._glide(self.envelope.decay_time, self.envelope.sustain_level)
        elif self.state is VoiceState.DECAY and abs(amp - self.envelope.sustain_level) < TOL:
            logger.debug("decay -> sustain")
            self.state = VoiceState.SUSTAIN
        elif self.state is VoiceState.RELEASE and abs(amp) < TOL:
            logger.debug("release -> deaf")
            self.state = VoiceState.DEAF

    def _is_relevant(self, voice_id: int | None, channel: int, note: int) -> bool:
        return voice_id == self.voice_id or self.note.is_matches(channel, note)

    def _glide(self, time_ms: float, target: float) -> None:
        self.amp_envelope.set_target(self.sample_rate, target, time_ms)