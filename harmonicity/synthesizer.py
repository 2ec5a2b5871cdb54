"""Polyphonic synthesizer: note events in, mono audio blocks out."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Union

from harmonicity.generator import Generator
from harmonicity.oscillator import Oscillator
from harmonicity.parameters import SynthParameters
from harmonicity.voice import Envelope, MidiNote, Voice

logger = logging.getLogger(__name__)

MAX_VOICES = 16
MAX_BLOCK_SIZE = 64
OSCILLATOR_GAIN = 0.3


@dataclass(frozen=True)
class NoteOn:
    """A key press at sample offset ``timing``."""

    timing: int
    voice_id: int | None
    channel: int
    note: int
    velocity: float


@dataclass(frozen=True)
class NoteOff:
    """A key release at sample offset ``timing``."""

    timing: int
    voice_id: int | None
    channel: int
    note: int
    velocity: float = 0.0


@dataclass(frozen=True)
class Choke:
    """Immediate silencing of a matching voice at sample offset ``timing``."""

    timing: int
    voice_id: int | None
    channel: int
    note: int


@dataclass(frozen=True)
class VoiceTerminated:
    """Notification that a voice has stopped sounding."""

    timing: int
    voice_id: int | None
    channel: int
    note: int


NoteEvent = Union[NoteOn, NoteOff, Choke, VoiceTerminated]


class Synthesizer:
    """Fixed-size voice pool rendered in blocks split at event boundaries."""

    def __init__(self, params: SynthParameters | None = None) -> None:
        self.params = params if params is not None else SynthParameters()
        self.voices: list[Voice | None] = [None] * MAX_VOICES
        self.next_voice_age = 0
        self.phase_generator = Generator()

    def reset(self) -> None:
        """Drop all voices and rewind the phase generator and voice ages."""
        self.phase_generator.reset()
        self.voices = [None] * MAX_VOICES
        self.next_voice_age = 0

    def process(
        self,
        events: Iterable[NoteEvent],
        samples_count: int,
        sample_rate: float,
    ) -> tuple[list[float], list[VoiceTerminated]]:
        """Render ``samples_count`` samples, applying time-ordered ``events``.

        Returns the rendered samples and the voice-termination notifications
        produced while rendering. Events timed at or past ``samples_count``
        are not applied.
        """
        output = [0.0] * samples_count
        sent: list[VoiceTerminated] = []
        pending = iter(events)
        next_event = next(pending, None)

        block_start = 0
        block_end = min(MAX_BLOCK_SIZE, samples_count)
        while block_start < samples_count:
            while next_event is not None:
                if next_event.timing <= block_start:
                    logger.debug("got event %r", next_event)
                    self._process_event(next_event, sample_rate, sent)
                    next_event = next(pending, None)
                    continue
                if next_event.timing < block_end:
                    block_end = next_event.timing
                break
            self._render(output, block_start, block_end)
            self._update_envelopes()
            self._clean_released_voices(block_end, sent)
            block_start = block_end
            block_end = min(block_start + MAX_BLOCK_SIZE, samples_count)

        return output, sent

    def _process_event(
        self, event: NoteEvent, sample_rate: float, sent: list[VoiceTerminated]
    ) -> None:
        match event:
            case NoteOn():
                self._start_voice(event, sample_rate, sent)
            case NoteOff():
                self._release_voice(event.voice_id, event.note, event.channel)
            case Choke():
                for index, voice in enumerate(self.voices):
                    if voice is not None and voice.choke(
                        event.voice_id, event.channel, event.note
                    ):
                        self._terminate_voice(index, event.timing, sent)
            case _:
                logger.debug("unhandled event")

    def _start_voice(
        self, event: NoteOn, sample_rate: float, sent: list[VoiceTerminated]
    ) -> None:
        logger.debug("start voice for %s:%s", event.channel, event.note)
        voice = self._make_voice(
            sample_rate, event.voice_id, event.channel, event.note, event.velocity
        )
        for index, slot in enumerate(self.voices):
            if slot is None:
                logger.debug("voice at %s", index)
                self.voices[index] = voice
                return

        oldest = min(range(len(self.voices)), key=lambda i: self.voices[i].age)
        logger.debug("stealing voice with %r", self.voices[oldest].note)
        self._terminate_voice(oldest, event.timing, sent)
        self.voices[oldest] = voice

    def _make_voice(
        self,
        sample_rate: float,
        voice_id: int | None,
        channel: int,
        note: int,
        velocity: float,
    ) -> Voice:
        midi_note = MidiNote(channel=channel, number=note, velocity=math.sqrt(velocity))
        env = self.params.envelope
        envelope = Envelope(
            start_level=0.0,
            attack_time=env.attack_time.value,
            decay_time=env.decay_time.value,
            sustain_level=env.sustain_level.value,
            release_time=env.release_time.value,
        )
        if voice_id is None:
            voice_id = midi_note.source_id()
        age = self._next_age()
        phase_delta = midi_note.frequency() / sample_rate
        oscillators = [
            Oscillator(
                waveform=param.waveform,
                gain=OSCILLATOR_GAIN,
                phase=self.phase_generator.random(),
                phase_delta=phase_delta,
            )
            for param in self.params.oscillator
        ]
        return Voice(sample_rate, voice_id, age, midi_note, oscillators, envelope)

    def _release_voice(self, voice_id: int | None, note: int, channel: int) -> None:
        for voice in self.voices:
            if voice is not None:
                voice.release_note(voice_id, channel, note)

    def _next_age(self) -> int:
        age = self.next_voice_age
        self.next_voice_age += 1
        return age

    def _update_envelopes(self) -> None:
        for voice in self.voices:
            if voice is not None:
                voice.update_envelope()

    def _clean_released_voices(self, timing: int, sent: list[VoiceTerminated]) -> None:
        for index, voice in enumerate(self.voices):
            if voice is not None and voice.is_deaf:
                self._terminate_voice(index, timing, sent)

    def _terminate_voice(
        self, index: int, timing: int, sent: list[VoiceTerminated]
    ) -> None:
        voice = self.voices[index]
        note = voice.note
        logger.debug("terminating voice with %s:%s", note.channel, note.number)
        sent.append(
            VoiceTerminated(
                timing=timing,
                voice_id=voice.voice_id,
                channel=note.channel,
                note=note.number,
            )
        )
        self.voices[index] = None

    def _render(self, output: list[float], block_start: int, block_end: int) -> None:
        for index in range(block_start, block_end):
            output[index] = 0.0
        for voice in self.voices:
            if voice is None:
                continue
            for index in range(block_start, block_end):
                output[index] += voice.next_sample()