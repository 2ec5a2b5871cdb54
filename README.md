# harmonicity

A compact polyphonic synthesizer engine in pure Python. Each voice mixes three
oscillators (sine, square, triangle or sawtooth) and shapes them with an
exponential attack/decay/sustain/release envelope. Up to sixteen voices sound at
once. When all of them are busy, the oldest one is stolen.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Usage

Give the synthesizer note events in time order and ask it to render a number of
mono samples at a sample rate:

```python
from harmonicity.synthesizer import Synthesizer, NoteOn, NoteOff

synth = Synthesizer()

events = [
    NoteOn(timing=0, voice_id=None, channel=0, note=69, velocity=1.0),
    NoteOff(timing=256, voice_id=None, channel=0, note=69),
]
samples, terminated = synth.process(events, 512, 44100.0)
```

`process` returns two things:

- a list of `samples_count` floats;
- the `VoiceTerminated` events sent when a voice finishes its release, is stolen
  or is choked.

Each event's `timing` is a sample offset inside the call. Rendering is split at
event boundaries and into blocks of at most 64 samples. Events timed at or
beyond `samples_count` are not applied.

A `Choke` event silences a matching voice at once. A voice matches when its
voice id equals the event's `voice_id`, or when its channel and note equal the
event's. When `voice_id` is `None`, a new voice takes its id from the note
number and channel. The voice's loudness scales with the square root of the
velocity.

Envelope times (in milliseconds) and oscillator waveforms are kept in
`synth.params`:

```python
from harmonicity.waveform import Waveform

synth.params.envelope.attack_time.set_value(5.0)
synth.params.envelope.sustain_level.set_value(0.6)
synth.params.oscillator[1].waveform = Waveform.SAWTOOTH
```

`FloatParam.set_value` snaps the value to the parameter's step size. It then
clamps the value to the parameter's range.

`synth.reset()` drops every voice, resets voice ages and restarts the random
oscillator start phases from their fixed seed. After a reset, rendering is
reproducible.

## Building blocks

- `harmonicity.waveform`:
  - the `Waveform` enum, with `evaluate`, `to_index` and `from_index`;
  - `variants()`;
  - the raw `sine`, `square`, `triangle` and `sawtooth` functions over a phase
    in `[0, 1)`.
- `harmonicity.generator`: a seeded PCG32 random source (`Pcg32`, `Generator`).
- `harmonicity.oscillator`: a phase-accumulating `Oscillator`.
- `harmonicity.parameters`:
  - `FloatParam`;
  - `time_parameter` and `sustain_parameter`;
  - the `EnvelopeParams`, `OscillatorParams` and `SynthParameters` groups.
- `harmonicity.voice`: `Voice`, its `Envelope` and `MidiNote`, `VoiceState`,
  `midi_note_to_freq`, and the exponential `Smoother` that drives the envelope.
- `harmonicity.synthesizer`: `Synthesizer` and the `NoteOn`, `NoteOff`,
  `Choke` and `VoiceTerminated` events.

## What it does not do

This package only computes samples. It does not:

- play sound on an audio device or write audio files;
- read MIDI ports or MIDI files;
- run inside a plugin host;
- provide a command-line program or a user interface.