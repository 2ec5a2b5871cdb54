import pytest

from harmonicity.synthesizer import (
    MAX_VOICES,
    Choke,
    NoteOff,
    NoteOn,
    Synthesizer,
    VoiceTerminated,
)

RATE = 48000.0


def test_silence_without_events():
    synth = Synthesizer()
    output, sent = synth.process([], 200, RATE)
    assert output == [0.0] * 200
    assert sent == []


def test_note_on_produces_sound_after_its_timing():
    synth = Synthesizer()
    output, sent = synth.process([NoteOn(30, None, 0, 60, 1.0)], 300, RATE)
    assert len(output) == 300
    assert all(sample == 0.0 for sample in output[:30])
    assert any(sample != 0.0 for sample in output[30:])
    assert sent == []


def test_single_voice_amplitude_is_bounded():
    synth = Synthesizer()
    output, _ = synth.process([NoteOn(0, None, 0, 69, 1.0)], 4800, RATE)
    assert max(abs(sample) for sample in output) <= 0.9 + 1e-9


def test_zero_velocity_is_silent():
    synth = Synthesizer()
    output, _ = synth.process([NoteOn(0, None, 0, 60, 0.0)], 128, RATE)
    assert all(sample == 0.0 for sample in output)


def test_choke_terminates_voice_at_event_timing():
    synth = Synthesizer()
    events = [NoteOn(0, 7, 2, 64, 1.0), Choke(10, 7, 2, 64)]
    output, sent = synth.process(events, 100, RATE)
    assert sent == [VoiceTerminated(timing=10, voice_id=7, channel=2, note=64)]
    assert all(sample == 0.0 for sample in output[10:])
    assert synth.voices == [None] * MAX_VOICES


def test_choke_of_other_note_keeps_voice():
    synth = Synthesizer()
    events = [NoteOn(0, 1, 0, 60, 1.0), Choke(5, 2, 0, 61)]
    output, sent = synth.process(events, 100, RATE)
    assert sent == []
    assert any(sample != 0.0 for sample in output[5:])


def test_voice_id_defaults_to_source_id():
    synth = Synthesizer()
    events = [NoteOn(0, None, 1, 60, 1.0), Choke(0, None, 1, 60)]
    _, sent = synth.process(events, 10, RATE)
    assert [event.voice_id for event in sent] == [60 | (1 << 16)]


def test_voice_stealing_terminates_oldest():
    synth = Synthesizer()
    events = [NoteOn(0, None, 0, 40 + i, 1.0) for i in range(MAX_VOICES + 1)]
    _, sent = synth.process(events, 10, RATE)
    assert len(sent) == 1
    assert sent[0].note == 40
    assert sent[0].timing == 0
    notes = sorted(voice.note.number for voice in synth.voices)
    assert notes == list(range(41, 41 + MAX_VOICES))


def test_note_off_releases_and_terminates_voice():
    synth = Synthesizer()
    events = [NoteOn(0, None, 0, 60, 1.0), NoteOff(100, None, 0, 60)]
    output, sent = synth.process(events, 4800, RATE)
    assert len(sent) == 1
    terminated = sent[0]
    assert (terminated.channel, terminated.note) == (0, 60)
    assert terminated.timing > 100
    assert all(sample == 0.0 for sample in output[terminated.timing:])
    assert all(voice is None for voice in synth.voices)


def test_note_off_without_matching_voice_changes_nothing():
    plain = Synthesizer()
    expected, _ = plain.process([NoteOn(0, None, 0, 60, 1.0)], 256, RATE)
    synth = Synthesizer()
    output, sent = synth.process(
        [NoteOn(0, None, 0, 60, 1.0), NoteOff(20, None, 3, 72)], 256, RATE
    )
    assert output == expected
    assert sent == []


def test_reset_makes_rendering_reproducible():
    synth = Synthesizer()
    events = [NoteOn(0, None, 0, 60, 0.8), NoteOn(50, None, 0, 67, 0.5)]
    first, _ = synth.process(events, 500, RATE)
    synth.reset()
    assert synth.next_voice_age == 0
    assert synth.voices == [None] * MAX_VOICES
    second, _ = synth.process(events, 500, RATE)
    assert first == second


def test_events_past_buffer_are_not_applied():
    synth = Synthesizer()
    output, sent = synth.process([NoteOn(500, None, 0, 60, 1.0)], 100, RATE)
    assert output == [0.0] * 100
    assert all(voice is None for voice in synth.voices)


@pytest.mark.parametrize("count", [1, 63, 64, 65, 129])
def test_output_length_matches_request(count):
    synth = Synthesizer()
    output, _ = synth.process([NoteOn(0, None, 0, 60, 1.0)], count, RATE)
    assert len(output) == count


def test_voice_ages_increase():
    synth = Synthesizer()
    synth.process([NoteOn(0, None, 0, 60, 1.0), NoteOn(0, None, 0, 62, 1.0)], 10, RATE)
    ages = sorted(voice.age for voice in synth.voices if voice is not None)
    assert ages == [0, 1]
    assert synth.next_voice_age == 2