"""Tone engine tests; synthesis only, no audio device is opened."""

import numpy as np
import pytest

from tone import MAX_VOICES, SoundEngine, WAVE_KINDS, calculate_frequency, waveform


def test_frequency_mapping_is_linear():
    assert calculate_frequency(100, 0) == 20.0
    assert calculate_frequency(100, 50) == pytest.approx(3010.0)
    assert calculate_frequency(100, 100) == pytest.approx(6000.0)
    assert calculate_frequency(10, 3) < calculate_frequency(10, 4)


@pytest.mark.parametrize("kind", WAVE_KINDS)
def test_waveforms_are_unit_amplitude(kind):
    wave = waveform(kind, np.linspace(0, 1, 200, endpoint=False))
    assert wave.max() <= 1.0 + 1e-9
    assert wave.min() >= -1.0 - 1e-9
    assert wave.max() - wave.min() > 1.5


def test_unknown_wave_kind():
    with pytest.raises(ValueError):
        waveform("noise", np.zeros(4))
    with pytest.raises(ValueError):
        SoundEngine().play(10, 4, [1], "noise")


def test_play_produces_sound():
    engine = SoundEngine()
    engine.play(100, 10, [5], "sine")
    chunk = engine._gen_chunk()
    assert chunk.shape == (engine.chunk_size,)
    assert np.any(chunk != 0.0)
    assert np.all(np.abs(chunk) <= 1.0)


def test_next_play_displaces_ringing_tones():
    engine = SoundEngine()
    engine.play(100, 10, [5, 7], "square")
    engine._gen_chunk()
    engine.play(100, 10, [], "square")
    engine._gen_chunk()
    assert engine._oscs == []
    assert not np.any(engine._gen_chunk())


def test_tones_end_after_their_duration():
    engine = SoundEngine()
    engine.play(5, 10, [1], "triangle")
    engine._gen_chunk()
    assert engine._oscs == []


def test_voice_cap():
    engine = SoundEngine()
    engine.play(50, 200, range(100), "sawtooth")
    assert len(engine._oscs) == MAX_VOICES


def test_envelope_rises_holds_and_falls():
    from tone import _Osc, _envelope

    osc = _Osc(440.0, "sine", max_age=100, attack=10, release=20)
    env = _envelope(osc, np.arange(120, dtype=np.float64))
    assert env[0] == 0.0
    assert np.all(np.diff(env[:10]) > 0)
    assert np.all(env[10:80] == 1.0)
    assert np.all(np.diff(env[80:100]) <= 0)
    assert np.all(env[100:] == 0.0)
