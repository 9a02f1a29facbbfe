from __future__ import annotations

import wave
from pathlib import Path

import numpy as np
import pytest

from circle_bounce.app.audio import AudioDestination, tone, write_wav


def test_tone_length_and_fade() -> None:
    samples = tone(440.0, duration=0.1, sample_rate=8000)
    assert samples.dtype == np.float32
    assert samples.shape == (800,)
    assert np.max(np.abs(samples)) <= 0.25 + 1e-6
    assert abs(samples[-1]) < 1e-6


def test_mixdown_places_clips_at_their_time(fake_time) -> None:
    dest = AudioDestination(sample_rate=100, time_source=fake_time)
    fake_time.advance(1.0)
    dest.play(np.full(10, 0.5, dtype=np.float32))
    fake_time.advance(0.05)
    dest.play(np.full(10, 0.25, dtype=np.float32))

    mix = dest.mixdown(0.9, 1.2)
    assert mix.shape == (30,)
    assert np.allclose(mix[:10], 0.0)
    assert np.allclose(mix[10:15], 0.5)
    assert np.allclose(mix[15:20], 0.75)
    assert np.allclose(mix[20:25], 0.25)
    assert np.allclose(mix[25:], 0.0)


def test_mixdown_clips_and_trims_partial_overlap(fake_time) -> None:
    dest = AudioDestination(sample_rate=100, time_source=fake_time)
    dest.play(np.full(20, 0.8, dtype=np.float32), at=0.0)
    dest.play(np.full(20, 0.8, dtype=np.float32), at=0.0)
    mix = dest.mixdown(0.1, 0.3)
    assert mix.shape == (20,)
    assert np.allclose(mix[:10], 1.0)
    assert np.allclose(mix[10:], 0.0)


def test_prune_and_clear(fake_time) -> None:
    dest = AudioDestination(sample_rate=100, time_source=fake_time)
    dest.play(np.ones(10), at=0.0)
    dest.play(np.ones(10), at=5.0)
    dest.prune(1.0)
    assert len(dest) == 1
    dest.clear()
    assert len(dest) == 0


def test_empty_clip_ignored(fake_time) -> None:
    dest = AudioDestination(time_source=fake_time)
    dest.play(np.zeros(0))
    assert len(dest) == 0


def test_write_wav(tmp_path: Path) -> None:
    path = tmp_path / "mix.wav"
    write_wav(path, np.array([0.0, 0.5, -1.0, 2.0]), sample_rate=8000)
    with wave.open(str(path), "rb") as wf:
        assert wf.getnchannels() == 1
        assert wf.getsampwidth() == 2
        assert wf.getframerate() == 8000
        data = np.frombuffer(wf.readframes(4), dtype="<i2")
    assert data.tolist() == [0, int(0.5 * 32767), -32767, 32767]
    assert data[1] == pytest.approx(16383)
