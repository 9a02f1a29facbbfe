"""Audio mixing destination for collision sounds."""

from __future__ import annotations

import threading
import time
import wave
from pathlib import Path
from typing import Callable

import numpy as np


SAMPLE_RATE = 44100


def tone(
    frequency: float,
    duration: float = 0.09,
    amplitude: float = 0.25,
    sample_rate: int = SAMPLE_RATE,
) -> np.ndarray:
    """Return a sine blip with a linear fade-out."""
    n = int(duration * sample_rate)
    t = np.arange(n, dtype=np.float64) / sample_rate
    y = amplitude * np.sin(2.0 * np.pi * frequency * t)
    y *= np.linspace(1.0, 0.0, n)
    return y.astype(np.float32)


def write_wav(path: str | Path, samples: np.ndarray, sample_rate: int = SAMPLE_RATE) -> None:
    pcm = np.clip(np.asarray(samples, dtype=np.float64), -1.0, 1.0)
    data = (pcm * 32767.0).astype("<i2")
    with wave.open(str(path), "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(data.tobytes())


class AudioDestination:
    """Mono mixing bus: clips are stamped with wall time and mixed on demand.

    ``mixdown`` can run on the encoder thread while the UI keeps adding clips.
    """

    def __init__(
        self,
        sample_rate: int = SAMPLE_RATE,
        time_source: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.sample_rate = sample_rate
        self._now = time_source
        self._clips: list[tuple[float, np.ndarray]] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._clips)

    def now(self) -> float:
        return self._now()

    def play(self, samples: np.ndarray, at: float | None = None) -> None:
        clip = np.asarray(samples, dtype=np.float32).reshape(-1)
        if clip.size == 0:
            return
        start = self._now() if at is None else at
        with self._lock:
            self._clips.append((start, clip))

    def prune(self, before: float) -> None:
        """Drop clips that finished playing before ``before``."""
        with self._lock:
            self._clips = [
                (start, clip)
                for start, clip in self._clips
                if start + clip.size / self.sample_rate >= before
            ]

    def clear(self) -> None:
        with self._lock:
            self._clips = []

    def mixdown(self, start: float, end: float) -> np.ndarray:
        n = max(0, int(round((end - start) * self.sample_rate)))
        out = np.zeros(n, dtype=np.float32)
        with self._lock:
            clips = list(self._clips)
        for clip_start, clip in clips:
            offset = int(round((clip_start - start) * self.sample_rate))
            if offset >= n or offset + clip.size <= 0:
                continue
            src = max(0, -offset)
            dst = max(0, offset)
            length = min(clip.size - src, n - dst)
            out[dst:dst + length] += clip[src:src + length]
        np.clip(out, -1.0, 1.0, out=out)
        return out
