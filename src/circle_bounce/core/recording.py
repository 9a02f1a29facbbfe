"""Capture lifecycle for the rendered frames and audio."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Protocol, Sequence

import numpy as np


logger = logging.getLogger(__name__)

FrameSource = Callable[[], np.ndarray]


class RecordingState(Enum):
    INACTIVE = "inactive"
    CAPTURING = "capturing"
    FINALIZING = "finalizing"


@dataclass(frozen=True, slots=True)
class EncoderOptions:
    output_path: Path
    fps: float = 60.0
    crf: int = 18
    preset: str = "medium"


@dataclass(frozen=True, slots=True)
class MediaArtifact:
    path: Path
    frames_written: int
    duration: float
    mime_type: str = "video/mp4"


class AudioTrack(Protocol):
    sample_rate: int

    def mixdown(self, start: float, end: float) -> np.ndarray:
        """Return mono float PCM covering the wall-clock window [start, end)."""


class MediaEncoder(Protocol):
    @property
    def available(self) -> bool: ...

    @property
    def state(self) -> str:
        """One of "inactive", "recording", "stopping" or "error"."""

    def begin(
        self,
        frame_source: FrameSource,
        audio_tracks: Sequence[AudioTrack],
        options: EncoderOptions,
    ) -> None: ...

    def push_frame(self) -> None: ...

    def finish(self, callback: Callable[[MediaArtifact | None], None]) -> None:
        """Flush queued frames and call ``callback`` once with the result."""


class RecordingController:
    """Best-effort capture: misuse and missing encoders are logged, not raised.

    ``on_complete`` fires once for every accepted ``stop_capture``. When the
    encoder produced nothing the artifact is empty: ``frames_written`` is 0
    and no file is guaranteed at ``path``.
    """

    def __init__(
        self,
        encoder: MediaEncoder | None,
        frame_source: FrameSource,
        options_factory: Callable[[], EncoderOptions],
    ) -> None:
        self._encoder = encoder
        self._frame_source = frame_source
        self._options_factory = options_factory
        self._on_complete: Callable[[MediaArtifact], None] | None = None
        self._options: EncoderOptions | None = None
        self.state = RecordingState.INACTIVE

    @property
    def is_capturing(self) -> bool:
        return self.state is RecordingState.CAPTURING

    def start_capture(
        self,
        on_complete: Callable[[MediaArtifact], None] | None = None,
        audio_stream: AudioTrack | None = None,
    ) -> bool:
        if self.state is not RecordingState.INACTIVE:
            logger.debug("start_capture ignored in state %s", self.state.value)
            return False
        encoder = self._encoder
        if encoder is None or not encoder.available:
            logger.info("start_capture ignored: encoder unavailable")
            return False
        if encoder.state not in ("inactive", "error"):
            logger.info("start_capture ignored: encoder busy (%s)", encoder.state)
            return False

        tracks = [audio_stream] if audio_stream is not None else []
        options = self._options_factory()
        encoder.begin(self._frame_source, tracks, options)
        if encoder.state != "recording":
            logger.warning("encoder did not start recording to %s", options.output_path)
            return False

        self._on_complete = on_complete
        self._options = options
        self.state = RecordingState.CAPTURING
        logger.info("capture started: %s", options.output_path)
        return True

    def capture_frame(self) -> None:
        if self.state is RecordingState.CAPTURING and self._encoder is not None:
            self._encoder.push_frame()

    def stop_capture(self) -> bool:
        if self.state is not RecordingState.CAPTURING or self._encoder is None:
            logger.debug("stop_capture ignored in state %s", self.state.value)
            return False
        if self._encoder.state != "recording":
            logger.warning("encoder left the recording state; dropping capture")
            self._on_complete = None
            self._options = None
            self.state = RecordingState.INACTIVE
            return False
        self.state = RecordingState.FINALIZING
        self._encoder.finish(self._finished)
        return True

    def _finished(self, artifact: MediaArtifact | None) -> None:
        on_complete = self._on_complete
        options = self._options
        self._on_complete = None
        self._options = None
        self.state = RecordingState.INACTIVE
        if artifact is None:
            logger.warning("capture finished without a media file")
            path = options.output_path if options is not None else Path()
            artifact = MediaArtifact(path=path, frames_written=0, duration=0.0)
        else:
            logger.info("capture finished: %s (%d frames)", artifact.path, artifact.frames_written)
        if on_complete is not None:
            on_complete(artifact)
