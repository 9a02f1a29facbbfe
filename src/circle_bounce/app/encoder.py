"""ffmpeg-backed media encoder fed from the UI thread."""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from pathlib import Path
from queue import Queue
from threading import Thread
from typing import Callable, Sequence

import numpy as np

from ..core.recording import AudioTrack, EncoderOptions, FrameSource, MediaArtifact
from .audio import write_wav


logger = logging.getLogger(__name__)

Dispatch = Callable[[Callable[[], None]], None]


def _call_now(fn: Callable[[], None]) -> None:
    fn()


class FfmpegEncoder:
    """Pipes raw RGBA frames into ffmpeg on a worker thread.

    ``finish`` returns immediately; the completion callback is handed to
    ``dispatch`` once every queued frame has been written and audio muxed.
    States: "inactive", "recording", "stopping" and "error". A failed
    ``begin`` leaves "error" behind, and the next ``begin`` may retry.
    """

    def __init__(
        self,
        executable: str = "ffmpeg",
        dispatch: Dispatch | None = None,
        time_source: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._executable = executable
        self._dispatch = dispatch or _call_now
        self._now = time_source
        self._state = "inactive"
        self._frame_source: FrameSource | None = None
        self._audio_tracks: list[AudioTrack] = []
        self._options: EncoderOptions | None = None
        self._queue: Queue[np.ndarray | None] | None = None
        self._worker: Thread | None = None
        self._finalizer: Thread | None = None
        self._worker_failed = False
        self._frames = 0
        self._started_at = 0.0

    @property
    def available(self) -> bool:
        return shutil.which(self._executable) is not None

    @property
    def state(self) -> str:
        return self._state

    @property
    def frames_written(self) -> int:
        return self._frames

    def begin(
        self,
        frame_source: FrameSource,
        audio_tracks: Sequence[AudioTrack],
        options: EncoderOptions,
    ) -> None:
        if self._state not in ("inactive", "error"):
            return
        if not self.available:
            logger.warning("%s not found on PATH; recording disabled", self._executable)
            return
        try:
            options.output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError:
            logger.exception("cannot create recording folder %s", options.output_path.parent)
            self._state = "error"
            return

        self._frame_source = frame_source
        self._audio_tracks = list(audio_tracks)
        self._options = options
        self._frames = 0
        self._worker_failed = False
        self._started_at = self._now()
        self._queue = Queue()
        self._worker = Thread(
            target=self._run_worker,
            args=(self._queue, self._video_path(options), options),
            daemon=True,
        )
        self._worker.start()
        self._state = "recording"

    def push_frame(self) -> None:
        if self._state != "recording" or self._queue is None or self._frame_source is None:
            return
        self._queue.put(self._frame_source())
        self._frames += 1

    def finish(self, callback: Callable[[MediaArtifact | None], None]) -> None:
        if self._state != "recording" or self._queue is None:
            return
        self._state = "stopping"
        ended_at = self._now()
        self._queue.put(None)
        self._finalizer = Thread(
            target=self._finalize,
            args=(callback, ended_at),
            daemon=True,
        )
        self._finalizer.start()

    def join(self, timeout: float | None = None) -> None:
        """Block until a pending ``finish`` has delivered its result."""
        if self._finalizer is not None:
            self._finalizer.join(timeout=timeout)

    def _video_path(self, options: EncoderOptions) -> Path:
        if not self._audio_tracks:
            return options.output_path
        return options.output_path.with_suffix(".video" + options.output_path.suffix)

    def _run_worker(
        self, queue: Queue[np.ndarray | None], video_path: Path, options: EncoderOptions
    ) -> None:
        proc: subprocess.Popen[bytes] | None = None
        while True:
            frame = queue.get()
            if frame is None:
                break
            if self._worker_failed:
                continue
            if proc is None:
                height, width = frame.shape[0], frame.shape[1]
                try:
                    proc = subprocess.Popen(
                        self._video_command(width, height, video_path, options),
                        stdin=subprocess.PIPE,
                        stdout=subprocess.DEVNULL,
                        stderr=subprocess.DEVNULL,
                    )
                except OSError:
                    logger.exception("cannot launch %s", self._executable)
                    self._worker_failed = True
                    continue
            if proc.stdin is None:
                continue
            try:
                proc.stdin.write(np.ascontiguousarray(frame, dtype=np.uint8).tobytes())
            except (BrokenPipeError, OSError):
                logger.warning("ffmpeg closed its input; dropping remaining frames")
                self._worker_failed = True
        if proc is not None:
            if proc.stdin is not None:
                try:
                    proc.stdin.close()
                except (BrokenPipeError, OSError):
                    self._worker_failed = True
            try:
                if proc.wait(timeout=30.0) != 0:
                    self._worker_failed = True
            except subprocess.TimeoutExpired:
                logger.warning("ffmpeg did not exit in time; killing it")
                proc.kill()
                proc.wait()
                self._worker_failed = True

    def _video_command(
        self, width: int, height: int, video_path: Path, options: EncoderOptions
    ) -> list[str]:
        return [
            self._executable,
            "-y",
            "-f",
            "rawvideo",
            "-vcodec",
            "rawvideo",
            "-pix_fmt",
            "rgba",
            "-s",
            f"{width}x{height}",
            "-r",
            f"{options.fps:g}",
            "-i",
            "-",
            "-an",
            "-vf",
            "pad=ceil(iw/2)*2:ceil(ih/2)*2",
            "-c:v",
            "libx264",
            "-preset",
            options.preset,
            "-crf",
            str(options.crf),
            "-pix_fmt",
            "yuv420p",
            str(video_path),
        ]

    def _finalize(
        self, callback: Callable[[MediaArtifact | None], None], ended_at: float
    ) -> None:
        artifact: MediaArtifact | None = None
        try:
            if self._worker is not None:
                self._worker.join()
            options = self._options
            if options is not None and self._frames > 0 and not self._worker_failed:
                if self._audio_tracks:
                    self._mux_audio(options, ended_at)
                artifact = MediaArtifact(
                    path=options.output_path,
                    frames_written=self._frames,
                    duration=ended_at - self._started_at,
                )
        except Exception:
            logger.exception("finalizing the recording failed")
            artifact = None
        self._dispatch(lambda: self._complete(callback, artifact))

    def _mux_audio(self, options: EncoderOptions, ended_at: float) -> None:
        video_path = self._video_path(options)
        wav_path = options.output_path.with_suffix(".wav")
        track = self._audio_tracks[0]
        try:
            mix = track.mixdown(self._started_at, ended_at)
            for extra in self._audio_tracks[1:]:
                other = extra.mixdown(self._started_at, ended_at)
                n = min(mix.size, other.size)
                mix[:n] += other[:n]
            write_wav(wav_path, mix, track.sample_rate)
        except OSError:
            logger.exception("audio mixdown failed; keeping silent video")
            wav_path.unlink(missing_ok=True)
            video_path.replace(options.output_path)
            return
        try:
            self._run_mux(options, video_path, wav_path)
        finally:
            wav_path.unlink(missing_ok=True)

    def _run_mux(self, options: EncoderOptions, video_path: Path, wav_path: Path) -> None:
        cmd = [
            self._executable,
            "-y",
            "-i",
            str(video_path),
            "-i",
            str(wav_path),
            "-c:v",
            "copy",
            "-c:a",
            "aac",
            "-shortest",
            str(options.output_path),
        ]
        result = subprocess.run(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        if result.returncode == 0:
            video_path.unlink(missing_ok=True)
        else:
            logger.warning("audio mux failed (exit %d); keeping silent video", result.returncode)
            video_path.replace(options.output_path)

    def _complete(
        self,
        callback: Callable[[MediaArtifact | None], None],
        artifact: MediaArtifact | None,
    ) -> None:
        self._state = "inactive"
        self._queue = None
        self._worker = None
        self._frame_source = None
        self._audio_tracks = []
        callback(artifact)
