"""Helpers for recording output paths and metadata."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from ..core.config import PhysicsConfig
from ..core.recording import EncoderOptions, MediaArtifact


@dataclass(frozen=True, slots=True)
class RecordingPaths:
    run_dir: Path
    video_path: Path
    meta_path: Path


def make_recording_paths(base_dir: Path, timestamp: datetime | None = None) -> RecordingPaths:
    stamp = (timestamp or datetime.now()).strftime("%Y%m%d_%H%M%S")
    run_dir = base_dir / stamp
    return RecordingPaths(
        run_dir=run_dir,
        video_path=run_dir / video_filename(),
        meta_path=run_dir / "meta.json",
    )


def video_filename() -> str:
    return "recording.mp4"


class RecordingOutputs:
    """Creates a fresh output location for each capture and remembers it."""

    def __init__(self, base_dir: Path, fps: float = 60.0) -> None:
        self.base_dir = base_dir
        self.fps = fps
        self.current: RecordingPaths | None = None
        self.started_wall_time: str | None = None

    def __call__(self) -> EncoderOptions:
        self.current = make_recording_paths(self.base_dir)
        self.started_wall_time = datetime.now().isoformat()
        return EncoderOptions(output_path=self.current.video_path, fps=self.fps)


def build_metadata(
    *,
    artifact: MediaArtifact,
    fps: float,
    width: int,
    height: int,
    physics: PhysicsConfig,
    start_wall_time: str | None,
) -> dict[str, Any]:
    return {
        "video_path": str(artifact.path),
        "mime_type": artifact.mime_type,
        "frames_written": artifact.frames_written,
        "duration": artifact.duration,
        "fps": fps,
        "size": [width, height],
        "physics": physics.as_dict(),
        "start_wall_time": start_wall_time,
    }


def write_metadata(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
