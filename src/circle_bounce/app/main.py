"""Command-line entry point: interactive window or headless capture."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .. import __version__
from ..io.settings import Settings, load_settings


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="circle-bounce",
        description="Growing ball bouncing inside a circle.",
    )
    parser.add_argument("--version", action="version", version=f"circle_bounce v{__version__}")
    parser.add_argument("--width", type=int, default=720)
    parser.add_argument("--height", type=int, default=1280)
    parser.add_argument("--settings", type=Path, default=None, help="JSON settings file")
    parser.add_argument("--record-dir", type=Path, default=Path("recordings"))
    parser.add_argument(
        "--headless",
        action="store_true",
        help="run a fixed number of frames offscreen instead of opening a window",
    )
    parser.add_argument("--frames", type=int, default=600, help="frames to run in headless mode")
    parser.add_argument("--fps", type=float, default=60.0)
    parser.add_argument("--record", action="store_true", help="capture a video in headless mode")
    parser.add_argument("--snapshot", type=Path, default=None, help="save the last frame as PNG")
    parser.add_argument("--log-level", default="INFO")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = load_settings(args.settings) if args.settings is not None else Settings()
    if args.headless:
        return run_headless(args, settings)
    return run_window(args, settings)


def run_window(args: argparse.Namespace, settings: Settings) -> int:
    from PySide6 import QtWidgets

    from .window import MainWindow

    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv[:1])
    window = MainWindow(
        width=args.width,
        height=args.height,
        settings=settings,
        record_dir=args.record_dir,
    )
    window.resize(args.width // 2 + 40, args.height // 2 + 80)
    window.show()
    return app.exec()


def run_headless(args: argparse.Namespace, settings: Settings) -> int:
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PySide6 import QtGui

    from ..core.recording import MediaArtifact
    from ..core.scheduling import ManualScheduler
    from ..core.simulation import CircleSimulation
    from .audio import AudioDestination, tone
    from .encoder import FfmpegEncoder
    from .recording_utils import RecordingOutputs, build_metadata, write_metadata
    from .surface import ImageSurface

    app = QtGui.QGuiApplication.instance() or QtGui.QGuiApplication(sys.argv[:1])
    logger.debug("headless run on Qt platform %s", app.platformName())
    scheduler = ManualScheduler()

    def frame_time() -> float:
        return scheduler.frames / args.fps

    surface = ImageSurface(args.width, args.height)
    audio = AudioDestination(time_source=frame_time)
    encoder = FfmpegEncoder(time_source=frame_time)
    outputs = RecordingOutputs(args.record_dir, fps=args.fps)
    simulation = CircleSimulation(
        surface,
        audio,
        scheduler,
        texts=settings.texts,
        on_collision=lambda result: audio.play(tone(440.0 + 4.0 * result.radius)),
        config=settings.physics,
        encoder=encoder,
        options_factory=outputs,
        time_source=frame_time,
    )

    def on_complete(artifact: MediaArtifact) -> None:
        if artifact.frames_written == 0:
            logger.error("recording produced no file")
            return
        if outputs.current is None:
            return
        data = build_metadata(
            artifact=artifact,
            fps=args.fps,
            width=surface.width,
            height=surface.height,
            physics=simulation.config,
            start_wall_time=outputs.started_wall_time,
        )
        write_metadata(outputs.current.meta_path, data)
        logger.info("saved %s", artifact.path)

    recording = args.record and simulation.start_recording(on_complete, audio)
    if args.record and not recording:
        logger.warning("recording unavailable; running without capture")

    simulation.start()
    scheduler.advance(max(0, args.frames - 1))
    simulation.stop()
    logger.info(
        "ran %d frames: t=%.2fs radius=%.2f collisions=%d",
        args.frames,
        simulation.clock.elapsed,
        simulation.engine.ball.radius,
        simulation.engine.collision_count,
    )

    if recording:
        simulation.stop_recording()
        encoder.join()
    if args.snapshot is not None:
        surface.save(str(args.snapshot))
        logger.info("snapshot written to %s", args.snapshot)
    return 0
