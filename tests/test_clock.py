from __future__ import annotations

import pytest

from circle_bounce.core.clock import SimulationClock


def test_clock_starts_paused_at_zero(fake_time) -> None:
    clock = SimulationClock(fake_time)
    fake_time.advance(5.0)
    assert clock.paused
    assert clock.update() == 0.0


def test_elapsed_follows_wall_time(fake_time) -> None:
    clock = SimulationClock(fake_time)
    clock.resume()
    fake_time.advance(2.5)
    assert clock.update() == pytest.approx(2.5)


def test_pause_and_resume_are_continuous(fake_time) -> None:
    clock = SimulationClock(fake_time)
    clock.resume()
    fake_time.advance(3.0)
    clock.pause()
    assert clock.elapsed == pytest.approx(3.0)

    fake_time.advance(100.0)
    assert clock.update() == pytest.approx(3.0)

    clock.resume()
    assert clock.update() == pytest.approx(3.0)
    fake_time.advance(1.0)
    assert clock.update() == pytest.approx(4.0)


def test_reset_clears_elapsed(fake_time) -> None:
    clock = SimulationClock(fake_time)
    clock.resume()
    fake_time.advance(7.0)
    clock.update()
    clock.reset()
    assert clock.elapsed == 0.0
    fake_time.advance(0.5)
    assert clock.update() == pytest.approx(0.5)
