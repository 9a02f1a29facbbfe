from __future__ import annotations

import numpy as np
import pytest

from circle_bounce.core.clock import SimulationClock
from circle_bounce.core.collision import CollisionResult
from circle_bounce.core.config import (
    INITIAL_BALL_RADIUS,
    MAX_COLLISION_POINTS,
    MIN_VELOCITY,
    MOTION_BLUR_STEPS,
    PhysicsConfig,
)
from circle_bounce.core.engine import PhysicsEngine
from circle_bounce.core.state import Ball, Boundary


BOUNDARY = Boundary(center=(325.0, 325.0), radius=200.0)


def _engine(config: PhysicsConfig | None = None) -> PhysicsEngine:
    ball = Ball(center=np.array([325.0, 175.0]), velocity=np.array([0.8, 0.8]))
    return PhysicsEngine(BOUNDARY, ball, config)


def test_single_step_integrates_gravity_then_decay() -> None:
    engine = _engine()
    engine.step()
    decay = 0.9995
    expected_v = np.array([0.8 * decay, (0.8 + 0.4) * decay])
    assert np.allclose(engine.ball.velocity, expected_v)
    assert np.allclose(engine.ball.center, np.array([325.0, 175.0]) + expected_v)
    assert list(engine.motion_trail) == [(325.0, 175.0)]
    assert len(engine.collision_points) == 0


def test_first_collision_scenario() -> None:
    engine = _engine()
    results: list[CollisionResult] = []
    engine.set_collision_listener(results.append)

    for _ in range(500):
        result = engine.step()
        if result.collided:
            break
    else:
        pytest.fail("ball never reached the wall")

    assert len(results) == 1
    assert engine.ball.radius == pytest.approx(min(5 * 1.015, 300.0))
    assert BOUNDARY.distance_to(engine.ball.center) == pytest.approx(200.0 - engine.ball.radius)
    assert engine.ball.speed() >= MIN_VELOCITY - 1e-9
    assert list(engine.collision_points) == [pytest.approx(result.point)]

    after = engine.step()
    assert not after.collided
    assert len(results) == 1


def test_long_run_invariants() -> None:
    engine = _engine()
    notified: list[CollisionResult] = []
    engine.set_collision_listener(notified.append)
    max_radius = BOUNDARY.max_ball_radius
    last_radius = engine.ball.radius

    for _ in range(3000):
        result = engine.step()
        radius = engine.ball.radius
        assert radius >= last_radius
        assert INITIAL_BALL_RADIUS <= radius <= max_radius
        assert len(engine.motion_trail) <= MOTION_BLUR_STEPS
        assert len(engine.collision_points) <= MAX_COLLISION_POINTS
        if result.collided:
            assert engine.ball.speed() >= MIN_VELOCITY - 1e-9
            if radius <= BOUNDARY.radius:
                assert BOUNDARY.distance_to(engine.ball.center) == pytest.approx(
                    BOUNDARY.radius - radius
                )
        last_radius = radius

    assert engine.collision_count == len(notified)
    assert engine.collision_count > 0
    assert np.all(np.isfinite(engine.ball.center))


def test_collision_history_keeps_latest_points() -> None:
    engine = _engine()
    points: list[tuple[float, float]] = []
    engine.set_collision_listener(lambda r: points.append(r.point))
    while engine.collision_count < MAX_COLLISION_POINTS + 5:
        engine.step()
    assert list(engine.collision_points) == [pytest.approx(p) for p in points[-MAX_COLLISION_POINTS:]]


def test_config_changes_apply_on_next_tick() -> None:
    engine = _engine()
    engine.step()
    engine.config.set_gravity(0.0)
    engine.config.set_velocity_decay(1.0)
    before = engine.ball.velocity.copy()
    engine.step()
    assert np.allclose(engine.ball.velocity, before)


def test_degenerate_config_does_not_raise() -> None:
    engine = _engine(PhysicsConfig(gravity=-3.0, velocity_decay=0.0, ball_growth_rate=-1.0))
    for _ in range(50):
        engine.step()
    assert np.all(np.isfinite(engine.ball.center))


def test_reset_restores_initial_ball_and_clears_histories() -> None:
    engine = _engine()
    for _ in range(400):
        engine.step()
    engine.reset()
    assert engine.ball.radius == INITIAL_BALL_RADIUS
    assert np.allclose(engine.ball.center, [325.0, 175.0])
    assert np.allclose(engine.ball.velocity, [0.8, 0.8])
    assert len(engine.motion_trail) == 0
    assert len(engine.collision_points) == 0
    assert engine.collision_count == 0


def test_step_updates_attached_clock() -> None:
    now = [0.0]
    clock = SimulationClock(lambda: now[0])
    ball = Ball(center=np.array([325.0, 175.0]), velocity=np.array([0.8, 0.8]))
    engine = PhysicsEngine(BOUNDARY, ball, clock=clock)
    clock.resume()
    now[0] = 1.25
    engine.step()
    assert clock.elapsed == pytest.approx(1.25)
