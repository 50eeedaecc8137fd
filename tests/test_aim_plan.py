#!/usr/bin/env python3
"""
Test Suite for Aim Plans

Tests cover:
1. Fixed target plans - engaged step toward the target
2. Reset behaviour - steering toward the natural rotation, never the target
3. Point target plans - distance measured from the viewer on every call
4. Plan validation and immutability
5. Factory functions

Uses pytest with seeded RNG for deterministic tests.
"""

import dataclasses
import random
import pytest

from aimsmooth.aim_plan import (
    AimPlan,
    FixedTarget,
    PointTarget,
    ViewerState,
    create_aim_plan,
    create_point_aim_plan,
)
from aimsmooth.rotation import Rotation, VecRotation, make_rotation, rotation_difference
from aimsmooth.smoothing import (
    AngleSmooth,
    SmootherMode,
    TurnSpeedRange,
    compute_turn_speed,
)
from aimsmooth.vector import Vector3D


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def seeded_rng():
    """Create a seeded random number generator for deterministic tests."""
    return random.Random(42)


@pytest.fixture
def relative_plan():
    """RELATIVE plan aiming at (45, 10)."""
    return create_aim_plan(
        Rotation(45.0, 10.0),
        SmootherMode.RELATIVE,
        (40.0, 60.0),
        ticks_until_reset=5,
        reset_threshold=2.0,
    )


@pytest.fixture
def eyes():
    return Vector3D(0.0, 0.0, 0.0)


@pytest.fixture
def point_plan(eyes):
    """RELATIVE plan aiming at a point 2 blocks south of the eyes."""
    return create_point_aim_plan(
        Vector3D(0.0, 0.0, 2.0),
        eyes,
        SmootherMode.RELATIVE,
        (40.0, 60.0),
        ticks_until_reset=5,
        reset_threshold=2.0,
    )


@pytest.fixture
def natural_viewer(eyes):
    """Viewer looking straight south from the origin."""
    return ViewerState(rotation=Rotation(0.0, 0.0), position=eyes)


# =============================================================================
# FIXED TARGET TESTS
# =============================================================================

class TestFixedTargetPlan:
    """Tests for plans aiming at a fixed rotation."""

    def test_engaged_moves_toward_target(self, relative_plan, natural_viewer):
        result = relative_plan.next_rotation(Rotation(0.0, 0.0), False, natural_viewer)

        expected = relative_plan.angle_smooth.limit_angle_change(Rotation(0.0, 0.0), Rotation(45.0, 10.0))
        assert result == expected
        assert 0.0 < result.yaw < 45.0
        assert 0.0 < result.pitch < 10.0

    def test_engaged_ignores_natural_rotation(self, relative_plan):
        """Only the target matters while engaged."""
        from_rotation = Rotation(0.0, 0.0)
        a = relative_plan.next_rotation(from_rotation, False, ViewerState(Rotation(0.0, 0.0)))
        b = relative_plan.next_rotation(from_rotation, False, ViewerState(Rotation(-120.0, 40.0)))
        assert a == b

    def test_engaged_at_target_stays(self, relative_plan, natural_viewer):
        at_target = Rotation(45.0, 10.0)
        assert relative_plan.next_rotation(at_target, False, natural_viewer) == at_target

    def test_repeated_calls_do_not_drift(self, relative_plan, natural_viewer):
        """Plans cache nothing between calls."""
        from_rotation = Rotation(-30.0, 20.0)
        first = relative_plan.next_rotation(from_rotation, False, natural_viewer)
        for _ in range(5):
            assert relative_plan.next_rotation(from_rotation, False, natural_viewer) == first

    def test_converges_over_ticks(self, relative_plan, natural_viewer):
        rotation = Rotation(-120.0, -30.0)
        for _ in range(50):
            rotation = relative_plan.next_rotation(rotation, False, natural_viewer)
        assert rotation_difference(rotation, relative_plan.rotation) == pytest.approx(0.0, abs=1e-6)


# =============================================================================
# RESET TESTS
# =============================================================================

class TestResetting:
    """Tests for the resetting branch."""

    def test_reset_moves_toward_natural_rotation(self, relative_plan, natural_viewer):
        """At the target, resetting must pull back toward (0, 0)."""
        from_rotation = Rotation(45.0, 10.0)

        result = relative_plan.next_rotation(from_rotation, True, natural_viewer)

        assert result != from_rotation
        assert result.yaw < 45.0
        assert result.pitch < 10.0
        assert (rotation_difference(result, natural_viewer.rotation)
                < rotation_difference(from_rotation, natural_viewer.rotation))

    def test_reset_uses_plain_smoothing(self, relative_plan, natural_viewer):
        from_rotation = Rotation(45.0, 10.0)
        expected = relative_plan.angle_smooth.limit_angle_change(from_rotation, Rotation(0.0, 0.0))
        assert relative_plan.next_rotation(from_rotation, True, natural_viewer) == expected

    def test_reset_follows_live_natural_rotation(self, relative_plan):
        from_rotation = Rotation(45.0, 10.0)
        left = relative_plan.next_rotation(from_rotation, True, ViewerState(Rotation(0.0, 0.0)))
        right = relative_plan.next_rotation(from_rotation, True, ViewerState(Rotation(90.0, 10.0)))
        assert left.yaw < 45.0
        assert right.yaw > 45.0

    def test_point_plan_reset_matches_fixed_plan(self, point_plan, natural_viewer):
        """Resetting ignores the point entirely."""
        fixed = create_aim_plan(
            point_plan.rotation, SmootherMode.RELATIVE, (40.0, 60.0),
            ticks_until_reset=5, reset_threshold=2.0,
        )
        from_rotation = Rotation(30.0, -20.0)
        moved_viewer = ViewerState(Rotation(0.0, 0.0), Vector3D(50.0, 0.0, 50.0))

        assert (point_plan.next_rotation(from_rotation, True, natural_viewer)
                == fixed.next_rotation(from_rotation, True, natural_viewer))
        assert (point_plan.next_rotation(from_rotation, True, moved_viewer)
                == point_plan.next_rotation(from_rotation, True, natural_viewer))


# =============================================================================
# POINT TARGET TESTS
# =============================================================================

class TestPointTargetPlan:
    """Tests for plans aiming at a point."""

    def test_rotation_derived_at_creation(self, point_plan, eyes):
        assert point_plan.is_point_plan
        assert point_plan.rotation == make_rotation(Vector3D(0.0, 0.0, 2.0), eyes)
        assert point_plan.target.point == Vector3D(0.0, 0.0, 2.0)

    def test_engaged_uses_distance_from_viewer(self, point_plan, natural_viewer):
        from_rotation = Rotation(-60.0, 0.0)

        result = point_plan.next_rotation(from_rotation, False, natural_viewer)

        # 60 degrees off at 2 blocks: just below the snap difference threshold
        assert result.yaw == pytest.approx(-60.0 + compute_turn_speed(60.0, 2.0))
        assert result.yaw == pytest.approx(-60.0 + 12.262)
        assert result.pitch == pytest.approx(0.0)

    def test_distance_recomputed_every_call(self, point_plan):
        """Moving the viewer changes the cap; the target rotation does not change."""
        from_rotation = Rotation(-60.0, 0.0)
        near = ViewerState(Rotation(0.0, 0.0), Vector3D(0.0, 0.0, 0.0))
        far = ViewerState(Rotation(0.0, 0.0), Vector3D(0.0, 0.0, -3.0))
        rotation_before = point_plan.rotation

        near_result = point_plan.next_rotation(from_rotation, False, near)
        far_result = point_plan.next_rotation(from_rotation, False, far)

        assert near_result.yaw == pytest.approx(-60.0 + compute_turn_speed(60.0, 2.0))
        assert far_result.yaw == pytest.approx(-60.0 + compute_turn_speed(60.0, 5.0))
        assert near_result != far_result
        assert point_plan.rotation == rotation_before

    def test_close_large_angle_snaps(self, point_plan, natural_viewer):
        from_rotation = Rotation(-100.0, 0.0)
        result = point_plan.next_rotation(from_rotation, False, natural_viewer)
        assert result.yaw == pytest.approx(-100.0 + compute_turn_speed(100.0, 2.0))
        assert compute_turn_speed(100.0, 2.0) > compute_turn_speed(60.0, 2.0) * 2

    def test_linear_point_plan_ignores_distance(self, eyes):
        def make_plan():
            return create_point_aim_plan(
                Vector3D(0.0, 0.0, 2.0), eyes, SmootherMode.LINEAR, (40.0, 60.0),
                ticks_until_reset=5, reset_threshold=2.0, seed=3,
            )

        near = ViewerState(Rotation(0.0, 0.0), Vector3D(0.0, 0.0, 0.0))
        far = ViewerState(Rotation(0.0, 0.0), Vector3D(0.0, 0.0, -30.0))
        from_rotation = Rotation(-150.0, 0.0)

        assert (make_plan().next_rotation(from_rotation, False, near)
                == make_plan().next_rotation(from_rotation, False, far))

    def test_engaged_without_position_rejected(self, point_plan):
        viewer = ViewerState(Rotation(0.0, 0.0))
        with pytest.raises(ValueError, match="viewer position"):
            point_plan.next_rotation(Rotation(-45.0, 0.0), False, viewer)

    def test_reset_without_position_allowed(self, point_plan):
        viewer = ViewerState(Rotation(0.0, 0.0))
        result = point_plan.next_rotation(Rotation(10.0, 0.0), True, viewer)
        assert result.yaw == pytest.approx(0.0)
        assert result.pitch == pytest.approx(0.0)

    def test_explicit_point_target(self, seeded_rng):
        vec_rotation = VecRotation(Rotation(10.0, 5.0), Vector3D(1.0, 2.0, 3.0))
        plan = AimPlan(
            target=PointTarget(vec_rotation),
            angle_smooth=AngleSmooth(SmootherMode.RELATIVE, TurnSpeedRange(1.0, 2.0), rng=seeded_rng),
            ticks_until_reset=1,
            reset_threshold=0.5,
        )
        viewer = ViewerState(Rotation(0.0, 0.0), Vector3D(1.0, 2.0, 0.0))

        result = plan.next_rotation(Rotation(10.0, 5.0), False, viewer)

        assert result == Rotation(10.0, 5.0)
        assert plan.rotation == Rotation(10.0, 5.0)


# =============================================================================
# VALIDATION AND FACTORY TESTS
# =============================================================================

class TestPlanConstruction:
    """Tests for plan validation, flags and immutability."""

    def test_flags_carried(self):
        plan = create_aim_plan(
            Rotation(0.0, 0.0), SmootherMode.LINEAR, (10.0, 20.0),
            ticks_until_reset=3, reset_threshold=1.5,
            consider_inventory=True, apply_velocity_fix=False, change_look=True,
        )
        assert plan.ticks_until_reset == 3
        assert plan.reset_threshold == 1.5
        assert plan.consider_inventory is True
        assert plan.apply_velocity_fix is False
        assert plan.change_look is True
        assert plan.smoother_mode is SmootherMode.LINEAR
        assert not plan.is_point_plan
        assert isinstance(plan.target, FixedTarget)

    def test_plan_is_immutable(self, relative_plan):
        with pytest.raises(dataclasses.FrozenInstanceError):
            relative_plan.target = FixedTarget(Rotation(1.0, 1.0))

    @pytest.mark.parametrize("turn_speed", [(60.0, 40.0), (30.0, 30.0)])
    def test_invalid_turn_speed_rejected(self, turn_speed):
        with pytest.raises(ValueError):
            create_aim_plan(Rotation(0.0, 0.0), SmootherMode.LINEAR, turn_speed, 5, 2.0)

    def test_negative_ticks_rejected(self):
        with pytest.raises(ValueError, match="ticks_until_reset"):
            create_aim_plan(Rotation(0.0, 0.0), SmootherMode.RELATIVE, (40.0, 60.0), -1, 2.0)

    @pytest.mark.parametrize("threshold", [-1.0, 0.0, float("nan"), float("inf")])
    def test_invalid_reset_threshold_rejected(self, threshold):
        with pytest.raises(ValueError, match="reset_threshold"):
            create_aim_plan(Rotation(0.0, 0.0), SmootherMode.RELATIVE, (40.0, 60.0), 5, threshold)

    def test_rng_injection(self):
        rng = random.Random(1)
        plan = create_aim_plan(Rotation(0.0, 0.0), SmootherMode.LINEAR, (40.0, 60.0), 5, 2.0, rng=rng)
        assert plan.angle_smooth.rng is rng

    def test_with_target_keeps_policy(self, relative_plan):
        retargeted = relative_plan.with_target(FixedTarget(Rotation(-10.0, 0.0)))
        assert retargeted.rotation == Rotation(-10.0, 0.0)
        assert retargeted.angle_smooth is relative_plan.angle_smooth
        assert retargeted.ticks_until_reset == relative_plan.ticks_until_reset
        assert relative_plan.rotation == Rotation(45.0, 10.0)
