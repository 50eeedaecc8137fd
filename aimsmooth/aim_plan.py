"""
Aim plans: a target plus the policy for turning toward it.

An aim plan binds a target to an AngleSmooth and carries the reset policy
the caller's rotation loop uses (ticks until reset, reset threshold and
the behaviour flags). Plans hold no per-tick state; the current rotation
and the viewer are passed in on every call, so a plan can be evaluated
any number of times without drifting.

Targets come in two kinds:
- FixedTarget: a frozen rotation.
- PointTarget: a point in space. Its rotation is derived once when the
  plan is created, but the distance used for smoothing is measured again
  on every tick from the viewer's current position.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Optional, Union

from .rotation import Rotation, VecRotation
from .smoothing import AngleSmooth, SmootherMode, TurnSpeedRange, create_angle_smooth
from .vector import Vector3D


logger = logging.getLogger(__name__)


# =============================================================================
# TARGETS
# =============================================================================

@dataclass(frozen=True)
class FixedTarget:
    """Aim at a fixed rotation."""
    rotation: Rotation


@dataclass(frozen=True)
class PointTarget:
    """
    Aim at a point in space.

    Attributes:
        vec_rotation: Rotation derived at plan creation and the point it
                      looks at.
    """
    vec_rotation: VecRotation

    @property
    def rotation(self) -> Rotation:
        return self.vec_rotation.rotation

    @property
    def point(self) -> Vector3D:
        return self.vec_rotation.vec


AimTarget = Union[FixedTarget, PointTarget]


@dataclass(frozen=True)
class ViewerState:
    """
    What the caller knows about the viewer at the current tick.

    Attributes:
        rotation: Natural rotation, where the viewer would look without
                  aim control. Reset transitions steer toward it.
        position: Viewer eye position, used to measure distance to point
                  targets. Required by point plans while engaged.
    """
    rotation: Rotation
    position: Optional[Vector3D] = None


# =============================================================================
# AIM PLAN
# =============================================================================

@dataclass(frozen=True)
class AimPlan:
    """
    A plan to aim at a target, evaluated once per tick.

    Attributes:
        target: FixedTarget or PointTarget.
        angle_smooth: Smoother limiting each tick's step.
        ticks_until_reset: Ticks the caller keeps the plan engaged before
                           starting the reset.
        reset_threshold: Angular distance (degrees) to the natural rotation
                         below which the caller considers a reset finished.
        consider_inventory: Caller should pause aiming while an inventory
                            screen is open.
        apply_velocity_fix: Caller should correct movement input for the
                            aimed rotation.
        change_look: Caller should also change the visible camera rotation.
    """
    target: AimTarget
    angle_smooth: AngleSmooth
    ticks_until_reset: int
    reset_threshold: float
    consider_inventory: bool = False
    apply_velocity_fix: bool = True
    change_look: bool = False

    def __post_init__(self) -> None:
        """Validate reset policy."""
        if self.ticks_until_reset < 0:
            raise ValueError(f"ticks_until_reset must be >= 0, got {self.ticks_until_reset}")
        if not math.isfinite(self.reset_threshold) or self.reset_threshold <= 0.0:
            raise ValueError(
                f"reset_threshold must be a finite value > 0, got {self.reset_threshold}"
            )

    @property
    def rotation(self) -> Rotation:
        """The rotation this plan pulls toward while engaged."""
        return self.target.rotation

    @property
    def smoother_mode(self) -> SmootherMode:
        return self.angle_smooth.mode

    @property
    def is_point_plan(self) -> bool:
        """True if the target is a point in space."""
        return isinstance(self.target, PointTarget)

    def next_rotation(
        self,
        from_rotation: Rotation,
        is_resetting: bool,
        viewer: ViewerState
    ) -> Rotation:
        """
        Calculate the rotation for the next tick.

        Args:
            from_rotation: Current (last aimed) rotation.
            is_resetting: True while the caller is handing control back.
                          The plan then steers toward the viewer's natural
                          rotation instead of its target.
            viewer: Natural rotation and eye position at this tick.

        Returns:
            The next rotation, one bounded step from ``from_rotation``.

        Raises:
            ValueError: If a point plan is engaged without a viewer position.
        """
        if is_resetting:
            return self.angle_smooth.limit_angle_change(from_rotation, viewer.rotation)

        target = self.target
        if isinstance(target, PointTarget):
            if viewer.position is None:
                raise ValueError("Point plans need the viewer position to measure distance")
            distance = viewer.position.distance_to(target.point)
            return self.angle_smooth.limit_angle_change(from_rotation, target.rotation, distance)

        return self.angle_smooth.limit_angle_change(from_rotation, target.rotation)

    def with_target(self, target: AimTarget) -> AimPlan:
        """Same policy aimed at a different target."""
        return AimPlan(
            target=target,
            angle_smooth=self.angle_smooth,
            ticks_until_reset=self.ticks_until_reset,
            reset_threshold=self.reset_threshold,
            consider_inventory=self.consider_inventory,
            apply_velocity_fix=self.apply_velocity_fix,
            change_look=self.change_look,
        )


# =============================================================================
# FACTORY FUNCTIONS
# =============================================================================

def create_aim_plan(
    rotation: Rotation,
    smoother_mode: SmootherMode,
    turn_speed: TurnSpeedRange | tuple[float, float],
    ticks_until_reset: int,
    reset_threshold: float,
    consider_inventory: bool = False,
    apply_velocity_fix: bool = True,
    change_look: bool = False,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None
) -> AimPlan:
    """
    Create a plan that aims at a fixed rotation.

    Args:
        rotation: Rotation to aim at.
        smoother_mode: Turn speed strategy.
        turn_speed: Range or (minimum, maximum) for LINEAR mode.
        ticks_until_reset: Ticks before the caller resets.
        reset_threshold: Reset completion threshold in degrees.
        consider_inventory: Behaviour flag for the caller.
        apply_velocity_fix: Behaviour flag for the caller.
        change_look: Behaviour flag for the caller.
        seed: Optional random seed for reproducibility.
        rng: Explicit random source; takes precedence over ``seed``.

    Returns:
        Configured AimPlan.

    Raises:
        ValueError: If the turn speed range or reset policy is invalid.
    """
    return AimPlan(
        target=FixedTarget(rotation),
        angle_smooth=create_angle_smooth(smoother_mode, turn_speed, seed=seed, rng=rng),
        ticks_until_reset=ticks_until_reset,
        reset_threshold=reset_threshold,
        consider_inventory=consider_inventory,
        apply_velocity_fix=apply_velocity_fix,
        change_look=change_look,
    )


def create_point_aim_plan(
    point: Vector3D,
    eyes: Vector3D,
    smoother_mode: SmootherMode,
    turn_speed: TurnSpeedRange | tuple[float, float],
    ticks_until_reset: int,
    reset_threshold: float,
    consider_inventory: bool = False,
    apply_velocity_fix: bool = True,
    change_look: bool = False,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None
) -> AimPlan:
    """
    Create a plan that aims at a point in space.

    The rotation toward ``point`` is derived once from ``eyes`` here; the
    distance is measured on every call to next_rotation().

    Args:
        point: Target point.
        eyes: Viewer eye position at creation time.
        (remaining arguments as for create_aim_plan)

    Returns:
        AimPlan with a PointTarget.
    """
    vec_rotation = VecRotation.towards(point, eyes)
    logger.debug("Point aim plan toward %r derived %r", point, vec_rotation.rotation)

    return AimPlan(
        target=PointTarget(vec_rotation),
        angle_smooth=create_angle_smooth(smoother_mode, turn_speed, seed=seed, rng=rng),
        ticks_until_reset=ticks_until_reset,
        reset_threshold=reset_threshold,
        consider_inventory=consider_inventory,
        apply_velocity_fix=apply_velocity_fix,
        change_look=change_look,
    )
