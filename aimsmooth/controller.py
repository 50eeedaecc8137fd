"""
Rotation controller: the per-tick loop that owns aim plans.

Aim plans only answer "where should the rotation go next". Deciding
*when* to hand control back lives here:

    IDLE --aim_at()--> ENGAGED --ticks_until_reset elapsed--> RESETTING
      ^                   ^                                      |
      |                   +------------- aim_at() ---------------+
      +---- within reset_threshold of the natural rotation ------+

While ENGAGED the plan pulls toward its target. Each tick without a fresh
aim_at() counts down the plan's ticks_until_reset; at zero the controller
starts RESETTING and the plan pulls toward the viewer's natural rotation
until the two are closer than the plan's reset_threshold.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from .aim_plan import AimPlan, ViewerState
from .rotation import Rotation, rotation_difference


logger = logging.getLogger(__name__)


class AimState(Enum):
    """Controller states."""
    IDLE = auto()
    ENGAGED = auto()
    RESETTING = auto()


@dataclass
class RotationController:
    """
    Drives an AimPlan tick by tick.

    Attributes:
        plan: Active plan, None while IDLE.
        state: Current controller state.
        current_rotation: Last rotation handed out, None while IDLE.
        ticks_remaining: Engaged ticks left before the reset starts.
    """
    plan: Optional[AimPlan] = None
    state: AimState = AimState.IDLE
    current_rotation: Optional[Rotation] = None
    ticks_remaining: int = 0

    @property
    def is_active(self) -> bool:
        """True while the controller overrides the natural rotation."""
        return self.state is not AimState.IDLE

    def aim_at(self, plan: AimPlan, viewer: Optional[ViewerState] = None) -> None:
        """
        Engage (or retarget to) ``plan`` and restart its countdown.

        Args:
            plan: Plan to follow.
            viewer: Viewer at this tick. When starting from IDLE its
                    natural rotation is where smoothing begins.
        """
        if self.current_rotation is None and viewer is not None:
            self.current_rotation = viewer.rotation

        if self.state is AimState.IDLE:
            logger.debug("Engaging aim plan toward %r", plan.rotation)

        self.plan = plan
        self.state = AimState.ENGAGED
        self.ticks_remaining = plan.ticks_until_reset

    def reset(self) -> None:
        """Start handing control back immediately."""
        if self.state is AimState.ENGAGED:
            logger.debug("Reset requested with %d ticks remaining", self.ticks_remaining)
            self.state = AimState.RESETTING
            self.ticks_remaining = 0

    def release(self) -> None:
        """Drop the plan without smoothing back."""
        if self.state is not AimState.IDLE:
            logger.debug("Releasing aim plan")
        self.plan = None
        self.state = AimState.IDLE
        self.current_rotation = None
        self.ticks_remaining = 0

    def tick(self, viewer: ViewerState) -> Optional[Rotation]:
        """
        Advance one tick.

        Args:
            viewer: Natural rotation and eye position at this tick.

        Returns:
            The rotation to use this tick, or None when the controller is
            idle (or has just finished resetting) and the natural rotation
            applies.
        """
        plan = self.plan
        if plan is None or self.state is AimState.IDLE:
            return None

        from_rotation = self.current_rotation
        if from_rotation is None:
            from_rotation = viewer.rotation

        if self.state is AimState.ENGAGED:
            next_rotation = plan.next_rotation(from_rotation, False, viewer)
            self.current_rotation = next_rotation

            self.ticks_remaining -= 1
            if self.ticks_remaining <= 0:
                logger.debug("Aim plan expired, resetting")
                self.state = AimState.RESETTING
            return next_rotation

        next_rotation = plan.next_rotation(from_rotation, True, viewer)
        if rotation_difference(next_rotation, viewer.rotation) < plan.reset_threshold:
            self.release()
            return None

        self.current_rotation = next_rotation
        return next_rotation
