"""
Angle smoothing for humanized aiming.

Limits how far a rotation may move toward its target in one tick. Two
turn speed strategies are available:

- LINEAR: per-axis turn speed drawn uniformly from a configured range,
  yaw and pitch independently, so identical inputs jitter like a human.
- RELATIVE: turn speed predicted by a linear regression over angular
  difference and distance to the target, fitted on recorded human aim
  samples (see analysis.py).

In both modes the allowed step is apportioned along the direction of
travel, so diagonal corrections move in a straight line instead of
finishing one axis first.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .rotation import Rotation, angle_difference


logger = logging.getLogger(__name__)


# =============================================================================
# REGRESSION CONSTANTS
# =============================================================================

COEF_DISTANCE = -1.393
COEF_DIFFERENCE = 0.051
INTERCEPT = 11.988

# Snap regime, from samples with much higher turn speeds
HIGH_TURN_SPEED_DISTANCE_THRESHOLD = 2.82  # Average distance for high turn speed
HIGH_TURN_SPEED_DIFFERENCE_THRESHOLD = 61.34  # Average difference for high turn speed

# Close targets far off-center get turned to much faster
HIGH_TURN_SPEED_ADJUSTMENT_FACTOR = 2.5

# Below this combined difference (degrees) we consider the rotation aligned
ALIGNED_EPSILON = 1e-9


def compute_turn_speed(difference: float, distance: float) -> float:
    """
    Predict a human-plausible turn speed in degrees per tick.

    base = COEF_DISTANCE * distance + COEF_DIFFERENCE * difference + INTERCEPT

    The base is multiplied by HIGH_TURN_SPEED_ADJUSTMENT_FACTOR when the
    target is close (distance <= 2.82) and far off-center
    (difference >= 61.34).

    Args:
        difference: Angular difference still to cover, degrees.
        distance: Spatial distance to the target, blocks.

    Returns:
        Non-negative turn speed.
    """
    base_turn_speed = COEF_DISTANCE * distance + COEF_DIFFERENCE * difference + INTERCEPT

    if (distance <= HIGH_TURN_SPEED_DISTANCE_THRESHOLD
            and difference >= HIGH_TURN_SPEED_DIFFERENCE_THRESHOLD):
        base_turn_speed *= HIGH_TURN_SPEED_ADJUSTMENT_FACTOR

    # Far targets drive the linear model negative
    return abs(base_turn_speed)


# =============================================================================
# SMOOTHER CONFIGURATION
# =============================================================================

class SmootherMode(Enum):
    """Turn speed strategy of an AngleSmooth."""
    LINEAR = "Linear"
    RELATIVE = "Relative"

    @property
    def choice_name(self) -> str:
        """Display name used in configuration files."""
        return self.value

    @classmethod
    def from_name(cls, name: str) -> SmootherMode:
        """
        Parse a mode by member or display name, case-insensitive.

        Raises:
            ValueError: If no mode matches.
        """
        wanted = name.strip().lower()
        for mode in cls:
            if wanted in (mode.name.lower(), mode.value.lower()):
                return mode
        choices = ", ".join(mode.value for mode in cls)
        raise ValueError(f"Unknown smoother mode '{name}' (expected one of: {choices})")


@dataclass(frozen=True)
class TurnSpeedRange:
    """
    Inclusive turn speed interval for LINEAR smoothing, degrees per tick.

    Attributes:
        minimum: Lowest turn speed that may be drawn.
        maximum: Highest turn speed that may be drawn.
    """
    minimum: float
    maximum: float

    def __post_init__(self) -> None:
        """Reject ranges that cannot be sampled meaningfully."""
        if not (math.isfinite(self.minimum) and math.isfinite(self.maximum)):
            raise ValueError(
                f"Turn speed range must be finite, got [{self.minimum}, {self.maximum}]"
            )
        if self.maximum <= self.minimum:
            raise ValueError(
                f"Turn speed range must have minimum < maximum, "
                f"got [{self.minimum}, {self.maximum}]"
            )

    def sample(self, rng: random.Random) -> float:
        """Draw a turn speed uniformly from the range."""
        return rng.uniform(self.minimum, self.maximum)

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, (int, float)):
            return False
        return self.minimum <= value <= self.maximum

    @classmethod
    def of(cls, value: TurnSpeedRange | tuple[float, float]) -> TurnSpeedRange:
        """Accept either a range or a (minimum, maximum) pair."""
        if isinstance(value, TurnSpeedRange):
            return value
        minimum, maximum = value
        return cls(float(minimum), float(maximum))


# =============================================================================
# ANGLE SMOOTH
# =============================================================================

@dataclass(frozen=True)
class AngleSmooth:
    """
    Limits the angle change between two rotations for one tick.

    Attributes:
        mode: Turn speed strategy.
        turn_speed: Range sampled by LINEAR mode. Unused by RELATIVE.
        rng: Random source for LINEAR draws. Inject a seeded instance for
             reproducible runs.
    """
    mode: SmootherMode
    turn_speed: TurnSpeedRange
    rng: random.Random = field(default_factory=random.Random, compare=False, repr=False)

    def limit_angle_change(
        self,
        current_rotation: Rotation,
        target_rotation: Rotation,
        distance: Optional[float] = None
    ) -> Rotation:
        """
        Move ``current_rotation`` one bounded step toward ``target_rotation``.

        Without a distance, RELATIVE mode predicts yaw and pitch speeds
        separately from each axis' own difference. With a distance, a
        single speed predicted from the combined difference and the
        distance caps both axes. LINEAR mode ignores the distance.

        Args:
            current_rotation: Rotation we are at.
            target_rotation: Rotation we want to reach.
            distance: Distance to the target point, if aiming at one.

        Returns:
            The rotation after this tick's step. Never overshoots the
            target on either axis.
        """
        yaw_difference = angle_difference(target_rotation.yaw, current_rotation.yaw)
        pitch_difference = angle_difference(target_rotation.pitch, current_rotation.pitch)

        rotation_difference = math.hypot(abs(yaw_difference), abs(pitch_difference))

        if rotation_difference < ALIGNED_EPSILON:
            return current_rotation

        factor_h, factor_v = self._turn_speeds(
            yaw_difference, pitch_difference, rotation_difference, distance
        )

        straight_line_yaw = abs(yaw_difference / rotation_difference) * factor_h
        straight_line_pitch = abs(pitch_difference / rotation_difference) * factor_v

        return Rotation(
            current_rotation.yaw + _coerce_in(yaw_difference, straight_line_yaw),
            current_rotation.pitch + _coerce_in(pitch_difference, straight_line_pitch),
        )

    def _turn_speeds(
        self,
        yaw_difference: float,
        pitch_difference: float,
        rotation_difference: float,
        distance: Optional[float]
    ) -> tuple[float, float]:
        """Horizontal and vertical turn speed caps for this tick."""
        if self.mode is SmootherMode.LINEAR:
            return self.turn_speed.sample(self.rng), self.turn_speed.sample(self.rng)

        if distance is None:
            factor_h = compute_turn_speed(abs(yaw_difference), 0.0)
            factor_v = compute_turn_speed(abs(pitch_difference), 0.0)
            logger.debug("Relative turn speed yaw=%.3f pitch=%.3f", factor_h, factor_v)
            return factor_h, factor_v

        factor = compute_turn_speed(rotation_difference, distance)
        logger.debug(
            "Relative turn speed %.3f (difference=%.3f, distance=%.3f)",
            factor, rotation_difference, distance
        )
        return factor, factor


def _coerce_in(value: float, limit: float) -> float:
    """Clamp ``value`` to [-limit, limit]."""
    return max(-limit, min(limit, value))


def create_angle_smooth(
    mode: SmootherMode,
    turn_speed: TurnSpeedRange | tuple[float, float],
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None
) -> AngleSmooth:
    """
    Factory function to create an AngleSmooth.

    Args:
        mode: Turn speed strategy.
        turn_speed: Range or (minimum, maximum) pair for LINEAR mode.
        seed: Optional random seed for reproducibility.
        rng: Explicit random source; takes precedence over ``seed``.

    Returns:
        Configured AngleSmooth.
    """
    if rng is None:
        rng = random.Random(seed) if seed is not None else random.Random()
    return AngleSmooth(mode=mode, turn_speed=TurnSpeedRange.of(turn_speed), rng=rng)
