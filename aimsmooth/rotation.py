"""
Angle arithmetic for yaw/pitch orientations.

Conventions (block-game style, degrees):
- Yaw 0 looks toward +Z (south), 90 toward -X (west), -90 toward +X (east).
- Pitch 0 is level, positive pitch looks down, -90 straight up.

Stored yaw values are allowed to drift outside [-180, 180]; only
*differences* are normalized. Every difference between two angles goes
through angle_difference() so nothing jumps at the +-180 seam.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .vector import Vector3D


# =============================================================================
# ANGLE FUNCTIONS
# =============================================================================

def wrap_degrees(angle: float) -> float:
    """
    Normalize an angle to the half-open interval (-180, 180].

    Args:
        angle: Angle in degrees, any magnitude.

    Returns:
        Equivalent angle in (-180, 180].
    """
    wrapped = angle % 360.0
    if wrapped > 180.0:
        wrapped -= 360.0
    return wrapped


def angle_difference(a: float, b: float) -> float:
    """
    Shortest signed difference ``a - b`` in degrees.

    Args:
        a: Angle we want to reach.
        b: Angle we are at.

    Returns:
        Signed difference in (-180, 180]. Positive means turning toward
        larger angles.
    """
    return wrap_degrees(a - b)


def rotation_difference(first: Rotation, second: Rotation) -> float:
    """
    Euclidean angular distance between two rotations.

    Combines the shortest yaw and pitch differences with hypot, so a
    rotation of 3 degrees yaw and 4 degrees pitch is 5 degrees away.
    """
    return math.hypot(
        angle_difference(first.yaw, second.yaw),
        angle_difference(first.pitch, second.pitch),
    )


def make_rotation(point: Vector3D, eyes: Vector3D) -> Rotation:
    """
    Build the rotation that looks from ``eyes`` at ``point``.

    Args:
        point: World position to look at.
        eyes: World position of the viewer's eyes.

    Returns:
        Rotation with yaw wrapped to (-180, 180] and pitch in [-90, 90].
        Looking at the eye position itself yields Rotation(-90, 0).
    """
    diff = point - eyes

    yaw = math.degrees(math.atan2(diff.z, diff.x)) - 90.0
    pitch = -math.degrees(math.atan2(diff.y, diff.horizontal_magnitude))

    return Rotation(wrap_degrees(yaw), pitch)


# =============================================================================
# ROTATION TYPES
# =============================================================================

@dataclass(frozen=True)
class Rotation:
    """
    Viewing orientation as a yaw/pitch pair in degrees.

    Attributes:
        yaw: Horizontal angle. Not normalized; see angle_difference().
        pitch: Vertical angle, positive looking down.
    """
    yaw: float
    pitch: float

    def difference_to(self, other: Rotation) -> float:
        """Euclidean angular distance to another rotation."""
        return rotation_difference(self, other)

    def normalized(self) -> Rotation:
        """Same orientation with yaw wrapped to (-180, 180]."""
        return Rotation(wrap_degrees(self.yaw), self.pitch)

    def to_tuple(self) -> tuple[float, float]:
        return (self.yaw, self.pitch)

    @classmethod
    def towards(cls, point: Vector3D, eyes: Vector3D) -> Rotation:
        """Rotation looking from ``eyes`` at ``point``."""
        return make_rotation(point, eyes)

    def __repr__(self) -> str:
        return f"Rotation(yaw={self.yaw:.6g}, pitch={self.pitch:.6g})"


@dataclass(frozen=True)
class VecRotation:
    """
    A rotation together with the point it was derived from.

    Attributes:
        rotation: Orientation looking at ``vec`` at construction time.
        vec: The target point.
    """
    rotation: Rotation
    vec: Vector3D

    @classmethod
    def towards(cls, point: Vector3D, eyes: Vector3D) -> VecRotation:
        """Derive the rotation for ``point`` as seen from ``eyes``."""
        return cls(make_rotation(point, eyes), point)
