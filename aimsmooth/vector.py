"""
Spatial vectors for aim smoothing.

Positions are world coordinates in blocks (1 block = 1 meter) using the
block-game convention:
- X: east
- Y: up
- Z: south

Only the handful of operations the aiming code needs live here: point
arithmetic, distances and the horizontal length used for pitch.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


# =============================================================================
# VECTOR3D CLASS
# =============================================================================

@dataclass(frozen=True)
class Vector3D:
    """
    3D vector for world positions and offsets.

    Frozen so a target point captured by an aim plan cannot be moved
    under it.
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vector3D) -> Vector3D:
        """Vector addition."""
        return Vector3D(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3D) -> Vector3D:
        """Vector subtraction."""
        return Vector3D(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector3D:
        """Scalar multiplication."""
        return Vector3D(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar: float) -> Vector3D:
        return self.__mul__(scalar)

    def __neg__(self) -> Vector3D:
        return Vector3D(-self.x, -self.y, -self.z)

    @property
    def magnitude(self) -> float:
        """Vector magnitude (length)."""
        return math.sqrt(self.x**2 + self.y**2 + self.z**2)

    @property
    def horizontal_magnitude(self) -> float:
        """Length of the projection onto the XZ plane."""
        return math.hypot(self.x, self.z)

    def distance_to(self, other: Vector3D) -> float:
        """Distance to another point."""
        return (self - other).magnitude

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    @classmethod
    def from_tuple(cls, t: tuple[float, float, float]) -> Vector3D:
        """Create from tuple (or any 3-item sequence)."""
        return cls(float(t[0]), float(t[1]), float(t[2]))

    @classmethod
    def zero(cls) -> Vector3D:
        return cls(0.0, 0.0, 0.0)

    def __repr__(self) -> str:
        return f"Vector3D({self.x:.6g}, {self.y:.6g}, {self.z:.6g})"
