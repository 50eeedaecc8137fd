"""Humanized aim smoothing: bounded per-tick rotation toward a target."""

from .vector import Vector3D

from .rotation import (
    Rotation,
    VecRotation,
    angle_difference,
    make_rotation,
    rotation_difference,
    wrap_degrees,
)

from .smoothing import (
    # Regression constants
    COEF_DISTANCE,
    COEF_DIFFERENCE,
    INTERCEPT,
    HIGH_TURN_SPEED_DISTANCE_THRESHOLD,
    HIGH_TURN_SPEED_DIFFERENCE_THRESHOLD,
    HIGH_TURN_SPEED_ADJUSTMENT_FACTOR,
    # Classes
    SmootherMode,
    TurnSpeedRange,
    AngleSmooth,
    # Functions
    compute_turn_speed,
    create_angle_smooth,
)

from .aim_plan import (
    FixedTarget,
    PointTarget,
    ViewerState,
    AimPlan,
    create_aim_plan,
    create_point_aim_plan,
)

from .controller import AimState, RotationController
from .config import AimPlanConfig
from .recorder import AimSample, AimRecording, AimDebugRecorder

__all__ = [
    # Geometry
    "Vector3D",
    "Rotation",
    "VecRotation",
    "angle_difference",
    "make_rotation",
    "rotation_difference",
    "wrap_degrees",
    # Smoothing
    "COEF_DISTANCE",
    "COEF_DIFFERENCE",
    "INTERCEPT",
    "HIGH_TURN_SPEED_DISTANCE_THRESHOLD",
    "HIGH_TURN_SPEED_DIFFERENCE_THRESHOLD",
    "HIGH_TURN_SPEED_ADJUSTMENT_FACTOR",
    "SmootherMode",
    "TurnSpeedRange",
    "AngleSmooth",
    "compute_turn_speed",
    "create_angle_smooth",
    # Aim plans
    "FixedTarget",
    "PointTarget",
    "ViewerState",
    "AimPlan",
    "create_aim_plan",
    "create_point_aim_plan",
    # Controller
    "AimState",
    "RotationController",
    # Configuration
    "AimPlanConfig",
    # Recording
    "AimSample",
    "AimRecording",
    "AimDebugRecorder",
]
