"""
Aim plan configuration.

Loads the smoothing and reset policy from a dictionary or JSON file, e.g.

    {
        "smoother_mode": "Relative",
        "turn_speed": {"min": 40.0, "max": 60.0},
        "ticks_until_reset": 5,
        "reset_threshold": 2.0,
        "consider_inventory": true,
        "apply_velocity_fix": true,
        "change_look": false,
        "seed": 42
    }

and builds aim plans from it.
"""

import json
import math
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from .aim_plan import AimPlan, create_aim_plan, create_point_aim_plan
from .rotation import Rotation
from .smoothing import SmootherMode, TurnSpeedRange
from .vector import Vector3D


@dataclass(frozen=True)
class AimPlanConfig:
    """
    Smoothing and reset policy shared by the plans it creates.

    Plans draw from the config's single random source (seeded from
    ``seed``) unless an explicit ``rng`` is passed.
    """
    smoother_mode: SmootherMode = SmootherMode.RELATIVE
    turn_speed: TurnSpeedRange = TurnSpeedRange(40.0, 60.0)
    ticks_until_reset: int = 5
    reset_threshold: float = 2.0
    consider_inventory: bool = True
    apply_velocity_fix: bool = True
    change_look: bool = False
    seed: Optional[int] = None
    rng: random.Random = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.ticks_until_reset < 0:
            raise ValueError(f"ticks_until_reset must be >= 0, got {self.ticks_until_reset}")
        if not math.isfinite(self.reset_threshold) or self.reset_threshold <= 0.0:
            raise ValueError(
                f"reset_threshold must be a finite value > 0, got {self.reset_threshold}"
            )
        # Shared by every plan this config creates
        object.__setattr__(self, "rng", random.Random(self.seed))

    @classmethod
    def from_json(cls, path: str) -> 'AimPlanConfig':
        """Load configuration from JSON file."""
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Aim config not found: {path}")

        with open(config_path) as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AimPlanConfig':
        """Create configuration from dictionary."""
        mode = data.get("smoother_mode", SmootherMode.RELATIVE.value)
        if not isinstance(mode, SmootherMode):
            mode = SmootherMode.from_name(str(mode))

        return cls(
            smoother_mode=mode,
            turn_speed=_parse_turn_speed(data.get("turn_speed", {})),
            ticks_until_reset=int(data.get("ticks_until_reset", 5)),
            reset_threshold=float(data.get("reset_threshold", 2.0)),
            consider_inventory=_parse_flag(data, "consider_inventory", True),
            apply_velocity_fix=_parse_flag(data, "apply_velocity_fix", True),
            change_look=_parse_flag(data, "change_look", False),
            seed=data.get("seed"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "smoother_mode": self.smoother_mode.choice_name,
            "turn_speed": {"min": self.turn_speed.minimum, "max": self.turn_speed.maximum},
            "ticks_until_reset": self.ticks_until_reset,
            "reset_threshold": self.reset_threshold,
            "consider_inventory": self.consider_inventory,
            "apply_velocity_fix": self.apply_velocity_fix,
            "change_look": self.change_look,
            "seed": self.seed,
        }

    def create_plan(self, rotation: Rotation, rng: Optional[random.Random] = None) -> AimPlan:
        """Plan aiming at a fixed rotation."""
        return create_aim_plan(
            rotation,
            self.smoother_mode,
            self.turn_speed,
            self.ticks_until_reset,
            self.reset_threshold,
            consider_inventory=self.consider_inventory,
            apply_velocity_fix=self.apply_velocity_fix,
            change_look=self.change_look,
            rng=rng if rng is not None else self.rng,
        )

    def create_point_plan(
        self,
        point: Vector3D,
        eyes: Vector3D,
        rng: Optional[random.Random] = None
    ) -> AimPlan:
        """Plan aiming at a point as seen from ``eyes``."""
        return create_point_aim_plan(
            point,
            eyes,
            self.smoother_mode,
            self.turn_speed,
            self.ticks_until_reset,
            self.reset_threshold,
            consider_inventory=self.consider_inventory,
            apply_velocity_fix=self.apply_velocity_fix,
            change_look=self.change_look,
            rng=rng if rng is not None else self.rng,
        )


def _parse_flag(data: Dict[str, Any], key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be true or false, got {value!r}")
    return value


def _parse_turn_speed(data: Any) -> TurnSpeedRange:
    """Parse {"min": .., "max": ..} or a [min, max] pair."""
    if isinstance(data, dict):
        return TurnSpeedRange(
            float(data.get("min", 40.0)),
            float(data.get("max", 60.0)),
        )
    if isinstance(data, (list, tuple)) and len(data) == 2:
        return TurnSpeedRange.of((data[0], data[1]))
    raise ValueError(f"turn_speed must be {{'min': .., 'max': ..}} or [min, max], got {data!r}")
