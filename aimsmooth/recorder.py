"""
Aim Recorder - Records per-tick aim samples for offline analysis.

Captures, once per tick:
- Turn speed: angular distance between this tick's and last tick's rotation
- Distance to the nearest candidate target (within range)
- Angular difference between the rotation and the rotation toward it

The regression in smoothing.py was fitted on samples of exactly this
shape; analysis.py refits it from a recording.
"""

import json
import logging
from dataclasses import dataclass, field, asdict
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Iterable, List, Optional

from .rotation import Rotation, make_rotation, rotation_difference
from .vector import Vector3D


logger = logging.getLogger(__name__)

# Candidates farther away than this are not recorded
DEFAULT_MAX_DISTANCE = 10.0


@dataclass
class AimSample:
    """A single recorded tick."""
    tick: int
    turn_speed: float
    distance: Optional[float] = None
    difference: Optional[float] = None

    @property
    def has_target(self) -> bool:
        return self.distance is not None and self.difference is not None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"tick": self.tick, "turn_speed": self.turn_speed}
        if self.has_target:
            data["distance"] = self.distance
            data["difference"] = self.difference
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AimSample':
        return cls(
            tick=int(data["tick"]),
            turn_speed=float(data["turn_speed"]),
            distance=data.get("distance"),
            difference=data.get("difference"),
        )


@dataclass
class AimRecording:
    """Complete recording of a session."""
    recording_version: str = "1.0"
    recorded_at: str = ""
    name: str = ""
    max_distance: float = DEFAULT_MAX_DISTANCE
    samples: List[AimSample] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["samples"] = [sample.to_dict() for sample in self.samples]
        return data

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def save(self, path: str) -> Path:
        """Write the recording as JSON, creating parent directories."""
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(self.to_json())
        logger.info("Saved %d aim samples to %s", len(self.samples), out)
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AimRecording':
        return cls(
            recording_version=data.get("recording_version", "1.0"),
            recorded_at=data.get("recorded_at", ""),
            name=data.get("name", ""),
            max_distance=float(data.get("max_distance", DEFAULT_MAX_DISTANCE)),
            samples=[AimSample.from_dict(s) for s in data.get("samples", [])],
        )

    @classmethod
    def load(cls, path: str) -> 'AimRecording':
        """Load a recording saved with save()."""
        recording_path = Path(path)
        if not recording_path.exists():
            raise FileNotFoundError(f"Aim recording not found: {path}")

        with open(recording_path) as f:
            return cls.from_dict(json.load(f))


class AimDebugRecorder:
    """
    Records aim samples while active.

    Usage:
        recorder = AimDebugRecorder()
        recorder.start_recording("strafe test")

        # Every tick:
        recorder.record_tick(rotation, last_rotation, eyes, target_points)

        recording = recorder.stop_recording()
        recording.save("recordings/strafe.json")
    """

    def __init__(self, max_distance: float = DEFAULT_MAX_DISTANCE):
        self.max_distance = max_distance
        self.recording: Optional[AimRecording] = None
        self._tick = 0

    @property
    def is_recording(self) -> bool:
        return self.recording is not None

    def start_recording(self, name: str = "") -> AimRecording:
        """Begin a new recording. A running recording is kept."""
        if self.recording is not None:
            return self.recording

        self.recording = AimRecording(
            recorded_at=datetime.now().isoformat(),
            name=name,
            max_distance=self.max_distance,
        )
        self._tick = 0
        logger.info("Started aim recording %r", name)
        return self.recording

    def stop_recording(self) -> Optional[AimRecording]:
        """Finish and return the current recording (None if not recording)."""
        recording = self.recording
        self.recording = None
        if recording is not None:
            logger.info("Stopped aim recording with %d samples", len(recording.samples))
        return recording

    def record_tick(
        self,
        rotation: Rotation,
        last_rotation: Rotation,
        eyes: Vector3D,
        candidates: Iterable[Vector3D] = ()
    ) -> Optional[AimSample]:
        """
        Record one tick.

        Args:
            rotation: Rotation this tick.
            last_rotation: Rotation last tick.
            eyes: Viewer eye position.
            candidates: Points of possible targets; the nearest one closer
                        than max_distance is recorded.

        Returns:
            The recorded sample, or None when not recording.
        """
        if self.recording is None:
            return None

        sample = AimSample(tick=self._tick, turn_speed=rotation_difference(rotation, last_rotation))
        self._tick += 1

        nearest = self._nearest(eyes, candidates)
        if nearest is not None:
            sample.distance = eyes.distance_to(nearest)
            sample.difference = rotation_difference(rotation, make_rotation(nearest, eyes))

        self.recording.samples.append(sample)
        return sample

    def _nearest(self, eyes: Vector3D, candidates: Iterable[Vector3D]) -> Optional[Vector3D]:
        in_range = [p for p in candidates if eyes.distance_to(p) < self.max_distance]
        if not in_range:
            return None
        return min(in_range, key=eyes.distance_to)
