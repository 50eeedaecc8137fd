"""
Offline analysis of recorded aim samples.

Refits the turn speed regression used by RELATIVE smoothing:

    turn_speed ~ COEF_DISTANCE * distance + COEF_DIFFERENCE * difference + INTERCEPT

and estimates the snap regime (close targets far off-center) from the
fastest samples. Only samples that recorded a target contribute.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List

import numpy as np

from .recorder import AimSample
from .smoothing import (
    COEF_DIFFERENCE,
    COEF_DISTANCE,
    INTERCEPT,
)


logger = logging.getLogger(__name__)

# Three coefficients need at least three samples
MIN_FIT_SAMPLES = 3


@dataclass
class TurnSpeedModelFit:
    """
    Result of a least squares fit.

    Attributes:
        coef_distance: Turn speed change per block of distance.
        coef_difference: Turn speed change per degree of difference.
        intercept: Turn speed at zero distance and difference.
        r_squared: Coefficient of determination on the fitted samples.
        sample_count: Samples used.
    """
    coef_distance: float
    coef_difference: float
    intercept: float
    r_squared: float
    sample_count: int

    def predict(self, difference: float, distance: float) -> float:
        """Raw linear prediction (no snap adjustment, may be negative)."""
        return self.coef_distance * distance + self.coef_difference * difference + self.intercept

    def __str__(self) -> str:
        return (
            f"turn_speed = {self.coef_distance:.3f} * distance "
            f"+ {self.coef_difference:.3f} * difference + {self.intercept:.3f} "
            f"(R^2={self.r_squared:.3f}, n={self.sample_count})"
        )


@dataclass
class HighTurnSpeedThresholds:
    """
    Snap regime estimated from the fastest samples.

    Attributes:
        distance_threshold: Mean distance of the fast samples.
        difference_threshold: Mean difference of the fast samples.
        adjustment_factor: Mean observed fast turn speed over the mean
                           linear prediction for the same samples.
        sample_count: Fast samples used.
    """
    distance_threshold: float
    difference_threshold: float
    adjustment_factor: float
    sample_count: int


def _target_arrays(samples: Iterable[AimSample]) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """turn_speed, distance and difference arrays for samples with a target."""
    usable: List[AimSample] = [s for s in samples if s.has_target]
    turn_speed = np.array([s.turn_speed for s in usable], dtype=float)
    distance = np.array([s.distance for s in usable], dtype=float)
    difference = np.array([s.difference for s in usable], dtype=float)
    return turn_speed, distance, difference


def fit_turn_speed_model(samples: Iterable[AimSample]) -> TurnSpeedModelFit:
    """
    Fit the linear turn speed model by ordinary least squares.

    Args:
        samples: Recorded samples; samples without a target are skipped.

    Returns:
        Fitted coefficients and goodness of fit.

    Raises:
        ValueError: If fewer than three samples have a target.
    """
    turn_speed, distance, difference = _target_arrays(samples)
    n = len(turn_speed)
    if n < MIN_FIT_SAMPLES:
        raise ValueError(f"Need at least {MIN_FIT_SAMPLES} samples with a target, got {n}")

    design = np.column_stack([distance, difference, np.ones(n)])
    coefficients, _, _, _ = np.linalg.lstsq(design, turn_speed, rcond=None)

    predicted = design @ coefficients
    ss_res = float(np.sum((turn_speed - predicted) ** 2))
    ss_tot = float(np.sum((turn_speed - turn_speed.mean()) ** 2))
    r_squared = 1.0 - ss_res / ss_tot if ss_tot > 0 else 1.0

    fit = TurnSpeedModelFit(
        coef_distance=float(coefficients[0]),
        coef_difference=float(coefficients[1]),
        intercept=float(coefficients[2]),
        r_squared=r_squared,
        sample_count=n,
    )
    logger.info("Fitted %s", fit)
    return fit


def high_turn_speed_thresholds(
    samples: Iterable[AimSample],
    quantile: float = 0.9,
    fit: TurnSpeedModelFit | None = None
) -> HighTurnSpeedThresholds:
    """
    Estimate the snap regime from samples at or above a turn speed quantile.

    Args:
        samples: Recorded samples; samples without a target are skipped.
        quantile: Turn speed quantile (0-1) that counts as "fast".
        fit: Model to compare against. Defaults to the shipped constants.

    Returns:
        Mean distance/difference of the fast samples and the factor by
        which they exceed the linear model.

    Raises:
        ValueError: If the quantile is outside [0, 1] or no sample has a
                    target.
    """
    if not 0.0 <= quantile <= 1.0:
        raise ValueError(f"quantile must be within [0, 1], got {quantile}")

    turn_speed, distance, difference = _target_arrays(samples)
    if len(turn_speed) == 0:
        raise ValueError("No samples with a target")

    fast = turn_speed >= np.quantile(turn_speed, quantile)

    if fit is None:
        predicted = COEF_DISTANCE * distance + COEF_DIFFERENCE * difference + INTERCEPT
    else:
        predicted = fit.coef_distance * distance + fit.coef_difference * difference + fit.intercept

    mean_predicted = float(np.mean(np.abs(predicted[fast])))
    mean_observed = float(np.mean(turn_speed[fast]))
    adjustment = mean_observed / mean_predicted if mean_predicted > 0 else 1.0

    return HighTurnSpeedThresholds(
        distance_threshold=float(np.mean(distance[fast])),
        difference_threshold=float(np.mean(difference[fast])),
        adjustment_factor=adjustment,
        sample_count=int(np.count_nonzero(fast)),
    )
