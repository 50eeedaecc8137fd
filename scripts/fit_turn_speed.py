#!/usr/bin/env python3
"""
Fit the turn speed regression from a recorded aim session.

Prints the refitted coefficients next to the shipped constants, plus the
snap regime estimated from the fastest samples.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add repository root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from aimsmooth.analysis import fit_turn_speed_model, high_turn_speed_thresholds
from aimsmooth.recorder import AimRecording
from aimsmooth.smoothing import (
    COEF_DIFFERENCE,
    COEF_DISTANCE,
    HIGH_TURN_SPEED_ADJUSTMENT_FACTOR,
    HIGH_TURN_SPEED_DIFFERENCE_THRESHOLD,
    HIGH_TURN_SPEED_DISTANCE_THRESHOLD,
    INTERCEPT,
)


def main():
    parser = argparse.ArgumentParser(
        description="Fit the turn speed regression from an aim recording",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python scripts/fit_turn_speed.py recordings/session.json
    python scripts/fit_turn_speed.py recordings/session.json --quantile 0.95
        """,
    )
    parser.add_argument("recording", help="Recording JSON written by AimRecording.save()")
    parser.add_argument(
        "--quantile",
        type=float,
        default=0.9,
        help="Turn speed quantile treated as high turn speed (default: 0.9)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        recording = AimRecording.load(args.recording)
        fit = fit_turn_speed_model(recording.samples)
        snap = high_turn_speed_thresholds(recording.samples, quantile=args.quantile, fit=fit)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("=" * 70)
    print(f"TURN SPEED FIT - {recording.name or args.recording}")
    print("=" * 70)
    print(f"{'':<22} {'Fitted':>12} {'Shipped':>12}")
    print("-" * 48)
    print(f"{'Distance coef':<22} {fit.coef_distance:>12.3f} {COEF_DISTANCE:>12.3f}")
    print(f"{'Difference coef':<22} {fit.coef_difference:>12.3f} {COEF_DIFFERENCE:>12.3f}")
    print(f"{'Intercept':<22} {fit.intercept:>12.3f} {INTERCEPT:>12.3f}")
    print(f"{'Distance threshold':<22} {snap.distance_threshold:>12.2f} "
          f"{HIGH_TURN_SPEED_DISTANCE_THRESHOLD:>12.2f}")
    print(f"{'Difference threshold':<22} {snap.difference_threshold:>12.2f} "
          f"{HIGH_TURN_SPEED_DIFFERENCE_THRESHOLD:>12.2f}")
    print(f"{'Adjustment factor':<22} {snap.adjustment_factor:>12.2f} "
          f"{HIGH_TURN_SPEED_ADJUSTMENT_FACTOR:>12.2f}")
    print(f"\nR^2 = {fit.r_squared:.3f} over {fit.sample_count} samples "
          f"({snap.sample_count} high turn speed)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
