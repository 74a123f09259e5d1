"""
Race time prediction with Riegel's formula.

    T2 = T1 * (D2 / D1) ^ 1.06

Riegel, P. (1981). Athletic records and human endurance.
American Scientist 69(3).
"""

from typing import List, Optional, Tuple

from .units import (
    COMMON_RACES,
    Distance,
    DistanceUnit,
    Duration,
    InvalidInputError,
    Pace,
    RaceDistance,
)


RIEGEL_EXPONENT = 1.06


def predict_seconds(
    known_km: float,
    known_seconds: float,
    target_km: float,
    exponent: float = RIEGEL_EXPONENT
) -> float:
    """
    Riegel extrapolation in raw kilometres and seconds.

    Raises:
        InvalidInputError: known distance is zero
    """
    if known_km <= 0:
        raise InvalidInputError("Known distance must be greater than zero")
    if target_km <= 0:
        return 0.0
    return known_seconds * (target_km / known_km) ** exponent


def predict_race_time(
    known_distance: Distance,
    known_time: Duration,
    target_distance: Distance,
    exponent: float = RIEGEL_EXPONENT
) -> Duration:
    """
    Predict finish time for a target distance from a known performance.

    Both distances are normalized to kilometres first. The prediction is
    decomposed with floor division, so fractional seconds are truncated.

    Args:
        known_distance: Distance of the recent performance
        known_time: Finish time of the recent performance
        target_distance: Distance to predict
        exponent: Fatigue exponent (1.06 for road racing)

    Returns:
        Predicted Duration
    """
    predicted = predict_seconds(
        known_distance.to_km(),
        known_time.total_seconds,
        target_distance.to_km(),
        exponent,
    )
    return Duration.from_seconds(predicted)


def calculate_average_pace(
    distance: Distance,
    duration: Duration,
    unit: Optional[DistanceUnit] = None
) -> Pace:
    """Average pace over a distance, per unit (defaults to the distance's unit)."""
    unit = unit or distance.unit
    value = distance.to(unit).value
    if value <= 0:
        raise InvalidInputError("Distance must be greater than zero to compute a pace")
    return Pace.from_seconds(duration.total_seconds / value)


def predict_common_races(
    known_distance: Distance,
    known_time: Duration,
    exponent: float = RIEGEL_EXPONENT
) -> List[Tuple[RaceDistance, Duration]]:
    """Predictions for every preset race distance."""
    return [
        (race, predict_race_time(known_distance, known_time, race.distance, exponent))
        for race in COMMON_RACES
    ]
