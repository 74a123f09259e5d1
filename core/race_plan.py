"""
Race Plan Engine: finish time from base pace, split adjustments and breaks.

A plan is a base pace per distance unit, an ordered list of splits
(each with a signed seconds-per-unit adjustment) and a list of breaks
(fixed durations added to the total wherever they occur).

    total = sum(split.distance * (base + split.adjustment)) + sum(break.duration)
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Dict, Any, List, Sequence, Tuple

from .units import (
    DistanceUnit,
    Duration,
    Pace,
    RaceDistance,
    InvalidInputError,
    KM_TO_MI,
    clamp_non_negative,
    coerce_number,
    convert_distance,
    convert_pace,
    round_distance,
)


class BreakType(Enum):
    """Kinds of interruption during a race."""
    DRINK = "drink"       # Water / aid station
    TOILET = "toilet"     # Portable toilet stop
    CROWD = "crowd"       # Start-line or course congestion

    @classmethod
    def parse(cls, value) -> 'BreakType':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidInputError(f"Unknown break type: {value!r}")


BREAK_DEFAULT_DURATIONS = {
    BreakType.DRINK: 15,
    BreakType.TOILET: 120,
    BreakType.CROWD: 30,
}

# Added to the last split of a generated plan
LAST_SPLIT_ADJUSTMENT = 30

# Length of a manually added split when the plan already covers the target
DEFAULT_NEW_SPLIT_DISTANCE = {
    DistanceUnit.KM: 5.0,
    DistanceUnit.MI: 3.1,
}


@dataclass(frozen=True)
class Split:
    """
    A race segment run at base pace plus an adjustment.

    Positive adjustments are slower, negative faster (seconds per unit).
    """
    distance: float
    pace_adjustment_seconds: int = 0
    is_hilly: bool = False
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'distance': self.distance,
            'paceAdjustmentSeconds': self.pace_adjustment_seconds,
            'isHilly': self.is_hilly,
            'description': self.description,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'Split':
        return cls(
            distance=clamp_non_negative(d.get('distance', 0)),
            pace_adjustment_seconds=int(coerce_number(d.get('paceAdjustmentSeconds', 0))),
            is_hilly=bool(d.get('isHilly', False)),
            description=str(d.get('description', '')),
        )


@dataclass(frozen=True)
class Break:
    """A fixed-duration stop at a point on the course."""
    type: BreakType
    duration_seconds: int
    at_distance: float = 0.0
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type.value,
            'durationSeconds': self.duration_seconds,
            'atDistance': self.at_distance,
            'description': self.description,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'Break':
        return cls(
            type=BreakType.parse(d.get('type')),
            duration_seconds=int(clamp_non_negative(d.get('durationSeconds', 0))),
            at_distance=clamp_non_negative(d.get('atDistance', 0)),
            description=str(d.get('description', '')),
        )


def calculate_segment_time(split: Split, base_pace_seconds: float) -> float:
    """Seconds to run one split: distance x (base pace + adjustment)."""
    return split.distance * (base_pace_seconds + split.pace_adjustment_seconds)


def calculate_total_seconds(
    base_pace: Pace,
    splits: Sequence[Split],
    breaks: Sequence[Break]
) -> float:
    """Undecomposed total: split times in order, then every break."""
    base_seconds = base_pace.total_seconds
    total = 0.0

    for split in splits:
        total += calculate_segment_time(split, base_seconds)

    for brk in breaks:
        total += brk.duration_seconds

    return total


def calculate_total_time(
    base_pace: Pace,
    splits: Sequence[Split],
    breaks: Sequence[Break]
) -> Duration:
    """
    Estimate finish time for a race plan.

    Args:
        base_pace: Pace per distance unit
        splits: Ordered race segments (same unit as the pace)
        breaks: Stops; position does not affect the total

    Returns:
        Finish time, floor-decomposed
    """
    return Duration.from_seconds(calculate_total_seconds(base_pace, splits, breaks))


def calculate_effective_pace(base_pace: Pace, pace_adjustment_seconds: int) -> Pace:
    """
    Pace actually run on a split (base + adjustment).

    An adjustment faster than the base pace itself floors at 0:00; the
    split total in calculate_segment_time stays unclamped.
    """
    return Pace.from_seconds(base_pace.total_seconds + pace_adjustment_seconds)


def calculate_total_split_distance(splits: Sequence[Split]) -> float:
    return sum(split.distance for split in splits)


def calculate_distance_discrepancy(target_distance: float, splits: Sequence[Split]) -> float:
    """
    Target distance minus the distance the splits cover.

    Positive when splits fall short of the target. Display only; a
    mismatch never blocks the total.
    """
    return target_distance - calculate_total_split_distance(splits)


@dataclass(frozen=True)
class RacePlan:
    """
    Complete race plan in a single working unit.

    All distances (target, splits, break positions) and the base pace
    are expressed in `unit`.
    """
    unit: DistanceUnit
    target_distance: float
    base_pace: Pace
    splits: Tuple[Split, ...] = field(default_factory=tuple)
    breaks: Tuple[Break, ...] = field(default_factory=tuple)

    @property
    def total_split_distance(self) -> float:
        return calculate_total_split_distance(self.splits)

    @property
    def distance_discrepancy(self) -> float:
        return calculate_distance_discrepancy(self.target_distance, self.splits)

    def total_time(self) -> Duration:
        return calculate_total_time(self.base_pace, self.splits, self.breaks)

    def effective_paces(self) -> List[Pace]:
        return [
            calculate_effective_pace(self.base_pace, split.pace_adjustment_seconds)
            for split in self.splits
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'unit': self.unit.value,
            'targetDistance': self.target_distance,
            'basePace': self.base_pace.to_dict(),
            'splits': [split.to_dict() for split in self.splits],
            'breaks': [brk.to_dict() for brk in self.breaks],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'RacePlan':
        return cls(
            unit=DistanceUnit.parse(d.get('unit', 'km')),
            target_distance=clamp_non_negative(d.get('targetDistance', 0)),
            base_pace=Pace.from_dict(d.get('basePace') or {}),
            splits=tuple(Split.from_dict(s) for s in d.get('splits', [])),
            breaks=tuple(Break.from_dict(b) for b in d.get('breaks', [])),
        )


def convert_plan_unit(plan: RacePlan, new_unit: DistanceUnit) -> RacePlan:
    """
    Switch a plan's working unit.

    Converts the target distance, every split distance, every break
    position and the base pace. Distances are rounded to 2 decimals after
    conversion, so a km -> mi -> km round trip is only approximate.
    """
    if new_unit == plan.unit:
        return plan

    def convert(value: float) -> float:
        return round_distance(convert_distance(value, plan.unit, new_unit))

    return RacePlan(
        unit=new_unit,
        target_distance=convert(plan.target_distance),
        base_pace=convert_pace(plan.base_pace, plan.unit, new_unit),
        splits=tuple(replace(s, distance=convert(s.distance)) for s in plan.splits),
        breaks=tuple(replace(b, at_distance=convert(b.at_distance)) for b in plan.breaks),
    )


def create_break(
    break_type: BreakType,
    at_distance: float = 0.0,
    duration_seconds: Optional[int] = None
) -> Break:
    """New break with the default duration for its type."""
    if duration_seconds is None:
        duration_seconds = BREAK_DEFAULT_DURATIONS[break_type]
    return Break(
        type=break_type,
        duration_seconds=duration_seconds,
        at_distance=at_distance,
        description=f"{break_type.value.capitalize()} break",
    )


def create_default_splits(
    race: RaceDistance,
    unit: DistanceUnit = DistanceUnit.KM
) -> Tuple[float, List[Split]]:
    """
    Divide a preset race into even splits.

    The last split is run LAST_SPLIT_ADJUSTMENT seconds per unit slower.

    Returns:
        Tuple of (target distance in unit, splits)
    """
    distance = race.distance_km if unit == DistanceUnit.KM else race.distance_km * KM_TO_MI
    split_distance = round_distance(distance / race.default_splits)

    splits = [
        Split(
            distance=split_distance,
            pace_adjustment_seconds=LAST_SPLIT_ADJUSTMENT if i == race.default_splits - 1 else 0,
            description=f"Split {i + 1}",
        )
        for i in range(race.default_splits)
    ]
    return round_distance(distance), splits


def apply_race_preset(plan: RacePlan, race: RaceDistance) -> RacePlan:
    """Replace a plan's target and splits with a preset's; breaks and pace are kept."""
    target, splits = create_default_splits(race, plan.unit)
    return replace(plan, target_distance=target, splits=tuple(splits))


def suggest_next_split(plan: RacePlan) -> Split:
    """
    Split to append to a plan.

    Covers the remaining distance to the target, or a default length
    when the splits already reach it.
    """
    remaining = max(0.0, plan.distance_discrepancy)
    return Split(
        distance=remaining or DEFAULT_NEW_SPLIT_DISTANCE[plan.unit],
        description=f"Split {len(plan.splits) + 1}",
    )


def default_race_plan() -> RacePlan:
    """Marathon at 5:30/km, slower second half, typical stops."""
    return RacePlan(
        unit=DistanceUnit.KM,
        target_distance=42.2,
        base_pace=Pace(5, 30),
        splits=(
            Split(21.1, 0, False, 'First half'),
            Split(21.1, 30, False, 'Second half'),
        ),
        breaks=(
            Break(BreakType.CROWD, 30, 0, 'Start line crowding'),
            Break(BreakType.DRINK, 15, 5, 'First water station'),
            Break(BreakType.DRINK, 15, 10, 'Second water station'),
            Break(BreakType.TOILET, 120, 15, 'Toilet break'),
        ),
    )
