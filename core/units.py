"""
Units and shared records: distances, durations and paces.

Every engine normalizes through this module before doing any
cross-distance arithmetic. Conversion factors:
    1 km = 0.621371 mi
    1 mi = 1.60934 km
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any
import math


KM_TO_MI = 0.621371
MI_TO_KM = 1.60934


class InvalidInputError(ValueError):
    """Raised when an engine receives input it cannot compute on."""


class DistanceUnit(Enum):
    """Working distance unit."""
    KM = "km"
    MI = "mi"

    @classmethod
    def parse(cls, value) -> 'DistanceUnit':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidInputError(f"Unknown distance unit: {value!r}")


def coerce_number(value) -> float:
    """Coerce raw input to a finite number, keeping its sign (non-numeric becomes 0)."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def clamp_non_negative(value) -> float:
    """Coerce raw input to a number >= 0 (non-numeric becomes 0)."""
    return max(0.0, coerce_number(value))


def round_distance(value: float) -> float:
    """Round to 2 decimal places, as displayed distances are."""
    return round(value, 2)


def convert_distance(value: float, from_unit: DistanceUnit, to_unit: DistanceUnit) -> float:
    """
    Convert a distance value between units.

    Args:
        value: Distance in from_unit
        from_unit: Source unit
        to_unit: Target unit

    Returns:
        Distance in to_unit (unrounded)
    """
    if from_unit == to_unit:
        return value
    if from_unit == DistanceUnit.KM:
        return value * KM_TO_MI
    return value * MI_TO_KM


@dataclass(frozen=True)
class Distance:
    """A distance with its unit."""
    value: float
    unit: DistanceUnit = DistanceUnit.KM

    def to_km(self) -> float:
        return convert_distance(self.value, self.unit, DistanceUnit.KM)

    def to(self, unit: DistanceUnit) -> 'Distance':
        return Distance(convert_distance(self.value, self.unit, unit), unit)

    def to_dict(self) -> Dict[str, Any]:
        return {'value': self.value, 'unit': self.unit.value}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'Distance':
        return cls(
            value=clamp_non_negative(d.get('value', 0)),
            unit=DistanceUnit.parse(d.get('unit', 'km')),
        )


@dataclass(frozen=True)
class Duration:
    """
    Elapsed time as hours/minutes/seconds.

    Reducible to total seconds = hours*3600 + minutes*60 + seconds.
    """
    hours: int = 0
    minutes: int = 0
    seconds: int = 0

    @property
    def total_seconds(self) -> int:
        return self.hours * 3600 + self.minutes * 60 + self.seconds

    @classmethod
    def from_seconds(cls, total: float) -> 'Duration':
        """
        Decompose seconds with floor division.

        Fractional seconds are truncated, never rounded. Negative totals
        clamp to zero.
        """
        total = max(0.0, total)
        hours = math.floor(total / 3600)
        minutes = math.floor((total % 3600) / 60)
        seconds = math.floor(total % 60)
        return cls(hours, minutes, seconds)

    @classmethod
    def parse(cls, text: str) -> 'Duration':
        """Parse 'MM:SS' or 'H:MM:SS'."""
        parts = text.strip().split(':')
        if not 1 <= len(parts) <= 3:
            raise InvalidInputError(f"Cannot parse duration: {text!r}")
        try:
            numbers = [int(p) for p in parts]
        except ValueError:
            raise InvalidInputError(f"Cannot parse duration: {text!r}")
        numbers = [0] * (3 - len(numbers)) + numbers
        return cls(*[max(0, n) for n in numbers])

    def format(self) -> str:
        return f"{self.hours}:{self.minutes:02d}:{self.seconds:02d}"

    def to_dict(self) -> Dict[str, Any]:
        return {'hours': self.hours, 'minutes': self.minutes, 'seconds': self.seconds}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'Duration':
        return cls(
            hours=int(clamp_non_negative(d.get('hours', 0))),
            minutes=int(clamp_non_negative(d.get('minutes', 0))),
            seconds=int(clamp_non_negative(d.get('seconds', 0))),
        )


@dataclass(frozen=True)
class Pace:
    """Time per distance unit (min:sec per km or per mile)."""
    minutes: int = 0
    seconds: int = 0

    @property
    def total_seconds(self) -> int:
        return self.minutes * 60 + self.seconds

    @classmethod
    def from_seconds(cls, total: float) -> 'Pace':
        total = max(0.0, total)
        return cls(math.floor(total / 60), math.floor(total % 60))

    @classmethod
    def parse(cls, text: str) -> 'Pace':
        """Parse 'M:SS'."""
        minutes, _, seconds = text.strip().partition(':')
        try:
            return cls(max(0, int(minutes)), max(0, int(seconds or 0)))
        except ValueError:
            raise InvalidInputError(f"Cannot parse pace: {text!r}")

    def format(self, unit: DistanceUnit = None) -> str:
        text = f"{self.minutes}:{self.seconds:02d}"
        if unit is not None:
            text += f"/{unit.value}"
        return text

    def to_dict(self) -> Dict[str, Any]:
        return {'minutes': self.minutes, 'seconds': self.seconds}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'Pace':
        return cls(
            minutes=int(clamp_non_negative(d.get('minutes', 0))),
            seconds=int(clamp_non_negative(d.get('seconds', 0))),
        )


@dataclass(frozen=True)
class RaceDistance:
    """A standard race with its plan defaults."""
    name: str
    distance_km: float
    default_splits: int = 2

    @property
    def distance(self) -> Distance:
        return Distance(self.distance_km, DistanceUnit.KM)


COMMON_RACES = [
    RaceDistance('5K', 5.0, default_splits=2),
    RaceDistance('10K', 10.0, default_splits=2),
    RaceDistance('Half Marathon', 21.1, default_splits=3),
    RaceDistance('Marathon', 42.2, default_splits=4),
    RaceDistance('50K', 50.0, default_splits=5),
]


def find_race(name: str) -> RaceDistance:
    """Look up a preset by name (case-insensitive)."""
    for race in COMMON_RACES:
        if race.name.lower() == name.lower():
            return race
    raise InvalidInputError(f"Unknown race: {name!r}")


def convert_pace(pace: Pace, from_unit: DistanceUnit, to_unit: DistanceUnit) -> Pace:
    """
    Convert a pace between per-km and per-mile.

    Per-km seconds are multiplied by the km-per-mile factor, per-mile
    seconds by the mile-per-km factor. Result is floored to whole seconds.
    """
    if from_unit == to_unit:
        return pace
    if from_unit == DistanceUnit.KM:
        converted = pace.total_seconds * MI_TO_KM
    else:
        converted = pace.total_seconds * KM_TO_MI
    return Pace.from_seconds(converted)
