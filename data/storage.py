"""
Snapshot storage for calculator inputs.

Each calculator persists its inputs under a fixed key and reloads them on
start. The engines never touch storage; callers load typed records from
a store, compute, and save after every change.
"""

import json
import warnings
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Tuple

from core.metrics import WeeklyLoad
from core.race_plan import RacePlan, default_race_plan
from core.units import Distance, DistanceUnit, Duration


ACWR_KEY = 'acwr-data'
PACE_PREDICTOR_KEY = 'pace-predictor-data'
RACE_PLANNER_KEY = 'race-planner-data'

DEFAULT_KNOWN_DISTANCE = Distance(5.0, DistanceUnit.KM)
DEFAULT_KNOWN_TIME = Duration(0, 25, 0)
DEFAULT_TARGET_DISTANCE = Distance(10.0, DistanceUnit.KM)


class SnapshotStore(ABC):
    """Key/value store of JSON-compatible snapshots."""

    @abstractmethod
    def load(self, key: str, default: Any = None) -> Any:
        """Return the snapshot stored under key, or default."""

    @abstractmethod
    def save(self, key: str, payload: Any) -> None:
        """Replace the snapshot stored under key."""


class InMemoryStore(SnapshotStore):
    """Process-local store; snapshots are copied through JSON on the way in."""

    def __init__(self):
        self._items: Dict[str, str] = {}

    def load(self, key: str, default: Any = None) -> Any:
        if key not in self._items:
            return default
        return json.loads(self._items[key])

    def save(self, key: str, payload: Any) -> None:
        self._items[key] = json.dumps(payload)


class JsonFileStore(SnapshotStore):
    """
    One human-readable JSON file per key.

    Unreadable files fall back to the default with a warning, so a corrupt
    snapshot never prevents a calculator from starting.
    """

    def __init__(self, directory):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str, default: Any = None) -> Any:
        path = self.path_for(key)
        if not path.exists():
            return default
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            warnings.warn(f"Ignoring unreadable snapshot {path}: {e}")
            return default

    def save(self, key: str, payload: Any) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self.path_for(key).write_text(json.dumps(payload, indent=2), encoding="utf-8")


# =============================================================================
# Typed snapshots
# =============================================================================

def save_weekly_loads(store: SnapshotStore, loads: List[WeeklyLoad]) -> None:
    store.save(ACWR_KEY, [load.to_dict() for load in loads])


def load_weekly_loads(store: SnapshotStore) -> List[WeeklyLoad]:
    data = store.load(ACWR_KEY, [])
    if not isinstance(data, list):
        warnings.warn(f"Ignoring malformed '{ACWR_KEY}' snapshot")
        return []
    try:
        return [WeeklyLoad.from_dict(item) for item in data]
    except (TypeError, AttributeError, ValueError) as e:
        warnings.warn(f"Ignoring malformed '{ACWR_KEY}' snapshot: {e}")
        return []


def save_prediction_inputs(
    store: SnapshotStore,
    known_distance: Distance,
    known_time: Duration,
    target_distance: Distance
) -> None:
    store.save(PACE_PREDICTOR_KEY, {
        'knownDistance': known_distance.to_dict(),
        'knownTime': known_time.to_dict(),
        'targetDistance': target_distance.to_dict(),
    })


def load_prediction_inputs(store: SnapshotStore) -> Tuple[Distance, Duration, Distance]:
    """
    Returns:
        Tuple of (known distance, known time, target distance)
    """
    data = store.load(PACE_PREDICTOR_KEY)
    if not data:
        return DEFAULT_KNOWN_DISTANCE, DEFAULT_KNOWN_TIME, DEFAULT_TARGET_DISTANCE

    try:
        return (
            Distance.from_dict(data['knownDistance']),
            Duration.from_dict(data['knownTime']),
            Distance.from_dict(data['targetDistance']),
        )
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        warnings.warn(f"Ignoring malformed '{PACE_PREDICTOR_KEY}' snapshot: {e}")
        return DEFAULT_KNOWN_DISTANCE, DEFAULT_KNOWN_TIME, DEFAULT_TARGET_DISTANCE


def save_race_plan(store: SnapshotStore, plan: RacePlan) -> None:
    store.save(RACE_PLANNER_KEY, plan.to_dict())


def load_race_plan(store: SnapshotStore) -> RacePlan:
    data = store.load(RACE_PLANNER_KEY)
    if not data:
        return default_race_plan()

    try:
        return RacePlan.from_dict(data)
    except (TypeError, AttributeError, ValueError) as e:
        warnings.warn(f"Ignoring malformed '{RACE_PLANNER_KEY}' snapshot: {e}")
        return default_race_plan()
