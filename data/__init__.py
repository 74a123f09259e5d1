"""Data loading and snapshot storage utilities."""

from .storage import (
    SnapshotStore,
    InMemoryStore,
    JsonFileStore,
    save_weekly_loads,
    load_weekly_loads,
    save_prediction_inputs,
    load_prediction_inputs,
    save_race_plan,
    load_race_plan,
)
from .mileage_loader import (
    MileageDataLoader,
    loads_to_dataframe,
    export_weekly_loads,
)

__all__ = [
    # Storage
    'SnapshotStore',
    'InMemoryStore',
    'JsonFileStore',
    'save_weekly_loads',
    'load_weekly_loads',
    'save_prediction_inputs',
    'load_prediction_inputs',
    'save_race_plan',
    'load_race_plan',
    # Mileage logs
    'MileageDataLoader',
    'loads_to_dataframe',
    'export_weekly_loads',
]
