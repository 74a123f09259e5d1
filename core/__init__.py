"""
Core training calculators for runners.

This package provides pure, stateless engines for:
- Load monitoring (rolling ACWR over weekly mileage, risk bands)
- Race time prediction (Riegel's formula)
- Race planning (splits, pace adjustments, breaks)

Every function takes plain records and returns fresh ones; nothing is
cached between calls.
"""

# Units and shared records
from .units import (
    KM_TO_MI,
    MI_TO_KM,
    COMMON_RACES,
    InvalidInputError,
    DistanceUnit,
    Distance,
    Duration,
    Pace,
    RaceDistance,
    clamp_non_negative,
    convert_distance,
    convert_pace,
    find_race,
)

# Workload ratio
from .metrics import (
    AcwrParams,
    WeeklyLoad,
    calculate_acwr,
    calculate_acwr_series,
    compute_weekly_loads,
    classify_acwr_risk,
    get_acwr_summary,
)

# Pace prediction
from .pace_prediction import (
    RIEGEL_EXPONENT,
    predict_race_time,
    predict_common_races,
    calculate_average_pace,
)

# Race plan
from .race_plan import (
    BreakType,
    Split,
    Break,
    RacePlan,
    calculate_total_time,
    calculate_effective_pace,
    calculate_distance_discrepancy,
    convert_plan_unit,
    create_break,
    create_default_splits,
    apply_race_preset,
    suggest_next_split,
    default_race_plan,
)

__all__ = [
    # Units
    'KM_TO_MI',
    'MI_TO_KM',
    'COMMON_RACES',
    'InvalidInputError',
    'DistanceUnit',
    'Distance',
    'Duration',
    'Pace',
    'RaceDistance',
    'clamp_non_negative',
    'convert_distance',
    'convert_pace',
    'find_race',
    # Metrics
    'AcwrParams',
    'WeeklyLoad',
    'calculate_acwr',
    'calculate_acwr_series',
    'compute_weekly_loads',
    'classify_acwr_risk',
    'get_acwr_summary',
    # Pace prediction
    'RIEGEL_EXPONENT',
    'predict_race_time',
    'predict_common_races',
    'calculate_average_pace',
    # Race plan
    'BreakType',
    'Split',
    'Break',
    'RacePlan',
    'calculate_total_time',
    'calculate_effective_pace',
    'calculate_distance_discrepancy',
    'convert_plan_unit',
    'create_break',
    'create_default_splits',
    'apply_race_preset',
    'suggest_next_split',
    'default_race_plan',
]
