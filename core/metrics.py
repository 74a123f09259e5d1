"""
Core training metrics: rolling Acute:Chronic Workload Ratio over weekly mileage.

Based on:
- Gabbett (2016): ACWR injury risk thresholds
- Hulin et al. (2014): rolling-average acute:chronic workload

For week i (0-based, i >= 3):
    acute   = mileage[i]
    chronic = mean(mileage[i-3 .. i])
    ACWR    = round(acute / chronic, 2), or 0 when chronic == 0
"""

from dataclasses import dataclass, asdict, replace
from typing import List, Optional, Dict, Any, Sequence, Tuple
import math

import numpy as np

from .units import clamp_non_negative


RISK_NOT_AVAILABLE = "N/A"
RISK_LOW = "Low Load"
RISK_OPTIMAL = "Optimal"
RISK_HIGH = "High Risk"
RISK_VERY_HIGH = "Very High Risk"

RISK_BANDS = [RISK_LOW, RISK_OPTIMAL, RISK_HIGH, RISK_VERY_HIGH]


@dataclass
class AcwrParams:
    """
    Tunable parameters for the workload ratio.

    Thresholds are upper-inclusive: a ratio exactly on a boundary
    belongs to the band below it.
    """

    window_weeks: int = 4                 # Chronic window, includes the acute week
    threshold_low: float = 0.8            # Below this: low load
    threshold_optimal_high: float = 1.3   # Up to and including this: optimal
    threshold_high: float = 1.5           # Up to and including this: high risk
    decimals: int = 2

    def to_dict(self) -> Dict[str, Any]:
        """Convert parameters to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'AcwrParams':
        """Create parameters from dictionary."""
        return cls(**d)

    def validate(self) -> Tuple[bool, str]:
        """Validate parameter constraints."""
        issues = []

        if self.window_weeks < 1:
            issues.append("Window must span at least one week")

        if not (0 < self.threshold_low < self.threshold_optimal_high < self.threshold_high):
            issues.append("ACWR thresholds must be in ascending order")

        if self.decimals < 0:
            issues.append("Decimals must be non-negative")

        if issues:
            return False, "; ".join(issues)
        return True, "Valid"


@dataclass(frozen=True)
class WeeklyLoad:
    """One calendar week of training volume."""
    mileage: float
    acwr: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'mileage': self.mileage, 'acwr': self.acwr}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'WeeklyLoad':
        acwr = d.get('acwr')
        return cls(
            mileage=clamp_non_negative(d.get('mileage', 0)),
            acwr=_parse_ratio(acwr),
        )


def _parse_ratio(value) -> Optional[float]:
    """Stored ratio, or None when missing or non-numeric."""
    try:
        ratio = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(ratio):
        return None
    return ratio


def calculate_acute_load(mileages: Sequence[float], index: int) -> float:
    """Acute load: the most recent week of the window alone."""
    return float(mileages[index])


def calculate_chronic_load(
    mileages: Sequence[float],
    index: int,
    window_weeks: int = 4
) -> float:
    """
    Chronic load: mean mileage over the trailing window ending at index.

    Args:
        mileages: Weekly mileage values
        index: Last (acute) week of the window
        window_weeks: Window length, including the acute week

    Returns:
        Mean mileage over weeks [index - window_weeks + 1, index]
    """
    start = index - window_weeks + 1
    if start < 0:
        raise ValueError(f"Week {index} has fewer than {window_weeks} weeks of history")
    window = np.asarray(mileages[start:index + 1], dtype=float)
    return float(np.mean(window))


def calculate_acwr(
    mileages: Sequence[float],
    index: int,
    params: Optional[AcwrParams] = None
) -> Optional[float]:
    """
    Calculate the ACWR for a single week.

    Args:
        mileages: Weekly mileage values, oldest first
        index: Week to compute (0-based)
        params: Window and rounding parameters

    Returns:
        Rounded ratio, or None when the week has too little history
    """
    if params is None:
        params = AcwrParams()

    if index < params.window_weeks - 1:
        return None

    acute = calculate_acute_load(mileages, index)
    chronic = calculate_chronic_load(mileages, index, params.window_weeks)

    # No chronic load: documented fallback instead of dividing by zero
    if chronic == 0:
        return 0.0

    return round(acute / chronic, params.decimals)


def calculate_acwr_series(
    mileages: Sequence[float],
    params: Optional[AcwrParams] = None
) -> List[Optional[float]]:
    """
    Calculate ACWR for the entire weekly history.

    Args:
        mileages: Weekly mileage values, oldest first

    Returns:
        Same-length list; None for the first window_weeks - 1 weeks
    """
    return [calculate_acwr(mileages, i, params) for i in range(len(mileages))]


def compute_weekly_loads(
    loads: Sequence[WeeklyLoad],
    params: Optional[AcwrParams] = None
) -> List[WeeklyLoad]:
    """Return fresh records with acwr recomputed over the full history."""
    series = calculate_acwr_series([load.mileage for load in loads], params)
    return [replace(load, acwr=acwr) for load, acwr in zip(loads, series)]


def classify_acwr_risk(acwr: Optional[float], params: Optional[AcwrParams] = None) -> str:
    """
    Classify ACWR into injury-risk bands.

    Bands based on Gabbett (2016):
        - Low Load: < 0.8
        - Optimal: 0.8 - 1.3 (inclusive)
        - High Risk: > 1.3 - 1.5 (inclusive)
        - Very High Risk: > 1.5

    Args:
        acwr: Acute:Chronic Workload Ratio, or None when unavailable

    Returns:
        Band label
    """
    if acwr is None:
        return RISK_NOT_AVAILABLE
    if params is None:
        params = AcwrParams()

    if acwr < params.threshold_low:
        return RISK_LOW
    elif acwr <= params.threshold_optimal_high:
        return RISK_OPTIMAL
    elif acwr <= params.threshold_high:
        return RISK_HIGH
    else:
        return RISK_VERY_HIGH


def get_acwr_summary(
    loads: Sequence[WeeklyLoad],
    params: Optional[AcwrParams] = None
) -> Dict[str, Any]:
    """
    Summarize a weekly history for display.

    Returns:
        Dict with weeks tracked, latest ratio and band, and week counts per band
    """
    computed = compute_weekly_loads(loads, params)
    ratios = [load.acwr for load in computed]
    latest = ratios[-1] if ratios else None

    band_counts = {band: 0 for band in RISK_BANDS}
    for ratio in ratios:
        if ratio is not None:
            band_counts[classify_acwr_risk(ratio, params)] += 1

    mileages = np.asarray([load.mileage for load in computed], dtype=float)

    return {
        'weeks_tracked': len(computed),
        'total_mileage': float(np.sum(mileages)) if len(mileages) else 0.0,
        'latest_mileage': float(mileages[-1]) if len(mileages) else None,
        'latest_acwr': latest,
        'latest_risk': classify_acwr_risk(latest, params),
        'band_counts': band_counts,
    }
