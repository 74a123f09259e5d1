"""
Report generation for the training calculators.

Renders engine output (ratios, risk bands, predicted times, race plan
totals) as formatted text.
"""

from typing import List, Optional
from datetime import datetime

from core.metrics import (
    AcwrParams,
    WeeklyLoad,
    RISK_BANDS,
    compute_weekly_loads,
    classify_acwr_risk,
    get_acwr_summary,
)
from core.pace_prediction import RIEGEL_EXPONENT, predict_race_time, predict_common_races
from core.race_plan import RacePlan, calculate_effective_pace, calculate_segment_time
from core.units import Distance, Duration


def format_adjustment(seconds: int) -> str:
    """Signed pace adjustment, e.g. '+30s', '-10s', '±0s'."""
    if seconds == 0:
        return "±0s"
    return f"{'+' if seconds > 0 else '-'}{abs(seconds)}s"


def format_ratio(acwr: Optional[float]) -> str:
    return "-" if acwr is None else f"{acwr:.2f}"


def _header(title: str) -> str:
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    return f"""
{'='*70}
{title}
{'='*70}
Generated: {timestamp}
"""


def generate_acwr_report(
    loads: List[WeeklyLoad],
    params: Optional[AcwrParams] = None,
    title: str = "Acute:Chronic Workload Ratio"
) -> str:
    """
    Generate a week-by-week ACWR report.

    Args:
        loads: Weekly loads, oldest first
        params: ACWR parameters
        title: Report title

    Returns:
        Formatted report string
    """
    params = params or AcwrParams()
    summary = get_acwr_summary(loads, params)

    report = _header(title)
    report += f"""Weeks tracked:             {summary['weeks_tracked']:>8d}
Total mileage:             {summary['total_mileage']:>8.1f}
Latest ACWR:               {format_ratio(summary['latest_acwr']):>8}
Latest risk:               {summary['latest_risk']:>8}

WEEKLY BREAKDOWN
----------------
"""
    report += f"{'Week':<6} {'Mileage':>10} {'ACWR':>8} {'Risk':>16}\n"
    report += "-" * 70 + "\n"

    for i, load in enumerate(compute_weekly_loads(loads, params)):
        report += (f"{i + 1:<6} "
                   f"{load.mileage:>10.1f} "
                   f"{format_ratio(load.acwr):>8} "
                   f"{classify_acwr_risk(load.acwr, params):>16}\n")

    if summary['weeks_tracked'] < params.window_weeks:
        report += f"\nAt least {params.window_weeks} weeks are needed before a ratio is available.\n"

    report += """
RISK BANDS
----------
"""
    for band in RISK_BANDS:
        report += f"{band:<20} {summary['band_counts'][band]:>4d} weeks\n"

    report += f"""
Thresholds: low < {params.threshold_low:.2f} <= optimal <= {params.threshold_optimal_high:.2f} < high risk <= {params.threshold_high:.2f} < very high risk
"""
    report += "\n" + "=" * 70 + "\n"
    return report


def generate_prediction_report(
    known_distance: Distance,
    known_time: Duration,
    target_distance: Distance,
    exponent: float = RIEGEL_EXPONENT,
    title: str = "Race Time Prediction"
) -> str:
    """
    Generate a Riegel prediction report for a target and the preset races.

    Raises:
        InvalidInputError: known distance is zero
    """
    predicted = predict_race_time(known_distance, known_time, target_distance, exponent)

    report = _header(title)
    report += f"""Known performance:  {known_distance.value:g} {known_distance.unit.value} in {known_time.format()}
Target distance:    {target_distance.value:g} {target_distance.unit.value}
Predicted time:     {predicted.format()}
Exponent:           {exponent:.2f}

COMMON RACES
------------
"""
    for race, duration in predict_common_races(known_distance, known_time, exponent):
        report += f"{race.name:<20} {duration.format():>10}\n"

    report += "\nPredictions assume equivalent training and conditions; use as guidance.\n"
    report += "\n" + "=" * 70 + "\n"
    return report


def generate_race_plan_report(plan: RacePlan, title: str = "Race Plan") -> str:
    """
    Generate a split-by-split race plan report.

    Args:
        plan: Race plan in its working unit
        title: Report title

    Returns:
        Formatted report string
    """
    unit = plan.unit.value
    base_seconds = plan.base_pace.total_seconds

    report = _header(title)
    report += f"""Target distance:    {plan.target_distance:.2f} {unit}
Base pace:          {plan.base_pace.format(plan.unit)}
Estimated finish:   {plan.total_time().format()}

SPLITS
------
"""
    report += f"{'#':<3} {'Description':<22} {'Dist':>8} {'Adj':>6} {'Pace':>10} {'Time':>10}\n"
    report += "-" * 70 + "\n"

    for i, split in enumerate(plan.splits):
        pace = calculate_effective_pace(plan.base_pace, split.pace_adjustment_seconds)
        segment = Duration.from_seconds(calculate_segment_time(split, base_seconds))
        hilly = " ^" if split.is_hilly else ""
        report += (f"{i + 1:<3} "
                   f"{(split.description + hilly)[:22]:<22} "
                   f"{split.distance:>8.2f} "
                   f"{format_adjustment(split.pace_adjustment_seconds):>6} "
                   f"{pace.format():>10} "
                   f"{segment.format():>10}\n")

    discrepancy = plan.distance_discrepancy
    report += f"\nTotal: {plan.total_split_distance:.1f} {unit}"
    if abs(discrepancy) >= 0.01:
        report += f" ({'+' if discrepancy > 0 else ''}{discrepancy:.1f} {unit} from target)"
    report += "\n"

    report += """
BREAKS
------
"""
    for brk in sorted(plan.breaks, key=lambda b: b.at_distance):
        report += (f"{brk.at_distance:>8.2f} {unit}  "
                   f"{brk.type.value:<8} "
                   f"{brk.duration_seconds:>5d}s  "
                   f"{brk.description}\n")
    break_total = sum(brk.duration_seconds for brk in plan.breaks)
    report += f"Total break time: {Duration.from_seconds(break_total).format()}\n"

    report += "\n" + "=" * 70 + "\n"
    return report
