"""Report generation utilities."""

from .reports import (
    format_adjustment,
    generate_acwr_report,
    generate_prediction_report,
    generate_race_plan_report,
)

__all__ = [
    'format_adjustment',
    'generate_acwr_report',
    'generate_prediction_report',
    'generate_race_plan_report',
]
