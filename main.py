#!/usr/bin/env python3
"""
Training Calculators - CLI Entry Point

Usage:
    python main.py acwr --mileage 20 22 25 24 30 [--export out.csv]
    python main.py acwr --csv weekly.csv
    python main.py predict --distance 5 --unit km --time 25:00 --target 10
    python main.py plan [--state DIR] [--unit mi] [--race Marathon]
    python main.py test
"""

import sys
import argparse

from core.metrics import WeeklyLoad, AcwrParams, compute_weekly_loads
from core.pace_prediction import RIEGEL_EXPONENT
from core.race_plan import convert_plan_unit, apply_race_preset, default_race_plan
from core.units import (
    Distance,
    DistanceUnit,
    Duration,
    InvalidInputError,
    clamp_non_negative,
    find_race,
)
from data.mileage_loader import MileageDataLoader, export_weekly_loads
from data.storage import (
    JsonFileStore,
    save_weekly_loads,
    save_prediction_inputs,
    save_race_plan,
    load_race_plan,
)
from analysis.reports import (
    generate_acwr_report,
    generate_prediction_report,
    generate_race_plan_report,
)


def run_acwr(mileage=None, csv_path=None, export_path=None, state_dir=None, verbose=True):
    """Compute and print the ACWR report."""
    params = AcwrParams()

    if csv_path:
        loader = MileageDataLoader(csv_path, params)
        loader.load(verbose=verbose)
        loads = loader.get_weekly_loads()
    else:
        loads = compute_weekly_loads(
            [WeeklyLoad(clamp_non_negative(m)) for m in (mileage or [])], params
        )

    print(generate_acwr_report(loads, params))

    if export_path:
        path = export_weekly_loads(loads, export_path, params)
        print(f"Weekly loads exported to: {path}")

    if state_dir:
        save_weekly_loads(JsonFileStore(state_dir), loads)

    return loads


def run_predict(distance, unit, time, target, target_unit=None,
                exponent=RIEGEL_EXPONENT, state_dir=None):
    """Predict a race time and print the report."""
    known_distance = Distance(clamp_non_negative(distance), DistanceUnit.parse(unit))
    known_time = Duration.parse(time)
    target_distance = Distance(
        clamp_non_negative(target), DistanceUnit.parse(target_unit or unit)
    )

    print(generate_prediction_report(known_distance, known_time, target_distance, exponent))

    if state_dir:
        save_prediction_inputs(JsonFileStore(state_dir), known_distance, known_time, target_distance)


def run_plan(state_dir=None, unit=None, race=None):
    """Load (or create) a race plan, apply changes, print and save it."""
    store = JsonFileStore(state_dir) if state_dir else None
    plan = load_race_plan(store) if store else default_race_plan()

    if unit:
        plan = convert_plan_unit(plan, DistanceUnit.parse(unit))
    if race:
        plan = apply_race_preset(plan, find_race(race))

    print(generate_race_plan_report(plan))

    if store:
        save_race_plan(store, plan)

    return plan


def run_tests():
    """Quick smoke run of every engine."""
    print("Running tests...\n")

    print("Testing workload ratio...")
    from core.metrics import calculate_acwr_series, classify_acwr_risk
    series = calculate_acwr_series([5, 10, 15, 20])
    assert series == [None, None, None, 1.6], f"Unexpected series {series}"
    assert classify_acwr_risk(series[-1]) == "Very High Risk"
    print(f"  ACWR test passed: {series[-1]:.2f} ({classify_acwr_risk(series[-1])})")

    print("\nTesting pace prediction...")
    from core.pace_prediction import predict_race_time
    predicted = predict_race_time(Distance(5), Duration(0, 25, 0), Distance(10))
    assert predicted.total_seconds > 3000, "10K should take longer than twice 5K pace"
    print(f"  Prediction test passed: 10K in {predicted.format()}")

    print("\nTesting race plan...")
    plan = default_race_plan()
    total = plan.total_time()
    assert total.total_seconds > 0, "Plan total should be positive"
    print(f"  Race plan test passed: {total.format()}")

    print("\n" + "="*50)
    print("ALL TESTS PASSED!")
    print("="*50)


def main(argv=None):
    parser = argparse.ArgumentParser(description='Training Calculators')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # ACWR command
    acwr_parser = subparsers.add_parser('acwr', help='Acute:Chronic Workload Ratio')
    acwr_parser.add_argument('--mileage', type=float, nargs='*', default=[], help='Weekly mileage, oldest first')
    acwr_parser.add_argument('--csv', help='CSV file with a mileage column')
    acwr_parser.add_argument('--export', help='Write weekly loads with ACWR to CSV')
    acwr_parser.add_argument('--state', help='Directory for saved calculator state')

    # Predict command
    pred_parser = subparsers.add_parser('predict', help='Predict a race time (Riegel)')
    pred_parser.add_argument('--distance', type=float, required=True, help='Known distance')
    pred_parser.add_argument('--unit', default='km', choices=['km', 'mi'], help='Known distance unit')
    pred_parser.add_argument('--time', required=True, help='Known time, MM:SS or H:MM:SS')
    pred_parser.add_argument('--target', type=float, required=True, help='Target distance')
    pred_parser.add_argument('--target-unit', choices=['km', 'mi'], help='Target unit (default: --unit)')
    pred_parser.add_argument('--exponent', type=float, default=RIEGEL_EXPONENT, help='Fatigue exponent')
    pred_parser.add_argument('--state', help='Directory for saved calculator state')

    # Plan command
    plan_parser = subparsers.add_parser('plan', help='Race plan with splits and breaks')
    plan_parser.add_argument('--state', help='Directory for saved calculator state')
    plan_parser.add_argument('--unit', choices=['km', 'mi'], help='Switch working unit')
    plan_parser.add_argument('--race', help='Apply a preset race (5K, 10K, Half Marathon, Marathon, 50K)')

    # Test command
    subparsers.add_parser('test', help='Run tests')

    args = parser.parse_args(argv)

    try:
        if args.command == 'acwr':
            run_acwr(args.mileage, args.csv, args.export, args.state)
        elif args.command == 'predict':
            run_predict(args.distance, args.unit, args.time, args.target,
                        args.target_unit, args.exponent, args.state)
        elif args.command == 'plan':
            run_plan(args.state, args.unit, args.race)
        elif args.command == 'test':
            run_tests()
        else:
            parser.print_help()
    except InvalidInputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return 0


if __name__ == '__main__':
    sys.exit(main())
