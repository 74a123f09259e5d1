"""
Tests for storage, mileage loading, reports and the CLI.

Run with: python -m pytest tests/test_data.py -v
"""

import json

import pandas as pd
import pytest

from core.metrics import WeeklyLoad
from core.race_plan import default_race_plan, convert_plan_unit
from core.units import Distance, DistanceUnit, Duration
from data.storage import (
    ACWR_KEY,
    RACE_PLANNER_KEY,
    PACE_PREDICTOR_KEY,
    InMemoryStore,
    JsonFileStore,
    save_weekly_loads,
    load_weekly_loads,
    save_prediction_inputs,
    load_prediction_inputs,
    save_race_plan,
    load_race_plan,
)
from data.mileage_loader import MileageDataLoader, export_weekly_loads, loads_to_dataframe
from analysis.reports import (
    format_adjustment,
    generate_acwr_report,
    generate_prediction_report,
    generate_race_plan_report,
)
import main


# =============================================================================
# Storage Tests
# =============================================================================

class TestStores:
    """Tests for snapshot stores."""

    def test_memory_store_default(self):
        """A missing key returns the default."""
        assert InMemoryStore().load('missing', 'fallback') == 'fallback'

    def test_memory_store_copies_payload(self):
        """Later mutation of a saved payload does not leak into the store."""
        store = InMemoryStore()
        payload = {'a': [1, 2]}
        store.save('k', payload)
        payload['a'].append(3)
        assert store.load('k') == {'a': [1, 2]}

    def test_file_store_writes_json(self, tmp_path):
        """Snapshots are written as <key>.json and read back."""
        store = JsonFileStore(tmp_path / 'state')
        store.save('k', {'value': 5})
        assert json.loads((tmp_path / 'state' / 'k.json').read_text()) == {'value': 5}
        assert store.load('k') == {'value': 5}

    def test_file_store_missing_key(self, tmp_path):
        """A missing file returns the default."""
        assert JsonFileStore(tmp_path).load('nothing', []) == []

    def test_corrupt_snapshot_falls_back(self, tmp_path):
        """Invalid JSON warns and returns the default."""
        (tmp_path / 'k.json').write_text('{not json')
        with pytest.warns(UserWarning, match='unreadable'):
            assert JsonFileStore(tmp_path).load('k', 'default') == 'default'

    def test_undecodable_snapshot_falls_back(self, tmp_path):
        """Bytes that are not UTF-8 warn and return the default."""
        (tmp_path / 'k.json').write_bytes(b'\xff\xfe{')
        with pytest.warns(UserWarning, match='unreadable'):
            assert JsonFileStore(tmp_path).load('k', 'default') == 'default'


class TestTypedSnapshots:
    """Tests for calculator snapshots."""

    def test_weekly_loads(self):
        """Weekly loads serialize as mileage/acwr records."""
        store = InMemoryStore()
        loads = [WeeklyLoad(10), WeeklyLoad(12, 1.1)]
        save_weekly_loads(store, loads)
        assert store.load(ACWR_KEY) == [
            {'mileage': 10, 'acwr': None},
            {'mileage': 12, 'acwr': 1.1},
        ]
        assert load_weekly_loads(store) == loads

    def test_empty_weekly_loads(self):
        """No snapshot loads as an empty history."""
        assert load_weekly_loads(InMemoryStore()) == []

    def test_non_numeric_ratio_in_history(self):
        """A stored ratio that is not a number loads as None."""
        store = InMemoryStore()
        store.save(ACWR_KEY, [{'mileage': 10, 'acwr': 'n/a'}])
        assert load_weekly_loads(store) == [WeeklyLoad(10.0, None)]

    def test_malformed_history_entries(self):
        """Entries that are not records warn and load as an empty history."""
        store = InMemoryStore()
        store.save(ACWR_KEY, [10, 12, 14])
        with pytest.warns(UserWarning):
            assert load_weekly_loads(store) == []

    def test_prediction_defaults(self):
        """No snapshot loads 5 km in 25:00 -> 10 km."""
        known, time, target = load_prediction_inputs(InMemoryStore())
        assert known == Distance(5, DistanceUnit.KM)
        assert time == Duration(0, 25, 0)
        assert target == Distance(10, DistanceUnit.KM)

    def test_prediction_inputs(self):
        """Prediction inputs survive a save and load."""
        store = InMemoryStore()
        save_prediction_inputs(store, Distance(10), Duration(0, 48, 0), Distance(26.2, DistanceUnit.MI))
        assert store.load(PACE_PREDICTOR_KEY)['targetDistance'] == {'value': 26.2, 'unit': 'mi'}
        assert load_prediction_inputs(store)[2] == Distance(26.2, DistanceUnit.MI)

    def test_malformed_prediction_snapshot(self):
        """An unknown unit warns and falls back to defaults."""
        store = InMemoryStore()
        store.save(PACE_PREDICTOR_KEY, {'knownDistance': {'value': 5, 'unit': 'parsec'}})
        with pytest.warns(UserWarning):
            known, _, _ = load_prediction_inputs(store)
        assert known == Distance(5, DistanceUnit.KM)

    def test_race_plan_default(self):
        """No snapshot loads the default plan."""
        assert load_race_plan(InMemoryStore()) == default_race_plan()

    def test_race_plan_saved(self, tmp_path):
        """A saved plan reloads from disk unchanged."""
        store = JsonFileStore(tmp_path)
        plan = convert_plan_unit(default_race_plan(), DistanceUnit.MI)
        save_race_plan(store, plan)
        assert load_race_plan(JsonFileStore(tmp_path)) == plan

    def test_malformed_race_plan(self):
        """An unknown break type warns and falls back to the default plan."""
        store = InMemoryStore()
        store.save(RACE_PLANNER_KEY, {'unit': 'km', 'breaks': [{'type': 'nap'}]})
        with pytest.warns(UserWarning):
            assert load_race_plan(store) == default_race_plan()

    def test_undecodable_race_plan_file(self, tmp_path):
        """A race plan file that is not UTF-8 warns and loads the default plan."""
        (tmp_path / f'{RACE_PLANNER_KEY}.json').write_bytes(b'\xff\xfe{')
        with pytest.warns(UserWarning):
            assert load_race_plan(JsonFileStore(tmp_path)) == default_race_plan()

    def test_non_numeric_adjustment_in_plan(self):
        """A plan with a non-numeric adjustment loads with 0 for that split."""
        store = InMemoryStore()
        store.save(RACE_PLANNER_KEY, {
            'unit': 'km',
            'targetDistance': 10,
            'basePace': {'minutes': 5, 'seconds': 0},
            'splits': [{'distance': 10, 'paceAdjustmentSeconds': 'abc'}],
        })
        plan = load_race_plan(store)
        assert plan.splits[0].pace_adjustment_seconds == 0
        assert plan.total_time() == Duration(0, 50, 0)

    def test_non_numeric_prediction_value(self):
        """A distance that is not a record warns and falls back to defaults."""
        store = InMemoryStore()
        save_prediction_inputs(store, Distance(5), Duration(0, 25, 0), Distance(10))
        payload = store.load(PACE_PREDICTOR_KEY)
        payload['targetDistance'] = 'ten'
        store.save(PACE_PREDICTOR_KEY, payload)
        with pytest.warns(UserWarning):
            known, _, target = load_prediction_inputs(store)
        assert known == Distance(5, DistanceUnit.KM)
        assert target == Distance(10, DistanceUnit.KM)


# =============================================================================
# Mileage Loader Tests
# =============================================================================

class TestMileageLoader:
    """Tests for CSV mileage logs."""

    def test_load_computes_acwr(self, tmp_path):
        """Loading a CSV adds ratio and risk columns."""
        path = tmp_path / 'weekly.csv'
        path.write_text('week,mileage\n1,5\n2,10\n3,15\n4,20\n')
        df = MileageDataLoader(path).load(verbose=False)
        assert list(df['mileage']) == [5, 10, 15, 20]
        assert df['acwr'].iloc[3] == 1.6
        assert df['acwr'].iloc[:3].isna().all()
        assert df['risk'].iloc[3] == 'Very High Risk'

    def test_invalid_entries_clamped(self, tmp_path):
        """Blank, negative and non-numeric mileage become 0 with a warning."""
        path = tmp_path / 'weekly.csv'
        path.write_text('week,mileage\n1,10\n2,\n3,-5\n4,abc\n')
        loader = MileageDataLoader(path)
        with pytest.warns(UserWarning, match='invalid mileage'):
            loader.load(verbose=False)
        loads = loader.get_weekly_loads()
        assert [l.mileage for l in loads] == [10, 0, 0, 0]
        assert loads[3].acwr == 0.0

    def test_alternate_column_name(self, tmp_path):
        """A distance-like column name is accepted."""
        path = tmp_path / 'weekly.csv'
        path.write_text('total km\n10\n10\n10\n10\n')
        loads = MileageDataLoader(path).get_weekly_loads()
        assert loads[3].acwr == 1.0

    def test_missing_column(self, tmp_path):
        """A CSV without a mileage column is rejected."""
        path = tmp_path / 'weekly.csv'
        path.write_text('date,hours\n2024-01-01,3\n')
        with pytest.raises(ValueError, match='No mileage column'):
            MileageDataLoader(path).load(verbose=False)

    def test_export(self, tmp_path):
        """Exported CSV carries week, mileage, acwr and risk."""
        loads = [WeeklyLoad(m) for m in [10, 10, 10, 10]]
        path = export_weekly_loads(loads, tmp_path / 'out' / 'acwr.csv')
        df = pd.read_csv(path, keep_default_na=False, na_values=[''])
        assert list(df.columns) == ['week', 'mileage', 'acwr', 'risk']
        assert df['acwr'].iloc[3] == 1.0
        assert df['risk'].iloc[0] == 'N/A'

    def test_dataframe_of_empty_history(self):
        """An empty history gives an empty frame."""
        assert len(loads_to_dataframe([])) == 0


# =============================================================================
# Report and CLI Tests
# =============================================================================

class TestReports:
    """Tests for text reports."""

    def test_format_adjustment(self):
        """Adjustments are shown signed."""
        assert format_adjustment(30) == '+30s'
        assert format_adjustment(-15) == '-15s'
        assert format_adjustment(0) == '±0s'

    def test_acwr_report(self):
        """The ACWR report shows the latest ratio and band."""
        report = generate_acwr_report([WeeklyLoad(m) for m in [5, 10, 15, 20]])
        assert '1.60' in report
        assert 'Very High Risk' in report

    def test_acwr_report_short_history(self):
        """A short history explains that four weeks are needed."""
        report = generate_acwr_report([WeeklyLoad(10)])
        assert 'At least 4 weeks' in report

    def test_prediction_report(self):
        """The prediction report includes every preset race."""
        report = generate_prediction_report(Distance(5), Duration(0, 25, 0), Distance(10))
        assert '0:52:07' in report
        assert 'Marathon' in report

    def test_race_plan_report(self):
        """The plan report lists total, adjustments and breaks."""
        report = generate_race_plan_report(default_race_plan())
        assert '4:05:39' in report
        assert '+30s' in report
        assert 'Toilet break' in report


class TestCLI:
    """Tests for the command-line entry point."""

    def test_acwr_command(self, capsys):
        """acwr prints the risk band."""
        assert main.main(['acwr', '--mileage', '5', '10', '15', '20']) == 0
        assert 'Very High Risk' in capsys.readouterr().out

    def test_acwr_command_saves_state(self, tmp_path):
        """acwr with --state persists the computed history."""
        main.main(['acwr', '--mileage', '10', '10', '10', '10', '--state', str(tmp_path)])
        assert load_weekly_loads(JsonFileStore(tmp_path))[3].acwr == 1.0

    def test_predict_command(self, capsys):
        """predict prints the predicted time."""
        code = main.main(['predict', '--distance', '5', '--time', '25:00', '--target', '10'])
        assert code == 0
        assert '0:52:07' in capsys.readouterr().out

    def test_predict_zero_distance(self, capsys):
        """A zero known distance exits with code 2."""
        code = main.main(['predict', '--distance', '0', '--time', '25:00', '--target', '10'])
        assert code == 2
        assert 'Error' in capsys.readouterr().err

    def test_plan_command_switches_unit(self, tmp_path, capsys):
        """plan --unit mi converts and saves the plan."""
        main.main(['plan', '--state', str(tmp_path), '--unit', 'mi'])
        assert '/mi' in capsys.readouterr().out
        assert load_race_plan(JsonFileStore(tmp_path)).unit == DistanceUnit.MI

    def test_smoke_tests(self, capsys):
        """The built-in smoke run passes."""
        main.run_tests()
        assert 'ALL TESTS PASSED' in capsys.readouterr().out
