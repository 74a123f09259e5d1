"""
Weekly Mileage Loader
=====================

Reads a weekly mileage log from CSV and writes it back with ACWR columns.

Expected input: one row per calendar week, oldest first, with a mileage
column (`mileage`, `total km`, `total_km`, `km` or `miles`). An optional
`week` column is carried through to the export.

Raw values are sanitized here, before they reach the engine: blanks and
non-numeric entries become 0 and negatives are clipped to 0.
"""

import warnings
from pathlib import Path
from typing import List, Optional

import pandas as pd

from core.metrics import AcwrParams, WeeklyLoad, compute_weekly_loads, classify_acwr_risk


MILEAGE_COLUMNS = ['mileage', 'total km', 'total_km', 'km', 'miles']


class MileageDataLoader:
    """
    Loader for weekly mileage logs.

    Calculates ACWR for every week on load.
    """

    def __init__(self, data_path, params: Optional[AcwrParams] = None):
        """
        Initialize the loader.

        Args:
            data_path: Path to the CSV file
            params: ACWR parameters used for the computed columns
        """
        self.data_path = Path(data_path)
        self.params = params or AcwrParams()
        self.raw_data: Optional[pd.DataFrame] = None
        self.processed_data: Optional[pd.DataFrame] = None

    def _find_mileage_column(self, df: pd.DataFrame) -> str:
        lookup = {str(col).strip().lower(): col for col in df.columns}
        for name in MILEAGE_COLUMNS:
            if name in lookup:
                return lookup[name]
        raise ValueError(
            f"No mileage column in {self.data_path.name}; "
            f"expected one of {MILEAGE_COLUMNS}"
        )

    def load(self, verbose: bool = True) -> pd.DataFrame:
        """
        Load and process the log.

        Args:
            verbose: Print loading information

        Returns:
            DataFrame with week, mileage, acwr and risk columns
        """
        if verbose:
            print("=" * 70)
            print("LOADING WEEKLY MILEAGE LOG")
            print("=" * 70)

        self.raw_data = pd.read_csv(self.data_path)

        if verbose:
            print(f"Loaded {len(self.raw_data):,} weeks from {self.data_path.name}")

        column = self._find_mileage_column(self.raw_data)
        mileage = pd.to_numeric(self.raw_data[column], errors='coerce')

        n_invalid = int(mileage.isna().sum() + (mileage < 0).sum())
        if n_invalid:
            warnings.warn(f"{n_invalid} invalid mileage entries set to 0")

        df = pd.DataFrame()
        if 'week' in self.raw_data.columns:
            df['week'] = self.raw_data['week']
        else:
            df['week'] = range(1, len(self.raw_data) + 1)
        df['mileage'] = mileage.fillna(0).clip(lower=0).astype(float)

        self.processed_data = loads_to_dataframe(
            [WeeklyLoad(m) for m in df['mileage']], self.params
        )
        self.processed_data['week'] = df['week'].values

        if verbose:
            n_ratios = int(self.processed_data['acwr'].notna().sum())
            print(f"Computed ACWR for {n_ratios} of {len(df)} weeks")

        return self.processed_data

    def get_weekly_loads(self) -> List[WeeklyLoad]:
        """Weekly records with ACWR filled in (loads the file if needed)."""
        if self.processed_data is None:
            self.load(verbose=False)
        return dataframe_to_loads(self.processed_data)


def loads_to_dataframe(
    loads: List[WeeklyLoad],
    params: Optional[AcwrParams] = None
) -> pd.DataFrame:
    """Tabulate weekly loads with freshly computed ACWR and risk band."""
    computed = compute_weekly_loads(loads, params)
    return pd.DataFrame({
        'week': range(1, len(computed) + 1),
        'mileage': [load.mileage for load in computed],
        'acwr': pd.Series([load.acwr for load in computed], dtype=float),
        'risk': [classify_acwr_risk(load.acwr, params) for load in computed],
    })


def dataframe_to_loads(df: pd.DataFrame) -> List[WeeklyLoad]:
    return [
        WeeklyLoad(
            mileage=float(row.mileage),
            acwr=None if pd.isna(row.acwr) else float(row.acwr),
        )
        for row in df.itertuples(index=False)
    ]


def export_weekly_loads(
    loads: List[WeeklyLoad],
    output_path,
    params: Optional[AcwrParams] = None
) -> Path:
    """Write weekly loads with ACWR columns to CSV."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    loads_to_dataframe(loads, params).to_csv(output_path, index=False)
    return output_path
