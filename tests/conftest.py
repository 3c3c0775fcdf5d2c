"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np
import pandas as pd

from fluxpredictor.core.datasource import DataSource


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def simple_regression_data(rng):
    """Simple regression dataset for basic tests (no intercept column in X)."""
    n, p = 100, 3
    X = rng.standard_normal((n, p))
    beta_true = np.array([1.0, -2.0, 0.5])
    y = 3.0 + X @ beta_true + rng.standard_normal(n) * 0.1
    return X, y, beta_true


@pytest.fixture
def collinear_data(rng):
    """Dataset with perfect collinearity: x3 = x1 + x2."""
    n = 100
    x1 = rng.standard_normal(n)
    x2 = rng.standard_normal(n)
    x3 = x1 + x2
    X = np.column_stack([x1, x2, x3])
    y = rng.standard_normal(n)
    return X, y


@pytest.fixture
def flux_frame(rng):
    """50 clean rows of MD operating data with independent predictors."""
    n = 50
    df = pd.DataFrame({
        'FeedTemp': rng.uniform(40.0, 80.0, n),
        'PermeateTemp': rng.uniform(10.0, 30.0, n),
        'HotFlow': rng.uniform(300.0, 900.0, n),
        'ColdFlow': rng.uniform(300.0, 900.0, n),
        'PoreSize': rng.uniform(0.1, 0.45, n),
        'Thickness': rng.uniform(100.0, 300.0, n),
    })
    df['Flux'] = (
        -5.0
        + 0.45 * df['FeedTemp']
        - 0.20 * df['PermeateTemp']
        + 0.004 * df['HotFlow']
        + 0.002 * df['ColdFlow']
        + 12.0 * df['PoreSize']
        - 0.015 * df['Thickness']
        + rng.standard_normal(n) * 0.3
    )
    return df


@pytest.fixture
def flux_source(flux_frame):
    """flux_frame as a DataSource."""
    return DataSource.from_dataframe(flux_frame)


@pytest.fixture
def flux_xlsx(tmp_path, flux_frame):
    """flux_frame written to the first sheet of a spreadsheet."""
    path = tmp_path / 'MDData.xlsx'
    flux_frame.to_excel(path, index=False)
    return path
