"""
Tests for the MD dataset loader.
"""

import logging

import numpy as np
import pandas as pd
import pytest

from fluxpredictor.core.exceptions import (
    DataFileNotFoundError,
    DataFileUnreadableError,
    MissingColumnError,
    ValidationError,
)
from fluxpredictor.membrane import DEFAULT_CONFIG, clean_frame, load_dataset

PREDICTORS = list(DEFAULT_CONFIG.names)


def _row(**overrides):
    row = dict(DEFAULT_CONFIG.defaults, Flux=10.0)
    row.update(overrides)
    return row


class TestCleanFrame:
    """Column selection, numeric coercion and row dropping."""

    def test_drops_incomplete_rows(self):
        df = pd.DataFrame([
            _row(),
            _row(HotFlow=None),
            _row(Flux=12.0),
            _row(PoreSize='n/a'),
        ])
        cleaned, n_dropped = clean_frame(df, PREDICTORS, 'Flux')
        assert n_dropped == 2
        assert len(cleaned) == 2
        assert list(cleaned['Flux']) == [10.0, 12.0]
        assert list(cleaned.index) == [0, 1]

    def test_selects_and_orders_columns(self):
        df = pd.DataFrame([_row(Notes='run A')])
        df = df[['Flux', 'Notes'] + PREDICTORS[::-1]]
        cleaned, _ = clean_frame(df, PREDICTORS, 'Flux')
        assert list(cleaned.columns) == PREDICTORS + ['Flux']

    def test_numeric_strings_are_coerced(self):
        df = pd.DataFrame([_row(FeedTemp='55.5')])
        cleaned, n_dropped = clean_frame(df, PREDICTORS, 'Flux')
        assert n_dropped == 0
        assert cleaned.loc[0, 'FeedTemp'] == 55.5
        assert all(dtype == np.float64 for dtype in cleaned.dtypes)

    def test_extra_column_blanks_ignored(self):
        df = pd.DataFrame([_row(Notes=None), _row(Notes='x')])
        _, n_dropped = clean_frame(df, PREDICTORS, 'Flux')
        assert n_dropped == 0

    def test_missing_column(self):
        df = pd.DataFrame([_row()]).drop(columns=['Thickness'])
        with pytest.raises(MissingColumnError) as exc_info:
            clean_frame(df, PREDICTORS, 'Flux')
        assert exc_info.value.missing == ['Thickness']

    def test_duplicate_configured_columns(self):
        df = pd.DataFrame([_row()])
        with pytest.raises(ValidationError, match="duplicate"):
            clean_frame(df, ['FeedTemp', 'FeedTemp'], 'Flux')

    def test_logs_dropped_rows(self, caplog):
        df = pd.DataFrame([_row(), _row(Flux=None)])
        with caplog.at_level(logging.WARNING, logger='fluxpredictor.membrane.loader'):
            clean_frame(df, PREDICTORS, 'Flux')
        assert "Dropped 1 of 2 rows" in caplog.text
        assert "Flux" in caplog.text


class TestLoadDataset:
    """End-to-end loading from spreadsheets and CSV files."""

    def test_spreadsheet(self, flux_xlsx, flux_frame):
        ds = load_dataset(flux_xlsx, PREDICTORS, 'Flux')
        assert ds.n_observations == len(flux_frame)
        np.testing.assert_allclose(ds['Flux'], flux_frame['Flux'].to_numpy())
        assert ds.metadata['source_path'] == str(flux_xlsx)
        assert ds.metadata['n_dropped_rows'] == 0
        assert ds.metadata['columns'] == PREDICTORS + ['Flux']

    def test_spreadsheet_with_blank_cells(self, tmp_path, flux_frame):
        frame = flux_frame.copy()
        frame.loc[3, 'ColdFlow'] = np.nan
        frame.loc[7, 'Flux'] = np.nan
        path = tmp_path / 'MDData.xlsx'
        frame.to_excel(path, index=False)
        ds = load_dataset(path, PREDICTORS, 'Flux')
        assert ds.n_observations == len(frame) - 2
        assert ds.metadata['n_dropped_rows'] == 2

    def test_csv(self, tmp_path, flux_frame):
        path = tmp_path / 'MDData.csv'
        flux_frame.to_csv(path, index=False)
        ds = load_dataset(path, PREDICTORS, 'Flux')
        assert ds.n_observations == len(flux_frame)

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataFileNotFoundError):
            load_dataset(tmp_path / 'MDData.xlsx', PREDICTORS, 'Flux')

    def test_unreadable_file(self, tmp_path):
        path = tmp_path / 'MDData.xlsx'
        path.write_bytes(b'\x00\x01garbage')
        with pytest.raises(DataFileUnreadableError):
            load_dataset(path, PREDICTORS, 'Flux')

    def test_legacy_xls_is_typed_error(self, tmp_path):
        path = tmp_path / 'MDData.xls'
        path.write_bytes(b'\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1' + b'\x00' * 504)
        with pytest.raises(DataFileUnreadableError, match=".xls"):
            load_dataset(path, PREDICTORS, 'Flux')

    def test_missing_target(self, tmp_path, flux_frame):
        path = tmp_path / 'MDData.xlsx'
        flux_frame.drop(columns=['Flux']).to_excel(path, index=False)
        with pytest.raises(MissingColumnError) as exc_info:
            load_dataset(path, PREDICTORS, 'Flux')
        assert exc_info.value.missing == ['Flux']
