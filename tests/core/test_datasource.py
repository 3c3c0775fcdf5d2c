"""
Tests for DataSource and the table readers.
"""

import numpy as np
import pandas as pd
import pytest

from fluxpredictor.core.datasource import DataSource, read_table, require_columns
from fluxpredictor.core.exceptions import (
    DataFileNotFoundError,
    DataFileUnreadableError,
    MissingColumnError,
)


class TestAccess:
    """Named array access and metadata."""

    def test_keys_and_getitem(self):
        ds = DataSource.from_arrays(a=[1, 2, 3], b=[4, 5, 6])
        assert ds.keys() == frozenset({'a', 'b'})
        np.testing.assert_array_equal(ds['a'], [1.0, 2.0, 3.0])
        assert ds['a'].dtype == np.float64

    def test_missing_key_lists_available(self):
        ds = DataSource.from_arrays(a=[1.0])
        with pytest.raises(KeyError, match="Available"):
            ds['Flux']

    def test_contains(self):
        ds = DataSource.from_arrays(X=np.zeros((3, 2)), y=np.zeros(3))
        assert 'X' in ds
        assert 'Flux' not in ds
        assert ds.n_observations == 3

    def test_metadata_is_a_copy(self):
        ds = DataSource.from_arrays(a=[1.0])
        ds.metadata['source'] = 'changed'
        assert ds.metadata['source'] == 'arrays'


class TestFromDataFrame:
    """Construction from pandas DataFrames."""

    def test_columns_and_metadata(self):
        df = pd.DataFrame({'FeedTemp': [50, 60], 'Flux': [10.0, 12.5]})
        ds = DataSource.from_dataframe(df, source_path='x.csv', n_dropped_rows=1)
        assert ds.n_observations == 2
        assert ds.metadata['columns'] == ['FeedTemp', 'Flux']
        assert ds.metadata['source_path'] == 'x.csv'
        assert ds.metadata['n_dropped_rows'] == 1

    def test_to_dataframe_preserves_order(self):
        df = pd.DataFrame({'b': [1.0, 2.0], 'a': [3.0, 4.0]})
        ds = DataSource.from_dataframe(df)
        pd.testing.assert_frame_equal(ds.to_dataframe(), df)


class TestReadTable:
    """File reading and typed read errors."""

    def test_reads_first_sheet(self, tmp_path):
        path = tmp_path / 'data.xlsx'
        with pd.ExcelWriter(path) as writer:
            pd.DataFrame({'Flux': [1.0, 2.0]}).to_excel(writer, sheet_name='first', index=False)
            pd.DataFrame({'Other': [9.0]}).to_excel(writer, sheet_name='second', index=False)
        df = read_table(path)
        assert list(df.columns) == ['Flux']
        assert len(df) == 2

    def test_named_sheet(self, tmp_path):
        path = tmp_path / 'data.xlsx'
        with pd.ExcelWriter(path) as writer:
            pd.DataFrame({'Flux': [1.0]}).to_excel(writer, sheet_name='first', index=False)
            pd.DataFrame({'Other': [9.0]}).to_excel(writer, sheet_name='second', index=False)
        df = read_table(path, sheet='second')
        assert list(df.columns) == ['Other']

    def test_csv(self, tmp_path):
        path = tmp_path / 'data.csv'
        path.write_text("FeedTemp,Flux\n60,12.5\n")
        df = read_table(path)
        assert df.loc[0, 'Flux'] == 12.5

    def test_tsv(self, tmp_path):
        path = tmp_path / 'data.tsv'
        path.write_text("FeedTemp\tFlux\n60\t12.5\n")
        assert list(read_table(path).columns) == ['FeedTemp', 'Flux']

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataFileNotFoundError) as exc_info:
            read_table(tmp_path / 'absent.xlsx')
        assert exc_info.value.path.endswith('absent.xlsx')

    def test_unknown_suffix(self, tmp_path):
        path = tmp_path / 'data.json'
        path.write_text("{}")
        with pytest.raises(DataFileUnreadableError, match="Unknown file format"):
            read_table(path)

    def test_legacy_xls_rejected(self, tmp_path):
        path = tmp_path / 'data.xls'
        path.write_bytes(b'\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1' + b'\x00' * 504)
        with pytest.raises(DataFileUnreadableError, match="Unknown file format"):
            read_table(path)

    def test_corrupt_spreadsheet(self, tmp_path):
        path = tmp_path / 'broken.xlsx'
        path.write_bytes(b"this is not a spreadsheet")
        with pytest.raises(DataFileUnreadableError):
            read_table(path)

    def test_directory(self, tmp_path):
        with pytest.raises(DataFileUnreadableError):
            read_table(tmp_path)


class TestFromFile:
    """Construction from files and factory dispatch."""

    def test_column_selection(self, tmp_path):
        path = tmp_path / 'data.csv'
        path.write_text("a,b,c\n1,2,3\n4,5,6\n")
        ds = DataSource.from_file(path, columns=['c', 'a'])
        assert ds.keys() == frozenset({'a', 'c'})
        assert ds.metadata['source_path'] == str(path)

    def test_missing_column(self, tmp_path):
        path = tmp_path / 'data.csv'
        path.write_text("a,b\n1,2\n")
        with pytest.raises(MissingColumnError) as exc_info:
            DataSource.from_file(path, columns=['a', 'Flux'])
        assert exc_info.value.missing == ['Flux']
        assert exc_info.value.available == ['a', 'b']

    def test_build_dispatch(self, tmp_path):
        path = tmp_path / 'data.csv'
        path.write_text("a\n1\n")
        assert 'a' in DataSource.build(path)
        assert 'a' in DataSource.build(pd.DataFrame({'a': [1.0]}))
        assert 'a' in DataSource.build(a=[1.0])


def test_require_columns_reports_all_missing():
    df = pd.DataFrame({'FeedTemp': [1.0]})
    with pytest.raises(MissingColumnError) as exc_info:
        require_columns(df, ['FeedTemp', 'HotFlow', 'Flux'])
    assert exc_info.value.missing == ['HotFlow', 'Flux']
