"""
Universal DataSource for fluxpredictor.

DataSource is the "I have data" abstraction. It doesn't know or care
what domain consumes it. It just provides named float64 columns.

Usage:
    from fluxpredictor.core import DataSource

    ds = DataSource.from_arrays(X=X, y=y)
    ds = DataSource.from_file("MDData.xlsx")
    ds = DataSource.from_dataframe(df)

    # Access arrays
    ds.keys()  # frozenset({'FeedTemp', ..., 'Flux'})
    flux = ds['Flux']
"""

from __future__ import annotations

import logging
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd
from numpy.typing import NDArray
from openpyxl.utils.exceptions import InvalidFileException

from fluxpredictor.core.exceptions import (
    DataFileNotFoundError,
    DataFileUnreadableError,
    MissingColumnError,
)

logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = ('.xlsx', '.xlsm')
DELIMITED_SUFFIXES = {'.csv': ',', '.tsv': '\t'}


def read_table(path: str | Path, *, sheet: int | str = 0) -> pd.DataFrame:
    """
    Read a spreadsheet or delimited text file into a DataFrame.

    Column headers are taken verbatim from the first row. Cells are not
    coerced; callers decide how to treat non-numeric values.

    Args:
        path: File path (.xlsx, .xlsm, .csv, .tsv)
        sheet: Sheet index or name for spreadsheets (default: first sheet)

    Returns:
        The raw table

    Raises:
        DataFileNotFoundError: If the path does not exist
        DataFileUnreadableError: If the format is unknown or parsing fails
    """
    path = Path(path)
    if not path.exists():
        raise DataFileNotFoundError(f"Data file not found: {path}", path=str(path))
    if not path.is_file():
        raise DataFileUnreadableError(f"Not a regular file: {path}", path=str(path))

    suffix = path.suffix.lower()
    try:
        if suffix in EXCEL_SUFFIXES:
            df = pd.read_excel(path, sheet_name=sheet)
        elif suffix in DELIMITED_SUFFIXES:
            df = pd.read_csv(path, sep=DELIMITED_SUFFIXES[suffix])
        else:
            raise DataFileUnreadableError(
                f"Unknown file format: {suffix!r} ({path})", path=str(path)
            )
    except (ValueError, OSError, KeyError, zipfile.BadZipFile, InvalidFileException) as e:
        raise DataFileUnreadableError(
            f"Cannot read data file {path}: {e}", path=str(path)
        ) from e

    logger.info(f"Read {path}: {df.shape[0]} rows × {df.shape[1]} columns")
    return df


def require_columns(df: pd.DataFrame, columns: list[str]) -> None:
    """
    Verify every named column is present in the frame.

    Raises:
        MissingColumnError: Listing all absent columns and those available
    """
    available = [str(c) for c in df.columns]
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise MissingColumnError(
            f"Missing column(s) {missing}. Available: {available}",
            missing=missing,
            available=available,
        )


@dataclass
class DataSource:
    """
    Universal data container. Domain-agnostic.

    Construct via factory classmethods, not directly.
    """
    _data: dict[str, Any]
    _metadata: dict[str, Any] = field(default_factory=dict)

    # === Array Access ===

    def keys(self) -> frozenset[str]:
        """
        Return the names of all available arrays.

        Example:
            >>> ds = DataSource.from_arrays(X=X, y=y)
            >>> ds.keys()
            frozenset({'X', 'y'})
        """
        return frozenset(k for k in self._data.keys() if not k.startswith('_'))

    def __getitem__(self, key: str) -> Any:
        """
        Access a named array.

        Raises:
            KeyError: If key not found, with helpful message listing available keys
        """
        if key not in self._data:
            available = self.keys()
            raise KeyError(
                f"DataSource has no array '{key}'. Available: {available}"
            )
        return self._data[key]

    def __contains__(self, key: str) -> bool:
        """Check if a key exists."""
        return key in self._data

    # === Properties ===

    @property
    def n_observations(self) -> int:
        """Number of statistical units (rows)."""
        return self._metadata.get('n_observations', 0)

    @property
    def metadata(self) -> dict[str, Any]:
        """Domain-agnostic metadata."""
        return self._metadata.copy()

    def to_dataframe(self, columns: list[str] | None = None) -> pd.DataFrame:
        """Materialize named 1-D columns as a DataFrame (default: all, in load order)."""
        if columns is None:
            columns = self._metadata.get('columns') or sorted(self.keys())
        return pd.DataFrame({name: self[name] for name in columns})

    # === Factory Methods ===

    @classmethod
    def from_arrays(
        cls,
        *,
        X: NDArray | None = None,
        y: NDArray | None = None,
        data: NDArray | None = None,
        columns: list[str] | None = None,
        **named_arrays: NDArray,
    ) -> DataSource:
        """Construct from NumPy arrays."""
        storage: dict[str, Any] = {}
        n_obs: int | None = None

        if X is not None:
            X = np.asarray(X, dtype=np.float64)
            if X.ndim == 1:
                X = X.reshape(-1, 1)
            storage['X'] = X
            n_obs = X.shape[0]

        if y is not None:
            y = np.asarray(y, dtype=np.float64)
            if y.ndim == 2 and y.shape[1] == 1:
                y = y.ravel()
            storage['y'] = y
            n_obs = n_obs or y.shape[0]

        if data is not None:
            data = np.asarray(data, dtype=np.float64)
            n_obs = n_obs or data.shape[0]
            if columns is not None:
                for i, col in enumerate(columns):
                    storage[col] = data[:, i]
            else:
                storage['_data'] = data

        for name, arr in named_arrays.items():
            storage[name] = np.asarray(arr, dtype=np.float64)
            n_obs = n_obs or storage[name].shape[0]

        return cls(
            _data=storage,
            _metadata={'n_observations': n_obs, 'source': 'arrays'},
        )

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        *,
        columns: list[str] | None = None,
        sheet: int | str = 0,
    ) -> DataSource:
        """
        Construct from file (spreadsheet or CSV).

        Every selected column must be numeric; use
        fluxpredictor.membrane.load_dataset for coercion and missing-row removal.
        """
        df = read_table(path, sheet=sheet)
        if columns is not None:
            require_columns(df, columns)
            df = df[columns]
        return cls.from_dataframe(df, source_path=str(path))

    @classmethod
    def from_dataframe(
        cls,
        df: pd.DataFrame,
        *,
        source_path: str | None = None,
        **extra_metadata: Any,
    ) -> DataSource:
        """Construct from pandas DataFrame."""
        storage: dict[str, Any] = {}

        for col in df.columns:
            storage[str(col)] = df[col].to_numpy(dtype=np.float64)

        metadata = {
            'n_observations': len(df),
            'source': 'dataframe',
            'columns': [str(c) for c in df.columns],
        }
        if source_path:
            metadata['source_path'] = source_path
        metadata.update(extra_metadata)

        return cls(_data=storage, _metadata=metadata)

    @classmethod
    def build(cls, *args, **kwargs) -> DataSource:
        """
        Convenience factory that dispatches to appropriate from_* method.

        Examples:
            DataSource.build(X=X, y=y)  # from_arrays
            DataSource.build("MDData.xlsx")  # from_file
        """
        if args and isinstance(args[0], (str, Path)):
            return cls.from_file(args[0], **kwargs)
        if args and isinstance(args[0], pd.DataFrame):
            return cls.from_dataframe(args[0], **kwargs)
        return cls.from_arrays(**kwargs)
