"""
Data loader for membrane-distillation datasets.

Reads the first sheet of a spreadsheet (or a CSV), keeps the predictor and
target columns, coerces them to numbers and drops incomplete rows.
"""

import logging
from pathlib import Path
from typing import Sequence

import pandas as pd

from fluxpredictor.core.datasource import DataSource, read_table, require_columns
from fluxpredictor.core.validation import check_unique_names

logger = logging.getLogger(__name__)


def clean_frame(
    df: pd.DataFrame,
    predictors: Sequence[str],
    target: str,
) -> tuple[pd.DataFrame, int]:
    """
    Select, coerce and drop rows with missing values.

    Non-numeric cells become missing. Rows with any missing selected value
    are removed entirely, never imputed.

    Args:
        df: Raw table
        predictors: Predictor column names, in order
        target: Response column name

    Returns:
        (cleaned frame with a fresh RangeIndex, number of rows dropped)

    Raises:
        MissingColumnError: If a configured column is absent
    """
    columns = list(predictors) + [target]
    check_unique_names(columns, 'columns')
    require_columns(df, columns)

    selected = df[columns].apply(pd.to_numeric, errors='coerce')
    cleaned = selected.dropna(how='any').reset_index(drop=True).astype('float64')
    n_dropped = len(selected) - len(cleaned)

    if n_dropped > 0:
        missing_counts = selected.isna().sum()
        logger.warning(
            f"Dropped {n_dropped} of {len(selected)} rows with missing values "
            f"(by column: {missing_counts[missing_counts > 0].to_dict()})"
        )
    return cleaned, n_dropped


def load_dataset(
    file_path: str | Path,
    predictors: Sequence[str],
    target: str = 'Flux',
    *,
    sheet: int | str = 0,
) -> DataSource:
    """
    Load a cleaned dataset ready for fitting.

    Args:
        file_path: Spreadsheet (.xlsx/.xlsm) or delimited file (.csv/.tsv)
        predictors: Predictor column names, in order
        target: Response column name
        sheet: Sheet index or name (default: first sheet)

    Returns:
        DataSource with one float64 array per selected column. Metadata
        records source_path, n_observations, columns and n_dropped_rows.

    Raises:
        DataFileNotFoundError: If the file doesn't exist
        DataFileUnreadableError: If the file can't be parsed
        MissingColumnError: If a configured column is absent
    """
    raw = read_table(file_path, sheet=sheet)
    cleaned, n_dropped = clean_frame(raw, predictors, target)

    logger.info(
        f"Loaded {len(cleaned)} complete rows from {file_path} "
        f"({n_dropped} dropped)"
    )
    return DataSource.from_dataframe(
        cleaned,
        source_path=str(file_path),
        n_dropped_rows=n_dropped,
    )
