# -*- coding: utf-8 -*-
"""
Record normalizer: renames raw payroll columns into the canonical schema.

No type coercion happens here; the deriver owns that.
"""
from typing import Iterable, Sequence, Union

import pandas as pd
from loguru import logger

from payeq.columns import DEFAULT_COLUMNS
from payeq.errors import SchemaError


def normalize_columns(df_raw: pd.DataFrame, column_names: Union[str, Sequence[str]] = "default") -> pd.DataFrame:
    """
    Positionally renames the columns of a raw payroll table.

    Args:
        df_raw (pd.DataFrame): Raw table as read from the source file.
        column_names: "default" for the standard 25-column extract, or the list
            of target names in the order the source columns appear.

    Returns:
        pd.DataFrame: A renamed copy of the input.

    Raises:
        SchemaError: If the number of names differs from the number of columns.
    """
    if isinstance(column_names, str):
        if column_names != "default":
            raise SchemaError(f"Unknown column layout '{column_names}'. Use 'default' or pass a list of names.")
        target_names = list(DEFAULT_COLUMNS)
    else:
        target_names = list(column_names)

    if len(target_names) != df_raw.shape[1]:
        raise SchemaError(
            f"Expected {len(target_names)} columns but the input has {df_raw.shape[1]}. "
            "Pass an explicit column_names list matching the source."
        )

    duplicates = sorted({name for name in target_names if target_names.count(name) > 1})
    if duplicates:
        raise SchemaError(f"Duplicate target column names: {duplicates}")

    df_out = df_raw.copy()
    df_out.columns = target_names
    logger.debug(f"Renamed {len(target_names)} columns to the canonical schema.")
    return df_out


def validate_required_columns(df: pd.DataFrame, required: Iterable[str]):
    """Raises SchemaError listing every required column absent from df."""
    missing_cols = [col for col in required if col not in df.columns]
    if missing_cols:
        raise SchemaError(f"Input data missing required columns: {missing_cols}")
