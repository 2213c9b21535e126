# -*- coding: utf-8 -*-
"""
Utility functions for data input/output operations.
"""
import os
from pathlib import Path
from typing import List, Union

import pandas as pd
from loguru import logger

from payeq.errors import SchemaError

UNIFORM_CODE_COLUMN = "TC"


def read_payroll(path: Union[str, Path], delimiter: str = "\t") -> pd.DataFrame:
    """
    Reads the payroll extract with every column as text; typing happens in the deriver.
    The extract ships tab-separated with a header row.
    """
    df_raw = pd.read_csv(path, sep=delimiter, header=0, dtype=str)
    df_raw.attrs['name'] = str(path)
    logger.info(f"Loaded {df_raw.shape[0]:,} rows x {df_raw.shape[1]} columns from {path}")
    return df_raw


def read_uniform_titles(path: Union[str, Path]) -> List[str]:
    """Reads the uniformed title reference table (Excel or CSV) and returns its title codes."""
    path = Path(path)
    if path.suffix.lower() in (".xlsx", ".xlsm", ".xls"):
        # Reading .xlsx requires 'openpyxl'
        df_uniform = pd.read_excel(path, dtype=str)
    else:
        df_uniform = pd.read_csv(path, dtype=str)

    if UNIFORM_CODE_COLUMN not in df_uniform.columns:
        raise SchemaError(f"Uniform title file {path} has no '{UNIFORM_CODE_COLUMN}' column.")
    codes = df_uniform[UNIFORM_CODE_COLUMN].dropna().str.strip().tolist()
    logger.info(f"Loaded {len(codes)} uniform title codes from {path}")
    return codes


def export_dataframe(df_to_export, base_filename, output_csv_dir, output_excel_dir, column_map):
    """
    Saves a DataFrame to both CSV and Excel formats with user-friendly column names.
    Returns the paths written; the Excel path is left out when the workbook could not be saved.
    """
    df_export_copy = df_to_export.copy()
    df_export_copy = df_export_copy.rename(columns=column_map)

    os.makedirs(output_csv_dir, exist_ok=True)
    os.makedirs(output_excel_dir, exist_ok=True)

    csv_path = os.path.join(output_csv_dir, f"{base_filename}.csv")
    excel_path = os.path.join(output_excel_dir, f"{base_filename}.xlsx")

    df_export_copy.to_csv(csv_path, index=False, encoding='utf-8')

    # Saving to Excel requires 'openpyxl'
    try:
        df_export_copy.to_excel(excel_path, index=False)
    except (ImportError, ValueError, OSError) as e:
        logger.warning(f"Could not save Excel file for '{base_filename}'. Make sure 'openpyxl' is installed. Error: {e}")
        return [csv_path]
    return [csv_path, excel_path]
