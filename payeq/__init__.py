# -*- coding: utf-8 -*-
"""
Pay equity analytics for municipal payroll data.

Typical use:

    from payeq import clean_data, gender_summary

    df_clean = clean_data(df_raw, reference_year=2021)
    df_fdny = gender_summary(df_clean, "FIRE DEPARTMENT")
"""
from payeq.errors import PayEquityError, ConfigError, SchemaError, ParseError
from payeq.normalizer import normalize_columns
from payeq.deriver import derive, clean_data
from payeq.reports import (
    gender_summary,
    race_eth_summary,
    white_nonwhite_summary,
    title_code_share,
    agencies_populous_title_stats,
)

__version__ = "0.1.0"

__all__ = [
    "PayEquityError",
    "ConfigError",
    "SchemaError",
    "ParseError",
    "normalize_columns",
    "derive",
    "clean_data",
    "gender_summary",
    "race_eth_summary",
    "white_nonwhite_summary",
    "title_code_share",
    "agencies_populous_title_stats",
]
