# -*- coding: utf-8 -*-
"""
Attribute deriver: turns normalized payroll records into the enriched master table.

Newly created columns:
    days_from_start, years_from_start  -> tenure as of Dec-31 of the reference year
    age, age_years, age_above18        -> age as of Dec-31 of the reference year
    race_eth                           -> combined race/ethnicity bucket (ordered categorical)
    nonwhite, nonwhite_female          -> 0/1 flags
    uniform                            -> "yes"/"no", only when uniform titles are supplied

By default the table is filtered to Full-Time, Competitive and Non-Competitive
employees who make at least $15,000 and are at least 16 years old.
"""
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

import numpy as np
import pandas as pd
from loguru import logger

from payeq import columns as C
from payeq.errors import ConfigError, ParseError
from payeq.normalizer import normalize_columns, validate_required_columns

# Salary floor below which a Full-Time min/max salary range is treated as miscoded.
SALARY_RANGE_FLOOR = 15000


@dataclass(frozen=True)
class StatusFilter:
    """Row filter applied after derivation for one employee-status profile."""
    employee_status: str
    min_base_salary: float
    min_age_years: int

    def mask(self, df: pd.DataFrame) -> pd.Series:
        return (
            (df[C.EMPLOYEE_STATUS] == self.employee_status)
            & (df[C.BASE_SALARY] >= self.min_base_salary)
            & (df[C.AGE_YEARS] >= self.min_age_years)
            & df[C.TITLE_CLASSIFICATION].isin(C.CLASSIFIED_TITLES)
        )


# Part-time age floor of 1 is carried over from the source extract rules; pending review.
STATUS_FILTERS = {
    "full-time": StatusFilter(employee_status=C.FULL_TIME, min_base_salary=15000, min_age_years=16),
    "part-time": StatusFilter(employee_status=C.PART_TIME, min_base_salary=13, min_age_years=1),
}


def _check_reference_year(reference_year) -> int:
    if reference_year is None:
        raise ConfigError("reference_year is required (YYYY of the dataset) to compute tenure and age.")
    if isinstance(reference_year, bool):
        raise ConfigError(f"reference_year must be a year, got {reference_year!r}.")
    try:
        year = int(reference_year)
    except (TypeError, ValueError):
        raise ConfigError(f"reference_year must be a year, got {reference_year!r}.") from None
    if year != reference_year and str(year) != str(reference_year).strip():
        raise ConfigError(f"reference_year must be a whole year, got {reference_year!r}.")
    return year


def _unparseable(original: pd.Series, parsed: pd.Series) -> pd.Series:
    """True where a non-blank source value failed to parse."""
    not_blank = original.notna() & (original.astype(str).str.strip() != "")
    return parsed.isna() & not_blank


def _coerce_types(df: pd.DataFrame, skip_malformed: bool) -> pd.DataFrame:
    """Parses date and salary columns; fails the batch (or drops rows) on bad values."""
    bad_rows = pd.Series(False, index=df.index)

    for col in C.DATE_COLUMNS + C.NUMERIC_COLUMNS:
        if col in C.DATE_COLUMNS:
            parsed = pd.to_datetime(df[col], errors="coerce")
        else:
            parsed = pd.to_numeric(df[col], errors="coerce").astype(float)
        bad = _unparseable(df[col], parsed)
        if bad.any():
            if not skip_malformed:
                raise ParseError(col, df.index[bad].tolist(), df.loc[bad, col].tolist())
            bad_rows |= bad
        df[col] = parsed

    if bad_rows.any():
        logger.warning(f"Skipped {int(bad_rows.sum())} malformed row(s) with unparseable dates or salaries.")
        df = df.loc[~bad_rows].copy()
    return df


def derive_race_eth(race: pd.Series, ethnicity: pd.Series) -> pd.Categorical:
    """
    Combines race and ethnicity into a single bucket. Rules are checked in order and
    the first match wins, so ethnicity always takes precedence over race.
    """
    conditions = [
        ethnicity == C.HISPANIC,
        ethnicity == C.UNDISCLOSED,
        race == C.PACIFIC_ISLANDER,
        race.isin(C.SOR_OR_UCND_RACES),
    ]
    choices = [C.HISPANIC, C.RACE_ETH_UNDISCLOSED, C.RACE_ETH_ASIAN, C.RACE_ETH_SOR]
    fallback = ("NH " + race.astype(str)).to_numpy()
    values = np.select(conditions, choices, default=fallback)
    # Races outside the known values are left missing rather than given a new level.
    values = np.where(np.isin(values, C.RACE_ETH_LEVELS), values, None)
    return pd.Categorical(values, categories=C.RACE_ETH_LEVELS, ordered=True)


def derive_nonwhite(race: pd.Series, ethnicity: pd.Series) -> pd.Series:
    flag = ((race != C.WHITE) & (race != C.UNDISCLOSED)) | (ethnicity == C.HISPANIC)
    return flag.astype(int)


def apply_status_filter(df: pd.DataFrame, employee_status_filter: Optional[str]) -> pd.DataFrame:
    """Keeps the rows of one status profile; unknown profiles pass everything through."""
    status_filter = STATUS_FILTERS.get(employee_status_filter)
    if status_filter is None:
        logger.info(f"No employee-status filter applied (profile: {employee_status_filter!r}).")
        return df
    before = len(df)
    df_out = df.loc[status_filter.mask(df)].copy()
    logger.info(f"'{employee_status_filter}' filter kept {len(df_out):,} of {before:,} rows.")
    return df_out


def derive(df_normalized: pd.DataFrame, reference_year: int,
           employee_status_filter: Optional[str] = "full-time",
           uniform_titles: Optional[Iterable] = None,
           skip_malformed: bool = False) -> pd.DataFrame:
    """
    Computes the derived attributes and applies the employee-status filter.

    Args:
        df_normalized (pd.DataFrame): Records already renamed to the canonical schema.
        reference_year (int): YYYY of the dataset; Dec-31 of this year is the "as of" date.
        employee_status_filter (str): "full-time", "part-time", or anything else for no filtering.
        uniform_titles (iterable): Optional title codes classified as uniformed titles.
        skip_malformed (bool): Drop rows with unparseable dates/salaries instead of failing.

    Returns:
        pd.DataFrame: The enriched master table.
    """
    year = _check_reference_year(reference_year)
    validate_required_columns(df_normalized, C.REQUIRED_COLUMNS)

    df = _coerce_types(df_normalized.copy(), skip_malformed)

    if C.BUSINESS_TITLE in df.columns:
        df[C.BUSINESS_TITLE] = df[C.BUSINESS_TITLE].astype(str)
    for col in ['career_level_title_suffix', 'DCAS_OGC']:
        if col in df.columns:
            df[col] = df[col].astype('category')
    if C.MANAGERIAL in df.columns:
        df[C.MANAGERIAL] = pd.Categorical(np.where(df[C.MANAGERIAL] == 'Y', 'Y', 'N'), categories=['N', 'Y'])

    as_of = pd.Timestamp(year=year, month=12, day=31)
    df[C.DAYS_FROM_START] = (as_of - df[C.START_DATE]).dt.days
    df[C.YEARS_FROM_START] = np.round(df[C.DAYS_FROM_START] / 365, 0)
    df[C.AGE] = (as_of - df[C.DOB]).dt.days / 365
    df[C.AGE_YEARS] = np.floor(df[C.AGE])
    df[C.AGE_ABOVE18] = df[C.AGE_YEARS] - 18

    df[C.RACE_ETH] = derive_race_eth(df[C.RACE], df[C.ETHNICITY])
    uncategorized = int(df[C.RACE_ETH].isna().sum())
    if uncategorized:
        logger.warning(f"{uncategorized} record(s) have a race value outside the race_eth categories.")

    # Mask is computed once so max_salary is nulled on the same rows as min_salary.
    miscoded_range = (df[C.MIN_SALARY] < SALARY_RANGE_FLOOR) & (df[C.EMPLOYEE_STATUS] == C.FULL_TIME)
    df.loc[miscoded_range, [C.MIN_SALARY, C.MAX_SALARY]] = np.nan

    df[C.NONWHITE] = derive_nonwhite(df[C.RACE], df[C.ETHNICITY])
    df[C.NONWHITE_FEMALE] = ((df[C.NONWHITE] == 1) & (df[C.GENDER] == C.FEMALE)).astype(int)

    df = apply_status_filter(df, employee_status_filter)

    if uniform_titles is not None:
        codes = {str(code).strip() for code in uniform_titles}
        is_uniform = df[C.TITLE_CODE].astype(str).str.strip().isin(codes)
        df[C.UNIFORM] = np.where(is_uniform, "yes", "no")

    return df


def clean_data(df_raw: pd.DataFrame, reference_year: int,
               column_names: Union[str, Sequence[str]] = "default",
               employee_status_filter: Optional[str] = "full-time",
               uniform_titles: Optional[Iterable] = None,
               skip_malformed: bool = False) -> pd.DataFrame:
    """Normalizes column names, then derives attributes. See derive() for the arguments."""
    _check_reference_year(reference_year)
    df_normalized = normalize_columns(df_raw, column_names)
    df_clean = derive(
        df_normalized,
        reference_year,
        employee_status_filter=employee_status_filter,
        uniform_titles=uniform_titles,
        skip_malformed=skip_malformed,
    )
    logger.success(f"Cleaned dataset ready: {df_clean.shape[0]:,} rows, {df_clean.shape[1]} columns.")
    return df_clean
