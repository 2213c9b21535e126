# -*- coding: utf-8 -*-
"""
Report generators for the pay equity tasks.

Every function takes the enriched master table produced by payeq.deriver.clean_data()
and returns a new DataFrame with numeric outputs rounded to 2 decimals.

Small-cell filters (titles with fewer than 5 workers, and the Male/Female > 4 rule of
the exportable gender table) silently drop rows: callers must not assume every title of
the input appears in the output.
"""
from typing import Any, Optional

import pandas as pd
from loguru import logger

from payeq import columns as C
from payeq.aggregation import (
    Aggregation,
    group_summarize,
    join_on_keys,
    percentage_of,
    pivot,
    round_numeric,
    top_n_per_group,
    bin_series,
)
from payeq.normalizer import validate_required_columns

TITLE_KEYS = C.TITLE_KEYS
MIN_TITLE_COUNT = 5
MIN_EXPORTABLE_GENDER_COUNT = 4
MIN_MEDIAN_PAY = 10
SPREAD_FORMATS = ("wide", "long")
HIGH_LOW_OPTIONS = ("high", "low")
SHARE_BIN_WIDTH = 0.1


def _filter_agency(df: pd.DataFrame, agency: Optional[str]) -> pd.DataFrame:
    if agency is None:
        return df
    df_agency = df.loc[df[C.AGENCY] == agency]
    if df_agency.empty:
        logger.warning(f"No records found for agency '{agency}'.")
    return df_agency


def _count(name: str) -> Aggregation:
    # Rows are counted on base_salary, which is never a grouping key here.
    return Aggregation(C.BASE_SALARY, "count", name)


def _title_salary_summary(df: pd.DataFrame, min_count: int = MIN_TITLE_COUNT) -> pd.DataFrame:
    """median_salary, mean_salary and total_count per title, small titles dropped."""
    summary = group_summarize(df, TITLE_KEYS, [
        Aggregation(C.BASE_SALARY, "median", "median_salary"),
        Aggregation(C.BASE_SALARY, "mean", "mean_salary"),
        _count("total_count"),
    ])
    kept = summary.loc[summary["total_count"] >= min_count]
    logger.debug(f"Small-cell filter dropped {len(summary) - len(kept)} of {len(summary)} titles (< {min_count} workers).")
    return kept


# --------------------------------------------------------------------------------------
# Gender composition
# --------------------------------------------------------------------------------------

def gender_summary(df: pd.DataFrame, agency: str, exportable: bool = False) -> pd.DataFrame:
    """
    Gender makeup of every civil service title at one agency.

    Args:
        df (pd.DataFrame): Enriched master table.
        agency (str): Full name of the agency as it shows in the dataset.
        exportable (bool): Keep only titles with more than 4 men and more than 4 women,
            restricted to the publishable columns.

    Returns:
        pd.DataFrame: One row per title with median/mean salary, total_count, Male and
        Female counts and their shares, sorted by median salary (highest first).
    """
    validate_required_columns(df, [C.AGENCY, C.GENDER, C.BASE_SALARY] + TITLE_KEYS)
    df_agency = _filter_agency(df, agency)

    gender_counts = group_summarize(df_agency, TITLE_KEYS + [C.GENDER], [_count("num_gender")])
    df_gender = pivot(gender_counts, TITLE_KEYS, C.GENDER, "num_gender", categories=C.GENDER_CATEGORIES)
    df_gender = percentage_of(df_gender, C.GENDER_CATEGORIES)

    output = join_on_keys(_title_salary_summary(df_agency), df_gender, TITLE_KEYS, validate="one_to_one")
    output[C.GENDER_CATEGORIES] = output[C.GENDER_CATEGORIES].fillna(0)
    output = round_numeric(output).sort_values("median_salary", ascending=False, kind="mergesort")

    if exportable:
        output = output[TITLE_KEYS + ["median_salary", "mean_salary", C.MALE, C.FEMALE]]
        output = output.loc[(output[C.MALE] > MIN_EXPORTABLE_GENDER_COUNT)
                            & (output[C.FEMALE] > MIN_EXPORTABLE_GENDER_COUNT)]

    return output.reset_index(drop=True)


# --------------------------------------------------------------------------------------
# Race / ethnicity composition
# --------------------------------------------------------------------------------------

def _check_spread_format(spread_format: str):
    if spread_format not in SPREAD_FORMATS:
        raise ValueError(f"spread_format must be one of {SPREAD_FORMATS}, got {spread_format!r}")


def race_eth_composition(df: pd.DataFrame, spread_format: str = "wide") -> pd.DataFrame:
    """
    race_eth counts per title.

    wide: one column per race_eth category plus perc_<category> over the row sum.
    long: one row per (title, race_eth) with count, share of the title, median and mean salary.
    """
    _check_spread_format(spread_format)
    keys = TITLE_KEYS + [C.RACE_ETH]

    if spread_format == "wide":
        counts = group_summarize(df, keys, [_count("num_race_eth")])
        wide = pivot(counts, TITLE_KEYS, C.RACE_ETH, "num_race_eth", categories=C.RACE_ETH_LEVELS)
        return percentage_of(wide, C.RACE_ETH_LEVELS)

    long = group_summarize(df, keys, [
        _count("num_race_eth"),
        Aggregation(C.BASE_SALARY, "median", "median_salary_race_eth"),
        Aggregation(C.BASE_SALARY, "mean", "mean_salary_race_eth"),
    ])
    title_totals = long.groupby(TITLE_KEYS)["num_race_eth"].transform("sum")
    long.insert(long.columns.get_loc("num_race_eth") + 1, "perc_race_eth", long["num_race_eth"] / title_totals)
    return long


def white_nonwhite_summary(df: pd.DataFrame, spread_format: str = "wide") -> pd.DataFrame:
    """
    Binary white / non-white breakdown per title.

    wide: NonWhite count and perc_NonWhite over the title's White + NonWhite rows.
    long: one row per (title, nonwhite flag) with count, median and mean salary.
    """
    _check_spread_format(spread_format)
    validate_required_columns(df, [C.NONWHITE, C.BASE_SALARY] + TITLE_KEYS)
    keys = TITLE_KEYS + [C.NONWHITE]

    if spread_format == "long":
        return group_summarize(df, keys, [
            _count("num_nonwhite"),
            Aggregation(C.BASE_SALARY, "median", "median_salary_nonwhite"),
            Aggregation(C.BASE_SALARY, "mean", "mean_salary_nonwhite"),
        ])

    counts = group_summarize(df, keys, [_count("num_nonwhite")])
    wide = pivot(counts, TITLE_KEYS, C.NONWHITE, "num_nonwhite", categories=[0, 1])
    wide = wide.rename(columns={0: "White", 1: "NonWhite"})
    wide = percentage_of(wide, ["NonWhite"], ["White", "NonWhite"])
    return wide.drop(columns="White")


def race_eth_summary(df: pd.DataFrame, agency: Optional[str] = None, high_low: Optional[str] = None,
                     spread_format: str = "wide") -> pd.DataFrame:
    """
    Race/ethnicity breakdown by title, optionally within one agency.

    Args:
        df (pd.DataFrame): Enriched master table.
        agency (str): Full agency name; None covers the whole dataset.
        high_low (str): "high" or "low" ranks titles (>= 5 workers, median pay > 10) by
            median pay, highest or lowest first, and attaches the race_eth composition.
            None ranks titles with >= 5 workers by median salary (highest first) and
            attaches race_eth plus the white/non-white composition.
        spread_format (str): "wide" or "long" layout of the race_eth composition.
    """
    _check_spread_format(spread_format)
    if high_low is not None and high_low not in HIGH_LOW_OPTIONS:
        raise ValueError(f"high_low must be one of {HIGH_LOW_OPTIONS} or None, got {high_low!r}")
    validate_required_columns(df, [C.AGENCY, C.RACE_ETH, C.NONWHITE, C.BASE_SALARY] + TITLE_KEYS)

    df_scope = _filter_agency(df, agency)
    df_race_eth = race_eth_composition(df_scope, spread_format)
    composition_join = "one_to_one" if spread_format == "wide" else "one_to_many"

    if high_low is not None:
        overall = group_summarize(df_scope, TITLE_KEYS, [
            _count("count"),
            Aggregation(C.BASE_SALARY, "median", "median_pay_overall"),
            Aggregation(C.BASE_SALARY, "mean", "mean_pay_overall"),
        ])
        overall = overall.loc[(overall["count"] >= MIN_TITLE_COUNT) & (overall["median_pay_overall"] > MIN_MEDIAN_PAY)]
        overall = overall[TITLE_KEYS + ["median_pay_overall", "mean_pay_overall"]]
        overall = overall.sort_values("median_pay_overall", ascending=(high_low == "low"), kind="mergesort")
        output = join_on_keys(overall, df_race_eth, TITLE_KEYS, validate=composition_join)
        return round_numeric(output).reset_index(drop=True)

    # Titles with no categorized race_eth rows still carry their white/non-white breakdown.
    df_nonwhite = white_nonwhite_summary(df_scope, "wide")
    composition = join_on_keys(df_nonwhite, df_race_eth, TITLE_KEYS, validate=composition_join)
    composition = composition[list(df_race_eth.columns) + ["NonWhite", "perc_NonWhite"]]
    if spread_format == "wide":
        composition = composition.fillna({level: 0 for level in C.RACE_ETH_LEVELS})
    output = join_on_keys(_title_salary_summary(df_scope), composition, TITLE_KEYS, validate=composition_join)
    output = round_numeric(output).sort_values("median_salary", ascending=False, kind="mergesort")
    return output.reset_index(drop=True)


# --------------------------------------------------------------------------------------
# Share of a variable of interest per title
# --------------------------------------------------------------------------------------

def title_code_share(df: pd.DataFrame, share_var: str, share_value: Any, binning: bool = True) -> pd.DataFrame:
    """
    Share of each title code's workers for whom `share_var == share_value`.

    Args:
        df (pd.DataFrame): Enriched master table (or any subset of it).
        share_var (str): Column to test, e.g. "nonwhite", "gender", "nonwhite_female".
        share_value: Value the column should take, e.g. 1 or "Female".
        binning (bool): When True, bins the per-title share into 0.1-wide intervals and
            returns, per non-empty bin, the median salary and worker count across all
            titles landing in it. When False, returns every record with n_count,
            n_workers and perc_n joined on by title code.
    """
    validate_required_columns(df, [C.TITLE_CODE, C.BASE_SALARY, share_var])

    n_count = group_summarize(df.loc[df[share_var] == share_value], [C.TITLE_CODE], [_count("n_count")])
    shares = group_summarize(df, [C.TITLE_CODE], [_count("n_workers")])
    shares = join_on_keys(shares, n_count, [C.TITLE_CODE], validate="one_to_one")
    shares["n_count"] = shares["n_count"].fillna(0).astype(int)
    shares["perc_n"] = shares["n_count"] / shares["n_workers"]

    output = join_on_keys(df, shares, [C.TITLE_CODE])
    if not binning:
        output["perc_n"] = output["perc_n"].round(2)
        return output

    output["n_bin"] = bin_series(output["perc_n"], bin_width=SHARE_BIN_WIDTH)
    binned = group_summarize(output, ["n_bin"], [
        Aggregation(C.BASE_SALARY, "median", "median_salary"),
        _count("num_workers"),
    ])
    return round_numeric(binned)


# --------------------------------------------------------------------------------------
# Most populous titles per agency
# --------------------------------------------------------------------------------------

def _most_frequent(df: pd.DataFrame, keys: list, category: str, count_name: str) -> pd.DataFrame:
    """Single most frequent value of `category` per key; ties go to the first in sort order."""
    counts = group_summarize(df, keys + [category], [_count(count_name)])
    return top_n_per_group(counts, keys, count_name, 1)


def agencies_populous_title_stats(df: pd.DataFrame, top_n_titles: int = 1) -> pd.DataFrame:
    """
    The most populous title(s) in every agency with their general demographic breakdown.

    Args:
        df (pd.DataFrame): Enriched master table.
        top_n_titles (int): Number of titles kept per agency, by headcount.

    Returns:
        pd.DataFrame: Per selected title: headcount and share of the agency, median/mean
        salary, median age, median years on the job, plus the most frequent race_eth and
        gender with their shares of the title.
    """
    validate_required_columns(df, [C.AGENCY, C.BASE_SALARY, C.AGE_YEARS, C.YEARS_FROM_START,
                                   C.RACE_ETH, C.GENDER] + TITLE_KEYS)
    keys = [C.AGENCY] + TITLE_KEYS

    profiles = group_summarize(df, keys, [
        _count("num_workers_title"),
        Aggregation(C.BASE_SALARY, "median", "median_salary_title"),
        Aggregation(C.BASE_SALARY, "mean", "mean_salary_title"),
        Aggregation(C.AGE_YEARS, "median", "median_age_title"),
        Aggregation(C.YEARS_FROM_START, "median", "median_years_on_jobs_title"),
    ])
    agency_totals = group_summarize(df, [C.AGENCY], [_count("agency_workers")])
    profiles = join_on_keys(profiles, agency_totals, [C.AGENCY])
    profiles.insert(
        profiles.columns.get_loc("num_workers_title") + 1,
        "perc_workers_title",
        profiles["num_workers_title"] / profiles["agency_workers"],
    )
    profiles = profiles.drop(columns="agency_workers")

    most_populous = top_n_per_group(profiles, [C.AGENCY], "num_workers_title", top_n_titles)
    df_selected = df.merge(most_populous[keys], on=keys, how="inner")

    top_race = _most_frequent(df_selected, keys, C.RACE_ETH, "num_race_eth")
    top_gender = _most_frequent(df_selected, keys, C.GENDER, "num_gender")
    # Joined separately so a title with no categorized race_eth keeps its gender columns.
    output = join_on_keys(most_populous, top_race, keys, validate="one_to_one")
    output = join_on_keys(output, top_gender, keys, validate="one_to_one")
    output["perc_race_eth"] = output["num_race_eth"] / output["num_workers_title"]
    output["perc_gender"] = output["num_gender"] / output["num_workers_title"]
    return round_numeric(output).reset_index(drop=True)
