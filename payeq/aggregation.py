# -*- coding: utf-8 -*-
"""
Generic grouping and summarizing primitives shared by every report.

All functions take and return pandas DataFrames and never mutate their input.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from payeq.errors import SchemaError

# Supported operations mapped to their pandas aggregation names.
# "count" counts rows (like n()), not non-null values.
AGGREGATION_OPERATIONS = {
    "count": "size",
    "median": "median",
    "mean": "mean",
    "sum": "sum",
    "first": "first",
}


@dataclass(frozen=True)
class Aggregation:
    """One output column of a group summary: `operation` applied to `column`."""
    column: str
    operation: str
    name: Optional[str] = None

    @property
    def output_name(self) -> str:
        return self.name or f"{self.operation}_{self.column}"


def _require_columns(df: pd.DataFrame, cols: Iterable[str], context: str):
    missing_cols = [col for col in cols if col not in df.columns]
    if missing_cols:
        raise SchemaError(f"{context}: unknown column(s) {missing_cols}")


def validate_aggregations(df: pd.DataFrame, group_keys: Sequence[str], aggregations: Sequence[Aggregation]):
    """Checks an aggregation spec against the columns actually present in df."""
    if not aggregations:
        raise SchemaError("At least one aggregation is required.")
    _require_columns(df, group_keys, "group keys")
    _require_columns(df, [agg.column for agg in aggregations], "aggregation columns")

    bad_ops = sorted({agg.operation for agg in aggregations if agg.operation not in AGGREGATION_OPERATIONS})
    if bad_ops:
        raise SchemaError(f"Unsupported aggregation operation(s) {bad_ops}; use one of {list(AGGREGATION_OPERATIONS)}")

    names = [agg.output_name for agg in aggregations]
    clashes = sorted({n for n in names if names.count(n) > 1} | (set(names) & set(group_keys)))
    if clashes:
        raise SchemaError(f"Aggregation output names collide: {clashes}")


def group_summarize(df: pd.DataFrame, group_keys: Sequence[str], aggregations: Sequence[Aggregation]) -> pd.DataFrame:
    """
    One row per observed combination of group_keys, ordered by key, holding the
    requested aggregates over the group's records.

    Rows whose key is missing are not grouped.
    """
    group_keys = list(group_keys)
    validate_aggregations(df, group_keys, aggregations)
    named = {
        agg.output_name: (agg.column, AGGREGATION_OPERATIONS[agg.operation])
        for agg in aggregations
    }
    return df.groupby(group_keys, observed=True, sort=True).agg(**named).reset_index()


def pivot(rows: pd.DataFrame, index: Sequence[str], key_column: str, value_column: str,
          categories: Optional[Sequence] = None) -> pd.DataFrame:
    """
    Spreads long rows into a wide table: each distinct key becomes a column filled
    from value_column. Missing combinations are 0, never null.

    Listed `categories` always appear as columns, in the given order, followed by
    any other observed keys.
    """
    index = list(index)
    _require_columns(rows, index + [key_column, value_column], "pivot")

    keys = rows[key_column].astype(object)
    observed = list(pd.unique(keys.dropna()))
    ordered_keys = list(categories) if categories is not None else sorted(observed, key=str)
    ordered_keys += [k for k in observed if k not in ordered_keys]

    if rows.empty:
        return pd.DataFrame(columns=index + ordered_keys)

    long = rows.assign(**{key_column: keys}).dropna(subset=[key_column])
    wide = long.set_index(index + [key_column])[value_column].unstack(key_column, fill_value=0)
    wide = wide.reindex(columns=ordered_keys, fill_value=0)
    wide.columns.name = None
    return wide.reset_index()


def percentage_of(table: pd.DataFrame, numerator_columns: Sequence[str],
                  denominator_columns: Optional[Sequence[str]] = None, prefix: str = "perc_") -> pd.DataFrame:
    """
    Adds `<prefix><col>` for each numerator column. The denominator is the row-wise
    sum of denominator_columns (default: the numerator columns), never a separately
    tracked total, so the shares renormalize over whatever category columns are passed.
    """
    numerator_columns = list(numerator_columns)
    denominator_columns = list(denominator_columns) if denominator_columns is not None else numerator_columns
    _require_columns(table, numerator_columns + denominator_columns, "percentage_of")

    out = table.copy()
    denominator = out[denominator_columns].sum(axis=1)
    for col in numerator_columns:
        out[f"{prefix}{col}"] = out[col] / denominator
    return out


def top_n_per_group(records: pd.DataFrame, group_keys: Sequence[str], rank_by: str, n: int) -> pd.DataFrame:
    """
    Within each group keeps the first n rows by rank_by, descending.

    The sort is stable, so ties keep their input order; there is no secondary key.
    The result is ordered by group key, then by rank.
    """
    if n < 1:
        raise ValueError(f"n must be a positive integer, got {n}")
    group_keys = list(group_keys)
    _require_columns(records, group_keys + [rank_by], "top_n_per_group")

    ranked = records.sort_values(rank_by, ascending=False, kind="mergesort")
    top = ranked.groupby(group_keys, sort=False, observed=True).head(n)
    return top.sort_values(group_keys, kind="mergesort")


# --------------------------------------------------------------------------------------
# Binning
# --------------------------------------------------------------------------------------

def bin_edges(bin_width: float = 0.1, lower: float = 0.0, upper: float = 1.0) -> np.ndarray:
    if bin_width <= 0 or upper <= lower:
        raise ValueError("bin_width must be positive and upper must exceed lower")
    n_bins = int(round((upper - lower) / bin_width))
    if n_bins < 1 or not np.isclose(lower + n_bins * bin_width, upper):
        raise ValueError(f"Range [{lower}, {upper}] is not a whole number of {bin_width}-wide bins")
    return np.round(np.linspace(lower, upper, n_bins + 1), 10)


def bin_labels(edges: Sequence[float]) -> List[str]:
    """Interval labels: the first bin is closed on both sides, the rest on the right only."""
    labels = []
    for i, (lo, hi) in enumerate(zip(edges[:-1], edges[1:])):
        left = "[" if i == 0 else "("
        labels.append(f"{left}{lo:g},{hi:g}]")
    return labels


def bin_value(value: float, bin_width: float = 0.1, lower: float = 0.0, upper: float = 1.0) -> str:
    """Label of the bin holding value. The lowest edge belongs to the first bin."""
    if value is None or pd.isna(value) or value < lower or value > upper:
        raise ValueError(f"{value!r} is outside [{lower}, {upper}]")
    edges = bin_edges(bin_width, lower, upper)
    position = max(int(np.searchsorted(edges, value, side="left")) - 1, 0)
    return bin_labels(edges)[position]


def bin_series(values: pd.Series, bin_width: float = 0.1, lower: float = 0.0, upper: float = 1.0) -> pd.Series:
    """Vectorized bin_value; out-of-range or missing values become missing."""
    edges = bin_edges(bin_width, lower, upper)
    return pd.cut(values, bins=edges, labels=bin_labels(edges), right=True, include_lowest=True)


# --------------------------------------------------------------------------------------
# Finishing helpers
# --------------------------------------------------------------------------------------

def round_numeric(table: pd.DataFrame, decimals: int = 2) -> pd.DataFrame:
    """Rounds numeric columns; text and categorical columns are left as-is."""
    return table.round(decimals)


def join_on_keys(left: pd.DataFrame, right: pd.DataFrame, keys: Sequence[str],
                 how: str = "left", validate: str = "many_to_one") -> pd.DataFrame:
    """Key join of two tables on a shared title/group identity."""
    keys = list(keys)
    _require_columns(left, keys, "join (left)")
    _require_columns(right, keys, "join (right)")
    return left.merge(right, on=keys, how=how, validate=validate)
