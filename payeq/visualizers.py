# -*- coding: utf-8 -*-
"""
Generates and saves charts from the pay equity report tables.

Charts are a by-product of the runner; the report functions never depend on them.
"""
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
from loguru import logger

from payeq import columns as C
from payeq.utils.plotting import save_matplotlib_figure

# --- Global Plotting Style Configuration ---
sns.set_theme(style="whitegrid")
plt.rcParams['figure.figsize'] = (12, 7)
plt.rcParams['axes.titlesize'] = 16
plt.rcParams['axes.labelsize'] = 12


def _get_plot_data(df_input: pd.DataFrame, sort_by_col: str, max_categories: int = 20) -> tuple[pd.DataFrame, bool]:
    """
    Sorts and trims a DataFrame to its top and bottom rows by sort_by_col.
    Returns the trimmed DataFrame and whether trimming occurred.
    """
    if len(df_input) > max_categories:
        df_sorted = df_input.sort_values(by=sort_by_col, ascending=False)
        df_top = df_sorted.head(max_categories // 2)
        df_bottom = df_sorted.tail(max_categories // 2)
        return pd.concat([df_top, df_bottom]), True
    return df_input, False


def _title_label(df: pd.DataFrame) -> pd.Series:
    return df[C.TITLE_NAME].astype(str) + ' (' + df[C.TITLE_CODE].astype(str) + ')'


def plot_share_bins(df_binned: pd.DataFrame, output_dir: str, filename: str):
    """Median salary of the titles falling in each share bin, with worker counts annotated."""
    df_plot = df_binned.copy()
    df_plot['n_bin'] = df_plot['n_bin'].astype(str)

    fig, ax = plt.subplots()
    sns.barplot(data=df_plot, x='n_bin', y='median_salary', color='skyblue', ax=ax)
    for i, workers in enumerate(df_plot['num_workers']):
        ax.annotate(f"n={workers:,}", (i, df_plot['median_salary'].iloc[i]), ha='center', va='bottom', fontsize=9)

    ax.set_title('Median Salary by Share of Workers per Title Code')
    ax.set_xlabel('Share of title workers in the group')
    ax.set_ylabel('Median Salary ($)')
    ax.ticklabel_format(style='plain', axis='y')

    return save_matplotlib_figure(fig, filename, output_dir)


def plot_gender_composition(df_gender: pd.DataFrame, output_dir: str, filename: str):
    """Stacked Male/Female shares per title, titles ordered by median salary."""
    if 'perc_Male' not in df_gender.columns:
        df_gender = df_gender.assign(
            perc_Male=df_gender[C.MALE] / (df_gender[C.MALE] + df_gender[C.FEMALE]),
            perc_Female=df_gender[C.FEMALE] / (df_gender[C.MALE] + df_gender[C.FEMALE]),
        )
    df_plot, was_trimmed = _get_plot_data(df_gender, 'median_salary', 30)
    labels = _title_label(df_plot)

    fig, ax = plt.subplots(figsize=(12, max(6, 0.35 * len(df_plot))))
    ax.barh(labels, df_plot['perc_Male'], color='tab:blue', label='Male')
    ax.barh(labels, df_plot['perc_Female'], left=df_plot['perc_Male'], color='tab:orange', label='Female')
    ax.axvline(0.5, color='k', linestyle='--', linewidth=1)
    ax.invert_yaxis()

    title = 'Gender Composition by Title (highest median salary first)'
    if was_trimmed:
        title += '\n(Top & Bottom 15 by Median Salary)'
    ax.set_title(title)
    ax.set_xlabel('Share of Title Workers')
    ax.set_ylabel('Title')
    ax.legend(loc='lower right')

    return save_matplotlib_figure(fig, filename, output_dir)


def plot_race_eth_composition(df_race_eth: pd.DataFrame, output_dir: str, filename: str):
    """Stacked race/ethnicity shares per title (wide reports only)."""
    perc_cols = [f"perc_{level}" for level in C.RACE_ETH_LEVELS]
    if not set(perc_cols).issubset(df_race_eth.columns):
        logger.debug(f"Skipping race/ethnicity chart for '{filename}': not a wide table.")
        return None
    sort_col = 'median_salary' if 'median_salary' in df_race_eth.columns else 'median_pay_overall'
    df_plot, _ = _get_plot_data(df_race_eth, sort_col, 30)
    labels = _title_label(df_plot)

    fig, ax = plt.subplots(figsize=(12, max(6, 0.35 * len(df_plot))))
    left = pd.Series(0.0, index=df_plot.index)
    palette = sns.color_palette("tab10", len(C.RACE_ETH_LEVELS))
    for level, col, color in zip(C.RACE_ETH_LEVELS, perc_cols, palette):
        ax.barh(labels, df_plot[col], left=left, color=color, label=level)
        left = left + df_plot[col]
    ax.invert_yaxis()

    ax.set_title('Race/Ethnicity Composition by Title')
    ax.set_xlabel('Share of Title Workers')
    ax.set_ylabel('Title')
    ax.legend(loc='center left', bbox_to_anchor=(1.0, 0.5))

    return save_matplotlib_figure(fig, filename, output_dir)


def plot_populous_titles(df_populous: pd.DataFrame, output_dir: str, filename: str):
    """Headcount share of the most populous title(s) in each agency."""
    df_plot, _ = _get_plot_data(df_populous, 'num_workers_title', 30)
    labels = df_plot[C.AGENCY].astype(str) + ' | ' + df_plot[C.TITLE_NAME].astype(str)

    fig, ax = plt.subplots(figsize=(12, max(6, 0.35 * len(df_plot))))
    sns.barplot(x=df_plot['perc_workers_title'], y=labels, color='skyblue', ax=ax, orient='h')
    ax.set_title('Most Populous Title Share of Agency Headcount')
    ax.set_xlabel('Share of Agency Workers')
    ax.set_ylabel('Agency | Title')

    return save_matplotlib_figure(fig, filename, output_dir)


PLOT_ROUTER = {
    'share': plot_share_bins,
    'gender': plot_gender_composition,
    'race_eth': plot_race_eth_composition,
    'populous': plot_populous_titles,
}


def generate_visualizations(report_kind: str, base_filename: str, df_report: pd.DataFrame, output_charts_dir: str):
    """Routes a report table to its plotting function; unknown kinds and empty tables are skipped."""
    plot_function = PLOT_ROUTER.get(report_kind)
    if plot_function is None or df_report.empty:
        return None
    if report_kind == 'share' and 'n_bin' not in df_report.columns:
        return None
    try:
        return plot_function(df_report.copy(), output_charts_dir, base_filename)
    except (KeyError, ValueError, TypeError) as e:
        logger.warning(f"Could not generate chart for '{base_filename}': {e}")
        return None
