# -*- coding: utf-8 -*-
"""
Pretty console setup (Rich + Loguru) and small display helpers for the runner.
"""
import os
from typing import Dict, List

import pandas as pd
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme
from rich.traceback import install as rich_traceback_install
from rich.tree import Tree

from payeq import columns as C

# Custom Rich theme for consistent styling throughout the console output
_custom_theme = Theme(
    {
        "phase": "bold bright_cyan",
        "question": "bold cyan",
        "good": "bold green",
        "warn": "bold yellow",
        "error": "bold red",
        "info": "cyan",
        "muted": "dim",
    }
)

console = Console(theme=_custom_theme, highlight=False)


def configure_logging(level: str = "INFO"):
    """Routes Loguru through the Rich console with a compact format."""
    rich_traceback_install(show_locals=False, width=120, extra_lines=2, word_wrap=True)
    logger.remove()
    logger.add(
        console.print,
        level=level,
        colorize=True,
        format="<dim>{time:YYYY-MM-DD HH:mm:ss}</dim> | <level>{level: <8}</level> | "
               "<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    )


def show_dataset_snapshot(df_clean: pd.DataFrame, reference_year: int, title: str = "Enriched payroll"):
    """Headcount, coverage and demographic completeness of the enriched master table."""
    table = Table(title=title, show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Metric", style="muted")
    table.add_column("Value", style="bold")
    table.add_row("Reference date", f"{reference_year}-12-31")
    table.add_row("Employees", f"{len(df_clean):,}")
    table.add_row("Agencies", f"{df_clean[C.AGENCY].nunique():,}")
    table.add_row("Title codes", f"{df_clean[C.TITLE_CODE].nunique():,}")
    if C.RACE_ETH in df_clean.columns:
        missing = int(df_clean[C.RACE_ETH].isna().sum())
        style = "warn" if missing else "good"
        table.add_row("Uncategorized race_eth", f"[{style}]{missing:,}[/{style}]")
    if C.UNIFORM in df_clean.columns:
        table.add_row("Uniformed titles", f"{(df_clean[C.UNIFORM] == 'yes').sum():,} employees")
    table.add_row("Memory", f"{df_clean.memory_usage(deep=True).sum() / 1024 ** 2:.1f} MB")
    console.print(table)


def display_dataframe_as_rich_table(df_to_display: pd.DataFrame, title: str, max_rows: int = 10):
    """Displays the first rows of a report as a formatted Rich table."""
    table = Table(
        show_header=True,
        header_style="bold magenta",
        title=title,
        title_style="bold green"
    )

    for column in df_to_display.columns:
        table.add_column(str(column))

    for _, row in df_to_display.head(max_rows).iterrows():
        table.add_row(*[str(item) for item in row])

    if len(df_to_display) > max_rows:
        table.caption = f"... {len(df_to_display) - max_rows} more rows"
    console.print(table)


def show_output_tree(output_root: str, report_files: Dict[str, List[str]], title: str = "Saved reports"):
    """One branch per report with the files it produced; reports that saved nothing are flagged."""
    tree = Tree(f"[bold]Output[/] -> {output_root}", guide_style="bright_blue")
    for report_name, paths in report_files.items():
        saved = [p for p in paths if p and os.path.exists(p)]
        node = tree.add(f"[bold]{report_name}[/] ({len(saved)} files)")
        for path in saved:
            node.add(os.path.relpath(path, output_root))
        if not saved:
            node.add("[muted]nothing saved[/]")
    console.print(Panel.fit(tree, title=title, border_style="bright_blue"))
