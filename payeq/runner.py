# -*- coding: utf-8 -*-
"""
End-to-end pipeline: load the payroll extract, clean it, run the configured reports,
then export them to CSV/Excel and charts.
"""
import os
import time
from typing import Dict, Optional

import pandas as pd
from loguru import logger
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table

from payeq.deriver import clean_data
from payeq.reports import (
    agencies_populous_title_stats,
    gender_summary,
    race_eth_summary,
    title_code_share,
)
from payeq.settings import PayEquityConfig, ReportSpec
from payeq.utils.console import (
    console,
    display_dataframe_as_rich_table,
    show_dataset_snapshot,
    show_output_tree,
)
from payeq.utils.data_io import export_dataframe, read_payroll, read_uniform_titles
from payeq.visualizers import generate_visualizations

OUTPUT_BASE_DIR = 'output'

# --- Column Names for Exported Files ---
EXPORT_COLUMN_NAMES = {
    'agency': 'Agency',
    'civil_service_title_name': 'Civil Service Title',
    'civil_service_title_code': 'Title Code',
    'median_salary': 'Median Salary',
    'mean_salary': 'Mean Salary',
    'total_count': 'Total Count',
    'perc_Male': 'Male Share',
    'perc_Female': 'Female Share',
    'median_pay_overall': 'Median Pay (Overall)',
    'mean_pay_overall': 'Mean Pay (Overall)',
    'race_eth': 'Race/Ethnicity',
    'num_race_eth': 'Race/Ethnicity Count',
    'perc_race_eth': 'Race/Ethnicity Share',
    'median_salary_race_eth': 'Median Salary (Race/Ethnicity)',
    'mean_salary_race_eth': 'Mean Salary (Race/Ethnicity)',
    'NonWhite': 'Non-White Count',
    'perc_NonWhite': 'Non-White Share',
    'n_bin': 'Share Bin',
    'num_workers': 'Workers',
    'n_count': 'Group Count',
    'n_workers': 'Title Workers',
    'perc_n': 'Group Share',
    'num_workers_title': 'Title Workers',
    'perc_workers_title': 'Share of Agency',
    'median_salary_title': 'Median Salary',
    'mean_salary_title': 'Mean Salary',
    'median_age_title': 'Median Age',
    'median_years_on_jobs_title': 'Median Years on Job',
    'num_gender': 'Gender Count',
    'perc_gender': 'Gender Share',
}


def run_report(df_clean: pd.DataFrame, spec: ReportSpec) -> pd.DataFrame:
    """Dispatches one configured report to its generator."""
    if spec.kind == "gender":
        return gender_summary(df_clean, spec.agency, exportable=spec.exportable)
    if spec.kind == "race_eth":
        return race_eth_summary(df_clean, agency=spec.agency, high_low=spec.high_low,
                                spread_format=spec.spread_format)
    if spec.kind == "share":
        return title_code_share(df_clean, spec.share_var, spec.share_value, binning=spec.binning)
    if spec.kind == "populous":
        return agencies_populous_title_stats(df_clean, top_n_titles=spec.top_n_titles)
    raise ValueError(f"Unknown report kind: {spec.kind}")


def run_pipeline(config: PayEquityConfig, only_report: Optional[str] = None,
                 output_base_dir: str = OUTPUT_BASE_DIR) -> Dict[str, pd.DataFrame]:
    """
    Runs the full pipeline for one project configuration.

    Args:
        config (PayEquityConfig): Validated project configuration.
        only_report (str): Name of a single configured report to run.
        output_base_dir (str): Root folder for CSV, Excel and chart outputs.

    Returns:
        dict: Report name -> report DataFrame.
    """
    output_csv_dir = os.path.join(output_base_dir, config.output_dir, 'csv_reports')
    output_excel_dir = os.path.join(output_base_dir, config.output_dir, 'excel_reports')
    output_charts_dir = os.path.join(output_base_dir, config.output_dir, 'charts')

    specs = config.reports
    if only_report is not None:
        specs = [spec for spec in specs if spec.name == only_report]
        if not specs:
            raise ValueError(f"Report '{only_report}' is not configured. Available: {[s.name for s in config.reports]}")

    timings = {}
    t_start = time.perf_counter()

    # ==============================================================================
    # PHASE 1: DATA LOADING AND PREPARATION
    # ==============================================================================
    console.print(Rule(title="[phase]Phase 1: Data Preparation[/phase]", style="bright_cyan"))
    t_phase1 = time.perf_counter()

    df_raw = read_payroll(config.input_file, delimiter=config.delimiter)
    uniform_titles = read_uniform_titles(config.uniform_file) if config.uniform_file else None
    df_clean = clean_data(
        df_raw,
        reference_year=config.reference_year,
        column_names=config.column_names,
        employee_status_filter=config.employee_status_filter,
        uniform_titles=uniform_titles,
        skip_malformed=config.skip_malformed,
    )
    show_dataset_snapshot(df_clean, config.reference_year)
    timings["Data Preparation"] = time.perf_counter() - t_phase1

    # ==============================================================================
    # PHASE 2: REPORTS
    # ==============================================================================
    console.print(Rule(title="[phase]Phase 2: Reports[/phase]", style="bright_cyan"))
    results = {}
    report_files = {}
    for spec in specs:
        t_report = time.perf_counter()
        console.print(Panel.fit(f"[question]-> {spec.name} ({spec.kind})[/question]", border_style="cyan"))
        df_report = run_report(df_clean, spec)
        results[spec.name] = df_report

        report_files[spec.name] = export_dataframe(df_report, spec.name, output_csv_dir, output_excel_dir,
                                                   EXPORT_COLUMN_NAMES)
        display_dataframe_as_rich_table(df_report, title=f"{spec.name}: {len(df_report)} rows")
        if config.charts:
            chart_path = generate_visualizations(spec.kind, spec.name, df_report, output_charts_dir)
            if chart_path:
                report_files[spec.name].append(chart_path)

        timings[f"  {spec.name}"] = time.perf_counter() - t_report
        logger.debug(f"Exported '{spec.name}' ({len(df_report)} rows).")

    # ==============================================================================
    # WRAP-UP: EXECUTION STATS AND OUTPUT OVERVIEW
    # ==============================================================================
    console.print(Rule(title="[phase]Execution summary[/phase]", style="bright_cyan"))
    table = Table(title="Execution timings", show_header=True, header_style="bold")
    table.add_column("Step", style="muted")
    table.add_column("Elapsed", style="bold")
    for step, elapsed in timings.items():
        table.add_row(step, f"{elapsed:.2f}s")
    table.add_row("Total runtime", f"{time.perf_counter() - t_start:.2f}s")
    console.print(table)

    show_output_tree(os.path.join(output_base_dir, config.output_dir), report_files)
    logger.success(f"{len(results)} report(s) completed.")
    return results
