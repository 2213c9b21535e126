# main.py
# -*- coding: utf-8 -*-
"""
Main entry point for the pay equity reports.

Usage:
    # Run every report configured for a project
    python main.py citywide_2021

    # Run a single configured report
    python main.py citywide_2021 --report fdny_gender
"""
import sys
import argparse

from rich.panel import Panel

from payeq.errors import PayEquityError
from payeq.runner import run_pipeline
from payeq.settings import load_config
from payeq.utils.console import configure_logging, console


def main(argv=None):
    """
    Orchestrates a pay equity run based on CLI arguments.
    """
    parser = argparse.ArgumentParser(
        description="Pay Equity Report Runner",
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument(
        "project_key",
        type=str,
        help="The key of the project in the config file (e.g., 'citywide_2021')."
    )
    parser.add_argument(
        "-c", "--config",
        default="config.yaml",
        help="Path to the YAML config file. Default: config.yaml"
    )
    parser.add_argument(
        "-r", "--report",
        default=None,
        help="Run only the configured report with this name."
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show DEBUG log messages."
    )
    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else "INFO")

    try:
        config = load_config(args.config, args.project_key)
        console.print(
            Panel.fit(
                f"[phase]Pay Equity Analysis[/phase]\n"
                f"[muted]Project:[/muted] [bold]{args.project_key}[/bold]\n"
                f"[muted]Description:[/muted] {config.description or '-'}",
                border_style="bright_cyan",
                title="Initialization",
            )
        )
        run_pipeline(config, only_report=args.report)
    except (PayEquityError, FileNotFoundError, ValueError) as e:
        console.print(Panel.fit(f"[error]{e}[/error]", border_style="red", title=type(e).__name__))
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
