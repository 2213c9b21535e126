# -*- coding: utf-8 -*-
"""
Run configuration: one block of config.yaml per analysis project, validated with pydantic.

Values missing from the YAML block can be supplied through PAYEQ_* environment
variables (e.g. PAYEQ_REFERENCE_YEAR=2021).
"""
from __future__ import annotations
from pathlib import Path
from typing import List, Literal, Optional, Union, Dict, Any

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from payeq.errors import ConfigError

ReportKind = Literal["gender", "race_eth", "share", "populous"]


class ReportSpec(BaseModel):
    """One report to produce from the cleaned dataset."""
    name: str
    kind: ReportKind
    agency: Optional[str] = None
    exportable: bool = False
    high_low: Optional[Literal["high", "low"]] = None
    spread_format: Literal["wide", "long"] = "wide"
    share_var: Optional[str] = None
    share_value: Optional[Union[int, float, str]] = None
    binning: bool = True
    top_n_titles: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def check_kind_params(self) -> "ReportSpec":
        if self.kind == "gender" and not self.agency:
            raise ValueError(f"report '{self.name}': gender reports need an agency")
        if self.kind == "share" and (self.share_var is None or self.share_value is None):
            raise ValueError(f"report '{self.name}': share reports need share_var and share_value")
        return self


class PayEquityConfig(BaseSettings):
    description: str = ""
    input_file: Path
    delimiter: str = "\t"
    reference_year: int
    column_names: Union[Literal["default"], List[str]] = "default"
    employee_status_filter: Optional[str] = "full-time"
    uniform_file: Optional[Path] = None
    skip_malformed: bool = False
    output_dir: str = "pay_equity"
    charts: bool = True
    reports: List[ReportSpec] = []

    model_config = SettingsConfigDict(env_prefix="PAYEQ_", env_nested_delimiter="__")


def read_yaml_file(path: Union[str, Path]) -> Dict[str, Any]:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_config(path: Union[str, Path], project_key: str) -> PayEquityConfig:
    """
    Loads and validates the block `project_key` of a YAML config file.

    Raises:
        ConfigError: If the file or project is missing, or the block fails validation
            (for instance when no reference_year is given).
    """
    try:
        config = read_yaml_file(path)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}. Run from the project root.") from None
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file {path} is not valid YAML: {e}") from e

    if project_key not in config:
        raise ConfigError(f"Project key '{project_key}' not found in {path}. Available projects: {list(config.keys())}")

    try:
        return PayEquityConfig(**(config[project_key] or {}))
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration for '{project_key}':\n{e}") from e
