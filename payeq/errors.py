# -*- coding: utf-8 -*-
"""
Exception hierarchy for the pay equity pipeline.

Every error raised on purpose by the library derives from PayEquityError, so the
runner can catch one type and print a clean panel instead of a traceback.
"""


class PayEquityError(Exception):
    """Base class for all pipeline errors."""


class ConfigError(PayEquityError):
    """A required setting (e.g. the reference year) is missing or invalid."""


class SchemaError(PayEquityError):
    """The input table does not match the expected column layout."""


class ParseError(PayEquityError):
    """A date or numeric field could not be parsed."""

    def __init__(self, column: str, row_labels: list, sample_values: list):
        self.column = column
        self.row_labels = list(row_labels)
        self.sample_values = list(sample_values)
        preview = ", ".join(repr(v) for v in self.sample_values[:5])
        super().__init__(
            f"Column '{column}' has {len(self.row_labels)} unparseable value(s) "
            f"(rows {self.row_labels[:5]}{'...' if len(self.row_labels) > 5 else ''}): {preview}"
        )
