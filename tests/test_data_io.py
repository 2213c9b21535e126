"""
Tests for reading the payroll extract and the uniform title table, and for exports.
"""
import os

import pandas as pd
import pytest

from conftest import make_records
from payeq.errors import SchemaError
from payeq.utils.data_io import export_dataframe, read_payroll, read_uniform_titles


class TestReadPayroll:

    def test_reads_tab_separated_as_text(self, tmp_path):
        path = tmp_path / "payroll.csv"
        make_records({'civil_service_title_code': '00123'}).to_csv(path, sep="\t", index=False)
        df = read_payroll(path)
        assert df.shape == (1, 25)
        assert df['civil_service_title_code'].iloc[0] == '00123'
        assert df['base_salary'].iloc[0] == '40000'


class TestReadUniformTitles:

    def test_csv(self, tmp_path):
        path = tmp_path / "uniform.csv"
        pd.DataFrame({'TC': [' 70310', '71010'], 'Title': ['FF', 'FAD']}).to_csv(path, index=False)
        assert read_uniform_titles(path) == ['70310', '71010']

    def test_excel(self, tmp_path):
        path = tmp_path / "uniform.xlsx"
        pd.DataFrame({'TC': ['70310']}).to_excel(path, index=False)
        assert read_uniform_titles(path) == ['70310']

    def test_missing_code_column(self, tmp_path):
        path = tmp_path / "uniform.csv"
        pd.DataFrame({'Code': ['70310']}).to_csv(path, index=False)
        with pytest.raises(SchemaError, match="TC"):
            read_uniform_titles(path)


class TestExportDataframe:

    def test_writes_csv_and_excel_with_display_names(self, tmp_path):
        df = pd.DataFrame({'median_salary': [50000.0], 'total_count': [7]})
        saved = export_dataframe(
            df, 'report', str(tmp_path / 'csv'), str(tmp_path / 'excel'),
            {'median_salary': 'Median Salary'},
        )
        csv_path, excel_path = saved
        assert os.path.exists(csv_path)
        assert excel_path == str(tmp_path / 'excel' / 'report.xlsx')
        assert os.path.exists(excel_path)
        assert list(pd.read_csv(csv_path).columns) == ['Median Salary', 'total_count']
        assert list(df.columns) == ['median_salary', 'total_count']
