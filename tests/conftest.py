"""
Shared fixtures: raw payroll rows in the canonical 25-column layout.
"""
import pandas as pd
import pytest

from payeq.columns import DEFAULT_COLUMNS
from payeq.deriver import derive

BASE_RECORD = {
    'agency': 'DEPARTMENT OF FINANCE',
    'start_date': '2010-06-01',
    'civil_service_title_code': '10251',
    'civil_service_title_name': 'CLERICAL ASSOCIATE',
    'min_salary': '30000',
    'max_salary': '50000',
    'business_title': 'Clerk',
    'title_classification': 'Competitive',
    'job_category': 'Administration',
    'career_level_title_suffix': '',
    'career_level_title_level': '1',
    'base_salary': '40000',
    'salary_pay_band': '',
    'DCAS_OGC': 'A',
    'DCAS_OGN': 'Admin',
    'managerial': 'N',
    'highest_educ_level': "Bachelor's",
    'gender': 'Female',
    'race': 'White',
    'ethnicity': 'Not Hispanic or Latino',
    'dob': '1980-03-15',
    'provisional_status': 'N',
    'employee_status': 'Full-Time',
    'personnel_status_change_desc': '',
    'prev_employed': 'N',
}

REFERENCE_YEAR = 2021


def make_records(*overrides) -> pd.DataFrame:
    """One normalized (canonical-named, untyped) row per override dict."""
    rows = [{**BASE_RECORD, **override} for override in overrides]
    return pd.DataFrame(rows, columns=DEFAULT_COLUMNS)


def make_title(n, agency='DEPARTMENT OF FINANCE', name='CLERK', code='10001', **fields):
    """n identical override dicts for one title; list-valued fields are spread over the rows."""
    rows = []
    for i in range(n):
        row = {'agency': agency, 'civil_service_title_name': name, 'civil_service_title_code': code}
        for key, value in fields.items():
            row[key] = value[i] if isinstance(value, (list, tuple)) else value
        rows.append(row)
    return rows


def enrich(*overrides) -> pd.DataFrame:
    """Derived records without status filtering."""
    return derive(make_records(*overrides), REFERENCE_YEAR, employee_status_filter=None)


@pytest.fixture
def raw_frame() -> pd.DataFrame:
    """Raw extract with source-style headers, as read from the tab-separated file."""
    df = make_records({}, {'gender': 'Male', 'race': 'Asian'})
    df.columns = [f"Column {i}" for i in range(len(DEFAULT_COLUMNS))]
    return df


@pytest.fixture
def citywide() -> pd.DataFrame:
    """Two agencies, several titles, mixed demographics; enriched and unfiltered."""
    rows = []
    rows += make_title(
        10, agency='FIRE DEPARTMENT', name='FIREFIGHTER', code='70310',
        base_salary=[str(85000 + 1000 * i) for i in range(10)],
        gender=['Male'] * 8 + ['Female'] * 2,
        race=['White'] * 5 + ['Black or African American'] * 3 + ['Asian'] * 2,
    )
    rows += make_title(
        7, agency='FIRE DEPARTMENT', name='EMS SPECIALIST', code='53053',
        base_salary=[str(50000 + 500 * i) for i in range(7)],
        gender=['Female'] * 4 + ['Male'] * 3,
        ethnicity=['Hispanic or Latino'] * 4 + ['Not Hispanic or Latino'] * 3,
    )
    rows += make_title(
        3, agency='FIRE DEPARTMENT', name='FIRE ALARM DISPATCHER', code='71010',
        base_salary='45000',
    )
    rows += make_title(
        6, agency='DEPARTMENT OF SANITATION', name='SANITATION WORKER', code='80609',
        base_salary=[str(40000 + 2000 * i) for i in range(6)],
        gender='Male',
        race=['White', 'White', 'Black or African American', 'Black or African American', 'Asian', 'White'],
    )
    return enrich(*rows)
