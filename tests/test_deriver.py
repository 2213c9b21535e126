"""
Tests for the attribute deriver: derived columns, race/ethnicity precedence and filters.
"""
import itertools
import warnings

import numpy as np
import pandas as pd
import pytest

from conftest import REFERENCE_YEAR, enrich, make_records
from payeq.columns import RACE_ETH_LEVELS
from payeq.deriver import clean_data, derive, derive_race_eth
from payeq.errors import ConfigError, ParseError

RACES = [
    'White',
    'Black or African American',
    'Asian',
    'Native Hawaiian or Pacific Islander',
    'American Indian or Alaska Native',
    'Two or more races',
    'Unknown or Choose Not to Disclose',
]
ETHNICITIES = [
    'Hispanic or Latino',
    'Not Hispanic or Latino',
    'Unknown or Choose Not to Disclose',
]


class TestReferenceYear:

    def test_missing_year_in_derive(self):
        with pytest.raises(ConfigError, match="reference_year"):
            derive(make_records({}), None)

    def test_missing_year_in_clean_data_aborts_before_normalizing(self):
        # A wrong-width frame would raise SchemaError if normalization ran first.
        with pytest.raises(ConfigError):
            clean_data(pd.DataFrame([[1]]), None)

    @pytest.mark.parametrize("bad_year", ["twenty", 2021.5, True])
    def test_invalid_year(self, bad_year):
        with pytest.raises(ConfigError):
            derive(make_records({}), bad_year)

    def test_year_as_text_is_accepted(self):
        df = derive(make_records({}), "2021", employee_status_filter=None)
        assert len(df) == 1


class TestTenureAndAge:

    def test_days_and_years_from_start(self):
        df = enrich({'start_date': '2021-01-01'}, {'start_date': '2011-12-31'})
        assert df['days_from_start'].tolist() == [364, 3653]
        assert df['years_from_start'].tolist() == [1.0, 10.0]

    def test_age_is_floored(self):
        df = enrich({'dob': '1980-12-31'})
        row = df.iloc[0]
        assert row['age'] == pytest.approx(14975 / 365)
        assert row['age_years'] == 41
        assert row['age_above18'] == 23

    def test_input_not_mutated(self):
        df_in = make_records({})
        derive(df_in, REFERENCE_YEAR)
        assert 'race_eth' not in df_in.columns
        assert df_in['base_salary'].iloc[0] == '40000'


class TestRaceEth:

    @pytest.mark.parametrize("race, ethnicity, expected", [
        ('White', 'Hispanic or Latino', 'Hispanic or Latino'),
        ('Native Hawaiian or Pacific Islander', 'Hispanic or Latino', 'Hispanic or Latino'),
        ('Asian', 'Unknown or Choose Not to Disclose', 'Ethnicity Unknown or Choose Not to Disclose'),
        ('Native Hawaiian or Pacific Islander', 'Not Hispanic or Latino', 'NH Asian'),
        ('American Indian or Alaska Native', 'Not Hispanic or Latino', 'NH SOR or Race UCND'),
        ('Two or more races', 'Not Hispanic or Latino', 'NH SOR or Race UCND'),
        ('Unknown or Choose Not to Disclose', 'Not Hispanic or Latino', 'NH SOR or Race UCND'),
        ('White', 'Not Hispanic or Latino', 'NH White'),
        ('Black or African American', 'Not Hispanic or Latino', 'NH Black or African American'),
        ('Asian', 'Not Hispanic or Latino', 'NH Asian'),
    ])
    def test_precedence(self, race, ethnicity, expected):
        df = enrich({'race': race, 'ethnicity': ethnicity})
        assert df['race_eth'].iloc[0] == expected

    def test_every_legal_combination_is_categorized(self):
        combos = [{'race': r, 'ethnicity': e} for r, e in itertools.product(RACES, ETHNICITIES)]
        df = enrich(*combos)
        assert df['race_eth'].notna().all()
        assert set(df['race_eth'].unique()) <= set(RACE_ETH_LEVELS)

    def test_ordered_categories(self):
        df = enrich({})
        assert df['race_eth'].cat.ordered
        assert list(df['race_eth'].cat.categories) == RACE_ETH_LEVELS

    def test_race_outside_categories_left_missing(self):
        df = enrich({'race': 'Some Other Race'})
        assert pd.isna(df['race_eth'].iloc[0])

    def test_unknown_race_builds_categorical_without_warnings(self):
        race = pd.Series(['Some Other Race', 'White'])
        ethnicity = pd.Series(['Not Hispanic or Latino'] * 2)
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            race_eth = derive_race_eth(race, ethnicity)
        assert pd.isna(race_eth[0])
        assert race_eth[1] == 'NH White'
        assert list(race_eth.categories) == RACE_ETH_LEVELS


class TestFlags:

    @pytest.mark.parametrize("race, ethnicity, expected", [
        ('White', 'Not Hispanic or Latino', 0),
        ('Unknown or Choose Not to Disclose', 'Not Hispanic or Latino', 0),
        ('White', 'Hispanic or Latino', 1),
        ('Unknown or Choose Not to Disclose', 'Hispanic or Latino', 1),
        ('Black or African American', 'Not Hispanic or Latino', 1),
        ('Asian', 'Unknown or Choose Not to Disclose', 1),
    ])
    def test_nonwhite(self, race, ethnicity, expected):
        df = enrich({'race': race, 'ethnicity': ethnicity})
        assert df['nonwhite'].iloc[0] == expected

    def test_nonwhite_female(self):
        df = enrich(
            {'race': 'Asian', 'gender': 'Female'},
            {'race': 'Asian', 'gender': 'Male'},
            {'race': 'White', 'gender': 'Female'},
        )
        assert df['nonwhite_female'].tolist() == [1, 0, 0]

    def test_nonwhite_female_implies_nonwhite(self):
        combos = [
            {'race': r, 'ethnicity': e, 'gender': g}
            for r, e, g in itertools.product(RACES, ETHNICITIES, ['Male', 'Female'])
        ]
        df = enrich(*combos)
        assert (df.loc[df['nonwhite_female'] == 1, 'nonwhite'] == 1).all()

    def test_managerial_normalized(self):
        df = enrich({'managerial': 'Y'}, {'managerial': 'yes'}, {'managerial': ''})
        assert df['managerial'].astype(str).tolist() == ['Y', 'N', 'N']


class TestSalaryRangeSuppression:

    def test_full_time_low_minimum_nulls_both(self):
        df = enrich({'min_salary': '12000', 'max_salary': '60000'})
        assert np.isnan(df['min_salary'].iloc[0])
        assert np.isnan(df['max_salary'].iloc[0])

    def test_part_time_low_minimum_kept(self):
        df = enrich({'min_salary': '12000', 'max_salary': '60000', 'employee_status': 'Part-Time'})
        assert df['min_salary'].iloc[0] == 12000
        assert df['max_salary'].iloc[0] == 60000

    def test_plausible_range_kept(self):
        df = enrich({'min_salary': '15000', 'max_salary': '60000'})
        assert df['min_salary'].iloc[0] == 15000


class TestStatusFilters:

    ROWS = [
        {},                                                     # kept by full-time
        {'employee_status': 'Part-Time', 'base_salary': '13'},  # kept by part-time
        {'base_salary': '14999'},
        {'dob': '2006-06-01'},                                  # age 15
        {'title_classification': 'Exempt'},
        {'employee_status': 'Seasonal'},
    ]

    def test_full_time(self):
        df = derive(make_records(*self.ROWS), REFERENCE_YEAR, employee_status_filter="full-time")
        assert df.index.tolist() == [0]

    def test_part_time(self):
        df = derive(make_records(*self.ROWS), REFERENCE_YEAR, employee_status_filter="part-time")
        assert df.index.tolist() == [1]

    def test_part_time_age_floor_is_one(self):
        rows = [{'employee_status': 'Part-Time', 'base_salary': '20', 'dob': '2019-06-01'}]
        df = derive(make_records(*rows), REFERENCE_YEAR, employee_status_filter="part-time")
        assert len(df) == 1

    @pytest.mark.parametrize("profile", [None, "all", "everyone"])
    def test_other_values_pass_through(self, profile):
        df = derive(make_records(*self.ROWS), REFERENCE_YEAR, employee_status_filter=profile)
        assert len(df) == len(self.ROWS)

    def test_default_is_full_time(self):
        df = clean_data(make_records(*self.ROWS), REFERENCE_YEAR)
        assert len(df) == 1


class TestMalformedRows:

    def test_bad_date_fails_batch(self):
        with pytest.raises(ParseError) as excinfo:
            derive(make_records({}, {'dob': 'not a date'}), REFERENCE_YEAR)
        assert excinfo.value.column == 'dob'
        assert excinfo.value.row_labels == [1]

    def test_bad_salary_fails_batch(self):
        with pytest.raises(ParseError, match="base_salary"):
            derive(make_records({'base_salary': 'abc'}), REFERENCE_YEAR)

    def test_skip_mode_drops_rows(self):
        df = derive(
            make_records({}, {'start_date': '31/31/2020'}, {'base_salary': 'n/a'}),
            REFERENCE_YEAR,
            employee_status_filter=None,
            skip_malformed=True,
        )
        assert df.index.tolist() == [0]

    def test_blank_salary_range_is_not_malformed(self):
        df = enrich({'min_salary': '', 'max_salary': ''})
        assert df['min_salary'].isna().all()


class TestUniformTitles:

    def test_tagging(self):
        df_in = make_records({'civil_service_title_code': '70310'}, {'civil_service_title_code': '10251'})
        df = derive(df_in, REFERENCE_YEAR, uniform_titles=[70310, '99999'])
        assert df['uniform'].tolist() == ['yes', 'no']

    def test_no_column_without_reference_list(self):
        assert 'uniform' not in enrich({}).columns
