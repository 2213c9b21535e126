# -*- coding: utf-8 -*-
"""
Canonical column names for the payroll dataset and its derived attributes.
"""

# --- Raw (post-rename) columns ---
AGENCY = "agency"
START_DATE = "start_date"
TITLE_CODE = "civil_service_title_code"
TITLE_NAME = "civil_service_title_name"
MIN_SALARY = "min_salary"
MAX_SALARY = "max_salary"
BUSINESS_TITLE = "business_title"
TITLE_CLASSIFICATION = "title_classification"
BASE_SALARY = "base_salary"
MANAGERIAL = "managerial"
GENDER = "gender"
RACE = "race"
ETHNICITY = "ethnicity"
DOB = "dob"
EMPLOYEE_STATUS = "employee_status"

# Order of the 22-data-elements extract as delivered.
DEFAULT_COLUMNS = [
    AGENCY, START_DATE, TITLE_CODE, TITLE_NAME,
    MIN_SALARY, MAX_SALARY, BUSINESS_TITLE, TITLE_CLASSIFICATION,
    'job_category', 'career_level_title_suffix', 'career_level_title_level',
    BASE_SALARY, 'salary_pay_band', 'DCAS_OGC', 'DCAS_OGN', MANAGERIAL,
    'highest_educ_level', GENDER, RACE, ETHNICITY, DOB, 'provisional_status',
    EMPLOYEE_STATUS, 'personnel_status_change_desc', 'prev_employed',
]

# Columns the deriver cannot work without.
REQUIRED_COLUMNS = [
    AGENCY, START_DATE, TITLE_CODE, TITLE_NAME, MIN_SALARY, MAX_SALARY,
    TITLE_CLASSIFICATION, BASE_SALARY, GENDER, RACE, ETHNICITY, DOB, EMPLOYEE_STATUS,
]

DATE_COLUMNS = [START_DATE, DOB]
NUMERIC_COLUMNS = [BASE_SALARY, MIN_SALARY, MAX_SALARY]

# --- Derived columns ---
DAYS_FROM_START = "days_from_start"
YEARS_FROM_START = "years_from_start"
AGE = "age"
AGE_YEARS = "age_years"
AGE_ABOVE18 = "age_above18"
RACE_ETH = "race_eth"
NONWHITE = "nonwhite"
NONWHITE_FEMALE = "nonwhite_female"
UNIFORM = "uniform"

DERIVED_COLUMNS = [
    DAYS_FROM_START, YEARS_FROM_START, AGE, AGE_YEARS, AGE_ABOVE18,
    RACE_ETH, NONWHITE, NONWHITE_FEMALE,
]

# Title identity used by every per-title report.
TITLE_KEYS = [TITLE_NAME, TITLE_CODE]

# --- Category values ---
FULL_TIME = "Full-Time"
PART_TIME = "Part-Time"
CLASSIFIED_TITLES = ["Competitive", "Non-Competitive"]

MALE = "Male"
FEMALE = "Female"
GENDER_CATEGORIES = [MALE, FEMALE]

HISPANIC = "Hispanic or Latino"
UNDISCLOSED = "Unknown or Choose Not to Disclose"
WHITE = "White"
PACIFIC_ISLANDER = "Native Hawaiian or Pacific Islander"
SOR_OR_UCND_RACES = [
    "American Indian or Alaska Native",
    "Two or more races",
    UNDISCLOSED,
]

RACE_ETH_UNDISCLOSED = "Ethnicity Unknown or Choose Not to Disclose"
RACE_ETH_ASIAN = "NH Asian"
RACE_ETH_SOR = "NH SOR or Race UCND"
RACE_ETH_LEVELS = [
    "NH White",
    "NH Black or African American",
    HISPANIC,
    RACE_ETH_ASIAN,
    RACE_ETH_UNDISCLOSED,
    RACE_ETH_SOR,
]
