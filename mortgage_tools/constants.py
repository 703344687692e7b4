"""
Calculator option lists, input constraints and form defaults.
"""

# Form defaults
DEFAULT_HOUSE_PRICE = 500_000
DEFAULT_DEPOSIT = 100_000
DEFAULT_RATE = 5.59  # annual %
DEFAULT_TERM_YEARS = 30
DEFAULT_FREQUENCY = "monthly"
DEFAULT_AGE_OF_MORTGAGE = "first"
DEFAULT_REPAYMENT_SHARE = 0.5

FREQUENCY_LABEL = {
    "yearly": "Yearly",
    "monthly": "Monthly",
    "fortnightly": "Fortnightly",
    "weekly": "Weekly",
}

YEAR_OPTIONS = [
    {"value": "deposit", "label": "Deposit only"},
    {"value": "first", "label": "First payment"},
    {"value": "5", "label": "Year 5"},
    {"value": "10", "label": "Year 10"},
    {"value": "15", "label": "Year 15"},
    {"value": "20", "label": "Year 20"},
    {"value": "25", "label": "Year 25"},
    {"value": "27", "label": "Year 27"},
    {"value": "29", "label": "Year 29"},
    {"value": "30", "label": "Year 30"},
]

INPUT_CONSTRAINTS = {
    "rate": {"min": 0, "max": 99, "step": 0.01},
    "term_years": {"min": 1, "max": 40, "step": 1},
    "house_price": {"min": 0, "step": 1000},
    "deposit": {"min": 0, "step": 1000},
    "repayment_share": {"min": 0, "max": 1, "step": 0.01},
}

PRESET_TYPES = ("regular", "split")
