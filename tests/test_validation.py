"""
Tests for calculator input validation and display formatting.
"""

from mortgage_tools.calculations.validation import (
    validate_mortgage_inputs,
    validate_split_inputs,
)
from mortgage_tools.utils.formatters import (
    fmt_currency,
    fmt_frequency,
    fmt_percent,
    parse_input_number,
)


class TestMortgageValidation:
    """Test single-borrower input checks."""

    def test_valid_inputs(self):
        assert validate_mortgage_inputs(500000, 100000, 5.59, 30, "5") == {}

    def test_deposit_exceeds_price(self):
        errors = validate_mortgage_inputs(300000, 400000, 5.59, 30)
        assert errors["deposit"] == "Deposit cannot exceed house price"

    def test_negative_price(self):
        errors = validate_mortgage_inputs(-1, 0, 5.59, 30)
        assert errors["price"] == "House price cannot be negative"

    def test_rate_out_of_range(self):
        assert "rate" in validate_mortgage_inputs(500000, 0, -1, 30)
        assert validate_mortgage_inputs(500000, 0, 120, 30)["rate"] == "Interest rate cannot exceed 99%"

    def test_term_out_of_range(self):
        assert "term_years" in validate_mortgage_inputs(500000, 0, 5, 0)
        assert "term_years" in validate_mortgage_inputs(500000, 0, 5, 41)
        assert "term_years" not in validate_mortgage_inputs(500000, 0, 5, 40)
        assert "term_years" in validate_mortgage_inputs(500000, 0, 5, float("nan"))
        assert "term_years" in validate_mortgage_inputs(500000, 0, 5, float("inf"))

    def test_age_beyond_term(self):
        errors = validate_mortgage_inputs(500000, 100000, 5.59, 20, "25")
        assert errors["age_of_mortgage"] == "Age of mortgage cannot exceed the loan term"

    def test_unknown_age(self):
        assert "age_of_mortgage" in validate_mortgage_inputs(500000, 100000, 5.59, 30, "later")


class TestSplitValidation:
    """Test split-mortgage input checks."""

    def test_valid_inputs(self):
        assert validate_split_inputs(500000, 50000, 50000, 0.5, 5.59, 30, "first", 600000) == {}

    def test_total_deposit_exceeds_price(self):
        errors = validate_split_inputs(100000, 60000, 50000, 0.5, 5.59, 30)
        assert errors["person1_deposit"] == "Total deposit cannot exceed house price"
        assert errors["person2_deposit"] == "Total deposit cannot exceed house price"

    def test_repayment_share_range(self):
        assert validate_split_inputs(500000, 0, 0, 1.2, 5.59, 30)["person1_repayment_share"] == (
            "Repayment share cannot exceed 100%"
        )
        assert "person1_repayment_share" in validate_split_inputs(500000, 0, 0, -0.1, 5.59, 30)

    def test_negative_sale_price(self):
        errors = validate_split_inputs(500000, 0, 0, 0.5, 5.59, 30, sale_price=-1)
        assert "sale_price" in errors


class TestFormatters:
    """Test display formatting."""

    def test_currency(self):
        assert fmt_currency(1234567.891) == "$1,234,567.89"
        assert fmt_currency(-50) == "-$50.00"
        assert fmt_currency(10, "£") == "£10.00"

    def test_percent(self):
        assert fmt_percent(0.3456) == "34.56%"

    def test_frequency(self):
        assert fmt_frequency("fortnightly") == "Fortnightly"

    def test_parse_input_number(self):
        assert parse_input_number("1,250,000") == 1250000
        assert parse_input_number(" 5.59 ") == 5.59
        assert parse_input_number("abc") == 0
        assert parse_input_number("inf") == 0
