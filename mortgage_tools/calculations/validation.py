"""
Calculator Input Validation

Checks form inputs against the documented ranges before they are shown to the
user. The calculation functions clamp out-of-range values rather than raising,
so validation only reports; it never blocks a calculation.
"""

import math
from typing import Dict, Optional, Union

from mortgage_tools.calculations.point_in_time import PointInTime
from mortgage_tools.constants import INPUT_CONSTRAINTS


def validate_mortgage_inputs(
    price: float,
    deposit: float,
    annual_rate_percent: float,
    term_years: float,
    point: Optional[Union[PointInTime, str, int, dict]] = None,
) -> Dict[str, str]:
    """
    Validate single-borrower calculator inputs.

    Returns:
        Mapping of field name to error message; empty when all inputs are valid
    """
    errors: Dict[str, str] = {}

    if price < 0:
        errors["price"] = "House price cannot be negative"
    if deposit < 0:
        errors["deposit"] = "Deposit cannot be negative"
    elif deposit > price:
        errors["deposit"] = "Deposit cannot exceed house price"

    errors.update(_validate_loan_terms(annual_rate_percent, term_years, point))
    return errors


def validate_split_inputs(
    price: float,
    person1_deposit: float,
    person2_deposit: float,
    person1_repayment_share: float,
    annual_rate_percent: float,
    term_years: float,
    point: Optional[Union[PointInTime, str, int, dict]] = None,
    sale_price: float = 0.0,
) -> Dict[str, str]:
    """Validate split-mortgage calculator inputs."""
    errors: Dict[str, str] = {}

    if price < 0:
        errors["price"] = "House price cannot be negative"
    if person1_deposit < 0:
        errors["person1_deposit"] = "Person 1 deposit cannot be negative"
    if person2_deposit < 0:
        errors["person2_deposit"] = "Person 2 deposit cannot be negative"
    if person1_deposit + person2_deposit > price:
        errors["person1_deposit"] = "Total deposit cannot exceed house price"
        errors["person2_deposit"] = "Total deposit cannot exceed house price"

    share = INPUT_CONSTRAINTS["repayment_share"]
    if person1_repayment_share < share["min"]:
        errors["person1_repayment_share"] = "Repayment share cannot be negative"
    elif person1_repayment_share > share["max"]:
        errors["person1_repayment_share"] = "Repayment share cannot exceed 100%"

    if sale_price < 0:
        errors["sale_price"] = "Sale price cannot be negative"

    errors.update(_validate_loan_terms(annual_rate_percent, term_years, point))
    return errors


def _validate_loan_terms(
    annual_rate_percent: float,
    term_years: float,
    point: Optional[Union[PointInTime, str, int, dict]],
) -> Dict[str, str]:
    errors: Dict[str, str] = {}

    rate = INPUT_CONSTRAINTS["rate"]
    if annual_rate_percent < rate["min"]:
        errors["rate"] = "Interest rate cannot be negative"
    elif annual_rate_percent > rate["max"]:
        errors["rate"] = f"Interest rate cannot exceed {rate['max']}%"

    term = INPUT_CONSTRAINTS["term_years"]
    if not math.isfinite(term_years) or not term["min"] <= term_years <= term["max"]:
        errors["term_years"] = f"Term must be between {term['min']} and {term['max']} years"

    if point is not None:
        try:
            parsed = PointInTime.parse(point)
        except ValueError as e:
            errors["age_of_mortgage"] = str(e)
        else:
            if parsed.exceeds_term(term_years):
                errors["age_of_mortgage"] = "Age of mortgage cannot exceed the loan term"

    return errors
