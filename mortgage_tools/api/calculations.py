"""
Mortgage calculation API endpoints.

These endpoints accept calculator inputs and return calculated results.
Out-of-range inputs are clamped by the calculations and reported back in
`validation_errors` so the form can show them next to the fields.
"""

import logging
from typing import Any, Dict, List, Union

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from mortgage_tools.calculations.amortization import (
    Frequency,
    calculate_mortgage,
    generate_amortization_schedule,
    summarize_by_year,
)
from mortgage_tools.calculations.point_in_time import PointInTime
from mortgage_tools.calculations.sale import calculate_sale
from mortgage_tools.calculations.split import calculate_split_mortgage
from mortgage_tools.calculations.validation import (
    validate_mortgage_inputs,
    validate_split_inputs,
)
from mortgage_tools.constants import (
    DEFAULT_AGE_OF_MORTGAGE,
    DEFAULT_REPAYMENT_SHARE,
    DEFAULT_TERM_YEARS,
)

logger = logging.getLogger(__name__)

router = APIRouter()

AgeOfMortgage = Union[str, int, float, Dict[str, Any]]


class MortgageInput(BaseModel):
    """Input for the single-borrower mortgage calculator."""

    price: float
    deposit: float = 0.0
    rate: float
    term_years: float = DEFAULT_TERM_YEARS
    frequency: Frequency = Frequency.monthly
    age_of_mortgage: AgeOfMortgage = DEFAULT_AGE_OF_MORTGAGE
    sale_price: float = 0.0


class SplitMortgageInput(BaseModel):
    """Input for the two-person split mortgage calculator."""

    price: float
    person1_deposit: float = 0.0
    person2_deposit: float = 0.0
    person1_repayment_share: float = DEFAULT_REPAYMENT_SHARE
    rate: float
    term_years: float = DEFAULT_TERM_YEARS
    frequency: Frequency = Frequency.monthly
    age_of_mortgage: AgeOfMortgage = DEFAULT_AGE_OF_MORTGAGE
    sale_price: float = 0.0


class ScheduleInput(BaseModel):
    """Input for a full amortization schedule."""

    loan_amount: float
    rate: float
    term_years: float = DEFAULT_TERM_YEARS
    frequency: Frequency = Frequency.monthly


class AmortizationOutput(BaseModel):
    """Calculated amortization figures."""

    loan_amount: float
    periods_per_year: int
    periodic_rate: float
    payment_per_period: float
    total_periods: int
    total_paid: float
    total_interest: float
    principal_portion_at_point: float
    interest_portion_at_point: float
    remaining_balance_at_point: float
    principal_gained_up_to_point: float
    interest_paid_up_to_point: float
    periods_elapsed: int
    point_in_range: bool

    class Config:
        from_attributes = True


class SaleOutput(BaseModel):
    """Calculated sale figures."""

    sale_price: float
    remaining_balance: float
    net_proceeds: float
    total_deposit: float
    total_equity: float
    profit: float
    profit_excluding_principal_gains: float

    class Config:
        from_attributes = True


class SaleShareOutput(BaseModel):
    """One person's part of the sale proceeds."""

    equity_share: float
    proceeds: float
    profit: float

    class Config:
        from_attributes = True


class PersonOutput(BaseModel):
    """One person's part of a split mortgage."""

    deposit: float
    repayment_share: float
    payment_per_period: float
    interest_portion_at_point: float
    principal_gained_up_to_point: float
    interest_paid_up_to_point: float
    total_paid_up_to_point: float
    total_principal_from_payments: float
    total_interest_from_payments: float
    equity_at_point: float
    equity_share: float
    sale: SaleShareOutput

    class Config:
        from_attributes = True


class MortgageResponse(BaseModel):
    """Response for the single-borrower calculator."""

    age_of_mortgage: Union[str, Dict[str, Any]]
    age_label: str
    results: AmortizationOutput
    sale: SaleOutput
    validation_errors: Dict[str, str]


class SplitMortgageResponse(BaseModel):
    """Response for the split mortgage calculator."""

    age_of_mortgage: Union[str, Dict[str, Any]]
    age_label: str
    results: AmortizationOutput
    sale: SaleOutput
    person1: PersonOutput
    person2: PersonOutput
    validation_errors: Dict[str, str]


class ScheduleResponse(BaseModel):
    """Response with a full amortization schedule."""

    schedule: List[dict]
    annual_summary: List[dict]
    total_interest: float
    total_principal: float


def parse_point(value: AgeOfMortgage) -> PointInTime:
    """Parse an age of mortgage, rejecting unknown values with a 400."""
    try:
        return PointInTime.parse(value)
    except ValueError as e:
        logger.warning(f"Rejected age of mortgage {value!r}: {e}")
        raise HTTPException(status_code=400, detail=str(e))


def run_mortgage(inputs: MortgageInput) -> MortgageResponse:
    """Validate and calculate a single-borrower mortgage."""
    point = parse_point(inputs.age_of_mortgage)
    errors = validate_mortgage_inputs(
        inputs.price, inputs.deposit, inputs.rate, inputs.term_years, point
    )

    result = calculate_mortgage(
        inputs.price,
        inputs.deposit,
        inputs.rate,
        inputs.term_years,
        inputs.frequency,
        point,
    )
    sale = calculate_sale(
        inputs.sale_price,
        result.loan_amount,
        result.principal_gained_up_to_point,
        inputs.deposit,
    )

    return MortgageResponse(
        age_of_mortgage=point.to_json(),
        age_label=point.label,
        results=AmortizationOutput.model_validate(result),
        sale=SaleOutput.model_validate(sale),
        validation_errors=errors,
    )


def run_split_mortgage(inputs: SplitMortgageInput) -> SplitMortgageResponse:
    """Validate and calculate a split mortgage."""
    point = parse_point(inputs.age_of_mortgage)
    errors = validate_split_inputs(
        inputs.price,
        inputs.person1_deposit,
        inputs.person2_deposit,
        inputs.person1_repayment_share,
        inputs.rate,
        inputs.term_years,
        point,
        inputs.sale_price,
    )

    split = calculate_split_mortgage(
        price=inputs.price,
        person1_deposit=inputs.person1_deposit,
        person2_deposit=inputs.person2_deposit,
        person1_repayment_share=inputs.person1_repayment_share,
        annual_rate_percent=inputs.rate,
        term_years=inputs.term_years,
        frequency=inputs.frequency,
        point=point,
        sale_price=inputs.sale_price,
    )

    return SplitMortgageResponse(
        age_of_mortgage=point.to_json(),
        age_label=point.label,
        results=AmortizationOutput.model_validate(split.mortgage),
        sale=SaleOutput.model_validate(split.sale),
        person1=PersonOutput.model_validate(split.person1),
        person2=PersonOutput.model_validate(split.person2),
        validation_errors=errors,
    )


@router.post("/mortgage", response_model=MortgageResponse)
async def calculate_mortgage_endpoint(inputs: MortgageInput):
    """Calculate payment, totals and progress for a single-borrower mortgage."""
    return run_mortgage(inputs)


@router.post("/split-mortgage", response_model=SplitMortgageResponse)
async def calculate_split_mortgage_endpoint(inputs: SplitMortgageInput):
    """Calculate a mortgage shared between two people."""
    return run_split_mortgage(inputs)


@router.post("/schedule", response_model=ScheduleResponse)
async def calculate_schedule(inputs: ScheduleInput):
    """Generate a loan amortization schedule."""
    schedule = generate_amortization_schedule(
        loan_amount=inputs.loan_amount,
        annual_rate_percent=inputs.rate,
        term_years=inputs.term_years,
        frequency=inputs.frequency,
    )

    return ScheduleResponse(
        schedule=schedule,
        annual_summary=summarize_by_year(schedule),
        total_interest=round(sum(row["interest"] for row in schedule), 2),
        total_principal=round(sum(row["principal"] for row in schedule), 2),
    )
