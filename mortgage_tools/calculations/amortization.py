"""
Loan Amortization Calculations

Implements payment, totals and point-in-time progress for a fixed-rate,
fixed-term loan repaid at a fixed frequency. The per-period rate is the
nominal annual rate divided by the number of periods per year.
"""

import enum
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from mortgage_tools.calculations.point_in_time import PointInTime, PointInTimeKind
from mortgage_tools.constants import INPUT_CONSTRAINTS

# Rates below this are treated as zero (straight-line repayment)
ZERO_RATE_EPSILON = 1e-10

# Inputs beyond these are clamped so a schedule never exceeds 40 x 52 periods
MAX_TERM_YEARS = INPUT_CONSTRAINTS["term_years"]["max"]
MAX_RATE_PERCENT = INPUT_CONSTRAINTS["rate"]["max"]


class Frequency(str, enum.Enum):
    """Payment frequency."""

    yearly = "yearly"
    monthly = "monthly"
    fortnightly = "fortnightly"
    weekly = "weekly"


PERIODS_PER_YEAR: Dict[Frequency, int] = {
    Frequency.yearly: 1,
    Frequency.monthly: 12,
    Frequency.fortnightly: 26,
    Frequency.weekly: 52,
}


@dataclass(frozen=True)
class ScheduleWalk:
    """Cumulative totals after walking the schedule for a number of periods."""

    principal_paid: float
    interest_paid: float
    start_balance: float  # balance at the start of the last elapsed period
    remaining_balance: float  # balance entering the next, unpaid period


@dataclass(frozen=True)
class PointInTimeBreakdown:
    """Progress of a loan at a point in time."""

    periods_elapsed: int
    principal_portion: float
    interest_portion: float
    remaining_balance: float
    principal_gained: float
    interest_paid: float
    in_range: bool = True


@dataclass(frozen=True)
class AmortizationResult:
    """All derived quantities for a loan evaluated at a point in time."""

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


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def periods_per_year(frequency: Union[Frequency, str]) -> int:
    """Number of payment periods per year for a frequency."""
    return PERIODS_PER_YEAR[Frequency(frequency)]


def calculate_loan_amount(price: float, deposit: float) -> float:
    """Amount borrowed: price less deposit, never negative."""
    return max(0.0, max(0.0, _finite(price)) - max(0.0, _finite(deposit)))


def total_periods(term_years: float, periods_per_year: int) -> int:
    """Number of payments over the term (at most MAX_TERM_YEARS), at least one."""
    term = min(max(0.0, _finite(term_years)), MAX_TERM_YEARS)
    return max(1, int(round(term * max(0, periods_per_year))))


def periodic_rate(annual_rate_percent: float, periods_per_year: int) -> float:
    """Nominal per-period rate from an annual percentage rate."""
    if periods_per_year <= 0:
        return 0.0
    rate = min(max(0.0, _finite(annual_rate_percent)), MAX_RATE_PERCENT)
    return rate / 100.0 / periods_per_year


def payment_per_period(
    loan_amount: float, periodic_rate: float, total_periods: int
) -> float:
    """
    Calculate the fixed payment per period.

    Standard annuity formula, equivalent to Excel's PMT() with the sign flipped.

    Args:
        loan_amount: Amount borrowed
        periodic_rate: Interest rate per period as decimal (e.g., 0.0046 monthly)
        total_periods: Number of payments

    Returns:
        Payment per period (positive number)
    """
    if loan_amount <= 0:
        return 0.0
    if total_periods <= 0:
        return 0.0

    if abs(periodic_rate) < ZERO_RATE_EPSILON:
        return loan_amount / total_periods

    return (loan_amount * periodic_rate) / (
        1 - (1 + periodic_rate) ** (-total_periods)
    )


def total_paid(payment_per_period: float, total_periods: int) -> float:
    """Total of all payments over the term."""
    return max(0.0, payment_per_period) * max(0, total_periods)


def total_interest(total_paid: float, loan_amount: float) -> float:
    """Total interest over the term."""
    if loan_amount <= 0:
        return 0.0
    return max(0.0, total_paid - loan_amount)


def schedule_walk(
    loan_amount: float,
    payment_per_period: float,
    periodic_rate: float,
    periods_elapsed: int,
) -> ScheduleWalk:
    """
    Walk the amortization schedule period by period.

    Each period accrues interest on the outstanding balance and applies the
    rest of the payment to principal.

    Args:
        loan_amount: Amount borrowed
        payment_per_period: Fixed payment per period
        periodic_rate: Interest rate per period as decimal
        periods_elapsed: Number of payments made

    Returns:
        ScheduleWalk with cumulative principal and interest and the balances
        at the start of the last elapsed period and entering the next one
    """
    balance = loan_amount
    start_balance = loan_amount
    principal_paid = 0.0
    interest_paid = 0.0

    for _ in range(max(0, periods_elapsed)):
        start_balance = balance
        interest = balance * periodic_rate
        principal = payment_per_period - interest
        balance -= principal
        principal_paid += principal
        interest_paid += interest

    return ScheduleWalk(
        principal_paid=principal_paid,
        interest_paid=interest_paid,
        start_balance=start_balance,
        remaining_balance=balance,
    )


def elapsed_periods(
    point: PointInTime, periods_per_year: int, max_periods: Optional[int] = None
) -> int:
    """Number of payments made by a point in time, capped at `max_periods`."""
    if point.kind == PointInTimeKind.deposit:
        periods = 0
    elif point.kind == PointInTimeKind.first:
        periods = 1
    else:
        periods = total_periods(point.years, periods_per_year)
    if max_periods is not None:
        periods = min(periods, max_periods)
    return periods


def point_in_time_breakdown(
    loan_amount: float,
    payment_per_period: float,
    periodic_rate: float,
    periods_per_year: int,
    point: PointInTime,
    term_years: Union[float, None] = None,
) -> PointInTimeBreakdown:
    """
    Calculate loan progress at a point in time.

    At the deposit the payment split is a preview of the first payment. At the
    first payment or year N it is the split of the last payment made.

    A point after the end of the term (year N > term_years) is out of range:
    every breakdown field is zero and `in_range` is False.
    """
    if term_years is not None and point.exceeds_term(term_years):
        return PointInTimeBreakdown(
            periods_elapsed=0,
            principal_portion=0.0,
            interest_portion=0.0,
            remaining_balance=0.0,
            principal_gained=0.0,
            interest_paid=0.0,
            in_range=False,
        )

    max_periods = None if term_years is None else total_periods(term_years, periods_per_year)
    periods = elapsed_periods(point, periods_per_year, max_periods)
    walk = schedule_walk(loan_amount, payment_per_period, periodic_rate, periods)

    interest_portion = walk.start_balance * periodic_rate
    principal_portion = payment_per_period - interest_portion

    return PointInTimeBreakdown(
        periods_elapsed=periods,
        principal_portion=max(0.0, principal_portion),
        interest_portion=max(0.0, interest_portion),
        remaining_balance=max(0.0, walk.remaining_balance),
        principal_gained=max(0.0, walk.principal_paid),
        interest_paid=max(0.0, walk.interest_paid),
    )


def calculate_mortgage(
    price: float,
    deposit: float,
    annual_rate_percent: float,
    term_years: float,
    frequency: Union[Frequency, str],
    point: Union[PointInTime, str, int, dict, None] = None,
) -> AmortizationResult:
    """
    Calculate payment, totals and point-in-time progress for a mortgage.

    Args:
        price: House price
        deposit: Deposit paid up front
        annual_rate_percent: Annual interest rate in percent (e.g., 5.59)
        term_years: Loan term in years
        frequency: Payment frequency
        point: Age of mortgage to evaluate (defaults to the first payment)

    Returns:
        AmortizationResult
    """
    point = PointInTime.first_payment() if point is None else PointInTime.parse(point)

    loan_amount = calculate_loan_amount(price, deposit)
    per_year = periods_per_year(frequency)
    periods = total_periods(term_years, per_year)
    rate = periodic_rate(annual_rate_percent, per_year)
    payment = payment_per_period(loan_amount, rate, periods)
    paid = total_paid(payment, periods)
    interest = total_interest(paid, loan_amount)

    breakdown = point_in_time_breakdown(
        loan_amount, payment, rate, per_year, point, term_years
    )

    return AmortizationResult(
        loan_amount=loan_amount,
        periods_per_year=per_year,
        periodic_rate=rate,
        payment_per_period=payment,
        total_periods=periods,
        total_paid=paid,
        total_interest=interest,
        principal_portion_at_point=breakdown.principal_portion,
        interest_portion_at_point=breakdown.interest_portion,
        remaining_balance_at_point=breakdown.remaining_balance,
        principal_gained_up_to_point=breakdown.principal_gained,
        interest_paid_up_to_point=breakdown.interest_paid,
        periods_elapsed=breakdown.periods_elapsed,
        point_in_range=breakdown.in_range,
    )


def generate_amortization_schedule(
    loan_amount: float,
    annual_rate_percent: float,
    term_years: float,
    frequency: Union[Frequency, str],
) -> List[Dict]:
    """
    Generate the full per-period amortization schedule.

    Args:
        loan_amount: Amount borrowed
        annual_rate_percent: Annual interest rate in percent
        term_years: Loan term in years
        frequency: Payment frequency

    Returns:
        List of schedule rows, amounts rounded to cents
    """
    loan_amount = _finite(loan_amount)
    per_year = periods_per_year(frequency)
    periods = total_periods(term_years, per_year)
    rate = periodic_rate(annual_rate_percent, per_year)
    payment = payment_per_period(loan_amount, rate, periods)

    if loan_amount <= 0:
        return []

    schedule = []
    balance = loan_amount
    cumulative_principal = 0.0
    cumulative_interest = 0.0

    for period in range(1, periods + 1):
        interest = balance * rate
        principal_pmt = payment - interest

        # Final payment clears any floating point residue
        if period == periods or principal_pmt > balance:
            principal_pmt = balance
        period_payment = principal_pmt + interest

        ending_balance = max(0.0, balance - principal_pmt)
        cumulative_principal += principal_pmt
        cumulative_interest += interest

        schedule.append(
            {
                "period": period,
                "year": (period - 1) // per_year + 1,
                "beginning_balance": round(balance, 2),
                "payment": round(period_payment, 2),
                "interest": round(interest, 2),
                "principal": round(principal_pmt, 2),
                "ending_balance": round(ending_balance, 2),
                "cumulative_principal": round(cumulative_principal, 2),
                "cumulative_interest": round(cumulative_interest, 2),
            }
        )

        balance = ending_balance

    return schedule


def summarize_by_year(schedule: List[Dict]) -> List[Dict]:
    """Aggregate schedule rows into yearly totals."""
    years: Dict[int, Dict] = {}
    for row in schedule:
        summary = years.setdefault(
            row["year"],
            {"year": row["year"], "payments": 0.0, "interest": 0.0, "principal": 0.0},
        )
        summary["payments"] += row["payment"]
        summary["interest"] += row["interest"]
        summary["principal"] += row["principal"]
        summary["ending_balance"] = row["ending_balance"]
        summary["cumulative_principal"] = row["cumulative_principal"]
        summary["cumulative_interest"] = row["cumulative_interest"]

    return [
        {
            **summary,
            "payments": round(summary["payments"], 2),
            "interest": round(summary["interest"], 2),
            "principal": round(summary["principal"], 2),
        }
        for summary in years.values()
    ]
