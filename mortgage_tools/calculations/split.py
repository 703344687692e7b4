"""
Split Mortgage Calculations

Distributes a jointly held mortgage between two people:
1. Repayments - payments, interest and principal split by repayment share
2. Equity - each person's deposit plus their share of principal repaid
3. Sale - proceeds and profit split by each person's share of total equity

Person 2 always receives the residual (total minus person 1's part) so the two
parts add back up to the total.
"""

from dataclasses import dataclass
from typing import Tuple, Union

from mortgage_tools.calculations.amortization import (
    AmortizationResult,
    Frequency,
    calculate_mortgage,
)
from mortgage_tools.calculations.point_in_time import PointInTime
from mortgage_tools.calculations.sale import (
    SaleResult,
    SaleShare,
    calculate_sale,
    split_sale,
)


@dataclass(frozen=True)
class SplitParticipant:
    """One of the two people sharing the mortgage."""

    deposit: float
    repayment_share: float  # fraction of each payment, 0.0 to 1.0


@dataclass(frozen=True)
class PersonShare:
    """One person's part of the mortgage at a point in time."""

    deposit: float
    repayment_share: float
    payment_per_period: float
    interest_portion_at_point: float
    principal_gained_up_to_point: float
    interest_paid_up_to_point: float
    total_principal_from_payments: float
    total_interest_from_payments: float
    equity_at_point: float
    equity_share: float
    sale: SaleShare

    @property
    def total_paid_up_to_point(self) -> float:
        return self.principal_gained_up_to_point + self.interest_paid_up_to_point


@dataclass(frozen=True)
class SplitMortgageResult:
    """Joint mortgage result with each person's share."""

    mortgage: AmortizationResult
    person1: PersonShare
    person2: PersonShare
    sale: SaleResult

    @property
    def total_deposit(self) -> float:
        return self.person1.deposit + self.person2.deposit

    @property
    def total_equity(self) -> float:
        return self.person1.equity_at_point + self.person2.equity_at_point


def clamp_share(share: float) -> float:
    """Limit a repayment share to the range 0.0 to 1.0."""
    return min(1.0, max(0.0, share))


def split_amount(total: float, share1: float) -> Tuple[float, float]:
    """Split `total` into person 1's share and the residual for person 2."""
    part1 = total * share1
    return part1, total - part1


def equity_shares(equity1: float, equity2: float) -> Tuple[float, float]:
    """Fraction of total equity held by each person, 0 when there is none."""
    total_equity = equity1 + equity2
    if total_equity <= 0:
        return 0.0, 0.0
    return equity1 / total_equity, equity2 / total_equity


def split_mortgage(
    result: AmortizationResult,
    person1: SplitParticipant,
    person2: SplitParticipant,
    sale: SaleResult,
) -> Tuple[PersonShare, PersonShare]:
    """
    Split an amortization result between two people.

    Args:
        result: Amortization result for the whole loan
        person1: First participant; their repayment share drives the split
        person2: Second participant; repayment share is 1 - person 1's share
        sale: Sale projection for the whole property

    Returns:
        (person 1 share, person 2 share)
    """
    share1 = clamp_share(person1.repayment_share)
    share2 = 1.0 - share1
    deposit1 = max(0.0, person1.deposit)
    deposit2 = max(0.0, person2.deposit)

    payment1, payment2 = split_amount(result.payment_per_period, share1)
    interest_now1, interest_now2 = split_amount(result.interest_portion_at_point, share1)
    gained1, gained2 = split_amount(result.principal_gained_up_to_point, share1)
    interest_paid1, interest_paid2 = split_amount(result.interest_paid_up_to_point, share1)
    total_principal1, total_principal2 = split_amount(result.loan_amount, share1)
    total_interest1, total_interest2 = split_amount(result.total_interest, share1)

    equity1 = deposit1 + gained1
    equity2 = deposit2 + gained2
    equity_share1, equity_share2 = equity_shares(equity1, equity2)

    return (
        PersonShare(
            deposit=deposit1,
            repayment_share=share1,
            payment_per_period=payment1,
            interest_portion_at_point=interest_now1,
            principal_gained_up_to_point=gained1,
            interest_paid_up_to_point=interest_paid1,
            total_principal_from_payments=total_principal1,
            total_interest_from_payments=total_interest1,
            equity_at_point=equity1,
            equity_share=equity_share1,
            sale=split_sale(sale, equity_share1),
        ),
        PersonShare(
            deposit=deposit2,
            repayment_share=share2,
            payment_per_period=payment2,
            interest_portion_at_point=interest_now2,
            principal_gained_up_to_point=gained2,
            interest_paid_up_to_point=interest_paid2,
            total_principal_from_payments=total_principal2,
            total_interest_from_payments=total_interest2,
            equity_at_point=equity2,
            equity_share=equity_share2,
            sale=split_sale(sale, equity_share2),
        ),
    )


def calculate_split_mortgage(
    price: float,
    person1_deposit: float,
    person2_deposit: float,
    person1_repayment_share: float,
    annual_rate_percent: float,
    term_years: float,
    frequency: Union[Frequency, str],
    point: Union[PointInTime, str, int, dict, None] = None,
    sale_price: float = 0.0,
) -> SplitMortgageResult:
    """
    Calculate a mortgage shared by two people.

    The loan amount is the price less both deposits.

    Args:
        price: House price
        person1_deposit: Person 1's deposit
        person2_deposit: Person 2's deposit
        person1_repayment_share: Fraction of each payment made by person 1
        annual_rate_percent: Annual interest rate in percent
        term_years: Loan term in years
        frequency: Payment frequency
        point: Age of mortgage to evaluate (defaults to the first payment)
        sale_price: Hypothetical sale price at that point

    Returns:
        SplitMortgageResult
    """
    person1 = SplitParticipant(person1_deposit, person1_repayment_share)
    person2 = SplitParticipant(person2_deposit, 1.0 - clamp_share(person1_repayment_share))
    total_deposit = max(0.0, person1_deposit) + max(0.0, person2_deposit)

    mortgage = calculate_mortgage(
        price, total_deposit, annual_rate_percent, term_years, frequency, point
    )
    sale = calculate_sale(
        sale_price,
        mortgage.loan_amount,
        mortgage.principal_gained_up_to_point,
        total_deposit,
    )
    share1, share2 = split_mortgage(mortgage, person1, person2, sale)

    return SplitMortgageResult(mortgage=mortgage, person1=share1, person2=share2, sale=sale)
