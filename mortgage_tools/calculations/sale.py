"""
Sale Proceeds Calculations

Projects the outcome of selling the property at a point in time:
1. Remaining Balance - loan amount less principal repaid so far
2. Net Proceeds - sale price less the remaining balance
3. Profit - net proceeds less the equity built up (deposits + principal)
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class SaleResult:
    """Outcome of a hypothetical sale."""

    sale_price: float
    remaining_balance: float
    net_proceeds: float
    total_deposit: float
    total_equity: float
    profit: float
    profit_excluding_principal_gains: float


@dataclass(frozen=True)
class SaleShare:
    """One participant's part of a sale."""

    equity_share: float
    proceeds: float
    profit: float


def remaining_balance(loan_amount: float, principal_gained: float) -> float:
    """Outstanding loan balance after `principal_gained` has been repaid."""
    if loan_amount <= 0:
        return 0.0
    return loan_amount - max(0.0, principal_gained)


def net_proceeds(sale_price: float, remaining_balance: float) -> float:
    """Take-home from a sale after clearing the mortgage."""
    return max(0.0, sale_price - max(0.0, remaining_balance))


def calculate_sale(
    sale_price: float,
    loan_amount: float,
    principal_gained: float,
    total_deposit: float,
) -> SaleResult:
    """
    Calculate sale proceeds and profit.

    Args:
        sale_price: Hypothetical sale price
        loan_amount: Amount originally borrowed
        principal_gained: Principal repaid up to the point of sale
        total_deposit: Deposits paid up front (all participants)

    Returns:
        SaleResult
    """
    sale_price = max(0.0, sale_price) if math.isfinite(sale_price) else 0.0
    total_deposit = max(0.0, total_deposit)
    balance = remaining_balance(loan_amount, principal_gained)
    proceeds = net_proceeds(sale_price, balance)
    total_equity = total_deposit + max(0.0, principal_gained)

    return SaleResult(
        sale_price=sale_price,
        remaining_balance=max(0.0, balance),
        net_proceeds=proceeds,
        total_deposit=total_deposit,
        total_equity=total_equity,
        profit=proceeds - total_equity,
        profit_excluding_principal_gains=proceeds - total_deposit,
    )


def split_sale(sale: SaleResult, equity_share: float) -> SaleShare:
    """Part of the sale proceeds and profit owed to a holder of `equity_share`."""
    return SaleShare(
        equity_share=equity_share,
        proceeds=sale.net_proceeds * equity_share,
        profit=sale.profit * equity_share,
    )
