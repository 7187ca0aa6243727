"""
Pro Forma Calculations

Projects annual cash flows over the hold period and rolls them up into
investment returns:

1. Financing resolution - loan amount from the financing mode, sized once
2. Annual projection - NOI, debt service, depreciation, taxes, cash flow
3. Aggregation - sale proceeds, equity multiple, cash-on-cash and IRR

The engine is a pure function of its assumptions. Incomplete input yields
zeros and a None IRR, never an exception.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from propfolio.calculations.amortization import calculate_loan_year
from propfolio.calculations.assumptions import (
    ChargeKind,
    EXPENSE_FIELDS,
    PropertyAssumptions,
    normalize_assumptions,
)
from propfolio.calculations.irr import calculate_irr

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnnualCashflow:
    """One projected year."""

    year: int
    effective_gross_income: float
    operating_expenses: float
    noi: float
    debt_service: float
    interest_expense: float
    principal_payment: float
    before_tax_cashflow: float
    depreciation: float
    taxable_income: float
    taxes: float  # negative when depreciation shelters income
    after_tax_cashflow: float
    loan_balance: float  # end of year
    cash_on_cash_return: float
    after_tax_cash_on_cash_return: float


@dataclass(frozen=True)
class SaleProceeds:
    """Disposition at the end of the hold period."""

    sale_price: float = 0.0
    exit_cap_rate: float = 0.0
    selling_costs: float = 0.0
    net_sale_proceeds: float = 0.0
    original_basis: float = 0.0
    accumulated_depreciation: float = 0.0
    adjusted_basis: float = 0.0
    loan_balance: float = 0.0
    before_tax_sale_proceeds: float = 0.0
    total_gain: float = 0.0
    depreciation_recapture: float = 0.0
    capital_gains: float = 0.0
    capital_gains_tax_rate: float = 0.0
    depreciation_recapture_rate: float = 0.0
    capital_gains_tax: float = 0.0
    depreciation_recapture_tax: float = 0.0
    taxes_on_sale: float = 0.0
    after_tax_sale_proceeds: float = 0.0


@dataclass(frozen=True)
class ProFormaResults:
    """Investment-level summary over the full projection."""

    annual_cashflows: Tuple[AnnualCashflow, ...]
    total_equity_invested: float
    total_cash_returned: float
    net_profit: float
    irr: Optional[float]
    equity_multiple: float
    average_cash_on_cash: float
    total_tax_savings: float
    loan_amount: float = 0.0
    sale_proceeds: SaleProceeds = field(default_factory=SaleProceeds)


def calculate_year_income(assumptions: PropertyAssumptions, year: int) -> Dict[str, float]:
    """
    Calculate EGI, operating expenses and NOI for one year (1-based).

    Vacancy applies to rental income only. In percentage mode the year's
    operating expense entry is a fraction of EGI, i.e. of income after the
    vacancy deduction; otherwise the itemized expense lines are summed.
    """
    index = year - 1
    rental_income = assumptions.potential_rental_income[index]
    vacancy_loss = rental_income * assumptions.vacancy_rates[index]
    effective_gross_income = rental_income + assumptions.other_income[index] - vacancy_loss

    if assumptions.operating_expense_type == ChargeKind.percentage:
        operating_expenses = effective_gross_income * assumptions.operating_expenses[index]
    else:
        operating_expenses = sum(getattr(assumptions, name)[index] for name in EXPENSE_FIELDS)

    return {
        "effective_gross_income": effective_gross_income,
        "operating_expenses": operating_expenses,
        "noi": effective_gross_income - operating_expenses,
    }


def resolve_loan_amount(assumptions: PropertyAssumptions) -> float:
    """
    Resolve the loan amount before any year is projected.

    DSCR financing is sized from Year-1 NOI only and is not re-solved as NOI
    grows in later years.
    """
    year1_noi = calculate_year_income(assumptions, 1)["noi"]
    loan_amount = assumptions.financing.loan_amount(assumptions.purchase_price, year1_noi)

    logger.debug(
        f"Resolved {assumptions.financing.financing_type} loan amount {loan_amount:.2f} "
        f"(year 1 NOI {year1_noi:.2f})"
    )
    return max(0.0, loan_amount)


def calculate_total_equity(assumptions: PropertyAssumptions, loan_amount: float) -> float:
    """Purchase price plus acquisition and loan costs, less loan proceeds."""
    acquisition_costs = assumptions.acquisition_costs.amount(assumptions.purchase_price)
    loan_costs = 0.0
    if loan_amount > 0:
        loan_costs = assumptions.financing.terms.loan_costs.amount(loan_amount)

    return assumptions.purchase_price + acquisition_costs + loan_costs - loan_amount


def calculate_mid_month_factor(acquisition_month: int) -> float:
    """
    Fraction of the first year's depreciation under the mid-month convention.

    Property is treated as placed in service mid-month, so a January
    acquisition gets 11.5 months and a February one (12 - 2 + 0.5) / 12.
    """
    return (12 - acquisition_month + 0.5) / 12


def _straight_line(
    basis: float, recovery_years: float, year_in_service: int, first_year_factor: float
) -> float:
    if basis <= 0 or recovery_years <= 0 or year_in_service < 1:
        return 0.0
    if year_in_service > recovery_years:
        return 0.0

    annual = basis / recovery_years
    if year_in_service == 1:
        return annual * first_year_factor
    return annual


def calculate_depreciation(assumptions: PropertyAssumptions, year: int) -> float:
    """
    Calculate depreciation for a projection year.

    The building basis is purchase price times the improvements share. Each
    capital improvement runs its own schedule from the year it is placed in
    service, assumed to be January of that year.
    """
    depreciable_basis = assumptions.purchase_price * assumptions.improvements_percentage
    depreciation = _straight_line(
        depreciable_basis,
        assumptions.depreciation_years,
        year,
        calculate_mid_month_factor(assumptions.acquisition_month),
    )

    for improvement in assumptions.capital_improvements:
        recovery_years = improvement.recovery_period or assumptions.depreciation_years
        depreciation += _straight_line(
            improvement.amount,
            recovery_years,
            year - improvement.year + 1,
            calculate_mid_month_factor(1),
        )

    return depreciation


def project_annual_cashflows(
    assumptions: PropertyAssumptions,
    loan_amount: float,
    total_equity_invested: float,
) -> List[AnnualCashflow]:
    """
    Project each year of the hold period.

    Args:
        assumptions: Normalized assumptions
        loan_amount: Resolved loan amount (0 for cash purchases)
        total_equity_invested: Equity used for cash-on-cash returns

    Returns:
        AnnualCashflow records ordered by year
    """
    terms = assumptions.financing.terms
    cashflows = []

    for year in range(1, assumptions.hold_period_years + 1):
        income = calculate_year_income(assumptions, year)
        loan_year = calculate_loan_year(
            loan_amount,
            terms.interest_rate,
            terms.amortization_years,
            year,
            terms.payments_per_year,
        )

        noi = income["noi"]
        debt_service = loan_year["debt_service"]
        before_tax_cashflow = noi - debt_service

        # Depreciation is the only non-cash adjustment; debt service is
        # already deducted in full
        depreciation = calculate_depreciation(assumptions, year)
        taxable_income = before_tax_cashflow - depreciation
        taxes = taxable_income * assumptions.ordinary_income_tax_rate
        after_tax_cashflow = before_tax_cashflow - taxes

        if total_equity_invested > 0:
            cash_on_cash = before_tax_cashflow / total_equity_invested
            after_tax_cash_on_cash = after_tax_cashflow / total_equity_invested
        else:
            cash_on_cash = 0.0
            after_tax_cash_on_cash = 0.0

        cashflows.append(
            AnnualCashflow(
                year=year,
                effective_gross_income=income["effective_gross_income"],
                operating_expenses=income["operating_expenses"],
                noi=noi,
                debt_service=debt_service,
                interest_expense=loan_year["interest"],
                principal_payment=loan_year["principal"],
                before_tax_cashflow=before_tax_cashflow,
                depreciation=depreciation,
                taxable_income=taxable_income,
                taxes=taxes,
                after_tax_cashflow=after_tax_cashflow,
                loan_balance=loan_year["ending_balance"],
                cash_on_cash_return=cash_on_cash,
                after_tax_cash_on_cash_return=after_tax_cash_on_cash,
            )
        )

    return cashflows


def calculate_sale_proceeds(
    assumptions: PropertyAssumptions, cashflows: Sequence[AnnualCashflow]
) -> SaleProceeds:
    """
    Calculate sale proceeds and taxes at the end of the hold period.

    The gain is split into depreciation recapture (up to the depreciation
    taken) and capital gains. Recapture is taxed at the lower of the
    recapture rate and the ordinary income rate.
    """
    if not cashflows:
        return SaleProceeds()

    final_year = cashflows[-1]
    disposition = assumptions.disposition

    sale_price = disposition.sale_price(final_year.noi, assumptions.purchase_price)
    selling_costs = assumptions.cost_of_sale.amount(sale_price)
    net_sale_proceeds = sale_price - selling_costs

    original_basis = assumptions.purchase_price + assumptions.acquisition_costs.amount(
        assumptions.purchase_price
    )
    accumulated_depreciation = sum(cf.depreciation for cf in cashflows)
    adjusted_basis = original_basis - accumulated_depreciation

    loan_balance = final_year.loan_balance
    before_tax_sale_proceeds = net_sale_proceeds - loan_balance

    total_gain = max(0.0, net_sale_proceeds - adjusted_basis)
    depreciation_recapture = min(accumulated_depreciation, total_gain)
    capital_gains = max(0.0, total_gain - depreciation_recapture)

    recapture_rate = min(
        assumptions.depreciation_recapture_rate, assumptions.ordinary_income_tax_rate
    )
    capital_gains_rate = assumptions.capital_gains_tax_rate

    depreciation_recapture_tax = depreciation_recapture * recapture_rate
    capital_gains_tax = capital_gains * capital_gains_rate
    taxes_on_sale = depreciation_recapture_tax + capital_gains_tax

    return SaleProceeds(
        sale_price=sale_price,
        exit_cap_rate=disposition.exit_cap_rate(final_year.noi, sale_price),
        selling_costs=selling_costs,
        net_sale_proceeds=net_sale_proceeds,
        original_basis=original_basis,
        accumulated_depreciation=accumulated_depreciation,
        adjusted_basis=adjusted_basis,
        loan_balance=loan_balance,
        before_tax_sale_proceeds=before_tax_sale_proceeds,
        total_gain=total_gain,
        depreciation_recapture=depreciation_recapture,
        capital_gains=capital_gains,
        capital_gains_tax_rate=capital_gains_rate,
        depreciation_recapture_rate=recapture_rate,
        capital_gains_tax=capital_gains_tax,
        depreciation_recapture_tax=depreciation_recapture_tax,
        taxes_on_sale=taxes_on_sale,
        after_tax_sale_proceeds=before_tax_sale_proceeds - taxes_on_sale,
    )


def build_equity_cash_flows(
    total_equity_invested: float,
    operating_cashflows: Sequence[float],
    sale_proceeds: float,
) -> List[float]:
    """Equity outflow at period 0, then each year with the sale in the last."""
    flows = [-total_equity_invested] + list(operating_cashflows)
    if operating_cashflows:
        flows[-1] += sale_proceeds
    return flows


def calculate_proforma(
    assumptions: Union[PropertyAssumptions, Mapping[str, Any]]
) -> ProFormaResults:
    """
    Run the full pro forma.

    Args:
        assumptions: PropertyAssumptions or a raw assumption mapping; either
            is normalized first

    Returns:
        ProFormaResults for the hold period
    """
    assumptions = normalize_assumptions(assumptions)

    loan_amount = resolve_loan_amount(assumptions)
    total_equity_invested = calculate_total_equity(assumptions, loan_amount)

    cashflows = project_annual_cashflows(assumptions, loan_amount, total_equity_invested)
    sale_proceeds = calculate_sale_proceeds(assumptions, cashflows)

    after_tax_cashflows = [cf.after_tax_cashflow for cf in cashflows]
    total_cash_returned = sum(after_tax_cashflows) + sale_proceeds.after_tax_sale_proceeds
    net_profit = total_cash_returned - total_equity_invested

    irr = None
    if cashflows:
        irr = calculate_irr(
            build_equity_cash_flows(
                total_equity_invested,
                after_tax_cashflows,
                sale_proceeds.after_tax_sale_proceeds,
            )
        )

    if total_equity_invested > 0:
        equity_multiple = total_cash_returned / total_equity_invested
    else:
        equity_multiple = 0.0

    if cashflows:
        average_cash_on_cash = sum(
            cf.after_tax_cash_on_cash_return for cf in cashflows
        ) / len(cashflows)
    else:
        average_cash_on_cash = 0.0

    total_tax_savings = sum(max(0.0, -cf.taxes) for cf in cashflows)

    logger.debug(
        f"Pro forma: {len(cashflows)} years, equity {total_equity_invested:.2f}, "
        f"net profit {net_profit:.2f}, IRR {irr}"
    )

    return ProFormaResults(
        annual_cashflows=tuple(cashflows),
        total_equity_invested=total_equity_invested,
        total_cash_returned=total_cash_returned,
        net_profit=net_profit,
        irr=irr,
        equity_multiple=equity_multiple,
        average_cash_on_cash=average_cash_on_cash,
        total_tax_savings=total_tax_savings,
        loan_amount=loan_amount,
        sale_proceeds=sale_proceeds,
    )
