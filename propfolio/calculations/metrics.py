"""
Investment Metrics

Secondary return measures derived from a pro forma run: before-tax and
unlevered returns, NPV, debt and yield ratios, and sensitivity of IRR and
DSCR to the main market assumptions.

Ratios are returned as decimals (0.09 = 9%).
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Optional

from propfolio.calculations.amortization import calculate_annual_debt_service
from propfolio.calculations.assumptions import (
    CapRateDisposition,
    CashFinancing,
    PropertyAssumptions,
)
from propfolio.calculations.dscr import calculate_dscr
from propfolio.calculations.irr import calculate_irr, calculate_npv
from propfolio.calculations.proforma import (
    ProFormaResults,
    build_equity_cash_flows,
    calculate_proforma,
)

logger = logging.getLogger(__name__)

EXIT_CAP_SHIFT = 0.005
RENT_GROWTH_SHIFT = 0.01
INTEREST_RATE_SHIFT = 0.005


def calculate_after_tax_npv(results: ProFormaResults, discount_rate: float) -> float:
    """NPV of the equity position using after-tax cash flows."""
    if not results.annual_cashflows:
        return 0.0
    flows = build_equity_cash_flows(
        results.total_equity_invested,
        [cf.after_tax_cashflow for cf in results.annual_cashflows],
        results.sale_proceeds.after_tax_sale_proceeds,
    )
    return calculate_npv(flows, discount_rate)


def calculate_before_tax_npv(results: ProFormaResults, discount_rate: float) -> float:
    """NPV of the equity position using before-tax cash flows."""
    if not results.annual_cashflows:
        return 0.0
    flows = build_equity_cash_flows(
        results.total_equity_invested,
        [cf.before_tax_cashflow for cf in results.annual_cashflows],
        results.sale_proceeds.before_tax_sale_proceeds,
    )
    return calculate_npv(flows, discount_rate)


def calculate_before_tax_irr(results: ProFormaResults) -> Optional[float]:
    """IRR of before-tax operating cash flows plus before-tax sale proceeds."""
    if not results.annual_cashflows:
        return None
    return calculate_irr(
        build_equity_cash_flows(
            results.total_equity_invested,
            [cf.before_tax_cashflow for cf in results.annual_cashflows],
            results.sale_proceeds.before_tax_sale_proceeds,
        )
    )


def calculate_before_tax_equity_multiple(results: ProFormaResults) -> float:
    if results.total_equity_invested <= 0:
        return 0.0
    total_returned = sum(cf.before_tax_cashflow for cf in results.annual_cashflows)
    total_returned += results.sale_proceeds.before_tax_sale_proceeds
    return total_returned / results.total_equity_invested


def _all_cash(assumptions: PropertyAssumptions) -> PropertyAssumptions:
    return replace(assumptions, financing=CashFinancing(terms=assumptions.financing.terms))


def calculate_unlevered_irr(assumptions: PropertyAssumptions) -> Optional[float]:
    """After-tax IRR of the same deal bought with cash."""
    return calculate_proforma(_all_cash(assumptions)).irr


def calculate_unlevered_before_tax_irr(assumptions: PropertyAssumptions) -> Optional[float]:
    """Before-tax IRR of the same deal bought with cash."""
    return calculate_before_tax_irr(calculate_proforma(_all_cash(assumptions)))


def calculate_debt_yield(year1_noi: float, loan_amount: float) -> float:
    """Year-1 NOI as a share of the loan amount."""
    if loan_amount == 0:
        return 0.0
    return year1_noi / loan_amount


def calculate_purchase_cap_rate(year1_noi: float, purchase_price: float) -> float:
    if purchase_price == 0:
        return 0.0
    return year1_noi / purchase_price


def calculate_yield_on_cost(stabilized_noi: float, total_project_cost: float) -> float:
    if total_project_cost == 0:
        return 0.0
    return stabilized_noi / total_project_cost


def _shift_rent_growth(assumptions: PropertyAssumptions, shift: float) -> PropertyAssumptions:
    """Scale each year's rent so its growth from Year 1 moves by shift per year."""
    rents = tuple(
        rent * (1 + shift) ** index
        for index, rent in enumerate(assumptions.potential_rental_income)
    )
    return replace(assumptions, potential_rental_income=rents)


def run_sensitivity_analysis(
    assumptions: PropertyAssumptions, base_results: ProFormaResults
) -> Dict[str, Any]:
    """
    Re-run the deal with key assumptions shifted.

    * Exit cap rate +/- 50 bps: IRR
    * Rent growth +/- 100 bps: IRR
    * Interest rate +/- 50 bps: Year-1 DSCR on the same loan

    A scenario that cannot be evaluated (no exit cap rate, no rent, all-cash
    deal) reports None.
    """
    sensitivities = {
        "exit_cap": {"minus_50bps": None, "plus_50bps": None},
        "rent_growth": {"minus_100bps": None, "plus_100bps": None},
        "interest_rate_dscr": {"minus_50bps": None, "plus_50bps": None},
    }

    disposition = assumptions.disposition
    if isinstance(disposition, CapRateDisposition) and disposition.cap_rate > 0:
        for key, shift in (("minus_50bps", -EXIT_CAP_SHIFT), ("plus_50bps", EXIT_CAP_SHIFT)):
            cap_rate = max(0.0, disposition.cap_rate + shift)
            shifted = replace(assumptions, disposition=CapRateDisposition(cap_rate=cap_rate))
            sensitivities["exit_cap"][key] = calculate_proforma(shifted).irr

    if assumptions.potential_rental_income[0] > 0:
        for key, shift in (("minus_100bps", -RENT_GROWTH_SHIFT), ("plus_100bps", RENT_GROWTH_SHIFT)):
            shifted = _shift_rent_growth(assumptions, shift)
            sensitivities["rent_growth"][key] = calculate_proforma(shifted).irr

    terms = assumptions.financing.terms
    if base_results.loan_amount > 0 and terms.interest_rate > 0 and base_results.annual_cashflows:
        year1_noi = base_results.annual_cashflows[0].noi
        for key, shift in (("minus_50bps", -INTEREST_RATE_SHIFT), ("plus_50bps", INTEREST_RATE_SHIFT)):
            debt_service = calculate_annual_debt_service(
                base_results.loan_amount,
                max(0.0, terms.interest_rate + shift),
                terms.amortization_years,
                terms.payments_per_year,
            )
            sensitivities["interest_rate_dscr"][key] = calculate_dscr(year1_noi, debt_service)

    return sensitivities


def calculate_investment_metrics(
    assumptions: PropertyAssumptions,
    results: Optional[ProFormaResults] = None,
    discount_rate: float = 0.10,
) -> Dict[str, Any]:
    """
    Collect every derived metric for the dashboard.

    Args:
        assumptions: Normalized assumptions
        results: Pro forma results for the assumptions (computed if omitted)
        discount_rate: Discount rate for NPV

    Returns:
        Dict of metrics plus the sensitivity table
    """
    if results is None:
        results = calculate_proforma(assumptions)

    year1_noi = results.annual_cashflows[0].noi if results.annual_cashflows else 0.0
    year1_debt_service = (
        results.annual_cashflows[0].debt_service if results.annual_cashflows else 0.0
    )
    total_project_cost = results.sale_proceeds.original_basis or assumptions.purchase_price

    logger.debug(f"Calculating investment metrics at discount rate {discount_rate}")

    return {
        "irr": results.irr,
        "before_tax_irr": calculate_before_tax_irr(results),
        "unlevered_irr": calculate_unlevered_irr(assumptions),
        "unlevered_before_tax_irr": calculate_unlevered_before_tax_irr(assumptions),
        "npv": calculate_after_tax_npv(results, discount_rate),
        "before_tax_npv": calculate_before_tax_npv(results, discount_rate),
        "equity_multiple": results.equity_multiple,
        "before_tax_equity_multiple": calculate_before_tax_equity_multiple(results),
        "year1_dscr": calculate_dscr(year1_noi, year1_debt_service) if year1_debt_service else None,
        "debt_yield": calculate_debt_yield(year1_noi, results.loan_amount),
        "purchase_cap_rate": calculate_purchase_cap_rate(year1_noi, assumptions.purchase_price),
        "yield_on_cost": calculate_yield_on_cost(year1_noi, total_project_cost),
        "discount_rate": discount_rate,
        "sensitivity": run_sensitivity_analysis(assumptions, results),
    }
