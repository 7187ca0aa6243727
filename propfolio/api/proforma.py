"""
Pro forma API endpoints.

Assumptions arrive as the flat input-sheet payload, are normalized, and the
results come back together with the normalized assumptions and completion
state so the form can show what was actually used.
"""

import logging
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Response
from pydantic import BaseModel

from propfolio.api.calculations import json_safe
from propfolio.calculations.assumptions import (
    flatten_assumptions,
    normalize_assumptions,
    sample_assumptions_data,
    validate_assumptions,
)
from propfolio.calculations.completion import get_completion_state
from propfolio.calculations.metrics import calculate_investment_metrics
from propfolio.calculations.proforma import ProFormaResults, calculate_proforma
from propfolio.config import get_settings
from propfolio.services.export import proforma_to_csv

logger = logging.getLogger(__name__)

router = APIRouter()


class CapitalImprovementInput(BaseModel):
    year: int
    amount: float
    description: str = ""
    recovery_period: Optional[float] = None


class AssumptionsInput(BaseModel):
    """Input sheet payload. Every field is optional; blanks are normalized."""

    # Property
    purchase_price: Optional[float] = None
    acquisition_costs: Optional[float] = None
    acquisition_cost_type: Optional[str] = None

    # Income and expenses by year (index 0 = Year 1)
    potential_rental_income: List[Optional[float]] = []
    other_income: List[Optional[float]] = []
    vacancy_rates: List[Optional[float]] = []
    operating_expenses: List[Optional[float]] = []
    operating_expense_type: Optional[str] = None
    property_taxes: List[Optional[float]] = []
    insurance: List[Optional[float]] = []
    maintenance: List[Optional[float]] = []
    property_management: List[Optional[float]] = []
    utilities: List[Optional[float]] = []
    other_expenses: List[Optional[float]] = []

    # Financing
    financing_type: Optional[str] = None
    loan_amount: Optional[float] = None
    interest_rate: Optional[float] = None
    loan_term_years: Optional[float] = None
    amortization_years: Optional[float] = None
    payments_per_year: Optional[int] = None
    loan_costs: Optional[float] = None
    loan_cost_type: Optional[str] = None
    target_dscr: Optional[float] = None
    target_ltv: Optional[float] = None

    # Tax and depreciation
    property_type: Optional[str] = None
    depreciation_years: Optional[float] = None
    land_percentage: Optional[float] = None
    improvements_percentage: Optional[float] = None
    acquisition_month: Optional[int] = None
    capital_improvements: List[CapitalImprovementInput] = []
    ordinary_income_tax_rate: Optional[float] = None
    capital_gains_tax_rate: Optional[float] = None
    depreciation_recapture_rate: Optional[float] = None

    # Exit
    hold_period_years: Optional[float] = None
    disposition_price_type: Optional[str] = None
    disposition_price: Optional[float] = None
    disposition_cap_rate: Optional[float] = None
    cost_of_sale_type: Optional[str] = None
    cost_of_sale_amount: Optional[float] = None
    cost_of_sale_percentage: Optional[float] = None


def results_to_dict(results: ProFormaResults) -> Dict[str, Any]:
    """Serialize results for JSON responses."""
    return json_safe(asdict(results))


@router.post("/proforma")
async def run_proforma(inputs: AssumptionsInput):
    """Normalize assumptions and run the pro forma."""
    raw = inputs.model_dump()
    assumptions = normalize_assumptions(raw)
    results = calculate_proforma(assumptions)

    logger.info(
        f"Pro forma calculated: {assumptions.hold_period_years} years, "
        f"{assumptions.financing.financing_type} financing"
    )

    return {
        "assumptions": flatten_assumptions(assumptions),
        "results": results_to_dict(results),
        "completion": get_completion_state(raw).to_dict(),
        "errors": validate_assumptions(raw),
    }


@router.post("/proforma/validate")
async def validate_proforma(inputs: AssumptionsInput):
    """Validation messages and completion state for the input sheet."""
    raw = inputs.model_dump()
    errors = validate_assumptions(raw)
    return {
        "valid": not errors,
        "errors": errors,
        "completion": get_completion_state(raw).to_dict(),
    }


@router.post("/proforma/metrics")
async def proforma_metrics(inputs: AssumptionsInput, discount_rate: Optional[float] = None):
    """Derived investment metrics and sensitivity analysis."""
    if discount_rate is None:
        discount_rate = get_settings().default_discount_rate

    assumptions = normalize_assumptions(inputs.model_dump())
    results = calculate_proforma(assumptions)
    return json_safe(calculate_investment_metrics(assumptions, results, discount_rate))


@router.post("/proforma/export")
async def export_proforma(inputs: AssumptionsInput):
    """Pro forma results as a CSV download."""
    results = calculate_proforma(inputs.model_dump())
    return Response(
        content=proforma_to_csv(results),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="proforma.csv"'},
    )


@router.get("/proforma/sample")
async def sample_proforma():
    """Sample deal assumptions for pre-filling the input sheet."""
    return {"assumptions": flatten_assumptions(normalize_assumptions(sample_assumptions_data()))}
