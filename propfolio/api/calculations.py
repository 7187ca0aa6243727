"""
Standalone calculator API endpoints.

Calculators are looked up in an immutable registry built once and handed
to the endpoints through FastAPI dependency injection.
"""

import math
from dataclasses import dataclass
from datetime import date
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Type

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ValidationError

from propfolio.calculations import amortization, cap_rate, dscr, irr, noi, tvm
from propfolio.config import get_settings

router = APIRouter()


def json_safe(value: Any) -> Any:
    """Replace non-finite floats (e.g. an infinite DSCR) with None."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_safe(item) for item in value]
    return value


class AmortizationInput(BaseModel):
    """Input for amortization calculation."""

    loan_amount: float
    interest_rate: float
    loan_term_years: float
    extra_payment: float = 0.0
    payment_frequency: str = "monthly"
    start_date: Optional[date] = None


class DSCRInput(BaseModel):
    """Input for DSCR analysis: direct debt service or loan details."""

    noi: float
    annual_debt_service: Optional[float] = None
    loan_amount: Optional[float] = None
    interest_rate: Optional[float] = None
    loan_term_years: Optional[float] = None
    amortization_years: Optional[float] = None


class MaxLoanInput(BaseModel):
    """Input for sizing a loan to a target DSCR."""

    noi: float
    target_dscr: float
    interest_rate: float
    amortization_years: float
    payments_per_year: int = 12


class CashFlowItem(BaseModel):
    period: int
    amount: float
    description: str = ""


class IRRNPVInput(BaseModel):
    """Input for the IRR/NPV calculator."""

    cash_flows: List[CashFlowItem]
    discount_rate: Optional[float] = None


class CapRateInput(BaseModel):
    noi: float
    price: float
    target_cap_rate: Optional[float] = None


class NOIInput(BaseModel):
    gross_rental_income: float
    vacancy_rate: float = 0.0
    other_income: float = 0.0
    operating_expenses: float = 0.0


class TVMInput(BaseModel):
    """Input for the time value of money calculator."""

    interest_rate: float
    periods: int
    present_value: Optional[float] = None
    future_value: Optional[float] = None
    payment: Optional[float] = None
    solve_for: Optional[str] = None


def run_amortization(inputs: AmortizationInput) -> Dict[str, Any]:
    return amortization.generate_amortization_schedule(
        principal=inputs.loan_amount,
        annual_rate=inputs.interest_rate,
        loan_term_years=inputs.loan_term_years,
        extra_payment=inputs.extra_payment,
        payment_frequency=inputs.payment_frequency,
        start_date=inputs.start_date,
    )


def run_dscr(inputs: DSCRInput) -> Dict[str, Any]:
    result = dscr.analyze_dscr_inputs(
        noi=inputs.noi,
        annual_debt_service=inputs.annual_debt_service,
        loan_amount=inputs.loan_amount,
        interest_rate=inputs.interest_rate,
        amortization_years=inputs.amortization_years,
    )

    if inputs.loan_amount and inputs.interest_rate is not None and inputs.loan_term_years:
        result["loan_summary"] = dscr.generate_loan_summary(
            inputs.loan_amount,
            inputs.interest_rate,
            inputs.loan_term_years,
            inputs.amortization_years,
        )
    return result


def run_max_loan(inputs: MaxLoanInput) -> Dict[str, Any]:
    max_loan = dscr.calculate_max_loan_amount(
        inputs.noi,
        inputs.target_dscr,
        inputs.interest_rate,
        inputs.amortization_years,
        inputs.payments_per_year,
    )
    debt_service = amortization.calculate_annual_debt_service(
        max_loan, inputs.interest_rate, inputs.amortization_years, inputs.payments_per_year
    )
    return {
        "max_loan_amount": max_loan,
        "annual_debt_service": debt_service,
        "dscr": dscr.calculate_dscr(inputs.noi, debt_service),
    }


def run_irr_npv(inputs: IRRNPVInput) -> Dict[str, Any]:
    discount_rate = inputs.discount_rate
    if discount_rate is None:
        discount_rate = get_settings().default_discount_rate

    result = irr.analyze_irr_npv(
        [cash_flow.model_dump() for cash_flow in inputs.cash_flows], discount_rate
    )
    result["discount_rate"] = discount_rate
    return result


def run_cap_rate(inputs: CapRateInput) -> Dict[str, Any]:
    result = cap_rate.calculate_cap_rate(inputs.noi, inputs.price)
    result["sensitivity"] = cap_rate.generate_cap_rate_sensitivity(inputs.noi, result["cap_rate"])
    if inputs.target_cap_rate is not None:
        result["value_from_cap_rate"] = cap_rate.calculate_value_from_cap_rate(
            inputs.noi, inputs.target_cap_rate
        )
    return result


def run_noi(inputs: NOIInput) -> Dict[str, Any]:
    args = (
        inputs.gross_rental_income,
        inputs.vacancy_rate,
        inputs.other_income,
        inputs.operating_expenses,
    )
    result = noi.calculate_noi(*args)
    result["waterfall"] = noi.generate_noi_waterfall(*args)
    return result


def run_tvm(inputs: TVMInput) -> Dict[str, Any]:
    result = tvm.solve_tvm(
        interest_rate=inputs.interest_rate,
        periods=inputs.periods,
        present_value=inputs.present_value,
        future_value=inputs.future_value,
        payment=inputs.payment,
        solve_for=inputs.solve_for,
    )
    if result["present_value"] is not None:
        result["timeline"] = tvm.generate_growth_timeline(
            result["present_value"],
            inputs.interest_rate,
            inputs.periods,
            result["payment"],
        )
    return result


@dataclass(frozen=True)
class CalculatorSpec:
    """A standalone calculator: input schema, validation and runner."""

    id: str
    title: str
    description: str
    input_model: Type[BaseModel]
    validate: Callable[[Mapping[str, Any]], List[str]]
    run: Callable[[Any], Dict[str, Any]]


def _validate_irr_npv(inputs: Mapping[str, Any]) -> List[str]:
    errors = irr.validate_irr_npv_inputs(inputs)
    # The discount rate falls back to the configured default
    return [error for error in errors if error != "Discount rate is required"]


def build_calculator_registry() -> Mapping[str, CalculatorSpec]:
    """Build the read-only calculator lookup table."""
    specs = [
        CalculatorSpec(
            id="amortization",
            title="Loan Amortization",
            description="Payment schedule with optional extra principal",
            input_model=AmortizationInput,
            validate=amortization.validate_loan_amortization_inputs,
            run=run_amortization,
        ),
        CalculatorSpec(
            id="dscr",
            title="Debt Service Coverage Ratio",
            description="Coverage ratio and lender risk tier",
            input_model=DSCRInput,
            validate=dscr.validate_dscr_inputs,
            run=run_dscr,
        ),
        CalculatorSpec(
            id="max-loan",
            title="Maximum Loan for Target DSCR",
            description="Largest loan whose payment meets a coverage target",
            input_model=MaxLoanInput,
            validate=dscr.validate_max_loan_inputs,
            run=run_max_loan,
        ),
        CalculatorSpec(
            id="irr-npv",
            title="IRR / NPV",
            description="Internal rate of return, NPV and payback period",
            input_model=IRRNPVInput,
            validate=_validate_irr_npv,
            run=run_irr_npv,
        ),
        CalculatorSpec(
            id="cap-rate",
            title="Cap Rate",
            description="Capitalization rate and value sensitivity",
            input_model=CapRateInput,
            validate=cap_rate.validate_cap_rate_inputs,
            run=run_cap_rate,
        ),
        CalculatorSpec(
            id="noi",
            title="Net Operating Income",
            description="NOI, expense ratio and waterfall",
            input_model=NOIInput,
            validate=noi.validate_noi_inputs,
            run=run_noi,
        ),
        CalculatorSpec(
            id="tvm",
            title="Time Value of Money",
            description="Present value, future value and annuity payments",
            input_model=TVMInput,
            validate=tvm.validate_tvm_inputs,
            run=run_tvm,
        ),
    ]
    return MappingProxyType({spec.id: spec for spec in specs})


@lru_cache()
def get_calculator_registry() -> Mapping[str, CalculatorSpec]:
    """Dependency provider for the calculator registry."""
    return build_calculator_registry()


def run_calculator(spec: CalculatorSpec, payload: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Parse, validate and run one calculator.

    Raises:
        HTTPException: 422 for a malformed payload, 400 for validation
            messages or a calculation the inputs cannot support
    """
    try:
        inputs = spec.input_model.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(
            status_code=422, detail=e.errors(include_url=False, include_context=False)
        )

    errors = spec.validate(inputs.model_dump())
    if errors:
        raise HTTPException(status_code=400, detail=errors)

    try:
        return json_safe(spec.run(inputs))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/calculators")
async def list_calculators(
    registry: Mapping[str, CalculatorSpec] = Depends(get_calculator_registry),
):
    """List available standalone calculators."""
    return [
        {"id": spec.id, "title": spec.title, "description": spec.description}
        for spec in registry.values()
    ]


@router.post("/calculators/{calculator_id}")
async def calculate_with(
    calculator_id: str,
    payload: Dict[str, Any],
    registry: Mapping[str, CalculatorSpec] = Depends(get_calculator_registry),
):
    """Run a standalone calculator by id."""
    spec = registry.get(calculator_id)
    if spec is None:
        raise HTTPException(status_code=404, detail=f"Unknown calculator: {calculator_id}")
    return run_calculator(spec, payload)


class IRRInput(BaseModel):
    """Input for IRR calculation."""

    cash_flows: List[float]
    discount_rate: Optional[float] = None


class IRRResponse(BaseModel):
    """Response with IRR calculation."""

    irr: Optional[float] = None
    multiple: float
    profit: float
    npv: float
    discount_rate: float


@router.post("/irr", response_model=IRRResponse)
async def calculate_irr_endpoint(inputs: IRRInput):
    """Calculate IRR for periodic cash flows; irr is null when unsolvable."""
    if not inputs.cash_flows:
        raise HTTPException(status_code=400, detail="At least one cash flow is required")

    discount_rate = inputs.discount_rate
    if discount_rate is None:
        discount_rate = get_settings().default_discount_rate

    return IRRResponse(
        irr=irr.calculate_irr(inputs.cash_flows),
        multiple=irr.calculate_multiple(inputs.cash_flows),
        profit=irr.calculate_profit(inputs.cash_flows),
        npv=irr.calculate_npv(inputs.cash_flows, discount_rate),
        discount_rate=discount_rate,
    )


@router.post("/amortization")
async def calculate_amortization(
    inputs: AmortizationInput,
    registry: Mapping[str, CalculatorSpec] = Depends(get_calculator_registry),
):
    """Generate loan amortization schedule."""
    return run_calculator(registry["amortization"], inputs.model_dump())
