"""
Debt Service Coverage Ratio (DSCR) Calculations

DSCR analysis, lender risk tiers and the inverse sizing problem: the largest
loan whose payment still meets a target coverage ratio.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from propfolio.calculations.amortization import (
    calculate_annual_debt_service,
    calculate_monthly_payment,
)


@dataclass(frozen=True)
class DSCRAssessment:
    """Risk tier for a coverage ratio."""

    is_healthy: bool
    risk_level: str  # 'Low', 'Moderate', 'High' or 'Very High'
    interpretation: str


# (minimum DSCR, assessment), checked top to bottom
DSCR_TIERS = (
    (
        1.5,
        DSCRAssessment(
            is_healthy=True,
            risk_level="Low",
            interpretation="Excellent coverage ratio. Property generates strong cash flow relative to debt service.",
        ),
    ),
    (
        1.25,
        DSCRAssessment(
            is_healthy=True,
            risk_level="Moderate",
            interpretation="Good coverage ratio. Property comfortably covers debt service with reasonable margin.",
        ),
    ),
    (
        1.0,
        DSCRAssessment(
            is_healthy=False,
            risk_level="High",
            interpretation="Marginal coverage ratio. Property barely covers debt service. High risk of cash flow issues.",
        ),
    ),
)

INADEQUATE_COVERAGE = DSCRAssessment(
    is_healthy=False,
    risk_level="Very High",
    interpretation="Inadequate coverage ratio. Property cannot cover debt service from operating income.",
)


def calculate_dscr(noi: float, debt_service: float) -> float:
    """
    Calculate Debt Service Coverage Ratio (DSCR).

    Args:
        noi: Net Operating Income for the period
        debt_service: Debt service for the period

    Returns:
        DSCR ratio (infinite when there is no debt service)
    """
    if debt_service == 0:
        return float("inf")
    return noi / debt_service


def classify_dscr(dscr: float) -> DSCRAssessment:
    """Map a coverage ratio onto its lender risk tier."""
    for threshold, assessment in DSCR_TIERS:
        if dscr >= threshold:
            return assessment
    return INADEQUATE_COVERAGE


def analyze_dscr_inputs(
    noi: float,
    annual_debt_service: Optional[float] = None,
    loan_amount: Optional[float] = None,
    interest_rate: Optional[float] = None,
    amortization_years: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Comprehensive DSCR analysis.

    Uses annual debt service directly when given, otherwise derives it from
    the loan amount, rate and amortization period (monthly payments).

    Raises:
        ValueError: If neither debt service nor complete loan details are given
    """
    if annual_debt_service:
        debt_service = annual_debt_service
    elif loan_amount and interest_rate is not None and amortization_years:
        debt_service = calculate_annual_debt_service(
            loan_amount, interest_rate, amortization_years
        )
    else:
        raise ValueError(
            "Either annual debt service or loan details (amount, rate, term) must be provided"
        )

    dscr = calculate_dscr(noi, debt_service)
    assessment = classify_dscr(dscr)

    return {
        "dscr": dscr,
        "dscr_formatted": f"{dscr:.2f}x",
        "annual_debt_service": debt_service,
        "monthly_payment": debt_service / 12,
        "is_healthy": assessment.is_healthy,
        "risk_level": assessment.risk_level,
        "interpretation": assessment.interpretation,
    }


def calculate_max_loan_amount(
    noi: float,
    target_dscr: float,
    interest_rate: float,
    amortization_years: float,
    payments_per_year: int = 12,
) -> float:
    """
    Calculate the maximum loan amount for a target DSCR.

    Inverts the payment formula: the periodic payment the NOI can carry at
    the target coverage is discounted back to a present value.
    """
    if noi <= 0 or target_dscr <= 0 or amortization_years <= 0:
        return 0.0

    max_annual_debt_service = noi / target_dscr
    max_payment = max_annual_debt_service / payments_per_year
    total_payments = int(round(amortization_years * payments_per_year))

    if interest_rate == 0:
        return max_payment * total_payments

    periodic_rate = interest_rate / payments_per_year
    growth = (1 + periodic_rate) ** total_payments

    return max_payment * (growth - 1) / (periodic_rate * growth)


def generate_loan_summary(
    loan_amount: float,
    interest_rate: float,
    loan_term_years: float,
    amortization_years: Optional[float] = None,
) -> Dict[str, float]:
    """Summarize a loan that may balloon before it is fully amortized."""
    if amortization_years is None:
        amortization_years = loan_term_years

    monthly_payment = calculate_monthly_payment(loan_amount, interest_rate, amortization_years)
    total_payments = monthly_payment * loan_term_years * 12

    return {
        "loan_amount": loan_amount,
        "interest_rate": interest_rate,
        "loan_term_years": loan_term_years,
        "amortization_years": amortization_years,
        "monthly_payment": monthly_payment,
        "annual_debt_service": monthly_payment * 12,
        "total_interest_paid": total_payments - loan_amount,
        "total_payments": total_payments,
    }


def validate_dscr_inputs(inputs: Mapping[str, Any]) -> List[str]:
    """Validate DSCR calculator inputs."""
    errors = []

    noi = inputs.get("noi")
    annual_debt_service = inputs.get("annual_debt_service")
    loan_amount = inputs.get("loan_amount")
    interest_rate = inputs.get("interest_rate")
    loan_term_years = inputs.get("loan_term_years")
    amortization_years = inputs.get("amortization_years")

    if not noi or noi <= 0:
        errors.append("NOI must be greater than 0")

    has_direct_debt_service = bool(annual_debt_service) and annual_debt_service > 0
    has_loan_inputs = bool(loan_amount) and interest_rate is not None and bool(amortization_years)

    if not has_direct_debt_service and not has_loan_inputs:
        errors.append(
            "Either provide annual debt service directly OR loan amount, interest rate, and amortization period"
        )

    if annual_debt_service and annual_debt_service < 0:
        errors.append("Annual debt service must be 0 or greater")

    if loan_amount and loan_amount <= 0:
        errors.append("Loan amount must be greater than 0")

    if interest_rate is not None and (interest_rate < 0 or interest_rate > 1):
        errors.append("Interest rate must be between 0% and 100%")

    if loan_term_years and loan_term_years <= 0:
        errors.append("Loan term must be greater than 0")

    if amortization_years and amortization_years <= 0:
        errors.append("Amortization period must be greater than 0")

    if loan_term_years and amortization_years and loan_term_years > amortization_years:
        errors.append("Loan term cannot exceed amortization period")

    return errors


def validate_max_loan_inputs(inputs: Mapping[str, Any]) -> List[str]:
    """Validate inputs for sizing a loan to a target DSCR."""
    errors = []

    noi = inputs.get("noi")
    target_dscr = inputs.get("target_dscr")
    interest_rate = inputs.get("interest_rate")
    amortization_years = inputs.get("amortization_years")

    if not noi or noi <= 0:
        errors.append("NOI must be greater than 0")

    if not target_dscr or target_dscr <= 0:
        errors.append("Target DSCR must be greater than 0")

    if interest_rate is None or interest_rate < 0 or interest_rate > 1:
        errors.append("Interest rate must be between 0% and 100%")

    if not amortization_years or amortization_years <= 0:
        errors.append("Amortization period must be greater than 0")

    return errors
