"""
Loan Amortization Calculations

Implements loan payment, remaining balance and amortization schedule
calculations, matching Excel's PMT function for any payment frequency.
"""

from typing import Any, Dict, List, Mapping, Optional
from datetime import date, timedelta
from dateutil.relativedelta import relativedelta

PAYMENT_FREQUENCIES = {
    "monthly": 12,
    "bi-weekly": 26,
    "weekly": 52,
}

# A schedule stops once the balance falls to this amount
PAYOFF_TOLERANCE = 0.01

# Extra periods allowed past the contractual term before giving up
SCHEDULE_OVERRUN_PAYMENTS = 120

MAX_LOAN_AMOUNT = 100000000
MAX_LOAN_TERM_YEARS = 50


def _total_payments(amortization_years: float, payments_per_year: int) -> int:
    return int(round(amortization_years * payments_per_year))


def calculate_periodic_payment(
    principal: float,
    annual_rate: float,
    amortization_years: float,
    payments_per_year: int = 12,
) -> float:
    """
    Calculate the level periodic loan payment.

    Matches Excel's PMT() function. A zero interest rate degrades to
    straight-line repayment of the principal.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate as decimal (e.g., 0.065 for 6.5%)
        amortization_years: Amortization period in years
        payments_per_year: Number of payments per year (12 = monthly)

    Returns:
        Periodic payment amount (positive number)
    """
    if principal <= 0:
        return 0.0

    total_payments = _total_payments(amortization_years, payments_per_year)
    if total_payments <= 0:
        return 0.0

    periodic_rate = annual_rate / payments_per_year

    if periodic_rate == 0:
        return principal / total_payments

    growth = (1 + periodic_rate) ** total_payments
    return principal * periodic_rate * growth / (growth - 1)


def calculate_monthly_payment(
    principal: float, annual_rate: float, amortization_years: float
) -> float:
    """Calculate monthly loan payment."""
    return calculate_periodic_payment(principal, annual_rate, amortization_years, 12)


def calculate_annual_debt_service(
    principal: float,
    annual_rate: float,
    amortization_years: float,
    payments_per_year: int = 12,
) -> float:
    """Calculate a full year of scheduled payments."""
    payment = calculate_periodic_payment(
        principal, annual_rate, amortization_years, payments_per_year
    )
    return payment * payments_per_year


def calculate_remaining_balance(
    principal: float,
    annual_rate: float,
    amortization_years: float,
    payments_made: int,
    payments_per_year: int = 12,
) -> float:
    """Calculate remaining loan balance after N payments."""
    if principal <= 0:
        return 0.0

    total_payments = _total_payments(amortization_years, payments_per_year)
    if total_payments <= 0 or payments_made <= 0:
        return principal
    if payments_made >= total_payments:
        return 0.0

    periodic_rate = annual_rate / payments_per_year

    if periodic_rate == 0:
        return max(0.0, principal - principal * payments_made / total_payments)

    payment = calculate_periodic_payment(
        principal, annual_rate, amortization_years, payments_per_year
    )
    growth = (1 + periodic_rate) ** payments_made
    balance = principal * growth - payment * (growth - 1) / periodic_rate

    return max(0.0, balance)


def calculate_loan_year(
    principal: float,
    annual_rate: float,
    amortization_years: float,
    year: int,
    payments_per_year: int = 12,
) -> Dict[str, float]:
    """
    Summarize one loan year (1-based).

    Debt service covers only the payments actually scheduled in the year,
    so it drops to zero once the loan is fully amortized. The interest and
    principal split is derived from the balances at either end of the year.
    """
    total_payments = _total_payments(amortization_years, payments_per_year)
    payment = calculate_periodic_payment(
        principal, annual_rate, amortization_years, payments_per_year
    )

    first_payment = (year - 1) * payments_per_year
    last_payment = min(year * payments_per_year, total_payments)
    payments_in_year = max(0, last_payment - first_payment)

    beginning_balance = calculate_remaining_balance(
        principal, annual_rate, amortization_years, first_payment, payments_per_year
    )
    if payments_in_year == 0:
        ending_balance = beginning_balance
    else:
        ending_balance = calculate_remaining_balance(
            principal, annual_rate, amortization_years, last_payment, payments_per_year
        )

    debt_service = payment * payments_in_year
    principal_paid = beginning_balance - ending_balance

    return {
        "beginning_balance": beginning_balance,
        "debt_service": debt_service,
        "interest": debt_service - principal_paid,
        "principal": principal_paid,
        "ending_balance": ending_balance,
    }


def _payment_date(start_date: date, period: int, payment_frequency: str) -> date:
    if payment_frequency == "weekly":
        return start_date + timedelta(days=7 * (period - 1))
    if payment_frequency == "bi-weekly":
        return start_date + timedelta(days=14 * (period - 1))
    return start_date + relativedelta(months=period - 1)


def _format_time_saved(months_saved: float) -> str:
    years = int(months_saved // 12)
    months = int(round(months_saved % 12))

    if years > 0:
        text = f"{years} year{'s' if years != 1 else ''}"
        if months > 0:
            text += f", {months} month{'s' if months != 1 else ''}"
        return text
    if months > 0:
        return f"{months} month{'s' if months != 1 else ''}"
    return "None"


def generate_amortization_schedule(
    principal: float,
    annual_rate: float,
    loan_term_years: float,
    extra_payment: float = 0.0,
    payment_frequency: str = "monthly",
    start_date: Optional[date] = None,
) -> Dict[str, Any]:
    """
    Generate a full amortization schedule.

    Each payment is split into interest (balance x periodic rate) and
    principal; a constant extra principal payment may be added every
    period. The schedule ends once the balance is paid down to within
    PAYOFF_TOLERANCE, or after SCHEDULE_OVERRUN_PAYMENTS periods past the
    contractual term for inputs that never converge.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate as decimal
        loan_term_years: Loan term in years
        extra_payment: Additional principal paid each period
        payment_frequency: 'monthly', 'bi-weekly' or 'weekly'
        start_date: Date of first payment (defaults to today)

    Returns:
        Dict with the periodic payment, schedule rows and a summary

    Raises:
        ValueError: If the payment frequency is not supported
    """
    payments_per_year = PAYMENT_FREQUENCIES.get(payment_frequency)
    if payments_per_year is None:
        raise ValueError(f"Unsupported payment frequency: {payment_frequency}")

    if start_date is None:
        start_date = date.today()

    periodic_rate = annual_rate / payments_per_year
    total_payments = _total_payments(loan_term_years, payments_per_year)
    base_payment = calculate_periodic_payment(
        principal, annual_rate, loan_term_years, payments_per_year
    )

    schedule = []
    balance = principal
    cumulative_interest = 0.0
    cumulative_principal = 0.0
    total_extra_payments = 0.0
    total_amount_paid = 0.0
    period = 1

    while balance > PAYOFF_TOLERANCE and period <= total_payments + SCHEDULE_OVERRUN_PAYMENTS:
        interest = balance * periodic_rate
        principal_pmt = base_payment - interest
        extra = extra_payment

        # Never pay down more than the outstanding balance
        if principal_pmt + extra > balance:
            principal_pmt = balance - extra
            if principal_pmt < 0:
                extra = balance
                principal_pmt = 0.0

        total_payment = principal_pmt + interest + extra
        balance -= principal_pmt + extra

        cumulative_interest += interest
        cumulative_principal += principal_pmt
        total_extra_payments += extra
        total_amount_paid += total_payment

        schedule.append(
            {
                "period": period,
                "date": _payment_date(start_date, period, payment_frequency).isoformat(),
                "payment": round(base_payment, 2),
                "interest": round(interest, 2),
                "principal": round(principal_pmt, 2),
                "extra_payment": round(extra, 2),
                "total_payment": round(total_payment, 2),
                "ending_balance": round(max(0.0, balance), 2),
                "cumulative_interest": round(cumulative_interest, 2),
                "cumulative_principal": round(cumulative_principal, 2),
            }
        )

        period += 1

    baseline_interest = base_payment * total_payments - principal
    months_saved = loan_term_years * 12 - len(schedule) * (12 / payments_per_year)

    return {
        "periodic_payment": base_payment,
        "payments_per_year": payments_per_year,
        "total_payments": len(schedule),
        "total_interest": cumulative_interest,
        "payoff_date": schedule[-1]["date"] if schedule else start_date.isoformat(),
        "schedule": schedule,
        "summary": {
            "original_loan_amount": principal,
            "total_amount_paid": total_amount_paid,
            "total_interest_paid": cumulative_interest,
            "total_extra_payments": total_extra_payments,
            "interest_saved": baseline_interest - cumulative_interest,
            "time_saved": _format_time_saved(max(0.0, months_saved)),
        },
    }


def calculate_total_interest(
    principal: float,
    annual_rate: float,
    loan_term_years: float,
    extra_payment: float = 0.0,
) -> float:
    """Calculate total interest paid over loan term."""
    if extra_payment > 0:
        result = generate_amortization_schedule(
            principal, annual_rate, loan_term_years, extra_payment=extra_payment
        )
        return result["total_interest"]

    payment = calculate_monthly_payment(principal, annual_rate, loan_term_years)
    return payment * _total_payments(loan_term_years, 12) - principal


def calculate_loan_constant(
    principal: float, annual_rate: float, amortization_years: float
) -> float:
    """Calculate loan constant (annual debt service / loan amount)."""
    annual_debt_service = calculate_annual_debt_service(
        principal, annual_rate, amortization_years
    )
    return annual_debt_service / principal if principal > 0 else 0.0


def validate_loan_amortization_inputs(inputs: Mapping[str, Any]) -> List[str]:
    """Validate loan amortization calculator inputs."""
    errors = []

    loan_amount = inputs.get("loan_amount")
    interest_rate = inputs.get("interest_rate")
    loan_term_years = inputs.get("loan_term_years")
    extra_payment = inputs.get("extra_payment")
    payment_frequency = inputs.get("payment_frequency")

    if not loan_amount or loan_amount <= 0:
        errors.append("Loan amount must be greater than 0")

    if loan_amount and loan_amount > MAX_LOAN_AMOUNT:
        errors.append("Loan amount must be less than $100,000,000")

    if interest_rate is None or interest_rate < 0:
        errors.append("Interest rate must be 0 or greater")

    if interest_rate and interest_rate > 1:
        errors.append("Interest rate must be less than 100%")

    if not loan_term_years or loan_term_years <= 0:
        errors.append("Loan term must be greater than 0")

    if loan_term_years and loan_term_years > MAX_LOAN_TERM_YEARS:
        errors.append("Loan term must be 50 years or less")

    if extra_payment and extra_payment < 0:
        errors.append("Extra payment cannot be negative")

    if payment_frequency and payment_frequency not in PAYMENT_FREQUENCIES:
        errors.append("Payment frequency must be monthly, bi-weekly or weekly")

    if extra_payment and loan_amount and loan_term_years and loan_term_years > 0:
        base_payment = calculate_monthly_payment(
            loan_amount, interest_rate or 0, loan_term_years
        )
        if extra_payment > base_payment * 10:
            errors.append("Extra payment seems unusually high compared to base payment")

    return errors


def sample_real_estate_loan() -> Dict[str, Any]:
    """Sample loan used to pre-fill the amortization calculator."""
    return {
        "loan_amount": 800000,
        "interest_rate": 0.065,
        "loan_term_years": 30,
        "extra_payment": 500,
        "payment_frequency": "monthly",
    }
