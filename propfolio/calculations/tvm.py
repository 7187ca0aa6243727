"""
Time Value of Money (TVM) Calculations

Annual compounding throughout: rates are annual decimals and periods are years.
"""

import math
from typing import Any, Dict, List, Mapping, Optional

SOLVE_TARGETS = ("future_value", "present_value", "payment", "annuity_present_value")

MAX_PERIODS = 100


def calculate_future_value(pv: float, rate: float, periods: float) -> float:
    """Compound a present value forward."""
    return pv * (1 + rate) ** periods


def calculate_present_value(fv: float, rate: float, periods: float) -> float:
    """Discount a future value back to today."""
    if 1 + rate == 0:
        return math.copysign(math.inf, fv) if fv else 0.0
    return fv / (1 + rate) ** periods


def calculate_payment(pv: float, rate: float, periods: float) -> float:
    """Level payment that amortizes pv over the given periods."""
    if rate == 0:
        return pv / periods
    if 1 + rate == 0:
        # Total loss each period: the payment collapses to zero
        return 0.0
    return pv * rate / (1 - (1 + rate) ** -periods)


def calculate_pv_from_payment(payment: float, rate: float, periods: float) -> float:
    """Present value of an ordinary annuity."""
    if rate == 0:
        return payment * periods
    if 1 + rate == 0:
        return math.copysign(math.inf, payment) if payment else 0.0
    return payment * (1 - (1 + rate) ** -periods) / rate


def _infer_solve_target(
    present_value: Optional[float],
    future_value: Optional[float],
    payment: Optional[float],
) -> Optional[str]:
    if present_value is not None and future_value is None and payment is None:
        return "future_value"
    if present_value is None and future_value is not None and payment is None:
        return "present_value"
    if present_value is None and future_value is None and payment is not None:
        return "annuity_present_value"
    return None


def solve_tvm(
    interest_rate: float,
    periods: float,
    present_value: Optional[float] = None,
    future_value: Optional[float] = None,
    payment: Optional[float] = None,
    solve_for: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Solve the TVM equation for the missing variable.

    Without solve_for the target is inferred from which values were given:
    PV alone solves for FV, FV alone solves for PV, a payment alone solves
    for the annuity's present value, and PV with FV just reports the
    interest between them. Pass solve_for='payment' to amortize PV instead.

    Raises:
        ValueError: If solve_for is not a known target or its input is missing
    """
    result = {
        "present_value": present_value,
        "future_value": future_value,
        "payment": payment,
        "total_interest": 0.0,
        "total_payments": 0.0,
    }

    if solve_for is None:
        if present_value is not None and future_value is not None:
            result["total_interest"] = future_value - present_value
            return result
        solve_for = _infer_solve_target(present_value, future_value, payment)
        if solve_for is None:
            return result

    if solve_for not in SOLVE_TARGETS:
        raise ValueError(f"Unsupported TVM target: {solve_for}")

    if solve_for in ("future_value", "payment") and present_value is None:
        raise ValueError("Present value is required")
    if solve_for == "present_value" and future_value is None:
        raise ValueError("Future value is required")
    if solve_for == "annuity_present_value" and payment is None:
        raise ValueError("Payment is required")

    if solve_for == "future_value":
        fv = calculate_future_value(present_value, interest_rate, periods)
        result["future_value"] = fv
        result["total_interest"] = fv - present_value
    elif solve_for == "present_value":
        pv = calculate_present_value(future_value, interest_rate, periods)
        result["present_value"] = pv
        result["total_interest"] = future_value - pv
    elif solve_for == "payment":
        pmt = calculate_payment(present_value, interest_rate, periods)
        result["payment"] = pmt
        result["total_payments"] = pmt * periods
        result["total_interest"] = result["total_payments"] - present_value
    else:
        pv = calculate_pv_from_payment(payment, interest_rate, periods)
        result["present_value"] = pv
        result["total_payments"] = payment * periods
        result["total_interest"] = result["total_payments"] - pv

    return result


def generate_growth_timeline(
    initial_value: float,
    rate: float,
    periods: int,
    payment: Optional[float] = None,
) -> List[Dict[str, float]]:
    """Value and cumulative interest at each period, period 0 included."""
    timeline = []
    current_value = initial_value
    cumulative_interest = 0.0

    for period in range(periods + 1):
        timeline.append(
            {
                "period": period,
                "value": round(current_value, 2),
                "cumulative_interest": round(cumulative_interest, 2),
            }
        )

        if period < periods:
            interest_earned = current_value * rate
            cumulative_interest += interest_earned
            current_value += interest_earned - (payment or 0)

    return timeline


def validate_tvm_inputs(inputs: Mapping[str, Any]) -> List[str]:
    """Validate TVM calculator inputs."""
    errors = []

    interest_rate = inputs.get("interest_rate")
    periods = inputs.get("periods")

    if interest_rate is None:
        errors.append("Interest rate is required")
    elif interest_rate <= -1 or interest_rate > 1:
        errors.append("Interest rate must be greater than -100% and at most 100%")

    if not periods or periods <= 0 or periods > MAX_PERIODS:
        errors.append("Periods must be between 1 and 100")

    provided = [
        inputs.get(key) for key in ("present_value", "future_value", "payment")
    ]
    if all(value is None for value in provided):
        errors.append("At least one of Present Value, Future Value, or Payment must be provided")

    solve_for = inputs.get("solve_for")
    if solve_for and solve_for not in SOLVE_TARGETS:
        errors.append("Solve target must be future_value, present_value, payment or annuity_present_value")

    return errors
