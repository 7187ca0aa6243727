"""
IRR and NPV Calculations

Implements IRR using Newton-Raphson with a bisection fallback over a bounded
rate range. Unsolvable cash flow patterns yield None instead of raising.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence
import numpy as np

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100
BISECTION_ITERATIONS = 200
TOLERANCE = 1e-6
DEFAULT_GUESS = 0.1

# Search bracket for the rate: -99% to +1000%
IRR_LOWER_BOUND = -0.99
IRR_UPPER_BOUND = 10.0


def calculate_npv(cash_flows: Sequence[float], discount_rate: float) -> float:
    """
    Calculate NPV (Net Present Value) of cash flows.

    Args:
        cash_flows: Array of cash flows (negative = outflow, positive = inflow)
        discount_rate: Annual discount rate (e.g., 0.10 for 10%)

    Returns:
        NPV value
    """
    flows = np.asarray(cash_flows, dtype=float)
    periods = np.arange(len(flows))
    return float(np.sum(flows / (1 + discount_rate) ** periods))


def _npv_derivative(cash_flows: Sequence[float], rate: float) -> float:
    """Calculate derivative of NPV with respect to rate (for Newton-Raphson)."""
    flows = np.asarray(cash_flows, dtype=float)
    periods = np.arange(len(flows))
    return float(-np.sum(periods * flows / (1 + rate) ** (periods + 1)))


def calculate_irr(
    cash_flows: Sequence[float], guess: float = DEFAULT_GUESS
) -> Optional[float]:
    """
    Calculate IRR (Internal Rate of Return) for periodic cash flows.

    Newton-Raphson runs first; if it leaves the search bracket or stalls,
    bisection takes over between IRR_LOWER_BOUND and IRR_UPPER_BOUND.

    Args:
        cash_flows: Array of periodic cash flows, period 0 first
        guess: Initial guess for rate (default 0.1 = 10%)

    Returns:
        IRR as decimal (e.g., 0.15 for 15%), or None when fewer than two
        flows are given or NPV does not change sign across the bracket
    """
    if len(cash_flows) < 2:
        return None

    has_positive = any(cf > 0 for cf in cash_flows)
    has_negative = any(cf < 0 for cf in cash_flows)

    if not has_positive or not has_negative:
        return None

    low, high = IRR_LOWER_BOUND, IRR_UPPER_BOUND
    npv_low = calculate_npv(cash_flows, low)
    npv_high = calculate_npv(cash_flows, high)

    if npv_low == 0:
        return low
    if npv_high == 0:
        return high
    if npv_low * npv_high > 0:
        logger.debug(f"IRR not bracketed between {low} and {high}")
        return None

    rate = guess
    for _ in range(MAX_ITERATIONS):
        npv = calculate_npv(cash_flows, rate)
        if abs(npv) < TOLERANCE:
            return rate

        dnpv = _npv_derivative(cash_flows, rate)
        if abs(dnpv) < 1e-12:
            break

        new_rate = rate - npv / dnpv
        if not low < new_rate < high:
            break

        if abs(new_rate - rate) < 1e-12:
            return new_rate

        rate = new_rate

    for _ in range(BISECTION_ITERATIONS):
        mid = (low + high) / 2
        npv_mid = calculate_npv(cash_flows, mid)

        if abs(npv_mid) < TOLERANCE or high - low < 1e-12:
            return mid

        if (npv_mid > 0) == (npv_low > 0):
            low, npv_low = mid, npv_mid
        else:
            high = mid

    return (low + high) / 2


def calculate_multiple(cash_flows: Sequence[float]) -> float:
    """
    Calculate equity multiple.

    Args:
        cash_flows: Array of cash flows (investments are negative)

    Returns:
        Multiple (e.g., 2.0 = 2.0x return), 0.0 when nothing was invested
    """
    total_inflows = sum(cf for cf in cash_flows if cf > 0)
    total_outflows = abs(sum(cf for cf in cash_flows if cf < 0))

    if total_outflows == 0:
        return 0.0

    return total_inflows / total_outflows


def calculate_profit(cash_flows: Sequence[float]) -> float:
    """Calculate profit (total inflows minus total outflows)."""
    return sum(cash_flows)


def calculate_payback_period(cash_flows: Sequence[Mapping[str, float]]) -> Optional[int]:
    """First period at which cumulative cash flow turns non-negative."""
    cumulative = 0.0

    for cash_flow in sorted(cash_flows, key=lambda cf: cf["period"]):
        cumulative += cash_flow["amount"]
        if cumulative >= 0 and cash_flow["period"] > 0:
            return int(cash_flow["period"])

    return None


def _to_periodic(cash_flows: Sequence[Mapping[str, float]]) -> List[float]:
    """Lay period-tagged flows out on a dense period grid."""
    if not cash_flows:
        return []

    flows = [0.0] * (int(max(cf["period"] for cf in cash_flows)) + 1)
    for cash_flow in cash_flows:
        flows[int(cash_flow["period"])] += cash_flow["amount"]
    return flows


def analyze_irr_npv(
    cash_flows: Sequence[Mapping[str, float]], discount_rate: float
) -> Dict[str, Any]:
    """
    Analyze period-tagged cash flows.

    Args:
        cash_flows: Items with 'period' and 'amount' (and optional 'description')
        discount_rate: Discount rate for NPV as decimal

    Returns:
        NPV, IRR, totals and payback period
    """
    flows = _to_periodic(cash_flows)

    npv = calculate_npv(flows, discount_rate) if flows else 0.0
    irr = calculate_irr(flows)

    total_cash_in = sum(cf["amount"] for cf in cash_flows if cf["amount"] > 0)
    total_cash_out = abs(sum(cf["amount"] for cf in cash_flows if cf["amount"] < 0))

    return {
        "npv": npv,
        "irr": irr,
        "irr_percentage": f"{irr * 100:.2f}%" if irr is not None else "N/A",
        "total_cash_in": total_cash_in,
        "total_cash_out": total_cash_out,
        "net_cash_flow": total_cash_in - total_cash_out,
        "payback_period": calculate_payback_period(cash_flows),
    }


def validate_irr_npv_inputs(inputs: Mapping[str, Any]) -> List[str]:
    """Validate IRR/NPV calculator inputs."""
    errors = []

    cash_flows = inputs.get("cash_flows")
    discount_rate = inputs.get("discount_rate")

    if not cash_flows:
        errors.append("At least one cash flow is required")
    else:
        periods = [cf["period"] for cf in cash_flows]
        if any(p < 0 for p in periods):
            errors.append("All periods must be 0 or greater")

        if len(set(periods)) != len(periods):
            errors.append("Each period can only have one cash flow")

        has_positive = any(cf["amount"] > 0 for cf in cash_flows)
        has_negative = any(cf["amount"] < 0 for cf in cash_flows)

        if not has_positive or not has_negative:
            errors.append(
                "Cash flows must include both inflows (positive) and outflows (negative) for meaningful analysis"
            )

    if discount_rate is None:
        errors.append("Discount rate is required")
    elif discount_rate < -1 or discount_rate > 2:
        errors.append("Discount rate must be between -100% and 200%")

    return errors


def sample_real_estate_cash_flows() -> List[Dict[str, Any]]:
    """Sample five-year hold used to pre-fill the IRR/NPV calculator."""
    return [
        {"period": 0, "amount": -500000, "description": "Initial Investment"},
        {"period": 1, "amount": 50000, "description": "Year 1 Cash Flow"},
        {"period": 2, "amount": 52000, "description": "Year 2 Cash Flow"},
        {"period": 3, "amount": 54000, "description": "Year 3 Cash Flow"},
        {"period": 4, "amount": 56000, "description": "Year 4 Cash Flow"},
        {"period": 5, "amount": 650000, "description": "Year 5 Cash Flow + Sale"},
    ]
