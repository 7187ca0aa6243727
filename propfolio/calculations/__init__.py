"""
Financial Calculation Engine

Pro forma projection plus the standalone calculators (amortization, DSCR,
IRR/NPV, cap rate, NOI, time value of money) for real estate analysis.
"""

from propfolio.calculations import (
    amortization,
    assumptions,
    cap_rate,
    completion,
    dscr,
    irr,
    metrics,
    noi,
    proforma,
    tvm,
)

__all__ = [
    "amortization",
    "assumptions",
    "cap_rate",
    "completion",
    "dscr",
    "irr",
    "metrics",
    "noi",
    "proforma",
    "tvm",
]
