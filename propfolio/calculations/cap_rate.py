"""
Capitalization Rate Calculations
"""

from typing import Any, Dict, List, Mapping

# Sensitivity grid step: a quarter percent
SENSITIVITY_STEP = 0.0025
MIN_SENSITIVITY_CAP_RATE = 0.001


def calculate_cap_rate(noi: float, price: float) -> Dict[str, Any]:
    """
    Calculate capitalization rate from NOI and property value.

    Raises:
        ValueError: If price is not positive
    """
    if price <= 0:
        raise ValueError("Property price must be greater than 0")

    cap_rate = noi / price

    return {
        "cap_rate": cap_rate,
        "cap_rate_percentage": f"{cap_rate * 100:.2f}%",
    }


def calculate_value_from_cap_rate(noi: float, target_cap_rate: float) -> float:
    """
    Calculate property value from NOI and a target cap rate.

    Raises:
        ValueError: If the cap rate is not positive
    """
    if target_cap_rate <= 0:
        raise ValueError("Cap rate must be greater than 0")

    return noi / target_cap_rate


def generate_cap_rate_sensitivity(
    noi: float, base_cap_rate: float, steps_each_side: int = 8
) -> List[Dict[str, float]]:
    """
    Value the property across cap rates centered on base_cap_rate.

    With the default 8 steps each side the grid spans -2% to +2% in 0.25%
    increments. Cap rates are reported as percentages with two decimals,
    values rounded to the dollar.
    """
    sensitivity = []

    for i in range(-steps_each_side, steps_each_side + 1):
        cap_rate = max(MIN_SENSITIVITY_CAP_RATE, base_cap_rate + i * SENSITIVITY_STEP)
        value = calculate_value_from_cap_rate(noi, cap_rate)

        sensitivity.append(
            {
                "cap_rate": round(cap_rate * 100, 2),
                "value": round(value),
            }
        )

    return sensitivity


def validate_cap_rate_inputs(inputs: Mapping[str, Any]) -> List[str]:
    """Validate cap rate calculator inputs."""
    errors = []

    noi = inputs.get("noi")
    price = inputs.get("price")

    if not noi or noi <= 0:
        errors.append("NOI must be greater than 0")

    if not price or price <= 0:
        errors.append("Property price must be greater than 0")

    if noi and price and noi > price:
        errors.append("NOI cannot exceed property price")

    return errors
