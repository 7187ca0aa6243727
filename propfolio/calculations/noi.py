"""
Net Operating Income (NOI) Calculations
"""

from typing import Any, Dict, List, Mapping


def calculate_noi(
    gross_rental_income: float,
    vacancy_rate: float,
    other_income: float,
    operating_expenses: float,
) -> Dict[str, Any]:
    """
    Calculate Net Operating Income.

    Vacancy is charged against rental income only; other income is added
    after the vacancy deduction.

    Args:
        gross_rental_income: Potential rental income for the year
        vacancy_rate: Vacancy as decimal (e.g., 0.05 for 5%)
        other_income: Parking, laundry and other non-rent income
        operating_expenses: Total operating expenses for the year

    Returns:
        Dict with vacancy loss, EGI, NOI and the operating expense ratio
    """
    vacancy_loss = gross_rental_income * vacancy_rate
    effective_gross_income = gross_rental_income - vacancy_loss + other_income
    net_operating_income = effective_gross_income - operating_expenses

    if effective_gross_income > 0:
        expense_ratio = operating_expenses / effective_gross_income
    else:
        expense_ratio = 0.0

    return {
        "gross_rental_income": gross_rental_income,
        "vacancy_loss": vacancy_loss,
        "effective_gross_income": effective_gross_income,
        "net_operating_income": net_operating_income,
        "operating_expense_ratio": expense_ratio,
        "operating_expense_ratio_percentage": f"{expense_ratio * 100:.1f}%",
    }


def generate_noi_waterfall(
    gross_rental_income: float,
    vacancy_rate: float,
    other_income: float,
    operating_expenses: float,
) -> List[Dict[str, Any]]:
    """Break the NOI calculation into additive and subtractive steps."""
    return [
        {
            "label": "Gross Rental Income",
            "value": gross_rental_income,
            "is_subtraction": False,
        },
        {
            "label": f"Vacancy Loss ({vacancy_rate * 100:.1f}%)",
            "value": gross_rental_income * vacancy_rate,
            "is_subtraction": True,
        },
        {
            "label": "Other Income",
            "value": other_income,
            "is_subtraction": False,
        },
        {
            "label": "Operating Expenses",
            "value": operating_expenses,
            "is_subtraction": True,
        },
    ]


def validate_noi_inputs(inputs: Mapping[str, Any]) -> List[str]:
    """Validate NOI calculator inputs."""
    errors = []

    gross_rental_income = inputs.get("gross_rental_income")
    vacancy_rate = inputs.get("vacancy_rate")
    other_income = inputs.get("other_income")
    operating_expenses = inputs.get("operating_expenses")

    if gross_rental_income is None or gross_rental_income < 0:
        errors.append("Gross rental income must be 0 or greater")

    if vacancy_rate is None or vacancy_rate < 0 or vacancy_rate > 1:
        errors.append("Vacancy rate must be between 0% and 100%")

    if other_income is None or other_income < 0:
        errors.append("Other income must be 0 or greater")

    if operating_expenses is None or operating_expenses < 0:
        errors.append("Operating expenses must be 0 or greater")

    return errors
