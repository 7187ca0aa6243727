"""
Input Sheet Completion

Tracks how much of the assumption input sheet is filled in, which decides
whether the cash flow and sale views have enough data to be meaningful.

Works on the flat assumption mapping as entered, since "not entered yet"
is lost once values are normalized.
"""

import enum
from dataclasses import asdict, dataclass
from typing import Any, AbstractSet, Dict, Mapping, Union

from propfolio.calculations.assumptions import PropertyAssumptions, flatten_assumptions


# Raw points available on a fully entered input sheet
INPUT_SHEET_POINTS = 85


class SectionStatus(str, enum.Enum):
    """Navigation state of a model section."""

    locked = "locked"
    ready = "ready"
    complete = "complete"
    viewed = "viewed"


@dataclass(frozen=True)
class CompletionState:
    property_income_complete: bool
    financing_complete: bool
    tax_exit_complete: bool
    cashflows_ready: bool
    sale_analysis_ready: bool
    overall_progress: int
    input_sheet_progress: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


AssumptionInput = Union[Mapping[str, Any], PropertyAssumptions]


def _as_mapping(assumptions: AssumptionInput) -> Mapping[str, Any]:
    if isinstance(assumptions, PropertyAssumptions):
        return flatten_assumptions(assumptions)
    return assumptions


def _positive(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    try:
        return value is not None and float(value) > 0
    except (TypeError, ValueError):
        return False


def _non_negative(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    try:
        return value is not None and float(value) >= 0
    except (TypeError, ValueError):
        return False


def _has_year1_income(data: Mapping[str, Any]) -> bool:
    income = data.get("potential_rental_income") or []
    return bool(income) and _positive({"value": income[0]}, "value")


def _selection(data: Mapping[str, Any], key: str) -> str:
    return str(data.get(key) or "").strip().lower()


def is_property_income_complete(assumptions: AssumptionInput) -> bool:
    """Purchase price, property type, hold period and Year-1 rent are entered."""
    data = _as_mapping(assumptions)
    return (
        _positive(data, "purchase_price")
        and bool(_selection(data, "property_type"))
        and _positive(data, "hold_period_years")
        and _has_year1_income(data)
    )


def is_financing_complete(assumptions: AssumptionInput) -> bool:
    data = _as_mapping(assumptions)
    financing_type = _selection(data, "financing_type")

    if financing_type == "cash":
        return True
    if not financing_type:
        return False

    loan_terms = (
        _positive(data, "interest_rate")
        and _positive(data, "loan_term_years")
        and _positive(data, "amortization_years")
    )

    if financing_type == "dscr":
        return loan_terms and _positive(data, "target_dscr")
    if financing_type == "ltv":
        return loan_terms and (_positive(data, "target_ltv") or _positive(data, "loan_amount"))
    return loan_terms and _positive(data, "loan_amount")


def is_tax_exit_complete(assumptions: AssumptionInput) -> bool:
    """Tax rates, an exit price or cap rate, and a cost of sale are entered."""
    data = _as_mapping(assumptions)

    has_tax_rates = all(
        _non_negative(data, key)
        for key in (
            "ordinary_income_tax_rate",
            "capital_gains_tax_rate",
            "depreciation_recapture_rate",
        )
    )

    disposition_type = _selection(data, "disposition_price_type")
    has_exit_strategy = (disposition_type == "dollar" and _positive(data, "disposition_price")) or (
        disposition_type == "caprate" and _positive(data, "disposition_cap_rate")
    )

    cost_of_sale_type = _selection(data, "cost_of_sale_type")
    has_cost_of_sale = (
        cost_of_sale_type == "dollar" and _non_negative(data, "cost_of_sale_amount")
    ) or (cost_of_sale_type == "percentage" and _non_negative(data, "cost_of_sale_percentage"))

    return has_tax_rates and has_exit_strategy and has_cost_of_sale


def is_cashflows_ready(assumptions: AssumptionInput) -> bool:
    return is_property_income_complete(assumptions) and is_financing_complete(assumptions)


def is_sale_analysis_ready(assumptions: AssumptionInput) -> bool:
    return is_cashflows_ready(assumptions) and is_tax_exit_complete(assumptions)


def calculate_overall_progress(assumptions: AssumptionInput) -> int:
    """Share of the three input sections that are complete, as a percentage."""
    completed = sum(
        [
            is_property_income_complete(assumptions),
            is_financing_complete(assumptions),
            is_tax_exit_complete(assumptions),
        ]
    )
    return int(round(completed / 3 * 100))


def calculate_input_sheet_progress(assumptions: AssumptionInput) -> int:
    """
    Field-level progress through the input sheet, out of 100 points.

    Property and income are worth 40 raw points, financing 25 and tax and
    exit 20; the total is scaled so a fully entered sheet reads 100. A cash
    deal earns all financing points once selected.
    """
    data = _as_mapping(assumptions)
    points = 0

    if _positive(data, "purchase_price"):
        points += 10
    if _selection(data, "property_type"):
        points += 5
    if _positive(data, "hold_period_years"):
        points += 5
    if _non_negative(data, "land_percentage") and _non_negative(data, "improvements_percentage"):
        points += 5
    if _has_year1_income(data):
        points += 15

    financing_type = _selection(data, "financing_type")
    if financing_type:
        points += 5
    if financing_type == "cash":
        points += 20
    elif financing_type:
        for key in ("interest_rate", "loan_term_years", "amortization_years"):
            if _positive(data, key):
                points += 5
        if any(_positive(data, key) for key in ("target_dscr", "target_ltv", "loan_amount")):
            points += 5

    if _non_negative(data, "ordinary_income_tax_rate"):
        points += 3
    if _non_negative(data, "capital_gains_tax_rate"):
        points += 3
    if _non_negative(data, "depreciation_recapture_rate"):
        points += 4
    if _selection(data, "disposition_price_type"):
        points += 5
    if _selection(data, "cost_of_sale_type"):
        points += 5

    return min(100, int(round(points * 100 / INPUT_SHEET_POINTS)))


def get_completion_state(assumptions: AssumptionInput) -> CompletionState:
    data = _as_mapping(assumptions)
    return CompletionState(
        property_income_complete=is_property_income_complete(data),
        financing_complete=is_financing_complete(data),
        tax_exit_complete=is_tax_exit_complete(data),
        cashflows_ready=is_cashflows_ready(data),
        sale_analysis_ready=is_sale_analysis_ready(data),
        overall_progress=calculate_overall_progress(data),
        input_sheet_progress=calculate_input_sheet_progress(data),
    )


def get_section_status(
    section_id: str,
    assumptions: AssumptionInput,
    viewed_sections: AbstractSet[str] = frozenset(),
) -> SectionStatus:
    """Status of the 'input-sheet', 'cashflows' or 'sale' section."""
    if section_id in viewed_sections:
        return SectionStatus.viewed

    completion = get_completion_state(assumptions)

    if section_id == "input-sheet":
        if completion.input_sheet_progress == 100:
            return SectionStatus.complete
        if completion.input_sheet_progress > 0:
            return SectionStatus.ready
        return SectionStatus.locked

    if section_id == "cashflows" and completion.cashflows_ready:
        return SectionStatus.ready

    if section_id == "sale" and completion.sale_analysis_ready:
        return SectionStatus.ready

    return SectionStatus.locked
