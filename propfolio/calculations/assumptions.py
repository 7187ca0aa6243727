"""
Pro Forma Assumptions

Typed deal assumptions plus the normalization that turns loose, partially
entered form data into values the projection engine can use without guards.

Financing and disposition are modeled as one dataclass per mode, each able
to resolve its own loan amount or sale price, so the engine never branches
on a type string. Dollar-or-percentage inputs are Charge values.

normalize_assumptions() is idempotent: feeding its output back in (directly
or through flatten_assumptions()) returns an equal object.
"""

import enum
import math
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from propfolio.calculations.dscr import calculate_max_loan_amount

MAX_PROJECTION_YEARS = 30

DEFAULT_HOLD_PERIOD_YEARS = 5
MAX_HOLD_PERIOD_YEARS = 10

DEFAULT_AMORTIZATION_YEARS = 30
MAX_LOAN_YEARS = 50
DEFAULT_PAYMENTS_PER_YEAR = 12
MAX_PAYMENTS_PER_YEAR = 52

MAX_RECAPTURE_RATE = 0.25

RESIDENTIAL_DEPRECIATION_YEARS = 27.5
NONRESIDENTIAL_DEPRECIATION_YEARS = 39.0

# Expense line items summed in dollar mode
EXPENSE_FIELDS = (
    "operating_expenses",
    "property_taxes",
    "insurance",
    "maintenance",
    "property_management",
    "utilities",
    "other_expenses",
)

YEAR_ARRAY_FIELDS = ("potential_rental_income", "other_income", "vacancy_rates") + EXPENSE_FIELDS

ZERO_YEARS = (0.0,) * MAX_PROJECTION_YEARS


class ChargeKind(str, enum.Enum):
    """How a cost input is expressed."""

    percentage = "percentage"
    dollar = "dollar"


class PropertyType(str, enum.Enum):
    """Property class, which sets the default recovery period."""

    residential = "residential"
    commercial = "commercial"
    industrial = "industrial"


@dataclass(frozen=True)
class Charge:
    """A cost entered either as a fraction of some base or as a flat amount."""

    value: float = 0.0
    kind: ChargeKind = ChargeKind.percentage

    def amount(self, base: float) -> float:
        if self.kind == ChargeKind.percentage:
            return base * self.value
        return self.value


@dataclass(frozen=True)
class LoanTerms:
    """Loan parameters shared by every financed mode."""

    interest_rate: float = 0.0
    loan_term_years: float = DEFAULT_AMORTIZATION_YEARS
    amortization_years: float = DEFAULT_AMORTIZATION_YEARS
    payments_per_year: int = DEFAULT_PAYMENTS_PER_YEAR
    loan_costs: Charge = field(default_factory=Charge)


@dataclass(frozen=True)
class CashFinancing:
    """All-cash purchase. Loan terms are kept so switching modes loses no input."""

    financing_type: ClassVar[str] = "cash"

    terms: LoanTerms = field(default_factory=LoanTerms)

    def loan_amount(self, purchase_price: float, year1_noi: float) -> float:
        return 0.0


@dataclass(frozen=True)
class LTVFinancing:
    """Loan sized as a share of price, unless an explicit amount is given."""

    financing_type: ClassVar[str] = "ltv"

    terms: LoanTerms = field(default_factory=LoanTerms)
    target_ltv: float = 0.0
    fixed_amount: float = 0.0

    def loan_amount(self, purchase_price: float, year1_noi: float) -> float:
        if self.fixed_amount > 0:
            return min(self.fixed_amount, purchase_price)
        return purchase_price * self.target_ltv


@dataclass(frozen=True)
class DSCRFinancing:
    """Loan sized once from Year-1 NOI so the payment meets target_dscr."""

    financing_type: ClassVar[str] = "dscr"

    terms: LoanTerms = field(default_factory=LoanTerms)
    target_dscr: float = 0.0

    def loan_amount(self, purchase_price: float, year1_noi: float) -> float:
        max_loan = calculate_max_loan_amount(
            year1_noi,
            self.target_dscr,
            self.terms.interest_rate,
            self.terms.amortization_years,
            self.terms.payments_per_year,
        )
        return min(max_loan, purchase_price)


Financing = Union[CashFinancing, LTVFinancing, DSCRFinancing]


@dataclass(frozen=True)
class CapRateDisposition:
    """Sale priced by capitalizing final-year NOI."""

    disposition_type: ClassVar[str] = "caprate"

    cap_rate: float = 0.0

    def sale_price(self, final_noi: float, purchase_price: float) -> float:
        # No exit cap entered yet: assume a sale at cost
        if self.cap_rate <= 0:
            return purchase_price
        return final_noi / self.cap_rate

    def exit_cap_rate(self, final_noi: float, sale_price: float) -> float:
        if self.cap_rate <= 0:
            return final_noi / sale_price if sale_price > 0 else 0.0
        return self.cap_rate


@dataclass(frozen=True)
class DollarDisposition:
    """Sale at an explicit price."""

    disposition_type: ClassVar[str] = "dollar"

    price: float = 0.0

    def sale_price(self, final_noi: float, purchase_price: float) -> float:
        if self.price <= 0:
            return purchase_price
        return self.price

    def exit_cap_rate(self, final_noi: float, sale_price: float) -> float:
        # Implied cap rate, for display
        if final_noi > 0 and sale_price > 0:
            return final_noi / sale_price
        return 0.0


Disposition = Union[CapRateDisposition, DollarDisposition]


@dataclass(frozen=True)
class CapitalImprovement:
    """Mid-hold capital expenditure depreciated on its own schedule."""

    year: int
    amount: float
    description: str = ""
    recovery_period: Optional[float] = None


@dataclass(frozen=True)
class PropertyAssumptions:
    """Normalized deal assumptions. Year arrays are index 0 = Year 1."""

    purchase_price: float = 0.0
    acquisition_costs: Charge = field(default_factory=Charge)

    potential_rental_income: Tuple[float, ...] = ZERO_YEARS
    other_income: Tuple[float, ...] = ZERO_YEARS
    vacancy_rates: Tuple[float, ...] = ZERO_YEARS
    operating_expenses: Tuple[float, ...] = ZERO_YEARS
    operating_expense_type: ChargeKind = ChargeKind.dollar
    property_taxes: Tuple[float, ...] = ZERO_YEARS
    insurance: Tuple[float, ...] = ZERO_YEARS
    maintenance: Tuple[float, ...] = ZERO_YEARS
    property_management: Tuple[float, ...] = ZERO_YEARS
    utilities: Tuple[float, ...] = ZERO_YEARS
    other_expenses: Tuple[float, ...] = ZERO_YEARS

    financing: Financing = field(default_factory=CashFinancing)

    property_type: Optional[PropertyType] = None
    depreciation_years: float = NONRESIDENTIAL_DEPRECIATION_YEARS
    land_percentage: float = 0.0
    improvements_percentage: float = 0.0
    acquisition_month: int = 1
    capital_improvements: Tuple[CapitalImprovement, ...] = ()

    ordinary_income_tax_rate: float = 0.0
    capital_gains_tax_rate: float = 0.0
    depreciation_recapture_rate: float = 0.0

    hold_period_years: int = DEFAULT_HOLD_PERIOD_YEARS
    disposition: Disposition = field(default_factory=CapRateDisposition)
    cost_of_sale: Charge = field(default_factory=Charge)


def _parse_number(value: Any) -> Optional[float]:
    """Parse a loose form value; None when missing, unparseable or non-finite."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", "").replace("$", "")
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _number(value: Any, default: float = 0.0) -> float:
    number = _parse_number(value)
    return default if number is None else number


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _fraction(value: Any, upper: float = 1.0) -> float:
    return _clamp(_number(value), 0.0, upper)


def _year_array(values: Any, upper: Optional[float] = None) -> Tuple[float, ...]:
    """Pad or truncate to MAX_PROJECTION_YEARS entries, negatives become 0."""
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
        values = []

    cleaned = []
    for value in list(values)[:MAX_PROJECTION_YEARS]:
        number = max(0.0, _number(value))
        if upper is not None:
            number = min(upper, number)
        cleaned.append(number)

    cleaned.extend([0.0] * (MAX_PROJECTION_YEARS - len(cleaned)))
    return tuple(cleaned)


def _kind(value: Any) -> Optional[ChargeKind]:
    if isinstance(value, ChargeKind):
        return value
    try:
        return ChargeKind(str(value).strip().lower()) if value else None
    except ValueError:
        return None


def _charge(value: Any, kind: Any) -> Charge:
    """
    Build a Charge from a value and its type selector.

    With no type selected, values up to 1 are read as fractions and anything
    larger as dollars.
    """
    amount = max(0.0, _number(value))
    charge_kind = _kind(kind)
    if charge_kind is None:
        charge_kind = ChargeKind.percentage if amount <= 1 else ChargeKind.dollar
    if charge_kind == ChargeKind.percentage:
        amount = min(1.0, amount)
    return Charge(value=amount, kind=charge_kind)


def _hold_period(value: Any) -> int:
    number = _parse_number(value)
    if number is None:
        return DEFAULT_HOLD_PERIOD_YEARS
    # 0 means "not entered yet" and is kept, so nothing is projected
    if number == 0:
        return 0
    return int(round(_clamp(number, 1, MAX_HOLD_PERIOD_YEARS)))


def _property_type(value: Any) -> Optional[PropertyType]:
    if isinstance(value, PropertyType):
        return value
    try:
        return PropertyType(str(value).strip().lower()) if value else None
    except ValueError:
        return None


def _loan_terms(raw: Mapping[str, Any]) -> LoanTerms:
    amortization_years = _number(raw.get("amortization_years")) or DEFAULT_AMORTIZATION_YEARS
    amortization_years = _clamp(amortization_years, 1, MAX_LOAN_YEARS)

    loan_term_years = _number(raw.get("loan_term_years")) or amortization_years
    loan_term_years = _clamp(loan_term_years, 1, MAX_LOAN_YEARS)

    payments_per_year = _number(raw.get("payments_per_year")) or DEFAULT_PAYMENTS_PER_YEAR
    payments_per_year = int(round(_clamp(payments_per_year, 1, MAX_PAYMENTS_PER_YEAR)))

    return LoanTerms(
        interest_rate=_fraction(raw.get("interest_rate")),
        loan_term_years=loan_term_years,
        amortization_years=amortization_years,
        payments_per_year=payments_per_year,
        loan_costs=_charge(raw.get("loan_costs"), raw.get("loan_cost_type")),
    )


def _financing(raw: Mapping[str, Any], purchase_price: float) -> Financing:
    terms = _loan_terms(raw)
    loan_amount = _clamp(_number(raw.get("loan_amount")), 0.0, purchase_price)
    financing_type = str(raw.get("financing_type") or "").strip().lower()

    if not financing_type:
        financing_type = "ltv" if loan_amount > 0 else "cash"

    if financing_type == "dscr":
        return DSCRFinancing(terms=terms, target_dscr=max(0.0, _number(raw.get("target_dscr"))))
    if financing_type == "ltv":
        return LTVFinancing(
            terms=terms,
            target_ltv=_fraction(raw.get("target_ltv")),
            fixed_amount=loan_amount,
        )
    return CashFinancing(terms=terms)


def _disposition(raw: Mapping[str, Any]) -> Disposition:
    price = max(0.0, _number(raw.get("disposition_price")))
    disposition_type = str(raw.get("disposition_price_type") or "").strip().lower()

    if disposition_type == "dollar" or (not disposition_type and price > 0):
        return DollarDisposition(price=price)
    return CapRateDisposition(cap_rate=_fraction(raw.get("disposition_cap_rate")))


def _cost_of_sale(raw: Mapping[str, Any]) -> Charge:
    kind = _kind(raw.get("cost_of_sale_type"))
    amount = raw.get("cost_of_sale_amount")
    percentage = raw.get("cost_of_sale_percentage")

    if kind is None:
        has_percentage = _number(percentage) > 0
        kind = ChargeKind.dollar if not has_percentage and _number(amount) > 0 else ChargeKind.percentage

    if kind == ChargeKind.dollar:
        return Charge(value=max(0.0, _number(amount)), kind=kind)
    return Charge(value=_fraction(percentage), kind=kind)


def _capital_improvements(values: Any) -> Tuple[CapitalImprovement, ...]:
    if not values or isinstance(values, (str, bytes)):
        return ()

    improvements = []
    for item in values:
        if isinstance(item, CapitalImprovement):
            item = _flatten_improvement(item)
        if not isinstance(item, Mapping):
            continue

        recovery_period = _parse_number(item.get("recovery_period"))
        improvements.append(
            CapitalImprovement(
                year=int(round(_clamp(_number(item.get("year"), 1), 1, MAX_PROJECTION_YEARS))),
                amount=max(0.0, _number(item.get("amount"))),
                description=str(item.get("description") or ""),
                recovery_period=recovery_period if recovery_period and recovery_period > 0 else None,
            )
        )
    return tuple(improvements)


def normalize_assumptions(
    raw: Union[Mapping[str, Any], PropertyAssumptions]
) -> PropertyAssumptions:
    """
    Coerce loose assumption input into a PropertyAssumptions.

    Accepts a flat mapping with snake_case keys (values may be strings, None
    or NaN) or an existing PropertyAssumptions, which is re-clamped. Missing
    or unparseable numbers become 0 unless the field has a default.

    Args:
        raw: Flat assumption mapping or PropertyAssumptions

    Returns:
        Normalized PropertyAssumptions
    """
    if isinstance(raw, PropertyAssumptions):
        raw = flatten_assumptions(raw)

    purchase_price = max(0.0, _number(raw.get("purchase_price")))
    property_type = _property_type(raw.get("property_type"))
    operating_expense_type = _kind(raw.get("operating_expense_type")) or ChargeKind.dollar

    depreciation_years = _number(raw.get("depreciation_years"))
    if depreciation_years <= 0:
        if property_type == PropertyType.residential:
            depreciation_years = RESIDENTIAL_DEPRECIATION_YEARS
        else:
            depreciation_years = NONRESIDENTIAL_DEPRECIATION_YEARS
    depreciation_years = max(1.0, depreciation_years)

    expense_upper = 1.0 if operating_expense_type == ChargeKind.percentage else None

    ordinary_income_tax_rate = _fraction(raw.get("ordinary_income_tax_rate"))
    # Blank recapture rate follows the ordinary rate, capped at 25%
    depreciation_recapture_rate = _fraction(
        raw.get("depreciation_recapture_rate"), upper=MAX_RECAPTURE_RATE
    ) or min(MAX_RECAPTURE_RATE, ordinary_income_tax_rate)

    return PropertyAssumptions(
        purchase_price=purchase_price,
        acquisition_costs=_charge(raw.get("acquisition_costs"), raw.get("acquisition_cost_type")),
        potential_rental_income=_year_array(raw.get("potential_rental_income")),
        other_income=_year_array(raw.get("other_income")),
        vacancy_rates=_year_array(raw.get("vacancy_rates"), upper=1.0),
        operating_expenses=_year_array(raw.get("operating_expenses"), upper=expense_upper),
        operating_expense_type=operating_expense_type,
        property_taxes=_year_array(raw.get("property_taxes")),
        insurance=_year_array(raw.get("insurance")),
        maintenance=_year_array(raw.get("maintenance")),
        property_management=_year_array(raw.get("property_management")),
        utilities=_year_array(raw.get("utilities")),
        other_expenses=_year_array(raw.get("other_expenses")),
        financing=_financing(raw, purchase_price),
        property_type=property_type,
        depreciation_years=depreciation_years,
        land_percentage=_fraction(raw.get("land_percentage")),
        improvements_percentage=_fraction(raw.get("improvements_percentage")),
        acquisition_month=int(round(_clamp(_number(raw.get("acquisition_month"), 1), 1, 12))),
        capital_improvements=_capital_improvements(raw.get("capital_improvements")),
        ordinary_income_tax_rate=ordinary_income_tax_rate,
        capital_gains_tax_rate=_fraction(raw.get("capital_gains_tax_rate")),
        depreciation_recapture_rate=depreciation_recapture_rate,
        hold_period_years=_hold_period(raw.get("hold_period_years")),
        disposition=_disposition(raw),
        cost_of_sale=_cost_of_sale(raw),
    )


def _flatten_improvement(improvement: CapitalImprovement) -> Dict[str, Any]:
    return {
        "year": improvement.year,
        "amount": improvement.amount,
        "description": improvement.description,
        "recovery_period": improvement.recovery_period,
    }


def flatten_assumptions(assumptions: PropertyAssumptions) -> Dict[str, Any]:
    """Serialize to the flat snake_case mapping normalize_assumptions() reads."""
    financing = assumptions.financing
    terms = financing.terms
    disposition = assumptions.disposition
    cost_of_sale = assumptions.cost_of_sale

    data = {
        "purchase_price": assumptions.purchase_price,
        "acquisition_costs": assumptions.acquisition_costs.value,
        "acquisition_cost_type": assumptions.acquisition_costs.kind.value,
        "operating_expense_type": assumptions.operating_expense_type.value,
        "financing_type": financing.financing_type,
        "loan_amount": getattr(financing, "fixed_amount", 0.0),
        "interest_rate": terms.interest_rate,
        "loan_term_years": terms.loan_term_years,
        "amortization_years": terms.amortization_years,
        "payments_per_year": terms.payments_per_year,
        "loan_costs": terms.loan_costs.value,
        "loan_cost_type": terms.loan_costs.kind.value,
        "target_dscr": getattr(financing, "target_dscr", 0.0),
        "target_ltv": getattr(financing, "target_ltv", 0.0),
        "property_type": assumptions.property_type.value if assumptions.property_type else "",
        "depreciation_years": assumptions.depreciation_years,
        "land_percentage": assumptions.land_percentage,
        "improvements_percentage": assumptions.improvements_percentage,
        "acquisition_month": assumptions.acquisition_month,
        "capital_improvements": [
            _flatten_improvement(improvement) for improvement in assumptions.capital_improvements
        ],
        "ordinary_income_tax_rate": assumptions.ordinary_income_tax_rate,
        "capital_gains_tax_rate": assumptions.capital_gains_tax_rate,
        "depreciation_recapture_rate": assumptions.depreciation_recapture_rate,
        "hold_period_years": assumptions.hold_period_years,
        "disposition_price_type": disposition.disposition_type,
        "disposition_price": getattr(disposition, "price", 0.0),
        "disposition_cap_rate": getattr(disposition, "cap_rate", 0.0),
        "cost_of_sale_type": cost_of_sale.kind.value,
        "cost_of_sale_amount": cost_of_sale.value if cost_of_sale.kind == ChargeKind.dollar else 0.0,
        "cost_of_sale_percentage": (
            cost_of_sale.value if cost_of_sale.kind == ChargeKind.percentage else 0.0
        ),
    }

    for name in YEAR_ARRAY_FIELDS:
        data[name] = list(getattr(assumptions, name))

    return data


def validate_assumptions(raw: Union[Mapping[str, Any], PropertyAssumptions]) -> List[str]:
    """
    Validate pro forma assumptions as entered.

    Returns human-readable messages; normalization will still clamp anything
    reported here, so these are advisory for the input form.
    """
    if isinstance(raw, PropertyAssumptions):
        raw = flatten_assumptions(raw)

    errors = []

    purchase_price = _parse_number(raw.get("purchase_price"))
    if not purchase_price or purchase_price <= 0:
        errors.append("Purchase price must be greater than 0")

    rental_income = raw.get("potential_rental_income") or []
    first_year_income = _parse_number(rental_income[0]) if rental_income else None
    if not first_year_income or first_year_income <= 0:
        errors.append("Year 1 rental income must be greater than 0")

    hold_period = _parse_number(raw.get("hold_period_years"))
    if hold_period is None or hold_period < 1 or hold_period > MAX_HOLD_PERIOD_YEARS:
        errors.append("Hold period must be between 1 and 10 years")
    elif first_year_income and first_year_income > 0:
        errors.extend(_validate_years(raw, int(hold_period)))

    loan_amount = _parse_number(raw.get("loan_amount"))
    if loan_amount is not None and loan_amount < 0:
        errors.append("Loan amount must be 0 or greater")
    if loan_amount and purchase_price and loan_amount > purchase_price:
        errors.append("Loan amount cannot exceed purchase price")

    financing_type = str(raw.get("financing_type") or "").strip().lower()
    if financing_type and financing_type not in ("cash", "ltv", "dscr"):
        errors.append("Financing type must be cash, ltv or dscr")

    if financing_type in ("ltv", "dscr"):
        interest_rate = _parse_number(raw.get("interest_rate"))
        if interest_rate is None or interest_rate < 0 or interest_rate > 1:
            errors.append("Interest rate must be between 0% and 100%")

        loan_term_years = _parse_number(raw.get("loan_term_years"))
        amortization_years = _parse_number(raw.get("amortization_years"))
        if loan_term_years and amortization_years and loan_term_years > amortization_years:
            errors.append("Loan term cannot exceed amortization period")

    if financing_type == "dscr":
        target_dscr = _parse_number(raw.get("target_dscr"))
        if not target_dscr or target_dscr <= 0:
            errors.append("Target DSCR must be greater than 0")

    if financing_type == "ltv" and not loan_amount:
        target_ltv = _parse_number(raw.get("target_ltv"))
        if not target_ltv or target_ltv <= 0 or target_ltv > 1:
            errors.append("Target LTV must be between 0% and 100%")

    for name, label in (
        ("ordinary_income_tax_rate", "Ordinary income tax rate"),
        ("capital_gains_tax_rate", "Capital gains tax rate"),
    ):
        rate = _parse_number(raw.get(name))
        if rate is not None and (rate < 0 or rate > 1):
            errors.append(f"{label} must be between 0% and 100%")

    recapture_rate = _parse_number(raw.get("depreciation_recapture_rate"))
    if recapture_rate is not None and (recapture_rate < 0 or recapture_rate > MAX_RECAPTURE_RATE):
        errors.append("Depreciation recapture rate must be between 0% and 25%")

    disposition_type = str(raw.get("disposition_price_type") or "").strip().lower()
    if disposition_type == "caprate":
        cap_rate = _parse_number(raw.get("disposition_cap_rate"))
        if not cap_rate or cap_rate <= 0 or cap_rate > 1:
            errors.append("Exit cap rate must be between 0% and 100%")

    land = _parse_number(raw.get("land_percentage"))
    improvements = _parse_number(raw.get("improvements_percentage"))
    if land is not None and (land < 0 or land > 1):
        errors.append("Land percentage must be between 0% and 100%")
    if improvements is not None and (improvements < 0 or improvements > 1):
        errors.append("Improvements percentage must be between 0% and 100%")
    if land is not None and improvements is not None and abs(land + improvements - 1) > 0.0001:
        errors.append("Land % and Improvements % must add up to 100%")

    return errors


def _validate_years(raw: Mapping[str, Any], hold_period: int) -> List[str]:
    """Check each held year; only the first problem per category is reported."""
    errors = []
    percentage_mode = _kind(raw.get("operating_expense_type")) == ChargeKind.percentage

    rental_income = list(raw.get("potential_rental_income") or [])
    vacancy_rates = list(raw.get("vacancy_rates") or [])
    operating_expenses = list(raw.get("operating_expenses") or [])

    for index in range(hold_period):
        year = index + 1
        income = _parse_number(rental_income[index]) if index < len(rental_income) else None
        if not income or income <= 0:
            errors.append(f"Year {year} rental income must be greater than 0")
            break

    for index, value in enumerate(vacancy_rates[:hold_period]):
        rate = _parse_number(value)
        if rate is not None and (rate < 0 or rate > 1):
            errors.append(f"Year {index + 1} vacancy rate must be between 0% and 100%")
            break

    for index, value in enumerate(operating_expenses[:hold_period]):
        expense = _parse_number(value)
        if expense is None:
            continue
        if percentage_mode and (expense < 0 or expense > 1):
            errors.append(f"Year {index + 1} operating expenses must be between 0% and 100%")
            break
        if not percentage_mode and expense < 0:
            errors.append(f"Year {index + 1} operating expenses must be positive")
            break

    return errors


def sample_assumptions_data() -> Dict[str, Any]:
    """Sample $2M commercial acquisition, as entered on the input sheet."""
    years = 10
    return {
        "purchase_price": 2000000,
        "acquisition_costs": 0.04,
        "acquisition_cost_type": "percentage",
        "potential_rental_income": [240000 * 1.03 ** i for i in range(years)],
        "other_income": [0] * MAX_PROJECTION_YEARS,
        "vacancy_rates": [0.05] * years,
        "operating_expenses": [0.40] * years,
        "operating_expense_type": "percentage",
        "financing_type": "ltv",
        "loan_amount": 1400000,
        "target_ltv": 0.70,
        "interest_rate": 0.065,
        "loan_term_years": 10,
        "amortization_years": 30,
        "payments_per_year": 12,
        "loan_costs": 0.02,
        "loan_cost_type": "percentage",
        "property_type": "commercial",
        "depreciation_years": 39,
        "land_percentage": 0.20,
        "improvements_percentage": 0.80,
        "acquisition_month": 1,
        "ordinary_income_tax_rate": 0.35,
        "capital_gains_tax_rate": 0.20,
        "depreciation_recapture_rate": 0.25,
        "hold_period_years": 10,
        "disposition_price_type": "caprate",
        "disposition_cap_rate": 0.075,
        "cost_of_sale_type": "percentage",
        "cost_of_sale_percentage": 0.06,
    }


def sample_assumptions() -> PropertyAssumptions:
    """Normalized sample deal."""
    return normalize_assumptions(sample_assumptions_data())
