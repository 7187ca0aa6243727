"""
Tests for assumption normalization and validation.
"""

import math

import pytest

from propfolio.calculations.assumptions import (
    MAX_PROJECTION_YEARS,
    CapitalImprovement,
    CapRateDisposition,
    CashFinancing,
    Charge,
    ChargeKind,
    DollarDisposition,
    DSCRFinancing,
    LTVFinancing,
    PropertyType,
    flatten_assumptions,
    normalize_assumptions,
    sample_assumptions,
    validate_assumptions,
)


class TestNormalization:
    """Test coercion of loose input into PropertyAssumptions."""

    def test_empty_input_uses_defaults(self):
        """Test defaults applied to an empty sheet."""
        assumptions = normalize_assumptions({})

        assert assumptions.purchase_price == 0
        assert assumptions.hold_period_years == 5
        assert isinstance(assumptions.financing, CashFinancing)
        assert assumptions.financing.terms.amortization_years == 30
        assert assumptions.financing.terms.payments_per_year == 12
        assert assumptions.depreciation_years == 39
        assert assumptions.acquisition_month == 1
        assert len(assumptions.potential_rental_income) == MAX_PROJECTION_YEARS

    def test_idempotent_on_sample(self):
        """Normalizing normalized assumptions changes nothing."""
        once = sample_assumptions()
        assert normalize_assumptions(once) == once
        assert normalize_assumptions(flatten_assumptions(once)) == once

    def test_idempotent_on_messy_input(self):
        """Test normalizing twice gives the same result."""
        raw = {
            "purchase_price": "$1,250,000",
            "potential_rental_income": ["100000", None, float("nan"), -5, 120000],
            "vacancy_rates": [1.5, 0.05],
            "loan_amount": 2000000,
            "interest_rate": 0.07,
            "hold_period_years": 25,
            "disposition_price": 1500000,
            "cost_of_sale_amount": 30000,
            "acquisition_costs": 25000,
        }
        once = normalize_assumptions(raw)
        twice = normalize_assumptions(once)
        assert once == twice

    def test_parses_loose_numbers(self):
        """Test numeric strings are parsed."""
        assumptions = normalize_assumptions(
            {"purchase_price": "$1,250,000", "potential_rental_income": ["100000", None, "abc"]}
        )
        assert assumptions.purchase_price == 1250000
        assert assumptions.potential_rental_income[:3] == (100000.0, 0.0, 0.0)

    def test_non_finite_values_become_zero(self):
        """Test NaN and infinity become zero."""
        assumptions = normalize_assumptions(
            {"purchase_price": float("inf"), "other_income": [float("nan")]}
        )
        assert assumptions.purchase_price == 0
        assert assumptions.other_income[0] == 0
        assert not any(math.isnan(value) for value in assumptions.other_income)

    def test_year_arrays_padded_and_truncated(self):
        """Test year arrays always have 30 entries."""
        assumptions = normalize_assumptions({"potential_rental_income": [1.0] * 40})
        assert len(assumptions.potential_rental_income) == MAX_PROJECTION_YEARS

        assumptions = normalize_assumptions({"potential_rental_income": [1.0, 2.0]})
        assert assumptions.potential_rental_income[2:] == (0.0,) * (MAX_PROJECTION_YEARS - 2)

    def test_negative_values_clamped(self):
        """Test negative inputs are clamped to zero."""
        assumptions = normalize_assumptions(
            {"purchase_price": -100, "insurance": [-500, 500], "vacancy_rates": [-0.1, 1.2]}
        )
        assert assumptions.purchase_price == 0
        assert assumptions.insurance[:2] == (0.0, 500.0)
        assert assumptions.vacancy_rates[:2] == (0.0, 1.0)

    def test_percentage_expenses_clamped_to_one(self):
        """Test percentage expenses cannot exceed 100%."""
        assumptions = normalize_assumptions(
            {"operating_expense_type": "percentage", "operating_expenses": [1.4, 0.4]}
        )
        assert assumptions.operating_expense_type == ChargeKind.percentage
        assert assumptions.operating_expenses[:2] == (1.0, 0.4)

    def test_recapture_rate_capped(self):
        """Test the recapture rate is capped at 25%."""
        assumptions = normalize_assumptions({"depreciation_recapture_rate": 0.40})
        assert assumptions.depreciation_recapture_rate == 0.25

    def test_blank_recapture_rate_follows_ordinary_rate(self):
        """Test a blank recapture rate defaults to the ordinary rate, capped at 25%."""
        assert normalize_assumptions({"ordinary_income_tax_rate": 0.35}).depreciation_recapture_rate == 0.25
        assert normalize_assumptions({"ordinary_income_tax_rate": 0.20}).depreciation_recapture_rate == 0.20
        assert normalize_assumptions(
            {"ordinary_income_tax_rate": 0.35, "depreciation_recapture_rate": 0}
        ).depreciation_recapture_rate == 0.25
        assert normalize_assumptions({}).depreciation_recapture_rate == 0

        once = normalize_assumptions({"ordinary_income_tax_rate": 0.20})
        assert normalize_assumptions(once) == once


class TestHoldPeriod:
    """Hold period defaults and clamps."""

    @pytest.mark.parametrize(
        "value,expected",
        [(None, 5), ("", 5), (0, 0), (0.4, 1), (3, 3), (7.6, 8), (10, 10), (25, 10), (-3, 1)],
    )
    def test_hold_period(self, value, expected):
        """Test hold period default and bounds."""
        assert normalize_assumptions({"hold_period_years": value}).hold_period_years == expected


class TestFinancing:
    """Financing variant selection and loan sizing."""

    def test_loan_amount_implies_ltv(self):
        """Test a loan amount infers LTV financing."""
        assumptions = normalize_assumptions({"purchase_price": 1000000, "loan_amount": 700000})
        assert isinstance(assumptions.financing, LTVFinancing)
        assert assumptions.financing.loan_amount(1000000, 0) == 700000

    def test_no_loan_implies_cash(self):
        """Test no loan amount infers cash financing."""
        assumptions = normalize_assumptions({"purchase_price": 1000000})
        assert isinstance(assumptions.financing, CashFinancing)
        assert assumptions.financing.loan_amount(1000000, 100000) == 0

    def test_loan_amount_capped_at_price(self):
        """Test the loan never exceeds the purchase price."""
        assumptions = normalize_assumptions(
            {"purchase_price": 1000000, "loan_amount": 1500000, "financing_type": "ltv"}
        )
        assert assumptions.financing.fixed_amount == 1000000

    def test_target_ltv_used_without_fixed_amount(self):
        """Test target LTV sizes the loan when no amount is given."""
        assumptions = normalize_assumptions(
            {"purchase_price": 1000000, "financing_type": "LTV", "target_ltv": 0.65}
        )
        assert assumptions.financing.loan_amount(1000000, 0) == pytest.approx(650000)

    def test_dscr_financing(self):
        """Test DSCR financing keeps its target."""
        assumptions = normalize_assumptions(
            {
                "purchase_price": 2000000,
                "financing_type": "dscr",
                "target_dscr": 1.25,
                "interest_rate": 0.065,
                "amortization_years": 30,
            }
        )
        assert isinstance(assumptions.financing, DSCRFinancing)
        assert assumptions.financing.target_dscr == 1.25

    def test_dscr_loan_capped_at_price(self):
        """Test a DSCR sized loan is capped at the price."""
        financing = DSCRFinancing(target_dscr=1.0)
        assert financing.loan_amount(100000, 1000000) == 100000

    def test_loan_term_defaults_to_amortization(self):
        """Test a blank loan term takes the amortization period."""
        assumptions = normalize_assumptions({"amortization_years": 25})
        assert assumptions.financing.terms.loan_term_years == 25

    def test_switching_to_cash_keeps_terms(self):
        """Test cash financing keeps entered loan terms."""
        assumptions = normalize_assumptions(
            {"financing_type": "cash", "interest_rate": 0.06, "amortization_years": 25}
        )
        assert assumptions.financing.terms.interest_rate == 0.06
        assert assumptions.financing.terms.amortization_years == 25


class TestCharges:
    """Dollar-or-percentage inputs."""

    def test_charge_amount(self):
        """Test dollar and percentage charges resolve against a base."""
        assert Charge(0.02, ChargeKind.percentage).amount(1000000) == pytest.approx(20000)
        assert Charge(15000, ChargeKind.dollar).amount(1000000) == 15000

    def test_blank_type_inferred_from_value(self):
        """Test a blank charge type is inferred from the value."""
        assert normalize_assumptions({"acquisition_costs": 0.03}).acquisition_costs == Charge(
            0.03, ChargeKind.percentage
        )
        assert normalize_assumptions({"acquisition_costs": 30000}).acquisition_costs == Charge(
            30000, ChargeKind.dollar
        )

    def test_percentage_charge_clamped(self):
        """Test percentage charges are clamped to 100%."""
        charge = normalize_assumptions(
            {"loan_costs": 5, "loan_cost_type": "percentage"}
        ).financing.terms.loan_costs
        assert charge == Charge(1.0, ChargeKind.percentage)

    def test_cost_of_sale(self):
        """Test cost of sale as a percentage of the sale price."""
        assumptions = normalize_assumptions(
            {"cost_of_sale_type": "dollar", "cost_of_sale_amount": 40000}
        )
        assert assumptions.cost_of_sale == Charge(40000, ChargeKind.dollar)

        assumptions = normalize_assumptions({"cost_of_sale_percentage": 0.06})
        assert assumptions.cost_of_sale == Charge(0.06, ChargeKind.percentage)


class TestDisposition:
    """Exit price variants."""

    def test_price_implies_dollar(self):
        """Test a disposition price infers a dollar exit."""
        assumptions = normalize_assumptions({"disposition_price": 2500000})
        assert assumptions.disposition == DollarDisposition(price=2500000)

    def test_cap_rate_disposition(self):
        """Test a cap rate exit prices off final NOI."""
        disposition = normalize_assumptions(
            {"disposition_price_type": "caprate", "disposition_cap_rate": 0.08}
        ).disposition
        assert isinstance(disposition, CapRateDisposition)
        assert disposition.sale_price(160000, 1000000) == pytest.approx(2000000)
        assert disposition.exit_cap_rate(160000, 2000000) == 0.08

    def test_unset_exit_sells_at_cost(self):
        """Test a missing exit sells at the purchase price."""
        assert CapRateDisposition().sale_price(100000, 1500000) == 1500000
        assert DollarDisposition().sale_price(100000, 1500000) == 1500000

    def test_dollar_implied_cap_rate(self):
        """Test a dollar exit reports its implied cap rate."""
        assert DollarDisposition(price=2000000).exit_cap_rate(150000, 2000000) == pytest.approx(0.075)


class TestTaxAndDepreciation:
    """Test depreciation defaults and capital improvements."""

    def test_residential_depreciation_default(self):
        """Test residential property depreciates over 27.5 years."""
        assumptions = normalize_assumptions({"property_type": "Residential"})
        assert assumptions.property_type == PropertyType.residential
        assert assumptions.depreciation_years == 27.5

    def test_explicit_depreciation_years(self):
        """Test explicit depreciation years are kept."""
        assumptions = normalize_assumptions({"property_type": "residential", "depreciation_years": 30})
        assert assumptions.depreciation_years == 30

    def test_acquisition_month_clamped(self):
        """Test acquisition month is clamped to 1 through 12."""
        assert normalize_assumptions({"acquisition_month": 14}).acquisition_month == 12
        assert normalize_assumptions({"acquisition_month": 0}).acquisition_month == 1

    def test_capital_improvements(self):
        """Test capital improvements are parsed and clamped."""
        assumptions = normalize_assumptions(
            {
                "capital_improvements": [
                    {"year": 3, "amount": 50000, "description": "Roof", "recovery_period": 15},
                    {"year": 40, "amount": -10},
                    "not an improvement",
                ]
            }
        )
        assert assumptions.capital_improvements == (
            CapitalImprovement(year=3, amount=50000, description="Roof", recovery_period=15),
            CapitalImprovement(year=30, amount=0, description="", recovery_period=None),
        )


class TestValidation:
    """Advisory validation messages."""

    def test_sample_is_valid(self, sample_data):
        """Test the sample deal passes validation."""
        assert validate_assumptions(sample_data) == []

    def test_empty_input(self):
        """Test an empty sheet reports the required fields."""
        errors = validate_assumptions({})
        assert "Purchase price must be greater than 0" in errors
        assert "Year 1 rental income must be greater than 0" in errors
        assert "Hold period must be between 1 and 10 years" in errors

    def test_missing_year_income(self, sample_data):
        """Test Year 1 rent is required."""
        sample_data["potential_rental_income"] = sample_data["potential_rental_income"][:3]
        errors = validate_assumptions(sample_data)
        assert errors == ["Year 4 rental income must be greater than 0"]

    def test_loan_exceeds_price(self, sample_data):
        """Test a loan above the price is reported."""
        sample_data["loan_amount"] = 3000000
        assert "Loan amount cannot exceed purchase price" in validate_assumptions(sample_data)

    def test_dscr_requires_target(self, sample_data):
        """Test DSCR financing requires a target."""
        sample_data["financing_type"] = "dscr"
        assert "Target DSCR must be greater than 0" in validate_assumptions(sample_data)

    def test_land_and_improvements_must_sum(self, sample_data):
        """Test land and improvements must total 100%."""
        sample_data["land_percentage"] = 0.3
        assert "Land % and Improvements % must add up to 100%" in validate_assumptions(sample_data)

    def test_validates_typed_assumptions(self):
        """Test validation accepts typed assumptions."""
        assert validate_assumptions(sample_assumptions()) == []
