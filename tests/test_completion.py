"""
Tests for input sheet completion tracking.
"""

from propfolio.calculations.assumptions import sample_assumptions
from propfolio.calculations.completion import (
    SectionStatus,
    calculate_input_sheet_progress,
    calculate_overall_progress,
    get_completion_state,
    get_section_status,
    is_financing_complete,
    is_property_income_complete,
    is_tax_exit_complete,
)


class TestSections:
    """Test section completeness checks."""

    def test_sample_is_complete(self, sample_data):
        """Test the sample deal completes every section."""
        state = get_completion_state(sample_data)

        assert state.property_income_complete
        assert state.financing_complete
        assert state.tax_exit_complete
        assert state.cashflows_ready
        assert state.sale_analysis_ready
        assert state.overall_progress == 100
        assert state.input_sheet_progress == 100

    def test_typed_assumptions_accepted(self):
        """Test completion accepts typed assumptions."""
        assert get_completion_state(sample_assumptions()).sale_analysis_ready

    def test_empty_sheet(self):
        """Test an empty sheet has no complete sections."""
        state = get_completion_state({})

        assert not state.property_income_complete
        assert not state.financing_complete
        assert not state.tax_exit_complete
        assert state.overall_progress == 0
        assert state.input_sheet_progress == 0

    def test_property_income_requires_year_one_rent(self, sample_data):
        """Test property and income needs Year 1 rent."""
        sample_data["potential_rental_income"] = [0, 250000]
        assert not is_property_income_complete(sample_data)

    def test_cash_financing_is_complete(self):
        """Test cash financing needs no loan terms."""
        assert is_financing_complete({"financing_type": "cash"})

    def test_dscr_financing_requires_target(self, sample_data):
        """Test DSCR financing needs a target DSCR."""
        sample_data["financing_type"] = "dscr"
        assert not is_financing_complete(sample_data)

        sample_data["target_dscr"] = 1.25
        assert is_financing_complete(sample_data)

    def test_ltv_financing_accepts_target_or_amount(self, sample_data):
        """Test LTV financing accepts a target or an amount."""
        sample_data["loan_amount"] = None
        assert is_financing_complete(sample_data)

        sample_data["target_ltv"] = None
        assert not is_financing_complete(sample_data)

    def test_tax_exit_requires_exit_value(self, sample_data):
        """Test the tax and exit section needs an exit value."""
        sample_data["disposition_cap_rate"] = None
        assert not is_tax_exit_complete(sample_data)

        sample_data["disposition_price_type"] = "dollar"
        sample_data["disposition_price"] = 2500000
        assert is_tax_exit_complete(sample_data)

    def test_zero_tax_rates_count_as_entered(self, sample_data):
        """Test zero tax rates count as entered."""
        sample_data["ordinary_income_tax_rate"] = 0
        assert is_tax_exit_complete(sample_data)


class TestProgress:
    """Test progress scoring."""

    def test_overall_progress_thirds(self, sample_data):
        """Test overall progress with one of three sections complete."""
        sample_data["financing_type"] = None
        sample_data["disposition_price_type"] = None
        assert calculate_overall_progress(sample_data) == 33

    def test_cash_deal_earns_financing_points(self):
        """Test a cash deal earns the financing points."""
        assert calculate_input_sheet_progress({"financing_type": "cash"}) == 29

    def test_partial_loan_terms(self):
        """Test partial loan terms earn partial points."""
        progress = calculate_input_sheet_progress({"financing_type": "ltv", "interest_rate": 0.06})
        assert progress == 12


class TestSectionStatus:
    """Test navigation status per section."""

    def test_viewed_wins(self):
        """Test a viewed section reports viewed."""
        assert get_section_status("sale", {}, {"sale"}) == SectionStatus.viewed

    def test_input_sheet_status(self, sample_data):
        """Test input sheet status follows completion."""
        assert get_section_status("input-sheet", {}) == SectionStatus.locked
        assert get_section_status("input-sheet", {"purchase_price": 1}) == SectionStatus.ready
        assert get_section_status("input-sheet", sample_data) == SectionStatus.complete

    def test_downstream_sections(self, sample_data):
        """Test downstream sections unlock when ready."""
        assert get_section_status("cashflows", {}) == SectionStatus.locked
        assert get_section_status("cashflows", sample_data) == SectionStatus.ready
        assert get_section_status("sale", sample_data) == SectionStatus.ready

    def test_unknown_section_locked(self, sample_data):
        """Test an unknown section is locked."""
        assert get_section_status("reports", sample_data) == SectionStatus.locked

    def test_state_serializes(self, sample_data):
        """Test completion state converts to a dict."""
        data = get_completion_state(sample_data).to_dict()
        assert data["overall_progress"] == 100
        assert data["sale_analysis_ready"] is True
