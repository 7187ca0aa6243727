"""
Tests for calculator and pro forma API endpoints.
"""

import pytest

from propfolio import main
from propfolio.api.calculations import build_calculator_registry, get_calculator_registry, json_safe
from propfolio.main import app

# Client fixture is provided by conftest.py


class TestHealth:
    """Test the health endpoint and server entry point."""

    def test_health_check(self, client):
        """Test the health endpoint reports healthy."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_run_uses_configured_host_and_port(self, monkeypatch):
        """Test the server entry point passes host and port from settings."""
        calls = []
        monkeypatch.setattr(main.uvicorn, "run", lambda app_path, **kwargs: calls.append((app_path, kwargs)))

        main.run()

        assert len(calls) == 1
        app_path, kwargs = calls[0]
        assert app_path == "propfolio.main:app"
        assert kwargs["host"] == main.settings.host
        assert kwargs["port"] == main.settings.port


class TestCalculatorRegistry:
    """Test the calculator lookup table."""

    def test_registry_is_read_only(self):
        """Test the registry cannot be modified."""
        registry = build_calculator_registry()
        with pytest.raises(TypeError):
            registry["custom"] = registry["noi"]

    def test_list_calculators(self, client):
        """Test calculators are listed in registry order."""
        response = client.get("/api/calculate/calculators")
        assert response.status_code == 200
        ids = [calculator["id"] for calculator in response.json()]
        assert ids == ["amortization", "dscr", "max-loan", "irr-npv", "cap-rate", "noi", "tvm"]

    def test_unknown_calculator(self, client):
        """Test an unknown calculator id returns 404."""
        response = client.post("/api/calculate/calculators/unknown", json={})
        assert response.status_code == 404

    def test_registry_dependency_override(self, client):
        """Test the registry can be swapped through dependency overrides."""
        registry = build_calculator_registry()
        app.dependency_overrides[get_calculator_registry] = lambda: {"noi": registry["noi"]}
        try:
            response = client.get("/api/calculate/calculators")
            assert [calculator["id"] for calculator in response.json()] == ["noi"]
        finally:
            app.dependency_overrides.clear()

    def test_json_safe(self):
        """Test non-finite floats serialize as null."""
        assert json_safe({"a": float("inf"), "b": [1.0, float("nan")]}) == {"a": None, "b": [1.0, None]}


class TestCalculatorEndpoints:
    """Test each standalone calculator through the API."""

    def test_dscr(self, client):
        """Test DSCR from a direct debt service figure."""
        response = client.post(
            "/api/calculate/calculators/dscr",
            json={"noi": 150000, "annual_debt_service": 100000},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["dscr"] == pytest.approx(1.5)
        assert data["risk_level"] == "Low"

    def test_dscr_with_loan_summary(self, client):
        """Test DSCR from loan details includes a loan summary."""
        response = client.post(
            "/api/calculate/calculators/dscr",
            json={
                "noi": 120000,
                "loan_amount": 1000000,
                "interest_rate": 0.06,
                "loan_term_years": 10,
                "amortization_years": 30,
            },
        )
        assert response.status_code == 200
        assert response.json()["loan_summary"]["loan_term_years"] == 10

    def test_dscr_validation_errors(self, client):
        """Test validation messages come back as a 400 list."""
        response = client.post("/api/calculate/calculators/dscr", json={"noi": 150000})
        assert response.status_code == 400
        assert isinstance(response.json()["detail"], list)

    def test_malformed_payload(self, client):
        """Test a wrongly typed field returns 422."""
        response = client.post("/api/calculate/calculators/noi", json={"gross_rental_income": "lots"})
        assert response.status_code == 422

    def test_max_loan(self, client):
        """Test the max loan meets the target DSCR."""
        response = client.post(
            "/api/calculate/calculators/max-loan",
            json={"noi": 150000, "target_dscr": 1.25, "interest_rate": 0.065, "amortization_years": 30},
        )
        assert response.status_code == 200
        assert response.json()["dscr"] == pytest.approx(1.25)

    def test_irr_npv_uses_default_discount_rate(self, client):
        """Test NPV falls back to the configured discount rate."""
        response = client.post(
            "/api/calculate/calculators/irr-npv",
            json={
                "cash_flows": [
                    {"period": 0, "amount": -100000},
                    {"period": 1, "amount": 110000},
                ]
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["discount_rate"] == 0.10
        assert data["irr"] == pytest.approx(0.10, abs=1e-6)

    def test_cap_rate(self, client):
        """Test cap rate, target value and sensitivity grid."""
        response = client.post(
            "/api/calculate/calculators/cap-rate",
            json={"noi": 150000, "price": 2000000, "target_cap_rate": 0.06},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["cap_rate_percentage"] == "7.50%"
        assert data["value_from_cap_rate"] == pytest.approx(2500000)
        assert len(data["sensitivity"]) == 17

    def test_noi(self, client):
        """Test NOI and its waterfall."""
        response = client.post(
            "/api/calculate/calculators/noi",
            json={"gross_rental_income": 240000, "vacancy_rate": 0.05, "operating_expenses": 90000},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["net_operating_income"] == pytest.approx(138000)
        assert len(data["waterfall"]) == 4

    def test_tvm(self, client):
        """Test future value with a growth timeline."""
        response = client.post(
            "/api/calculate/calculators/tvm",
            json={"interest_rate": 0.10, "periods": 2, "present_value": 1000},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["future_value"] == pytest.approx(1210)
        assert data["timeline"][-1]["value"] == pytest.approx(1210)

    def test_tvm_unknown_target(self, client):
        """Test an unknown solve target returns 400."""
        response = client.post(
            "/api/calculate/calculators/tvm",
            json={"interest_rate": 0.10, "periods": 2, "present_value": 1000, "solve_for": "rate"},
        )
        assert response.status_code == 400

    def test_tvm_total_loss_rate_rejected(self, client):
        """Test a -100% rate returns 400 instead of failing."""
        for payload in (
            {"interest_rate": -1, "periods": 5, "future_value": 1000},
            {"interest_rate": -1, "periods": 5, "present_value": 1000, "solve_for": "payment"},
        ):
            response = client.post("/api/calculate/calculators/tvm", json=payload)
            assert response.status_code == 400
            assert response.json()["detail"] == [
                "Interest rate must be greater than -100% and at most 100%"
            ]


class TestCalculationsAPI:
    """Test direct calculation endpoints."""

    def test_calculate_irr(self, client):
        """Test IRR, multiple and profit for periodic flows."""
        response = client.post(
            "/api/calculate/irr",
            json={"cash_flows": [-100000, 10000, 10000, 10000, 10000, 110000]},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["irr"] == pytest.approx(0.10, abs=1e-6)
        assert data["multiple"] == pytest.approx(1.5)
        assert data["profit"] == 50000

    def test_calculate_irr_unsolvable(self, client):
        """Test an unsolvable IRR comes back as null."""
        response = client.post("/api/calculate/irr", json={"cash_flows": [100, 100]})
        assert response.status_code == 200
        assert response.json()["irr"] is None

    def test_calculate_irr_empty(self, client):
        """Test empty cash flows return 400."""
        response = client.post("/api/calculate/irr", json={"cash_flows": []})
        assert response.status_code == 400

    def test_calculate_amortization(self, client):
        """Test a 30 year schedule with payment dates."""
        response = client.post(
            "/api/calculate/amortization",
            json={
                "loan_amount": 800000,
                "interest_rate": 0.065,
                "loan_term_years": 30,
                "start_date": "2025-01-01",
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert abs(len(data["schedule"]) - 360) <= 1
        assert data["schedule"][0]["date"] == "2025-01-01"

    def test_calculate_amortization_invalid(self, client):
        """Test a zero loan amount returns 400."""
        response = client.post(
            "/api/calculate/amortization",
            json={"loan_amount": 0, "interest_rate": 0.065, "loan_term_years": 30},
        )
        assert response.status_code == 400


class TestProFormaAPI:
    """Test pro forma endpoints."""

    def test_run_sample(self, client, sample_data):
        """Test the sample deal end to end."""
        response = client.post("/api/calculate/proforma", json=sample_data)
        assert response.status_code == 200
        data = response.json()

        assert data["errors"] == []
        assert data["completion"]["sale_analysis_ready"] is True
        assert data["assumptions"]["financing_type"] == "ltv"
        assert len(data["results"]["annual_cashflows"]) == 10
        assert data["results"]["loan_amount"] == 1400000
        assert data["results"]["irr"] > 0

    def test_empty_sheet_does_not_fail(self, client):
        """Test an empty sheet returns results and errors, not a failure."""
        response = client.post("/api/calculate/proforma", json={})
        assert response.status_code == 200
        data = response.json()
        assert data["results"]["irr"] is None
        assert "Purchase price must be greater than 0" in data["errors"]

    def test_validate(self, client):
        """Test validation and progress for a partial sheet."""
        response = client.post("/api/calculate/proforma/validate", json={"purchase_price": 1000000})
        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is False
        assert data["completion"]["input_sheet_progress"] > 0

    def test_metrics(self, client, sample_data):
        """Test investment metrics with an explicit discount rate."""
        response = client.post(
            "/api/calculate/proforma/metrics", params={"discount_rate": 0.08}, json=sample_data
        )
        assert response.status_code == 200
        data = response.json()
        assert data["discount_rate"] == 0.08
        assert data["unlevered_irr"] > 0
        assert data["sensitivity"]["exit_cap"]["plus_50bps"] < data["irr"]

    def test_metrics_cash_deal_serializes(self, client, cash_deal):
        """Test an infinite DSCR serializes as null."""
        response = client.post("/api/calculate/proforma/metrics", json=cash_deal)
        assert response.status_code == 200
        assert response.json()["year1_dscr"] is None

    def test_export_csv(self, client, cash_deal):
        """Test the CSV download headers and content."""
        response = client.post("/api/calculate/proforma/export", json=cash_deal)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "proforma.csv" in response.headers["content-disposition"]
        assert "Net Operating Income" in response.text

    def test_sample(self, client):
        """Test the sample assumptions endpoint."""
        response = client.get("/api/calculate/proforma/sample")
        assert response.status_code == 200
        assumptions = response.json()["assumptions"]
        assert assumptions["purchase_price"] == 2000000
        assert len(assumptions["potential_rental_income"]) == 30
