"""
Tests for the calculator API, preset API and HTML pages.
"""

import json

import pytest

# Database setup and the client fixture are handled by conftest.py


@pytest.fixture
def regular_preset(client):
    response = client.post(
        "/api/presets/",
        json={
            "name": "Reference loan",
            "type": "regular",
            "data": {
                "price": 700000,
                "deposit": 100000,
                "rate": 5.59,
                "termYears": 30,
                "frequency": "monthly",
                "ageOfMortgage": "5",
            },
        },
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def split_preset(client):
    response = client.post(
        "/api/presets/",
        json={
            "name": "Shared house",
            "type": "split",
            "data": {
                "price": 700000,
                "person1Deposit": 50000,
                "person2Deposit": 50000,
                "person1RepaymentShare": 0.5,
                "rate": 5.59,
                "termYears": 30,
                "frequency": "monthly",
                "ageOfMortgage": {"_type": "5", "_ageYears": 5},
                "salePrice": 800000,
            },
        },
    )
    assert response.status_code == 201
    return response.json()


class TestCalculationEndpoints:
    """Test the JSON calculator endpoints."""

    def test_mortgage(self, client):
        response = client.post(
            "/api/calculate/mortgage",
            json={
                "price": 500000,
                "deposit": 100000,
                "rate": 5.59,
                "term_years": 30,
                "frequency": "monthly",
                "age_of_mortgage": "5",
                "sale_price": 600000,
            },
        )
        assert response.status_code == 200
        data = response.json()

        assert data["age_of_mortgage"] == "5"
        assert data["age_label"] == "year 5"
        assert data["validation_errors"] == {}
        assert abs(data["results"]["payment_per_period"] - 2293.79) < 0.01
        assert abs(data["results"]["remaining_balance_at_point"] - 370281.06) < 0.05
        assert abs(data["sale"]["net_proceeds"] - (600000 - 370281.06)) < 0.05

    def test_mortgage_defaults(self, client):
        response = client.post("/api/calculate/mortgage", json={"price": 500000, "rate": 5.59})
        assert response.status_code == 200
        data = response.json()
        assert data["age_of_mortgage"] == "first"
        assert data["results"]["loan_amount"] == 500000
        assert data["results"]["periods_elapsed"] == 1

    def test_mortgage_reports_validation_errors(self, client):
        response = client.post(
            "/api/calculate/mortgage",
            json={"price": 300000, "deposit": 400000, "rate": 5.59, "age_of_mortgage": "35"},
        )
        assert response.status_code == 200
        data = response.json()

        assert data["validation_errors"]["deposit"] == "Deposit cannot exceed house price"
        assert "age_of_mortgage" in data["validation_errors"]
        assert data["results"]["loan_amount"] == 0
        assert data["results"]["point_in_range"] is False

    def test_unknown_age_rejected(self, client):
        response = client.post(
            "/api/calculate/mortgage",
            json={"price": 500000, "rate": 5.59, "age_of_mortgage": "someday"},
        )
        assert response.status_code == 400

    def test_unknown_frequency_rejected(self, client):
        response = client.post(
            "/api/calculate/mortgage",
            json={"price": 500000, "rate": 5.59, "frequency": "daily"},
        )
        assert response.status_code == 422

    def test_split_mortgage(self, client):
        response = client.post(
            "/api/calculate/split-mortgage",
            json={
                "price": 700000,
                "person1_deposit": 50000,
                "person2_deposit": 50000,
                "person1_repayment_share": 0.5,
                "rate": 5.59,
                "term_years": 30,
                "age_of_mortgage": {"type": "custom", "ageYears": 5},
                "sale_price": 800000,
            },
        )
        assert response.status_code == 200
        data = response.json()

        assert data["age_of_mortgage"] == "5"
        assert data["results"]["loan_amount"] == 600000
        assert data["person1"]["equity_share"] == 0.5
        assert data["person2"]["equity_share"] == 0.5
        assert data["person1"]["sale"]["proceeds"] == data["person2"]["sale"]["proceeds"]
        assert data["person1"]["total_paid_up_to_point"] > 0

    def test_schedule(self, client):
        response = client.post(
            "/api/calculate/schedule",
            json={"loan_amount": 400000, "rate": 5.59, "term_years": 30, "frequency": "yearly"},
        )
        assert response.status_code == 200
        data = response.json()

        assert len(data["schedule"]) == 30
        assert len(data["annual_summary"]) == 30
        assert abs(data["total_principal"] - 400000) < 0.5

    def test_mortgage_huge_term_clamped(self, client):
        response = client.post(
            "/api/calculate/mortgage",
            json={"price": 500000, "deposit": 100000, "rate": 5.59, "term_years": 1e308},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["results"]["total_periods"] == 480
        assert "term_years" in data["validation_errors"]

    def test_schedule_huge_term_clamped(self, client):
        response = client.post(
            "/api/calculate/schedule",
            json={"loan_amount": 400000, "rate": 5.59, "term_years": 1e308, "frequency": "weekly"},
        )
        assert response.status_code == 200
        assert len(response.json()["schedule"]) == 2080


class TestPresetEndpoints:
    """Test the preset API."""

    def test_list_presets(self, client, regular_preset, split_preset):
        data = client.get("/api/presets/").json()
        assert data["total"] == 2

        data = client.get("/api/presets/", params={"type": "split"}).json()
        assert data["total"] == 1
        assert data["presets"][0]["name"] == "Shared house"

    def test_get_preset(self, client, split_preset):
        response = client.get(f"/api/presets/{split_preset['id']}")
        assert response.status_code == 200
        assert response.json()["data"]["ageOfMortgage"] == {"_type": "5", "_ageYears": 5}

    def test_get_missing_preset(self, client):
        assert client.get("/api/presets/missing").status_code == 404

    def test_create_invalid_type(self, client):
        response = client.post(
            "/api/presets/",
            json={
                "name": "Bad",
                "type": "joint",
                "data": {"price": 1, "rate": 1, "termYears": 1, "frequency": "monthly", "ageOfMortgage": "first"},
            },
        )
        assert response.status_code == 400

    def test_update_preset(self, client, regular_preset):
        response = client.put(f"/api/presets/{regular_preset['id']}", json={"name": "Renamed"})
        assert response.status_code == 200
        assert response.json()["name"] == "Renamed"
        assert client.put("/api/presets/missing", json={"name": "x"}).status_code == 404

    def test_delete_preset(self, client, regular_preset):
        assert client.delete(f"/api/presets/{regular_preset['id']}").status_code == 200
        assert client.delete(f"/api/presets/{regular_preset['id']}").status_code == 404

    def test_clear_presets(self, client, regular_preset, split_preset):
        assert client.delete("/api/presets/").json() == {"deleted": 2}
        assert client.get("/api/presets/").json()["total"] == 0

    def test_preset_results(self, client, regular_preset, split_preset):
        data = client.get(f"/api/presets/{regular_preset['id']}/results").json()
        assert abs(data["results"]["payment_per_period"] - 3440.69) < 0.01

        data = client.get(f"/api/presets/{split_preset['id']}/results").json()
        assert data["person1"]["equity_share"] == 0.5

    def test_export_import(self, client, regular_preset, split_preset):
        response = client.get("/api/presets/export")
        assert response.status_code == 200
        assert "attachment" in response.headers["content-disposition"]
        exported = response.json()

        client.delete("/api/presets/")
        response = client.post("/api/presets/import", content=json.dumps(exported))
        assert response.json() == {"imported": 2}
        assert client.get("/api/presets/export").json() == exported

    def test_import_invalid(self, client):
        response = client.post("/api/presets/import", content="not json")
        assert response.status_code == 400


class TestPages:
    """Test the HTML calculator pages."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_index(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "Split mortgage calculator" in response.text

    def test_mortgage_page_defaults(self, client):
        response = client.get("/calculators/mortgage")
        assert response.status_code == 200
        assert "Mortgage calculator" in response.text
        assert "$400,000.00" in response.text

    def test_mortgage_page_inputs(self, client):
        response = client.get(
            "/calculators/mortgage",
            params={
                "price": "700,000",
                "deposit": "100000",
                "rate": "5.59",
                "term_years": "30",
                "frequency": "monthly",
                "age_of_mortgage": "5",
                "show_schedule": "1",
            },
        )
        assert response.status_code == 200
        assert "$3,440.69" in response.text
        assert "Yearly schedule" in response.text

    def test_mortgage_page_shows_errors(self, client):
        response = client.get(
            "/calculators/mortgage", params={"price": "300000", "deposit": "400000"}
        )
        assert response.status_code == 200
        assert "Deposit cannot exceed house price" in response.text

    def test_mortgage_page_huge_term(self, client):
        response = client.get(
            "/calculators/mortgage", params={"term_years": "1e308", "age_of_mortgage": "30"}
        )
        assert response.status_code == 200
        assert "Term must be between 1 and 40 years" in response.text

    def test_mortgage_page_unknown_age(self, client):
        response = client.get("/calculators/mortgage", params={"age_of_mortgage": "later"})
        assert response.status_code == 200
        assert "Unknown age of mortgage" in response.text

    def test_split_page_with_preset(self, client, split_preset):
        response = client.get("/calculators/split-mortgage", params={"preset": split_preset["id"]})
        assert response.status_code == 200
        assert "Shared house" in response.text
        assert "50.00%" in response.text

    def test_page_missing_preset(self, client):
        response = client.get("/calculators/mortgage", params={"preset": "missing"})
        assert response.status_code == 404

    def test_save_and_delete_preset_from_form(self, client):
        response = client.post(
            "/calculators/presets",
            data={
                "name": "From form",
                "preset_type": "split",
                "price": "600000",
                "person1_deposit": "40000",
                "person2_deposit": "60000",
                "person1_repayment_share": "0.4",
                "rate": "6",
                "term_years": "25",
                "frequency": "weekly",
                "age_of_mortgage": "10",
                "sale_price": "0",
            },
            follow_redirects=False,
        )
        assert response.status_code == 303
        assert response.headers["location"].startswith("/calculators/split-mortgage?preset=")

        presets = client.get("/api/presets/", params={"type": "split"}).json()["presets"]
        assert len(presets) == 1
        preset = presets[0]
        assert preset["name"] == "From form"
        assert preset["data"]["person1RepaymentShare"] == 0.4
        assert preset["data"]["ageOfMortgage"] == "10"

        response = client.post(
            f"/calculators/presets/{preset['id']}/delete",
            data={"preset_type": "split"},
            follow_redirects=False,
        )
        assert response.status_code == 303
        assert client.get("/api/presets/").json()["total"] == 0
