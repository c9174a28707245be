"""Tests for the projection API endpoints."""

import json
from urllib.parse import quote

import pytest

HOUSEHOLD = {"current_age": 30, "start_year": 2024, "death_age": 32}


@pytest.fixture
def projected_state(client):
    """State returned by one command applied to a fresh plan."""
    response = client.post(
        "/api/projections/commands",
        json={
            "state": {"household": HOUSEHOLD},
            "command": {
                "kind": "set_amount",
                "item_kind": "asset",
                "book": "personal",
                "item_id": "1",
                "year": 2024,
                "value": 100,
            },
        },
    )
    assert response.status_code == 200
    return json.loads(response.data)["state"]


class TestCreateProjection:
    """Test POST /api/projections."""

    def test_projection_success(self, client):
        """Test a projection with a seeded store."""
        store = {
            "asset": {
                "personal": [{"id": "1", "name": "現金・預金", "amounts": {"2024": 100}}]
            },
            "income": {
                "personal": [
                    {
                        "id": "1",
                        "name": "給与収入",
                        "role": "salary",
                        "amounts": {"2024": 50, "2025": 50, "2026": 50},
                    }
                ]
            },
        }
        response = client.post(
            "/api/projections",
            json={
                "household": HOUSEHOLD,
                "parameters": {"investment_return": 10},
                "store": store,
            },
        )

        assert response.status_code == 200
        data = json.loads(response.data)
        totals = [record["personal_total_assets"] for record in data["cash_flow"]]
        assert totals == [150, 215, 286.5]
        assert [point["year"] for point in data["net_assets"]] == [2024, 2025, 2026]
        assert data["store"]["income"]["personal"][0]["role"] == "salary"

    def test_defaults_when_store_omitted(self, client):
        """Test that the default items are used without a store."""
        response = client.post(
            "/api/projections",
            json={
                "household": {**HOUSEHOLD, "monthly_living_expense": 10},
                "parameters": {"investment_return": 0},
            },
        )

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["cash_flow"][0]["living_expense"] == 120
        assert data["cash_flow"][0]["personal_total_assets"] == -120

    def test_invalid_household(self, client):
        """Test that validation errors return 400 with details."""
        response = client.post(
            "/api/projections",
            json={"household": {"current_age": 50, "death_age": 40}},
        )

        assert response.status_code == 400
        data = json.loads(response.data)
        assert data["error"] == "Invalid input"
        assert "Death age" in data["details"][0]["msg"]

    def test_invalid_parameters(self, client):
        """Test that out-of-range rates are rejected."""
        response = client.post(
            "/api/projections",
            json={"household": HOUSEHOLD, "parameters": {"inflation_rate": -1}},
        )

        assert response.status_code == 400
        assert json.loads(response.data)["details"][0]["loc"] == ["inflation_rate"]

    def test_horizon_limit(self, app, client):
        """Test that the configured horizon limit is enforced."""
        app.config["MAX_HORIZON_YEARS"] = 2

        response = client.post("/api/projections", json={"household": HOUSEHOLD})

        assert response.status_code == 400
        assert "exceeds the maximum" in json.loads(response.data)["error"]


class TestApplyCommand:
    """Test POST /api/projections/commands."""

    def test_command_returns_recomputed_state(self, projected_state):
        """Test the state returned by a command."""
        records = projected_state["cash_flow"]["records"]

        totals = [record["personal_total_assets"] for record in records]
        assert totals == pytest.approx([100, 103, 106.1])
        assert projected_state["history"]["entries"][0]["new_value"] == 100

    def test_state_round_trips(self, client, projected_state):
        """Test that a returned state is accepted by the next command."""
        response = client.post(
            "/api/projections/commands",
            json={
                "state": projected_state,
                "command": {"kind": "set_parameters", "changes": {"investment_return": 0}},
            },
        )

        assert response.status_code == 200
        state = json.loads(response.data)["state"]
        totals = [r["personal_total_assets"] for r in state["cash_flow"]["records"]]
        assert totals == [100, 100, 100]
        assert len(state["history"]["entries"]) == 1

    def test_missing_item_returns_404(self, client, projected_state):
        """Test edits of an unknown item id."""
        response = client.post(
            "/api/projections/commands",
            json={
                "state": projected_state,
                "command": {
                    "kind": "remove_item",
                    "item_kind": "liability",
                    "book": "corporate",
                    "item_id": "9",
                },
            },
        )

        assert response.status_code == 404
        assert "'9'" in json.loads(response.data)["error"]

    def test_unknown_command_kind(self, client, projected_state):
        """Test that unknown command kinds are invalid input."""
        response = client.post(
            "/api/projections/commands",
            json={"state": projected_state, "command": {"kind": "merge_plans"}},
        )

        assert response.status_code == 400
        assert json.loads(response.data)["error"] == "Invalid input"


class TestExportProjection:
    """Test POST /api/projections/export."""

    def test_csv_attachment(self, client):
        """Test the CSV body and download headers."""
        response = client.post("/api/projections/export", json={"household": HOUSEHOLD})

        assert response.status_code == 200
        assert response.headers["Content-Type"] == "text/csv; charset=utf-8"
        disposition = response.headers["Content-Disposition"]
        assert disposition.startswith('attachment; filename="cashflow.csv"')
        assert quote("キャッシュフロー_") in disposition

        body = response.data.decode("utf-8")
        assert body.startswith("\ufeff")
        lines = body.lstrip("\ufeff").split("\n")
        assert lines[0].startswith('"年度","年齢"')
        assert len(lines) == 4

    def test_csv_without_bom(self, app, client):
        """Test the BOM setting."""
        app.config["CSV_INCLUDE_BOM"] = False

        response = client.post("/api/projections/export", json={"household": HOUSEHOLD})

        assert not response.data.decode("utf-8").startswith("\ufeff")

    def test_invalid_export_request(self, client):
        """Test validation errors on export."""
        response = client.post(
            "/api/projections/export",
            json={"household": {"current_age": 50, "death_age": 40}},
        )

        assert response.status_code == 400
