"""Tests for the HTTP API."""

import pandas as pd
import pytest
from fastapi.testclient import TestClient

from zoodiet.ingest.schemas import SHEET_COLUMNS
from zoodiet.main import app
from zoodiet.session import SessionState

LION_ID = "Main Zoo|Lion Enclosure|Asiatic Lion|07:00 am|Beef"


def feeding_rows():
    """Two lions on 0.5 kg beef, one tiger on 2 kg beef and a lemur on a recipe."""
    base = {
        "site_name": "Main Zoo",
        "common_name": "Asiatic Lion",
        "scientific_name": "Panthera leo persica",
        "user_enclosure_name": "Lion Enclosure",
        "Feed type name": "Meat",
        "type": "Ingredient",
        "ingredient_name": "Beef",
        "group_name": "Carnivores",
        "ingredient_qty": 0.5,
        "base_uom_name": "kg",
        "ingredient_qty_gram": 500,
        "meal_start_time": "07:00 am",
        "feeding_date": "2025-03-23",
    }
    lemur = {
        **base,
        "animal_id": "L1",
        "common_name": "Ring-tailed Lemur",
        "scientific_name": "Lemur catta",
        "user_enclosure_name": "Lemur Island",
        "Feed type name": "Fruits",
        "type": "Recipe",
        "type_name": "Fruit Salad Mix",
        "group_name": "Primates",
    }
    return [
        {**base, "animal_id": "A1"},
        {**base, "animal_id": "A2"},
        {
            **base,
            "animal_id": "T1",
            "common_name": "Bengal Tiger",
            "user_enclosure_name": "Tiger Enclosure",
            "ingredient_qty": 2,
            "ingredient_qty_gram": 2000,
        },
        {**lemur, "ingredient_name": "Apple", "ingredient_qty": 0.1, "ingredient_qty_gram": 100},
        {**lemur, "ingredient_name": "Banana", "ingredient_qty": 0.3, "ingredient_qty_gram": 300},
    ]


def csv_upload(rows):
    frame = pd.DataFrame([{c: row.get(c) for c in SHEET_COLUMNS} for row in rows])
    return {"file": ("feeding.csv", frame.to_csv(index=False).encode(), "text/csv")}


@pytest.fixture
def client():
    app.state.session = SessionState()
    return TestClient(app)


@pytest.fixture
def loaded_client(client):
    response = client.post("/api/v1/uploads", files=csv_upload(feeding_rows()))
    assert response.status_code == 201
    return client


class TestUploads:
    """Tests for upload, reset and journal endpoints."""

    def test_upload(self, client):
        response = client.post("/api/v1/uploads", files=csv_upload(feeding_rows()))

        assert response.status_code == 201
        data = response.json()
        assert data["filename"] == "feeding.csv"
        assert data["row_count"] == 5
        assert data["site_count"] == 1
        assert data["packing_items"] == 3

    def test_bad_upload(self, client):
        """Test unreadable sheets are a 400 and land in the journal."""
        files = {"file": ("notes.csv", b"hello,world\n1,2\n", "text/csv")}
        response = client.post("/api/v1/uploads", files=files)

        assert response.status_code == 400
        assert "header row" in response.json()["detail"]

        journal = client.get("/api/v1/journal").json()
        assert journal[0]["title"] == "Upload Failed"

    def test_reports_need_data(self, client):
        assert client.get("/api/v1/reports/diet").status_code == 409
        assert client.get("/api/v1/packing").status_code == 409

    def test_reset(self, loaded_client):
        assert loaded_client.delete("/api/v1/uploads").status_code == 204
        assert loaded_client.get("/api/v1/reports/diet").status_code == 409

        titles = [entry["title"] for entry in loaded_client.get("/api/v1/journal").json()]
        assert titles == ["Session Reset", "Spreadsheet Uploaded"]


class TestReportEndpoints:
    """Tests for the report endpoints."""

    def test_diet_report(self, loaded_client):
        data = loaded_client.get("/api/v1/reports/diet").json()

        assert data["report_date"] == "2025-03-23"
        assert data["groups"] == ["Carnivores", "Primates"]
        (site,) = data["sites"]
        (meal,) = site["meals"]
        lions = meal["diets"][0]
        assert lions["total_animal_count"] == 2
        assert lions["verification"] == "unchecked"
        assert lions["items"][0]["amount_per_animal"] == "500 gram"
        assert lions["items"][0]["total_amount_required"] == "1.00 kilogram"

    def test_verify(self, loaded_client):
        diet = loaded_client.get("/api/v1/reports/diet").json()["sites"][0]["meals"][0]["diets"][1]
        body = {
            "site_name": "Main Zoo",
            "meal_time": "07:00 am",
            "signature": diet["signature"],
            "status": "not-ok",
            "reason": "too much beef",
        }
        response = loaded_client.post("/api/v1/reports/diet/verify", json=body)

        assert response.status_code == 200
        assert response.json()["reason"] == "too much beef"
        diet = loaded_client.get("/api/v1/reports/diet").json()["sites"][0]["meals"][0]["diets"][1]
        assert diet["verification"] == "not-ok"

    def test_summary(self, loaded_client):
        data = loaded_client.get("/api/v1/reports/summary").json()
        assert data["grand_total"] == "3.4 kg"
        assert data["sites"][0]["site_name"] == "Main Zoo"

    def test_requirements(self, loaded_client):
        data = loaded_client.get("/api/v1/reports/requirements", params={"ingredient": "Beef"}).json()
        assert data == [
            {"ingredient_name": "Beef", "kilograms": 3.0, "pieces": 0.0, "litres": 0.0, "display": "3 kg"}
        ]

    def test_breakups(self, loaded_client):
        breakup = loaded_client.get("/api/v1/reports/breakup").json()
        assert [row["ingredient_name"] for row in breakup] == ["Apple", "Banana", "Beef"]

        groups = loaded_client.get("/api/v1/reports/meal-groups", params={"lead": "group"}).json()
        assert [row["row_span"] for row in groups] == [1, 2, 0]

    def test_recipes(self, loaded_client):
        assert loaded_client.get("/api/v1/reports/recipes").json() == ["Fruit Salad Mix"]

        data = loaded_client.get("/api/v1/reports/recipes/Fruit Salad Mix").json()
        assert data["grand_total"] == "400 g"
        assert [i["ingredient_name"] for i in data["ingredients"]] == ["Banana", "Apple"]

        assert loaded_client.get("/api/v1/reports/recipes/Nothing").status_code == 404

    def test_pivot(self, loaded_client):
        data = loaded_client.get("/api/v1/reports/pivot", params={"common_name": "tiger"}).json()
        assert data["unit_columns"] == ["kg"]
        assert len(data["rows"]) == 1

    def test_dashboard(self, loaded_client):
        data = loaded_client.get("/api/v1/reports/dashboard").json()
        assert data["animal_count"] == 4
        assert data["top_ingredients"][0] == {"name": "Beef", "value": 3.0}

    def test_diet_summary(self, loaded_client):
        data = loaded_client.get("/api/v1/reports/diet-summary/Ring-tailed Lemur").json()
        assert data["diet_data"][0]["quantity"] == "400 gram"
        assert loaded_client.get("/api/v1/reports/diet-summary/Dodo").status_code == 404


class TestPackingEndpoints:
    """Tests for the packing endpoints."""

    def test_list(self, loaded_client):
        entries = loaded_client.get("/api/v1/packing").json()

        assert [e["common_name"] for e in entries] == ["Ring-tailed Lemur", "Asiatic Lion", "Bengal Tiger"]
        assert entries[1]["id"] == LION_ID
        assert entries[1]["status"] == "Pending"
        assert entries[1]["total"] == "1.00 kg"

    def test_slot_filter(self, loaded_client):
        assert loaded_client.get("/api/v1/packing", params={"slot": "evening"}).json() == []

    def test_toggle_and_stats(self, loaded_client):
        response = loaded_client.post("/api/v1/packing/toggle", json={"id": LION_ID})
        assert response.json() == {"id": LION_ID, "status": "Packed"}

        stats = loaded_client.get("/api/v1/packing/stats").json()
        assert stats["total"] == 3
        assert stats["status_counts"]["Packed"] == 1
        assert stats["site_distribution"]["Main Zoo"]["Pending"] == 2

    def test_set_status(self, loaded_client):
        body = {"id": LION_ID, "status": "Dispatched"}
        assert loaded_client.post("/api/v1/packing/status", json=body).json()["status"] == "Dispatched"

    def test_unknown_id(self, loaded_client):
        response = loaded_client.post("/api/v1/packing/toggle", json={"id": "nowhere"})
        assert response.status_code == 404
