"""
Integration Tests for the FastAPI Backend

Tests for API endpoints: health, scoring, visits, alerts and reports.
Uses async httpx for ASGI app testing against the bundled catalog.
"""
import os
import uuid

import pytest
import httpx

from carewatch import config
from carewatch import main as api
from carewatch.main import app


@pytest.fixture
async def async_client():
    """Create async test client."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


@pytest.fixture(autouse=True)
def clean_store():
    """Start every test from an empty visit store."""
    api._visit_service.store.clear()
    yield
    api._visit_service.store.clear()


@pytest.fixture
def agency_id() -> str:
    """Fresh agency id per test."""
    return f"agency-{uuid.uuid4().hex[:8]}"


def _visit(agency_id, symptoms=(), vitals=None, client_id="client-1"):
    return {
        "client_id": client_id,
        "carer_id": "carer-1",
        "agency_id": agency_id,
        "selected_symptom_ids": list(symptoms),
        "vitals": vitals or {},
        "note": "Routine visit",
    }


@pytest.mark.asyncio
class TestHealthEndpoints:
    """Tests for health check endpoints."""

    async def test_root_endpoint(self, async_client):
        response = await async_client.get("/")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data
        assert data["catalog_size"] > 0

    async def test_health_endpoint(self, async_client):
        response = await async_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_list_symptoms(self, async_client):
        response = await async_client.get("/api/v1/symptoms")
        assert response.status_code == 200

        categories = response.json()["categories"]
        ids = {s["id"] for c in categories for s in c["symptoms"]}
        assert {"fall", "confusion"} <= ids


@pytest.mark.asyncio
class TestScoringEndpoint:
    """Stateless scoring."""

    async def test_empty(self, async_client):
        response = await async_client.post("/api/v1/risk/score", json={"selected_symptom_ids": []})
        assert response.status_code == 200
        assert response.json() == {
            "score": 0,
            "risk_level": "green",
            "requires_alert": False,
            "reasons": [],
        }

    async def test_red_example(self, async_client):
        response = await async_client.post("/api/v1/risk/score", json={
            "selected_symptom_ids": ["fall", "confusion"],
            "vitals": {"temperature": 39, "pulse": 110},
        })
        data = response.json()

        assert data["score"] == 8
        assert data["risk_level"] == "red"
        assert data["reasons"] == [
            "Had a fall",
            "New or worsening confusion",
            "High temperature (39°C)",
            "Abnormal pulse (110 bpm)",
        ]

    async def test_decimal_reading_kept(self, async_client):
        response = await async_client.post("/api/v1/risk/score", json={
            "selected_symptom_ids": [],
            "vitals": {"temperature": 35.9},
        })
        assert response.json()["reasons"] == ["Low temperature (35.9°C)"]

    async def test_duplicates_not_collapsed(self, async_client):
        response = await async_client.post("/api/v1/risk/score", json={
            "selected_symptom_ids": ["fall", "fall"],
        })
        assert response.json()["score"] == 4

    async def test_non_numeric_vitals_rejected(self, async_client):
        response = await async_client.post("/api/v1/risk/score", json={
            "selected_symptom_ids": [],
            "vitals": {"pulse": "fast"},
        })
        assert response.status_code == 422

    async def test_null_symptom_list_rejected(self, async_client):
        response = await async_client.post("/api/v1/risk/score", json={
            "selected_symptom_ids": None,
        })
        assert response.status_code == 422

    async def test_nan_vitals_rejected(self, async_client):
        response = await async_client.post(
            "/api/v1/risk/score",
            content='{"selected_symptom_ids": [], "vitals": {"temperature": NaN}}',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 422

        error = response.json()["detail"][0]
        assert error["loc"][-1] == "temperature"
        assert error["input"] == "nan"


@pytest.mark.asyncio
class TestVisitEndpoints:
    """Visit submission and history."""

    async def test_create_red_visit_raises_alert(self, async_client, agency_id):
        response = await async_client.post("/api/v1/visits", json=_visit(
            agency_id, ["fall", "confusion"], {"temperature": 39, "pulse": 110}
        ))
        assert response.status_code == 201

        data = response.json()
        assert data["entry"]["risk_level"] == "red"
        assert data["entry"]["vitals"] == {"temperature": 39, "pulse": 110}
        assert data["alert"]["risk_level"] == "red"
        assert data["alert"]["visit_entry_id"] == data["entry"]["id"]
        assert data["warnings"] == []

    async def test_create_green_visit(self, async_client, agency_id):
        response = await async_client.post("/api/v1/visits", json=_visit(agency_id, ["new_pain"]))
        data = response.json()

        assert data["entry"]["risk_level"] == "green"
        assert data["alert"] is None

    async def test_implausible_vitals_warning(self, async_client, agency_id):
        response = await async_client.post("/api/v1/visits", json=_visit(
            agency_id, vitals={"oxygen_saturation": 190}
        ))
        assert response.status_code == 201
        warnings = response.json()["warnings"]
        assert warnings[0]["vital"] == "oxygen_saturation"
        assert warnings[0]["type"] == "impossible_value"

    async def test_nan_vitals_rejected(self, async_client, agency_id):
        body = (
            '{"client_id": "client-1", "carer_id": "carer-1", '
            f'"agency_id": "{agency_id}", "selected_symptom_ids": ["fall", "confusion"], '
            '"vitals": {"temperature": NaN}}'
        )
        response = await async_client.post(
            "/api/v1/visits", content=body, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 422
        assert api._visit_service.store.list_visit_entries() == []
        assert api._visit_service.get_alerts(agency_id) == []

    async def test_missing_client_id(self, async_client, agency_id):
        body = _visit(agency_id)
        body["client_id"] = ""
        response = await async_client.post("/api/v1/visits", json=body)
        assert response.status_code == 422

    async def test_get_visit(self, async_client, agency_id):
        created = (await async_client.post("/api/v1/visits", json=_visit(agency_id, ["fall"]))).json()
        response = await async_client.get(f"/api/v1/visits/{created['entry']['id']}")

        assert response.status_code == 200
        assert response.json()["reasons"] == ["Had a fall"]

    async def test_get_nonexistent_visit(self, async_client):
        response = await async_client.get("/api/v1/visits/NONEXISTENT")
        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"

    async def test_client_history_newest_first(self, async_client, agency_id):
        client_id = f"client-{uuid.uuid4().hex[:8]}"
        first = (await async_client.post("/api/v1/visits", json=_visit(agency_id, client_id=client_id))).json()
        second = (await async_client.post("/api/v1/visits", json=_visit(agency_id, client_id=client_id))).json()

        response = await async_client.get(f"/api/v1/clients/{client_id}/visits")
        ids = [e["id"] for e in response.json()]
        assert ids == [second["entry"]["id"], first["entry"]["id"]]

    async def test_correction_note(self, async_client, agency_id):
        created = (await async_client.post("/api/v1/visits", json=_visit(agency_id))).json()
        entry_id = created["entry"]["id"]

        response = await async_client.post(
            f"/api/v1/visits/{entry_id}/corrections",
            json={"carer_id": "carer-1", "text": "Forgot to record pulse"},
        )
        assert response.status_code == 201

        entry = (await async_client.get(f"/api/v1/visits/{entry_id}")).json()
        assert entry["correction_notes"][0]["text"] == "Forgot to record pulse"

    async def test_correction_for_nonexistent_visit(self, async_client):
        response = await async_client.post(
            "/api/v1/visits/NONEXISTENT/corrections",
            json={"carer_id": "carer-1", "text": "text"},
        )
        assert response.status_code == 404


@pytest.mark.asyncio
class TestAlertEndpoints:
    """Manager dashboard."""

    async def test_filter_and_review(self, async_client, agency_id):
        await async_client.post("/api/v1/visits", json=_visit(agency_id, ["confusion"]))
        red = (await async_client.post("/api/v1/visits", json=_visit(agency_id, ["fall", "confusion"]))).json()

        all_alerts = (await async_client.get("/api/v1/alerts", params={"agency_id": agency_id})).json()
        assert [a["risk_level"] for a in all_alerts] == ["red", "amber"]

        amber_only = (await async_client.get(
            "/api/v1/alerts", params={"agency_id": agency_id, "filter": "amber"}
        )).json()
        assert len(amber_only) == 1

        count = (await async_client.get(
            "/api/v1/alerts/unreviewed-count", params={"agency_id": agency_id}
        )).json()
        assert count == {"agency_id": agency_id, "unreviewed": 2}

        alert_id = red["alert"]["id"]
        response = await async_client.post(f"/api/v1/alerts/{alert_id}/review", json={
            "manager_id": "manager-1",
            "action_taken": "community_nurse",
            "note": "Nurse booked",
        })
        assert response.status_code == 200
        assert response.json()["is_reviewed"] is True
        assert response.json()["action_taken"] == "community_nurse"

        fetched = (await async_client.get(f"/api/v1/alerts/{alert_id}")).json()
        assert fetched["reviewed_by"] == "manager-1"

        count = (await async_client.get(
            "/api/v1/alerts/unreviewed-count", params={"agency_id": agency_id}
        )).json()
        assert count["unreviewed"] == 1

    async def test_invalid_filter(self, async_client, agency_id):
        response = await async_client.get("/api/v1/alerts", params={"agency_id": agency_id, "filter": "urgent"})
        assert response.status_code == 422

    async def test_invalid_action(self, async_client, agency_id):
        red = (await async_client.post("/api/v1/visits", json=_visit(agency_id, ["fall", "confusion"]))).json()
        response = await async_client.post(f"/api/v1/alerts/{red['alert']['id']}/review", json={
            "manager_id": "manager-1",
            "action_taken": "ignored",
        })
        assert response.status_code == 422

    async def test_get_nonexistent_alert(self, async_client):
        response = await async_client.get("/api/v1/alerts/NONEXISTENT")
        assert response.status_code == 404


@pytest.mark.asyncio
class TestReportEndpoints:
    """Visit PDF reports."""

    async def test_generate_and_download(self, async_client, agency_id):
        created = (await async_client.post("/api/v1/visits", json=_visit(
            agency_id, ["fall"], {"systolic_bp": 150, "diastolic_bp": 90}
        ))).json()

        response = await async_client.post(f"/api/v1/visits/{created['entry']['id']}/report")
        assert response.status_code == 200
        assert "pdf_path" not in response.json()
        report_id = response.json()["report_id"]

        download = await async_client.get(f"/api/v1/reports/{report_id}/download")
        assert download.status_code == 200
        assert download.headers["content-type"] == "application/pdf"
        assert download.content.startswith(b"%PDF-")

    async def test_oldest_report_evicted(self, async_client, agency_id, monkeypatch):
        monkeypatch.setattr(config, "REPORTS_MAX_KEPT", 1)
        created = (await async_client.post("/api/v1/visits", json=_visit(agency_id, ["fall"]))).json()
        url = f"/api/v1/visits/{created['entry']['id']}/report"

        first = (await async_client.post(url)).json()
        first_path = api._reports[first["report_id"]]
        second = (await async_client.post(url)).json()

        assert list(api._reports) == [second["report_id"]]
        assert not os.path.exists(first_path)
        assert (await async_client.get(f"/api/v1/reports/{first['report_id']}/download")).status_code == 404
        assert (await async_client.get(f"/api/v1/reports/{second['report_id']}/download")).status_code == 200

    async def test_report_for_nonexistent_visit(self, async_client):
        response = await async_client.post("/api/v1/visits/NONEXISTENT/report")
        assert response.status_code == 404

    async def test_download_nonexistent_report(self, async_client):
        response = await async_client.get("/api/v1/reports/NONEXISTENT/download")
        assert response.status_code == 404


@pytest.mark.asyncio
class TestAPIDocumentation:
    """Tests for API documentation availability."""

    async def test_docs_endpoint(self, async_client):
        response = await async_client.get("/docs")
        assert response.status_code == 200

    async def test_redoc_endpoint(self, async_client):
        response = await async_client.get("/redoc")
        assert response.status_code == 200
