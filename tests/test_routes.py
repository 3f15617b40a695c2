import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi.testclient import TestClient

import recalls.services
from main import app
from recalls.routes import _run
from recalls.services import query_by_location
from third_party.openfda.client import OpenFDAClient

from conftest import FakeResponse, FakeSession


@pytest.fixture
def fake_session(monkeypatch, sample_payload):
    session = FakeSession(FakeResponse(200, sample_payload))
    monkeypatch.setattr(
        recalls.services,
        "OpenFDAClient",
        lambda timeout=None: OpenFDAClient(session=session, timeout=timeout),
    )
    return session


@pytest.fixture
def api():
    return TestClient(app)


def test_health(api):
    assert api.get("/health").json() == {"status": "ok"}


def test_location_route(api, fake_session):
    response = api.get("/recalls/location", params={"city": "Ames", "state": "Iowa", "api_key": "k"})
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 3
    assert body["columns"][4:6] == ["report_date", "termination_date"]
    assert body["records"][0]["recall_number"] == "F-0003-2023"
    assert "city:(%22Ames%22)+AND+state:(%22IA%22)" in fake_session.urls[0]


def test_date_route_reports_warnings(api, fake_session):
    response = api.get("/recalls/date", params={"report_date": "2023", "limit": 5000})
    assert response.status_code == 200
    assert any("1000" in w for w in response.json()["warnings"])
    assert fake_session.urls[0].endswith("&limit=1000")


def test_bad_search_mode_is_422(api, fake_session):
    response = api.get("/recalls/location", params={"city": "Ames", "search_mode": "maybe"})
    assert response.status_code == 422
    assert fake_session.urls == []


def test_upstream_failure_is_502(api, monkeypatch):
    session = FakeSession(FakeResponse(500, {"error": {"message": "boom"}}))
    monkeypatch.setattr(
        recalls.services,
        "OpenFDAClient",
        lambda timeout=None: OpenFDAClient(session=session, timeout=timeout),
    )
    assert api.get("/recalls/location", params={"city": "Ames"}).status_code == 502


def test_no_matches_route(api, monkeypatch):
    session = FakeSession(FakeResponse(404, {"error": {"code": "NOT_FOUND", "message": "No matches found!"}}))
    monkeypatch.setattr(
        recalls.services,
        "OpenFDAClient",
        lambda timeout=None: OpenFDAClient(session=session, timeout=timeout),
    )
    body = api.get("/recalls/location", params={"city": "Nowhere"}).json()
    assert body["count"] == 0
    assert body["condition"] == "No matches found!"
    assert body["records"] == []


def test_overlapping_requests_keep_their_own_warnings(monkeypatch, sample_payload):
    barrier = threading.Barrier(2, timeout=5)

    class OverlappingSession:
        """Holds each request until both are in flight."""

        def get(self, url, timeout=None):
            barrier.wait()
            return FakeResponse(200, sample_payload)

    monkeypatch.setattr(
        recalls.services,
        "OpenFDAClient",
        lambda timeout=None: OpenFDAClient(session=OverlappingSession(), timeout=timeout),
    )
    with ThreadPoolExecutor(max_workers=2) as pool:
        clamped = pool.submit(_run, query_by_location, "k", city="Ames", limit=5000)
        plain = pool.submit(_run, query_by_location, "k", city="Ames", limit=10)
        clamped_body, plain_body = clamped.result(), plain.result()

    assert len(clamped_body.warnings) == 1
    assert "1000" in clamped_body.warnings[0]
    assert plain_body.warnings == []
