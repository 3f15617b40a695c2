"""Shared fixtures: a stand-in requests session and sample openFDA payloads."""

from datetime import date
from typing import Any, Dict, List, Optional

import pytest

from app.config import Settings
from third_party.openfda.client import OpenFDAClient
from third_party.openfda.dates import DateRangeResolver

TODAY = date(2024, 3, 15)


class FakeResponse:
    def __init__(self, status_code: int, payload: Any) -> None:
        self.status_code = status_code
        self._payload = payload

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Replays queued responses and records every URL requested."""

    def __init__(self, *responses: FakeResponse) -> None:
        self.responses: List[FakeResponse] = list(responses)
        self.urls: List[str] = []
        self.timeouts: List[Optional[float]] = []

    def get(self, url: str, timeout: Optional[float] = None) -> FakeResponse:
        self.urls.append(url)
        self.timeouts.append(timeout)
        return self.responses.pop(0)


def make_payload(results: List[Dict[str, Any]], total: Optional[int] = None) -> Dict[str, Any]:
    return {
        "meta": {"results": {"skip": 0, "limit": len(results), "total": len(results) if total is None else total}},
        "results": results,
    }


SAMPLE_RESULTS: List[Dict[str, Any]] = [
    {
        "recall_number": "F-0001-2023",
        "recalling_firm": "Hy-Vee Inc",
        "recall_initiation_date": "20221201",
        "center_classification_date": "",
        "report_date": "20230105",
        "termination_date": "20230601",
        "classification": "Class II",
        "status": "Terminated",
        "country": "United States",
        "state": "IA",
        "city": "Ames",
        "address_1": "100 Main St",
        "address_2": "",
        "event_id": "91234",
    },
    {
        "recall_number": "F-0002-2023",
        "recalling_firm": "Midwest Dairy",
        "report_date": "20230301",
        "state": "IA",
        "city": "Des Moines",
        "event_id": "91300",
    },
    {
        "recall_number": "F-0003-2023",
        "recalling_firm": "Hy-Vee Inc",
        "report_date": "20230301",
        "state": "IA",
        "city": "Ames",
        "event_id": "91301",
    },
]


@pytest.fixture
def settings() -> Settings:
    return Settings(openfda_api_key=None, openfda_base_url="https://api.fda.gov/food/enforcement.json")


@pytest.fixture
def resolver() -> DateRangeResolver:
    return DateRangeResolver(today=lambda: TODAY)


@pytest.fixture
def sample_payload() -> Dict[str, Any]:
    return make_payload([dict(r) for r in SAMPLE_RESULTS])


def client_for(*responses: FakeResponse) -> OpenFDAClient:
    return OpenFDAClient(session=FakeSession(*responses))
