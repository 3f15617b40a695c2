from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from third_party.openfda.errors import TransportError, TruncatedResultWarning, advise
from third_party.openfda.models import EmptyResultCondition
from utils.logger import get_logger, kv_message as kv, redact_api_key

logger = get_logger(__name__)

NO_MATCHES_MESSAGE = "No matches found!"


@dataclass(frozen=True)
class RawResponse:
    status_code: int
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def error_message(self) -> Optional[str]:
        error = self.payload.get("error")
        if isinstance(error, dict):
            return error.get("message")
        return None

    @property
    def total(self) -> Optional[int]:
        meta = self.payload.get("meta") or {}
        total = (meta.get("results") or {}).get("total")
        return int(total) if total is not None else None

    @property
    def returned(self) -> int:
        return len(self.payload.get("results") or [])


class OpenFDAClient:
    """Sends one GET per search and sorts the answer into data, no-matches or failure."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[float] = None) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch(self, url: str) -> RawResponse:
        logger.info(kv("openfda_request", url=redact_api_key(url)))
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TransportError(f"The openFDA request could not be completed: {exc}") from exc
        try:
            payload = response.json()
        except ValueError as exc:
            raise TransportError(
                "The openFDA API returned a body that is not JSON.", status_code=response.status_code
            ) from exc
        if not isinstance(payload, dict):
            raise TransportError(
                "The openFDA API returned JSON that is not an object.", status_code=response.status_code
            )
        logger.info(kv("openfda_response", status=response.status_code, returned=len(payload.get("results") or [])))
        return RawResponse(status_code=response.status_code, payload=payload)

    @staticmethod
    def classify(raw: RawResponse) -> Optional[EmptyResultCondition]:
        """Return EmptyResultCondition for a no-matches answer, None for data; raise on failure.

        openFDA answers an empty search with 404 and the no-matches message, so
        the message is checked before the status code.
        """
        message = raw.error_message
        if message == NO_MATCHES_MESSAGE:
            logger.info(kv("openfda_no_matches", status=raw.status_code))
            return EmptyResultCondition(message=message)
        if raw.status_code != 200:
            raise TransportError(
                "The openFDA API call failed. Check the search inputs and retry the request.",
                status_code=raw.status_code,
                api_message=message,
            )
        if "error" in raw.payload:
            raise TransportError(
                f"The openFDA API returned an error: {message or raw.payload.get('error')}",
                status_code=raw.status_code,
                api_message=message,
            )
        return None

    @staticmethod
    def check_truncation(raw: RawResponse, notes: Optional[List[str]] = None) -> bool:
        total = raw.total
        if total is None or total <= raw.returned:
            return False
        logger.warning(kv("openfda_truncated", total=total, returned=raw.returned))
        advise(
            f"{total} records match but only {raw.returned} were returned; the results may be incomplete. "
            "Try a more specific search to get a complete dataset.",
            TruncatedResultWarning,
            notes,
        )
        return True
