from typing import Any, Dict, List, Optional

from third_party.openfda.dates import parse_date
from third_party.openfda.models import DATE_COLUMNS, RecallRecord, ResultSet


def _clean_value(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return value
    return str(value)


def normalize_date(value: Optional[str]) -> Optional[str]:
    """'20230115' -> '2023-01-15'; anything unparseable becomes None."""
    if not value:
        return None
    parsed = parse_date(value)
    return parsed.isoformat() if parsed else None


def normalize_recall(record: Dict[str, Any]) -> RecallRecord:
    row = {column: _clean_value(record.get(column)) for column in RecallRecord.columns()}
    for column in DATE_COLUMNS:
        row[column] = normalize_date(row[column])
    return RecallRecord(**row)


def sort_records(records: List[RecallRecord]) -> List[RecallRecord]:
    """Newest report first, then city A-Z; missing values go last for both keys."""
    ordered = sorted(records, key=lambda r: (r.city is None, r.city or ""))
    # ISO dates order as strings; None -> "" lands last under reverse, and reverse keeps ties stable
    return sorted(ordered, key=lambda r: r.report_date or "", reverse=True)


def normalize_results(payload: Dict[str, Any]) -> ResultSet:
    results = payload.get("results") or []
    records = [normalize_recall(r) for r in results if isinstance(r, dict)]
    meta = payload.get("meta") or {}
    total = (meta.get("results") or {}).get("total")
    return ResultSet(records=sort_records(records), total=int(total) if total is not None else None)
