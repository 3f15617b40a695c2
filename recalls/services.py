from typing import Iterable, List, Optional

from app.config import Settings, get_settings
from third_party.openfda.client import OpenFDAClient
from third_party.openfda.dates import DateRangeResolver
from third_party.openfda.models import ResultSet, SearchClause
from third_party.openfda.query import (
    assemble_url,
    build_base_url,
    build_query_spec,
    encode_terms,
    normalize_states,
)
from third_party.openfda.transforms import normalize_results
from utils.logger import get_logger, kv_message as kv, redact_api_key

logger = get_logger(__name__)


def _run_query(
    api_key: Optional[str],
    clauses: Iterable[Optional[SearchClause]],
    search_mode: Optional[str],
    limit: Optional[int],
    client: Optional[OpenFDAClient],
    settings: Optional[Settings],
    notes: List[str],
) -> ResultSet:
    settings = settings or get_settings()
    spec = build_query_spec(clauses, search_mode=search_mode, limit=limit, notes=notes)
    url = assemble_url(spec, build_base_url(settings.openfda_base_url, api_key))
    logger.info(kv("recall_query", search=spec.search_expression, limit=spec.limit))

    client = client or OpenFDAClient(timeout=settings.openfda_timeout)
    raw = client.fetch(url)
    condition = client.classify(raw)
    if condition is not None:
        return ResultSet(total=0, condition=condition, url=redact_api_key(url), warnings=notes)

    result = normalize_results(raw.payload)
    result.truncated = client.check_truncation(raw, notes)
    result.url = redact_api_key(url)
    result.warnings = notes
    logger.info(kv("recall_query_done", returned=len(result), total=result.total, truncated=result.truncated))
    return result


def query_by_location(
    api_key: Optional[str],
    city: Optional[str] = None,
    country: Optional[str] = None,
    distribution_pattern: Optional[str] = None,
    recalling_firm: Optional[str] = None,
    state: Optional[str] = None,
    status: Optional[str] = None,
    search_mode: Optional[str] = None,
    limit: Optional[int] = None,
    client: Optional[OpenFDAClient] = None,
    settings: Optional[Settings] = None,
) -> ResultSet:
    """Search food enforcement reports by where the firm is and where the food went.

    Every filter accepts a comma-separated list ("Iowa City, Ames"); terms of one
    filter are OR-ed and filters are combined with ``search_mode`` (AND by default).
    States may be given as names or two-letter codes.
    """
    notes: List[str] = []
    clauses = [
        encode_terms("city", city),
        encode_terms("country", country),
        encode_terms("distribution_pattern", distribution_pattern),
        encode_terms("recalling_firm", recalling_firm),
        encode_terms("state", normalize_states(state, notes)),
        encode_terms("status", status),
    ]
    return _run_query(api_key, clauses, search_mode, limit, client, settings, notes)


def query_by_date(
    api_key: Optional[str],
    recall_initiation_date: Optional[str] = None,
    center_classification_date: Optional[str] = None,
    report_date: Optional[str] = None,
    termination_date: Optional[str] = None,
    product_description: Optional[str] = None,
    recalling_firm: Optional[str] = None,
    status: Optional[str] = None,
    search_mode: Optional[str] = None,
    limit: Optional[int] = None,
    client: Optional[OpenFDAClient] = None,
    settings: Optional[Settings] = None,
    resolver: Optional[DateRangeResolver] = None,
) -> ResultSet:
    """Search food enforcement reports by date fields.

    Dates take one value ("2022", "January 1, 2023"), which runs up to today,
    or two joined by " to " ("January 2023 to May 2023").
    """
    resolver = resolver or DateRangeResolver()
    notes: List[str] = []
    clauses = [
        resolver.resolve("recall_initiation_date", recall_initiation_date, notes),
        resolver.resolve("center_classification_date", center_classification_date, notes),
        resolver.resolve("report_date", report_date, notes),
        encode_terms("recalling_firm", recalling_firm),
        resolver.resolve("termination_date", termination_date, notes),
        encode_terms("status", status),
        encode_terms("product_description", product_description),
    ]
    return _run_query(api_key, clauses, search_mode, limit, client, settings, notes)
