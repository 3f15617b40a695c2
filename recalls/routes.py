from typing import Any, Callable, Optional

from fastapi import APIRouter, HTTPException, Query

from app.config import get_settings
from recalls.schemas import RecallSearchResponse
from recalls.services import query_by_date, query_by_location
from third_party.openfda.errors import QueryValidationError, TransportError
from utils.logger import get_logger, kv_message as kv

logger = get_logger(__name__)

router = APIRouter(prefix="/recalls")


def _run(search: Callable[..., Any], api_key: Optional[str], **filters: Any) -> RecallSearchResponse:
    settings = get_settings()
    try:
        result = search(api_key or settings.openfda_api_key, settings=settings, **filters)
    except QueryValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except TransportError as exc:
        logger.warning(kv("openfda_failed", status=exc.status_code, api_message=exc.api_message))
        raise HTTPException(status_code=502, detail=str(exc))
    return RecallSearchResponse.from_result(result)


@router.get("/location", response_model=RecallSearchResponse)
def recalls_by_location(
    api_key: Optional[str] = None,
    city: Optional[str] = None,
    country: Optional[str] = None,
    distribution_pattern: Optional[str] = None,
    recalling_firm: Optional[str] = None,
    state: Optional[str] = None,
    status: Optional[str] = None,
    search_mode: Optional[str] = Query(None, description="AND or OR"),
    limit: Optional[int] = Query(None, description="1 to 1000; larger values are capped"),
) -> RecallSearchResponse:
    return _run(
        query_by_location,
        api_key,
        city=city,
        country=country,
        distribution_pattern=distribution_pattern,
        recalling_firm=recalling_firm,
        state=state,
        status=status,
        search_mode=search_mode,
        limit=limit,
    )


@router.get("/date", response_model=RecallSearchResponse)
def recalls_by_date(
    api_key: Optional[str] = None,
    recall_initiation_date: Optional[str] = Query(None, description="e.g. '2022' or 'January 2023 to May 2023'"),
    center_classification_date: Optional[str] = None,
    report_date: Optional[str] = None,
    termination_date: Optional[str] = None,
    product_description: Optional[str] = None,
    recalling_firm: Optional[str] = None,
    status: Optional[str] = None,
    search_mode: Optional[str] = Query(None, description="AND or OR"),
    limit: Optional[int] = Query(None, description="1 to 1000; larger values are capped"),
) -> RecallSearchResponse:
    return _run(
        query_by_date,
        api_key,
        recall_initiation_date=recall_initiation_date,
        center_classification_date=center_classification_date,
        report_date=report_date,
        termination_date=termination_date,
        product_description=product_description,
        recalling_firm=recalling_firm,
        status=status,
        search_mode=search_mode,
        limit=limit,
    )
