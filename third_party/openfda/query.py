from typing import Dict, Iterable, List, Optional
from urllib.parse import quote_plus

from third_party.openfda.errors import (
    InvalidJoinModeError,
    InvalidLimitError,
    ResultLimitExceededWarning,
    UnmatchedStateWarning,
    advise,
)
from third_party.openfda.models import QuerySpec, SearchClause
from utils.logger import get_logger, kv_message as kv

logger = get_logger(__name__)

TERM_SEPARATOR = ", "
# openFDA reads '+' as the space inside a quoted term
SPACE_PLACEHOLDER = "+"
JOIN_MODES = ("AND", "OR")
DEFAULT_JOIN_MODE = "AND"
MAX_LIMIT = 1000
# Grammar characters left readable in the search parameter; quotes become %22
_SEARCH_SAFE = ':()[]+*'

STATE_ABBREVIATIONS: Dict[str, str] = {
    "alabama": "AL", "alaska": "AK", "arizona": "AZ", "arkansas": "AR", "california": "CA",
    "colorado": "CO", "connecticut": "CT", "delaware": "DE", "florida": "FL", "georgia": "GA",
    "hawaii": "HI", "idaho": "ID", "illinois": "IL", "indiana": "IN", "iowa": "IA",
    "kansas": "KS", "kentucky": "KY", "louisiana": "LA", "maine": "ME", "maryland": "MD",
    "massachusetts": "MA", "michigan": "MI", "minnesota": "MN", "mississippi": "MS", "missouri": "MO",
    "montana": "MT", "nebraska": "NE", "nevada": "NV", "new hampshire": "NH", "new jersey": "NJ",
    "new mexico": "NM", "new york": "NY", "north carolina": "NC", "north dakota": "ND", "ohio": "OH",
    "oklahoma": "OK", "oregon": "OR", "pennsylvania": "PA", "rhode island": "RI", "south carolina": "SC",
    "south dakota": "SD", "tennessee": "TN", "texas": "TX", "utah": "UT", "vermont": "VT",
    "virginia": "VA", "washington": "WA", "west virginia": "WV", "wisconsin": "WI", "wyoming": "WY",
}
_KNOWN_ABBREVIATIONS = frozenset(STATE_ABBREVIATIONS.values())


def split_terms(raw_value: str) -> List[str]:
    return [t.strip() for t in raw_value.split(TERM_SEPARATOR) if t.strip()]


def encode_terms(field_name: str, raw_value: Optional[str]) -> Optional[SearchClause]:
    """Encode a possibly comma-separated filter value as one clause.

    'Ames' -> city:("Ames"); 'Iowa City, Ames' -> city:("Iowa+City" OR "Ames").
    """
    if raw_value is None:
        return None
    terms = split_terms(raw_value)
    if not terms:
        return None
    quoted = [f'"{t.replace(" ", SPACE_PLACEHOLDER)}"' for t in terms]
    return SearchClause(field_name, " OR ".join(quoted))


def normalize_states(raw_value: Optional[str], notes: Optional[List[str]] = None) -> Optional[str]:
    """Map full state names to their two-letter codes, keeping codes as given.

    Tokens that are neither are dropped with an UnmatchedStateWarning.
    """
    if raw_value is None:
        return None
    kept: List[str] = []
    dropped: List[str] = []
    for token in split_terms(raw_value):
        if token in _KNOWN_ABBREVIATIONS:
            kept.append(token)
        elif token.lower() in STATE_ABBREVIATIONS:
            kept.append(STATE_ABBREVIATIONS[token.lower()])
        else:
            dropped.append(token)
    if dropped:
        logger.warning(kv("unmatched_states", dropped=dropped, kept=kept))
        advise(f"Ignoring unrecognised state(s): {', '.join(dropped)}", UnmatchedStateWarning, notes)
    if not kept:
        return None
    return TERM_SEPARATOR.join(kept)


def resolve_join_mode(search_mode: Optional[str]) -> str:
    if search_mode is None:
        return DEFAULT_JOIN_MODE
    mode = search_mode.strip().upper() if isinstance(search_mode, str) else None
    if mode not in JOIN_MODES:
        raise InvalidJoinModeError(f"search_mode must be 'AND' or 'OR', got {search_mode!r}")
    return mode


def resolve_limit(limit: Optional[int], notes: Optional[List[str]] = None) -> int:
    if limit is None:
        return MAX_LIMIT
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidLimitError(f"limit must be an integer, got {limit!r}")
    if limit < 1:
        raise InvalidLimitError(f"limit must be at least 1, got {limit}")
    if limit > MAX_LIMIT:
        logger.warning(kv("limit_clamped", requested=limit, limit=MAX_LIMIT))
        advise(
            "The openFDA API is limited to 1000 results per call; returning at most 1000. "
            "Try a more specific search to get every matching record.",
            ResultLimitExceededWarning,
            notes,
        )
        return MAX_LIMIT
    return limit


def build_query_spec(
    clauses: Iterable[Optional[SearchClause]],
    search_mode: Optional[str] = None,
    limit: Optional[int] = None,
    notes: Optional[List[str]] = None,
) -> QuerySpec:
    """Drop absent clauses, keeping the caller's order, and validate mode and limit."""
    active = tuple(c for c in clauses if c is not None)
    return QuerySpec(clauses=active, join_mode=resolve_join_mode(search_mode), limit=resolve_limit(limit, notes))


def build_base_url(endpoint: str, api_key: Optional[str]) -> str:
    if api_key:
        return f"{endpoint}?api_key={quote_plus(api_key)}&search="
    return f"{endpoint}?search="


def assemble_url(spec: QuerySpec, base_url: str) -> str:
    search = quote_plus(spec.search_expression, safe=_SEARCH_SAFE)
    return f"{base_url}{search}&limit={spec.limit}"
