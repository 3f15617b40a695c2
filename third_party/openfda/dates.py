from datetime import date, datetime
from typing import Callable, List, Optional

from dateutil import parser as dt_parser

from third_party.openfda.errors import InvalidInputError, TooManyDateTermsError, UnparseableDateWarning, advise
from third_party.openfda.models import DateRange, SearchClause
from utils.logger import get_logger, kv_message as kv

logger = get_logger(__name__)

RANGE_SEPARATOR = " to "

# Missing month or day fall on the 1st
_DEFAULT_DATE = datetime(2000, 1, 1)


def parse_date(text: Optional[str]) -> Optional[date]:
    """Parse a human date such as '2023-01-15', 'January 1, 2023', 'May 2023' or '2023-05'.

    Month-day-year wins over day-month-year when both fit. Returns None when
    the text is not a date.
    """
    if not text or not text.strip():
        return None
    try:
        return dt_parser.parse(text, default=_DEFAULT_DATE, dayfirst=False, yearfirst=False).date()
    except (dt_parser.ParserError, ValueError, OverflowError):
        return None


class DateRangeResolver:
    """Turns 'A' or 'A to B' into an inclusive range clause like ``report_date:([20230101 TO 20230501])``.

    A single point is closed against today.
    """

    def __init__(self, today: Optional[Callable[[], date]] = None) -> None:
        self._today = today or date.today

    def parse_range(self, field_name: str, raw_value: str, notes: Optional[List[str]] = None) -> DateRange:
        segments = raw_value.split(RANGE_SEPARATOR)
        # "2020 to " reads as a single date
        if len(segments) > 1 and not segments[-1].strip():
            segments.pop()
        if len(segments) > 2:
            raise TooManyDateTermsError(
                f"{field_name}: enter a single date or two dates joined by 'to', got {len(segments)} dates"
            )

        start_raw = segments[0]
        start = parse_date(start_raw)
        if len(segments) == 1:
            end_raw = ""
            end: Optional[date] = self._today()
        else:
            end_raw = segments[1]
            end = parse_date(end_raw)

        for value, raw in ((start, start_raw), (end, end_raw)):
            if value is None:
                logger.warning(kv("unparseable_date", field=field_name, value=raw))
                advise(
                    f"Could not parse '{raw.strip()}' for {field_name}; the bound is sent to the API as typed.",
                    UnparseableDateWarning,
                    notes,
                )

        if start is not None and end is not None and start > end:
            logger.info(kv("date_range_swapped", field=field_name, start=start, end=end))
            start, end, start_raw, end_raw = end, start, end_raw, start_raw
        return DateRange(start=start, end=end, start_raw=start_raw, end_raw=end_raw)

    def resolve(self, field_name: str, raw_value: Optional[str], notes: Optional[List[str]] = None) -> Optional[SearchClause]:
        if raw_value is None:
            return None
        if not isinstance(raw_value, str):
            raise InvalidInputError(
                f"{field_name} must be given as text, e.g. '01-01-2023' or 'January 1, 2023'"
            )
        if not raw_value.strip():
            return None
        return SearchClause(field_name, self.parse_range(field_name, raw_value, notes).render())
