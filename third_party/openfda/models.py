from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterator, List, Optional, Tuple

import pandas as pd
from pydantic import BaseModel, ConfigDict


@dataclass(frozen=True)
class SearchClause:
    """One field-scoped filter, e.g. ``city:("Ames")``."""

    field_name: str
    expression: str

    def render(self) -> str:
        return f"{self.field_name}:({self.expression})"

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class DateRange:
    """Inclusive range; a bound that could not be parsed is None and keeps its raw text."""

    start: Optional[date]
    end: Optional[date]
    start_raw: str = ""
    end_raw: str = ""

    @staticmethod
    def _bound(value: Optional[date], raw: str) -> str:
        if value is None:
            return raw.strip().replace(" ", "+")
        return value.strftime("%Y%m%d")

    def render(self) -> str:
        return f"[{self._bound(self.start, self.start_raw)} TO {self._bound(self.end, self.end_raw)}]"


@dataclass(frozen=True)
class QuerySpec:
    clauses: Tuple[SearchClause, ...]
    join_mode: str = "AND"
    limit: int = 1000

    @property
    def search_expression(self) -> str:
        return f" {self.join_mode} ".join(c.render() for c in self.clauses)


class RecallRecord(BaseModel):
    """A flattened food enforcement report. Field order is the output column order."""

    model_config = ConfigDict(extra="ignore")

    recall_number: Optional[str] = None
    recalling_firm: Optional[str] = None
    recall_initiation_date: Optional[str] = None
    center_classification_date: Optional[str] = None
    report_date: Optional[str] = None
    termination_date: Optional[str] = None
    voluntary_mandated: Optional[str] = None
    classification: Optional[str] = None
    initial_firm_notification: Optional[str] = None
    status: Optional[str] = None
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    address_1: Optional[str] = None
    address_2: Optional[str] = None
    postal_code: Optional[str] = None
    reason_for_recall: Optional[str] = None
    product_description: Optional[str] = None
    product_quantity: Optional[str] = None
    code_info: Optional[str] = None
    distribution_pattern: Optional[str] = None
    event_id: Optional[str] = None

    @classmethod
    def columns(cls) -> List[str]:
        return list(cls.model_fields)


DATE_COLUMNS = ("recall_initiation_date", "report_date", "center_classification_date", "termination_date")


@dataclass(frozen=True)
class EmptyResultCondition:
    """The API answered "No matches found!"; reported to the caller, never raised."""

    message: str = "No matches found!"


@dataclass
class ResultSet:
    records: List[RecallRecord] = field(default_factory=list)
    total: Optional[int] = None
    condition: Optional[EmptyResultCondition] = None
    truncated: bool = False
    url: Optional[str] = None
    # advisories raised while building and running this query
    warnings: List[str] = field(default_factory=list)

    @property
    def columns(self) -> List[str]:
        return RecallRecord.columns()

    @property
    def is_empty(self) -> bool:
        return not self.records

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[RecallRecord]:
        return iter(self.records)

    def to_dicts(self) -> List[Dict[str, Any]]:
        return [r.model_dump() for r in self.records]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.to_dicts(), columns=self.columns)
