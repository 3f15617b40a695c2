from typing import List, Optional

from pydantic import BaseModel

from third_party.openfda.models import RecallRecord, ResultSet


class RecallSearchResponse(BaseModel):
    count: int
    total: Optional[int] = None
    truncated: bool = False
    condition: Optional[str] = None
    columns: List[str]
    records: List[RecallRecord]
    warnings: List[str] = []

    @classmethod
    def from_result(cls, result: ResultSet) -> "RecallSearchResponse":
        return cls(
            count=len(result),
            total=result.total,
            truncated=result.truncated,
            condition=result.condition.message if result.condition else None,
            columns=result.columns,
            records=result.records,
            warnings=list(result.warnings),
        )
