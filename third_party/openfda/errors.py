import warnings
from typing import List, Optional, Type


class OpenFDAError(Exception):
    """Base class for errors raised by the openFDA query layer."""


class QueryValidationError(OpenFDAError, ValueError):
    """Raised for bad filter input, always before a request is sent."""


class InvalidInputError(QueryValidationError, TypeError):
    pass


class TooManyDateTermsError(QueryValidationError):
    pass


class InvalidJoinModeError(QueryValidationError):
    pass


class InvalidLimitError(QueryValidationError):
    pass


class TransportError(OpenFDAError):
    def __init__(self, message: str, status_code: Optional[int] = None, api_message: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.api_message = api_message


class OpenFDAWarning(UserWarning):
    pass


class ResultLimitExceededWarning(OpenFDAWarning):
    pass


class TruncatedResultWarning(OpenFDAWarning):
    pass


class UnmatchedStateWarning(OpenFDAWarning):
    pass


class UnparseableDateWarning(OpenFDAWarning):
    pass


def advise(message: str, category: Type[OpenFDAWarning], notes: Optional[List[str]] = None, stacklevel: int = 3) -> None:
    """Raise an advisory warning and, when a per-call list is given, record it there too."""
    if notes is not None:
        notes.append(message)
    warnings.warn(message, category, stacklevel=stacklevel + 1)
