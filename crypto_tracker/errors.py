"""Classified failure kinds and the wrapper errors that carry them."""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterator, TypeVar

E = TypeVar("E", bound=BaseException)


class ErrorKind(Enum):
    EMPTY_HOLDINGS = "EmptyHoldings"
    EMPTY_PORTFOLIO = "EmptyPortfolio"
    COIN_NOT_FOUND = "CoinNotFound"
    PRICE_NOT_AVAILABLE = "PriceNotAvailable"
    INVALID_QUANTITY = "InvalidQuantity"
    INVALID_PRICE = "InvalidPrice"
    DATABASE_CONNECTION = "DatabaseConnection"
    RATE_LIMIT_EXCEEDED = "RateLimitExceeded"
    AUTH_FAILED = "AuthFailed"
    EMAIL_EXISTS = "EmailExists"
    INVALID_OTP = "InvalidOTP"

    @property
    def message(self) -> str:
        return KIND_MESSAGES[self]


KIND_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.EMPTY_HOLDINGS: "no holdings provided",
    ErrorKind.EMPTY_PORTFOLIO: "portfolio is empty",
    ErrorKind.COIN_NOT_FOUND: "coin not found in portfolio",
    ErrorKind.PRICE_NOT_AVAILABLE: "price not available",
    ErrorKind.INVALID_QUANTITY: "invalid quantity",
    ErrorKind.INVALID_PRICE: "invalid price",
    ErrorKind.DATABASE_CONNECTION: "database connection failed",
    ErrorKind.RATE_LIMIT_EXCEEDED: "API rate limit exceeded",
    ErrorKind.AUTH_FAILED: "authentication failed",
    ErrorKind.EMAIL_EXISTS: "email already exists",
    ErrorKind.INVALID_OTP: "invalid OTP",
}


class TrackerError(Exception):
    """Base for wrapper errors.

    A wrapper carries an optional failure kind of its own and an optional
    underlying exception. Passing an ``ErrorKind`` as ``cause`` is shorthand
    for ``kind=...`` with no underlying exception. Kind checks walk the whole
    cause chain, so wrapping never hides the kind from callers.
    """

    def __init__(
        self,
        cause: ErrorKind | BaseException | None = None,
        kind: ErrorKind | None = None,
    ) -> None:
        if isinstance(cause, ErrorKind):
            kind, cause = cause, None
        self.own_kind = kind
        self.cause = cause
        super().__init__(self._render())
        if cause is not None:
            self.__cause__ = cause

    def _render(self) -> str:
        return self.describe_cause()

    def describe_cause(self) -> str:
        if self.own_kind is not None and self.cause is not None:
            return f"{self.own_kind.message}: {self.cause}"
        if self.own_kind is not None:
            return self.own_kind.message
        if self.cause is not None:
            return str(self.cause)
        return "unknown error"

    def __str__(self) -> str:
        return self._render()

    @property
    def kind(self) -> ErrorKind | None:
        return kind_of(self)

    def has_kind(self, kind: ErrorKind) -> bool:
        return has_kind(self, kind)

    def find(self, error_type: type[E]) -> E | None:
        return find_error(self, error_type)


class PortfolioError(TrackerError):
    def __init__(
        self,
        operation: str,
        asset_id: str | None = None,
        cause: ErrorKind | BaseException | None = None,
        kind: ErrorKind | None = None,
    ) -> None:
        self.operation = operation
        self.asset_id = asset_id or None
        super().__init__(cause, kind)

    def _render(self) -> str:
        if self.asset_id:
            return f"portfolio {self.operation} failed for coin {self.asset_id}: {self.describe_cause()}"
        return f"portfolio {self.operation} failed: {self.describe_cause()}"


class APIError(TrackerError):
    def __init__(
        self,
        endpoint: str,
        status_code: int = 0,
        cause: ErrorKind | BaseException | None = None,
        kind: ErrorKind | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.status_code = status_code
        super().__init__(cause, kind)

    def _render(self) -> str:
        if self.status_code:
            return (
                f"API request to {self.endpoint} failed with status {self.status_code}: "
                f"{self.describe_cause()}"
            )
        return f"API request to {self.endpoint} failed: {self.describe_cause()}"


class DatabaseError(TrackerError):
    def __init__(
        self,
        operation: str,
        collection: str,
        cause: ErrorKind | BaseException | None = None,
        kind: ErrorKind | None = None,
    ) -> None:
        self.operation = operation
        self.collection = collection
        super().__init__(cause, kind)

    def _render(self) -> str:
        return f"database {self.operation} on collection '{self.collection}' failed: {self.describe_cause()}"


class ValidationError(TrackerError):
    def __init__(
        self,
        field: str,
        value: Any,
        cause: ErrorKind | BaseException | None = None,
        kind: ErrorKind | None = None,
    ) -> None:
        self.field = field
        self.value = value
        super().__init__(cause, kind)

    def _render(self) -> str:
        return f"validation failed for field '{self.field}' with value '{self.value}': {self.describe_cause()}"


def iter_chain(error: BaseException | None) -> Iterator[BaseException]:
    """Yield ``error`` and every exception it wraps, outermost first."""
    seen: set[int] = set()
    current = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        if isinstance(current, TrackerError):
            current = current.cause
        else:
            current = current.__cause__


def has_kind(error: BaseException | None, kind: ErrorKind) -> bool:
    return any(isinstance(item, TrackerError) and item.own_kind is kind for item in iter_chain(error))


def kind_of(error: BaseException | None) -> ErrorKind | None:
    for item in iter_chain(error):
        if isinstance(item, TrackerError) and item.own_kind is not None:
            return item.own_kind
    return None


def find_error(error: BaseException | None, error_type: type[E]) -> E | None:
    for item in iter_chain(error):
        if isinstance(item, error_type):
            return item
    return None
