"""Tagged result of a directory read.

A read either finds a record, finds nothing, or cannot reach the backend.
Keeping the last two apart lets callers tell denial-by-policy from
denial-by-outage.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from tenantscope.exceptions import StoreUnavailableError
from tenantscope.types import LookupStatus

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Lookup(Generic[T]):
    status: LookupStatus
    value: T | None = None
    error: str | None = None

    @classmethod
    def found(cls, value: T) -> Lookup[T]:
        return cls(status=LookupStatus.FOUND, value=value)

    @classmethod
    def not_found(cls) -> Lookup[T]:
        return cls(status=LookupStatus.NOT_FOUND)

    @classmethod
    def unavailable(cls, error: BaseException | str) -> Lookup[T]:
        return cls(status=LookupStatus.UNAVAILABLE, error=str(error))

    @property
    def is_found(self) -> bool:
        return self.status is LookupStatus.FOUND

    @property
    def is_unavailable(self) -> bool:
        return self.status is LookupStatus.UNAVAILABLE

    def unwrap(self) -> T | None:
        """Return the record, None on a miss, or raise if the backend was down."""
        if self.status is LookupStatus.UNAVAILABLE:
            raise StoreUnavailableError(self.error or "directory store unavailable")
        return self.value
