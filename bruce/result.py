"""
Result types returned by calls to external collaborators.

Every call to the OAuth provider, the completion API or the store returns
either ``Ok(value)`` or ``Err(kind, message)``. Call sites match on the type
explicitly instead of relying on a broad ``try``/``except``.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    NETWORK = "network"
    UPSTREAM_STATUS = "upstream_status"
    MALFORMED_PAYLOAD = "malformed_payload"
    STORE = "store"
    INVALID_REQUEST = "invalid_request"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str = ""

    def __str__(self) -> str:
        if self.message:
            return f"{self.kind.value}: {self.message}"
        return self.kind.value


Result = Union[Ok[T], Err]
