"""
Tagged failure values returned across the core/service boundary.

Core functions and services never raise for expected outcomes; they return
either their success value or a Failure. A Failure names only its category,
so a caller can't tell which particular check tripped.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    INVALID_CREDENTIALS = "invalid_credentials"
    FORBIDDEN = "forbidden"
    INVALID_STATE_REQUEST = "invalid_state_request"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID_REQUEST = "invalid_request"


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind


INVALID_CREDENTIALS = Failure(ErrorKind.INVALID_CREDENTIALS)
FORBIDDEN = Failure(ErrorKind.FORBIDDEN)
INVALID_STATE_REQUEST = Failure(ErrorKind.INVALID_STATE_REQUEST)
NOT_FOUND = Failure(ErrorKind.NOT_FOUND)
CONFLICT = Failure(ErrorKind.CONFLICT)
INVALID_REQUEST = Failure(ErrorKind.INVALID_REQUEST)


def is_failure(value: Any) -> bool:
    return isinstance(value, Failure)
