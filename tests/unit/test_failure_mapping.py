"""Unit tests for turning service Failures into HTTP errors."""

import pytest
from fastapi import HTTPException

from artibrain.api.deps import FAILURE_RESPONSES, raise_failure, unwrap
from artibrain.kernel.errors import (
    CONFLICT,
    FORBIDDEN,
    INVALID_CREDENTIALS,
    INVALID_REQUEST,
    INVALID_STATE_REQUEST,
    NOT_FOUND,
    ErrorKind,
)


def test_every_kind_has_a_response():
    assert set(FAILURE_RESPONSES) == set(ErrorKind)


@pytest.mark.parametrize(
    "failure,status_code",
    [
        (INVALID_CREDENTIALS, 401),
        (FORBIDDEN, 403),
        (NOT_FOUND, 404),
        (CONFLICT, 409),
        (INVALID_REQUEST, 400),
        (INVALID_STATE_REQUEST, 422),
    ],
)
def test_status_codes(failure, status_code):
    with pytest.raises(HTTPException) as exc_info:
        raise_failure(failure)
    
    assert exc_info.value.status_code == status_code


def test_unwrap_passes_values_through():
    value = {"ok": True}
    
    assert unwrap(value) is value
    assert unwrap(None) is None
    with pytest.raises(HTTPException):
        unwrap(FORBIDDEN)
