"""
FastAPI dependencies: database session, request principal, client info,
and the translation of service Failures into HTTP errors.
"""

from typing import Annotated, Any, Dict, NoReturn, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from artibrain.database import get_db
from artibrain.kernel.errors import ErrorKind, Failure, is_failure
from artibrain.kernel.identity.principal import Principal
from artibrain.kernel.identity.session import decode_session_token
from artibrain.kernel.models.user import User


security = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_principal_optional(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: DbSession,
) -> Optional[Principal]:
    """
    Resolve the bearer token to a Principal, or None.

    A token whose user is gone, or whose role claim no longer matches the
    stored role, resolves to None; the holder has to log in again.
    """
    if not credentials:
        return None

    claims = decode_session_token(credentials.credentials)
    if claims is None:
        return None

    user = await db.get(User, claims.sub)
    if user is None or user.role_value != claims.role.value:
        return None

    return Principal(id=user.id, name=user.name, role=claims.role)


async def get_principal(
    principal: Annotated[Optional[Principal], Depends(get_principal_optional)],
) -> Principal:
    """Require an authenticated principal or raise 401."""
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal


CurrentPrincipal = Annotated[Principal, Depends(get_principal)]
OptionalPrincipal = Annotated[Optional[Principal], Depends(get_principal_optional)]


def get_client_ip(request: Request) -> Optional[str]:
    """Extract client IP from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


# Status code and client-facing message per failure category. Messages name
# the category only, never the check that failed.
FAILURE_RESPONSES: Dict[ErrorKind, tuple] = {
    ErrorKind.INVALID_CREDENTIALS: (status.HTTP_401_UNAUTHORIZED, "Invalid email or password"),
    ErrorKind.FORBIDDEN: (status.HTTP_403_FORBIDDEN, "Forbidden"),
    ErrorKind.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Not found"),
    ErrorKind.INVALID_STATE_REQUEST: (status.HTTP_422_UNPROCESSABLE_CONTENT, "Invalid status request"),
    ErrorKind.CONFLICT: (status.HTTP_409_CONFLICT, "Already exists"),
    ErrorKind.INVALID_REQUEST: (status.HTTP_400_BAD_REQUEST, "Invalid request"),
}


def raise_failure(failure: Failure) -> NoReturn:
    status_code, detail = FAILURE_RESPONSES[failure.kind]
    raise HTTPException(status_code=status_code, detail=detail)


def unwrap(result: Any) -> Any:
    """Return a service result, raising the matching HTTP error for a Failure."""
    if is_failure(result):
        raise_failure(result)
    return result
