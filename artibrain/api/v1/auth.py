"""
Authentication endpoints.
"""

from fastapi import APIRouter, Request

from artibrain.api.deps import CurrentPrincipal, DbSession, get_client_ip, unwrap
from artibrain.kernel.events.event_store import EventStore
from artibrain.kernel.identity.identity_service import IdentityService
from artibrain.kernel.identity.session import issue_session_token
from artibrain.kernel.models.event_log import EventType
from artibrain.logging_config import get_logger
from artibrain.schemas.auth import LoginRequest, PrincipalResponse, TokenResponse

router = APIRouter()
logger = get_logger(__name__)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: Request,
    data: LoginRequest,
    db: DbSession,
):
    """
    Exchange email and password for a session token.
    
    Unknown emails and wrong passwords get the same 401.
    """
    principal = unwrap(await IdentityService(db).authenticate(data.email, data.password))
    
    await EventStore(db).log(
        event_type=EventType.USER_LOGGED_IN,
        entity_type="user",
        entity_id=principal.id,
        user_id=principal.id,
        ip_address=get_client_ip(request),
    )
    token = issue_session_token(principal)
    logger.info("User logged in", extra={"user_id": principal.id, "role": principal.role})
    
    return TokenResponse(
        access_token=token.access_token,
        token_type=token.token_type,
        expires_in=token.expires_in,
        user=PrincipalResponse(id=principal.id, name=principal.name, role=principal.role),
    )


@router.get("/me", response_model=PrincipalResponse)
async def me(principal: CurrentPrincipal):
    """The principal behind the presented token."""
    return PrincipalResponse(id=principal.id, name=principal.name, role=principal.role)
