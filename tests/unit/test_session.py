"""Unit tests for session token issue and decode."""

import uuid
from datetime import timedelta

from jose import jwt

from artibrain.kernel.identity.principal import Principal
from artibrain.kernel.identity.session import TOKEN_TYPE, SessionTokenManager
from artibrain.kernel.models.user import UserRole

SECRET = "unit-test-secret-key-0123456789abcdef"


def _manager(**kwargs) -> SessionTokenManager:
    return SessionTokenManager(secret_key=SECRET, algorithm="HS256", expire_minutes=30, **kwargs)


def _principal(role: UserRole = UserRole.AUTHOR) -> Principal:
    return Principal(id=uuid.uuid4(), name="Alice Author", role=role)


class TestSessionTokenManager:
    def test_round_trip_keeps_identity_and_role(self):
        manager = _manager()
        principal = _principal(UserRole.EDITOR)
        
        token = manager.issue(principal)
        claims = manager.decode(token.access_token)
        
        assert token.token_type == "bearer"
        assert token.expires_in == 30 * 60
        assert claims is not None
        assert claims.sub == principal.id
        assert claims.role == UserRole.EDITOR
        assert claims.name == "Alice Author"
    
    def test_each_token_has_its_own_jti(self):
        manager = _manager()
        principal = _principal()
        
        first = manager.decode(manager.issue(principal).access_token)
        second = manager.decode(manager.issue(principal).access_token)
        
        assert first.jti != second.jti
    
    def test_expired_token_is_rejected(self):
        manager = _manager()
        token = manager.issue(_principal(), expires_delta=timedelta(seconds=-1))
        
        assert manager.decode(token.access_token) is None
    
    def test_wrong_secret_is_rejected(self):
        token = _manager().issue(_principal())
        other = SessionTokenManager(secret_key="another-secret-key-entirely-000000", algorithm="HS256")
        
        assert other.decode(token.access_token) is None
    
    def test_garbage_is_rejected(self):
        assert _manager().decode("not.a.token") is None
    
    def test_other_token_types_are_rejected(self):
        payload = {
            "sub": str(uuid.uuid4()),
            "role": "ADMIN",
            "name": "x",
            "iat": 0,
            "exp": 4102444800,
            "jti": "abc",
            "type": "refresh",
        }
        token = jwt.encode(payload, SECRET, algorithm="HS256")
        
        assert _manager().decode(token) is None
    
    def test_unknown_role_claim_is_rejected(self):
        payload = {
            "sub": str(uuid.uuid4()),
            "role": "SUPERUSER",
            "name": "x",
            "iat": 0,
            "exp": 4102444800,
            "jti": "abc",
            "type": TOKEN_TYPE,
        }
        token = jwt.encode(payload, SECRET, algorithm="HS256")
        
        assert _manager().decode(token) is None
