"""
Authorization policy: who may do what to which kind of resource.

One table answers every question. Handlers never compare roles themselves;
they ask ``authorize`` and act only on PERMIT.
"""

import uuid
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from artibrain.kernel.identity.principal import Principal
from artibrain.kernel.models.user import UserRole


class Action(str, Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class ResourceKind(str, Enum):
    POST = "post"
    CATEGORY = "category"
    TAG = "tag"
    USER = "user"


class Decision(str, Enum):
    PERMIT = "permit"
    DENY = "deny"

    @property
    def allowed(self) -> bool:
        return self is Decision.PERMIT


class Rule(str, Enum):
    """How a table entry decides."""
    ALLOW = "allow"
    OWNER = "owner"  # only when the actor owns the resource
    DENY = "deny"


_ALL_ACTIONS = {action: Rule.ALLOW for action in Action}
_READ_ONLY = {Action.READ: Rule.ALLOW}

# (role, kind) -> action -> rule. Anything missing is DENY.
POLICY: Dict[Tuple[UserRole, ResourceKind], Dict[Action, Rule]] = {
    (UserRole.ADMIN, ResourceKind.POST): _ALL_ACTIONS,
    (UserRole.ADMIN, ResourceKind.CATEGORY): _ALL_ACTIONS,
    (UserRole.ADMIN, ResourceKind.TAG): _ALL_ACTIONS,
    (UserRole.ADMIN, ResourceKind.USER): _ALL_ACTIONS,

    (UserRole.EDITOR, ResourceKind.POST): _ALL_ACTIONS,
    (UserRole.EDITOR, ResourceKind.CATEGORY): _ALL_ACTIONS,
    (UserRole.EDITOR, ResourceKind.TAG): _ALL_ACTIONS,

    (UserRole.AUTHOR, ResourceKind.POST): {
        Action.READ: Rule.ALLOW,
        Action.CREATE: Rule.ALLOW,
        Action.UPDATE: Rule.OWNER,
        Action.DELETE: Rule.OWNER,
    },
    (UserRole.AUTHOR, ResourceKind.CATEGORY): _READ_ONLY,
    (UserRole.AUTHOR, ResourceKind.TAG): _READ_ONLY,

    # Readers only ever see published posts; the public-read filter
    # enforces that part.
    (UserRole.READER, ResourceKind.POST): _READ_ONLY,
    (UserRole.READER, ResourceKind.CATEGORY): _READ_ONLY,
    (UserRole.READER, ResourceKind.TAG): _READ_ONLY,
}


def _coerce(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return None


def rule_for(
    role: Union[UserRole, str],
    action: Union[Action, str],
    kind: Union[ResourceKind, str],
) -> Rule:
    """Look up the table entry; unknown roles, actions or kinds get DENY."""
    role = _coerce(UserRole, role)
    action = _coerce(Action, action)
    kind = _coerce(ResourceKind, kind)
    if role is None or action is None or kind is None:
        return Rule.DENY
    return POLICY.get((role, kind), {}).get(action, Rule.DENY)


def authorize(
    role: Union[UserRole, str],
    action: Union[Action, str],
    kind: Union[ResourceKind, str],
    *,
    actor_id: Optional[uuid.UUID] = None,
    owner_id: Optional[uuid.UUID] = None,
) -> Decision:
    """
    Decide whether ``role`` may perform ``action`` on a resource of ``kind``.
    
    Ownership-scoped rules need the caller to pass both the acting
    identity and the resource's owner; the policy looks nothing up.
    """
    rule = rule_for(role, action, kind)
    if rule is Rule.ALLOW:
        return Decision.PERMIT
    if rule is Rule.OWNER and actor_id is not None and actor_id == owner_id:
        return Decision.PERMIT
    return Decision.DENY


def role_of(principal: Optional[Principal]) -> UserRole:
    """Anonymous callers act as READER."""
    return principal.role if principal is not None else UserRole.READER


def authorize_principal(
    principal: Optional[Principal],
    action: Union[Action, str],
    kind: Union[ResourceKind, str],
    owner_id: Optional[uuid.UUID] = None,
) -> Decision:
    """``authorize`` for a request's principal (or None when anonymous)."""
    return authorize(
        role_of(principal),
        action,
        kind,
        actor_id=principal.id if principal is not None else None,
        owner_id=owner_id,
    )


def may_ever(
    principal: Optional[Principal],
    action: Union[Action, str],
    kind: Union[ResourceKind, str],
) -> bool:
    """
    True when the role could be permitted for *some* resource of ``kind``.
    
    Services use this before looking a resource up, so a caller who could
    never act is refused without learning whether the resource exists.
    """
    return rule_for(role_of(principal), action, kind) is not Rule.DENY
