"""
Permission core - table-driven role authorization.
"""

from artibrain.kernel.permissions.policy import (
    POLICY,
    Action,
    Decision,
    ResourceKind,
    Rule,
    authorize,
    authorize_principal,
    may_ever,
    role_of,
    rule_for,
)

__all__ = [
    "POLICY",
    "Action",
    "Decision",
    "ResourceKind",
    "Rule",
    "authorize",
    "authorize_principal",
    "may_ever",
    "role_of",
    "rule_for",
]
