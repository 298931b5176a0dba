"""Roles and permission matrix for policy lifecycle operations.

Roles:
- SYSTEM_ADMIN: Authors drafts, uploads files, submits for review, deletes
- CONTENTS_REVIEWER: Decides on review items, retries indexing, rolls back

Reads (list_versions, list_groups, get_version) take no actor and are not
guarded.

Permission Matrix:
┌──────────────────────┬──────────────┬───────────────────┐
│ Action               │ SYSTEM_ADMIN │ CONTENTS_REVIEWER │
├──────────────────────┼──────────────┼───────────────────┤
│ Edit Draft           │      ✓       │                   │
│ Submit Review        │      ✓       │                   │
│ Soft Delete          │      ✓       │                   │
│ Approve / Reject     │      ✓       │         ✓         │
│ Retry Indexing       │      ✓       │         ✓         │
│ Rollback             │      ✓       │         ✓         │
└──────────────────────┴──────────────┴───────────────────┘
"""

import logging
from enum import Enum
from typing import Callable, Dict, Mapping, Optional, Set

from ..errors import ForbiddenError

logger = logging.getLogger(__name__)


class PolicyRole(str, Enum):
    """Roles of actors calling into the policy store."""
    SYSTEM_ADMIN = "SYSTEM_ADMIN"
    CONTENTS_REVIEWER = "CONTENTS_REVIEWER"


class PolicyAction(str, Enum):
    """Operations guarded by the authorizer."""
    EDIT_DRAFT = "EDIT_DRAFT"
    SUBMIT_REVIEW = "SUBMIT_REVIEW"
    SOFT_DELETE = "SOFT_DELETE"
    REVIEW_DECIDE = "REVIEW_DECIDE"
    RETRY_INDEXING = "RETRY_INDEXING"
    ROLLBACK = "ROLLBACK"


PERMISSIONS: Dict[PolicyRole, Set[PolicyAction]] = {
    PolicyRole.SYSTEM_ADMIN: set(PolicyAction),
    PolicyRole.CONTENTS_REVIEWER: {
        PolicyAction.REVIEW_DECIDE,
        PolicyAction.RETRY_INDEXING,
        PolicyAction.ROLLBACK,
    },
}


def has_permission(role: Optional[PolicyRole], action: PolicyAction) -> bool:
    """Check if a role may perform an action.

    Examples:
        >>> has_permission(PolicyRole.SYSTEM_ADMIN, PolicyAction.SOFT_DELETE)
        True
        >>> has_permission(PolicyRole.CONTENTS_REVIEWER, PolicyAction.EDIT_DRAFT)
        False
        >>> has_permission(None, PolicyAction.REVIEW_DECIDE)
        False
    """
    if role is None:
        return False
    return action in PERMISSIONS.get(role, set())


RoleResolver = Callable[[str], Optional[PolicyRole]]


class RoleAuthorizer:
    """Resolves an actor to a role and checks it against the permission matrix.

    Actors are plain strings; an actor named like a role (e.g. "SYSTEM_ADMIN")
    resolves to that role unless an explicit mapping says otherwise.

    Args:
        actor_roles: Explicit actor → role assignments
        resolver: Fallback lookup for actors missing from actor_roles
    """

    def __init__(
        self,
        actor_roles: Optional[Mapping[str, PolicyRole]] = None,
        resolver: Optional[RoleResolver] = None,
    ) -> None:
        self._actor_roles = dict(actor_roles or {})
        self._resolver = resolver

    def role_of(self, actor: str) -> Optional[PolicyRole]:
        if actor in self._actor_roles:
            return self._actor_roles[actor]
        if self._resolver is not None:
            return self._resolver(actor)
        try:
            return PolicyRole(actor)
        except ValueError:
            return None

    def authorize(self, actor: str, action: PolicyAction) -> None:
        """Raise ForbiddenError unless the actor's role allows the action"""
        role = self.role_of(actor)
        if not has_permission(role, action):
            logger.info(
                f"Denied {action.value} for actor {actor} (role={role.value if role else None})",
                extra={"actor": actor, "error_code": ForbiddenError.code.value},
            )
            raise ForbiddenError(f"Actor {actor} is not allowed to perform {action.value}")
