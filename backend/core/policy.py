# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Access-control decisions.

Two rules:

* owned resources (uploaded files) – the owner or an admin may mutate;
* ownerless resources (products, the user directory) – any authenticated
  caller may mutate.

The predicates are pure; the ``ensure_*`` helpers raise the matching error
for use inside handlers.
"""

from typing import Optional

from core.errors import ForbiddenError, MissingTokenError

ADMIN = "admin"
USER = "user"
VALID_ROLES = {ADMIN, USER}


def can_mutate_owned(actor, owner_id: int) -> bool:
    if actor is None:
        return False
    return actor.role == ADMIN or actor.id == owner_id


def can_mutate_global(actor) -> bool:
    return actor is not None


def can_assign_role(actor, role: str) -> bool:
    """Only admins may create another admin."""
    if role == ADMIN:
        return actor is not None and actor.role == ADMIN
    return can_mutate_global(actor)


def ensure_can_mutate_owned(actor, owner_id: int, message: Optional[str] = None) -> None:
    if not can_mutate_owned(actor, owner_id):
        raise ForbiddenError(message)


def ensure_can_mutate_global(actor) -> None:
    if not can_mutate_global(actor):
        raise MissingTokenError()
