"""
Ownership-based authorization policy.

authorize() is a pure function of (role, actor owner id, target owner id,
operation). It never touches the database, so callers can evaluate it
before any mutation and a denial leaves no side effects behind.

Rules:
- read: any recognised role
- create, update: admin only
- soft_delete, restore: admin, or the owner of the target
- hard_delete: admin, or the owner when the target is self-owned
- anything with an unrecognised role: denied
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional, Union

from app.core.exceptions import ForbiddenError
from app.models.account import Account, AccountRole

logger = logging.getLogger(__name__)


class Operation(str, enum.Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    SOFT_DELETE = "soft_delete"
    RESTORE = "restore"
    HARD_DELETE = "hard_delete"


class Decision(str, enum.Enum):
    ALLOW = "allow"
    DENY = "deny"


ADMIN_ONLY = {Operation.CREATE, Operation.UPDATE}
OWNER_OR_ADMIN = {Operation.SOFT_DELETE, Operation.RESTORE, Operation.HARD_DELETE}


def parse_role(role: Union[AccountRole, str, None]) -> Optional[AccountRole]:
    """Coerce a role claim into the closed enum, or None if it is not one."""
    if isinstance(role, AccountRole):
        return role
    if not isinstance(role, str):
        return None
    try:
        return AccountRole(role.lower())
    except ValueError:
        return None


def authorize(
    actor_role: Union[AccountRole, str, None],
    actor_owner_id: Optional[int],
    target_owner_id: Optional[int],
    operation: Operation,
) -> Decision:
    """
    Decide whether an actor may perform an operation on a target.

    Args:
        actor_role: Role of the actor (enum member or raw claim string)
        actor_owner_id: ID the actor owns (its linked Person or Account), if any
        target_owner_id: Owner ID recorded on the target record
        operation: The operation being attempted

    Returns:
        Decision.ALLOW or Decision.DENY
    """
    role = parse_role(actor_role)
    if role is None:
        return Decision.DENY

    if role == AccountRole.ADMIN:
        return Decision.ALLOW

    if operation == Operation.READ:
        return Decision.ALLOW

    if operation in ADMIN_ONLY:
        return Decision.DENY

    if operation in OWNER_OR_ADMIN:
        owns_target = (
            actor_owner_id is not None
            and target_owner_id is not None
            and actor_owner_id == target_owner_id
        )
        return Decision.ALLOW if owns_target else Decision.DENY

    return Decision.DENY


@dataclass(frozen=True)
class Actor:
    """
    The authenticated identity performing an operation.

    person_id is the Person the actor owns (alumni accounts linked to a
    Person); it is None for admins without a Person and for unlinked accounts.
    """
    role: Union[AccountRole, str]
    account_id: int
    person_id: Optional[int] = None

    @classmethod
    def from_account(cls, account: Account) -> "Actor":
        return cls(role=account.role, account_id=account.id, person_id=account.person_id)

    @property
    def is_admin(self) -> bool:
        return parse_role(self.role) == AccountRole.ADMIN


def require(
    actor: Actor,
    operation: Operation,
    target_owner_id: Optional[int] = None,
    actor_owner_id: Optional[int] = None,
    resource: str = "record",
) -> None:
    """
    Raise ForbiddenError unless the policy allows the operation.

    actor_owner_id defaults to the actor's Person; pass the account id
    instead for account-owned resources such as uploaded files.
    """
    owner_id = actor.person_id if actor_owner_id is None else actor_owner_id
    decision = authorize(actor.role, owner_id, target_owner_id, operation)
    if decision == Decision.DENY:
        logger.warning(
            f"Denied {operation.value} on {resource} for account {actor.account_id} "
            f"(role={actor.role}, owner={owner_id}, target_owner={target_owner_id})"
        )
        raise ForbiddenError(f"Not allowed to {operation.value.replace('_', ' ')} this {resource}")
