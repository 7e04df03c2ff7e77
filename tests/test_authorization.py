"""
Unit tests for the ownership-based authorization policy.

Tests:
- Admin is allowed everything
- Alumni may read, and delete/restore only what they own
- Create/update are admin only
- Unrecognised roles are always denied
"""

import pytest

from app.core.exceptions import ForbiddenError
from app.models.account import AccountRole
from app.services.authorization import (
    Actor,
    Decision,
    Operation,
    authorize,
    parse_role,
    require,
)


class TestParseRole:
    """Role claims are coerced into the closed enum"""

    def test_enum_member_passes_through(self):
        assert parse_role(AccountRole.ADMIN) == AccountRole.ADMIN

    def test_string_is_case_insensitive(self):
        assert parse_role("Alumni") == AccountRole.ALUMNI
        assert parse_role("ADMIN") == AccountRole.ADMIN

    @pytest.mark.parametrize("claim", ["superuser", "", None, 1, "user"])
    def test_unknown_roles_are_rejected(self, claim):
        assert parse_role(claim) is None


class TestAuthorize:
    """Decision table of authorize()"""

    @pytest.mark.parametrize("operation", list(Operation))
    def test_admin_allowed_everything(self, operation):
        assert authorize(AccountRole.ADMIN, None, 42, operation) == Decision.ALLOW

    @pytest.mark.parametrize("operation", list(Operation))
    def test_unknown_role_denied_everything(self, operation):
        assert authorize("superuser", 1, 1, operation) == Decision.DENY

    def test_alumni_can_read_anything(self):
        assert authorize(AccountRole.ALUMNI, 1, 2, Operation.READ) == Decision.ALLOW
        assert authorize(AccountRole.ALUMNI, None, None, Operation.READ) == Decision.ALLOW

    @pytest.mark.parametrize("operation", [Operation.CREATE, Operation.UPDATE])
    def test_alumni_cannot_create_or_update_even_own(self, operation):
        assert authorize(AccountRole.ALUMNI, 1, 1, operation) == Decision.DENY

    @pytest.mark.parametrize("operation", [Operation.SOFT_DELETE, Operation.RESTORE, Operation.HARD_DELETE])
    def test_alumni_owner_allowed(self, operation):
        assert authorize("alumni", 7, 7, operation) == Decision.ALLOW

    @pytest.mark.parametrize("operation", [Operation.SOFT_DELETE, Operation.RESTORE, Operation.HARD_DELETE])
    def test_alumni_non_owner_denied(self, operation):
        assert authorize(AccountRole.ALUMNI, 7, 8, operation) == Decision.DENY

    def test_missing_owner_ids_never_match(self):
        assert authorize(AccountRole.ALUMNI, None, None, Operation.SOFT_DELETE) == Decision.DENY
        assert authorize(AccountRole.ALUMNI, None, 3, Operation.RESTORE) == Decision.DENY


class TestRequire:
    """require() raises ForbiddenError on deny"""

    def test_allow_returns_none(self):
        actor = Actor(role=AccountRole.ALUMNI, account_id=10, person_id=3)
        assert require(actor, Operation.SOFT_DELETE, target_owner_id=3) is None

    def test_deny_raises_forbidden(self):
        actor = Actor(role=AccountRole.ALUMNI, account_id=10, person_id=3)
        with pytest.raises(ForbiddenError):
            require(actor, Operation.HARD_DELETE, target_owner_id=4, resource="engagement")

    def test_account_owned_resources_use_explicit_owner(self):
        actor = Actor(role=AccountRole.ALUMNI, account_id=10, person_id=3)
        require(actor, Operation.HARD_DELETE, target_owner_id=10, actor_owner_id=actor.account_id, resource="file")
        with pytest.raises(ForbiddenError):
            require(actor, Operation.HARD_DELETE, target_owner_id=11, actor_owner_id=actor.account_id, resource="file")

    def test_unknown_role_actor_is_forbidden(self):
        actor = Actor(role="moderator", account_id=10, person_id=3)
        assert actor.is_admin is False
        with pytest.raises(ForbiddenError):
            require(actor, Operation.READ)
