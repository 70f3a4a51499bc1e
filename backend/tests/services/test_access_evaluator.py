"""Access Evaluator — verifies membership-based authorization and fail-closed behavior.

Tests:
    - MEMBER iff a membership row exists; GROUP_ADMIN iff role is admin
    - Site admins pass without touching the store
    - Unknown and soft-deleted groups deny
    - Store failures deny and log at ERROR
    - Removing a membership revokes access on the next call (no caching)
"""

import logging

import pytest
from sqlalchemy import delete
from sqlalchemy.exc import OperationalError

from shelterhub.core.domain_types import (
    AccessLevel, GroupId, MembershipRole, Principal, UserId,
)
from shelterhub.core.errors import AccessDeniedError
from shelterhub.models import UserGroup
from shelterhub.services.access_evaluator import AccessEvaluator, require_site_admin
from shelterhub.services.membership_store import SqlMembershipStore


class _ExplodingStore:
    """MembershipStore whose every lookup fails."""

    def __init__(self):
        self.calls = 0

    async def get_role(self, user_id, group_id):
        self.calls += 1
        raise OperationalError("SELECT 1", {}, Exception("connection reset"))

    async def group_exists(self, group_id):
        self.calls += 1
        raise OperationalError("SELECT 1", {}, Exception("connection reset"))


class _StaticStore:
    def __init__(self, role: MembershipRole | None):
        self.role = role

    async def get_role(self, user_id, group_id):
        return self.role

    async def group_exists(self, group_id):
        return True


def _principal(user, is_site_admin=False) -> Principal:
    return Principal(user_id=UserId(user.id), is_site_admin=is_site_admin)


async def test_member_has_member_access_only(test_db, world):
    evaluator = AccessEvaluator(SqlMembershipStore(test_db))
    p = _principal(world.u1)
    assert await evaluator.authorize(p, GroupId(world.g1.id), AccessLevel.MEMBER)
    assert not await evaluator.authorize(p, GroupId(world.g1.id), AccessLevel.GROUP_ADMIN)


async def test_group_admin_has_both_levels(test_db, world):
    evaluator = AccessEvaluator(SqlMembershipStore(test_db))
    p = _principal(world.u2)
    assert await evaluator.authorize(p, GroupId(world.g1.id), AccessLevel.MEMBER)
    assert await evaluator.authorize(p, GroupId(world.g1.id), AccessLevel.GROUP_ADMIN)


async def test_group_admin_of_one_group_is_nothing_in_another(test_db, world):
    evaluator = AccessEvaluator(SqlMembershipStore(test_db))
    assert not await evaluator.authorize(
        _principal(world.u2), GroupId(world.g2.id), AccessLevel.MEMBER,
    )


async def test_non_member_is_denied(test_db, world):
    evaluator = AccessEvaluator(SqlMembershipStore(test_db))
    assert not await evaluator.authorize(
        _principal(world.u3), GroupId(world.g1.id), AccessLevel.MEMBER,
    )


async def test_unknown_group_is_denied(test_db, world):
    evaluator = AccessEvaluator(SqlMembershipStore(test_db))
    assert not await evaluator.authorize(
        _principal(world.u1), GroupId(9999), AccessLevel.MEMBER,
    )


async def test_soft_deleted_group_is_denied(test_db, world):
    world.g1.soft_delete()
    await test_db.commit()
    evaluator = AccessEvaluator(SqlMembershipStore(test_db))
    assert not await evaluator.authorize(
        _principal(world.u2), GroupId(world.g1.id), AccessLevel.MEMBER,
    )


async def test_site_admin_skips_store():
    store = _ExplodingStore()
    evaluator = AccessEvaluator(store)
    admin = Principal(user_id=UserId(1), is_site_admin=True)
    assert await evaluator.authorize(admin, GroupId(5), AccessLevel.GROUP_ADMIN)
    assert store.calls == 0


async def test_store_failure_denies_and_logs_error(caplog):
    evaluator = AccessEvaluator(_ExplodingStore())
    with caplog.at_level(logging.ERROR, logger="shelterhub.services.access_evaluator"):
        allowed = await evaluator.authorize(
            Principal(user_id=UserId(1)), GroupId(5), AccessLevel.MEMBER,
        )
    assert allowed is False
    assert any(r.levelno == logging.ERROR for r in caplog.records)


async def test_removal_revokes_access_on_next_call(test_db, world):
    evaluator = AccessEvaluator(SqlMembershipStore(test_db))
    p = _principal(world.u1)
    assert await evaluator.authorize(p, GroupId(world.g1.id), AccessLevel.MEMBER)

    await test_db.execute(
        delete(UserGroup)
        .where(UserGroup.user_id == world.u1.id)
        .where(UserGroup.group_id == world.g1.id)
    )
    await test_db.commit()

    assert not await evaluator.authorize(p, GroupId(world.g1.id), AccessLevel.MEMBER)


async def test_require_raises_access_denied():
    evaluator = AccessEvaluator(_StaticStore(MembershipRole.MEMBER))
    with pytest.raises(AccessDeniedError):
        await evaluator.require(
            Principal(user_id=UserId(1)), GroupId(1), AccessLevel.GROUP_ADMIN,
        )


async def test_require_passes_for_sufficient_role():
    evaluator = AccessEvaluator(_StaticStore(MembershipRole.ADMIN))
    await evaluator.require(Principal(user_id=UserId(1)), GroupId(1), AccessLevel.GROUP_ADMIN)


def test_require_site_admin():
    require_site_admin(Principal(user_id=UserId(1), is_site_admin=True))
    with pytest.raises(AccessDeniedError):
        require_site_admin(Principal(user_id=UserId(1)))
