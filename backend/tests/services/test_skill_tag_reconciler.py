"""Skill-Tag Reconciler — verifies all-or-nothing replacement of a member's skill tags.

Tests:
    - Replacement sets exactly the requested set; duplicates collapse
    - A foreign tag rejects the whole request and leaves existing tags untouched
    - Idempotent; empty request clears; other groups' assignments survive
    - Non-member targets are rejected
    - Routes: GROUP_ADMIN required for writes, MEMBER for listing
"""

import pytest
from sqlalchemy import insert, select

from shelterhub.core.domain_types import GroupId, UserId
from shelterhub.core.errors import ValidationFailedError
from shelterhub.models import UserGroup, user_skill_tag_assignments
from shelterhub.services.skill_tags import SkillTagReconciler


async def _assigned(db, user_id: int) -> set[int]:
    result = await db.execute(
        select(user_skill_tag_assignments.c.user_skill_tag_id)
        .where(user_skill_tag_assignments.c.user_id == user_id)
    )
    return set(result.scalars().all())


async def test_replaces_with_requested_set(test_db, world):
    reconciler = SkillTagReconciler(test_db)
    tags = await reconciler.set_user_skill_tags(
        GroupId(world.g1.id), UserId(world.u1.id), [world.tag_a.id, world.tag_a2.id, world.tag_a.id],
    )
    assert {t.id for t in tags} == {world.tag_a.id, world.tag_a2.id}
    assert await _assigned(test_db, world.u1.id) == {world.tag_a.id, world.tag_a2.id}


async def test_is_idempotent(test_db, world):
    reconciler = SkillTagReconciler(test_db)
    request = [world.tag_a.id]
    await reconciler.set_user_skill_tags(GroupId(world.g1.id), UserId(world.u1.id), request)
    await reconciler.set_user_skill_tags(GroupId(world.g1.id), UserId(world.u1.id), request)
    assert await _assigned(test_db, world.u1.id) == {world.tag_a.id}


async def test_foreign_tag_rejects_everything(test_db, world):
    reconciler = SkillTagReconciler(test_db)
    await reconciler.set_user_skill_tags(
        GroupId(world.g1.id), UserId(world.u1.id), [world.tag_a2.id],
    )

    with pytest.raises(ValidationFailedError) as exc_info:
        await reconciler.set_user_skill_tags(
            GroupId(world.g1.id), UserId(world.u1.id), [world.tag_a.id, world.tag_b.id],
        )
    assert exc_info.value.details["invalid_tag_ids"] == [world.tag_b.id]
    assert await _assigned(test_db, world.u1.id) == {world.tag_a2.id}


async def test_deleted_tag_is_rejected(test_db, world):
    world.tag_a.soft_delete()
    await test_db.commit()
    with pytest.raises(ValidationFailedError):
        await SkillTagReconciler(test_db).set_user_skill_tags(
            GroupId(world.g1.id), UserId(world.u1.id), [world.tag_a.id],
        )


async def test_empty_request_clears_group_tags_only(test_db, world):
    test_db.add(UserGroup(user_id=world.u1.id, group_id=world.g2.id))
    await test_db.execute(insert(user_skill_tag_assignments).values(
        user_id=world.u1.id, user_skill_tag_id=world.tag_b.id,
    ))
    await test_db.commit()
    reconciler = SkillTagReconciler(test_db)
    await reconciler.set_user_skill_tags(
        GroupId(world.g1.id), UserId(world.u1.id), [world.tag_a.id],
    )

    await reconciler.set_user_skill_tags(GroupId(world.g1.id), UserId(world.u1.id), [])

    assert await _assigned(test_db, world.u1.id) == {world.tag_b.id}


async def test_non_member_target_is_rejected(test_db, world):
    with pytest.raises(ValidationFailedError) as exc_info:
        await SkillTagReconciler(test_db).set_user_skill_tags(
            GroupId(world.g1.id), UserId(world.u3.id), [world.tag_a.id],
        )
    assert exc_info.value.field == "user_id"
    assert await _assigned(test_db, world.u3.id) == set()


async def test_delete_tag_removes_assignments(test_db, world):
    reconciler = SkillTagReconciler(test_db)
    await reconciler.set_user_skill_tags(
        GroupId(world.g1.id), UserId(world.u1.id), [world.tag_a.id, world.tag_a2.id],
    )
    await reconciler.delete_tag(GroupId(world.g1.id), world.tag_a.id)

    assert await _assigned(test_db, world.u1.id) == {world.tag_a2.id}
    assert [t.id for t in await reconciler.list_tags(GroupId(world.g1.id))] == [world.tag_a2.id]


# --- routes -------------------------------------------------------------------

async def test_assign_route_scenario(client, test_db, world, auth_headers):
    """Group admin assigning a foreign tag gets 400 and the member keeps nothing."""
    res = await client.put(
        f"/api/v1/groups/{world.g1.id}/members/{world.u1.id}/skill-tags",
        json={"tag_ids": [world.tag_a.id, world.tag_b.id]},
        headers=auth_headers(world.u2),
    )
    assert res.status_code == 400
    assert res.json()["error"]["details"]["invalid_tag_ids"] == [world.tag_b.id]
    assert await _assigned(test_db, world.u1.id) == set()


async def test_assign_route_success(client, world, auth_headers):
    res = await client.put(
        f"/api/v1/groups/{world.g1.id}/members/{world.u1.id}/skill-tags",
        json={"tag_ids": [world.tag_a.id]},
        headers=auth_headers(world.u2),
    )
    assert res.status_code == 200
    assert [t["name"] for t in res.json()["tags"]] == ["Dog handling"]


async def test_plain_member_cannot_assign(client, world, auth_headers):
    res = await client.put(
        f"/api/v1/groups/{world.g1.id}/members/{world.u1.id}/skill-tags",
        json={"tag_ids": []},
        headers=auth_headers(world.u1),
    )
    assert res.status_code == 403


async def test_member_lists_tags_and_admin_creates(client, world, auth_headers):
    url = f"/api/v1/groups/{world.g1.id}/skill-tags"
    listed = await client.get(url, headers=auth_headers(world.u1))
    assert [t["name"] for t in listed.json()] == ["Dog handling", "Photography"]

    denied = await client.post(url, json={"name": "Cats", "color": "#fff"}, headers=auth_headers(world.u1))
    assert denied.status_code == 403

    created = await client.post(url, json={"name": "Cats", "color": "#fff"}, headers=auth_headers(world.u2))
    assert created.status_code == 201
    assert created.json()["group_id"] == world.g1.id


async def test_create_rejects_bad_color(client, world, auth_headers):
    res = await client.post(
        f"/api/v1/groups/{world.g1.id}/skill-tags",
        json={"name": "Cats", "color": "red"},
        headers=auth_headers(world.u2),
    )
    assert res.status_code == 400
