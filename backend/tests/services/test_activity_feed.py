"""Activity Feed — verifies the merged group feed end to end.

Tests:
    - Canonical scenario: C1(t=10), C2(t=20), D1(t=15) → [C2, D1, C1]
    - Non-members get 403 before any feed work; unknown groups 403 for non-admins, 404 for site admins; no token 401
    - Type, animal, tag and date filters
    - Pagination after merge: pages concatenate to the full feed
    - Soft-deleted comments, updates and animals disappear
    - Offset beyond the ceiling is a 400
"""

from datetime import timedelta

from shelterhub.core.domain_types import FeedType, GroupId
from shelterhub.models import Animal, AnimalComment, Update
from shelterhub.services.activity_feed import ActivityAggregator, FeedFilters


def _labels(items) -> list[str]:
    return [f"{item['type']}:{item['id']}" for item in items]


async def test_canonical_scenario_order(fresh_db, world):
    page = await ActivityAggregator(fresh_db).get_feed(GroupId(world.g1.id))
    assert [(item.kind.value, item.id) for item in page.items] == [
        ("comment", world.c2.id),
        ("announcement", world.d1.id),
        ("comment", world.c1.id),
    ]
    assert page.total == 3
    assert page.has_more is False


async def test_comment_items_carry_animal_author_and_tags(fresh_db, world):
    page = await ActivityAggregator(fresh_db).get_feed(
        GroupId(world.g1.id), FeedType.COMMENTS,
    )
    oldest = page.items[-1]
    assert oldest.id == world.c1.id
    assert oldest.animal_name == "Biscuit"
    assert oldest.author.username == "u1"
    assert oldest.tags == ("Medical",)


async def test_feed_route_for_member(client, world, auth_headers):
    res = await client.get(
        f"/api/v1/groups/{world.g1.id}/activity", headers=auth_headers(world.u1),
    )
    assert res.status_code == 200
    body = res.json()
    assert _labels(body["items"]) == [
        f"comment:{world.c2.id}",
        f"announcement:{world.d1.id}",
        f"comment:{world.c1.id}",
    ]
    assert body["items"][1]["title"] == "Volunteer day"
    assert body["items"][2]["tags"] == ["Medical"]
    assert (body["total"], body["limit"], body["offset"], body["has_more"]) == (3, 20, 0, False)


async def test_non_member_gets_403(client, world, auth_headers):
    res = await client.get(
        f"/api/v1/groups/{world.g1.id}/activity", headers=auth_headers(world.u3),
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "ACCESS_DENIED"


async def test_site_admin_reads_any_group(client, world, auth_headers):
    res = await client.get(
        f"/api/v1/groups/{world.g1.id}/activity",
        headers=auth_headers(world.root, is_admin=True),
    )
    assert res.status_code == 200
    assert res.json()["total"] == 3


async def test_unknown_group_is_403_for_members_404_for_site_admins(client, world, auth_headers):
    member = await client.get("/api/v1/groups/9999/activity", headers=auth_headers(world.u1))
    admin = await client.get(
        "/api/v1/groups/9999/activity", headers=auth_headers(world.root, is_admin=True),
    )
    assert member.status_code == 403
    assert member.json()["error"]["code"] == "ACCESS_DENIED"
    assert admin.status_code == 404
    assert admin.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_missing_token_gets_401(client, world):
    res = await client.get(f"/api/v1/groups/{world.g1.id}/activity")
    assert res.status_code == 401


async def test_type_filter(client, world, auth_headers):
    url = f"/api/v1/groups/{world.g1.id}/activity"
    comments = (await client.get(url, params={"type": "comments"}, headers=auth_headers(world.u1))).json()
    updates = (await client.get(url, params={"type": "announcements"}, headers=auth_headers(world.u1))).json()
    unknown = (await client.get(url, params={"type": "photos"}, headers=auth_headers(world.u1))).json()
    assert {item["type"] for item in comments["items"]} == {"comment"}
    assert comments["total"] == 2
    assert _labels(updates["items"]) == [f"announcement:{world.d1.id}"]
    assert unknown["total"] == 3


async def test_tag_filter_narrows_comments(client, world, auth_headers):
    res = await client.get(
        f"/api/v1/groups/{world.g1.id}/activity",
        params={"type": "comments", "tags": "Medical, Unknown"},
        headers=auth_headers(world.u1),
    )
    assert _labels(res.json()["items"]) == [f"comment:{world.c1.id}"]


async def test_animal_filter_narrows_comments(test_db, fresh_db, world):
    other = Animal(group_id=world.g1.id, name="Pepper")
    test_db.add(other)
    await test_db.flush()
    test_db.add(AnimalComment(animal_id=other.id, user_id=world.u1.id, content="Shy"))
    await test_db.commit()

    page = await ActivityAggregator(fresh_db).get_feed(
        GroupId(world.g1.id), FeedType.COMMENTS,
        filters=FeedFilters(animal_id=other.id),
    )
    assert [item.animal_name for item in page.items] == ["Pepper"]


async def test_date_range_applies_to_both_sources(client, world, auth_headers):
    start = (world.c1.created_at + timedelta(minutes=2)).isoformat()
    end = (world.c2.created_at - timedelta(minutes=2)).isoformat()
    res = await client.get(
        f"/api/v1/groups/{world.g1.id}/activity",
        params={"from": start, "to": end},
        headers=auth_headers(world.u1),
    )
    assert _labels(res.json()["items"]) == [f"announcement:{world.d1.id}"]


async def test_unparseable_dates_are_ignored(client, world, auth_headers):
    res = await client.get(
        f"/api/v1/groups/{world.g1.id}/activity",
        params={"from": "yesterday"},
        headers=auth_headers(world.u1),
    )
    assert res.json()["total"] == 3


async def test_pages_concatenate_to_full_feed(client, test_db, world, auth_headers):
    base = world.c2.created_at
    for i in range(7):
        test_db.add(AnimalComment(
            animal_id=world.a1.id, user_id=world.u1.id,
            content=f"note {i}", created_at=base + timedelta(minutes=i % 3),
        ))
        test_db.add(Update(
            group_id=world.g1.id, user_id=world.u2.id, title=f"update {i}",
            content="weekly schedule", created_at=base + timedelta(minutes=i % 2),
        ))
    await test_db.commit()

    url = f"/api/v1/groups/{world.g1.id}/activity"
    full = (await client.get(url, params={"limit": 100}, headers=auth_headers(world.u1))).json()
    assert full["total"] == 17

    pages = []
    for offset in range(0, 20, 3):
        page = (await client.get(
            url, params={"limit": 3, "offset": offset}, headers=auth_headers(world.u1),
        )).json()
        pages.extend(page["items"])
    assert _labels(pages) == _labels(full["items"])
    assert len(set(_labels(pages))) == 17


async def test_repeated_reads_are_identical(client, world, auth_headers):
    url = f"/api/v1/groups/{world.g1.id}/activity"
    first = (await client.get(url, headers=auth_headers(world.u1))).json()
    second = (await client.get(url, headers=auth_headers(world.u1))).json()
    assert first["items"] == second["items"]


async def test_soft_deleted_rows_are_excluded(test_db, fresh_db, world):
    world.c2.soft_delete()
    world.d1.soft_delete()
    await test_db.commit()

    page = await ActivityAggregator(fresh_db).get_feed(GroupId(world.g1.id))
    assert [item.id for item in page.items] == [world.c1.id]
    assert page.total == 1


async def test_soft_deleted_animal_hides_its_comments(test_db, fresh_db, world):
    world.a1.soft_delete()
    await test_db.commit()

    page = await ActivityAggregator(fresh_db).get_feed(GroupId(world.g1.id))
    assert [item.kind.value for item in page.items] == ["announcement"]


async def test_offset_over_ceiling_is_400(client, world, auth_headers):
    res = await client.get(
        f"/api/v1/groups/{world.g1.id}/activity",
        params={"offset": 10_001},
        headers=auth_headers(world.u1),
    )
    assert res.status_code == 400
    assert res.json()["error"]["field"] == "offset"


async def test_bad_limit_falls_back_to_default(client, world, auth_headers):
    res = await client.get(
        f"/api/v1/groups/{world.g1.id}/activity",
        params={"limit": "lots", "offset": "-3"},
        headers=auth_headers(world.u1),
    )
    body = res.json()
    assert (body["limit"], body["offset"]) == (20, 0)
