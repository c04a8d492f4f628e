"""Worker Routes — CRUD round-trip, validation, tenant isolation, listing.

Invariants:
    - A worker of another tenant answers exactly like a missing one (404)
    - Paging through a sorted list never repeats or skips a worker
    - Invalid payloads are rejected with 400 before reaching storage
"""

import pytest
from sqlalchemy import select

from worksite.models.activity_log import ActivityLog

WORKER = {"name": "Ana Souza", "position": "Mason", "age": 34, "salary": 3200}


async def _create(client, headers, **overrides):
    res = await client.post(
        "/api/v1/workers", json={**WORKER, **overrides}, headers=headers,
    )
    assert res.status_code == 201, res.text
    return res.json()


async def test_requires_authentication(client):
    res = await client.get("/api/v1/workers")
    assert res.status_code == 401
    assert res.headers["www-authenticate"] == "Bearer"


async def test_invalid_token_is_rejected(client):
    res = await client.get(
        "/api/v1/workers", headers={"Authorization": "Bearer not-a-token"},
    )
    assert res.status_code == 401


async def test_create_then_get_round_trip(client, alice, headers_for):
    headers = headers_for(alice)
    created = await _create(client, headers)

    res = await client.get(f"/api/v1/workers/{created['id']}", headers=headers)

    assert res.status_code == 200
    body = res.json()
    assert body["name"] == "Ana Souza"
    assert body["salary"] == 3200
    assert body["user_id"] == alice.id


async def test_user_id_in_body_is_ignored(client, alice, bob, headers_for):
    created = await _create(client, headers_for(alice), user_id=bob.id)
    assert created["user_id"] == alice.id


async def test_update_replaces_fields(client, alice, headers_for):
    headers = headers_for(alice)
    created = await _create(client, headers)

    res = await client.put(
        f"/api/v1/workers/{created['id']}",
        json={**WORKER, "position": "Foreman", "salary": 4100},
        headers=headers,
    )

    assert res.status_code == 200
    assert res.json()["position"] == "Foreman"
    fetched = await client.get(f"/api/v1/workers/{created['id']}", headers=headers)
    assert fetched.json()["salary"] == 4100


async def test_delete_returns_204_then_404(client, alice, headers_for):
    headers = headers_for(alice)
    created = await _create(client, headers)

    res = await client.delete(f"/api/v1/workers/{created['id']}", headers=headers)
    assert res.status_code == 204

    res = await client.get(f"/api/v1/workers/{created['id']}", headers=headers)
    assert res.status_code == 404


@pytest.mark.parametrize("overrides", [
    {"age": 17}, {"age": 101}, {"salary": -5}, {"name": "A"}, {"position": ""},
])
async def test_invalid_payload_is_400(client, alice, headers_for, overrides):
    res = await client.post(
        "/api/v1/workers", json={**WORKER, **overrides}, headers=headers_for(alice),
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_missing_field_is_400(client, alice, headers_for):
    payload = {k: v for k, v in WORKER.items() if k != "age"}
    res = await client.post("/api/v1/workers", json=payload, headers=headers_for(alice))
    assert res.status_code == 400


# ─── Tenant isolation ────────────────────────────────────────────

async def test_foreign_worker_looks_missing(client, alice, bob, headers_for):
    created = await _create(client, headers_for(alice))
    bob_headers = headers_for(bob)

    foreign = await client.get(f"/api/v1/workers/{created['id']}", headers=bob_headers)
    missing = await client.get("/api/v1/workers/999999", headers=bob_headers)

    assert foreign.status_code == missing.status_code == 404
    assert foreign.json()["error"]["code"] == missing.json()["error"]["code"]


async def test_foreign_worker_cannot_be_changed(client, alice, bob, headers_for):
    created = await _create(client, headers_for(alice))
    bob_headers = headers_for(bob)

    put = await client.put(
        f"/api/v1/workers/{created['id']}", json=WORKER, headers=bob_headers,
    )
    delete = await client.delete(
        f"/api/v1/workers/{created['id']}", headers=bob_headers,
    )

    assert put.status_code == 404
    assert delete.status_code == 404
    still_there = await client.get(
        f"/api/v1/workers/{created['id']}", headers=headers_for(alice),
    )
    assert still_there.status_code == 200


async def test_list_only_shows_own_workers(client, alice, bob, headers_for):
    await _create(client, headers_for(alice), name="Alice Crew")
    await _create(client, headers_for(bob), name="Bob Crew")

    res = await client.get("/api/v1/workers", headers=headers_for(alice))

    body = res.json()
    assert body["total"] == 1
    assert [w["name"] for w in body["data"]] == ["Alice Crew"]


# ─── Listing ─────────────────────────────────────────────────────

async def test_filters_by_position_and_salary(client, alice, headers_for):
    headers = headers_for(alice)
    await _create(client, headers, name="Low", position="Carpenter", salary=1000)
    await _create(client, headers, name="High", position="Carpenter", salary=5000)
    await _create(client, headers, name="Other", position="Welder", salary=5000)

    res = await client.get(
        "/api/v1/workers",
        params={"position": "carp", "min_salary": "2000"},
        headers=headers,
    )

    assert [w["name"] for w in res.json()["data"]] == ["High"]


async def test_malformed_filter_values_are_ignored(client, alice, headers_for):
    headers = headers_for(alice)
    await _create(client, headers)

    res = await client.get(
        "/api/v1/workers", params={"min_age": "old", "page": "zero"}, headers=headers,
    )

    assert res.status_code == 200
    assert res.json()["total"] == 1
    assert res.json()["page"] == 1


async def test_search_treats_wildcards_literally(client, alice, headers_for):
    headers = headers_for(alice)
    await _create(client, headers, name="Ana Souza")

    res = await client.get("/api/v1/workers", params={"search": "%"}, headers=headers)

    assert res.json()["total"] == 0


async def test_sort_by_salary_desc(client, alice, headers_for):
    headers = headers_for(alice)
    for name, salary in (("Mid", 2000), ("Top", 9000), ("Base", 1000)):
        await _create(client, headers, name=name, salary=salary)

    res = await client.get(
        "/api/v1/workers",
        params={"sort_by": "salary", "sort_order": "desc"},
        headers=headers,
    )

    assert [w["name"] for w in res.json()["data"]] == ["Top", "Mid", "Base"]


async def test_pages_never_overlap_on_tied_sort_key(client, alice, headers_for):
    headers = headers_for(alice)
    ids = [
        (await _create(client, headers, name=f"Worker {i}"))["id"]
        for i in range(5)
    ]

    seen = []
    for page in (1, 2, 3):
        res = await client.get(
            "/api/v1/workers",
            params={"sort_by": "position", "page": page, "page_size": 2},
            headers=headers,
        )
        body = res.json()
        assert body["total"] == 5
        seen.extend(w["id"] for w in body["data"])

    assert sorted(seen) == sorted(ids)
    assert len(seen) == len(set(seen))


async def test_page_size_is_capped(client, alice, headers_for):
    res = await client.get(
        "/api/v1/workers", params={"page_size": "5000"}, headers=headers_for(alice),
    )
    assert res.json()["page_size"] == 100


# ─── Activity ────────────────────────────────────────────────────

async def test_mutations_are_logged(
    client, alice, headers_for, activity_dispatcher, test_db,
):
    headers = headers_for(alice)
    created = await _create(client, headers)
    await client.put(f"/api/v1/workers/{created['id']}", json=WORKER, headers=headers)
    await client.delete(f"/api/v1/workers/{created['id']}", headers=headers)
    await activity_dispatcher.flush()

    rows = (await test_db.execute(
        select(ActivityLog).order_by(ActivityLog.id),
    )).scalars().all()

    assert [r.log_type for r in rows] == ["create", "update", "delete"]
    assert {r.entity_id for r in rows} == {created["id"]}
    assert {r.entity_type for r in rows} == {"worker"}
    assert {r.user_id for r in rows} == {alice.id}


async def test_failed_mutation_is_not_logged(
    client, alice, bob, headers_for, activity_dispatcher, test_db,
):
    created = await _create(client, headers_for(alice))
    await client.delete(f"/api/v1/workers/{created['id']}", headers=headers_for(bob))
    await activity_dispatcher.flush()

    rows = (await test_db.execute(select(ActivityLog))).scalars().all()

    assert [r.log_type for r in rows] == ["create"]


# ─── Oversized integers ──────────────────────────────────────────

HUGE = 10 ** 20


@pytest.mark.parametrize("params", [
    {"min_salary": str(HUGE)},
    {"max_age": "3000000000"},
    {"page": str(HUGE)},
])
async def test_oversized_list_params_are_ignored(client, alice, headers_for, params):
    headers = headers_for(alice)
    await _create(client, headers)

    res = await client.get("/api/v1/workers", params=params, headers=headers)

    assert res.status_code == 200
    assert res.json()["total"] == 1


async def test_oversized_id_is_404(client, alice, headers_for):
    headers = headers_for(alice)

    get = await client.get(f"/api/v1/workers/{HUGE}", headers=headers)
    put = await client.put(f"/api/v1/workers/{HUGE}", json=WORKER, headers=headers)
    delete = await client.delete(f"/api/v1/workers/{HUGE}", headers=headers)

    assert get.status_code == put.status_code == delete.status_code == 404


async def test_oversized_salary_is_400(client, alice, headers_for):
    res = await client.post(
        "/api/v1/workers", json={**WORKER, "salary": HUGE}, headers=headers_for(alice),
    )
    assert res.status_code == 400
