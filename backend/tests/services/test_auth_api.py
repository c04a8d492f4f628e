"""Auth Routes — registration, login, token resolution, and their log entries.

Invariants:
    - One log entry per attempt: register/register_failed, login/login_failed
    - Unknown username and wrong password are indistinguishable to the caller
    - A deactivated account cannot log in (403) and its tokens stop working (401)
"""

import threading

from sqlalchemy import select

from worksite.models.activity_log import ActivityLog

REGISTER = {"username": "carla", "email": "carla@example.com", "password": "hunter22"}


async def _entries(test_db, *log_types):
    result = await test_db.execute(
        select(ActivityLog)
        .where(ActivityLog.log_type.in_(log_types))
        .order_by(ActivityLog.id),
    )
    return result.scalars().all()


async def test_register_returns_token_and_user(client):
    res = await client.post("/api/v1/auth/register", json=REGISTER)

    assert res.status_code == 201
    body = res.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["username"] == "carla"
    assert body["user"]["role"] == "user"
    assert body["user"]["active"] is True
    assert "password" not in body["user"]
    assert "password_hash" not in body["user"]


async def test_registered_token_resolves_to_account(client):
    token = (await client.post("/api/v1/auth/register", json=REGISTER)).json()["access_token"]

    res = await client.get(
        "/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"},
    )

    assert res.status_code == 200
    assert res.json()["email"] == "carla@example.com"


async def test_register_is_logged_once(client, activity_dispatcher, test_db):
    res = await client.post("/api/v1/auth/register", json=REGISTER)
    await activity_dispatcher.flush()

    entries = await _entries(test_db, "register", "register_failed")

    assert len(entries) == 1
    assert entries[0].log_type == "register"
    assert entries[0].user_id == res.json()["user"]["id"]
    assert entries[0].entity_type == "user"


async def test_duplicate_register_is_409_and_logged(
    client, alice, activity_dispatcher, test_db,
):
    res = await client.post(
        "/api/v1/auth/register",
        json={"username": "alice", "email": "new@example.com", "password": "hunter22"},
    )
    await activity_dispatcher.flush()

    assert res.status_code == 409
    entries = await _entries(test_db, "register", "register_failed")
    assert [e.log_type for e in entries] == ["register_failed"]
    assert entries[0].user_id is None
    assert entries[0].details["reason"] == "DUPLICATE_ACCOUNT"


async def test_duplicate_email_is_409(client, alice):
    res = await client.post(
        "/api/v1/auth/register",
        json={"username": "alice2", "email": "alice@example.com", "password": "hunter22"},
    )
    assert res.status_code == 409


async def test_register_short_password_is_400(client):
    res = await client.post(
        "/api/v1/auth/register", json={**REGISTER, "password": "abc"},
    )
    assert res.status_code == 400


async def test_login_success_is_logged(client, alice, activity_dispatcher, test_db):
    res = await client.post(
        "/api/v1/auth/login", json={"username": "alice", "password": "secret123"},
    )
    await activity_dispatcher.flush()

    assert res.status_code == 200
    assert res.json()["user"]["id"] == alice.id
    entries = await _entries(test_db, "login", "login_failed")
    assert [(e.log_type, e.user_id) for e in entries] == [("login", alice.id)]


async def test_wrong_password_is_401_and_logged(
    client, alice, activity_dispatcher, test_db,
):
    res = await client.post(
        "/api/v1/auth/login", json={"username": "alice", "password": "wrong-one"},
    )
    await activity_dispatcher.flush()

    assert res.status_code == 401
    entries = await _entries(test_db, "login", "login_failed")
    assert [(e.log_type, e.user_id) for e in entries] == [("login_failed", alice.id)]


async def test_unknown_user_matches_wrong_password(client, alice):
    unknown = await client.post(
        "/api/v1/auth/login", json={"username": "nobody", "password": "secret123"},
    )
    wrong = await client.post(
        "/api/v1/auth/login", json={"username": "alice", "password": "nope-nope"},
    )

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json()["error"]["message"] == wrong.json()["error"]["message"]


async def test_unknown_user_login_failure_has_no_user(
    client, activity_dispatcher, test_db,
):
    await client.post(
        "/api/v1/auth/login", json={"username": "stranger", "password": "secret123"},
    )
    await activity_dispatcher.flush()

    entries = await _entries(test_db, "login_failed")
    assert len(entries) == 1
    assert entries[0].user_id is None
    assert entries[0].details["username"] == "stranger"


async def test_inactive_account_cannot_login(client, make_user):
    await make_user("dora", active=False)

    res = await client.post(
        "/api/v1/auth/login", json={"username": "dora", "password": "secret123"},
    )

    assert res.status_code == 403


async def test_token_of_inactive_account_is_rejected(client, make_user, headers_for):
    dora = await make_user("dora", active=False)

    res = await client.get("/api/v1/auth/me", headers=headers_for(dora))

    assert res.status_code == 401


# ─── Rejected payloads ───────────────────────────────────────────

async def test_register_with_invalid_email_is_logged_as_failed(
    client, activity_dispatcher, test_db,
):
    res = await client.post(
        "/api/v1/auth/register", json={**REGISTER, "email": "not-an-email"},
    )
    await activity_dispatcher.flush()

    assert res.status_code == 400
    entries = await _entries(test_db, "register", "register_failed")
    assert [e.log_type for e in entries] == ["register_failed"]
    assert entries[0].details == {"reason": "VALIDATION_ERROR", "username": "carla"}


async def test_login_with_empty_password_is_logged_as_failed(
    client, alice, activity_dispatcher, test_db,
):
    res = await client.post(
        "/api/v1/auth/login", json={"username": "alice", "password": ""},
    )
    await activity_dispatcher.flush()

    assert res.status_code == 400
    entries = await _entries(test_db, "login", "login_failed")
    assert [e.log_type for e in entries] == ["login_failed"]
    assert entries[0].details["reason"] == "VALIDATION_ERROR"


async def test_rejected_payload_elsewhere_is_not_an_auth_event(
    client, alice, headers_for, activity_dispatcher, test_db,
):
    await client.post("/api/v1/workers", json={}, headers=headers_for(alice))
    await activity_dispatcher.flush()

    rows = (await test_db.execute(select(ActivityLog))).scalars().all()
    assert rows == []


# ─── Password hashing off the event loop ─────────────────────────

async def test_password_work_runs_outside_the_event_loop_thread(client, monkeypatch):
    import worksite.services.auth_service as auth_module

    loop_thread = threading.get_ident()
    hashing_threads, verifying_threads = [], []
    real_hash, real_verify = auth_module.get_password_hash, auth_module.verify_password

    def tracking_hash(password):
        hashing_threads.append(threading.get_ident())
        return real_hash(password)

    def tracking_verify(plain, hashed):
        verifying_threads.append(threading.get_ident())
        return real_verify(plain, hashed)

    monkeypatch.setattr(auth_module, "get_password_hash", tracking_hash)
    monkeypatch.setattr(auth_module, "verify_password", tracking_verify)

    await client.post("/api/v1/auth/register", json=REGISTER)
    res = await client.post(
        "/api/v1/auth/login",
        json={"username": REGISTER["username"], "password": REGISTER["password"]},
    )

    assert res.status_code == 200
    assert hashing_threads and loop_thread not in hashing_threads
    assert verifying_threads and loop_thread not in verifying_threads
