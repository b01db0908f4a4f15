import pytest

from usedbooks.data.seed import seed_admin
from usedbooks.utils.settings import ADMIN_USER_ID


def register(client, userid, password="pw-12345", confirm=None):
    return client.post(
        "/api/auth/register",
        json={"userid": userid, "password": password, "confirmPassword": confirm or password},
    )


def test_register_and_login(client):
    resp = register(client, "carol")
    assert resp.status_code == 200
    assert resp.json()["ok"] is True

    resp = client.post("/api/auth/login", json={"userid": "carol", "password": "pw-12345"})
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "userId": "carol"}

    assert client.get("/api/cart").json()["cart"]["userId"] == "carol"


def test_register_validation(client):
    assert client.post("/api/auth/register", json={"userid": "x"}).status_code == 400
    assert register(client, "carol", "one", "two").status_code == 400


def test_register_duplicate(client):
    register(client, "carol")

    assert register(client, "carol").status_code == 409


def test_login_failures(client):
    register(client, "carol")

    assert client.post("/api/auth/login", json={"userid": "carol"}).status_code == 400
    assert client.post("/api/auth/login", json={"userid": "carol", "password": "wrong"}).status_code == 401
    assert client.post("/api/auth/login", json={"userid": "dave", "password": "pw-12345"}).status_code == 401


def test_password_is_hashed(client, db):
    from usedbooks.repos.user_repo import UserRepo

    register(client, "carol")

    user = UserRepo(db).get_user("carol")
    assert user.password_hash != "pw-12345"


def test_logout_clears_session(client):
    register(client, "carol")
    client.post("/api/auth/login", json={"userid": "carol", "password": "pw-12345"})

    assert client.post("/api/auth/logout").json()["ok"] is True
    assert client.get("/api/cart").status_code == 401


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


@pytest.mark.parametrize("userid", [ADMIN_USER_ID, ADMIN_USER_ID.lower(), f" {ADMIN_USER_ID.upper()} "])
def test_admin_userid_is_reserved(client, userid):
    resp = register(client, userid)

    assert resp.status_code == 409
    resp = client.post("/api/auth/login", json={"userid": ADMIN_USER_ID, "password": "pw-12345"})
    assert resp.status_code == 401


def test_seeded_admin_can_log_in(client, database):
    seed_admin(database, "admin-pass")
    seed_admin(database, "other-pass")

    resp = client.post("/api/auth/login", json={"userid": ADMIN_USER_ID, "password": "admin-pass"})
    assert resp.json() == {"ok": True, "userId": ADMIN_USER_ID}
