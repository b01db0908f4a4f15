# tests/conftest.py
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from usedbooks.data.database import Database
from usedbooks.domain.context import RequestContext
from usedbooks.main import create_app
from usedbooks.services.product_service import ProductService
from usedbooks.services.user_service import UserService
from usedbooks.utils.settings import ADMIN_USER_ID


@pytest.fixture
def database():
    database = Database("sqlite://")
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture
def db(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def app(database):
    return create_app(database)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_client(app):
    """Kolejni zalogowani klienci, kazdy z wlasnym cookie sesji."""
    clients = []

    def _make(userid: str, password: str = "secret-pass"):
        c = TestClient(app)
        if userid == ADMIN_USER_ID:
            # id admina jest zarezerwowany, konto zaklada seed
            session = app.state.db.session()
            try:
                UserService(session).ensure_admin(password)
            finally:
                session.close()
        else:
            c.post(
                "/api/auth/register",
                json={"userid": userid, "password": password, "confirmPassword": password},
            )
        resp = c.post("/api/auth/login", json={"userid": userid, "password": password})
        assert resp.status_code == 200, resp.text
        clients.append(c)
        return c

    yield _make
    for c in clients:
        c.close()


@pytest.fixture
def alice_ctx():
    return RequestContext(user_id="alice")


@pytest.fixture
def bob_ctx():
    return RequestContext(user_id="bob")


@pytest.fixture
def admin_ctx():
    return RequestContext(user_id=ADMIN_USER_ID, is_admin=True)


def listing(name: str, price, **extra):
    payload = {
        "name": name,
        "price": price,
        "short_description": f"{name} in good shape.",
        "description": f"Used copy of {name}.",
        "headline": f"Grab {name}",
        "image": "https://covers.openlibrary.org/b/isbn/9781593279288-L.jpg",
        "specs": "Condition: Good\nFormat: Paperback",
    }
    payload.update(extra)
    return payload


@pytest.fixture
def make_product(db):
    def _make(name: str, price="10.00", owner: RequestContext | None = None, slug: str | None = None):
        return ProductService(db).create_product(owner, listing(name, Decimal(str(price))), slug=slug)

    return _make
