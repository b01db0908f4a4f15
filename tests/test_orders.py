import pytest

from usedbooks.domain.errors import NotFoundError, UnsupportedActionError
from usedbooks.services.cart_service import CartService
from usedbooks.services.checkout_service import CheckoutService
from usedbooks.services.order_service import OrderService


@pytest.fixture
def order(db, alice_ctx, make_product):
    make_product("Calculus", "10.00", slug="calc")
    CartService(db).add_product(alice_ctx, "calc", 1)
    return CheckoutService(db).checkout(alice_ctx)


def test_admin_can_refund(db, admin_ctx, order):
    refunded = OrderService(db).apply_action(admin_ctx, order["id"], "refund")

    assert refunded["status"] == "refunded"
    assert refunded["refunded_at"] is not None
    assert refunded["total"] == order["total"]


def test_refund_does_not_restock(db, admin_ctx, order):
    from usedbooks.repos.product_repo import ProductRepo

    OrderService(db).refund(admin_ctx, order["id"])

    assert ProductRepo(db).get_by_slug("calc").status == "sold"


@pytest.mark.parametrize("user", ["alice", "bob", "admin"])
def test_non_admin_cannot_refund(db, order, user):
    from usedbooks.domain.context import RequestContext

    with pytest.raises(PermissionError):
        OrderService(db).apply_action(RequestContext(user_id=user), order["id"], "refund")


def test_refund_twice_is_rejected(db, admin_ctx, order):
    svc = OrderService(db)
    svc.refund(admin_ctx, order["id"])

    with pytest.raises(ValueError, match="Only paid orders"):
        svc.refund(admin_ctx, order["id"])


def test_unknown_order(db, admin_ctx):
    with pytest.raises(NotFoundError):
        OrderService(db).apply_action(admin_ctx, 999, "refund")


def test_unsupported_action(db, admin_ctx, order):
    with pytest.raises(UnsupportedActionError):
        OrderService(db).apply_action(admin_ctx, order["id"], "cancel")


def test_owner_and_admin_can_read_order(db, alice_ctx, bob_ctx, admin_ctx, order):
    svc = OrderService(db)

    assert svc.get_order(alice_ctx, order["id"])["id"] == order["id"]
    assert svc.get_order(admin_ctx, order["id"])["id"] == order["id"]
    with pytest.raises(PermissionError):
        svc.get_order(bob_ctx, order["id"])


def test_list_orders_only_returns_own(db, alice_ctx, bob_ctx, order):
    svc = OrderService(db)

    assert [o["id"] for o in svc.list_orders(alice_ctx)] == [order["id"]]
    assert svc.list_orders(bob_ctx) == []
