from decimal import Decimal

import pytest
from sqlalchemy import func, select

from usedbooks.data.models.order import OrderModel
from usedbooks.domain.errors import EmptyCartError
from usedbooks.repos.product_repo import ProductRepo
from usedbooks.services.cart_service import CartService
from usedbooks.services.checkout_service import CheckoutService


def order_count(db):
    return db.execute(select(func.count(OrderModel.id))).scalar_one()


def test_checkout_empty_cart_is_rejected(db, alice_ctx):
    with pytest.raises(EmptyCartError):
        CheckoutService(db).checkout(alice_ctx)

    assert order_count(db) == 0


def test_checkout_creates_single_paid_order_with_cart_totals(db, alice_ctx, make_product):
    make_product("Calculus", "10.00", slug="calc")
    make_product("Algebra", "5.50", slug="alg")
    carts = CartService(db)
    carts.add_product(alice_ctx, "calc", 2)
    before = carts.add_product(alice_ctx, "alg", 1)["totals"]

    order = CheckoutService(db).checkout(alice_ctx)

    assert order_count(db) == 1
    assert order["status"] == "paid"
    assert order["user_id"] == "alice"
    assert order["subtotal"] == before["subtotal"] == Decimal("25.50")
    assert order["tax"] == before["tax"] == Decimal("1.79")
    assert order["total"] == before["grand_total"] == Decimal("27.29")
    assert [(i["product_id"], i["quantity"], i["price"]) for i in order["items"]] == [
        ("calc", 2, Decimal("10.00")),
        ("alg", 1, Decimal("5.50")),
    ]


def test_checkout_marks_products_sold(db, alice_ctx, make_product):
    make_product("Calculus", "10.00", slug="calc")
    make_product("Untouched", "3.00", slug="other")
    CartService(db).add_product(alice_ctx, "calc", 1)

    CheckoutService(db).checkout(alice_ctx)

    repo = ProductRepo(db)
    assert repo.get_by_slug("calc").status == "sold"
    assert repo.get_by_slug("calc").sold_at is not None
    assert repo.get_by_slug("other").status == "available"
    assert repo.get_by_slug("other").sold_at is None


def test_checkout_purges_sold_products_from_every_cart(db, alice_ctx, bob_ctx, make_product):
    make_product("Calculus", "10.00", slug="calc")
    make_product("Algebra", "5.50", slug="alg")
    carts = CartService(db)
    carts.add_product(alice_ctx, "calc", 1)
    carts.add_product(bob_ctx, "calc", 3)
    carts.add_product(bob_ctx, "alg", 1)

    CheckoutService(db).checkout(alice_ctx)

    assert carts.get_cart(alice_ctx)["cart"]["items"] == []
    bob_items = carts.get_cart(bob_ctx)["cart"]["items"]
    assert [i["product_id"] for i in bob_items] == ["alg"]


def test_second_checkout_of_cleared_cart_fails(db, alice_ctx, make_product):
    make_product("Calculus", "10.00", slug="calc")
    CartService(db).add_product(alice_ctx, "calc", 1)
    svc = CheckoutService(db)
    svc.checkout(alice_ctx)

    with pytest.raises(EmptyCartError):
        svc.checkout(alice_ctx)

    assert order_count(db) == 1
