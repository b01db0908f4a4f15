import pytest

from usedbooks.domain.actions import (
    AddToCart,
    Checkout,
    RemoveFromCart,
    UpdateCartItem,
    parse_cart_command,
    parse_quantity,
)
from usedbooks.domain.errors import UnsupportedActionError


@pytest.mark.parametrize(
    "value, expected",
    [
        (3, 3),
        ("4", 4),
        ("2 copies", 2),
        (" 7", 7),
        (2.9, 2),
        ("-3", -3),
        ("abc", 1),
        (None, 1),
        (True, 1),
        ("", 1),
        (0, 1),
        (float("nan"), 1),
        ([2], 1),
    ],
)
def test_parse_quantity(value, expected):
    assert parse_quantity(value, 1) == expected


def test_add_defaults_to_one():
    cmd = parse_cart_command({"action": "add", "productId": "calc-made-easy"})

    assert isinstance(cmd, AddToCart)
    assert cmd.product_id == "calc-made-easy"
    assert cmd.quantity == 1


@pytest.mark.parametrize("quantity", [-5, 0, "zero", None, "-1"])
def test_add_clamps_to_one(quantity):
    cmd = parse_cart_command({"action": "add", "productId": "p", "quantity": quantity})

    assert cmd.quantity == 1


def test_add_keeps_valid_quantity():
    assert parse_cart_command({"action": "add", "productId": "p", "quantity": "3"}).quantity == 3


@pytest.mark.parametrize("quantity, expected", [(0, 0), (-2, 0), ("x", 0), ("5", 5), (2, 2)])
def test_update_clamps_to_zero(quantity, expected):
    cmd = parse_cart_command({"action": "update", "productId": "p", "quantity": quantity})

    assert isinstance(cmd, UpdateCartItem)
    assert cmd.quantity == expected


def test_remove_and_checkout():
    assert isinstance(parse_cart_command({"action": "remove", "productId": "p"}), RemoveFromCart)
    assert isinstance(parse_cart_command({"action": "checkout"}), Checkout)


@pytest.mark.parametrize("action", ["add", "update", "remove"])
@pytest.mark.parametrize("product_id", [None, ""])
def test_missing_product_id(action, product_id):
    payload = {"action": action}
    if product_id is not None:
        payload["productId"] = product_id

    with pytest.raises(ValueError, match="Missing product id"):
        parse_cart_command(payload)


@pytest.mark.parametrize("payload", [{"action": "explode"}, {}, None, ["add"], {"action": None}])
def test_unknown_action(payload):
    with pytest.raises(UnsupportedActionError):
        parse_cart_command(payload)


def test_snake_case_field_is_accepted():
    assert parse_cart_command({"action": "remove", "product_id": "p"}).product_id == "p"


@pytest.mark.parametrize("action", ["add", "update"])
def test_quantity_upper_bound(action):
    assert parse_cart_command({"action": action, "productId": "p", "quantity": 999}).quantity == 999

    with pytest.raises(ValueError, match="Quantity cannot exceed 999."):
        parse_cart_command({"action": action, "productId": "p", "quantity": "99999999999999999999"})
