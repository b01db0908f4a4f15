# usedbooks/domain/actions.py
import math
import re
from enum import Enum
from typing import Any, Dict, Literal, Type, Union

from pydantic import Field, ValidationError, field_validator

from usedbooks.domain.errors import UnsupportedActionError
from usedbooks.domain.schemas import CamelModel

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

# gorna granica ilosci jednej linii koszyka (kolumna INTEGER)
MAX_QUANTITY = 999
QUANTITY_LIMIT_MESSAGE = f"Quantity cannot exceed {MAX_QUANTITY}."


class CartAction(str, Enum):
    ADD = "add"
    UPDATE = "update"
    REMOVE = "remove"
    CHECKOUT = "checkout"


def parse_quantity(value: Any, default: int) -> int:
    """
    Lagodne parsowanie ilosci z formularza: "3" -> 3, "2 szt" -> 2,
    2.9 -> 2, cokolwiek nienumerycznego (albo 0) -> default.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            return default
        parsed = int(value)
    elif isinstance(value, str):
        match = _LEADING_INT.match(value)
        if not match:
            return default
        parsed = int(match.group(1))
    else:
        return default
    return parsed or default


class AddToCart(CamelModel):
    action: Literal["add"] = "add"
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, le=MAX_QUANTITY)

    @field_validator("quantity", mode="before")
    @classmethod
    def clamp_quantity(cls, v):
        return max(1, parse_quantity(v, 1))


class UpdateCartItem(CamelModel):
    action: Literal["update"] = "update"
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(0, le=MAX_QUANTITY)

    @field_validator("quantity", mode="before")
    @classmethod
    def clamp_quantity(cls, v):
        return max(0, parse_quantity(v, 0))


class RemoveFromCart(CamelModel):
    action: Literal["remove"] = "remove"
    product_id: str = Field(..., min_length=1)


class Checkout(CamelModel):
    action: Literal["checkout"] = "checkout"


CartCommand = Union[AddToCart, UpdateCartItem, RemoveFromCart, Checkout]

COMMANDS: Dict[CartAction, Type[CartCommand]] = {
    CartAction.ADD: AddToCart,
    CartAction.UPDATE: UpdateCartItem,
    CartAction.REMOVE: RemoveFromCart,
    CartAction.CHECKOUT: Checkout,
}


def parse_cart_command(payload: Any) -> CartCommand:
    """
    Zamienia body POST /api/cart na konkretna komende.

    Nieznana akcja -> UnsupportedActionError (405),
    brakujace/zle pola -> ValueError (400).
    """
    if not isinstance(payload, dict):
        raise UnsupportedActionError("Unsupported action.")

    try:
        action = CartAction(payload.get("action"))
    except ValueError:
        raise UnsupportedActionError("Unsupported action.")

    model = COMMANDS[action]
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        fields = {str(err["loc"][0]) for err in e.errors() if err.get("loc")}
        if fields & {"productId", "product_id"}:
            raise ValueError("Missing product id.")
        if "quantity" in fields:
            raise ValueError(QUANTITY_LIMIT_MESSAGE)
        raise ValueError(f"Invalid {action.value} request.")
