# usedbooks/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Annotated, List

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

# Decimal w bazie, number w JSONie
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class CartItemOut(CamelModel):
    """Line item w koszyku (response)."""

    product_id: str
    name: str
    price: Money
    quantity: int


class CartOut(CamelModel):
    """Koszyk uzytkownika (response)."""

    user_id: str
    items: List[CartItemOut]
    count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TotalsOut(CamelModel):
    subtotal: Money
    tax: Money
    grand_total: Money


class CartResponse(CamelModel):
    cart: CartOut
    totals: TotalsOut


class CartActionResponse(CartResponse):
    ok: bool = True


class CheckoutResponse(CamelModel):
    ok: bool = True
    order_id: int


class ConfirmationResponse(CamelModel):
    confirmed: bool


class OrderItemOut(CamelModel):
    product_id: str
    name: str
    price: Money
    quantity: int


class OrderOut(CamelModel):
    """Zamowienie (response)."""

    id: int
    user_id: str
    items: List[OrderItemOut]
    subtotal: Money
    tax: Money
    total: Money
    status: str
    refunded_at: datetime | None = None
    created_at: datetime


class OrderResponse(CamelModel):
    order: OrderOut


class OrderListResponse(CamelModel):
    orders: List[OrderOut]


class OrderActionIn(CamelModel):
    action: str | None = None


class OrderActionResponse(OrderResponse):
    ok: bool = True


class ProductIn(CamelModel):
    """
    Formularz ogloszenia. Walidacja wymaganych pol jest w ProductService,
    tutaj wszystko opcjonalne zeby zwrocic 400 z czytelnym komunikatem.
    """

    name: str | None = None
    price: Decimal | str | float | None = None
    short_description: str | None = None
    description: str | None = None
    headline: str | None = None
    image: str | None = None
    images: List[str] | None = None
    specs: List[str] | str | None = None


class ProductOut(CamelModel):
    """Produkt z katalogu (response); id == slug."""

    id: str
    slug: str
    name: str
    price: Money
    short_description: str
    description: str
    headline: str
    specs: List[str]
    image: str
    images: List[str]
    owner_id: str | None = None
    status: str
    sold_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductResponse(CamelModel):
    product: ProductOut


class ProductActionResponse(ProductResponse):
    ok: bool = True


class ProductListResponse(CamelModel):
    products: List[ProductOut]


class GenerateListingIn(CamelModel):
    title: str | None = None
    edition: str | None = None
    price: Decimal | str | float | None = None
    condition: str = ""
    authors: str = ""


class RegisterIn(CamelModel):
    userid: str | None = None
    password: str | None = None
    confirm_password: str | None = None


class LoginIn(CamelModel):
    userid: str | None = None
    password: str | None = None


class LoginResponse(CamelModel):
    ok: bool = True
    user_id: str


class MessageResponse(CamelModel):
    ok: bool = True
    message: str | None = None
