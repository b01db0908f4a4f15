from decimal import Decimal
from typing import Dict, Any, List
from sqlalchemy.orm import Session
from usedbooks.data.models.cart import CartModel
from usedbooks.data.models.cart_item import CartItemModel
from usedbooks.data.models.product import PRODUCT_AVAILABLE
from usedbooks.domain.actions import MAX_QUANTITY, QUANTITY_LIMIT_MESSAGE
from usedbooks.domain.context import RequestContext
from usedbooks.domain.errors import NotFoundError, ProductUnavailableError
from usedbooks.repos.cart_repo import CartRepo
from usedbooks.repos.product_repo import ProductRepo
from usedbooks.services.totals import compute_totals, cart_count
from usedbooks.utils.logging import get_logger

logger = get_logger(__name__)


def serialize_cart(cart: CartModel, items: List[CartItemModel]) -> Dict[str, Any]:
    #dict przeksztalcany w jsona, totals liczone zawsze z aktualnych linii
    return {
        "cart": {
            "user_id": cart.user_id,
            "items": [
                {
                    "product_id": i.product_id,
                    "name": i.name,
                    "price": i.price,
                    "quantity": i.quantity,
                }
                for i in items
            ],
            "count": cart_count(items),
            "created_at": cart.created_at,
            "updated_at": cart.updated_at,
        },
        "totals": compute_totals(items).as_dict(),
    }


class CartService:
    """
    Use case'y koszyka: jeden koszyk na uzytkownika, tworzony leniwie.
    commands (add, update, remove) modyfikuja stan
    query (get) tylko odczyt (+ ewentualne utworzenie pustego koszyka)
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    def get_or_create(self, user_id: str) -> CartModel:
        existing = self.repo.get_cart_by_user(user_id)
        if existing:
            return existing

        created = self.repo.create_cart(CartModel(user_id=user_id))
        logger.info(f"Utworzono nowy koszyk {created.id} dla uzytkownika {user_id}")
        return created

    #query
    def get_cart(self, ctx: RequestContext) -> Dict[str, Any]:
        cart = self.get_or_create(ctx.user_id)
        return serialize_cart(cart, self.repo.get_cart_items(cart.id))

    #commands
    def add_product(self, ctx: RequestContext, product_id: str, quantity: int = 1) -> Dict[str, Any]:
        quantity = max(1, quantity)
        if quantity > MAX_QUANTITY:
            raise ValueError(QUANTITY_LIMIT_MESSAGE)

        product = self.products.get_by_slug(product_id)
        if not product:
            raise NotFoundError("Product not found.")
        if product.status != PRODUCT_AVAILABLE:
            raise ProductUnavailableError("Product is no longer available.")

        cart = self.get_or_create(ctx.user_id)
        existing_item = self.repo.get_cart_item(cart.id, product_id)

        if existing_item:
            if existing_item.quantity + quantity > MAX_QUANTITY:
                raise ValueError(QUANTITY_LIMIT_MESSAGE)
            logger.info(
                f"Produkt {product_id} juz jest w koszyku {cart.id}, zwiekszam ilosc "
                f"z {existing_item.quantity} do {existing_item.quantity + quantity}"
            )
            existing_item.quantity += quantity
            self.repo.add_cart_item(existing_item)
        else:
            logger.info(f"Dodaje nowy produkt {product_id} do koszyka {cart.id}")
            # snapshot nazwy i ceny z chwili dodania
            self.repo.add_cart_item(
                CartItemModel(
                    cart_id=cart.id,
                    product_id=product_id,
                    name=product.name,
                    price=Decimal(str(product.price)),
                    quantity=quantity,
                )
            )

        self.repo.touch(cart)
        self.repo.commit()
        return serialize_cart(cart, self.repo.get_cart_items(cart.id))

    def update_quantity(self, ctx: RequestContext, product_id: str, quantity: int) -> Dict[str, Any]:
        cart = self.get_or_create(ctx.user_id)
        item = self.repo.get_cart_item(cart.id, product_id)

        if not item:
            raise NotFoundError("Item not found in cart.")
        if quantity > MAX_QUANTITY:
            raise ValueError(QUANTITY_LIMIT_MESSAGE)

        if quantity <= 0:
            logger.info(f"Ilosc {product_id} = {quantity}, usuwam linie z koszyka {cart.id}")
            self.repo.delete_cart_item(cart.id, product_id)
        else:
            logger.info(f"Ustawiam ilosc {product_id} w koszyku {cart.id} na {quantity}")
            item.quantity = quantity
            self.repo.add_cart_item(item)

        self.repo.touch(cart)
        self.repo.commit()
        return serialize_cart(cart, self.repo.get_cart_items(cart.id))

    def remove_product(self, ctx: RequestContext, product_id: str) -> Dict[str, Any]:
        cart = self.get_or_create(ctx.user_id)

        # brak linii to nie blad
        removed = self.repo.delete_cart_item(cart.id, product_id)
        if removed:
            logger.info(f"Produkt {product_id} usuniety z koszyka {cart.id}")
            self.repo.touch(cart)

        self.repo.commit()
        return serialize_cart(cart, self.repo.get_cart_items(cart.id))
