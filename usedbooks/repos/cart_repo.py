# usedbooks/repos/cart_repo.py
from datetime import datetime, timezone
from typing import Iterable, List

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from usedbooks.data.models.cart import CartModel
from usedbooks.data.models.cart_item import CartItemModel
from usedbooks.data.models.product import ProductModel, PRODUCT_AVAILABLE


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_user(self, user_id: str) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.user_id == user_id)
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def get_cart_items(self, cart_id: int) -> List[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.cart_id == cart_id)
                .order_by(CartItemModel.id)
            ).scalars()
        )

    def get_cart_item(self, cart_id: int, product_id: str) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def add_cart_item(self, item: CartItemModel) -> None:
        self.db.add(item)

    def delete_cart_item(self, cart_id: int, product_id: str) -> int:
        res = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        )
        return res.rowcount

    def clear_cart(self, cart_id: int) -> int:
        res = self.db.execute(
            delete(CartItemModel).where(CartItemModel.cart_id == cart_id)
        )
        return res.rowcount

    def purge_products(self, product_ids: Iterable[str]) -> int:
        """Usuwa linie z podanymi produktami ze WSZYSTKICH koszykow."""
        ids = list(product_ids)
        if not ids:
            return 0
        res = self.db.execute(
            delete(CartItemModel).where(CartItemModel.product_id.in_(ids))
        )
        return res.rowcount

    def purge_unavailable(self) -> int:
        """Linie wskazujace na sprzedane albo usuniete produkty."""
        available = select(ProductModel.slug).where(ProductModel.status == PRODUCT_AVAILABLE)
        res = self.db.execute(
            delete(CartItemModel).where(CartItemModel.product_id.not_in(available))
        )
        return res.rowcount

    def touch(self, cart: CartModel) -> None:
        cart.updated_at = datetime.now(timezone.utc)
        self.db.add(cart)

    def commit(self) -> None:
        self.db.commit()
