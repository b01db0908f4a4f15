# usedbooks/services/checkout_service.py
from datetime import datetime, timezone
from typing import Dict, Any

from sqlalchemy.orm import Session

from usedbooks.data.models.order import OrderModel, ORDER_PAID
from usedbooks.data.models.order_item import OrderItemModel
from usedbooks.domain.context import RequestContext
from usedbooks.domain.errors import EmptyCartError
from usedbooks.repos.cart_repo import CartRepo
from usedbooks.repos.order_repo import OrderRepo
from usedbooks.repos.product_repo import ProductRepo
from usedbooks.services.cart_service import CartService
from usedbooks.services.order_service import serialize_order
from usedbooks.services.totals import compute_totals
from usedbooks.utils.logging import get_logger

logger = get_logger(__name__)


class CheckoutService:
    """
    Zamiana koszyka w zamowienie.

    1. Walidacja - koszyk nie moze byc pusty
    2. Snapshot totals z aktualnych linii
    3. Zapis zamowienia ze statusem "paid"
    4. Oznaczenie kupionych produktow jako "sold"
    5. Usuniecie tych produktow ze wszystkich koszykow
    6. Wyczyszczenie koszyka kupujacego

    Kazdy krok commituje osobno, bez transakcji obejmujacej calosc i bez
    rollbacku: blad po kroku 3 zostawia zamowienie "paid" przy
    niespojnym stanie produktow/koszykow. Brak tez locka na produktach,
    dwa rownolegle checkouty tego samego produktu moga oba przejsc.
    """

    def __init__(self, db: Session):
        self.carts = CartService(db)
        self.cart_repo = CartRepo(db)
        self.orders = OrderRepo(db)
        self.products = ProductRepo(db)

    def checkout(self, ctx: RequestContext) -> Dict[str, Any]:
        cart = self.carts.get_or_create(ctx.user_id)
        items = self.cart_repo.get_cart_items(cart.id)

        if not items:
            raise EmptyCartError("Cart is empty.")

        totals = compute_totals(items)

        order = self.orders.create_order(
            OrderModel(
                user_id=ctx.user_id,
                status=ORDER_PAID,
                subtotal=totals.subtotal,
                tax=totals.tax,
                total=totals.grand_total,
                items=[
                    OrderItemModel(
                        product_id=i.product_id,
                        name=i.name,
                        price=i.price,
                        quantity=i.quantity,
                    )
                    for i in items
                ],
            )
        )
        logger.info(
            f"Order {order.id} created for user {ctx.user_id} "
            f"({len(items)} items, total {totals.grand_total})"
        )

        product_ids = list(dict.fromkeys(i.product_id for i in items))

        sold = self.products.mark_sold(product_ids, datetime.now(timezone.utc))
        self.products.commit()
        logger.info(f"Order {order.id}: marked {sold} products as sold")

        purged = self.cart_repo.purge_products(product_ids)
        self.cart_repo.commit()
        logger.info(f"Order {order.id}: purged {purged} cart lines referencing sold products")

        self.cart_repo.clear_cart(cart.id)
        self.cart_repo.touch(cart)
        self.cart_repo.commit()

        return serialize_order(order)
