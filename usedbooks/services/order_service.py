# usedbooks/services/order_service.py
from datetime import datetime, timezone
from typing import Dict, Any, List

from sqlalchemy.orm import Session

from usedbooks.data.models.order import OrderModel, ORDER_PAID, ORDER_REFUNDED
from usedbooks.domain.context import RequestContext
from usedbooks.domain.errors import NotFoundError, UnsupportedActionError
from usedbooks.repos.order_repo import OrderRepo
from usedbooks.utils.logging import get_logger

logger = get_logger(__name__)


def serialize_order(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "user_id": order.user_id,
        "items": [
            {
                "product_id": i.product_id,
                "name": i.name,
                "price": i.price,
                "quantity": i.quantity,
            }
            for i in order.items
        ],
        "subtotal": order.subtotal,
        "tax": order.tax,
        "total": order.total,
        "status": order.status,
        "refunded_at": order.refunded_at,
        "created_at": order.created_at,
    }


class OrderService:
    """
    Zamowienia sa niemutowalnym snapshotem koszyka. Jedyne przejscie
    statusu to zwrot paid -> refunded wykonywany przez admina.
    """

    def __init__(self, db: Session):
        self.repo = OrderRepo(db)

    def _load(self, order_id: int) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found.")
        return order

    def get_order(self, ctx: RequestContext, order_id: int) -> Dict[str, Any]:
        order = self._load(order_id)

        if order.user_id != ctx.user_id and not ctx.is_admin:
            raise PermissionError("Not authorized.")

        return serialize_order(order)

    def list_orders(self, ctx: RequestContext) -> List[Dict[str, Any]]:
        return [serialize_order(o) for o in self.repo.list_orders_by_user(ctx.user_id)]

    def apply_action(self, ctx: RequestContext, order_id: int, action: str | None) -> Dict[str, Any]:
        """
        Akcje admina na zamowieniu. Kolejnosc bledow: 404, 403, 405.
        """
        self._load(order_id)
        self._require_admin(ctx, order_id)

        handler = self.ACTIONS.get(action or "")
        if handler is None:
            raise UnsupportedActionError("Unsupported action.")
        return handler(self, ctx, order_id)

    def refund(self, ctx: RequestContext, order_id: int) -> Dict[str, Any]:
        """
        Zwrot zamowienia, tylko admin. Nie przywraca produktow do sprzedazy.
        """
        order = self._load(order_id)
        self._require_admin(ctx, order_id)

        if order.status != ORDER_PAID:
            raise ValueError(f"Only paid orders can be refunded (order is {order.status}).")

        order.status = ORDER_REFUNDED
        order.refunded_at = datetime.now(timezone.utc)
        order = self.repo.save(order)

        logger.info(f"Order {order.id} refunded by {ctx.user_id}")
        return serialize_order(order)

    @staticmethod
    def _require_admin(ctx: RequestContext, order_id: int) -> None:
        if not ctx.is_admin:
            logger.warning(f"User {ctx.user_id} tried to change order {order_id}")
            raise PermissionError("Not authorized.")

    ACTIONS = {"refund": refund}
