#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from usedbooks.data.models.user import UserModel
from usedbooks.data.models.product import ProductModel
from usedbooks.data.models.cart import CartModel
from usedbooks.data.models.cart_item import CartItemModel
from usedbooks.data.models.order import OrderModel
from usedbooks.data.models.order_item import OrderItemModel

__all__ = [
    "UserModel",
    "ProductModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "OrderItemModel",
]
