#usedbooks/api/routers/carts.py
from typing import Any, Callable, Dict, Union

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from usedbooks.api.deps import get_context, SESSION_CHECKOUT_KEY
from usedbooks.data.database import get_db
from usedbooks.domain.actions import (
    AddToCart,
    CartAction,
    Checkout,
    RemoveFromCart,
    UpdateCartItem,
    parse_cart_command,
)
from usedbooks.domain.context import RequestContext
from usedbooks.domain.errors import (
    NotFoundError,
    ProductUnavailableError,
    UnsupportedActionError,
)
from usedbooks.domain.schemas import (
    CartActionResponse,
    CartResponse,
    CheckoutResponse,
    ConfirmationResponse,
)
from usedbooks.services.cart_service import CartService
from usedbooks.services.checkout_service import CheckoutService
from usedbooks.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["cart"])


def _add(cmd: AddToCart, ctx: RequestContext, db: Session, request: Request):
    return CartActionResponse(**CartService(db).add_product(ctx, cmd.product_id, cmd.quantity))


def _update(cmd: UpdateCartItem, ctx: RequestContext, db: Session, request: Request):
    return CartActionResponse(**CartService(db).update_quantity(ctx, cmd.product_id, cmd.quantity))


def _remove(cmd: RemoveFromCart, ctx: RequestContext, db: Session, request: Request):
    return CartActionResponse(**CartService(db).remove_product(ctx, cmd.product_id))


def _checkout(cmd: Checkout, ctx: RequestContext, db: Session, request: Request):
    order = CheckoutService(db).checkout(ctx)
    # flaga dla strony z potwierdzeniem, zuzywana jednorazowo
    request.session[SESSION_CHECKOUT_KEY] = True
    return CheckoutResponse(order_id=order["id"])


HANDLERS: Dict[CartAction, Callable[..., Any]] = {
    CartAction.ADD: _add,
    CartAction.UPDATE: _update,
    CartAction.REMOVE: _remove,
    CartAction.CHECKOUT: _checkout,
}


@router.get("/cart", response_model=CartResponse)
def get_cart(
    ctx: RequestContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    return CartService(db).get_cart(ctx)


@router.post("/cart", response_model=Union[CartActionResponse, CheckoutResponse])
def cart_action(
    request: Request,
    payload: Any = Body(None),
    ctx: RequestContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    """
    Jedna akcja na request: add / update / remove / checkout.
    """
    try:
        command = parse_cart_command(payload)
    except UnsupportedActionError as e:
        raise HTTPException(status_code=405, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    handler = HANDLERS[CartAction(command.action)]
    try:
        return handler(command, ctx, db, request)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProductUnavailableError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/checkout/confirmation", response_model=ConfirmationResponse)
def checkout_confirmation(
    request: Request,
    ctx: RequestContext = Depends(get_context),
):
    confirmed = bool(request.session.pop(SESSION_CHECKOUT_KEY, False))
    return ConfirmationResponse(confirmed=confirmed)
