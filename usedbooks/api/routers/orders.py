# usedbooks/api/routers/orders.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from usedbooks.api.deps import get_context
from usedbooks.data.database import get_db
from usedbooks.domain.context import RequestContext
from usedbooks.domain.errors import NotFoundError, UnsupportedActionError
from usedbooks.domain.schemas import (
    OrderActionIn,
    OrderActionResponse,
    OrderListResponse,
    OrderResponse,
)
from usedbooks.services.order_service import OrderService

router = APIRouter(prefix="/api/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.get("", response_model=OrderListResponse)
def list_orders(
    ctx: RequestContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    """
    Zamowienia zalogowanego uzytkownika, najnowsze pierwsze.
    """
    return {"orders": get_service(db).list_orders(ctx)}


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: int,
    ctx: RequestContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    """
    Szczegoly zamowienia (wlasciciel albo admin).
    """
    svc = get_service(db)
    try:
        return {"order": svc.get_order(ctx, order_id)}
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{order_id}", response_model=OrderActionResponse)
def order_action(
    order_id: int,
    payload: OrderActionIn | None = None,
    ctx: RequestContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    """
    Zwrot zamowienia ({"action": "refund"}), tylko admin.
    """
    svc = get_service(db)
    try:
        return {"ok": True, "order": svc.apply_action(ctx, order_id, payload.action if payload else None)}
    except UnsupportedActionError as e:
        raise HTTPException(status_code=405, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
