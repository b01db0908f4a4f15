# usedbooks/api/routers/products.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from usedbooks.api.deps import get_context
from usedbooks.data.database import get_db
from usedbooks.domain.context import RequestContext
from usedbooks.domain.errors import NotFoundError
from usedbooks.domain.schemas import (
    GenerateListingIn,
    MessageResponse,
    ProductActionResponse,
    ProductIn,
    ProductListResponse,
    ProductResponse,
)
from usedbooks.services.listing_service import ListingService
from usedbooks.services.product_service import ProductService

router = APIRouter(prefix="/api/products", tags=["products"])


def get_service(db: Session):
    return ProductService(db)


def get_listing_service(db: Session = Depends(get_db)):
    return ListingService(db)


@router.get("", response_model=ProductListResponse)
def list_products(db: Session = Depends(get_db)):
    return {"products": get_service(db).list_products()}


@router.post("", response_model=ProductActionResponse)
def create_product(
    payload: ProductIn,
    ctx: RequestContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    try:
        return {"ok": True, "product": get_service(db).create_product(ctx, payload.model_dump())}
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/generate", response_model=ProductActionResponse)
def generate_listing(
    payload: GenerateListingIn,
    ctx: RequestContext = Depends(get_context),
    svc: ListingService = Depends(get_listing_service),
):
    """
    Ogloszenie wygenerowane z tytulu/wydania/ceny (tekst + okladka).
    """
    try:
        return {"ok": True, "product": svc.generate(ctx, payload.model_dump())}
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{slug}", response_model=ProductResponse)
def get_product(slug: str, db: Session = Depends(get_db)):
    try:
        return {"product": get_service(db).get_product(slug)}
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{slug}", response_model=ProductActionResponse)
def update_product(
    slug: str,
    payload: ProductIn,
    ctx: RequestContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    try:
        return {"ok": True, "product": get_service(db).update_product(ctx, slug, payload.model_dump())}
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{slug}", response_model=MessageResponse)
def delete_product(
    slug: str,
    ctx: RequestContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    try:
        get_service(db).delete_product(ctx, slug)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    return {"ok": True}
