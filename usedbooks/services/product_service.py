# usedbooks/services/product_service.py
import re
import time
from decimal import Decimal, InvalidOperation
from typing import Dict, Any, List

from sqlalchemy.orm import Session

from usedbooks.data.models.product import ProductModel, PRODUCT_AVAILABLE
from usedbooks.domain.context import RequestContext
from usedbooks.domain.errors import NotFoundError
from usedbooks.repos.cart_repo import CartRepo
from usedbooks.repos.product_repo import ProductRepo
from usedbooks.utils.logging import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = ("name", "price", "short_description", "description", "headline", "image")

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_SPEC_SPLIT = re.compile(r"\r?\n|,")


def slugify(text: str) -> str:
    slug = _NON_ALNUM.sub("-", str(text).lower().strip()).strip("-")
    return slug or f"book-{int(time.time() * 1000)}"


def parse_specs(value) -> List[str]:
    """Specs z formularza: lista albo tekst rozdzielany nowymi liniami/przecinkami."""
    if not value:
        return []
    if isinstance(value, str):
        parts = _SPEC_SPLIT.split(value)
    else:
        parts = [str(v) for v in value]
    return [p.strip() for p in parts if p and p.strip()]


def parse_price(value) -> Decimal:
    try:
        price = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValueError("Price must be a positive number.")
    if not price.is_finite() or price <= 0:
        raise ValueError("Price must be a positive number.")
    return price.quantize(Decimal("0.01"))


def serialize_product(product: ProductModel) -> Dict[str, Any]:
    return {
        "id": product.slug,
        "slug": product.slug,
        "name": product.name,
        "price": product.price,
        "short_description": product.short_description,
        "description": product.description,
        "headline": product.headline,
        "specs": list(product.specs or []),
        "image": product.image,
        "images": list(product.images or []),
        "owner_id": product.owner_id,
        "status": product.status,
        "sold_at": product.sold_at,
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }


class ProductService:
    """Katalog ogloszen (slug = publiczne id produktu)."""

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)
        self.carts = CartRepo(db)

    def list_products(self) -> List[Dict[str, Any]]:
        return [serialize_product(p) for p in self.repo.list_products()]

    def get_product(self, slug: str) -> Dict[str, Any]:
        return serialize_product(self._load(slug))

    def unique_slug(self, name: str) -> str:
        base = slugify(name)
        slug = base
        counter = 1
        while self.repo.slug_exists(slug):
            slug = f"{base}-{counter}"
            counter += 1
        return slug

    def create_product(
        self,
        ctx: RequestContext | None,
        payload: Dict[str, Any],
        slug: str | None = None,
    ) -> Dict[str, Any]:
        """
        Nowe ogloszenie. ctx=None oznacza produkt bez wlasciciela (seed).
        Slug z nazwy, chyba ze podany jawnie (tez uniqueowany).
        """
        fields = self._validate(payload, "All fields are required to create a listing.")

        product = ProductModel(
            slug=self.unique_slug(slug or fields["name"]),
            owner_id=ctx.user_id if ctx else None,
            status=PRODUCT_AVAILABLE,
            **fields,
        )
        created = self.repo.create_product(product)

        logger.info(f"Product {created.slug} listed by {created.owner_id or 'admin'}")
        return serialize_product(created)

    def update_product(self, ctx: RequestContext, slug: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        product = self._load(slug)
        self._check_owner(ctx, product)

        fields = self._validate(payload, "All fields are required to update this listing.")
        for key, value in fields.items():
            setattr(product, key, value)
        updated = self.repo.save(product)

        logger.info(f"Product {slug} updated by {ctx.user_id}")
        return serialize_product(updated)

    def delete_product(self, ctx: RequestContext, slug: str) -> None:
        product = self._load(slug)
        self._check_owner(ctx, product)

        self.repo.delete_by_slug(slug)
        purged = self.carts.purge_products([slug])
        self.repo.commit()

        logger.info(f"Product {slug} deleted by {ctx.user_id}, removed from {purged} cart lines")

    def _load(self, slug: str) -> ProductModel:
        product = self.repo.get_by_slug(slug)
        if not product:
            raise NotFoundError("Product not found.")
        return product

    @staticmethod
    def _check_owner(ctx: RequestContext, product: ProductModel) -> None:
        is_owner = bool(product.owner_id) and product.owner_id == ctx.user_id
        if not is_owner and not ctx.is_admin:
            raise PermissionError("You can only modify listings you created.")

    @staticmethod
    def _validate(payload: Dict[str, Any], missing_message: str) -> Dict[str, Any]:
        for key in REQUIRED_FIELDS:
            value = payload.get(key)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ValueError(missing_message)

        fields = {
            "name": payload["name"].strip(),
            "price": parse_price(payload["price"]),
            "short_description": payload["short_description"].strip(),
            "description": payload["description"].strip(),
            "headline": payload["headline"].strip(),
            "image": payload["image"].strip(),
            "specs": parse_specs(payload.get("specs")),
        }
        if payload.get("images") is not None:
            fields["images"] = [i.strip() for i in payload["images"] if i and i.strip()]
        return fields
