# usedbooks/repos/product_repo.py
from datetime import datetime
from typing import Iterable, List

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from usedbooks.data.models.product import ProductModel, PRODUCT_SOLD


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_products(self) -> List[ProductModel]:
        return list(
            self.db.execute(select(ProductModel).order_by(ProductModel.name)).scalars()
        )

    def get_by_slug(self, slug: str) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(ProductModel.slug == slug)
        ).scalar_one_or_none()

    def slug_exists(self, slug: str) -> bool:
        return self.db.execute(
            select(ProductModel.id).where(ProductModel.slug == slug)
        ).first() is not None

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def save(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_by_slug(self, slug: str) -> int:
        res = self.db.execute(delete(ProductModel).where(ProductModel.slug == slug))
        return res.rowcount

    def mark_sold(self, slugs: Iterable[str], sold_at: datetime) -> int:
        ids = list(slugs)
        if not ids:
            return 0
        res = self.db.execute(
            update(ProductModel)
            .where(ProductModel.slug.in_(ids))
            .values(status=PRODUCT_SOLD, sold_at=sold_at, updated_at=sold_at)
        )
        return res.rowcount

    def delete_all(self) -> int:
        return self.db.execute(delete(ProductModel)).rowcount

    def commit(self) -> None:
        self.db.commit()
