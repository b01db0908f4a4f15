# usedbooks/data/models/product.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric, JSON

from usedbooks.data.database import Base

PRODUCT_AVAILABLE = "available"
PRODUCT_SOLD = "sold"


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    slug = Column(String(160), nullable=False, unique=True, index=True)

    name = Column(String(200), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    short_description = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    headline = Column(String(200), nullable=False)
    specs = Column(JSON, nullable=False, default=list)
    image = Column(Text, nullable=False)
    images = Column(JSON, nullable=False, default=list)

    # None = seed/admin managed listing
    owner_id = Column(String(64), nullable=True, index=True)

    status = Column(String(20), nullable=False, default=PRODUCT_AVAILABLE)
    sold_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
