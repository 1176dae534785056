"""
Catalog models: categories, products and their purchasable variants.

Products own an ordered list of variants; each variant carries its own price
override, stock count and a SKU that is unique across the whole catalog.
Categories form a tree through a self-referential parent reference.
"""
from __future__ import annotations

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.db.base_class import Base

CENTS = Decimal("0.01")


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class Category(Base):
    """
    Product category.

    Categories may nest under a parent category. The schema itself allows any
    parent chain; CategoryService refuses assignments that would form a cycle.
    """
    __tablename__ = "category"
    __table_args__ = (
        Index("ix_category_name", "name"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str | None] = mapped_column(String(200), nullable=True)
    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("category.id"), nullable=True, index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default="1")
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[dt.datetime | None] = mapped_column(
        DateTime(timezone=True),
        onupdate=utcnow,
        nullable=True,
    )

    # Relationships
    parent: Mapped[Category | None] = relationship(
        "Category", remote_side="Category.id", back_populates="children"
    )
    children: Mapped[list[Category]] = relationship("Category", back_populates="parent")
    products: Mapped[list[Product]] = relationship("Product", back_populates="category")

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"

    def ancestors(self, max_depth: int) -> list[Category]:
        """
        Return the parent chain, nearest first.

        Raises ValueError if the chain loops back or is deeper than max_depth.
        """
        chain: list[Category] = []
        seen = {id(self)}
        node = self.parent
        while node is not None:
            if id(node) in seen or len(chain) >= max_depth:
                raise ValueError(f"Category {self.id} has a cyclic or too deep parent chain")
            seen.add(id(node))
            chain.append(node)
            node = node.parent
        return chain


class Product(Base):
    """
    Catalog product.

    A product without variants is sold as a single implicit "Default" line
    whose stock is treated as zero by the inventory reports.
    """
    __tablename__ = "product"
    __table_args__ = (
        Index("ix_product_active_category", "is_active", "category_id"),
        CheckConstraint("base_price >= 0", name="base_price_non_negative"),
        CheckConstraint(
            "discount_percentage >= 0 AND discount_percentage <= 100",
            name="discount_percentage_range",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    category_id: Mapped[int] = mapped_column(ForeignKey("category.id"), nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    # Pricing
    base_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    discount_percentage: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), default=Decimal("0"), server_default="0"
    )

    # Media / search
    images: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=True)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=True)

    # Status
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default="1")
    featured: Mapped[bool] = mapped_column(Boolean, default=False, server_default="0")

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[dt.datetime | None] = mapped_column(
        DateTime(timezone=True),
        onupdate=utcnow,
        nullable=True,
    )

    # Relationships
    category: Mapped[Category | None] = relationship("Category", back_populates="products")
    variants: Mapped[list[Variant]] = relationship(
        "Variant",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="Variant.position",
        collection_class=ordering_list("position"),
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name='{self.name}')>"

    @property
    def final_price(self) -> Decimal:
        """Base price after the percentage discount, rounded to cents."""
        discount = Decimal(self.discount_percentage or 0)
        price = Decimal(self.base_price) * (Decimal("1") - discount / Decimal("100"))
        return price.quantize(CENTS, rounding=ROUND_HALF_UP)

    def find_variant(self, variant_id: int) -> Variant | None:
        for variant in self.variants:
            if variant.id == variant_id:
                return variant
        return None


class Variant(Base):
    """Purchasable configuration of a product (e.g. Size: Large)."""
    __tablename__ = "product_variant"
    __table_args__ = (
        Index("ix_product_variant_sku", "sku", unique=True),
        CheckConstraint("price >= 0", name="price_non_negative"),
        CheckConstraint("stock >= 0", name="stock_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    product_id: Mapped[int] = mapped_column(
        ForeignKey("product.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    name: Mapped[str] = mapped_column(String(50), nullable=False)
    value: Mapped[str] = mapped_column(String(100), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    stock: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    sku: Mapped[str] = mapped_column(String(64), nullable=False)

    product: Mapped[Product] = relationship("Product", back_populates="variants")

    def __repr__(self) -> str:
        return f"<Variant(id={self.id}, sku='{self.sku}', stock={self.stock})>"

    @property
    def display_name(self) -> str:
        return f"{self.name}: {self.value}"

    @property
    def is_out_of_stock(self) -> bool:
        return self.stock == 0
