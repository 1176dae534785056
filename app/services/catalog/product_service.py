"""
Product Service - CRUD operations for products and their variants.

Follows SRP: Only handles product-related operations. Also serves as the
read-only product store the inventory reports pull their snapshot from.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Sequence

from sqlalchemy import String, cast, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, joinedload, selectinload

from app import metrics
from app.core.exceptions import (
    DuplicateSkuError,
    InvalidCategoryReferenceError,
    NegativeStockError,
    StoreReadError,
    VariantNotFoundError,
)
from app.models.catalog_models import Category, Product, Variant
from app.models.catalog_schemas import ProductCreate, ProductUpdate, VariantIn
from app.services.catalog.base import BaseCatalogService

logger = logging.getLogger(__name__)

# Wire-format sort keys mapped to sortable columns
SORTABLE_COLUMNS = {
    "name": Product.name,
    "basePrice": Product.base_price,
    "discountPercentage": Product.discount_percentage,
    "createdAt": Product.created_at,
    "updatedAt": Product.updated_at,
}


class ProductService(BaseCatalogService):
    """
    Service for product operations.

    Variant SKUs are unique across the whole catalog, not just within one
    product; the service checks this before the database unique index does.
    """

    def create_product(self, data: ProductCreate) -> Product:
        """Create a product together with its variants."""
        self._ensure_category_exists(data.category_id)
        self._ensure_skus_available([v.sku for v in data.variants])

        product = Product(
            name=data.name,
            description=data.description,
            category_id=data.category_id,
            base_price=data.base_price,
            discount_percentage=data.discount_percentage,
            images=list(data.images),
            tags=list(data.tags),
            featured=data.featured,
            is_active=data.is_active,
            variants=[self._build_variant(v, i) for i, v in enumerate(data.variants)],
        )
        self._db.add(product)
        self._db.commit()
        self._db.refresh(product)
        metrics.product_mutation("create")
        logger.info(
            f"Created product: {product.name} (id={product.id}, variants={len(product.variants)})"
        )
        return product

    def get_product(self, product_id: int) -> Product | None:
        """Get a product by ID with category and variants loaded."""
        return self._with_relations(self._db.query(Product)).filter(
            Product.id == product_id,
        ).first()

    def list_products(
        self,
        search: str | None = None,
        category_id: int | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        featured: bool | None = None,
        is_active: bool = True,
        page: int = 1,
        limit: int = 10,
        sort_by: str | None = None,
        sort_order: str = "asc",
    ) -> tuple[Sequence[Product], int]:
        """
        List products with filtering, sorting and pagination.

        Returns a tuple of (products, total_count). Without `sort_by` the
        newest products come first.
        """
        query = self._db.query(Product).filter(Product.is_active.is_(is_active))

        if search:
            search_term = f"%{search}%"
            query = query.filter(
                or_(
                    Product.name.ilike(search_term),
                    Product.description.ilike(search_term),
                    cast(Product.tags, String).ilike(search_term),
                )
            )

        if category_id is not None:
            query = query.filter(Product.category_id == category_id)

        if min_price is not None:
            query = query.filter(Product.base_price >= min_price)
        if max_price is not None:
            query = query.filter(Product.base_price <= max_price)

        if featured is not None:
            query = query.filter(Product.featured.is_(featured))

        total = query.count()

        if sort_by:
            column = SORTABLE_COLUMNS[sort_by]
            order = column.desc() if sort_order == "desc" else column.asc()
        else:
            order = Product.created_at.desc()

        offset = (page - 1) * limit
        products = (
            self._with_relations(query)
            .order_by(order, Product.id)
            .offset(offset)
            .limit(limit)
            .all()
        )
        return products, total

    def update_product(self, product_id: int, data: ProductUpdate) -> Product | None:
        """
        Update a product. Returns None when it does not exist.

        A `variants` list replaces the existing variants wholesale.
        """
        product = self.get_product(product_id)
        if not product:
            return None

        update_data = data.model_dump(exclude_unset=True, exclude={"variants"})

        if "category_id" in update_data and update_data["category_id"] != product.category_id:
            self._ensure_category_exists(update_data["category_id"])

        if data.variants is not None:
            self._ensure_skus_available(
                [v.sku for v in data.variants], exclude_product_id=product.id
            )
            product.variants.clear()
            # Flush the removals first so re-used SKUs don't trip the unique index
            self._db.flush()
            product.variants.extend(
                self._build_variant(v, i) for i, v in enumerate(data.variants)
            )

        for key, value in update_data.items():
            setattr(product, key, value)

        self._db.commit()
        self._db.refresh(product)
        metrics.product_mutation("update")
        logger.info(f"Updated product: {product.name} (id={product.id})")
        return product

    def delete_product(self, product_id: int) -> bool:
        """Delete a product and its variants."""
        product = self.get_product(product_id)
        if not product:
            return False

        self._db.delete(product)
        self._db.commit()
        metrics.product_mutation("delete")
        logger.info(f"Deleted product: {product.name} (id={product_id})")
        return True

    def update_inventory(
        self, product_id: int, variant_id: int | None, stock: int
    ) -> Product | None:
        """
        Set the stock level of one variant.

        Returns None when the product does not exist. Without a variant id the
        product is returned unchanged.
        """
        if stock < 0:
            raise NegativeStockError(stock)

        product = self.get_product(product_id)
        if not product:
            return None

        if variant_id is not None:
            variant = product.find_variant(variant_id)
            if variant is None:
                raise VariantNotFoundError(product_id, variant_id)
            previous = variant.stock
            variant.stock = stock
            self._db.commit()
            self._db.refresh(product)
            metrics.inventory_updated()
            logger.info(
                f"Updated stock for variant {variant.sku} (product={product_id}): {previous} -> {stock}"
            )
        return product

    # ========================================================================
    # Product Store (read side used by reports)
    # ========================================================================

    def find_active_products(self, stock_threshold: int | None = None) -> list[Product]:
        """
        Load active products with category and variants resolved.

        With `stock_threshold`, only products that have no variants or at least
        one variant at or below the threshold are returned. Products come back
        in insertion (id) order and variants in their list order.
        """
        query = self._db.query(Product).filter(Product.is_active.is_(True))
        if stock_threshold is not None:
            query = query.filter(
                or_(
                    Product.variants.any(Variant.stock <= stock_threshold),
                    ~Product.variants.any(),
                )
            )
        try:
            return self._with_relations(query).order_by(Product.id).all()
        except SQLAlchemyError as exc:
            logger.error("Failed to load active products: %s", exc)
            raise StoreReadError("find_active_products") from exc

    # ========================================================================
    # Private Helpers
    # ========================================================================

    @staticmethod
    def _with_relations(query: Query) -> Query:
        return query.options(
            joinedload(Product.category),
            selectinload(Product.variants),
        )

    @staticmethod
    def _build_variant(data: VariantIn, position: int) -> Variant:
        return Variant(
            name=data.name,
            value=data.value,
            price=data.price,
            stock=data.stock,
            sku=data.sku,
            position=position,
        )

    def _ensure_category_exists(self, category_id: int) -> None:
        exists = self._db.query(Category.id).filter(Category.id == category_id).first()
        if exists is None:
            raise InvalidCategoryReferenceError(category_id)

    def _ensure_skus_available(
        self, skus: list[str], exclude_product_id: int | None = None
    ) -> None:
        if not skus:
            return
        query = self._db.query(Variant.sku).filter(Variant.sku.in_(skus))
        if exclude_product_id is not None:
            query = query.filter(Variant.product_id != exclude_product_id)
        taken = [row.sku for row in query.all()]
        if taken:
            raise DuplicateSkuError(taken)
