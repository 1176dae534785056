"""
Catalog Service Module.

The CatalogService class acts as a facade composing the category, product and
report services behind one API.

Usage:
    from app.services.catalog import CatalogService, build_catalog_service

    service = build_catalog_service(db)

    # Category operations
    category = service.create_category(data)
    categories = service.list_categories()

    # Product operations
    product = service.create_product(data)
    products, total = service.list_products(search="shirt")
    service.update_inventory(product_id, variant_id, stock=5)

    # Reports
    low_stock = service.low_stock_report(threshold=10)
    summary = service.inventory_summary()
    rollup = service.products_by_category()
"""
from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from sqlalchemy.orm import Session

from app.models.catalog_models import Category, Product
from app.models.catalog_schemas import (
    CategoryCreate,
    CategoryRollupRow,
    CategoryUpdate,
    InventorySummary,
    LowStockReport,
    ProductCreate,
    ProductUpdate,
)

from .category_service import CategoryService
from .product_service import ProductService
from .report_service import InventoryReportService


class CatalogService:
    """
    Facade for catalog management operations.

    Composes specialized services to provide a unified API while
    maintaining separation of concerns internally.
    """

    def __init__(self, db: Session):
        """Initialize all sub-services."""
        self._db = db

        self._categories = CategoryService(db)
        self._products = ProductService(db)
        self._reports = InventoryReportService(db, products=self._products)

    # ========================================================================
    # Category Operations (delegated to CategoryService)
    # ========================================================================

    def create_category(self, data: CategoryCreate) -> Category:
        """Create a new category."""
        return self._categories.create_category(data)

    def get_category(self, category_id: int) -> Category | None:
        """Get a category by ID."""
        return self._categories.get_category(category_id)

    def list_categories(self, include_inactive: bool = False) -> Sequence[Category]:
        """List categories."""
        return self._categories.list_categories(include_inactive)

    def update_category(self, category_id: int, data: CategoryUpdate) -> Category | None:
        """Update a category."""
        return self._categories.update_category(category_id, data)

    def delete_category(self, category_id: int) -> bool:
        """Delete a category with no products or children."""
        return self._categories.delete_category(category_id)

    # ========================================================================
    # Product Operations (delegated to ProductService)
    # ========================================================================

    def create_product(self, data: ProductCreate) -> Product:
        """Create a new product."""
        return self._products.create_product(data)

    def get_product(self, product_id: int) -> Product | None:
        """Get a product by ID."""
        return self._products.get_product(product_id)

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
        """List products with filtering, sorting and pagination."""
        return self._products.list_products(
            search=search,
            category_id=category_id,
            min_price=min_price,
            max_price=max_price,
            featured=featured,
            is_active=is_active,
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
        )

    def update_product(self, product_id: int, data: ProductUpdate) -> Product | None:
        """Update a product."""
        return self._products.update_product(product_id, data)

    def delete_product(self, product_id: int) -> bool:
        """Delete a product."""
        return self._products.delete_product(product_id)

    def update_inventory(
        self, product_id: int, variant_id: int | None, stock: int
    ) -> Product | None:
        """Set the stock of one variant."""
        return self._products.update_inventory(product_id, variant_id, stock)

    # ========================================================================
    # Report Operations (delegated to InventoryReportService)
    # ========================================================================

    def low_stock_report(self, threshold: int | None = None) -> LowStockReport:
        """Items at or below the stock threshold."""
        return self._reports.low_stock_report(threshold)

    def inventory_summary(self) -> InventorySummary:
        """Inventory totals with per-category breakdown."""
        return self._reports.inventory_summary()

    def products_by_category(self) -> list[CategoryRollupRow]:
        """Per-category product count, average price and variant total."""
        return self._reports.products_by_category()


def build_catalog_service(db: Session) -> CatalogService:
    """Factory function to create a CatalogService instance."""
    return CatalogService(db=db)


__all__ = [
    "CatalogService",
    "build_catalog_service",
    "CategoryService",
    "ProductService",
    "InventoryReportService",
]
