"""
Inventory Report Service.

Reads a fresh snapshot from the product store on every call and hands it to
the pure builders in `reporting`. The category rollup is pushed down to SQL
as a grouped aggregate. Store failures surface as StoreReadError and are not
retried here.
"""
from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app import metrics
from app.core.config import BaseAppSettings
from app.core.exceptions import StoreReadError
from app.models.catalog_models import Category, Product, Variant
from app.models.catalog_schemas import CategoryRollupRow, InventorySummary, LowStockReport

from .base import BaseCatalogService
from .product_service import ProductService
from .reporting import build_inventory_summary, build_low_stock_report

logger = logging.getLogger(__name__)


class InventoryReportService(BaseCatalogService):
    """Service for low-stock, inventory summary and category rollup reports."""

    def __init__(
        self,
        db: Session,
        products: ProductService | None = None,
        config: BaseAppSettings | None = None,
    ):
        super().__init__(db, config)
        self._products = products or ProductService(db, config)

    def low_stock_report(self, threshold: int | None = None) -> LowStockReport:
        """Variants (and variantless products) at or below the threshold."""
        if threshold is None:
            threshold = self._settings.LOW_STOCK_DEFAULT_THRESHOLD
        with metrics.report_timer("low_stock"):
            products = self._products.find_active_products(stock_threshold=threshold)
            report = build_low_stock_report(products, threshold)
        metrics.low_stock_items(report.total_low_stock_items)
        logger.info(
            "Low-stock scan threshold=%s products=%s items=%s",
            threshold, len(products), report.total_low_stock_items,
        )
        return report

    def inventory_summary(self) -> InventorySummary:
        """Stock and variant totals across active products, per category."""
        with metrics.report_timer("inventory_summary"):
            products = self._products.find_active_products()
            summary = build_inventory_summary(products)
        logger.info(
            "Inventory summary products=%s variants=%s stock=%s",
            summary.total_products, summary.total_variants, summary.total_stock,
        )
        return summary

    def products_by_category(self) -> list[CategoryRollupRow]:
        """
        One row per category that has at least one active product.

        Rows are ordered by product count, largest first; ties keep the order
        in which the categories were first used by a product.
        """
        variant_counts = (
            self._db.query(
                Variant.product_id.label("product_id"),
                func.count(Variant.id).label("variant_count"),
            )
            .group_by(Variant.product_id)
            .subquery()
        )
        product_count = func.count(Product.id)
        first_seen = func.min(Product.id)

        query = (
            self._db.query(
                Category.id.label("category_id"),
                Category.name.label("category_name"),
                product_count.label("product_count"),
                func.avg(Product.base_price).label("average_price"),
                func.coalesce(func.sum(variant_counts.c.variant_count), 0).label("total_variants"),
            )
            .select_from(Product)
            .join(Category, Product.category_id == Category.id)
            .outerjoin(variant_counts, variant_counts.c.product_id == Product.id)
            .filter(Product.is_active.is_(True))
            .group_by(Category.id, Category.name)
            .order_by(product_count.desc(), first_seen)
        )

        with metrics.report_timer("products_by_category"):
            try:
                rows = query.all()
            except SQLAlchemyError as exc:
                logger.error("Failed to aggregate products by category: %s", exc)
                raise StoreReadError("products_by_category") from exc
            report = [self._build_rollup_row(row) for row in rows]

        logger.info("Category rollup categories=%s", len(report))
        return report

    @staticmethod
    def _build_rollup_row(row) -> CategoryRollupRow:
        return CategoryRollupRow(
            category_id=row.category_id,
            category_name=row.category_name,
            product_count=row.product_count,
            average_price=_to_mean(row.average_price),
            total_variants=int(row.total_variants or 0),
        )


def _to_mean(value) -> float:
    # Postgres returns Decimal for AVG over NUMERIC, SQLite returns float
    if value is None:
        return 0.0
    return float(value)
