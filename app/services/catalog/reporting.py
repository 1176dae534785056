"""
Inventory report builders.

Pure functions over an already-loaded product snapshot: they never touch the
session and never mutate the products they are given, so the same snapshot
always yields the same report.

Products whose category does not resolve are kept in the low-stock scan and
the inventory summary under UNCATEGORIZED_LABEL (with a null category id).
"""
from __future__ import annotations

import re
from collections.abc import Iterable

from app.models.catalog_models import Product
from app.models.catalog_schemas import (
    CategoryStockSummary,
    InventorySummary,
    LowStockItem,
    LowStockReport,
)

DEFAULT_VARIANT_NAME = "Default"
UNCATEGORIZED_LABEL = "Uncategorized"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_threshold(raw: str | int | None, default: int) -> int:
    """
    Read a low-stock threshold from a query value.

    Leading-integer parse: "12" -> 12, "12abc" -> 12, "7.9" -> 7. Missing,
    blank or non-numeric input silently falls back to `default`.
    """
    if raw is None:
        return default
    if isinstance(raw, int):
        return raw
    match = _LEADING_INT.match(raw)
    if not match:
        return default
    return int(match.group(1))


def _category_of(product: Product) -> tuple[int | None, str]:
    category = product.category
    if category is None:
        return None, UNCATEGORIZED_LABEL
    return category.id, category.name


def build_low_stock_report(products: Iterable[Product], threshold: int) -> LowStockReport:
    """
    Flatten products into low-stock line items.

    A product without variants always qualifies as a single "Default" line at
    stock 0. Otherwise each variant with stock <= threshold qualifies. Item
    order follows product order, then variant order.
    """
    items: list[LowStockItem] = []
    for product in products:
        if not product.is_active:
            continue
        category_id, category_name = _category_of(product)

        if not product.variants:
            items.append(
                LowStockItem(
                    product_id=product.id,
                    product_name=product.name,
                    category=category_name,
                    category_id=category_id,
                    variant_id=None,
                    variant_name=DEFAULT_VARIANT_NAME,
                    sku=None,
                    current_stock=0,
                    threshold=threshold,
                )
            )
            continue

        for variant in product.variants:
            if variant.stock <= threshold:
                items.append(
                    LowStockItem(
                        product_id=product.id,
                        product_name=product.name,
                        category=category_name,
                        category_id=category_id,
                        variant_id=variant.id,
                        variant_name=variant.display_name,
                        sku=variant.sku,
                        current_stock=variant.stock,
                        threshold=threshold,
                    )
                )

    return LowStockReport(
        threshold=threshold,
        total_low_stock_items=len(items),
        items=items,
    )


def build_inventory_summary(products: Iterable[Product]) -> InventorySummary:
    """
    Aggregate product, variant and stock totals per category.

    A variantless product counts once toward out-of-stock items; otherwise
    every zero-stock variant counts once. Totals are grouped by category id
    and only projected to display names at the end.
    """
    total_products = 0
    total_variants = 0
    total_stock = 0
    out_of_stock_items = 0
    by_category: dict[int | None, CategoryStockSummary] = {}
    names: dict[int | None, str] = {}

    for product in products:
        if not product.is_active:
            continue
        category_id, category_name = _category_of(product)
        entry = by_category.get(category_id)
        if entry is None:
            entry = by_category[category_id] = CategoryStockSummary(category_id=category_id)
            names[category_id] = category_name

        total_products += 1
        entry.products += 1

        if not product.variants:
            out_of_stock_items += 1
            continue

        for variant in product.variants:
            total_variants += 1
            total_stock += variant.stock
            entry.variants += 1
            entry.total_stock += variant.stock
            if variant.is_out_of_stock:
                out_of_stock_items += 1

    return InventorySummary(
        total_products=total_products,
        total_variants=total_variants,
        total_stock=total_stock,
        category_summary=_project_names(by_category, names),
        out_of_stock_items=out_of_stock_items,
    )


def _project_names(
    by_category: dict[int | None, CategoryStockSummary],
    names: dict[int | None, str],
) -> dict[str, CategoryStockSummary]:
    """
    Key entries by display name.

    A category whose name is already taken gets its id appended, repeatedly,
    until the label is free; no entry is ever overwritten.
    """
    projected: dict[str, CategoryStockSummary] = {}
    for category_id, entry in by_category.items():
        label = names[category_id]
        while label in projected:
            label = f"{label} (#{category_id})"
        projected[label] = entry
    return projected
