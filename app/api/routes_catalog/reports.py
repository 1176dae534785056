"""Inventory report endpoints."""
import logging

from fastapi import APIRouter, Query, Request

from app.api.rate_limit import RATE_LIMITS, limiter
from app.core.config import settings
from app.models import catalog_schemas as schemas
from app.services.catalog.reporting import parse_threshold

from .dependencies import CatalogServiceDep

router = APIRouter(prefix="/reports", tags=["reports"])
logger = logging.getLogger(__name__)


@router.get("/low-stock", response_model=schemas.ApiResponse[schemas.LowStockReport])
@limiter.limit(RATE_LIMITS["reports"])
def get_low_stock_report(
    request: Request,
    service: CatalogServiceDep,
    threshold: str | None = Query(
        None, description="Stock level at or below which a variant is reported (default 10)"
    ),
):
    """List variants at or below the threshold, plus every variantless product."""
    effective = parse_threshold(threshold, settings.LOW_STOCK_DEFAULT_THRESHOLD)
    report = service.low_stock_report(effective)
    return schemas.ApiResponse[schemas.LowStockReport](data=report)


@router.get("/inventory-summary", response_model=schemas.ApiResponse[schemas.InventorySummary])
@limiter.limit(RATE_LIMITS["reports"])
def get_inventory_summary(
    request: Request,
    service: CatalogServiceDep,
):
    """Totals of products, variants and stock with a per-category breakdown."""
    return schemas.ApiResponse[schemas.InventorySummary](data=service.inventory_summary())


@router.get(
    "/products-by-category",
    response_model=schemas.ApiResponse[list[schemas.CategoryRollupRow]],
)
@limiter.limit(RATE_LIMITS["reports"])
def get_products_by_category_report(
    request: Request,
    service: CatalogServiceDep,
):
    """Product count, average base price and variant total per category."""
    return schemas.ApiResponse[list[schemas.CategoryRollupRow]](data=service.products_by_category())
