"""Product endpoints."""
import logging
from decimal import Decimal

from fastapi import APIRouter, Query

from app.core.config import settings
from app.core.exceptions import ProductNotFoundError
from app.models import catalog_schemas as schemas

from .dependencies import CatalogServiceDep
from .helpers import product_to_out, total_pages

router = APIRouter(prefix="/products", tags=["products"])
logger = logging.getLogger(__name__)


@router.get("", response_model=schemas.PaginatedResponse[list[schemas.ProductOut]])
def list_products(
    service: CatalogServiceDep,
    search: str | None = Query(None, description="Search name, description and tags"),
    category: int | None = Query(None, description="Filter by category ID"),
    min_price: Decimal | None = Query(None, alias="minPrice", ge=0),
    max_price: Decimal | None = Query(None, alias="maxPrice", ge=0),
    featured: bool | None = Query(None),
    is_active: bool = Query(True, alias="isActive"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Items per page"),
    sort_by: schemas.ProductSortField | None = Query(None, alias="sortBy"),
    sort_order: schemas.SortOrder = Query("asc", alias="sortOrder"),
):
    """List products with filtering, sorting and pagination."""
    products, total = service.list_products(
        search=search,
        category_id=category,
        min_price=min_price,
        max_price=max_price,
        featured=featured,
        is_active=is_active,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return schemas.PaginatedResponse[list[schemas.ProductOut]](
        data=[product_to_out(p) for p in products],
        pagination=schemas.Pagination(
            current=page,
            total=total_pages(total, limit),
            count=len(products),
            total_items=total,
        ),
    )


@router.get("/{product_id}", response_model=schemas.ApiResponse[schemas.ProductOut])
def get_product(
    product_id: int,
    service: CatalogServiceDep,
):
    """Get a product by ID."""
    product = service.get_product(product_id)
    if not product:
        raise ProductNotFoundError(product_id)
    return schemas.ApiResponse[schemas.ProductOut](data=product_to_out(product))


@router.post("", response_model=schemas.ApiResponse[schemas.ProductOut], status_code=201)
def create_product(
    data: schemas.ProductCreate,
    service: CatalogServiceDep,
):
    """Create a new product with its variants."""
    product = service.create_product(data)
    return schemas.ApiResponse[schemas.ProductOut](data=product_to_out(product))


@router.put("/{product_id}", response_model=schemas.ApiResponse[schemas.ProductOut])
def update_product(
    product_id: int,
    data: schemas.ProductUpdate,
    service: CatalogServiceDep,
):
    """Update a product. A `variants` list replaces the current variants."""
    product = service.update_product(product_id, data)
    if not product:
        raise ProductNotFoundError(product_id)
    return schemas.ApiResponse[schemas.ProductOut](data=product_to_out(product))


@router.delete("/{product_id}", response_model=schemas.MessageResponse)
def delete_product(
    product_id: int,
    service: CatalogServiceDep,
):
    """Delete a product and its variants."""
    if not service.delete_product(product_id):
        raise ProductNotFoundError(product_id)
    return schemas.MessageResponse(message="Product deleted successfully")


@router.patch("/{product_id}/inventory", response_model=schemas.ApiResponse[schemas.ProductOut])
def update_inventory(
    product_id: int,
    data: schemas.InventoryUpdate,
    service: CatalogServiceDep,
):
    """Set the stock level of one variant."""
    product = service.update_inventory(product_id, data.variant_id, data.stock)
    if not product:
        raise ProductNotFoundError(product_id)
    return schemas.ApiResponse[schemas.ProductOut](data=product_to_out(product))
