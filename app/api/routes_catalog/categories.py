"""Category endpoints."""
import logging

from fastapi import APIRouter, Query

from app.core.exceptions import CategoryNotFoundError
from app.models import catalog_schemas as schemas

from .dependencies import CatalogServiceDep
from .helpers import category_to_out

router = APIRouter(prefix="/categories", tags=["categories"])
logger = logging.getLogger(__name__)


@router.get("", response_model=schemas.ApiResponse[list[schemas.CategoryOut]])
def list_categories(
    service: CatalogServiceDep,
    include_inactive: bool = Query(False, alias="includeInactive", description="Include inactive categories"),
):
    """List categories ordered by name."""
    categories = service.list_categories(include_inactive=include_inactive)
    return schemas.ApiResponse[list[schemas.CategoryOut]](
        data=[category_to_out(c) for c in categories]
    )


@router.get("/{category_id}", response_model=schemas.ApiResponse[schemas.CategoryOut])
def get_category(
    category_id: int,
    service: CatalogServiceDep,
):
    """Get a category by ID."""
    category = service.get_category(category_id)
    if not category:
        raise CategoryNotFoundError(category_id)
    return schemas.ApiResponse[schemas.CategoryOut](data=category_to_out(category))


@router.post("", response_model=schemas.ApiResponse[schemas.CategoryOut], status_code=201)
def create_category(
    data: schemas.CategoryCreate,
    service: CatalogServiceDep,
):
    """Create a new category."""
    category = service.create_category(data)
    return schemas.ApiResponse[schemas.CategoryOut](data=category_to_out(category))


@router.put("/{category_id}", response_model=schemas.ApiResponse[schemas.CategoryOut])
def update_category(
    category_id: int,
    data: schemas.CategoryUpdate,
    service: CatalogServiceDep,
):
    """Update a category. Reparenting is refused if it would form a cycle."""
    category = service.update_category(category_id, data)
    if not category:
        raise CategoryNotFoundError(category_id)
    return schemas.ApiResponse[schemas.CategoryOut](data=category_to_out(category))


@router.delete("/{category_id}", response_model=schemas.MessageResponse)
def delete_category(
    category_id: int,
    service: CatalogServiceDep,
):
    """Delete a category that has no products and no child categories."""
    if not service.delete_category(category_id):
        raise CategoryNotFoundError(category_id)
    return schemas.MessageResponse(message="Category deleted successfully")
