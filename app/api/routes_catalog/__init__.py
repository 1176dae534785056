"""
Catalog API Routes.

RESTful endpoints mounted under /api:
- Categories (CRUD, parent tree)
- Products (CRUD, search, pagination, inventory updates)
- Reports (low stock, inventory summary, products by category)
"""
from fastapi import APIRouter

from .categories import router as categories_router
from .products import router as products_router
from .reports import router as reports_router

router = APIRouter()
router.include_router(categories_router)
router.include_router(products_router)
router.include_router(reports_router)

__all__ = ["router"]
