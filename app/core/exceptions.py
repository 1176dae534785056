"""Custom exception hierarchy for the catalog backend.

All application errors inherit from CatalogException so the API layer can map
them to the `{success: false, message}` envelope in one place.

Error codes follow pattern: [CATEGORY][NUMBER]
- CAT: Category errors (001-099)
- PRD: Product/variant errors (100-199)
- SYS: System errors (400-499)
"""

from __future__ import annotations

from typing import Any


class CatalogException(Exception):
    """Base exception for all catalog application errors."""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        """Initialize exception with user-facing message and metadata.

        Args:
            message: User-facing error message
            code: Unique error code (e.g., "CAT001")
            status_code: HTTP status code (default: 400 Bad Request)
            details: Optional additional context
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response format."""
        body: dict[str, Any] = {
            "success": False,
            "message": self.message,
            "code": self.code,
        }
        if self.details:
            body["details"] = self.details
        return body


# ============================================================================
# CATEGORY ERRORS (CAT001-099)
# ============================================================================

class CategoryError(CatalogException):
    """Base class for category-related errors."""
    pass


class CategoryNotFoundError(CategoryError):
    """Category does not exist."""

    def __init__(self, category_id: int | None = None):
        super().__init__(
            message="Category not found",
            code="CAT001",
            status_code=404,
            details={"category_id": category_id} if category_id is not None else {},
        )


class ParentCategoryNotFoundError(CategoryError):
    """Referenced parent category does not exist."""

    def __init__(self, parent_id: int):
        super().__init__(
            message="Parent category not found",
            code="CAT002",
            status_code=400,
            details={"parent_id": parent_id},
        )


class CategoryCycleError(CategoryError):
    """Assigning the parent would make the category its own ancestor."""

    def __init__(self, category_id: int, parent_id: int):
        super().__init__(
            message="Parent category would create a cycle in the category tree",
            code="CAT003",
            status_code=400,
            details={"category_id": category_id, "parent_id": parent_id},
        )


class CategoryInUseError(CategoryError):
    """Category still has products or child categories attached."""

    def __init__(self, category_id: int, products: int = 0, children: int = 0):
        if products:
            message = "Cannot delete category with existing products"
        else:
            message = "Cannot delete category with child categories"
        super().__init__(
            message=message,
            code="CAT004",
            status_code=400,
            details={"category_id": category_id, "products": products, "children": children},
        )


# ============================================================================
# PRODUCT ERRORS (PRD100-199)
# ============================================================================

class ProductError(CatalogException):
    """Base class for product-related errors."""
    pass


class ProductNotFoundError(ProductError):
    def __init__(self, product_id: int | None = None):
        super().__init__(
            message="Product not found",
            code="PRD100",
            status_code=404,
            details={"product_id": product_id} if product_id is not None else {},
        )


class VariantNotFoundError(ProductError):
    def __init__(self, product_id: int, variant_id: int):
        super().__init__(
            message="Variant not found",
            code="PRD101",
            status_code=404,
            details={"product_id": product_id, "variant_id": variant_id},
        )


class DuplicateSkuError(ProductError):
    """A variant SKU is already used somewhere in the catalog."""

    def __init__(self, skus: list[str]):
        joined = ", ".join(sorted(set(skus)))
        super().__init__(
            message=f"Variant SKU already exists: {joined}",
            code="PRD102",
            status_code=409,
            details={"skus": sorted(set(skus))},
        )


class NegativeStockError(ProductError):
    def __init__(self, stock: int):
        super().__init__(
            message="Stock cannot be negative",
            code="PRD103",
            status_code=400,
            details={"stock": stock},
        )


class InvalidCategoryReferenceError(ProductError):
    """Product payload points at a category that does not exist."""

    def __init__(self, category_id: int):
        super().__init__(
            message="Category not found",
            code="PRD104",
            status_code=400,
            details={"category_id": category_id},
        )


# ============================================================================
# SYSTEM ERRORS (SYS400-499)
# ============================================================================

class SystemError(CatalogException):
    """Base class for system/infrastructure errors."""
    pass


class StoreReadError(SystemError):
    """Reading from the product or category store failed."""

    def __init__(self, operation: str):
        super().__init__(
            message="Failed to read catalog data",
            code="SYS400",
            status_code=500,
            details={"operation": operation},
        )
