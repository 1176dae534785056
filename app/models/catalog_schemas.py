"""
Pydantic schemas for the catalog API.

Wire format is camelCase (`basePrice`, `parentCategory`, ...); Python code
uses snake_case field names. Every response is wrapped in the
`{success, data}` envelope defined at the bottom of this module.
"""
from __future__ import annotations

import datetime as dt
import re
from decimal import Decimal
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

IMAGE_URL_PATTERN = re.compile(r"^https?://.+\.(jpg|jpeg|png|webp)$", re.IGNORECASE)

ProductSortField = Literal["name", "basePrice", "discountPercentage", "createdAt", "updatedAt"]
SortOrder = Literal["asc", "desc"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _reject_explicit_nulls(model: BaseModel, fields: tuple[str, ...]) -> None:
    for name in fields:
        if name in model.model_fields_set and getattr(model, name) is None:
            raise ValueError(f"{to_camel(name)} cannot be null")


# ============================================================================
# Category Schemas
# ============================================================================

class CategoryCreate(CamelModel):
    """Schema for creating a category."""
    name: str = Field(..., min_length=2, max_length=50)
    description: str | None = Field(None, max_length=200)
    parent_id: int | None = Field(None, alias="parentCategory")


class CategoryUpdate(CamelModel):
    """Schema for updating a category. Omitted fields are left untouched."""
    name: str | None = Field(None, min_length=2, max_length=50)
    description: str | None = Field(None, max_length=200)
    parent_id: int | None = Field(None, alias="parentCategory")
    is_active: bool | None = None

    @model_validator(mode="after")
    def reject_null_fields(self) -> CategoryUpdate:
        _reject_explicit_nulls(self, ("name", "is_active"))
        return self


class CategoryRef(CamelModel):
    """Minimal category reference embedded in other payloads."""
    id: int
    name: str


class CategoryOut(CamelModel):
    id: int
    name: str
    description: str | None = None
    parent_category: CategoryRef | None = None
    is_active: bool = True
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


# ============================================================================
# Product Schemas
# ============================================================================

class VariantIn(CamelModel):
    name: str = Field(..., min_length=1, max_length=50)
    value: str = Field(..., min_length=1, max_length=100)
    price: Decimal = Field(..., ge=0)
    stock: int = Field(..., ge=0)
    sku: str = Field(..., min_length=1, max_length=64)


class VariantOut(CamelModel):
    id: int
    name: str
    value: str
    price: Decimal
    stock: int
    sku: str


class _ProductFields(CamelModel):
    """Validators shared by product create and update payloads."""

    @field_validator("images", check_fields=False)
    @classmethod
    def images_are_urls(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        for url in v:
            if not IMAGE_URL_PATTERN.match(url):
                raise ValueError("Please provide a valid image URL")
        return v

    @field_validator("tags", check_fields=False)
    @classmethod
    def strip_tags(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        return [tag.strip() for tag in v if tag.strip()]

    @field_validator("variants", check_fields=False)
    @classmethod
    def unique_skus(cls, v: list[VariantIn] | None) -> list[VariantIn] | None:
        if v is None:
            return v
        skus = [variant.sku for variant in v]
        if len(skus) != len(set(skus)):
            raise ValueError("Variant SKUs must be unique")
        return v


class ProductCreate(_ProductFields):
    """Schema for creating a product."""
    name: str = Field(..., min_length=2, max_length=100)
    description: str = Field(..., min_length=10, max_length=1000)
    category_id: int = Field(..., alias="category")
    base_price: Decimal = Field(..., ge=0)
    discount_percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    variants: list[VariantIn] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    featured: bool = False
    is_active: bool = True


class ProductUpdate(_ProductFields):
    """Schema for updating a product. Omitted fields are left untouched."""
    name: str | None = Field(None, min_length=2, max_length=100)
    description: str | None = Field(None, min_length=10, max_length=1000)
    category_id: int | None = Field(None, alias="category")
    base_price: Decimal | None = Field(None, ge=0)
    discount_percentage: Decimal | None = Field(None, ge=0, le=100)
    variants: list[VariantIn] | None = None
    images: list[str] | None = None
    tags: list[str] | None = None
    featured: bool | None = None
    is_active: bool | None = None

    @model_validator(mode="after")
    def reject_null_fields(self) -> ProductUpdate:
        _reject_explicit_nulls(
            self,
            (
                "name", "description", "category_id", "base_price", "discount_percentage",
                "variants", "images", "tags", "featured", "is_active",
            ),
        )
        return self


class ProductOut(CamelModel):
    id: int
    name: str
    description: str
    category_id: int
    category: CategoryRef | None = None
    base_price: Decimal
    discount_percentage: Decimal
    final_price: Decimal
    variants: list[VariantOut] = []
    images: list[str] = []
    tags: list[str] = []
    is_active: bool = True
    featured: bool = False
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class InventoryUpdate(CamelModel):
    """Set the stock of one variant."""
    variant_id: int | None = None
    stock: int


class Pagination(CamelModel):
    current: int
    total: int
    count: int
    total_items: int


# ============================================================================
# Report Schemas
# ============================================================================

class LowStockItem(CamelModel):
    product_id: int
    product_name: str
    category: str
    category_id: int | None = None
    variant_id: int | None = None
    variant_name: str
    sku: str | None = None
    current_stock: int
    threshold: int


class LowStockReport(CamelModel):
    threshold: int
    total_low_stock_items: int
    items: list[LowStockItem]


class CategoryStockSummary(CamelModel):
    category_id: int | None = None
    products: int = 0
    variants: int = 0
    total_stock: int = 0


class InventorySummary(CamelModel):
    total_products: int = 0
    total_variants: int = 0
    total_stock: int = 0
    category_summary: dict[str, CategoryStockSummary] = Field(default_factory=dict)
    out_of_stock_items: int = 0


class CategoryRollupRow(CamelModel):
    category_id: int = Field(..., alias="_id")
    category_name: str
    product_count: int
    average_price: float
    total_variants: int


# ============================================================================
# Response Envelope
# ============================================================================

DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    success: bool = True
    data: DataT


class PaginatedResponse(ApiResponse[DataT], Generic[DataT]):
    pagination: Pagination


class MessageResponse(BaseModel):
    success: bool = True
    message: str
