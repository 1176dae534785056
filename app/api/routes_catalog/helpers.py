"""Helper functions for catalog routes."""
from app.models import catalog_schemas as schemas


def category_ref(category) -> schemas.CategoryRef | None:
    if category is None:
        return None
    return schemas.CategoryRef(id=category.id, name=category.name)


def category_to_out(category) -> schemas.CategoryOut:
    """Convert Category model to CategoryOut schema."""
    return schemas.CategoryOut(
        id=category.id,
        name=category.name,
        description=category.description,
        parent_category=category_ref(category.parent),
        is_active=category.is_active,
        created_at=category.created_at,
        updated_at=category.updated_at,
    )


def variant_to_out(variant) -> schemas.VariantOut:
    return schemas.VariantOut(
        id=variant.id,
        name=variant.name,
        value=variant.value,
        price=variant.price,
        stock=variant.stock,
        sku=variant.sku,
    )


def product_to_out(product) -> schemas.ProductOut:
    """Convert Product model to ProductOut schema."""
    return schemas.ProductOut(
        id=product.id,
        name=product.name,
        description=product.description,
        category_id=product.category_id,
        category=category_ref(product.category),
        base_price=product.base_price,
        discount_percentage=product.discount_percentage,
        final_price=product.final_price,
        variants=[variant_to_out(v) for v in product.variants],
        images=list(product.images or []),
        tags=list(product.tags or []),
        is_active=product.is_active,
        featured=product.featured,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


def total_pages(total: int, limit: int) -> int:
    return (total + limit - 1) // limit if total > 0 else 0
