"""
Category Service - CRUD operations for catalog categories.

Follows SRP: Only handles category-related operations, including keeping the
parent/child tree free of cycles.
"""
from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import func
from sqlalchemy.orm import joinedload

from app import metrics
from app.core.exceptions import (
    CategoryCycleError,
    CategoryInUseError,
    ParentCategoryNotFoundError,
)
from app.models.catalog_models import Category, Product
from app.models.catalog_schemas import CategoryCreate, CategoryUpdate
from app.services.catalog.base import BaseCatalogService

logger = logging.getLogger(__name__)


class CategoryService(BaseCatalogService):
    """
    Service for category operations.

    Categories may be nested through `parent_id`. Any parent assignment is
    checked with a bounded ancestor walk so the tree can never loop.
    """

    def create_category(self, data: CategoryCreate) -> Category:
        """Create a new category, validating the parent reference."""
        if data.parent_id is not None:
            self._get_parent_or_raise(data.parent_id)

        category = Category(
            name=data.name,
            description=data.description,
            parent_id=data.parent_id,
        )
        self._db.add(category)
        self._db.commit()
        self._db.refresh(category)
        metrics.category_mutation("create")
        logger.info(f"Created category: {category.name} (id={category.id})")
        return category

    def get_category(self, category_id: int) -> Category | None:
        """Get a category by ID with its parent loaded."""
        return self._db.query(Category).options(
            joinedload(Category.parent)
        ).filter(Category.id == category_id).first()

    def list_categories(self, include_inactive: bool = False) -> Sequence[Category]:
        """List categories ordered by name."""
        query = self._db.query(Category).options(joinedload(Category.parent))
        if not include_inactive:
            query = query.filter(Category.is_active.is_(True))
        return query.order_by(Category.name, Category.id).all()

    def update_category(self, category_id: int, data: CategoryUpdate) -> Category | None:
        """Update a category. Returns None when it does not exist."""
        category = self.get_category(category_id)
        if not category:
            return None

        update_data = data.model_dump(exclude_unset=True)

        new_parent_id = update_data.get("parent_id")
        if new_parent_id is not None and new_parent_id != category.parent_id:
            parent = self._get_parent_or_raise(new_parent_id)
            self._ensure_no_cycle(category, parent)

        for key, value in update_data.items():
            setattr(category, key, value)

        self._db.commit()
        self._db.refresh(category)
        metrics.category_mutation("update")
        logger.info(f"Updated category: {category.name} (id={category.id})")
        return category

    def delete_category(self, category_id: int) -> bool:
        """
        Delete a category.

        Refuses while products or child categories still reference it.
        """
        category = self.get_category(category_id)
        if not category:
            return False

        product_count = self._db.query(func.count(Product.id)).filter(
            Product.category_id == category_id,
        ).scalar() or 0
        child_count = self._db.query(func.count(Category.id)).filter(
            Category.parent_id == category_id,
        ).scalar() or 0
        if product_count or child_count:
            raise CategoryInUseError(category_id, products=product_count, children=child_count)

        self._db.delete(category)
        self._db.commit()
        metrics.category_mutation("delete")
        logger.info(f"Deleted category: {category.name} (id={category_id})")
        return True

    # ========================================================================
    # Private Helpers
    # ========================================================================

    def _get_parent_or_raise(self, parent_id: int) -> Category:
        parent = self._db.get(Category, parent_id)
        if parent is None:
            raise ParentCategoryNotFoundError(parent_id)
        return parent

    def _ensure_no_cycle(self, category: Category, parent: Category) -> None:
        """The proposed parent and its ancestors must not include `category`."""
        if parent.id == category.id:
            raise CategoryCycleError(category.id, parent.id)
        try:
            chain = parent.ancestors(self._settings.MAX_CATEGORY_DEPTH)
        except ValueError:
            logger.warning(
                "Category ancestor walk failed (category=%s parent=%s)", category.id, parent.id
            )
            raise CategoryCycleError(category.id, parent.id) from None
        if any(ancestor.id == category.id for ancestor in chain):
            raise CategoryCycleError(category.id, parent.id)
