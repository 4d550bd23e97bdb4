"""
Category Service
"""
import logging
from typing import List, Optional

from jingo.core.exceptions import ConflictError, NotFoundError, PreconditionFailedError
from jingo.domain.category import Category, CategoryCreate, CategoryPosition, CategoryUpdate
from jingo.repositories.category_repository import CategoryRepository

logger = logging.getLogger(__name__)


class CategoryService:

    def __init__(self, category_repo: CategoryRepository = None):
        self.category_repo = category_repo or CategoryRepository()

    def _check_conflict(self, name: Optional[str], slug: Optional[str], exclude_id: Optional[int] = None) -> None:
        conflict = self.category_repo.find_conflict(name=name, slug=slug, exclude_id=exclude_id)
        if not conflict:
            return
        if name and conflict['name'] == name:
            raise ConflictError("A category with this name already exists")
        raise ConflictError("A category with this slug already exists")

    def get(self, category_id: int) -> Category:
        category = self.category_repo.find_by_id(category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return category

    def get_by_slug(self, slug: str) -> Category:
        category = self.category_repo.find_by_slug(slug)
        if category is None:
            raise NotFoundError("Category not found")
        return category

    def create(self, data: CategoryCreate) -> Category:
        self._check_conflict(data.name, data.slug)

        values = data.model_dump()
        if values['position'] == 0:
            values['position'] = self.category_repo.get_max_position() + 1

        category = self.category_repo.create(values)
        logger.info(f"Created category {category.id} ({category.slug})")
        return category

    def update(self, category_id: int, data: CategoryUpdate) -> Category:
        self.get(category_id)

        changes = data.model_dump(exclude_unset=True)
        if changes.get('name') or changes.get('slug'):
            self._check_conflict(changes.get('name'), changes.get('slug'), exclude_id=category_id)

        return self.category_repo.update(category_id, changes)

    def delete(self, category_id: int) -> None:
        category = self.get(category_id)

        if category.product_count > 0:
            raise PreconditionFailedError(
                f"Cannot delete category with {category.product_count} product(s). Reassign products first."
            )

        self.category_repo.delete(category_id)
        logger.info(f"Deleted category {category_id}")

    def reorder(self, positions: List[CategoryPosition]) -> int:
        return self.category_repo.reorder([entry.model_dump() for entry in positions])

    def toggle_featured(self, category_id: int) -> Category:
        category = self.get(category_id)
        return self.category_repo.update(category_id, {"featured": not category.featured})
