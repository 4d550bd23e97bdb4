"""
Tests for CategoryService business rules
"""
from unittest.mock import Mock

import pytest

from jingo.core.exceptions import ConflictError, NotFoundError, PreconditionFailedError
from jingo.domain.category import Category, CategoryCreate, CategoryPosition, CategoryUpdate
from jingo.services.category_service import CategoryService


def make_category(**overrides):
    data = {'id': 3, 'name': 'Bounce Houses', 'slug': 'bounce-houses', 'position': 1}
    data.update(overrides)
    return Category(**data)


class TestCategoryService:

    def test_create_appends_when_position_is_zero(self):
        repo = Mock()
        repo.find_conflict.return_value = None
        repo.get_max_position.return_value = 4
        repo.create.return_value = make_category(position=5)

        CategoryService(repo).create(CategoryCreate(name='Slides', slug='slides'))

        assert repo.create.call_args[0][0]['position'] == 5

    def test_create_keeps_explicit_position(self):
        repo = Mock()
        repo.find_conflict.return_value = None
        repo.create.return_value = make_category()

        CategoryService(repo).create(CategoryCreate(name='Slides', slug='slides', position=2))

        repo.get_max_position.assert_not_called()
        assert repo.create.call_args[0][0]['position'] == 2

    def test_duplicate_name(self):
        repo = Mock()
        repo.find_conflict.return_value = {'id': 4, 'name': 'Slides', 'slug': 'other'}

        with pytest.raises(ConflictError, match="name"):
            CategoryService(repo).create(CategoryCreate(name='Slides', slug='slides'))

    def test_update_missing_category(self):
        repo = Mock()
        repo.find_by_id.return_value = None

        with pytest.raises(NotFoundError):
            CategoryService(repo).update(3, CategoryUpdate(name='x'))

    def test_update_checks_conflicts_excluding_self(self):
        repo = Mock()
        repo.find_by_id.return_value = make_category()
        repo.find_conflict.return_value = None
        repo.update.return_value = make_category(slug='castles')

        CategoryService(repo).update(3, CategoryUpdate(slug='castles'))

        repo.find_conflict.assert_called_once_with(name=None, slug='castles', exclude_id=3)

    def test_delete_with_products_is_refused(self):
        repo = Mock()
        repo.find_by_id.return_value = make_category(product_count=2)

        with pytest.raises(PreconditionFailedError, match="2 product"):
            CategoryService(repo).delete(3)

        repo.delete.assert_not_called()

    def test_reorder_passes_plain_dicts(self):
        repo = Mock()
        repo.reorder.return_value = 2

        count = CategoryService(repo).reorder([CategoryPosition(id=3, position=2), CategoryPosition(id=4, position=1)])

        assert count == 2
        repo.reorder.assert_called_once_with([{'id': 3, 'position': 2}, {'id': 4, 'position': 1}])

    def test_toggle_featured(self):
        repo = Mock()
        repo.find_by_id.return_value = make_category(featured=False)

        CategoryService(repo).toggle_featured(3)

        repo.update.assert_called_once_with(3, {'featured': True})

    def test_get_by_slug_not_found(self):
        repo = Mock()
        repo.find_by_slug.return_value = None

        with pytest.raises(NotFoundError):
            CategoryService(repo).get_by_slug('nope')
