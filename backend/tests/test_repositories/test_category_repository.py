"""
Unit tests for CategoryRepository
"""
import pytest
from unittest.mock import patch, MagicMock

from jingo.repositories.category_repository import CategoryRepository
from jingo.domain.category import Category


def category_row(**overrides):
    row = {
        'id': 3,
        'name': 'Bounce Houses',
        'slug': 'bounce-houses',
        'description': None,
        'image': None,
        'position': 1,
        'featured': False,
        'product_count': 12,
        'created_at': None,
        'updated_at': None,
    }
    row.update(overrides)
    return row


class TestCategoryRepository:

    @patch('jingo.repositories.category_repository.get_db_connection_dict')
    def test_find_all_returns_categories_with_counts(self, mock_get_conn):
        # Arrange
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchall.return_value = [category_row(), category_row(id=4, name='Slides', slug='slides')]

        # Act
        categories = CategoryRepository().find_all()

        # Assert
        assert [c.slug for c in categories] == ['bounce-houses', 'slides']
        assert isinstance(categories[0], Category)
        assert categories[0].product_count == 12
        assert "ORDER BY c.position ASC" in mock_cursor.execute.call_args[0][0]
        mock_conn.close.assert_called_once()

    @patch('jingo.repositories.category_repository.get_db_connection_dict')
    def test_find_by_slug_returns_none_when_missing(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = None

        assert CategoryRepository().find_by_slug('nope') is None

    def test_find_conflict_without_name_or_slug_skips_query(self):
        assert CategoryRepository().find_conflict() is None

    @patch('jingo.repositories.category_repository.get_db_connection_dict')
    def test_find_conflict_excludes_current_category(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = {'id': 4, 'name': 'Slides', 'slug': 'slides'}

        conflict = CategoryRepository().find_conflict(name='Slides', slug='slides', exclude_id=3)

        query, params = mock_cursor.execute.call_args[0]
        assert "(name = %s OR slug = %s) AND id <> %s" in query
        assert params == ['Slides', 'slides', 3]
        assert conflict['id'] == 4

    @patch('jingo.repositories.category_repository.get_db_connection_dict')
    def test_create_starts_with_zero_products(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        row = category_row()
        del row['product_count']
        mock_cursor.fetchone.return_value = row

        category = CategoryRepository().create({'name': 'Bounce Houses', 'slug': 'bounce-houses', 'position': 1})

        assert category.product_count == 0
        mock_conn.commit.assert_called_once()

    @patch('jingo.repositories.category_repository.get_db_connection_dict')
    def test_update_reloads_category(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.side_effect = [{'id': 3}, category_row(featured=True)]

        category = CategoryRepository().update(3, {'featured': True})

        assert category.featured is True
        assert mock_cursor.execute.call_args_list[0][0][1] == [True, 3]

    @patch('jingo.repositories.category_repository.get_db_connection_dict')
    def test_reorder_updates_each_position_and_commits_once(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor

        count = CategoryRepository().reorder([{'id': 3, 'position': 2}, {'id': 4, 'position': 1}])

        assert count == 2
        assert mock_cursor.execute.call_count == 2
        assert mock_cursor.execute.call_args_list[0][0][1] == (2, 3)
        mock_conn.commit.assert_called_once()

    @patch('jingo.repositories.category_repository.get_db_connection_dict')
    def test_reorder_rolls_back_everything_on_error(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.execute.side_effect = [None, Exception("deadlock")]

        with pytest.raises(Exception):
            CategoryRepository().reorder([{'id': 3, 'position': 2}, {'id': 4, 'position': 1}])

        mock_conn.rollback.assert_called_once()
        mock_conn.commit.assert_not_called()
