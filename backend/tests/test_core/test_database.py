"""
Tests for the shared-connection transaction helper
"""
import pytest
from unittest.mock import patch, MagicMock

from jingo.core.database import contains_pattern, db_transaction


class TestDbTransaction:

    @patch('jingo.core.database.get_db_connection_dict')
    def test_commits_and_closes_on_clean_exit(self, mock_get_conn):
        # Arrange
        mock_conn = MagicMock()
        mock_get_conn.return_value = mock_conn

        # Act
        with db_transaction() as conn:
            conn.cursor().execute("INSERT INTO orders DEFAULT VALUES")

        # Assert
        assert conn is mock_conn
        mock_conn.commit.assert_called_once()
        mock_conn.rollback.assert_not_called()
        mock_conn.close.assert_called_once()

    @patch('jingo.core.database.get_db_connection_dict')
    def test_rolls_back_closes_and_reraises_on_error(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_get_conn.return_value = mock_conn

        with pytest.raises(RuntimeError, match="item insert failed"):
            with db_transaction():
                raise RuntimeError("item insert failed")

        mock_conn.rollback.assert_called_once()
        mock_conn.commit.assert_not_called()
        mock_conn.close.assert_called_once()

    @patch('jingo.core.database.get_db_connection_dict')
    def test_failed_commit_is_rolled_back(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_conn.commit.side_effect = Exception("serialization failure")
        mock_get_conn.return_value = mock_conn

        with pytest.raises(Exception, match="serialization failure"):
            with db_transaction():
                pass

        mock_conn.rollback.assert_called_once()
        mock_conn.close.assert_called_once()


class TestContainsPattern:

    def test_plain_text(self):
        assert contains_pattern('ana') == '%ana%'

    def test_wildcards_are_literal(self):
        assert contains_pattern('50%_off') == '%50\\%\\_off%'

    def test_backslash_escaped_first(self):
        assert contains_pattern('a\\b') == '%a\\\\b%'
