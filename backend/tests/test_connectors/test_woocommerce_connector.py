"""
Tests for the WooCommerce REST connector
"""
import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from jingo.connectors.woocommerce_connector import WooCommerceConnector
from jingo.core.exceptions import ExternalServiceError


def make_connector():
    return WooCommerceConnector(
        base_url='https://jingojump.com/',
        consumer_key='ck_test',
        consumer_secret='cs_test',
    )


def patch_client(mock_client_cls, **methods):
    client = MagicMock()
    for name, value in methods.items():
        setattr(client, name, value)
    mock_client_cls.return_value.__aenter__.return_value = client
    return client


class TestWooCommerceConnector:

    def test_missing_credentials_raise(self):
        with patch('jingo.connectors.woocommerce_connector.settings') as mock_settings:
            mock_settings.WC_URL = 'https://jingojump.com'
            mock_settings.WC_CONSUMER_KEY = None
            mock_settings.WC_CONSUMER_SECRET = None

            with pytest.raises(ValueError, match="credentials not configured"):
                WooCommerceConnector()

    def test_api_url_strips_trailing_slash(self):
        assert make_connector().api_url == 'https://jingojump.com/wp-json/wc/v3'

    @patch('jingo.connectors.woocommerce_connector.httpx.AsyncClient')
    def test_get_products_passes_paging_params(self, mock_client_cls):
        # Arrange
        response = MagicMock()
        response.json.return_value = [{'id': 1}]
        client = patch_client(mock_client_cls, get=AsyncMock(return_value=response))
        connector = make_connector()

        # Act
        products = asyncio.run(connector.get_products(page=2, per_page=50))

        # Assert
        assert products == [{'id': 1}]
        client.get.assert_awaited_once_with(
            'https://jingojump.com/wp-json/wc/v3/products',
            params={'per_page': 50, 'page': 2, 'status': 'publish'},
        )
        assert connector.api_calls == 1

    @patch('jingo.connectors.woocommerce_connector.httpx.AsyncClient')
    def test_http_error_becomes_external_service_error(self, mock_client_cls):
        request = httpx.Request('GET', 'https://jingojump.com/wp-json/wc/v3/products/categories')
        patch_client(mock_client_cls, get=AsyncMock(return_value=httpx.Response(401, request=request)))

        with pytest.raises(ExternalServiceError, match="401 Unauthorized"):
            asyncio.run(make_connector().get_categories())

    @patch('jingo.connectors.woocommerce_connector.httpx.AsyncClient')
    def test_total_pages_from_header(self, mock_client_cls):
        response = MagicMock()
        response.headers = {'x-wp-totalpages': '4'}
        patch_client(mock_client_cls, head=AsyncMock(return_value=response))

        assert asyncio.run(make_connector().get_total_pages()) == 4

    @patch('jingo.connectors.woocommerce_connector.httpx.AsyncClient')
    def test_total_pages_defaults_to_one(self, mock_client_cls):
        response = MagicMock()
        response.headers = {}
        patch_client(mock_client_cls, head=AsyncMock(return_value=response))

        assert asyncio.run(make_connector().get_total_pages()) == 1

    @patch('jingo.connectors.woocommerce_connector.httpx.AsyncClient')
    def test_download_returns_none_on_error(self, mock_client_cls):
        patch_client(mock_client_cls, get=AsyncMock(side_effect=httpx.ConnectError("refused")))

        assert asyncio.run(make_connector().download('https://jingojump.com/a.jpg')) is None
