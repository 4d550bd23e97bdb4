"""
API tests for product image uploads
"""
from unittest.mock import patch

from jingo.core.exceptions import ValidationError


class TestUploadsApi:

    def test_requires_authentication(self, client):
        response = client.post('/api/v1/uploads/product-images', data={'product_id': '1'})

        assert response.status_code == 401

    def test_customers_forbidden(self, client, as_customer):
        response = client.post(
            '/api/v1/uploads/product-images',
            data={'product_id': '1'},
            files={'file': ('a.png', b'png', 'image/png')},
        )

        assert response.status_code == 403

    def test_missing_file(self, client, as_staff):
        response = client.post('/api/v1/uploads/product-images', data={'product_id': '1'})

        assert response.status_code == 400
        assert response.json()['detail'] == "No file provided"

    def test_missing_product_id(self, client, as_staff):
        response = client.post(
            '/api/v1/uploads/product-images',
            files={'file': ('a.png', b'png', 'image/png')},
        )

        assert response.status_code == 400
        assert response.json()['detail'] == "No product_id provided"

    @patch('jingo.api.uploads.StorageService')
    def test_upload_returns_url_and_path(self, mock_storage_cls, client, as_staff):
        mock_storage_cls.return_value.upload_product_image.return_value = {
            'url': 'https://cdn/1/a.png', 'path': '1/a.png',
        }

        response = client.post(
            '/api/v1/uploads/product-images',
            data={'product_id': '1'},
            files={'file': ('a.png', b'png-bytes', 'image/png')},
        )

        assert response.status_code == 200
        assert response.json() == {'url': 'https://cdn/1/a.png', 'path': '1/a.png'}
        mock_storage_cls.return_value.upload_product_image.assert_called_once_with(
            '1', b'png-bytes', 'image/png', filename='a.png'
        )

    @patch('jingo.api.uploads.StorageService')
    def test_invalid_type_is_400(self, mock_storage_cls, client, as_staff):
        mock_storage_cls.return_value.upload_product_image.side_effect = ValidationError(
            "Invalid file type. Allowed: JPEG, PNG, WebP, GIF"
        )

        response = client.post(
            '/api/v1/uploads/product-images',
            data={'product_id': '1'},
            files={'file': ('a.pdf', b'%PDF', 'application/pdf')},
        )

        assert response.status_code == 400

    def test_delete_requires_path(self, client, as_staff):
        response = client.delete('/api/v1/uploads/product-images')

        assert response.status_code == 400
        assert response.json()['detail'] == "No path provided"
