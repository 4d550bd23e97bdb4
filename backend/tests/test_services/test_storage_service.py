"""
Tests for product image storage
"""
import re
from unittest.mock import MagicMock, patch

import pytest

from jingo.core.exceptions import ExternalServiceError, ValidationError
from jingo.services.storage_service import (
    MAX_IMAGE_SIZE,
    StorageService,
    build_image_path,
    file_extension,
    validate_image,
)


class TestImageHelpers:

    def test_extension_from_filename(self):
        assert file_extension('Castle.Front.PNG', 'image/png') == 'png'

    def test_extension_from_content_type(self):
        assert file_extension('blob', 'image/webp') == 'webp'
        assert file_extension(None, 'image/jpeg') == 'jpeg'

    def test_path_format(self):
        path = build_image_path(12, 'photo.jpg', 'image/jpeg', now_ms=1700000000000)

        assert re.fullmatch(r'12/1700000000000-[0-9a-z]{7}\.jpg', path)

    @pytest.mark.parametrize('content_type', [None, 'application/pdf', 'image/svg+xml'])
    def test_rejects_other_types(self, content_type):
        with pytest.raises(ValidationError, match="Invalid file type"):
            validate_image(content_type, 10)

    def test_rejects_large_files(self):
        with pytest.raises(ValidationError, match="10MB"):
            validate_image('image/png', MAX_IMAGE_SIZE + 1)

    def test_accepts_limit_size(self):
        validate_image('image/gif', MAX_IMAGE_SIZE)


class TestStorageService:

    def test_upload_returns_public_url(self):
        # Arrange
        client = MagicMock()
        bucket = client.storage.from_.return_value
        bucket.get_public_url.return_value = 'https://cdn/product-images/1/a.png'

        # Act
        result = StorageService(client=client, bucket='product-images').upload_product_image(
            1, b'\x89PNG', 'image/png', filename='a.png'
        )

        # Assert
        assert result['url'] == 'https://cdn/product-images/1/a.png'
        assert result['path'].startswith('1/')
        client.storage.from_.assert_called_with('product-images')
        path, content = bucket.upload.call_args[0]
        assert path == result['path']
        assert content == b'\x89PNG'
        options = bucket.upload.call_args.kwargs['file_options']
        assert options == {'content-type': 'image/png', 'cache-control': '3600', 'upsert': 'false'}

    def test_upload_validates_before_calling_storage(self):
        client = MagicMock()

        with pytest.raises(ValidationError):
            StorageService(client=client).upload_product_image(1, b'%PDF', 'application/pdf')

        client.storage.from_.return_value.upload.assert_not_called()

    def test_upload_failure_is_external_error(self):
        client = MagicMock()
        client.storage.from_.return_value.upload.side_effect = Exception("Duplicate")

        with pytest.raises(ExternalServiceError, match="Upload failed"):
            StorageService(client=client).upload('1/a.png', b'x', 'image/png')

    def test_delete_removes_single_path(self):
        client = MagicMock()

        StorageService(client=client).delete('1/a.png')

        client.storage.from_.return_value.remove.assert_called_once_with(['1/a.png'])

    def test_list_product_images(self):
        client = MagicMock()
        bucket = client.storage.from_.return_value
        bucket.list.return_value = [{'name': 'a.png'}, {'name': 'b.png'}]
        bucket.get_public_url.side_effect = lambda path: f'https://cdn/{path}'

        urls = StorageService(client=client).list_product_images(5)

        bucket.list.assert_called_once_with('5')
        assert urls == ['https://cdn/5/a.png', 'https://cdn/5/b.png']

    @patch('jingo.services.storage_service.settings')
    def test_public_url(self, mock_settings):
        mock_settings.SUPABASE_URL = 'https://abc.supabase.co'
        mock_settings.STORAGE_BUCKET = 'product-images'

        assert StorageService(client=MagicMock()).public_url('3/a.png') == (
            'https://abc.supabase.co/storage/v1/object/public/product-images/3/a.png'
        )
