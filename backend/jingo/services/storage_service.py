"""
Storage Service
Product images in the Supabase storage bucket
"""
import logging
import secrets
import time
from typing import Dict, List, Optional

from supabase import Client

from jingo.core.config import settings
from jingo.core.database import get_supabase
from jingo.core.exceptions import ExternalServiceError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/webp", "image/gif")
MAX_IMAGE_SIZE = 10 * 1024 * 1024

BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def random_suffix(length: int = 7) -> str:
    return "".join(secrets.choice(BASE36_ALPHABET) for _ in range(length))


def file_extension(filename: Optional[str], content_type: str) -> str:
    """Extension from the file name, else from the MIME subtype"""
    if filename and "." in filename:
        return filename.rsplit(".", 1)[1].lower()
    return content_type.split("/")[-1]


def build_image_path(product_id, filename: Optional[str], content_type: str, now_ms: Optional[int] = None) -> str:
    """`<product_id>/<epoch_ms>-<7 base36 chars>.<ext>`"""
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{product_id}/{now_ms}-{random_suffix()}.{file_extension(filename, content_type)}"


def validate_image(content_type: Optional[str], size: int) -> None:
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError("Invalid file type. Allowed: JPEG, PNG, WebP, GIF")
    if size > MAX_IMAGE_SIZE:
        raise ValidationError("File too large. Maximum size is 10MB")


class StorageService:

    def __init__(self, client: Client = None, bucket: str = None):
        self._client = client
        self.bucket = bucket or settings.STORAGE_BUCKET

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase()
        return self._client

    def _bucket(self):
        return self.client.storage.from_(self.bucket)

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Upload bytes (never overwriting) and return the public URL"""
        try:
            self._bucket().upload(
                path,
                content,
                file_options={
                    "content-type": content_type,
                    "cache-control": "3600",
                    "upsert": "false",
                },
            )
        except Exception as e:
            logger.error(f"Storage upload failed for {path}: {str(e)}")
            raise ExternalServiceError(f"Upload failed: {str(e)}")

        logger.info(f"Uploaded {path} ({len(content)} bytes)")
        return self._bucket().get_public_url(path)

    def upload_product_image(
        self,
        product_id,
        content: bytes,
        content_type: str,
        filename: Optional[str] = None
    ) -> Dict[str, str]:
        """
        Validate and upload an image for a product

        Returns:
            {"url": public URL, "path": object path in the bucket}
        """
        validate_image(content_type, len(content))
        path = build_image_path(product_id, filename, content_type)
        url = self.upload(path, content, content_type)
        return {"url": url, "path": path}

    def delete(self, path: str) -> None:
        try:
            self._bucket().remove([path])
        except Exception as e:
            logger.error(f"Storage delete failed for {path}: {str(e)}")
            raise ExternalServiceError(f"Delete failed: {str(e)}")

        logger.info(f"Deleted {path}")

    def list_product_images(self, product_id) -> List[str]:
        try:
            files = self._bucket().list(str(product_id))
        except Exception as e:
            logger.error(f"Storage list failed for product {product_id}: {str(e)}")
            raise ExternalServiceError(f"List failed: {str(e)}")

        return [self._bucket().get_public_url(f"{product_id}/{file['name']}") for file in files or []]

    def public_url(self, path: str) -> str:
        return f"{settings.SUPABASE_URL}/storage/v1/object/public/{self.bucket}/{path}"
