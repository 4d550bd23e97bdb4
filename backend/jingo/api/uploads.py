"""
Uploads API Endpoints
Product images in object storage (STAFF and above)
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile

from jingo.core.auth import TokenUser, require_staff
from jingo.core.exceptions import DomainError, to_http_exception
from jingo.services.storage_service import StorageService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/product-images")
async def upload_product_image(
    file: Optional[UploadFile] = File(None),
    product_id: Optional[str] = Form(None),
    user: TokenUser = Depends(require_staff)
):
    """
    Upload a product image

    Accepts JPEG, PNG, WebP or GIF up to 10MB. Returns the public URL and
    the object path (needed to delete it later).
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No file provided")
    if not product_id:
        raise HTTPException(status_code=400, detail="No product_id provided")

    try:
        content = await file.read()
        result = StorageService().upload_product_image(
            product_id,
            content,
            file.content_type,
            filename=file.filename,
        )
        logger.info(f"User {user.id} uploaded {result['path']}")
        return result

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error uploading image: {str(e)}")


@router.delete("/product-images")
async def delete_product_image(
    path: Optional[str] = Query(None, description="Object path returned by the upload"),
    user: TokenUser = Depends(require_staff)
):
    if not path:
        raise HTTPException(status_code=400, detail="No path provided")

    try:
        StorageService().delete(path)
        return {"success": True}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting image: {str(e)}")


@router.get("/product-images/{product_id}")
async def list_product_images(product_id: str, user: TokenUser = Depends(require_staff)):
    try:
        return {"status": "success", "data": StorageService().list_product_images(product_id)}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error listing images: {str(e)}")
