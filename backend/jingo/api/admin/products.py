"""
Admin Products API Endpoints
Catalog management for the back office
"""
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from jingo.core.auth import TokenUser, require_manager, require_staff
from jingo.core.exceptions import DomainError, to_http_exception
from jingo.core.pagination import build_pagination, page_offset
from jingo.domain.product import ProductCreate, ProductStatus, ProductUpdate
from jingo.repositories.product_repository import ProductRepository
from jingo.services.product_service import ProductService

router = APIRouter()


class BulkStatusUpdate(BaseModel):
    ids: List[int] = Field(..., min_length=1)
    status: ProductStatus


class ProductImport(BaseModel):
    products: List[ProductCreate]


class StockUpdate(BaseModel):
    stock_quantity: int = Field(..., ge=0)


class ImageCreate(BaseModel):
    url: str = Field(..., min_length=1)
    alt: Optional[str] = None
    position: Optional[int] = Field(None, ge=0)


@router.get("")
async def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, description="Search name, SKU and description"),
    category: Optional[str] = Query(None),
    status: Optional[ProductStatus] = Query(None),
    sort_by: Literal["name", "price", "created_at", "stock_quantity", "sku"] = Query("created_at"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    user: TokenUser = Depends(require_staff)
):
    try:
        products, total = ProductRepository().find_all(
            search=search,
            category=category,
            status=status,
            sort_by=sort_by,
            sort_order=sort_order,
            limit=limit,
            offset=page_offset(page, limit)
        )

        return {
            "status": "success",
            "data": [product.to_dict() for product in products],
            "pagination": build_pagination(page, limit, total)
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching products: {str(e)}")


@router.get("/categories")
async def list_product_categories(user: TokenUser = Depends(require_staff)):
    """Distinct category names used by products"""
    try:
        return {"status": "success", "data": ProductRepository().find_distinct_categories()}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching categories: {str(e)}")


@router.get("/low-stock")
async def list_low_stock(user: TokenUser = Depends(require_staff)):
    try:
        products = ProductRepository().find_low_stock(limit=20)
        return {"status": "success", "data": [product.to_dict() for product in products]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching low stock products: {str(e)}")


@router.get("/export")
async def export_products(
    status: Optional[ProductStatus] = Query(None),
    category: Optional[str] = Query(None),
    user: TokenUser = Depends(require_staff)
):
    try:
        products = ProductRepository().find_for_export(status=status, category=category)
        return {"status": "success", "count": len(products), "data": [product.to_dict() for product in products]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error exporting products: {str(e)}")


@router.get("/{product_id}")
async def get_product(product_id: int, user: TokenUser = Depends(require_staff)):
    """Product with all images and its 10 most recent order lines"""
    try:
        return {"status": "success", "data": ProductService().get_detail(product_id)}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching product: {str(e)}")


@router.post("", status_code=201)
async def create_product(data: ProductCreate, user: TokenUser = Depends(require_manager)):
    try:
        product = ProductService().create(data)
        return {"status": "success", "data": product.to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating product: {str(e)}")


@router.patch("/{product_id}")
async def update_product(product_id: int, data: ProductUpdate, user: TokenUser = Depends(require_manager)):
    try:
        product = ProductService().update(product_id, data)
        return {"status": "success", "data": product.to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating product: {str(e)}")


@router.delete("/{product_id}")
async def delete_product(product_id: int, user: TokenUser = Depends(require_manager)):
    """Delete a product; products with order lines must be archived instead"""
    try:
        ProductService().delete(product_id)
        return {"status": "success"}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting product: {str(e)}")


@router.post("/bulk-status")
async def bulk_update_status(data: BulkStatusUpdate, user: TokenUser = Depends(require_manager)):
    try:
        count = ProductService().bulk_update_status(data.ids, data.status)
        return {"status": "success", "updated": count}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating products: {str(e)}")


@router.post("/import")
async def import_products(data: ProductImport, user: TokenUser = Depends(require_manager)):
    """Upsert products by SKU; failing rows are reported in `errors`"""
    try:
        return {"status": "success", "data": ProductService().bulk_import(data.products)}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error importing products: {str(e)}")


@router.patch("/{product_id}/stock")
async def update_stock(product_id: int, data: StockUpdate, user: TokenUser = Depends(require_manager)):
    try:
        product = ProductService().update_stock(product_id, data.stock_quantity)
        return {"status": "success", "data": product.to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating stock: {str(e)}")


@router.post("/{product_id}/images", status_code=201)
async def add_image(product_id: int, data: ImageCreate, user: TokenUser = Depends(require_manager)):
    try:
        image = ProductService().add_image(product_id, data.url, alt=data.alt, position=data.position)
        return {"status": "success", "data": image.model_dump()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error adding image: {str(e)}")


@router.delete("/images/{image_id}")
async def delete_image(image_id: int, user: TokenUser = Depends(require_manager)):
    try:
        ProductService().delete_image(image_id)
        return {"status": "success"}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting image: {str(e)}")
