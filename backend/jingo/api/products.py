"""
Products API Endpoints
Public storefront catalog (ACTIVE products only)
"""
from typing import Literal, Optional

from fastapi import APIRouter, HTTPException, Query

from jingo.core.pagination import build_pagination, page_offset
from jingo.repositories.category_repository import CategoryRepository
from jingo.repositories.product_repository import ProductRepository

router = APIRouter()

CatalogSort = Literal["featured", "price-asc", "price-desc", "newest", "name"]


@router.get("")
async def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    search: Optional[str] = Query(None, description="Search name and description"),
    category_id: Optional[int] = Query(None),
    category_slug: Optional[str] = Query(None, description="Category slug (resolved to an id)"),
    size: Optional[str] = Query(None),
    age_range: Optional[str] = Query(None),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    sort_by: CatalogSort = Query("featured")
):
    """
    List ACTIVE products with filters

    Each product carries its first image and category.
    """
    try:
        if category_slug and not category_id:
            category = CategoryRepository().find_by_slug(category_slug)
            if category is None:
                return {"status": "success", "data": [], "pagination": build_pagination(page, limit, 0)}
            category_id = category.id

        products, total = ProductRepository().find_active(
            search=search,
            category_id=category_id,
            size=size,
            age_range=age_range,
            min_price=min_price,
            max_price=max_price,
            sort_by=sort_by,
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
async def list_categories():
    try:
        categories = CategoryRepository().find_all()
        return {"status": "success", "data": [category.to_dict() for category in categories]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching categories: {str(e)}")


@router.get("/categories/{slug}")
async def get_category(slug: str):
    try:
        category = CategoryRepository().find_by_slug(slug)
        if category is None:
            raise HTTPException(status_code=404, detail="Category not found")
        return {"status": "success", "data": category.to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching category: {str(e)}")


@router.get("/filters")
async def get_filter_options():
    """Sizes and age ranges with counts, plus the price range"""
    try:
        return {"status": "success", "data": ProductRepository().get_filter_options()}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching filters: {str(e)}")


@router.get("/featured")
async def get_featured(limit: int = Query(8, ge=1, le=50)):
    try:
        products = ProductRepository().find_featured(limit)
        return {"status": "success", "data": [product.to_dict() for product in products]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching featured products: {str(e)}")


@router.get("/sitemap")
async def get_sitemap_entries():
    try:
        return {"status": "success", "data": ProductRepository().find_sitemap_entries()}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching sitemap: {str(e)}")


@router.get("/slug/{slug}")
async def get_product_by_slug(slug: str):
    try:
        product = ProductRepository().find_active_by_slug(slug)
        if product is None:
            raise HTTPException(status_code=404, detail="Product not found")
        return {"status": "success", "data": product.to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching product: {str(e)}")


@router.get("/{product_id}")
async def get_product(product_id: int):
    try:
        product = ProductRepository().find_active_by_id(product_id)
        if product is None:
            raise HTTPException(status_code=404, detail="Product not found")
        return {"status": "success", "data": product.to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching product: {str(e)}")


@router.get("/{product_id}/related")
async def get_related_products(product_id: int, limit: int = Query(4, ge=1, le=20)):
    """Other ACTIVE products in the same category, featured first"""
    try:
        products = ProductRepository().find_related(product_id, limit)
        return {"status": "success", "data": [product.to_dict() for product in products]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching related products: {str(e)}")
