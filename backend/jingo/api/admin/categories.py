"""
Admin Categories API Endpoints
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from jingo.core.auth import TokenUser, require_manager, require_staff
from jingo.core.exceptions import DomainError, to_http_exception
from jingo.domain.category import CategoryCreate, CategoryPosition, CategoryUpdate
from jingo.repositories.category_repository import CategoryRepository
from jingo.services.category_service import CategoryService

router = APIRouter()


class CategoryReorder(BaseModel):
    positions: List[CategoryPosition]


@router.get("")
async def list_categories(user: TokenUser = Depends(require_staff)):
    try:
        categories = CategoryRepository().find_all()
        return {"status": "success", "data": [category.to_dict() for category in categories]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching categories: {str(e)}")


@router.get("/slug/{slug}")
async def get_category_by_slug(slug: str, user: TokenUser = Depends(require_staff)):
    try:
        return {"status": "success", "data": CategoryService().get_by_slug(slug).to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching category: {str(e)}")


@router.get("/{category_id}")
async def get_category(category_id: int, user: TokenUser = Depends(require_staff)):
    try:
        return {"status": "success", "data": CategoryService().get(category_id).to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching category: {str(e)}")


@router.post("", status_code=201)
async def create_category(data: CategoryCreate, user: TokenUser = Depends(require_manager)):
    """Create a category; position 0 appends it after the last one"""
    try:
        return {"status": "success", "data": CategoryService().create(data).to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating category: {str(e)}")


@router.post("/reorder")
async def reorder_categories(data: CategoryReorder, user: TokenUser = Depends(require_manager)):
    try:
        count = CategoryService().reorder(data.positions)
        return {"status": "success", "updated": count}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error reordering categories: {str(e)}")


@router.patch("/{category_id}")
async def update_category(category_id: int, data: CategoryUpdate, user: TokenUser = Depends(require_manager)):
    try:
        return {"status": "success", "data": CategoryService().update(category_id, data).to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating category: {str(e)}")


@router.post("/{category_id}/toggle-featured")
async def toggle_featured(category_id: int, user: TokenUser = Depends(require_manager)):
    try:
        return {"status": "success", "data": CategoryService().toggle_featured(category_id).to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating category: {str(e)}")


@router.delete("/{category_id}")
async def delete_category(category_id: int, user: TokenUser = Depends(require_manager)):
    try:
        CategoryService().delete(category_id)
        return {"status": "success"}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting category: {str(e)}")
