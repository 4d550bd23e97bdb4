"""
Admin Subscribers API Endpoints
Newsletter and SMS list
"""
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from jingo.core.auth import TokenUser, require_manager, require_staff
from jingo.core.exceptions import DomainError, to_http_exception
from jingo.core.pagination import build_pagination, page_offset
from jingo.domain.subscriber import SubscriberCreate, SubscriberImportRow, SubscriberUpdate, UnsubscribeType
from jingo.repositories.subscriber_repository import SubscriberRepository
from jingo.services.subscriber_service import SubscriberService

router = APIRouter()


class UnsubscribeRequest(BaseModel):
    type: UnsubscribeType = "both"


class SubscriberImport(BaseModel):
    subscribers: List[SubscriberImportRow] = Field(..., min_length=1)
    source: str = "import"


@router.get("")
async def list_subscribers(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None),
    email_subscribed: Optional[bool] = Query(None),
    sms_subscribed: Optional[bool] = Query(None),
    sort_by: Literal["created_at", "email", "last_name"] = Query("created_at"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    user: TokenUser = Depends(require_staff)
):
    try:
        subscribers, total = SubscriberRepository().find_all(
            search=search,
            email_subscribed=email_subscribed,
            sms_subscribed=sms_subscribed,
            sort_by=sort_by,
            sort_order=sort_order,
            limit=limit,
            offset=page_offset(page, limit)
        )

        return {
            "status": "success",
            "data": [subscriber.to_dict() for subscriber in subscribers],
            "pagination": build_pagination(page, limit, total)
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching subscribers: {str(e)}")


@router.get("/stats")
async def get_subscriber_stats(user: TokenUser = Depends(require_staff)):
    try:
        return {"status": "success", "data": SubscriberService().get_stats()}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching subscriber stats: {str(e)}")


@router.get("/export")
async def export_subscribers(
    email_subscribed: Optional[bool] = Query(None),
    sms_subscribed: Optional[bool] = Query(None),
    user: TokenUser = Depends(require_staff)
):
    try:
        subscribers = SubscriberRepository().find_for_export(
            email_subscribed=email_subscribed,
            sms_subscribed=sms_subscribed
        )
        return {
            "status": "success",
            "count": len(subscribers),
            "data": [subscriber.to_dict() for subscriber in subscribers]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error exporting subscribers: {str(e)}")


@router.get("/{subscriber_id}")
async def get_subscriber(subscriber_id: int, user: TokenUser = Depends(require_staff)):
    try:
        return {"status": "success", "data": SubscriberService().get(subscriber_id).to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching subscriber: {str(e)}")


@router.post("", status_code=201)
async def create_subscriber(data: SubscriberCreate, user: TokenUser = Depends(require_manager)):
    try:
        return {"status": "success", "data": SubscriberService().create(data).to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating subscriber: {str(e)}")


@router.post("/import")
async def import_subscribers(data: SubscriberImport, user: TokenUser = Depends(require_manager)):
    """Import a list; existing emails are refreshed but never re-subscribed"""
    try:
        return {"status": "success", "data": SubscriberService().bulk_import(data.subscribers, source=data.source)}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error importing subscribers: {str(e)}")


@router.delete("/unsubscribed")
async def delete_unsubscribed(user: TokenUser = Depends(require_manager)):
    """Remove subscribers with neither email nor SMS enabled"""
    try:
        return {"status": "success", "deleted": SubscriberService().delete_unsubscribed()}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting subscribers: {str(e)}")


@router.patch("/{subscriber_id}")
async def update_subscriber(subscriber_id: int, data: SubscriberUpdate, user: TokenUser = Depends(require_manager)):
    try:
        return {"status": "success", "data": SubscriberService().update(subscriber_id, data).to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating subscriber: {str(e)}")


@router.post("/{subscriber_id}/unsubscribe")
async def unsubscribe(subscriber_id: int, data: UnsubscribeRequest, user: TokenUser = Depends(require_manager)):
    try:
        subscriber = SubscriberService().unsubscribe(subscriber_id, data.type)
        return {"status": "success", "data": subscriber.to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error unsubscribing: {str(e)}")


@router.delete("/{subscriber_id}")
async def delete_subscriber(subscriber_id: int, user: TokenUser = Depends(require_manager)):
    try:
        SubscriberService().delete(subscriber_id)
        return {"status": "success"}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting subscriber: {str(e)}")
