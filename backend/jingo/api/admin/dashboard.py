"""
Admin Dashboard API Endpoints
"""
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query

from jingo.core.auth import TokenUser, require_staff
from jingo.services.dashboard_service import DashboardService

router = APIRouter()

ChartPeriod = Literal["week", "month", "year"]


@router.get("/stats")
async def get_stats(user: TokenUser = Depends(require_staff)):
    """Headline counts and revenue (PAID orders only)"""
    try:
        return {"status": "success", "data": DashboardService().get_stats()}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching dashboard stats: {str(e)}")


@router.get("/revenue-chart")
async def get_revenue_chart(period: ChartPeriod = Query("month"), user: TokenUser = Depends(require_staff)):
    """
    Revenue buckets for the chart

    week and month group by day, year groups by month.
    """
    try:
        return {"status": "success", "data": DashboardService().get_revenue_chart(period)}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching revenue chart: {str(e)}")


@router.get("/recent-orders")
async def get_recent_orders(limit: int = Query(5, ge=1, le=50), user: TokenUser = Depends(require_staff)):
    try:
        return {"status": "success", "data": DashboardService().get_recent_orders(limit)}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching recent orders: {str(e)}")


@router.get("/top-products")
async def get_top_products(
    limit: int = Query(5, ge=1, le=50),
    period: Literal["week", "month", "year", "all"] = Query("month"),
    user: TokenUser = Depends(require_staff)
):
    try:
        return {"status": "success", "data": DashboardService().get_top_products(limit=limit, period=period)}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching top products: {str(e)}")


@router.get("/low-stock")
async def get_low_stock(limit: int = Query(10, ge=1, le=100), user: TokenUser = Depends(require_staff)):
    try:
        return {"status": "success", "data": DashboardService().get_low_stock_products(limit)}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching low stock products: {str(e)}")


@router.get("/order-status")
async def get_order_status_breakdown(user: TokenUser = Depends(require_staff)):
    try:
        return {"status": "success", "data": DashboardService().get_order_status_breakdown()}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching order status breakdown: {str(e)}")


@router.get("/customer-activity")
async def get_customer_activity(period: ChartPeriod = Query("month"), user: TokenUser = Depends(require_staff)):
    try:
        return {"status": "success", "data": DashboardService().get_customer_activity(period)}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching customer activity: {str(e)}")
