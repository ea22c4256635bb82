"""
Customer order endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session
from typing import Optional
import logging

from foodorder.database import get_db
from foodorder.schemas.order import OrderCreate, OrderEnvelope, OrderListResponse
from foodorder.services.order_intake import OrderIntakeService
from foodorder.services.order_query import OrderQueryService, project_order
from foodorder.auth.auth_handler import customer_required
from foodorder.utils.error_handler import InternalError, OrderError
from foodorder.utils.rate_limit import limiter

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/", response_model=OrderEnvelope, status_code=201)
@limiter.limit("10/minute")
async def create_order(
    request: Request,
    order: OrderCreate,
    current_user: dict = Depends(customer_required),
    db: Session = Depends(get_db)
):
    """Place a new order from the customer's cart"""
    try:
        service = OrderIntakeService(db)
        db_order = await service.create_order(
            customer_id=current_user["user_id"],
            restaurant_id=order.restaurant_id,
            cart_items=order.items,
            delivery_address=order.delivery_address,
            special_instructions=order.special_instructions,
            payment_method=order.payment_method,
            delivery_fee_override=order.delivery_fee
        )
        return {"data": project_order(db_order), "message": "Order created successfully"}

    except (HTTPException, OrderError, InternalError):
        raise
    except Exception as e:
        logger.error(f"Failed to create order: {e}")
        raise InternalError("Failed to create order", e)

@router.get("/", response_model=OrderListResponse)
@limiter.limit("30/minute")
async def get_orders(
    request: Request,
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(20, ge=1, le=100, description="Orders per page"),
    status: Optional[str] = Query(None, description="Filter by status"),
    sort_by: str = Query("createdAt", alias="sortBy", description="Field to sort by"),
    sort_order: str = Query("desc", alias="sortOrder", description="asc or desc"),
    current_user: dict = Depends(customer_required),
    db: Session = Depends(get_db)
):
    """Get the customer's orders, newest first by default"""
    try:
        service = OrderQueryService(db)
        orders, pagination = await service.list_orders(
            customer_id=current_user["user_id"],
            status=status,
            sort_by=sort_by,
            sort_order=sort_order,
            page=page,
            limit=limit
        )
        return {"data": [project_order(o) for o in orders], "pagination": pagination}

    except (HTTPException, OrderError, InternalError):
        raise
    except Exception as e:
        logger.error(f"Failed to get orders: {e}")
        raise InternalError("Failed to retrieve orders", e)

@router.get("/{order_id}", response_model=OrderEnvelope)
@limiter.limit("30/minute")
async def get_order(
    request: Request,
    order_id: str,
    current_user: dict = Depends(customer_required),
    db: Session = Depends(get_db)
):
    """Get one of the customer's orders by ID"""
    try:
        service = OrderQueryService(db)
        db_order = await service.get_order(current_user["user_id"], order_id)
        return {"data": project_order(db_order)}

    except (HTTPException, OrderError, InternalError):
        raise
    except Exception as e:
        logger.error(f"Failed to get order {order_id}: {e}")
        raise InternalError("Failed to retrieve order", e)

@router.put("/{order_id}/cancel", response_model=OrderEnvelope)
@limiter.limit("10/minute")
async def cancel_order(
    request: Request,
    order_id: str,
    current_user: dict = Depends(customer_required),
    db: Session = Depends(get_db)
):
    """Cancel one of the customer's orders while it is still in progress"""
    try:
        service = OrderQueryService(db)
        db_order = await service.cancel_order(current_user["user_id"], order_id)
        return {"data": project_order(db_order), "message": "Order cancelled successfully"}

    except (HTTPException, OrderError, InternalError):
        raise
    except Exception as e:
        logger.error(f"Failed to cancel order {order_id}: {e}")
        raise InternalError("Failed to cancel order", e)
