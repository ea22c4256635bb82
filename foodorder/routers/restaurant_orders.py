"""
Restaurant-side order endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session
import logging

from foodorder.database import get_db
from foodorder.schemas.order import OrderEnvelope, OrderStatusUpdate
from foodorder.services.order_query import project_order
from foodorder.services.order_status import OrderStatusService
from foodorder.auth.auth_handler import restaurant_required
from foodorder.utils.error_handler import InternalError, OrderError
from foodorder.utils.rate_limit import limiter

logger = logging.getLogger(__name__)

router = APIRouter()

@router.put("/{order_id}/status", response_model=OrderEnvelope)
@limiter.limit("20/minute")
async def update_order_status(
    request: Request,
    order_id: str,
    update: OrderStatusUpdate,
    current_user: dict = Depends(restaurant_required),
    db: Session = Depends(get_db)
):
    """Advance or cancel an order on behalf of its restaurant"""
    try:
        role = current_user["role"]
        # Admins may act on any order, restaurants only on their own
        restaurant_id = None if role == "admin" else current_user["user_id"]

        service = OrderStatusService(db)
        db_order = await service.update_status(
            order_id,
            update.status,
            actor=role,
            restaurant_id=restaurant_id
        )
        return {"data": project_order(db_order), "message": "Order status updated successfully"}

    except (HTTPException, OrderError, InternalError):
        raise
    except Exception as e:
        logger.error(f"Failed to update status of order {order_id}: {e}")
        raise InternalError("Failed to update order status", e)
