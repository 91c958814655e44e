# textile_orders/api/routers/orders.py
from fastapi import APIRouter, Depends, HTTPException

from textile_orders.api.dependencies import get_order_service
from textile_orders.domain.schemas import OrderOut
from textile_orders.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, svc: OrderService = Depends(get_order_service)):
    """
    Submitted sales order with its items and payments.
    """
    try:
        return svc.get_order(order_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
