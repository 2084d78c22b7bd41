# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import get_order_service
from storefront.domain.schemas import Order
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=List[Order])
def list_orders(orders: OrderService = Depends(get_order_service)):
    return orders.list_orders()


@router.get("/last", response_model=Order)
def get_last_order(orders: OrderService = Depends(get_order_service)):
    order = orders.get_last_order()
    if order is None:
        raise HTTPException(status_code=404, detail="No orders yet")
    return order


@router.get("/{order_id}", response_model=Order)
def get_order(order_id: str, orders: OrderService = Depends(get_order_service)):
    """
    Pobiera szczegoly zamowienia.
    """
    order = orders.get_order(order_id)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return order
