# Filename: rutz/routes/orders.py
# Checkout, order lookup/status and PDF receipts.

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from rutz import schemas
from rutz.dependencies import get_session_id, get_storage
from rutz.errors import CheckoutError, InvariantViolation
from rutz.services import checkout
from rutz.services.pdf import generate_receipt_pdf
from rutz.storage import IStorage
from rutz.utils import logger

router = APIRouter(prefix="/api")


@router.post("/orders", response_model=schemas.OrderWithItems, status_code=201)
def place_order(
    data: schemas.CheckoutRequest,
    storage: IStorage = Depends(get_storage),
    session_id: str = Depends(get_session_id),
):
    try:
        if data.user_id and storage.get_user(data.user_id) is None:
            raise HTTPException(status_code=404, detail="User not found")
        return checkout.place_order(storage, session_id, data.user_id)
    except HTTPException:
        raise
    except CheckoutError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Checkout failed for {session_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to place order")


@router.get("/orders/{order_id}", response_model=schemas.OrderWithItems)
def get_order(order_id: str, storage: IStorage = Depends(get_storage)):
    try:
        order = storage.get_order_with_items(order_id)
    except Exception as e:
        logger.error(f"Failed to fetch order {order_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch order")
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.patch("/orders/{order_id}/status", response_model=schemas.Order)
def update_order_status(order_id: str, data: schemas.OrderStatusUpdate,
                        storage: IStorage = Depends(get_storage)):
    try:
        if data.status == "cancelled":
            order = checkout.cancel_order(storage, order_id)
        else:
            order = storage.update_order_status(order_id, data.status)
    except InvariantViolation as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to update status of order {order_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update order status")
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    logger.info(f"Order {order_id} -> {data.status}")
    return order


@router.get("/orders/{order_id}/receipt")
def order_receipt(order_id: str, storage: IStorage = Depends(get_storage)):
    try:
        order = storage.get_order_with_items(order_id)
        if order is None:
            raise HTTPException(status_code=404, detail="Order not found")
        pdf_bytes = generate_receipt_pdf(order)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to render receipt for {order_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate receipt")
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="receipt-{order_id}.pdf"'},
    )


@router.get("/users/{user_id}/orders", response_model=List[schemas.Order])
def user_orders(user_id: str, storage: IStorage = Depends(get_storage)):
    try:
        if storage.get_user(user_id) is None:
            raise HTTPException(status_code=404, detail="User not found")
        return storage.get_user_orders(user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch orders for {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch orders")
