# Filename: rutz/routes/cart.py
# Session cart. The session id comes from the visitor cookie.

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from rutz import schemas
from rutz.dependencies import get_session_id, get_storage
from rutz.storage import IStorage
from rutz.utils import logger

router = APIRouter(prefix="/api/cart")


@router.get("", response_model=List[schemas.CartItemWithProduct])
def get_cart(storage: IStorage = Depends(get_storage), session_id: str = Depends(get_session_id)):
    try:
        return storage.get_cart_items(session_id)
    except Exception as e:
        logger.error(f"Failed to fetch cart for {session_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch cart")


@router.post("", response_model=schemas.CartItem)
def add_to_cart(
    data: schemas.CartItemRequest,
    storage: IStorage = Depends(get_storage),
    session_id: str = Depends(get_session_id),
):
    try:
        product = storage.get_product(data.product_id)
        if product is None:
            raise HTTPException(status_code=404, detail="Product not found")
        return storage.add_to_cart(schemas.CartItemCreate(session_id=session_id, **data.model_dump()))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to add {data.product_id} to cart: {e}")
        raise HTTPException(status_code=500, detail="Failed to add item to cart")


@router.patch("/{item_id}", response_model=schemas.CartItem)
def update_cart_item(item_id: str, data: schemas.CartItemUpdate, storage: IStorage = Depends(get_storage)):
    try:
        item = storage.update_cart_item(item_id, data.quantity)
    except Exception as e:
        logger.error(f"Failed to update cart item {item_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update cart item")
    if item is None:
        raise HTTPException(status_code=404, detail="Cart item not found")
    return item


@router.delete("/{item_id}", response_model=schemas.Message)
def remove_cart_item(item_id: str, storage: IStorage = Depends(get_storage)):
    try:
        removed = storage.remove_from_cart(item_id)
    except Exception as e:
        logger.error(f"Failed to remove cart item {item_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to remove cart item")
    if not removed:
        raise HTTPException(status_code=404, detail="Cart item not found")
    return schemas.Message(message="Item removed from cart")


@router.delete("", response_model=schemas.Message)
def clear_cart(storage: IStorage = Depends(get_storage), session_id: str = Depends(get_session_id)):
    try:
        storage.clear_cart(session_id)
    except Exception as e:
        logger.error(f"Failed to clear cart for {session_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to clear cart")
    return schemas.Message(message="Cart cleared")
