# Filename: rutz/routes/inventory.py
# Stock levels, reservations and the movement ledger.

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from rutz import schemas
from rutz.dependencies import get_storage
from rutz.errors import InvariantViolation
from rutz.storage import IStorage
from rutz.utils import logger

router = APIRouter(prefix="/api/inventory")


@router.get("", response_model=List[schemas.InventoryWithProduct])
def list_inventory(storage: IStorage = Depends(get_storage)):
    try:
        return storage.get_all_inventory()
    except Exception as e:
        logger.error(f"Failed to fetch inventory: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch inventory")


@router.get("/low-stock", response_model=List[schemas.InventoryWithProduct])
def low_stock(storage: IStorage = Depends(get_storage)):
    try:
        return storage.get_low_stock_products()
    except Exception as e:
        logger.error(f"Failed to fetch low stock products: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch low stock products")


@router.get("/movements", response_model=List[schemas.InventoryMovement])
def movements(
    product_id: Optional[str] = Query(None, alias="productId"),
    limit: int = Query(100, ge=1, le=1000),
    storage: IStorage = Depends(get_storage),
):
    try:
        return storage.get_inventory_movements(product_id, limit)
    except Exception as e:
        logger.error(f"Failed to fetch inventory movements: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch inventory movements")


@router.get("/{product_id}", response_model=schemas.Inventory)
def get_inventory(product_id: str, storage: IStorage = Depends(get_storage)):
    try:
        inventory = storage.get_inventory(product_id)
    except Exception as e:
        logger.error(f"Failed to fetch inventory for {product_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch inventory")
    if inventory is None:
        raise HTTPException(status_code=404, detail="Inventory not found")
    return inventory


@router.put("/{product_id}", response_model=schemas.Inventory)
def update_inventory(product_id: str, updates: schemas.InventoryUpdate,
                     storage: IStorage = Depends(get_storage)):
    try:
        inventory = storage.update_inventory(product_id, updates)
    except InvariantViolation as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to update inventory for {product_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update inventory")
    if inventory is None:
        raise HTTPException(status_code=404, detail="Inventory not found")
    return inventory


@router.get("/{product_id}/availability", response_model=schemas.Availability)
def availability(product_id: str, quantity: int = Query(1, ge=1), storage: IStorage = Depends(get_storage)):
    try:
        available = storage.check_availability(product_id, quantity)
    except Exception as e:
        logger.error(f"Failed to check availability for {product_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to check availability")
    return schemas.Availability(product_id=product_id, quantity=quantity, available=available)


@router.post("/{product_id}/reserve", response_model=schemas.Inventory)
def reserve(product_id: str, data: schemas.StockRequest, storage: IStorage = Depends(get_storage)):
    try:
        if storage.get_inventory(product_id) is None:
            raise HTTPException(status_code=404, detail="Inventory not found")
        if not storage.reserve_stock(product_id, data.quantity, data.order_id):
            raise HTTPException(status_code=400, detail="Insufficient stock")
        return storage.get_inventory(product_id)
    except HTTPException:
        raise
    except InvariantViolation as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to reserve stock for {product_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to reserve stock")


@router.post("/{product_id}/release", response_model=schemas.Inventory)
def release(product_id: str, data: schemas.StockRequest, storage: IStorage = Depends(get_storage)):
    try:
        if not storage.release_stock(product_id, data.quantity, data.order_id):
            raise HTTPException(status_code=404, detail="Inventory not found")
        return storage.get_inventory(product_id)
    except HTTPException:
        raise
    except InvariantViolation as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to release stock for {product_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to release stock")
