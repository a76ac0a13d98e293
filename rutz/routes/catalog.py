# Filename: rutz/routes/catalog.py
# Product catalog, supply chain and impact metrics.

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from rutz import schemas
from rutz.dependencies import get_storage
from rutz.storage import IStorage
from rutz.utils import logger

router = APIRouter(prefix="/api")


# -------------------- Products -------------------- #
@router.get("/products", response_model=List[schemas.Product])
def list_products(
    category: Optional[str] = None,
    sector: Optional[str] = None,
    plant_material: Optional[str] = Query(None, alias="plantMaterial"),
    product_type: Optional[str] = Query(None, alias="productType"),
    storage: IStorage = Depends(get_storage),
):
    filters = schemas.ProductFilters(
        category=category, sector=sector, plant_material=plant_material, product_type=product_type,
    )
    try:
        return storage.get_products(filters)
    except Exception as e:
        logger.error(f"Failed to fetch products: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch products")


@router.post("/products", response_model=schemas.Product, status_code=201)
def create_product(data: schemas.ProductCreate, storage: IStorage = Depends(get_storage)):
    try:
        product = storage.create_product(data)
    except Exception as e:
        logger.error(f"Failed to create product: {e}")
        raise HTTPException(status_code=500, detail="Failed to create product")
    logger.info(f"Product created: {product.id}")
    return product


@router.get("/products/filters", response_model=schemas.ProductFilterOptions)
def product_filters(storage: IStorage = Depends(get_storage)):
    try:
        return storage.get_product_filters()
    except Exception as e:
        logger.error(f"Failed to fetch product filters: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch product filters")


@router.get("/products/by-plant/{plant_material}", response_model=schemas.PlantProductGroup)
def products_by_plant(plant_material: str, storage: IStorage = Depends(get_storage)):
    try:
        group = storage.get_products_by_plant(plant_material)
    except Exception as e:
        logger.error(f"Failed to fetch products for plant {plant_material}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch products by plant")
    if group is None:
        raise HTTPException(status_code=404, detail="No products found for this plant material")
    return group


@router.get("/products/{product_id}", response_model=schemas.Product)
def get_product(product_id: str, storage: IStorage = Depends(get_storage)):
    try:
        product = storage.get_product(product_id)
    except Exception as e:
        logger.error(f"Failed to fetch product {product_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch product")
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


# -------------------- Supply chain & impact -------------------- #
@router.get("/supply-chain", response_model=List[schemas.SupplyChainStep])
def supply_chain(storage: IStorage = Depends(get_storage)):
    try:
        return storage.get_supply_chain_steps()
    except Exception as e:
        logger.error(f"Failed to fetch supply chain: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch supply chain")


@router.get("/supply-chain/{step_id}", response_model=schemas.SupplyChainStep)
def supply_chain_step(step_id: str, storage: IStorage = Depends(get_storage)):
    try:
        step = storage.get_supply_chain_step(step_id)
    except Exception as e:
        logger.error(f"Failed to fetch supply chain step {step_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch supply chain step")
    if step is None:
        raise HTTPException(status_code=404, detail="Supply chain step not found")
    return step


@router.get("/impact", response_model=schemas.ImpactMetrics)
def impact_metrics(storage: IStorage = Depends(get_storage)):
    try:
        metrics = storage.get_impact_metrics()
    except Exception as e:
        logger.error(f"Failed to fetch impact metrics: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch impact metrics")
    if metrics is None:
        raise HTTPException(status_code=404, detail="Impact metrics not found")
    return metrics
