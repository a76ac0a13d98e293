# Filename: rutz/routes/plants.py
# Global indigenous plant catalog.

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from rutz import schemas
from rutz.dependencies import get_storage
from rutz.storage import IStorage
from rutz.utils import logger

router = APIRouter(prefix="/api/global-indigenous-plants")


@router.get("", response_model=List[schemas.GlobalIndigenousPlant])
def list_plants(storage: IStorage = Depends(get_storage)):
    try:
        return storage.get_global_indigenous_plants()
    except Exception as e:
        logger.error(f"Failed to fetch plants: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch global indigenous plants")


@router.get("/region/{region}", response_model=List[schemas.GlobalIndigenousPlant])
def plants_by_region(region: str, storage: IStorage = Depends(get_storage)):
    try:
        return storage.get_plants_by_region(region)
    except Exception as e:
        logger.error(f"Failed to fetch plants for region {region}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch plants by region")


@router.get("/tribe/{tribe}", response_model=List[schemas.GlobalIndigenousPlant])
def plants_by_tribe(tribe: str, storage: IStorage = Depends(get_storage)):
    try:
        return storage.get_plants_by_tribe(tribe)
    except Exception as e:
        logger.error(f"Failed to fetch plants for tribe {tribe}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch plants by tribe")


@router.post("/search", response_model=List[schemas.GlobalIndigenousPlant])
def search_plants(search: schemas.PlantSearch, storage: IStorage = Depends(get_storage)):
    try:
        return storage.search_plants(search)
    except Exception as e:
        logger.error(f"Plant search failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to search plants")


@router.get("/{plant_id}", response_model=schemas.GlobalIndigenousPlant)
def get_plant(plant_id: str, storage: IStorage = Depends(get_storage)):
    try:
        plant = storage.get_global_indigenous_plant(plant_id)
    except Exception as e:
        logger.error(f"Failed to fetch plant {plant_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch plant")
    if plant is None:
        raise HTTPException(status_code=404, detail="Plant not found")
    return plant
