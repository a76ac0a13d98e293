# Filename: rutz/routes/journey.py
# Journey stages, XP and stage advancement.

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from rutz import schemas
from rutz.dependencies import get_storage
from rutz.storage import IStorage
from rutz.utils import logger

router = APIRouter(prefix="/api")


def _require_user(storage: IStorage, user_id: str) -> None:
    if storage.get_user(user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")


@router.get("/journey-stages", response_model=List[schemas.JourneyStage])
def list_stages(storage: IStorage = Depends(get_storage)):
    try:
        return storage.get_journey_stages()
    except Exception as e:
        logger.error(f"Failed to fetch journey stages: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch journey stages")


@router.get("/users/{user_id}/journey", response_model=schemas.UserJourneyProgress)
def user_journey(user_id: str, storage: IStorage = Depends(get_storage)):
    try:
        _require_user(storage, user_id)
        progress = storage.get_user_journey_progress(user_id)
        if progress is None:
            # first visit starts the user on the first stage
            progress = storage.update_user_level(user_id, 0)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch journey for {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch journey progress")
    if progress is None:
        raise HTTPException(status_code=404, detail="Journey progress not found")
    return progress


@router.get("/users/{user_id}/journey/can-advance", response_model=schemas.StageProgression)
def can_advance(user_id: str, storage: IStorage = Depends(get_storage)):
    try:
        _require_user(storage, user_id)
        return storage.can_advance_journey_stage(user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to check stage progression for {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to check stage progression")


@router.post("/users/{user_id}/journey/advance", response_model=schemas.UserJourneyProgress)
def advance(user_id: str, storage: IStorage = Depends(get_storage)):
    try:
        _require_user(storage, user_id)
        progress = storage.advance_journey_stage(user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to advance journey for {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to advance journey stage")
    if progress is None:
        raise HTTPException(status_code=400, detail="Requirements for the next stage are not met")
    return progress


@router.post("/users/{user_id}/journey/xp", response_model=schemas.UserJourneyProgress)
def grant_xp(user_id: str, data: schemas.XpGrant, storage: IStorage = Depends(get_storage)):
    try:
        _require_user(storage, user_id)
        progress = storage.update_user_level(user_id, data.xp, data.progress_to_next)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to grant XP to {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update user level")
    if progress is None:
        raise HTTPException(status_code=404, detail="Journey progress not found")
    return progress
