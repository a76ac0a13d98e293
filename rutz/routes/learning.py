# Filename: rutz/routes/learning.py
# Learning modules and per-user progress. Finishing a module pays its XP once.

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from rutz import schemas
from rutz.dependencies import get_storage
from rutz.storage import IStorage
from rutz.utils import logger

router = APIRouter(prefix="/api")


@router.get("/learning-modules", response_model=List[schemas.LearningModule])
def list_modules(storage: IStorage = Depends(get_storage)):
    try:
        return storage.get_learning_modules()
    except Exception as e:
        logger.error(f"Failed to fetch learning modules: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch learning modules")


@router.get("/learning-modules/{module_id}", response_model=schemas.LearningModule)
def get_module(module_id: str, storage: IStorage = Depends(get_storage)):
    try:
        module = storage.get_learning_module(module_id)
    except Exception as e:
        logger.error(f"Failed to fetch learning module {module_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch learning module")
    if module is None:
        raise HTTPException(status_code=404, detail="Learning module not found")
    return module


@router.get("/users/{user_id}/learning", response_model=List[schemas.UserLearningProgress])
def user_learning(user_id: str, storage: IStorage = Depends(get_storage)):
    try:
        if storage.get_user(user_id) is None:
            raise HTTPException(status_code=404, detail="User not found")
        return storage.get_user_learning_progress(user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch learning progress for {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch learning progress")


@router.put("/users/{user_id}/learning/{module_id}", response_model=schemas.UserLearningProgress)
def update_learning(user_id: str, module_id: str, data: schemas.LearningProgressUpdate,
                    storage: IStorage = Depends(get_storage)):
    try:
        module = storage.get_learning_module(module_id)
        if module is None:
            raise HTTPException(status_code=404, detail="Learning module not found")
        if storage.get_user(user_id) is None:
            raise HTTPException(status_code=404, detail="User not found")

        row = storage.update_learning_progress(user_id, module_id, data.progress)
        claimed = None
        if row.status == "completed":
            claimed = storage.claim_module_xp(user_id, module_id, module.xp_reward)
        if claimed is not None:
            row = claimed
            storage.update_user_level(user_id, module.xp_reward)
            logger.info(f"User {user_id} completed module {module_id} (+{module.xp_reward} XP)")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update learning progress for {user_id}/{module_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update learning progress")
    return row
