# Filename: rutz/routes/users.py
# User accounts, badges and impact actions.

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from rutz import schemas
from rutz.dependencies import get_storage
from rutz.storage import IStorage
from rutz.utils import logger

router = APIRouter(prefix="/api")


def _require_user(storage: IStorage, user_id: str) -> schemas.User:
    user = storage.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


# -------------------- Users -------------------- #
@router.post("/users", response_model=schemas.User, status_code=201)
def create_user(data: schemas.UserCreate, storage: IStorage = Depends(get_storage)):
    try:
        if storage.get_user_by_email(data.email) is not None:
            raise HTTPException(status_code=400, detail="Email already registered")
        user = storage.create_user(data)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create user: {e}")
        raise HTTPException(status_code=500, detail="Failed to create user")
    logger.info(f"User created: {user.id}")
    return user


@router.get("/users/{user_id}", response_model=schemas.UserWithProgress)
def get_user(user_id: str, storage: IStorage = Depends(get_storage)):
    try:
        user = storage.get_user_with_progress(user_id)
    except Exception as e:
        logger.error(f"Failed to fetch user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch user")
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.put("/users/{user_id}", response_model=schemas.User)
def update_user(user_id: str, updates: schemas.UserUpdate, storage: IStorage = Depends(get_storage)):
    try:
        if updates.email is not None:
            owner = storage.get_user_by_email(updates.email)
            if owner is not None and owner.id != user_id:
                raise HTTPException(status_code=400, detail="Email already registered")
        user = storage.update_user(user_id, updates)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update user")
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


# -------------------- Badges -------------------- #
@router.get("/badges", response_model=List[schemas.Badge])
def list_badges(storage: IStorage = Depends(get_storage)):
    try:
        return storage.get_badges()
    except Exception as e:
        logger.error(f"Failed to fetch badges: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch badges")


@router.get("/users/{user_id}/badges", response_model=List[schemas.UserBadgeWithBadge])
def user_badges(user_id: str, storage: IStorage = Depends(get_storage)):
    try:
        _require_user(storage, user_id)
        return storage.get_user_badges(user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch badges for {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch user badges")


@router.get("/users/{user_id}/badges/eligible", response_model=List[schemas.Badge])
def eligible_badges(user_id: str, storage: IStorage = Depends(get_storage)):
    try:
        _require_user(storage, user_id)
        return storage.check_badge_eligibility(user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to check badge eligibility for {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to check badge eligibility")


@router.post("/users/{user_id}/badges/{badge_id}", response_model=schemas.UserBadge, status_code=201)
def award_badge(user_id: str, badge_id: str, storage: IStorage = Depends(get_storage)):
    try:
        _require_user(storage, user_id)
        if badge_id not in {b.id for b in storage.get_badges()}:
            raise HTTPException(status_code=404, detail="Badge not found")
        if badge_id not in {b.id for b in storage.check_badge_eligibility(user_id)}:
            raise HTTPException(status_code=400, detail="Badge already earned")
        awarded = storage.award_badge(user_id, badge_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to award badge {badge_id} to {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to award badge")
    logger.info(f"Badge {badge_id} awarded to {user_id}")
    return awarded


# -------------------- Impact actions -------------------- #
@router.get("/users/{user_id}/impact-actions", response_model=List[schemas.ImpactAction])
def impact_actions(user_id: str, storage: IStorage = Depends(get_storage)):
    try:
        _require_user(storage, user_id)
        return storage.get_user_impact_actions(user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch impact actions for {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch impact actions")


@router.post("/users/{user_id}/impact-actions", response_model=schemas.ImpactAction, status_code=201)
def record_impact_action(user_id: str, data: schemas.ImpactActionRequest,
                         storage: IStorage = Depends(get_storage)):
    try:
        _require_user(storage, user_id)
        action = storage.record_impact_action(schemas.ImpactActionCreate(user_id=user_id, **data.model_dump()))
        if action.xp_earned:
            storage.update_user_level(user_id, action.xp_earned)
        if action.loyalty_points_earned:
            storage.add_loyalty_points(user_id, action.loyalty_points_earned)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to record impact action for {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to record impact action")
    return action


@router.get("/users/{user_id}/impact", response_model=schemas.UserImpactSummary)
def user_impact(user_id: str, storage: IStorage = Depends(get_storage)):
    try:
        _require_user(storage, user_id)
        return storage.calculate_user_impact(user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to calculate impact for {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to calculate user impact")
