# Filename: rutz/routes/recommendations.py
# Preference capture and product recommendations for the visitor session.

from fastapi import APIRouter, Depends, HTTPException

from rutz import schemas
from rutz.dependencies import get_session_id, get_storage
from rutz.storage import IStorage
from rutz.utils import logger

router = APIRouter(prefix="/api")


@router.post("/recommendations", response_model=schemas.RecommendationResults)
def generate_recommendations(
    preferences: schemas.PreferencesRequest,
    storage: IStorage = Depends(get_storage),
    session_id: str = Depends(get_session_id),
):
    try:
        results = storage.generate_recommendations(session_id, preferences)
    except Exception as e:
        logger.error(f"Failed to generate recommendations for {session_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate recommendations")
    logger.info(f"Recommendations for {session_id}: {len(results.recommended_products)} products")
    return results


@router.get("/recommendations", response_model=schemas.RecommendationResults)
def get_recommendations(storage: IStorage = Depends(get_storage), session_id: str = Depends(get_session_id)):
    try:
        results = storage.get_recommendations(session_id)
    except Exception as e:
        logger.error(f"Failed to fetch recommendations for {session_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch recommendations")
    if results is None:
        raise HTTPException(status_code=404, detail="No recommendations found")
    return results


@router.get("/user-preferences", response_model=schemas.UserPreferences)
def get_preferences(storage: IStorage = Depends(get_storage), session_id: str = Depends(get_session_id)):
    try:
        preferences = storage.get_user_preferences(session_id)
    except Exception as e:
        logger.error(f"Failed to fetch preferences for {session_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch preferences")
    if preferences is None:
        raise HTTPException(status_code=404, detail="No preferences found")
    return preferences
