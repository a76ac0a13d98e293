# Filename: rutz/routes/impact.py
# Community projects, live impact feed and milestones.

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from rutz import schemas
from rutz.dependencies import get_storage
from rutz.errors import InvariantViolation
from rutz.storage import IStorage
from rutz.utils import logger

router = APIRouter(prefix="/api")


# -------------------- Community projects -------------------- #
@router.get("/community-projects", response_model=List[schemas.CommunityProject])
def list_projects(storage: IStorage = Depends(get_storage)):
    try:
        return storage.get_community_projects()
    except Exception as e:
        logger.error(f"Failed to fetch community projects: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch community projects")


@router.post("/community-projects", response_model=schemas.CommunityProject, status_code=201)
def create_project(data: schemas.CommunityProjectCreate, storage: IStorage = Depends(get_storage)):
    try:
        project = storage.create_community_project(data)
    except InvariantViolation as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to create community project: {e}")
        raise HTTPException(status_code=500, detail="Failed to create community project")
    logger.info(f"Community project created: {project.id}")
    return project


@router.get("/community-projects/{project_id}", response_model=schemas.CommunityProject)
def get_project(project_id: str, storage: IStorage = Depends(get_storage)):
    try:
        project = storage.get_community_project(project_id)
    except Exception as e:
        logger.error(f"Failed to fetch community project {project_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch community project")
    if project is None:
        raise HTTPException(status_code=404, detail="Community project not found")
    return project


@router.patch("/community-projects/{project_id}", response_model=schemas.CommunityProject)
def update_project(project_id: str, updates: schemas.CommunityProjectUpdate,
                   storage: IStorage = Depends(get_storage)):
    try:
        project = storage.update_community_project(project_id, updates)
    except InvariantViolation as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to update community project {project_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update community project")
    if project is None:
        raise HTTPException(status_code=404, detail="Community project not found")
    return project


@router.get("/community-projects/{project_id}/milestones", response_model=List[schemas.ImpactMilestone])
def project_milestones(project_id: str, storage: IStorage = Depends(get_storage)):
    try:
        if storage.get_community_project(project_id) is None:
            raise HTTPException(status_code=404, detail="Community project not found")
        return storage.get_impact_milestones(project_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch milestones for {project_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch milestones")


# -------------------- Live updates -------------------- #
@router.get("/live-updates", response_model=List[schemas.LiveImpactUpdate])
def live_updates(limit: int = Query(20, ge=1, le=100), storage: IStorage = Depends(get_storage)):
    try:
        return storage.get_live_impact_updates(limit)
    except Exception as e:
        logger.error(f"Failed to fetch live updates: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch live updates")


@router.post("/live-updates", response_model=schemas.LiveImpactUpdate, status_code=201)
def create_live_update(data: schemas.LiveImpactUpdateCreate, storage: IStorage = Depends(get_storage)):
    try:
        return storage.create_live_impact_update(data)
    except Exception as e:
        logger.error(f"Failed to create live update: {e}")
        raise HTTPException(status_code=500, detail="Failed to create live update")


# -------------------- Milestones -------------------- #
@router.get("/impact-milestones", response_model=List[schemas.ImpactMilestone])
def list_milestones(project_id: Optional[str] = Query(None, alias="projectId"),
                    storage: IStorage = Depends(get_storage)):
    try:
        return storage.get_impact_milestones(project_id)
    except Exception as e:
        logger.error(f"Failed to fetch milestones: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch milestones")


@router.post("/impact-milestones", response_model=schemas.ImpactMilestone, status_code=201)
def create_milestone(data: schemas.ImpactMilestoneCreate, storage: IStorage = Depends(get_storage)):
    try:
        return storage.create_impact_milestone(data)
    except Exception as e:
        logger.error(f"Failed to create milestone: {e}")
        raise HTTPException(status_code=500, detail="Failed to create milestone")


@router.patch("/impact-milestones/{milestone_id}", response_model=schemas.ImpactMilestone)
def update_milestone(milestone_id: str, updates: schemas.ImpactMilestoneUpdate,
                     storage: IStorage = Depends(get_storage)):
    try:
        milestone = storage.update_impact_milestone(milestone_id, updates)
    except Exception as e:
        logger.error(f"Failed to update milestone {milestone_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update milestone")
    if milestone is None:
        raise HTTPException(status_code=404, detail="Milestone not found")
    return milestone
