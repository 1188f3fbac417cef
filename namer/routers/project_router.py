# /namer/routers/project_router.py

from typing import Optional

from fastapi import APIRouter, Depends, status

from ..core.security import get_current_user_id
from ..models import project_model
from ..services import project_service
from ..services.database_service import DatabaseService, get_db_service
from .error_translation import to_http_exception

router = APIRouter()


@router.post("", response_model=project_model.ProjectRecord, status_code=status.HTTP_201_CREATED, summary="Create a Project")
def create_project(
    request: project_model.ProjectCreate,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    return project_service.create_project(db, request, user_id)


@router.get("", response_model=project_model.ProjectListResponse, summary="List My Projects")
def list_projects(db: DatabaseService = Depends(get_db_service), user_id: Optional[str] = Depends(get_current_user_id)):
    projects = project_service.list_projects(db, user_id)
    return {"results": projects, "total": len(projects)}


@router.get("/{project_id}", response_model=project_model.ProjectRecord, summary="Get a Project")
def get_project(
    project_id: str,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        return project_service.get_project(db, project_id, user_id)
    except Exception as e:
        raise to_http_exception(e)
