# /namer/services/project_service.py

import logging
import uuid
from typing import List, Optional

from ..core.exceptions import NotFoundError, ForbiddenError
from ..models.project_model import ProjectCreate
from .database_service import DatabaseService

logger = logging.getLogger(__name__)


def create_project(db: DatabaseService, request: ProjectCreate, user_id: Optional[str]):
    project = db.add_project({
        "id": f"proj_{uuid.uuid4().hex[:16]}",
        "user_id": user_id,
        "name": request.name.strip(),
        "description": request.description,
        "selected_name": request.selected_name,
    })
    logger.info("Created project %s for user %s.", project.id, user_id)
    return project


def list_projects(db: DatabaseService, user_id: Optional[str]) -> List:
    return db.get_projects_by_user(user_id)


def get_project(db: DatabaseService, project_id: str, user_id: Optional[str]):
    project = db.get_project(project_id)
    if project is None:
        raise NotFoundError(f"Project {project_id} not found.")
    if project.user_id != user_id:
        raise ForbiddenError("You do not have access to this project.")
    return project
