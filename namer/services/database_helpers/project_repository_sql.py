# /namer/services/database_helpers/project_repository_sql.py

from typing import List, Dict, Optional

from sqlalchemy.orm import Session

from namer.db.models.project_models import Project


class ProjectRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def add_project(self, record: Dict) -> Project:
        new_project = Project(**record)
        self.db.add(new_project)
        self.db.commit()
        self.db.refresh(new_project)
        return new_project

    def get_project(self, project_id: str) -> Optional[Project]:
        return self.db.query(Project).filter(Project.id == project_id).first()

    def get_projects_by_user(self, user_id: Optional[str]) -> List[Project]:
        return (
            self.db.query(Project)
            .filter(Project.user_id == user_id)
            .order_by(Project.created_at.desc())
            .all()
        )
