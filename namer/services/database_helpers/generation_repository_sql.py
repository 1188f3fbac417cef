# /namer/services/database_helpers/generation_repository_sql.py

from datetime import timedelta
from typing import List, Dict, Optional

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from namer.db.database import utcnow
from namer.db.models.generation_models import GenerationSession, ACTIVE_STATUSES
from namer.models.generation_model import GenerationStatus


class GenerationRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def add_session(self, record: Dict) -> GenerationSession:
        """Creates a new GenerationSession record from a dictionary."""
        new_session = GenerationSession(**record)
        self.db.add(new_session)
        self.db.commit()
        self.db.refresh(new_session)
        return new_session

    def get_session(self, session_id: str) -> Optional[GenerationSession]:
        return self.db.query(GenerationSession).filter(GenerationSession.id == session_id).first()

    def save_session(self, session: GenerationSession) -> GenerationSession:
        """Persists in-memory changes made through the entity's transition methods."""
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        return session

    def finish_session_if_running(self, session: GenerationSession) -> bool:
        """
        Persists a terminal transition made in memory (completed or failed) only
        while the row is still `running`. If another request cancelled the
        session meanwhile, the pending changes are dropped and the row is reloaded.
        """
        session_id = session.id
        state = inspect(session)
        column_keys = {prop.key for prop in state.mapper.column_attrs}
        changes = {
            attr.key: attr.value
            for attr in state.attrs
            if attr.key in column_keys and attr.history.has_changes()
        }
        self.db.expire(session)
        changes["updated_at"] = utcnow()
        updated = self.db.query(GenerationSession).filter(
            GenerationSession.id == session_id,
            GenerationSession.status == GenerationStatus.RUNNING.value,
        ).update(changes, synchronize_session=False)
        self.db.commit()
        self.db.refresh(session)
        return updated > 0

    def refresh_session(self, session: GenerationSession) -> GenerationSession:
        """Reloads the row so a worker sees changes committed by other requests."""
        self.db.refresh(session)
        return session

    def get_sessions_by_user(self, user_id: Optional[str], scope: str = "all") -> List[GenerationSession]:
        query = self.db.query(GenerationSession).filter(GenerationSession.user_id == user_id)
        if scope == "active":
            query = query.filter(GenerationSession.status.in_(ACTIVE_STATUSES))
        elif scope == "recent":
            query = query.filter(GenerationSession.created_at >= utcnow() - timedelta(hours=24))
        return query.order_by(GenerationSession.created_at.desc()).all()

    def delete_session(self, session_id: str) -> bool:
        record = self.get_session(session_id)
        if record:
            self.db.delete(record)
            self.db.commit()
            return True
        return False
