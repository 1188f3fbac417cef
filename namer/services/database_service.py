# /namer/services/database_service.py

from contextlib import contextmanager
from typing import List, Dict, Optional, Iterator

from sqlalchemy.orm import Session
from fastapi import Depends

# --- Core Database Setup ---
from namer.db.database import get_db, SessionLocal

# --- Repository Imports ---
from .database_helpers.generation_repository_sql import GenerationRepositorySQL
from .database_helpers.cache_repository_sql import CacheRepositorySQL
from .database_helpers.project_repository_sql import ProjectRepositorySQL
from .database_helpers.logo_repository_sql import LogoRepositorySQL
from .database_helpers.share_repository_sql import ShareRepositorySQL
from .database_helpers.mood_board_repository_sql import MoodBoardRepositorySQL


class DatabaseService:
    def __init__(self, db_session: Session):
        """
        Single entry point to the data layer. Services only ever talk to this
        facade, which delegates to one SQL repository per aggregate.
        """
        if db_session is None:
            raise ValueError("A database session is required.")
        self.session = db_session
        self.generation_repo = GenerationRepositorySQL(db_session)
        self.cache_repo = CacheRepositorySQL(db_session)
        self.project_repo = ProjectRepositorySQL(db_session)
        self.logo_repo = LogoRepositorySQL(db_session)
        self.share_repo = ShareRepositorySQL(db_session)
        self.mood_board_repo = MoodBoardRepositorySQL(db_session)

    # --- GENERATION SESSION METHODS (DELEGATED) ---
    def add_generation_session(self, record: Dict): return self.generation_repo.add_session(record)
    def get_generation_session(self, session_id: str): return self.generation_repo.get_session(session_id)
    def save_generation_session(self, session): return self.generation_repo.save_session(session)
    def refresh_generation_session(self, session): return self.generation_repo.refresh_session(session)
    def finish_generation_session_if_running(self, session) -> bool: return self.generation_repo.finish_session_if_running(session)
    def get_generation_sessions_by_user(self, user_id: Optional[str], scope: str = "all") -> List: return self.generation_repo.get_sessions_by_user(user_id, scope)
    def delete_generation_session(self, session_id: str) -> bool: return self.generation_repo.delete_session(session_id)

    # --- CACHE METHODS (DELEGATED) ---
    def get_fresh_generation_cache(self, input_hash: str): return self.cache_repo.get_fresh_generation_cache(input_hash)
    def store_generation_cache(self, record: Dict): return self.cache_repo.store_generation_cache(record)
    def delete_generation_cache(self, input_hash: str) -> bool: return self.cache_repo.delete_generation_cache(input_hash)
    def clear_expired_generation_cache(self) -> int: return self.cache_repo.clear_expired_generation_cache()
    def get_fresh_domain_cache(self, domain: str): return self.cache_repo.get_fresh_domain_cache(domain)
    def store_domain_cache(self, domain: str, available: bool): return self.cache_repo.store_domain_cache(domain, available)
    def clear_expired_domain_cache(self) -> int: return self.cache_repo.clear_expired_domain_cache()

    # --- PROJECT METHODS (DELEGATED) ---
    def add_project(self, record: Dict): return self.project_repo.add_project(record)
    def get_project(self, project_id: str): return self.project_repo.get_project(project_id)
    def get_projects_by_user(self, user_id: Optional[str]) -> List: return self.project_repo.get_projects_by_user(user_id)

    # --- LOGO METHODS (DELEGATED) ---
    def add_logo_generation(self, record: Dict): return self.logo_repo.add_logo_generation(record)
    def get_logo_generation(self, generation_id: str): return self.logo_repo.get_logo_generation(generation_id)
    def set_logo_generation_status(self, generation_id: str, status: str, error_message: Optional[str] = None): return self.logo_repo.set_logo_generation_status(generation_id, status, error_message)
    def increment_logos_completed(self, generation_id: str, cost_cents: int = 0): return self.logo_repo.increment_logos_completed(generation_id, cost_cents)
    def complete_logo_generation_if_done(self, generation_id: str) -> bool: return self.logo_repo.complete_if_all_logos_done(generation_id)
    def add_generated_logo(self, record: Dict): return self.logo_repo.add_generated_logo(record)
    def get_logos_for_generation(self, generation_id: str, logo_ids: Optional[List[int]] = None) -> List: return self.logo_repo.get_logos_for_generation(generation_id, logo_ids)
    def get_logo(self, generation_id: str, logo_id: int): return self.logo_repo.get_logo(generation_id, logo_id)
    def get_color_variant(self, logo_id: int, color_scheme: str): return self.logo_repo.get_color_variant(logo_id, color_scheme)
    def add_color_variant(self, record: Dict): return self.logo_repo.add_color_variant(record)

    # --- SHARE METHODS (DELEGATED) ---
    def add_share(self, record: Dict): return self.share_repo.add_share(record)
    def get_share(self, share_id: str): return self.share_repo.get_share(share_id)
    def get_shares_by_user(self, user_id: Optional[str], active_only: bool = False) -> List: return self.share_repo.get_shares_by_user(user_id, active_only)
    def save_share(self, share): return self.share_repo.save_share(share)
    def delete_share(self, share_id: str) -> bool: return self.share_repo.delete_share(share_id)
    def record_share_access(self, share_id: str, ip_address: Optional[str] = None, user_agent: Optional[str] = None, referrer: Optional[str] = None): return self.share_repo.record_share_access(share_id, ip_address, user_agent, referrer)
    def get_share_access_stats(self, share_id: str) -> Dict: return self.share_repo.get_share_access_stats(share_id)
    def deactivate_expired_shares(self) -> int: return self.share_repo.deactivate_expired_shares()

    # --- EXPORT METHODS (DELEGATED) ---
    def add_export(self, record: Dict): return self.share_repo.add_export(record)
    def get_export(self, export_id: str): return self.share_repo.get_export(export_id)
    def get_exports_by_user(self, user_id: Optional[str]) -> List: return self.share_repo.get_exports_by_user(user_id)
    def save_export(self, export): return self.share_repo.save_export(export)
    def increment_export_download_count(self, export_id: str): return self.share_repo.increment_download_count(export_id)
    def delete_export(self, export_id: str) -> bool: return self.share_repo.delete_export(export_id)
    def get_expired_exports(self) -> List: return self.share_repo.get_expired_exports()


    # --- MOOD BOARD METHODS (DELEGATED) ---
    def add_mood_board(self, record: Dict): return self.mood_board_repo.add_mood_board(record)
    def get_mood_board(self, board_id: str): return self.mood_board_repo.get_mood_board(board_id)
    def get_mood_boards_by_user(self, user_id: Optional[str], project_id: Optional[str] = None) -> List: return self.mood_board_repo.get_mood_boards_by_user(user_id, project_id)
    def save_mood_board(self, board): return self.mood_board_repo.save_mood_board(board)
    def delete_mood_board(self, board_id: str) -> bool: return self.mood_board_repo.delete_mood_board(board_id)
    def add_mood_board_items(self, board, records: List[Dict]): return self.mood_board_repo.add_mood_board_items(board, records)
    def remove_mood_board_items(self, board, logo_ids: List[int]): return self.mood_board_repo.remove_mood_board_items(board, logo_ids)
    def get_logos_by_ids(self, logo_ids: List[int]) -> List: return self.mood_board_repo.get_logos_by_ids(logo_ids)

# --- FastAPI Dependency ---
def get_db_service(db: Session = Depends(get_db)) -> DatabaseService:
    return DatabaseService(db_session=db)


@contextmanager
def open_db_service() -> Iterator[DatabaseService]:
    """
    A DatabaseService with its own session, for background tasks that outlive
    the request whose session FastAPI has already closed.
    """
    db = SessionLocal()
    try:
        yield DatabaseService(db_session=db)
    finally:
        db.close()
