# /namer/db/models/generation_models.py

import logging
from datetime import timedelta
from typing import Dict, List, Optional

from sqlalchemy import Column, String, JSON, DateTime, Integer, Boolean, Text, ForeignKey
from sqlalchemy.orm import relationship

from ..database import Base, utcnow
from ...core.config import CACHE_TTL_HOURS
from ...core.exceptions import InvalidTransitionError, CannotCancelError
from ...models.generation_model import GenerationStatus

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = (GenerationStatus.PENDING.value, GenerationStatus.RUNNING.value)
TERMINAL_STATUSES = (
    GenerationStatus.COMPLETED.value,
    GenerationStatus.FAILED.value,
    GenerationStatus.CANCELLED.value,
)


class GenerationSession(Base):
    """
    One multi-model name-generation request, tracked end to end.

    The row is the state machine: every transition goes through one of the
    `mark_as_*` methods below, which enforce the allowed edges
        pending -> running -> completed | failed
        pending | running -> cancelled
    Callers are responsible for committing the session afterwards.
    """
    __tablename__ = "generation_sessions"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=True)
    project_id = Column(String, ForeignKey("projects.id", ondelete="SET NULL"), index=True, nullable=True)

    status = Column(String, nullable=False, default=GenerationStatus.PENDING.value, index=True)
    business_description = Column(Text, nullable=False)
    generation_mode = Column(String, nullable=False)
    deep_thinking = Column(Boolean, nullable=False, default=False)
    requested_models = Column(JSON, nullable=False, default=list)
    generation_strategy = Column(String, nullable=False, default="parallel")

    progress_percentage = Column(Integer, nullable=False, default=0)
    current_step = Column(String, nullable=True)
    results = Column(JSON, nullable=True)
    execution_metadata = Column(JSON, nullable=True)
    error_message = Column(Text, nullable=True)

    # Aggregate cost/usage; only populated by providers that report them.
    total_names_generated = Column(Integer, nullable=False, default=0)
    total_response_time_ms = Column(Integer, nullable=True)
    total_tokens_used = Column(Integer, nullable=True)
    total_cost_cents = Column(Integer, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    failed_at = Column(DateTime, nullable=True)

    project = relationship("Project", back_populates="generation_sessions")

    # --- State predicates ---
    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def is_completed(self) -> bool:
        return self.status == GenerationStatus.COMPLETED.value

    @property
    def has_failed(self) -> bool:
        return self.status == GenerationStatus.FAILED.value

    @property
    def duration_seconds(self) -> Optional[int]:
        if not self.started_at:
            return None
        end = self.completed_at or self.failed_at or utcnow()
        return int((end - self.started_at).total_seconds())

    # --- Transitions ---
    def mark_as_started(self) -> bool:
        if self.status != GenerationStatus.PENDING.value:
            logger.warning(
                "Ignoring start for generation session %s in status '%s'.", self.id, self.status
            )
            return False
        self.status = GenerationStatus.RUNNING.value
        self.started_at = utcnow()
        self.progress_percentage = 5
        self.current_step = "Initializing..."
        return True

    def update_progress(self, percentage: int, step: Optional[str] = None) -> bool:
        if self.status != GenerationStatus.RUNNING.value:
            return False
        clamped = max(0, min(100, int(percentage)))
        # Progress never moves backwards while the session is live.
        self.progress_percentage = max(self.progress_percentage or 0, clamped)
        if step is not None:
            self.current_step = step
        return True

    def mark_as_completed(self, results: Dict, metadata: Optional[Dict] = None) -> None:
        if self.status != GenerationStatus.RUNNING.value:
            raise InvalidTransitionError(
                f"Cannot complete generation session {self.id} from status '{self.status}'."
            )
        self.status = GenerationStatus.COMPLETED.value
        self.results = results
        self.execution_metadata = metadata or {}
        self.error_message = None
        self.progress_percentage = 100
        self.current_step = "Generation completed successfully"
        self.completed_at = utcnow()
        self.total_names_generated = len(results.get("names", []))

    def mark_as_failed(self, message: str) -> None:
        if self.status != GenerationStatus.RUNNING.value:
            raise InvalidTransitionError(
                f"Cannot fail generation session {self.id} from status '{self.status}'."
            )
        now = utcnow()
        self.status = GenerationStatus.FAILED.value
        self.results = None
        self.error_message = message
        self.current_step = "Generation failed"
        self.completed_at = now
        self.failed_at = now

    def mark_as_cancelled(self) -> None:
        if self.is_terminal:
            raise CannotCancelError("Cannot cancel a completed generation")
        self.status = GenerationStatus.CANCELLED.value
        self.results = None
        self.current_step = "Generation cancelled"
        self.completed_at = utcnow()

    # --- Serialisation ---
    def status_snapshot(self) -> Dict:
        return {
            "session_id": self.id,
            "status": self.status,
            "progress_percentage": self.progress_percentage,
            "current_step": self.current_step,
            "results": self.results,
            "error_message": self.error_message,
            "duration_seconds": self.duration_seconds,
            "is_completed": self.is_completed,
            "has_failed": self.has_failed,
            "updated_at": self.updated_at,
        }

    def full_details(self) -> Dict:
        details = self.status_snapshot()
        details.update({
            "user_id": self.user_id,
            "project_id": self.project_id,
            "business_description": self.business_description,
            "generation_mode": self.generation_mode,
            "deep_thinking": self.deep_thinking,
            "requested_models": list(self.requested_models or []),
            "generation_strategy": self.generation_strategy,
            "execution_metadata": self.execution_metadata,
            "total_names_generated": self.total_names_generated,
            "total_response_time_ms": self.total_response_time_ms,
            "total_tokens_used": self.total_tokens_used,
            "total_cost_cents": self.total_cost_cents,
            "created_at": self.created_at,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
            "failed_at": self.failed_at,
        })
        return details


class GenerationCache(Base):
    """Generated names keyed by the hash of (description, mode, deep_thinking)."""
    __tablename__ = "generation_caches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    input_hash = Column(String(64), unique=True, index=True, nullable=False)
    business_description = Column(Text, nullable=False)
    generation_mode = Column(String, nullable=False)
    deep_thinking = Column(Boolean, nullable=False, default=False)
    generated_names = Column(JSON, nullable=False)
    cached_at = Column(DateTime, nullable=False, default=utcnow, index=True)

    @staticmethod
    def freshness_cutoff():
        return utcnow() - timedelta(hours=CACHE_TTL_HOURS)

    @property
    def age_in_hours(self) -> int:
        return int((utcnow() - self.cached_at).total_seconds() // 3600)

    @property
    def names(self) -> List[str]:
        return list(self.generated_names or [])


class DomainCache(Base):
    __tablename__ = "domain_caches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    domain = Column(String, unique=True, index=True, nullable=False)
    available = Column(Boolean, nullable=False)
    checked_at = Column(DateTime, nullable=False, default=utcnow, index=True)

    @staticmethod
    def freshness_cutoff():
        return utcnow() - timedelta(hours=CACHE_TTL_HOURS)
