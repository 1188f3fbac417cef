# /namer/models/generation_model.py

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Enumerations ---
class GenerationStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class GenerationMode(str, Enum):
    CREATIVE = "creative"
    PROFESSIONAL = "professional"
    BRANDABLE = "brandable"
    TECH_FOCUSED = "tech-focused"


class ResultSource(str, Enum):
    """Which path produced the names of a completed session."""
    AI = "ai"
    CACHE = "cache"
    FALLBACK = "fallback"


class SessionScope(str, Enum):
    ACTIVE = "active"
    RECENT = "recent"
    ALL = "all"


# --- Request Contracts ---
class GenerationCreate(BaseModel):
    """Payload for POST /api/generations."""
    business_description: str = Field(..., min_length=1, max_length=2000)
    generation_mode: GenerationMode = GenerationMode.CREATIVE
    deep_thinking: bool = False
    models: List[str] = Field(..., min_length=1)
    project_id: Optional[str] = None

    @field_validator("business_description")
    @classmethod
    def description_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Business description cannot be empty.")
        return value


# --- Response Contracts ---
class GenerationCreateResponse(BaseModel):
    success: bool
    session_id: str
    status: GenerationStatus
    message: str


class GenerationStatusResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    session_id: str
    status: GenerationStatus
    progress_percentage: int
    current_step: Optional[str] = None
    results: Optional[Dict[str, Any]] = None
    error_message: Optional[str] = None
    duration_seconds: Optional[int] = None
    is_completed: bool = False
    has_failed: bool = False
    updated_at: Optional[datetime] = None


class GenerationDetailsResponse(GenerationStatusResponse):
    user_id: Optional[str] = None
    project_id: Optional[str] = None
    business_description: str
    generation_mode: GenerationMode
    deep_thinking: bool
    requested_models: List[str]
    generation_strategy: str
    execution_metadata: Optional[Dict[str, Any]] = None
    total_names_generated: int = 0
    total_response_time_ms: Optional[int] = None
    total_tokens_used: Optional[int] = None
    total_cost_cents: Optional[int] = None
    created_at: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    failed_at: Optional[datetime] = None


class GenerationListResponse(BaseModel):
    results: List[GenerationStatusResponse]
    total: int


class CancelResponse(BaseModel):
    success: bool
    message: str


class AIModelInfo(BaseModel):
    id: str
    display_name: str
    description: str
    provider: str
    capabilities: List[GenerationMode]
    available: bool


class AIModelListResponse(BaseModel):
    models: List[AIModelInfo]
