# /namer/models/share_model.py

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ShareType(str, Enum):
    PUBLIC = "public"
    PASSWORD_PROTECTED = "password_protected"


class ExportType(str, Enum):
    PDF = "pdf"
    CSV = "csv"
    JSON = "json"


class TargetKind(str, Enum):
    """The kinds of records a share or an export can point at."""
    GENERATION_SESSION = "generation_session"
    LOGO_GENERATION = "logo_generation"
    PROJECT = "project"
    MOOD_BOARD = "mood_board"


class TargetRef(BaseModel):
    kind: TargetKind
    id: str = Field(..., min_length=1)


def _as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _ensure_future(value: Optional[datetime]) -> Optional[datetime]:
    value = _as_naive_utc(value)
    if value is not None and value <= datetime.now(timezone.utc).replace(tzinfo=None):
        raise ValueError("expires_at must be in the future.")
    return value


# --- Share Contracts ---
class ShareCreate(BaseModel):
    target: TargetRef
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    share_type: ShareType = ShareType.PUBLIC
    password: Optional[str] = None
    expires_at: Optional[datetime] = None
    settings: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("expires_at")
    @classmethod
    def expiry_in_future(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _ensure_future(value)

    @model_validator(mode="after")
    def password_matches_type(self) -> "ShareCreate":
        if self.share_type == ShareType.PASSWORD_PROTECTED:
            if not self.password or len(self.password) < 6:
                raise ValueError("Password-protected shares require a password of at least 6 characters.")
        else:
            self.password = None
        return self


class ShareUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    expires_at: Optional[datetime] = None
    settings: Optional[Dict[str, Any]] = None

    @field_validator("expires_at")
    @classmethod
    def expiry_in_future(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _ensure_future(value)

    @field_validator("settings")
    @classmethod
    def settings_not_null(cls, value: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        # Omit the field to keep the current settings; send {} to clear them.
        if value is None:
            raise ValueError("settings cannot be null.")
        return value


class ShareRecord(BaseModel):
    """A share as returned to its owner. The password hash is never exposed."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    target_kind: TargetKind
    target_id: str
    title: str
    description: Optional[str] = None
    share_type: ShareType
    expires_at: Optional[datetime] = None
    view_count: int
    last_viewed_at: Optional[datetime] = None
    is_active: bool
    is_expired: bool
    is_accessible: bool
    settings: Dict[str, Any] = {}
    created_at: datetime


class ShareListResponse(BaseModel):
    results: List[ShareRecord]
    total: int


class ShareAccessRequest(BaseModel):
    password: Optional[str] = None


class PublicShareResponse(BaseModel):
    share_id: str
    title: str
    description: Optional[str] = None
    target_kind: TargetKind
    content: Dict[str, Any]
    view_count: int


class ShareAnalyticsResponse(BaseModel):
    share_id: str
    total_views: int
    unique_visitors: int
    last_viewed_at: Optional[datetime] = None
    recent_accesses: List[Dict[str, Any]]


# --- Export Contracts ---
class ExportCreate(BaseModel):
    target: TargetRef
    export_type: ExportType
    expires_in_days: Optional[int] = Field(default=None, ge=1, le=365)


class ExportRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    target_kind: TargetKind
    target_id: str
    title: str
    export_type: ExportType
    file_size: Optional[int] = None
    formatted_file_size: str
    download_count: int
    expires_at: Optional[datetime] = None
    is_expired: bool
    created_at: datetime


class ExportListResponse(BaseModel):
    results: List[ExportRecord]
    total: int


# --- Target Contents ---
class SharedContent(BaseModel):
    """What a target registry loader hands to shares and exports."""
    kind: TargetKind
    target_id: str
    title: str
    description: Optional[str] = None
    content: Dict[str, Any]
    rows: List[Dict[str, Any]] = []
