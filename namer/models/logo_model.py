# /namer/models/logo_model.py

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LogoGenerationStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class LogoStyle(str, Enum):
    MINIMALIST = "minimalist"
    MODERN = "modern"
    PLAYFUL = "playful"
    CORPORATE = "corporate"


# --- Request Contracts ---
class LogoGenerationCreate(BaseModel):
    """
    Payload for POST /api/logos.

    Single-name flow: `count` styles x 3 variations of `business_name`.
    Multi-name flow: every entry of `selected_names` x all 4 styles.
    """
    business_name: str = Field(..., min_length=1, max_length=255)
    business_description: Optional[str] = Field(default=None, max_length=2000)
    count: int = Field(default=4, ge=1, le=4)
    selected_names: Optional[List[str]] = None
    session_id: Optional[str] = None

    @field_validator("selected_names")
    @classmethod
    def clean_selected_names(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return None
        cleaned = []
        for name in value:
            name = name.strip()
            if name and name not in cleaned:
                cleaned.append(name)
        if not cleaned:
            raise ValueError("selected_names must contain at least one non-empty name.")
        return cleaned


class LogoCustomizeRequest(BaseModel):
    logo_ids: List[int] = Field(..., min_length=1)
    color_scheme: str


# --- Response Contracts ---
class LogoGenerationCreateResponse(BaseModel):
    logo_generation_id: str
    status: LogoGenerationStatus
    total_logos_requested: int
    message: str


class LogoGenerationStatusResponse(BaseModel):
    id: str
    status: LogoGenerationStatus
    progress_percentage: int
    logos_completed: int
    total_logos_requested: int
    message: str
    estimated_time_remaining: int
    error_message: Optional[str] = None


class LogoColorVariantRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    color_scheme: str
    file_path: str
    file_size: int
    created_at: datetime


class GeneratedLogoRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    business_name: str
    style: LogoStyle
    variation_number: int
    original_file_path: str
    file_size: int
    image_width: Optional[int] = None
    image_height: Optional[int] = None
    generation_time_ms: Optional[int] = None
    created_at: datetime
    color_variants: List[LogoColorVariantRecord] = []


class LogoGenerationDetails(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    session_id: Optional[str] = None
    business_name: str
    business_description: Optional[str] = None
    status: LogoGenerationStatus
    total_logos_requested: int
    logos_completed: int
    completion_percentage: int
    api_provider: str
    cost_cents: int
    error_message: Optional[str] = None
    created_at: datetime
    logos: List[GeneratedLogoRecord] = []


class CustomizedLogo(BaseModel):
    logo_id: int
    color_scheme: str
    file_path: str
    file_size: int
    created: bool


class LogoCustomizeResponse(BaseModel):
    customized_logos: List[CustomizedLogo]
    message: str


class ColorSchemeInfo(BaseModel):
    id: str
    display_name: str
    description: str
    colors: dict


class ColorSchemeListResponse(BaseModel):
    color_schemes: List[ColorSchemeInfo]
