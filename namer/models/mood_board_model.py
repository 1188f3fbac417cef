# /namer/models/mood_board_model.py

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MAX_ITEMS_PER_REQUEST = 50


class MoodBoardLayout(str, Enum):
    GRID = "grid"
    COLLAGE = "collage"
    MASONRY = "masonry"
    FREEFORM = "freeform"


class LayoutConfig(BaseModel):
    background_color: str = Field(default="#ffffff", pattern=r"^#[0-9a-fA-F]{6}$")
    grid_size: int = Field(default=20, ge=10, le=50)
    snap_to_grid: bool = True


class ItemPlacement(BaseModel):
    """Where one logo sits on the board. Unset fields keep their current value."""
    logo_id: int
    x: Optional[float] = None
    y: Optional[float] = None
    width: Optional[float] = Field(default=None, ge=50, le=2000)
    height: Optional[float] = Field(default=None, ge=50, le=2000)
    rotation: Optional[float] = Field(default=None, ge=-360, le=360)
    z_index: Optional[int] = Field(default=None, ge=0, le=1000)
    notes: Optional[str] = Field(default=None, max_length=1000)


# --- Request Contracts ---
class MoodBoardCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    layout_type: MoodBoardLayout = MoodBoardLayout.FREEFORM
    layout_config: LayoutConfig = Field(default_factory=LayoutConfig)
    project_id: Optional[str] = None


class MoodBoardUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    layout_type: Optional[MoodBoardLayout] = None
    layout_config: Optional[LayoutConfig] = None

    @field_validator("name", "layout_type", "layout_config")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("field cannot be null.")
        return value


class MoodBoardItemsAdd(BaseModel):
    logo_ids: List[int] = Field(..., min_length=1, max_length=MAX_ITEMS_PER_REQUEST)
    placements: List[ItemPlacement] = Field(default_factory=list)

    @model_validator(mode="after")
    def placements_refer_to_added_logos(self) -> "MoodBoardItemsAdd":
        unknown = {p.logo_id for p in self.placements} - set(self.logo_ids)
        if unknown:
            raise ValueError(f"Placements given for logos that are not being added: {sorted(unknown)}")
        return self


class MoodBoardItemsRemove(BaseModel):
    logo_ids: List[int] = Field(..., min_length=1)


class MoodBoardReorder(BaseModel):
    logo_ids: List[int] = Field(..., min_length=1)


class ApplyLayoutRequest(BaseModel):
    layout_type: MoodBoardLayout


# --- Response Contracts ---
class MoodBoardItemRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    generated_logo_id: int
    position: int
    x: float
    y: float
    width: float
    height: float
    rotation: float
    z_index: int
    notes: Optional[str] = None


class MoodBoardRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    layout_type: MoodBoardLayout
    layout_config: LayoutConfig
    item_count: int
    items: List[MoodBoardItemRecord] = []
    created_at: datetime
    updated_at: datetime


class MoodBoardListResponse(BaseModel):
    results: List[MoodBoardRecord]
    total: int
