# /namer/db/models/mood_board_models.py

from sqlalchemy import Column, String, JSON, DateTime, Integer, Float, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from ..database import Base, utcnow
from ...models.mood_board_model import MoodBoardLayout

DEFAULT_LAYOUT_CONFIG = {
    "background_color": "#ffffff",
    "grid_size": 20,
    "snap_to_grid": True,
}


def default_layout_config():
    return dict(DEFAULT_LAYOUT_CONFIG)


class MoodBoard(Base):
    """
    A canvas of generated logos arranged by the owner. Item coordinates are
    absolute pixels on the board; `layout_type` names the arrangement last
    applied to it.
    """
    __tablename__ = "mood_boards"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=True)
    project_id = Column(String, ForeignKey("projects.id", ondelete="SET NULL"), index=True, nullable=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    layout_type = Column(String, nullable=False, default=MoodBoardLayout.FREEFORM.value)
    layout_config = Column(JSON, nullable=False, default=default_layout_config)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    items = relationship(
        "MoodBoardItem",
        back_populates="mood_board",
        cascade="all, delete-orphan",
        order_by="MoodBoardItem.position",
    )

    @property
    def item_count(self) -> int:
        return len(self.items)

    def item_for(self, logo_id: int):
        for item in self.items:
            if item.generated_logo_id == logo_id:
                return item
        return None


class MoodBoardItem(Base):
    __tablename__ = "mood_board_items"
    __table_args__ = (
        UniqueConstraint("mood_board_id", "generated_logo_id", name="uq_mood_board_logo"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    mood_board_id = Column(String, ForeignKey("mood_boards.id", ondelete="CASCADE"), index=True, nullable=False)
    generated_logo_id = Column(Integer, ForeignKey("generated_logos.id", ondelete="CASCADE"), index=True, nullable=False)
    position = Column(Integer, nullable=False)
    x = Column(Float, nullable=False, default=0)
    y = Column(Float, nullable=False, default=0)
    width = Column(Float, nullable=False, default=200)
    height = Column(Float, nullable=False, default=200)
    rotation = Column(Float, nullable=False, default=0)
    z_index = Column(Integer, nullable=False, default=1)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    mood_board = relationship("MoodBoard", back_populates="items")
    generated_logo = relationship("GeneratedLogo")

    def move_to(self, placement: dict) -> None:
        for field in ("x", "y", "width", "height", "rotation", "z_index"):
            if placement.get(field) is not None:
                setattr(self, field, placement[field])
