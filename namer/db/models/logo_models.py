# /namer/db/models/logo_models.py

import os
import re
from typing import Optional

from sqlalchemy import Column, String, JSON, DateTime, Integer, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from ..database import Base, utcnow
from ...models.logo_model import LogoGenerationStatus

SECONDS_PER_LOGO_ESTIMATE = 30


def slugify(value: str) -> str:
    return re.sub(r"[^a-zA-Z0-9]+", "-", (value or "").strip()).strip("-").lower()


class LogoGeneration(Base):
    __tablename__ = "logo_generations"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=True)
    session_id = Column(String, ForeignKey("generation_sessions.id", ondelete="SET NULL"), index=True, nullable=True)
    business_name = Column(String, nullable=False)
    business_description = Column(Text, nullable=True)
    requested_names = Column(JSON, nullable=False, default=list)
    styles_requested = Column(JSON, nullable=False, default=list)
    variations_per_style = Column(Integer, nullable=False, default=3)

    status = Column(String, nullable=False, default=LogoGenerationStatus.PENDING.value, index=True)
    total_logos_requested = Column(Integer, nullable=False, default=12)
    logos_completed = Column(Integer, nullable=False, default=0)
    api_provider = Column(String, nullable=False, default="openai")
    cost_cents = Column(Integer, nullable=False, default=0)
    error_message = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    logos = relationship(
        "GeneratedLogo",
        back_populates="logo_generation",
        cascade="all, delete-orphan",
        order_by="GeneratedLogo.id",
    )

    @property
    def completion_percentage(self) -> int:
        if not self.total_logos_requested:
            return 0
        return min(100, int(round(self.logos_completed * 100 / self.total_logos_requested)))

    @property
    def estimated_seconds_remaining(self) -> int:
        if self.status not in (LogoGenerationStatus.PENDING.value, LogoGenerationStatus.PROCESSING.value):
            return 0
        remaining = max(0, self.total_logos_requested - self.logos_completed)
        return remaining * SECONDS_PER_LOGO_ESTIMATE


class GeneratedLogo(Base):
    __tablename__ = "generated_logos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    logo_generation_id = Column(String, ForeignKey("logo_generations.id", ondelete="CASCADE"), index=True, nullable=False)
    business_name = Column(String, nullable=False)
    style = Column(String, nullable=False)
    variation_number = Column(Integer, nullable=False)
    prompt_used = Column(Text, nullable=False)
    original_file_path = Column(String, nullable=False)
    file_size = Column(Integer, nullable=False, default=0)
    image_width = Column(Integer, nullable=True)
    image_height = Column(Integer, nullable=True)
    generation_time_ms = Column(Integer, nullable=True)
    api_image_url = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    logo_generation = relationship("LogoGeneration", back_populates="logos")
    color_variants = relationship(
        "LogoColorVariant",
        back_populates="generated_logo",
        cascade="all, delete-orphan",
        order_by="LogoColorVariant.id",
    )

    @property
    def file_extension(self) -> str:
        extension = os.path.splitext(self.original_file_path or "")[1].lstrip(".").lower()
        return extension or "png"

    def download_filename(self, color_scheme: Optional[str] = None, fmt: Optional[str] = None) -> str:
        filename = f"{slugify(self.business_name)}-{self.style}-{self.variation_number}"
        if color_scheme:
            filename = f"{filename}-{color_scheme}"
        return f"{filename}.{fmt or self.file_extension}"

    def variant_for(self, color_scheme: str) -> Optional["LogoColorVariant"]:
        for variant in self.color_variants:
            if variant.color_scheme == color_scheme:
                return variant
        return None


class LogoColorVariant(Base):
    __tablename__ = "logo_color_variants"
    __table_args__ = (
        UniqueConstraint("generated_logo_id", "color_scheme", name="uq_logo_variant_scheme"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    generated_logo_id = Column(Integer, ForeignKey("generated_logos.id", ondelete="CASCADE"), index=True, nullable=False)
    color_scheme = Column(String, nullable=False)
    file_path = Column(String, nullable=False)
    file_size = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    generated_logo = relationship("GeneratedLogo", back_populates="color_variants")
