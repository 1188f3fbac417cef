# /namer/db/models/share_models.py

from datetime import timedelta
from typing import Optional

from sqlalchemy import Column, String, JSON, DateTime, Integer, Text, Boolean, ForeignKey, event
from sqlalchemy.orm import relationship

from ..database import Base, utcnow
from .logo_models import slugify
from ...core.config import EXPORT_DEFAULT_EXPIRES_DAYS
from ...core.security import verify_password
from ...services import storage_service
from ...models.share_model import ShareType

EXPORT_CONTENT_TYPES = {
    "pdf": "application/pdf",
    "csv": "text/csv",
    "json": "application/json",
}


def default_export_expiry():
    return utcnow() + timedelta(days=EXPORT_DEFAULT_EXPIRES_DAYS)


class Share(Base):
    """
    A public, UUID-addressed window onto one shareable target.

    `target_kind` + `target_id` form a tagged reference resolved through the
    target registry in `services/target_registry.py`.
    """
    __tablename__ = "shares"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=True)
    target_kind = Column(String, nullable=False, index=True)
    target_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    share_type = Column(String, nullable=False, default=ShareType.PUBLIC.value)
    password_hash = Column(String, nullable=True)
    expires_at = Column(DateTime, nullable=True, index=True)
    view_count = Column(Integer, nullable=False, default=0)
    last_viewed_at = Column(DateTime, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    settings = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    accesses = relationship(
        "ShareAccess",
        back_populates="share",
        cascade="all, delete-orphan",
        order_by="ShareAccess.accessed_at.desc()",
    )

    @property
    def is_password_protected(self) -> bool:
        return self.share_type == ShareType.PASSWORD_PROTECTED.value

    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and self.expires_at <= utcnow()

    @property
    def is_accessible(self) -> bool:
        return bool(self.is_active) and not self.is_expired

    def validate_password(self, password: Optional[str]) -> bool:
        if not self.is_password_protected:
            return True
        if not password or not self.password_hash:
            return False
        return verify_password(password, self.password_hash)


class ShareAccess(Base):
    __tablename__ = "share_accesses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    share_id = Column(String, ForeignKey("shares.id", ondelete="CASCADE"), index=True, nullable=False)
    ip_address = Column(String, nullable=True)
    user_agent = Column(Text, nullable=True)
    referrer = Column(Text, nullable=True)
    accessed_at = Column(DateTime, nullable=False, default=utcnow, index=True)

    share = relationship("Share", back_populates="accesses")


class Export(Base):
    """
    A rendered file of one exportable target.

    The backing file lives in blob storage at `file_path` and is removed by
    the `after_delete` listener below whenever the row is deleted through
    the ORM.
    """
    __tablename__ = "exports"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=True)
    target_kind = Column(String, nullable=False, index=True)
    target_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False, default="export")
    export_type = Column(String, nullable=False)
    file_path = Column(String, nullable=True)
    file_size = Column(Integer, nullable=True)
    download_count = Column(Integer, nullable=False, default=0)
    expires_at = Column(DateTime, nullable=True, default=default_export_expiry, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and self.expires_at <= utcnow()

    @property
    def file_exists(self) -> bool:
        return storage_service.exists(self.file_path)

    @property
    def content_type(self) -> str:
        return EXPORT_CONTENT_TYPES.get(self.export_type, "application/octet-stream")

    @property
    def formatted_file_size(self) -> str:
        if not self.file_size:
            return "Unknown"
        size = float(self.file_size)
        units = ["B", "KB", "MB", "GB", "TB"]
        index = 0
        while size > 1024 and index < len(units) - 1:
            size /= 1024
            index += 1
        return f"{round(size, 2):g} {units[index]}"

    def download_filename(self) -> str:
        date = (self.created_at or utcnow()).strftime("%Y-%m-%d")
        slug = slugify(self.title)[:30].strip("-")
        if not slug:
            return f"{date}_export.{self.export_type}"
        return f"{date}_{slug}.{self.export_type}"


@event.listens_for(Export, "after_delete")
def _delete_export_file(mapper, connection, target: Export) -> None:
    """Deleting an export row always removes its backing file as well."""
    if target.file_path:
        storage_service.delete(target.file_path)
