# /namer/services/export_service.py

"""
Downloadable JSON, CSV and PDF exports of shareable targets.

An export row and its file live and die together: a failed render removes
both, and deleting the row removes the file through the Export mapper's
`after_delete` listener.
"""

import logging
import uuid
from datetime import timedelta
from typing import Dict, List, Optional

from ..core import config
from ..core.exceptions import NotFoundError, ForbiddenError, GoneError, ExportGenerationError
from ..db.database import utcnow
from ..models.share_model import ExportCreate
from . import storage_service, target_registry
from .database_service import DatabaseService
from .export_helpers.renderers import RENDERERS

logger = logging.getLogger(__name__)


def _get_owned_export(db: DatabaseService, export_id: str, user_id: Optional[str]):
    export = db.get_export(export_id)
    if export is None:
        raise NotFoundError(f"Export {export_id} not found.")
    if export.user_id != user_id:
        raise ForbiddenError("You do not have access to this export.")
    return export


def create_export(db: DatabaseService, request: ExportCreate, user_id: Optional[str]):
    content = target_registry.load_owned_target(db, request.target.kind, request.target.id, user_id)
    export_type = request.export_type.value
    expires_in_days = request.expires_in_days or config.EXPORT_DEFAULT_EXPIRES_DAYS

    export = db.add_export({
        "id": str(uuid.uuid4()),
        "user_id": user_id,
        "target_kind": content.kind.value,
        "target_id": content.target_id,
        "title": content.title,
        "export_type": export_type,
        "expires_at": utcnow() + timedelta(days=expires_in_days),
    })
    export_id = export.id
    file_path = f"exports/{export_id}.{export_type}"

    try:
        data = RENDERERS[export_type](content)
        export.file_size = storage_service.put(file_path, data)
        export.file_path = file_path
        export = db.save_export(export)
    except Exception as e:
        logger.error("Rendering %s export %s failed: %s", export_type, export_id, e, exc_info=True)
        db.session.rollback()
        db.delete_export(export_id)
        storage_service.delete(file_path)
        raise ExportGenerationError.render_failed(export_type, str(e)) from e

    logger.info("Created %s export %s of %s %s.", export_type, export_id, content.kind.value, content.target_id)
    return export


def get_export_download(db: DatabaseService, export_id: str, user_id: Optional[str]) -> Dict:
    """Returns {data, filename, media_type} and counts the download."""
    export = _get_owned_export(db, export_id, user_id)
    if export.is_expired:
        raise GoneError("Export has expired")
    if not export.file_exists:
        raise NotFoundError("Export file not found")

    data = storage_service.get(export.file_path)
    db.increment_export_download_count(export_id)
    return {
        "data": data,
        "filename": export.download_filename(),
        "media_type": export.content_type,
    }


def list_user_exports(db: DatabaseService, user_id: Optional[str]) -> List:
    return db.get_exports_by_user(user_id)


def get_export(db: DatabaseService, export_id: str, user_id: Optional[str]):
    return _get_owned_export(db, export_id, user_id)


def delete_export(db: DatabaseService, export_id: str, user_id: Optional[str]) -> bool:
    _get_owned_export(db, export_id, user_id)
    return db.delete_export(export_id)


def cleanup_expired_exports(db: DatabaseService) -> int:
    deleted = 0
    for export in db.get_expired_exports():
        if db.delete_export(export.id):
            deleted += 1
    if deleted:
        logger.info("Removed %d expired export(s).", deleted)
    return deleted
