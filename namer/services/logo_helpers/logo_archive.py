# /namer/services/logo_helpers/logo_archive.py

import io
import os
import zipfile
from typing import Iterable, Optional, Tuple

from ...db.models.logo_models import slugify

MIME_TYPES = {
    "png": "image/png",
    "svg": "image/svg+xml",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
}


def mime_type_for(path: str) -> str:
    extension = os.path.splitext(path or "")[1].lstrip(".").lower()
    return MIME_TYPES.get(extension, "application/octet-stream")


def archive_filename(business_name: str, color_scheme: Optional[str] = None) -> str:
    filename = f"{slugify(business_name) or 'logos'}-logos"
    if color_scheme:
        filename = f"{filename}-{color_scheme}"
    return f"{filename}.zip"


def build_zip(entries: Iterable[Tuple[str, bytes]]) -> bytes:
    """Packs (filename, data) pairs into an in-memory ZIP archive."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for filename, data in entries:
            archive.writestr(filename, data)
    return buffer.getvalue()
