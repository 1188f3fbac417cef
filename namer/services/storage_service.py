# /namer/services/storage_service.py

"""
Blob storage on the local filesystem.

Every file the application writes (logo originals, recolored variants,
export files) goes through these helpers, addressed by a relative path
under `STORAGE_ROOT`. Paths are unique by construction (ids and random
suffixes), so there is no locking; the last writer wins on a collision.
"""

import logging
import os

from ..core import config
from ..core.exceptions import StorageFailureError

logger = logging.getLogger(__name__)


def absolute_path(relative_path: str) -> str:
    root = os.path.abspath(config.STORAGE_ROOT)
    full_path = os.path.abspath(os.path.join(root, relative_path))
    if os.path.commonpath([root, full_path]) != root:
        raise StorageFailureError(f"Path escapes the storage root: {relative_path}")
    return full_path


def put(relative_path: str, data: bytes) -> int:
    """Writes `data` and returns the number of bytes stored."""
    full_path = absolute_path(relative_path)
    try:
        os.makedirs(os.path.dirname(full_path), exist_ok=True)
        with open(full_path, "wb") as f:
            f.write(data)
    except OSError as e:
        logger.error("Failed to write blob %s: %s", relative_path, e, exc_info=True)
        raise StorageFailureError(f"Could not write file {relative_path}") from e
    return len(data)


def get(relative_path: str) -> bytes:
    full_path = absolute_path(relative_path)
    try:
        with open(full_path, "rb") as f:
            return f.read()
    except FileNotFoundError:
        raise
    except OSError as e:
        logger.error("Failed to read blob %s: %s", relative_path, e, exc_info=True)
        raise StorageFailureError(f"Could not read file {relative_path}") from e


def exists(relative_path: str) -> bool:
    if not relative_path:
        return False
    return os.path.isfile(absolute_path(relative_path))


def delete(relative_path: str) -> bool:
    """Removes one file; returns False when there was nothing to remove."""
    if not relative_path:
        return False
    full_path = absolute_path(relative_path)
    try:
        os.remove(full_path)
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.error("Failed to delete blob %s: %s", relative_path, e, exc_info=True)
        raise StorageFailureError(f"Could not delete file {relative_path}") from e
