# /namer/services/share_service.py

"""
Public shares of generation sessions, logo generations and projects.

A share is addressed by a random UUID. Public access goes through
`get_public_share_content`, which validates the share, records the view and
returns the content produced by the target registry. Validation failures
raise ShareAccessError with a `reason` the router maps to a status code.
"""

import logging
import uuid
from typing import Dict, List, Optional

from ..core.exceptions import NotFoundError, ForbiddenError, ShareAccessError
from ..core.security import hash_password
from ..models.share_model import ShareCreate, ShareType, ShareUpdate
from . import target_registry
from .database_service import DatabaseService

logger = logging.getLogger(__name__)


def _get_owned_share(db: DatabaseService, share_id: str, user_id: Optional[str]):
    share = db.get_share(share_id)
    if share is None:
        raise NotFoundError(f"Share {share_id} not found.")
    if share.user_id != user_id:
        raise ForbiddenError("You do not have access to this share.")
    return share


# --- Owner operations ---

def create_share(db: DatabaseService, request: ShareCreate, user_id: Optional[str]):
    # Raises NotFoundError/ForbiddenError when the target is missing or not the caller's.
    target_registry.load_owned_target(db, request.target.kind, request.target.id, user_id)

    password_hash = None
    if request.share_type == ShareType.PASSWORD_PROTECTED:
        password_hash = hash_password(request.password)

    share = db.add_share({
        "id": str(uuid.uuid4()),
        "user_id": user_id,
        "target_kind": request.target.kind.value,
        "target_id": request.target.id,
        "title": request.title.strip(),
        "description": request.description,
        "share_type": request.share_type.value,
        "password_hash": password_hash,
        "expires_at": request.expires_at,
        "settings": request.settings,
        "is_active": True,
        "view_count": 0,
    })
    logger.info("User %s shared %s %s as %s.", user_id, share.target_kind, share.target_id, share.id)
    return share


def list_user_shares(db: DatabaseService, user_id: Optional[str], active_only: bool = False) -> List:
    return db.get_shares_by_user(user_id, active_only)


def get_share(db: DatabaseService, share_id: str, user_id: Optional[str]):
    return _get_owned_share(db, share_id, user_id)


def update_share(db: DatabaseService, share_id: str, request: ShareUpdate, user_id: Optional[str]):
    share = _get_owned_share(db, share_id, user_id)
    for field, value in request.model_dump(exclude_unset=True).items():
        if field == "title" and value is None:
            continue
        setattr(share, field, value)
    return db.save_share(share)


def deactivate_share(db: DatabaseService, share_id: str, user_id: Optional[str]):
    share = _get_owned_share(db, share_id, user_id)
    share.is_active = False
    logger.info("Share %s deactivated by user %s.", share_id, user_id)
    return db.save_share(share)


def delete_share(db: DatabaseService, share_id: str, user_id: Optional[str]) -> bool:
    _get_owned_share(db, share_id, user_id)
    return db.delete_share(share_id)


def get_share_analytics(db: DatabaseService, share_id: str, user_id: Optional[str]) -> Dict:
    share = _get_owned_share(db, share_id, user_id)
    stats = db.get_share_access_stats(share_id)
    return {
        "share_id": share.id,
        "total_views": share.view_count,
        "unique_visitors": stats["unique_visitors"],
        "last_viewed_at": share.last_viewed_at,
        "recent_accesses": [
            {
                "ip_address": access.ip_address,
                "user_agent": access.user_agent,
                "referrer": access.referrer,
                "accessed_at": access.accessed_at,
            }
            for access in stats["recent"]
        ],
    }


# --- Public access ---

def validate_share_access(db: DatabaseService, share_id: str, password: Optional[str] = None):
    """Returns the share if it may be viewed; raises ShareAccessError otherwise."""
    share = db.get_share(share_id)
    if share is None:
        raise ShareAccessError("Share not found", "not_found")
    if not share.is_active:
        raise ShareAccessError("Share not found or inactive", "inactive")
    if share.is_expired:
        raise ShareAccessError("Share has expired", "expired")
    if share.is_password_protected and not share.validate_password(password):
        raise ShareAccessError("Invalid password", "invalid_password")
    return share


def get_public_share_content(
    db: DatabaseService,
    share_id: str,
    password: Optional[str] = None,
    access_info: Optional[Dict] = None,
) -> Dict:
    share = validate_share_access(db, share_id, password)
    content = target_registry.load_target(db, share.target_kind, share.target_id)
    if content is None:
        raise ShareAccessError("Shared content no longer exists", "not_found")

    access_info = access_info or {}
    db.record_share_access(
        share.id,
        access_info.get("ip_address"),
        access_info.get("user_agent"),
        access_info.get("referrer"),
    )
    share = db.get_share(share_id)
    return {
        "share_id": share.id,
        "title": share.title,
        "description": share.description,
        "target_kind": share.target_kind,
        "content": content.content,
        "view_count": share.view_count,
    }


# --- Maintenance ---

def deactivate_expired_shares(db: DatabaseService) -> int:
    count = db.deactivate_expired_shares()
    if count:
        logger.info("Deactivated %d expired share(s).", count)
    return count
