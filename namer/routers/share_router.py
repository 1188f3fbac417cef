# /namer/routers/share_router.py

from typing import Optional

from fastapi import APIRouter, Depends, status

from ..core.security import get_current_user_id
from ..models import share_model
from ..services import share_service
from ..services.database_service import DatabaseService, get_db_service
from .error_translation import to_http_exception

router = APIRouter()


@router.post("", response_model=share_model.ShareRecord, status_code=status.HTTP_201_CREATED, summary="Share a Session, Logo Set or Project")
def create_share(
    request: share_model.ShareCreate,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        return share_service.create_share(db, request, user_id)
    except Exception as e:
        raise to_http_exception(e)


@router.get("", response_model=share_model.ShareListResponse, summary="List My Shares")
def list_shares(
    active_only: bool = False,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    shares = share_service.list_user_shares(db, user_id, active_only)
    return {"results": shares, "total": len(shares)}


@router.get("/{share_id}", response_model=share_model.ShareRecord, summary="Get One of My Shares")
def get_share(
    share_id: str,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        return share_service.get_share(db, share_id, user_id)
    except Exception as e:
        raise to_http_exception(e)


@router.patch("/{share_id}", response_model=share_model.ShareRecord, summary="Update a Share")
def update_share(
    share_id: str,
    request: share_model.ShareUpdate,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        return share_service.update_share(db, share_id, request, user_id)
    except Exception as e:
        raise to_http_exception(e)


@router.post("/{share_id}/deactivate", response_model=share_model.ShareRecord, summary="Deactivate a Share")
def deactivate_share(
    share_id: str,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        return share_service.deactivate_share(db, share_id, user_id)
    except Exception as e:
        raise to_http_exception(e)


@router.get("/{share_id}/analytics", response_model=share_model.ShareAnalyticsResponse, summary="Get Share Analytics")
def get_share_analytics(
    share_id: str,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        return share_service.get_share_analytics(db, share_id, user_id)
    except Exception as e:
        raise to_http_exception(e)


@router.delete("/{share_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a Share")
def delete_share(
    share_id: str,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        share_service.delete_share(db, share_id, user_id)
    except Exception as e:
        raise to_http_exception(e)
