# /namer/routers/public_router.py

from typing import Optional

from fastapi import APIRouter, Depends, Request

from ..models import share_model
from ..services import share_service
from ..services.database_service import DatabaseService, get_db_service
from .error_translation import to_http_exception

router = APIRouter()


@router.post("/shares/{share_id}", response_model=share_model.PublicShareResponse, summary="View a Shared Item")
def view_public_share(
    share_id: str,
    request: Request,
    access: Optional[share_model.ShareAccessRequest] = None,
    db: DatabaseService = Depends(get_db_service),
):
    """
    An unauthenticated endpoint that serves the content behind a share link.
    Password-protected shares take the password in the request body.
    """
    access_info = {
        "ip_address": request.client.host if request.client else None,
        "user_agent": request.headers.get("user-agent"),
        "referrer": request.headers.get("referer"),
    }
    try:
        return share_service.get_public_share_content(
            db, share_id, access.password if access else None, access_info
        )
    except Exception as e:
        raise to_http_exception(e)
