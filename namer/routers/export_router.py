# /namer/routers/export_router.py

from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from ..core.security import get_current_user_id
from ..models import share_model
from ..services import export_service
from ..services.database_service import DatabaseService, get_db_service
from .error_translation import to_http_exception

router = APIRouter()


@router.post("", response_model=share_model.ExportRecord, status_code=status.HTTP_201_CREATED, summary="Create an Export")
def create_export(
    request: share_model.ExportCreate,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        return export_service.create_export(db, request, user_id)
    except Exception as e:
        raise to_http_exception(e)


@router.get("", response_model=share_model.ExportListResponse, summary="List My Exports")
def list_exports(db: DatabaseService = Depends(get_db_service), user_id: Optional[str] = Depends(get_current_user_id)):
    exports = export_service.list_user_exports(db, user_id)
    return {"results": exports, "total": len(exports)}


@router.get("/{export_id}", response_model=share_model.ExportRecord, summary="Get an Export")
def get_export(
    export_id: str,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        return export_service.get_export(db, export_id, user_id)
    except Exception as e:
        raise to_http_exception(e)


@router.get("/{export_id}/download", summary="Download an Export File")
def download_export(
    export_id: str,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        payload = export_service.get_export_download(db, export_id, user_id)
    except Exception as e:
        raise to_http_exception(e)
    return Response(
        content=payload["data"],
        media_type=payload["media_type"],
        headers={"Content-Disposition": f'attachment; filename="{payload["filename"]}"'},
    )


@router.delete("/{export_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete an Export")
def delete_export(
    export_id: str,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        export_service.delete_export(db, export_id, user_id)
    except Exception as e:
        raise to_http_exception(e)
