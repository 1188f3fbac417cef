# /namer/routers/logo_router.py

from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status, BackgroundTasks

from ..core.security import get_current_user_id
from ..models import logo_model
from ..services import logo_service
from ..services.database_service import DatabaseService, get_db_service
from ..services.logo_helpers import color_schemes
from .error_translation import to_http_exception

router = APIRouter()


def _file_response(payload: Dict) -> Response:
    return Response(
        content=payload["data"],
        media_type=payload["media_type"],
        headers={"Content-Disposition": f'attachment; filename="{payload["filename"]}"'},
    )


# --- PALETTES (/api/logos/color-schemes) must be declared before /{generation_id} ---

@router.get("/color-schemes", response_model=logo_model.ColorSchemeListResponse, summary="List Color Schemes")
def list_color_schemes():
    return {"color_schemes": color_schemes.list_color_schemes()}


# --- GENERATIONS ---

@router.post("", response_model=logo_model.LogoGenerationCreateResponse, status_code=status.HTTP_202_ACCEPTED, summary="Start a Logo Generation")
def create_logo_generation(
    request: logo_model.LogoGenerationCreate,
    background_tasks: BackgroundTasks,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        result = logo_service.create_logo_generation(db, request, user_id)
    except Exception as e:
        raise to_http_exception(e)
    background_tasks.add_task(logo_service.run_logo_generation, result["logo_generation_id"])
    return result


@router.get("/{generation_id}", response_model=logo_model.LogoGenerationDetails, summary="Get a Logo Generation with its Logos")
def get_logo_generation(
    generation_id: str,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        return logo_service.get_generation_details(db, generation_id, user_id)
    except Exception as e:
        raise to_http_exception(e)


@router.get("/{generation_id}/status", response_model=logo_model.LogoGenerationStatusResponse, summary="Poll a Logo Generation")
def get_logo_generation_status(
    generation_id: str,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        return logo_service.get_generation_status(db, generation_id, user_id)
    except Exception as e:
        raise to_http_exception(e)


@router.post("/{generation_id}/customize", response_model=logo_model.LogoCustomizeResponse, summary="Apply a Color Scheme to Logos")
def customize_logos(
    generation_id: str,
    request: logo_model.LogoCustomizeRequest,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        return logo_service.customize_logos(db, generation_id, request.logo_ids, request.color_scheme, user_id)
    except Exception as e:
        raise to_http_exception(e)


@router.post("/{generation_id}/retry", status_code=status.HTTP_202_ACCEPTED, summary="Retry a Failed Logo Generation")
def retry_logo_generation(
    generation_id: str,
    background_tasks: BackgroundTasks,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        result = logo_service.retry_generation(db, generation_id, user_id)
    except Exception as e:
        raise to_http_exception(e)
    background_tasks.add_task(logo_service.run_logo_generation, generation_id)
    return result


# --- DOWNLOADS ---

@router.get("/{generation_id}/download", summary="Download All Logos as ZIP")
def download_logo_archive(
    generation_id: str,
    color_scheme: Optional[str] = None,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        payload = logo_service.build_logo_archive(db, generation_id, color_scheme, user_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        raise to_http_exception(e)
    return _file_response(payload)


@router.get("/{generation_id}/logos/{logo_id}/download", summary="Download One Logo")
def download_logo(
    generation_id: str,
    logo_id: int,
    color_scheme: Optional[str] = None,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        payload = logo_service.get_logo_file(db, generation_id, logo_id, color_scheme, user_id)
    except Exception as e:
        raise to_http_exception(e)
    return _file_response(payload)
