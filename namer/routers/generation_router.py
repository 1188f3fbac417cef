# /namer/routers/generation_router.py

from typing import Optional

from fastapi import APIRouter, Depends, status, BackgroundTasks

from ..core.security import get_current_user_id
from ..models import generation_model
from ..services import generation_service
from ..services.database_service import DatabaseService, get_db_service
from ..services.generation_helpers import model_catalog
from .error_translation import to_http_exception

router = APIRouter()


# --- CATALOG (/api/generations/models) must be declared before /{session_id} ---

@router.get("/models", response_model=generation_model.AIModelListResponse, summary="List Known AI Models")
def list_models():
    return {"models": model_catalog.list_available_models()}


# --- SESSION COLLECTION ---

@router.post("", response_model=generation_model.GenerationCreateResponse, status_code=status.HTTP_202_ACCEPTED, summary="Start a Name Generation")
def create_generation(
    request: generation_model.GenerationCreate,
    background_tasks: BackgroundTasks,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        result = generation_service.create_session(db, request, user_id)
    except Exception as e:
        raise to_http_exception(e)
    background_tasks.add_task(generation_service.run_generation_session, result["session_id"])
    return result


@router.get("", response_model=generation_model.GenerationListResponse, summary="List My Generations")
def list_generations(
    scope: generation_model.SessionScope = generation_model.SessionScope.ALL,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    results = generation_service.list_sessions(db, user_id, scope.value)
    return {"results": results, "total": len(results)}


# --- INDIVIDUAL SESSION ---

@router.get("/{session_id}", response_model=generation_model.GenerationStatusResponse, summary="Poll a Generation")
def get_generation_status(
    session_id: str,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        return generation_service.get_session_status(db, session_id, user_id)
    except Exception as e:
        raise to_http_exception(e)


@router.get("/{session_id}/details", response_model=generation_model.GenerationDetailsResponse, summary="Get Full Generation Details")
def get_generation_details(
    session_id: str,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        return generation_service.get_session_details(db, session_id, user_id)
    except Exception as e:
        raise to_http_exception(e)


@router.post("/{session_id}/cancel", response_model=generation_model.CancelResponse, summary="Cancel a Generation")
def cancel_generation(
    session_id: str,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        return generation_service.cancel_session(db, session_id, user_id)
    except Exception as e:
        raise to_http_exception(e)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a Generation")
def delete_generation(
    session_id: str,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        generation_service.delete_session(db, session_id, user_id)
    except Exception as e:
        raise to_http_exception(e)
