# /namer/routers/mood_board_router.py

from typing import Optional

from fastapi import APIRouter, Depends, status

from ..core.security import get_current_user_id
from ..models import mood_board_model
from ..services import mood_board_service
from ..services.database_service import DatabaseService, get_db_service
from .error_translation import to_http_exception

router = APIRouter()


@router.get("/layouts", summary="List Mood Board Layout Templates")
def list_layouts():
    return {"layouts": [layout.value for layout in mood_board_model.MoodBoardLayout]}


# --- BOARDS ---

@router.post("", response_model=mood_board_model.MoodBoardRecord, status_code=status.HTTP_201_CREATED, summary="Create a Mood Board")
def create_mood_board(
    request: mood_board_model.MoodBoardCreate,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        return mood_board_service.create_mood_board(db, request, user_id)
    except Exception as e:
        raise to_http_exception(e)


@router.get("", response_model=mood_board_model.MoodBoardListResponse, summary="List My Mood Boards")
def list_mood_boards(
    project_id: Optional[str] = None,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    boards = mood_board_service.list_mood_boards(db, user_id, project_id)
    return {"results": boards, "total": len(boards)}


@router.get("/{board_id}", response_model=mood_board_model.MoodBoardRecord, summary="Get a Mood Board")
def get_mood_board(
    board_id: str,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        return mood_board_service.get_mood_board(db, board_id, user_id)
    except Exception as e:
        raise to_http_exception(e)


@router.patch("/{board_id}", response_model=mood_board_model.MoodBoardRecord, summary="Update a Mood Board")
def update_mood_board(
    board_id: str,
    request: mood_board_model.MoodBoardUpdate,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        return mood_board_service.update_mood_board(db, board_id, request, user_id)
    except Exception as e:
        raise to_http_exception(e)


@router.delete("/{board_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a Mood Board")
def delete_mood_board(
    board_id: str,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        mood_board_service.delete_mood_board(db, board_id, user_id)
    except Exception as e:
        raise to_http_exception(e)


# --- ITEMS ---

@router.post("/{board_id}/items", response_model=mood_board_model.MoodBoardRecord, summary="Pin Logos to a Mood Board")
def add_items(
    board_id: str,
    request: mood_board_model.MoodBoardItemsAdd,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        return mood_board_service.add_items(db, board_id, request, user_id)
    except Exception as e:
        raise to_http_exception(e)


@router.post("/{board_id}/items/remove", response_model=mood_board_model.MoodBoardRecord, summary="Unpin Logos from a Mood Board")
def remove_items(
    board_id: str,
    request: mood_board_model.MoodBoardItemsRemove,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        return mood_board_service.remove_items(db, board_id, request.logo_ids, user_id)
    except Exception as e:
        raise to_http_exception(e)


@router.post("/{board_id}/items/reorder", response_model=mood_board_model.MoodBoardRecord, summary="Reorder Mood Board Items")
def reorder_items(
    board_id: str,
    request: mood_board_model.MoodBoardReorder,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        return mood_board_service.reorder_items(db, board_id, request.logo_ids, user_id)
    except Exception as e:
        raise to_http_exception(e)


@router.post("/{board_id}/layout", response_model=mood_board_model.MoodBoardRecord, summary="Apply a Layout Template")
def apply_layout(
    board_id: str,
    request: mood_board_model.ApplyLayoutRequest,
    db: DatabaseService = Depends(get_db_service),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        return mood_board_service.apply_layout(db, board_id, request.layout_type, user_id)
    except Exception as e:
        raise to_http_exception(e)
