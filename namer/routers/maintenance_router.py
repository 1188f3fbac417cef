# /namer/routers/maintenance_router.py

from typing import Dict

from fastapi import APIRouter, Depends

from ..services import maintenance_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()


@router.post("/cleanup", response_model=Dict[str, int], summary="Purge Expired Caches, Exports and Shares")
def run_cleanup(db: DatabaseService = Depends(get_db_service)):
    return maintenance_service.run_cleanup(db)
