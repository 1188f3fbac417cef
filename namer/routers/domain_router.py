# /namer/routers/domain_router.py

from fastapi import APIRouter, Depends, HTTPException, status

from ..models import domain_model
from ..services import domain_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()


@router.post("/check", response_model=domain_model.BusinessNameDomainsResponse, summary="Check a Business Name Across TLDs")
async def check_business_name(request: domain_model.DomainCheckRequest, db: DatabaseService = Depends(get_db_service)):
    try:
        results = await domain_service.check_business_name(db, request.business_name)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return {"business_name": request.business_name, "results": results}


@router.get("/{domain}", response_model=domain_model.DomainCheckResult, summary="Check One Domain")
async def check_domain(domain: str, db: DatabaseService = Depends(get_db_service)):
    try:
        return await domain_service.check_domain(db, domain)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
