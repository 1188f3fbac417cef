# /namer/models/domain_model.py

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field


class DomainStatus(str, Enum):
    AVAILABLE = "available"
    TAKEN = "taken"
    ERROR = "error"


class DomainCheckRequest(BaseModel):
    business_name: str = Field(..., min_length=1, max_length=255)


class DomainCheckResult(BaseModel):
    domain: str
    available: Optional[bool] = None
    status: DomainStatus
    cached: bool
    checked_at: Optional[str] = None
    error: Optional[str] = None


class BusinessNameDomainsResponse(BaseModel):
    business_name: str
    results: Dict[str, DomainCheckResult]
