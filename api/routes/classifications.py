"""
Reporting API Routes for the Lead Qualification API.

Read-only access to the classification ledger and the configured industries.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from lead_scoring.exceptions import LeadQualifierError

from ..errors import to_http_exception
from ..services import Services, get_services

logger = logging.getLogger(__name__)

router = APIRouter()


class ClassificationRecordItem(BaseModel):
    id: str
    timestamp: str
    lead: Dict[str, Any]
    industry_id: str
    status: str
    confidence: float
    reasons: List[str]
    metadata: Dict[str, Any]
    transcript: List[Dict[str, Any]]


class IndustryItem(BaseModel):
    id: str
    name: str
    qualifying_areas: List[str]
    required_fields: List[str]


@router.get("/classifications", response_model=List[ClassificationRecordItem])
async def recent_classifications(
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    services: Services = Depends(get_services),
):
    """Most recent classification records, newest first."""
    limit = limit or services.settings.classifications_default_limit
    try:
        records = await services.ledger.recent(limit)
    except LeadQualifierError as e:
        raise to_http_exception(e)

    return [ClassificationRecordItem(**record.to_dict()) for record in records]


@router.get("/industries", response_model=List[IndustryItem])
async def list_industries(services: Services = Depends(get_services)):
    """Industries a conversation can be started for."""
    return [
        IndustryItem(
            id=config.id,
            name=config.name,
            qualifying_areas=list(config.qualifying_areas),
            required_fields=list(config.required_fields_for_classification),
        )
        for config in services.registry.list_all()
    ]
