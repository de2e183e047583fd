"""
Lookup routes

Loads a stored submission back into the form shape, e.g. to reprint the
client's report.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from mixintake.api.deps import get_lookup_service
from mixintake.schemas.submission import FailureResponse
from mixintake.services.lookup_service import LookupService

router = APIRouter()


@router.get(
    "/lookup",
    summary="Look up a submission by application number",
    responses={
        400: {"model": FailureResponse, "description": "appNo missing"},
        404: {"model": FailureResponse, "description": "Application number not found"},
    },
)
async def lookup(
    app_no: Optional[str] = Query(None, alias="appNo", description="Application number, e.g. UNILAG-CL-R000012"),
    service: LookupService = Depends(get_lookup_service),
) -> Dict[str, Any]:
    data = await service.lookup(app_no)
    return {"success": True, "data": data}
