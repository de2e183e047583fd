"""
Submission routes

Receives the intake form, allocates the application number and stores
the rows.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from mixintake.api.deps import get_submission_service
from mixintake.core.logging import get_logger
from mixintake.schemas.submission import FailureResponse, SubmissionResponse
from mixintake.services.submission_service import SubmissionService

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/submit",
    response_model=SubmissionResponse,
    status_code=status.HTTP_200_OK,
    summary="Submit a mix design",
    description="""
    Store a client's mix design and return its application number.

    **Input modes** (`inputMode`):
    - `kgm3`: cementKgm3, waterKgm3, fineKgm3, coarseKgm3 (+ optional mediumKgm3)
    - `ratio` (default): ratioFine, ratioCoarse, waterCementRatio (+ optional ratioCement, ratioMedium)

    **Derived values:**
    - wcRatio: water / cement (kg/m3) or the submitted w/c ratio (ratio)
    - mixRatioString: "1 : fine : coarse", two decimals per term

    Admixtures (`{name, dosage}`) and SCMs (`{name, percent}`) are stored
    one row each, keyed by the application number.
    """,
    responses={
        400: {"model": FailureResponse, "description": "Missing field or invalid input mode"},
        409: {"model": FailureResponse, "description": "Application number taken by concurrent submissions"},
        500: {"model": FailureResponse, "description": "Row store failure (recordId set when only child rows failed)"},
    },
)
async def submit(
    payload: Any = Body(...),
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionResponse:
    result = await service.submit(payload)
    return SubmissionResponse(
        record_id=result.record_id,
        wc_ratio=result.derived.wc_ratio,
        mix_ratio_string=result.derived.mix_ratio_string,
    )
