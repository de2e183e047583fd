"""
Live derivation for the intake form.

Recomputed on every input change; nothing is stored and bad numbers give
the empty result rather than an error.
"""

from fastapi import APIRouter, Depends

from mixintake.core.config import Settings, get_settings
from mixintake.schemas.submission import DerivedValuesResponse, DeriveRequest

router = APIRouter()


@router.post("/derive", response_model=DerivedValuesResponse, summary="Derive w/c ratio and mix ratio")
async def derive(request: DeriveRequest, settings: Settings = Depends(get_settings)) -> DerivedValuesResponse:
    derived = request.derive(include_water_term=settings.mix_include_water_term)
    return DerivedValuesResponse(wc_ratio=derived.wc_ratio, mix_ratio_string=derived.mix_ratio_string)
