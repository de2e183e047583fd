"""Pydantic request/response models"""

from .submission import (
    DeriveRequest,
    DerivedValuesResponse,
    MassSubmission,
    RatioSubmission,
    SubmissionResponse,
    parse_submission,
)

__all__ = [
    "DeriveRequest",
    "DerivedValuesResponse",
    "MassSubmission",
    "RatioSubmission",
    "SubmissionResponse",
    "parse_submission",
]
