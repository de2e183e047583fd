"""
Submission request and response models

One request model per input mode, validated once at the boundary by
``parse_submission``. Field names are camelCase on the wire.
"""

from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StrictFloat, StrictInt, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from mixintake.config.constants import (
    COMMON_REQUIRED_FIELDS,
    DEFAULT_RATIO_CEMENT,
    MODE_LABELS,
    MODE_REQUIRED_FIELDS,
    InputMode,
    resolve_input_mode,
)
from mixintake.core.errors import IntakeError, InvalidInputModeError, MissingFieldError
from mixintake.services.mix_derivation import DerivedMixValues, derive_from_mass, derive_from_ratio


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _to_text(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value.strip() if isinstance(value, str) else value


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


Text = Annotated[str, BeforeValidator(_to_text)]

# Numbers stay numbers and text stays text, as submitted
Scalar = Annotated[Union[StrictInt, StrictFloat, str], BeforeValidator(_strip)]


class AdmixtureEntry(CamelModel):
    name: Text = Field(default="", description="Admixture name, e.g. superplasticizer")
    dosage: Text = Field(default="", description="Dosage (%)")


class ScmEntry(CamelModel):
    name: Text = Field(default="", description="SCM name, e.g. fly ash")
    percent: Text = Field(default="", description="Replacement (%)")


class ClientDetails(CamelModel):
    """Client / project metadata shared by both modes."""

    client_name: Text
    contact_email: Text
    phone_number: Text
    organisation_type: Text
    contact_person: Text
    project_site: Text
    crush_date: Text
    concrete_type: Text
    cement_type: Text
    slump: Scalar
    age_days: Scalar
    cubes_count: Scalar
    concrete_grade: Text
    notes: Text = ""

    admixtures: List[AdmixtureEntry] = Field(default_factory=list)
    scms: List[ScmEntry] = Field(default_factory=list)

    def cell_values(self) -> Dict[str, Any]:
        """Flat camelCase mapping used to lay out the stored row."""
        values = self.model_dump(by_alias=True, exclude={"admixtures", "scms"})
        return {k: ("" if v is None else v) for k, v in values.items()}


class MassSubmission(ClientDetails):
    """Mix expressed as kg per cubic metre."""

    input_mode: Literal[InputMode.KGM3] = InputMode.KGM3
    cement_kgm3: Scalar
    water_kgm3: Scalar
    fine_kgm3: Scalar
    coarse_kgm3: Scalar
    medium_kgm3: Optional[Scalar] = None

    def derive(self, include_water_term: bool = False) -> DerivedMixValues:
        return derive_from_mass(
            self.cement_kgm3,
            self.water_kgm3,
            self.fine_kgm3,
            self.coarse_kgm3,
            self.medium_kgm3,
            include_water_term=include_water_term,
        )


class RatioSubmission(ClientDetails):
    """Mix expressed as parts relative to cement plus a w/c ratio."""

    input_mode: Literal[InputMode.RATIO] = InputMode.RATIO
    ratio_cement: Scalar = DEFAULT_RATIO_CEMENT
    ratio_fine: Scalar
    ratio_coarse: Scalar
    water_cement_ratio: Scalar
    ratio_medium: Optional[Scalar] = None

    @field_validator("ratio_cement", mode="before")
    @classmethod
    def default_cement(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_RATIO_CEMENT
        return v

    def derive(self, include_water_term: bool = False) -> DerivedMixValues:
        return derive_from_ratio(
            self.ratio_cement,
            self.ratio_fine,
            self.ratio_coarse,
            self.water_cement_ratio,
            self.ratio_medium,
            include_water_term=include_water_term,
        )


Submission = Union[MassSubmission, RatioSubmission]

SUBMISSION_MODELS = {
    InputMode.KGM3: MassSubmission,
    InputMode.RATIO: RatioSubmission,
}


def is_missing(value: Any) -> bool:
    return value is None or str(value).strip() == ""


def _clean_entries(raw: Any, field: str, value_key: str) -> List[Dict[str, Any]]:
    """Drop blank pairs, reject half-filled ones."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise IntakeError("E_INVALID_FIELD", f"Invalid value for field: {field}", 400)

    cleaned = []
    for entry in raw:
        if not isinstance(entry, Mapping):
            raise IntakeError("E_INVALID_FIELD", f"Invalid entry in {field}", 400)
        name_missing = is_missing(entry.get("name"))
        value_missing = is_missing(entry.get(value_key))
        if name_missing and value_missing:
            continue
        if name_missing or value_missing:
            raise MissingFieldError(field)
        cleaned.append({"name": entry.get("name"), value_key: entry.get(value_key)})
    return cleaned


def parse_submission(payload: Any) -> Submission:
    """
    Validate an inbound payload and build the mode's request model.

    Raises:
        InvalidInputModeError: ``inputMode`` present but not recognized
        MissingFieldError: first required field that is absent or blank
        IntakeError: any other malformed value (400)
    """
    if not isinstance(payload, Mapping):
        raise IntakeError("E_INVALID_BODY", "Request body must be a JSON object", 400)

    mode = resolve_input_mode(payload.get("inputMode"))
    if mode is None:
        raise InvalidInputModeError(payload.get("inputMode"))

    for field in COMMON_REQUIRED_FIELDS:
        if is_missing(payload.get(field)):
            raise MissingFieldError(field)

    for field in MODE_REQUIRED_FIELDS[mode]:
        if is_missing(payload.get(field)):
            raise MissingFieldError(field, MODE_LABELS[mode])

    data = dict(payload)
    data["inputMode"] = mode
    data["admixtures"] = _clean_entries(payload.get("admixtures"), "admixtures", "dosage")
    data["scms"] = _clean_entries(payload.get("scms"), "scms", "percent")

    try:
        return SUBMISSION_MODELS[mode].model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "body"
        raise IntakeError("E_INVALID_FIELD", f"Invalid value for field: {field}", 400) from exc


class DeriveRequest(CamelModel):
    """Live form values; every mix field optional."""

    input_mode: Optional[str] = None
    cement_kgm3: Any = None
    water_kgm3: Any = None
    fine_kgm3: Any = None
    medium_kgm3: Any = None
    coarse_kgm3: Any = None
    ratio_cement: Any = None
    ratio_fine: Any = None
    ratio_medium: Any = None
    ratio_coarse: Any = None
    water_cement_ratio: Any = None

    def mode(self) -> InputMode:
        mode = resolve_input_mode(self.input_mode)
        if mode is None:
            raise InvalidInputModeError(self.input_mode)
        return mode

    def derive(self, include_water_term: bool = False) -> DerivedMixValues:
        if self.mode() is InputMode.KGM3:
            return derive_from_mass(
                self.cement_kgm3, self.water_kgm3, self.fine_kgm3, self.coarse_kgm3,
                self.medium_kgm3, include_water_term=include_water_term,
            )
        cement = DEFAULT_RATIO_CEMENT if is_missing(self.ratio_cement) else self.ratio_cement
        return derive_from_ratio(
            cement, self.ratio_fine, self.ratio_coarse, self.water_cement_ratio,
            self.ratio_medium, include_water_term=include_water_term,
        )


class DerivedValuesResponse(CamelModel):
    wc_ratio: float = Field(..., description="Water/cement ratio, 0 when it cannot be derived")
    mix_ratio_string: str = Field(..., description='"1 : fine : coarse", empty when it cannot be derived')


class SubmissionResponse(CamelModel):
    success: bool = True
    message: str = "Record saved successfully"
    record_id: str = Field(..., description="Allocated application number")
    wc_ratio: float
    mix_ratio_string: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "message": "Record saved successfully",
                "recordId": "UNILAG-CL-K000001",
                "wcRatio": 0.5,
                "mixRatioString": "1 : 2.00 : 3.14",
            }
        }
    )


class FailureResponse(BaseModel):
    success: bool = False
    message: str
    recordId: Optional[str] = None
