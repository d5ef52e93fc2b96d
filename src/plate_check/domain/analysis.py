"""Models for plate analysis results returned by the relay."""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator


class _WireModel(BaseModel):
    """Base model accepting both camelCase wire keys and field names.

    Explicit ``null`` values fall back to the field default.
    """

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class MacroEstimate(_WireModel):
    """Macro split in percent; the model is asked to make it sum to 100."""

    protein: int | float = 0
    carbs: int | float = 0
    fats: int | float = 0


class PyramidScore(_WireModel):
    """Overall pyramid score with free-text quality labels."""

    overall: int | float = 0
    protein_quality: str = Field(default="", alias="proteinQuality")
    vegetable_score: str = Field(default="", alias="vegetableScore")
    grain_quality: str = Field(default="", alias="grainQuality")


class Feedback(_WireModel):
    """Strengths and improvements suggested for the plate."""

    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)


class KidFriendlyScore(_WireModel):
    """Emoji, message and star rating aimed at kids."""

    emoji: str = ""
    message: str = ""
    stars: int | float = 0


class AnalysisResult(_WireModel):
    """Structured analysis of a plate.

    Only ``foodItems`` is required; missing sections read as empty so a
    partially filled answer still yields an editable food list.
    """

    food_items: list[str] = Field(alias="foodItems")
    macro_estimate: MacroEstimate = Field(
        default_factory=MacroEstimate, alias="macroEstimate"
    )
    pyramid_score: PyramidScore = Field(
        default_factory=PyramidScore, alias="pyramidScore"
    )
    feedback: Feedback = Field(default_factory=Feedback)
    kid_friendly_score: KidFriendlyScore = Field(
        default_factory=KidFriendlyScore, alias="kidFriendlyScore"
    )


class AnalysisError(_WireModel):
    """User-facing error reported instead of an analysis."""

    error: str


class RawAnalysis(_WireModel):
    """Unstructured model answer that could not be read as an analysis."""

    raw_response: str = Field(alias="rawResponse")


AnalysisOutcome = AnalysisResult | AnalysisError | RawAnalysis


def parse_outcome(payload: object) -> AnalysisOutcome:
    """Map a relay JSON body onto the matching outcome variant."""
    if isinstance(payload, dict):
        if isinstance(payload.get("error"), str):
            return AnalysisError(error=payload["error"])
        if isinstance(payload.get("rawResponse"), str):
            return RawAnalysis(raw_response=payload["rawResponse"])
        try:
            return AnalysisResult.model_validate(payload)
        except ValidationError:
            pass
    return RawAnalysis(raw_response=json.dumps(payload, ensure_ascii=False))


def dump_outcome(outcome: AnalysisOutcome) -> dict[str, object]:
    """Serialize an outcome to its camelCase wire form."""
    return outcome.model_dump(by_alias=True)
