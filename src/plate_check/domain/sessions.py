"""Domain models for the plate analysis session."""

from dataclasses import dataclass, field
from enum import StrEnum

from plate_check.domain.analysis import AnalysisResult, RawAnalysis
from plate_check.domain.images import EncodedImage


class SessionState(StrEnum):
    """Lifecycle states of an analysis session."""

    EMPTY = "EMPTY"
    SELECTED = "SELECTED"
    ANALYZING = "ANALYZING"
    RESULT = "RESULT"


@dataclass
class Session:
    """The single mutable aggregate behind the plate check workflow."""

    state: SessionState = SessionState.EMPTY
    image: EncodedImage | None = None
    result: AnalysisResult | RawAnalysis | None = None
    food_items: list[str] = field(default_factory=list)
    dirty: bool = False
    error: str | None = None
    editing_index: int | None = None
    editing_value: str = ""
