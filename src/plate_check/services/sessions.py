"""Session state machine for the plate check workflow."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from plate_check.domain.analysis import (
    AnalysisError,
    AnalysisOutcome,
    AnalysisResult,
    RawAnalysis,
)
from plate_check.domain.errors import InvalidTransitionError, RelayError
from plate_check.domain.images import EncodedImage
from plate_check.domain.sessions import Session, SessionState
from plate_check.services.scorecard import format_scorecard

_logger = logging.getLogger(__name__)


class RelayClient(Protocol):
    """Interface for sending plates to the analysis relay."""

    async def analyze_image(self, image: EncodedImage) -> AnalysisOutcome:
        """Analyze a plate photo."""

    async def analyze_foods(self, food_items: list[str]) -> AnalysisOutcome:
        """Re-analyze a plate from an edited food list."""


@dataclass
class PlateSession:
    """Drives one photo through analysis, editing and re-analysis.

    States move ``EMPTY -> SELECTED -> ANALYZING -> RESULT``; ``RESULT`` can
    re-enter ``ANALYZING`` with an edited food list and ``reset`` returns to
    ``EMPTY`` from anywhere. Operations invoked outside their states raise
    ``InvalidTransitionError``, which also keeps a single relay call in flight.
    """

    relay: RelayClient
    session: Session = field(default_factory=Session)

    @property
    def state(self) -> SessionState:
        return self.session.state

    @property
    def food_items(self) -> list[str]:
        return list(self.session.food_items)

    @property
    def dirty(self) -> bool:
        return self.session.dirty

    @property
    def error(self) -> str | None:
        return self.session.error

    @property
    def result(self) -> AnalysisResult | RawAnalysis | None:
        return self.session.result

    def select(self, image: EncodedImage) -> None:
        """Store a newly selected photo, discarding any previous analysis."""
        self._require(
            "select", SessionState.EMPTY, SessionState.SELECTED, SessionState.RESULT
        )
        self.session = Session(state=SessionState.SELECTED, image=image)
        _logger.debug("Session image selected: %s", image.media_type)

    async def analyze(self) -> None:
        """Send the selected photo to the relay."""
        self._require("analyze", SessionState.SELECTED)
        image = self.session.image
        if image is None:
            raise InvalidTransitionError("analyze requires a selected image")
        self._enter_analyzing()
        try:
            outcome = await self.relay.analyze_image(image)
        except RelayError as exc:
            self._fail(SessionState.SELECTED, exc.message)
            return
        except Exception:
            self.session.state = SessionState.SELECTED
            raise
        if isinstance(outcome, AnalysisError):
            self._fail(SessionState.SELECTED, outcome.error)
            return
        self.session.result = outcome
        self.session.food_items = (
            list(outcome.food_items) if isinstance(outcome, AnalysisResult) else []
        )
        self._show_result()

    async def reanalyze(self) -> None:
        """Send the edited food list to the relay; no-op when the list is empty."""
        self._require("reanalyze", SessionState.RESULT)
        submitted = list(self.session.food_items)
        if not submitted:
            return
        self._enter_analyzing()
        try:
            outcome = await self.relay.analyze_foods(submitted)
        except RelayError as exc:
            self._fail(SessionState.RESULT, exc.message)
            return
        except Exception:
            self.session.state = SessionState.RESULT
            raise
        if isinstance(outcome, AnalysisError):
            self._fail(SessionState.RESULT, outcome.error)
            return
        self.session.result = outcome
        if isinstance(outcome, AnalysisResult) and outcome.food_items:
            self.session.food_items = list(outcome.food_items)
        self._show_result()

    def rename_food(self, index: int, text: str) -> None:
        """Replace a food label; blank text leaves the list untouched."""
        self._require("rename_food", SessionState.RESULT)
        position = self._food_index(index)
        cleaned = text.strip()
        if cleaned:
            self.session.food_items[position] = cleaned
            self.session.dirty = True
        self._clear_edit()

    def delete_food(self, index: int) -> None:
        """Remove a food label."""
        self._require("delete_food", SessionState.RESULT)
        del self.session.food_items[self._food_index(index)]
        self.session.dirty = True
        self._clear_edit()

    def add_food(self, text: str) -> None:
        """Append a food label; blank text is ignored."""
        self._require("add_food", SessionState.RESULT)
        cleaned = text.strip()
        if cleaned:
            self.session.food_items.append(cleaned)
            self.session.dirty = True

    def begin_edit(self, index: int) -> None:
        """Start editing a food label in place."""
        self._require("begin_edit", SessionState.RESULT)
        self.session.editing_value = self.session.food_items[self._food_index(index)]
        self.session.editing_index = index

    def update_edit(self, value: str) -> None:
        """Track the pending value of the in-progress edit."""
        self._require("update_edit", SessionState.RESULT)
        if self.session.editing_index is None:
            raise InvalidTransitionError("no food label is being edited")
        self.session.editing_value = value

    def commit_edit(self) -> None:
        """Apply the in-progress edit and end it."""
        self._require("commit_edit", SessionState.RESULT)
        index = self.session.editing_index
        if index is None:
            return
        self.rename_food(index, self.session.editing_value)

    def cancel_edit(self) -> None:
        """Drop the in-progress edit without touching the list."""
        self._clear_edit()

    def reset(self) -> None:
        """Discard the image, result, food list, edits and error."""
        self.session = Session()
        _logger.debug("Session reset")

    def scorecard(self) -> str | None:
        """Render the current analysis, if there is one."""
        if self.session.result is None:
            return None
        return format_scorecard(self.session.result, food_items=self.food_items)

    def _require(self, action: str, *allowed: SessionState) -> None:
        if self.session.state not in allowed:
            raise InvalidTransitionError(
                f"cannot {action} while session is {self.session.state}"
            )

    def _food_index(self, index: int) -> int:
        if not 0 <= index < len(self.session.food_items):
            raise IndexError(f"no food label at position {index}")
        return index

    def _enter_analyzing(self) -> None:
        self.session.state = SessionState.ANALYZING
        self.session.error = None
        self._clear_edit()
        _logger.debug("Session analyzing")

    def _show_result(self) -> None:
        self.session.state = SessionState.RESULT
        self.session.dirty = False
        self.session.error = None
        _logger.debug(
            "Session showing result: %s items", len(self.session.food_items)
        )

    def _fail(self, state: SessionState, message: str) -> None:
        self.session.state = state
        self.session.error = message
        _logger.info("Analysis failed: %s", message)

    def _clear_edit(self) -> None:
        self.session.editing_index = None
        self.session.editing_value = ""
