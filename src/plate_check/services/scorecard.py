"""Plain-text rendering of plate analysis results."""

import math

from plate_check.domain.analysis import (
    AnalysisError,
    AnalysisOutcome,
    AnalysisResult,
    RawAnalysis,
)

MAX_STARS = 5
_DEFAULT_EMOJI = "🍽️"
_DEFAULT_MESSAGE = "Great effort!"


def format_scorecard(
    outcome: AnalysisOutcome, food_items: list[str] | None = None
) -> str:
    """Format an analysis outcome as a scorecard.

    ``food_items`` overrides the analysed list, so an edited list is shown
    while a re-analysis is pending.
    """
    if isinstance(outcome, AnalysisError):
        return outcome.error
    if isinstance(outcome, RawAnalysis):
        return outcome.raw_response
    return _format_result(outcome, food_items)


def format_stars(stars: int | float) -> str:
    """Render five star slots; a fractional rating fills the partial slot."""
    filled = max(0, min(math.ceil(stars), MAX_STARS))
    return "⭐" * filled + "☆" * (MAX_STARS - filled)


def _format_result(result: AnalysisResult, food_items: list[str] | None) -> str:
    kid = result.kid_friendly_score
    score = result.pyramid_score
    macros = result.macro_estimate
    foods = result.food_items if food_items is None else food_items
    lines = [
        kid.emoji or _DEFAULT_EMOJI,
        format_stars(kid.stars),
        kid.message or _DEFAULT_MESSAGE,
        f"Pyramid Score: {score.overall}/100",
        "",
        "Foods Identified:",
    ]
    lines.extend(f"- {item}" for item in foods)
    lines.extend(
        [
            "",
            "Estimated Macros:",
            f"Protein: {macros.protein}%",
            f"Carbs: {macros.carbs}%",
            f"Fats: {macros.fats}%",
            "",
            f"Protein quality: {score.protein_quality}",
            f"Vegetables: {score.vegetable_score}",
            f"Grains: {score.grain_quality}",
            "",
            "Strengths:",
        ]
    )
    lines.extend(f"✓ {item}" for item in result.feedback.strengths)
    lines.extend(["", "Room to Grow:"])
    lines.extend(f"→ {item}" for item in result.feedback.improvements)
    return "\n".join(lines)
