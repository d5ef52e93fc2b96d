"""Tests for analysis result models."""

from plate_check.domain.analysis import (
    AnalysisError,
    AnalysisResult,
    RawAnalysis,
    dump_outcome,
    parse_outcome,
)
from tests.conftest import SAMPLE_ANALYSIS, analysis_payload


def test_parse_outcome_reads_full_analysis() -> None:
    outcome = parse_outcome(SAMPLE_ANALYSIS)

    assert isinstance(outcome, AnalysisResult)
    assert outcome.pyramid_score.vegetable_score == "good"
    assert dump_outcome(outcome) == SAMPLE_ANALYSIS


def test_parse_outcome_keeps_free_text_labels_and_unclamped_values() -> None:
    payload = analysis_payload(
        pyramidScore={
            "overall": 140,
            "proteinQuality": "superb!!",
            "vegetableScore": "",
            "grainQuality": "refined, sadly",
        },
        macroEstimate={"protein": 50, "carbs": 50, "fats": 50},
        kidFriendlyScore={"emoji": "🥦", "message": "Yum", "stars": 9},
    )

    outcome = parse_outcome(payload)

    assert isinstance(outcome, AnalysisResult)
    assert outcome.pyramid_score.overall == 140
    assert outcome.pyramid_score.grain_quality == "refined, sadly"
    assert outcome.kid_friendly_score.stars == 9
    assert outcome.macro_estimate.fats == 50


def test_parse_outcome_duplicates_are_allowed() -> None:
    outcome = parse_outcome(analysis_payload(foodItems=["egg", "egg"]))

    assert isinstance(outcome, AnalysisResult)
    assert outcome.food_items == ["egg", "egg"]


def test_parse_outcome_error_and_raw() -> None:
    assert parse_outcome({"error": "x"}) == AnalysisError(error="x")
    assert parse_outcome({"rawResponse": "y"}) == RawAnalysis(raw_response="y")


def test_parse_outcome_unexpected_shape_is_raw_json() -> None:
    outcome = parse_outcome({"foods": ["pasta"]})

    assert outcome == RawAnalysis(raw_response='{"foods": ["pasta"]}')


def test_parse_outcome_accepts_fractional_stars() -> None:
    payload = analysis_payload(
        kidFriendlyScore={"emoji": "🥕", "message": "Crunchy!", "stars": 4.5}
    )

    outcome = parse_outcome(payload)

    assert isinstance(outcome, AnalysisResult)
    assert outcome.kid_friendly_score.stars == 4.5


def test_parse_outcome_only_needs_food_items() -> None:
    outcome = parse_outcome({"foodItems": ["oatmeal", "berries"]})

    assert isinstance(outcome, AnalysisResult)
    assert outcome.food_items == ["oatmeal", "berries"]
    assert outcome.pyramid_score.overall == 0
    assert outcome.pyramid_score.protein_quality == ""
    assert outcome.feedback.strengths == []
    assert outcome.kid_friendly_score.emoji == ""


def test_parse_outcome_null_sections_use_defaults() -> None:
    outcome = parse_outcome(
        analysis_payload(kidFriendlyScore=None, pyramidScore={"overall": None})
    )

    assert isinstance(outcome, AnalysisResult)
    assert outcome.kid_friendly_score.stars == 0
    assert outcome.pyramid_score.overall == 0
