"""Tests for data models."""

import pytest
from pydantic import ValidationError as SchemaError

from brandbible.models import (
    ColorInfo,
    ErrorDetail,
    FontPair,
    GenerationRun,
    PipelineStage,
    RunStatus,
)
from brandbible.models.schemas import CRITICAL_FAILURE_MESSAGE
from brandbible.utils.errors import CriticalGenerationFailure, PartialGenerationFailure


def test_bible_parses_camel_case(sample_bible):
    assert sample_bible.brand_name == "Threadleaf"
    assert sample_bible.logo_descriptions.favicon == "A single simplified leaf"
    assert sample_bible.harmonies[0].palette[0].hex == "#4F772D"


def test_bible_is_immutable(sample_bible):
    with pytest.raises(SchemaError):
        sample_bible.brand_name = "Other"


def test_with_palette_revalidates(sample_bible):
    palette = [c.model_copy(update={"name": f"Colour {i}"}) for i, c in enumerate(sample_bible.palette)]

    edited = sample_bible.with_palette(palette)

    assert edited.palette[0].name == "Colour 0"
    assert sample_bible.palette[0].name == "Forest Floor"

    with pytest.raises(SchemaError):
        sample_bible.with_palette(palette[:3])


def test_with_fonts(sample_bible):
    edited = sample_bible.with_fonts(FontPair(header="Lora", body="Inter", notes="Classic"))

    assert edited.fonts.header == "Lora"
    assert sample_bible.fonts.header == "Fraunces"


@pytest.mark.parametrize("hex_code", ["#FFF", "123456", "#GGGGGG"])
def test_invalid_hex_rejected(hex_code):
    with pytest.raises(SchemaError):
        ColorInfo(hex=hex_code, name="Bad", usage="None")


def test_clean_run_has_empty_report():
    run = GenerationRun(run_id=1, mission="m")

    assert run.error_report == ""
    run.raise_for_status()


def test_failed_run_reports_critical_message():
    run = GenerationRun(
        run_id=1,
        mission="m",
        status=RunStatus.FAILED,
        errors=[ErrorDetail(stage=PipelineStage.CRITICAL, message=CRITICAL_FAILURE_MESSAGE)],
    )

    assert run.error_report == CRITICAL_FAILURE_MESSAGE
    with pytest.raises(CriticalGenerationFailure):
        run.raise_for_status()


def test_partial_run_lists_each_stage():
    run = GenerationRun(
        run_id=1,
        mission="m",
        errors=[
            ErrorDetail(stage=PipelineStage.LOGOS_AND_VOICE, message="Logos failed."),
            ErrorDetail(stage=PipelineStage.VISUAL_ASSETS, message="Mood board failed."),
        ],
    )

    assert run.error_report == (
        "Some assets could not be generated: \n- Logos failed.\n- Mood board failed."
    )
    with pytest.raises(PartialGenerationFailure):
        run.raise_for_status()


def test_error_report_is_serialized():
    run = GenerationRun(run_id=3, mission="m")

    assert run.model_dump(mode="json")["error_report"] == ""
