import pytest
from pydantic import ValidationError

from app.domain.enums import Gender, Season, SubSeason
from app.domain.models import ClassificationResult, ClassifyOutcome, RecommendedColor


@pytest.mark.parametrize("raw", ["Spring", "spring", " SPRING ", Season.spring])
def test_season_parse_any_casing(raw):
    assert Season.parse(raw) is Season.spring


def test_season_fall_alias_and_db_value():
    assert Season.parse("fall") is Season.autumn
    assert Season.autumn.db_value == "autumn"


def test_season_parse_unknown():
    with pytest.raises(ValueError):
        Season.parse("monsoon")


@pytest.mark.parametrize("raw", ["Light Spring", "light spring", "light-spring", "LIGHT_SPRING"])
def test_sub_season_parse(raw):
    assert SubSeason.parse(raw) is SubSeason.light_spring


def test_sub_season_knows_its_season():
    assert SubSeason.bright_winter.season is Season.winter
    assert SubSeason.soft_autumn.season is Season.autumn
    assert SubSeason.parse("Soft Fall") is SubSeason.soft_autumn
    assert len(SubSeason) == 12
    for season in Season:
        assert len(SubSeason.for_season(season)) == 3


def test_gender_parse():
    assert Gender.parse("Male") is Gender.male
    with pytest.raises(ValueError):
        Gender.parse("unknown")


def test_recommended_color_hex_uppercased():
    c = RecommendedColor(name="Peach", hex="#ffdab9", reason="r")
    assert c.hex == "#FFDAB9"


@pytest.mark.parametrize("bad_hex", ["FFDAB9", "#FFF", "#GGGGGG", "#FFDAB9 "])
def test_recommended_color_rejects_bad_hex(bad_hex):
    with pytest.raises(ValidationError):
        RecommendedColor(name="x", hex=bad_hex, reason="r")


def test_classification_result_from_wire_payload(light_spring_payload):
    result = ClassificationResult.model_validate(light_spring_payload)
    assert result.season is Season.spring
    assert result.sub_season is SubSeason.light_spring
    assert result.gender is Gender.female
    assert [c.hex for c in result.recommended_colors] == ["#FF6F61", "#FFDAB9", "#A8E6CF"]


def test_classification_result_requires_exactly_three_colors(light_spring_payload):
    light_spring_payload["recommendedColors"] = light_spring_payload["recommendedColors"][:2]
    with pytest.raises(ValidationError):
        ClassificationResult.model_validate(light_spring_payload)


def test_classification_result_rejects_mismatched_sub_season(light_spring_payload):
    light_spring_payload["subseason"] = "Dark Winter"
    with pytest.raises(ValidationError):
        ClassificationResult.model_validate(light_spring_payload)


@pytest.mark.parametrize("second_hex", ["#FF6F61", "#ff6f61"])
def test_classification_result_rejects_repeated_hex(light_spring_payload, second_hex):
    light_spring_payload["recommendedColors"][1]["hex"] = second_hex
    with pytest.raises(ValidationError):
        ClassificationResult.model_validate(light_spring_payload)


def test_classify_outcome_tags():
    failed = ClassifyOutcome.failure("schema_invalid", "x" * 1000)
    assert not failed.ok
    assert failed.result is None
    assert len(failed.error_message) == 500
