import pytest

from motor_appraisal.errors import InvalidInput
from motor_appraisal.normalization import normalize_input

AS_OF = 2026


def test_missing_fields_take_defaults():
    rec = normalize_input({}, AS_OF)
    assert rec.year == AS_OF
    assert rec.mileage == 0.0
    assert rec.market_price == 0.0
    assert rec.condition == (0, 0, 0, 0, 0)
    assert (rec.accident, rec.modifications, rec.full_service) == ("no", "none", "no")


@pytest.mark.parametrize("year", [None, "", "abc", 0, True, float("nan")])
def test_invalid_year_falls_back_to_as_of_year(year):
    assert normalize_input({"year": year}, AS_OF).year == AS_OF


def test_numeric_strings_are_accepted():
    rec = normalize_input({"year": " 2018 ", "mileage": "12500.5", "market_price": "9000"}, AS_OF)
    assert rec.year == 2018
    assert rec.mileage == 12500.5
    assert rec.market_price == 9000.0


@pytest.mark.parametrize("value", ["lots", None, "", [], float("inf")])
def test_non_numeric_mileage_and_price_become_zero(value):
    rec = normalize_input({"mileage": value, "marketPrice": value}, AS_OF)
    assert rec.mileage == 0.0
    assert rec.market_price == 0.0


def test_negative_amounts_clamp_to_zero():
    rec = normalize_input({"mileage": -500, "market_price": -1}, AS_OF)
    assert rec.mileage == 0.0
    assert rec.market_price == 0.0


def test_camel_and_snake_keys():
    camel = normalize_input({"marketPrice": 10, "fullService": "yes"}, AS_OF)
    snake = normalize_input({"market_price": 10, "full_service": "yes"}, AS_OF)
    assert camel == snake


def test_short_checklist_is_padded_with_zeros():
    assert normalize_input({"condition": [2, 2]}, AS_OF).condition == (2, 2, 0, 0, 0)


def test_long_checklist_is_truncated():
    assert normalize_input({"condition": [1, 1, 1, 1, 1, 2, 2]}, AS_OF).condition == (1, 1, 1, 1, 1)


def test_checklist_scores_are_clamped_and_coerced():
    rec = normalize_input({"condition": [5, -3, "x", None, 1.7]}, AS_OF)
    assert rec.condition == (2, 0, 0, 0, 1)


def test_checklist_that_is_not_a_sequence_scores_zero():
    assert normalize_input({"condition": "22222"}, AS_OF).condition == (0, 0, 0, 0, 0)
    assert normalize_input({"condition": 7}, AS_OF).condition == (0, 0, 0, 0, 0)


def test_enums_match_exactly():
    rec = normalize_input({"accident": "YES", "modifications": "huge", "full_service": 1}, AS_OF)
    assert rec.accident == "no"
    assert rec.modifications == "none"
    assert rec.full_service == "no"


def test_input_mapping_is_not_mutated():
    raw = {"year": "2020", "condition": [2, 2]}
    normalize_input(raw, AS_OF)
    assert raw == {"year": "2020", "condition": [2, 2]}


# ── Strict Mode ─────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "raw,field",
    [
        ({"year": "soon"}, "year"),
        ({"year": -4}, "year"),
        ({"mileage": -1}, "mileage"),
        ({"mileage": "far"}, "mileage"),
        ({"marketPrice": -100}, "market_price"),
        ({"condition": [2, 2, 3, 2, 2]}, "condition"),
        ({"condition": [2, 2, 1.5, 2, 2]}, "condition"),
        ({"condition": [2, 2, 2, 2, 2, 2]}, "condition"),
        ({"condition": "22222"}, "condition"),
    ],
)
def test_strict_mode_names_offending_field(raw, field):
    with pytest.raises(InvalidInput) as excinfo:
        normalize_input(raw, AS_OF, strict=True)
    assert excinfo.value.field == field


def test_strict_mode_keeps_defaults_for_absent_fields():
    rec = normalize_input({"condition": [2, 1]}, AS_OF, strict=True)
    assert rec.year == AS_OF
    assert rec.condition == (2, 1, 0, 0, 0)


def test_strict_mode_does_not_validate_enums():
    assert normalize_input({"accident": "maybe"}, AS_OF, strict=True).accident == "no"
