import pandas as pd
import pytest

from motor_appraisal.batch import RESULT_COLUMNS, evaluate_frame
from motor_appraisal.errors import InvalidInput

AS_OF = 2026


def test_evaluate_frame_with_condition_column():
    df = pd.DataFrame(
        [
            {"year": AS_OF - 5, "mileage": 45000, "marketPrice": 20_000_000, "condition": [2, 1, 2, 1, 2], "fullService": "yes"},
            {"year": AS_OF, "mileage": 0, "marketPrice": 15_000_000, "condition": [2, 2, 2, 2, 2]},
        ]
    )
    out = evaluate_frame(df, as_of_year=AS_OF)
    assert list(out["estimated_price"]) == [13_600_000, 15_000_000]
    assert list(out["total_dep"]) == [32.0, 0.0]
    assert set(RESULT_COLUMNS).issubset(out.columns)
    assert "estimated_price" not in df.columns


def test_evaluate_frame_with_per_item_columns():
    df = pd.DataFrame(
        {
            "year": [AS_OF - 1],
            "mileage": [9999],
            "market_price": [1000],
            "condition_engine": [2],
            "condition_suspension": [2],
            "condition_tires": [1],
            "condition_body_paint": [2],
            "condition_electrical": [1],
            "accident": ["yes"],
        }
    )
    out = evaluate_frame(df, as_of_year=AS_OF)
    row = out.iloc[0]
    assert row["condition_factor"] == 0.8
    assert row["mileage_dep"] == 0.0
    assert row["accident_penalty"] == 12.0
    # 0.05 + 0.04 + 0.12
    assert row["total_dep"] == pytest.approx(21.0)
    assert row["estimated_price"] == 790


def test_evaluate_frame_missing_values_use_defaults():
    df = pd.DataFrame({"year": [None], "mileage": [float("nan")], "market_price": [500.0]})
    out = evaluate_frame(df, as_of_year=AS_OF)
    assert out.iloc[0]["age"] == 0
    assert out.iloc[0]["estimated_price"] == 400


def test_evaluate_frame_strict_raises():
    df = pd.DataFrame({"year": [2020], "mileage": [-10], "market_price": [500.0]})
    with pytest.raises(InvalidInput):
        evaluate_frame(df, as_of_year=AS_OF, strict=True)


def test_evaluate_frame_preserves_index():
    df = pd.DataFrame({"market_price": [100, 200]}, index=["a", "b"])
    out = evaluate_frame(df, as_of_year=AS_OF)
    assert list(out.index) == ["a", "b"]
    assert out.loc["b", "estimated_price"] == 160
