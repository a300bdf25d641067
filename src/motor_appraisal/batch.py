from __future__ import annotations

import logging
from typing import Any

import pandas as pd

from motor_appraisal.config import DEFAULT_CONFIG, ValuationConfig
from motor_appraisal.engine import current_year, evaluate
from motor_appraisal.normalization import normalize_input

logger = logging.getLogger(__name__)

RESULT_COLUMNS: tuple[str, ...] = (
    "age",
    "age_dep",
    "mileage_dep",
    "condition_factor",
    "accident_penalty",
    "mod_adj",
    "service_bonus",
    "total_dep",
    "estimated_price",
)


def condition_columns(config: ValuationConfig = DEFAULT_CONFIG) -> list[str]:
    return [f"condition_{item}" for item in config.condition_items]


def _row_payload(row: dict[str, Any], item_columns: list[str]) -> dict[str, Any]:
    payload = {k: v for k, v in row.items() if v is not None}
    if "condition" not in payload:
        present = [c for c in item_columns if c in row]
        if present:
            payload["condition"] = [row.get(c) for c in item_columns]
    return payload


def evaluate_frame(
    df: pd.DataFrame,
    as_of_year: int | None = None,
    *,
    strict: bool = False,
    config: ValuationConfig = DEFAULT_CONFIG,
) -> pd.DataFrame:
    """Value every row of ``df`` with the single-vehicle engine.

    The checklist is read from a ``condition`` column when present, otherwise
    from the per-item ``condition_<item>`` columns. Result columns are appended
    to a copy of the frame; the caller's frame is left untouched.
    """
    if as_of_year is None:
        as_of_year = current_year()

    frame = df.copy()
    item_columns = condition_columns(config)
    records = frame.astype(object).where(frame.notna(), None).to_dict(orient="records")

    results = []
    for row in records:
        valuation_input = normalize_input(_row_payload(row, item_columns), as_of_year, strict=strict, config=config)
        results.append(evaluate(valuation_input, as_of_year=as_of_year, config=config).to_dict())

    result_frame = pd.DataFrame(results, index=frame.index, columns=["base", *RESULT_COLUMNS])
    for column in RESULT_COLUMNS:
        frame[column] = result_frame[column]
    logger.info("Valued %d vehicles as of %d", len(frame), as_of_year)
    return frame
