from __future__ import annotations

import math
from datetime import date
from typing import Any, Mapping

from motor_appraisal.config import DEFAULT_CONFIG, ValuationConfig
from motor_appraisal.data_models import ValuationInput, ValuationResult
from motor_appraisal.normalization import normalize_input


def current_year() -> int:
    return date.today().year


def _amount(value: float) -> float:
    # records built by hand skip normalization; non-finite or negative amounts count as 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def _pct(fraction: float) -> float:
    return round(fraction * 100, 2)


def evaluate(
    valuation_input: ValuationInput,
    as_of_year: int | None = None,
    config: ValuationConfig = DEFAULT_CONFIG,
) -> ValuationResult:
    """Price a normalized input record.

    ``as_of_year`` is the year vehicle age is measured against; it defaults to
    the wall-clock year at call time. The estimate uses Python's ``round``
    (half-to-even), so an exact ``.5`` tie settles on the even integer.
    """
    if as_of_year is None:
        as_of_year = current_year()

    mileage = _amount(valuation_input.mileage)
    market_price = _amount(valuation_input.market_price)

    age = max(0, as_of_year - valuation_input.year)
    age_dep = config.age_rate * age
    mileage_dep = config.mileage_rate * math.floor(mileage / config.mileage_step_km)
    condition_factor = sum(valuation_input.condition) / config.condition_max_sum
    accident_penalty = config.accident_penalty if valuation_input.accident == "yes" else 0.0
    mod_adj = config.modification_adjustments.get(valuation_input.modifications, 0.0)
    service_bonus = config.service_bonus if valuation_input.full_service == "yes" else 0.0

    # mod_adj and service_bonus both reduce depreciation; a negative mod_adj adds to it
    total_dep = (
        age_dep
        + mileage_dep
        + (1 - condition_factor) * config.condition_weight
        + accident_penalty
        - mod_adj
        - service_bonus
    )
    total_dep = min(config.max_total_dep, max(config.min_total_dep, total_dep))

    estimated_price = max(0, int(round(market_price * (1 - total_dep))))

    return ValuationResult(
        base=market_price,
        age=age,
        age_dep=_pct(age_dep),
        mileage_dep=_pct(mileage_dep),
        condition_factor=round(condition_factor, 2),
        accident_penalty=_pct(accident_penalty),
        mod_adj=_pct(mod_adj),
        service_bonus=_pct(service_bonus),
        total_dep=_pct(total_dep),
        estimated_price=estimated_price,
    )


def evaluate_raw(
    raw: Mapping[str, Any],
    as_of_year: int | None = None,
    *,
    strict: bool = False,
    config: ValuationConfig = DEFAULT_CONFIG,
) -> tuple[ValuationInput, ValuationResult]:
    """Normalize a form payload, then price it.

    Strict validation runs to completion before any pricing step, so a rejected
    payload raises ``InvalidInput`` without a partial result.
    """
    if as_of_year is None:
        as_of_year = current_year()
    valuation_input = normalize_input(raw, as_of_year, strict=strict, config=config)
    return valuation_input, evaluate(valuation_input, as_of_year=as_of_year, config=config)
