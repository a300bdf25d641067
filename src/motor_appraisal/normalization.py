from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Mapping

from motor_appraisal.config import DEFAULT_CONFIG, ValuationConfig
from motor_appraisal.data_models import CHECKLIST_LENGTH, ValuationInput
from motor_appraisal.errors import InvalidInput

logger = logging.getLogger(__name__)

_MISSING = object()

# Accepted spellings for each field; the form sends camelCase, Python callers snake_case.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "year": ("year",),
    "mileage": ("mileage",),
    "market_price": ("market_price", "marketPrice"),
    "condition": ("condition",),
    "accident": ("accident",),
    "modifications": ("modifications",),
    "full_service": ("full_service", "fullService"),
}

_ENUM_DOMAINS: dict[str, tuple[tuple[str, ...], str]] = {
    "accident": (("yes", "no"), "no"),
    "modifications": (("none", "minor", "major"), "none"),
    "full_service": (("yes", "no"), "no"),
}


def _lookup(raw: Mapping[str, Any], name: str) -> Any:
    for key in FIELD_ALIASES[name]:
        if key in raw:
            return raw[key]
    return _MISSING


def _is_blank(value: Any) -> bool:
    if value is _MISSING or value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return isinstance(value, float) and math.isnan(value)


def _to_float(value: Any) -> float | None:
    if _is_blank(value) or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _year(value: Any, as_of_year: int, strict: bool) -> int:
    number = _to_float(value)
    if number is None:
        if strict and not _is_blank(value):
            raise InvalidInput("year", f"expected a model year, got {value!r}")
        logger.debug("year %r defaulted to %d", value, as_of_year)
        return as_of_year
    year = int(number)
    if year <= 0:
        if strict:
            raise InvalidInput("year", f"model year must be positive, got {value!r}")
        return as_of_year
    return year


def _non_negative(name: str, value: Any, strict: bool) -> float:
    number = _to_float(value)
    if number is None:
        if strict and not _is_blank(value):
            raise InvalidInput(name, f"expected a number, got {value!r}")
        if value is not _MISSING:
            logger.debug("%s %r coerced to 0", name, value)
        return 0.0
    if number < 0:
        if strict:
            raise InvalidInput(name, f"must not be negative, got {number}")
        logger.debug("%s %r clamped to 0", name, value)
        return 0.0
    return number


def _score(value: Any, max_score: int, strict: bool) -> int:
    number = _to_float(value)
    if strict:
        if number is None or not number.is_integer() or not 0 <= number <= max_score:
            raise InvalidInput("condition", f"checklist scores must be integers 0..{max_score}, got {value!r}")
        return int(number)
    if number is None:
        return 0
    return max(0, min(max_score, int(number)))


def _condition(value: Any, cfg: ValuationConfig, strict: bool) -> tuple[int, int, int, int, int]:
    if value is _MISSING or value is None:
        return (0,) * CHECKLIST_LENGTH  # type: ignore[return-value]
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        if strict:
            raise InvalidInput("condition", f"expected a list of {CHECKLIST_LENGTH} scores, got {value!r}")
        logger.debug("condition %r is not a checklist; scoring all items 0", value)
        return (0,) * CHECKLIST_LENGTH  # type: ignore[return-value]
    entries = list(value)
    if len(entries) > CHECKLIST_LENGTH:
        if strict:
            raise InvalidInput("condition", f"expected at most {CHECKLIST_LENGTH} scores, got {len(entries)}")
        entries = entries[:CHECKLIST_LENGTH]
    scores = [_score(v, cfg.condition_max_score, strict) for v in entries]
    scores.extend([0] * (CHECKLIST_LENGTH - len(scores)))
    return tuple(scores)  # type: ignore[return-value]


def _enum(name: str, value: Any) -> str:
    allowed, default = _ENUM_DOMAINS[name]
    if isinstance(value, str) and value in allowed:
        return value
    if value is not _MISSING:
        logger.debug("%s %r is not one of %s; using %r", name, value, allowed, default)
    return default


def normalize_input(
    raw: Mapping[str, Any],
    as_of_year: int,
    *,
    strict: bool = False,
    config: ValuationConfig = DEFAULT_CONFIG,
) -> ValuationInput:
    """Turn a loosely typed form payload into a ``ValuationInput``.

    Lenient mode never raises for scalar fields: anything non-numeric becomes 0
    (the as-of year for ``year``), negatives clamp to 0 and checklist scores
    clamp into range. Strict mode raises ``InvalidInput`` for the first bad
    field instead. Enum fields are matched exactly in both modes; unknown
    values fall back to their no-adjustment branch.
    """
    return ValuationInput(
        year=_year(_lookup(raw, "year"), as_of_year, strict),
        mileage=_non_negative("mileage", _lookup(raw, "mileage"), strict),
        market_price=_non_negative("market_price", _lookup(raw, "market_price"), strict),
        condition=_condition(_lookup(raw, "condition"), config, strict),
        accident=_enum("accident", _lookup(raw, "accident")),  # type: ignore[arg-type]
        modifications=_enum("modifications", _lookup(raw, "modifications")),  # type: ignore[arg-type]
        full_service=_enum("full_service", _lookup(raw, "full_service")),  # type: ignore[arg-type]
    )
