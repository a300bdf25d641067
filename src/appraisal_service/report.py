"""Export and print rendering of a finished valuation.

Both outputs only format what the engine already computed; nothing here
recomputes depreciation.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from motor_appraisal.config import DEFAULT_CONFIG
from motor_appraisal.data_models import ValuationInput, ValuationResult, VehicleDescription, format_percent

logger = logging.getLogger(__name__)

_CHECKLIST_LABELS = {
    "engine": "Engine",
    "suspension": "Suspension",
    "tires": "Tires",
    "body_paint": "Body & paint",
    "electrical": "Electrical",
}
_SCORE_LABELS = {0: "poor", 1: "fair", 2: "good"}


def build_report(
    valuation_input: ValuationInput,
    result: ValuationResult,
    vehicle: VehicleDescription | None = None,
    created_at: datetime | None = None,
) -> dict[str, Any]:
    vehicle = vehicle or VehicleDescription()
    created_at = created_at or datetime.now(timezone.utc)
    return {
        "meta": {"created_at": created_at.isoformat()},
        "input": {
            "brand": vehicle.brand,
            "model": vehicle.model,
            "notes": vehicle.notes,
            **valuation_input.to_dict(),
        },
        "result": result.as_breakdown(),
    }


def report_filename(vehicle: VehicleDescription | None = None) -> str:
    vehicle = vehicle or VehicleDescription()
    brand = vehicle.brand.strip() or "motor"
    model = vehicle.model.strip() or "report"
    return f"{brand}_{model}.json".replace("/", "-")


def dump_report(report: dict[str, Any]) -> str:
    return json.dumps(report, indent=2, default=str)


def write_report(report: dict[str, Any], directory: str | Path) -> Path:
    section = report.get("input", {})
    vehicle = VehicleDescription(brand=section.get("brand") or "", model=section.get("model") or "")
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / report_filename(vehicle)
    path.write_text(dump_report(report), encoding="utf-8")
    logger.info("Wrote valuation report to %s", path)
    return path


def _number(value: float) -> str:
    return f"{value:.0f}"


def render_text(
    valuation_input: ValuationInput,
    result: ValuationResult,
    vehicle: VehicleDescription | None = None,
) -> str:
    vehicle = vehicle or VehicleDescription()
    title = " ".join(part for part in (vehicle.brand, vehicle.model) if part) or "Vehicle"
    breakdown = result.as_breakdown()
    lines = [
        "Used vehicle valuation",
        "=" * 22,
        f"{title} ({valuation_input.year})",
        f"Mileage: {_number(valuation_input.mileage)} km",
        f"Market price: {_number(result.base)}",
        f"Estimated resale price: {_number(result.estimated_price)}",
        "",
        "Condition checklist:",
    ]
    for item, score in zip(DEFAULT_CONFIG.condition_items, valuation_input.condition, strict=True):
        lines.append(f"  {_CHECKLIST_LABELS.get(item, item)}: {score} ({_SCORE_LABELS.get(score, '?')})")
    lines += [
        "",
        "Breakdown:",
        f"  Age: {result.age} year(s)",
        f"  Age depreciation: {breakdown['age_dep']}",
        f"  Mileage depreciation: {breakdown['mileage_dep']}",
        f"  Condition factor: {result.condition_factor:.2f}",
        f"  Value retained: {format_percent(100 - result.total_dep)}",
        f"  Accident penalty: {breakdown['accident_penalty']}",
        f"  Modification adjustment: {breakdown['mod_adj']}",
        f"  Service bonus: {breakdown['service_bonus']}",
        f"  Total depreciation: {breakdown['total_dep']}",
    ]
    if vehicle.notes.strip():
        lines += ["", f"Notes: {vehicle.notes.strip()}"]
    lines += ["", "This estimate is indicative only; adjust the market price for a more accurate result."]
    return "\n".join(lines) + "\n"
