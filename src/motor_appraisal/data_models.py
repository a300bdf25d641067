from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Literal


AccidentHistory = Literal["yes", "no"]
Modifications = Literal["none", "minor", "major"]
ServiceHistory = Literal["yes", "no"]
ConditionChecklist = tuple[int, int, int, int, int]

CHECKLIST_LENGTH = 5

PERCENT_FIELDS: tuple[str, ...] = (
    "age_dep",
    "mileage_dep",
    "accident_penalty",
    "mod_adj",
    "service_bonus",
    "total_dep",
)


@dataclass(frozen=True)
class ValuationInput:
    year: int
    mileage: float = 0.0
    market_price: float = 0.0
    condition: ConditionChecklist = (0, 0, 0, 0, 0)
    accident: AccidentHistory = "no"
    modifications: Modifications = "none"
    full_service: ServiceHistory = "no"

    def __post_init__(self) -> None:
        if len(self.condition) != CHECKLIST_LENGTH:
            raise ValueError(f"condition must have exactly {CHECKLIST_LENGTH} entries, got {len(self.condition)}")

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["condition"] = list(self.condition)
        return payload


@dataclass(frozen=True)
class VehicleDescription:
    """Free-text details from the entry form. Never read by the engine."""

    brand: str = ""
    model: str = ""
    notes: str = ""


@dataclass(frozen=True)
class ValuationResult:
    base: float
    age: int
    age_dep: float
    mileage_dep: float
    condition_factor: float
    accident_penalty: float
    mod_adj: float
    service_bonus: float
    total_dep: float
    estimated_price: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def as_breakdown(self) -> dict[str, Any]:
        """Presentation form: percentage fields become labelled strings such as ``"25.00%"``."""
        breakdown = self.to_dict()
        for name in PERCENT_FIELDS:
            breakdown[name] = format_percent(breakdown[name])
        return breakdown


def format_percent(value: float) -> str:
    return f"{value:.2f}%"
