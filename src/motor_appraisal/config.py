from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class ValuationConfig:
    age_rate: float = 0.05  # per year of age
    mileage_step_km: int = 10_000
    mileage_rate: float = 0.015  # per full step
    condition_weight: float = 0.2
    condition_max_score: int = 2
    condition_items: tuple[str, ...] = ("engine", "suspension", "tires", "body_paint", "electrical")
    accident_penalty: float = 0.12
    service_bonus: float = 0.03
    min_total_dep: float = 0.0
    max_total_dep: float = 0.9
    modification_adjustments: Dict[str, float] = field(
        default_factory=lambda: {
            "none": 0.0,
            "minor": 0.02,
            "major": -0.08,
        }
    )

    @property
    def condition_max_sum(self) -> int:
        return self.condition_max_score * len(self.condition_items)


DEFAULT_CONFIG = ValuationConfig()
