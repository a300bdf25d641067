from __future__ import annotations

import logging
import time
from collections import defaultdict
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from appraisal_service.logging_config import configure_logging, correlation_id, get_correlation_id, log_with_data
from appraisal_service.report import build_report, render_text, report_filename
from appraisal_service.settings import ServiceSettings
from motor_appraisal.data_models import ValuationInput, ValuationResult, VehicleDescription
from motor_appraisal.engine import current_year, evaluate_raw
from motor_appraisal.errors import InvalidInput

logger = logging.getLogger(__name__)

_ENGINE_FIELDS = {"year", "mileage", "market_price", "condition", "accident", "modifications", "full_service"}


# ── Request / Response Models ───────────────────────────────────────

class AppraiseRequest(BaseModel):
    """Form payload. Scalars stay loosely typed; the engine's normalizer coerces them."""

    model_config = ConfigDict(populate_by_name=True)

    brand: str = ""
    model: str = ""
    notes: str = ""
    year: Any = None
    mileage: Any = None
    market_price: Any = Field(default=None, alias="marketPrice")
    condition: Any = None
    accident: Any = None
    modifications: Any = None
    full_service: Any = Field(default=None, alias="fullService")

    def engine_payload(self) -> dict[str, Any]:
        return self.model_dump(include=_ENGINE_FIELDS, exclude_unset=True)

    def vehicle(self) -> VehicleDescription:
        return VehicleDescription(brand=self.brand, model=self.model, notes=self.notes)


class NormalizedInput(BaseModel):
    year: int
    mileage: float
    market_price: float
    condition: list[int]
    accident: str
    modifications: str
    full_service: str


class ValuationBreakdown(BaseModel):
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


class AppraiseResponse(BaseModel):
    as_of_year: int
    input: NormalizedInput
    result: ValuationBreakdown
    display: dict[str, Any]


class HealthResponse(BaseModel):
    status: str


# ── In-process Metrics ──────────────────────────────────────────────

_counters: dict[str, int] = defaultdict(int)
_latencies: dict[str, list[float]] = defaultdict(list)


def _observe(name: str, seconds: float) -> None:
    _latencies[name].append(seconds)
    _counters[f"{name}_count"] += 1


def _latency_summary(name: str) -> dict[str, Any]:
    values = sorted(_latencies.get(name, []))
    if not values:
        return {"count": 0, "p50_ms": 0, "p95_ms": 0}
    n = len(values)
    return {
        "count": n,
        "p50_ms": round(values[n // 2] * 1000, 3),
        "p95_ms": round(values[min(int(n * 0.95), n - 1)] * 1000, 3),
    }


# ── App Factory ─────────────────────────────────────────────────────

def create_app() -> FastAPI:
    settings = ServiceSettings()
    configure_logging(level=settings.log_level, fmt=settings.log_format)

    app = FastAPI(title="Used Motor Vehicle Valuation API", version="1.0.0")

    def _value(body: AppraiseRequest, strict: bool | None, as_of_year: int | None) -> tuple[int, ValuationInput, ValuationResult]:
        t0 = time.monotonic()
        if as_of_year is not None:
            year = as_of_year
        elif settings.valuation_as_of_year is not None:
            year = settings.valuation_as_of_year
        else:
            year = current_year()
        use_strict = settings.strict_validation if strict is None else strict
        valuation_input, result = evaluate_raw(body.engine_payload(), as_of_year=year, strict=use_strict)
        _observe("appraise", time.monotonic() - t0)
        _counters["valuations"] += 1
        if result.total_dep >= 90.0:
            _counters["valuations_at_floor"] += 1
        log_with_data(
            logger,
            logging.INFO,
            "Valued vehicle",
            as_of_year=year,
            strict=use_strict,
            total_dep=result.total_dep,
            estimated_price=result.estimated_price,
        )
        return year, valuation_input, result

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next: Any) -> Response:
        # a fresh id per request unless the caller supplied one
        correlation_id.set(request.headers.get("X-Correlation-ID", ""))
        cid = get_correlation_id()
        response = await call_next(request)
        response.headers["X-Correlation-ID"] = cid
        return response

    @app.exception_handler(InvalidInput)
    async def invalid_input_handler(_: Request, exc: InvalidInput) -> JSONResponse:
        _counters["rejections"] += 1
        logger.warning("Rejected valuation input: %s", exc)
        return JSONResponse(status_code=422, content={"detail": {"field": exc.field, "message": exc.message}})

    # ── Valuation ───────────────────────────────────────────────────

    @app.post("/appraise", response_model=AppraiseResponse)
    async def appraise(body: AppraiseRequest, strict: bool | None = None, as_of_year: int | None = None) -> AppraiseResponse:
        year, valuation_input, result = _value(body, strict, as_of_year)
        return AppraiseResponse(
            as_of_year=year,
            input=NormalizedInput(**valuation_input.to_dict()),
            result=ValuationBreakdown(**result.to_dict()),
            display=result.as_breakdown(),
        )

    @app.post("/appraise/report")
    async def appraise_report(
        body: AppraiseRequest, strict: bool | None = None, as_of_year: int | None = None,
    ) -> JSONResponse:
        _, valuation_input, result = _value(body, strict, as_of_year)
        vehicle = body.vehicle()
        report = build_report(valuation_input, result, vehicle=vehicle)
        return JSONResponse(
            content=report,
            headers={"Content-Disposition": f'attachment; filename="{report_filename(vehicle)}"'},
        )

    @app.post("/appraise/print", response_class=PlainTextResponse)
    async def appraise_print(
        body: AppraiseRequest, strict: bool | None = None, as_of_year: int | None = None,
    ) -> PlainTextResponse:
        _, valuation_input, result = _value(body, strict, as_of_year)
        return PlainTextResponse(render_text(valuation_input, result, vehicle=body.vehicle()))

    # ── Health / Metrics ────────────────────────────────────────────

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/metrics")
    async def get_metrics() -> dict[str, Any]:
        return {
            "counters": dict(_counters),
            "appraise_latency": _latency_summary("appraise"),
        }

    return app


app = create_app()
