import time
from typing import Any, Callable

from fastapi import APIRouter, Body, Depends, FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool

from app.rules.registry import RuleTable
from app.schemas.common import (
    ClientSummary,
    ExportRequest,
    ExportResponse,
    PerformanceResponse,
    RulesResponse,
    TaxComputationResponse,
    TaxComputeRequest,
)
from app.services.engine import TaxEngine, to_money_float
from app.services.export import export_table
from app.services.normalizer import DocumentNormalizer


router = APIRouter(prefix="/itr/v1", tags=["itr"])


def get_engine() -> TaxEngine:
    return TaxEngine()


def get_normalizer(engine: TaxEngine = Depends(get_engine)) -> DocumentNormalizer:
    return DocumentNormalizer(engine=engine)


def get_app(request: Request) -> FastAPI:
    return request.app


async def run_with_metrics(
    app: FastAPI,
    endpoint: str,
    operation: Callable,
) -> Any:
    start = time.perf_counter()
    status = "error"
    try:
        response = await run_in_threadpool(operation)
        status = "success"
        return response
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    finally:
        duration_ms = (time.perf_counter() - start) * 1000
        app.state.metrics_repo.save(endpoint=endpoint, duration_ms=duration_ms, status=status)


def _compute(engine: TaxEngine, payload: TaxComputeRequest) -> dict:
    result = engine.compute(
        payload.netIncome,
        age=payload.age,
        assessment_year=payload.assessmentYear,
        regime=payload.regime,
    )
    return {
        "assessmentYear": payload.assessmentYear,
        "regime": payload.regime,
        "appliedRule": result.rule_key,
        "ageBand": result.age_band.value,
        "fallbackApplied": result.fallback_applied,
        "taxAfterRebate": to_money_float(result.tax_after_rebate),
        "rebate": to_money_float(result.rebate),
        "cess": to_money_float(result.cess),
        "totalTax": to_money_float(result.total_tax),
    }


@router.post("/tax:compute", response_model=TaxComputationResponse)
async def compute_tax(
    payload: TaxComputeRequest,
    app: FastAPI = Depends(get_app),
    engine: TaxEngine = Depends(get_engine),
) -> TaxComputationResponse:
    result = await run_with_metrics(
        app,
        endpoint="tax:compute",
        operation=lambda: _compute(engine, payload),
    )
    return TaxComputationResponse.model_validate(result)


@router.post("/documents:normalize", response_model=ClientSummary)
async def normalize_document(
    payload: Any = Body(...),
    app: FastAPI = Depends(get_app),
    normalizer: DocumentNormalizer = Depends(get_normalizer),
) -> ClientSummary:
    return await run_with_metrics(
        app,
        endpoint="documents:normalize",
        operation=lambda: normalizer.normalize(payload),
    )


@router.post("/summaries:export", response_model=ExportResponse)
async def export_summaries(
    payload: ExportRequest,
    app: FastAPI = Depends(get_app),
) -> ExportResponse:
    result = await run_with_metrics(
        app,
        endpoint="summaries:export",
        operation=lambda: export_table(payload.summaries),
    )
    return ExportResponse.model_validate(result)


@router.get("/rules", response_model=RulesResponse)
async def list_rules(engine: TaxEngine = Depends(get_engine)) -> RulesResponse:
    rules: RuleTable = engine.rules
    return RulesResponse(rules=rules.available(), fallback=rules.fallback.key)


@router.get("/performance", response_model=PerformanceResponse)
async def get_performance(
    app: FastAPI = Depends(get_app),
) -> PerformanceResponse:
    try:
        data = app.state.metrics_repo.get_performance_snapshot()
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return PerformanceResponse.model_validate(data)
