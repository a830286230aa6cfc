"""Design routes — simulation and synthesis using the engine."""

import logging
import math

from fastapi import APIRouter, HTTPException
from starlette.concurrency import run_in_threadpool

from analog_backend.ai.insights import generate_filter_insights
from analog_backend.models import (
    BOMEntry,
    BOMRequest,
    BOMResponse,
    Component,
    DesignRequest,
    DesignResponse,
    FilterSpecModel,
    ResponseSample,
    ResponseSummary,
    SimulateResponse,
    StandardSeriesResponse,
    SynthesizeResponse,
)
from analog_engine.bom import (
    bom_summary,
    estimate_cost,
    export_csv,
    export_json,
    generate_bom,
    group_bom,
    total_cost,
)
from analog_engine.components import E_SERIES
from analog_engine.models import FilterSpecification, Topology
from analog_engine.simulation import response_summary, simulate_frequency_response
from analog_engine.synthesis import synthesize_components

router = APIRouter()

logger = logging.getLogger(__name__)


def _reference_db(spec: FilterSpecification) -> float:
    if spec.topology == Topology.ACTIVE:
        return 20 * math.log10(spec.gain_v_per_v)
    return 0.0


def _simulate(spec: FilterSpecification):
    samples = simulate_frequency_response(spec)
    summary = response_summary(samples, reference_db=_reference_db(spec))
    return (
        [ResponseSample(**s.to_dict()) for s in samples],
        ResponseSummary(**summary),
    )


def _synthesize(spec: FilterSpecification):
    components = synthesize_components(spec)
    return components, [Component(**c.to_dict()) for c in components]


@router.post("/simulate", response_model=SimulateResponse)
async def simulate_endpoint(request: FilterSpecModel):
    """Simulate insertion loss, return loss and phase across the sweep."""
    try:
        samples, summary = _simulate(request.to_spec())
        return SimulateResponse(samples=samples, summary=summary)
    except Exception:
        logger.error("Simulation failed", exc_info=True)
        raise HTTPException(status_code=400, detail="Simulation failed. Check the filter parameters.")


@router.post("/synthesize", response_model=SynthesizeResponse)
async def synthesize_endpoint(request: FilterSpecModel):
    """Synthesize standard-value components for the chosen topology."""
    try:
        components, models = _synthesize(request.to_spec())
        summary = bom_summary(components)
        summary.pop('display')
        return SynthesizeResponse(components=models, bom_summary=summary)
    except Exception:
        logger.error("Synthesis failed", exc_info=True)
        raise HTTPException(status_code=400, detail="Synthesis failed. Check the filter parameters.")


@router.post("/design", response_model=DesignResponse)
async def design_endpoint(request: DesignRequest):
    """Simulate and synthesize in one call, optionally with an AI design note."""
    spec = request.spec.to_spec()
    try:
        samples, summary = _simulate(spec)
        _, components = _synthesize(spec)
    except Exception:
        logger.error("Design calculation failed", exc_info=True)
        raise HTTPException(status_code=400, detail="Design failed. Check the filter parameters.")

    insights = None
    if request.include_insights:
        # Falls back to a fixed message; never fails the design
        insights = await run_in_threadpool(generate_filter_insights, spec)

    return DesignResponse(
        spec=request.spec,
        samples=samples,
        summary=summary,
        components=components,
        insights=insights,
    )


@router.post("/bom", response_model=BOMResponse)
async def bom_endpoint(request: BOMRequest):
    """Bill of materials for the synthesized components."""
    try:
        bom = generate_bom(synthesize_components(request.spec.to_spec()))
        if request.grouped:
            bom = group_bom(bom)
        return BOMResponse(
            entries=[BOMEntry(**entry) for entry in bom],
            total_cost=total_cost(bom),
            cost_estimate=estimate_cost(bom),
            csv=export_csv(bom),
            json_export=export_json(bom),
        )
    except Exception:
        logger.error("BOM generation failed", exc_info=True)
        raise HTTPException(status_code=400, detail="BOM generation failed. Check the filter parameters.")


@router.get("/standard-series/{name}", response_model=StandardSeriesResponse)
async def standard_series(name: str):
    """Base values of a standard E-series."""
    key = name.upper()
    if key not in E_SERIES:
        raise HTTPException(status_code=404, detail=f"Unknown series '{name}'. Available: {list(E_SERIES)}")
    return StandardSeriesResponse(name=key, values=list(E_SERIES[key]))
