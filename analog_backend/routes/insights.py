"""Insight route — FilterSpecification → prose design note."""

from fastapi import APIRouter
from starlette.concurrency import run_in_threadpool

from analog_backend.ai.insights import FALLBACK_INSIGHT, generate_filter_insights
from analog_backend.models import FilterSpecModel, InsightResponse

router = APIRouter()


@router.post("/insights", response_model=InsightResponse)
async def insights_endpoint(request: FilterSpecModel):
    """Generate an AI design note. Always answers 200; failures use the fallback text."""
    text = await run_in_threadpool(generate_filter_insights, request.to_spec())
    return InsightResponse(insights=text, fallback=text == FALLBACK_INSIGHT)
