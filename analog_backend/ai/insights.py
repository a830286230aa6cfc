"""Natural-language design notes from the Anthropic API.

The insight generator is an optional collaborator: any failure degrades to
FALLBACK_INSIGHT and never affects simulation or synthesis results.
"""

import logging
import os
from typing import Optional

from anthropic import Anthropic

from analog_backend.ai.prompts import INSIGHT_SYSTEM, build_insight_messages
from analog_engine.models import FilterSpecification

logger = logging.getLogger(__name__)

FALLBACK_INSIGHT = "Unable to generate AI insights at this time."

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
MAX_TOKENS = 1200

client: Optional[Anthropic] = None


class InsightUnavailable(RuntimeError):
    """Raised internally when the insight service cannot be reached."""


def get_client() -> Anthropic:
    global client
    if client is None:
        api_key = os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            raise InsightUnavailable("ANTHROPIC_API_KEY not configured")
        client = Anthropic(api_key=api_key)
    return client


def request_insights(spec: FilterSpecification, ai_client: Optional[Anthropic] = None) -> str:
    """
    Ask the model for a design note. Raises on any failure.

    Args:
        spec: Specification to describe.
        ai_client: Client to use; defaults to the lazily created module client.

    Returns:
        The note text.
    """
    ai_client = ai_client or get_client()
    response = ai_client.messages.create(
        model=os.getenv("INSIGHT_MODEL", DEFAULT_MODEL),
        max_tokens=MAX_TOKENS,
        system=INSIGHT_SYSTEM,
        messages=build_insight_messages(spec),
    )

    text = "".join(
        block.text for block in response.content if getattr(block, "type", "text") == "text"
    ).strip()
    if not text:
        raise InsightUnavailable("Empty insight response")
    return text


def generate_filter_insights(spec: FilterSpecification, ai_client: Optional[Anthropic] = None) -> str:
    """Design note for `spec`, or FALLBACK_INSIGHT if the service fails."""
    try:
        return request_insights(spec, ai_client)
    except Exception:
        logger.warning("Insight generation failed, using fallback", exc_info=True)
        return FALLBACK_INSIGHT
