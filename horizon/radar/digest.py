"""
HTML email digest drafting.
"""

import json
import logging

from horizon.ai.base import BaseAIClient
from horizon.config.settings import DEFAULT_CUSTOMER
from horizon.exceptions import HorizonError
from horizon.radar.models import ReleaseNote, StrategicInsight

logger = logging.getLogger(__name__)

SYNTHESIS_FAILED = "Synthesis failed."
GENERATION_ERROR = "Email generation error."


def build_digest_prompt(
    relevant_notes: list[ReleaseNote],
    customer_name: str,
    insights: list[StrategicInsight],
) -> str:
    prompt = (
        f"Generate a high-level OCI Strategy Email for {customer_name} "
        f"based on these insights: {json.dumps([i.title for i in insights])}."
    )
    if relevant_notes:
        prompt += f" Relevant release notes: {json.dumps([n.title for n in relevant_notes])}."
    return prompt + " Use HTML formatting."


def generate_email_digest(
    client: BaseAIClient,
    relevant_notes: list[ReleaseNote],
    customer_name: str = DEFAULT_CUSTOMER,
    insights: list[StrategicInsight] = (),
) -> str:
    """Draft the digest email as HTML."""
    prompt = build_digest_prompt(list(relevant_notes), customer_name, list(insights))
    try:
        text = client.generate(prompt)
    except HorizonError as e:
        logger.error("Email digest generation failed: %s", e)
        return GENERATION_ERROR
    return text or SYNTHESIS_FAILED
