"""
Strategic insight synthesis.
"""

import json
import logging

from pydantic import ValidationError

from horizon.ai.base import BaseAIClient
from horizon.config.settings import INSIGHT_COUNT, INSIGHT_TOP_ITEMS
from horizon.exceptions import HorizonError
from horizon.inventory.models import InventoryItem
from horizon.radar.models import Impact, InsightType, ReleaseNote, StrategicInsight

logger = logging.getLogger(__name__)

INSIGHTS_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "type": {"type": "STRING", "enum": [t.value for t in InsightType]},
            "title": {"type": "STRING"},
            "description": {"type": "STRING"},
            "impact": {"type": "STRING", "enum": [i.value for i in Impact]},
            "actionLabel": {"type": "STRING"},
            "savings": {"type": "STRING"},
        },
        "required": ["type", "title", "description", "impact", "actionLabel"],
    },
}


def build_insights_prompt(notes: list[ReleaseNote], items: list[InventoryItem]) -> str:
    titles = json.dumps([n.title for n in notes[:INSIGHT_TOP_ITEMS]])
    footprint = json.dumps([i.description for i in items[:INSIGHT_TOP_ITEMS]])
    return (
        f"Based on OCI Release Notes: {titles}\n"
        f"And Customer Footprint: {footprint}\n"
        f"Provide {INSIGHT_COUNT} strategic architectural insights (cost, optimization, security)."
    )


def generate_insights(
    client: BaseAIClient,
    notes: list[ReleaseNote],
    items: list[InventoryItem],
) -> list[StrategicInsight]:
    """Ask the model for insight cards. Returns [] when there is nothing to go on or the call fails."""
    if not notes or not items:
        return []

    try:
        results = client.generate_json(build_insights_prompt(notes, items), schema=INSIGHTS_SCHEMA)
    except HorizonError as e:
        logger.error("Insight generation failed: %s", e)
        return []

    if not isinstance(results, list):
        return []

    insights = []
    for raw in results:
        try:
            insights.append(StrategicInsight.model_validate(raw))
        except ValidationError as e:
            logger.warning("Dropping malformed insight: %s", e.error_count())
    return insights
