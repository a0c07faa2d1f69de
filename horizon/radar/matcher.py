"""
Release note search and matching.

Two model calls: a search-grounded call that finds recent release notes for
the customer's top services, then a schema-constrained call that scores
each note against the billed SKUs.
"""

import json
import logging
import time
from typing import Callable, Optional

from pydantic import ValidationError

from horizon.ai.base import BaseAIClient
from horizon.config.settings import MATCH_TOP_SKUS, RELEASE_NOTES_URL
from horizon.exceptions import AIResponseError, HorizonError
from horizon.inventory.models import InventoryItem, service_keywords, top_items
from horizon.radar.models import ReleaseNote, is_relevant

logger = logging.getLogger(__name__)

MATCHED_NOTES_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "title": {"type": "STRING"},
            "date": {"type": "STRING"},
            "service": {"type": "STRING"},
            "summary": {"type": "STRING"},
            "url": {"type": "STRING"},
            "matchScore": {"type": "NUMBER"},
        },
        "required": ["title", "date", "service", "summary", "url", "matchScore"],
    },
}


def build_search_prompt(items: list[InventoryItem]) -> str:
    keywords = ", ".join(service_keywords(items))
    return (
        f"Find OCI Release Notes from {RELEASE_NOTES_URL} for these services: {keywords}.\n"
        "Return the 5 most recent updates from the last 30 days. "
        "Include Title, Date, Service, Summary, and URL."
    )


def build_match_prompt(items: list[InventoryItem], raw_notes: str) -> str:
    footprint = json.dumps([i.description for i in items])
    return (
        f"Map these release notes to this customer footprint: {footprint}.\n"
        f"Notes: {raw_notes}\n"
        "Return a JSON array of matched notes with a matchScore (0-100)."
    )


def _to_notes(results: list, stamp: int) -> list[ReleaseNote]:
    notes = []
    for idx, raw in enumerate(results):
        if not isinstance(raw, dict):
            continue
        try:
            note = ReleaseNote.model_validate({**raw, "id": f"live-{idx}-{stamp}"})
        except ValidationError as e:
            logger.warning("Dropping malformed note %d: %s", idx, e.error_count())
            continue
        note.is_relevant = is_relevant(note.match_score)
        notes.append(note)
    return notes


def summarize_and_match(
    client: BaseAIClient,
    current_notes: list[ReleaseNote],
    items: list[InventoryItem],
    top_n: int = MATCH_TOP_SKUS,
    on_mapping: Optional[Callable[[], None]] = None,
) -> tuple[list[ReleaseNote], list[dict]]:
    """
    Find release notes for the inventory and score them.

    Returns (notes, grounding_sources). On any AI failure the current notes
    come back unchanged with no grounding sources.
    """
    if not items:
        return list(current_notes), []

    top = top_items(items, top_n)

    try:
        raw_notes = client.generate(build_search_prompt(top), search=True)
        sources = list(client.last_grounding_sources)
        if on_mapping is not None:
            on_mapping()
        results = client.generate_json(build_match_prompt(top, raw_notes), schema=MATCHED_NOTES_SCHEMA)
        if not isinstance(results, list):
            raise AIResponseError(f"Match reply was a {type(results).__name__}, expected a list")
    except HorizonError as e:
        logger.error("Release note matching failed: %s", e)
        return list(current_notes), []

    notes = _to_notes(results, int(time.time() * 1000))
    logger.info("Matched %d release notes (%d relevant)", len(notes), sum(n.is_relevant for n in notes))
    return notes, sources


def best_match(notes: list[ReleaseNote]) -> Optional[ReleaseNote]:
    scored = [n for n in notes if n.match_score is not None]
    return max(scored, key=lambda n: n.match_score) if scored else None
