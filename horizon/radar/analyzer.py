"""
Analyzer - the search, match and insight pipeline over one inventory.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from horizon.ai.base import BaseAIClient
from horizon.config.settings import DEFAULT_CUSTOMER
from horizon.exceptions import HorizonError
from horizon.inventory.models import InventoryItem
from horizon.radar.digest import generate_email_digest
from horizon.radar.insights import generate_insights
from horizon.radar.matcher import summarize_and_match
from horizon.radar.models import PLACEHOLDER_NOTES, AnalysisReport, AnalysisStep, ReleaseNote

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[AnalysisStep], None]


class Analyzer:
    """Runs release note matching and insight synthesis for an inventory."""

    def __init__(
        self,
        client: BaseAIClient,
        on_step: Optional[ProgressCallback] = None,
    ):
        self.client = client
        self.on_step = on_step
        self.notes: list[ReleaseNote] = list(PLACEHOLDER_NOTES)
        self.steps: list[AnalysisStep] = []

    def _advance(self, report: AnalysisReport, step: AnalysisStep) -> None:
        report.step = step
        self.steps.append(step)
        logger.debug("Analysis step: %s", step.value)
        if self.on_step is not None:
            self.on_step(step)

    def run(self, items: list[InventoryItem]) -> AnalysisReport:
        """
        Analyze an inventory snapshot.

        Each run replaces the previous notes; nothing is merged across runs.
        Matching and insight failures degrade to their fallbacks, so the
        report only carries an error for unexpected failures.
        """
        report = AnalysisReport(generated_at=datetime.now(), inventory=list(items))

        try:
            self._advance(report, AnalysisStep.SEARCHING)
            notes, sources = summarize_and_match(
                self.client,
                self.notes,
                report.inventory,
                on_mapping=lambda: self._advance(report, AnalysisStep.MAPPING),
            )
            report.notes = notes
            report.grounding_sources = sources
            self.notes = notes

            self._advance(report, AnalysisStep.INSIGHTS)
            report.insights = generate_insights(self.client, notes, report.inventory)

            self._advance(report, AnalysisStep.COMPLETE)
        except HorizonError as e:
            logger.error("Intelligence sync failed: %s", e)
            report.error = "Intelligence sync failed"
            self._advance(report, AnalysisStep.IDLE)

        return report

    def draft_digest(self, report: AnalysisReport, customer_name: str = DEFAULT_CUSTOMER) -> str:
        """Draft the email digest for a finished report."""
        return generate_email_digest(
            self.client,
            report.relevant_notes,
            customer_name,
            report.insights,
        )
