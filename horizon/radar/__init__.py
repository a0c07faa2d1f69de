"""
Radar Module - Release note matching and insight synthesis

Find vendor release notes relevant to a billed inventory, turn them into
insight cards, and draft an email digest.
"""

from horizon.radar.analyzer import Analyzer
from horizon.radar.digest import generate_email_digest
from horizon.radar.insights import generate_insights
from horizon.radar.matcher import summarize_and_match
from horizon.radar.models import (
    AnalysisReport,
    AnalysisStep,
    EmailSchedule,
    ReleaseNote,
    StrategicInsight,
)

__all__ = [
    "Analyzer",
    "generate_email_digest",
    "generate_insights",
    "summarize_and_match",
    "AnalysisReport",
    "AnalysisStep",
    "EmailSchedule",
    "ReleaseNote",
    "StrategicInsight",
]
