"""
Data models for the release radar.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from horizon.config.settings import RELEASE_NOTES_URL, RELEVANCE_THRESHOLD
from horizon.inventory.models import InventoryItem


class InsightType(str, Enum):
    """Insight card categories."""
    OPTIMIZATION = "optimization"
    SECURITY = "security"
    ARCHITECTURE = "architecture"
    COST = "cost"
    GROWTH = "growth"


class Impact(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AnalysisStep(str, Enum):
    """Pipeline progress, in order."""
    IDLE = "idle"
    PARSING = "parsing"
    SEARCHING = "searching"
    MAPPING = "mapping"
    INSIGHTS = "insights"
    COMPLETE = "complete"


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class ReleaseNote(BaseModel):
    """A vendor release note, optionally scored against the inventory."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    title: str
    date: str = ""
    content: str = ""
    service: str = ""
    url: str = ""
    is_relevant: bool = Field(False, alias="isRelevant")
    match_score: Optional[float] = Field(None, alias="matchScore")
    summary: Optional[str] = None


class StrategicInsight(BaseModel):
    """An insight card synthesized from release notes and the inventory."""
    model_config = ConfigDict(populate_by_name=True)

    type: InsightType
    title: str
    description: str
    impact: Impact
    action_label: str = Field(alias="actionLabel")
    savings: Optional[str] = None
    cve_id: Optional[str] = Field(None, alias="cveId")


class EmailSchedule(BaseModel):
    """When and to whom the digest goes out."""
    frequency: Frequency = Frequency.WEEKLY
    day_of_week: int = Field(1, ge=0, le=6)
    recipient_email: str = "cloud-admin@enterprise.com"
    enabled: bool = True
    last_sent: Optional[str] = "Ready"


# Displayed until the first analysis replaces it
PLACEHOLDER_NOTES: tuple[ReleaseNote, ...] = (
    ReleaseNote(
        id="1",
        title="Intelligence Engine Ready",
        date="2024-05-22",
        content="Upload CSV to begin real-time architectural matching.",
        service="Horizon Engine",
        url=RELEASE_NOTES_URL + "index.htm",
        is_relevant=True,
        match_score=100,
    ),
)


@dataclass
class AnalysisReport:
    """Result of one pipeline run."""
    generated_at: datetime
    inventory: list[InventoryItem] = field(default_factory=list)
    notes: list[ReleaseNote] = field(default_factory=list)
    insights: list[StrategicInsight] = field(default_factory=list)
    grounding_sources: list[dict] = field(default_factory=list)
    step: AnalysisStep = AnalysisStep.IDLE
    error: Optional[str] = None

    @property
    def relevant_notes(self) -> list[ReleaseNote]:
        return [n for n in self.notes if n.is_relevant]

    @property
    def total_amount(self) -> float:
        return sum(i.amount for i in self.inventory)

    def to_dict(self) -> dict:
        return {
            "generated_at": self.generated_at.isoformat(),
            "step": self.step.value,
            "error": self.error,
            "summary": {
                "skus": len(self.inventory),
                "total_amount": round(self.total_amount, 2),
                "notes": len(self.notes),
                "relevant_notes": len(self.relevant_notes),
                "insights": len(self.insights),
            },
            "inventory": [i.to_dict() for i in self.inventory],
            "notes": [n.model_dump(mode="json") for n in self.notes],
            "insights": [i.model_dump(mode="json") for i in self.insights],
            "grounding_sources": self.grounding_sources,
        }


def is_relevant(score: Optional[float]) -> bool:
    return score is not None and score > RELEVANCE_THRESHOLD
