# models/response.py
from enum import Enum
from typing import Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ShortlistDecision(str, Enum):
    PENDING = "pending"
    SELECTED = "selected"
    REJECTED = "rejected"


class SubScores(BaseModel):
    model_config = ConfigDict(frozen=True)

    experience: float = Field(ge=0.0, le=1.0)
    skills: float = Field(ge=0.0, le=1.0)
    projects: float = Field(ge=0.0, le=1.0)
    semantic: float = Field(ge=0.0, le=1.0)


class MatchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    candidate_id: str
    job_id: str
    overall: float = Field(ge=0.0, le=1.0)
    sub_scores: SubScores
    matched_skills: List[str] = Field(default_factory=list)
    missing_skills: List[str] = Field(default_factory=list)
    explanation: str = ""
    tier: str = "weak"
    has_embedding: bool = True
    rank: Optional[int] = None


class JobRecommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    job_id: str
    title: str = ""
    company: Optional[str] = None
    location: Optional[str] = None
    similarity: float = Field(ge=0.0, le=1.0)
    rank: Optional[int] = None


class SkippedItem(BaseModel):
    item_id: str
    reason: str
    error_code: str


class BatchOutcome(BaseModel, Generic[T]):
    """Per-element outcome of a batch: what was produced and what was skipped."""
    results: List[T] = Field(default_factory=list)
    skipped: List[SkippedItem] = Field(default_factory=list)

    @property
    def evaluated(self) -> int:
        return len(self.results) + len(self.skipped)


class BulkDecision(BaseModel):
    selected: List[str] = Field(default_factory=list)
    rejected: List[str] = Field(default_factory=list)

    @property
    def selected_count(self) -> int:
        return len(self.selected)

    @property
    def rejected_count(self) -> int:
        return len(self.rejected)


# -------- API responses --------
class ShortlistResponse(BaseModel):
    success: bool = True
    job_id: str
    requested_top_n: int
    total_evaluated: int
    results: List[MatchResult]
    skipped: List[SkippedItem] = Field(default_factory=list)


class BulkDecisionResponse(BaseModel):
    success: bool = True
    job_id: str
    message: str
    selected: List[str]
    rejected: List[str]
    selected_count: int
    rejected_count: int
    decisions: Dict[str, ShortlistDecision] = Field(default_factory=dict)
    skipped: List[SkippedItem] = Field(default_factory=list)


class RejectPendingResponse(BaseModel):
    success: bool = True
    job_id: str
    rejected_count: int
    decisions: Dict[str, ShortlistDecision]


class RecommendationResponse(BaseModel):
    success: bool = True
    candidate_id: str
    count: int
    recommendations: List[JobRecommendation]
    skipped: List[SkippedItem] = Field(default_factory=list)
