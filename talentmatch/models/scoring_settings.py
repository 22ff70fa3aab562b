"""
Scoring weights and display thresholds.

The weights are part of the public contract ("Experience 40%, Skills 20%,
Projects 20%, Profile fit 20%"). Stored scores are only comparable while
these stay the same, so they are a constant rather than a setting.
"""
from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ScoreWeights(BaseModel):
    """Weights applied to the four sub-scores"""
    model_config = ConfigDict(frozen=True)

    experience: float = Field(default=0.40, ge=0.0, le=1.0)
    skills: float = Field(default=0.20, ge=0.0, le=1.0)
    projects: float = Field(default=0.20, ge=0.0, le=1.0)
    semantic: float = Field(default=0.20, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def validate_total_weights(self):
        if abs(self.total - 1.0) > 1e-9:
            raise ValueError("Score weights must sum to 1.0")
        return self

    @property
    def total(self) -> float:
        return self.experience + self.skills + self.projects + self.semantic

    def items(self) -> Tuple[Tuple[str, float], ...]:
        # Fixed order; explanation tie-breaks rely on it
        return (
            ("experience", self.experience),
            ("skills", self.skills),
            ("projects", self.projects),
            ("semantic", self.semantic),
        )


class ScoringThresholds(BaseModel):
    """Score bands used to label a match for display"""
    model_config = ConfigDict(frozen=True)

    strong_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    moderate_threshold: float = Field(default=0.6, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def validate_thresholds(self):
        if self.moderate_threshold > self.strong_threshold:
            raise ValueError("moderate_threshold must not exceed strong_threshold")
        return self


SCORE_WEIGHTS = ScoreWeights()
SCORE_THRESHOLDS = ScoringThresholds()

FACTOR_LABELS: Dict[str, str] = {
    "experience": "Experience",
    "skills": "Skills",
    "projects": "Projects",
    "semantic": "Profile fit",
}
