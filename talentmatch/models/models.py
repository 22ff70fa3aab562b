from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

EmbeddingVector = List[float]


def normalize_skill(value) -> str:
    return value.strip().lower() if isinstance(value, str) else ""


def normalize_skills(values) -> List[str]:
    """Trim and lower-case skills, dropping blanks and repeats (first seen wins)."""
    seen = []
    for v in values or []:
        s = normalize_skill(v)
        if s and s not in seen:
            seen.append(s)
    return seen


class JobStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    FILLED = "filled"


class JobProfile(BaseModel):
    job_id: str = Field(min_length=1)
    title: str = ""
    company: Optional[str] = None
    location: str = "Remote"
    description: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    min_experience: Optional[int] = Field(default=0, ge=0)
    embedding: Optional[EmbeddingVector] = None
    status: JobStatus = JobStatus.OPEN
    deadline: Optional[datetime] = None

    @field_validator("skills")
    @classmethod
    def _normalize_skills(cls, v):
        return normalize_skills(v)

    def is_open(self, now: Optional[datetime] = None) -> bool:
        """Closed/filled jobs and jobs past their deadline are not matched."""
        if self.status != JobStatus.OPEN:
            return False
        if self.deadline is None:
            return True
        now = now or datetime.now(timezone.utc)
        deadline = self.deadline
        if deadline.tzinfo is None:
            deadline = deadline.replace(tzinfo=timezone.utc)
        return deadline >= now


class CandidateProfile(BaseModel):
    candidate_id: str = Field(min_length=1)
    name: Optional[str] = None
    email: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    years_experience: Optional[float] = Field(default=None, ge=0)
    projects: List[str] = Field(default_factory=list)
    embedding: Optional[EmbeddingVector] = None

    @field_validator("skills")
    @classmethod
    def _normalize_skills(cls, v):
        return normalize_skills(v)

    @property
    def has_embedding(self) -> bool:
        return bool(self.embedding)
