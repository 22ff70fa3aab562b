from typing import Dict, List

from pydantic import BaseModel, Field

from talentmatch import config
from talentmatch.models.models import CandidateProfile, JobProfile
from talentmatch.models.response import ShortlistDecision

# Request payloads accepted by the match API


class ScoreRequest(BaseModel):
    """Score one candidate against one job"""
    job: JobProfile
    candidate: CandidateProfile


class ShortlistRequest(BaseModel):
    """Rank a batch of candidates for one job and keep the top N"""
    job: JobProfile
    candidates: List[CandidateProfile]
    top_n: int = Field(default=5, ge=1, le=config.MAX_SHORTLIST)


class BulkDecisionRequest(BaseModel):
    """Select the top N applicants for a job and reject the rest"""
    job: JobProfile
    candidates: List[CandidateProfile]
    top_n: int = Field(ge=0)


class RejectPendingRequest(BaseModel):
    """Close out a shortlist: every application still pending is rejected"""
    job_id: str = Field(min_length=1)
    statuses: Dict[str, ShortlistDecision]
