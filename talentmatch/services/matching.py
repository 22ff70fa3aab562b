from typing import Dict, List, Sequence, Tuple

from talentmatch.models.models import CandidateProfile, JobProfile
from talentmatch.models.response import (
    BatchOutcome,
    JobRecommendation,
    MatchResult,
    SkippedItem,
    SubScores,
)
from talentmatch.models.scoring_settings import (
    FACTOR_LABELS,
    SCORE_THRESHOLDS,
    SCORE_WEIGHTS,
    ScoreWeights,
    ScoringThresholds,
)
from talentmatch.services.scoring import (
    experience_score,
    project_score,
    semantic_score,
    skill_score,
)
from talentmatch.services.similarity import cosine_similarity_batch, sort_by_similarity
from talentmatch.utils.exceptions import (
    EmptyInput,
    InvalidArgument,
    MatchEngineError,
)
from talentmatch.utils.logging_config import get_logger, log_function_call

logger = get_logger(__name__)


def _clamp(x: float) -> float:
    return max(0.0, min(1.0, x))


def aggregate(
    experience: float,
    skills: float,
    projects: float,
    semantic: float,
    weights: ScoreWeights = SCORE_WEIGHTS,
) -> float:
    total = (
        weights.experience * experience
        + weights.skills * skills
        + weights.projects * projects
        + weights.semantic * semantic
    )
    return _clamp(total)


def weighted_contributions(sub: SubScores, weights: ScoreWeights = SCORE_WEIGHTS) -> List[Tuple[str, float]]:
    """(factor, weight * score) pairs, largest first; equal values keep factor order."""
    pairs = [(name, w * getattr(sub, name)) for name, w in weights.items()]
    return sorted(pairs, key=lambda p: -p[1])


def explain(sub: SubScores, overall: float, weights: ScoreWeights = SCORE_WEIGHTS) -> str:
    top = weighted_contributions(sub, weights)[:2]
    if all(v == 0 for _, v in top):
        return f"{round(overall * 100)}% match: no contributing factors"
    parts = [
        f"{FACTOR_LABELS[name]} {round(getattr(sub, name) * 100)}% (weight {round(getattr(weights, name) * 100)}%)"
        for name, v in top if v > 0
    ]
    return f"{round(overall * 100)}% match, driven by " + " and ".join(parts)


def match_tier(overall: float, thresholds: ScoringThresholds = SCORE_THRESHOLDS) -> str:
    if overall >= thresholds.strong_threshold:
        return "strong"
    if overall >= thresholds.moderate_threshold:
        return "moderate"
    return "weak"


def _require_open(job: JobProfile) -> None:
    if not job.is_open():
        raise InvalidArgument(f"Job {job.job_id} is not open for matching", argument="job", value=job.status.value)


def score_candidate(candidate: CandidateProfile, job: JobProfile) -> MatchResult:
    """Score one candidate against one job.

    Raises InvalidArgument for a job that is not open and DimensionMismatch
    when both embeddings exist but differ in length.
    """
    _require_open(job)
    skills = skill_score(job.skills, candidate.skills)
    sub = SubScores(
        experience=_clamp(experience_score(candidate.years_experience, job.min_experience)),
        skills=_clamp(skills.score),
        projects=_clamp(project_score(job.skills, candidate.projects, job.description)),
        semantic=_clamp(semantic_score(candidate.embedding, job.embedding)),
    )
    overall = aggregate(sub.experience, sub.skills, sub.projects, sub.semantic)
    return MatchResult(
        candidate_id=candidate.candidate_id,
        job_id=job.job_id,
        overall=overall,
        sub_scores=sub,
        matched_skills=skills.matched,
        missing_skills=skills.missing,
        explanation=explain(sub, overall),
        tier=match_tier(overall),
        has_embedding=candidate.has_embedding and bool(job.embedding),
    )


@log_function_call
def score_candidates(job: JobProfile, candidates: Sequence[CandidateProfile]) -> BatchOutcome[MatchResult]:
    """Score every candidate for one job; failing pairs are skipped, not fatal."""
    _require_open(job)
    if not candidates:
        raise EmptyInput("No candidates to compare", collection="candidates")

    outcome = BatchOutcome[MatchResult]()
    seen = set()
    for candidate in candidates:
        if candidate.candidate_id in seen:
            logger.warning(f"Skipping duplicate candidate {candidate.candidate_id} for job {job.job_id}")
            outcome.skipped.append(SkippedItem(
                item_id=candidate.candidate_id,
                reason="Duplicate candidate id",
                error_code="DUPLICATE",
            ))
            continue
        seen.add(candidate.candidate_id)
        try:
            outcome.results.append(score_candidate(candidate, job))
        except MatchEngineError as e:
            logger.warning(f"Skipping candidate {candidate.candidate_id} for job {job.job_id}: {e.message}")
            outcome.skipped.append(SkippedItem(
                item_id=candidate.candidate_id, reason=e.message, error_code=e.error_code
            ))

    logger.info(
        f"Scored {len(outcome.results)} candidates for job {job.job_id}, skipped {len(outcome.skipped)}"
    )
    return outcome


@log_function_call
def recommend_jobs(
    resume_embedding: Sequence[float],
    jobs: Sequence[JobProfile],
    limit: int,
    min_similarity: float = 0.0,
) -> BatchOutcome[JobRecommendation]:
    """Rank jobs by similarity to a resume embedding.

    Closed jobs and jobs whose embedding is missing or does not match the
    resume dimension are reported in ``skipped``.
    """
    if limit <= 0:
        raise InvalidArgument("limit must be positive", argument="limit", value=limit)
    if not jobs:
        raise EmptyInput("No jobs available", collection="jobs")

    outcome = BatchOutcome[JobRecommendation]()
    eligible: List[JobProfile] = []
    seen = set()
    for job in jobs:
        if job.job_id in seen:
            logger.warning(f"Skipping duplicate job {job.job_id} in recommendations")
            outcome.skipped.append(SkippedItem(item_id=job.job_id, reason="Duplicate job id", error_code="DUPLICATE"))
            continue
        seen.add(job.job_id)
        if not job.is_open():
            outcome.skipped.append(SkippedItem(item_id=job.job_id, reason="Job is closed", error_code="JOB_CLOSED"))
        elif not job.embedding:
            outcome.skipped.append(SkippedItem(item_id=job.job_id, reason="Job has no embedding", error_code="NO_EMBEDDING"))
        else:
            eligible.append(job)

    scored: Dict[str, float] = {}
    for res in cosine_similarity_batch(resume_embedding, [j.embedding for j in eligible]):
        job = eligible[res.index]
        if not res.ok:
            outcome.skipped.append(SkippedItem(
                item_id=job.job_id, reason=res.error.message, error_code=res.error.error_code
            ))
        elif res.score >= min_similarity:
            scored[job.job_id] = res.score

    by_id = {j.job_id: j for j in eligible}
    # Pre-sorted by id so equal similarities stay in id order
    ordered = sort_by_similarity(sorted(scored.items()), key=lambda kv: kv[1])[:limit]
    for position, (job_id, sim) in enumerate(ordered, start=1):
        job = by_id[job_id]
        outcome.results.append(JobRecommendation(
            job_id=job_id,
            title=job.title,
            company=job.company,
            location=job.location,
            similarity=sim,
            rank=position,
        ))
    return outcome
