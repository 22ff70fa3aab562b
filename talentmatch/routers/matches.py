from fastapi import APIRouter, Request

from talentmatch.models.response import (
    BulkDecisionResponse,
    MatchResult,
    RejectPendingResponse,
    ShortlistDecision,
    ShortlistResponse,
)
from talentmatch.models.schemas import BulkDecisionRequest, RejectPendingRequest, ScoreRequest, ShortlistRequest
from talentmatch.services.matching import score_candidate, score_candidates
from talentmatch.services.ranking import bulk_decide, decisions_for, rank, reject_pending
from talentmatch.utils.exceptions import MatchEngineError, map_to_http_exception
from talentmatch.utils.logging_config import PerformanceMonitor, get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.post("/score", response_model=MatchResult)
async def score_one(payload: ScoreRequest, request: Request):
    """Score a single candidate against a single job"""
    request_id = getattr(request.state, 'request_id', 'unknown')
    try:
        result = score_candidate(payload.candidate, payload.job)
    except MatchEngineError as e:
        logger.warning(
            f"Scoring failed for candidate {payload.candidate.candidate_id}: {e.message}",
            extra={"request_id": request_id, "job_id": payload.job.job_id}
        )
        raise map_to_http_exception(e)
    return result


@router.post("/shortlist", response_model=ShortlistResponse)
async def shortlist(payload: ShortlistRequest, request: Request):
    """Score all candidates for a job and return the top N"""
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.info(
        f"Shortlisting {len(payload.candidates)} candidates for job {payload.job.job_id}",
        extra={"request_id": request_id, "top_n": payload.top_n}
    )

    with PerformanceMonitor("shortlist", logger):
        try:
            outcome = score_candidates(payload.job, payload.candidates)
            ranked = rank(outcome.results, payload.top_n)
        except MatchEngineError as e:
            raise map_to_http_exception(e)

    return ShortlistResponse(
        job_id=payload.job.job_id,
        requested_top_n=payload.top_n,
        total_evaluated=outcome.evaluated,
        results=ranked,
        skipped=outcome.skipped,
    )


@router.post("/bulk-decision", response_model=BulkDecisionResponse)
async def bulk_decision(payload: BulkDecisionRequest, request: Request):
    """Select the top N applicants and reject the rest.

    Applicants that could not be scored are reported in ``skipped`` and left
    undecided.
    """
    request_id = getattr(request.state, 'request_id', 'unknown')

    with PerformanceMonitor("bulk_decision", logger):
        try:
            outcome = score_candidates(payload.job, payload.candidates)
            decision = bulk_decide(outcome.results, payload.top_n)
        except MatchEngineError as e:
            logger.warning(
                f"Bulk decision failed for job {payload.job.job_id}: {e.message}",
                extra={"request_id": request_id}
            )
            raise map_to_http_exception(e)

    decisions = {s.item_id: ShortlistDecision.PENDING for s in outcome.skipped}
    decisions.update(decisions_for(decision))

    return BulkDecisionResponse(
        job_id=payload.job.job_id,
        message=f"Top {decision.selected_count} candidates selected, rest rejected",
        selected=decision.selected,
        rejected=decision.rejected,
        selected_count=decision.selected_count,
        rejected_count=decision.rejected_count,
        decisions=decisions,
        skipped=outcome.skipped,
    )


@router.post("/reject-pending", response_model=RejectPendingResponse)
async def reject_pending_applications(payload: RejectPendingRequest):
    """Reject every application of a job that is still pending"""
    updated = reject_pending(payload.statuses)
    rejected_count = sum(1 for status in payload.statuses.values() if status == ShortlistDecision.PENDING)
    logger.info(f"Rejected {rejected_count} pending applications for job {payload.job_id}")
    return RejectPendingResponse(job_id=payload.job_id, rejected_count=rejected_count, decisions=updated)
