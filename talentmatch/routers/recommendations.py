from fastapi import APIRouter, Depends, Query, Request

from talentmatch import config
from talentmatch.models.response import RecommendationResponse
from talentmatch.services.embeddings import EmbeddingStore, get_embedding_store
from talentmatch.services.matching import recommend_jobs
from talentmatch.utils.exceptions import EmptyInput, MatchEngineError, map_to_http_exception
from talentmatch.utils.logging_config import PerformanceMonitor, get_logger

router = APIRouter()
logger = get_logger(__name__)

# Documents without a status count as open
OPEN_JOBS_QUERY = {"status": {"$nin": ["closed", "filled"]}}


@router.get("/recommendations", response_model=RecommendationResponse)
async def get_job_recommendations(
    request: Request,
    candidate_id: str = Query(..., min_length=1, description="Candidate whose latest resume embedding is used"),
    limit: int = Query(config.RECOMMENDATION_LIMIT, ge=1, le=config.MAX_RECOMMENDATION_LIMIT),
    min_similarity: float = Query(0.0, ge=0.0, le=1.0),
    store: EmbeddingStore = Depends(get_embedding_store),
):
    """Jobs ranked by similarity to the candidate's latest resume"""
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.info(
        f"Fetching recommendations for candidate {candidate_id}",
        extra={"request_id": request_id, "candidate_id": candidate_id, "limit": limit}
    )

    with PerformanceMonitor("get_job_recommendations", logger):
        try:
            resume_embedding = await store.latest_embedding_for(candidate_id)
            jobs = await store.load_jobs(OPEN_JOBS_QUERY)
            if not any(job.is_open() for job in jobs.results):
                raise EmptyInput("No jobs available", collection="jobs")
            outcome = recommend_jobs(resume_embedding, jobs.results, limit, min_similarity)
        except MatchEngineError as e:
            logger.warning(
                f"Recommendations failed for candidate {candidate_id}: {e.message}",
                extra={"request_id": request_id, "error_code": e.error_code}
            )
            raise map_to_http_exception(e)

    if not outcome.results:
        logger.info(f"No job passed min_similarity={min_similarity} for candidate {candidate_id}")

    return RecommendationResponse(
        candidate_id=candidate_id,
        count=len(outcome.results),
        recommendations=outcome.results,
        skipped=jobs.skipped + outcome.skipped,
    )
