"""
Fetch boundary between the scoring engine and the embedding store.

The store owns data hygiene: jobs with missing, null, empty or malformed
embeddings never reach the similarity code, and a subject without any
embedding raises NotFound rather than returning a zero vector.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from pydantic import ValidationError as PydanticValidationError

from talentmatch import config
from talentmatch.models.models import EmbeddingVector, JobProfile
from talentmatch.models.response import BatchOutcome, SkippedItem
from talentmatch.utils.exceptions import ConfigurationError, ExceptionContext, NotFound, retry_with_logging
from talentmatch.utils.logging_config import get_logger

logger = get_logger(__name__)

RESUME_NOT_FOUND_MESSAGE = "No resume embedding found. Please upload your resume."

HAS_EMBEDDING_QUERY = {"embedding": {"$exists": True, "$ne": None, "$not": {"$size": 0}}}


class EmbeddingStore(ABC):
    """Read-only view of stored resume and job embeddings"""

    @abstractmethod
    async def latest_embedding_for(self, subject_id: str) -> EmbeddingVector:
        """Most recently created embedding for a subject; raises NotFound."""

    @abstractmethod
    async def load_jobs(self, filter: Optional[Dict[str, Any]] = None) -> BatchOutcome[JobProfile]:
        """Jobs with a usable embedding; malformed ones are reported as skipped."""

    async def all_job_embeddings(self, filter: Optional[Dict[str, Any]] = None) -> List[Tuple[str, EmbeddingVector]]:
        outcome = await self.load_jobs(filter)
        return [(job.job_id, job.embedding) for job in outcome.results]


def _id_query(subject_id: str):
    if ObjectId.is_valid(subject_id):
        return {"$in": [subject_id, ObjectId(subject_id)]}
    return subject_id


def _valid_vector(value, dimension: Optional[int]) -> bool:
    if not isinstance(value, (list, tuple)) or not value:
        return False
    if not all(isinstance(x, (int, float)) and not isinstance(x, bool) for x in value):
        return False
    return dimension is None or len(value) == dimension


def job_from_doc(doc: Dict[str, Any]) -> JobProfile:
    """Build a JobProfile from a job document (recruiter or scraped job shape)."""
    return JobProfile(
        job_id=str(doc["_id"]) if doc.get("_id") is not None else "",
        title=doc.get("title") or doc.get("jobRoleName") or "",
        company=doc.get("company") or doc.get("companyName"),
        location=doc.get("location") or "Remote",
        description=doc.get("description"),
        skills=doc.get("skills") or [],
        min_experience=doc.get("minExperience") or 0,
        embedding=list(doc["embedding"]),
        status=doc.get("status") or "open",
        deadline=doc.get("deadline"),
    )


class MongoEmbeddingStore(EmbeddingStore):
    def __init__(self, embeddings_coll, jobs_coll, dimension: Optional[int] = config.EMBEDDING_DIMENSION):
        if dimension is not None and dimension <= 0:
            raise ConfigurationError("Embedding dimension must be positive", config_key="EMBEDDING_DIMENSION", config_value=dimension)
        self.embeddings_coll = embeddings_coll
        self.jobs_coll = jobs_coll
        self.dimension = dimension

    @retry_with_logging(
        max_attempts=config.FETCH_RETRY_ATTEMPTS,
        backoff_factor=config.FETCH_RETRY_BACKOFF,
        logger=logger,
    )
    async def _find_latest(self, subject_id: str):
        return await self.embeddings_coll.find_one(
            {"userId": _id_query(subject_id), **HAS_EMBEDDING_QUERY},
            sort=[("createdAt", -1), ("_id", -1)],
        )

    @retry_with_logging(
        max_attempts=config.FETCH_RETRY_ATTEMPTS,
        backoff_factor=config.FETCH_RETRY_BACKOFF,
        logger=logger,
    )
    async def _find_jobs(self, query: Dict[str, Any]):
        cursor = self.jobs_coll.find(query)
        return await cursor.to_list(length=None)

    async def latest_embedding_for(self, subject_id: str) -> EmbeddingVector:
        with ExceptionContext("latest_embedding_for", logger, collection="embeddings", subject_id=subject_id):
            doc = await self._find_latest(subject_id)

        if not doc or not _valid_vector(doc.get("embedding"), None):
            raise NotFound(RESUME_NOT_FOUND_MESSAGE, subject_id=subject_id)
        return [float(x) for x in doc["embedding"]]

    async def load_jobs(self, filter: Optional[Dict[str, Any]] = None) -> BatchOutcome[JobProfile]:
        query = {**(filter or {}), **HAS_EMBEDDING_QUERY}
        with ExceptionContext("load_jobs", logger, collection="jobs"):
            docs = await self._find_jobs(query)

        outcome = BatchOutcome[JobProfile]()
        for doc in docs:
            job_id = str(doc.get("_id"))
            if not _valid_vector(doc.get("embedding"), self.dimension):
                logger.warning(f"Skipping job {job_id}: malformed embedding")
                outcome.skipped.append(SkippedItem(
                    item_id=job_id, reason="Malformed job embedding", error_code="MALFORMED_EMBEDDING"
                ))
                continue
            try:
                outcome.results.append(job_from_doc(doc))
            except PydanticValidationError as e:
                logger.warning(f"Skipping job {job_id}: invalid job document ({e.error_count()} errors)")
                outcome.skipped.append(SkippedItem(
                    item_id=job_id, reason="Invalid job document", error_code="VALIDATION_ERROR"
                ))

        logger.info(f"Loaded {len(outcome.results)} job embeddings, skipped {len(outcome.skipped)}")
        return outcome


_default_store: Optional[EmbeddingStore] = None


def get_embedding_store() -> EmbeddingStore:
    """FastAPI dependency returning the Mongo-backed store."""
    global _default_store
    if _default_store is None:
        from talentmatch.services.db import embeddings_coll, jobs_coll
        _default_store = MongoEmbeddingStore(embeddings_coll, jobs_coll)
    return _default_store
