"""
Cosine similarity between embedding vectors.

Scores are clamped to [0, 1]: embeddings are read as relevance signals, so
anti-correlation counts as no similarity.
"""
from typing import Any, Callable, List, NamedTuple, Optional, Sequence

import numpy as np

from talentmatch.utils.exceptions import DimensionMismatch, MatchEngineError
from talentmatch.utils.logging_config import get_logger

logger = get_logger(__name__)


class SimilarityOutcome(NamedTuple):
    index: int
    score: Optional[float]
    error: Optional[MatchEngineError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _as_array(vector: Sequence[float], name: str) -> np.ndarray:
    if vector is None:
        raise DimensionMismatch(f"Vector {name} must be provided")
    try:
        arr = np.asarray(vector, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise DimensionMismatch(f"Vector {name} is not numeric", cause=e)
    if arr.ndim != 1:
        raise DimensionMismatch(f"Vector {name} must be one-dimensional")
    if arr.size == 0:
        raise DimensionMismatch(f"Vector {name} cannot be empty")
    if not np.all(np.isfinite(arr)):
        raise DimensionMismatch(f"Vector {name} contains non-finite values")
    return arr


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    va = _as_array(a, "a")
    vb = _as_array(b, "b")
    if va.size != vb.size:
        raise DimensionMismatch(
            f"Vector dimension mismatch: {va.size} vs {vb.size}",
            left_dim=int(va.size),
            right_dim=int(vb.size),
        )

    scale_a = float(np.max(np.abs(va)))
    scale_b = float(np.max(np.abs(vb)))
    if scale_a == 0.0 or scale_b == 0.0:
        logger.debug("Zero-magnitude vector in similarity, scoring 0")
        return 0.0

    # Scaled to max-abs 1 so the dot product and norms cannot overflow
    va = va / scale_a
    vb = vb / scale_b
    sim = float(np.dot(va, vb)) / (float(np.linalg.norm(va)) * float(np.linalg.norm(vb)))
    if not np.isfinite(sim):
        logger.warning("Non-finite similarity, scoring 0")
        return 0.0
    return max(0.0, min(1.0, sim))


def cosine_similarity_batch(
    reference: Sequence[float], targets: Sequence[Sequence[float]]
) -> List[SimilarityOutcome]:
    """Compare ``reference`` with every target, one outcome per target in order.

    A malformed target yields an outcome with ``score=None`` and the error
    instead of failing the batch.
    """
    outcomes = []
    for i, target in enumerate(targets):
        try:
            outcomes.append(SimilarityOutcome(i, cosine_similarity(reference, target)))
        except DimensionMismatch as e:
            logger.warning(f"Skipping target {i} in similarity batch: {e.message}")
            outcomes.append(SimilarityOutcome(i, None, e))
    return outcomes


def normalize_vector(vector: Sequence[float]) -> List[float]:
    arr = _as_array(vector, "vector")
    scale = float(np.max(np.abs(arr)))
    if scale == 0.0:
        logger.warning("Attempting to normalize a zero vector")
        return [0.0] * arr.size
    arr = arr / scale
    return (arr / np.linalg.norm(arr)).tolist()


def sort_by_similarity(items: List[Any], key: Callable[[Any], float]) -> List[Any]:
    """Return a new list ordered by ``key`` descending (stable for equal scores)."""
    return sorted(items, key=key, reverse=True)
