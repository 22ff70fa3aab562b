import math

import pytest

from talentmatch.services.similarity import (
    cosine_similarity,
    cosine_similarity_batch,
    normalize_vector,
    sort_by_similarity,
)
from talentmatch.utils.exceptions import DimensionMismatch


class TestCosineSimilarity:
    """Test cases for pairwise cosine similarity"""

    def test_symmetry(self):
        a = [0.3, 0.1, 0.9, 0.4]
        b = [0.2, 0.7, 0.5, 0.1]
        assert cosine_similarity(a, b) == cosine_similarity(b, a)

    def test_self_similarity(self):
        a = [0.12, -0.4, 3.5, 0.0, 7.25]
        assert cosine_similarity(a, a) == pytest.approx(1.0, abs=1e-9)

    def test_bounds_for_opposite_vectors(self):
        assert cosine_similarity([1.0, 2.0], [-1.0, -2.0]) == 0.0

    def test_bounds_for_mixed_vectors(self):
        pairs = [
            ([1, 0, 0], [0, 1, 0]),
            ([1, 2, 3], [3, 2, 1]),
            ([-1, 5, 2], [4, -2, 8]),
        ]
        for a, b in pairs:
            sim = cosine_similarity(a, b)
            assert 0.0 <= sim <= 1.0

    def test_known_value(self):
        assert cosine_similarity([1.0, 0.0], [0.8, 0.6]) == pytest.approx(0.8)

    def test_large_values_do_not_overflow(self):
        assert cosine_similarity([1e200, 1e200], [1e200, -1e200]) == pytest.approx(0.0, abs=1e-12)
        assert cosine_similarity([1e300, 1e300], [1e300, 1e300]) == pytest.approx(1.0)
        assert cosine_similarity([1e200, 0.0], [-1e200, 0.0]) == 0.0

    def test_zero_vector_scores_zero(self):
        result = cosine_similarity([0.0, 0.0, 0.0], [0.1, 0.2, 0.3])
        assert result == 0.0
        assert not math.isnan(result)
        assert cosine_similarity([0.1, 0.2, 0.3], [0, 0, 0]) == 0.0

    def test_dimension_mismatch(self):
        with pytest.raises(DimensionMismatch) as exc_info:
            cosine_similarity([1, 2], [1, 2, 3])
        assert exc_info.value.details == {"left_dim": 2, "right_dim": 3}

    def test_empty_vector_rejected(self):
        with pytest.raises(DimensionMismatch):
            cosine_similarity([], [])
        with pytest.raises(DimensionMismatch):
            cosine_similarity([1.0], [])

    def test_missing_vector_rejected(self):
        with pytest.raises(DimensionMismatch):
            cosine_similarity(None, [1.0])


class TestCosineSimilarityBatch:
    """Test cases for the batch variant"""

    def test_preserves_order_and_skips_malformed(self):
        ref = [1.0, 0.0]
        targets = [[1.0, 0.0], [1.0, 2.0, 3.0], [0.0, 1.0], []]

        outcomes = cosine_similarity_batch(ref, targets)

        assert [o.index for o in outcomes] == [0, 1, 2, 3]
        assert outcomes[0].score == pytest.approx(1.0)
        assert outcomes[1].score is None
        assert isinstance(outcomes[1].error, DimensionMismatch)
        assert outcomes[2].score == 0.0
        assert outcomes[2].ok
        assert not outcomes[3].ok

    def test_empty_batch(self):
        assert cosine_similarity_batch([1.0], []) == []


class TestVectorHelpers:
    def test_normalize_vector(self):
        assert normalize_vector([3.0, 4.0]) == pytest.approx([0.6, 0.8])

    def test_normalize_large_vector(self):
        assert normalize_vector([3e300, 4e300]) == pytest.approx([0.6, 0.8])

    def test_normalize_zero_vector(self):
        assert normalize_vector([0.0, 0.0]) == [0.0, 0.0]

    def test_sort_by_similarity(self):
        items = [("a", 0.2), ("b", 0.9), ("c", 0.5)]
        assert [i[0] for i in sort_by_similarity(items, key=lambda i: i[1])] == ["b", "c", "a"]
