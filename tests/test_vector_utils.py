import numpy as np
import pytest

from recommender.vector_utils import best_similarity, cosine_similarity, normalize


def test_self_similarity_is_one():
    v = [0.3, -1.2, 4.0]
    assert cosine_similarity(v, v) == pytest.approx(1.0)


def test_negation_is_minus_one():
    v = np.array([0.3, -1.2, 4.0])
    assert cosine_similarity(v, -v) == pytest.approx(-1.0)


def test_zero_vector_gives_zero():
    assert cosine_similarity([0.0, 0.0, 0.0], [1.0, 2.0, 3.0]) == 0.0
    assert cosine_similarity([1.0, 2.0, 3.0], [0.0, 0.0, 0.0]) == 0.0


def test_missing_or_mismatched_vectors_give_zero():
    assert cosine_similarity(None, [1.0]) == 0.0
    assert cosine_similarity([1.0], None) == 0.0
    assert cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0]) == 0.0


def test_not_required_to_be_normalized():
    assert cosine_similarity([2.0, 0.0], [5.0, 5.0]) == pytest.approx(np.sqrt(0.5))


def test_normalize_is_zero_safe():
    assert np.allclose(normalize([3.0, 4.0]), [0.6, 0.8])
    assert np.allclose(normalize([0.0, 0.0]), [0.0, 0.0])


def test_best_similarity_picks_max():
    q = [1.0, 0.0]
    sim, idx, bad = best_similarity(q, [[0.0, 1.0], [1.0, 1.0], [1.0, 0.1]])
    assert idx == 2
    assert sim == pytest.approx(cosine_similarity(q, [1.0, 0.1]))
    assert bad == 0


def test_best_similarity_empty_and_negative_floor_at_zero():
    assert best_similarity([1.0, 0.0], []) == (0.0, -1, 0)
    assert best_similarity([1.0, 0.0], [[-1.0, 0.0]]) == (0.0, -1, 0)


def test_best_similarity_counts_dimension_mismatches():
    sim, idx, bad = best_similarity([1.0, 0.0], [[1.0, 0.0, 0.0], [0.5, 0.5]])
    assert bad == 1
    assert idx == 1
    assert sim == pytest.approx(np.sqrt(0.5))
