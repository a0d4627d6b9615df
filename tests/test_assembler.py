from catalog.loader import CatalogStore
from recommender.assembler import MAX_RESULTS, RELEVANCE_THRESHOLD, assemble, group_by_category
from recommender.recommend import ScoredStore
from conftest import store_record


def _scored(*pairs):
    """(category, score) pairs -> ScoredStore list in catalog order, ids from 1."""
    catalog = CatalogStore.from_records(
        [store_record(i, cat) for i, (cat, _) in enumerate(pairs, start=1)]
    )
    return [
        ScoredStore(store=store, score=score, category_score=score, best_similarity=0.0)
        for store, (_, score) in zip(catalog.stores, pairs)
    ]


def _ids(items):
    return [s.store.id for s in items]


def test_defaults():
    assert RELEVANCE_THRESHOLD == 0.5
    assert MAX_RESULTS == 5


def test_threshold_is_strict():
    result = assemble(_scored(("a", 0.5), ("a", 0.5001), ("b", 0.49)))
    assert _ids(result.stores) == [2]
    assert all(s.score > 0.5 for s in result.stores)


def test_sorted_descending_and_capped():
    scores = [0.6, 1.9, 0.7, 1.2, 0.8, 1.5, 0.9]
    result = assemble(_scored(*[("a", s) for s in scores]))
    assert [s.score for s in result.stores] == [1.9, 1.5, 1.2, 0.9, 0.8]
    assert result.truncated


def test_not_truncated_at_exact_cap():
    result = assemble(_scored(*[("a", 1.0)] * 5))
    assert len(result.stores) == 5
    assert not result.truncated


def test_ties_keep_catalog_order():
    result = assemble(_scored(("a", 1.0), ("b", 1.2), ("c", 1.0), ("d", 1.0)))
    assert _ids(result.stores) == [2, 1, 3, 4]


def test_custom_threshold_and_cap():
    result = assemble(_scored(("a", 0.3), ("a", 0.45), ("b", 0.2)), threshold=0.25, max_results=1)
    assert _ids(result.stores) == [2]
    assert result.truncated


def test_empty_result_is_not_an_error():
    result = assemble(_scored(("a", 0.1), ("b", 0.5)))
    assert result.stores == []
    assert group_by_category(result.stores) == []


def test_groups_follow_first_appearance_in_ranking():
    # catalog order: zoo, apple, zoo, mango; ranking puts mango first
    result = assemble(_scored(("zoo", 0.9), ("apple", 1.1), ("zoo", 1.3), ("mango", 1.8)))
    groups = group_by_category(result.stores)
    assert [cat for cat, _ in groups] == ["mango", "zoo", "apple"]
    assert [_ids(items) for _, items in groups] == [[4], [3, 1], [2]]
