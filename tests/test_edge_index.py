import pytest

from swapchain.algorithms.edge_index import EdgeIndex, ForbiddenPairIndex, vertex_id


def test_edge_index_membership():
    """Index answers membership for exactly the listed pairs."""
    idx = EdgeIndex.from_lists([0, 2], [1, 3])
    assert idx.contains(0, 1)
    assert idx.contains(2, 3)
    assert not idx.contains(1, 0)
    assert (2, 3) in idx
    assert len(idx) == 2


def test_insert_and_erase_are_idempotent():
    """Re-inserting a present pair or erasing an absent one changes nothing."""
    idx = EdgeIndex([(0, 1)])
    idx.insert(0, 1)
    assert len(idx) == 1
    idx.erase(5, 5)
    assert set(idx) == {(0, 1)}


def test_swap_replaces_both_corners():
    idx = EdgeIndex([(0, 1), (2, 3)])
    idx.swap((0, 1), (2, 3), (2, 1), (0, 3))
    assert set(idx) == {(2, 1), (0, 3)}


def test_edge_index_rejects_mismatched_lists():
    with pytest.raises(ValueError, match="equal length"):
        EdgeIndex.from_lists([0, 1], [1])


def test_forbidden_pairs_merge_duplicates():
    """Duplicate structural zeros collapse into one entry."""
    zeros = ForbiddenPairIndex.from_lists([2, 2, 0], [1, 1, 0])
    assert len(zeros) == 2
    assert zeros.contains(2, 1)
    assert not zeros.contains(1, 2)


def test_forbidden_pairs_length_independent_of_edges():
    """Zero lists only need to match each other."""
    zeros = ForbiddenPairIndex.from_lists([0], [0])
    assert len(zeros) == 1
    with pytest.raises(ValueError, match="structural zero"):
        ForbiddenPairIndex.from_lists([0, 1], [0])


def test_empty_forbidden_index_vetoes_nothing():
    assert not ForbiddenPairIndex().contains(0, 0)


def test_vertex_id_accepts_integral_values():
    assert vertex_id(3) == 3
    assert vertex_id(3.0) == 3


@pytest.mark.parametrize("value, match", [(1.7, "integers"), (-2, "non-negative")])
def test_vertex_id_rejects_bad_values(value, match):
    """Fractional or negative ids fail instead of being truncated."""
    with pytest.raises(ValueError, match=match):
        vertex_id(value)


def test_forbidden_pairs_reject_fractional_ids():
    with pytest.raises(ValueError, match="integers"):
        ForbiddenPairIndex.from_lists([0.5], [1])
