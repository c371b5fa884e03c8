"""
Tie-inclusive selection of a customer's favourite genres.
"""

from models.reports import GenreAffinity
from repositories.customer_repo import select_top_genres


def _affinity(genre, count):
    return GenreAffinity(customer_id=1, customer_name="Ann Lee", genre_name=genre, purchase_count=count)


def test_two_way_tie_keeps_both_and_drops_the_rest():
    result = select_top_genres([_affinity("A", 5), _affinity("B", 5), _affinity("C", 3)])
    assert {a.genre_name for a in result} == {"A", "B"}


def test_input_order_does_not_matter():
    result = select_top_genres([_affinity("C", 3), _affinity("B", 5), _affinity("A", 5)])
    assert [a.genre_name for a in result] == ["A", "B"]


def test_all_equal_counts_keep_everything():
    affinities = [_affinity(g, 2) for g in ("Jazz", "Blues", "Latin", "Rock")]
    assert [a.genre_name for a in select_top_genres(affinities)] == ["Blues", "Jazz", "Latin", "Rock"]


def test_single_genre():
    assert select_top_genres([_affinity("Metal", 1)]) == [_affinity("Metal", 1)]


def test_empty():
    assert select_top_genres([]) == []
