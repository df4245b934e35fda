"""Unit tests for order key allocation."""
import pytest

from servicebook.errors import InvalidRequest
from servicebook.services.order_keys import next_order, resequence


def test_next_order_of_empty_collection_is_base() -> None:
    assert next_order(set()) == 0
    assert next_order([], base=1) == 1


def test_next_order_appends_after_maximum_with_gaps() -> None:
    assert next_order({0, 4, 2}) == 5


def test_next_order_ignores_released_keys() -> None:
    assert next_order([None, 3, None]) == 4
    assert next_order([None]) == 0


def test_next_order_never_below_base() -> None:
    assert next_order({-5, -2}, base=0) == 0


def test_resequence_assigns_contiguous_keys_in_sequence_order() -> None:
    assert resequence(["c", "a", "b"]) == {"c": 0, "a": 1, "b": 2}
    assert resequence(["x", "y"], base=10) == {"x": 10, "y": 11}


def test_resequence_rejects_repeated_id() -> None:
    with pytest.raises(InvalidRequest):
        resequence(["a", "b", "a"])
