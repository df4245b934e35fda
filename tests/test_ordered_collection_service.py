"""Tests for the ordered collection service against a real session."""
import pytest
from sqlalchemy.exc import OperationalError

from conftest import parameter_payload
from servicebook import db
from servicebook.errors import ConflictError, Forbidden, InvalidRequest, NotFound, StorageError
from servicebook.models import PricingParameter


def names(service, owner="biz-1"):
    return [item.name for item in service.list(owner)]


def orders(service, owner="biz-1"):
    return [item.sort_order for item in service.list(owner)]


def full_list(*ids):
    return [{"id": item_id, "sort_order": index} for index, item_id in enumerate(ids)]


def test_create_appends_after_current_maximum(parameters, abc) -> None:
    assert orders(parameters) == [0, 1, 2]
    assert names(parameters) == ["A", "B", "C"]


def test_create_uses_configured_base(app) -> None:
    from servicebook.services import OrderedCollectionService
    from servicebook.stores import PricingParameterStore

    service = OrderedCollectionService(PricingParameterStore(), base=1)
    first = service.create("biz-9", parameter_payload("First"))
    second = service.create("biz-9", parameter_payload("Second"))
    assert (first.sort_order, second.sort_order) == (1, 2)


def test_reorder_full_resequence(parameters, abc) -> None:
    a, b, c = abc
    parameters.reorder("biz-1", [
        {"id": c, "sort_order": 0},
        {"id": a, "sort_order": 1},
        {"id": b, "sort_order": 2},
    ])
    assert names(parameters) == ["C", "A", "B"]
    assert orders(parameters) == [0, 1, 2]


def test_reorder_sorts_by_submitted_position_and_closes_gaps(parameters, abc) -> None:
    a, b, c = abc
    parameters.reorder("biz-1", [
        {"id": a, "sort_order": 50},
        {"id": b, "sort_order": 7},
        {"id": c, "sort_order": -3},
    ])
    assert names(parameters) == ["C", "B", "A"]
    assert orders(parameters) == [0, 1, 2]


def test_reorder_is_idempotent(parameters, abc) -> None:
    a, b, c = abc
    request = full_list(b, c, a)
    parameters.reorder("biz-1", request)
    first = [(item.id, item.sort_order) for item in parameters.list("biz-1")]
    parameters.reorder("biz-1", request)
    second = [(item.id, item.sort_order) for item in parameters.list("biz-1")]
    assert first == second


def test_reorder_leaves_payload_untouched(parameters, abc) -> None:
    a, b, c = abc
    before = {item.id: (item.name, item.price, item.business_id) for item in parameters.list("biz-1")}
    parameters.reorder("biz-1", full_list(c, b, a))
    after = {item.id: (item.name, item.price, item.business_id) for item in parameters.list("biz-1")}
    assert before == after


@pytest.mark.parametrize("updates", [[], None, "abc", [{"sort_order": 0}], [{"id": "x", "sort_order": "1"}], [{"id": "x", "sort_order": True}]])
def test_reorder_rejects_malformed_updates(parameters, abc, updates) -> None:
    with pytest.raises(InvalidRequest):
        parameters.reorder("biz-1", updates)
    assert orders(parameters) == [0, 1, 2]


def test_reorder_unknown_id_is_not_found_and_changes_nothing(parameters, abc) -> None:
    a, b, c = abc
    with pytest.raises(NotFound) as excinfo:
        parameters.reorder("biz-1", full_list(c, "missing-id", a, b))
    assert excinfo.value.details["ids"] == ["missing-id"]
    assert names(parameters) == ["A", "B", "C"]


def test_reorder_foreign_id_is_forbidden(parameters, abc) -> None:
    a, b, c = abc
    other = parameters.create("biz-2", parameter_payload("Other")).id
    with pytest.raises(Forbidden) as excinfo:
        parameters.reorder("biz-1", full_list(other, c, b, a))
    assert excinfo.value.details["ids"] == [other]
    assert [item.sort_order for item in parameters.list("biz-2")] == [0]
    assert names(parameters) == ["A", "B", "C"]


def test_reorder_rejects_duplicate_positions(parameters, abc) -> None:
    a, b, c = abc
    with pytest.raises(InvalidRequest) as excinfo:
        parameters.reorder("biz-1", [
            {"id": a, "sort_order": 0},
            {"id": b, "sort_order": 0},
            {"id": c, "sort_order": 1},
        ])
    assert excinfo.value.details["sort_orders"] == [0]


def test_reorder_rejects_duplicate_ids(parameters, abc) -> None:
    a, b, c = abc
    with pytest.raises(InvalidRequest):
        parameters.reorder("biz-1", full_list(a, b, c, a))


def test_reorder_rejects_stale_list(parameters, abc) -> None:
    a, _, c = abc
    with pytest.raises(InvalidRequest) as excinfo:
        parameters.reorder("biz-1", full_list(c, a))
    assert excinfo.value.details["missing_ids"] == [abc[1]]
    assert names(parameters) == ["A", "B", "C"]


def test_reorder_rejects_deleted_item(parameters, abc) -> None:
    a, b, c = abc
    parameters.delete("biz-1", b)
    with pytest.raises(NotFound):
        parameters.reorder("biz-1", full_list(c, b, a))


def test_soft_delete_leaves_gap_and_survivors_can_be_reordered(parameters, abc) -> None:
    a, b, c = abc
    parameters.delete("biz-1", b)
    assert orders(parameters) == [0, 2]
    assert db.session.get(PricingParameter, b).sort_order is None

    parameters.reorder("biz-1", full_list(c, a))
    assert names(parameters) == ["C", "A"]
    assert parameters.create("biz-1", parameter_payload("D")).sort_order == 2


def test_permanent_delete_removes_row(parameters, abc) -> None:
    parameters.delete("biz-1", abc[0])
    parameters.delete("biz-1", abc[0], permanent=True)
    assert db.session.get(PricingParameter, abc[0]) is None
    with pytest.raises(NotFound):
        parameters.get("biz-1", abc[0])


def test_get_enforces_owner(parameters, abc) -> None:
    with pytest.raises(Forbidden):
        parameters.get("biz-2", abc[0])
    with pytest.raises(NotFound):
        parameters.delete("biz-1", "nope")


def test_update_changes_payload_only(parameters, abc) -> None:
    item = parameters.update("biz-1", abc[1], {"name": "Bedrooms", "price": 25.0})
    assert (item.name, item.price, item.sort_order) == ("Bedrooms", 25.0, 1)


def test_version_increments_on_each_change(parameters, abc) -> None:
    assert parameters.version("biz-1") == 3
    a, b, c = abc
    assert parameters.reorder("biz-1", full_list(b, a, c)) == 4
    parameters.delete("biz-1", c)
    assert parameters.version("biz-1") == 5
    assert parameters.version("biz-2") == 0


def test_reorder_with_stale_version_conflicts(parameters, abc) -> None:
    a, b, c = abc
    parameters.reorder("biz-1", full_list(b, a, c), expected_version=3)
    with pytest.raises(ConflictError) as excinfo:
        parameters.reorder("biz-1", full_list(c, a, b), expected_version=3)
    assert excinfo.value.details["current_version"] == 4
    assert names(parameters) == ["B", "A", "C"]


def test_collections_are_independent(parameters, extras, abc) -> None:
    extra = extras.create("biz-1", {"industry_id": "cleaning", "name": "Fridge"})
    assert extra.sort_order == 0
    assert extras.version("biz-1") == 1
    assert parameters.version("biz-1") == 3


def test_storage_failure_rolls_back_every_update(parameters, abc, monkeypatch) -> None:
    a, b, c = abc

    def fail_commit():
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(db.session, "commit", fail_commit)
    with pytest.raises(StorageError):
        parameters.reorder("biz-1", full_list(c, a, b))
    monkeypatch.undo()

    assert names(parameters) == ["A", "B", "C"]
    assert orders(parameters) == [0, 1, 2]
    assert parameters.version("biz-1") == 3


def test_orders_stay_unique_after_mixed_operations(parameters, abc) -> None:
    a, b, c = abc
    d = parameters.create("biz-1", parameter_payload("D")).id
    parameters.reorder("biz-1", full_list(d, c, b, a))
    parameters.delete("biz-1", c)
    e = parameters.create("biz-1", parameter_payload("E")).id
    parameters.reorder("biz-1", full_list(e, a, b, d))
    keys = orders(parameters)
    assert len(keys) == len(set(keys)) == 4
    assert names(parameters) == ["E", "A", "B", "D"]
