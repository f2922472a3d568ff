import pytest

from pgops.core.adapters.postgres import StatementError
from pgops.core.models import Inventory, OwnershipRecord
from pgops.core.transfer import parse_selection, transfer_all, transfer_selected

INVENTORY = Inventory(
    [
        OwnershipRecord(1, "app", "public", "orders", "alice"),
        OwnershipRecord(2, "app", "public", "items", "alice"),
    ]
)


class _Adapter:
    def __init__(self, failing=()):
        self.failing = set(failing)
        self.calls: list[tuple[str, str, str, str]] = []

    def set_table_owner(self, database: str, schema: str, table: str, owner: str):
        self.calls.append((database, schema, table, owner))
        if table in self.failing:
            raise StatementError('ERROR:  must be owner of table "%s"' % table)


def test_parse_selection_resolves_numbers_in_given_order():
    records = parse_selection("2, 1", INVENTORY)

    assert [r.table for r in records] == ["items", "orders"]


@pytest.mark.parametrize("text", ["1,3", "3", "1,abc", ""])
def test_parse_selection_rejects_whole_batch(text: str):
    with pytest.raises(ValueError):
        parse_selection(text, INVENTORY)


def test_selective_transfer_touches_only_selected_record():
    adapter = _Adapter()

    results = transfer_selected(adapter, parse_selection("1", INVENTORY), "bob")

    assert adapter.calls == [("app", "public", "orders", "bob")]
    assert len(results) == 1
    assert results[0].ok is True
    assert results[0].full_name == "app.public.orders"


def test_all_transfer_counts_success_and_failure():
    adapter = _Adapter(failing={"items"})

    summary = transfer_all(adapter, INVENTORY, "bob")

    assert adapter.calls == [
        ("app", "public", "orders", "bob"),
        ("app", "public", "items", "bob"),
    ]
    assert summary.succeeded == 1
    assert summary.failed == 1
    failed = [r for r in summary.results if not r.ok]
    assert "must be owner" in (failed[0].error or "")


def test_all_transfer_issues_one_statement_per_record():
    records = [
        OwnershipRecord(i, "app", "public", f"t{i}", "alice") for i in range(1, 8)
    ]
    adapter = _Adapter(failing={"t2", "t5"})

    summary = transfer_all(adapter, Inventory(records), "bob")

    assert len(adapter.calls) == 7
    assert summary.succeeded + summary.failed == 7


def test_transfer_to_current_owner_is_performed():
    adapter = _Adapter()

    results = transfer_selected(adapter, parse_selection("1", INVENTORY), "alice")

    assert adapter.calls == [("app", "public", "orders", "alice")]
    assert results[0].ok is True


def test_transfer_leaves_inventory_unchanged():
    transfer_all(_Adapter(), INVENTORY, "bob")

    assert [r.owner for r in INVENTORY] == ["alice", "alice"]


def test_inventory_rejects_duplicate_sequence_numbers():
    with pytest.raises(ValueError, match="unique"):
        Inventory(
            [
                OwnershipRecord(1, "app", "public", "a", "alice"),
                OwnershipRecord(1, "app", "public", "b", "alice"),
            ]
        )
