import pytest

from pgops.core.adapters.postgres import StatementError
from pgops.core.catalog import (
    CatalogError,
    build_inventory,
    load_databases,
    load_users,
    parse_rows,
    scan_databases,
)


def test_parse_rows_skips_lines_with_wrong_arity():
    rows, rejected = parse_rows(
        ["app|public|orders|alice", "app|public|we|ird|alice", "", "app|x"], 4
    )

    assert rows == [("app", "public", "orders", "alice")]
    assert rejected == ["app|public|we|ird|alice", "app|x"]


def test_load_databases_raises_on_failure_or_empty_result():
    class _Failing:
        def list_databases(self):
            raise StatementError("could not connect")

    class _Empty:
        def list_databases(self):
            return []

    with pytest.raises(CatalogError, match="could not connect"):
        load_databases(_Failing())
    with pytest.raises(CatalogError, match="No databases"):
        load_databases(_Empty())


def test_load_users_raises_on_failure():
    class _Adapter:
        def list_users(self):
            raise StatementError("permission denied")

    with pytest.raises(CatalogError, match="users"):
        load_users(_Adapter())


def test_scan_databases_numbers_only_non_zero_and_skips_failures():
    counts = {"app": 2, "empty": 0, "crm": 5}

    class _Adapter:
        def count_owned_tables(self, database: str, owner: str) -> int:
            assert owner == "alice"
            if database == "broken":
                raise StatementError("connection refused")
            return counts[database]

    found = scan_databases(_Adapter(), ["app", "broken", "empty", "crm"], "alice")

    assert [(f.number, f.database, f.table_count) for f in found] == [
        (1, "app", 2),
        (2, "crm", 5),
    ]


class _InventoryAdapter:
    def __init__(self, tables, unreachable=()):
        self.tables = tables
        self.unreachable = set(unreachable)
        self.queried: list[tuple[str, tuple[str, ...]]] = []

    def probe(self, database: str) -> bool:
        return database not in self.unreachable

    def list_owned_tables(self, database, owner, schemas=()):
        self.queried.append((database, tuple(schemas)))
        return tuple(
            f"{database}|{schema}|{table}|{owner}"
            for schema, table in self.tables.get(database, [])
            if not schemas or schema in schemas
        )


def test_build_inventory_numbers_contiguously_across_databases():
    adapter = _InventoryAdapter(
        {
            "app": [("public", "items"), ("public", "orders")],
            "crm": [("sales", "leads")],
        }
    )

    build = build_inventory(adapter, ["app", "crm"], "alice")
    records = list(build.inventory)

    assert [r.seq for r in records] == [1, 2, 3]
    assert [(r.database, r.schema, r.table) for r in records] == [
        ("app", "public", "items"),
        ("app", "public", "orders"),
        ("crm", "sales", "leads"),
    ]
    assert all(r.owner == "alice" for r in records)
    assert build.skipped_databases == ()


def test_build_inventory_skips_unreachable_databases():
    adapter = _InventoryAdapter(
        {"app": [("public", "orders")], "crm": [("sales", "leads")]},
        unreachable=["app"],
    )

    build = build_inventory(adapter, ["app", "crm"], "alice")

    assert build.skipped_databases == ("app",)
    assert [(r.seq, r.table) for r in build.inventory] == [(1, "leads")]
    assert [q[0] for q in adapter.queried] == ["crm"]


def test_build_inventory_passes_schema_filter():
    adapter = _InventoryAdapter(
        {"app": [("public", "orders"), ("audit", "log")]},
    )

    build = build_inventory(adapter, ["app"], "alice", schemas=["audit"])

    assert adapter.queried == [("app", ("audit",))]
    assert [r.qualified_name for r in build.inventory] == ["audit.log"]


def test_build_inventory_reports_malformed_rows():
    class _Adapter(_InventoryAdapter):
        def list_owned_tables(self, database, owner, schemas=()):
            return ("app|public|orders|alice", "app|public|or|ders|alice")

    build = build_inventory(_Adapter({}), ["app"], "alice")

    assert len(build.inventory) == 1
    assert build.malformed_rows == ("app|public|or|ders|alice",)
