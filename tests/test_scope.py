import pytest

from pgops.core.models import DatabaseOwnership
from pgops.core.scope import OwnershipScope, pick_database, pick_schemas


def test_all_databases_scope_keeps_known_order():
    scope = OwnershipScope()

    assert scope.all_databases is True
    assert scope.databases(["b", "a", "c"]) == ["b", "a", "c"]
    assert scope.describe() == "all databases"


def test_single_database_scope():
    scope = OwnershipScope(database="app", schemas=("public", "sales"))

    assert scope.databases(["crm", "app"]) == ["app"]
    assert scope.describe() == "app (schemas: public, sales)"


def test_pick_database_by_display_number():
    found = [DatabaseOwnership(1, "app", 2), DatabaseOwnership(2, "crm", 1)]

    assert pick_database(found, 2) == "crm"
    with pytest.raises(ValueError):
        pick_database(found, 3)


def test_pick_schemas_resolves_numbers():
    assert pick_schemas(["audit", "public", "sales"], "3,1") == ("sales", "audit")


def test_pick_schemas_rejects_batch_with_out_of_range_number():
    with pytest.raises(ValueError, match="4"):
        pick_schemas(["audit", "public", "sales"], "1,4")
