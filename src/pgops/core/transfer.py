"""Ownership transfer over an inventory.

Transfers are non-transactional: each table gets its own ALTER TABLE
statement, a failure is recorded and the remaining tables are still
attempted. The inventory is read only; records keep their original owner.
"""

from __future__ import annotations

from typing import Iterable

from pgops.core.adapters.postgres import PostgresAdapter, StatementError
from pgops.core.models import (
    Inventory,
    OwnerChangeResult,
    OwnershipRecord,
    TransferSummary,
)
from pgops.core.validators import parse_number_list


def parse_selection(text: str, inventory: Inventory) -> list[OwnershipRecord]:
    """
    Resolve comma-separated sequence numbers to inventory records.

    The whole batch is rejected if any number does not resolve.

    Raises:
        ValueError: On malformed input or any unknown sequence number.
    """
    numbers = parse_number_list(text)
    missing = [n for n in numbers if inventory.get(n) is None]
    if missing:
        listed = ", ".join(str(n) for n in missing)
        raise ValueError(f"No table with number(s): {listed}.")
    return [inventory.get(n) for n in numbers]


def change_owner(
    adapter: PostgresAdapter, record: OwnershipRecord, new_owner: str
) -> OwnerChangeResult:
    """Run one ALTER TABLE ... OWNER TO against the record's database."""
    try:
        adapter.set_table_owner(
            database=record.database,
            schema=record.schema,
            table=record.table,
            owner=new_owner,
        )
    except StatementError as e:
        return OwnerChangeResult(
            record=record, new_owner=new_owner, ok=False, error=str(e)
        )
    return OwnerChangeResult(record=record, new_owner=new_owner, ok=True)


def transfer_selected(
    adapter: PostgresAdapter, records: Iterable[OwnershipRecord], new_owner: str
) -> list[OwnerChangeResult]:
    """Change the owner of each selected record, in the order given."""
    return [change_owner(adapter, record, new_owner) for record in records]


def transfer_all(
    adapter: PostgresAdapter, inventory: Inventory, new_owner: str
) -> TransferSummary:
    """Change the owner of every record in inventory order and tally outcomes."""
    return TransferSummary(
        results=tuple(change_owner(adapter, record, new_owner) for record in inventory)
    )
