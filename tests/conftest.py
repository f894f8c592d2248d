"""Shared test fixtures for Split It tests."""

from collections.abc import Callable
from decimal import Decimal
from pathlib import Path

import pytest

from splitit.models import Expense, Group, Participant
from splitit.state import FileStore, MemoryStore, Storage


def build_group(names: list[str], payments: list[tuple[str, str]] | None = None) -> Group:
    """
    Build a group whose participant ids are the lowercased names.

    payments is a list of (payer name, amount) pairs, one expense each.
    """
    group = Group(
        id="g1",
        name="Test Group",
        participants=[Participant(id=n.lower(), name=n) for n in names],
    )
    for i, (payer, amount) in enumerate(payments or []):
        group.expenses.append(
            Expense(
                id=f"e{i + 1}",
                group_id=group.id,
                paid_by=payer.lower(),
                amount=Decimal(amount),
                description=f"Expense {i + 1}",
            )
        )
    return group


@pytest.fixture
def make_group() -> Callable[..., Group]:
    """Factory for groups built from participant names and payments."""
    return build_group


@pytest.fixture
def empty_group() -> Group:
    """Three participants, no expenses."""
    return build_group(["Asha", "Ben", "Chen"])


@pytest.fixture
def dinner_group() -> Group:
    """Asha paid 90 for a dinner shared by three."""
    return build_group(["Asha", "Ben", "Chen"], [("Asha", "90")])


@pytest.fixture
def trip_group() -> Group:
    """Four people, several uneven payments."""
    return build_group(
        ["Asha", "Ben", "Chen", "Dev"],
        [("Asha", "120"), ("Ben", "45.50"), ("Asha", "30"), ("Chen", "100")],
    )


@pytest.fixture
def memory_storage() -> Storage:
    """Storage backed by an in-memory store."""
    return Storage(MemoryStore())


@pytest.fixture
def file_storage(tmp_path: Path) -> Storage:
    """Storage backed by JSON files in a temporary directory."""
    return Storage(FileStore(tmp_path))
