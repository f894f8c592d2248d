"""Group and expense persistence over a simple key-value store.

Collections are always read and written whole. Read failures yield an empty
collection; write failures are logged and dropped, so callers must never
assume a save succeeded.
"""

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from .config import get_state_dir
from .models import AppState, Expense, Group

logger = logging.getLogger(__name__)

GROUPS_KEY = "split_it_groups"
EXPENSES_KEY = "split_it_expenses"
APP_STATE_KEY = "split_it_app_state"

ALL_KEYS = (GROUPS_KEY, EXPENSES_KEY, APP_STATE_KEY)


class KeyValueStore(ABC):
    """Durable string storage addressed by key."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""

    @abstractmethod
    def remove_items(self, keys: Iterable[str]) -> None:
        """Remove the given keys. Missing keys are ignored."""


class MemoryStore(KeyValueStore):
    """In-process store. Nothing survives the process."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_items(self, keys: Iterable[str]) -> None:
        for key in keys:
            self._data.pop(key, None)


class FileStore(KeyValueStore):
    """
    One JSON file per key.

    Files live in ~/.splitit by default (or SPLITIT_STATE_DIR).
    """

    def __init__(self, state_dir: str | Path | None = None):
        self.state_dir = get_state_dir(state_dir)
        self.state_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.state_dir / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        self._path(key).write_text(value, encoding="utf-8")

    def remove_items(self, keys: Iterable[str]) -> None:
        for key in keys:
            self._path(key).unlink(missing_ok=True)


class Storage:
    """Reads and writes whole group/expense collections."""

    def __init__(self, backend: KeyValueStore):
        self.backend = backend

    def _read(self, key: str) -> Any:
        try:
            raw = self.backend.get_item(key)
            return json.loads(raw) if raw is not None else None
        except Exception:
            logger.exception("Error reading %s", key)
            return None

    def _write(self, key: str, data: Any) -> None:
        try:
            self.backend.set_item(key, json.dumps(data, indent=2, ensure_ascii=False))
        except Exception:
            logger.exception("Error saving %s", key)

    # === Groups ===

    def get_groups(self) -> list[Group]:
        data = self._read(GROUPS_KEY)
        if not data:
            return []
        try:
            return [Group.model_validate(group) for group in data]
        except (ValueError, TypeError, ArithmeticError):
            logger.exception("Discarding unreadable %s", GROUPS_KEY)
            return []

    def save_groups(self, groups: list[Group]) -> None:
        self._write(GROUPS_KEY, [group.model_dump(mode="json") for group in groups])

    def get_group(self, group_id: str) -> Group | None:
        """Get a group by id."""
        for group in self.get_groups():
            if group.id == group_id:
                return group
        return None

    def add_group(self, group: Group) -> None:
        groups = self.get_groups()
        groups.append(group)
        self.save_groups(groups)

    def update_group(self, updated: Group) -> None:
        """Replace a stored group by id. Unknown ids are ignored."""
        groups = self.get_groups()
        for i, group in enumerate(groups):
            if group.id == updated.id:
                groups[i] = updated
                self.save_groups(groups)
                return

    def delete_group(self, group_id: str) -> None:
        groups = [g for g in self.get_groups() if g.id != group_id]
        self.save_groups(groups)

    # === Expenses ===

    def get_expenses(self) -> list[Expense]:
        data = self._read(EXPENSES_KEY)
        if not data:
            return []
        try:
            return [Expense.model_validate(expense) for expense in data]
        except (ValueError, TypeError, ArithmeticError):
            logger.exception("Discarding unreadable %s", EXPENSES_KEY)
            return []

    def save_expenses(self, expenses: list[Expense]) -> None:
        self._write(EXPENSES_KEY, [expense.model_dump(mode="json") for expense in expenses])

    def add_expense(self, expense: Expense) -> None:
        expenses = self.get_expenses()
        expenses.append(expense)
        self.save_expenses(expenses)

    def update_expense(self, updated: Expense) -> None:
        """Replace a stored expense by id. Unknown ids are ignored."""
        expenses = self.get_expenses()
        for i, expense in enumerate(expenses):
            if expense.id == updated.id:
                expenses[i] = updated
                self.save_expenses(expenses)
                return

    def delete_expense(self, expense_id: str) -> None:
        expenses = [e for e in self.get_expenses() if e.id != expense_id]
        self.save_expenses(expenses)

    # === App state ===

    def get_app_state(self) -> AppState:
        data = self._read(APP_STATE_KEY)
        if not data:
            return AppState()
        try:
            return AppState.model_validate(data)
        except (ValueError, TypeError, ArithmeticError):
            logger.exception("Discarding unreadable %s", APP_STATE_KEY)
            return AppState()

    def save_app_state(self, app_state: AppState) -> None:
        self._write(APP_STATE_KEY, app_state.model_dump(mode="json"))

    def clear_all(self) -> None:
        """Remove every stored collection."""
        try:
            self.backend.remove_items(ALL_KEYS)
        except Exception:
            logger.exception("Error clearing data")
