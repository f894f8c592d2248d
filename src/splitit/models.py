"""Pydantic models for Split It groups and expenses."""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field, field_serializer, field_validator


# Amounts must stay strictly below this magnitude
MAX_AMOUNT = Decimal("1e100")


def _new_id() -> str:
    return uuid4().hex


def _to_decimal(v: Any) -> Decimal:
    try:
        if isinstance(v, float):
            v = Decimal(str(v))
        elif not isinstance(v, Decimal):
            v = Decimal(v)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Invalid amount: {v!r}") from e
    if not v.is_finite():
        raise ValueError(f"Amount must be a finite number, got {v}")
    return v


class SplitMode(str, Enum):
    """How an expense is apportioned."""

    EQUAL = "equal"  # Evenly across all current participants


class Participant(BaseModel):
    """A member of a group."""

    id: str = Field(default_factory=_new_id)
    name: str


class Expense(BaseModel):
    """A single expense recorded against a group."""

    id: str = Field(default_factory=_new_id)
    group_id: str
    paid_by: str  # participant id
    amount: Decimal
    description: str
    split_mode: SplitMode = SplitMode.EQUAL
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> Decimal:
        amount = _to_decimal(v)
        if abs(amount) >= MAX_AMOUNT:
            raise ValueError(f"Amount is too large: {amount}")
        return amount

    @field_serializer("amount")
    def serialize_amount(self, v: Decimal) -> str:
        return str(v)


class Group(BaseModel):
    """A group with participants and the expenses they share."""

    id: str = Field(default_factory=_new_id)
    name: str
    participants: list[Participant] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)

    def participant_ids(self) -> list[str]:
        return [p.id for p in self.participants]


class Transfer(BaseModel):
    """A computed debt: ``from_id`` owes ``to_id`` the given amount."""

    model_config = {"frozen": True}

    from_id: str
    to_id: str
    amount: Decimal

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> Decimal:
        return _to_decimal(v)

    @field_serializer("amount")
    def serialize_amount(self, v: Decimal) -> str:
        return str(v)


class NetBalance(BaseModel):
    """A participant's overall position. Positive = owed money."""

    model_config = {"frozen": True}

    participant_id: str
    name: str
    net: Decimal

    @field_serializer("net")
    def serialize_net(self, v: Decimal) -> str:
        return str(v)


class AppState(BaseModel):
    """Top-level application record."""

    groups: list[Group] = Field(default_factory=list)
    current_user: str = "You"
