"""Tests for Split It models."""

from datetime import datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from splitit.models import AppState, Expense, Group, NetBalance, Participant, SplitMode, Transfer


class TestParticipant:
    """Tests for Participant model."""

    def test_generates_id(self) -> None:
        a = Participant(name="Asha")
        b = Participant(name="Asha")
        assert a.id
        assert a.id != b.id

    def test_explicit_id(self) -> None:
        assert Participant(id="p1", name="Asha").id == "p1"


class TestExpense:
    """Tests for Expense model."""

    def test_create_expense(self) -> None:
        expense = Expense(group_id="g1", paid_by="asha", amount=Decimal("90"), description="Dinner")
        assert expense.amount == Decimal("90")
        assert expense.split_mode == SplitMode.EQUAL
        assert isinstance(expense.created_at, datetime)
        assert expense.id

    def test_float_amount_coerced(self) -> None:
        """Test that floats become exact decimals via their string form."""
        expense = Expense(group_id="g1", paid_by="asha", amount=12.1, description="Tea")
        assert expense.amount == Decimal("12.1")

    def test_string_amount_coerced(self) -> None:
        expense = Expense(group_id="g1", paid_by="asha", amount="45.50", description="Taxi")
        assert expense.amount == Decimal("45.50")

    def test_amount_serialized_as_string(self) -> None:
        expense = Expense(
            group_id="g1", paid_by="asha", amount=Decimal("45.50"), description="Taxi"
        )
        data = expense.model_dump(mode="json")
        assert data["amount"] == "45.50"
        assert data["split_mode"] == "equal"

    def test_unknown_split_mode_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Expense(
                group_id="g1",
                paid_by="asha",
                amount=Decimal("10"),
                description="Taxi",
                split_mode="weighted",
            )


class TestGroup:
    """Tests for Group model."""

    def test_defaults(self) -> None:
        group = Group(name="Goa")
        assert group.participants == []
        assert group.expenses == []
        assert group.id

    def test_participant_ids_in_order(self) -> None:
        group = Group(
            name="Goa",
            participants=[Participant(id="b", name="Ben"), Participant(id="a", name="Asha")],
        )
        assert group.participant_ids() == ["b", "a"]

    def test_json_round_trip(self) -> None:
        group = Group(name="Goa", participants=[Participant(id="asha", name="Asha")])
        group.expenses.append(
            Expense(group_id=group.id, paid_by="asha", amount=Decimal("33.33"), description="Fuel")
        )
        restored = Group.model_validate(group.model_dump(mode="json"))
        assert restored == group
        assert restored.expenses[0].amount == Decimal("33.33")


class TestComputedModels:
    """Tests for Transfer and NetBalance."""

    def test_transfer_is_frozen(self) -> None:
        transfer = Transfer(from_id="ben", to_id="asha", amount=Decimal("30"))
        with pytest.raises(ValidationError):
            transfer.amount = Decimal("10")

    def test_transfer_equality_ignores_exponent(self) -> None:
        a = Transfer(from_id="ben", to_id="asha", amount=Decimal("30"))
        b = Transfer(from_id="ben", to_id="asha", amount=Decimal("30.00"))
        assert a == b

    def test_transfer_serialization(self) -> None:
        transfer = Transfer(from_id="ben", to_id="asha", amount=Decimal("30.00"))
        assert transfer.model_dump(mode="json") == {
            "from_id": "ben",
            "to_id": "asha",
            "amount": "30.00",
        }

    def test_net_balance_serialization(self) -> None:
        row = NetBalance(participant_id="ben", name="Ben", net=Decimal("-30.00"))
        assert row.model_dump(mode="json")["net"] == "-30.00"


class TestAppState:
    """Tests for AppState model."""

    def test_defaults(self) -> None:
        state = AppState()
        assert state.groups == []
        assert state.current_user == "You"


class TestAmountValidation:
    """Tests for rejecting amounts that are not finite numbers."""

    @pytest.mark.parametrize("amount", ["abc", "", "NaN", "sNaN", "Infinity", [1]])
    def test_invalid_amount_rejected(self, amount: object) -> None:
        with pytest.raises(ValidationError):
            Expense(group_id="g1", paid_by="asha", amount=amount, description="Taxi")

    def test_too_large_amount_rejected(self) -> None:
        with pytest.raises(ValidationError, match="too large"):
            Expense(group_id="g1", paid_by="asha", amount="1e100", description="Yacht")

    def test_large_transfer_allowed(self) -> None:
        transfer = Transfer(from_id="ben", to_id="asha", amount=Decimal("1e120"))
        assert transfer.amount == Decimal("1e120")
