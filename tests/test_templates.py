"""Tests for Split It message templates."""

from collections.abc import Callable
from decimal import Decimal

import pytest

from splitit import ledger
from splitit.models import Group, Transfer
from splitit.templates import (
    ALL_SETTLED,
    format_currency,
    format_expenses,
    format_group_summary,
    format_net_balances,
    format_overall_summary,
    format_transfers,
)


class TestFormatCurrency:
    """Tests for currency formatting."""

    def test_default_symbol(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SPLITIT_CURRENCY_SYMBOL", raising=False)
        assert format_currency(Decimal("12.5")) == "₹12.50"

    def test_env_symbol(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPLITIT_CURRENCY_SYMBOL", "€")
        assert format_currency(Decimal("3")) == "€3.00"

    def test_explicit_symbol(self) -> None:
        assert format_currency(Decimal("1234.567"), "$") == "$1234.57"

    def test_large_amount(self) -> None:
        assert format_currency(Decimal("1e30"), "$") == "$1000000000000000000000000000000.00"


class TestFormatBalances:
    """Tests for balance formatting."""

    @pytest.fixture(autouse=True)
    def _dollars(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPLITIT_CURRENCY_SYMBOL", "$")

    def test_transfers(self, dinner_group: Group) -> None:
        text = format_transfers(dinner_group, ledger.simplified_debts(dinner_group))
        assert text == "• Ben → Asha: $30.00\n• Chen → Asha: $30.00"

    def test_no_transfers(self, empty_group: Group) -> None:
        assert format_transfers(empty_group, []) == ALL_SETTLED

    def test_unknown_name_placeholder(self, dinner_group: Group) -> None:
        transfers = [Transfer(from_id="ghost", to_id="asha", amount=Decimal("5"))]
        assert "Unknown → Asha" in format_transfers(dinner_group, transfers)

    def test_net_balances(self, make_group: Callable[..., Group]) -> None:
        group = make_group(["Asha", "Ben", "Chen"], [("Asha", "60"), ("Ben", "30")])
        text = format_net_balances(ledger.net_balance_rows(group))
        assert text.splitlines() == [
            "• Asha gets back $30.00",
            "• Ben is settled up",
            "• Chen owes $30.00",
        ]

    def test_expenses(self, dinner_group: Group) -> None:
        assert "Asha paid $90.00 for Expense 1" in format_expenses(dinner_group)

    def test_group_summary(self, dinner_group: Group) -> None:
        text = format_group_summary(dinner_group)
        assert "Expenses: 1" in text
        assert "Total: $90.00 ($30.00 each)" in text
        assert "Ben → Asha: $30.00" in text

    def test_overall_summary(
        self, dinner_group: Group, empty_group: Group, make_group: Callable[..., Group]
    ) -> None:
        other = make_group(["Dev", "Eli"], [("Eli", "10")]).model_copy(update={"name": "Flat"})
        text = format_overall_summary([dinner_group, empty_group, other])
        assert text.splitlines() == [
            "• Ben → Asha: $30.00 (Test Group)",
            "• Chen → Asha: $30.00 (Test Group)",
            "• Dev → Eli: $5.00 (Flat)",
        ]

    def test_overall_summary_settled(self, empty_group: Group) -> None:
        assert "No outstanding debts" in format_overall_summary([empty_group])
