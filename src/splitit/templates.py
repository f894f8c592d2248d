"""Response message templates - all user-facing text lives here.

The ledger returns plain numbers; formatting, currency symbols and name
lookups happen only in this module.
"""

from collections.abc import Iterable, Sequence
from decimal import Decimal

from . import ledger
from .config import get_currency_symbol
from .models import Expense, Group, NetBalance, Transfer


def format_currency(amount: Decimal, symbol: str | None = None) -> str:
    """Format amount with currency symbol and two decimals."""
    symbol = symbol if symbol is not None else get_currency_symbol()
    return f"{symbol}{ledger.round_money(amount)}"


def format_transfers(group: Group, transfers: Sequence[Transfer]) -> str:
    """Format a list of transfers for display."""
    if not transfers:
        return ALL_SETTLED

    lines = []
    for t in transfers:
        debtor = ledger.participant_name(group, t.from_id)
        creditor = ledger.participant_name(group, t.to_id)
        lines.append(f"• {debtor} → {creditor}: {format_currency(t.amount)}")
    return "\n".join(lines)


def format_net_balances(rows: Sequence[NetBalance]) -> str:
    """Format net balance rows: who gets back money and who owes."""
    if not rows:
        return NO_PARTICIPANTS

    lines = []
    for row in rows:
        if row.net > 0:
            lines.append(f"• {row.name} gets back {format_currency(row.net)}")
        elif row.net < 0:
            lines.append(f"• {row.name} owes {format_currency(-row.net)}")
        else:
            lines.append(f"• {row.name} is settled up")
    return "\n".join(lines)


def format_expense_line(group: Group, expense: Expense) -> str:
    return EXPENSE_LINE.format(
        id=expense.id,
        date=expense.created_at.strftime("%Y-%m-%d"),
        payer=ledger.participant_name(group, expense.paid_by),
        amount=format_currency(expense.amount),
        description=expense.description,
    )


def format_expenses(group: Group) -> str:
    if not group.expenses:
        return NO_EXPENSES
    return "\n".join(format_expense_line(group, e) for e in group.expenses)


def format_group_summary(group: Group) -> str:
    """Group overview with totals and the suggested settlement."""
    return GROUP_SUMMARY.format(
        group_name=group.name,
        participants=", ".join(p.name for p in group.participants) or "-",
        expense_count=len(group.expenses),
        total_expenses=format_currency(ledger.total_expenses(group)),
        share=format_currency(ledger.per_person_share(group)),
        debts=format_transfers(group, ledger.simplified_debts(group)),
    )


def format_overall_summary(groups: Iterable[Group]) -> str:
    """Suggested transfers across every group, tagged with the group name."""
    lines = []
    for group in groups:
        for t in ledger.simplified_debts(group):
            lines.append(
                SUMMARY_LINE.format(
                    debtor=ledger.participant_name(group, t.from_id),
                    creditor=ledger.participant_name(group, t.to_id),
                    amount=format_currency(t.amount),
                    group_name=group.name,
                )
            )
    if not lines:
        return ALL_SETTLED_EVERYWHERE
    return "\n".join(lines)


# === SUCCESS TEMPLATES ===

GROUP_CREATED = "🎉 Group *{group_name}* created ({group_id})\n👥 {participants}"

EXPENSE_ADDED = (
    "✅ *{description}* {amount} paid by {payer}\n\n📊 Running debts:\n{debts}"
)

EXPENSE_REMOVED = "↩️ Removed: *{description}*\n\n📊 Updated debts:\n{debts}"

GROUP_DELETED = "🗑️ Deleted group *{group_name}*"


# === READ TEMPLATES ===

GROUP_LINE = "• {name} ({group_id}) - {participant_count} people, {expense_count} expenses"

EXPENSE_LINE = "• [{id}] {date} {payer} paid {amount} for {description}"

SUMMARY_LINE = "• {debtor} → {creditor}: {amount} ({group_name})"

NET_BALANCES = "📊 *{group_name}* Net balances\n\n{body}"

SETTLE_BALANCES = "📊 *{group_name}* Suggested transfers\n\n{body}"

EXACT_BALANCES = "📊 *{group_name}* Who owes whom\n\n{body}"

GROUP_SUMMARY = (
    "📋 *{group_name}* Summary\n\n"
    "👥 Participants: {participants}\n"
    "🧾 Expenses: {expense_count}\n"
    "💰 Total: {total_expenses} ({share} each)\n\n"
    "📊 To settle up:\n{debts}"
)


# === ERROR / EMPTY TEMPLATES ===

ERROR_NO_GROUP = "⚠️ Group '{group}' not found."

ERROR_NO_PARTICIPANT = "⚠️ '{person}' is not in {group_name}."

ERROR_VALIDATION = "⚠️ {message}"

NO_GROUPS = "No groups yet. Create one with `splitit create <name> -p <person>`."

NO_EXPENSES = "🤷 No expenses yet."

NO_PARTICIPANTS = "🤷 No participants."

ALL_SETTLED = "✨ All settled up!"

ALL_SETTLED_EVERYWHERE = "✨ All settled up! No outstanding debts in any group."
