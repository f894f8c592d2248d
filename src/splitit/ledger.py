"""Pure settlement logic for shared group expenses. No I/O, no side effects."""

from collections import defaultdict
from collections.abc import Sequence
from contextlib import AbstractContextManager
from decimal import ROUND_HALF_UP, Context, Decimal, getcontext, localcontext

from .models import MAX_AMOUNT, Expense, Group, NetBalance, Participant, Transfer

CENT = Decimal("0.01")
ZERO = Decimal("0")
UNKNOWN_PARTICIPANT = "Unknown"

# Enough digits to hold any group total of bounded amounts down to the cent
MONEY_PREC = MAX_AMOUNT.adjusted() + 20


class SplitItError(Exception):
    """Base error for invalid group edits."""

    pass


class UnknownParticipantError(SplitItError):
    """An expense references someone who is not in the group."""

    pass


class ParticipantInUseError(SplitItError):
    """A participant cannot be removed while expenses reference them."""

    pass


def round_money(amount: Decimal) -> Decimal:
    """Round to the currency minor unit, normalizing negative zero."""
    with localcontext() as ctx:
        # Room for every integer digit plus the two decimals
        ctx.prec = max(ctx.prec, amount.adjusted() + 4)
        rounded = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    if rounded == ZERO:
        return ZERO.quantize(CENT)
    return rounded


def _money_context() -> AbstractContextManager[Context]:
    ctx = getcontext().copy()
    ctx.prec = max(ctx.prec, MONEY_PREC)
    return localcontext(ctx)


def _balance_ids(group: Group) -> list[str]:
    """Participant ids in display order, then any payer ids not among them."""
    ids = group.participant_ids()
    for expense in group.expenses:
        if expense.paid_by not in ids:
            ids.append(expense.paid_by)
    return ids


# === Aggregates ===


def total_expenses(group: Group) -> Decimal:
    """Sum of every expense amount in the group."""
    with _money_context():
        return sum((e.amount for e in group.expenses), ZERO)


def total_paid(group: Group, participant_id: str) -> Decimal:
    """Sum of the expenses a single participant paid for."""
    with _money_context():
        return sum((e.amount for e in group.expenses if e.paid_by == participant_id), ZERO)


def per_person_share(group: Group) -> Decimal:
    """Equal share of the group's total spend. Zero for an empty group."""
    if not group.participants:
        return ZERO
    with _money_context():
        return round_money(total_expenses(group) / len(group.participants))


def participant_name(group: Group, participant_id: str) -> str:
    """Display name for an id, falling back to a placeholder."""
    for participant in group.participants:
        if participant.id == participant_id:
            return participant.name
    return UNKNOWN_PARTICIPANT


# === Settlement engine ===


def compute_net_balances(group: Group) -> dict[str, Decimal]:
    """
    Compute net balance per participant.

    Every expense is split evenly across all current participants, so each
    person's share is the group total divided by the participant count.

    Positive balance = person is owed money (paid more than their share)
    Negative balance = person owes money (paid less than their share)

    A payer who is not a participant keeps an entry holding what they paid.

    Args:
        group: Group snapshot with participants and expenses

    Returns:
        Dict mapping participant id to net balance, in participant order.
        Empty when the group has no participants.
    """
    if not group.participants:
        return {}

    balances: dict[str, Decimal] = {pid: ZERO for pid in _balance_ids(group)}

    with _money_context():
        for expense in group.expenses:
            balances[expense.paid_by] += expense.amount

        share = total_expenses(group) / len(group.participants)
        for participant in group.participants:
            balances[participant.id] -= share

        return {pid: round_money(balance) for pid, balance in balances.items()}


def net_balance_rows(group: Group) -> list[NetBalance]:
    """Net balances as named rows, one per participant in display order."""
    balances = compute_net_balances(group)
    return [
        NetBalance(participant_id=p.id, name=p.name, net=balances[p.id])
        for p in group.participants
    ]


def simplified_debts(group: Group) -> list[Transfer]:
    """
    Compute a reduced set of transfers that settles every net balance.

    Greedy matching: the largest remaining creditor is paired with the
    largest remaining debtor and the smaller of the two amounts changes
    hands. Ties keep participant order, so output is reproducible.

    Args:
        group: Group snapshot with participants and expenses

    Returns:
        List of transfers (debtor -> creditor). Empty when nothing is owed.
    """
    balances = compute_net_balances(group)

    creditors: list[tuple[str, Decimal]] = []
    debtors: list[tuple[str, Decimal]] = []

    for person, balance in balances.items():
        if balance > ZERO:
            creditors.append((person, balance))
        elif balance < ZERO:
            debtors.append((person, -balance))  # Store as positive debt amount

    # Stable sort, largest first
    creditors.sort(key=lambda x: x[1], reverse=True)
    debtors.sort(key=lambda x: x[1], reverse=True)

    transfers: list[Transfer] = []
    i, j = 0, 0

    with _money_context():
        while i < len(creditors) and j < len(debtors):
            creditor, credit = creditors[i]
            debtor, debt = debtors[j]

            amount = min(credit, debt)
            if amount > ZERO:
                transfers.append(Transfer(from_id=debtor, to_id=creditor, amount=amount))

            credit -= amount
            debt -= amount

            if credit <= ZERO:
                i += 1
            else:
                creditors[i] = (creditor, credit)

            if debt <= ZERO:
                j += 1
            else:
                debtors[j] = (debtor, debt)

    return transfers


def exact_balances(group: Group) -> list[Transfer]:
    """
    Compute who owes whom from the individual expense splits.

    Each non-payer owes the payer ``amount / participant count`` for every
    expense. Debts are summed per ordered pair, then each pair is netted so
    only the dominant direction survives.

    Args:
        group: Group snapshot with participants and expenses

    Returns:
        List of netted debts ordered by debtor, then creditor, in
        participant order. Pairs that net to zero are omitted.
    """
    if not group.participants:
        return []

    n = len(group.participants)
    pair_debts: dict[tuple[str, str], Decimal] = defaultdict(lambda: ZERO)

    with _money_context():
        for expense in group.expenses:
            share = expense.amount / n
            for participant in group.participants:
                if participant.id != expense.paid_by:
                    pair_debts[(participant.id, expense.paid_by)] += share

        ids = _balance_ids(group)
        result: list[Transfer] = []

        for a in ids:
            for b in ids:
                if a == b:
                    continue
                ab = pair_debts.get((a, b), ZERO)
                ba = pair_debts.get((b, a), ZERO)
                # The reverse direction is emitted when b is visited as debtor
                if ab > ba:
                    amount = round_money(ab - ba)
                    if amount > ZERO:
                        result.append(Transfer(from_id=a, to_id=b, amount=amount))

    return result


# === Group editing (immutable - each returns a new Group) ===


def _clean_name(name: str, what: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValueError(f"{what} name cannot be empty")
    return cleaned


def create_group(name: str, participant_names: Sequence[str]) -> Group:
    """
    Create a group with the given participants.

    Raises:
        ValueError: If the group name or a participant name is blank, or a
            participant name is repeated
    """
    group = Group(name=_clean_name(name, "Group"))
    for person in participant_names:
        group = add_participant(group, person)
    return group


def add_participant(group: Group, name: str) -> Group:
    """Add a participant (case-insensitive names must be unique)."""
    cleaned = _clean_name(name, "Participant")
    if any(p.name.lower() == cleaned.lower() for p in group.participants):
        raise ValueError(f"Participant '{cleaned}' is already in {group.name}")

    new_group = group.model_copy(deep=True)
    new_group.participants.append(Participant(name=cleaned))
    return new_group


def remove_participant(group: Group, participant_id: str) -> Group:
    """
    Remove a participant who no expense references.

    Raises:
        UnknownParticipantError: If the id is not in the group
        ParticipantInUseError: If an expense was paid by that participant
    """
    if participant_id not in group.participant_ids():
        raise UnknownParticipantError(f"No participant with id '{participant_id}'")
    if any(e.paid_by == participant_id for e in group.expenses):
        raise ParticipantInUseError(
            f"{participant_name(group, participant_id)} paid for expenses and cannot be removed"
        )
    if group.expenses:
        raise ParticipantInUseError(
            f"{participant_name(group, participant_id)} shares existing expenses "
            "and cannot be removed"
        )

    new_group = group.model_copy(deep=True)
    new_group.participants = [p for p in new_group.participants if p.id != participant_id]
    return new_group


def add_expense(
    group: Group,
    paid_by: str,
    amount: Decimal,
    description: str,
) -> tuple[Group, Expense]:
    """
    Record an equally split expense (immutable - returns new Group).

    Args:
        group: Original group
        paid_by: Participant id of the payer
        amount: Positive amount paid
        description: What the expense was for

    Returns:
        Tuple of (new Group, created Expense)

    Raises:
        UnknownParticipantError: If the payer is not in the group
        ValueError: If the amount is not positive
    """
    expense = Expense(
        group_id=group.id,
        paid_by=paid_by,
        amount=amount,
        description=description.strip(),
    )
    _check_expense(group, expense)

    new_group = group.model_copy(deep=True)
    new_group.expenses.append(expense)
    return new_group, expense


def replace_expense(group: Group, expense: Expense) -> Group:
    """
    Replace an expense wholesale, matched by id.

    Raises:
        KeyError: If the group has no expense with that id
    """
    _check_expense(group, expense)

    new_group = group.model_copy(deep=True)
    for i, existing in enumerate(new_group.expenses):
        if existing.id == expense.id:
            new_group.expenses[i] = expense.model_copy(update={"group_id": group.id})
            return new_group
    raise KeyError(expense.id)


def remove_expense(group: Group, expense_id: str) -> tuple[Group, Expense | None]:
    """Remove an expense. Returns (new Group, removed Expense or None)."""
    new_group = group.model_copy(deep=True)
    for i, existing in enumerate(new_group.expenses):
        if existing.id == expense_id:
            removed = new_group.expenses.pop(i)
            return new_group, removed
    return new_group, None


def validate_group(group: Group) -> None:
    """
    Check that every expense is paid by a current participant.

    Raises:
        UnknownParticipantError: On the first expense whose payer is missing
    """
    ids = set(group.participant_ids())
    for expense in group.expenses:
        if expense.paid_by not in ids:
            raise UnknownParticipantError(
                f"Expense '{expense.description}' was paid by unknown participant "
                f"'{expense.paid_by}'"
            )


def _check_expense(group: Group, expense: Expense) -> None:
    if expense.paid_by not in group.participant_ids():
        raise UnknownParticipantError(
            f"'{expense.paid_by}' is not a participant of {group.name}"
        )
    if expense.amount <= ZERO:
        raise ValueError(f"Expense amount must be positive, got {expense.amount}")
