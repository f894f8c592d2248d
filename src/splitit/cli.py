"""Click CLI entrypoint for Split It.

Every command loads a fresh snapshot from storage and recomputes balances
from scratch; nothing is cached between invocations.
"""

import logging
import sys
from decimal import Decimal, InvalidOperation
from typing import NoReturn

import click

from . import __version__, ledger, templates
from .models import Group
from .state import FileStore, Storage

logger = logging.getLogger(__name__)

VIEWS = ("net", "settle", "exact")

state_dir_option = click.option(
    "--state-dir", default=None, help="State directory (default: ~/.splitit)"
)


def _storage(state_dir: str | None) -> Storage:
    return Storage(FileStore(state_dir))


def _fail(message: str) -> NoReturn:
    click.echo(message)
    sys.exit(1)


def find_group(storage: Storage, ref: str) -> Group | None:
    """Find a group by id, or by case-insensitive name."""
    groups = storage.get_groups()
    for group in groups:
        if group.id == ref:
            return group
    for group in groups:
        if group.name.lower() == ref.lower():
            return group
    return None


def find_participant_id(group: Group, ref: str) -> str | None:
    """Resolve a participant by id, or by case-insensitive name."""
    for participant in group.participants:
        if participant.id == ref or participant.name.lower() == ref.lower():
            return participant.id
    return None


def _load_group(storage: Storage, ref: str) -> Group:
    group = find_group(storage, ref)
    if group is None:
        _fail(templates.ERROR_NO_GROUP.format(group=ref))
    return group


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr")
def cli(verbose: bool) -> None:
    """Split It - settle shared group expenses."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("name")
@click.option("-p", "--participant", "participants", multiple=True, required=True)
@state_dir_option
def create(name: str, participants: tuple[str, ...], state_dir: str | None) -> None:
    """Create a group NAME with one -p option per participant."""
    storage = _storage(state_dir)
    try:
        group = ledger.create_group(name, participants)
    except ValueError as e:
        _fail(templates.ERROR_VALIDATION.format(message=e))

    storage.add_group(group)
    logger.info("Created group %s (%s)", group.name, group.id)
    click.echo(
        templates.GROUP_CREATED.format(
            group_name=group.name,
            group_id=group.id,
            participants=", ".join(p.name for p in group.participants),
        )
    )


@cli.command()
@state_dir_option
def groups(state_dir: str | None) -> None:
    """List all groups."""
    storage = _storage(state_dir)
    all_groups = storage.get_groups()

    if not all_groups:
        click.echo(templates.NO_GROUPS)
        return

    for group in all_groups:
        click.echo(
            templates.GROUP_LINE.format(
                name=group.name,
                group_id=group.id,
                participant_count=len(group.participants),
                expense_count=len(group.expenses),
            )
        )


@cli.command()
@click.argument("group_ref", metavar="GROUP")
@click.argument("payer")
@click.argument("amount")
@click.argument("description", nargs=-1, required=True)
@state_dir_option
def add(
    group_ref: str,
    payer: str,
    amount: str,
    description: tuple[str, ...],
    state_dir: str | None,
) -> None:
    """
    Record an expense split equally across the whole group.

    PAYER is a participant name or id. AMOUNT is a decimal number.
    """
    storage = _storage(state_dir)
    group = _load_group(storage, group_ref)

    payer_id = find_participant_id(group, payer)
    if payer_id is None:
        _fail(templates.ERROR_NO_PARTICIPANT.format(person=payer, group_name=group.name))

    try:
        value = Decimal(amount.replace(",", ""))
    except InvalidOperation:
        _fail(templates.ERROR_VALIDATION.format(message=f"Invalid amount: {amount}"))
    if not value.is_finite():
        _fail(templates.ERROR_VALIDATION.format(message=f"Invalid amount: {amount}"))

    try:
        new_group, expense = ledger.add_expense(group, payer_id, value, " ".join(description))
    except (ledger.SplitItError, ValueError) as e:
        _fail(templates.ERROR_VALIDATION.format(message=e))

    storage.add_expense(expense)
    storage.update_group(new_group)
    logger.info("Recorded expense %s in group %s", expense.id, new_group.id)

    click.echo(
        templates.EXPENSE_ADDED.format(
            description=expense.description,
            amount=templates.format_currency(expense.amount),
            payer=ledger.participant_name(new_group, payer_id),
            debts=templates.format_transfers(new_group, ledger.simplified_debts(new_group)),
        )
    )


@cli.command()
@click.argument("group_ref", metavar="GROUP")
@state_dir_option
def expenses(group_ref: str, state_dir: str | None) -> None:
    """List the expenses of a group."""
    group = _load_group(_storage(state_dir), group_ref)
    click.echo(templates.format_expenses(group))


@cli.command("remove-expense")
@click.argument("group_ref", metavar="GROUP")
@click.argument("expense_id")
@state_dir_option
def remove_expense(group_ref: str, expense_id: str, state_dir: str | None) -> None:
    """Remove an expense from a group."""
    storage = _storage(state_dir)
    group = _load_group(storage, group_ref)

    new_group, removed = ledger.remove_expense(group, expense_id)
    if removed is None:
        _fail(templates.ERROR_VALIDATION.format(message=f"No expense with id '{expense_id}'"))

    storage.delete_expense(removed.id)
    storage.update_group(new_group)
    logger.info("Removed expense %s from group %s", removed.id, new_group.id)

    click.echo(
        templates.EXPENSE_REMOVED.format(
            description=removed.description,
            debts=templates.format_transfers(new_group, ledger.simplified_debts(new_group)),
        )
    )


@cli.command()
@click.argument("group_ref", metavar="GROUP")
@state_dir_option
def delete(group_ref: str, state_dir: str | None) -> None:
    """Delete a group and its expenses."""
    storage = _storage(state_dir)
    group = _load_group(storage, group_ref)

    storage.delete_group(group.id)
    storage.save_expenses([e for e in storage.get_expenses() if e.group_id != group.id])
    logger.info("Deleted group %s", group.id)
    click.echo(templates.GROUP_DELETED.format(group_name=group.name))


@cli.command()
@click.argument("group_ref", metavar="GROUP")
@click.option(
    "--view",
    type=click.Choice(VIEWS),
    default="settle",
    show_default=True,
    help="net: per-person position, settle: suggested transfers, exact: who owes whom",
)
@state_dir_option
def balances(group_ref: str, view: str, state_dir: str | None) -> None:
    """Show balances for a group."""
    group = _load_group(_storage(state_dir), group_ref)

    try:
        ledger.validate_group(group)
    except ledger.UnknownParticipantError as e:
        logger.warning("Group %s has inconsistent expenses: %s", group.id, e)

    if view == "net":
        body = templates.format_net_balances(ledger.net_balance_rows(group))
        click.echo(templates.NET_BALANCES.format(group_name=group.name, body=body))
    elif view == "exact":
        body = templates.format_transfers(group, ledger.exact_balances(group))
        click.echo(templates.EXACT_BALANCES.format(group_name=group.name, body=body))
    else:
        body = templates.format_transfers(group, ledger.simplified_debts(group))
        click.echo(templates.SETTLE_BALANCES.format(group_name=group.name, body=body))


@cli.command()
@click.argument("group_ref", metavar="GROUP", required=False)
@state_dir_option
def summary(group_ref: str | None, state_dir: str | None) -> None:
    """Summarize one group, or outstanding debts across every group."""
    storage = _storage(state_dir)
    if group_ref is not None:
        click.echo(templates.format_group_summary(_load_group(storage, group_ref)))
        return
    click.echo(templates.format_overall_summary(storage.get_groups()))


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
