"""CLI for SettleUp using Typer."""

import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .config import load_settings
from .formatting import format_money
from .models import Ledger
from .service import LedgerService
from .store import LedgerStore

app = typer.Typer(
    name="settle-up",
    help="Settle shared group expenses with the fewest transfers",
)

console = Console()

LEDGER_OPTION = typer.Option(
    None, "--ledger", "-l", help="Ledger JSON file (defaults to SETTLE_UP_LEDGER_PATH)"
)
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Verbose output")


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def _open(ledger_path: Path | None) -> tuple[LedgerService, LedgerStore, Ledger]:
    """Load settings and the ledger snapshot."""
    settings = load_settings()
    store = LedgerStore(ledger_path or settings.ledger_path)
    return LedgerService(settings), store, store.load()


def _name(ledger: Ledger, member_id: str) -> str:
    member = ledger.group.get_member(member_id)
    return member.display_name if member else member_id


def colored_money(amount: float, currency: str) -> str:
    """Green for money owed to a member, red for money they owe."""
    formatted = format_money(amount, currency)
    if amount > 0:
        return f"[green]{formatted}[/green]"
    if amount < 0:
        return f"[red]{formatted}[/red]"
    return f"[dim]{formatted}[/dim]"


@app.command()
def debts(ledger_path: Path | None = LEDGER_OPTION, verbose: bool = VERBOSE_OPTION):
    """
    Show who owes whom.

    Settlement records are ignored; the transfers shown are the fewest
    needed to clear every balance from the group's expenses.
    """
    setup_logging(verbose)

    try:
        service, _store, ledger = _open(ledger_path)
        currency = service.currency_for(ledger)
        simplified = service.simplified_debts(ledger)

        if not simplified:
            console.print("[green]✓ All settled up![/green]")
            return

        table = Table(
            title=f"Debts in {ledger.group.name}",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("From", style="cyan")
        table.add_column("To", style="cyan")
        table.add_column("Amount", justify="right")

        for debt in simplified:
            table.add_row(
                _name(ledger, debt.from_member_id),
                _name(ledger, debt.to_member_id),
                format_money(debt.amount, currency),
            )

        console.print(table)
        console.print(f"\n  Total transfers: {len(simplified)}")

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)


@app.command()
def balances(ledger_path: Path | None = LEDGER_OPTION, verbose: bool = VERBOSE_OPTION):
    """Show each member's net balance (paid minus owed)."""
    setup_logging(verbose)

    try:
        service, _store, ledger = _open(ledger_path)
        currency = service.currency_for(ledger)

        table = Table(
            title=f"Balances in {ledger.group.name}",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Member", style="cyan")
        table.add_column("Balance", justify="right")

        for net in service.net_balances(ledger):
            table.add_row(_name(ledger, net.member_id), colored_money(net.balance, currency))

        console.print(table)

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)


@app.command()
def summary(
    member: str | None = typer.Option(
        None, "--member", "-m", help="Also show this member's paid and share totals"
    ),
    ledger_path: Path | None = LEDGER_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Show group spending statistics."""
    setup_logging(verbose)

    try:
        service, _store, ledger = _open(ledger_path)
        stats = service.summarize(ledger, member_id=member)
        currency = stats.currency

        console.print(f"\n[bold]{ledger.group.name}[/bold]")
        console.print(f"  Total spending: {format_money(stats.total_spending, currency)}")
        console.print(
            f"  Average per head: {format_money(stats.average_per_head, currency)}"
        )
        if stats.top_payer:
            console.print(
                f"  Top payer: {stats.top_payer.name} "
                f"({format_money(stats.top_payer.total_paid, currency)})"
            )
        if stats.member:
            console.print(
                f"  {stats.member.name}: paid "
                f"{format_money(stats.member.total_paid, currency)}, share "
                f"{format_money(stats.member.total_share, currency)}"
            )
        console.print()

        table = Table(title="Members", show_header=True, header_style="bold magenta")
        table.add_column("Member", style="cyan")
        table.add_column("Paid", justify="right")
        table.add_column("Share", justify="right")
        for row in stats.members:
            table.add_row(
                row.name,
                format_money(row.total_paid, currency),
                format_money(row.total_share, currency),
            )
        console.print(table)

        if stats.categories:
            table = Table(
                title="Spending by Category", show_header=True, header_style="bold magenta"
            )
            table.add_column("Category", style="yellow")
            table.add_column("Total", justify="right")
            for category in stats.categories:
                table.add_row(category.name, format_money(category.total, currency))
            console.print(table)

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)


@app.command()
def settle(
    from_member: str = typer.Argument(..., help="Member id paying the debt"),
    to_member: str = typer.Argument(..., help="Member id receiving the payment"),
    amount: float | None = typer.Option(
        None, "--amount", "-a", help="Amount paid (defaults to the full debt)"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
    ledger_path: Path | None = LEDGER_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """
    Record a settlement payment between two members.

    Appends a settlement record to the ledger file. The amount must be
    positive and no larger than the outstanding debt.
    """
    setup_logging(verbose)

    try:
        service, store, ledger = _open(ledger_path)
        currency = service.currency_for(ledger)
        debt = service.find_debt(ledger, from_member, to_member)
        paid = debt.amount if amount is None else amount

        console.print(
            f"\n[bold]Settlement:[/bold] {_name(ledger, from_member)} pays "
            f"{_name(ledger, to_member)} {format_money(paid, currency)} "
            f"[dim](max {format_money(debt.amount, currency)})[/dim]"
        )

        if not yes:
            confirm = input("Continue? [y/N] ").strip().lower()
            if confirm not in ("y", "yes"):
                console.print("[yellow]Cancelled.[/yellow]")
                return

        updated = service.record_settlement(ledger, debt, amount=amount)
        store.save(updated)

        console.print(
            f"\n[bold green]✓ Settlement of {format_money(paid, currency)} "
            f"to {_name(ledger, to_member)} recorded.[/bold green]"
        )

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)


if __name__ == "__main__":
    app()
