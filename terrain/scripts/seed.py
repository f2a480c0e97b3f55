"""Seed the database with demo teams for local development.

Usage:
    python -m terrain.scripts.seed
"""

from __future__ import annotations

import random

from faker import Faker
from rich.console import Console
from rich.table import Table
from sqlalchemy import text

from terrain.db import close_connection, get_connection, initialize_db
from terrain.logging import configure_logging
from terrain.models.account import Account
from terrain.models.subscription import Plan
from terrain.notifications.dispatcher import ThreadPoolDispatcher
from terrain.repositories.factory import (
    get_account_repository,
    get_invitation_repository,
    get_subscription_repository,
)
from terrain.services.account_service import AccountService
from terrain.services.errors import TeamError
from terrain.services.subscription_service import SubscriptionService
from terrain.services.team_service import TeamService

console = Console()
fake = Faker("en_US")

MAIN_EMAIL = "owner@terrain.test"
PASSWORD = "password"
NUM_OWNERS = 3
NUM_FREE_ACCOUNTS = 6

# Child tables first so foreign keys never block the delete.
TABLES_TO_CLEAR = [
    "team_invitations",
    "subscriptions",
    "accounts",
]


def _clear_all(conn) -> None:
    console.print("\n[yellow]Clearing all tables...[/yellow]")
    conn.execute(text("UPDATE accounts SET team_owner_id = NULL"))
    for table in TABLES_TO_CLEAR:
        conn.execute(text(f"DELETE FROM {table}"))  # noqa: S608
        console.print(f"  Cleared [dim]{table}[/dim]")
    conn.commit()
    console.print("[green]All tables cleared.[/green]\n")


def _create_accounts(account_service: AccountService, subscription_service: SubscriptionService) -> list[Account]:
    """Create team-plan owners and a handful of free accounts."""
    console.print("[cyan]Creating accounts...[/cyan]")

    owners: list[Account] = []
    for i in range(NUM_OWNERS):
        email = MAIN_EMAIL if i == 0 else fake.unique.company_email()
        owner = account_service.register(email, PASSWORD, fake.name())
        subscription_service.set_plan(owner.id, Plan.TEAM)
        console.print(f"  [bold green]Owner:[/bold green] {owner.email} (id={owner.id})")
        owners.append(owner)

    for _ in range(NUM_FREE_ACCOUNTS):
        account = account_service.register(fake.unique.company_email(), PASSWORD, fake.name())
        console.print(f"  Created account: {account.email} (id={account.id})")

    console.print(f"[green]{NUM_OWNERS + NUM_FREE_ACCOUNTS} accounts created.[/green]\n")
    return owners


def _invite_members(team_service: TeamService, owners: list[Account], free_emails: list[str]) -> None:
    console.print("[cyan]Sending invitations...[/cyan]")

    table = Table(title="Invitations")
    table.add_column("Owner", style="cyan")
    table.add_column("Invitee")
    table.add_column("Result")

    pool = list(free_emails)
    random.shuffle(pool)
    for owner in owners:
        invitees = [pool.pop() for _ in range(min(2, len(pool)))]
        invitees += [fake.unique.free_email() for _ in range(random.randint(1, 3))]
        for email in invitees:
            try:
                result = team_service.invite_member(owner, email)
            except TeamError as e:
                table.add_row(owner.email, email, f"[red]{e.message}[/red]")
                continue
            outcome = "[green]linked[/green]" if result.auto_linked else "[yellow]pending[/yellow]"
            table.add_row(owner.email, email, outcome)

    console.print(table)


def main() -> None:
    console.print("[bold magenta]Terrain: Database Seeder[/bold magenta]")
    console.print("=" * 40)

    configure_logging(level="WARNING")
    initialize_db()
    conn = get_connection()
    _clear_all(conn)

    account_repo = get_account_repository()
    invitation_repo = get_invitation_repository()
    subscription_repo = get_subscription_repository()
    dispatcher = ThreadPoolDispatcher()

    account_service = AccountService(account_repo, subscription_repo, invitation_repo)
    subscription_service = SubscriptionService(subscription_repo)
    team_service = TeamService(account_repo, invitation_repo, subscription_repo, dispatcher)

    try:
        owners = _create_accounts(account_service, subscription_service)
        owner_ids = {o.id for o in owners}
        free_emails = [a.email for a in account_service.list_accounts() if a.id not in owner_ids]
        _invite_members(team_service, owners, free_emails)
    finally:
        dispatcher.shutdown()
        close_connection()

    console.print("\n[bold green]Seed complete![/bold green]")
    console.print(f"  Login: [bold]{MAIN_EMAIL}[/bold] / [bold]{PASSWORD}[/bold]")


if __name__ == "__main__":
    main()
