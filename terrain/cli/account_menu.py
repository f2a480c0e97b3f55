from __future__ import annotations

import questionary
from rich.console import Console
from rich.table import Table

from terrain.models.subscription import PLAN_LABELS, Plan
from terrain.services.account_service import AccountService
from terrain.services.errors import TeamError
from terrain.services.subscription_service import SubscriptionService
from terrain.services.team_service import TeamService

console = Console()


def account_management_menu(account_service: AccountService, subscription_service: SubscriptionService) -> None:
    while True:
        choice = questionary.select(
            "Manage Accounts",
            choices=[
                "Create Account",
                "Change Plan",
                "List Accounts",
                "Back",
            ],
        ).ask()

        if choice is None or choice == "Back":
            break
        elif choice == "Create Account":
            _create_account(account_service)
        elif choice == "Change Plan":
            _change_plan(account_service, subscription_service)
        elif choice == "List Accounts":
            _list_accounts(account_service, subscription_service)


def _create_account(account_service: AccountService) -> None:
    console.print()
    console.print("[bold]New Account[/bold]", style="cyan")

    email = questionary.text("Email:").ask()
    if not email:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    display_name = questionary.text("Display name (optional):").ask() or ""

    password = questionary.password("Password:").ask()
    if not password:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    confirm = questionary.password("Confirm password:").ask()
    if password != confirm:
        console.print("[red]Passwords do not match.[/red]")
        return

    try:
        account = account_service.register(email, password, display_name)
    except TeamError as e:
        console.print(f"[red]{e.message}[/red]")
        return

    console.print(f"[green]Account {account.email} created.[/green]")
    if account.team_owner_id is not None:
        console.print("[green]A pending invitation was claimed; the account joined a team.[/green]")


def _change_plan(account_service: AccountService, subscription_service: SubscriptionService) -> None:
    email = questionary.text("Account email:").ask()
    if not email:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    account = account_service.get_by_email(email)
    if account is None:
        console.print(f"[red]No account for {email}.[/red]")
        return

    current = subscription_service.get_plan(account.id)
    plan = questionary.select(
        f"Plan (current: {PLAN_LABELS[current]})",
        choices=[questionary.Choice(PLAN_LABELS[p], value=p.value) for p in Plan],
    ).ask()
    if plan is None:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    subscription_service.set_plan(account.id, plan)
    console.print(f"[green]{account.email} is now on the {PLAN_LABELS[Plan(plan)]} plan.[/green]")


def _list_accounts(account_service: AccountService, subscription_service: SubscriptionService) -> None:
    accounts = account_service.list_accounts()
    if not accounts:
        console.print("[yellow]No accounts found.[/yellow]")
        return

    by_id = {a.id: a for a in accounts}
    table = Table(title="Accounts")
    table.add_column("Email", style="cyan")
    table.add_column("Name")
    table.add_column("Plan")
    table.add_column("Team owner")
    table.add_column("Created")

    for account in accounts:
        owner = by_id.get(account.team_owner_id)
        created = account.created_at.strftime("%Y-%m-%d %H:%M") if account.created_at else "-"
        table.add_row(
            account.email,
            account.display_name or "-",
            PLAN_LABELS[subscription_service.get_plan(account.id)],
            owner.email if owner else "-",
            created,
        )

    console.print(table)


def show_team(account_service: AccountService, team_service: TeamService) -> None:
    email = questionary.text("Owner email:").ask()
    if not email:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    owner = account_service.get_by_email(email)
    if owner is None:
        console.print(f"[red]No account for {email}.[/red]")
        return

    team = team_service.list_team(owner)
    console.print(
        f"[bold]{owner.name_or_email}[/bold]: seats used: "
        f"{team_service.seats_used(owner.id)}/{team_service.seat_limit}"
    )

    members = Table(title="Members")
    members.add_column("Email", style="cyan")
    members.add_column("Name")
    for member in team.members:
        members.add_row(member.email, member.display_name or "-")
    console.print(members)

    invitations = Table(title="Invitations")
    invitations.add_column("Email", style="cyan")
    invitations.add_column("Status")
    invitations.add_column("Sent")
    for invitation in team.invitations:
        sent = invitation.created_at.strftime("%Y-%m-%d %H:%M") if invitation.created_at else "-"
        invitations.add_row(invitation.email, invitation.status, sent)
    console.print(invitations)


def invite_member(account_service: AccountService, team_service: TeamService) -> None:
    owner_email = questionary.text("Owner email:").ask()
    if not owner_email:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    owner = account_service.get_by_email(owner_email)
    if owner is None:
        console.print(f"[red]No account for {owner_email}.[/red]")
        return

    email = questionary.text("Invitee email:").ask()
    if not email:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    try:
        result = team_service.invite_member(owner, email)
    except TeamError as e:
        console.print(f"[red]{e.message}[/red]")
        return

    if result.auto_linked:
        console.print(f"[green]{result.email} already had an account and was added to the team.[/green]")
    else:
        console.print(f"[green]Invitation sent to {result.email}.[/green]")
