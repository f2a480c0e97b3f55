import questionary
from rich.console import Console

from terrain.cli.account_menu import account_management_menu, invite_member, show_team
from terrain.notifications.dispatcher import ThreadPoolDispatcher
from terrain.repositories.factory import (
    get_account_repository,
    get_invitation_repository,
    get_subscription_repository,
)
from terrain.services.account_service import AccountService
from terrain.services.subscription_service import SubscriptionService
from terrain.services.team_service import TeamService

console = Console()


def _build_services(dispatcher: ThreadPoolDispatcher) -> tuple[AccountService, SubscriptionService, TeamService]:
    account_repo = get_account_repository()
    invitation_repo = get_invitation_repository()
    subscription_repo = get_subscription_repository()
    return (
        AccountService(account_repo, subscription_repo, invitation_repo),
        SubscriptionService(subscription_repo),
        TeamService(account_repo, invitation_repo, subscription_repo, dispatcher),
    )


def main_menu() -> None:
    dispatcher = ThreadPoolDispatcher()
    account_service, subscription_service, team_service = _build_services(dispatcher)

    console.print()
    console.print("[bold]Terrain: Team Administration[/bold]", style="cyan")
    console.print()

    try:
        while True:
            choice = questionary.select(
                "Main Menu",
                choices=[
                    "Manage Accounts",
                    "Show Team",
                    "Invite Member",
                    "Exit",
                ],
            ).ask()

            if choice is None or choice == "Exit":
                console.print("[bold]Goodbye![/bold]")
                break
            elif choice == "Manage Accounts":
                account_management_menu(account_service, subscription_service)
            elif choice == "Show Team":
                show_team(account_service, team_service)
            elif choice == "Invite Member":
                invite_member(account_service, team_service)
    finally:
        dispatcher.shutdown()
