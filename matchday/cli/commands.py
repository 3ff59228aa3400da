"""
`matchday` command line.

Operator tasks that have no HTTP surface (indexes, migrations, scoring
bets) plus the admin actions, for use before any admin client exists.
"""

import asyncio
from functools import wraps
from typing import Callable

import click
import uvicorn
from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from matchday import __version__
from matchday.clients.football_api import FootballApiClient
from matchday.config import configure_logging, get_settings
from matchday.db.connection import close_database, get_connection, get_database
from matchday.db.indexes import ensure_indexes
from matchday.errors import MatchdayError
from matchday.models.group import GroupCreate
from matchday.models.user import UserCreate
from matchday.services import BetService, GroupService, UserService
from migrations import apply_pending, migration_status

console = Console()


def async_command(f: Callable) -> Callable:
    """Run an async command body on a fresh event loop."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def handle_errors(f: Callable) -> Callable:
    """
    Print expected failures and exit with status 1.

    The shared database connection is closed however the command ends.
    """

    @wraps(f)
    async def wrapper(*args, **kwargs):
        try:
            return await f(*args, **kwargs)
        except (MatchdayError, ValidationError) as e:
            console.print(f"[red]Error:[/red] {e}")
            raise SystemExit(1) from e
        finally:
            await close_database()

    return wrapper


def report(title: str, rows: dict[str, object], ok: bool = True) -> None:
    colour = "green" if ok else "red"
    body = "\n".join(f"{label}: {value}" for label, value in rows.items())
    console.print(Panel(body, title=title, border_style=colour))


@click.group()
@click.version_option(version=__version__, prog_name="matchday")
def cli():
    """Matchday administration."""
    configure_logging(get_settings())


@cli.group()
def db():
    """Indexes and connectivity."""


@db.command("init")
@async_command
@handle_errors
async def db_init():
    """Create the indexes of every collection."""
    created = await ensure_indexes(await get_database())

    table = Table(title="Indexes", box=box.ROUNDED)
    table.add_column("Collection", style="cyan")
    table.add_column("Index names", style="green")
    for collection, names in created.items():
        table.add_row(collection, ", ".join(names))
    console.print(table)


@db.command("status")
@async_command
@handle_errors
async def db_status():
    """Ping MongoDB."""
    connection = await get_connection()
    await connection.connect()
    health = await connection.health_check()

    if health["healthy"]:
        report(
            "MongoDB",
            {"Server": health["server_version"], "Latency (ms)": health["latency_ms"]},
        )
    else:
        report("MongoDB", {"Error": health["error"]}, ok=False)


@cli.group()
def migrate():
    """Versioned data migrations."""


@migrate.command("up")
@async_command
@handle_errors
async def migrate_up():
    """Apply pending migrations in order."""
    applied = await apply_pending(await get_database())
    if not applied:
        console.print("Nothing to apply.")
        return
    console.print(f"[green]Applied:[/green] {', '.join(f'{v:03d}' for v in applied)}")


@migrate.command("status")
@async_command
@handle_errors
async def migrate_status():
    """List migrations and whether each has run."""
    table = Table(title="Migrations", box=box.ROUNDED)
    table.add_column("Version", justify="right", style="cyan")
    table.add_column("Description")
    table.add_column("Applied")

    for module, applied in await migration_status(await get_database()):
        table.add_row(
            f"{module.VERSION:03d}",
            module.DESCRIPTION,
            "[green]yes[/green]" if applied else "[yellow]no[/yellow]",
        )
    console.print(table)


@cli.group()
def group():
    """Betting groups."""


@group.command("create")
@click.option("--name", "-n", required=True)
@click.option("--team", "-t", required=True, type=int, help="API-Football team id")
@click.option("--league", "-l", required=True, type=int, help="API-Football league id")
@click.option("--season", "-s", required=True, type=int, help="Season start year")
@click.option("--email", "-e", default=None)
@click.option("--website", "-w", default=None)
@async_command
@handle_errors
async def group_create(name, team, league, season, email, website):
    """Create a group following TEAM, seeded from API-Football."""
    data = GroupCreate(
        name=name, team=team, league=league, season=season, email=email, website=website
    )
    async with FootballApiClient(get_settings().football_api) as football_api:
        created = await GroupService(await get_database(), football_api).create_group(data)

    team_info = created.followed_teams[0]
    report(
        "Group created",
        {
            "ID": created.id,
            "Name": created.name,
            "Team": f"{team_info.name} ({team_info.api_id})",
            "Upcoming games": len(created.upcoming_games),
        },
    )


@cli.group()
def user():
    """User accounts."""


@user.command("create")
@click.option("--username", "-u", required=True)
@click.option("--email", "-e", required=True)
@click.option("--group", "-g", "group_id", required=True, help="ID of an existing group")
@click.password_option()
@async_command
@handle_errors
async def user_create(username, email, group_id, password):
    """Create a user and add them to a group."""
    data = UserCreate(username=username, email=email, password=password, group=group_id)
    created = await UserService(await get_database()).create_user(data)

    report(
        "User created",
        {"ID": created.id, "Username": created.username, "Group": created.group_id},
    )


@cli.group()
def bet():
    """Bets."""


@bet.command("evaluate")
@click.argument("bet_id")
@click.option("--points", "-p", required=True, type=click.IntRange(min=0))
@async_command
@handle_errors
async def bet_evaluate(bet_id, points):
    """Score a pending bet. A bet can be evaluated only once."""
    evaluated = await BetService(await get_database()).evaluate_bet(bet_id, points)
    console.print(
        f"[green]{evaluated.id}[/green] "
        f"{evaluated.home_team_score}:{evaluated.away_team_score} -> {evaluated.points} pts"
    )


@cli.command("serve")
@click.option("--host", default=None, help="Defaults to APP_HOST")
@click.option("--port", default=None, type=int, help="Defaults to APP_PORT")
@click.option("--reload", is_flag=True)
def serve(host, port, reload):
    """Run the HTTP API under uvicorn."""
    app_settings = get_settings().app
    uvicorn.run(
        "matchday.api.app:create_app",
        factory=True,
        host=host or app_settings.host,
        port=port or app_settings.port,
        reload=reload,
        log_config=None,
    )


if __name__ == "__main__":
    cli()
