"""challenge-bot CLI — all commands."""

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich import print as rprint
from rich.markup import escape
from rich.table import Table

from challenge_bot.locales import SUPPORTED_LOCALES
from challenge_bot.logging import setup_logging
from challenge_bot.models import IssueEvent
from challenge_bot.parser import parse_issue
from challenge_bot.providers.base import RepositoryHost
from challenge_bot.providers.github import GitHubProvider
from challenge_bot.publisher import build_files, challenge_dir
from challenge_bot.settings import CONFIG_PATH, BotSettings, get_settings
from challenge_bot.workflow import run_action

app = typer.Typer(help="challenge-bot: turn new-challenge issues into pull requests", no_args_is_help=True)

logger = logging.getLogger("challenge_bot")


# ---------------------------------------------------------------------------
# Provider factory
# ---------------------------------------------------------------------------


def get_provider(settings: BotSettings) -> RepositoryHost:
    return GitHubProvider(settings)


def load_event(path: Path) -> IssueEvent:
    with path.open(encoding="utf-8") as fh:
        return IssueEvent.model_validate(json.load(fh))


def _resolve_repo(settings: BotSettings, event: IssueEvent) -> str | None:
    if settings.github_repository:
        return settings.github_repository
    if event.repository is not None:
        return event.repository.full_name
    return None


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("run")
def run_cmd(
    event_path: Annotated[
        Path | None,
        typer.Option("--event", "-e", help="Event payload JSON (defaults to $GITHUB_EVENT_PATH)"),
    ] = None,
    repo: Annotated[
        str | None,
        typer.Option("--repo", "-r", help="owner/repo (defaults to $GITHUB_REPOSITORY or the payload)"),
    ] = None,
) -> None:
    """Handle one issue event: parse, publish the branch, open or update the PR, comment."""
    settings = get_settings(github_event_path=event_path, github_repository=repo)
    setup_logging(settings.log_level)

    if settings.github_event_path is None:
        rprint("[red]No event payload. Pass --event or set GITHUB_EVENT_PATH.[/red]")
        raise typer.Exit(1)
    event = load_event(settings.github_event_path)

    target = _resolve_repo(settings, event)
    if not target:
        rprint("[red]Cannot determine the repository. Pass --repo or set GITHUB_REPOSITORY.[/red]")
        raise typer.Exit(1)

    provider = get_provider(settings)
    try:
        outcome = run_action(event, provider, settings, target)
    except Exception:
        logger.exception("Action failed")
        raise typer.Exit(1)

    rprint(f"[green]✓[/green] {target}: {outcome.value}")


@app.command("parse")
def parse_cmd(
    body_file: Annotated[Path, typer.Argument(help="File holding the issue body (markdown)")],
    number: Annotated[int, typer.Option("--number", "-n", help="Issue number used for the target path")] = 0,
    locale: Annotated[str, typer.Option("--locale", "-l", help="Heading language: en or zh-CN")] = "en",
    root: Annotated[str, typer.Option("--root", help="Questions directory")] = "questions",
) -> None:
    """Parse an issue body offline and show what would be published."""
    if locale not in SUPPORTED_LOCALES:
        rprint(f"[red]Unknown locale '{locale}'. Valid: {', '.join(SUPPORTED_LOCALES)}[/red]")
        raise typer.Exit(1)

    submission = parse_issue(body_file.read_text(encoding="utf-8"), locale)

    table = Table(title=f"Submission ({locale})")
    table.add_column("Section", style="bold")
    table.add_column("Value")

    if submission.info is not None:
        info = json.dumps(submission.info.to_yaml_dict(), ensure_ascii=False, default=str)
        table.add_row("info", escape(info))
    else:
        table.add_row("info", "[red](missing or malformed)[/red]")
    for name in ("template", "tests", "question"):
        value = getattr(submission, name)
        table.add_row(name, escape(value) if value is not None else "[red](missing)[/red]")

    rprint(table)

    valid = submission.validated()
    if valid is None:
        rprint("[red]✗ Invalid submission[/red]")
        raise typer.Exit(1)

    directory = challenge_dir(number, valid.info.difficulty, valid.info.title, root)
    files = build_files(directory, locale, valid.info, valid.template, valid.tests, valid.question)
    rprint("[green]✓[/green] Valid submission")
    for path in files:
        rprint(f"  {escape(path)}")


@app.command("config-show")
def config_show() -> None:
    """Show resolved configuration (masks credentials)."""
    try:
        settings = get_settings()
    except typer.Exit:
        return

    def mask(val: str | None) -> str:
        if val is None:
            return "[dim](not set)[/dim]"
        if len(val) <= 5:
            return "***"
        return f"...{val[-5:]}"

    table = Table(title=f"challenge-bot configuration ({CONFIG_PATH})")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row(
        "github_token",
        mask(settings.github_token.get_secret_value() if settings.github_token else None),
    )
    table.add_row("github_auth", settings.github_auth)
    table.add_row("github_repository", settings.github_repository or "[dim](not set)[/dim]")
    table.add_row(
        "github_event_path",
        str(settings.github_event_path) if settings.github_event_path else "[dim](not set)[/dim]",
    )
    table.add_row("api_url", settings.api_url)
    table.add_row("bot_login", escape(settings.bot_login))
    table.add_row("base_branch", settings.base_branch)
    table.add_row("trigger_label", settings.trigger_label)
    table.add_row("pr_label", settings.pr_label)
    table.add_row("questions_dir", settings.questions_dir)
    table.add_row("noreply_host", settings.noreply_host)
    table.add_row("log_level", settings.log_level)

    rprint(table)
