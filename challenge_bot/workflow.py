"""Issue -> pull request action.

parse -> validate -> resolve author -> reconcile PR -> publish -> notify.
Every run re-reads the remote state (open PRs, issue comments), so repeated
triggers for the same issue converge on one PR and one bot comment.
"""

import json
import logging
from datetime import datetime
from enum import Enum

from challenge_bot import notifier, publisher
from challenge_bot.locales import pick_locale, t
from challenge_bot.models import (
    ChallengeInfo,
    CommitAuthor,
    GitHubUser,
    IssueEvent,
    PullRequest,
    Reconciliation,
)
from challenge_bot.parser import parse_issue
from challenge_bot.playground import format_to_code, to_badge_link, to_playground_url
from challenge_bot.providers.base import RepositoryHost
from challenge_bot.settings import BotSettings

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    SKIPPED = "skipped"
    INVALID = "invalid"
    CREATED = "created"
    UPDATED = "updated"


# ---------------------------------------------------------------------------
# Author resolution
# ---------------------------------------------------------------------------


def resolve_author(info: ChallengeInfo, login: str, profile: GitHubUser | None) -> ChallengeInfo:
    """Fill in `author` from the issue author's profile unless the submission set one."""
    if info.author is not None:
        return info
    author: dict = {"github": login}
    if profile is not None and profile.name:
        author["name"] = profile.name
    # Rebuilt from the dump so the submitter's key order carries over to info.yml
    return ChallengeInfo.model_validate({**info.to_yaml_dict(), "author": author})


def noreply_email(login: str, profile: GitHubUser | None, host: str = "github.com") -> str:
    if profile is None:
        return f"{login}@users.noreply.{host}"
    return f"{profile.id}+{profile.login}@users.noreply.{host}"


def commit_author(login: str, profile: GitHubUser | None, host: str = "github.com") -> CommitAuthor:
    # The git data API rejects an empty author name
    name = (profile.name if profile else None) or login
    return CommitAuthor(name=name, email=noreply_email(login, profile, host))


# ---------------------------------------------------------------------------
# PR reconciliation
# ---------------------------------------------------------------------------


def find_automation_pull(pulls: list[PullRequest], number: int, bot_login: str) -> PullRequest | None:
    prefix = f"#{number} "
    return next((p for p in pulls if p.user.login == bot_login and p.title.startswith(prefix)), None)


def reconcile(provider: RepositoryHost, repo: str, number: int, bot_login: str) -> Reconciliation:
    existing = find_automation_pull(provider.list_pull_requests(repo, state="open"), number, bot_login)
    return Reconciliation(branch=publisher.branch_name(number), existing=existing)


def pull_request_title(number: int, title: str) -> str:
    return f"#{number} - {title}"


def pull_request_body(number: int) -> str:
    return (
        f"This is an auto-generated PR that auto reflect on #{number}, "
        f"please go to #{number} for discussion or making changes.\n\n"
        f"Closes #{number}"
    )


# ---------------------------------------------------------------------------
# The action
# ---------------------------------------------------------------------------


def run_action(
    event: IssueEvent,
    provider: RepositoryHost,
    settings: BotSettings,
    repo: str,
    now: datetime | None = None,
) -> Outcome:
    issue = event.issue
    if issue is None:
        logger.info("Event carries no issue, skipped")
        return Outcome.SKIPPED

    labels = issue.label_names
    if settings.trigger_label not in labels:
        logger.info("No matched labels, skipped")
        return Outcome.SKIPPED

    no = issue.number
    locale = pick_locale(labels)
    logger.debug("Payload: %s", event.model_dump_json(indent=2))

    submission = parse_issue(issue.body or "", locale)
    logger.info(
        "Parsed #%s (%s): %s",
        no,
        locale,
        json.dumps(submission.model_dump(mode="json"), indent=2, ensure_ascii=False),
    )

    valid = submission.validated()
    if valid is None:
        notifier.upsert_comment(provider, repo, no, notifier.invalid_body(locale), settings.bot_login)
        return Outcome.INVALID

    login = issue.user.login
    profile = provider.get_user(login)
    info = resolve_author(valid.info, login, profile)
    author = commit_author(login, profile, settings.noreply_host)

    state = reconcile(provider, repo, no, settings.bot_login)

    directory = publisher.challenge_dir(no, info.difficulty, info.title, settings.questions_dir)
    files = publisher.build_files(directory, locale, info, valid.template, valid.tests, valid.question)
    publisher.publish(
        provider,
        repo,
        no,
        files,
        title=info.title,
        author=author,
        base=settings.base_branch,
        fresh=state.is_new,
    )

    playground_url = to_playground_url(
        format_to_code(no, info, valid.template, valid.tests, valid.question)
    )
    playground_badge = to_badge_link(
        playground_url, "", t(locale, "badge.preview-playground"), "3178c6", "?logo=typescript"
    )

    if state.existing is not None:
        logger.info("Pull request #%s exists for #%s: %s", state.existing.number, no, state.existing.html_url)
        body = notifier.status_body(locale, state.existing.number, False, playground_badge, now)
        notifier.upsert_comment(provider, repo, no, body, settings.bot_login)
        return Outcome.UPDATED

    logger.info("Creating pull request for #%s", no)
    pull = provider.create_pull_request(
        repo,
        title=pull_request_title(no, info.title),
        body=pull_request_body(no),
        head=state.branch,
        base=settings.base_branch,
        labels=[settings.pr_label],
    )
    logger.info("Created pull request #%s: %s", pull.number, pull.html_url)
    body = notifier.status_body(locale, pull.number, True, playground_badge, now)
    notifier.upsert_comment(provider, repo, no, body, settings.bot_login)
    return Outcome.CREATED
