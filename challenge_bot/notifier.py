"""Keep exactly one bot comment on the issue, editing it in place on every run."""

import logging
from datetime import datetime

from challenge_bot.locales import t
from challenge_bot.models import Comment
from challenge_bot.playground import timestamp_badge
from challenge_bot.providers.base import RepositoryHost

logger = logging.getLogger(__name__)


def find_bot_comment(comments: list[Comment], bot_login: str) -> Comment | None:
    return next((c for c in comments if c.user.login == bot_login), None)


def upsert_comment(
    provider: RepositoryHost,
    repo: str,
    issue_number: int,
    body: str,
    bot_login: str,
) -> Comment:
    existing = find_bot_comment(provider.list_comments(repo, issue_number), bot_login)
    if existing is not None:
        logger.info("Updating comment %s on #%s", existing.id, issue_number)
        return provider.update_comment(repo, existing.id, body)
    logger.info("Creating comment on #%s", issue_number)
    return provider.create_comment(repo, issue_number, body)


def status_body(
    locale: str,
    pr_number: int,
    created: bool,
    playground_badge: str,
    now: datetime | None = None,
) -> str:
    key = "issue_reply" if created else "issue_update_reply"
    headline = t(locale, key).replace("{0}", str(pr_number))
    return f"{headline}\n\n{timestamp_badge(now)}  {playground_badge}"


def invalid_body(locale: str) -> str:
    return t(locale, "issue_invalid_reply")
