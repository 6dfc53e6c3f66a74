"""Shared test fixtures."""

import itertools
from collections.abc import Callable
from pathlib import Path

import pytest

import challenge_bot.settings as settings_module
from challenge_bot.models import (
    Comment,
    CommitAuthor,
    GitHubUser,
    Issue,
    IssueEvent,
    Label,
    PullRequest,
    Repository,
    User,
)
from challenge_bot.providers.base import RepositoryHost
from challenge_bot.settings import BotSettings

ISSUE_BODY = """\
<!--
Thanks for contributing a challenge! Fill in every section below.
-->

## Info

```yaml
difficulty: easy
title: Pick<T>
tags: union
```

## Question

<!--question-start-->
Implement the built-in `Pick<T, K>` generic without using it.

For example: `MyPick<Todo, 'title'>`
<!--question-end-->

## Template

```ts
type MyPick<T, K> = any
```

## Test Cases

```ts
import type { Equal, Expect } from '@type-challenges/utils'

type cases = [
  Expect<Equal<Expected1, MyPick<Todo, 'title'>>>,
]
```
"""

ISSUE_BODY_ZH = """\
## 基本信息

```yaml
difficulty: medium
title: 深度只读
```

## 题目

<!--question-start-->
实现一个泛型 `DeepReadonly<T>`。
<!--question-end-->

## 题目模版

```ts
type DeepReadonly<T> = any
```

## 判题测试

```ts
type cases = [Expect<Equal<DeepReadonly<X>, Expected>>]
```
"""


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep the runner's GITHUB_* environment and any repo config out of the tests."""
    for name in (
        "GITHUB_TOKEN",
        "GITHUB_REPOSITORY",
        "GITHUB_EVENT_PATH",
        "CHALLENGE_BOT_GITHUB_TOKEN",
        "CHALLENGE_BOT_GITHUB_REPOSITORY",
        "CHALLENGE_BOT_GITHUB_EVENT_PATH",
        "CHALLENGE_BOT_GITHUB_AUTH",
        "CHALLENGE_BOT_BASE_BRANCH",
        "CHALLENGE_BOT_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(settings_module, "CONFIG_PATH", tmp_path / "challenge-bot.toml")
    settings_module._load_toml.cache_clear()
    yield
    settings_module._load_toml.cache_clear()


class FakeHost(RepositoryHost):
    """In-memory repository: branches are flat {path: content} maps."""

    def __init__(self, base: str = "master", bot_login: str = "github-actions[bot]") -> None:
        self.bot_login = bot_login
        self._ids = itertools.count(1000)
        self.users: dict[str, GitHubUser] = {"alice": GitHubUser(id=7, login="alice", name="Alice Liddell")}
        self.pulls: list[PullRequest] = []
        self.comments: dict[int, list[Comment]] = {}
        self.branches: dict[str, dict[str, str]] = {base: {"README.md": "# Challenges\n"}}
        self.commits: list[dict] = []
        self.calls: list[str] = []

    def list_pull_requests(self, repo: str, state: str = "open") -> list[PullRequest]:
        self.calls.append("list_pull_requests")
        return list(self.pulls)

    def create_pull_request(self, repo, title, body, head, base, labels=None) -> PullRequest:
        self.calls.append("create_pull_request")
        pull = PullRequest(number=next(self._ids), title=title, user=User(login=self.bot_login), head_ref=head)
        self.pulls.append(pull)
        return pull

    def list_comments(self, repo: str, issue_number: int) -> list[Comment]:
        self.calls.append("list_comments")
        return list(self.comments.get(issue_number, []))

    def create_comment(self, repo: str, issue_number: int, body: str) -> Comment:
        self.calls.append("create_comment")
        comment = Comment(id=next(self._ids), body=body, user=User(login=self.bot_login))
        self.comments.setdefault(issue_number, []).append(comment)
        return comment

    def update_comment(self, repo: str, comment_id: int, body: str) -> Comment:
        self.calls.append("update_comment")
        for comments in self.comments.values():
            for i, comment in enumerate(comments):
                if comment.id == comment_id:
                    comments[i] = comment.model_copy(update={"body": body})
                    return comments[i]
        raise KeyError(comment_id)

    def get_user(self, username: str) -> GitHubUser | None:
        self.calls.append("get_user")
        return self.users.get(username)

    def push_commit(self, repo, base, head, files, message, author: CommitAuthor, fresh=False) -> str:
        self.calls.append("push_commit")
        parent = self.branches[base] if fresh or head not in self.branches else self.branches[head]
        self.branches[head] = {**parent, **files}
        self.commits.append({"head": head, "message": message, "author": author, "fresh": fresh})
        return f"sha{len(self.commits)}"


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def settings() -> BotSettings:
    return BotSettings(
        github_token="ghp_test",  # type: ignore[arg-type]
        github_auth="token",
        github_repository="octo/challenges",
    )


@pytest.fixture
def issue_body() -> str:
    return ISSUE_BODY


@pytest.fixture
def issue_body_zh() -> str:
    return ISSUE_BODY_ZH


@pytest.fixture
def make_issue() -> Callable[..., Issue]:
    def _make(body: str = ISSUE_BODY, labels: tuple[str, ...] = ("new-challenge",), number: int = 42) -> Issue:
        return Issue(
            number=number,
            title="New challenge",
            body=body,
            labels=[Label(name=name) for name in labels],
            user=User(login="alice"),
        )

    return _make


@pytest.fixture
def make_event(make_issue: Callable[..., Issue]) -> Callable[..., IssueEvent]:
    def _make(issue: Issue | None = None) -> IssueEvent:
        return IssueEvent(
            issue=issue if issue is not None else make_issue(),
            repository=Repository(name="challenges", full_name="octo/challenges", owner=User(login="octo")),
        )

    return _make
