"""Abstract base class for repository hosting providers."""

from abc import ABC, abstractmethod

from challenge_bot.models import Comment, CommitAuthor, GitHubUser, PullRequest


class RepositoryHost(ABC):
    @abstractmethod
    def list_pull_requests(self, repo: str, state: str = "open") -> list[PullRequest]: ...

    @abstractmethod
    def create_pull_request(
        self,
        repo: str,
        title: str,
        body: str,
        head: str,
        base: str,
        labels: list[str] | None = None,
    ) -> PullRequest: ...

    @abstractmethod
    def list_comments(self, repo: str, issue_number: int) -> list[Comment]: ...

    @abstractmethod
    def create_comment(self, repo: str, issue_number: int, body: str) -> Comment: ...

    @abstractmethod
    def update_comment(self, repo: str, comment_id: int, body: str) -> Comment: ...

    @abstractmethod
    def get_user(self, username: str) -> GitHubUser | None: ...

    @abstractmethod
    def push_commit(
        self,
        repo: str,
        base: str,
        head: str,
        files: dict[str, str],
        message: str,
        author: CommitAuthor,
        fresh: bool = False,
    ) -> str: ...
