"""GitHub REST API v3 provider."""

import subprocess

import httpx

from challenge_bot.models import Comment, CommitAuthor, GitHubUser, PullRequest, User
from challenge_bot.providers.base import RepositoryHost
from challenge_bot.settings import BotSettings

BASE_URL = "https://api.github.com"

# Regular, non-executable file in a git tree
_BLOB_MODE = "100644"


class GitHubProvider(RepositoryHost):
    def __init__(self, settings: BotSettings) -> None:
        self._token = self._resolve_token(settings)
        self._base_url = settings.api_url.rstrip("/") if settings.api_url else BASE_URL
        self._headers = {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _resolve_token(self, settings: BotSettings) -> str:
        if settings.github_auth == "gh-cli":
            result = subprocess.run(
                ["gh", "auth", "token"],
                capture_output=True,
                text=True,
            )
            if result.returncode != 0:
                raise RuntimeError("gh auth token failed. Run: gh auth login")
            return result.stdout.strip()
        if settings.github_token:
            return settings.github_token.get_secret_value()
        raise RuntimeError("No GitHub credentials. Set GITHUB_TOKEN.")

    def _request(
        self,
        method: str,
        path: str,
        params: dict | None = None,
        body: dict | None = None,
    ) -> httpx.Response:
        response = httpx.request(
            method,
            f"{self._base_url}{path}",
            headers=self._headers,
            params=params or {},
            json=body,
            timeout=30,
        )
        if response.status_code == 401:
            raise RuntimeError("GitHub API returned 401. Check that GITHUB_TOKEN is set and has repo scope.")
        response.raise_for_status()
        return response

    def _get(self, path: str, params: dict | None = None) -> dict | list:
        return self._request("GET", path, params=params).json()

    def _get_or_none(self, path: str) -> dict | None:
        try:
            return self._get(path)  # type: ignore[return-value]
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                return None
            raise

    def _post(self, path: str, body: dict) -> dict:
        return self._request("POST", path, body=body).json()

    def _patch(self, path: str, body: dict) -> dict:
        return self._request("PATCH", path, body=body).json()

    # -----------------------------------------------------------------------
    # Node conversion
    # -----------------------------------------------------------------------

    def _pull_from_node(self, node: dict) -> PullRequest:
        user = node.get("user") or {}
        head = node.get("head") or {}
        return PullRequest(
            number=node["number"],
            title=node.get("title") or "",
            user=User(login=user.get("login", "")),
            html_url=node.get("html_url", ""),
            head_ref=head.get("ref", ""),
        )

    def _comment_from_node(self, node: dict) -> Comment:
        user = node.get("user") or {}
        return Comment(id=node["id"], body=node.get("body") or "", user=User(login=user.get("login", "")))

    # -----------------------------------------------------------------------
    # Pulls, comments, users
    # -----------------------------------------------------------------------

    def list_pull_requests(self, repo: str, state: str = "open") -> list[PullRequest]:
        # NOTE: fetches page 1 only (up to 100 results). Full pagination not implemented.
        nodes = self._get(f"/repos/{repo}/pulls", params={"state": state, "per_page": "100"})
        return [self._pull_from_node(node) for node in nodes]  # type: ignore[arg-type]

    def create_pull_request(
        self,
        repo: str,
        title: str,
        body: str,
        head: str,
        base: str,
        labels: list[str] | None = None,
    ) -> PullRequest:
        node = self._post(f"/repos/{repo}/pulls", {"title": title, "body": body, "head": head, "base": base})
        pull = self._pull_from_node(node)
        if labels:
            # The pulls endpoint ignores labels; PRs share the issues label API
            self._post(f"/repos/{repo}/issues/{pull.number}/labels", {"labels": labels})
        return pull

    def list_comments(self, repo: str, issue_number: int) -> list[Comment]:
        # NOTE: fetches page 1 only (up to 100 results). Full pagination not implemented.
        nodes = self._get(f"/repos/{repo}/issues/{issue_number}/comments", params={"per_page": "100"})
        return [self._comment_from_node(node) for node in nodes]  # type: ignore[arg-type]

    def create_comment(self, repo: str, issue_number: int, body: str) -> Comment:
        node = self._post(f"/repos/{repo}/issues/{issue_number}/comments", {"body": body})
        return self._comment_from_node(node)

    def update_comment(self, repo: str, comment_id: int, body: str) -> Comment:
        node = self._patch(f"/repos/{repo}/issues/comments/{comment_id}", {"body": body})
        return self._comment_from_node(node)

    def get_user(self, username: str) -> GitHubUser | None:
        node = self._get_or_none(f"/users/{username}")
        if node is None:
            return None
        return GitHubUser(id=node["id"], login=node["login"], name=node.get("name"))

    # -----------------------------------------------------------------------
    # Git data: one commit with many files
    # -----------------------------------------------------------------------

    def _ref_sha(self, repo: str, branch: str) -> str | None:
        node = self._get_or_none(f"/repos/{repo}/git/ref/heads/{branch}")
        if node is None:
            return None
        return node["object"]["sha"]

    def push_commit(
        self,
        repo: str,
        base: str,
        head: str,
        files: dict[str, str],
        message: str,
        author: CommitAuthor,
        fresh: bool = False,
    ) -> str:
        """Commit `files` onto branch `head` and return the new commit sha.

        With `fresh`, or when `head` does not exist yet, the commit is parented on
        the tip of `base` and `head` is force-moved to it, dropping whatever the
        branch held before. Otherwise the commit goes on top of `head`.
        """
        head_sha = self._ref_sha(repo, head)
        if fresh or head_sha is None:
            parent_sha = self._ref_sha(repo, base)
            if parent_sha is None:
                raise RuntimeError(f"Base branch '{base}' not found in {repo}")
        else:
            parent_sha = head_sha

        parent = self._get(f"/repos/{repo}/git/commits/{parent_sha}")
        tree = self._post(
            f"/repos/{repo}/git/trees",
            {
                "base_tree": parent["tree"]["sha"],  # type: ignore[call-overload]
                "tree": [
                    {"path": path, "mode": _BLOB_MODE, "type": "blob", "content": content}
                    for path, content in files.items()
                ],
            },
        )
        commit = self._post(
            f"/repos/{repo}/git/commits",
            {
                "message": message,
                "tree": tree["sha"],
                "parents": [parent_sha],
                "author": {"name": author.name, "email": author.email},
            },
        )

        if head_sha is None:
            self._post(f"/repos/{repo}/git/refs", {"ref": f"refs/heads/{head}", "sha": commit["sha"]})
        else:
            self._patch(f"/repos/{repo}/git/refs/heads/{head}", {"sha": commit["sha"], "force": True})
        return commit["sha"]
