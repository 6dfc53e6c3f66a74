"""Shared pydantic models — the contract between the provider, the parser and the workflow."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, PrivateAttr, model_validator

Difficulty = Literal["warm", "easy", "medium", "hard", "extreme"]


class User(BaseModel):
    model_config = ConfigDict(frozen=True)

    login: str


class Label(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str


class Issue(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int
    title: str = ""
    body: str | None = None
    labels: list[Label] = []
    user: User

    @property
    def label_names(self) -> list[str]:
        return [label.name for label in self.labels if label.name]


class Repository(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    full_name: str
    owner: User


class IssueEvent(BaseModel):
    """The subset of an `issues` / `issue_comment` event payload we act on."""

    model_config = ConfigDict(frozen=True)

    issue: Issue | None = None
    repository: Repository | None = None


class GitHubUser(BaseModel):
    """Public profile returned by GET /users/{username}."""

    model_config = ConfigDict(frozen=True)

    id: int
    login: str
    name: str | None = None


class PullRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int
    title: str
    user: User
    html_url: str = ""
    head_ref: str = ""


class Comment(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    body: str = ""
    user: User


class _UserYaml(BaseModel):
    """A block written by the submitter: dumps back with their key order and explicit nulls."""

    model_config = ConfigDict(frozen=True, extra="allow")

    _key_order: tuple[str, ...] = PrivateAttr(default=())

    @model_validator(mode="wrap")
    @classmethod
    def remember_key_order(cls, data: Any, handler: Any) -> Any:
        model = handler(data)
        if isinstance(data, dict):
            model._key_order = tuple(data)
        return model

    def to_yaml_dict(self) -> dict:
        # Unset fields are defaults we filled in, not something the submitter wrote
        data = self.model_dump(mode="python", exclude_unset=True)
        ordered = {key: data[key] for key in self._key_order if key in data}
        return {**ordered, **data}


class ChallengeAuthor(_UserYaml):
    github: str | None = None
    name: str | None = None


class ChallengeInfo(_UserYaml):
    """The `info` block of a submission. Extra keys (tags, related, ...) are kept."""

    title: str
    difficulty: Difficulty
    author: ChallengeAuthor | None = None

    def to_yaml_dict(self) -> dict:
        data = super().to_yaml_dict()
        if self.author is not None and "author" in data:
            data["author"] = self.author.to_yaml_dict()
        return data


class ValidSubmission(BaseModel):
    """A submission that passed the validity gate: every section is present."""

    model_config = ConfigDict(frozen=True)

    info: ChallengeInfo
    template: str
    tests: str
    question: str


class ParsedSubmission(BaseModel):
    model_config = ConfigDict(frozen=True)

    info: ChallengeInfo | None = None
    template: str | None = None
    tests: str | None = None
    question: str | None = None

    @property
    def is_valid(self) -> bool:
        return bool(self.question and self.template and self.tests and self.info is not None)

    def validated(self) -> ValidSubmission | None:
        if self.info is None or not (self.question and self.template and self.tests):
            return None
        return ValidSubmission(info=self.info, template=self.template, tests=self.tests, question=self.question)


class CommitAuthor(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    email: str


class Reconciliation(BaseModel):
    """Result of looking up the automation PR for an issue: found or not found."""

    model_config = ConfigDict(frozen=True)

    branch: str
    existing: PullRequest | None = None

    @property
    def is_new(self) -> bool:
        return self.existing is None
