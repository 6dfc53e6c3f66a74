"""Settings resolution: CLI overrides > environment > .env > TOML file > defaults."""

from functools import lru_cache
from pathlib import Path
from typing import Any

import tomlkit
import typer
from pydantic import AliasChoices, Field, SecretStr
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

CONFIG_PATH = Path(".github") / "challenge-bot.toml"


@lru_cache(maxsize=1)
def _load_toml() -> dict[str, Any]:
    """Load .github/challenge-bot.toml, returning an empty mapping if missing."""
    if not CONFIG_PATH.exists():
        return {}
    with CONFIG_PATH.open() as fh:
        return tomlkit.load(fh).unwrap()


class TomlFileSource(PydanticBaseSettingsSource):
    """Lowest-priority source: flat keys from the repository's bot config file."""

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return _load_toml().get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return {k: v for k, v in _load_toml().items() if k in self.settings_cls.model_fields}


class BotSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CHALLENGE_BOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # GitHub access; the plain GITHUB_* names are what Actions exports
    github_token: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("challenge_bot_github_token", "github_token"),
    )
    github_auth: str = "token"  # "token" | "gh-cli"
    github_repository: str | None = Field(
        default=None,
        validation_alias=AliasChoices("challenge_bot_github_repository", "github_repository"),
    )
    github_event_path: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("challenge_bot_github_event_path", "github_event_path"),
    )
    api_url: str = "https://api.github.com"

    # The automation identity; PRs and comments by this login are ours
    bot_login: str = "github-actions[bot]"

    base_branch: str = "master"
    trigger_label: str = "new-challenge"
    pr_label: str = "auto-generated"
    questions_dir: str = "questions"
    noreply_host: str = "github.com"

    log_level: str = "INFO"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, dotenv_settings, TomlFileSource(settings_cls), file_secret_settings)


def get_settings(**overrides: Any) -> BotSettings:
    """Return fully resolved settings, exiting with a message when credentials are missing.

    Overrides with a value of None are ignored so CLI options can be passed through as-is.
    """
    settings = BotSettings(**{k: v for k, v in overrides.items() if v is not None})

    if settings.github_auth not in ("token", "gh-cli"):
        typer.echo(f"Invalid github_auth '{settings.github_auth}'. Valid: token, gh-cli")
        raise typer.Exit(1)
    if settings.github_auth == "token" and not settings.github_token:
        typer.echo(
            "Missing GitHub credentials. Set GITHUB_TOKEN (or CHALLENGE_BOT_GITHUB_TOKEN), "
            f'or set github_auth = "gh-cli" in {CONFIG_PATH} to use the gh CLI.'
        )
        raise typer.Exit(1)

    return settings
