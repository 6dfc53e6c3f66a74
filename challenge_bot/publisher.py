"""Materialize a parsed submission as files on the per-issue branch."""

import logging
import re
import unicodedata

import yaml
from pypinyin import lazy_pinyin

from challenge_bot.locales import DEFAULT_LOCALE
from challenge_bot.models import ChallengeInfo, CommitAuthor
from challenge_bot.providers.base import RepositoryHost

logger = logging.getLogger(__name__)


def slug(text: str) -> str:
    """Lowercase, hyphenated, ASCII-only.

    Han characters are spelled out in pinyin, accents are folded and everything
    else collapses to '-', so `深度只读` becomes `shen-du-zhi-du`.
    """
    spelled = " ".join(lazy_pinyin(text))
    folded = unicodedata.normalize("NFKD", spelled).encode("ascii", "ignore").decode("ascii")
    return re.sub(r"[^a-z0-9]+", "-", folded.lower()).strip("-")


def branch_name(no: int) -> str:
    return f"pulls/{no}"


def challenge_dir(no: int, difficulty: str, title: str, root: str = "questions") -> str:
    """Return the destination directory, e.g. `questions/42-easy-pick` for "Pick<T>".

    Dots become hyphens and generic parameters (`<...>`) are dropped before slugging.
    """
    cleaned = re.sub(r"<.*>", "", title.replace(".", "-"))
    return f"{root}/{no}-{difficulty}-{slug(cleaned)}"


def _localized(name: str, ext: str, locale: str) -> str:
    if locale == DEFAULT_LOCALE:
        return f"{name}.{ext}"
    return f"{name}.{locale}.{ext}"


def _with_newline(text: str) -> str:
    return text.rstrip("\n") + "\n"


def dump_info(info: ChallengeInfo) -> str:
    return yaml.safe_dump(info.to_yaml_dict(), allow_unicode=True, sort_keys=False)


def build_files(
    directory: str,
    locale: str,
    info: ChallengeInfo,
    template: str,
    tests: str,
    question: str,
) -> dict[str, str]:
    """The exact file set of a challenge: info, README, template and test cases."""
    return {
        f"{directory}/{_localized('info', 'yml', locale)}": _with_newline(dump_info(info)),
        f"{directory}/{_localized('README', 'md', locale)}": _with_newline(question),
        f"{directory}/template.ts": _with_newline(template),
        f"{directory}/test-cases.ts": _with_newline(tests),
    }


def commit_message(no: int, title: str) -> str:
    return f"feat(question): add #{no} - {title}"


def publish(
    provider: RepositoryHost,
    repo: str,
    no: int,
    files: dict[str, str],
    title: str,
    author: CommitAuthor,
    base: str,
    fresh: bool,
) -> str:
    """Push the file set as a single commit on `pulls/<no>`; `fresh` resets the branch onto `base`."""
    head = branch_name(no)
    logger.info("Pushing %d files to %s (fresh=%s)", len(files), head, fresh)
    sha = provider.push_commit(
        repo,
        base=base,
        head=head,
        files=files,
        message=commit_message(no, title),
        author=author,
        fresh=fresh,
    )
    logger.info("Branch %s now at %s", head, sha)
    return sha
