"""TypeScript playground links and shields.io badges for bot comments."""

from datetime import datetime, timezone
from urllib.parse import quote

from challenge_bot.models import ChallengeInfo

PLAYGROUND_URL = "https://www.typescriptlang.org/play"
SHIELDS_URL = "https://img.shields.io"


def _block_comment(text: str) -> str:
    # "*/" inside the question would close the comment early
    body = "\n".join(f"  {line}".rstrip() for line in text.replace("*/", "*\\/").splitlines())
    return f"/*\n{body}\n*/"


def format_to_code(
    no: int,
    info: ChallengeInfo,
    template: str,
    tests: str,
    question: str,
) -> str:
    """Render a submission as a single TypeScript file ready for the playground."""
    author = info.author
    by = ""
    if author is not None:
        who = author.name or author.github
        if who and author.github:
            by = f" by {who} @{author.github}"
        elif who:
            by = f" by {who}"

    header = f"// #{no} - {info.title} ({info.difficulty}){by}"
    return "\n".join(
        [
            header,
            "",
            _block_comment(question),
            "",
            "/* _____________ Your Code Here _____________ */",
            "",
            template,
            "",
            "/* _____________ Test Cases _____________ */",
            "",
            tests,
            "",
        ]
    )


def to_playground_url(code: str) -> str:
    return f"{PLAYGROUND_URL}?#src={quote(code, safe='')}"


def _escape_badge_part(text: str) -> str:
    # shields.io uses "-" as the field separator; a literal dash is written "--"
    return quote(text.replace("-", "--"), safe="")


def to_badge_url(label: str, text: str, color: str, args: str = "") -> str:
    return f"{SHIELDS_URL}/badge/{_escape_badge_part(label)}-{_escape_badge_part(text)}-{color}{args}"


def to_badge(label: str, text: str, color: str, args: str = "") -> str:
    return f'<img src="{to_badge_url(label, text, color, args)}" alt="{text}"/>'


def to_badge_link(url: str, label: str, text: str, color: str, args: str = "") -> str:
    return f'<a href="{url}" target="_blank">{to_badge(label, text, color, args)}</a> '


def timestamp_badge(now: datetime | None = None) -> str:
    """A date badge that shields.io renders relative to the viewer's clock ("2 minutes ago")."""
    now = now or datetime.now(timezone.utc)
    iso = now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return f"![{iso}]({SHIELDS_URL}/date/{round(now.timestamp())}?color=green&label=)"
