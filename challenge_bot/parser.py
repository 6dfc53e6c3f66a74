"""Extract the sections of a challenge submission from an issue body.

An issue body looks like::

    ## Info
    ```yaml
    difficulty: easy
    title: Pick<T, K>
    ```

    ## Question
    <!--question-start-->
    Implement the built-in `Pick<T, K>` generic ...
    <!--question-end-->

    ## Template
    ```ts
    type MyPick<T, K> = any
    ```

    ## Test Cases
    ```ts
    import type { Equal, Expect } from '@type-challenges/utils'
    ```

Headings are localized (see `challenge_bot.locales`). Every extractor returns
None instead of raising when its section is missing or malformed.
"""

import logging
import re

import yaml
from pydantic import ValidationError

from challenge_bot.locales import t
from challenge_bot.models import ChallengeInfo, ParsedSubmission

logger = logging.getLogger(__name__)


def get_code_block(text: str, title: str, lang: str = "ts") -> str | None:
    """Return the first ```<lang> fenced block following the `## <title>` heading."""
    pattern = re.compile(rf"## {re.escape(title)}[\s\S]*?```{re.escape(lang)}([\s\S]*?)```")
    match = pattern.search(text)
    if match and match.group(1).strip():
        return match.group(1).strip()
    return None


def get_comment_range(text: str, key: str) -> str | None:
    """Return the text between `<!--<key>-start-->` and `<!--<key>-end-->`."""
    pattern = re.compile(rf"<!--{re.escape(key)}-start-->([\s\S]*?)<!--{re.escape(key)}-end-->")
    match = pattern.search(text)
    if match and match.group(1).strip():
        return match.group(1).strip()
    return None


def parse_info(raw: str | None) -> ChallengeInfo | None:
    """Load the yaml info block and validate it. Malformed input yields None."""
    if not raw:
        return None
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        logger.info("Info block is not valid YAML: %s", exc)
        return None
    if not isinstance(data, dict):
        return None
    try:
        return ChallengeInfo.model_validate(data)
    except ValidationError as exc:
        logger.info("Info block does not match the expected schema: %s", exc.errors(include_url=False))
        return None


def parse_issue(body: str, locale: str) -> ParsedSubmission:
    return ParsedSubmission(
        info=parse_info(get_code_block(body, t(locale, "info"), "yaml")),
        template=get_code_block(body, t(locale, "template"), "ts"),
        tests=get_code_block(body, t(locale, "tests"), "ts"),
        question=get_comment_range(body, "question"),
    )


def is_valid_submission(submission: ParsedSubmission) -> bool:
    """The validity gate: all four sections present and the info block well-formed."""
    return submission.is_valid
