"""Localized section headings and bot replies."""

DEFAULT_LOCALE = "en"

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "info": "Info",
        "template": "Template",
        "tests": "Test Cases",
        "issue_reply": "#{0} - Pull Request created.",
        "issue_update_reply": "#{0} - Pull Request updated.",
        "issue_invalid_reply": "Failed to parse the issue, please follow the template.",
        "badge.preview-playground": "Preview in Playground",
    },
    "zh-CN": {
        "info": "基本信息",
        "template": "题目模版",
        "tests": "判题测试",
        "issue_reply": "#{0} - PR 已生成",
        "issue_update_reply": "#{0} - PR 已更新",
        "issue_invalid_reply": "Issue 格式不正确，请按照依照模版修正",
        "badge.preview-playground": "在 Playground 中预览",
    },
}

SUPPORTED_LOCALES = tuple(MESSAGES)


def pick_locale(labels: list[str]) -> str:
    """Return the first non-default locale found among the issue labels, else English."""
    for locale in SUPPORTED_LOCALES:
        if locale != DEFAULT_LOCALE and locale in labels:
            return locale
    return DEFAULT_LOCALE


def t(locale: str, key: str) -> str:
    # Missing keys fall back to English, then to the key itself
    table = MESSAGES.get(locale, MESSAGES[DEFAULT_LOCALE])
    return table.get(key) or MESSAGES[DEFAULT_LOCALE].get(key, key)
