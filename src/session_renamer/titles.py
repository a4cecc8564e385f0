"""Title text helpers: prompt, placeholder detection, truncation, date stamping."""

from datetime import datetime

SYSTEM_PROMPT = """You are a session title generator. Generate a concise, descriptive title for a coding session based on the user's first message.

Rules:
- Title must be in the same language as the user's message
- Title should capture the main task/topic
- Keep it short and descriptive (max {max_length} characters)
- No quotes, no punctuation at the end
- Just output the title, nothing else

Examples:
- User: "Help me fix the login bug in auth.ts" -> "Fix login bug"
- User: "I want to refactor the database module" -> "Refactor database module"
- User: "Please optimize this React component's performance" -> "Optimize React component performance\""""

USER_PROMPT = "Generate a title for this message:\n\n{text}"

# Placeholders the host assigns to freshly created root and child sessions.
DEFAULT_TITLE_PREFIXES = ("New session - ", "Child session - ")


def build_system_prompt(max_length: int) -> str:
    return SYSTEM_PROMPT.replace("{max_length}", str(max_length))


def is_default_title(title: str | None) -> bool:
    """Return True if the title is empty or a host-assigned placeholder."""
    if not title or not title.strip():
        return True
    return title.strip().startswith(DEFAULT_TITLE_PREFIXES)


def truncate_title(title: str, max_length: int) -> str:
    """Trim whitespace and hard-cut to ``max_length`` characters."""
    title = title.strip()
    if len(title) > max_length:
        title = title[:max_length]
    return title


def format_date(template: str, now: datetime | None = None) -> str:
    """Render ``YYYY YY MM DD HH mm`` tokens against local time.

    Tokens are substituted in that order, first occurrence only. Every
    substituted value is numeric, so a later token can never match inside
    an earlier replacement.
    """
    now = now or datetime.now()
    replacements = (
        ("YYYY", f"{now.year}"),
        ("YY", f"{now.year}"[-2:]),
        ("MM", f"{now.month:02d}"),
        ("DD", f"{now.day:02d}"),
        ("HH", f"{now.hour:02d}"),
        ("mm", f"{now.minute:02d}"),
    )
    result = template
    for token, value in replacements:
        result = result.replace(token, value, 1)
    return result


def stamp_title(title: str, template: str, now: datetime | None = None) -> str:
    """Append the formatted date: ``<title>(<date>)``."""
    return f"{title}({format_date(template, now)})"
