"""Content-type detection for clipboard text.

Detection is an ordered table of named rules evaluated against the stripped
text; the first rule that holds decides the type. Narrow, high-confidence
shapes (URL, email, phone) come before the broad code and markdown heuristics
that would otherwise claim them.
"""

import json
import re
from collections.abc import Callable
from dataclasses import dataclass

from ceevee.models import ContentType


@dataclass(frozen=True)
class Rule:
    """A named detection rule."""

    name: str
    content_type: ContentType
    predicate: Callable[[str], bool]


URL_TLDS = ("com", "org", "net", "edu", "gov", "mil", "int", "co", "io", "ly", "me", "tv", "dev", "app", "site", "tech")

URL_PATTERNS = [
    re.compile(r"^https?://"),
    re.compile(r"^www\.[\w\-.]+", re.ASCII),
]
BARE_DOMAIN = re.compile(
    r"[\w\-.]+\.(?:" + "|".join(URL_TLDS) + r")[\w/?&=\-.%#]*",
    re.ASCII | re.IGNORECASE,
)
WHITESPACE = re.compile(r"\s")

EMAIL = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

PHONE_SEPARATORS = re.compile(r"[\s\-()+.]")
PHONE_DIGITS = re.compile(r"[0-9]{7,15}")

# First line only; pretty-printed JSON indents its inner lines
LEADING_INDENT = re.compile(r"^\s{2,}")
SEMICOLON_EOL = re.compile(r";\s*\n")
CODE_PREFIXES = [
    # JavaScript / TypeScript
    re.compile(r"^(?:function|const|let|var|class|import|export|interface|type|async|await)\s"),
    # Python
    re.compile(r"^(?:def |class |import |from |if __name__|print\()"),
    # CSS
    re.compile(r"^[.#]?[\w\-]+\s*\{", re.ASCII),
    re.compile(r"^@(?:media|import|keyframes)"),
    # HTML
    re.compile(r"^<[a-zA-Z][^>]*>"),
    # Shell prefix padded with extra whitespace; "git status" is a command, not code
    re.compile(r"^(?:sudo|npm|git|cd|ls|mkdir|rm|cp|mv) \s"),
    # Comment markers; "# Title" is a markdown heading
    re.compile(r"^(?://|/\*|\*/|<!--|#(?!#{0,5}\s))"),
    # Assignment, but not a drive letter such as C:\
    re.compile(r"^(?![A-Za-z]:[\\/])[a-zA-Z_$][a-zA-Z0-9_$]*\s*[=:]\s*[^=]"),
    # Call
    re.compile(r"^[a-zA-Z_$][a-zA-Z0-9_$]*\("),
]

FILEPATH_PATTERNS = [
    re.compile(r"^(?:[/~]|[A-Za-z]:[\\/])"),
    re.compile(r"^\.\.?[/\\]"),
    re.compile(r"[/\\][^/\\]*\.[a-zA-Z0-9]{1,10}$"),
]

COMMAND_PROGRAMS = (
    "sudo", "npm", "git", "cd", "ls", "mkdir", "rm", "cp", "mv", "curl", "wget", "ssh", "scp",
    "rsync", "find", "grep", "awk", "sed", "sort", "uniq", "head", "tail", "cat", "less", "more",
    "vim", "nano", "emacs", "python", "node", "java", "gcc", "make", "cmake", "docker", "kubectl",
    "helm", "terraform",
)
COMMAND_PATTERNS = [
    re.compile(r"^(?:" + "|".join(COMMAND_PROGRAMS) + r")\s"),
    re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*\s+--?[a-zA-Z]"),
    re.compile(r"\s--?[a-zA-Z][a-zA-Z0-9\-]*(?:\s|=|$)"),
]

MARKDOWN_PREFIXES = [
    re.compile(r"^#{1,6}\s"),  # heading
    re.compile(r"^\*\*.*\*\*"),  # bold
    re.compile(r"^\*.*\*"),  # italic
    re.compile(r"^```"),  # fence
    re.compile(r"^`.*`"),  # inline code
    re.compile(r"^\[.*\]\(.*\)"),  # link
    re.compile(r"^!\[.*\]\(.*\)"),  # image
    re.compile(r"^[-*+]\s"),  # list
    re.compile(r"^[0-9]+\.\s"),  # numbered list
    re.compile(r"^>\s"),  # blockquote
]
MARKDOWN_MARKERS = ("```", "**")

DATA_MIN_LENGTH = 200


def _any_search(patterns: list[re.Pattern], text: str) -> bool:
    return any(pattern.search(text) for pattern in patterns)


def is_url(text: str) -> bool:
    if _any_search(URL_PATTERNS, text):
        return True
    return not WHITESPACE.search(text) and BARE_DOMAIN.fullmatch(text) is not None


def is_email(text: str) -> bool:
    return EMAIL.fullmatch(text) is not None


def is_phone(text: str) -> bool:
    digits = PHONE_SEPARATORS.sub("", text)
    return PHONE_DIGITS.fullmatch(digits) is not None and PHONE_SEPARATORS.search(text) is not None


def is_code(text: str) -> bool:
    if "\t" in text or LEADING_INDENT.match(text):
        return True
    if ";" in text and SEMICOLON_EOL.search(text):
        return True
    return _any_search(CODE_PREFIXES, text)


def _is_bracketed(text: str) -> bool:
    return (text.startswith("{") and text.endswith("}")) or (text.startswith("[") and text.endswith("]"))


def _reject_constant(name: str) -> float:
    raise ValueError(f"non-standard JSON constant {name}")


def _parses_as_json(text: str) -> bool:
    try:
        json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return False
    return True


def is_json(text: str) -> bool:
    return _is_bracketed(text) and _parses_as_json(text)


def is_json_like_code(text: str) -> bool:
    return _is_bracketed(text) and "{" in text and "}" in text and not _parses_as_json(text)


def is_filepath(text: str) -> bool:
    return _any_search(FILEPATH_PATTERNS, text)


def is_command(text: str) -> bool:
    return _any_search(COMMAND_PATTERNS, text)


def is_markdown(text: str) -> bool:
    return _any_search(MARKDOWN_PREFIXES, text) or any(marker in text for marker in MARKDOWN_MARKERS)


def is_data(text: str) -> bool:
    return len(text) > DATA_MIN_LENGTH and "\n" not in text and " " not in text


RULES: list[Rule] = [
    Rule("url", ContentType.URL, is_url),
    Rule("email", ContentType.EMAIL, is_email),
    Rule("phone", ContentType.PHONE, is_phone),
    Rule("code", ContentType.CODE, is_code),
    Rule("json", ContentType.JSON, is_json),
    Rule("json_like_code", ContentType.CODE, is_json_like_code),
    Rule("filepath", ContentType.FILEPATH, is_filepath),
    Rule("command", ContentType.COMMAND, is_command),
    Rule("markdown", ContentType.MARKDOWN, is_markdown),
    Rule("data", ContentType.DATA, is_data),
]


def match_rule(content: str | None, rules: list[Rule] | None = None) -> Rule | None:
    """Return the first rule that holds for the stripped content, if any."""
    if not isinstance(content, str):
        return None
    text = content.strip()
    if not text:
        return None
    for rule in rules if rules is not None else RULES:
        if rule.predicate(text):
            return rule
    return None


def classify(content: str | None) -> ContentType:
    """Infer the content type of clipboard text.

    Args:
        content: Raw clipboard text. Non-string input is accepted.

    Returns:
        The first matching rule's type, or ContentType.TEXT.
    """
    rule = match_rule(content)
    return rule.content_type if rule else ContentType.TEXT
