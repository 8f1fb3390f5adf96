"""Best-effort markdown sanity check for standup text.

This is not a markdown parser. It only rejects text whose brackets or
parentheses are unbalanced, or which contains a link/image opener without a
well-formed ``[text](url)`` / ``![alt](url)`` somewhere in the text.
"""

import re

_LINK_RE = re.compile(r"\[.*?\]\(.*?\)")
_IMAGE_RE = re.compile(r"!\[.*?\]\(.*?\)")


def is_valid_markdown(content: str) -> bool:
    """Return True if ``content`` passes the bracket/link sanity rules."""
    if not content or not isinstance(content, str):
        return False

    if content.count("[") != content.count("]"):
        return False
    if content.count("(") != content.count(")"):
        return False

    if "](" in content and not _LINK_RE.search(content):
        return False

    if "![" in content and not _IMAGE_RE.search(content):
        return False

    return True
