"""Display helpers for the popup view."""

import html
import re

_TAG_RE = re.compile(r"<[^>]+>")
_BREAK_RE = re.compile(r"<\s*(br|/p|/div|/li)\s*/?\s*>", re.IGNORECASE)
_SPACE_RE = re.compile(r"[ \t]+")


def format_price(cents: int, symbol: str = "$") -> str:
    """Format minor currency units, e.g. 2500 -> "$25.00"."""
    sign = "-" if cents < 0 else ""
    cents = abs(cents)
    return f"{sign}{symbol}{cents // 100}.{cents % 100:02d}"


def strip_html(markup: str) -> str:
    """Reduce an HTML description to its text content."""
    if not markup:
        return ""
    text = _BREAK_RE.sub("\n", markup)
    text = _TAG_RE.sub("", text)
    text = html.unescape(text)
    lines = [_SPACE_RE.sub(" ", line).strip() for line in text.splitlines()]
    return "\n".join(line for line in lines if line)
