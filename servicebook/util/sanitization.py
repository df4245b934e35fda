"""Sanitisation helpers.

Names and descriptions of pricing parameters, exclude parameters and
extras are shown on the customer booking form. Strip markup from them
before they are stored so they can be rendered verbatim.
"""
import re

TAG_RE = re.compile(r"<[^>]+>")
SPACE_RE = re.compile(r"\s+")


def strip_tags(text: str) -> str:
    """Remove HTML tags from ``text`` and normalise whitespace.

    Runs of whitespace (including newlines left behind by removed
    block tags) collapse to a single space; the result is trimmed.
    """
    if not text:
        return ""
    no_tags = TAG_RE.sub("", text)
    return SPACE_RE.sub(" ", no_tags).strip()
