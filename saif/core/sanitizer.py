"""
Clean-up for research notes pulled from the knowledge base.

The research text was exported with annotation artifacts still inline:
citation references, image placeholders and index markers. These
functions strip them so the text can be shown to a user or dropped into
a prompt.

Everything here is pure and stateless, so it is safe to call from any
thread.
"""

import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)


# Applied in order. The citation-with-braces form must run before the bare
# citation form, otherwise the bare pattern eats the bracket and leaves an
# orphaned "{index=1}"-style body behind.
ANNOTATION_PATTERNS: list[tuple[str, str]] = [
    (r"contentReference\[.*?\]\{.*?\}", ""),
    (r"contentReference\[.*?\]", ""),
    (r"\[image [^\]]*\]", ""),
    (r"\{index=\d+\}", ""),
]

_REPEATED_SPACES = re.compile(r" {2,}")


def _compile(pattern: str) -> Optional[re.Pattern]:
    try:
        return re.compile(pattern, re.DOTALL)
    except re.error as e:
        logger.warning(
            "Skipping annotation pattern that failed to compile",
            extra={"pattern": pattern, "error": str(e)}
        )
        return None


def _compile_pipeline(
    patterns: list[tuple[str, str]],
) -> list[tuple[re.Pattern, str]]:
    compiled = []
    for pattern, replacement in patterns:
        regex = _compile(pattern)
        if regex is not None:
            compiled.append((regex, replacement))
    return compiled


_PIPELINE = _compile_pipeline(ANNOTATION_PATTERNS)


def _strip_annotations(text: str) -> str:
    # Removing one marker can splice two fragments into a new one,
    # so run the pipeline until nothing changes.
    while True:
        stripped = text
        for regex, replacement in _PIPELINE:
            stripped = regex.sub(replacement, stripped)
        if stripped == text:
            return stripped
        text = stripped


def sanitize(text: str) -> str:
    """
    Remove annotation artifacts and tidy whitespace.

    Example:
        >>> sanitize("Effective exercise.contentReference[oai_citation:1]{index=1} Good.")
        'Effective exercise. Good.'
    """
    cleaned = _strip_annotations(text)
    cleaned = _REPEATED_SPACES.sub(" ", cleaned)
    return cleaned.strip()


def first_sentence(text: str) -> str:
    """Sanitized text up to (not including) the first period."""
    clean = sanitize(text)
    head, _, _ = clean.partition(".")
    return head
