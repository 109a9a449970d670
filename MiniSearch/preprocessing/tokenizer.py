import re
from typing import List

# Anything that is not a lowercase letter, a digit or whitespace is dropped
NON_TERM_CHARS = re.compile(r"[^a-z0-9\s]")


def normalize(text: str) -> str:
    """Lowercase the text and strip every character outside [a-z0-9] and whitespace."""
    if not text:
        return ""
    return NON_TERM_CHARS.sub("", text.lower())


def tokenize(text: str) -> List[str]:
    """
    Split text into normalized terms.

    Args:
        text: Raw document body or query

    Returns:
        List of lowercase alphanumeric terms, in order, without empty tokens
    """
    return normalize(text).split()
