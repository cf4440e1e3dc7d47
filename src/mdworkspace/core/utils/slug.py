"""Slug generation for heading identifiers"""

import re


def slugify(text: str) -> str:
    """Lowercase text, turn whitespace runs into hyphens, drop anything not alphanumeric or hyphen."""
    text = text.lower()
    text = re.sub(r'\s+', '-', text)
    return re.sub(r'[^\w-]|_', '', text)
