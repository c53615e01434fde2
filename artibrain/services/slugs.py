"""
URL slugs for posts, categories and tags.
"""

import re
import unicodedata

MAX_SLUG_LENGTH = 200


def slugify(text: str) -> str:
    """Lower-case ASCII words joined by single hyphens."""
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = text.lower().strip()
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"[\s_-]+", "-", text)
    text = re.sub(r"^-+|-+$", "", text)
    return text[:MAX_SLUG_LENGTH].rstrip("-")
