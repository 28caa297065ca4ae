"""Slug helpers for category URLs."""

import re
import unicodedata

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """Lower-case ``value`` and collapse runs of non-alphanumerics into '-'.

    Returns an empty string when nothing alphanumeric is left (e.g. a name
    written entirely in a non-Latin script); callers must then require an
    explicit slug.
    """
    normalized = unicodedata.normalize("NFKD", value or "").encode("ascii", "ignore").decode("ascii")
    return _NON_ALNUM.sub("-", normalized.lower()).strip("-")
