"""Literal substring patterns for ``LIKE`` / ``ILIKE`` filters."""

LIKE_ESCAPE = "\\"


def escape_like(text: str) -> str:
    """Escape ``LIKE`` wildcards so ``text`` matches itself only."""
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def contains_pattern(text: str) -> str:
    # Pair with ``escape=LIKE_ESCAPE`` on the column operator
    return f"%{escape_like(text.strip())}%"
