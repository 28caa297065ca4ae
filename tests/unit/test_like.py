from storefront.db.like import contains_pattern, escape_like


def test_escape_like_escapes_wildcards_and_escape_char():
    assert escape_like("100%") == "100\\%"
    assert escape_like("a_b") == "a\\_b"
    assert escape_like("c:\\tmp") == "c:\\\\tmp"
    assert escape_like("plain text") == "plain text"


def test_contains_pattern_strips_and_wraps():
    assert contains_pattern("  50% off ") == "%50\\% off%"
