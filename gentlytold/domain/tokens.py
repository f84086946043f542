import secrets


def tokens_match(supplied: str | None, expected: str | None) -> bool:
    """Constant-time token comparison; missing values never match."""
    if not supplied or not expected:
        return False
    return secrets.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))
