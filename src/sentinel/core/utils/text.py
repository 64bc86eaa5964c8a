"""Text normalization utilities."""


def normalize_slug(value: str) -> str:
    """Normalize a tenant slug.

    Trims surrounding whitespace, lowercases, and replaces each space with
    a hyphen. Applied both before the uniqueness check and to the stored
    value, so equivalent inputs always collide.

    Examples:
        >>> normalize_slug("  Acme Corp ")
        'acme-corp'
        >>> normalize_slug("acme-corp")
        'acme-corp'
    """
    return value.strip().lower().replace(" ", "-")


def normalize_email(value: str) -> str:
    """Trim and lowercase an email address."""
    return value.strip().lower()


def parse_scope_string(value: str | None) -> set[str]:
    """Split a space-delimited OAuth ``scope`` parameter into scope names."""
    if not value:
        return set()
    return set(value.split())


def dedupe_preserving_order(values: list[str] | None) -> list[str]:
    """Drop blank entries and duplicates, keeping first-seen order."""
    result: list[str] = []
    for value in values or []:
        if not value or not value.strip():
            continue
        if value not in result:
            result.append(value)
    return result
