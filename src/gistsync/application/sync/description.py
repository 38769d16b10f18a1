"""
Description formatting for mirrored snippets.
"""


def format_description(
    description: str | None,
    prefix: str = "",
    suffix: str = "",
    preserve: bool = True,
) -> str:
    """
    Build the target description.

    >>> format_description("Useful script", "[mirror] ", "", True)
    '[mirror] Useful script'
    >>> format_description("Useful script", "[mirror] ", "", False)
    '[mirror] '
    """
    body = (description or "") if preserve else ""
    return f"{prefix or ''}{body}{suffix or ''}"
