import html


def sanitize(text: str) -> str:
    """Escape HTML-significant characters in untrusted text.

    Replaces ``&``, ``<``, ``>``, ``"`` and ``'`` with their character
    references so stored content cannot run as markup or script when a
    client renders it.

    Args:
        text: Raw user-supplied text.

    Returns:
        str: Escaped text, safe to embed in HTML.
    """
    return html.escape(text, quote=True)
