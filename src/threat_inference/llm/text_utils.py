"""
Text processing utilities for the LLM layer.
"""


def excerpt(text: str | None, max_chars: int) -> str:
    """
    Return the first ``max_chars`` characters of ``text`` (empty for None).

    Used for the fallback summary, which quotes the raw model output so the
    user can see what the model actually said.

    Examples:
        >>> excerpt("abcdef", 3)
        'abc'
        >>> excerpt(None, 3)
        ''
    """
    if not text:
        return ""
    return text[:max(max_chars, 0)]


def count_tokens_approximate(text: str) -> int:
    """
    Rough token estimate (~4 characters per token) for logging prompt size.

    Never returns less than 1.
    """
    return max(1, len(text) // 4)
