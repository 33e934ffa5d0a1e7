"""
Boolean coercion policy for directive attributes.

Booleans are accepted natively through the data model. For backward
compatibility some attributes (the `parse` attribute of #include) also
accept a fixed set of yes/no strings; this module owns that set.
"""

from __future__ import annotations

from typing import Tuple

from .errors import FormatError

FALSE_TOKENS: Tuple[str, ...] = ("n", "no", "f", "false")
TRUE_TOKENS: Tuple[str, ...] = ("y", "yes", "t", "true")

# Order used in error messages
ACCEPTED_TOKENS: Tuple[str, ...] = FALSE_TOKENS + TRUE_TOKENS


def to_boolean(s: str) -> bool:
    """
    Converts a legacy yes/no string to a boolean.

    Matching is case-sensitive: "yes" is true, "YES" is an error.

    Args:
        s: The string value of the attribute

    Returns:
        The boolean the token stands for

    Raises:
        FormatError: If `s` is not one of ACCEPTED_TOKENS
    """
    if s in TRUE_TOKENS:
        return True
    if s in FALSE_TOKENS:
        return False
    raise FormatError(value=s, accepted=ACCEPTED_TOKENS)


__all__ = ["to_boolean", "TRUE_TOKENS", "FALSE_TOKENS", "ACCEPTED_TOKENS"]
