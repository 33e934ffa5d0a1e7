"""
Template name rules.

Names are slash-separated paths relative to the loader root. A name used
inside a template is resolved against the directory of the including
template unless it starts with a slash. An optional `scheme://` prefix
selects a separate namespace and is kept as is.
"""

from __future__ import annotations

from typing import List, Tuple

from ..errors import MalformedNameError

SCHEME_SEPARATOR = "://"


def split_scheme(name: str) -> Tuple[str, str]:
    """
    Splits `scheme://path` into ("scheme://", "path").

    Names without a scheme return ("", name).
    """
    idx = name.find(SCHEME_SEPARATOR)
    if idx > 0:
        end = idx + len(SCHEME_SEPARATOR)
        return name[:end], name[end:]
    return "", name


def to_root_based_name(base_name: str, target_name: str) -> str:
    """
    Resolves `target_name` as written in the template named `base_name`.

    Examples:
        ("a/b.ftl", "c.ftl")   -> "a/c.ftl"
        ("a/b.ftl", "/c.ftl")  -> "c.ftl"
        ("a/b.ftl", "../c.ftl") -> "c.ftl"

    Raises:
        MalformedNameError: If the resulting name breaks the naming rules
    """
    target_scheme, _ = split_scheme(target_name)
    if target_scheme:
        return normalize_root_based_name(target_name)

    base_scheme, base_path = split_scheme(base_name or "")

    if target_name.startswith("/"):
        return normalize_root_based_name(base_scheme + target_name[1:])

    slash = base_path.rfind("/")
    base_dir = base_path[:slash + 1] if slash >= 0 else ""
    return normalize_root_based_name(base_scheme + base_dir + target_name)


def normalize_root_based_name(name: str) -> str:
    """
    Normalizes a root-based name.

    Drops `.` segments, applies `..` segments, collapses repeated slashes
    and removes the leading slash.

    Raises:
        MalformedNameError: For backslashes, NUL characters and names that
                            step above the root
    """
    if "\\" in name:
        raise MalformedNameError(
            template_name=name,
            malformedness='Backslash ("\\") is not allowed in template names. Use slash ("/") instead.',
        )
    if "\x00" in name:
        raise MalformedNameError(
            template_name=name,
            malformedness="Null character (\\u0000) in the name; possible attack attempt",
        )

    scheme, path = split_scheme(name)

    segments: List[str] = []
    for segment in path.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if not segments:
                raise MalformedNameError(
                    template_name=name,
                    malformedness="Backing out from the root directory is not allowed",
                )
            segments.pop()
            continue
        segments.append(segment)

    return scheme + "/".join(segments)


__all__ = ["split_scheme", "to_root_based_name", "normalize_root_based_name"]
