"""Small string helpers shared by canonical forms and error messages."""

from __future__ import annotations

from typing import Optional

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def jquote(s: Optional[str]) -> str:
    """
    Quotes a string the way a string literal of the template language is
    written: double quotes, with backslash escapes for quotes, backslashes
    and line breaks. `None` becomes the bare word null.
    """
    if s is None:
        return "null"
    out = ['"']
    for ch in s:
        esc = _ESCAPES.get(ch)
        if esc is not None:
            out.append(esc)
        elif ch < " ":
            out.append(f"\\x{ord(ch):04X}")
        else:
            out.append(ch)
    out.append('"')
    return "".join(out)


def _is_hex4(s: str) -> bool:
    return len(s) == 4 and all(c in "0123456789abcdefABCDEF" for c in s)


def unquote(body: str) -> str:
    """Reverses the escapes of a string literal body (without the quotes)."""
    out = []
    i = 0
    n = len(body)
    while i < n:
        ch = body[i]
        if ch != "\\" or i + 1 >= n:
            out.append(ch)
            i += 1
            continue
        nxt = body[i + 1]
        if nxt == "n":
            out.append("\n")
        elif nxt == "t":
            out.append("\t")
        elif nxt == "r":
            out.append("\r")
        elif nxt == "x" and _is_hex4(body[i + 2:i + 6]):
            out.append(chr(int(body[i + 2:i + 6], 16)))
            i += 6
            continue
        else:
            # \" \' \\ and unknown escapes keep the escaped character
            out.append(nxt)
        i += 2
    return "".join(out)


__all__ = ["jquote", "unquote"]
