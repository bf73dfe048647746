"""Decode character references that leak into caption text."""

from __future__ import annotations

import re

_NUMERIC_REF_RE = re.compile(r"&#(?:(\d+)|[xX]([0-9a-fA-F]+));")

NAMED_REFERENCES: dict[str, str] = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&apos;": "'",
    "&#39;": "'",
    "&nbsp;": " ",
}
_NAMED_REF_RE = re.compile("|".join(re.escape(ref) for ref in NAMED_REFERENCES))

_MAX_CODE_POINT = 0x10FFFF


def _ref_value(match: re.Match[str]) -> int:
    decimal, hexadecimal = match.groups()
    return int(decimal) if decimal is not None else int(hexadecimal, 16)


def _is_high_surrogate(value: int) -> bool:
    return 0xD800 <= value <= 0xDBFF


def _is_low_surrogate(value: int) -> bool:
    return 0xDC00 <= value <= 0xDFFF


def _decode_numeric(text: str) -> str:
    """Decode numeric references, joining adjacent UTF-16 surrogate pairs.

    Unpaired surrogates and values beyond U+10FFFF are left as written since
    they cannot be encoded as UTF-8.
    """

    refs = list(_NUMERIC_REF_RE.finditer(text))
    pieces: list[str] = []
    position = 0
    index = 0
    while index < len(refs):
        match = refs[index]
        value = _ref_value(match)
        pieces.append(text[position : match.start()])

        following = refs[index + 1] if index + 1 < len(refs) else None
        if (
            _is_high_surrogate(value)
            and following is not None
            and following.start() == match.end()
            and _is_low_surrogate(_ref_value(following))
        ):
            low = _ref_value(following)
            pieces.append(chr(0x10000 + ((value - 0xD800) << 10) + (low - 0xDC00)))
            position = following.end()
            index += 2
            continue

        if value > _MAX_CODE_POINT or _is_high_surrogate(value) or _is_low_surrogate(value):
            pieces.append(match.group(0))
        else:
            pieces.append(chr(value))
        position = match.end()
        index += 1

    pieces.append(text[position:])
    return "".join(pieces)


def _decode_once(text: str) -> str:
    text = _decode_numeric(text)
    return _NAMED_REF_RE.sub(lambda match: NAMED_REFERENCES[match.group(0)], text)


def normalize(text: str | None) -> str | None:
    """Return ``text`` with numeric and common named references decoded.

    Double-encoded input such as ``&amp;lt;`` is decoded repeatedly until the
    string stops changing, so the result is stable under a second call.
    ``None`` and empty strings are returned as-is.
    """

    if not text:
        return text

    # Every decoding pass that changes the string shortens it.
    for _ in range(len(text)):
        decoded = _decode_once(text)
        if decoded == text:
            break
        text = decoded
    return text


__all__ = ["NAMED_REFERENCES", "normalize"]
