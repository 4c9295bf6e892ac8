"""Small string helpers shared by the field parsers."""

from __future__ import annotations


def strip_brackets_and_trim(text: str) -> str:
    """Trim, drop one leading ``[`` and one trailing ``]``, trim again.

    ``" [ foo]  "`` becomes ``"foo"``; ``"[foo"`` becomes ``"foo"``.
    """

    value = text.strip()
    if value.startswith("["):
        value = value[1:]
    if value.endswith("]"):
        value = value[:-1]
    return value.strip()


def split_first(text: str, separator: str) -> tuple[str, str | None]:
    """Return the first two parts of ``text.split(separator)``.

    Trailing empty parts are dropped first, so ``"Yamada, "`` split on
    ``", "`` has no second part. The second part is ``None`` when there is
    none; anything after a second separator is discarded.
    """

    parts = text.split(separator)
    while len(parts) > 1 and not parts[-1]:
        parts.pop()
    if len(parts) == 1:
        return parts[0], None
    return parts[0], parts[1]


def strip_or_none(text: str | None) -> str | None:
    if text is None:
        return None
    return strip_brackets_and_trim(text)
