"""Resource key derivation for annotated elements.

Text keys have the shape ``<class>.<USE>_<id>``; message keys are the message
prefix followed by the message id.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

from i18n_bundler.core.errors import InvalidIdError, MissingIdError, UnsupportedElementKindError
from i18n_bundler.schemas.elements import ElementKind, TextUse

MEMBER_PREFIX: Final[str] = "m_"

_PROPERTY_METHOD_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(?:get|set|add|is)([A-Z_$][\w$]*)$")


@dataclass(frozen=True)
class DerivedKey:
    use: TextUse
    id: str


def compose_text_key(class_name: str, use: TextUse, text_id: str) -> str:
    return f"{class_name.replace('$', '.')}.{use.value}_{text_id}"


def compose_message_key(prefix: str, message_id: int | str) -> str:
    if isinstance(message_id, int) and not isinstance(message_id, bool):
        return f"{prefix}{message_id:03d}"
    return f"{prefix}{message_id}"


def property_name(method_name: str) -> str | None:
    """Return the capitalized property of a getter, setter or adder name."""
    match = _PROPERTY_METHOD_PATTERN.match(method_name)
    if match is None:
        return None
    name = match.group(1)
    return name[0].upper() + name[1:]


def derive_key(
    kind: ElementKind,
    name: str,
    *,
    explicit_id: str = "",
    use: TextUse = TextUse.TEXTUSE_DEFAULT,
) -> DerivedKey:
    text_id = explicit_id if explicit_id.strip() else ""

    if kind is ElementKind.ENUM_CONSTANT:
        if use is TextUse.TEXTUSE_DEFAULT:
            use = TextUse.STRING
        if not text_id:
            text_id = name
    elif kind is ElementKind.METHOD:
        if not text_id:
            prop = property_name(name)
            if prop is None:
                raise MissingIdError(name)
            text_id = prop
            if use is TextUse.TEXTUSE_DEFAULT:
                use = TextUse.NAME
    elif kind is ElementKind.FIELD:
        if not text_id:
            text_id, use = _split_field_name(name, use)
    else:
        raise UnsupportedElementKindError(kind)

    if use is TextUse.TEXTUSE_DEFAULT:
        use = TextUse.TXT
    return DerivedKey(use=use, id=text_id)


def _split_field_name(name: str, use: TextUse) -> tuple[str, TextUse]:
    if name.startswith(MEMBER_PREFIX):
        return name[len(MEMBER_PREFIX):], use
    pos = name.find("_")
    if pos > 1:
        prefix = name[:pos]
        try:
            parsed = TextUse[prefix]
        except KeyError as exc:
            raise InvalidIdError(name, f"'{prefix}' is not a text use") from exc
        return name[pos + 1:], parsed
    return name, use
