from __future__ import annotations

from babel.core import get_locale_identifier, parse_locale

from i18n_bundler.core.errors import InvalidLocaleError


def resolve_locale(language: str | None) -> str:
    """Resolve a language tag such as ``de``, ``en_US`` or ``pt-BR``.

    Returns the ``language[_Script][_TERRITORY]`` form used for bundle file
    names. Only the syntax is checked: subtags are kept as given, so ``iw``
    stays ``iw`` and ``de_US`` is accepted.
    """
    if language is None or not language.strip():
        raise InvalidLocaleError(language or "")
    candidate = language.strip().replace("-", "_")
    try:
        parts = parse_locale(candidate)
    except ValueError as exc:
        raise InvalidLocaleError(language) from exc
    return get_locale_identifier(parts)
