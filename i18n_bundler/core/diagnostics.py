"""Diagnostic reporting for processing rounds."""

from __future__ import annotations

import enum
import logging
from typing import Any, Protocol

logger = logging.getLogger("i18n_bundler.diagnostics")


class DiagnosticKind(str, enum.Enum):
    NOTE = "note"
    WARNING = "warning"
    ERROR = "error"


_LEVELS: dict[DiagnosticKind, int] = {
    DiagnosticKind.NOTE: logging.INFO,
    DiagnosticKind.WARNING: logging.WARNING,
    DiagnosticKind.ERROR: logging.ERROR,
}


class Messager(Protocol):
    """Sink for diagnostics raised while processing a round."""

    def print_message(self, kind: DiagnosticKind, message: str, element: Any | None = None) -> None:
        ...


class LoggingMessager:
    """Forward diagnostics to the standard logging machinery."""

    def __init__(self, target: logging.Logger | None = None) -> None:
        self._logger = target or logger

    def print_message(self, kind: DiagnosticKind, message: str, element: Any | None = None) -> None:
        level = _LEVELS.get(kind, logging.INFO)
        if element is None:
            self._logger.log(level, "%s", message)
            return
        location = getattr(element, "qualified_name", None) or getattr(element, "name", element)
        self._logger.log(level, "%s [element: %s]", message, location)


class RecordingMessager:
    """Keep diagnostics in memory, optionally forwarding them to another messager."""

    def __init__(self, delegate: Messager | None = None) -> None:
        self.messages: list[tuple[DiagnosticKind, str]] = []
        self._delegate = delegate

    def print_message(self, kind: DiagnosticKind, message: str, element: Any | None = None) -> None:
        self.messages.append((kind, message))
        if self._delegate is not None:
            self._delegate.print_message(kind, message, element)

    def errors(self) -> list[str]:
        return [message for kind, message in self.messages if kind is DiagnosticKind.ERROR]
