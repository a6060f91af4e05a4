from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TextEntry:
    """One key/locale/text tuple destined for a resource bundle.

    Line breaks in ``text`` are stored as the two characters ``\\n`` so the
    value always fits on a single ``key=value`` line.
    """

    key: str
    is_message: bool
    locale: str
    description: str
    text: str
    class_name: str = ""

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("TextEntry key must not be empty")
        if "\n" in self.text:
            object.__setattr__(self, "text", self.text.replace("\n", "\\n"))

    @property
    def annotation(self) -> str:
        return "@Message" if self.is_message else "@Text"
