from __future__ import annotations

import enum
from typing import Optional, Union

from pydantic import BaseModel, Field


class ElementKind(str, enum.Enum):
    METHOD = "method"
    FIELD = "field"
    ENUM_CONSTANT = "enum_constant"


class TextUse(str, enum.Enum):
    """How a text is used; part of the composed resource key."""

    CAPTION = "CAPTION"
    DESCRIPTION = "DESCRIPTION"
    LABEL = "LABEL"
    MESSAGE = "MESSAGE"
    MNEMONIC = "MNEMONIC"
    NAME = "NAME"
    PROMPT = "PROMPT"
    STRING = "STRING"
    TITLE = "TITLE"
    TOOLTIP = "TOOLTIP"
    TXT = "TXT"
    USAGE = "USAGE"
    TEXTUSE_DEFAULT = "TEXTUSE_DEFAULT"


class Translation(BaseModel):
    language: str
    text: str


class TextAnnotation(BaseModel):
    description: str = ""
    id: str = ""
    use: TextUse = TextUse.TEXTUSE_DEFAULT
    translations: list[Translation] = Field(default_factory=list)


class MessageAnnotation(BaseModel):
    description: str = ""
    translations: list[Translation] = Field(default_factory=list)


class AnnotatedElement(BaseModel):
    """A program element as handed over by the host's annotation discovery."""

    kind: ElementKind
    name: str = Field(min_length=1)
    enclosing_type: str = Field(min_length=1, description="Binary name of the declaring type.")
    constant_value: Optional[Union[int, str]] = None
    message: Optional[MessageAnnotation] = None
    texts: list[TextAnnotation] = Field(default_factory=list)

    @property
    def qualified_name(self) -> str:
        return f"{self.enclosing_type}.{self.name}"


class ValueMarker(BaseModel):
    """A constant carrying round configuration, such as the message prefix."""

    element: str
    value: str
    default_language: Optional[str] = None


class AdditionalTextsMarker(BaseModel):
    element: str
    location: str = ""


class ProcessingRound(BaseModel):
    """Everything the host discovered for one processing round."""

    elements: list[AnnotatedElement] = Field(default_factory=list)
    message_prefix: list[ValueMarker] = Field(default_factory=list)
    base_bundle_name: list[ValueMarker] = Field(default_factory=list)
    use_additional_texts: list[AdditionalTextsMarker] = Field(default_factory=list)
    error_raised: bool = False

    def annotation_names(self) -> list[str]:
        names: set[str] = set()
        if any(element.message is not None for element in self.elements):
            names.add("Message")
        if any(len(element.texts) == 1 for element in self.elements):
            names.add("Text")
        if any(len(element.texts) > 1 for element in self.elements):
            names.add("Texts")
        if self.message_prefix:
            names.add("MessagePrefix")
        if self.base_bundle_name:
            names.add("BaseBundleName")
        if self.use_additional_texts:
            names.add("UseAdditionalTexts")
        return sorted(names)
