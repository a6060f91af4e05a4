from __future__ import annotations


class I18nProcessingError(RuntimeError):
    """Raised when a processing round has to be aborted."""


class ConfigurationError(I18nProcessingError):
    """Raised when annotations or settings are inconsistent."""


class InvalidLocaleError(ConfigurationError):
    """Raised when a language tag cannot be resolved to a locale."""

    def __init__(self, language: str) -> None:
        super().__init__(f"Invalid locale format: '{language}'")
        self.language = language


class InvalidIdError(ConfigurationError):
    """Raised when a field name carries a prefix that is not a text use."""

    def __init__(self, element_id: str, reason: str) -> None:
        super().__init__(f"Id '{element_id}' is invalid: {reason}")
        self.element_id = element_id


class MultipleElementsError(ConfigurationError):
    """Raised when a marker that may appear only once was found several times."""

    def __init__(self, marker: str, count: int) -> None:
        super().__init__(f"Only one element may be annotated with @{marker}; found {count}")
        self.marker = marker
        self.count = count


class IllegalAnnotationUseError(ConfigurationError):
    """Raised when an annotation sits on an element kind it does not support."""

    def __init__(self, element_name: str, annotation: str) -> None:
        super().__init__(f"Annotation @{annotation} is not allowed on element '{element_name}'")
        self.element_name = element_name
        self.annotation = annotation


class DuplicateKeyError(I18nProcessingError):
    """Raised when a key is inserted twice for the same locale."""

    def __init__(self, key: str, annotation: str, class_name: str) -> None:
        super().__init__(
            f"Key '{key}' is not unique (Annotation: {annotation} in class '{class_name}')\n"
            "Check translation locale in case the key is not a real duplicate"
        )
        self.key = key
        self.annotation = annotation
        self.class_name = class_name


class MissingIdError(I18nProcessingError):
    """Raised when no id can be inferred for a method."""

    def __init__(self, element_name: str) -> None:
        super().__init__(f"Missing id for Element '{element_name}'")
        self.element_name = element_name


class UnsupportedElementKindError(I18nProcessingError):
    """Raised when the collector is handed an element kind it does not know."""

    def __init__(self, kind: object) -> None:
        super().__init__(f"Unsupported element kind: {kind!r}")
        self.kind = kind


class ResourceIOError(I18nProcessingError):
    """Raised when reading or writing a resource fails."""


class AdditionalTextReadError(ResourceIOError):
    """Raised when the additional texts file exists but cannot be read."""


class AdditionalTextParseError(ResourceIOError):
    """Raised when the additional texts file is malformed or invalid."""


class BundleWriteError(ResourceIOError):
    """Raised when a resource bundle file cannot be written."""
