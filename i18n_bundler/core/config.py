from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MESSAGE_PREFIX = "MSG"
DEFAULT_BASE_BUNDLE_NAME = "TextsAndMessages"
DEFAULT_LANGUAGE = "en"
ADDITIONAL_TEXT_FILE = "AdditionalTexts.xml"


class I18nSettings(BaseSettings):
    """Generator configuration loaded from environment or .env."""

    message_prefix: str = Field(default=DEFAULT_MESSAGE_PREFIX, alias="I18N_MESSAGE_PREFIX")
    base_bundle_name: str = Field(
        default=DEFAULT_BASE_BUNDLE_NAME, alias="I18N_BASE_BUNDLE_NAME"
    )
    default_language: str = Field(default=DEFAULT_LANGUAGE, alias="I18N_DEFAULT_LANGUAGE")
    additional_text_location: Optional[str] = Field(
        default=None, alias="I18N_ADDITIONAL_TEXT_LOCATION"
    )
    source_output_dir: str = Field(
        default="build/generated-sources", alias="I18N_SOURCE_OUTPUT"
    )
    class_output_dir: str = Field(default="build/classes", alias="I18N_CLASS_OUTPUT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )


@lru_cache
def get_settings() -> I18nSettings:
    """Return cached generator settings."""
    return I18nSettings()  # type: ignore[call-arg]


@dataclass(frozen=True)
class ProcessingConfig:
    """Values resolved once per processing round."""

    message_prefix: str = DEFAULT_MESSAGE_PREFIX
    base_bundle_name: str = DEFAULT_BASE_BUNDLE_NAME
    default_locale: str = DEFAULT_LANGUAGE
