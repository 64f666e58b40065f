"""Configuration for the template expander."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from earth_site.errors import ConfigError

TEMPLATE_DIR = Path("public/templates")
DICTIONARY_FILE = TEMPLATE_DIR / "il8n.json"

TEMPLATES = (
    "index.html",
    "about.html",
)


class Language(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str = Field(min_length=1)
    output_dir: Path


# "ja" is the language code; the site was published under /jp and keeps it.
LANGUAGES = (
    Language(code="en", output_dir=Path("public")),
    Language(code="ja", output_dir=Path("public/jp")),
)


class ExpandConfig(BaseModel):
    """Inputs for one expansion run.

    ``on_template_error`` picks what happens when a template fails to compile
    or render: ``"abort"`` stops the run, ``"skip"`` logs the failure and
    continues with the remaining templates.
    """

    model_config = ConfigDict(extra="forbid")

    dictionary: Path = DICTIONARY_FILE
    templates_root: Path = TEMPLATE_DIR
    templates: list[str] = Field(default_factory=lambda: list(TEMPLATES))
    languages: list[Language] = Field(default_factory=lambda: list(LANGUAGES), min_length=1)
    on_template_error: Literal["abort", "skip"] = "abort"

    @field_validator("templates")
    @classmethod
    def _plain_file_names(cls, value: list[str]) -> list[str]:
        for name in value:
            if not name or Path(name).name != name or name in {".", ".."}:
                raise ValueError(f"template must be a plain file name: {name!r}")
        return value

    @field_validator("languages")
    @classmethod
    def _unique_codes(cls, value: list[Language]) -> list[Language]:
        seen: set[str] = set()
        for language in value:
            if language.code in seen:
                raise ValueError(f"duplicate language code: {language.code}")
            seen.add(language.code)
        return value


def load_config(path: str | Path | None = None) -> ExpandConfig:
    """Return the default configuration, or the one stored as JSON at ``path``."""
    if path is None:
        return ExpandConfig()
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, ValueError) as e:
        raise ConfigError(f"{path} cannot be read: {e}") from e
    try:
        return ExpandConfig.model_validate_json(text)
    except ValidationError as e:
        raise ConfigError(f"{path} is invalid:\n{e}") from e
