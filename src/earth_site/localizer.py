"""Per-language string lookup handed to templates."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from earth_site.dictionary import Dictionary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Localizer:
    """Resolve localization keys for one language.

    Instances are callable so templates can write ``{{ lookup("key") }}``.
    Unknown keys never raise: the key itself is returned and recorded in
    ``missing`` so the defect shows up on the rendered page.
    """

    language: str
    dictionary: Dictionary
    missing: list[str] = field(default_factory=list, compare=False, repr=False)

    def __call__(self, key: str) -> str:
        entry = self.dictionary.get(key)
        text = entry.get(self.language) if entry else None
        if not text:
            logger.warning("unknown il8n key: %s (%s)", key, self.language)
            self.missing.append(key)
            return key
        return text
