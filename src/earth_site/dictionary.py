"""Load the translation dictionary shared by every template."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from jsonschema import ValidationError, validate

from earth_site.errors import DictionaryError

logger = logging.getLogger(__name__)

Dictionary = Mapping[str, Mapping[str, str]]

SCHEMA = {
    "type": "object",
    "additionalProperties": {
        "type": "object",
        "additionalProperties": {"type": "string"},
    },
}


def load_dictionary(path: str | Path) -> Dictionary:
    """Read ``{key: {language: text}}`` from ``path``.

    The result is read-only. Any problem reading or validating the file raises
    :class:`DictionaryError`, since no page can be built without it.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise DictionaryError(f"{path} cannot be read: {e}") from e
    try:
        validate(instance=data, schema=SCHEMA)
    except ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise DictionaryError(f"{path} is malformed at {location}: {e.message}") from e

    logger.debug("Loaded %d translation keys from %s", len(data), path)
    return MappingProxyType(
        {key: MappingProxyType(dict(entry)) for key, entry in data.items()}
    )
