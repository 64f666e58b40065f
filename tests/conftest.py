from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if SRC_PATH.exists():
    sys.path.insert(0, str(SRC_PATH))

from earth_site.config import ExpandConfig, Language  # noqa: E402


@pytest.fixture
def site(tmp_path: Path) -> ExpandConfig:
    """A two-language site with one template in a temporary directory."""
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "il8n.json").write_text(
        json.dumps({"greeting": {"en": "Hello", "ja": "こんにちは"}}, ensure_ascii=False),
        encoding="utf-8",
    )
    (templates / "index.html").write_text(
        '<p>{{ lookup("greeting") }}</p>\n', encoding="utf-8"
    )
    return ExpandConfig(
        dictionary=templates / "il8n.json",
        templates_root=templates,
        templates=["index.html"],
        languages=[
            Language(code="en", output_dir=tmp_path / "public"),
            Language(code="ja", output_dir=tmp_path / "public" / "jp"),
        ],
    )
