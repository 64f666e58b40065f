"""Expand the site templates into one static page per language.

Every template is compiled once and rendered for each configured language with
a :class:`~earth_site.localizer.Localizer` bound to ``lookup``. English pages
land in ``public/``, Japanese pages in ``public/jp/``. Each run regenerates
every page from scratch.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, select_autoescape
from jinja2 import TemplateNotFound, TemplateSyntaxError

from earth_site.config import ExpandConfig, Language, load_config
from earth_site.dictionary import Dictionary, load_dictionary
from earth_site.errors import (
    SiteError,
    TemplateCompileError,
    TemplateFailure,
    TemplateRenderError,
    TemplateWriteError,
)
from earth_site.localizer import Localizer

logger = logging.getLogger(__name__)


@dataclass
class ExpansionReport:
    written: list[Path] = field(default_factory=list)
    failures: list[TemplateFailure] = field(default_factory=list)
    missing: dict[str, list[str]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


def make_environment(templates_root: str | Path) -> Environment:
    return Environment(
        loader=FileSystemLoader(str(templates_root)),
        undefined=StrictUndefined,
        autoescape=select_autoescape(["html"]),
        keep_trailing_newline=True,
    )


def compile_template(env: Environment, name: str) -> Template:
    """Parse ``name`` once; the result is reused for every language."""
    try:
        return env.get_template(name)
    except TemplateNotFound as e:
        raise TemplateCompileError(name, f"template not found under {env.loader.searchpath}") from e
    except TemplateSyntaxError as e:
        raise TemplateCompileError(name, f"line {e.lineno}: {e.message}") from e
    except (OSError, ValueError) as e:
        raise TemplateCompileError(name, f"cannot be read: {e}") from e


def render(template: Template, localizer: Localizer) -> str:
    try:
        return template.render(lookup=localizer)
    except Exception as e:
        raise TemplateRenderError(template.name or "<string>", f"{type(e).__name__}: {e}") from e


def write_output(directory: str | Path, file_name: str, content: str) -> Path:
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    out_path = directory / file_name
    out_path.write_text(content, encoding="utf-8")
    return out_path


def _expand_template(
    env: Environment,
    name: str,
    languages: list[Language],
    dictionary: Dictionary,
    report: ExpansionReport,
) -> None:
    template = compile_template(env, name)
    # Render every language before writing so a failing template leaves no partial set.
    pages = []
    for language in languages:
        localizer = Localizer(language.code, dictionary)
        pages.append((language, render(template, localizer)))
        if localizer.missing:
            report.missing.setdefault(language.code, []).extend(localizer.missing)

    for language, content in pages:
        try:
            out_path = write_output(language.output_dir, name, content)
        except OSError as e:
            raise TemplateWriteError(name, f"cannot write to {language.output_dir}: {e}") from e
        logger.info("Wrote %s", out_path)
        report.written.append(out_path)


def expand(config: ExpandConfig) -> ExpansionReport:
    """Render every (template, language) pair described by ``config``.

    Raises :class:`DictionaryError` before anything is written when the
    dictionary cannot be loaded. Template failures raise under the ``abort``
    policy and are collected in the report under ``skip``.
    """
    dictionary = load_dictionary(config.dictionary)
    env = make_environment(config.templates_root)
    report = ExpansionReport()

    for name in config.templates:
        try:
            _expand_template(env, name, config.languages, dictionary, report)
        except TemplateFailure as e:
            if config.on_template_error == "abort":
                raise
            logger.error("Skipping template %s", e)
            report.failures.append(e)

    return report


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Expand the site templates into per-language HTML pages."
    )
    parser.add_argument("--config", type=Path, help="JSON file overriding the default configuration.")
    parser.add_argument(
        "--skip-broken",
        action="store_true",
        help="Continue with the remaining templates when one fails.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every written file.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        if args.skip_broken:
            config = config.model_copy(update={"on_template_error": "skip"})
        report = expand(config)
    except SiteError as e:
        print(f"✗ Expansion failed: {e}", file=sys.stderr)
        return 1

    for language, keys in sorted(report.missing.items()):
        print(f"! {language}: {len(keys)} missing translation(s): {', '.join(sorted(set(keys)))}")
    if not report.ok:
        for failure in report.failures:
            print(f"✗ {failure}", file=sys.stderr)
        print(f"✗ Wrote {len(report.written)} pages; {len(report.failures)} template(s) failed.")
        return 1
    print(f"✓ Wrote {len(report.written)} pages.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
