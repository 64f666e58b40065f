"""Exceptions raised by the site build tools."""


class SiteError(Exception):
    """Base class for build-time failures."""


class ConfigError(SiteError):
    """The expansion configuration could not be read or is invalid."""


class DictionaryError(SiteError):
    """The translation dictionary is missing, unreadable or malformed."""


class TemplateFailure(SiteError):
    """A single template could not be expanded."""

    def __init__(self, template: str, detail: str) -> None:
        super().__init__(f"{template}: {detail}")
        self.template = template
        self.detail = detail


class TemplateCompileError(TemplateFailure):
    pass


class TemplateRenderError(TemplateFailure):
    pass


class TemplateWriteError(TemplateFailure):
    pass
