"""Exception types raised by plinth."""

from __future__ import annotations


class PlinthError(Exception):
    """Base class for all plinth errors."""


class BuildError(PlinthError):
    """A build step failed; the underlying error is chained as the cause."""


class ViewError(PlinthError):
    """Base class for view facade errors."""


class ViewNotFoundError(ViewError, LookupError):
    """No view is registered for the given plugin and view name."""

    def __init__(self, plugin_identifier: str, view_name: str) -> None:
        super().__init__(f"Unknown view: '{plugin_identifier}/{view_name}'")
        self.plugin_identifier = plugin_identifier
        self.view_name = view_name


class InvalidEventError(ViewError, ValueError):
    """An event request body could not be understood."""


class TemplateNotFoundError(ViewError, LookupError):
    """The template a response names is not available to the renderer."""

    def __init__(self, template: str) -> None:
        super().__init__(f"Template not found: '{template}'")
        self.template = template
