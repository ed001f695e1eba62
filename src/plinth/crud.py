"""CRUD facade: high-level view operations for web request handlers.

A request handler typically looks like::

    def info_page(arguments: dict[str, str], locale: str) -> ResponseModel:
        arguments["popup"] = "true"
        response = crud.prepare_view("examplePlugin", "exampleView", arguments, locale)
        return response.add("headerClass", "successHeader")

Views are addressed by plugin identifier, view name and locale. Lookups of
an unknown view raise ViewNotFoundError and malformed event bodies raise
InvalidEventError; both are meant to be turned into client errors by the
web layer.
"""

from __future__ import annotations

import json
import logging
import warnings
from abc import ABC, abstractmethod
from typing import Any

from .engine import EventRequest, ViewDefinition, ViewDefinitionService, ViewDefinitionState
from .errors import ViewNotFoundError
from .response import ResponseModel

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "crud/crudView"

EventBody = dict[str, Any] | str


class CrudService(ABC):
    """Operations the web layer uses to display views and handle their events."""

    @abstractmethod
    def prepare_view(
        self,
        plugin_identifier: str,
        view_name: str,
        arguments: dict[str, str],
        locale: str,
    ) -> ResponseModel:
        """Build the response model for the initial display of a view."""

    def perform_event(
        self,
        plugin_identifier: str,
        view_name: str,
        body: EventBody,
        locale: str,
    ) -> dict[str, Any]:
        """Apply an event and return the rendered result.

        Deprecated: use invoke_event_and_render_view.
        """
        warnings.warn(
            "perform_event is deprecated; use invoke_event_and_render_view",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.invoke_event_and_render_view(plugin_identifier, view_name, body, locale)

    def invoke_event_and_render_view(
        self,
        plugin_identifier: str,
        view_name: str,
        body: EventBody,
        locale: str,
    ) -> dict[str, Any]:
        """Apply an event and return the rendered result."""
        state = self.invoke_event(plugin_identifier, view_name, body, locale)
        return self.render_view(state)

    @abstractmethod
    def invoke_event(
        self,
        plugin_identifier: str,
        view_name: str,
        body: EventBody,
        locale: str,
    ) -> ViewDefinitionState:
        """Apply an event and return the view state before rendering."""

    @abstractmethod
    def render_view(self, state: ViewDefinitionState) -> dict[str, Any]:
        """Render a view state to its JSON form."""


class DefaultCrudService(CrudService):
    """CrudService forwarding to the view definitions of an engine."""

    def __init__(
        self,
        definitions: ViewDefinitionService,
        *,
        template: str = DEFAULT_TEMPLATE,
    ) -> None:
        self.definitions = definitions
        self.template = template

    def _definition(self, plugin_identifier: str, view_name: str) -> ViewDefinition:
        definition = self.definitions.get(plugin_identifier, view_name)
        if definition is None:
            raise ViewNotFoundError(plugin_identifier, view_name)
        return definition

    def prepare_view(
        self,
        plugin_identifier: str,
        view_name: str,
        arguments: dict[str, str],
        locale: str,
    ) -> ResponseModel:
        definition = self._definition(plugin_identifier, view_name)
        logger.debug("Preparing view '%s/%s' (%s)", plugin_identifier, view_name, locale)

        response = ResponseModel(
            view=self.template,
            model=dict(definition.prepare_view(dict(arguments), locale)),
        )
        return (
            response.add("viewName", view_name)
            .add("pluginIdentifier", plugin_identifier)
            .add("locale", locale)
            .add("context", json.dumps(arguments, sort_keys=True))
        )

    def invoke_event(
        self,
        plugin_identifier: str,
        view_name: str,
        body: EventBody,
        locale: str,
    ) -> ViewDefinitionState:
        definition = self._definition(plugin_identifier, view_name)
        data = EventRequest.decode(body)
        request = EventRequest.parse(data)
        logger.debug(
            "Invoking event '%s' on '%s/%s'",
            request.event.name,
            plugin_identifier,
            view_name,
        )
        # the engine gets the client's body as sent, extra keys included
        return definition.perform_event(data, locale)

    def render_view(self, state: ViewDefinitionState) -> dict[str, Any]:
        return state.render()
