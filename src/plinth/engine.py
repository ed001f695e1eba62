"""Contracts for the view-rendering engine behind the CRUD facade.

The engine itself lives outside this package. It is reached through three
small protocols: a ViewDefinitionService looks up ViewDefinitions, a
definition prepares a view or applies an event to it, and applying an event
yields a ViewDefinitionState that can be rendered to JSON.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field, ValidationError

from .errors import InvalidEventError

logger = logging.getLogger(__name__)


@runtime_checkable
class ViewDefinitionState(Protocol):
    """Mutable, engine-managed state of one view after an event."""

    def render(self) -> dict[str, Any]: ...


@runtime_checkable
class ViewDefinition(Protocol):
    plugin_identifier: str
    name: str

    def prepare_view(self, context: dict[str, str], locale: str) -> dict[str, Any]:
        """Return the model used for the initial display of the view."""
        ...

    def perform_event(self, body: dict[str, Any], locale: str) -> ViewDefinitionState:
        """Apply the event in body and return the resulting state."""
        ...


class ViewDefinitionService(Protocol):
    def get(self, plugin_identifier: str, view_name: str) -> ViewDefinition | None: ...


class ViewRegistry:
    """In-memory ViewDefinitionService keyed by (plugin, view name)."""

    def __init__(self) -> None:
        self._definitions: dict[tuple[str, str], ViewDefinition] = {}

    def register(self, definition: ViewDefinition) -> ViewDefinition:
        key = (definition.plugin_identifier, definition.name)
        if key in self._definitions:
            raise ValueError(f"Duplicate view: '{key[0]}/{key[1]}'")
        logger.debug("Registered view '%s/%s'", *key)
        self._definitions[key] = definition
        return definition

    def get(self, plugin_identifier: str, view_name: str) -> ViewDefinition | None:
        return self._definitions.get((plugin_identifier, view_name))

    def __contains__(self, key: object) -> bool:
        return key in self._definitions

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)


class Event(BaseModel):
    name: str
    component: str | None = None
    args: list[str] = Field(default_factory=list)


class EventRequest(BaseModel):
    """Body of an event request posted by the client."""

    event: Event
    components: dict[str, Any] = Field(default_factory=dict)

    @staticmethod
    def decode(body: dict[str, Any] | str) -> dict[str, Any]:
        """Return the body as a dict, decoding JSON text; the content is not altered."""
        if isinstance(body, str):
            try:
                body = json.loads(body)
            except json.JSONDecodeError as exc:
                raise InvalidEventError(f"Event body is not valid JSON: {exc}") from exc

        if not isinstance(body, dict):
            raise InvalidEventError(f"Event body must be a JSON object, got {type(body).__name__}")

        return body

    @classmethod
    def parse(cls, body: dict[str, Any] | str) -> EventRequest:
        """Validate a request body given as a dict or as JSON text."""
        body = cls.decode(body)
        try:
            return cls.model_validate(body)
        except ValidationError as exc:
            raise InvalidEventError(f"Malformed event body: {exc}") from exc
