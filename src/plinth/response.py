"""Response model returned to the web layer, and a Jinja2 renderer for it."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import jinja2
from pydantic import BaseModel, Field

from .errors import TemplateNotFoundError

logger = logging.getLogger(__name__)

TEMPLATE_SUFFIX = ".html"


class ResponseModel(BaseModel):
    """A template identifier plus the named values it is rendered with."""

    view: str
    model: dict[str, Any] = Field(default_factory=dict)

    def add(self, name: str, value: Any) -> ResponseModel:
        self.model[name] = value
        return self

    def __getitem__(self, name: str) -> Any:
        return self.model[name]

    def __contains__(self, name: object) -> bool:
        return name in self.model

    def to_json(self) -> str:
        return self.model_dump_json()


class ViewRenderer:
    """Render ResponseModels through a Jinja2 environment.

    The template for a response is `<view>.html`, so a view of
    `crud/crudView` loads `crud/crudView.html` from the loader.
    """

    def __init__(
        self,
        loader: jinja2.BaseLoader | None = None,
        *,
        search_path: str | Path | None = None,
    ) -> None:
        if loader is None:
            if search_path is None:
                raise ValueError("ViewRenderer requires a loader or a search_path")
            loader = jinja2.FileSystemLoader(str(search_path))

        self.env = jinja2.Environment(
            loader=loader,
            undefined=jinja2.StrictUndefined,
            autoescape=jinja2.select_autoescape(["html", "xml"]),
        )

    def render(self, response: ResponseModel) -> str:
        name = f"{response.view}{TEMPLATE_SUFFIX}"
        try:
            template = self.env.get_template(name)
        except jinja2.TemplateNotFound as exc:
            raise TemplateNotFoundError(name) from exc
        logger.debug("Rendering template '%s'", name)
        return template.render(response.model)
