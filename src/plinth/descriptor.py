"""Build descriptor loading: Jinja2-rendered HCL files."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

import hcl2
import jinja2
from lark.exceptions import LarkError

if TYPE_CHECKING:
    from .projects import Project
    from .workspace import Workspace

logger = logging.getLogger(__name__)

DESCRIPTOR_SUFFIX = ".hcl"

P = TypeVar("P", bound="Project")


def load(
    file: str | Path,
    *,
    context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Render a descriptor as a Jinja2 template, then parse the result as HCL."""
    file = Path(file)
    env = jinja2.Environment(
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )
    try:
        text = env.from_string(file.read_text()).render(context or {})
    except jinja2.TemplateError as exc:
        raise ValueError(f"{file}: {exc}") from exc

    logger.debug("Parsing descriptor %s", file)
    try:
        return hcl2.loads(text)
    except LarkError as exc:
        raise ValueError(f"{file}: invalid HCL: {exc}") from exc


def find(path: str | Path, *, recurse: bool = True) -> Iterator[Path]:
    """Yield descriptor files under path in sorted order."""
    path = Path(path)
    found = path.rglob(f"*{DESCRIPTOR_SUFFIX}") if recurse else path.glob(f"*{DESCRIPTOR_SUFFIX}")
    yield from sorted(p for p in found if p.is_file())


def scan(
    path: str | Path,
    *,
    project_type: type[P] | None = None,
    recurse: bool = True,
    context: dict[str, Any] | None = None,
) -> Workspace[P]:
    """Load every descriptor under path into a new Workspace."""
    from .projects import Project
    from .workspace import Workspace

    ws = Workspace(project_type=project_type or Project, context=context)
    ws.scan(path, recurse=recurse)
    return ws
