"""Workspace: projects and goals collected from build descriptors."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from typing import Any, TypeVar, overload

from . import descriptor
from .goals import Goal
from .phases import PHASES, Phase
from .projects import Project
from .step import _step_registry

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=Project)

_STRUCTURAL_KEYS = {"use", "include"} | set(PHASES)


def _make_step(step_name: str, attrs: dict[str, Any]) -> Any:
    """Instantiate a registered step type from its block attributes."""
    if step_name not in _step_registry:
        raise ValueError(f"Unknown step type: '{step_name}'")
    step_cls = _step_registry[step_name]
    logger.debug("Decoding step '%s' -> %s", step_name, step_cls.__name__)
    try:
        return step_cls(**attrs)
    except TypeError as exc:
        raise ValueError(f"Invalid attributes for step '{step_name}': {exc}") from exc


def _parse_phases(block: dict[str, Any]) -> list[Phase]:
    """Turn the phase blocks of a goal or project into Phase objects.

    Phase blocks arrive from hcl2 as lists of single-entry dicts, e.g.
        {"always": [{"workdir": {"path": "..."}}], "ensure": [...]}
    and keep their order within each keyword.
    """
    phases: list[Phase] = []
    for keyword, phase_cls in PHASES.items():
        for step_block in block.get(keyword, []):
            for step_name, attrs in step_block.items():
                phases.append(phase_cls(_make_step(step_name, dict(attrs))))
    return phases


class Workspace(Mapping[str, P]):
    """Descriptor data accumulated from files; projects are built on access."""

    def __init__(
        self,
        project_type: type[P] = Project,  # type: ignore[assignment]
        *,
        context: dict[str, Any] | None = None,
    ) -> None:
        self._project_type = project_type
        self._context = context or {}
        self._goal_data: dict[str, dict[str, Any]] = {}
        self._project_data: dict[str, dict[str, Any]] = {}
        self._projects: dict[str, P] | None = None

    def load(self, path: str | Path) -> None:
        """Read one descriptor file.

        Raises ValueError if it declares a goal or project that is already loaded.
        """
        path = Path(path)
        data = descriptor.load(path, context=self._context)
        self.add(data, origin=path.parent)

    def scan(self, path: str | Path, *, recurse: bool = True) -> None:
        """Read every descriptor found under a directory."""
        for file in descriptor.find(path, recurse=recurse):
            self.load(file)

    def add(self, data: dict[str, Any], *, origin: Path | None = None) -> None:
        """Register goal and project blocks from already-parsed descriptor data.

        A relative project basedir is taken relative to origin, normally the
        directory holding the descriptor file.
        """
        for goal_block in data.get("goal", []):
            for name, body in goal_block.items():
                if name in self._goal_data:
                    raise ValueError(f"Duplicate goal: '{name}'")
                logger.debug("Found goal '%s'", name)
                self._goal_data[name] = body

        for project_block in data.get("project", []):
            for name, body in project_block.items():
                if name in self._project_data:
                    raise ValueError(f"Duplicate project: '{name}'")
                logger.debug("Found project '%s'", name)
                if origin is not None:
                    body = dict(body)
                    basedir = Path(body.get("basedir", "."))
                    if not basedir.is_absolute():
                        body["basedir"] = str(origin / basedir)
                self._project_data[name] = body

        self._projects = None

    @property
    def goals(self) -> list[str]:
        return list(self._goal_data)

    def goal(self, name: str, _visiting: tuple[str, ...] = ()) -> Goal:
        """Resolve a goal, expanding its includes first."""
        if name in _visiting:
            chain = " -> ".join((*_visiting, name))
            raise ValueError(f"Circular include detected: '{name}' ({chain})")
        if name not in self._goal_data:
            raise ValueError(f"Unknown goal: '{name}'")

        body = self._goal_data[name]
        phases: list[Phase] = []
        for included in body.get("include", []):
            logger.debug("Goal '%s' includes '%s'", name, included)
            phases.extend(self.goal(included, (*_visiting, name)).phases)
        phases.extend(_parse_phases(body))
        return Goal(name=name, phases=phases)

    def _build_project(self, name: str, body: dict[str, Any]) -> P:
        goals: list[Goal] = []
        for goal_name in body.get("use", []):
            if goal_name not in self._goal_data:
                raise ValueError(f"Project '{name}' uses unknown goal: '{goal_name}'")
            goals.append(self.goal(goal_name))

        inline = _parse_phases(body)
        if inline:
            goals.append(Goal(name=f"{name}:inline", phases=inline))

        fields = {
            key: value
            for key, value in body.items()
            if key not in _STRUCTURAL_KEYS and not key.startswith("__")
        }
        logger.debug("Building project '%s' as %s", name, self._project_type.__name__)
        return self._project_type(name=name, goals=goals, **fields)

    def _resolve(self) -> dict[str, P]:
        if self._projects is None:
            logger.debug(
                "Resolving %d goal(s) and %d project(s)",
                len(self._goal_data),
                len(self._project_data),
            )
            self._projects = {
                name: self._build_project(name, body) for name, body in self._project_data.items()
            }
        return self._projects

    def __getitem__(self, name: str) -> P:
        return self._resolve()[name]

    def __contains__(self, name: object) -> bool:
        return name in self._project_data

    def __iter__(self) -> Iterator[str]:
        return iter(self._project_data)

    def __len__(self) -> int:
        return len(self._project_data)

    @overload
    def get(self, name: str) -> P | None: ...
    @overload
    def get(self, name: str, default: P) -> P: ...
    @overload
    def get(self, name: str, default: None) -> P | None: ...
    def get(self, name: str, default: Any = None) -> P | None:
        return self._resolve().get(name, default)

    def filter(self, names: Iterable[str]) -> list[P]:
        """Return the named projects that exist, in the order given."""
        projects = self._resolve()
        return [p for n in names if (p := projects.get(n)) is not None]

    def __repr__(self) -> str:
        return (
            f"Workspace(project_type={self._project_type.__name__}, "
            f"goals={len(self._goal_data)}, projects={len(self._project_data)})"
        )
