"""Runtime state for a single build invocation."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Generic, TypeVar

from .expressions import Expressions

logger = logging.getLogger(__name__)

P = TypeVar("P")


class BuildContext(Generic[P]):
    """State threaded through every step of one build.

    Expression variables always include `project` (the build target) and
    `env`; `basedir` is taken from the target when it has one. Extra
    variables passed in take precedence.
    """

    def __init__(
        self,
        target: P,
        *,
        dry_run: bool = False,
        variables: dict[str, Any] | None = None,
    ) -> None:
        self.target = target
        self.dry_run = dry_run
        self.artifact: Path | None = None

        basedir = getattr(target, "basedir", None)
        self.basedir = Path(basedir) if basedir is not None else Path.cwd()

        self.variables: dict[str, Any] = {
            "project": target,
            "basedir": str(self.basedir),
            "env": dict(os.environ),
        }
        self.variables.update(variables or {})
        self._expressions = Expressions(self.variables)

    def resolve(self, value: Any) -> Any:
        """Interpolate `${...}` expressions in value."""
        return self._expressions.interpolate(value)

    def path(self, value: str | Path) -> Path:
        """Resolve value into a path; relative paths are anchored at basedir."""
        resolved = Path(str(self.resolve(str(value))))
        if not resolved.is_absolute():
            resolved = self.basedir / resolved
        return resolved

    def attach(self, path: str | Path) -> None:
        """Register path as the primary output of this build."""
        self.artifact = Path(path)
        logger.info("Registered artifact %s", self.artifact)
