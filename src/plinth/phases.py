"""Phases: execution policies wrapped around a build step."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from .context import BuildContext
from .step import Step

logger = logging.getLogger(__name__)

P = TypeVar("P")


class Phase(ABC, Generic[P]):
    """Decides whether and how a Step runs."""

    def __init__(self, step: Step[P]) -> None:
        self.step = step

    @abstractmethod
    def __call__(self, ctx: BuildContext[P]) -> None: ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.step.describe()})"


class Always(Phase[P]):
    """Run the step on every build."""

    def __call__(self, ctx: BuildContext[P]) -> None:
        name = self.step.describe()
        if ctx.dry_run:
            logger.info("[DRY RUN] Would run %s", name)
            return
        logger.info("Running %s", name)
        self.step.execute(ctx)


class Ensure(Phase[P]):
    """Run the step unless its outputs are current."""

    def __call__(self, ctx: BuildContext[P]) -> None:
        name = self.step.describe()
        if self.step.up_to_date(ctx):
            logger.debug("Skipping %s; up to date", name)
        elif ctx.dry_run:
            logger.info("[DRY RUN] Would run %s", name)
        else:
            logger.info("Running %s", name)
            self.step.execute(ctx)


class Clean(Phase[P]):
    """Remove the step outputs if present."""

    def __call__(self, ctx: BuildContext[P]) -> None:
        name = self.step.describe()
        if not self.step.exists(ctx):
            logger.debug("Nothing to clean for %s", name)
        elif ctx.dry_run:
            logger.info("[DRY RUN] Would clean %s", name)
        else:
            logger.info("Cleaning %s", name)
            self.step.clean(ctx)


PHASES: dict[str, type[Phase]] = {
    "always": Always,
    "ensure": Ensure,
    "clean": Clean,
}
