"""Goal model: an ordered list of phases run as one unit."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, Field

from .context import BuildContext
from .phases import Phase

logger = logging.getLogger(__name__)


class Goal(BaseModel):
    """A named, ordered sequence of phases."""

    model_config = {"arbitrary_types_allowed": True}

    name: str
    phases: list[Phase[Any]] = Field(default_factory=list)

    def __iter__(self) -> Iterator[Phase[Any]]:  # type: ignore[override]
        return iter(self.phases)

    def __len__(self) -> int:
        return len(self.phases)

    def run(self, ctx: BuildContext) -> None:
        logger.debug("Running goal '%s' (%d phases)", self.name, len(self.phases))
        for phase in self.phases:
            phase(ctx)
