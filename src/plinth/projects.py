"""Project model: the versioned target a build runs against."""

from __future__ import annotations

import logging
import zipfile
from typing import Any

from pydantic import BaseModel, Field

from .context import BuildContext
from .errors import BuildError
from .goals import Goal
from .versioning import SKIP_VERSION_PROFILE, short_version

logger = logging.getLogger(__name__)


class Project(BaseModel):
    """A buildable project; apps may subclass with extra fields."""

    model_config = {"arbitrary_types_allowed": True}

    name: str
    description: str = ""
    version: str = "0.0.0"
    basedir: str = "."
    artifact_id: str = ""
    profiles: list[str] = Field(default_factory=list)
    goals: list[Goal] = Field(default_factory=list)

    def model_post_init(self, __context: Any) -> None:
        if not self.artifact_id:
            self.artifact_id = self.name

    @property
    def short_version(self) -> str:
        return short_version(self.version)

    def has_profile(self, profile_id: str) -> bool:
        return profile_id in self.profiles

    @property
    def skip_version(self) -> bool:
        return self.has_profile(SKIP_VERSION_PROFILE)

    def build(self, **kwargs) -> BuildContext:
        """Run every goal and return the finished context.

        kwargs are passed to BuildContext. I/O and archive failures abort the
        build as a BuildError carrying the original exception.
        """
        ctx = BuildContext(target=self, **kwargs)
        logger.info("Building project '%s' %s", self.name, self.version)
        try:
            for goal in self.goals:
                goal.run(ctx)
        except (OSError, zipfile.BadZipFile) as exc:
            raise BuildError("Exception while creating zip") from exc
        return ctx
