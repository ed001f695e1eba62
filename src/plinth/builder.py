"""Schema archive builder driven by an explicit configuration struct.

The builder bundles the `.xsd` files of a multi-module source tree into a
zip with a fixed three-tier layout::

    <working_directory>/            schemas found by root_pattern
    <working_directory>/modules/    schemas found by modules_pattern
    <working_directory>/common/     schemas found by common_pattern

Each run empties the working directory first, copies the schemas in
(renamed to `<name>-<major>.<minor>.xsd` unless the `skipVersion` profile is
active), writes the archive and registers it as the build artifact.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, Field

from .context import BuildContext
from .goals import Goal
from .phases import Always
from .projects import Project
from .steps import Archive, AttachArtifact, SchemaSet, WorkingDirectory
from .versioning import SKIP_VERSION_PROFILE, short_version

logger = logging.getLogger(__name__)

ROOT_PATTERN = "*/src/main/resources/com/qcadoo/*/*.xsd"
MODULES_PATTERN = "*/src/main/resources/com/qcadoo/*/modules/*.xsd"
COMMON_PATTERN = "*/src/main/resources/com/qcadoo/*/common/*.xsd"


class SchemaBuild(BaseModel):
    """Parameters for one schema archive build."""

    base_directory: Path
    working_directory: Path
    modules_working_directory: Path
    common_working_directory: Path
    target: Path
    version: str
    artifact_id: str = "schema"
    active_profiles: list[str] = Field(default_factory=list)

    root_pattern: str = ROOT_PATTERN
    modules_pattern: str = MODULES_PATTERN
    common_pattern: str = COMMON_PATTERN

    @classmethod
    def for_project(
        cls,
        basedir: str | Path,
        artifact_id: str,
        version: str,
        profiles: Iterable[str] = (),
    ) -> SchemaBuild:
        """Standard layout for a project module rooted at basedir."""
        basedir = Path(basedir)
        workdir = basedir / "target" / "schema"
        return cls(
            base_directory=basedir / "..",
            working_directory=workdir,
            modules_working_directory=workdir / "modules",
            common_working_directory=workdir / "common",
            target=basedir / "target" / f"{artifact_id}.zip",
            version=version,
            artifact_id=artifact_id,
            active_profiles=list(profiles),
        )

    @property
    def skip_version(self) -> bool:
        return SKIP_VERSION_PROFILE in self.active_profiles

    @property
    def short_version(self) -> str:
        return short_version(self.version)


class SchemaArchiveBuilder:
    """Runs the schema packaging goal for a SchemaBuild."""

    def __init__(self, config: SchemaBuild) -> None:
        self.config = config

    def project(self) -> Project:
        cfg = self.config
        return Project(
            name=cfg.artifact_id,
            version=cfg.version,
            basedir=str(cfg.base_directory),
            profiles=list(cfg.active_profiles),
            goals=[self.goal()],
        )

    def goal(self) -> Goal:
        cfg = self.config
        base = str(cfg.base_directory)
        return Goal(
            name="schema",
            phases=[
                Always(
                    WorkingDirectory(
                        path=str(cfg.working_directory),
                        subdirs=[
                            str(cfg.modules_working_directory),
                            str(cfg.common_working_directory),
                        ],
                    )
                ),
                Always(
                    SchemaSet(
                        base=base,
                        pattern=cfg.root_pattern,
                        dest=str(cfg.working_directory),
                    )
                ),
                Always(
                    SchemaSet(
                        base=base,
                        pattern=cfg.modules_pattern,
                        dest=str(cfg.modules_working_directory),
                    )
                ),
                Always(
                    SchemaSet(
                        base=base,
                        pattern=cfg.common_pattern,
                        dest=str(cfg.common_working_directory),
                    )
                ),
                Always(Archive(source=str(cfg.working_directory), dest=str(cfg.target))),
                Always(AttachArtifact(path=str(cfg.target))),
            ],
        )

    def execute(self, *, dry_run: bool = False) -> BuildContext:
        """Build the archive; raises BuildError if any step fails."""
        cfg = self.config
        logger.info(
            "Packaging schemas from %s (version suffix: %s)",
            cfg.base_directory,
            "skipped" if cfg.skip_version else cfg.short_version,
        )
        return self.project().build(dry_run=dry_run)


def build_schema_archive(config: SchemaBuild, **kwargs) -> Path | None:
    """Build the archive described by config and return the registered artifact."""
    return SchemaArchiveBuilder(config).execute(**kwargs).artifact
