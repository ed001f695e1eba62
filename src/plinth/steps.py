"""Schema packaging steps usable from build descriptors."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from .archive import DIRECTORY_MODE, FILE_MODE, create_archive
from .context import BuildContext
from .projects import Project
from .step import Step, step
from .versioning import versioned_name

logger = logging.getLogger(__name__)


@step("workdir")
class WorkingDirectory(Step[Project]):
    """Recreate an empty staging directory with its nested subdirectories."""

    def __init__(self, path: str, subdirs: list[str] | None = None) -> None:
        self.path = path
        self.subdirs = list(subdirs or [])

    def describe(self) -> str:
        return f"workdir({self.path})"

    def _layout(self, ctx: BuildContext[Project]) -> tuple[Path, list[Path]]:
        root = ctx.path(self.path)
        return root, [root / str(ctx.resolve(sub)) for sub in self.subdirs]

    def up_to_date(self, ctx: BuildContext[Project]) -> bool:
        # stale content must never survive into a new build
        return False

    def exists(self, ctx: BuildContext[Project]) -> bool:
        return ctx.path(self.path).exists()

    def execute(self, ctx: BuildContext[Project]) -> None:
        root, nested = self._layout(ctx)
        root.mkdir(parents=True, exist_ok=True)

        for child in root.iterdir():
            logger.debug("Removing stale %s", child)
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()

        for subdir in nested:
            subdir.mkdir(parents=True, exist_ok=True)

    def clean(self, ctx: BuildContext[Project]) -> None:
        shutil.rmtree(ctx.path(self.path))


@step("schemas")
class SchemaSet(Step[Project]):
    """Copy schema files matching a glob into a staging directory.

    Copies are renamed with the project's `major.minor` suffix unless the
    project runs with the skip-version profile.
    """

    def __init__(self, pattern: str, dest: str, base: str = ".") -> None:
        self.base = base
        self.pattern = pattern
        self.dest = dest

    def describe(self) -> str:
        return f"schemas({self.pattern} -> {self.dest})"

    def sources(self, ctx: BuildContext[Project]) -> list[Path]:
        base = ctx.path(self.base)
        pattern = str(ctx.resolve(self.pattern))
        return sorted(p for p in base.glob(pattern) if p.is_file())

    def plan(self, ctx: BuildContext[Project]) -> list[tuple[Path, Path]]:
        """Return (source, destination) pairs for every matching file."""
        project = ctx.target
        dest = ctx.path(self.dest)
        return [
            (src, dest / versioned_name(src.name, project.version, skip=project.skip_version))
            for src in self.sources(ctx)
        ]

    def up_to_date(self, ctx: BuildContext[Project]) -> bool:
        return all(
            dst.is_file() and dst.read_bytes() == src.read_bytes() for src, dst in self.plan(ctx)
        )

    def exists(self, ctx: BuildContext[Project]) -> bool:
        return any(dst.exists() for _, dst in self.plan(ctx))

    def execute(self, ctx: BuildContext[Project]) -> None:
        copies = self.plan(ctx)
        logger.debug("Copying %d schema file(s) matching '%s'", len(copies), self.pattern)
        for src, dst in copies:
            dst.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(src, dst)

    def clean(self, ctx: BuildContext[Project]) -> None:
        for _, dst in self.plan(ctx):
            dst.unlink(missing_ok=True)


@step("archive")
class Archive(Step[Project]):
    """Zip a staging directory with fixed permission bits."""

    def __init__(
        self,
        source: str,
        dest: str,
        dir_mode: int = DIRECTORY_MODE,
        file_mode: int = FILE_MODE,
    ) -> None:
        self.source = source
        self.dest = dest
        self.dir_mode = dir_mode
        self.file_mode = file_mode

    def describe(self) -> str:
        return f"archive({self.dest})"

    def up_to_date(self, ctx: BuildContext[Project]) -> bool:
        dest = ctx.path(self.dest)
        source = ctx.path(self.source)
        if not dest.is_file() or not source.is_dir():
            return False
        built = dest.stat().st_mtime_ns
        return all(p.stat().st_mtime_ns < built for p in source.rglob("*"))

    def exists(self, ctx: BuildContext[Project]) -> bool:
        return ctx.path(self.dest).exists()

    def execute(self, ctx: BuildContext[Project]) -> None:
        create_archive(
            ctx.path(self.source),
            ctx.path(self.dest),
            dir_mode=self.dir_mode,
            file_mode=self.file_mode,
        )

    def clean(self, ctx: BuildContext[Project]) -> None:
        ctx.path(self.dest).unlink(missing_ok=True)


@step("artifact")
class AttachArtifact(Step[Project]):
    """Register a file as the build's primary output."""

    def __init__(self, path: str) -> None:
        self.path = path

    def describe(self) -> str:
        return f"artifact({self.path})"

    def up_to_date(self, ctx: BuildContext[Project]) -> bool:
        return False

    def exists(self, ctx: BuildContext[Project]) -> bool:
        return ctx.artifact is not None

    def execute(self, ctx: BuildContext[Project]) -> None:
        path = ctx.path(self.path)
        if not path.is_file():
            raise FileNotFoundError(f"Artifact not found: {path}")
        ctx.attach(path)

    def clean(self, ctx: BuildContext[Project]) -> None:
        ctx.artifact = None
