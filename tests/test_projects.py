"""Tests for plinth.projects."""

from __future__ import annotations

import zipfile

import pytest

from plinth.context import BuildContext
from plinth.errors import BuildError
from plinth.goals import Goal
from plinth.phases import Always, Ensure
from plinth.projects import Project
from plinth.step import Step


class TrackingStep(Step["Project"]):
    def __init__(self):
        self.executed = False

    def up_to_date(self, ctx: BuildContext[Project]) -> bool:
        return False

    def execute(self, ctx: BuildContext[Project]) -> None:
        self.executed = True
        self.received_project = ctx.target

    def clean(self, ctx: BuildContext[Project]) -> None:
        pass


class FailingStep(Step["Project"]):
    def __init__(self, exc: Exception):
        self.exc = exc

    def up_to_date(self, ctx: BuildContext[Project]) -> bool:
        return False

    def execute(self, ctx: BuildContext[Project]) -> None:
        raise self.exc

    def clean(self, ctx: BuildContext[Project]) -> None:
        pass


class TestProjectModel:
    def test_defaults(self):
        proj = Project(name="app")
        assert proj.description == ""
        assert proj.version == "0.0.0"
        assert proj.profiles == []
        assert proj.goals == []

    def test_artifact_id_defaults_to_name(self):
        assert Project(name="app").artifact_id == "app"

    def test_artifact_id_explicit(self):
        assert Project(name="app", artifact_id="app-schema").artifact_id == "app-schema"

    def test_short_version(self):
        assert Project(name="app", version="1.3.7").short_version == "1.3"

    def test_has_profile(self):
        proj = Project(name="app", profiles=["release"])
        assert proj.has_profile("release") is True
        assert proj.has_profile("debug") is False

    def test_skip_version(self):
        assert Project(name="app", profiles=["skipVersion"]).skip_version is True
        assert Project(name="app").skip_version is False


class TestProjectBuild:
    def test_build_runs_goals(self):
        s = TrackingStep()
        proj = Project(name="app", goals=[Goal(name="g", phases=[Ensure(s)])])
        proj.build()
        assert s.executed is True

    def test_build_passes_self_as_target(self):
        s = TrackingStep()
        proj = Project(name="app", goals=[Goal(name="g", phases=[Always(s)])])
        proj.build()
        assert s.received_project is proj

    def test_build_returns_context(self):
        proj = Project(name="app")
        ctx = proj.build()
        assert isinstance(ctx, BuildContext)
        assert ctx.target is proj

    def test_build_dry_run(self):
        s = TrackingStep()
        proj = Project(name="app", goals=[Goal(name="g", phases=[Always(s)])])
        proj.build(dry_run=True)
        assert s.executed is False

    def test_subclass_preserved_in_context(self):
        class SchemaProject(Project):
            group_id: str = "com.qcadoo"

        s = TrackingStep()
        proj = SchemaProject(name="app", goals=[Goal(name="g", phases=[Always(s)])])
        proj.build()
        assert isinstance(s.received_project, SchemaProject)
        assert s.received_project.group_id == "com.qcadoo"

    @pytest.mark.parametrize(
        "exc",
        [
            OSError("disk full"),
            PermissionError("denied"),
            zipfile.BadZipFile("corrupt"),
        ],
    )
    def test_io_failures_become_build_error(self, exc):
        proj = Project(name="app", goals=[Goal(name="g", phases=[Always(FailingStep(exc))])])
        with pytest.raises(BuildError, match="Exception while creating zip") as info:
            proj.build()
        assert info.value.__cause__ is exc

    def test_other_errors_propagate(self):
        proj = Project(
            name="app",
            goals=[Goal(name="g", phases=[Always(FailingStep(ValueError("bad version")))])],
        )
        with pytest.raises(ValueError, match="bad version"):
            proj.build()

    def test_failure_stops_later_goals(self):
        s = TrackingStep()
        proj = Project(
            name="app",
            goals=[
                Goal(name="first", phases=[Always(FailingStep(OSError("boom")))]),
                Goal(name="second", phases=[Always(s)]),
            ],
        )
        with pytest.raises(BuildError):
            proj.build()
        assert s.executed is False
