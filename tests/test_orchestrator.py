"""Tests for the scaffolding orchestrator (tstarter.orchestrator).

Git and the package managers are replaced by ``FakeTasks`` from conftest,
whose clone copies the template fixture.
"""

from __future__ import annotations

import pytest

from tstarter.config import Runner
from tstarter.errors import (
    CloneError,
    CommitError,
    GitNotInstalledError,
    InstallError,
    PipelineError,
    ToolNotFoundError,
)
from tstarter.orchestrator import scaffold
from tstarter.transform import DeletePaths, Phase, TransformationPipeline, TransformationStep

pytestmark = pytest.mark.unit


class TestHappyPath:
    async def test_full_run(self, options, fake_tasks):
        report = await scaffold(options, fake_tasks.as_tasks())

        assert report.project_path == options.project_path
        assert report.commit_hash == fake_tasks.commit_hash
        assert report.installed and report.committed
        assert report.warnings == []
        assert [name for name, _ in fake_tasks.calls] == ["clone", "install", "commit"]

    async def test_collaborator_arguments(self, make_options, fake_tasks, tmp_path):
        opts = make_options(runner=Runner.YARN)
        await scaffold(opts, fake_tasks.as_tasks())

        calls = dict(fake_tasks.calls)
        assert calls["clone"] == (opts.repo_info, tmp_path, "my-project")
        assert calls["install"] == (Runner.YARN, opts.project_path)
        assert calls["commit"] == (fake_tasks.commit_hash, opts.project_path)

    async def test_template_history_removed(self, options, fake_tasks):
        await scaffold(options, fake_tasks.as_tasks())
        assert not (options.project_path / ".git").exists()
        assert (options.project_path / "package.json").exists()

    async def test_no_install(self, make_options, fake_tasks):
        report = await scaffold(make_options(install=False), fake_tasks.as_tasks())
        assert not fake_tasks.called("install")
        assert report.installed is False
        assert report.committed is True


class TestIdentity:
    async def test_placeholder_identity_skips_commit(self, anonymous_options, fake_tasks):
        report = await scaffold(anonymous_options, fake_tasks.as_tasks())

        assert not fake_tasks.called("commit")
        assert report.committed is False
        license_text = (anonymous_options.project_path / "LICENSE").read_text(encoding="utf-8")
        assert "YOUR_NAME" in license_text
        assert "YOUR_GITHUB_USER_NAME" in (anonymous_options.project_path / "package.json").read_text(
            encoding="utf-8"
        )


class TestFailures:
    async def test_clone_error_propagates(self, options, fake_tasks):
        fake_tasks.clone_error = CloneError("Git clone failed.")
        with pytest.raises(CloneError):
            await scaffold(options, fake_tasks.as_tasks())
        assert [name for name, _ in fake_tasks.calls] == ["clone"]

    async def test_git_missing_propagates(self, options, fake_tasks):
        fake_tasks.clone_error = GitNotInstalledError()
        with pytest.raises(GitNotInstalledError):
            await scaffold(options, fake_tasks.as_tasks())
        assert not options.project_path.exists()

    async def test_unremovable_history_is_a_clone_error(self, options, fake_tasks, monkeypatch):
        def deny(path, *args, **kwargs):
            raise PermissionError(f"permission denied: {path}")

        monkeypatch.setattr("tstarter.orchestrator.shutil.rmtree", deny)
        with pytest.raises(CloneError, match="git history: permission denied"):
            await scaffold(options, fake_tasks.as_tasks())
        assert [name for name, _ in fake_tasks.calls] == ["clone"]

    async def test_pipeline_failure_stops_run(self, options, fake_tasks, monkeypatch):
        def broken(self, root, opts):
            raise PermissionError("read-only file system")

        step = TransformationStep(
            name="broken-step",
            phase=Phase.CLEANUP,
            description="Breaking things",
            operations=(DeletePaths("CHANGELOG.md"),),
        )
        pipeline = TransformationPipeline(steps=[step])
        monkeypatch.setattr(DeletePaths, "apply", broken)
        with pytest.raises(PipelineError, match="Step 'broken-step' failed: read-only file system"):
            await scaffold(options, fake_tasks.as_tasks(), pipeline)

        assert not fake_tasks.called("install")
        assert not fake_tasks.called("commit")
        assert options.project_path.exists()

    @pytest.mark.parametrize(
        "error",
        [InstallError("Installation failed. You'll need to install manually."), ToolNotFoundError("yarn")],
    )
    async def test_install_failure_is_a_warning(self, options, fake_tasks, error):
        fake_tasks.install_error = error
        report = await scaffold(options, fake_tasks.as_tasks())

        assert report.installed is False
        assert report.warnings == [str(error)]
        assert report.committed is True

    async def test_commit_failure_is_a_warning(self, options, fake_tasks):
        fake_tasks.commit_error = CommitError("git commit failed: no identity")
        report = await scaffold(options, fake_tasks.as_tasks())

        assert report.committed is False
        assert report.warnings == ["git commit failed: no identity"]

    async def test_unexpected_install_error_propagates(self, options, fake_tasks):
        fake_tasks.install_error = RuntimeError("boom")
        with pytest.raises(RuntimeError):
            await scaffold(options, fake_tasks.as_tasks())
