"""LinkService 测试 — install / install_all / unlink / list"""

from __future__ import annotations

from pathlib import Path

import pytest

import localdev.services.link_service as svcmod
from localdev.core.config import Config
from localdev.core.exceptions import (
    LinkerError,
    ManifestNotFoundError,
    ManifestParseError,
    MissingNameError,
    PathNotFoundError,
)
from localdev.services.link_service import LinkService


@pytest.fixture()
def svc(project_dir: Path, fake_executor, reporter) -> LinkService:
    return LinkService(project_dir, executor=fake_executor, config=Config(), reporter=reporter)


@pytest.fixture()
def write_calls(monkeypatch: pytest.MonkeyPatch) -> list[dict]:
    """记录 write_manifest 调用次数，同时保持真实写入"""
    calls: list[dict] = []
    real = svcmod.write_manifest

    def spy(directory, manifest, filename="package.json"):  # type: ignore[no-untyped-def]
        calls.append(manifest)
        return real(directory, manifest, filename)

    monkeypatch.setattr(svcmod, "write_manifest", spy)
    return calls


class TestInstall:
    def test_scenario_install_lib(self, svc, project_dir: Path, read_pkg) -> None:
        svc.install("../lib")
        assert read_pkg(project_dir) == {
            "name": "app",
            "version": "1.0.0",
            "dependencies": {"lib": "^2.3.0"},
            "localDependencies": {"../lib": "^2.3.0"},
        }

    def test_missing_name_leaves_manifest_untouched(
        self, svc, project_dir: Path, write_pkg, fake_executor,
    ) -> None:
        write_pkg(project_dir.parent / "noname", {"version": "1.0.0"})
        before = (project_dir / "package.json").read_bytes()
        with pytest.raises(MissingNameError):
            svc.install("../noname")
        assert (project_dir / "package.json").read_bytes() == before
        assert fake_executor.calls == []

    def test_linker_failure_no_write(self, svc, fake_executor, write_calls) -> None:
        fake_executor.fail_on(["npm", "link", "lib"])
        with pytest.raises(LinkerError):
            svc.install("../lib")
        assert write_calls == []

    def test_missing_consumer_manifest_fails_before_linking(
        self, tmp_path: Path, fake_executor, write_pkg,
    ) -> None:
        write_pkg(tmp_path / "lib", {"name": "lib", "version": "1.0.0"})
        (tmp_path / "bare").mkdir()
        svc = LinkService(tmp_path / "bare", executor=fake_executor, config=Config())
        with pytest.raises(ManifestNotFoundError):
            svc.install("../lib")
        assert fake_executor.calls == []

    def test_range_prefix_from_config(self, project_dir: Path, fake_executor, read_pkg) -> None:
        svc = LinkService(project_dir, executor=fake_executor, config=Config(range_prefix="~"))
        svc.install("../lib")
        assert read_pkg(project_dir)["dependencies"] == {"lib": "~2.3.0"}


    def test_null_version_stored_as_null_range(
        self, svc, project_dir: Path, write_pkg, read_pkg,
    ) -> None:
        write_pkg(project_dir.parent / "nullver", {"name": "nullver", "version": None})
        svc.install("../nullver")
        assert read_pkg(project_dir)["dependencies"] == {"nullver": "^null"}

    @pytest.mark.parametrize("key", ["dependencies", "localDependencies"])
    def test_non_object_dependency_map_rejected(
        self, svc, project_dir: Path, write_pkg, fake_executor, key,
    ) -> None:
        write_pkg(project_dir, {"name": "app", key: ["keep-me"]})
        before = (project_dir / "package.json").read_bytes()
        with pytest.raises(ManifestParseError, match=key):
            svc.install("../lib")
        assert (project_dir / "package.json").read_bytes() == before
        assert fake_executor.calls == []


class TestInstallAll:
    def test_partial_failure_counts(
        self, svc, project_dir: Path, write_pkg, read_pkg, write_calls,
    ) -> None:
        write_pkg(project_dir.parent / "lib2", {"name": "lib2", "version": "0.1.0"})
        write_pkg(project_dir, {
            "name": "app",
            "localDependencies": {"../lib": "^2.0.0", "../missing": "^1.0.0", "../lib2": "^0.1.0"},
        })

        summary = svc.install_all()

        assert (summary.success_count, summary.failure_count) == (2, 1)
        assert summary.failures[0].path == "../missing"
        assert len(write_calls) == 1
        data = read_pkg(project_dir)
        assert data["dependencies"] == {"lib": "^2.3.0", "lib2": "^0.1.0"}
        # 批量安装同时刷新 localDependencies 的版本范围，键顺序不变
        assert data["localDependencies"] == {
            "../lib": "^2.3.0", "../missing": "^1.0.0", "../lib2": "^0.1.0",
        }

    def test_processes_in_stored_order(self, svc, project_dir: Path, write_pkg, fake_executor) -> None:
        write_pkg(project_dir.parent / "a", {"name": "a", "version": "1.0.0"})
        write_pkg(project_dir, {
            "name": "app", "localDependencies": {"../lib": "^1", "../a": "^1"},
        })
        svc.install_all()
        consumed = [argv[2] for argv in fake_executor.argvs() if len(argv) == 3]
        assert consumed == ["lib", "a"]

    def test_all_fail_no_write(self, svc, project_dir: Path, write_pkg, write_calls) -> None:
        write_pkg(project_dir, {"name": "app", "localDependencies": {"../x": "^1", "../y": "^1"}})
        summary = svc.install_all()
        assert (summary.success_count, summary.failure_count) == (0, 2)
        assert write_calls == []

    def test_linker_error_does_not_abort_batch(
        self, svc, project_dir: Path, write_pkg, fake_executor,
    ) -> None:
        write_pkg(project_dir.parent / "a", {"name": "a", "version": "1.0.0"})
        write_pkg(project_dir, {
            "name": "app", "localDependencies": {"../lib": "^1", "../a": "^1"},
        })
        fake_executor.fail_on(["npm", "link", "lib"])
        summary = svc.install_all()
        assert (summary.success_count, summary.failure_count) == (1, 1)
        assert ["npm", "link", "a"] in fake_executor.argvs()

    def test_undecodable_dependency_manifest_does_not_abort_batch(
        self, svc, project_dir: Path, write_pkg, read_pkg,
    ) -> None:
        bad = project_dir.parent / "bad"
        bad.mkdir()
        (bad / "package.json").write_bytes(b'{"name": "\xff\xfe"}')
        write_pkg(project_dir, {
            "name": "app", "localDependencies": {"../bad": "^1.0.0", "../lib": "^2.0.0"},
        })

        summary = svc.install_all()

        assert (summary.success_count, summary.failure_count) == (1, 1)
        assert summary.failures[0].path == "../bad"
        assert read_pkg(project_dir)["dependencies"] == {"lib": "^2.3.0"}

    @pytest.mark.parametrize("local", [None, {}])
    def test_empty_does_nothing(
        self, svc, project_dir: Path, write_pkg, fake_executor, write_calls, local,
    ) -> None:
        data: dict = {"name": "app"}
        if local is not None:
            data["localDependencies"] = local
        write_pkg(project_dir, data)
        summary = svc.install_all()
        assert summary.total == 0
        assert fake_executor.calls == []
        assert write_calls == []

    def test_missing_consumer_manifest_raises(self, tmp_path: Path, fake_executor) -> None:
        svc = LinkService(tmp_path, executor=fake_executor, config=Config())
        with pytest.raises(ManifestNotFoundError):
            svc.install_all()


class TestUnlink:
    def test_scenario_unlink_lib(self, svc, project_dir: Path, read_pkg) -> None:
        svc.install("../lib")
        assert svc.unlink("../lib") == "lib"
        assert read_pkg(project_dir) == {
            "name": "app",
            "version": "1.0.0",
            "dependencies": {},
            "localDependencies": {},
        }

    def test_release_failure_no_write(
        self, svc, project_dir: Path, fake_executor, write_calls,
    ) -> None:
        fake_executor.fail_on(["npm", "unlink", "lib"])
        with pytest.raises(LinkerError):
            svc.unlink("../lib")
        assert write_calls == []

    def test_missing_path(self, svc) -> None:
        with pytest.raises(PathNotFoundError):
            svc.unlink("../gone")


class TestListEntries:
    def test_resolved_and_missing(
        self, svc, project_dir: Path, write_pkg, fake_executor, write_calls,
    ) -> None:
        write_pkg(project_dir, {
            "name": "app", "localDependencies": {"../lib": "^2.3.0", "../a": "^1.0.0"},
        })
        entries = svc.list_entries()
        assert [(e.path, e.version_range, e.name) for e in entries] == [
            ("../lib", "^2.3.0", "lib"),
            ("../a", "^1.0.0", None),
        ]
        assert fake_executor.calls == []
        assert write_calls == []

    def test_undecodable_dependency_manifest_shows_unresolved(
        self, svc, project_dir: Path, write_pkg,
    ) -> None:
        bad = project_dir.parent / "bad"
        bad.mkdir()
        (bad / "package.json").write_bytes(b'{"name": "\xff\xfe"}')
        write_pkg(project_dir, {
            "name": "app", "localDependencies": {"../bad": "^1.0.0", "../lib": "^2.3.0"},
        })
        assert [e.name for e in svc.list_entries()] == [None, "lib"]

    def test_empty(self, svc) -> None:
        assert svc.list_entries() == []
