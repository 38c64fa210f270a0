"""共享 fixture — 假命令执行器 + 临时工程目录

  tmp_path/
  ├── app/package.json     消费方工程 (project_dir)
  └── lib/package.json     本地依赖

FakeExecutor 实现 CommandExecutor 协议，只记录调用，不启动真实 npm。
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

import localdev.core.config as cfgmod
from localdev.utils.logger import reset_logging
from localdev.utils.shell import CommandResult


class FakeExecutor:
    """记录 (argv, cwd)，按预设规则返回失败结果"""

    def __init__(self) -> None:
        self.calls: list[tuple[list[str], str]] = []
        self._failures: list[tuple[list[str], str | None, CommandResult]] = []

    def fail_on(
        self, argv: list[str], *, cwd: str | None = None,
        returncode: int = 1, stderr: str = "npm ERR! boom",
    ) -> None:
        self._failures.append((argv, cwd, CommandResult(returncode, "", stderr)))

    def execute(self, cmd, *, cwd=".", env=None, timeout=None, cancel=None, shell=False):  # type: ignore[no-untyped-def]
        self.calls.append((list(cmd), cwd))
        for argv, want_cwd, result in self._failures:
            if list(cmd) == argv and (want_cwd is None or want_cwd == cwd):
                return result
        return CommandResult(0, "", "")

    def argvs(self) -> list[list[str]]:
        return [argv for argv, _ in self.calls]


class RecordingReporter:
    """按顺序记录 (kind, message)"""

    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    def start(self, message: str) -> None:
        self.events.append(("start", message))

    def succeed(self, message: str) -> None:
        self.events.append(("succeed", message))

    def fail(self, message: str) -> None:
        self.events.append(("fail", message))

    def info(self, message: str) -> None:
        self.events.append(("info", message))

    def kinds(self) -> list[str]:
        return [k for k, _ in self.events]


def _write_pkg(directory: Path, data: Any) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    p = directory / "package.json"
    p.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return p


def _read_pkg(directory: Path) -> dict:
    return json.loads((directory / "package.json").read_text(encoding="utf-8"))


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch):
    """每个测试使用独立的默认配置，不受外部环境变量影响"""
    monkeypatch.delenv("LOCALDEV_LINKER", raising=False)
    monkeypatch.delenv("LOCALDEV_LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOCALDEV_LOG_JSON", raising=False)
    monkeypatch.setattr(cfgmod, "_current", cfgmod.Config())
    yield
    reset_logging()
    logging.getLogger("localdev").setLevel(logging.NOTSET)


@pytest.fixture()
def fake_executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture()
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture()
def write_pkg():
    """写入 package.json 的工厂: write_pkg(dir, data)"""
    return _write_pkg


@pytest.fixture()
def read_pkg():
    """读取 package.json 的工厂: read_pkg(dir)"""
    return _read_pkg


@pytest.fixture()
def project_dir(tmp_path: Path) -> Path:
    """消费方工程 + 一个名为 lib 的本地依赖"""
    app = tmp_path / "app"
    _write_pkg(app, {"name": "app", "version": "1.0.0"})
    _write_pkg(tmp_path / "lib", {"name": "lib", "version": "2.3.0"})
    return app
