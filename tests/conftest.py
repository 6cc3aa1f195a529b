"""Shared test fixtures for lintbridge tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Generator

import pytest

from lintbridge.bridge import LintBridge
from lintbridge.config import Settings

# Rule logic shared by both fake engine shapes. Recognizes `debugger`
# (error) and `console.` (warning); fix mode normalizes `var x=5` spacing,
# adds semicolons and a final newline.
_ENGINE_RULES = '''
import asyncio
import os
import re

CALLS = []


def run_rules(text, file_path, options):
    CALLS.append({
        "text": text,
        "file_path": file_path,
        "options": dict(options),
        "cwd": os.getcwd(),
    })
    if "throw-engine-error" in text:
        raise RuntimeError("engine exploded")
    messages = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        col = line.find("debugger")
        if col != -1:
            messages.append({
                "severity": 2,
                "message": "Unexpected 'debugger' statement.",
                "ruleId": "no-debugger",
                "line": lineno,
                "column": col + 1,
            })
        col = line.find("console.")
        if col != -1:
            messages.append({
                "severity": 1,
                "message": "Unexpected console statement.",
                "ruleId": "no-console",
                "line": lineno,
                "column": col + 1,
            })
    result = {"filePath": file_path, "messages": messages}
    if options.get("fix"):
        fixed = fix_text(text)
        if fixed != text:
            result["output"] = fixed
    return result


def fix_text(text):
    lines = []
    for line in text.splitlines():
        line = re.sub(r"^var\\s+", "var ", line)
        line = re.sub(r"\\s*=\\s*", " = ", line).rstrip()
        if line and not line.endswith((";", "{", "}")):
            line += ";"
        lines.append(line)
    return "\\n".join(lines) + "\\n"
'''

_LEGACY_ENGINE = _ENGINE_RULES + '''

class CLIEngine:
    version = __VERSION__

    def __init__(self, **options):
        self.options = options

    def execute_on_text(self, text, file_path):
        return {"results": [run_rules(text, file_path, self.options)]}
'''

_MODERN_ENGINE = _ENGINE_RULES + '''

class ESLint:
    version = __VERSION__

    def __init__(self, **options):
        self.options = options

    async def lint_text(self, text, file_path=None):
        await asyncio.sleep(0)
        return [run_rules(text, file_path, self.options)]
'''

ENGINE_SOURCES = {"legacy": _LEGACY_ENGINE, "modern": _MODERN_ENGINE}


def write_engine(package_dir: Path, kind: str = "legacy", version: str | None = "6.8.0", source: str | None = None) -> Path:
    """Write a fake engine package (``<package_dir>/__init__.py``)."""
    package_dir.mkdir(parents=True, exist_ok=True)
    if source is None:
        source = ENGINE_SOURCES[kind].replace("__VERSION__", repr(version))
    (package_dir / "__init__.py").write_text(source)
    return package_dir


@pytest.fixture(autouse=True)
def isolate_process_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Resolution changes cwd, NODE_PATH, sys.path and sys.modules; put them back."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("NODE_PATH", "")  # recorded, so teardown restores the original
    monkeypatch.delenv("NODE_PATH")
    monkeypatch.setattr(sys, "path", list(sys.path))
    yield
    for name in list(sys.modules):
        if name in ("eslint", "lint_gate") or name.startswith(("eslint.", "_lintbridge_local_")):
            del sys.modules[name]


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def bridge(settings: Settings) -> LintBridge:
    return LintBridge(settings)


@pytest.fixture
def resolve_calls(bridge: LintBridge, monkeypatch: pytest.MonkeyPatch) -> list:
    """Record every engine resolution the bridge performs."""
    calls: list = []
    original = bridge.resolver.resolve

    def spy(request):
        calls.append(request)
        return original(request)

    monkeypatch.setattr(bridge.resolver, "resolve", spy)
    return calls


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    """Create a project root, optionally with a config file and a local engine."""

    def _make(
        name: str = "project",
        config: str | None = None,
        local_engine: str | None = None,
        version: str | None = "6.8.0",
    ) -> Path:
        root = tmp_path / name
        root.mkdir()
        if config:
            (root / config).write_text("{}")
        if local_engine:
            write_engine(root / "node_modules" / "eslint", local_engine, version)
        return root

    return _make


@pytest.fixture
def embedded_engine(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Callable[..., Path]:
    """Install a fake engine importable as the embedded fallback."""

    def _install(kind: str = "legacy", version: str | None = "8.57.0", source: str | None = None) -> Path:
        site = tmp_path / "embedded_site"
        package = write_engine(site / "eslint", kind, version, source)
        monkeypatch.syspath_prepend(str(site))
        return package

    return _install


@pytest.fixture
def engine_writer() -> Callable[..., Path]:
    return write_engine
