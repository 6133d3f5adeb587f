"""Shared fixtures and helpers for tests."""

import asyncio
import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest

from vite_mini.core.dispatcher import Dispatcher
from vite_mini.core.prebundle import PrebundleCache
from vite_mini.core.resolver import BareModuleResolver
from vite_mini.errors import BundlerError
from vite_mini.models import CompiledTemplate, ComponentDescriptor

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Collaborator fakes
# ---------------------------------------------------------------------------


class FakeBundler:
    """Records calls and returns canned output; ``gate`` holds builds until set."""

    def __init__(self, output: str = "export default 1;\n", fail_times: int = 0) -> None:
        self.output = output
        self.fail_times = fail_times
        self.calls: list[tuple[Path, tuple[str, ...]]] = []
        self.transformed: list[str] = []
        self.started = asyncio.Event()
        self.gate: asyncio.Event | None = None

    async def bundle(self, entry: Path, externals: Sequence[str] = ()) -> str:
        self.calls.append((entry, tuple(externals)))
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_times > 0:
            self.fail_times -= 1
            raise BundlerError("Could not resolve entry")
        return self.output

    async def transform(self, code: str) -> str:
        self.transformed.append(code)
        return code


class StaticComponentParser:
    def __init__(self, descriptor: ComponentDescriptor) -> None:
        self.descriptor = descriptor

    async def parse(self, source: str, filename: str) -> ComponentDescriptor:
        return self.descriptor


class RecordingTemplateCompiler:
    def __init__(self, body: str = "return null", preamble: str = "") -> None:
        self.body = body
        self.preamble = preamble
        self.calls: list[tuple[str, str]] = []

    async def compile_template(self, template: str, file_id: str) -> CompiledTemplate:
        self.calls.append((template, file_id))
        return CompiledTemplate(body=self.body, preamble=self.preamble)


# ---------------------------------------------------------------------------
# Project tree helpers
# ---------------------------------------------------------------------------


def make_package(
    node_modules: Path,
    name: str,
    manifest: dict[str, Any] | None = None,
    files: dict[str, str] | None = None,
) -> Path:
    """Create ``node_modules/<name>`` with a package.json and source files."""
    package_dir = node_modules / name
    package_dir.mkdir(parents=True, exist_ok=True)
    if manifest is not None:
        (package_dir / "package.json").write_text(json.dumps(manifest), encoding="utf-8")
    for relative, content in (files or {}).items():
        target = package_dir / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return package_dir


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    (root / "node_modules").mkdir()
    return root


@pytest.fixture
def node_modules(project_root: Path) -> Path:
    return project_root / "node_modules"


@pytest.fixture
def fake_bundler() -> FakeBundler:
    return FakeBundler()


@pytest.fixture
def prebundle_cache(node_modules: Path, fake_bundler: FakeBundler) -> PrebundleCache:
    return PrebundleCache(BareModuleResolver(node_modules), fake_bundler)


@pytest.fixture
def template_compiler() -> RecordingTemplateCompiler:
    return RecordingTemplateCompiler("return h('div', msg)")


@pytest.fixture
def dispatcher(
    project_root: Path,
    prebundle_cache: PrebundleCache,
    fake_bundler: FakeBundler,
    template_compiler: RecordingTemplateCompiler,
) -> Dispatcher:
    parser = StaticComponentParser(
        ComponentDescriptor(script_setup="import { ref } from 'vue'\nconst msg = ref('hi')", template="<p>{{ msg }}</p>")
    )
    return Dispatcher(project_root, prebundle_cache, parser, template_compiler, bundler=fake_bundler)
