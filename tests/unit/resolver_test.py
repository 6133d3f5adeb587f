"""Unit tests for bare module resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.conftest import make_package
from vite_mini.core.resolver import BareModuleResolver, select_entry, split_specifier
from vite_mini.errors import BareModuleNotFoundError


class TestSplitSpecifier:
    @pytest.mark.parametrize(
        ("specifier", "expected"),
        [
            ("vue", ("vue", None)),
            ("lodash/debounce", ("lodash", "debounce")),
            ("@vue/shared", ("@vue/shared", None)),
            ("@vue/shared/dist/x.js", ("@vue/shared", "dist/x.js")),
        ],
    )
    def test_splits(self, specifier: str, expected: tuple[str, str | None]) -> None:
        assert split_specifier(specifier) == expected

    @pytest.mark.parametrize("specifier", ["", "@scope", "../etc", "pkg/../../x", "pkg//x"])
    def test_rejects_invalid(self, specifier: str) -> None:
        with pytest.raises(BareModuleNotFoundError):
            split_specifier(specifier)


class TestSelectEntry:
    def test_prefers_module(self) -> None:
        assert select_entry({"module": "dist/index.mjs", "main": "index.cjs"}) == "dist/index.mjs"

    def test_falls_back_to_main(self) -> None:
        assert select_entry({"main": "lib/main.js"}) == "lib/main.js"

    def test_ignores_non_string_fields(self) -> None:
        assert select_entry({"module": {"x": 1}, "main": ""}) == "index.js"

    def test_defaults_to_index(self) -> None:
        assert select_entry({}) == "index.js"


class TestBareModuleResolver:
    def test_resolves_module_entry(self, node_modules: Path) -> None:
        package_dir = make_package(
            node_modules,
            "lodash",
            {"module": "lodash.mjs", "main": "lodash.cjs", "dependencies": {"b": "1"}, "peerDependencies": {"a": "1"}},
            {"lodash.mjs": "export default {}", "lodash.cjs": "module.exports = {}"},
        )
        resolved = BareModuleResolver(node_modules).resolve("lodash")
        assert resolved.package_name == "lodash"
        assert resolved.entry_path == (package_dir / "lodash.mjs").resolve()
        assert resolved.dependencies == ("a", "b")

    def test_default_index(self, node_modules: Path) -> None:
        package_dir = make_package(node_modules, "tiny", {"name": "tiny"}, {"index.js": "export {}"})
        assert BareModuleResolver(node_modules).resolve("tiny").entry_path == (package_dir / "index.js").resolve()

    def test_scoped_package(self, node_modules: Path) -> None:
        make_package(node_modules, "@vue/shared", {"module": "dist/shared.esm.js"}, {"dist/shared.esm.js": ""})
        resolved = BareModuleResolver(node_modules).resolve("@vue/shared")
        assert resolved.package_name == "@vue/shared"
        assert resolved.entry_path.name == "shared.esm.js"

    def test_subpath_with_implicit_extension(self, node_modules: Path) -> None:
        make_package(node_modules, "lodash", {"main": "lodash.js"}, {"lodash.js": "", "debounce.js": ""})
        resolved = BareModuleResolver(node_modules).resolve("lodash/debounce")
        assert resolved.package_name == "lodash"
        assert resolved.entry_path.name == "debounce.js"

    def test_missing_package(self, node_modules: Path) -> None:
        with pytest.raises(BareModuleNotFoundError) as exc_info:
            BareModuleResolver(node_modules).resolve("does-not-exist")
        assert isinstance(exc_info.value, ModuleNotFoundError)
        assert exc_info.value.name == "does-not-exist"
        assert "does-not-exist" in str(exc_info.value)

    def test_unparsable_manifest(self, node_modules: Path) -> None:
        package_dir = make_package(node_modules, "broken")
        (package_dir / "package.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(BareModuleNotFoundError, match="broken"):
            BareModuleResolver(node_modules).resolve("broken")

    def test_manifest_not_an_object(self, node_modules: Path) -> None:
        make_package(node_modules, "weird")
        (node_modules / "weird" / "package.json").write_text("[]", encoding="utf-8")
        with pytest.raises(BareModuleNotFoundError):
            BareModuleResolver(node_modules).resolve("weird")

    def test_missing_entry_file(self, node_modules: Path) -> None:
        make_package(node_modules, "hollow", {"module": "dist/esm.js"})
        with pytest.raises(BareModuleNotFoundError, match="dist/esm.js"):
            BareModuleResolver(node_modules).resolve("hollow")
