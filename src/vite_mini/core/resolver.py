import json
import logging
from pathlib import Path
from typing import Any

from vite_mini.errors import BareModuleNotFoundError
from vite_mini.models import ResolvedBareModule

logger = logging.getLogger(__name__)

_MANIFEST_NAME = "package.json"
_DEFAULT_ENTRY = "index.js"
_ENTRY_FIELDS = ("module", "main")
_DEPENDENCY_FIELDS = ("dependencies", "peerDependencies")


def split_specifier(specifier: str) -> tuple[str, str | None]:
    """Split a bare specifier into ``(package_name, subpath)``.

    Scoped packages (``@scope/name``) take two path segments.
    """
    segments = specifier.split("/")
    if any(segment in ("", ".", "..") for segment in segments):
        raise BareModuleNotFoundError(specifier, "invalid package specifier")
    count = 2 if specifier.startswith("@") else 1
    if len(segments) < count:
        raise BareModuleNotFoundError(specifier, "invalid package specifier")
    package_name = "/".join(segments[:count])
    subpath = "/".join(segments[count:]) or None
    return package_name, subpath


def select_entry(manifest: dict[str, Any]) -> str:
    for field in _ENTRY_FIELDS:
        value = manifest.get(field)
        if isinstance(value, str) and value.strip():
            return value
    return _DEFAULT_ENTRY


def _dependency_names(manifest: dict[str, Any]) -> tuple[str, ...]:
    names: set[str] = set()
    for field in _DEPENDENCY_FIELDS:
        value = manifest.get(field)
        if isinstance(value, dict):
            names.update(str(name) for name in value)
    return tuple(sorted(names))


def _locate_file(candidate: Path) -> Path | None:
    if candidate.is_file():
        return candidate
    with_suffix = candidate.with_name(candidate.name + ".js")
    if with_suffix.is_file():
        return with_suffix
    index = candidate / _DEFAULT_ENTRY
    if index.is_file():
        return index
    return None


class BareModuleResolver:
    """Map bare package specifiers to entry files below a dependency root."""

    def __init__(self, deps_root: str | Path) -> None:
        self._deps_root = Path(deps_root).resolve()

    @property
    def deps_root(self) -> Path:
        return self._deps_root

    def read_manifest(self, package_name: str) -> dict[str, Any]:
        manifest_path = self._deps_root / package_name / _MANIFEST_NAME
        try:
            manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise BareModuleNotFoundError(package_name, f"no {_MANIFEST_NAME} in {manifest_path.parent}") from None
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise BareModuleNotFoundError(package_name, f"unreadable {_MANIFEST_NAME}: {exc}") from exc
        if not isinstance(manifest, dict):
            raise BareModuleNotFoundError(package_name, f"{_MANIFEST_NAME} is not a JSON object")
        return manifest

    def resolve(self, specifier: str) -> ResolvedBareModule:
        try:
            package_name, subpath = split_specifier(specifier)
            manifest = self.read_manifest(package_name)
            package_dir = self._deps_root / package_name
            relative_entry = subpath if subpath is not None else select_entry(manifest)
            entry = _locate_file(package_dir / relative_entry)
            if entry is None:
                raise BareModuleNotFoundError(package_name, f"entry '{relative_entry}' does not exist")
        except BareModuleNotFoundError as exc:
            logger.warning("Unresolved module %s: %s", exc.package_name, exc.reason)
            raise

        return ResolvedBareModule(
            package_name=package_name,
            package_dir=package_dir,
            entry_path=entry.resolve(),
            dependencies=_dependency_names(manifest),
        )
