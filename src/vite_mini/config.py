import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


class DevServerSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    root: Path
    deps_dir: Path | None = None
    host: str = "127.0.0.1"
    port: int = 3000
    esbuild_binary: str = "esbuild"
    node_binary: str = "node"
    target: str = "es2020"
    transform_modules: bool = False

    @field_validator("root", "deps_dir")
    @classmethod
    def _absolute(cls, value: Path | None) -> Path | None:
        return value.expanduser().resolve() if value is not None else None

    @property
    def dependency_root(self) -> Path:
        return self.deps_dir if self.deps_dir is not None else self.root / "node_modules"


def load_settings(**overrides: Any) -> DevServerSettings:
    """Build settings from ``VITE_MINI_*`` environment variables; non-None overrides win."""
    values: dict[str, Any] = {
        "root": os.getenv("VITE_MINI_ROOT", os.getcwd()),
        "deps_dir": os.getenv("VITE_MINI_DEPS_DIR"),
        "host": os.getenv("VITE_MINI_HOST", "127.0.0.1"),
        "port": os.getenv("VITE_MINI_PORT", "3000"),
        "esbuild_binary": os.getenv("VITE_MINI_ESBUILD", "esbuild"),
        "node_binary": os.getenv("VITE_MINI_NODE", "node"),
        "target": os.getenv("VITE_MINI_TARGET", "es2020"),
        "transform_modules": os.getenv("VITE_MINI_TRANSFORM", "").strip().lower() in _TRUE_VALUES,
    }
    values.update({key: value for key, value in overrides.items() if value is not None})
    return DevServerSettings(**values)
