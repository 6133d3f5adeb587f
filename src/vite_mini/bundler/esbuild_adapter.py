from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from vite_mini.errors import BundlerError

logger = logging.getLogger(__name__)

# Build-time constants that packages such as vue and react read at import time.
_BUNDLE_DEFINES = {
    "process.env.NODE_ENV": '"development"',
    "__VUE_OPTIONS_API__": "true",
    "__VUE_PROD_DEVTOOLS__": "false",
    "__VUE_PROD_HYDRATION_MISMATCH_DETAILS__": "false",
}


class EsbuildBundler:
    """Run the ``esbuild`` CLI as a subprocess.

    Implements the ``Bundler`` protocol.
    """

    def __init__(self, binary: str = "esbuild", target: str = "es2020") -> None:
        self._binary = binary
        self._target = target

    def _common_args(self) -> list[str]:
        return [
            "--format=esm",
            f"--target={self._target}",
            "--tree-shaking=true",
            "--log-level=error",
        ]

    def bundle_args(self, entry: Path, externals: Sequence[str] = ()) -> list[str]:
        args = [self._binary, str(entry), "--bundle", *self._common_args()]
        args += [f"--define:{name}={value}" for name, value in _BUNDLE_DEFINES.items()]
        for name in externals:
            args += [f"--external:{name}", f"--external:{name}/*"]
        return args

    async def bundle(self, entry: Path, externals: Sequence[str] = ()) -> str:
        return await self._run(self.bundle_args(entry, externals), cwd=entry.parent)

    async def transform(self, code: str) -> str:
        args = [self._binary, "--loader=js", *self._common_args()]
        return await self._run(args, stdin=code)

    async def _run(self, args: list[str], stdin: str | None = None, cwd: Path | None = None) -> str:
        logger.debug("Running %s", " ".join(args))
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.PIPE if stdin is not None else asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
            )
        except FileNotFoundError:
            raise BundlerError(f"esbuild executable not found: {self._binary}") from None

        stdout, stderr = await process.communicate(stdin.encode("utf-8") if stdin is not None else None)
        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            raise BundlerError(message or f"esbuild exited with status {process.returncode}")
        return stdout.decode("utf-8")
