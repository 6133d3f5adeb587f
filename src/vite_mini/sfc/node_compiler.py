from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from pydantic import ValidationError

from vite_mini.errors import ComponentParseError
from vite_mini.models import CompiledTemplate

logger = logging.getLogger(__name__)

_SCRIPT = Path(__file__).parent / "compile_template.mjs"


class NodeTemplateCompiler:
    """Compile templates with ``@vue/compiler-sfc`` in a Node subprocess.

    Implements the ``TemplateCompiler`` protocol. ``project_root`` must contain
    ``node_modules/@vue/compiler-sfc``.
    """

    def __init__(self, project_root: str | Path, node_binary: str = "node", script: Path = _SCRIPT) -> None:
        self._project_root = Path(project_root)
        self._node_binary = node_binary
        self._script = script

    async def compile_template(self, template: str, file_id: str) -> CompiledTemplate:
        payload = json.dumps({"source": template, "id": file_id}).encode("utf-8")
        try:
            process = await asyncio.create_subprocess_exec(
                self._node_binary,
                str(self._script),
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self._project_root,
            )
        except FileNotFoundError:
            raise ComponentParseError(f"node executable not found: {self._node_binary}") from None

        stdout, stderr = await process.communicate(payload)
        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            logger.error("Template compilation failed for %s", file_id)
            raise ComponentParseError(f"{file_id}: {message or 'template compiler failed'}")
        try:
            return CompiledTemplate.model_validate_json(stdout)
        except ValidationError as exc:
            raise ComponentParseError(f"{file_id}: unexpected template compiler output") from exc
