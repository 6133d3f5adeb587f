"""In-memory pre-bundling of bare packages.

Each package is bundled at most once per cache instance. Concurrent first
requests for the same package share one in-flight build.
"""

from __future__ import annotations

import asyncio
import logging

from vite_mini.core.ports.bundler import Bundler
from vite_mini.core.resolver import BareModuleResolver
from vite_mini.core.rewriter import classify_specifier, rewrite_imports
from vite_mini.core.scanner import scan_imports
from vite_mini.errors import BundlerError, PrebundleError
from vite_mini.models import SpecifierKind

logger = logging.getLogger(__name__)


class PrebundleCache:
    def __init__(self, resolver: BareModuleResolver, bundler: Bundler) -> None:
        self._resolver = resolver
        self._bundler = bundler
        self._entries: dict[str, str] = {}
        self._in_flight: dict[str, asyncio.Task[str]] = {}
        self.builds = 0

    def __contains__(self, specifier: object) -> bool:
        return specifier in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, specifier: str) -> str:
        cached = self._entries.get(specifier)
        if cached is not None:
            return cached

        task = self._in_flight.get(specifier)
        if task is None:
            task = asyncio.create_task(self._build(specifier))
            self._in_flight[specifier] = task
            task.add_done_callback(lambda done: self._finish(specifier, done))

        # A waiter going away must not cancel a build other requests rely on.
        return await asyncio.shield(task)

    def _finish(self, specifier: str, task: asyncio.Task[str]) -> None:
        self._in_flight.pop(specifier, None)
        if task.cancelled():
            return
        if task.exception() is None:
            self._entries[specifier] = task.result()

    async def _build(self, specifier: str) -> str:
        resolved = await asyncio.to_thread(self._resolver.resolve, specifier)
        logger.info("Pre-bundling %s from %s", specifier, resolved.entry_path)
        self.builds += 1
        try:
            bundled = await self._bundler.bundle(resolved.entry_path, externals=resolved.dependencies)
        except BundlerError as exc:
            logger.error("Pre-bundling %s failed: %s", specifier, exc)
            raise PrebundleError(resolved.package_name, str(exc)) from exc

        # Dependencies stay external; point them back at the virtual namespace.
        # Relative specifiers are package-internal and have no URL below the project root.
        bare = [occ for occ in scan_imports(bundled) if classify_specifier(occ) is SpecifierKind.BARE]
        return rewrite_imports(bundled, bare, resolved.package_dir, self._resolver.deps_root)
