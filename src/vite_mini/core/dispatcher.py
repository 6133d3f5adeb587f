import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path, PurePosixPath

from vite_mini.core.components import split_component
from vite_mini.core.ports.bundler import Bundler
from vite_mini.core.ports.components import ComponentParser, TemplateCompiler
from vite_mini.core.prebundle import PrebundleCache
from vite_mini.core.rewriter import resolve_imports
from vite_mini.errors import (
    BareModuleNotFoundError,
    BundlerError,
    ComponentParseError,
    NotFoundError,
    PrebundleError,
    SourceReadError,
)
from vite_mini.models import VIRTUAL_MODULE_PREFIX, DispatchResult, RequestKind, ResponseKind

logger = logging.getLogger(__name__)

_INDEX_PATH = "/index.html"

_EXTENSION_KINDS = {
    ".html": RequestKind.HTML,
    ".htm": RequestKind.HTML,
    ".js": RequestKind.JS,
    ".mjs": RequestKind.JS,
    ".css": RequestKind.CSS,
    ".vue": RequestKind.VUE,
}


def normalize_request_path(request_path: str) -> str:
    path = request_path.split("?", 1)[0].split("#", 1)[0]
    if not path.startswith("/"):
        path = "/" + path
    return _INDEX_PATH if path == "/" else path


def classify_request(request_path: str) -> RequestKind:
    path = normalize_request_path(request_path)
    if path.startswith(VIRTUAL_MODULE_PREFIX):
        return RequestKind.VIRTUAL_MODULE
    return _EXTENSION_KINDS.get(PurePosixPath(path).suffix.lower(), RequestKind.RAW)


class Dispatcher:
    """Route a request path to the matching transform and convert failures to statuses."""

    def __init__(
        self,
        root: str | Path,
        cache: PrebundleCache,
        parser: ComponentParser,
        compiler: TemplateCompiler,
        bundler: Bundler | None = None,
        transform_modules: bool = False,
    ) -> None:
        if transform_modules and bundler is None:
            raise ValueError("transform_modules requires a bundler")
        self._root = Path(root).resolve()
        self._cache = cache
        self._parser = parser
        self._compiler = compiler
        self._bundler = bundler
        self._transform_modules = transform_modules
        self._handlers: dict[RequestKind, Callable[[str], Awaitable[DispatchResult]]] = {
            RequestKind.HTML: self._serve_html,
            RequestKind.JS: self._serve_script,
            RequestKind.CSS: self._serve_css,
            RequestKind.VUE: self._serve_component,
            RequestKind.VIRTUAL_MODULE: self._serve_virtual_module,
            RequestKind.RAW: self._serve_raw,
        }

    @property
    def root(self) -> Path:
        return self._root

    @property
    def cache(self) -> PrebundleCache:
        return self._cache

    async def dispatch(self, request_path: str) -> DispatchResult:
        path = normalize_request_path(request_path)
        try:
            return await self._handlers[classify_request(path)](path)
        except BareModuleNotFoundError as exc:
            return DispatchResult(ResponseKind.NOT_FOUND, 404, str(exc))
        except NotFoundError as exc:
            logger.info("404 %s", path)
            return DispatchResult(ResponseKind.NOT_FOUND, 404, str(exc))
        except PrebundleError as exc:
            return DispatchResult(ResponseKind.ERROR, 502, str(exc))
        except (SourceReadError, ComponentParseError, BundlerError) as exc:
            logger.error("Failed to transform %s: %s", path, exc)
            return DispatchResult(ResponseKind.ERROR, 500, str(exc))

    def locate(self, path: str) -> Path:
        """Map a URL path to a file below the project root."""
        candidate = (self._root / path.lstrip("/")).resolve()
        if not candidate.is_relative_to(self._root) or not candidate.is_file():
            raise NotFoundError(path)
        return candidate

    async def _read(self, path: str) -> tuple[Path, str]:
        file_path = self.locate(path)
        try:
            text = await asyncio.to_thread(file_path.read_text, encoding="utf-8")
        except FileNotFoundError as exc:
            raise NotFoundError(path) from exc
        except (UnicodeDecodeError, OSError) as exc:
            raise SourceReadError(path, str(exc)) from exc
        return file_path, text

    async def _serve_html(self, path: str) -> DispatchResult:
        _, text = await self._read(path)
        return DispatchResult(ResponseKind.HTML, body=text)

    async def _serve_css(self, path: str) -> DispatchResult:
        _, text = await self._read(path)
        return DispatchResult(ResponseKind.CSS, body=text)

    async def _serve_script(self, path: str) -> DispatchResult:
        file_path, text = await self._read(path)
        code = resolve_imports(text, file_path.parent, self._root)
        if self._transform_modules:
            assert self._bundler is not None
            code = await self._bundler.transform(code)
        return DispatchResult(ResponseKind.JS, body=code)

    async def _serve_component(self, path: str) -> DispatchResult:
        file_path, text = await self._read(path)
        module = await split_component(text, path, self._parser, self._compiler)
        return DispatchResult(ResponseKind.JS, body=resolve_imports(module, file_path.parent, self._root))

    async def _serve_virtual_module(self, path: str) -> DispatchResult:
        specifier = path[len(VIRTUAL_MODULE_PREFIX) :]
        return DispatchResult(ResponseKind.JS, body=await self._cache.get(specifier))

    async def _serve_raw(self, path: str) -> DispatchResult:
        return DispatchResult(ResponseKind.RAW, file_path=self.locate(path))
