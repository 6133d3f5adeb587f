from __future__ import annotations

from fastapi import Request

from vite_mini.bundler.esbuild_adapter import EsbuildBundler
from vite_mini.config import DevServerSettings
from vite_mini.core.dispatcher import Dispatcher
from vite_mini.core.prebundle import PrebundleCache
from vite_mini.core.resolver import BareModuleResolver
from vite_mini.sfc.node_compiler import NodeTemplateCompiler
from vite_mini.sfc.tree_sitter_parser import TreeSitterComponentParser


def build_dispatcher(settings: DevServerSettings) -> Dispatcher:
    """Wire a dispatcher, with its own pre-bundle cache, from settings."""
    bundler = EsbuildBundler(binary=settings.esbuild_binary, target=settings.target)
    cache = PrebundleCache(BareModuleResolver(settings.dependency_root), bundler)
    return Dispatcher(
        settings.root,
        cache,
        parser=TreeSitterComponentParser(),
        compiler=NodeTemplateCompiler(settings.root, node_binary=settings.node_binary),
        bundler=bundler,
        transform_modules=settings.transform_modules,
    )


async def get_dispatcher(request: Request) -> Dispatcher:
    dispatcher: Dispatcher = request.app.state.dispatcher
    return dispatcher
