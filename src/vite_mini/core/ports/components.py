from typing import Protocol

from vite_mini.models import CompiledTemplate, ComponentDescriptor


class ComponentParser(Protocol):
    async def parse(self, source: str, filename: str) -> ComponentDescriptor: ...


class TemplateCompiler(Protocol):
    async def compile_template(self, template: str, file_id: str) -> CompiledTemplate: ...
