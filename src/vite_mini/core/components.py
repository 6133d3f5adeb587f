from vite_mini.core.ports.components import ComponentParser, TemplateCompiler
from vite_mini.errors import UnsupportedComponentError
from vite_mini.models import ComponentDescriptor

RENDER_PARAMETERS = ("renderContext", "cache", "props", "setupState", "data", "options")


def select_script(descriptor: ComponentDescriptor, file_id: str) -> str:
    """Return the component logic, refusing to guess how to merge two script blocks."""
    if descriptor.script and descriptor.script_setup:
        raise UnsupportedComponentError(
            f"{file_id}: <script> and <script setup> in the same component are not supported"
        )
    return descriptor.script_setup or descriptor.script or ""


def wrap_render_function(body: str) -> str:
    return f"export function render({', '.join(RENDER_PARAMETERS)}) {{\n{body}\n}}"


async def split_component(
    source: str,
    file_id: str,
    parser: ComponentParser,
    compiler: TemplateCompiler,
) -> str:
    """Synthesize one ES module from a single-file component.

    The compiler preamble (helper imports) comes first, then the script (or
    script setup) block, then an exported ``render`` function when the
    component has a template.
    """
    descriptor = await parser.parse(source, file_id)
    script = select_script(descriptor, file_id)
    if descriptor.template is None:
        return script

    compiled = await compiler.compile_template(descriptor.template, file_id)
    parts = [compiled.preamble] if compiled.preamble else []
    parts += [script, wrap_render_function(compiled.body)]
    return "\n".join(parts)
