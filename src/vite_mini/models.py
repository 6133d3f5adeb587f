from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, model_validator

VIRTUAL_MODULE_PREFIX = "/@modules/"


class SpecifierKind(StrEnum):
    ABSOLUTE = "absolute"
    RELATIVE = "relative"
    BARE = "bare"
    DYNAMIC = "dynamic"


class ImportSpecifierOccurrence(BaseModel):
    """One import specifier found in a module, addressed by UTF-8 byte offsets."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int
    text: str
    is_dynamic: bool = False

    @model_validator(mode="after")
    def _check_span(self) -> "ImportSpecifierOccurrence":
        if self.start < 0 or self.start >= self.end:
            raise ValueError(f"Invalid specifier span [{self.start}, {self.end})")
        return self


class ResolvedBareModule(BaseModel):
    model_config = ConfigDict(frozen=True)

    package_name: str
    package_dir: Path
    entry_path: Path
    dependencies: tuple[str, ...] = ()


class ComponentDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    script: str | None = None
    script_setup: str | None = None
    template: str | None = None


class CompiledTemplate(BaseModel):
    """Output of the template compiler.

    ``preamble`` holds module-level statements (helper imports, hoisted nodes)
    and ``body`` the statements placed inside the exported ``render`` function.
    """

    model_config = ConfigDict(frozen=True)

    body: str
    preamble: str = ""


class RequestKind(StrEnum):
    HTML = "html"
    JS = "js"
    CSS = "css"
    VUE = "vue"
    VIRTUAL_MODULE = "virtual_module"
    RAW = "raw"


class ResponseKind(StrEnum):
    HTML = "html"
    JS = "js"
    CSS = "css"
    RAW = "raw"
    NOT_FOUND = "not_found"
    ERROR = "error"


_MEDIA_TYPES = {
    ResponseKind.HTML: "text/html",
    ResponseKind.JS: "application/javascript",
    ResponseKind.CSS: "text/css",
    ResponseKind.NOT_FOUND: "text/plain",
    ResponseKind.ERROR: "text/plain",
}


@dataclass(frozen=True)
class DispatchResult:
    kind: ResponseKind
    status_code: int = 200
    body: str = ""
    file_path: Path | None = None

    @property
    def media_type(self) -> str | None:
        # Raw passthrough lets the transport guess from the file name.
        return _MEDIA_TYPES.get(self.kind)
