"""Exception hierarchy for the module pipeline.

Every error raised while handling one request derives from ``DevServerError``
(``BareModuleNotFoundError`` additionally is a built-in ``ModuleNotFoundError``)
so the dispatcher can turn it into a status code without catching anything else.
"""

from __future__ import annotations


class DevServerError(Exception):
    """Base class for failures inside the transform pipeline."""


class NotFoundError(DevServerError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Not found: {path}")
        self.path = path


class BareModuleNotFoundError(DevServerError, ModuleNotFoundError):
    """A bare package could not be mapped to an entry file."""

    def __init__(self, package_name: str, reason: str) -> None:
        super().__init__(f"Cannot resolve module '{package_name}': {reason}")
        self.name = package_name
        self.reason = reason

    @property
    def package_name(self) -> str:
        return self.name or ""


class SourceReadError(DevServerError):
    """A file below the root exists but could not be read as UTF-8 text."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Cannot read {path}: {detail}")
        self.path = path
        self.detail = detail


class BundlerError(DevServerError):
    """The external bundler exited with an error."""


class PrebundleError(DevServerError):
    def __init__(self, package_name: str, detail: str) -> None:
        super().__init__(f"Failed to pre-bundle '{package_name}': {detail}")
        self.package_name = package_name
        self.detail = detail


class ComponentParseError(DevServerError):
    """The component parser or template compiler rejected the source."""


class UnsupportedComponentError(ComponentParseError):
    pass
