from collections.abc import Sequence
from pathlib import Path
from typing import Protocol


class Bundler(Protocol):
    async def bundle(self, entry: Path, externals: Sequence[str] = ()) -> str: ...

    async def transform(self, code: str) -> str: ...
