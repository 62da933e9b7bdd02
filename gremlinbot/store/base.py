"""External key-value store capability"""

from collections.abc import AsyncIterator
from typing import Any, Protocol


def join_path(*parts: str) -> str:
    """Join path segments, dropping empty ones and stray slashes"""
    return "/".join(part.strip("/") for part in parts if part and part.strip("/"))


class KeyValueStore(Protocol):
    """Hierarchical JSON store addressed by slash separated paths.

    ``get`` returns ``None`` when nothing is stored at the path and
    ``delete`` of a missing path is not an error.
    """

    async def get(self, path: str) -> Any: ...

    async def set(self, path: str, value: Any) -> None: ...

    async def delete(self, path: str) -> None: ...

    def subscribe_tail(self, path: str, limit: int = 1) -> AsyncIterator[tuple[str, Any]]:
        """Yield ``(key, value)`` for the newest ``limit`` children, then every appended child"""
        ...
