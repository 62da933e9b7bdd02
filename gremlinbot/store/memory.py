"""In-process store used by tests and dry runs"""

import asyncio
import copy
from collections.abc import AsyncIterator
from typing import Any

from .base import join_path


def _segments(path: str) -> list[str]:
    return [segment for segment in path.split("/") if segment]


class MemoryStore:
    """Nested-dict store with the same path semantics as the realtime database.

    Writing ``None`` deletes, empty parents disappear, and subscribers of a
    collection are told about every child that did not exist before the write.
    """

    def __init__(self, data: dict[str, Any] | None = None):
        self._root: dict[str, Any] = copy.deepcopy(data) if data else {}
        self._subscribers: dict[str, list[asyncio.Queue[tuple[str, Any]]]] = {}

    def _lookup(self, segments: list[str]) -> Any:
        node: Any = self._root
        for segment in segments:
            if not isinstance(node, dict) or segment not in node:
                return None
            node = node[segment]
        return node

    async def get(self, path: str) -> Any:
        return copy.deepcopy(self._lookup(_segments(path)))

    async def set(self, path: str, value: Any) -> None:
        if value is None:
            await self.delete(path)
            return

        segments = _segments(path)
        if not segments:
            if not isinstance(value, dict):
                raise TypeError("root value must be a mapping")
            self._root = copy.deepcopy(value)
            return

        parent = self._root
        for segment in segments[:-1]:
            child = parent.get(segment)
            if not isinstance(child, dict):
                child = {}
                parent[segment] = child
            parent = child

        key = segments[-1]
        is_new = key not in parent
        parent[key] = copy.deepcopy(value)

        if is_new:
            for queue in self._subscribers.get(join_path(*segments[:-1]), []):
                queue.put_nowait((key, copy.deepcopy(value)))

    async def delete(self, path: str) -> None:
        segments = _segments(path)
        if not segments:
            self._root = {}
            return

        # walk back up so emptied collections vanish too
        while segments:
            parent = self._lookup(segments[:-1])
            if not isinstance(parent, dict):
                return
            parent.pop(segments[-1], None)
            if parent or len(segments) == 1:
                return
            segments = segments[:-1]

    async def subscribe_tail(self, path: str, limit: int = 1) -> AsyncIterator[tuple[str, Any]]:
        queue: asyncio.Queue[tuple[str, Any]] = asyncio.Queue()
        collection = join_path(path)
        self._subscribers.setdefault(collection, []).append(queue)
        try:
            current = self._lookup(_segments(path))
            if isinstance(current, dict):
                for key in sorted(current)[-limit:]:
                    yield key, copy.deepcopy(current[key])
            while True:
                yield await queue.get()
        finally:
            self._subscribers[collection].remove(queue)
