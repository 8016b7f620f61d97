from fnmatch import fnmatchcase

from resume_analyzer.ports.base import BaseKeyValueStore
from resume_analyzer.ports.result import ServiceResult


class InMemoryKeyValueStore(BaseKeyValueStore):
    """Process-local key-value store. Contents are lost on exit."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> ServiceResult[str]:
        return ServiceResult.ok(self._data.get(key))

    async def set(self, key: str, value: str) -> ServiceResult[bool]:
        if not key:
            return ServiceResult.fail("Key must not be empty")
        self._data[key] = value
        return ServiceResult.ok(True)

    async def delete(self, key: str) -> ServiceResult[bool]:
        return ServiceResult.ok(self._data.pop(key, None) is not None)

    async def flush(self) -> ServiceResult[bool]:
        self._data.clear()
        return ServiceResult.ok(True)

    async def list(self, pattern: str, return_values: bool = False) -> ServiceResult[list[str]]:
        keys = sorted(key for key in self._data if fnmatchcase(key, pattern))
        if return_values:
            return ServiceResult.ok([self._data[key] for key in keys])
        return ServiceResult.ok(keys)
